# cheshbeshbon/core/finance/pension.py

from __future__ import annotations

import logging

from cheshbeshbon.schemas.models import (
    PensionAssumptions,
    PensionProjection,
    PensionResult,
    PensionScenario,
    PensionYear,
)

from .amortization import annuity_payment

logger = logging.getLogger(__name__)


def _monthly_compound_rate(annual_rate_pct: float) -> float:
    """Monthly rate that compounds to `annual_rate_pct` over a year."""
    return (1.0 + max(annual_rate_pct, 0.0) / 100.0) ** (1.0 / 12.0) - 1.0


def simulate_pension(
    starting_salary: float,
    contribution_rate_pct: float,
    initial_balance: float,
    annual_return_rate: float,
    annual_salary_growth_rate: float,
    years: int,
) -> PensionResult:
    """
    Accumulate a pension balance year by year.

    Each year the monthly contribution is fixed from that year's salary (no
    intra-year raises), twelve steps of `balance = balance * (1 + r) + contribution`
    run, then the salary grows for the next year. Cumulative contributions
    include the starting balance.
    """
    r = _monthly_compound_rate(annual_return_rate)
    balance = max(0.0, initial_balance)
    salary = max(0.0, starting_salary)
    contributed = balance
    rate = max(0.0, contribution_rate_pct) / 100.0

    timeline: list[PensionYear] = []
    for y in range(1, max(0, years) + 1):
        contribution = salary * rate
        for _ in range(12):
            balance = balance * (1.0 + r) + contribution
        contributed += contribution * 12
        salary = max(0.0, salary * (1.0 + annual_salary_growth_rate / 100.0))
        timeline.append(PensionYear(year=y, balance=balance, contributions=contributed, growth=balance - contributed))

    return PensionResult(timeline=tuple(timeline), final_balance=balance, total_contributions=contributed)


def annuitize(
    balance: float,
    annual_return_rate: float,
    payout_months: int = 240,
    return_haircut: float = 0.7,
) -> float:
    """Monthly pension from `balance`, paid over `payout_months` at a reduced post-retirement return."""
    r = _monthly_compound_rate(annual_return_rate * return_haircut)
    return annuity_payment(balance, r, payout_months)


def project_pension(scenario: PensionScenario, assumptions: PensionAssumptions | None = None) -> PensionProjection:
    """Accumulate to retirement, annuitize, and compare with a replacement-rate target."""
    a = assumptions or PensionAssumptions()
    years = scenario.years_to_retire

    result = simulate_pension(
        scenario.monthly_salary,
        scenario.contribution_rate_pct,
        scenario.current_balance,
        scenario.annual_return_rate,
        scenario.salary_growth_rate,
        years,
    )
    monthly = annuitize(result.final_balance, scenario.annual_return_rate, a.payout_months, a.return_haircut)
    last_salary = scenario.monthly_salary * (1.0 + scenario.salary_growth_rate / 100.0) ** years
    replacement = monthly / last_salary * 100.0 if last_salary > 0 else 0.0
    target = last_salary * a.target_replacement

    logger.debug("pension: %d years → balance %.2f, monthly %.2f (%.1f%%)", years, result.final_balance, monthly, replacement)
    return PensionProjection(
        result=result,
        years_to_retire=years,
        monthly_pension=monthly,
        last_salary=last_salary,
        replacement_ratio=replacement,
        target_pension=target,
        gap=target - monthly,
    )
