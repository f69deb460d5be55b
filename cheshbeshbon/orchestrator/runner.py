# cheshbeshbon/orchestrator/runner.py
"""
Calculator runner (deterministic pipeline seam)

Purpose
-------
Execute one calculator end to end for a validated payload:
  - mortgage:    amortize tracks -> aggregate -> guardrails -> early repayment -> rate sensitivity -> insights
  - salary:      decompose gross pay -> insights
  - rent_vs_buy: purchase tax -> wealth paths -> appreciation sensitivity -> insights
  - pension:     accumulate -> annuitize -> return sensitivity -> insights

Public API
----------
run_calculator(payload, tables) -> RunResult
  RunResult.summary_lines() for console output, RunResult.to_payload() for JSON.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from cheshbeshbon.core.finance import (
    aggregate,
    amortize,
    compute_salary,
    project_pension,
    purchase_tax_calculator,
    re_evaluate,
    regulatory_findings,
    simulate_early_repayment,
    simulate_rent_vs_buy,
)
from cheshbeshbon.core.finance.amortization import AmortizationResult
from cheshbeshbon.core.insights import mortgage_insights, pension_insights, rent_vs_buy_insights, salary_insights
from cheshbeshbon.inputs.inputs import (
    CalculatorPayload,
    MortgagePayload,
    PensionPayload,
    RentVsBuyPayload,
    SalaryPayload,
)
from cheshbeshbon.schemas.models import (
    EarlyRepaymentResult,
    Insight,
    ParameterDelta,
    PensionProjection,
    RegulatoryFinding,
    RentVsBuyResult,
    SalaryBreakdown,
    SensitivityResult,
    TaxTables,
    TrackAggregate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    """Bundle of artifacts for one calculator run. Only the fields of that calculator are set."""

    calculator: str
    tracks: tuple[AmortizationResult, ...] = ()
    mortgage: TrackAggregate | None = None
    findings: tuple[RegulatoryFinding, ...] = ()
    early_repayment: EarlyRepaymentResult | None = None
    salary: SalaryBreakdown | None = None
    rent_vs_buy: RentVsBuyResult | None = None
    pension: PensionProjection | None = None
    sensitivity: SensitivityResult | None = None
    insights: tuple[Insight, ...] = field(default_factory=tuple)

    def summary_lines(self) -> list[str]:
        lines: list[str] = []
        if self.mortgage is not None:
            lines.append(self.mortgage.summary())
            for i, t in enumerate(self.tracks, 1):
                lines.append(
                    f"  track {i} ({t.track.kind.value}): {t.track.principal:,.0f} over {t.months}m | "
                    f"first {t.first_payment:,.2f} last {t.last_payment:,.2f} | interest {t.total_interest:,.0f}"
                )
        if self.early_repayment is not None:
            er = self.early_repayment
            lines.append(f"Early repayment: interest saved {er.interest_saved:,.0f}, months saved {er.months_saved}")
        if self.salary is not None:
            s = self.salary
            lines.append(
                f"Salary: gross {s.gross:,.0f} → net {s.net_salary:,.0f} | tax {s.income_tax:,.0f} "
                f"NI {s.national_insurance:,.0f} health {s.health:,.0f} | marginal {s.marginal_rate:.0%}"
            )
        if self.rent_vs_buy is not None:
            lines.append(self.rent_vs_buy.summary())
        if self.pension is not None:
            p = self.pension
            lines.append(
                f"Pension: balance {p.result.final_balance:,.0f} after {p.years_to_retire}y → "
                f"{p.monthly_pension:,.0f}/month ({p.replacement_ratio:.0f}% of last salary)"
            )
        if self.sensitivity is not None:
            sv = self.sensitivity
            lines.append(
                f"Sensitivity ({sv.parameter} {sv.delta:+.2f}): {sv.baseline_value:,.0f} → "
                f"{sv.perturbed_value:,.0f} ({sv.difference:+,.0f})"
            )
        lines.extend(f"! {f.message}" for f in self.findings)
        lines.extend(f"* {i.message}" for i in self.insights)
        return lines

    def to_payload(self) -> dict[str, Any]:
        out: dict[str, Any] = {"calculator": self.calculator}
        if self.tracks:
            out["tracks"] = [
                {
                    "track": t.track.model_dump(mode="json"),
                    "total_paid": t.total_paid,
                    "total_interest": t.total_interest,
                    "first_payment": t.first_payment,
                    "last_payment": t.last_payment,
                }
                for t in self.tracks
            ]
        for name in ("mortgage", "early_repayment", "salary", "rent_vs_buy", "pension", "sensitivity"):
            value = getattr(self, name)
            if value is not None:
                out[name] = value.model_dump(mode="json")
        out["findings"] = [f.model_dump(mode="json") for f in self.findings]
        out["insights"] = [i.model_dump(mode="json") for i in self.insights]
        return out


def _run_mortgage(p: MortgagePayload, tables: TaxTables) -> RunResult:
    sc = p.scenario
    results = tuple(amortize(t, sc.annual_indexation_rate) for t in sc.tracks)
    agg = aggregate(results)
    findings = regulatory_findings(results, tables.regulatory, net_income=sc.net_income)
    early = None
    if p.extra_monthly > 0 or p.lump_sum > 0:
        early = simulate_early_repayment(
            results,
            p.extra_monthly,
            p.lump_sum,
            p.lump_sum_month,
            annual_indexation_rate=sc.annual_indexation_rate,
        )
    sens = re_evaluate(sc, ParameterDelta(parameter="rate", delta=p.rate_delta))
    return RunResult(
        calculator="mortgage",
        tracks=results,
        mortgage=agg,
        findings=tuple(findings),
        early_repayment=early,
        sensitivity=sens,
        insights=tuple(mortgage_insights(results, agg, sc.annual_indexation_rate)),
    )


def _run_salary(p: SalaryPayload, tables: TaxTables) -> RunResult:
    breakdown = compute_salary(p.inputs, tables.income_tax)
    return RunResult(
        calculator="salary",
        salary=breakdown,
        insights=tuple(salary_insights(breakdown, p.inputs, tables.income_tax)),
    )


def _run_rent_vs_buy(p: RentVsBuyPayload, tables: TaxTables) -> RunResult:
    tax_fn = purchase_tax_calculator(tables.purchase_tax, p.inputs.sole_residence)
    result = simulate_rent_vs_buy(p.inputs, tax_fn)
    sens = re_evaluate(p.inputs, ParameterDelta(parameter="appreciation", delta=p.appreciation_delta), purchase_tax_fn=tax_fn)
    return RunResult(
        calculator="rent_vs_buy",
        rent_vs_buy=result,
        sensitivity=sens,
        insights=tuple(rent_vs_buy_insights(result)),
    )


def _run_pension(p: PensionPayload, tables: TaxTables) -> RunResult:
    projection = project_pension(p.scenario, p.assumptions)
    sens = re_evaluate(
        p.scenario,
        ParameterDelta(parameter="return", delta=p.return_delta),
        pension_assumptions=p.assumptions,
    )
    return RunResult(
        calculator="pension",
        pension=projection,
        sensitivity=sens,
        insights=tuple(pension_insights(projection, p.scenario, p.assumptions)),
    )


def run_calculator(payload: CalculatorPayload, tables: TaxTables) -> RunResult:
    """
    Execute the pipeline for one calculator payload.

    Args:
        payload: Validated calculator payload (see cheshbeshbon.inputs.inputs).
        tables: Tax tables for the year being modeled.

    Returns:
        RunResult with only that calculator's artifacts populated.
    """
    logger.debug("running %s calculator with %d tables", payload.calculator, tables.year)
    if isinstance(payload, MortgagePayload):
        return _run_mortgage(payload, tables)
    if isinstance(payload, SalaryPayload):
        return _run_salary(payload, tables)
    if isinstance(payload, RentVsBuyPayload):
        return _run_rent_vs_buy(payload, tables)
    return _run_pension(payload, tables)
