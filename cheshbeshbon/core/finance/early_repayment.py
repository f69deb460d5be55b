# cheshbeshbon/core/finance/early_repayment.py

from __future__ import annotations

import logging
from collections.abc import Sequence

from cheshbeshbon.schemas.models import EarlyRepaymentResult

from .amortization import AmortizationResult, annuity_payment, monthly_index_rate, monthly_rate

logger = logging.getLogger(__name__)

PAYOFF_EPS = 0.5  # balance treated as repaid (currency units)
DEFAULT_LUMP_SUM_MONTH = 12


def _prepay_track(
    result: AmortizationResult,
    annual_indexation_rate: float,
    extra: float,
    lump: float,
    lump_month: int,
) -> tuple[float, int]:
    """
    Re-run one track with extra payments. Returns (interest_paid, payoff_month).

    Same indexation/grace policy as `amortize`, except the annuity is re-derived
    every post-grace month because extra principal changes the trajectory.
    Bounded by the original term.
    """
    t = result.track
    r = monthly_rate(t.annual_rate)
    idx = monthly_index_rate(annual_indexation_rate) if t.is_indexed else 0.0
    n = t.term_months

    bal = float(t.principal)
    interest_total = 0.0
    month = 0

    while bal > PAYOFF_EPS and month < n:
        month += 1
        if month == lump_month and lump > 0:
            bal = max(0.0, bal - lump)
        if t.is_indexed:
            bal *= 1.0 + idx

        interest = bal * r
        if month <= t.grace_months:
            payment = interest + extra
        else:
            payment = annuity_payment(bal, r, n - month + 1) + extra

        principal_paid = min(max(payment - interest, 0.0), bal)
        interest_total += interest
        bal -= principal_paid

    return interest_total, month


def simulate_early_repayment(
    results: Sequence[AmortizationResult],
    extra_monthly: float = 0.0,
    lump_sum: float = 0.0,
    lump_sum_month: int = DEFAULT_LUMP_SUM_MONTH,
    *,
    annual_indexation_rate: float = 0.0,
) -> EarlyRepaymentResult:
    """
    Interest and time saved by extra recurring and one-time payments.

    Extra amounts are split across tracks pro rata by principal. Each track is
    re-amortized month by month; the lump sum lands at the start of
    `lump_sum_month`. Savings are measured against the unmodified `results`,
    which must have been amortized under the same `annual_indexation_rate`.
    """
    extra_monthly = max(0.0, extra_monthly)
    lump_sum = max(0.0, lump_sum)
    lump_sum_month = max(1, lump_sum_month)

    baseline_interest = sum(r.total_interest for r in results)
    baseline_months = max((r.months for r in results if r.track.principal > 0), default=0)
    total_principal = sum(r.track.principal for r in results)

    new_interest = 0.0
    new_months = 0
    for r in results:
        share = r.track.principal / total_principal if total_principal > 0 else 0.0
        interest, months = _prepay_track(
            r,
            annual_indexation_rate,
            extra=extra_monthly * share,
            lump=lump_sum * share,
            lump_month=lump_sum_month,
        )
        new_interest += interest
        new_months = max(new_months, months)

    logger.debug(
        "early repayment: extra=%.2f lump=%.2f@%d → interest %.2f→%.2f, months %d→%d",
        extra_monthly,
        lump_sum,
        lump_sum_month,
        baseline_interest,
        new_interest,
        baseline_months,
        new_months,
    )
    return EarlyRepaymentResult(
        interest_saved=baseline_interest - new_interest,
        months_saved=baseline_months - new_months,
        baseline_total_interest=baseline_interest,
        new_total_interest=new_interest,
        baseline_payoff_month=baseline_months,
        new_payoff_month=new_months,
    )
