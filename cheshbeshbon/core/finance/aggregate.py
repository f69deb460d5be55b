# cheshbeshbon/core/finance/aggregate.py

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from cheshbeshbon.schemas.models import RegulatoryFinding, RegulatoryPolicy, TrackAggregate

from .amortization import AmortizationResult


def aggregate(results: Sequence[AmortizationResult]) -> TrackAggregate:
    """
    Combine independent track schedules into mortgage-level totals.

    `per_month_payment[i]` sums month i+1 across every track still running;
    tracks shorter than the longest one contribute 0 once they finish.
    """
    if not results:
        return TrackAggregate(total_principal=0.0, total_paid=0.0, total_interest=0.0)

    horizon = max(r.months for r in results)
    monthly = np.zeros(horizon, dtype=np.float64)
    for r in results:
        payments = np.fromiter((e.payment for e in r.schedule), dtype=np.float64, count=r.months)
        monthly[: r.months] += payments

    per_month = [float(x) for x in monthly]
    return TrackAggregate(
        total_principal=sum(r.track.principal for r in results),
        total_paid=sum(r.total_paid for r in results),
        total_interest=sum(r.total_interest for r in results),
        per_month_payment=per_month,
        first_month_payment=per_month[0] if per_month else 0.0,
        max_month_payment=max(per_month) if per_month else 0.0,
    )


# =========================
# Regulatory guardrails
# =========================


def check_variable_share(results: Sequence[AmortizationResult], policy: RegulatoryPolicy) -> RegulatoryFinding:
    """Share of principal in uncapped variable tracks vs `policy.max_variable_share`."""
    total = sum(r.track.principal for r in results)
    variable = sum(r.track.principal for r in results if r.track.kind in policy.variable_kinds)
    share = variable / total if total > 0 else 0.0
    breached = share > policy.max_variable_share
    return RegulatoryFinding(
        code="variable_share",
        breached=breached,
        observed=share,
        threshold=policy.max_variable_share,
        message=(
            f"Variable tracks are {share:.0%} of the mortgage; the limit is {policy.max_variable_share:.0%}"
            if breached
            else f"Variable-track share {share:.0%} is within the {policy.max_variable_share:.0%} limit"
        ),
    )


def check_payment_to_income(agg: TrackAggregate, net_income: float | None, policy: RegulatoryPolicy) -> RegulatoryFinding:
    """First-month total payment as a fraction of net monthly income vs `policy.max_payment_to_income`."""
    pti = agg.first_month_payment / net_income if net_income and net_income > 0 else 0.0
    breached = pti > policy.max_payment_to_income
    return RegulatoryFinding(
        code="payment_to_income",
        breached=breached,
        observed=pti,
        threshold=policy.max_payment_to_income,
        message=(
            f"First monthly payment is {pti:.0%} of net income; the limit is {policy.max_payment_to_income:.0%}"
            if breached
            else f"Payment-to-income {pti:.0%} is within the {policy.max_payment_to_income:.0%} limit"
        ),
    )


def regulatory_findings(
    results: Sequence[AmortizationResult],
    policy: RegulatoryPolicy,
    *,
    net_income: float | None = None,
) -> list[RegulatoryFinding]:
    """Breached guardrails only, in a stable order (share, then payment-to-income)."""
    findings = [check_variable_share(results, policy)]
    if net_income is not None:
        findings.append(check_payment_to_income(aggregate(results), net_income, policy))
    return [f for f in findings if f.breached]
