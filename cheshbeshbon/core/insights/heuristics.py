# cheshbeshbon/core/insights/heuristics.py
"""
Headline insights for each calculator.

These are rules of thumb for display, not part of the engine's numeric
contract. Where a rule needs a counterfactual number (tax saved, cost of
indexation) it re-runs the real calculator instead of scaling ratios.

Each generator returns at most MAX_INSIGHTS items, most important first.
"""

from __future__ import annotations

from collections.abc import Sequence

from cheshbeshbon.core.finance.amortization import AmortizationResult, amortize
from cheshbeshbon.core.finance.brackets import levy
from cheshbeshbon.core.finance.pension import annuitize, simulate_pension
from cheshbeshbon.schemas.models import (
    IncomeTaxConfig,
    Insight,
    PensionAssumptions,
    PensionProjection,
    PensionScenario,
    RentVsBuyResult,
    SalaryBreakdown,
    SalaryInputs,
    TrackAggregate,
)

MAX_INSIGHTS = 3

HIGH_INTEREST_RATIO = 0.5
LONG_TERM_MONTHS = 240
TERM_CUT_MONTHS = 60
MIN_TERM_CUT_SAVING = 10_000.0
PENSION_TOP_UP_PCT = 1.0
PENSION_TOP_UP_CEILING_PCT = 7.0
CLOSE_CALL_PCT = 10.0
EXTRA_PENSION_MONTHLY = 500.0
EARLY_START_AGE = 35
LATE_START_AGE = 50

# ----------------------------
# Mortgage
# ----------------------------


def mortgage_insights(
    results: Sequence[AmortizationResult],
    agg: TrackAggregate,
    annual_indexation_rate: float = 0.0,
) -> list[Insight]:
    out: list[Insight] = []
    if not results or agg.total_principal <= 0:
        return out

    ratio = agg.total_interest / agg.total_principal
    if ratio > HIGH_INTEREST_RATIO:
        out.append(
            Insight(
                kind="warning",
                code="interest_ratio_high",
                message=f"Interest adds {ratio:.0%} on top of the principal; a shorter term or extra payments cut this.",
                value=ratio,
            )
        )
    else:
        out.append(
            Insight(
                kind="positive",
                code="interest_ratio_ok",
                message=f"Interest is {ratio:.0%} of the principal, a reasonable cost of borrowing.",
                value=ratio,
            )
        )

    indexed = [r for r in results if r.track.is_indexed]
    if indexed and annual_indexation_rate > 0:
        unindexed_paid = sum(amortize(r.track, 0.0).total_paid for r in indexed)
        cost = sum(r.total_paid for r in indexed) - unindexed_paid
        if cost > 0:
            out.append(
                Insight(
                    kind="tip",
                    code="indexation_cost",
                    message=f"Indexation at {annual_indexation_rate:.1f}% a year adds about {cost:,.0f} to the indexed tracks.",
                    value=cost,
                )
            )

    longest = max(results, key=lambda r: r.track.term_months)
    if longest.track.term_months > LONG_TERM_MONTHS:
        shorter_term = longest.track.term_months - TERM_CUT_MONTHS
        shorter = longest.track.model_copy(
            update={"term_months": shorter_term, "grace_months": min(longest.track.grace_months, shorter_term - 1)}
        )
        saving = longest.total_paid - amortize(shorter, annual_indexation_rate).total_paid
        if saving > MIN_TERM_CUT_SAVING:
            out.append(
                Insight(
                    kind="tip",
                    code="shorter_term_saving",
                    message=f"Cutting the longest track by {TERM_CUT_MONTHS // 12} years saves about {saving:,.0f}.",
                    value=saving,
                )
            )

    return out[:MAX_INSIGHTS]


# ----------------------------
# Salary
# ----------------------------


def salary_insights(b: SalaryBreakdown, inputs: SalaryInputs, config: IncomeTaxConfig) -> list[Insight]:
    out: list[Insight] = []
    if b.gross <= 0:
        return out

    levies_pct = (b.income_tax + b.national_insurance + b.health) / b.gross * 100.0
    out.append(
        Insight(
            kind="tip",
            code="effective_levy_rate",
            message=f"Income tax, national insurance and health take {levies_pct:.1f}% of gross pay.",
            value=levies_pct,
        )
    )

    if inputs.pension_employee_pct < PENSION_TOP_UP_CEILING_PCT:
        extra = b.gross * PENSION_TOP_UP_PCT / 100.0
        lower_tax = max(0.0, levy(max(0.0, b.taxable_income - extra), config.brackets) - b.credit_amount)
        saving = b.income_tax - lower_tax
        out.append(
            Insight(
                kind="positive",
                code="pension_top_up",
                message=(
                    f"Another {PENSION_TOP_UP_PCT:.0f}% to pension ({extra:,.0f}/month) costs only "
                    f"{extra - saving:,.0f} net after {saving:,.0f} tax saved."
                ),
                value=extra - saving,
            )
        )

    if b.study_fund_employer > 0:
        annual = b.study_fund_employer * 12
        out.append(
            Insight(
                kind="positive",
                code="study_fund_value",
                message=f"The employer study-fund deposit is worth {annual:,.0f} a year.",
                value=annual,
            )
        )

    if inputs.car_benefit_value > 0:
        without_car = max(0.0, levy(max(0.0, b.taxable_income - inputs.car_benefit_value), config.brackets) - b.credit_amount)
        car_tax = b.income_tax - without_car
        out.append(
            Insight(
                kind="warning",
                code="car_benefit_tax",
                message=f"The company car costs {car_tax:,.0f}/month in extra income tax.",
                value=car_tax,
            )
        )

    return out[:MAX_INSIGHTS]


# ----------------------------
# Rent vs buy
# ----------------------------


def rent_vs_buy_insights(result: RentVsBuyResult) -> list[Insight]:
    out: list[Insight] = []

    if result.crossover_year and result.crossover_year > 1:
        out.append(
            Insight(
                kind="tip",
                code="crossover_year",
                message=f"Buying pulls ahead from year {result.crossover_year} and stays ahead.",
                value=float(result.crossover_year),
            )
        )

    if result.purchase_tax > 0:
        out.append(
            Insight(
                kind="warning",
                code="purchase_tax",
                message=f"Purchase tax of {result.purchase_tax:,.0f} is paid up front and never recovered.",
                value=result.purchase_tax,
            )
        )

    top = max(result.final_owner_wealth, result.final_renter_wealth)
    if top > 0:
        pct = abs(result.buy_advantage) / top * 100.0
        if pct < CLOSE_CALL_PCT:
            out.append(
                Insight(
                    kind="tip",
                    code="close_call",
                    message=f"The outcomes differ by only {pct:.0f}%; small changes in returns or appreciation can flip it.",
                    value=pct,
                )
            )

    return out[:MAX_INSIGHTS]


# ----------------------------
# Pension
# ----------------------------


def pension_insights(
    projection: PensionProjection,
    scenario: PensionScenario,
    assumptions: PensionAssumptions | None = None,
) -> list[Insight]:
    a = assumptions or PensionAssumptions()
    out: list[Insight] = []
    res = projection.result

    growth = res.final_balance - res.total_contributions
    if growth > 0 and res.total_contributions > 0:
        out.append(
            Insight(
                kind="positive",
                code="compound_growth",
                message=f"Returns add {growth:,.0f}, {growth / res.total_contributions:.0%} on top of what goes in.",
                value=growth,
            )
        )

    if projection.years_to_retire > 0:
        # flat deposit: contribution rate 100% of a constant amount
        extra_balance = simulate_pension(
            EXTRA_PENSION_MONTHLY, 100.0, 0.0, scenario.annual_return_rate, 0.0, projection.years_to_retire
        ).final_balance
        extra_monthly = annuitize(extra_balance, scenario.annual_return_rate, a.payout_months, a.return_haircut)
        out.append(
            Insight(
                kind="tip",
                code="extra_contribution",
                message=(
                    f"Saving an extra {EXTRA_PENSION_MONTHLY:,.0f}/month adds about {extra_balance:,.0f} by retirement, "
                    f"roughly {extra_monthly:,.0f}/month of pension."
                ),
                value=extra_monthly,
            )
        )

    if scenario.current_age < EARLY_START_AGE:
        out.append(
            Insight(
                kind="positive",
                code="early_start",
                message=f"Starting at {scenario.current_age} leaves {projection.years_to_retire} years of compounding.",
                value=float(projection.years_to_retire),
            )
        )
    elif scenario.current_age >= LATE_START_AGE:
        out.append(
            Insight(
                kind="warning",
                code="late_start",
                message=f"{projection.years_to_retire} years remain; higher contributions or a later retirement matter a lot now.",
                value=float(projection.years_to_retire),
            )
        )

    return out[:MAX_INSIGHTS]
