# cheshbeshbon/schemas/models.py

from __future__ import annotations

import math
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Rates in these models are PERCENT values (5.0 = 5%) unless the field says
# "fraction". Bracket marginal rates and policy thresholds are fractions.


def _clamp_non_negative(v: float) -> float:
    return v if v > 0 else 0.0


# =========================
# Configuration tables
# =========================


class Bracket(BaseModel):
    """One slice of a progressive schedule. Amounts below `upper_limit` (exclusive) are levied at `marginal_rate`."""

    upper_limit: float = Field(math.inf, description="Exclusive upper bound of the slice; null/omitted means +infinity.")
    marginal_rate: float = Field(..., ge=0, le=1, description="Marginal rate applied to the slice as a fraction (0.35 = 35%).")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("upper_limit", mode="before")
    @classmethod
    def _none_is_unbounded(cls, v: float | None) -> float:
        return math.inf if v is None else v


class SocialInsuranceRates(BaseModel):
    """Two-tier national insurance and health rates for one employment mode (fractions)."""

    ni_lower: float = Field(..., ge=0, le=1, description="National insurance rate up to the threshold.")
    ni_upper: float = Field(..., ge=0, le=1, description="National insurance rate between threshold and ceiling.")
    health_lower: float = Field(..., ge=0, le=1, description="Health levy rate up to the threshold.")
    health_upper: float = Field(..., ge=0, le=1, description="Health levy rate between threshold and ceiling.")

    model_config = ConfigDict(frozen=True, extra="ignore")


class IncomeTaxConfig(BaseModel):
    """
    Monthly income tax and social levy configuration for a single tax year.
    Changes yearly; always injected by the caller, never read from module state.
    """

    brackets: tuple[Bracket, ...] = Field(..., description="Monthly progressive income tax brackets, ascending.")
    ni_threshold: float = Field(..., ge=0, description="Monthly income up to which the lower NI/health rates apply.")
    ni_ceiling: float = Field(..., ge=0, description="Monthly income above which no NI/health is levied.")
    employee: SocialInsuranceRates = Field(..., description="NI/health rates for salaried employees.")
    self_employed: SocialInsuranceRates = Field(..., description="NI/health rates for the self-employed.")
    credit_point_value: float = Field(..., ge=0, description="Monthly tax credit per credit point.")
    pension_ceiling: float = Field(..., ge=0, description="Monthly salary ceiling recognized for the pension tax deduction.")
    self_employed_pension_deduction_cap_pct: float = Field(
        11.0, ge=0, description="Max pension percentage deductible for the self-employed."
    )

    model_config = ConfigDict(frozen=True, extra="ignore")


class PurchaseTaxTables(BaseModel):
    """Property purchase-tax tiers, keyed by whether the property is the buyer's sole residence."""

    single_residence: tuple[Bracket, ...] = Field(..., description="Tiers for a buyer's sole residence.")
    additional_residence: tuple[Bracket, ...] = Field(..., description="Tiers for an additional residence.")

    model_config = ConfigDict(frozen=True, extra="ignore")

    def for_buyer(self, sole_residence: bool) -> tuple[Bracket, ...]:
        return self.single_residence if sole_residence else self.additional_residence


class TrackKind(str, Enum):
    PRIME = "prime"
    FIXED = "fixed"
    CPI_FIXED = "cpi_fixed"
    VARIABLE = "variable"
    CPI_VARIABLE = "cpi_variable"


class RegulatoryPolicy(BaseModel):
    """Lender guardrail thresholds (fractions). Configuration, not hard-coded policy."""

    max_variable_share: float = Field(
        2.0 / 3.0, ge=0, le=1, description="Max share of total principal allowed in uncapped variable tracks."
    )
    variable_kinds: tuple[TrackKind, ...] = Field(
        (TrackKind.PRIME,), description="Track kinds counted as uncapped variable for the share check."
    )
    max_payment_to_income: float = Field(
        0.40, ge=0, description="Max first-month total payment as a fraction of net monthly income."
    )

    model_config = ConfigDict(frozen=True, extra="ignore")


class TaxTables(BaseModel):
    """All year-specific tables consumed by the calculators."""

    year: int = Field(..., description="Tax year these tables describe.")
    income_tax: IncomeTaxConfig
    purchase_tax: PurchaseTaxTables
    regulatory: RegulatoryPolicy = Field(default_factory=RegulatoryPolicy)

    model_config = ConfigDict(frozen=True, extra="ignore")

    def summary(self) -> str:
        top = self.income_tax.brackets[-1].marginal_rate if self.income_tax.brackets else 0.0
        return (
            f"[TaxTables] {self.year} | {len(self.income_tax.brackets)} income brackets (top {top:.0%}) | "
            f"purchase tiers: {len(self.purchase_tax.single_residence)} single / "
            f"{len(self.purchase_tax.additional_residence)} additional"
        )

    def __str__(self) -> str:
        return self.summary()


# =========================
# Mortgage inputs
# =========================


class Indexation(str, Enum):
    NONE = "none"
    MONTHLY_LINKED_TO_ANNUAL_RATE = "monthly_linked_to_annual_rate"


class Track(BaseModel):
    """
    One independently amortizing slice of a mortgage.

    Out-of-domain scalars are clamped (negative principal/rate → 0, term < 1 → 1,
    negative grace → 0). A grace period covering the whole term is NOT clamped:
    the amortization engine rejects it.
    """

    principal: float = Field(..., description="Initial balance (currency units).")
    term_months: int = Field(..., description="Number of monthly payments.")
    annual_rate: float = Field(..., description="Nominal annual interest rate in percent (e.g. 4.5).")
    indexation: Indexation = Field(Indexation.NONE, description="Whether the balance is indexed monthly to a reference rate.")
    grace_months: int = Field(0, description="Initial interest-only months.")
    kind: TrackKind = Field(TrackKind.FIXED, description="Product label used by regulatory checks and insights.")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("principal", "annual_rate")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        return _clamp_non_negative(v)

    @field_validator("term_months")
    @classmethod
    def _at_least_one_month(cls, v: int) -> int:
        return max(1, v)

    @field_validator("grace_months")
    @classmethod
    def _grace_non_negative(cls, v: int) -> int:
        return max(0, v)

    @classmethod
    def for_years(
        cls,
        principal: float,
        years: int,
        annual_rate: float,
        kind: TrackKind = TrackKind.FIXED,
        grace_months: int = 0,
    ) -> Track:
        """Build a track from a term in years; CPI kinds are indexed."""
        indexed = kind in (TrackKind.CPI_FIXED, TrackKind.CPI_VARIABLE)
        return cls(
            principal=principal,
            term_months=years * 12,
            annual_rate=annual_rate,
            indexation=Indexation.MONTHLY_LINKED_TO_ANNUAL_RATE if indexed else Indexation.NONE,
            grace_months=grace_months,
            kind=kind,
        )

    @property
    def is_indexed(self) -> bool:
        return self.indexation is Indexation.MONTHLY_LINKED_TO_ANNUAL_RATE


class MortgageScenario(BaseModel):
    """A multi-track mortgage plus the shared macro assumption it is amortized under."""

    tracks: tuple[Track, ...] = Field(..., description="Tracks making up the mortgage.")
    annual_indexation_rate: float = Field(0.0, description="Expected annual index (CPI) change in percent.")
    net_income: float | None = Field(None, description="Household net monthly income for the payment-to-income check.")

    model_config = ConfigDict(frozen=True, extra="ignore")


# =========================
# Mortgage outputs
# =========================


class TrackAggregate(BaseModel):
    """Totals across all tracks of a mortgage."""

    total_principal: float = Field(..., description="Sum of initial track principals.")
    total_paid: float = Field(..., description="Sum of all payments across tracks.")
    total_interest: float = Field(..., description="Sum of all interest across tracks.")
    per_month_payment: list[float] = Field(
        default_factory=list, description="Total payment per month; index i is month i+1. Finished tracks contribute 0."
    )
    first_month_payment: float = Field(0.0, description="Total payment in month 1.")
    max_month_payment: float = Field(0.0, description="Highest total monthly payment over the life of the mortgage.")

    model_config = ConfigDict(frozen=True, extra="ignore")

    def summary(self) -> str:
        return (
            f"[TrackAggregate] principal {self.total_principal:,.0f} | paid {self.total_paid:,.0f} | "
            f"interest {self.total_interest:,.0f} | first {self.first_month_payment:,.0f} | "
            f"max {self.max_month_payment:,.0f} | months {len(self.per_month_payment)}"
        )

    def __str__(self) -> str:
        return self.summary()


class RegulatoryFinding(BaseModel):
    """Result of one guardrail predicate. Always returned; `breached` says whether it fired."""

    code: Literal["variable_share", "payment_to_income"]
    breached: bool
    observed: float = Field(..., description="Observed ratio (fraction).")
    threshold: float = Field(..., description="Configured limit (fraction).")
    message: str

    model_config = ConfigDict(frozen=True, extra="ignore")


class EarlyRepaymentResult(BaseModel):
    """Effect of extra recurring and one-time payments against the unmodified schedules."""

    interest_saved: float
    months_saved: int
    baseline_total_interest: float
    new_total_interest: float
    baseline_payoff_month: int = Field(..., description="Month the last track is paid off without extra payments.")
    new_payoff_month: int = Field(..., description="Month the last track is paid off with extra payments.")

    model_config = ConfigDict(frozen=True, extra="ignore")


# =========================
# Sensitivity
# =========================


class ParameterDelta(BaseModel):
    """An absolute change (percentage points) applied to one scalar parameter."""

    parameter: Literal["rate", "return", "appreciation"]
    delta: float = Field(..., description="Absolute change in percentage points (e.g. +0.5).")

    model_config = ConfigDict(frozen=True, extra="ignore")


class SensitivityResult(BaseModel):
    """Baseline vs perturbed headline value, in the same units."""

    parameter: Literal["rate", "return", "appreciation"]
    delta: float
    baseline_value: float
    perturbed_value: float
    difference: float = Field(..., description="perturbed_value - baseline_value.")
    perturbed_parameter_value: float = Field(..., description="Parameter value after the delta and domain clamp (first track for mortgages).")

    model_config = ConfigDict(frozen=True, extra="ignore")


# =========================
# Rent vs buy
# =========================


class RentVsBuyInputs(BaseModel):
    """Shared macro assumptions and costs for the buy and rent paths. Monthly money values."""

    purchase_price: float = Field(..., description="Property price.")
    equity: float = Field(..., description="Buyer's own capital; the renter invests the same amount instead.")
    mortgage_rate: float = Field(..., description="Mortgage annual rate in percent.")
    mortgage_years: int = Field(25, description="Mortgage term in years.")
    appreciation_rate: float = Field(3.0, description="Annual property appreciation in percent (may be negative).")
    municipal_tax_monthly: float = Field(0.0, description="Monthly municipal property levy.")
    building_fees_monthly: float = Field(0.0, description="Monthly building/committee fees.")
    maintenance_rate: float = Field(1.0, description="Annual maintenance allowance as percent of current property value.")
    sole_residence: bool = Field(True, description="Selects the single-residence purchase-tax table.")
    rent_monthly: float = Field(..., description="Current monthly rent.")
    rent_growth_rate: float = Field(3.0, description="Annual rent increase in percent.")
    investment_return_rate: float = Field(5.0, description="Annual return on the renter's invested savings in percent.")
    horizon_years: int = Field(20, description="Number of simulated years.")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator(
        "purchase_price",
        "equity",
        "mortgage_rate",
        "municipal_tax_monthly",
        "building_fees_monthly",
        "maintenance_rate",
        "rent_monthly",
        "investment_return_rate",
    )
    @classmethod
    def _non_negative(cls, v: float) -> float:
        return _clamp_non_negative(v)

    @field_validator("appreciation_rate", "rent_growth_rate")
    @classmethod
    def _above_total_loss(cls, v: float) -> float:
        return max(v, -99.0)

    @field_validator("mortgage_years")
    @classmethod
    def _at_least_one_year(cls, v: int) -> int:
        return max(1, v)

    @field_validator("horizon_years")
    @classmethod
    def _horizon_non_negative(cls, v: int) -> int:
        return max(0, v)


class OwnerYear(BaseModel):
    year: int
    property_value: float = Field(..., description="Property value at year end, after appreciation.")
    mortgage_balance: float = Field(..., description="Outstanding mortgage at year end.")
    annual_cost: float = Field(..., description="Mortgage payments + municipal tax + fees + maintenance this year.")
    cumulative_spent: float = Field(..., description="Equity + purchase tax + all annual costs so far.")
    net_wealth: float = Field(..., description="property_value - mortgage_balance; never negative once the mortgage is repaid.")

    model_config = ConfigDict(frozen=True, extra="ignore")


class RenterYear(BaseModel):
    year: int
    annual_rent: float = Field(..., description="Rent paid this year.")
    monthly_surplus: float = Field(..., description="Owner monthly outlay minus rent; invested only when positive.")
    net_wealth: float = Field(..., description="Invested balance at year end.")

    model_config = ConfigDict(frozen=True, extra="ignore")


class RentVsBuyResult(BaseModel):
    owner_timeline: tuple[OwnerYear, ...]
    renter_timeline: tuple[RenterYear, ...]
    purchase_tax: float
    mortgage_amount: float
    monthly_mortgage_payment: float
    final_owner_wealth: float
    final_renter_wealth: float
    buy_advantage: float = Field(..., description="final_owner_wealth - final_renter_wealth.")
    crossover_year: int | None = Field(None, description="First year owning pulls ahead for good; None if it never does.")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def buy_wins(self) -> bool:
        return self.buy_advantage > 0

    def summary(self) -> str:
        verdict = "buy" if self.buy_wins else "rent"
        return (
            f"[RentVsBuy] {len(self.owner_timeline)}y | owner {self.final_owner_wealth:,.0f} vs "
            f"renter {self.final_renter_wealth:,.0f} → {verdict} by {abs(self.buy_advantage):,.0f} | "
            f"purchase tax {self.purchase_tax:,.0f}"
        )

    def __str__(self) -> str:
        return self.summary()


# =========================
# Pension
# =========================


class PensionYear(BaseModel):
    year: int
    balance: float = Field(..., description="Accumulated balance at year end.")
    contributions: float = Field(..., description="Cumulative contributions including the initial balance.")
    growth: float = Field(..., description="balance - contributions.")

    model_config = ConfigDict(frozen=True, extra="ignore")


class PensionResult(BaseModel):
    timeline: tuple[PensionYear, ...]
    final_balance: float
    total_contributions: float

    model_config = ConfigDict(frozen=True, extra="ignore")


class PensionAssumptions(BaseModel):
    """Payout-phase assumptions used to annuitize an accumulated balance."""

    payout_months: int = Field(240, ge=1, description="Months over which the balance is paid out.")
    return_haircut: float = Field(0.7, ge=0, le=1, description="Fraction of the accumulation return assumed after retirement.")
    target_replacement: float = Field(0.7, ge=0, description="Target pension as a fraction of the last salary.")

    model_config = ConfigDict(frozen=True, extra="ignore")


class PensionScenario(BaseModel):
    current_age: int
    retirement_age: int = 67
    monthly_salary: float
    employee_pct: float = Field(6.0, description="Employee contribution in percent of salary.")
    employer_pct: float = Field(6.5, description="Employer contribution in percent of salary.")
    current_balance: float = 0.0
    annual_return_rate: float = Field(4.0, description="Annual accumulation return in percent.")
    salary_growth_rate: float = Field(2.0, description="Annual salary growth in percent.")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("monthly_salary", "employee_pct", "employer_pct", "current_balance", "annual_return_rate")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        return _clamp_non_negative(v)

    @property
    def years_to_retire(self) -> int:
        return max(0, self.retirement_age - self.current_age)

    @property
    def contribution_rate_pct(self) -> float:
        return self.employee_pct + self.employer_pct


class PensionProjection(BaseModel):
    result: PensionResult
    years_to_retire: int
    monthly_pension: float
    last_salary: float
    replacement_ratio: float = Field(..., description="monthly_pension / last_salary, in percent.")
    target_pension: float
    gap: float = Field(..., description="target_pension - monthly_pension; negative means ahead of target.")

    model_config = ConfigDict(frozen=True, extra="ignore")


# =========================
# Salary
# =========================


class EmploymentMode(str, Enum):
    EMPLOYEE = "employee"
    SELF_EMPLOYED = "self_employed"


class SalaryInputs(BaseModel):
    """Monthly gross pay and deductions. Percentages are of gross salary."""

    gross: float
    mode: EmploymentMode = EmploymentMode.EMPLOYEE
    pension_employee_pct: float = 6.0
    pension_employer_pct: float = 6.5
    study_fund_employee_pct: float = 0.0
    study_fund_employer_pct: float = 0.0
    credit_points: float = 2.25
    travel_allowance: float = 0.0
    car_benefit_value: float = Field(0.0, description="Taxable monthly value of a company car.")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator(
        "gross",
        "pension_employee_pct",
        "pension_employer_pct",
        "study_fund_employee_pct",
        "study_fund_employer_pct",
        "credit_points",
        "travel_allowance",
        "car_benefit_value",
    )
    @classmethod
    def _non_negative(cls, v: float) -> float:
        return _clamp_non_negative(v)


class SalaryBreakdown(BaseModel):
    gross: float
    taxable_income: float
    pension_tax_deduction: float
    income_tax_before_credits: float
    credit_amount: float
    income_tax: float
    national_insurance: float
    health: float
    pension_employee: float
    pension_employer: float
    study_fund_employee: float
    study_fund_employer: float
    total_deductions: float
    net_salary: float
    employer_cost: float
    real_value: float = Field(..., description="Net salary plus employer benefits (employees only).")
    effective_rate: float = Field(..., description="total_deductions / gross, in percent.")
    marginal_rate: float = Field(..., description="Income tax marginal rate as a fraction.")

    model_config = ConfigDict(frozen=True, extra="ignore")


# =========================
# Insights
# =========================


class Insight(BaseModel):
    """Rule-of-thumb observation for headline display. Heuristic, not part of the core contract."""

    kind: Literal["positive", "warning", "tip"]
    code: str
    message: str
    value: float | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")
