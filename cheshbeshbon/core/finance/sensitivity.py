# cheshbeshbon/core/finance/sensitivity.py
"""
Re-run a scenario with one scalar parameter shifted and report the change.

Supported pairs
---------------
- MortgageScenario  + "rate"          → total paid across tracks
- RentVsBuyInputs   + "appreciation"  → buy advantage (owner - renter wealth)
- RentVsBuyInputs   + "return"        → buy advantage
- RentVsBuyInputs   + "rate"          → buy advantage
- PensionScenario   + "return"        → monthly pension after annuitization

Deltas are absolute percentage points. Rates and returns are clamped at 0;
appreciation at -99. Baseline and perturbed runs are built from separate
model copies and share nothing.
"""

from __future__ import annotations

from cheshbeshbon.schemas.models import (
    MortgageScenario,
    ParameterDelta,
    PensionAssumptions,
    PensionScenario,
    PurchaseTaxTables,
    RentVsBuyInputs,
    SensitivityResult,
)

from .aggregate import aggregate
from .amortization import amortize
from .errors import UnsupportedParameterError
from .pension import project_pension
from .rent_vs_buy import PurchaseTaxFn, purchase_tax_calculator, simulate_rent_vs_buy

Scenario = MortgageScenario | RentVsBuyInputs | PensionScenario

_MIN_APPRECIATION_PCT = -99.0


def _result(pd: ParameterDelta, baseline: float, perturbed: float, param_value: float) -> SensitivityResult:
    return SensitivityResult(
        parameter=pd.parameter,
        delta=pd.delta,
        baseline_value=baseline,
        perturbed_value=perturbed,
        difference=perturbed - baseline,
        perturbed_parameter_value=param_value,
    )


def mortgage_total_paid(scenario: MortgageScenario) -> float:
    return aggregate([amortize(t, scenario.annual_indexation_rate) for t in scenario.tracks]).total_paid


def _mortgage(scenario: MortgageScenario, pd: ParameterDelta) -> SensitivityResult:
    if pd.parameter != "rate":
        raise UnsupportedParameterError(f"mortgage scenarios support 'rate', not '{pd.parameter}'")

    shifted = tuple(t.model_copy(update={"annual_rate": max(0.0, t.annual_rate + pd.delta)}) for t in scenario.tracks)
    perturbed = scenario.model_copy(update={"tracks": shifted})
    first_rate = shifted[0].annual_rate if shifted else 0.0
    return _result(pd, mortgage_total_paid(scenario), mortgage_total_paid(perturbed), first_rate)


def _rent_vs_buy(inputs: RentVsBuyInputs, pd: ParameterDelta, purchase_tax_fn: PurchaseTaxFn) -> SensitivityResult:
    if pd.parameter == "appreciation":
        field, value = "appreciation_rate", max(_MIN_APPRECIATION_PCT, inputs.appreciation_rate + pd.delta)
    elif pd.parameter == "return":
        field, value = "investment_return_rate", max(0.0, inputs.investment_return_rate + pd.delta)
    else:
        field, value = "mortgage_rate", max(0.0, inputs.mortgage_rate + pd.delta)

    perturbed = inputs.model_copy(update={field: value})
    base = simulate_rent_vs_buy(inputs, purchase_tax_fn).buy_advantage
    new = simulate_rent_vs_buy(perturbed, purchase_tax_fn).buy_advantage
    return _result(pd, base, new, value)


def _pension(scenario: PensionScenario, pd: ParameterDelta, assumptions: PensionAssumptions | None) -> SensitivityResult:
    if pd.parameter != "return":
        raise UnsupportedParameterError(f"pension scenarios support 'return', not '{pd.parameter}'")

    value = max(0.0, scenario.annual_return_rate + pd.delta)
    perturbed = scenario.model_copy(update={"annual_return_rate": value})
    base = project_pension(scenario, assumptions).monthly_pension
    new = project_pension(perturbed, assumptions).monthly_pension
    return _result(pd, base, new, value)


def re_evaluate(
    scenario: Scenario,
    parameter_delta: ParameterDelta,
    *,
    purchase_tax_tables: PurchaseTaxTables | None = None,
    purchase_tax_fn: PurchaseTaxFn | None = None,
    pension_assumptions: PensionAssumptions | None = None,
) -> SensitivityResult:
    """
    Compare a scenario's headline value with the same scenario under `parameter_delta`.

    Rent-vs-buy needs a purchase tax: pass either `purchase_tax_fn` or the
    `purchase_tax_tables` to build one from.
    """
    if isinstance(scenario, MortgageScenario):
        return _mortgage(scenario, parameter_delta)

    if isinstance(scenario, RentVsBuyInputs):
        if purchase_tax_fn is None:
            if purchase_tax_tables is None:
                raise UnsupportedParameterError("rent-vs-buy sensitivity needs purchase_tax_fn or purchase_tax_tables")
            purchase_tax_fn = purchase_tax_calculator(purchase_tax_tables, scenario.sole_residence)
        return _rent_vs_buy(scenario, parameter_delta, purchase_tax_fn)

    if isinstance(scenario, PensionScenario):
        return _pension(scenario, parameter_delta, pension_assumptions)

    raise UnsupportedParameterError(f"no sensitivity model for {type(scenario).__name__}")
