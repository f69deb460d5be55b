# cheshbeshbon/core/finance/rent_vs_buy.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from cheshbeshbon.schemas.models import (
    OwnerYear,
    PurchaseTaxTables,
    RenterYear,
    RentVsBuyInputs,
    RentVsBuyResult,
)

from .amortization import annuity_payment, monthly_rate
from .brackets import levy

logger = logging.getLogger(__name__)

PurchaseTaxFn = Callable[[float], float]


def purchase_tax(price: float, tables: PurchaseTaxTables, sole_residence: bool) -> float:
    """Progressive purchase tax on `price` using the single- or additional-residence tiers."""
    return levy(price, tables.for_buyer(sole_residence))


def purchase_tax_calculator(tables: PurchaseTaxTables, sole_residence: bool) -> PurchaseTaxFn:
    """Bind a tier table into the one-argument tax function the simulator expects."""
    tiers = tables.for_buyer(sole_residence)

    def _tax(price: float) -> float:
        return levy(price, tiers)

    return _tax


def _grow(val: float, rate_pct: float) -> float:
    return val * (1.0 + rate_pct / 100.0)


def _crossover_year(owner: Sequence[OwnerYear], renter: Sequence[RenterYear]) -> int | None:
    """First year from which owning stays ahead through the end of the horizon."""
    crossover: int | None = None
    for o, r in zip(owner, renter, strict=True):
        if o.net_wealth > r.net_wealth:
            if crossover is None:
                crossover = o.year
        else:
            crossover = None
    return crossover


def simulate_rent_vs_buy(inputs: RentVsBuyInputs, purchase_tax_fn: PurchaseTaxFn) -> RentVsBuyResult:
    """
    Run the owner and renter wealth paths side by side for `horizon_years`.

    Owner path, per year:
      - mortgage payments (fixed annuity, stop once the term is over),
        municipal tax, building fees and maintenance on the current value
      - property appreciates, then the balance is reduced by twelve monthly
        principal portions against the fixed annuity
      - net wealth = value - balance; purchase tax only counts toward cumulative spend

    Renter path, per year:
      - monthly surplus = owner monthly outlay - rent
      - positive surplus: compound monthly at return/12 and contribute the surplus
      - otherwise: grow the invested balance one year at the annual return
      - rent then grows by the rent growth rate

    The renter starts with the buyer's equity invested.
    """
    tax = purchase_tax_fn(inputs.purchase_price)
    mortgage_amount = max(0.0, inputs.purchase_price - inputs.equity)
    r = monthly_rate(inputs.mortgage_rate)
    term_months = inputs.mortgage_years * 12
    pmt = annuity_payment(mortgage_amount, r, term_months)

    owner: list[OwnerYear] = []
    renter: list[RenterYear] = []

    property_value = inputs.purchase_price
    balance = mortgage_amount
    spent = inputs.equity + tax
    invested = inputs.equity
    rent = inputs.rent_monthly

    for y in range(1, inputs.horizon_years + 1):
        # --- Owner ---
        in_term = y * 12 <= term_months
        yearly_mortgage = pmt * 12 if in_term else 0.0
        yearly_levies = (inputs.municipal_tax_monthly + inputs.building_fees_monthly) * 12
        yearly_maintenance = property_value * inputs.maintenance_rate / 100.0
        annual_cost = yearly_mortgage + yearly_levies + yearly_maintenance
        spent += annual_cost
        property_value = _grow(property_value, inputs.appreciation_rate)

        if in_term:
            for _ in range(12):
                interest = balance * r
                balance = max(0.0, balance - (pmt - interest))
        else:
            balance = 0.0

        owner.append(
            OwnerYear(
                year=y,
                property_value=property_value,
                mortgage_balance=balance,
                annual_cost=annual_cost,
                cumulative_spent=spent,
                net_wealth=property_value - balance,
            )
        )

        # --- Renter ---
        surplus = annual_cost / 12.0 - rent
        if surplus > 0:
            for _ in range(12):
                invested *= 1.0 + inputs.investment_return_rate / 100.0 / 12.0
                invested += surplus
        else:
            invested = _grow(invested, inputs.investment_return_rate)

        renter.append(RenterYear(year=y, annual_rent=rent * 12, monthly_surplus=surplus, net_wealth=invested))
        rent = _grow(rent, inputs.rent_growth_rate)

    final_owner = owner[-1].net_wealth if owner else inputs.purchase_price - mortgage_amount
    final_renter = renter[-1].net_wealth if renter else inputs.equity

    logger.debug(
        "rent vs buy: %d years, purchase tax %.2f, owner %.2f vs renter %.2f",
        inputs.horizon_years,
        tax,
        final_owner,
        final_renter,
    )
    return RentVsBuyResult(
        owner_timeline=tuple(owner),
        renter_timeline=tuple(renter),
        purchase_tax=tax,
        mortgage_amount=mortgage_amount,
        monthly_mortgage_payment=pmt,
        final_owner_wealth=final_owner,
        final_renter_wealth=final_renter,
        buy_advantage=final_owner - final_renter,
        crossover_year=_crossover_year(owner, renter),
    )
