# tests/unit/test_rent_vs_buy.py
import pytest

from cheshbeshbon.core.finance import purchase_tax, purchase_tax_calculator, simulate_rent_vs_buy
from cheshbeshbon.core.finance.rent_vs_buy import _crossover_year
from cheshbeshbon.schemas.models import OwnerYear, RenterYear, RentVsBuyInputs


@pytest.fixture
def tax_fn(tax_tables):
    return purchase_tax_calculator(tax_tables.purchase_tax, sole_residence=True)


def test_timelines_match_horizon(rent_vs_buy_inputs, tax_fn):
    res = simulate_rent_vs_buy(rent_vs_buy_inputs(horizon_years=15), tax_fn)
    assert len(res.owner_timeline) == 15
    assert len(res.renter_timeline) == 15
    assert [o.year for o in res.owner_timeline] == list(range(1, 16))
    assert res.final_owner_wealth == res.owner_timeline[-1].net_wealth
    assert res.buy_advantage == pytest.approx(res.final_owner_wealth - res.final_renter_wealth)


def test_no_purchase_tax_below_first_threshold(tax_tables):
    assert purchase_tax(1_500_000, tax_tables.purchase_tax, sole_residence=True) == 0.0


def test_additional_residence_taxed_more(tax_tables):
    price = 2_500_000
    single = purchase_tax(price, tax_tables.purchase_tax, sole_residence=True)
    additional = purchase_tax(price, tax_tables.purchase_tax, sole_residence=False)
    assert single == pytest.approx((2_276_360 - 1_919_155) * 0.035 + (2_500_000 - 2_276_360) * 0.05)
    assert additional == pytest.approx(price * 0.08)
    assert additional > single


def test_owner_net_wealth_is_value_less_balance(rent_vs_buy_inputs, tax_tables):
    inputs = rent_vs_buy_inputs(purchase_price=2_500_000)
    res = simulate_rent_vs_buy(inputs, purchase_tax_calculator(tax_tables.purchase_tax, True))
    y1 = res.owner_timeline[0]
    assert res.purchase_tax > 0
    assert y1.property_value == pytest.approx(2_500_000 * 1.03)
    assert y1.net_wealth == pytest.approx(y1.property_value - y1.mortgage_balance)
    assert y1.cumulative_spent == pytest.approx(inputs.equity + res.purchase_tax + y1.annual_cost)


def test_mortgage_ends_with_its_term(rent_vs_buy_inputs, tax_fn):
    res = simulate_rent_vs_buy(rent_vs_buy_inputs(mortgage_years=5, horizon_years=8), tax_fn)
    assert res.owner_timeline[4].mortgage_balance == pytest.approx(0.0, abs=1.0)
    assert res.owner_timeline[5].mortgage_balance == 0.0
    # after the term only levies and maintenance remain
    assert res.owner_timeline[5].annual_cost < res.owner_timeline[4].annual_cost / 2


def test_renter_without_surplus_grows_equity_annually(rent_vs_buy_inputs, tax_fn):
    inputs = rent_vs_buy_inputs(rent_monthly=50_000, horizon_years=2)
    res = simulate_rent_vs_buy(inputs, tax_fn)
    assert res.renter_timeline[0].monthly_surplus < 0
    assert res.renter_timeline[0].net_wealth == pytest.approx(inputs.equity * 1.05)
    assert res.renter_timeline[1].annual_rent == pytest.approx(50_000 * 12 * 1.03)


def test_renter_invests_positive_surplus(rent_vs_buy_inputs, tax_fn):
    inputs = rent_vs_buy_inputs(rent_monthly=1_000, horizon_years=1)
    res = simulate_rent_vs_buy(inputs, tax_fn)
    assert res.renter_timeline[0].monthly_surplus > 0
    assert res.renter_timeline[0].net_wealth > inputs.equity * 1.05


def test_zero_horizon(rent_vs_buy_inputs, tax_fn):
    inputs = rent_vs_buy_inputs(horizon_years=0)
    res = simulate_rent_vs_buy(inputs, tax_fn)
    assert res.owner_timeline == () and res.renter_timeline == ()
    assert res.final_owner_wealth == pytest.approx(inputs.equity)
    assert res.final_renter_wealth == inputs.equity
    assert res.crossover_year is None


def test_crossover_year_requires_staying_ahead():
    def years(owner_w, renter_w):
        owner = [
            OwnerYear(year=i, property_value=0, mortgage_balance=0, annual_cost=0, cumulative_spent=0, net_wealth=w)
            for i, w in enumerate(owner_w, 1)
        ]
        renter = [RenterYear(year=i, annual_rent=0, monthly_surplus=0, net_wealth=w) for i, w in enumerate(renter_w, 1)]
        return owner, renter

    assert _crossover_year(*years([1, 5, 1, 6, 7], [2, 2, 2, 2, 2])) == 4
    assert _crossover_year(*years([1, 1], [2, 2])) is None
    assert _crossover_year(*years([3, 4], [2, 2])) == 1


def test_repeat_runs_are_identical(rent_vs_buy_inputs, tax_fn):
    inputs = rent_vs_buy_inputs()
    assert simulate_rent_vs_buy(inputs, tax_fn) == simulate_rent_vs_buy(inputs, tax_fn)


def test_owner_wealth_non_negative_after_payoff_despite_tax():
    inputs = RentVsBuyInputs(
        purchase_price=1_000_000,
        equity=1_000_000,
        mortgage_rate=4.0,
        mortgage_years=1,
        appreciation_rate=-95,
        rent_monthly=3_000,
        horizon_years=3,
    )
    res = simulate_rent_vs_buy(inputs, lambda price: price * 0.08)
    assert res.purchase_tax == pytest.approx(80_000)
    for o in res.owner_timeline:
        assert o.mortgage_balance == 0.0
        assert o.net_wealth == pytest.approx(o.property_value)
        assert o.net_wealth >= 0
    assert res.owner_timeline[0].cumulative_spent == pytest.approx(1_080_000 + res.owner_timeline[0].annual_cost)
