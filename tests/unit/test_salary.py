# tests/unit/test_salary.py
import pytest

from cheshbeshbon.core.finance import compute_salary
from cheshbeshbon.core.finance.salary import pension_tax_deduction, social_levies
from cheshbeshbon.schemas.models import EmploymentMode


def test_employee_breakdown_2026(salary_inputs, income_tax_config):
    b = compute_salary(salary_inputs(15_000), income_tax_config)

    # NI/health: lower rate to 7,522, upper rate above it
    assert b.national_insurance == pytest.approx(7_522 * 0.004 + 7_478 * 0.07)
    assert b.health == pytest.approx(7_522 * 0.031 + 7_478 * 0.05)

    # pension deduction on salary up to the 12,420 ceiling
    assert b.pension_tax_deduction == pytest.approx(12_420 * 0.06)
    assert b.taxable_income == pytest.approx(15_000 - 745.2)
    assert b.income_tax_before_credits == pytest.approx(701 + 427 + (14_254.8 - 10_060) * 0.20)
    assert b.credit_amount == pytest.approx(2.25 * 242)
    assert b.income_tax == pytest.approx(b.income_tax_before_credits - b.credit_amount)
    assert b.marginal_rate == 0.20

    assert b.pension_employee == pytest.approx(900)
    assert b.pension_employer == pytest.approx(975)
    assert b.net_salary == pytest.approx(15_000 - b.total_deductions)
    assert b.employer_cost == pytest.approx(15_975)
    assert b.real_value == pytest.approx(b.net_salary + 975)
    assert b.effective_rate == pytest.approx(b.total_deductions / 15_000 * 100)


def test_social_levies_capped_at_ceiling(income_tax_config):
    at_ceiling = social_levies(48_281, EmploymentMode.EMPLOYEE, income_tax_config)
    above = social_levies(120_000, EmploymentMode.EMPLOYEE, income_tax_config)
    assert above == pytest.approx(at_ceiling)


def test_zero_income(salary_inputs, income_tax_config):
    b = compute_salary(salary_inputs(0), income_tax_config)
    assert b.income_tax == 0.0
    assert b.national_insurance == 0.0
    assert b.net_salary == 0.0
    assert b.effective_rate == 0.0


def test_credits_never_make_tax_negative(salary_inputs, income_tax_config):
    b = compute_salary(salary_inputs(5_000, credit_points=10), income_tax_config)
    assert b.income_tax == 0.0


def test_self_employed_has_no_employer_side(salary_inputs, income_tax_config):
    inputs = salary_inputs(20_000, mode=EmploymentMode.SELF_EMPLOYED, pension_employee_pct=16, study_fund_employer_pct=7.5)
    b = compute_salary(inputs, income_tax_config)
    assert b.pension_employer == 0.0
    assert b.study_fund_employer == 0.0
    assert b.employer_cost == 20_000
    assert b.real_value == b.net_salary
    assert pension_tax_deduction(inputs, income_tax_config) == pytest.approx(12_420 * 0.11)


def test_car_benefit_is_taxed_but_not_paid(salary_inputs, income_tax_config):
    plain = compute_salary(salary_inputs(20_000), income_tax_config)
    car = compute_salary(salary_inputs(20_000, car_benefit_value=3_000), income_tax_config)
    assert car.taxable_income == pytest.approx(plain.taxable_income + 3_000)
    assert car.net_salary < plain.net_salary


def test_travel_allowance_is_paid_untaxed(salary_inputs, income_tax_config):
    plain = compute_salary(salary_inputs(20_000), income_tax_config)
    travel = compute_salary(salary_inputs(20_000, travel_allowance=400), income_tax_config)
    assert travel.income_tax == plain.income_tax
    assert travel.net_salary == pytest.approx(plain.net_salary + 400)
