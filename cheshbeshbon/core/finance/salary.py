# cheshbeshbon/core/finance/salary.py

from __future__ import annotations

from cheshbeshbon.schemas.models import EmploymentMode, IncomeTaxConfig, SalaryBreakdown, SalaryInputs

from .brackets import levy, marginal_rate, two_tier_brackets


def pension_tax_deduction(inputs: SalaryInputs, config: IncomeTaxConfig) -> float:
    """Employee pension contribution recognized against taxable income (salary capped at the pension ceiling)."""
    recognized = min(inputs.gross, config.pension_ceiling)
    pct = inputs.pension_employee_pct
    if inputs.mode is EmploymentMode.SELF_EMPLOYED:
        pct = min(pct, config.self_employed_pension_deduction_cap_pct)
    return recognized * pct / 100.0


def social_levies(gross: float, mode: EmploymentMode, config: IncomeTaxConfig) -> tuple[float, float]:
    """(national_insurance, health) on monthly gross, two-tier up to the ceiling."""
    rates = config.employee if mode is EmploymentMode.EMPLOYEE else config.self_employed
    ni = levy(gross, two_tier_brackets(config.ni_threshold, config.ni_ceiling, rates.ni_lower, rates.ni_upper))
    health = levy(gross, two_tier_brackets(config.ni_threshold, config.ni_ceiling, rates.health_lower, rates.health_upper))
    return ni, health


def compute_salary(inputs: SalaryInputs, config: IncomeTaxConfig) -> SalaryBreakdown:
    """
    Decompose a monthly gross salary into taxes, social levies, fund contributions and net pay.

    Employer-side contributions only apply to employees. The company-car
    benefit is taxable but not paid out; the travel allowance is paid out but
    not taxed here.
    """
    employee = inputs.mode is EmploymentMode.EMPLOYEE
    gross = inputs.gross

    pension_employee = gross * inputs.pension_employee_pct / 100.0
    pension_employer = gross * inputs.pension_employer_pct / 100.0 if employee else 0.0
    study_employee = gross * inputs.study_fund_employee_pct / 100.0
    study_employer = gross * inputs.study_fund_employer_pct / 100.0 if employee else 0.0

    deduction = pension_tax_deduction(inputs, config)
    taxable = max(0.0, gross + inputs.car_benefit_value - deduction)

    tax_before = levy(taxable, config.brackets)
    credits = inputs.credit_points * config.credit_point_value
    income_tax = max(0.0, tax_before - credits)

    ni, health = social_levies(gross, inputs.mode, config)

    total_deductions = income_tax + ni + health + pension_employee + study_employee
    net = gross - total_deductions + inputs.travel_allowance
    benefits = pension_employer + study_employer

    return SalaryBreakdown(
        gross=gross,
        taxable_income=taxable,
        pension_tax_deduction=deduction,
        income_tax_before_credits=tax_before,
        credit_amount=credits,
        income_tax=income_tax,
        national_insurance=ni,
        health=health,
        pension_employee=pension_employee,
        pension_employer=pension_employer,
        study_fund_employee=study_employee,
        study_fund_employer=study_employer,
        total_deductions=total_deductions,
        net_salary=net,
        employer_cost=gross + benefits,
        real_value=net + benefits if employee else net,
        effective_rate=total_deductions / gross * 100.0 if gross > 0 else 0.0,
        marginal_rate=marginal_rate(taxable, config.brackets),
    )
