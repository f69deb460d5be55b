# cheshbeshbon/core/finance/__init__.py

from .aggregate import aggregate, check_payment_to_income, check_variable_share, regulatory_findings
from .amortization import (
    AmortizationResult,
    ScheduleEntry,
    amortize,
    annual_totals,
    annuity_payment,
)
from .brackets import levy, marginal_rate, two_tier_brackets, validate_brackets
from .early_repayment import simulate_early_repayment
from .pension import annuitize, project_pension, simulate_pension
from .rent_vs_buy import purchase_tax, purchase_tax_calculator, simulate_rent_vs_buy
from .salary import compute_salary
from .sensitivity import re_evaluate

__all__ = [
    "levy",
    "marginal_rate",
    "two_tier_brackets",
    "validate_brackets",
    "AmortizationResult",
    "ScheduleEntry",
    "amortize",
    "annual_totals",
    "annuity_payment",
    "aggregate",
    "check_variable_share",
    "check_payment_to_income",
    "regulatory_findings",
    "simulate_early_repayment",
    "re_evaluate",
    "purchase_tax",
    "purchase_tax_calculator",
    "simulate_rent_vs_buy",
    "simulate_pension",
    "annuitize",
    "project_pension",
    "compute_salary",
]
