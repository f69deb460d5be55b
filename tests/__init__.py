# tests/__init__.py
"""
Expose common test factories so tests can import directly:
    from tests import make_track, make_mortgage_scenario
"""

from .utils import (
    make_mortgage_scenario,
    make_pension_scenario,
    make_rent_vs_buy_inputs,
    make_salary_inputs,
    make_track,
)

__all__ = [
    "make_track",
    "make_mortgage_scenario",
    "make_rent_vs_buy_inputs",
    "make_pension_scenario",
    "make_salary_inputs",
]
