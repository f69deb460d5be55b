# cheshbeshbon/core/insights/__init__.py

from .heuristics import mortgage_insights, pension_insights, rent_vs_buy_insights, salary_insights

__all__ = [
    "mortgage_insights",
    "salary_insights",
    "rent_vs_buy_insights",
    "pension_insights",
]
