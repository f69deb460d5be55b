# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

# Project models
from cheshbeshbon.schemas.models import (
    Bracket,
    EmploymentMode,
    Indexation,
    MortgageScenario,
    PensionScenario,
    RentVsBuyInputs,
    SalaryInputs,
    Track,
    TrackKind,
)

# -----------------------------
# Global defaults (edit once)
# -----------------------------

DEFAULT_PRINCIPAL = 100_000.0
DEFAULT_TERM_MONTHS = 120
DEFAULT_RATE_PCT = 5.0

# Flat-then-progressive toy table used where real tax years would obscure the arithmetic
SIMPLE_BRACKETS: tuple[Bracket, ...] = (
    Bracket(upper_limit=10_000, marginal_rate=0.10),
    Bracket(upper_limit=20_000, marginal_rate=0.20),
    Bracket(upper_limit=math.inf, marginal_rate=0.30),
)

# -----------------------------
# Mortgage factories
# -----------------------------


def make_track(
    principal: float = DEFAULT_PRINCIPAL,
    term_months: int = DEFAULT_TERM_MONTHS,
    annual_rate: float = DEFAULT_RATE_PCT,
    *,
    indexed: bool = False,
    grace_months: int = 0,
    kind: TrackKind | None = None,
) -> Track:
    if kind is None:
        kind = TrackKind.CPI_FIXED if indexed else TrackKind.FIXED
    return Track(
        principal=principal,
        term_months=term_months,
        annual_rate=annual_rate,
        indexation=Indexation.MONTHLY_LINKED_TO_ANNUAL_RATE if indexed else Indexation.NONE,
        grace_months=grace_months,
        kind=kind,
    )


def make_mortgage_scenario(
    tracks: tuple[Track, ...] | None = None,
    annual_indexation_rate: float = 0.0,
    net_income: float | None = None,
) -> MortgageScenario:
    if tracks is None:
        tracks = (
            make_track(300_000.0, 300, 5.5, kind=TrackKind.PRIME),
            make_track(300_000.0, 240, 4.5),
            make_track(200_000.0, 180, 3.0, indexed=True),
        )
    return MortgageScenario(tracks=tracks, annual_indexation_rate=annual_indexation_rate, net_income=net_income)


# -----------------------------
# Rent-vs-buy / pension / salary factories
# -----------------------------


def make_rent_vs_buy_inputs(**overrides: Any) -> RentVsBuyInputs:
    base: dict[str, Any] = {
        "purchase_price": 2_000_000.0,
        "equity": 600_000.0,
        "mortgage_rate": 4.5,
        "mortgage_years": 25,
        "appreciation_rate": 3.0,
        "municipal_tax_monthly": 500.0,
        "building_fees_monthly": 200.0,
        "maintenance_rate": 1.0,
        "sole_residence": True,
        "rent_monthly": 5_500.0,
        "rent_growth_rate": 3.0,
        "investment_return_rate": 5.0,
        "horizon_years": 20,
    }
    base.update(overrides)
    return RentVsBuyInputs(**base)


def make_pension_scenario(**overrides: Any) -> PensionScenario:
    base: dict[str, Any] = {
        "current_age": 30,
        "retirement_age": 67,
        "monthly_salary": 15_000.0,
        "employee_pct": 6.0,
        "employer_pct": 6.5,
        "current_balance": 50_000.0,
        "annual_return_rate": 4.0,
        "salary_growth_rate": 2.0,
    }
    base.update(overrides)
    return PensionScenario(**base)


def make_salary_inputs(gross: float = 15_000.0, **overrides: Any) -> SalaryInputs:
    base: dict[str, Any] = {"gross": gross, "mode": EmploymentMode.EMPLOYEE}
    base.update(overrides)
    return SalaryInputs(**base)


# -----------------------------
# File helpers
# -----------------------------


def write_json(path: Path, data: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def mortgage_payload_dict(**overrides: Any) -> dict[str, Any]:
    """Canonical bare mortgage payload as it appears in a scenario file."""
    payload: dict[str, Any] = {
        "calculator": "mortgage",
        "scenario": {
            "tracks": [
                {"principal": 500_000, "term_months": 300, "annual_rate": 5.0, "kind": "prime"},
                {
                    "principal": 300_000,
                    "term_months": 240,
                    "annual_rate": 3.2,
                    "kind": "cpi_fixed",
                    "indexation": "monthly_linked_to_annual_rate",
                },
            ],
            "annual_indexation_rate": 2.0,
            "net_income": 20_000,
        },
    }
    payload.update(overrides)
    return payload
