# tests/conftest.py
from __future__ import annotations

import pytest

from cheshbeshbon.core.finance import amortize
from cheshbeshbon.inputs.defaults import default_tax_tables
from tests.utils import (
    make_mortgage_scenario,
    make_pension_scenario,
    make_rent_vs_buy_inputs,
    make_salary_inputs,
    make_track,
)


# -------- Environment isolation --------
@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Loader env overrides must never leak in from the developer's shell."""
    for name in ("CHESHBESHBON_OUT", "CHESHBESHBON_TABLES"):
        monkeypatch.delenv(name, raising=False)
    yield


# -------- Configuration fixtures --------
@pytest.fixture
def tax_tables():
    return default_tax_tables()


@pytest.fixture
def income_tax_config(tax_tables):
    return tax_tables.income_tax


# -------- Mortgage fixtures --------
@pytest.fixture
def track_factory():
    """Callable factory for tracks (overridable)."""

    def _factory(**overrides):
        return make_track(**overrides)

    return _factory


@pytest.fixture
def baseline_track():
    """100,000 over 120 months at 5%, no indexation, no grace."""
    return make_track()


@pytest.fixture
def baseline_schedule(baseline_track):
    return amortize(baseline_track)


@pytest.fixture
def mortgage_scenario():
    """Factory for the canonical three-track mortgage."""

    def _factory(**overrides):
        return make_mortgage_scenario(**overrides)

    return _factory


# -------- Other calculators --------
@pytest.fixture
def rent_vs_buy_inputs():
    def _factory(**overrides):
        return make_rent_vs_buy_inputs(**overrides)

    return _factory


@pytest.fixture
def pension_scenario():
    def _factory(**overrides):
        return make_pension_scenario(**overrides)

    return _factory


@pytest.fixture
def salary_inputs():
    def _factory(gross: float = 15_000.0, **overrides):
        return make_salary_inputs(gross, **overrides)

    return _factory


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks end-to-end CLI/runner tests")
