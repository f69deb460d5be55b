# cheshbeshbon/inputs/defaults.py
"""
Tax year 2026 tables (Israel). Update yearly; verify against the official
Tax Authority and National Insurance publications before relying on them.

These are defaults for the configuration loader and CLI. The engine never
reads them implicitly: callers pass tables in.
"""

from __future__ import annotations

import math

from cheshbeshbon.schemas.models import (
    Bracket,
    IncomeTaxConfig,
    PurchaseTaxTables,
    RegulatoryPolicy,
    SocialInsuranceRates,
    TaxTables,
)

DEFAULT_TAX_YEAR = 2026

# Monthly income tax brackets
_INCOME_TAX_2026 = (
    (7_010, 0.10),
    (10_060, 0.14),
    (19_000, 0.20),
    (25_100, 0.31),
    (46_690, 0.35),
    (60_130, 0.47),
    (math.inf, 0.50),
)

# Purchase tax, frozen through 2026
_PURCHASE_SINGLE_2026 = (
    (1_919_155, 0.0),
    (2_276_360, 0.035),
    (5_872_725, 0.05),
    (19_575_710, 0.08),
    (math.inf, 0.10),
)
_PURCHASE_ADDITIONAL_2026 = (
    (6_055_070, 0.08),
    (math.inf, 0.10),
)


def _table(rows: tuple[tuple[float, float], ...]) -> tuple[Bracket, ...]:
    return tuple(Bracket(upper_limit=limit, marginal_rate=rate) for limit, rate in rows)


def default_tax_tables() -> TaxTables:
    """Fresh 2026 tables (new objects each call)."""
    return TaxTables(
        year=DEFAULT_TAX_YEAR,
        income_tax=IncomeTaxConfig(
            brackets=_table(_INCOME_TAX_2026),
            ni_threshold=7_522.0,
            ni_ceiling=48_281.0,
            employee=SocialInsuranceRates(ni_lower=0.004, ni_upper=0.07, health_lower=0.031, health_upper=0.05),
            self_employed=SocialInsuranceRates(ni_lower=0.0287, ni_upper=0.1283, health_lower=0.031, health_upper=0.05),
            credit_point_value=242.0,
            pension_ceiling=12_420.0,
        ),
        purchase_tax=PurchaseTaxTables(
            single_residence=_table(_PURCHASE_SINGLE_2026),
            additional_residence=_table(_PURCHASE_ADDITIONAL_2026),
        ),
        regulatory=RegulatoryPolicy(),
    )
