# cheshbeshbon/inputs/inputs.py
"""
Inputs loader for the cheshbeshbon calculators.

Goals
-----
- Deterministic, file-first inputs with validation via Pydantic.
- Year-specific tax tables are configuration: loaded here, passed explicitly
  into the engine, never read by it.
- Minimal environment-variable overrides for CI/CLI convenience.

Supported JSON shapes
---------------------
1) Bare payload (root = one calculator payload)
   { "calculator": "mortgage", "scenario": { "tracks": [...] }, ... }

2) Structured (root = AppInputs)
   {
     "payload": { "calculator": "pension", "scenario": {...} },
     "run": { "out": "result.json", "tables": "tables_2027.json" }
   }

3) Tax tables (root = TaxTables)
   { "year": 2027, "income_tax": {...}, "purchase_tax": {...}, "regulatory": {...} }
   An open-ended bracket is written with "upper_limit": null.

Environment overrides (optional)
--------------------------------
- CHESHBESHBON_OUT     -> AppInputs.run.out
- CHESHBESHBON_TABLES  -> AppInputs.run.tables (path to a TaxTables JSON)

Public API
----------
- class InputsLoader:
    - load(path) -> AppInputs
    - load_json(text) -> AppInputs
    - load_tables(path | None) -> TaxTables
    - with_overrides(cfg, **kwargs) -> AppInputs (non-destructive copies)
- function load_inputs(path) -> AppInputs  (convenience)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Literal, cast

from pydantic import BaseModel, Field, ValidationError

from cheshbeshbon.inputs.defaults import default_tax_tables
from cheshbeshbon.schemas.models import (
    MortgageScenario,
    PensionAssumptions,
    PensionScenario,
    RentVsBuyInputs,
    SalaryInputs,
    TaxTables,
)

logger = logging.getLogger(__name__)

# ----------------------------
# Pydantic models for structured inputs
# ----------------------------


class MortgagePayload(BaseModel):
    calculator: Literal["mortgage"] = "mortgage"
    scenario: MortgageScenario
    extra_monthly: float = Field(0.0, description="Extra monthly repayment for the early-repayment simulation.")
    lump_sum: float = Field(0.0, description="One-time repayment for the early-repayment simulation.")
    lump_sum_month: int = Field(12, description="Month in which the lump sum is paid.")
    rate_delta: float = Field(1.0, description="Percentage-point rate shift for the sensitivity check.")


class SalaryPayload(BaseModel):
    calculator: Literal["salary"] = "salary"
    inputs: SalaryInputs


class RentVsBuyPayload(BaseModel):
    calculator: Literal["rent_vs_buy"] = "rent_vs_buy"
    inputs: RentVsBuyInputs
    appreciation_delta: float = Field(-1.0, description="Percentage-point appreciation shift for the sensitivity check.")


class PensionPayload(BaseModel):
    calculator: Literal["pension"] = "pension"
    scenario: PensionScenario
    assumptions: PensionAssumptions = Field(default_factory=PensionAssumptions)
    return_delta: float = Field(-1.0, description="Percentage-point return shift for the sensitivity check.")


CalculatorPayload = Annotated[
    MortgagePayload | SalaryPayload | RentVsBuyPayload | PensionPayload,
    Field(discriminator="calculator"),
]


class RunOptions(BaseModel):
    """Runtime (non-financial) options controlling the run."""

    out: str | None = Field(None, description="Path to write the JSON result (optional).")
    tables: str | None = Field(None, description="Path to a TaxTables JSON; defaults to the built-in tax year.")


class AppInputs(BaseModel):
    """
    Full input payload.

    Attributes:
        payload: One calculator's validated inputs.
        run:     Non-financial, runtime options for the current execution.
    """

    payload: CalculatorPayload
    run: RunOptions = RunOptions()


# ----------------------------
# Loader
# ----------------------------


@dataclass(frozen=True)
class InputsLoader:
    """
    File-first inputs loader with light env overrides.

    Responsibilities:
        - Read JSON from a file or string
        - Accept both the bare-payload and structured shapes
        - Validate with Pydantic
        - Apply environment overrides for run options
        - Resolve the tax tables (file, env, or built-in default)
    """

    env_prefix: str = "CHESHBESHBON_"

    # ---------- Public API ----------

    def load(self, path: str | Path) -> AppInputs:
        """Load and validate a scenario file."""
        raw = self._read_json_file(self._resolve_path(path))
        cfg = self._parse_root(self._maybe_wrap_payload(raw))
        return self._apply_env_overrides(cfg)

    def load_json(self, text: str) -> AppInputs:
        """Load inputs from a JSON string (bare payload or structured shape)."""
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON payload: {e}") from e
        cfg = self._parse_root(self._maybe_wrap_payload(raw))
        return self._apply_env_overrides(cfg)

    def load_tables(self, path: str | Path | None = None) -> TaxTables:
        """
        Tax tables from `path`, else from $CHESHBESHBON_TABLES, else the built-in defaults.
        """
        if path is None:
            path = os.getenv(f"{self.env_prefix}TABLES") or None
        if path is None:
            tables = default_tax_tables()
            logger.debug("using built-in tax tables for %d", tables.year)
            return tables

        raw = self._read_json_file(self._resolve_path(path))
        try:
            tables = TaxTables.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Tax tables validation failed:\n{e}") from e
        logger.debug("loaded tax tables for %d from %s", tables.year, path)
        return tables

    def with_overrides(
        self,
        cfg: AppInputs,
        *,
        out: str | None = None,
        tables: str | None = None,
    ) -> AppInputs:
        """
        Return a *new* AppInputs with provided non-null overrides applied to RunOptions.
        Does not mutate the original instance.
        """
        updates: dict[str, Any] = {}
        if out is not None:
            updates["out"] = out
        if tables is not None:
            updates["tables"] = tables

        if not updates:
            return cfg

        run_new = cfg.run.model_copy(update=updates)
        return cfg.model_copy(update={"run": run_new})

    # ---------- Internals ----------

    def _resolve_path(self, path: str | Path) -> Path:
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Inputs file not found: {p}")
        return p

    def _read_json_file(self, p: Path) -> dict[str, Any]:
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported inputs format for {p.name}; only .json is supported.")
        try:
            return cast(dict[str, Any], json.loads(p.read_text(encoding="utf-8")))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {p}: {e}") from e

    def _maybe_wrap_payload(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Accept a bare calculator payload at the root by wrapping it."""
        if "payload" in raw:
            return raw
        return {"payload": raw}

    def _parse_root(self, data: dict[str, Any]) -> AppInputs:
        try:
            return AppInputs.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Inputs validation failed:\n{e}") from e

    def _apply_env_overrides(self, cfg: AppInputs) -> AppInputs:
        """Apply optional overrides from environment variables to run options."""
        prefix = self.env_prefix
        updates: dict[str, Any] = {}

        out = os.getenv(f"{prefix}OUT")
        if out:
            updates["out"] = out

        tables = os.getenv(f"{prefix}TABLES")
        if tables:
            updates["tables"] = tables

        if not updates:
            return cfg

        run_new = cfg.run.model_copy(update=updates)
        return cfg.model_copy(update={"run": run_new})


# ----------------------------
# Convenience function
# ----------------------------


def load_inputs(path: str | Path) -> AppInputs:
    """Convenience wrapper for one-shot callers."""
    return InputsLoader().load(path)
