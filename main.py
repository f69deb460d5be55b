# main.py
"""
Entry Point — Cheshbeshbon household finance calculators

Purpose
-------
Run one calculator end-to-end and print a summary:
  1) Load a scenario (built-in sample for the chosen calculator, or --config JSON).
  2) Resolve tax tables (--tables, $CHESHBESHBON_TABLES, or the built-in year).
  3) Run the calculator pipeline (engine → guardrails → sensitivity → insights).
  4) Print the summary and optionally write the full result as JSON.

Usage
-----
    python main.py mortgage
    python main.py pension --out pension.json --verbose
    python main.py --config data/sample/mortgage.json --tables data/tables_2027.json

Exit status is 2 when inputs are rejected by the engine or the loader.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from cheshbeshbon.core.finance.errors import ENGINE_ERRORS
from cheshbeshbon.inputs.inputs import (
    AppInputs,
    CalculatorPayload,
    InputsLoader,
    MortgagePayload,
    PensionPayload,
    RentVsBuyPayload,
    SalaryPayload,
)
from cheshbeshbon.orchestrator.runner import RunResult, run_calculator
from cheshbeshbon.schemas.models import (
    MortgageScenario,
    PensionScenario,
    RentVsBuyInputs,
    SalaryInputs,
    Track,
    TrackKind,
)

CALCULATORS = ("mortgage", "salary", "rent-vs-buy", "pension")


def build_sample_payload(calculator: str) -> CalculatorPayload:
    """Return demo inputs for one calculator (a typical young family in 2026)."""
    if calculator == "mortgage":
        return MortgagePayload(
            scenario=MortgageScenario(
                tracks=(
                    Track.for_years(400_000.0, 25, 5.8, kind=TrackKind.PRIME),
                    Track.for_years(400_000.0, 25, 4.9, kind=TrackKind.FIXED),
                    Track.for_years(400_000.0, 20, 3.4, kind=TrackKind.CPI_FIXED),
                ),
                annual_indexation_rate=2.5,
                net_income=22_000.0,
            ),
            extra_monthly=1_000.0,
        )
    if calculator == "salary":
        return SalaryPayload(inputs=SalaryInputs(gross=18_000.0, study_fund_employee_pct=2.5, study_fund_employer_pct=7.5))
    if calculator == "rent-vs-buy":
        return RentVsBuyPayload(
            inputs=RentVsBuyInputs(
                purchase_price=2_500_000.0,
                equity=750_000.0,
                mortgage_rate=4.8,
                municipal_tax_monthly=600.0,
                building_fees_monthly=250.0,
                rent_monthly=6_500.0,
            )
        )
    if calculator == "pension":
        return PensionPayload(scenario=PensionScenario(current_age=32, monthly_salary=16_000.0, current_balance=85_000.0))
    raise ValueError(f"Unknown calculator: {calculator!r}")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for configurable runs."""
    p = argparse.ArgumentParser(description="Cheshbeshbon household finance calculators")
    p.add_argument(
        "calculator",
        nargs="?",
        choices=CALCULATORS,
        default=None,
        help="Calculator to run with sample inputs (optional when --config is given).",
    )
    p.add_argument("--config", type=str, default=None, help="Path to a scenario JSON (bare payload or AppInputs).")
    p.add_argument("--tables", type=str, default=None, help="Path to a TaxTables JSON (overrides config).")
    p.add_argument("--out", type=str, default=None, help="Write the full result as JSON (overrides config).")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = p.parse_args(argv)
    if args.config is None and args.calculator is None:
        p.error("a calculator is required when --config is not given")
    return args


def resolve_inputs(args: argparse.Namespace, loader: InputsLoader) -> AppInputs:
    """Scenario from --config (with CLI overrides), else the sample for the chosen calculator."""
    if args.config:
        cfg = loader.load(args.config)
        return loader.with_overrides(cfg, out=args.out, tables=args.tables)
    cfg = AppInputs(payload=build_sample_payload(args.calculator))
    return loader.with_overrides(cfg, out=args.out, tables=args.tables)


def write_result(path: str | Path, result: RunResult) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(result.to_payload(), indent=2, ensure_ascii=False), encoding="utf-8")
    return out


def main(argv: list[str] | None = None) -> int:
    """Run one calculator and return the process exit status."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    loader = InputsLoader()
    try:
        cfg = resolve_inputs(args, loader)
        tables = loader.load_tables(cfg.run.tables)
        result = run_calculator(cfg.payload, tables)
    except ENGINE_ERRORS as e:
        print(f"Rejected by the engine: {e}", file=sys.stderr)
        return 2
    except (ValueError, FileNotFoundError) as e:
        print(f"Invalid inputs: {e}", file=sys.stderr)
        return 2

    print(f"Cheshbeshbon · {result.calculator} · tax year {tables.year}")
    for line in result.summary_lines():
        print(line)

    if cfg.run.out:
        written = write_result(cfg.run.out, result)
        print(f"Result written to {written}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
