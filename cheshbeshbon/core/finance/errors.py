# cheshbeshbon/core/finance/errors.py
"""
Typed errors for the financial simulation engine.

Exports
-------
- EngineError, ContractViolationError, GracePeriodError,
  MalformedBracketTableError, UnsupportedParameterError
- ENGINE_ERRORS

Policy
------
Out-of-domain scalars (negative amounts, zero terms) are clamped where the
inputs are modeled and never reach here. These errors are reserved for inputs
where clamping would silently change what the caller asked for. They derive
from ValueError so generic validation handlers still catch them.
"""

from __future__ import annotations

# =========================
# Exception types
# =========================


class EngineError(ValueError):
    """Base class for engine failures surfaced to the caller."""


class ContractViolationError(EngineError):
    """The caller broke a documented precondition of an engine function."""


class GracePeriodError(ContractViolationError):
    """A track's grace period covers its whole term, so it would never amortize."""

    def __init__(self, grace_months: int, term_months: int) -> None:
        super().__init__(f"grace_months ({grace_months}) must be < term_months ({term_months})")
        self.grace_months = grace_months
        self.term_months = term_months


class MalformedBracketTableError(ContractViolationError):
    """Bracket table is empty, unsorted, open-ended incorrectly, or has rates outside [0, 1]."""


class UnsupportedParameterError(ContractViolationError):
    """Sensitivity was requested for a parameter the scenario does not have."""


# Selector tuple for grouped exception handling (every concrete error the engine raises)
ENGINE_ERRORS = (
    GracePeriodError,
    MalformedBracketTableError,
    UnsupportedParameterError,
)


__all__ = [
    "EngineError",
    "ContractViolationError",
    "GracePeriodError",
    "MalformedBracketTableError",
    "UnsupportedParameterError",
    "ENGINE_ERRORS",
]
