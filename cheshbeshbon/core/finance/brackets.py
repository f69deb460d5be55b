# cheshbeshbon/core/finance/brackets.py

from __future__ import annotations

import math
from collections.abc import Sequence

from cheshbeshbon.schemas.models import Bracket

from .errors import MalformedBracketTableError


def validate_brackets(brackets: Sequence[Bracket]) -> None:
    """
    Fail fast on a table that would not describe a progressive schedule over [0, inf).

    Rules:
      - at least one bracket
      - strictly increasing upper limits, all > 0
      - last upper limit is +inf
      - every marginal rate in [0, 1]
    """
    if not brackets:
        raise MalformedBracketTableError("bracket table is empty")

    prev = 0.0
    for i, b in enumerate(brackets):
        if not (b.upper_limit > prev):
            raise MalformedBracketTableError(
                f"bracket {i}: upper_limit {b.upper_limit} must be greater than previous limit {prev}"
            )
        if not (0.0 <= b.marginal_rate <= 1.0):
            raise MalformedBracketTableError(f"bracket {i}: marginal_rate {b.marginal_rate} outside [0, 1]")
        prev = b.upper_limit

    if not math.isinf(brackets[-1].upper_limit):
        raise MalformedBracketTableError("last bracket must be open-ended (upper_limit = inf)")


def levy(amount: float, brackets: Sequence[Bracket]) -> float:
    """
    Total levy on `amount` under a progressive schedule.

    Each slice [previous_limit, upper_limit) is levied once at its own marginal
    rate; the walk stops at the first bracket the amount does not reach.
    """
    validate_brackets(brackets)
    if amount <= 0:
        return 0.0

    total = 0.0
    prev = 0.0
    for b in brackets:
        if amount <= prev:
            break
        total += (min(amount, b.upper_limit) - prev) * b.marginal_rate
        prev = b.upper_limit
    return total


def marginal_rate(amount: float, brackets: Sequence[Bracket]) -> float:
    """Rate of the bracket containing `amount` (upper limits are exclusive)."""
    validate_brackets(brackets)
    for b in brackets:
        if amount < b.upper_limit:
            return b.marginal_rate
    return brackets[-1].marginal_rate


def two_tier_brackets(threshold: float, ceiling: float, lower_rate: float, upper_rate: float) -> tuple[Bracket, ...]:
    """
    Table for a two-rate levy with a ceiling (national insurance, health):
    `lower_rate` up to `threshold`, `upper_rate` up to `ceiling`, nothing above.
    """
    tiers: list[Bracket] = []
    if threshold > 0:
        tiers.append(Bracket(upper_limit=threshold, marginal_rate=lower_rate))
    if ceiling > threshold:
        tiers.append(Bracket(upper_limit=ceiling, marginal_rate=upper_rate))
    tiers.append(Bracket(upper_limit=math.inf, marginal_rate=0.0))
    return tuple(tiers)
