# cheshbeshbon/core/finance/amortization.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cheshbeshbon.schemas.models import Track

from .errors import GracePeriodError

logger = logging.getLogger(__name__)

_EPS = 1e-6  # for floating cleanup
_MIN_INDEX_PCT = -99.0


@dataclass(frozen=True)
class ScheduleEntry:
    """
    Immutable record of a single monthly payment.

    Attributes:
        month: 1-based month index.
        payment: Total paid this month (interest + principal).
        principal_portion: Principal repaid this month (0 during grace).
        interest_portion: Interest charged this month.
        ending_balance: Outstanding balance after this month's payment (>= 0).
    """

    month: int
    payment: float
    principal_portion: float
    interest_portion: float
    ending_balance: float


@dataclass(frozen=True)
class AmortizationResult:
    """A track's full monthly schedule plus aggregates computed once at construction."""

    track: Track
    schedule: tuple[ScheduleEntry, ...]
    total_paid: float = field(init=False)
    total_interest: float = field(init=False)
    first_payment: float = field(init=False)
    last_payment: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_paid", sum(e.payment for e in self.schedule))
        object.__setattr__(self, "total_interest", sum(e.interest_portion for e in self.schedule))
        object.__setattr__(self, "first_payment", self.schedule[0].payment if self.schedule else 0.0)
        object.__setattr__(self, "last_payment", self.schedule[-1].payment if self.schedule else 0.0)

    @property
    def months(self) -> int:
        return len(self.schedule)


def monthly_rate(annual_rate_pct: float) -> float:
    """Nominal monthly rate from an annual percentage (5 → 0.05 / 12)."""
    return max(annual_rate_pct, 0.0) / 100.0 / 12.0


def monthly_index_rate(annual_index_pct: float) -> float:
    """Monthly rate that compounds to `annual_index_pct` over 12 months."""
    pct = max(annual_index_pct, _MIN_INDEX_PCT)
    return (1.0 + pct / 100.0) ** (1.0 / 12.0) - 1.0


def annuity_payment(balance: float, rate: float, months: int) -> float:
    """
    Level payment that amortizes `balance` to zero over `months` periods.

    Formula (standard annuity):
        PMT = B * r / (1 - (1 + r)^-n)   ==   B * r(1+r)^n / ((1+r)^n - 1)

    Notes:
        - rate <= 0 reduces to B / n.
        - Non-positive balance or months → 0.0 (nothing left to amortize).
        - The negative-exponent form underflows to 0 instead of overflowing on long terms.
    """
    if balance <= 0 or months <= 0:
        return 0.0
    if rate <= 0:
        return balance / months
    den = 1.0 - (1.0 + rate) ** (-months)
    if den <= 0:
        return balance / months
    return balance * rate / den


def amortize(track: Track, annual_indexation_rate: float = 0.0) -> AmortizationResult:
    """
    Build the monthly schedule for one track.

    Per month m in 1..term_months:
      1. Indexed tracks grow the balance by the monthly index rate first.
      2. Interest is charged on the (indexed) balance.
      3. During grace the payment is the interest alone.
      4. After grace the payment is a level annuity over the remaining months:
         fixed once at grace exit for non-indexed tracks, re-derived every month
         from the current balance for indexed tracks.
      5. The principal portion reduces the balance, floored at 0.

    Args:
        track: Loan slice to amortize.
        annual_indexation_rate: Expected annual index change in percent; ignored for non-indexed tracks.

    Raises:
        GracePeriodError: grace_months >= term_months.
    """
    if track.grace_months >= track.term_months:
        raise GracePeriodError(track.grace_months, track.term_months)

    r = monthly_rate(track.annual_rate)
    indexed = track.is_indexed
    idx = monthly_index_rate(annual_indexation_rate) if indexed else 0.0
    n = track.term_months
    grace = track.grace_months

    rows: list[ScheduleEntry] = []
    bal = float(track.principal)
    level_payment = 0.0

    for m in range(1, n + 1):
        if indexed:
            bal *= 1.0 + idx
        interest = bal * r

        if m <= grace:
            payment = interest
        elif indexed:
            payment = annuity_payment(bal, r, n - m + 1)
        else:
            if m == grace + 1:
                level_payment = annuity_payment(bal, r, n - grace)
            payment = level_payment

        principal_paid = payment - interest
        bal = max(0.0, bal - principal_paid)
        # Clean tiny residual drift
        if bal < _EPS:
            bal = 0.0
        rows.append(ScheduleEntry(m, payment, principal_paid, interest, bal))

    result = AmortizationResult(track=track, schedule=tuple(rows))
    logger.debug(
        "amortized %s track: principal=%.2f months=%d rate=%.3f%% grace=%d total_paid=%.2f",
        track.kind.value,
        track.principal,
        n,
        track.annual_rate,
        grace,
        result.total_paid,
    )
    return result


def annual_totals(result: AmortizationResult, year_index: int) -> tuple[float, float, float]:
    """
    Aggregate one 1-based year of a schedule.

    Returns:
        (total_paid_year, interest_paid_year, principal_paid_year); zeros past the end of the schedule.
    """
    if year_index <= 0:
        raise ValueError("year_index is 1-based (Year 1, Year 2, ...).")

    rows = result.schedule[(year_index - 1) * 12 : year_index * 12]
    return (
        sum(e.payment for e in rows),
        sum(e.interest_portion for e in rows),
        sum(e.principal_portion for e in rows),
    )
