# tests/unit/test_brackets.py
import math

import pytest

from cheshbeshbon.core.finance.brackets import levy, marginal_rate, two_tier_brackets, validate_brackets
from cheshbeshbon.core.finance.errors import MalformedBracketTableError
from cheshbeshbon.schemas.models import Bracket
from tests.utils import SIMPLE_BRACKETS


def test_levy_walks_each_slice_once():
    # 10k @10% + 10k @20% + 5k @30%
    assert levy(25_000, SIMPLE_BRACKETS) == pytest.approx(1_000 + 2_000 + 1_500)


def test_levy_inside_first_bracket():
    assert levy(5_000, SIMPLE_BRACKETS) == pytest.approx(500.0)


def test_levy_zero_and_negative_amounts():
    assert levy(0, SIMPLE_BRACKETS) == 0.0
    assert levy(-1_000, SIMPLE_BRACKETS) == 0.0


def test_levy_is_continuous_at_limits():
    for limit in (10_000, 20_000):
        below = levy(limit - 1e-6, SIMPLE_BRACKETS)
        above = levy(limit + 1e-6, SIMPLE_BRACKETS)
        assert above - below == pytest.approx(0.0, abs=1e-5)


def test_levy_non_decreasing_and_non_negative():
    amounts = [i * 1_250.0 for i in range(40)]
    values = [levy(a, SIMPLE_BRACKETS) for a in amounts]
    assert all(v >= 0 for v in values)
    assert all(b >= a for a, b in zip(values, values[1:]))


def test_marginal_rate_upper_limit_is_exclusive():
    assert marginal_rate(9_999.99, SIMPLE_BRACKETS) == 0.10
    assert marginal_rate(10_000, SIMPLE_BRACKETS) == 0.20
    assert marginal_rate(1e9, SIMPLE_BRACKETS) == 0.30


@pytest.mark.parametrize(
    "table",
    [
        (),
        (Bracket(upper_limit=10, marginal_rate=0.1),),  # not open-ended
        (Bracket(upper_limit=20, marginal_rate=0.1), Bracket(upper_limit=10, marginal_rate=0.2), Bracket(marginal_rate=0.3)),
        (Bracket(upper_limit=0, marginal_rate=0.1), Bracket(marginal_rate=0.2)),
    ],
)
def test_malformed_tables_are_rejected(table):
    with pytest.raises(MalformedBracketTableError):
        validate_brackets(table)
    with pytest.raises(ValueError):
        levy(100, table)


def test_bracket_none_limit_means_unbounded():
    b = Bracket.model_validate({"upper_limit": None, "marginal_rate": 0.5})
    assert math.isinf(b.upper_limit)


def test_two_tier_brackets_stop_at_ceiling():
    tiers = two_tier_brackets(7_000, 45_000, 0.01, 0.05)
    assert [t.marginal_rate for t in tiers] == [0.01, 0.05, 0.0]
    assert levy(100_000, tiers) == pytest.approx(levy(45_000, tiers))
    assert levy(45_000, tiers) == pytest.approx(7_000 * 0.01 + 38_000 * 0.05)


def test_two_tier_brackets_without_threshold():
    tiers = two_tier_brackets(0, 1_000, 0.01, 0.05)
    assert len(tiers) == 2
    assert levy(500, tiers) == pytest.approx(25.0)
