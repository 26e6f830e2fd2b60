"""Tests for base-unit formatting and parsing."""

from __future__ import annotations

import pytest

from receipts.units import format_units, parse_units


@pytest.mark.parametrize(
    "value, decimals, expected",
    [
        (10**18, 18, "1"),
        (1_500_000, 6, "1.5"),
        (10_000_000_000, 18, "0.00000001"),
        (1, 18, "0.000000000000000001"),
        (0, 18, "0"),
        (123, 0, "123"),
        (-2_500_000, 6, "-2.5"),
        (1234567890123456789012345678901234567890, 18, "1234567890123456789012.34567890123456789"),
    ],
)
def test_format_units(value, decimals, expected):
    assert format_units(value, decimals) == expected


def test_format_units_rejects_negative_decimals():
    with pytest.raises(ValueError):
        format_units(1, -1)


@pytest.mark.parametrize(
    "value, decimals",
    [
        (1_234_567_891_234_567_891, 18),
        (115792089237316195423570985008687907853269984665640564039457584007913129639935, 18),
        (999_999, 6),
        (1, 6),
        (0, 18),
    ],
)
def test_format_then_parse_recovers_value(value, decimals):
    assert parse_units(format_units(value, decimals), decimals) == value


def test_parse_units():
    assert parse_units("1.5", 6) == 1_500_000
    assert parse_units(" 2 ", 18) == 2 * 10**18
    assert parse_units("-0.25", 2) == -25


def test_parse_units_rejects_excess_precision_and_garbage():
    with pytest.raises(ValueError, match="fractional digits"):
        parse_units("0.0000001", 6)
    with pytest.raises(ValueError, match="Invalid amount"):
        parse_units("abc", 18)
    with pytest.raises(ValueError, match="Invalid amount"):
        parse_units("NaN", 18)
