"""Tests for numeric coercion and half-up rounding."""
import math

import pytest

from msa_lending.aggregation.numeric import coerce_number, parse_number, round_half_up


@pytest.mark.parametrize(
    "value, expected",
    [
        ("100", 100.0),
        ("  42.5", 42.5),
        ("-3", -3.0),
        (".5", 0.5),
        ("1e3", 1000.0),
        ("12.5%", 12.5),
        ("360 months", 360.0),
        (7, 7.0),
        (2.25, 2.25),
    ],
)
def test_coerce_numeric_prefix(value, expected):
    assert coerce_number(value) == expected


@pytest.mark.parametrize("value", ["", "   ", "Exempt", "NA", "bad", "nan", None, float("nan"), True])
def test_coerce_non_numeric_is_none(value):
    assert coerce_number(value) is None


def test_coerce_infinity():
    assert math.isinf(coerce_number("Infinity"))


def test_round_half_up_on_decimal_text():
    """2.675 rounds to 2.68 even though the binary value is slightly below."""
    assert round(2.675, 2) == 2.67
    assert round_half_up(2.675, 2) == 2.68
    assert round_half_up(70.0, 2) == 70.0
    assert round_half_up(1 / 3, 2) == 0.33


def test_round_half_up_passes_through_huge_and_nan():
    assert round_half_up(2.0**60, 2) == 2.0**60
    assert math.isnan(round_half_up(float("nan"), 2))


def test_round_half_up_negative_halves_go_toward_positive():
    assert round_half_up(-2.675, 2) == -2.67
    assert round_half_up(-2.5, 0) == -2.0
    assert round_half_up(-2.676, 2) == -2.68
    assert round_half_up(2.5, 0) == 3.0


@pytest.mark.parametrize(
    "value, expected",
    [
        ("49000", 49000.0),
        ("  49000 ", 49000.0),
        ("4e4", 40000.0),
        ("-1.5", -1.5),
        (30000, 30000.0),
    ],
)
def test_parse_whole_number(value, expected):
    assert parse_number(value) == expected


@pytest.mark.parametrize(
    "value",
    ["49000abc", "4e4x", "12.5%", "", "  ", "nan", "Infinity", "1e999", "1_000", None, True, float("nan")],
)
def test_parse_rejects_partial_or_non_finite(value):
    assert parse_number(value) is None
