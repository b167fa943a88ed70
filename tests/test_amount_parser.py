"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from ledgerbook.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "value, expected",
    [
        ("123.45", "123.45"),
        ("$1,234.56", "1234.56"),
        ("-$12.00", "-12.00"),
        ("(12.00)", "-12.00"),
        ("12.00-", "-12.00"),
        ("USD 7.5", "7.50"),
        ("7.5 EUR", "7.50"),
        (0.1, "0.10"),
        (5, "5.00"),
        (Decimal("2.345"), "2.35"),
    ],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == Decimal(expected)


@pytest.mark.parametrize("value", ["", "   ", "abc", "Infinity", "NaN"])
def test_invalid_amounts(value):
    with pytest.raises(ValueError):
        parse_amount(value)
