"""Tests for amount parsing."""

import pytest
from decimal import Decimal
from ledgerbook.utils.amount_parser import parse_amount, parse_posting


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1000", Decimal("1000")),
        ("1000.50", Decimal("1000.50")),
        ("$1,234.56", Decimal("1234.56")),
        ("MXN 1,234.56", Decimal("1234.56")),
        ("1234.56 mxn", Decimal("1234.56")),
        ("€10", Decimal("10")),
        ("(123.45)", Decimal("-123.45")),
        ("  0.01 ", Decimal("0.01")),
    ],
)
def test_parse_amount(text, expected):
    """Test parsing supported amount formats."""
    assert parse_amount(text) == expected


def test_parse_amount_keeps_decimal_precision():
    """Test amounts are not routed through floats."""
    assert parse_amount("0.10") + parse_amount("0.20") == Decimal("0.30")


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "NaN", "Infinity"])
def test_parse_amount_invalid(text):
    """Test invalid amounts raise ValueError."""
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_amount_rejects_fractions_of_a_cent():
    with pytest.raises(ValueError, match="more than two decimal places"):
        parse_amount("10.005")


def test_parse_posting():
    """Test splitting ACCOUNT:AMOUNT postings."""
    assert parse_posting("1101:1000") == ("1101", Decimal("1000"))
    assert parse_posting(" 4101 : $1,160.00 ") == ("4101", Decimal("1160.00"))


@pytest.mark.parametrize("posting", ["1101", ":100", "1101:", "1101:cien"])
def test_parse_posting_invalid(posting):
    with pytest.raises(ValueError):
        parse_posting(posting)
