"""Tests for display formatters."""

from datetime import date

import pytest

from icc.utils.formatters import (
    dte_label,
    format_currency,
    format_expiry,
    format_number,
    format_percent,
    refresh_label,
)


class TestFormatCurrency:
    def test_full(self):
        assert format_currency(1234.5) == "1.234,50 €"
        assert format_currency(-1234567.891) == "-1.234.567,89 €"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (42_500_000, "€42.50M"),
            (1_200, "€1.2K"),
            (2_500_000_000, "€2.50B"),
            (-3_000_000, "€-3.00M"),
        ],
    )
    def test_compact(self, value, expected):
        assert format_currency(value, compact=True) == expected

    def test_compact_small_amount(self):
        assert format_currency(999.0, compact=True) == "999,00 €"


def test_format_number():
    assert format_number(1234567) == "1,234,567"
    assert format_number(1234.567, 2) == "1,234.57"


def test_format_percent_is_signed():
    assert format_percent(1.02) == "+1.02%"
    assert format_percent(-8.2, 1) == "-8.2%"
    assert format_percent(0) == "+0.00%"


def test_format_expiry():
    assert format_expiry(date(2025, 1, 17)) == "17JAN25"


@pytest.mark.parametrize(
    "dte,expected",
    [(0, "Expired"), (-2, "Expired"), (1, "1 day"), (5, "5 days"), (8, "2 weeks"), (30, "5 weeks"), (31, "2 months")],
)
def test_dte_label(dte, expected):
    assert dte_label(dte) == expected



@pytest.mark.parametrize("seconds,expected", [(0, "Off"), (5, "5s"), (30, "30s"), (60, "1 min"), (90, "90s"), (300, "5 min")])
def test_refresh_label(seconds, expected):
    assert refresh_label(seconds) == expected
