"""Tests for underlying price lookup."""

import pytest

from icc.market import DEFAULT_MOCK_PRICES, PriceTable, resolve_price


class TestPriceTable:
    def test_lookup_is_case_insensitive(self):
        prices = PriceTable({"aapl": 185.5})

        assert prices("AAPL") == 185.5
        assert prices("aapl") == 185.5

    def test_unknown_symbol(self):
        assert PriceTable({"AAPL": 185.5})("XYZ") is None

    def test_non_positive_price_is_unknown(self):
        prices = PriceTable({"AAPL": 0.0, "MSFT": -1.0})

        assert prices("AAPL") is None
        assert prices("MSFT") is None

    def test_update(self):
        prices = PriceTable()
        prices.update("tsla", 250)

        assert prices("TSLA") == 250.0
        assert len(prices) == 1

    def test_mock_prices(self):
        prices = PriceTable(DEFAULT_MOCK_PRICES)

        assert len(prices) == len(DEFAULT_MOCK_PRICES)
        assert all(prices(symbol) > 0 for symbol in DEFAULT_MOCK_PRICES)


class TestResolvePrice:
    def test_quoted_price(self, make_option):
        assert resolve_price(make_option(strike=150.0), PriceTable({"AAPL": 140.0})) == 140.0

    def test_fallback_markup(self, make_option):
        assert resolve_price(make_option(strike=150.0), PriceTable()) == pytest.approx(157.5)

    def test_custom_markup(self, make_option):
        assert resolve_price(make_option(strike=100.0), PriceTable(), fallback_markup=1.1) == pytest.approx(110.0)

    def test_plain_callable_lookup(self, make_option):
        assert resolve_price(make_option(strike=100.0), lambda underlying: None) == pytest.approx(105.0)
