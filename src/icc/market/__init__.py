"""Underlying price lookup for watchlist scoring."""

from icc.market.prices import (
    DEFAULT_FALLBACK_MARKUP,
    DEFAULT_MOCK_PRICES,
    PriceLookup,
    PriceTable,
    resolve_price,
)

__all__ = [
    "DEFAULT_FALLBACK_MARKUP",
    "DEFAULT_MOCK_PRICES",
    "PriceLookup",
    "PriceTable",
    "resolve_price",
]
