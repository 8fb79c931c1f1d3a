"""
Underlying Price Lookup

Static quote table and the fallback used when no live quote exists for an
underlying. Real market data is not part of this library; any callable
`underlying -> Optional[float]` can be passed to the watchlist scorer.
"""

from typing import Callable, Mapping, Optional

from loguru import logger

from icc.models.positions import OptionPosition

# underlying -> quote, or None when unknown
PriceLookup = Callable[[str], Optional[float]]

# Assume slightly out of the money when no quote exists
DEFAULT_FALLBACK_MARKUP = 1.05

DEFAULT_MOCK_PRICES: dict[str, float] = {
    "AAPL": 185.50,
    "MSFT": 415.20,
    "GOOGL": 175.80,
    "AMZN": 198.40,
    "META": 565.30,
    "NVDA": 875.60,
    "TSLA": 248.90,
    "JPM": 198.75,
    "BAC": 37.25,
    "WMT": 168.40,
}


class PriceTable:
    """
    Static underlying -> price table.

    Callable, so it can be passed anywhere a PriceLookup is expected.
    Non-positive quotes are treated as missing.

    Example:
        >>> prices = PriceTable({"AAPL": 185.5})
        >>> prices("AAPL")
        185.5
        >>> prices("XYZ") is None
        True
    """

    def __init__(self, prices: Optional[Mapping[str, float]] = None):
        """
        Initialize price table.

        Args:
            prices: Mapping of underlying to price (default: empty)
        """
        self._prices: dict[str, float] = {k.upper(): float(v) for k, v in (prices or {}).items()}

    def __call__(self, underlying: str) -> Optional[float]:
        price = self._prices.get(underlying.upper())
        if price is None or price <= 0:
            return None
        return price

    def update(self, underlying: str, price: float) -> None:
        """Set or replace a quote."""
        self._prices[underlying.upper()] = float(price)

    def __len__(self) -> int:
        return len(self._prices)

    def __repr__(self) -> str:
        return f"PriceTable(symbols={len(self._prices)})"


def resolve_price(
    position: OptionPosition,
    lookup: PriceLookup,
    fallback_markup: float = DEFAULT_FALLBACK_MARKUP,
) -> float:
    """
    Current underlying price for a position, with fallback.

    Args:
        position: Option position
        lookup: Price lookup callable
        fallback_markup: Multiplier applied to strike when no quote exists

    Returns:
        Quoted price, or strike * fallback_markup when unknown
    """
    price = lookup(position.underlying)
    if price is None or price <= 0:
        price = position.strike * fallback_markup
        logger.debug(
            f"No quote for {position.underlying}, using {price:.2f} "
            f"(strike {position.strike:.2f} x {fallback_markup})"
        )
    return price
