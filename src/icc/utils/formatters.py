"""
Display formatters for financial figures.

Stored values are never rounded; rounding happens here, at presentation time.
Currency is EUR in German grouping (1.234,56 €), compact forms use K/M/B.
"""

from datetime import date


def format_number(value: float, decimals: int = 0) -> str:
    """Format with thousands separators (en-US grouping)."""
    return f"{value:,.{decimals}f}"


def format_currency(value: float, compact: bool = False) -> str:
    """
    Format an amount in EUR.

    Args:
        value: Amount
        compact: Use K/M/B suffixes for amounts >= 1,000

    Examples:
        >>> format_currency(1234.5)
        '1.234,50 €'
        >>> format_currency(42_500_000, compact=True)
        '€42.50M'
    """
    if compact:
        magnitude = abs(value)
        if magnitude >= 1_000_000_000:
            return f"€{value / 1_000_000_000:.2f}B"
        if magnitude >= 1_000_000:
            return f"€{value / 1_000_000:.2f}M"
        if magnitude >= 1_000:
            return f"€{value / 1_000:.1f}K"

    # de-DE grouping: swap separators of the en-US rendering
    text = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{text} €"


def format_percent(value: float, decimals: int = 2) -> str:
    """Signed percent; value is already in percent units."""
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_delta(value: float) -> str:
    return f"{value:.3f}"


def format_greek(value: float, decimals: int = 2) -> str:
    if abs(value) >= 1000:
        return format_number(value, 0)
    return f"{value:.{decimals}f}"


def format_expiry(value: date) -> str:
    """Expiry as DDMONYY, e.g. 17JAN25."""
    return value.strftime("%d%b%y").upper()


def dte_label(dte: int) -> str:
    """Human-readable time to expiry."""
    if dte <= 0:
        return "Expired"
    if dte == 1:
        return "1 day"
    if dte <= 7:
        return f"{dte} days"
    if dte <= 30:
        return f"{-(-dte // 7)} weeks"
    return f"{-(-dte // 30)} months"



def refresh_label(seconds: int) -> str:
    """Auto-refresh interval label: Off, 5s, 1 min."""
    if seconds <= 0:
        return "Off"
    if seconds % 60 == 0:
        return f"{seconds // 60} min"
    return f"{seconds}s"
