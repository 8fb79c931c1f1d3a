"""
Pydantic Models for Portfolio Records

This module provides Pydantic models for records that enter the process from
outside: option and stock positions read from a user-configured database, a
file import or the mock generator, plus the roll events produced by the roll
detector.

Key patterns:
- Field constraints: gt/ge for strikes, multipliers, capital at risk
- model_validator: roll-derived fields must agree with roll_history
- Frozen RollHistoryEntry: a roll event never changes once detected

Decision tree:
    Does this data come from outside my process?
    ├─ Yes → Use Pydantic (validation critical) ← WE ARE HERE
    └─ No → Use dataclass (performance matters)
"""

import datetime as dt
import math
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Float tolerance when comparing stored roll totals with entry sums
ROLL_TOTAL_TOLERANCE = 1e-6

# Derived from roll history on every refresh; never read from source rows
ROLL_DERIVED_FIELDS = frozenset(
    {
        "is_rolled",
        "roll_count",
        "roll_history",
        "total_roll_credits",
        "total_realized_pl",
        "break_even_price",
    }
)


class PutCall(str, Enum):
    """Option type enum."""

    PUT = "PUT"
    CALL = "CALL"


class RollHistoryEntry(BaseModel):
    """
    One roll event: closes one option leg and opens another.

    Created once by the roll detector when a closing trade is matched to an
    opening trade, then appended to the owning position's roll history.

    Attributes:
        roll_date: When the roll was executed
        from_symbol: Contract symbol of the closed leg
        to_symbol: Contract symbol of the opened leg
        from_strike: Strike of the closed leg
        to_strike: Strike of the opened leg
        from_expiry: Expiry of the closed leg
        to_expiry: Expiry of the opened leg
        credit: Net premium received (+) or paid (-) for the roll
        realized_pl: P/L recognized by closing the prior leg
    """

    model_config = ConfigDict(frozen=True)

    roll_date: datetime
    from_symbol: str = Field(..., min_length=1)
    to_symbol: str = Field(..., min_length=1)
    from_strike: float = Field(..., gt=0)
    to_strike: float = Field(..., gt=0)
    from_expiry: date
    to_expiry: date
    credit: float
    realized_pl: float


class OptionPosition(BaseModel):
    """
    A single open options contract position.

    Roll-derived fields (is_rolled, roll_count, total_roll_credits,
    total_realized_pl, break_even_price) are computed by the roll aggregator
    and merged with apply_roll_summary(); callers never set them by hand.

    Attributes:
        id: Unique position identifier
        underlying: Underlying ticker (e.g., "AAPL")
        symbol: Contract identifier (OCC-style symbol)
        description: Human-readable contract description
        strike: Strike price
        put_call: PUT or CALL
        exp_date: Expiration date
        quantity: Signed contract count (negative = short)
        multiplier: Contract multiplier (typically 100)
        capital_at_risk: Capital at risk in account currency
        premium_collected_to_date: Premium captured so far
        premium_collected_pct: Captured premium as % of original premium
        premium_remaining: Premium still open
        premium_remaining_pct: Remaining premium as % of original premium
        market_value: Current market value of the position
        cost_basis: Cost basis of the position
        unrealized_pl: Unrealized P/L
        delta, gamma, theta, vega, iv: Optional Greeks
        roll_history: Chronological roll events (oldest first)

    Raises:
        ValueError: If roll-derived fields disagree with roll_history
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., min_length=1)
    underlying: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)
    description: str = ""
    strike: float = Field(..., gt=0, description="Strike price")
    put_call: PutCall
    exp_date: date
    quantity: int = Field(..., description="Quantity (negative for short)")
    multiplier: int = Field(default=100, gt=0)
    capital_at_risk: float = Field(default=0.0, ge=0)
    premium_collected_to_date: float = 0.0
    premium_collected_pct: float = 0.0
    premium_remaining: float = 0.0
    premium_remaining_pct: float = 0.0
    market_value: float = 0.0
    cost_basis: float = 0.0
    unrealized_pl: float = 0.0
    sector: Optional[str] = None

    # Greeks
    delta: Optional[float] = None
    gamma: Optional[float] = None
    theta: Optional[float] = None
    vega: Optional[float] = None
    iv: Optional[float] = None

    # Roll tracking
    roll_group_id: Optional[str] = None
    is_rolled: bool = False
    roll_count: int = Field(default=0, ge=0)
    roll_history: tuple[RollHistoryEntry, ...] = ()
    total_roll_credits: float = 0.0
    total_realized_pl: float = 0.0
    break_even_price: Optional[float] = None

    @model_validator(mode="after")
    def validate_roll_fields(self):
        """
        Ensure roll-derived fields agree with the roll history.

        External feeds occasionally ship a roll count without the matching
        entries. Such records are rejected instead of silently reporting a
        wrong break-even.
        """
        if self.roll_count != len(self.roll_history):
            raise ValueError(
                f"roll_count {self.roll_count} does not match "
                f"{len(self.roll_history)} roll history entries"
            )
        if self.is_rolled != (self.roll_count > 0):
            raise ValueError(f"is_rolled={self.is_rolled} inconsistent with roll_count={self.roll_count}")

        credits = sum(entry.credit for entry in self.roll_history)
        if not math.isclose(self.total_roll_credits, credits, abs_tol=ROLL_TOTAL_TOLERANCE):
            raise ValueError(f"total_roll_credits {self.total_roll_credits} != sum of credits {credits}")

        realized = sum(entry.realized_pl for entry in self.roll_history)
        if not math.isclose(self.total_realized_pl, realized, abs_tol=ROLL_TOTAL_TOLERANCE):
            raise ValueError(f"total_realized_pl {self.total_realized_pl} != sum of realized P/L {realized}")

        return self

    def days_to_expiry(self, as_of: Optional[date] = None) -> int:
        """
        Days until expiration (negative once expired).

        Args:
            as_of: Reference date (default: today)
        """
        return (self.exp_date - (as_of or date.today())).days

    @property
    def dte(self) -> int:
        """Days to expiry as of today."""
        return self.days_to_expiry()

    @property
    def is_put(self) -> bool:
        return self.put_call == PutCall.PUT

    @property
    def contract_size(self) -> int:
        """Risk-bearing size: multiplier * |quantity|."""
        return self.multiplier * abs(self.quantity)

    def is_itm(self, price: float) -> bool:
        """PUT is ITM when price < strike, CALL when price > strike."""
        if self.is_put:
            return price < self.strike
        return price > self.strike


class StockPosition(BaseModel):
    """
    Stock holding.

    Attributes:
        id: Unique position identifier
        symbol: Ticker
        description: Human-readable description
        quantity: Number of shares
        market_value: Current market value
        cost_basis: Total cost basis
        unrealized_pl: Unrealized P/L
        sector: Optional sector name for allocation
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1)
    description: str = ""
    quantity: float
    market_value: float
    cost_basis: float
    unrealized_pl: float = 0.0
    sector: Optional[str] = None


class NAVRecord(BaseModel):
    """Daily net asset value record, split by asset class."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    total: float
    cash: float = 0.0
    securities: float = 0.0
    options: float = 0.0
