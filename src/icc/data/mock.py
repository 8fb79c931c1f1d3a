"""
Mock Portfolio Generator

Deterministic mock book (options, stocks, NAV history, rolls) for demos and
tests when no portfolio database is configured. The same seed and as_of date
always yield the same book.
"""

import random
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

from loguru import logger

from icc.market.prices import DEFAULT_MOCK_PRICES
from icc.models.positions import (
    ROLL_DERIVED_FIELDS,
    NAVRecord,
    OptionPosition,
    PutCall,
    RollHistoryEntry,
    StockPosition,
)

UNDERLYINGS = ["AAPL", "MSFT", "GOOGL", "AMZN", "META", "NVDA", "TSLA", "JPM", "BAC", "WMT"]
SECTORS = ["Technology", "Financials", "Consumer", "Healthcare", "Energy"]
EXPIRY_OFFSETS = [7, 14, 21, 35, 49, 63, 90]


@dataclass(slots=True)
class MockBook:
    """
    Generated portfolio.

    Attributes:
        option_positions: Puts and calls (roll fields not yet derived)
        stock_positions: Stock holdings
        nav_history: Daily NAV, oldest first
        roll_entries: (position_id, entry) pairs, oldest first per position
        prices: Underlying quotes
        as_of: Reference date used for generation
    """

    option_positions: list[OptionPosition] = field(default_factory=list)
    stock_positions: list[StockPosition] = field(default_factory=list)
    nav_history: list[NAVRecord] = field(default_factory=list)
    roll_entries: list[tuple[str, RollHistoryEntry]] = field(default_factory=list)
    prices: dict[str, float] = field(default_factory=dict)
    as_of: date = field(default_factory=date.today)

    def table_rows(self) -> dict[str, list[dict[str, Any]]]:
        """Book as database-style rows, keyed by table name."""
        return {
            "option_positions": [
                p.model_dump(mode="python", exclude=ROLL_DERIVED_FIELDS) for p in self.option_positions
            ],
            "stock_positions": [s.model_dump(mode="python") for s in self.stock_positions],
            "nav_history": [n.model_dump(mode="python") for n in self.nav_history],
            "roll_history": [
                {"position_id": pid, **entry.model_dump(mode="python")} for pid, entry in self.roll_entries
            ],
            "prices": [{"underlying": k, "price": v} for k, v in self.prices.items()],
        }


def next_friday(day: date) -> date:
    """Same day if Friday, else the following Friday."""
    return day + timedelta(days=(4 - day.weekday()) % 7)


def occ_symbol(underlying: str, exp_date: date, put_call: PutCall, strike: float) -> str:
    """OCC-style contract symbol, e.g. AAPL250117P00180000."""
    return f"{underlying}{exp_date.strftime('%y%m%d')}{put_call.value[0]}{int(round(strike * 1000)):08d}"


def _option(
    rng: random.Random,
    underlying: str,
    index: int,
    put_call: PutCall,
    expiries: list[date],
    as_of: date,
) -> OptionPosition:
    exp_date = rng.choice(expiries)
    multiplier = 100

    if put_call == PutCall.PUT:
        strike = round((150 + rng.random() * 100) / 5) * 5
        contracts = -(rng.randint(10, 59))
        capital_at_risk = strike * multiplier * abs(contracts)
        premium = capital_at_risk * (0.02 + rng.random() * 0.03)
        current_value = premium * (0.3 + rng.random() * 0.5)
        delta = -(0.15 + rng.random() * 0.25)
        gamma = 0.01 + rng.random() * 0.02
        theta = -(50 + rng.random() * 150) * abs(contracts)
        vega = (100 + rng.random() * 200) * abs(contracts)
        iv = 0.2 + rng.random() * 0.3
    else:
        strike = round((180 + rng.random() * 80) / 5) * 5
        contracts = -(rng.randint(5, 34))
        # Calls are mostly covered; only the uncovered part carries risk
        uncovered = abs(contracts) - int(abs(contracts) * 0.8)
        capital_at_risk = strike * multiplier * uncovered
        premium = abs(contracts) * multiplier * strike * 0.015
        current_value = premium * (0.2 + rng.random() * 0.4)
        delta = 0.1 + rng.random() * 0.2
        gamma = 0.01 + rng.random() * 0.015
        theta = -(30 + rng.random() * 100) * abs(contracts)
        vega = (80 + rng.random() * 150) * abs(contracts)
        iv = 0.18 + rng.random() * 0.25

    collected = premium - current_value
    prefix = "put" if put_call == PutCall.PUT else "call"

    return OptionPosition(
        id=f"{prefix}-{underlying}-{index}",
        underlying=underlying,
        symbol=occ_symbol(underlying, exp_date, put_call, strike),
        description=f"{underlying} {exp_date.strftime('%d%b%y').upper()} {strike} {put_call.value[0]}",
        strike=float(strike),
        put_call=put_call,
        exp_date=exp_date,
        quantity=contracts,
        multiplier=multiplier,
        capital_at_risk=float(capital_at_risk),
        premium_collected_to_date=collected,
        premium_collected_pct=collected / premium * 100,
        premium_remaining=current_value,
        premium_remaining_pct=current_value / premium * 100,
        market_value=-current_value,
        cost_basis=-premium,
        unrealized_pl=collected,
        delta=delta,
        gamma=gamma,
        theta=theta,
        vega=vega,
        iv=iv,
    )


def _rolls(rng: random.Random, position: OptionPosition, as_of: date) -> list[RollHistoryEntry]:
    """1-3 prior legs rolled into the current one, oldest first."""
    count = rng.randint(1, 3)
    entries = []
    to_strike = position.strike
    to_expiry = position.exp_date
    to_symbol = position.symbol
    roll_day = as_of - timedelta(days=rng.randint(1, 5))

    # Built newest first, walking back in time, then reversed
    for _ in range(count):
        from_strike = to_strike + (5 if position.is_put else -5)
        from_expiry = next_friday(roll_day)
        from_symbol = occ_symbol(position.underlying, from_expiry, position.put_call, from_strike)
        entries.append(
            RollHistoryEntry(
                roll_date=datetime.combine(roll_day, time(15, 30)),
                from_symbol=from_symbol,
                to_symbol=to_symbol,
                from_strike=from_strike,
                to_strike=to_strike,
                from_expiry=from_expiry,
                to_expiry=to_expiry,
                credit=round(5000 + rng.random() * 15000, 2),
                realized_pl=round(-5000 + rng.random() * 8000, 2),
            )
        )
        to_strike, to_expiry, to_symbol = from_strike, from_expiry, from_symbol
        roll_day -= timedelta(days=rng.randint(14, 35))

    entries.reverse()
    return entries


def generate_mock_book(seed: int = 42, as_of: Optional[date] = None) -> MockBook:
    """
    Generate a deterministic mock portfolio.

    Args:
        seed: Random seed
        as_of: Reference date (default: today)

    Returns:
        MockBook with options, stocks, NAV history, rolls and prices
    """
    as_of = as_of or date.today()
    rng = random.Random(seed)
    expiries = [next_friday(as_of + timedelta(days=d)) for d in EXPIRY_OFFSETS]
    book = MockBook(prices=dict(DEFAULT_MOCK_PRICES), as_of=as_of)

    for underlying in UNDERLYINGS:
        for i in range(rng.randint(1, 3)):
            put = _option(rng, underlying, i, PutCall.PUT, expiries, as_of)
            book.option_positions.append(put)
            if rng.random() < 0.2:
                book.roll_entries.extend((put.id, entry) for entry in _rolls(rng, put, as_of))

    for underlying in UNDERLYINGS[:6]:
        for i in range(rng.randint(1, 2)):
            book.option_positions.append(_option(rng, underlying, i, PutCall.CALL, expiries, as_of))

    for idx, symbol in enumerate(UNDERLYINGS[:8]):
        quantity = rng.randint(10, 59) * 100
        avg_price = 100 + rng.random() * 150
        current_price = avg_price * (0.9 + rng.random() * 0.25)
        market_value = quantity * current_price
        cost_basis = quantity * avg_price
        book.stock_positions.append(
            StockPosition(
                id=f"stock-{symbol}",
                symbol=symbol,
                description=f"{symbol} Common Stock",
                quantity=quantity,
                market_value=market_value,
                cost_basis=cost_basis,
                unrealized_pl=market_value - cost_basis,
                sector=SECTORS[idx % len(SECTORS)],
            )
        )

    for i in range(90):
        total = 125_000_000 + i * 150_000 + (rng.random() - 0.5) * 2_000_000
        book.nav_history.append(
            NAVRecord(
                date=as_of - timedelta(days=89 - i),
                total=total,
                cash=total * 0.15,
                securities=total * 0.65,
                options=total * 0.20,
            )
        )

    logger.debug(
        f"Generated mock book: {len(book.option_positions)} options, "
        f"{len(book.stock_positions)} stocks, {len(book.roll_entries)} rolls (seed={seed})"
    )
    return book
