"""
Row Loaders

Map database rows (dicts keyed by snake_case column names) into validated
records. Rows that fail validation are skipped with a warning; a bad row
must not take down the whole refresh.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from icc.data.connections import QueryResult
from icc.exceptions import QueryExecutionError
from icc.market.prices import PriceTable
from icc.models.positions import ROLL_DERIVED_FIELDS, NAVRecord, OptionPosition, RollHistoryEntry, StockPosition
from icc.rolls.store import RollHistoryStore

T = TypeVar("T")

DEFAULT_TABLES = {
    "option_positions": "option_positions",
    "stock_positions": "stock_positions",
    "nav_history": "nav_history",
    "roll_history": "roll_history",
    "prices": "prices",
}


@dataclass(slots=True)
class LoadResult(Generic[T]):
    """Validated records plus the number of rows skipped."""

    records: list[T] = field(default_factory=list)
    skipped: int = 0


@dataclass(slots=True)
class PortfolioData:
    """Everything a refresh needs, as read from a data source."""

    option_positions: list[OptionPosition] = field(default_factory=list)
    stock_positions: list[StockPosition] = field(default_factory=list)
    nav_history: list[NAVRecord] = field(default_factory=list)
    roll_store: RollHistoryStore = field(default_factory=RollHistoryStore)
    prices: PriceTable = field(default_factory=PriceTable)
    skipped_rows: int = 0


def _load(model: type[BaseModel], rows: Iterable[dict[str, Any]], kind: str, drop=frozenset()) -> LoadResult:
    result = LoadResult()
    for row in rows:
        data = {k: v for k, v in row.items() if k not in drop}
        try:
            result.records.append(model.model_validate(data))
        except ValidationError as e:
            result.skipped += 1
            logger.warning(f"Skipping invalid {kind} row {row.get('id', '?')}: {e.error_count()} errors")
    if result.skipped:
        logger.warning(f"Skipped {result.skipped} invalid {kind} rows")
    return result


def load_option_positions(rows: Iterable[dict[str, Any]]) -> LoadResult[OptionPosition]:
    """
    Validate option rows.

    Roll-derived columns, if the source has them, are dropped; they are
    recomputed from roll history by the aggregator.
    """
    return _load(OptionPosition, rows, "option position", drop=ROLL_DERIVED_FIELDS)


def load_stock_positions(rows: Iterable[dict[str, Any]]) -> LoadResult[StockPosition]:
    return _load(StockPosition, rows, "stock position")


def load_nav_history(rows: Iterable[dict[str, Any]]) -> LoadResult[NAVRecord]:
    """Validate NAV rows and sort them oldest first."""
    result = _load(NAVRecord, rows, "NAV")
    result.records.sort(key=lambda r: r.date)
    return result


def load_roll_entries(rows: Iterable[dict[str, Any]]) -> LoadResult[tuple[str, RollHistoryEntry]]:
    """
    Validate roll rows into (position_id, entry) pairs, sorted by position
    and roll date.
    """
    result = LoadResult()
    for row in rows:
        position_id = row.get("position_id")
        data = {k: v for k, v in row.items() if k != "position_id"}
        try:
            if not position_id:
                raise ValueError("missing position_id")
            result.records.append((str(position_id), RollHistoryEntry.model_validate(data)))
        except (ValidationError, ValueError) as e:
            result.skipped += 1
            logger.warning(f"Skipping invalid roll row for {position_id or '?'}: {e}")
    result.records.sort(key=lambda pair: (pair[0], pair[1].roll_date))
    return result


def load_prices(rows: Iterable[dict[str, Any]]) -> PriceTable:
    """Build a PriceTable from {underlying, price} rows; rows without a price are ignored."""
    prices = PriceTable()
    for row in rows:
        underlying, price = row.get("underlying"), row.get("price")
        if underlying and price is not None:
            prices.update(str(underlying), float(price))
    return prices


def build_roll_store(pairs: Iterable[tuple[str, RollHistoryEntry]]) -> RollHistoryStore:
    """Replay (position_id, entry) pairs into a store, oldest first."""
    store = RollHistoryStore()
    for position_id, entry in sorted(pairs, key=lambda pair: (pair[0], pair[1].roll_date)):
        store.append(position_id, entry)
    return store


def fetch_portfolio(source, schema: str = "public", tables: dict[str, str] = None) -> PortfolioData:
    """
    Read the portfolio tables from a data source.

    Args:
        source: DataSource implementation
        schema: Schema holding the tables
        tables: Override table names (keys as in DEFAULT_TABLES)

    Returns:
        PortfolioData with validated records

    Raises:
        QueryExecutionError: If a query fails
    """
    names = {**DEFAULT_TABLES, **(tables or {})}

    def rows(key: str) -> list[dict[str, Any]]:
        result: QueryResult = source.run_query(f"SELECT * FROM {schema}.{names[key]}")
        return result.rows

    options = load_option_positions(rows("option_positions"))
    stocks = load_stock_positions(rows("stock_positions"))
    nav = load_nav_history(rows("nav_history"))
    rolls = load_roll_entries(rows("roll_history"))

    # Quotes are optional; unknown underlyings fall back to strike markup
    try:
        prices = load_prices(rows("prices"))
    except QueryExecutionError as e:
        logger.warning(f"No price table in {schema}, scoring with fallback prices: {e}")
        prices = PriceTable()

    data = PortfolioData(
        option_positions=options.records,
        stock_positions=stocks.records,
        nav_history=nav.records,
        roll_store=build_roll_store(rolls.records),
        prices=prices,
        skipped_rows=options.skipped + stocks.skipped + nav.skipped + rolls.skipped,
    )
    logger.info(
        f"Fetched portfolio from {schema}: {len(data.option_positions)} options, "
        f"{len(data.stock_positions)} stocks, {len(data.nav_history)} NAV records, "
        f"{len(data.roll_store)} rolls ({data.skipped_rows} rows skipped)"
    )
    return data
