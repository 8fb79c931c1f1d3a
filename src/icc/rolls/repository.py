"""
Repository for roll history with Delta Lake backend.

Persists the append-only roll log so that roll history survives restarts
and can be replayed into a RollHistoryStore on startup.

Pattern: write_deltalake() for writes, DeltaTable() for reads.
"""

from datetime import datetime
from pathlib import Path
from typing import Sequence

import polars as pl
from deltalake import DeltaTable, write_deltalake
from loguru import logger

from icc.models.positions import RollHistoryEntry
from icc.rolls.store import RollHistoryStore

ROLL_HISTORY_SCHEMA = pl.Schema({
    "position_id": pl.String,
    "sequence": pl.Int64,
    "roll_date": pl.Datetime("us"),
    "from_symbol": pl.String,
    "to_symbol": pl.String,
    "from_strike": pl.Float64,
    "to_strike": pl.Float64,
    "from_expiry": pl.Date,
    "to_expiry": pl.Date,
    "credit": pl.Float64,
    "realized_pl": pl.Float64,
    "recorded_at": pl.Datetime("us"),
})

ENTRY_FIELDS = (
    "roll_date",
    "from_symbol",
    "to_symbol",
    "from_strike",
    "to_strike",
    "from_expiry",
    "to_expiry",
    "credit",
    "realized_pl",
)


class RollHistoryRepository:
    """Repository for roll events with Delta Lake backend."""

    def __init__(self, table_path: str = "data/lake/roll_history"):
        """
        Initialize the roll history repository.

        Args:
            table_path: Path to Delta Lake table (default: data/lake/roll_history)
        """
        self.table_path = table_path
        self._ensure_table_exists()

    def _ensure_table_exists(self) -> None:
        """Initialize table if it doesn't exist."""
        if not Path(self.table_path).exists():
            logger.info(f"Initializing roll history table at {self.table_path}")
            df = pl.DataFrame(schema=ROLL_HISTORY_SCHEMA)
            write_deltalake(
                self.table_path,
                df.to_arrow(),
                mode="overwrite",
                partition_by=["position_id"],
            )

    def _read(self) -> pl.DataFrame:
        dt = DeltaTable(self.table_path)
        return pl.from_arrow(dt.to_pyarrow_table())

    def append(self, position_id: str, entries: Sequence[RollHistoryEntry]) -> int:
        """
        Append roll events for a position (single batch write).

        Args:
            position_id: Owning position id
            entries: Roll events, oldest first

        Returns:
            Number of rows written
        """
        if not entries:
            return 0

        start = self.get_history_frame(position_id).height
        now = datetime.now()
        rows = [
            {
                "position_id": position_id,
                "sequence": start + i,
                **{name: getattr(entry, name) for name in ENTRY_FIELDS},
                "recorded_at": now,
            }
            for i, entry in enumerate(entries)
        ]
        df = pl.DataFrame(rows, schema=ROLL_HISTORY_SCHEMA)

        write_deltalake(
            self.table_path,
            df.to_arrow(),
            mode="append",
            partition_by=["position_id"],
        )
        logger.info(f"Appended {df.height} roll entries for {position_id} to {self.table_path}")
        return df.height

    def get_history_frame(self, position_id: str) -> pl.DataFrame:
        """
        Get raw roll rows for a position, in append order.

        Returns:
            Polars DataFrame filtered by position_id
        """
        df = self._read()
        return df.filter(pl.col("position_id") == position_id).sort("sequence")

    def get_history(self, position_id: str) -> tuple[RollHistoryEntry, ...]:
        """
        Get a position's roll history, oldest first.

        Args:
            position_id: Position id

        Returns:
            Tuple of RollHistoryEntry
        """
        df = self.get_history_frame(position_id)
        return tuple(_row_to_entry(row) for row in df.iter_rows(named=True))

    def load_store(self) -> RollHistoryStore:
        """
        Replay the whole table into an in-memory store.

        Returns:
            RollHistoryStore holding every persisted roll
        """
        store = RollHistoryStore()
        df = self._read().sort(["position_id", "sequence"])
        for row in df.iter_rows(named=True):
            store.append(row["position_id"], _row_to_entry(row))
        logger.info(f"Loaded {len(store)} roll entries for {len(store.position_ids())} positions")
        return store

    def sync(self, store: RollHistoryStore) -> int:
        """
        Persist entries the table does not have yet.

        The log is append-only, so a position's first N persisted rows are
        taken to be the first N entries in the store.

        Returns:
            Number of rows written
        """
        persisted = self._read().group_by("position_id").agg(pl.len().alias("count"))
        counts = dict(zip(persisted["position_id"].to_list(), persisted["count"].to_list()))

        written = 0
        for position_id in store.position_ids():
            history = store.history(position_id)
            written += self.append(position_id, history[counts.get(position_id, 0):])
        return written

    def get_version(self) -> int:
        """
        Get current Delta Lake version.

        Returns:
            Current version number
        """
        dt = DeltaTable(self.table_path)
        return dt.version()


def _row_to_entry(row: dict) -> RollHistoryEntry:
    return RollHistoryEntry(**{name: row[name] for name in ENTRY_FIELDS})
