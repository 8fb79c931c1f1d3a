"""
Roll History Store

In-memory, append-only log of roll events per option position.

Entries are kept in append order and must arrive oldest first; the store
rejects an entry dated before the last one for the same position so that
the aggregator can rely on chronological order without checking it.
"""

from collections import defaultdict
from typing import Iterable

from loguru import logger

from icc.exceptions import RollOrderError
from icc.models.positions import RollHistoryEntry


class RollHistoryStore:
    """
    Append-only roll log keyed by position id.

    Example:
        >>> store = RollHistoryStore()
        >>> store.append("put-AAPL-0", entry)
        >>> store.history("put-AAPL-0")
        (RollHistoryEntry(...),)
    """

    def __init__(self):
        """Initialize empty store."""
        self._entries: dict[str, list[RollHistoryEntry]] = defaultdict(list)

    def append(self, position_id: str, entry: RollHistoryEntry) -> None:
        """
        Append a roll event to a position's log.

        Args:
            position_id: Owning position id
            entry: Roll event (must not predate the last entry)

        Raises:
            RollOrderError: If entry is older than the last logged roll
        """
        log = self._entries[position_id]
        if log and entry.roll_date < log[-1].roll_date:
            raise RollOrderError(
                f"Roll on {entry.roll_date.isoformat()} for {position_id} predates "
                f"last logged roll on {log[-1].roll_date.isoformat()}"
            )
        log.append(entry)
        logger.debug(f"Logged roll {entry.from_symbol} -> {entry.to_symbol} for {position_id}")

    def extend(self, position_id: str, entries: Iterable[RollHistoryEntry]) -> None:
        """Append several roll events in order."""
        for entry in entries:
            self.append(position_id, entry)

    def history(self, position_id: str) -> tuple[RollHistoryEntry, ...]:
        """
        Get a position's roll history, oldest first.

        Returns:
            Tuple of entries (empty if the position was never rolled)
        """
        return tuple(self._entries.get(position_id, ()))

    def position_ids(self) -> list[str]:
        """Ids of positions with at least one roll."""
        return [pid for pid, log in self._entries.items() if log]

    def __contains__(self, position_id: str) -> bool:
        return bool(self._entries.get(position_id))

    def __len__(self) -> int:
        """Total number of logged roll events."""
        return sum(len(log) for log in self._entries.values())
