"""
Roll tracking: append-only roll log, Delta Lake persistence and the
aggregator that derives roll counts, credits, realized P/L and break-even.

Example:
    >>> from icc.rolls import RollHistoryStore, apply_roll_summary
    >>> store = RollHistoryStore()
    >>> store.append(position.id, entry)
    >>> enriched = apply_roll_summary(position, store.history(position.id))
"""

from icc.rolls.aggregator import aggregate_rolls, apply_roll_summary, summarize_position
from icc.rolls.repository import RollHistoryRepository
from icc.rolls.store import RollHistoryStore

__all__ = [
    "aggregate_rolls",
    "summarize_position",
    "apply_roll_summary",
    "RollHistoryStore",
    "RollHistoryRepository",
]
