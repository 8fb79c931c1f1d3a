"""
Roll Aggregator

Folds a position's roll history into summary statistics and a break-even
price for the current (post-roll) short leg.

Break-even rule:
    net_cushion = total_roll_credits + total_realized_pl
    PUT:  break_even = strike - net_cushion / (multiplier * |quantity|)
    CALL: break_even = strike + net_cushion / (multiplier * |quantity|)
    No rolls: break_even = strike (no cushion)

Key patterns:
- Pure functions: inputs are never mutated, results are new values
- Caller merges results with apply_roll_summary()
- Precondition (not checked): roll_history is ordered oldest -> newest
"""

import math
from typing import Optional, Sequence

from loguru import logger

from icc.exceptions import InvalidPositionError
from icc.models.derived import RollSummary
from icc.models.positions import ROLL_TOTAL_TOLERANCE, OptionPosition, PutCall, RollHistoryEntry


def aggregate_rolls(
    roll_history: Sequence[RollHistoryEntry],
    current_strike: float,
    put_call: PutCall,
    multiplier: int,
    quantity: int,
) -> RollSummary:
    """
    Compute roll statistics and break-even price.

    Args:
        roll_history: Roll events, oldest first (may be empty)
        current_strike: Strike of the current leg
        put_call: PUT or CALL
        multiplier: Contract multiplier
        quantity: Signed contract count of the current leg

    Returns:
        RollSummary with count, totals, is_rolled and break-even price

    Raises:
        InvalidPositionError: If multiplier * |quantity| <= 0
    """
    size = multiplier * abs(quantity)
    if size <= 0:
        raise InvalidPositionError(
            f"Position has no risk-bearing size: multiplier={multiplier}, quantity={quantity}"
        )

    roll_count = len(roll_history)
    total_roll_credits = sum(entry.credit for entry in roll_history)
    total_realized_pl = sum(entry.realized_pl for entry in roll_history)

    if roll_count == 0:
        break_even_price = current_strike
    else:
        per_share_cushion = (total_roll_credits + total_realized_pl) / size
        if PutCall(put_call) == PutCall.PUT:
            break_even_price = current_strike - per_share_cushion
        else:
            break_even_price = current_strike + per_share_cushion

    return RollSummary(
        roll_count=roll_count,
        total_roll_credits=float(total_roll_credits),
        total_realized_pl=float(total_realized_pl),
        is_rolled=roll_count > 0,
        break_even_price=float(break_even_price),
    )


def summarize_position(
    position: OptionPosition,
    roll_history: Optional[Sequence[RollHistoryEntry]] = None,
) -> RollSummary:
    """
    Aggregate a position's rolls.

    Args:
        position: Option position (its strike, type and size are used)
        roll_history: Roll events to use instead of position.roll_history

    Returns:
        RollSummary for the position

    Raises:
        InvalidPositionError: If the position has zero size
    """
    history = position.roll_history if roll_history is None else roll_history
    try:
        return aggregate_rolls(
            history,
            current_strike=position.strike,
            put_call=position.put_call,
            multiplier=position.multiplier,
            quantity=position.quantity,
        )
    except InvalidPositionError as e:
        raise InvalidPositionError(e.message, position_id=position.id) from e


def apply_roll_summary(
    position: OptionPosition,
    roll_history: Optional[Sequence[RollHistoryEntry]] = None,
    summary: Optional[RollSummary] = None,
) -> OptionPosition:
    """
    Return a copy of the position with roll-derived fields filled in.

    Args:
        position: Position to enrich (not modified)
        roll_history: Roll events for the position (default: its own history)
        summary: Precomputed summary (computed from roll_history if omitted)

    Returns:
        New OptionPosition with roll_history, roll_count, is_rolled,
        total_roll_credits, total_realized_pl and break_even_price set

    Raises:
        ValueError: If summary was not computed from roll_history
    """
    history = tuple(position.roll_history if roll_history is None else roll_history)
    if summary is None:
        summary = summarize_position(position, history)
    else:
        _check_summary(position.id, summary, history)

    enriched = position.model_copy(
        update={
            "roll_history": history,
            "roll_count": summary.roll_count,
            "is_rolled": summary.is_rolled,
            "total_roll_credits": summary.total_roll_credits,
            "total_realized_pl": summary.total_realized_pl,
            "break_even_price": summary.break_even_price,
        }
    )

    if summary.is_rolled:
        logger.debug(
            f"{position.id}: {summary.roll_count} rolls, cushion {summary.net_cushion:,.2f}, "
            f"break-even {summary.break_even_price:.2f}"
        )

    return enriched


def _check_summary(position_id: str, summary: RollSummary, history: Sequence[RollHistoryEntry]) -> None:
    # model_copy() does not re-run the OptionPosition validator
    credits = sum(entry.credit for entry in history)
    realized = sum(entry.realized_pl for entry in history)
    if (
        summary.roll_count != len(history)
        or summary.is_rolled != bool(history)
        or not math.isclose(summary.total_roll_credits, credits, abs_tol=ROLL_TOTAL_TOLERANCE)
        or not math.isclose(summary.total_realized_pl, realized, abs_tol=ROLL_TOTAL_TOLERANCE)
    ):
        raise ValueError(
            f"{position_id}: summary ({summary.roll_count} rolls, credits {summary.total_roll_credits}) "
            f"does not match roll history ({len(history)} rolls, credits {credits})"
        )
