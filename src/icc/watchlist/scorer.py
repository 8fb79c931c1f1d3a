"""
Priority Watchlist Scorer

Ranks the open option book by "needs attention now" for a fixed-size
watchlist.

Key patterns:
- Priority queue: rules sorted by priority, evaluated in order
- First-wins semantics: stop at the first rule that matches
- Positions matching no rule are left off the watchlist
- Stable sort on score: equal scores keep input order
- Stateless scoring: every call recomputes from scratch
"""

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence, runtime_checkable

from loguru import logger

from icc.market.prices import DEFAULT_FALLBACK_MARKUP, PriceLookup, resolve_price
from icc.models.derived import PriorityOption, PriorityReason, WatchlistSummary
from icc.models.positions import OptionPosition
from icc.watchlist.rules import RuleMatch, ScoringContext, default_rules

DEFAULT_WATCHLIST_SIZE = 8


@runtime_checkable
class ScoringRule(Protocol):
    """
    Rule protocol for watchlist scoring.

    Attributes:
        priority: Evaluation order (lower = evaluated first)
        name: Unique rule name
    """

    priority: int
    name: str

    def evaluate(self, context: ScoringContext) -> Optional[RuleMatch]:
        """Return a match if the rule applies to the position, else None."""
        ...


def distance_to_strike(position: OptionPosition, current_price: float) -> float:
    """
    Signed percent distance between price and strike.

    PUT: (price − strike) / strike × 100
    CALL: (strike − price) / strike × 100

    Positive means out of the money for a short position.
    """
    if position.is_put:
        return (current_price - position.strike) / position.strike * 100
    return (position.strike - current_price) / position.strike * 100


class WatchlistScorer:
    """
    Score option positions and build the priority watchlist.

    Example:
        ```python
        scorer = WatchlistScorer()
        watchlist = scorer.score(positions, PriceTable(quotes))
        for item in watchlist:
            print(item.position.underlying, item.reason_label)
        ```
    """

    def __init__(
        self,
        rules: Optional[Sequence[ScoringRule]] = None,
        limit: int = DEFAULT_WATCHLIST_SIZE,
        fallback_markup: float = DEFAULT_FALLBACK_MARKUP,
    ):
        """
        Initialize scorer.

        Args:
            rules: Rules to register (default: the four standard rules)
            limit: Maximum watchlist size
            fallback_markup: strike multiplier used when no quote exists

        Raises:
            ValueError: If limit < 1 or fallback_markup <= 0
        """
        if limit < 1:
            raise ValueError(f"Watchlist limit must be >= 1, got {limit}")
        if fallback_markup <= 0:
            raise ValueError(f"fallback_markup must be > 0, got {fallback_markup}")

        self.limit = limit
        self.fallback_markup = fallback_markup
        self._rules: list[ScoringRule] = []

        for rule in default_rules() if rules is None else rules:
            self.register_rule(rule)

    def register_rule(self, rule: ScoringRule) -> None:
        """
        Register a rule, replacing any rule with the same name.

        Args:
            rule: Rule implementing the ScoringRule protocol
        """
        self._rules = [r for r in self._rules if r.name != rule.name]
        self._rules.append(rule)
        self._rules.sort(key=lambda r: r.priority)
        logger.debug(f"Registered watchlist rule: {rule.name} (priority {rule.priority})")

    @property
    def rule_names(self) -> list[str]:
        """Registered rule names in evaluation order."""
        return [rule.name for rule in self._rules]

    def evaluate(
        self,
        position: OptionPosition,
        price_lookup: PriceLookup,
        as_of: Optional[date] = None,
    ) -> Optional[PriorityOption]:
        """
        Score a single position.

        Args:
            position: Option position
            price_lookup: underlying -> price (None when unknown)
            as_of: Reference date for DTE (default: today)

        Returns:
            PriorityOption if a rule matched, None otherwise
        """
        current_price = resolve_price(position, price_lookup, self.fallback_markup)
        context = ScoringContext(
            position=position,
            current_price=current_price,
            distance_to_strike=distance_to_strike(position, current_price),
            dte=position.days_to_expiry(as_of),
        )

        for rule in self._rules:
            match = rule.evaluate(context)
            if match is not None:
                return PriorityOption(
                    position=position,
                    current_price=current_price,
                    distance_to_strike=context.distance_to_strike,
                    distance_to_strike_abs=abs(current_price - position.strike),
                    priority_score=match.score,
                    reason=match.reason,
                    dte=context.dte,
                )
        return None

    def score(
        self,
        positions: Iterable[OptionPosition],
        price_lookup: PriceLookup,
        as_of: Optional[date] = None,
    ) -> list[PriorityOption]:
        """
        Build the watchlist.

        Args:
            positions: Puts and calls combined, in display order
            price_lookup: underlying -> price (None when unknown)
            as_of: Reference date for DTE (default: today)

        Returns:
            Up to `limit` entries, sorted by priority_score descending
        """
        scored = [
            item
            for item in (self.evaluate(p, price_lookup, as_of) for p in positions)
            if item is not None
        ]
        # sorted() is stable: ties keep input order
        ranked = sorted(scored, key=lambda item: item.priority_score, reverse=True)

        logger.debug(f"Watchlist: {len(scored)} flagged, keeping top {min(len(ranked), self.limit)}")
        return ranked[: self.limit]


def build_watchlist(
    positions: Iterable[OptionPosition],
    price_lookup: PriceLookup,
    limit: int = DEFAULT_WATCHLIST_SIZE,
    as_of: Optional[date] = None,
) -> list[PriorityOption]:
    """Score positions with the default rules."""
    return WatchlistScorer(limit=limit).score(positions, price_lookup, as_of=as_of)


def summarize_watchlist(items: Iterable[PriorityOption]) -> WatchlistSummary:
    """
    Count watchlist entries per reason and total their capital at risk.

    Args:
        items: Watchlist entries

    Returns:
        WatchlistSummary
    """
    counts = {reason: 0 for reason in PriorityReason}
    total_risk = 0.0
    for item in items:
        counts[item.reason] += 1
        total_risk += item.position.capital_at_risk

    return WatchlistSummary(
        itm=counts[PriorityReason.ITM],
        high_delta=counts[PriorityReason.HIGH_DELTA],
        near_strike=counts[PriorityReason.NEAR_STRIKE],
        expiring_soon=counts[PriorityReason.EXPIRING_SOON],
        total_capital_at_risk=total_risk,
    )
