"""
Watchlist Scoring Rules

Each rule inspects one option position against the current underlying price
and either scores it or passes. Rules are evaluated in priority order and the
first match wins, so a position carries exactly one reason.

Rules:
- InTheMoney (Priority 1): ITM → 100 + 2 × |distance%|
- HighDelta (Priority 2): |delta| > 0.35 → 70 + 50 × |delta|
- NearStrike (Priority 3): |distance%| < 5 → 50 + 10 × (5 − |distance%|)
- ExpiringSoon (Priority 4): DTE ≤ 7 AND |delta| > 0.2 → 40 + 5 × (7 − DTE)

Missing delta counts as 0 in every comparison.
"""

from dataclasses import dataclass
from typing import Optional

from icc.models.derived import PriorityReason
from icc.models.positions import OptionPosition


@dataclass(frozen=True, slots=True)
class ScoringContext:
    """
    Inputs a rule sees for one position.

    Attributes:
        position: Option position being scored
        current_price: Underlying price (quoted or fallback)
        distance_to_strike: Signed % distance; PUT (price − strike) / strike,
            CALL (strike − price) / strike
        dte: Days to expiry
    """

    position: OptionPosition
    current_price: float
    distance_to_strike: float
    dte: int

    @property
    def abs_delta(self) -> float:
        return abs(self.position.delta or 0.0)

    @property
    def abs_distance(self) -> float:
        return abs(self.distance_to_strike)

    @property
    def is_itm(self) -> bool:
        return self.position.is_itm(self.current_price)


@dataclass(frozen=True, slots=True)
class RuleMatch:
    """A rule's verdict: score and reason tag."""

    score: float
    reason: PriorityReason


class InTheMoneyRule:
    """
    In-the-money rule (Priority 1).

    PUT is ITM when price < strike, CALL when price > strike. Deeper ITM
    scores higher.
    """

    priority = 1
    name = "itm"

    def __init__(self, base_score: float = 100.0, depth_weight: float = 2.0):
        """Initialize ITM rule."""
        self.base_score = base_score
        self.depth_weight = depth_weight

    def evaluate(self, context: ScoringContext) -> Optional[RuleMatch]:
        if not context.is_itm:
            return None
        return RuleMatch(
            score=self.base_score + self.depth_weight * context.abs_distance,
            reason=PriorityReason.ITM,
        )


class HighDeltaRule:
    """High delta rule (Priority 2): |delta| above threshold."""

    priority = 2
    name = "high_delta"

    def __init__(
        self,
        delta_threshold: float = 0.35,
        base_score: float = 70.0,
        delta_weight: float = 50.0,
    ):
        """Initialize high delta rule."""
        self.delta_threshold = delta_threshold
        self.base_score = base_score
        self.delta_weight = delta_weight

    def evaluate(self, context: ScoringContext) -> Optional[RuleMatch]:
        if context.abs_delta <= self.delta_threshold:
            return None
        return RuleMatch(
            score=self.base_score + self.delta_weight * context.abs_delta,
            reason=PriorityReason.HIGH_DELTA,
        )


class NearStrikeRule:
    """
    Near strike rule (Priority 3).

    Scores positions within distance_threshold percent of the strike; the
    closer, the higher.
    """

    priority = 3
    name = "near_strike"

    def __init__(
        self,
        distance_threshold: float = 5.0,
        base_score: float = 50.0,
        proximity_weight: float = 10.0,
    ):
        """Initialize near strike rule."""
        self.distance_threshold = distance_threshold
        self.base_score = base_score
        self.proximity_weight = proximity_weight

    def evaluate(self, context: ScoringContext) -> Optional[RuleMatch]:
        if context.abs_distance >= self.distance_threshold:
            return None
        return RuleMatch(
            score=self.base_score + self.proximity_weight * (self.distance_threshold - context.abs_distance),
            reason=PriorityReason.NEAR_STRIKE,
        )


class ExpiringSoonRule:
    """Expiring soon rule (Priority 4): short DTE with moderate delta."""

    priority = 4
    name = "expiring_soon"

    def __init__(
        self,
        dte_threshold: int = 7,
        delta_threshold: float = 0.2,
        base_score: float = 40.0,
        day_weight: float = 5.0,
    ):
        """Initialize expiring soon rule."""
        self.dte_threshold = dte_threshold
        self.delta_threshold = delta_threshold
        self.base_score = base_score
        self.day_weight = day_weight

    def evaluate(self, context: ScoringContext) -> Optional[RuleMatch]:
        if context.dte > self.dte_threshold or context.abs_delta <= self.delta_threshold:
            return None
        return RuleMatch(
            score=self.base_score + self.day_weight * (self.dte_threshold - context.dte),
            reason=PriorityReason.EXPIRING_SOON,
        )


def default_rules() -> list:
    """The four watchlist rules with default thresholds."""
    return [InTheMoneyRule(), HighDeltaRule(), NearStrikeRule(), ExpiringSoonRule()]
