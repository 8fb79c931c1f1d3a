"""
Tests for WatchlistScorer

Rule precedence, ranking, size limit, fallback prices and the summary.
"""

import pytest

from icc.market import PriceTable
from icc.models import PriorityReason, PutCall
from icc.watchlist import (
    HighDeltaRule,
    WatchlistScorer,
    build_watchlist,
    distance_to_strike,
    summarize_watchlist,
)
from icc.watchlist.rules import RuleMatch


class TestDistanceToStrike:
    def test_put(self, make_option):
        assert distance_to_strike(make_option(strike=150.0), 145.0) == pytest.approx(-10 / 3)

    def test_call(self, make_option):
        call = make_option(strike=200.0, put_call=PutCall.CALL)

        assert distance_to_strike(call, 180.0) == pytest.approx(10.0)


class TestWatchlistScorer:
    """Test scoring and ranking."""

    def test_itm_put(self, make_option, as_of):
        put = make_option(underlying="AAPL", strike=150.0, delta=-0.4)

        item = WatchlistScorer().evaluate(put, PriceTable({"AAPL": 145.0}), as_of=as_of)

        assert item.reason == PriorityReason.ITM
        assert item.priority_score == pytest.approx(106.67, abs=0.01)
        assert item.current_price == 145.0
        assert item.distance_to_strike_abs == pytest.approx(5.0)
        assert item.dte == 30

    def test_quiet_call_is_excluded(self, make_option, as_of):
        call = make_option(underlying="MSFT", strike=200.0, put_call=PutCall.CALL, delta=0.1, dte=4)

        assert WatchlistScorer().evaluate(call, PriceTable({"MSFT": 180.0}), as_of=as_of) is None

    def test_itm_takes_precedence_over_high_delta(self, make_option, as_of):
        put = make_option(strike=150.0, delta=-0.9)

        item = WatchlistScorer().evaluate(put, PriceTable({"AAPL": 149.0}), as_of=as_of)

        assert item.reason == PriorityReason.ITM

    def test_missing_price_uses_fallback(self, make_option, as_of):
        put = make_option(underlying="ZZZ", strike=100.0, delta=-0.5)

        item = WatchlistScorer().evaluate(put, PriceTable(), as_of=as_of)

        assert item.current_price == pytest.approx(105.0)
        assert item.reason == PriorityReason.HIGH_DELTA

    def test_custom_fallback_markup(self, make_option, as_of):
        put = make_option(underlying="ZZZ", strike=100.0)

        item = WatchlistScorer(fallback_markup=1.02).evaluate(put, PriceTable(), as_of=as_of)

        assert item.current_price == pytest.approx(102.0)
        assert item.reason == PriorityReason.NEAR_STRIKE

    def test_limit_and_order(self, make_option, as_of):
        positions = [make_option(strike=150.0 + i, delta=-0.5) for i in range(12)]

        watchlist = WatchlistScorer().score(positions, PriceTable({"AAPL": 145.0}), as_of=as_of)

        assert len(watchlist) == 8
        scores = [item.priority_score for item in watchlist]
        assert scores == sorted(scores, reverse=True)
        # deepest ITM first
        assert watchlist[0].position.strike == 161.0

    def test_ties_keep_input_order(self, make_option, as_of):
        positions = [make_option(strike=100.0, delta=-0.5) for _ in range(3)]

        watchlist = WatchlistScorer().score(positions, PriceTable({"AAPL": 120.0}), as_of=as_of)

        assert [item.position.id for item in watchlist] == [p.id for p in positions]

    def test_empty_input(self, as_of):
        assert WatchlistScorer().score([], PriceTable(), as_of=as_of) == []

    @pytest.mark.parametrize("kwargs", [{"limit": 0}, {"fallback_markup": 0.0}])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ValueError):
            WatchlistScorer(**kwargs)

    def test_register_rule_replaces_by_name(self):
        scorer = WatchlistScorer()
        scorer.register_rule(HighDeltaRule(delta_threshold=0.5))

        assert scorer.rule_names == ["itm", "high_delta", "near_strike", "expiring_soon"]

    def test_custom_rule(self, make_option, as_of):
        class AlwaysRule:
            priority = 0
            name = "always"

            def evaluate(self, context):
                return RuleMatch(score=1.0, reason=PriorityReason.EXPIRING_SOON)

        scorer = WatchlistScorer(rules=[AlwaysRule()])
        item = scorer.evaluate(make_option(), PriceTable(), as_of=as_of)

        assert scorer.rule_names == ["always"]
        assert item.priority_score == 1.0


class TestBuildWatchlist:
    def test_build_watchlist_limit(self, make_option, as_of):
        positions = [make_option(strike=150.0, delta=-0.5) for _ in range(5)]

        assert len(build_watchlist(positions, PriceTable({"AAPL": 145.0}), limit=3, as_of=as_of)) == 3

    def test_summary(self, make_option, as_of):
        positions = [
            make_option(strike=150.0, capital_at_risk=1000.0),
            make_option(strike=100.0, delta=-0.5, capital_at_risk=2000.0),
            make_option(strike=140.0, capital_at_risk=4000.0),
        ]
        watchlist = build_watchlist(positions, PriceTable({"AAPL": 145.0}), as_of=as_of)

        summary = summarize_watchlist(watchlist)

        assert summary.itm == 1
        assert summary.high_delta == 1
        assert summary.near_strike == 1
        assert summary.expiring_soon == 0
        assert summary.total_capital_at_risk == pytest.approx(7000.0)

    def test_reason_labels(self, make_option, as_of):
        put = make_option(strike=150.0)
        item = build_watchlist([put], PriceTable({"AAPL": 145.0}), as_of=as_of)[0]

        assert item.reason_label == "ITM by 3.3%"
