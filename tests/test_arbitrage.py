"""Tests for arb-set detection."""

import pytest

from analyzers.arbitrage import detect_arb_sets
from factories import make_trade


def fills(*pairs, side="BUY"):
    """(timestamp, condition_id) pairs -> BUY trades costing 1 USDC each."""
    return [make_trade(ts, cid, side=side, outcome=cid) for ts, cid in pairs]


class TestClustering:
    """Clusters of buys on distinct markets within the window."""

    def test_three_markets_within_window(self):
        trades = fills((0, "A"), (10, "B"), (20, "C"), (500, "D"))
        stats = detect_arb_sets(trades)
        assert stats.total_sets == 1
        assert stats.total_legs == 3
        assert stats.sets[0].timestamp == 0
        assert stats.sets[0].outcomes == ["A", "B", "C"]

    def test_same_market_repeats_are_one_leg(self):
        trades = fills((0, "A"), (10, "A"), (20, "A"), (30, "A"))
        assert detect_arb_sets(trades).total_sets == 0

    def test_sells_are_ignored(self):
        trades = fills((0, "A"), (10, "B")) + fills((20, "C"), side="SELL")
        assert detect_arb_sets(trades).total_sets == 0

    def test_window_is_inclusive(self):
        assert detect_arb_sets(fills((0, "A"), (60, "B"), (120, "C"))).total_sets == 1
        assert detect_arb_sets(fills((0, "A"), (60, "B"), (121, "C"))).total_sets == 0

    def test_input_order_does_not_matter(self):
        trades = fills((20, "C"), (0, "A"), (10, "B"))
        stats = detect_arb_sets(trades)
        assert stats.total_sets == 1
        assert stats.sets[0].outcomes == ["A", "B", "C"]

    def test_custom_window_and_min_legs(self):
        trades = fills((0, "A"), (30, "B"))
        assert detect_arb_sets(trades, min_legs=2).total_sets == 1
        assert detect_arb_sets(trades, window_seconds=10, min_legs=2).total_sets == 0


class TestScanAdvance:
    """Where the scan resumes after a hit or a miss."""

    def test_resumes_past_whole_window_after_a_set(self):
        # the A at 100 sits inside the first window, so it cannot seed a new set
        trades = fills((0, "A"), (10, "B"), (20, "C"), (100, "A"),
                       (150, "D"), (160, "E"))
        stats = detect_arb_sets(trades)
        assert stats.total_sets == 1
        assert stats.sets[0].timestamp == 0

    def test_next_window_starts_after_scanned_buys(self):
        trades = fills((0, "A"), (10, "B"), (20, "C"),
                       (200, "D"), (210, "E"), (220, "F"))
        stats = detect_arb_sets(trades)
        assert [s.timestamp for s in stats.sets] == [0, 200]
        assert stats.total_legs == 6

    def test_retries_from_next_buy_after_a_miss(self):
        trades = fills((0, "A"), (100, "A"), (150, "B"), (200, "C"))
        stats = detect_arb_sets(trades)
        assert stats.total_sets == 1
        assert stats.sets[0].timestamp == 100
        assert stats.sets[0].outcomes == ["A", "B", "C"]

    def test_equal_timestamps_keep_feed_order(self):
        trades = fills((5, "X"), (5, "Y"), (5, "X"), (5, "Z"))
        stats = detect_arb_sets(trades)
        assert stats.total_sets == 1
        assert stats.sets[0].outcomes == ["X", "Y", "Z"]


class TestTotals:

    def test_empty(self):
        stats = detect_arb_sets([])
        assert stats.total_sets == 0
        assert stats.total_legs == 0
        assert stats.total_spent == 0
        assert stats.sets == []

    def test_total_spent_sums_admitted_legs(self):
        trades = [
            make_trade(0, "A", usdc_size=4.0),
            make_trade(5, "A", usdc_size=100.0),  # repeat, not a leg
            make_trade(10, "B", usdc_size=3.5),
            make_trade(15, "C", usdc_size=2.5),
        ]
        stats = detect_arb_sets(trades)
        assert stats.sets[0].legs == 3
        assert stats.sets[0].total_cost == pytest.approx(10.0)
        assert stats.total_spent == pytest.approx(10.0)
