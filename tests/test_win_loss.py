"""Tests for the win/loss classifier."""

import pytest

from analyzers.pnl import build_market_ledgers
from analyzers.win_loss import (LOSS, UNDECIDED, WIN, classify_markets,
                                classify_net, classify_position,
                                ledger_win_loss, snapshot_win_loss, win_rate)
from factories import buy, make_position, redeem, sell


class TestWinRate:

    def test_zero_denominator_is_zero(self):
        assert win_rate(0, 0) == 0.0

    def test_percentage(self):
        assert win_rate(3, 1) == 75.0
        assert win_rate(0, 4) == 0.0


class TestEpsilon:
    """Half-cent tolerance around break-even."""

    @pytest.mark.parametrize("net,expected", [
        (0.005, WIN),
        (0.0049, UNDECIDED),
        (0.0, UNDECIDED),
        (-0.0049, UNDECIDED),
        (-0.005, LOSS),
        (12.0, WIN),
        (-3.0, LOSS),
    ])
    def test_classify_net(self, net, expected):
        assert classify_net(net) == expected

    def test_ledger_boundary(self):
        ledgers = build_market_ledgers([
            redeem(100, "exact", 0.005),
            redeem(100, "under", 0.0049),
        ])
        outcomes = classify_markets(ledgers, [])
        assert outcomes["exact"] == WIN
        assert outcomes["under"] == UNDECIDED

    def test_summed_half_cent_is_a_win(self):
        # 1.005 - 1.0 == 0.004999999999999893 in floats
        ledgers = build_market_ledgers([
            buy(100, "gain", 1.0), sell(200, "gain", 1.005),
            buy(100, "drop", 1.005), sell(200, "drop", 1.0),
        ])
        outcomes = classify_markets(ledgers, [])
        assert outcomes["gain"] == WIN
        assert outcomes["drop"] == LOSS

    def test_custom_epsilon(self):
        assert classify_net(0.02, epsilon=0.05) == UNDECIDED


class TestLedgerClassification:
    """Per-market verdicts from net cash flow."""

    def test_open_position_makes_market_undecided(self):
        ledgers = build_market_ledgers([buy(1, "a", 10.0), sell(2, "a", 20.0)])
        positions = [make_position("a", size=5.0, cur_price=0.5)]
        assert classify_markets(ledgers, positions) == {"a": UNDECIDED}

    def test_lost_market(self):
        ledgers = build_market_ledgers([buy(1, "a", 10.0)])
        positions = [make_position("a", size=20.0, cur_price=0.0)]
        assert classify_markets(ledgers, positions) == {"a": LOSS}

    def test_redeemed_market_is_win(self):
        ledgers = build_market_ledgers([buy(1, "a", 10.0), redeem(2, "a", 20.0)])
        assert classify_markets(ledgers, []) == {"a": WIN}

    def test_unredeemed_winner_counts_pending_payout(self):
        ledgers = build_market_ledgers([buy(1, "a", 10.0)])
        positions = [make_position("a", size=20.0, cur_price=1.0,
                                   redeemable=True)]
        assert classify_markets(ledgers, positions) == {"a": WIN}

    def test_only_ledger_markets_are_classified(self):
        ledgers = build_market_ledgers([buy(1, "a", 10.0)])
        positions = [make_position("other", cur_price=1.0, redeemable=True)]
        assert set(classify_markets(ledgers, positions)) == {"a"}

    def test_summary_counts(self):
        ledgers = build_market_ledgers([
            buy(1, "w1", 1.0), redeem(2, "w1", 2.0),
            buy(1, "w2", 1.0), sell(2, "w2", 1.5),
            buy(1, "l1", 1.0),
            buy(1, "flat", 1.0), sell(2, "flat", 1.0),
        ])
        stats = ledger_win_loss(ledgers, [])
        assert stats.wins == 2
        assert stats.losses == 1
        assert stats.undecided == 1
        assert stats.win_rate == pytest.approx(200 / 3)

    def test_empty_ledger(self):
        stats = ledger_win_loss({}, [])
        assert (stats.wins, stats.losses, stats.undecided) == (0, 0, 0)
        assert stats.win_rate == 0.0


class TestSnapshotClassification:
    """Per-position verdicts from curPrice / redeemable."""

    def test_classify_position(self):
        assert classify_position(make_position(cur_price=1.0)) == WIN
        assert classify_position(make_position(cur_price=0.3, redeemable=True)) == WIN
        assert classify_position(make_position(cur_price=0.0)) == LOSS
        assert classify_position(make_position(cur_price=0.0, redeemable=True)) == LOSS
        assert classify_position(make_position(cur_price=0.4)) is None

    def test_snapshot_counts_only_resolved(self):
        positions = [
            make_position("a", cur_price=1.0),
            make_position("b", cur_price=0.2, redeemable=True),
            make_position("c", cur_price=0.0),
            make_position("d", cur_price=0.5),
        ]
        stats = snapshot_win_loss(positions)
        assert stats.wins == 2
        assert stats.losses == 1
        assert stats.win_rate == pytest.approx(200 / 3)

    def test_snapshot_empty(self):
        assert snapshot_win_loss([]).win_rate == 0.0


class TestPathsAgree:
    """Ledger and snapshot verdicts match when both are computable."""

    @pytest.mark.parametrize("activity,position", [
        # winner still waiting for redemption
        ([buy(1, "m", 6.0)],
         make_position("m", size=10.0, cur_price=1.0, redeemable=True)),
        # loser left in the feed at price 0
        ([buy(1, "m", 6.0)],
         make_position("m", size=10.0, cur_price=0.0)),
        # loser flagged redeemable with nothing to pay out
        ([buy(1, "m", 6.0)],
         make_position("m", size=10.0, cur_price=0.0, redeemable=True)),
        # winner resolved at 1 but not yet flagged redeemable
        ([buy(1, "m", 4.0), sell(2, "m", 1.0)],
         make_position("m", size=8.0, cur_price=1.0)),
    ])
    def test_agreement(self, activity, position):
        ledgers = build_market_ledgers(activity)
        assert classify_markets(ledgers, [position])["m"] == classify_position(position)
