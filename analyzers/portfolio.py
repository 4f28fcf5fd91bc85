"""Dashboard aggregation — the engine entry point.

Turns one snapshot of positions, trades, activity and cash balance into a
single DashboardData record. Pure: no I/O, nothing kept between calls.
"""

import time
from datetime import datetime, timezone
from typing import List, Optional

from config import EngineConfig
from analyzers.arbitrage import detect_arb_sets
from analyzers.pnl import (build_market_ledgers, snapshot_pnl, today_pnl,
                           today_pnl_with_unrealized, today_start_ts,
                           true_all_time_pnl)
from analyzers.win_loss import ledger_win_loss, snapshot_win_loss
from storage.models import Activity, DashboardData, Position, Trade


def sort_positions(positions: List[Position]) -> List[Position]:
    """Largest current value first."""
    return sorted(positions, key=lambda p: p.current_value, reverse=True)


def sort_trades(trades: List[Trade]) -> List[Trade]:
    """Newest first."""
    return sorted(trades, key=lambda t: t.timestamp, reverse=True)


def build_dashboard(cfg: EngineConfig,
                    positions: List[Position],
                    trades: List[Trade],
                    activity: List[Activity],
                    cash_balance: float,
                    now_ts: Optional[float] = None) -> DashboardData:
    """Compute every dashboard metric from one consistent set of inputs.

    Args:
        cfg: Engine settings (epsilon, arb window, wallet).
        positions: Normalized positions (size > 0).
        trades: Recent TRADE fills, used for the trade list and arb sets.
        activity: Full TRADE + REDEEM history, used for the ledgers.
        cash_balance: USDC cash on hand.
        now_ts: Reference time for "today"; defaults to the current time.

    Returns DashboardData.
    """
    if now_ts is None:
        now_ts = time.time()

    position_value = sum(p.current_value for p in positions)

    all_time = build_market_ledgers(activity)
    today = build_market_ledgers(activity, since_ts=today_start_ts(now_ts))

    open_positions = [p for p in positions if p.is_open]
    closed_positions = [p for p in positions if not p.is_open]

    return DashboardData(
        wallet_address=cfg.wallet_address,
        usdc_balance=cash_balance,
        position_value=position_value,
        portfolio_value=cash_balance + position_value,
        total_pnl=snapshot_pnl(positions),
        today_pnl=today_pnl(activity, now_ts),
        today_pnl_with_unrealized=today_pnl_with_unrealized(
            activity, positions, now_ts),
        true_pnl=true_all_time_pnl(activity, positions),
        win_loss=ledger_win_loss(all_time, positions, cfg.epsilon),
        today_win_loss=ledger_win_loss(today, positions, cfg.epsilon),
        snapshot_win_loss=snapshot_win_loss(positions),
        total_positions=len(positions),
        open_positions=sort_positions(open_positions),
        closed_positions=sort_positions(closed_positions),
        trades=sort_trades(trades),
        arb_stats=detect_arb_sets(trades, cfg.arb_window_seconds,
                                  cfg.arb_min_legs),
        last_updated=datetime.fromtimestamp(
            now_ts, tz=timezone.utc).isoformat(),
    )
