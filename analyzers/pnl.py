"""P&L reconciliation — three independent P&L figures from mismatched feeds.

The position feed, the activity feed and the cash balance are fetched
separately and disagree by construction: a winning position disappears from
/positions the moment it is redeemed. Each figure below has its own
accounting identity and is kept separate on purpose; callers pick the one
they want to show.

1. Position-snapshot P&L: sum of cashPnl over the current positions.
   Cheap, but blind to anything already redeemed.
2. Today P&L: (sold + redeemed - bought) over activity since UTC midnight.
3. True all-time P&L: sold + redeemed + held value - bought, all time.
   Redemptions are read from the activity ledger, so a redeemed winner is
   never lost.
"""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Iterable, Optional, Set

from storage.models import Activity, LedgerMap, MarketLedger, Position


def today_start_ts(now_ts: float) -> int:
    """UTC midnight at or before now_ts, in whole seconds."""
    now = datetime.fromtimestamp(now_ts, tz=timezone.utc)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp())


def build_market_ledgers(activity: Iterable[Activity],
                         since_ts: Optional[int] = None) -> LedgerMap:
    """Accumulate bought / sold / redeemed cash per condition_id.

    Only TRADE and REDEEM records move a ledger; other activity types are
    ignored. With since_ts, records before it are skipped (the boundary
    second itself is included).
    """
    ledgers: LedgerMap = defaultdict(MarketLedger)
    for a in activity:
        if since_ts is not None and a.timestamp < since_ts:
            continue
        if a.type == "TRADE":
            ledger = ledgers[a.condition_id]
            if a.side == "SELL":
                ledger.sold += a.usdc_size
            else:
                ledger.bought += a.usdc_size
        elif a.type == "REDEEM":
            ledgers[a.condition_id].redeemed += a.usdc_size
    return dict(ledgers)


def _ledger_totals(ledgers: LedgerMap) -> MarketLedger:
    total = MarketLedger()
    for ledger in ledgers.values():
        total.bought += ledger.bought
        total.sold += ledger.sold
        total.redeemed += ledger.redeemed
    return total


def redeemed_markets(ledgers: LedgerMap) -> Set[str]:
    """Condition ids with a redemption on record."""
    return {cid for cid, ledger in ledgers.items() if ledger.redeemed > 0}


def held_positions(positions: Iterable[Position],
                   ledgers: LedgerMap) -> list:
    """Positions whose market has not been redeemed yet.

    Redeeming cashes every outcome of a condition at once, so a snapshot
    position for an already-redeemed market is stale and holds no value.
    """
    cashed_out = redeemed_markets(ledgers)
    return [p for p in positions if p.condition_id not in cashed_out]


# ── 1. Position snapshot ──

def snapshot_pnl(positions: Iterable[Position]) -> float:
    """Sum of cashPnl as reported by the position feed."""
    return sum(p.cash_pnl for p in positions)


# ── 2. Today (activity-based) ──

def today_pnl(activity: Iterable[Activity], now_ts: float) -> float:
    """Realized cash flow since UTC midnight: sold + redeemed - bought.

    Positions that did not trade today contribute nothing, whatever their
    unrealized value.
    """
    ledgers = build_market_ledgers(activity, since_ts=today_start_ts(now_ts))
    return _ledger_totals(ledgers).net


def today_pnl_with_unrealized(activity: Iterable[Activity],
                              positions: Iterable[Position],
                              now_ts: float) -> float:
    """Today's realized P&L plus the unrealized cashPnl of open stakes traded today.

    Only markets with a TRADE since UTC midnight that are still open add
    their cashPnl; stakes that did not trade today add nothing.
    """
    since = today_start_ts(now_ts)
    activity = list(activity)
    ledgers = build_market_ledgers(activity, since_ts=since)
    traded_today = {a.condition_id for a in activity
                    if a.is_trade and a.timestamp >= since}
    unrealized = sum(p.cash_pnl for p in positions
                     if p.is_open and p.condition_id in traded_today)
    return _ledger_totals(ledgers).net + unrealized


# ── 3. True all-time ──

def true_all_time_pnl(activity: Iterable[Activity],
                      positions: Iterable[Position]) -> float:
    """sold + redeemed + current value of held positions - bought, all time."""
    ledgers = build_market_ledgers(activity)
    totals = _ledger_totals(ledgers)
    held_value = sum(p.current_value for p in held_positions(positions, ledgers))
    return totals.sold + totals.redeemed + held_value - totals.bought
