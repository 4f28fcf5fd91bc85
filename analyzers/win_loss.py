"""Win/loss classification per market, from the activity ledger or the snapshot."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

import config
from analyzers.pnl import held_positions
from storage.models import LedgerMap, Position, WinLossStats

WIN = "win"
LOSS = "loss"
UNDECIDED = "undecided"

FLOAT_SLACK = 1e-9


def win_rate(wins: int, losses: int) -> float:
    """Percentage of decided markets that were wins; 0 when none are decided."""
    decided = wins + losses
    return wins / decided * 100 if decided > 0 else 0.0


def classify_net(net: float, epsilon: float = config.PNL_EPSILON) -> str:
    """Sign of a net cash flow, with |net| < epsilon treated as break-even.

    The bound is widened by FLOAT_SLACK so a net that is epsilon up to
    summation error (1.005 - 1.0) still lands on the boundary.
    """
    if net >= epsilon - FLOAT_SLACK:
        return WIN
    if net <= -epsilon + FLOAT_SLACK:
        return LOSS
    return UNDECIDED


def classify_markets(ledgers: LedgerMap,
                     positions: Iterable[Position],
                     epsilon: float = config.PNL_EPSILON) -> Dict[str, str]:
    """Classify every market in the ledger as win, loss or undecided.

    A market with an open position is undecided regardless of its running
    net. Resolved positions still waiting to be redeemed count at their
    current value (the payout for a winner, zero for a loser).
    """
    by_market: Dict[str, List[Position]] = defaultdict(list)
    for p in held_positions(positions, ledgers):
        by_market[p.condition_id].append(p)

    outcomes = {}
    for cid, ledger in ledgers.items():
        market_positions = by_market.get(cid, [])
        if any(p.is_open for p in market_positions):
            outcomes[cid] = UNDECIDED
            continue
        pending_payout = sum(p.current_value for p in market_positions)
        outcomes[cid] = classify_net(ledger.net + pending_payout, epsilon)
    return outcomes


def classify_position(position: Position) -> Optional[str]:
    """Snapshot verdict for one position; None while it is unresolved.

    A price of 0 is a loss even when redeemable: losing outcomes are
    flagged redeemable too, with nothing to pay out.
    """
    if position.cur_price == 0:
        return LOSS
    if position.redeemable or position.cur_price == 1:
        return WIN
    return None


def summarize_outcomes(outcomes: Iterable[Optional[str]]) -> WinLossStats:
    wins = losses = undecided = 0
    for outcome in outcomes:
        if outcome == WIN:
            wins += 1
        elif outcome == LOSS:
            losses += 1
        elif outcome == UNDECIDED:
            undecided += 1
    return WinLossStats(wins=wins, losses=losses, undecided=undecided,
                        win_rate=win_rate(wins, losses))


def ledger_win_loss(ledgers: LedgerMap,
                    positions: Iterable[Position],
                    epsilon: float = config.PNL_EPSILON) -> WinLossStats:
    """Win/loss counts over the markets in a (windowed) ledger."""
    return summarize_outcomes(classify_markets(ledgers, positions, epsilon).values())


def snapshot_win_loss(positions: Iterable[Position]) -> WinLossStats:
    """Win/loss counts over resolved positions in the snapshot, per position."""
    return summarize_outcomes(classify_position(p) for p in positions
                              if p.is_resolved)
