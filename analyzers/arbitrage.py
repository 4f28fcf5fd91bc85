"""Arb-set detection — clusters of near-simultaneous buys across distinct markets.

A hedged wager shows up in the fill history as a burst of BUY fills on
different markets within a couple of minutes. Repeated fills on the same
market are one leg, not a hedge.
"""

from typing import Iterable, List

import config
from storage.models import ArbSet, ArbStats, Trade


def detect_arb_sets(trades: Iterable[Trade],
                    window_seconds: int = config.ARB_WINDOW_SECONDS,
                    min_legs: int = config.ARB_MIN_LEGS) -> ArbStats:
    """Single left-to-right pass over buys sorted by timestamp.

    From each start buy i, absorb later buys within window_seconds of it,
    admitting a buy only if its condition_id is new to the cluster. A
    cluster with at least min_legs legs is emitted and the scan resumes
    after every buy looked at in the window (admitted or not). A smaller
    cluster is dropped and the scan retries from i + 1.
    """
    # sorted() is stable: equal timestamps keep feed order
    buys = sorted((t for t in trades if t.side == "BUY"),
                  key=lambda t: t.timestamp)
    n = len(buys)

    sets: List[ArbSet] = []
    i = 0
    while i < n:
        start = buys[i]
        cluster = [start]
        seen = {start.condition_id}

        j = i + 1
        while j < n and buys[j].timestamp - start.timestamp <= window_seconds:
            if buys[j].condition_id not in seen:
                cluster.append(buys[j])
                seen.add(buys[j].condition_id)
            j += 1

        if len(cluster) >= min_legs:
            sets.append(ArbSet(
                timestamp=start.timestamp,
                legs=len(cluster),
                total_cost=sum(t.usdc_size for t in cluster),
                outcomes=[t.outcome for t in cluster],
            ))
            i = j
        else:
            i += 1

    return ArbStats(
        total_sets=len(sets),
        total_legs=sum(s.legs for s in sets),
        total_spent=sum(s.total_cost for s in sets),
        sets=sets,
    )
