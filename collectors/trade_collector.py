"""Collect trade and redemption activity for a wallet."""

from typing import List, Optional, Sequence, Set, Tuple

import requests
from tqdm import tqdm

import config
from collectors.api_client import RateLimitedClient
from collectors.normalizer import normalize_activity, normalize_trades, to_timestamp
from storage.models import Activity, Trade

LEDGER_TYPES = ("TRADE", "REDEEM")


def _activity_key(raw: dict) -> Tuple[str, str, str, str, str]:
    return (str(raw.get("transactionHash", "")), str(raw.get("asset", "")),
            str(raw.get("conditionId", "")), str(raw.get("type", "")),
            str(raw.get("side", "")))


def collect_activity(
    client: RateLimitedClient,
    wallet: str = config.WALLET_ADDRESS,
    activity_types: Sequence[str] = LEDGER_TYPES,
    start_ts: Optional[int] = None,
    end_ts: Optional[int] = None,
    limit: Optional[int] = None,
    sort_direction: str = "DESC",
) -> List[Activity]:
    """Fetch activity using backward timestamp-windowed pagination.

    The API returns newest-first and has a hard offset limit. We page
    offsets 0 -> MAX_OFFSET, then set end=oldest_timestamp to slide the
    window backward. Records repeated across windows are dropped.

    With limit, stops once that many records are collected. A failed fetch
    keeps whatever was collected before it.
    """
    base_url = f"{config.DATA_API_BASE}/activity"
    page_size = min(config.PAGE_SIZE, limit) if limit else config.PAGE_SIZE

    seen: Set[Tuple[str, str, str, str, str]] = set()
    raw_records: List[dict] = []
    window_end_ts = end_ts
    window_num = 0
    done = False

    pbar = tqdm(desc=f"Fetching {','.join(activity_types)}", unit=" records")

    while not done:
        window_num += 1
        offset = 0
        window_oldest_ts: Optional[int] = None
        window_exhausted = False

        while offset <= config.MAX_OFFSET:
            params = {
                "user": wallet,
                "type": ",".join(activity_types),
                "limit": page_size,
                "offset": offset,
                "sortBy": "TIMESTAMP",
                "sortDirection": sort_direction,
            }
            if window_end_ts is not None:
                params["end"] = window_end_ts
            if start_ts is not None:
                params["start"] = start_ts

            try:
                data = client.get(base_url, params=params)
            except requests.exceptions.RequestException as e:
                print(f"  Warning: activity fetch failed ({e}), "
                      f"keeping {len(raw_records)} records")
                done = True
                break

            if not isinstance(data, list):
                # API error dict — stop this window
                break

            for raw in data:
                if not isinstance(raw, dict):
                    continue
                key = _activity_key(raw)
                if key in seen:
                    continue
                seen.add(key)
                raw_records.append(raw)
                pbar.update(1)

                ts = to_timestamp(raw.get("timestamp"))
                if window_oldest_ts is None or ts < window_oldest_ts:
                    window_oldest_ts = ts

            if limit and len(raw_records) >= limit:
                done = True
                break

            if len(data) < page_size:
                window_exhausted = True
                break

            offset += page_size

        # Ascending order cannot slide an end bound backward
        if (done or window_exhausted or window_oldest_ts is None
                or sort_direction != "DESC"
                or window_oldest_ts == window_end_ts):
            break

        window_end_ts = window_oldest_ts

    pbar.close()
    if limit:
        raw_records = raw_records[:limit]

    activity = normalize_activity(raw_records, types=list(activity_types))
    print(f"  Collected {len(activity)} activity records "
          f"across {window_num} window(s)")
    return activity


def collect_trades(
    client: RateLimitedClient,
    wallet: str = config.WALLET_ADDRESS,
    limit: int = config.TRADE_LIMIT,
) -> List[Trade]:
    """Fetch the most recent TRADE fills, newest first."""
    url = f"{config.DATA_API_BASE}/activity"
    params = {
        "user": wallet,
        "type": "TRADE",
        "sortBy": "TIMESTAMP",
        "sortDirection": "DESC",
        "limit": limit,
    }
    try:
        data = client.get(url, params=params)
    except requests.exceptions.RequestException as e:
        print(f"  Warning: trades fetch failed ({e})")
        return []

    trades = normalize_trades(data)
    print(f"  Recent trades: {len(trades)}")
    return trades
