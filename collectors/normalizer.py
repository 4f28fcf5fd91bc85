"""Coerce raw data-API payloads into Position / Trade / Activity models.

The data API returns camelCase records whose numeric fields are sometimes
strings, sometimes numbers and sometimes missing. Every parser here always
returns a value: unusable numbers become 0, flags become False, strings fall
back to a documented default.
"""

import math
from typing import Any, List, Optional

import pandas as pd

from storage.models import Activity, Position, Trade


def to_float(value: Any) -> float:
    """Parse a number, returning 0.0 for missing, non-numeric, NaN or inf."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        num = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return num if math.isfinite(num) else 0.0


def to_int(value: Any) -> int:
    return int(to_float(value))


def to_bool(value: Any) -> bool:
    return value is True or value == "true"


def to_str(value: Any, default: str = "") -> str:
    if value is None or value == "":
        return default
    return value if isinstance(value, str) else str(value)


def to_timestamp(value: Any) -> int:
    """Unix seconds from an int, a numeric string or an ISO datetime string."""
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            num = float(text)
        except ValueError:
            ts = pd.to_datetime(text, utc=True, errors="coerce")
            if pd.isna(ts):
                return 0
            return int(ts.timestamp())
        return int(num) if math.isfinite(num) else 0
    return to_int(value)


def _as_dict(raw: Any) -> dict:
    return raw if isinstance(raw, dict) else {}


def parse_position(raw: Any) -> Position:
    """Convert a /positions record to a Position (no size filtering)."""
    raw = _as_dict(raw)
    return Position(
        asset=to_str(raw.get("asset")),
        condition_id=to_str(raw.get("conditionId")),
        title=to_str(raw.get("title")) or to_str(raw.get("market"), "Unknown"),
        slug=to_str(raw.get("slug")),
        outcome=to_str(raw.get("outcome")),
        outcome_index=to_int(raw.get("outcomeIndex")),
        size=to_float(raw.get("size")),
        avg_price=to_float(raw.get("avgPrice")),
        cur_price=to_float(raw.get("curPrice")),
        initial_value=to_float(raw.get("initialValue")),
        current_value=to_float(raw.get("currentValue")),
        cash_pnl=to_float(raw.get("cashPnl")),
        percent_pnl=to_float(raw.get("percentPnl")),
        realized_pnl=to_float(raw.get("realizedPnl")),
        redeemable=to_bool(raw.get("redeemable")),
        end_date=to_str(raw.get("endDate")),
    )


def _trade_fields(raw: dict) -> dict:
    return dict(
        timestamp=to_timestamp(raw.get("timestamp")),
        title=to_str(raw.get("title")),
        slug=to_str(raw.get("slug")),
        side="SELL" if raw.get("side") == "SELL" else "BUY",
        outcome=to_str(raw.get("outcome")),
        price=to_float(raw.get("price")),
        size=to_float(raw.get("size")),
        usdc_size=to_float(raw.get("usdcSize")),
        condition_id=to_str(raw.get("conditionId")),
        transaction_hash=to_str(raw.get("transactionHash")),
        outcome_index=to_int(raw.get("outcomeIndex")),
        asset=to_str(raw.get("asset")),
    )


def parse_trade(raw: Any) -> Trade:
    """Convert a TRADE /activity record to a Trade."""
    return Trade(**_trade_fields(_as_dict(raw)))


def parse_activity(raw: Any) -> Activity:
    """Convert any /activity record; only TRADE records keep a side."""
    raw = _as_dict(raw)
    fields = _trade_fields(raw)
    activity_type = to_str(raw.get("type"), "TRADE").upper()
    if activity_type != "TRADE":
        fields["side"] = ""
    return Activity(type=activity_type, **fields)


def _records(payload: Any) -> List[Any]:
    # API errors come back as a dict, not a list
    return payload if isinstance(payload, list) else []


def normalize_positions(payload: Any) -> List[Position]:
    """Parse a /positions payload, keeping only stakes with size > 0."""
    positions = (parse_position(raw) for raw in _records(payload))
    return [p for p in positions if p.size > 0]


def normalize_trades(payload: Any) -> List[Trade]:
    return [parse_trade(raw) for raw in _records(payload)]


def normalize_activity(payload: Any,
                       types: Optional[List[str]] = None) -> List[Activity]:
    """Parse an /activity payload, optionally keeping only the given types."""
    records = [parse_activity(raw) for raw in _records(payload)]
    if types:
        wanted = {t.upper() for t in types}
        records = [a for a in records if a.type in wanted]
    return records
