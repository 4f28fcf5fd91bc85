"""Daily realized cash-flow history from the activity ledger."""

from typing import Iterable

import numpy as np
import pandas as pd

from storage.models import Activity

DAILY_COLUMNS = ['bought', 'sold', 'redeemed', 'pnl', 'trades', 'cumulative_pnl']


def daily_cash_flow(activity: Iterable[Activity]) -> pd.DataFrame:
    """Per-UTC-day bought / sold / redeemed totals with a cumulative P&L curve.

    pnl = sold + redeemed - bought for the day. Only TRADE and REDEEM
    records move cash here, matching the market ledgers.
    """
    rows = [
        {'timestamp': a.timestamp, 'type': a.type, 'side': a.side,
         'usdc': a.usdc_size}
        for a in activity if a.type in ('TRADE', 'REDEEM')
    ]
    if not rows:
        return pd.DataFrame(columns=DAILY_COLUMNS,
                            index=pd.Index([], name='date'), dtype=float)

    df = pd.DataFrame(rows)
    df['date'] = pd.to_datetime(df['timestamp'], unit='s', utc=True).dt.date
    is_trade = df['type'] == 'TRADE'
    df['bought'] = np.where(is_trade & (df['side'] != 'SELL'), df['usdc'], 0.0)
    df['sold'] = np.where(is_trade & (df['side'] == 'SELL'), df['usdc'], 0.0)
    df['redeemed'] = np.where(df['type'] == 'REDEEM', df['usdc'], 0.0)
    df['is_trade'] = is_trade.astype(int)

    daily = df.groupby('date').agg(
        bought=('bought', 'sum'),
        sold=('sold', 'sum'),
        redeemed=('redeemed', 'sum'),
        trades=('is_trade', 'sum'),
    ).sort_index()
    daily['pnl'] = daily['sold'] + daily['redeemed'] - daily['bought']
    daily['cumulative_pnl'] = daily['pnl'].cumsum()
    return daily[DAILY_COLUMNS]


def summarize_daily(daily: pd.DataFrame) -> dict:
    """Best / worst day, positive days and max drawdown of the cumulative curve."""
    if daily.empty:
        return {
            'trading_days': 0,
            'positive_days': 0,
            'best_day': 0.0,
            'worst_day': 0.0,
            'avg_daily_pnl': 0.0,
            'max_drawdown': 0.0,
        }

    cum = daily['cumulative_pnl'].astype(float)
    # Drawdown measured from a running peak that starts at zero P&L
    running_max = np.maximum(cum.cummax(), 0.0)
    drawdown = cum - running_max

    return {
        'trading_days': int(len(daily)),
        'positive_days': int((daily['pnl'] > 0).sum()),
        'best_day': float(daily['pnl'].max()),
        'worst_day': float(daily['pnl'].min()),
        'avg_daily_pnl': float(daily['pnl'].mean()),
        'max_drawdown': float(min(drawdown.min(), 0.0)),
    }
