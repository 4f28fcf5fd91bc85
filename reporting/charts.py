"""Plotly chart functions for the HTML dashboard.

Each function takes engine output and returns a plotly Figure.
Returns None if data is insufficient.
"""

from datetime import datetime, timezone

import plotly.graph_objects as go
from plotly.subplots import make_subplots

# ── Consistent palette ──
COLORS = {
    'primary': '#2563eb',
    'positive': '#16a34a',
    'negative': '#dc2626',
    'warning': '#d97706',
    'neutral': '#6b7280',
    'dark': '#1e293b',
}
MAX_ALLOCATION_BARS = 15


def _layout(title, height=420, **kwargs):
    """Standard layout options."""
    layout = dict(
        title=dict(text=title, font=dict(size=15, color='#1e293b')),
        template='plotly_white',
        margin=dict(l=60, r=40, t=50, b=50),
        font=dict(family='-apple-system, BlinkMacSystemFont, sans-serif',
                  size=12, color='#374151'),
        height=height,
        plot_bgcolor='white',
    )
    layout.update(kwargs)
    return layout


# ── 1. Cumulative P&L + Daily Bars ──

def cumulative_pnl_daily(daily):
    """Daily realized cash-flow bars with cumulative overlay line."""
    if daily is None or daily.empty:
        return None

    fig = make_subplots(specs=[[{"secondary_y": True}]])

    colors = [COLORS['positive'] if v >= 0 else COLORS['negative']
              for v in daily['pnl']]

    fig.add_trace(
        go.Bar(x=daily.index, y=daily['pnl'], name='Daily P&L',
               marker_color=colors, opacity=0.7),
        secondary_y=False)
    fig.add_trace(
        go.Scatter(x=daily.index, y=daily['cumulative_pnl'],
                   name='Cumulative', line=dict(color=COLORS['primary'],
                                                width=2.5)),
        secondary_y=True)

    fig.update_layout(**_layout('Daily & Cumulative Realized P&L (UTC days)'))
    fig.update_yaxes(title_text='Daily P&L ($)', secondary_y=False)
    fig.update_yaxes(title_text='Cumulative P&L ($)', secondary_y=True)
    return fig


# ── 2. Open Position Allocation ──

def position_allocation(positions):
    """Horizontal bars of current value per position, largest first."""
    shown = [p for p in positions if p.current_value > 0][:MAX_ALLOCATION_BARS]
    if not shown:
        return None

    labels = [f'{p.title[:40]} — {p.outcome}' for p in shown]
    colors = [COLORS['positive'] if p.cash_pnl >= 0 else COLORS['negative']
              for p in shown]

    fig = go.Figure(go.Bar(
        x=[p.current_value for p in shown], y=labels, orientation='h',
        marker_color=colors, opacity=0.85,
        text=[f'${p.current_value:,.2f} ({p.cash_pnl:+,.2f})' for p in shown],
        textposition='outside'))
    fig.update_layout(**_layout(
        'Open Positions by Current Value',
        height=max(300, 40 * len(shown) + 100),
        xaxis_title='Current Value ($)',
        yaxis=dict(autorange='reversed')))
    return fig


# ── 3. Arb Sets Over Time ──

def arb_sets_timeline(arb_stats):
    """Each detected arb set as a marker: time vs total cost, sized by legs."""
    if not arb_stats.sets:
        return None

    times = [datetime.fromtimestamp(s.timestamp, tz=timezone.utc)
             for s in arb_stats.sets]
    fig = go.Figure(go.Scatter(
        x=times, y=[s.total_cost for s in arb_stats.sets], mode='markers',
        marker=dict(size=[6 + 3 * s.legs for s in arb_stats.sets],
                    color=COLORS['primary'], opacity=0.6),
        text=[f'{s.legs} legs: {", ".join(s.outcomes)}' for s in arb_stats.sets],
        hovertemplate='%{x}<br>$%{y:,.2f}<br>%{text}<extra></extra>'))
    fig.update_layout(**_layout(
        f'Arb Sets ({arb_stats.total_sets} sets, {arb_stats.total_legs} legs)',
        xaxis_title='Time (UTC)', yaxis_title='Total Cost ($)'))
    return fig
