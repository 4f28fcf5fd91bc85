"""HTML dashboard generator.

Renders a DashboardData record plus the daily cash-flow history into a
self-contained HTML page. No metric is computed here; values are only
formatted.
"""

import html
import os
from datetime import datetime, timezone

import plotly.io as pio

import config
from analyzers.daily import summarize_daily
from reporting import charts

MAX_TRADE_ROWS = 50


# ── Helpers ──

def _chart(fig):
    """Convert a Plotly figure to an embeddable HTML div."""
    if fig is None:
        return '<p class="muted">Chart not available for this dataset.</p>'
    return pio.to_html(fig, full_html=False, include_plotlyjs=False)


def _metric_card(value, label, tone=''):
    return (f'<div class="metric-card {tone}">'
            f'<div class="value">{value}</div>'
            f'<div class="label">{label}</div></div>')


def _table(headers, rows):
    hdr = ''.join(f'<th>{h}</th>' for h in headers)
    body = ''
    for row in rows:
        cells = ''.join(f'<td>{c}</td>' for c in row)
        body += f'<tr>{cells}</tr>\n'
    return f'<table><thead><tr>{hdr}</tr></thead><tbody>{body}</tbody></table>'


def _finding(text, level='info'):
    return f'<div class="finding {level}"><p>{text}</p></div>'


def _section(id_, title, content):
    return (f'<div class="section" id="{id_}">'
            f'<h2>{title}</h2>{content}</div>\n')


def _money(value):
    return f'${value:,.2f}'


def _signed(value):
    sign = '+' if value >= 0 else '-'
    return f'{sign}${abs(value):,.2f}'


def _tone(value):
    return 'pos' if value >= 0 else 'neg'


def _utc(ts):
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime('%Y-%m-%d %H:%M:%S')


# ── Section Builders ──

def _section_summary(d):
    """Section 1: Portfolio value and the three P&L figures."""
    wl = d.win_loss
    cards = (
        _metric_card(_money(d.portfolio_value), 'Portfolio Value')
        + _metric_card(_money(d.usdc_balance), 'Cash (USDC)')
        + _metric_card(_money(d.position_value), 'Position Value')
        + _metric_card(f'{d.total_positions:,}', 'Positions')
        + _metric_card(_signed(d.true_pnl), 'True All-Time P&L', _tone(d.true_pnl))
        + _metric_card(_signed(d.today_pnl), 'Today P&L (Realized)',
                       _tone(d.today_pnl))
        + _metric_card(_signed(d.today_pnl_with_unrealized),
                       'Today P&L (incl. Open)',
                       _tone(d.today_pnl_with_unrealized))
        + _metric_card(_signed(d.total_pnl), 'Position Snapshot P&L',
                       _tone(d.total_pnl))
        + _metric_card(f'{wl.win_rate:.1f}%', 'Win Rate (All-Time)')
        + _metric_card(f'{wl.wins:,} / {wl.losses:,}', 'Wins / Losses')
        + _metric_card(f'{d.today_win_loss.wins:,} / {d.today_win_loss.losses:,}',
                       'Today Wins / Losses')
        + _metric_card(f'{d.arb_stats.total_sets:,}', 'Arb Sets')
    )
    gap = d.true_pnl - d.total_pnl
    return _section('summary', 'Portfolio Summary', f'''
        <div class="metric-grid">{cards}</div>
        {_finding(
            f'Snapshot P&amp;L and true P&amp;L differ by <strong>{_signed(gap)}</strong>. '
            'The snapshot only sees positions still in the feed; true P&amp;L counts '
            'redemptions from the activity ledger.',
            'key'
        )}
    ''')


def _section_positions(d, allocation_chart):
    """Section 2: Open and closed positions, largest current value first."""
    def rows(positions):
        return [
            (html.escape(p.title), html.escape(p.outcome), f'{p.size:,.2f}',
             f'{p.avg_price:.3f}', f'{p.cur_price:.3f}', _money(p.current_value),
             f'<span class="{_tone(p.cash_pnl)}">{_signed(p.cash_pnl)}</span>',
             'yes' if p.redeemable else '')
            for p in positions
        ]

    headers = ['Market', 'Outcome', 'Shares', 'Avg', 'Price', 'Value',
               'P&amp;L', 'Redeemable']
    open_tbl = (_table(headers, rows(d.open_positions)) if d.open_positions
                else '<p class="muted">No open positions.</p>')
    closed_tbl = (_table(headers, rows(d.closed_positions)) if d.closed_positions
                  else '<p class="muted">No resolved positions awaiting redemption.</p>')
    return _section('positions', 'Positions', f'''
        <div class="chart-container">{allocation_chart}</div>
        <h3>Open ({len(d.open_positions)})</h3>
        {open_tbl}
        <h3>Resolved ({len(d.closed_positions)})</h3>
        {closed_tbl}
    ''')


def _section_pnl(daily_summary, cum_chart):
    """Section 3: Daily realized cash-flow history."""
    s = daily_summary
    tbl = _table(['Metric', 'Value'], [
        ('Trading days', f'{s["trading_days"]:,}'),
        ('Positive days', f'{s["positive_days"]:,}'),
        ('Best day', _signed(s['best_day'])),
        ('Worst day', _signed(s['worst_day'])),
        ('Avg daily P&amp;L', _signed(s['avg_daily_pnl'])),
        ('Max drawdown', _signed(s['max_drawdown'])),
    ])
    return _section('pnl', 'P&amp;L History', f'''
        <div class="chart-container">{cum_chart}</div>
        {tbl}
    ''')


def _section_arbitrage(arb_stats, arb_chart):
    """Section 4: Detected arb sets."""
    rows = [
        (_utc(s.timestamp), s.legs, _money(s.total_cost),
         html.escape(', '.join(s.outcomes)))
        for s in reversed(arb_stats.sets)
    ]
    tbl = (_table(['Start (UTC)', 'Legs', 'Total Cost', 'Outcomes'], rows)
           if rows else '<p class="muted">No arb sets in the recent trades.</p>')
    return _section('arbitrage', 'Arbitrage Sets', f'''
        <p><strong>{arb_stats.total_sets:,}</strong> sets,
        <strong>{arb_stats.total_legs:,}</strong> legs,
        <strong>{_money(arb_stats.total_spent)}</strong> spent.</p>
        <div class="chart-container">{arb_chart}</div>
        {tbl}
    ''')


def _section_trades(trades):
    """Section 5: Recent trades, newest first."""
    rows = [
        (_utc(t.timestamp), html.escape(t.title),
         f'<span class="{"neg" if t.side == "SELL" else "pos"}">{t.side}</span>',
         html.escape(t.outcome), f'{t.price:.3f}', f'{t.size:,.2f}',
         _money(t.usdc_size))
        for t in trades[:MAX_TRADE_ROWS]
    ]
    tbl = (_table(['Time (UTC)', 'Market', 'Side', 'Outcome', 'Price',
                   'Shares', 'USDC'], rows)
           if rows else '<p class="muted">No trades.</p>')
    return _section('trades', f'Recent Trades ({len(trades)})', tbl)


def generate_report(dashboard, daily, output_dir=None):
    """Render the dashboard to dashboard.html and return its path."""
    output_dir = output_dir or config.OUTPUT_DIR
    os.makedirs(output_dir, exist_ok=True)

    print("\n  Generating charts...")

    chart_figs = {
        'cum_pnl': charts.cumulative_pnl_daily(daily),
        'allocation': charts.position_allocation(dashboard.open_positions),
        'arb': charts.arb_sets_timeline(dashboard.arb_stats),
    }
    c = {name: _chart(fig) for name, fig in chart_figs.items()}

    chart_count = sum(1 for fig in chart_figs.values() if fig is not None)
    print(f"  Generated {chart_count} charts")

    sections = (
        _section_summary(dashboard)
        + _section_positions(dashboard, c['allocation'])
        + _section_pnl(summarize_daily(daily), c['cum_pnl'])
        + _section_arbitrage(dashboard.arb_stats, c['arb'])
        + _section_trades(dashboard.trades)
    )

    page = _html_template(sections, dashboard)

    output_path = os.path.join(output_dir, 'dashboard.html')
    with open(output_path, 'w') as f:
        f.write(page)

    print(f"  Dashboard written to {output_path}")
    return output_path


def _html_template(body_sections, dashboard):
    """Full HTML document with inline CSS and Plotly CDN."""
    wallet = dashboard.wallet_address
    short_wallet = f'{wallet[:10]}...{wallet[-6:]}' if len(wallet) > 16 else wallet
    return f'''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Portfolio Dashboard &mdash; {html.escape(config.WALLET_LABEL)}</title>
    <script src="https://cdn.plot.ly/plotly-2.35.2.min.js"></script>
    <style>
        * {{ box-sizing: border-box; }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: #f0f2f5;
            color: #1e293b;
            line-height: 1.65;
            margin: 0;
        }}
        .header {{
            background: linear-gradient(135deg, #1e293b 0%, #0f172a 100%);
            color: white;
            padding: 40px 0 32px;
        }}
        .header h1 {{ font-size: 28px; font-weight: 700; margin: 0; }}
        .header .subtitle {{ color: #94a3b8; margin-top: 6px; font-size: 15px; }}
        .container {{ max-width: 1100px; margin: 0 auto; padding: 0 24px; }}
        .metric-grid {{
            display: grid;
            grid-template-columns: repeat(4, 1fr);
            gap: 14px;
            margin-top: 12px;
        }}
        .metric-card {{
            background: #f1f5f9;
            border-radius: 8px;
            padding: 16px;
            text-align: center;
        }}
        .metric-card .value {{ font-size: 22px; font-weight: 700; color: #0f172a; }}
        .metric-card.pos .value, .pos {{ color: #16a34a; }}
        .metric-card.neg .value, .neg {{ color: #dc2626; }}
        .metric-card .label {{
            font-size: 11px;
            text-transform: uppercase;
            letter-spacing: 0.5px;
            color: #64748b;
        }}
        nav.toc {{
            background: white;
            border-bottom: 1px solid #e2e8f0;
            padding: 12px 0;
            position: sticky;
            top: 0;
            z-index: 100;
        }}
        nav.toc .container {{ display: flex; gap: 20px; flex-wrap: wrap; }}
        nav.toc a {{ color: #475569; text-decoration: none; font-size: 13px; font-weight: 500; }}
        nav.toc a:hover {{ color: #2563eb; }}
        .content {{ padding: 24px 0 48px; }}
        .section {{
            background: white;
            border-radius: 10px;
            padding: 32px;
            margin-bottom: 20px;
            box-shadow: 0 1px 3px rgba(0,0,0,0.06);
        }}
        .section h2 {{
            font-size: 20px;
            margin: 0 0 16px;
            padding-bottom: 12px;
            border-bottom: 2px solid #f1f5f9;
            color: #0f172a;
        }}
        .section h3 {{ font-size: 16px; color: #334155; margin: 24px 0 12px; }}
        .section p {{ margin: 8px 0; font-size: 14px; }}
        table {{ width: 100%; border-collapse: collapse; margin: 12px 0; font-size: 13px; }}
        th {{
            background: #f8fafc;
            text-align: left;
            padding: 9px 14px;
            font-weight: 600;
            color: #475569;
            border-bottom: 2px solid #e2e8f0;
        }}
        td {{ padding: 8px 14px; border-bottom: 1px solid #f1f5f9; }}
        tr:hover td {{ background: #fafbfc; }}
        .finding {{
            border-left: 4px solid #2563eb;
            background: #f8fafc;
            padding: 12px 16px;
            margin: 14px 0;
            border-radius: 0 6px 6px 0;
            font-size: 13px;
        }}
        .finding.key {{ border-left-color: #16a34a; background: #f0fdf4; }}
        .finding p {{ margin: 0; }}
        .chart-container {{ margin: 16px 0; }}
        .muted {{ color: #94a3b8; font-style: italic; font-size: 13px; }}
        footer {{ text-align: center; padding: 32px; color: #94a3b8; font-size: 12px; }}
        @media (max-width: 768px) {{
            .metric-grid {{ grid-template-columns: repeat(2, 1fr); }}
        }}
    </style>
</head>
<body>

<div class="header">
    <div class="container">
        <h1>Portfolio Dashboard</h1>
        <p class="subtitle">{html.escape(config.WALLET_LABEL)}
            &mdash; {html.escape(short_wallet)}
            &mdash; updated {html.escape(dashboard.last_updated)}</p>
    </div>
</div>

<nav class="toc">
    <div class="container">
        <a href="#summary">Summary</a>
        <a href="#positions">Positions</a>
        <a href="#pnl">P&amp;L</a>
        <a href="#arbitrage">Arbitrage</a>
        <a href="#trades">Trades</a>
    </div>
</nav>

<div class="content">
    <div class="container">
        {body_sections}
    </div>
</div>

<footer>
    <div class="container">
        Generated by poly_dashboard &mdash; {html.escape(wallet)}
    </div>
</footer>

</body>
</html>'''
