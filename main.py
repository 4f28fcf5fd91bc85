"""Polymarket portfolio dashboard — main pipeline."""

import argparse
import json
import os
import time

import config
from analyzers.daily import daily_cash_flow, summarize_daily
from analyzers.portfolio import build_dashboard
from collectors.api_client import RateLimitedClient
from collectors.balance_collector import collect_cash_balance
from collectors.position_collector import collect_positions
from collectors.trade_collector import collect_activity, collect_trades


def run_collection(client: RateLimitedClient, cfg: config.EngineConfig):
    """Fetch positions, recent trades, full ledger activity and cash balance."""
    wallet = cfg.wallet_address

    print("\n[1/4] Collecting positions...")
    positions = collect_positions(client, wallet)

    print("\n[2/4] Collecting recent trades...")
    trades = collect_trades(client, wallet, limit=cfg.trade_limit)

    print("\n[3/4] Collecting trade & redemption history...")
    activity = collect_activity(client, wallet)

    print("\n[4/4] Collecting cash balance...")
    balance = collect_cash_balance(client, wallet)

    return positions, trades, activity, balance


def print_summary(dashboard, daily_summary: dict):
    """Print the headline dashboard numbers."""
    wl = dashboard.win_loss
    today = dashboard.today_win_loss
    arb = dashboard.arb_stats

    print("\n" + "=" * 60)
    print("PORTFOLIO SUMMARY")
    print("=" * 60)
    print(f"  Wallet:            {dashboard.wallet_address}")
    print(f"  Cash (USDC):       ${dashboard.usdc_balance:,.2f}")
    print(f"  Position value:    ${dashboard.position_value:,.2f}")
    print(f"  Portfolio value:   ${dashboard.portfolio_value:,.2f}")
    print(f"  Positions:         {dashboard.total_positions:,} "
          f"({len(dashboard.open_positions)} open, "
          f"{len(dashboard.closed_positions)} resolved)")
    print(f"\n  P&L:")
    print(f"    True all-time:   ${dashboard.true_pnl:+,.2f}")
    print(f"    Snapshot:        ${dashboard.total_pnl:+,.2f}")
    print(f"    Today realized:  ${dashboard.today_pnl:+,.2f}")
    print(f"    Today incl open: ${dashboard.today_pnl_with_unrealized:+,.2f}")
    print(f"\n  Win/loss:")
    print(f"    All-time: {wl.wins:,}W / {wl.losses:,}L "
          f"({wl.undecided:,} undecided) = {wl.win_rate:.1f}%")
    print(f"    Today:    {today.wins:,}W / {today.losses:,}L "
          f"({today.undecided:,} undecided) = {today.win_rate:.1f}%")
    print(f"\n  Arb sets: {arb.total_sets:,} sets, {arb.total_legs:,} legs, "
          f"${arb.total_spent:,.2f} spent")
    if daily_summary['trading_days']:
        print(f"\n  Daily history ({daily_summary['trading_days']} days):")
        print(f"    Best day:     ${daily_summary['best_day']:+,.2f}")
        print(f"    Worst day:    ${daily_summary['worst_day']:+,.2f}")
        print(f"    Max drawdown: ${daily_summary['max_drawdown']:,.2f}")
    print(f"\n  Last updated: {dashboard.last_updated}")
    print("=" * 60)


def write_json(dashboard, path: str):
    """Dump the dashboard record as JSON."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w") as f:
        json.dump(dashboard.to_dict(), f, indent=2)
    print(f"  JSON written to {path}")


def main():
    parser = argparse.ArgumentParser(description="Polymarket portfolio dashboard")
    parser.add_argument("--wallet", default=None, help="Wallet address to report on")
    parser.add_argument("--trade-limit", type=int, default=None,
                        help="Number of recent trades to show")
    parser.add_argument("--no-report", action="store_true",
                        help="Skip the HTML dashboard")
    parser.add_argument("--json", metavar="PATH", help="Also write the dashboard as JSON")
    args = parser.parse_args()

    cfg = config.load_engine_config(wallet_address=args.wallet,
                                    trade_limit=args.trade_limit)
    client = RateLimitedClient()

    start = time.time()
    positions, trades, activity, balance = run_collection(client, cfg)
    print(f"\nCollection completed in {time.time() - start:.1f}s")

    dashboard = build_dashboard(cfg, positions, trades, activity, balance)
    daily = daily_cash_flow(activity)
    print_summary(dashboard, summarize_daily(daily))

    if args.json:
        write_json(dashboard, args.json)

    if not args.no_report:
        from reporting.report_generator import generate_report
        generate_report(dashboard, daily)


if __name__ == "__main__":
    main()
