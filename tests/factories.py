"""Record builders shared by the test modules."""

from storage.models import Activity, Position, Trade

# 2023-11-14 22:13:20 UTC
NOW = 1_700_000_000
MIDNIGHT = 1_699_920_000


def make_position(condition_id="cond-a", size=10.0, cur_price=0.5,
                  current_value=None, cash_pnl=0.0, redeemable=False,
                  outcome="Yes", title="Market A", **kwargs):
    if current_value is None:
        current_value = size * cur_price
    return Position(condition_id=condition_id, size=size, cur_price=cur_price,
                    current_value=current_value, cash_pnl=cash_pnl,
                    redeemable=redeemable, outcome=outcome, title=title,
                    **kwargs)


def make_trade(timestamp, condition_id="cond-a", side="BUY", usdc_size=1.0,
               outcome="Yes", **kwargs):
    return Trade(timestamp=timestamp, condition_id=condition_id, side=side,
                 usdc_size=usdc_size, outcome=outcome, **kwargs)


def buy(timestamp, condition_id="cond-a", usdc_size=1.0, **kwargs):
    return Activity(type="TRADE", side="BUY", timestamp=timestamp,
                    condition_id=condition_id, usdc_size=usdc_size, **kwargs)


def sell(timestamp, condition_id="cond-a", usdc_size=1.0, **kwargs):
    return Activity(type="TRADE", side="SELL", timestamp=timestamp,
                    condition_id=condition_id, usdc_size=usdc_size, **kwargs)


def redeem(timestamp, condition_id="cond-a", usdc_size=1.0, **kwargs):
    return Activity(type="REDEEM", side="", timestamp=timestamp,
                    condition_id=condition_id, usdc_size=usdc_size, **kwargs)
