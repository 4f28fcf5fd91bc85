"""Data models for the portfolio dashboard."""

from dataclasses import asdict, dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class Position:
    asset: str = ""  # token ID
    condition_id: str = ""
    title: str = "Unknown"
    slug: str = ""
    outcome: str = ""  # e.g. Yes / No, Up / Down
    outcome_index: int = 0
    size: float = 0.0  # shares held
    avg_price: float = 0.0
    cur_price: float = 0.0  # 0 or 1 once resolved
    initial_value: float = 0.0  # USDC cost basis
    current_value: float = 0.0  # size * cur_price
    cash_pnl: float = 0.0  # current_value - initial_value
    percent_pnl: float = 0.0
    realized_pnl: float = 0.0
    redeemable: bool = False
    end_date: str = ""

    @property
    def is_open(self) -> bool:
        """Still trading: not redeemable, price strictly inside (0, 1), shares held."""
        return (not self.redeemable
                and 0.0 < self.cur_price < 1.0
                and self.size != 0)

    @property
    def is_resolved(self) -> bool:
        return self.redeemable or self.cur_price in (0.0, 1.0)


@dataclass(frozen=True)
class Trade:
    timestamp: int = 0  # unix epoch seconds
    title: str = ""
    slug: str = ""
    side: str = "BUY"  # BUY or SELL
    outcome: str = ""
    price: float = 0.0
    size: float = 0.0  # shares
    usdc_size: float = 0.0  # price * size
    condition_id: str = ""
    transaction_hash: str = ""
    outcome_index: int = 0
    asset: str = ""


@dataclass(frozen=True)
class Activity(Trade):
    """Any ledger event; REDEEM records carry the payout in usdc_size."""
    type: str = "TRADE"  # TRADE, REDEEM, MERGE, SPLIT, REWARD, ...

    @property
    def is_trade(self) -> bool:
        return self.type == "TRADE"


@dataclass
class MarketLedger:
    """Cumulative cash flow for one condition_id within a time window."""
    bought: float = 0.0
    sold: float = 0.0
    redeemed: float = 0.0

    @property
    def net(self) -> float:
        return self.sold + self.redeemed - self.bought


# condition_id -> ledger; a condition_id seen for the first time gets a zeroed ledger
LedgerMap = Dict[str, MarketLedger]


@dataclass(frozen=True)
class ArbSet:
    timestamp: int  # first leg
    legs: int
    total_cost: float
    outcomes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ArbStats:
    total_sets: int = 0
    total_legs: int = 0
    total_spent: float = 0.0
    sets: List[ArbSet] = field(default_factory=list)


@dataclass(frozen=True)
class WinLossStats:
    wins: int = 0
    losses: int = 0
    undecided: int = 0
    win_rate: float = 0.0  # percent


@dataclass(frozen=True)
class DashboardData:
    wallet_address: str
    usdc_balance: float
    position_value: float
    portfolio_value: float
    total_pnl: float  # position snapshot
    today_pnl: float
    today_pnl_with_unrealized: float
    true_pnl: float
    win_loss: WinLossStats
    today_win_loss: WinLossStats
    snapshot_win_loss: WinLossStats
    total_positions: int
    open_positions: List[Position]
    closed_positions: List[Position]
    trades: List[Trade]
    arb_stats: ArbStats
    last_updated: str

    def to_dict(self) -> dict:
        return asdict(self)
