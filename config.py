"""Configuration for the Polymarket portfolio dashboard."""

import os
from dataclasses import dataclass, replace

# Target wallet
WALLET_ADDRESS = os.environ.get(
    "WALLET_ADDRESS", "0x5bC5EB1DE002F3b514F6F4f90c61fB0d496be7ce")
WALLET_LABEL = os.environ.get("WALLET_LABEL", "Trading Account")

# API base URLs (no auth required)
DATA_API_BASE = "https://data-api.polymarket.com"

# Polygon RPC endpoints, tried in order for the cash balance
POLYGON_RPC_URLS = [
    url.strip() for url in os.environ.get(
        "POLYGON_RPC_URLS",
        "https://polygon-bor-rpc.publicnode.com,"
        "https://polygon.llamarpc.com,"
        "https://polygon-rpc.com",
    ).split(",") if url.strip()
]

# USDC.e on Polygon
USDC_CONTRACT = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"
USDC_DECIMALS = 6
BALANCE_OF_SELECTOR = "0x70a08231"  # keccak("balanceOf(address)")[:4]

# Rate limiting
RATE_LIMIT_REQUESTS_PER_SECOND = 5
RATE_LIMIT_BURST = 10
REQUEST_TIMEOUT = 30  # seconds

# Pagination
PAGE_SIZE = 500  # activity endpoint max per page
MAX_OFFSET = 3000  # API hard limit — use backward timestamp windowing beyond this
TRADE_LIMIT = 200  # recent trades shown on the dashboard

# Retry / backoff
MAX_RETRIES = 5
BACKOFF_BASE = 1.0  # seconds
BACKOFF_FACTOR = 2.0

# Engine defaults
PNL_EPSILON = 0.005  # half a cent
ARB_WINDOW_SECONDS = 120
ARB_MIN_LEGS = 3

# Paths
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
OUTPUT_DIR = os.environ.get("OUTPUT_DIR", os.path.join(BASE_DIR, "output"))


@dataclass(frozen=True)
class EngineConfig:
    """Settings the reconciliation engine reads, fixed for one run."""
    wallet_address: str = WALLET_ADDRESS
    epsilon: float = PNL_EPSILON
    arb_window_seconds: int = ARB_WINDOW_SECONDS
    arb_min_legs: int = ARB_MIN_LEGS
    trade_limit: int = TRADE_LIMIT


def load_engine_config(**overrides) -> EngineConfig:
    """Build the engine config from module defaults, applying non-None overrides."""
    cfg = EngineConfig()
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return replace(cfg, **overrides) if overrides else cfg
