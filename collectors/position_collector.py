"""Collect current positions for a wallet."""

from typing import List

import requests

import config
from collectors.api_client import RateLimitedClient
from collectors.normalizer import normalize_positions
from storage.models import Position


def collect_positions(
    client: RateLimitedClient,
    wallet: str = config.WALLET_ADDRESS,
) -> List[Position]:
    """Fetch the wallet's positions (single page) and normalize them.

    Fully exited stakes (size <= 0) are dropped. A failed fetch yields an
    empty list.
    """
    url = f"{config.DATA_API_BASE}/positions"
    try:
        data = client.get(url, params={"user": wallet, "sizeThreshold": 0})
    except requests.exceptions.RequestException as e:
        print(f"  Warning: positions fetch failed ({e})")
        return []

    positions = normalize_positions(data)
    print(f"  Positions: {len(positions)}")
    return positions
