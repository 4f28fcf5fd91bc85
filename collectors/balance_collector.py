"""Collect the wallet's USDC cash balance from Polygon."""

from typing import Optional, Sequence

import requests

import config
from collectors.api_client import RateLimitedClient


def balance_of_calldata(wallet: str) -> str:
    """ABI-encode balanceOf(address): selector + address left-padded to 32 bytes."""
    addr = wallet.lower().replace("0x", "").rjust(64, "0")
    return f"{config.BALANCE_OF_SELECTOR}{addr}"


def parse_balance_result(result: Optional[str],
                         decimals: int = config.USDC_DECIMALS) -> Optional[float]:
    """Hex eth_call result -> token units. None when the result is unusable."""
    if not isinstance(result, str) or result in ("", "0x"):
        return None
    try:
        raw = int(result, 16)
    except ValueError:
        return None
    return raw / 10 ** decimals


def collect_cash_balance(
    client: RateLimitedClient,
    wallet: str = config.WALLET_ADDRESS,
    rpc_urls: Sequence[str] = tuple(config.POLYGON_RPC_URLS),
) -> float:
    """USDC.e balanceOf via JSON-RPC eth_call, trying each endpoint in turn.

    Returns 0.0 when every endpoint fails.
    """
    payload = {
        "jsonrpc": "2.0",
        "method": "eth_call",
        "params": [{"to": config.USDC_CONTRACT,
                    "data": balance_of_calldata(wallet)}, "latest"],
        "id": 1,
    }

    for url in rpc_urls:
        try:
            data = client.post_json(url, payload)
        except requests.exceptions.RequestException as e:
            print(f"  Warning: RPC {url} failed ({e})")
            continue

        result = data.get("result") if isinstance(data, dict) else None
        balance = parse_balance_result(result)
        if balance is not None:
            print(f"  Cash balance: ${balance:,.2f}")
            return balance
        print(f"  Warning: RPC {url} returned no balance")

    print("  Warning: all RPC endpoints failed, cash balance = 0")
    return 0.0
