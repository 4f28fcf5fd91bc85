"""Rate-limited HTTP client with retry logic."""

import time
from typing import Any, Dict, Optional

import requests

import config

RETRYABLE_STATUS = (500, 502, 503, 504)


class RateLimitedClient:
    """HTTP client with token-bucket rate limiting and exponential backoff.

    Responses are never cached: every dashboard refresh must see the live
    feeds.
    """

    def __init__(
        self,
        requests_per_second: float = config.RATE_LIMIT_REQUESTS_PER_SECOND,
        burst: int = config.RATE_LIMIT_BURST,
        timeout: float = config.REQUEST_TIMEOUT,
        max_retries: int = config.MAX_RETRIES,
    ):
        self.rps = requests_per_second
        self.burst = burst
        self.tokens = float(burst)
        self.last_refill = time.monotonic()
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": "PolymarketDashboard/1.0",
        })

    def _refill_tokens(self):
        now = time.monotonic()
        elapsed = now - self.last_refill
        self.tokens = min(self.burst, self.tokens + elapsed * self.rps)
        self.last_refill = now

    def _wait_for_token(self):
        self._refill_tokens()
        if self.tokens < 1.0:
            wait_time = (1.0 - self.tokens) / self.rps
            time.sleep(wait_time)
            self._refill_tokens()
        self.tokens -= 1.0

    def _backoff(self, attempt: int):
        time.sleep(config.BACKOFF_BASE * (config.BACKOFF_FACTOR ** attempt))

    def _request(self, method: str, url: str, **kwargs) -> Any:
        self._wait_for_token()

        last_exception: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                resp = self.session.request(method, url, timeout=self.timeout,
                                            **kwargs)

                if resp.status_code == 429:
                    self._backoff(attempt)
                    continue

                resp.raise_for_status()
                return resp.json()

            except requests.exceptions.HTTPError as e:
                if resp.status_code in RETRYABLE_STATUS:
                    last_exception = e
                    self._backoff(attempt)
                    continue
                raise
            except requests.exceptions.RequestException as e:
                last_exception = e
                self._backoff(attempt)
                continue

        raise last_exception or requests.exceptions.RetryError(
            f"Failed after {self.max_retries} retries: {url}")

    def get(self, url: str, params: Optional[Dict] = None) -> Any:
        """GET request with rate limiting and retries. Returns parsed JSON."""
        return self._request("GET", url, params=params)

    def post_json(self, url: str, payload: Dict) -> Any:
        """POST a JSON body (e.g. a JSON-RPC call). Returns parsed JSON."""
        return self._request("POST", url, json=payload)
