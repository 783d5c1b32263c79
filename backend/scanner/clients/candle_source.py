"""Candle source with an ordered chain of retrieval strategies.

Each strategy fetches the same Binance spot klines through a different
route (direct data API, then public proxies). Strategies are tried in order
and the first one that yields a valid, non-empty candle array wins. A failed
strategy (network error, non-2xx status, malformed payload, API error
object) is logged and skipped. When every strategy fails the source returns
an empty list instead of raising.
"""

import itertools
import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol, Sequence
from urllib.parse import quote, urlencode

import httpx

from sixline.models import Candle, is_ordered

logger = logging.getLogger(__name__)

# Binance spot kline endpoints
BINANCE_KLINES_URL = "https://api.binance.com/api/v3/klines"
DATA_API_KLINES_URL = "https://data-api.binance.vision/api/v3/klines"

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}

# Binance kline row: [openTime, open, high, low, close, volume, closeTime, ...]
_MIN_ROW_LENGTH = 7


class PayloadError(ValueError):
    """Upstream payload is not a usable kline array."""


_token_sequence = itertools.count()


def _cache_token() -> str:
    return f"{time.time_ns()}-{next(_token_sequence)}"


@dataclass(frozen=True)
class KlineRequest:
    """One kline query, with a per-call cache-busting token."""

    symbol: str
    interval: str
    limit: int = 300
    cache_token: str = field(default_factory=_cache_token)

    @property
    def params(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "interval": self.interval,
            "limit": self.limit,
            "_t": self.cache_token,
        }

    def url(self, base_url: str) -> str:
        """Full query URL against ``base_url``."""
        return f"{base_url}?{urlencode(self.params)}"


class RetrievalStrategy(Protocol):
    """One way of obtaining the raw kline payload."""

    name: str

    async def attempt(self, client: httpx.AsyncClient, request: KlineRequest) -> Any:
        """Return the decoded JSON payload, or raise on any failure."""
        ...


class DirectStrategy:
    """Query a Binance kline endpoint directly."""

    def __init__(self, name: str, base_url: str = DATA_API_KLINES_URL):
        self.name = name
        self.base_url = base_url

    async def attempt(self, client: httpx.AsyncClient, request: KlineRequest) -> Any:
        response = await client.get(
            self.base_url, params=request.params, headers=NO_CACHE_HEADERS
        )
        response.raise_for_status()
        return response.json()


class ProxyStrategy:
    """Query Binance through a URL-forwarding proxy.

    ``url_template`` contains ``{url}``, replaced by the percent-encoded
    upstream URL. With ``unwrap_contents`` the proxy answers
    ``{"contents": "<json string>"}`` and the inner JSON is decoded.
    """

    def __init__(
        self,
        name: str,
        url_template: str,
        upstream_url: str = BINANCE_KLINES_URL,
        unwrap_contents: bool = False,
    ):
        self.name = name
        self.url_template = url_template
        self.upstream_url = upstream_url
        self.unwrap_contents = unwrap_contents

    def build_url(self, request: KlineRequest) -> str:
        target = quote(request.url(self.upstream_url), safe="")
        return self.url_template.format(url=target)

    async def attempt(self, client: httpx.AsyncClient, request: KlineRequest) -> Any:
        response = await client.get(self.build_url(request))
        response.raise_for_status()
        payload = response.json()

        if self.unwrap_contents:
            contents = payload.get("contents") if isinstance(payload, dict) else None
            if not isinstance(contents, str):
                raise PayloadError("proxy response has no 'contents' string")
            payload = json.loads(contents)

        return payload


def default_strategies() -> list[RetrievalStrategy]:
    """Retrieval chain in priority order."""
    return [
        DirectStrategy("Binance Data API (direct)"),
        ProxyStrategy("CodeTabs proxy", "https://api.codetabs.com/v1/proxy?quest={url}"),
        ProxyStrategy("corsproxy.io", "https://corsproxy.io/?{url}"),
        ProxyStrategy("AllOrigins (raw)", "https://api.allorigins.win/raw?url={url}"),
        ProxyStrategy(
            "AllOrigins (JSON)",
            "https://api.allorigins.win/get?url={url}",
            unwrap_contents=True,
        ),
    ]


def _from_millis(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


def parse_klines(payload: Any, symbol: str, interval: str) -> list[Candle]:
    """
    Map a Binance kline payload to candles.

    Args:
        payload: Decoded JSON (list of kline rows, or an API error object)
        symbol: Trading pair the payload belongs to
        interval: Kline interval the payload belongs to

    Returns:
        Candles in ascending open-time order

    Raises:
        PayloadError: On API error objects, empty or malformed arrays
    """
    if isinstance(payload, dict) and "code" in payload and "msg" in payload:
        raise PayloadError(f"API error {payload['code']}: {payload['msg']}")
    if not isinstance(payload, list) or not payload:
        raise PayloadError("invalid data format received")

    candles = []
    for row in payload:
        if not isinstance(row, (list, tuple)) or len(row) < _MIN_ROW_LENGTH:
            raise PayloadError(f"malformed kline row: {row!r}")
        try:
            open_time = _from_millis(row[0])
            close_time = _from_millis(row[6])
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise PayloadError(f"bad kline timestamp in row {row!r}") from e

        candles.append(
            Candle(
                symbol=symbol,
                timeframe=interval,
                open_time=open_time,
                open=str(row[1]),
                high=str(row[2]),
                low=str(row[3]),
                close=str(row[4]),
                volume=str(row[5]),
                close_time=close_time,
            )
        )

    if not is_ordered(candles):
        raise PayloadError("kline open times are not strictly ascending")

    return candles


class CandleSource:
    """Fetch candles for one instrument/timeframe via the retrieval chain."""

    def __init__(
        self,
        strategies: Sequence[RetrievalStrategy] | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch(self, symbol: str, interval: str, limit: int = 300) -> list[Candle]:
        """
        Fetch the latest candles, trying each strategy in order.

        Args:
            symbol: Trading pair (e.g., "BTCUSDT")
            interval: Kline interval (e.g., "1h", "4h")
            limit: Number of candles to request

        Returns:
            Candles ascending by open time, or an empty list if all strategies failed
        """
        request = KlineRequest(symbol=symbol, interval=interval, limit=limit)
        client = await self._get_client()

        for strategy in self.strategies:
            try:
                payload = await strategy.attempt(client, request)
                candles = parse_klines(payload, symbol, interval)
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(
                    "%s %s: %s failed: %s", symbol, interval, strategy.name, e
                )
                continue

            logger.debug(
                "%s %s: %d candles via %s", symbol, interval, len(candles), strategy.name
            )
            return candles

        logger.error(
            "All fetch strategies failed for %s %s (network block or rate limit?)",
            symbol,
            interval,
        )
        return []
