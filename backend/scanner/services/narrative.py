"""AI narrative for a finished trade setup (Gemini generateContent REST API).

Called on demand only. The setup is read, never modified, and any failure
degrades to a fixed fallback message.
"""

import logging

import httpx

from sixline.models import Signal, TradeSetup

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

MISSING_KEY_MESSAGE = "Set GEMINI_API_KEY to enable AI analysis."
UNAVAILABLE_MESSAGE = "AI analysis is temporarily unavailable, please try again later."

_SIGNAL_LABELS = {
    Signal.LONG: "long trend",
    Signal.SHORT: "short trend",
    Signal.WATCH: "six lines tightly clustered (breakout imminent)",
    Signal.WAIT: "wait / range-bound",
}

_TIMEFRAME_LABELS = {
    "1h": "1 hour (1H)",
    "4h": "4 hours (4H)",
}


def build_prompt(setup: TradeSetup) -> str:
    """Render the analyst prompt for a setup."""
    mas = setup.mas
    timeframe = _TIMEFRAME_LABELS.get(setup.timeframe, setup.timeframe)
    dense = "yes (watch for a breakout)" if setup.is_dense else "no (trending or diverging)"

    return f"""
You are a senior crypto technical analyst. Using the dual moving-average
confluence system (MA + EMA 20/60/120, six lines in total), analyse:

Pair: {setup.symbol}
Current price: {setup.price:.4f}
Timeframe: {timeframe}

Six-line data:
- Short: MA20={mas.ma20:.4f}, EMA20={mas.ema20:.4f}
- Medium: MA60={mas.ma60:.4f}, EMA60={mas.ema60:.4f}
- Long: MA120={mas.ma120:.4f}, EMA120={mas.ema120:.4f}

State:
- Six-line spread: {setup.density_score:.2f}% (lower = tighter)
- Price deviation from center: {setup.price_deviation:.2f}%
- Dense: {dense}
- System signal: {_SIGNAL_LABELS[setup.signal]}
- Reason: {setup.reason}

Trade plan:
- Stop loss (SL): {setup.stop_loss:.4f}
- Take profit (TP): {setup.take_profit:.4f}

Tasks:
1. On the {timeframe} chart, are the six lines entangled (breakout pending) or aligned (trending)?
2. If dense: position early or wait for a confirmed breakout? If trending: is chasing reasonable now?
3. Comment on risk using the ATR-based stop.

Be professional and direct, under 200 words.
""".strip()


class NarrativeClient:
    """Generate free-text commentary for a setup."""

    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-2.5-flash",
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.model = model
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
        """Close the HTTP client if this instance created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def describe(self, setup: TradeSetup) -> str:
        """Return a narrative for the setup, or a fixed fallback message."""
        if not self.api_key:
            return MISSING_KEY_MESSAGE

        body = {"contents": [{"parts": [{"text": build_prompt(setup)}]}]}
        try:
            client = await self._get_client()
            response = await client.post(
                f"{GEMINI_BASE_URL}/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json=body,
            )
            response.raise_for_status()
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("Gemini API error for %s: %s", setup.symbol, e)
            return UNAVAILABLE_MESSAGE

        if not isinstance(text, str) or not text.strip():
            return UNAVAILABLE_MESSAGE
        return text.strip()
