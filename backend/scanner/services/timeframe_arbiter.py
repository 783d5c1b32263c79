"""Dual-timeframe evaluation for a single instrument.

Fetches and evaluates a shorter and a longer timeframe concurrently, then
surfaces one setup using ``sixline.arbiter.select_setup``. The two pipelines
share no state; a failure in one only removes that timeframe's result.
"""

import asyncio
import logging

from scanner.clients.candle_source import CandleSource
from sixline.arbiter import select_setup
from sixline.evaluator import SetupEvaluator
from sixline.models import TradeSetup

logger = logging.getLogger(__name__)


class TimeframeArbiter:
    """Evaluate an instrument on two timeframes and pick the setup to show."""

    def __init__(
        self,
        candle_source: CandleSource,
        evaluator: SetupEvaluator | None = None,
        short_timeframe: str = "1h",
        long_timeframe: str = "4h",
        limit: int = 300,
    ):
        self.candle_source = candle_source
        self.evaluator = evaluator or SetupEvaluator()
        self.short_timeframe = short_timeframe
        self.long_timeframe = long_timeframe
        self.limit = limit

    async def evaluate_timeframe(self, symbol: str, timeframe: str) -> TradeSetup | None:
        """Fetch and evaluate one timeframe."""
        candles = await self.candle_source.fetch(symbol, timeframe, self.limit)
        if not candles:
            return None
        return self.evaluator.evaluate(symbol, timeframe, candles)

    async def evaluate_instrument(self, symbol: str) -> TradeSetup | None:
        """
        Evaluate both timeframes concurrently and select one setup.

        Returns:
            The surfaced TradeSetup, or None if neither timeframe produced one
        """
        results = await asyncio.gather(
            self.evaluate_timeframe(symbol, self.short_timeframe),
            self.evaluate_timeframe(symbol, self.long_timeframe),
            return_exceptions=True,
        )

        setups: list[TradeSetup | None] = []
        for timeframe, result in zip((self.short_timeframe, self.long_timeframe), results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                logger.error(
                    "%s %s: evaluation failed: %r", symbol, timeframe, result
                )
                setups.append(None)
            else:
                setups.append(result)

        short, long = setups
        selected = select_setup(short, long)
        if selected is None:
            logger.info("%s: no setup available", symbol)
        else:
            logger.info(
                "%s: %s on %s (density %.2f%%, deviation %.2f%%)",
                symbol,
                selected.signal.value,
                selected.timeframe,
                selected.density_score,
                selected.price_deviation,
            )
        return selected
