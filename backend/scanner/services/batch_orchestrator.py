"""Sequential scan over an instrument universe.

Instruments are processed one at a time with a fixed pause in between to
stay under shared upstream rate limits. Each pass returns a fresh result
list; nothing is carried over between passes.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from scanner.services.timeframe_arbiter import TimeframeArbiter
from sixline.arbiter import sort_watch_first
from sixline.models import TradeSetup

logger = logging.getLogger(__name__)

# Receives completed / total after each instrument
ProgressCallback = Callable[[float], Awaitable[None]]


class BatchOrchestrator:
    """Run the timeframe arbiter across a universe of instruments."""

    def __init__(
        self,
        arbiter: TimeframeArbiter,
        pause_seconds: float = 1.5,
        on_progress: ProgressCallback | None = None,
    ):
        self.arbiter = arbiter
        self.pause_seconds = pause_seconds
        self._on_progress = on_progress

    async def run_universe(self, symbols: Sequence[str]) -> list[TradeSetup]:
        """
        Evaluate every instrument in order.

        Args:
            symbols: Instruments to scan (e.g., ["BTCUSDT", "ETHUSDT"])

        Returns:
            Setups with WATCH signals first, instruments without a setup dropped
        """
        total = len(symbols)
        results: list[TradeSetup] = []

        for i, symbol in enumerate(symbols):
            setup = await self.arbiter.evaluate_instrument(symbol)
            if setup is not None:
                results.append(setup)

            if self._on_progress:
                await self._on_progress((i + 1) / total)

            if i + 1 < total:
                await asyncio.sleep(self.pause_seconds)

        logger.info("Scan complete: %d setups from %d instruments", len(results), total)
        return sort_watch_first(results)
