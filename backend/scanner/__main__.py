"""CLI entry point for the six-line scanner.

Usage:
    python -m scanner
    python -m scanner --symbols BTCUSDT,ETHUSDT --signal watch
    python -m scanner --loop --interval 300
    python -m scanner --narrate --output results/scan.json
"""

import argparse
import asyncio
import logging
from datetime import datetime
from pathlib import Path

from scanner.clients.candle_source import CandleSource
from scanner.config import get_settings
from scanner.report import ReportFormatter, filter_setups
from scanner.services.batch_orchestrator import BatchOrchestrator
from scanner.services.narrative import NarrativeClient
from scanner.services.timeframe_arbiter import TimeframeArbiter
from scanner.universe_config import load_universe_config
from sixline.evaluator import SetupEvaluator
from sixline.models import Signal, TradeSetup

logger = logging.getLogger("scanner")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scan instruments for MA/EMA 20/60/120 confluence setups",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scanner
  python -m scanner --symbols BTCUSDT,SOLUSDT --signal long
  python -m scanner --loop --interval 300
  python -m scanner --narrate --output results/scan.json
        """,
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to universe.yaml (default: backend/universe.yaml)",
    )
    parser.add_argument(
        "--symbols",
        type=str,
        default=None,
        help="Comma-separated symbols (overrides the configured universe)",
    )
    parser.add_argument(
        "--signal",
        type=str,
        choices=[s.value for s in Signal],
        default=None,
        help="Only show setups with this signal",
    )
    parser.add_argument(
        "--loop",
        action="store_true",
        help="Repeat the scan every --interval seconds",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Seconds between passes in loop mode (default: REFRESH_INTERVAL)",
    )
    parser.add_argument(
        "--narrate",
        action="store_true",
        help="Request an AI narrative for each shown setup",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path for JSON results",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    return parser.parse_args()


async def _log_progress(fraction: float) -> None:
    logger.info("Progress: %d%%", round(fraction * 100))


async def _narrate(client: NarrativeClient, setups: list[TradeSetup]) -> dict[str, str]:
    return {s.symbol: await client.describe(s) for s in setups}


async def main() -> None:
    args = parse_args()

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    settings = get_settings()
    config_path = args.config or settings.universe_path
    universe = load_universe_config(Path(config_path) if config_path else None)

    symbols = universe.symbols
    if args.symbols:
        symbols = [s.strip().upper() for s in args.symbols.split(",") if s.strip()]
    signal = Signal(args.signal) if args.signal else None
    interval = args.interval or settings.refresh_interval

    candle_source = CandleSource(timeout=settings.http_timeout)
    arbiter = TimeframeArbiter(
        candle_source,
        evaluator=SetupEvaluator(universe.evaluator),
        short_timeframe=universe.short_timeframe,
        long_timeframe=universe.long_timeframe,
        limit=settings.kline_limit,
    )
    orchestrator = BatchOrchestrator(
        arbiter,
        pause_seconds=settings.pause_seconds,
        on_progress=_log_progress,
    )
    narrator = NarrativeClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        timeout=settings.http_timeout,
    )

    try:
        while True:
            logger.info(
                "Scanning %d symbols on %s/%s",
                len(symbols),
                universe.short_timeframe,
                universe.long_timeframe,
            )
            setups = await orchestrator.run_universe(symbols)
            shown = filter_setups(setups, signal)

            narratives = await _narrate(narrator, shown) if args.narrate else None
            ReportFormatter.print_console(shown, narratives, finished_at=datetime.now())

            if args.output:
                ReportFormatter.save_json(shown, Path(args.output))

            if not args.loop:
                break
            await asyncio.sleep(interval)
    finally:
        await candle_source.close()
        await narrator.close()


if __name__ == "__main__":
    asyncio.run(main())
