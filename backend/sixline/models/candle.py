"""Candle (OHLC bar) data model."""

from datetime import datetime
from decimal import Decimal
from typing import Sequence

from pydantic import BaseModel, ConfigDict


class Candle(BaseModel):
    """Candlestick data model."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    timeframe: str
    open_time: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal
    close_time: datetime


def is_ordered(candles: Sequence[Candle]) -> bool:
    """Check that open times are strictly ascending (no duplicates)."""
    return all(
        prev.open_time < cur.open_time for prev, cur in zip(candles, candles[1:])
    )


def get_closes(candles: Sequence[Candle]) -> list[Decimal]:
    """Get list of close prices."""
    return [c.close for c in candles]


def get_highs(candles: Sequence[Candle]) -> list[Decimal]:
    """Get list of high prices."""
    return [c.high for c in candles]


def get_lows(candles: Sequence[Candle]) -> list[Decimal]:
    """Get list of low prices."""
    return [c.low for c in candles]
