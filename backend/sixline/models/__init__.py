"""Data models."""

from sixline.models.candle import (
    Candle,
    get_closes,
    get_highs,
    get_lows,
    is_ordered,
)
from sixline.models.config import MA_PERIODS, EvaluatorConfig
from sixline.models.setup import MovingAverageSet, Signal, TradeSetup

__all__ = [
    "Candle",
    "get_closes",
    "get_highs",
    "get_lows",
    "is_ordered",
    "MA_PERIODS",
    "EvaluatorConfig",
    "MovingAverageSet",
    "Signal",
    "TradeSetup",
]
