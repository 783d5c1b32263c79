"""Technical indicators (pure math, no I/O)."""

from sixline.indicators.indicators import (
    average_true_range,
    ema,
    sma,
    true_range,
)

__all__ = [
    "average_true_range",
    "ema",
    "sma",
    "true_range",
]
