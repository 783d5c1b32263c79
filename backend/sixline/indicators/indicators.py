"""Technical indicators for setup evaluation.

Series functions return one value per input, aligned by index. Positions
before the first full window hold ``Decimal("NaN")`` placeholders; callers
read the final element. When the input is shorter than the period the
result is empty.
"""

from decimal import Decimal
from typing import Sequence

import numpy as np

_NAN = Decimal("NaN")


def _to_array(values: Sequence[Decimal]) -> np.ndarray:
    return np.array([float(v) for v in values], dtype=np.float64)


def _to_decimals(arr: np.ndarray) -> list[Decimal]:
    return [Decimal(str(v)) if not np.isnan(v) else _NAN for v in arr]


def sma(values: Sequence[Decimal], period: int) -> list[Decimal]:
    """
    Calculate Simple Moving Average.

    Args:
        values: Sequence of price values (typically closes)
        period: SMA period

    Returns:
        List of SMA values, empty if fewer than ``period`` values
    """
    if len(values) < period:
        return []

    arr = _to_array(values)
    result = np.empty_like(arr)
    result[:period - 1] = np.nan

    for i in range(period - 1, len(arr)):
        result[i] = np.mean(arr[i - period + 1 : i + 1])

    return _to_decimals(result)


def ema(values: Sequence[Decimal], period: int) -> list[Decimal]:
    """
    Calculate Exponential Moving Average.

    Seeded with the SMA of the first ``period`` values, then
    ``ema[i] = value[i] * k + ema[i-1] * (1 - k)`` with ``k = 2 / (period + 1)``.

    Args:
        values: Sequence of price values (typically closes)
        period: EMA period

    Returns:
        List of EMA values, empty if fewer than ``period`` values
    """
    if len(values) < period:
        return []

    arr = _to_array(values)
    multiplier = 2.0 / (period + 1)

    result = np.empty_like(arr)
    result[:period - 1] = np.nan
    result[period - 1] = np.mean(arr[:period])

    # Incremental form stays exact when value equals the previous EMA
    for i in range(period, len(arr)):
        result[i] = result[i - 1] + (arr[i] - result[i - 1]) * multiplier

    return _to_decimals(result)


def true_range(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
) -> list[Decimal]:
    """
    Calculate True Range.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))

    The first bar has no previous close and uses high - low.
    """
    n = len(highs)
    if n == 0:
        return []

    result = [highs[0] - lows[0]]

    for i in range(1, n):
        hl = highs[i] - lows[i]
        hc = abs(highs[i] - closes[i - 1])
        lc = abs(lows[i] - closes[i - 1])
        result.append(max(hl, hc, lc))

    return result


def average_true_range(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
    period: int = 14,
) -> Decimal:
    """
    Calculate the latest Average True Range as a single value.

    Plain mean of the last ``period`` true ranges (not Wilder smoothing).
    Every averaged bar has a previous close, so at least ``period + 1``
    bars are required; otherwise returns 0.

    Args:
        highs: Sequence of high prices
        lows: Sequence of low prices
        closes: Sequence of close prices
        period: ATR period

    Returns:
        ATR value for the most recent bar
    """
    if len(closes) < period + 1:
        return Decimal("0")

    tr = true_range(highs, lows, closes)
    return sum(tr[-period:], Decimal("0")) / period
