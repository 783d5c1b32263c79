"""Evaluator configuration model."""

from decimal import Decimal

from pydantic import BaseModel, Field

# Moving-average periods of the six-line system (SMA and EMA each)
MA_PERIODS = (20, 60, 120)


class EvaluatorConfig(BaseModel):
    """Thresholds and constants used by the setup evaluator.

    Defaults are the values the six-line system is calibrated for.
    Thresholds are in percent of current price.
    """

    # Minimum history before any evaluation
    min_candles: int = Field(default=150, ge=max(MA_PERIODS))
    atr_period: int = Field(default=14, gt=0)

    # Density: spread of the six averages must be under this
    dense_threshold: Decimal = Decimal("2.0")
    # Price must stay within this distance from the six-average mean
    deviation_threshold: Decimal = Decimal("3.0")

    # Stop loss buffer = ATR * sl_atr_mult beyond the outermost average
    sl_atr_mult: Decimal = Decimal("2")
    # Take profit distance = risk * risk_reward
    risk_reward: Decimal = Decimal("2")
