"""Six-line setup evaluator.

Combines the latest SMA/EMA(20/60/120) values with the current price:
- Dense (averages tight AND price near their center) -> WATCH
- MA20 > MA60 > MA120 and price above all six lines -> LONG
- MA20 < MA60 < MA120 and price below all six lines -> SHORT
- Otherwise -> WAIT (tight averages with runaway price get their own reason)

SL/TP based on ATR:
- LONG/WATCH: SL = lowest line - 2 * ATR, TP = entry + 2 * risk
- SHORT/WAIT: SL = highest line + 2 * ATR, TP = entry - 2 * risk

This module is pure business logic with no I/O dependencies.
"""

import logging
from decimal import Decimal
from typing import Sequence

from sixline.indicators import average_true_range, ema, sma
from sixline.models import (
    Candle,
    EvaluatorConfig,
    MovingAverageSet,
    Signal,
    TradeSetup,
    get_closes,
    get_highs,
    get_lows,
)

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")

REASON_DIVERGING = "Averages diverging, no clear pattern."
REASON_LONG = (
    "Bullish alignment (MA20>MA60>MA120) with price above all six lines, trend is up."
)
REASON_SHORT = (
    "Bearish alignment (MA20<MA60<MA120) with price below all six lines, trend is down."
)


def _is_placeholder(value: Decimal | None) -> bool:
    """Check for a missing, non-finite or zero indicator value."""
    if value is None:
        return True
    return not value.is_finite() or value == 0


def _last(series: list[Decimal]) -> Decimal | None:
    return series[-1] if series else None


class SetupEvaluator:
    """Evaluate one candle sequence into a TradeSetup.

    Stateless apart from its configuration; the same input always
    yields the same setup.
    """

    def __init__(self, config: EvaluatorConfig | None = None):
        self.config = config or EvaluatorConfig()

    def compute_moving_averages(
        self, candles: Sequence[Candle]
    ) -> MovingAverageSet | None:
        """Latest SMA/EMA(20/60/120), or None if the 120 lines are unavailable."""
        closes = get_closes(candles)
        ma120 = _last(sma(closes, 120))
        ema120 = _last(ema(closes, 120))
        if _is_placeholder(ma120) or _is_placeholder(ema120):
            return None

        return MovingAverageSet(
            ma20=_last(sma(closes, 20)),
            ma60=_last(sma(closes, 60)),
            ma120=ma120,
            ema20=_last(ema(closes, 20)),
            ema60=_last(ema(closes, 60)),
            ema120=ema120,
        )

    def classify(
        self,
        mas: MovingAverageSet,
        price: Decimal,
    ) -> tuple[Signal, str, bool, Decimal, Decimal]:
        """
        Classify a price against the six averages.

        Returns:
            Tuple of (signal, reason, is_dense, density_score, price_deviation)
        """
        highest = mas.highest
        lowest = mas.lowest

        density_score = (highest - lowest) / price * _HUNDRED
        price_deviation = abs(price - mas.mean) / price * _HUNDRED

        tight = density_score < self.config.dense_threshold
        near = price_deviation < self.config.deviation_threshold
        is_dense = tight and near

        if is_dense:
            signal = Signal.WATCH
            reason = (
                f"Six lines tightly clustered (spread {density_score:.2f}%) with price "
                f"near their center (deviation {price_deviation:.2f}%), expect a move."
            )
        elif mas.is_bullish_aligned and price > highest:
            signal = Signal.LONG
            reason = REASON_LONG
        elif mas.is_bearish_aligned and price < lowest:
            signal = Signal.SHORT
            reason = REASON_SHORT
        elif tight:
            # Averages are tight but price already ran away from them
            signal = Signal.WAIT
            reason = (
                f"Averages are tight but price has run away ({price_deviation:.2f}% "
                f"from center), do not chase, watch for a pullback."
            )
        else:
            signal = Signal.WAIT
            reason = REASON_DIVERGING

        return signal, reason, is_dense, density_score, price_deviation

    def trade_plan(
        self,
        signal: Signal,
        mas: MovingAverageSet,
        price: Decimal,
        atr: Decimal,
    ) -> tuple[Decimal, Decimal]:
        """
        Compute (stop_loss, take_profit) for a classified signal.

        WAIT shares the short-side formula with SHORT.
        """
        sl_buffer = atr * self.config.sl_atr_mult
        rr = self.config.risk_reward

        if signal.uses_long_plan:
            stop_loss = mas.lowest - sl_buffer
            take_profit = price + (price - stop_loss) * rr
        else:
            stop_loss = mas.highest + sl_buffer
            take_profit = price - (stop_loss - price) * rr

        return stop_loss, take_profit

    def build_setup(
        self,
        symbol: str,
        timeframe: str,
        price: Decimal,
        mas: MovingAverageSet,
        atr: Decimal,
    ) -> TradeSetup:
        """Assemble a TradeSetup from precomputed indicator values."""
        signal, reason, is_dense, density_score, price_deviation = self.classify(
            mas, price
        )
        stop_loss, take_profit = self.trade_plan(signal, mas, price, atr)

        setup = TradeSetup(
            symbol=symbol,
            timeframe=timeframe,
            price=price,
            mas=mas,
            density_score=density_score,
            price_deviation=price_deviation,
            atr=atr,
            signal=signal,
            entry_price=price,
            stop_loss=stop_loss,
            take_profit=take_profit,
            is_dense=is_dense,
            reason=reason,
        )
        if not setup.plan_is_consistent:
            logger.debug(
                "%s %s: %s plan has SL %s on the wrong side of entry %s",
                symbol,
                timeframe,
                signal.value,
                stop_loss,
                price,
            )
        return setup

    def evaluate(
        self,
        symbol: str,
        timeframe: str,
        candles: Sequence[Candle],
    ) -> TradeSetup | None:
        """
        Evaluate a candle sequence (ascending by open time).

        Returns:
            TradeSetup, or None if history is insufficient
        """
        if len(candles) < self.config.min_candles:
            logger.debug(
                "%s %s: %d candles, need %d",
                symbol,
                timeframe,
                len(candles),
                self.config.min_candles,
            )
            return None

        mas = self.compute_moving_averages(candles)
        if mas is None:
            logger.debug("%s %s: 120-period averages unavailable", symbol, timeframe)
            return None

        price = candles[-1].close
        if price <= 0:
            logger.debug("%s %s: non-positive price %s", symbol, timeframe, price)
            return None

        atr = average_true_range(
            get_highs(candles),
            get_lows(candles),
            get_closes(candles),
            self.config.atr_period,
        )
        return self.build_setup(symbol, timeframe, price, mas, atr)


def evaluate(
    symbol: str,
    timeframe: str,
    candles: Sequence[Candle],
    config: EvaluatorConfig | None = None,
) -> TradeSetup | None:
    """Evaluate with a one-off evaluator (see ``SetupEvaluator.evaluate``)."""
    return SetupEvaluator(config).evaluate(symbol, timeframe, candles)
