"""Tests for candle and setup models."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from pydantic import ValidationError

from sixline.models import (
    Candle,
    MovingAverageSet,
    Signal,
    TradeSetup,
    get_closes,
    is_ordered,
)


def _candle(hour: int, close: str = "100", open_: str = "99") -> Candle:
    open_time = datetime(2024, 1, 1, hour, tzinfo=timezone.utc)
    return Candle(
        symbol="BTCUSDT",
        timeframe="1h",
        open_time=open_time,
        open=Decimal(open_),
        high=Decimal("102"),
        low=Decimal("98"),
        close=Decimal(close),
        volume=Decimal("5"),
        close_time=open_time + timedelta(hours=1) - timedelta(milliseconds=1),
    )


def _mas() -> MovingAverageSet:
    return MovingAverageSet(
        ma20=Decimal("103"),
        ma60=Decimal("102"),
        ma120=Decimal("101"),
        ema20=Decimal("104"),
        ema60=Decimal("100"),
        ema120=Decimal("102"),
    )


class TestCandle:
    def test_frozen(self):
        candle = _candle(0)
        with pytest.raises(ValidationError):
            candle.close = Decimal("1")

    def test_string_prices_parse_to_decimal(self):
        candle = Candle(
            symbol="X",
            timeframe="1h",
            open_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            open="0.0001",
            high="0.00012",
            low="0.00009",
            close="0.00011",
            volume="1000000",
            close_time=datetime(2024, 1, 1, 1, tzinfo=timezone.utc),
        )
        assert candle.close == Decimal("0.00011")

    def test_is_ordered(self):
        assert is_ordered([_candle(0), _candle(1), _candle(2)])
        assert is_ordered([])
        assert not is_ordered([_candle(1), _candle(0)])
        assert not is_ordered([_candle(1), _candle(1)])

    def test_get_closes(self):
        candles = [_candle(0, close="100"), _candle(1, close="101")]
        assert get_closes(candles) == [Decimal("100"), Decimal("101")]


class TestMovingAverageSet:
    def test_aggregates(self):
        mas = _mas()
        assert mas.values() == [
            Decimal("103"), Decimal("102"), Decimal("101"),
            Decimal("104"), Decimal("100"), Decimal("102"),
        ]
        assert mas.highest == Decimal("104")
        assert mas.lowest == Decimal("100")
        assert mas.mean == Decimal("102")

    def test_alignment(self):
        mas = _mas()
        assert mas.is_bullish_aligned
        assert not mas.is_bearish_aligned


class TestSignal:
    def test_directional(self):
        assert Signal.LONG.is_directional
        assert Signal.SHORT.is_directional
        assert not Signal.WAIT.is_directional
        assert not Signal.WATCH.is_directional

    def test_plan_side(self):
        assert Signal.LONG.uses_long_plan
        assert Signal.WATCH.uses_long_plan
        assert not Signal.SHORT.uses_long_plan
        assert not Signal.WAIT.uses_long_plan


class TestTradeSetup:
    def _setup(self, signal: Signal, stop_loss: str, take_profit: str) -> TradeSetup:
        return TradeSetup(
            symbol="BTCUSDT",
            timeframe="4h",
            price=Decimal("100"),
            mas=_mas(),
            density_score=Decimal("4"),
            price_deviation=Decimal("2"),
            atr=Decimal("1"),
            signal=signal,
            entry_price=Decimal("100"),
            stop_loss=Decimal(stop_loss),
            take_profit=Decimal(take_profit),
            is_dense=False,
            reason="",
        )

    def test_risk_and_reward(self):
        setup = self._setup(Signal.LONG, "96", "108")
        assert setup.risk_amount == Decimal("4")
        assert setup.reward_amount == Decimal("8")

    def test_plan_consistency(self):
        assert self._setup(Signal.LONG, "96", "108").plan_is_consistent
        assert self._setup(Signal.WATCH, "96", "108").plan_is_consistent
        assert self._setup(Signal.SHORT, "104", "92").plan_is_consistent
        assert self._setup(Signal.WAIT, "104", "92").plan_is_consistent
        assert not self._setup(Signal.WAIT, "96", "108").plan_is_consistent
        assert not self._setup(Signal.LONG, "104", "92").plan_is_consistent
