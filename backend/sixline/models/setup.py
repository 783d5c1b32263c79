"""Signal and trade setup data models."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Signal(str, Enum):
    """Classified setup signal."""

    LONG = "long"
    SHORT = "short"
    WAIT = "wait"
    WATCH = "watch"  # Dense consolidation, move expected

    @property
    def is_directional(self) -> bool:
        return self in (Signal.LONG, Signal.SHORT)

    @property
    def uses_long_plan(self) -> bool:
        """Whether SL/TP are placed below/above entry (long-side formula)."""
        return self in (Signal.LONG, Signal.WATCH)


class MovingAverageSet(BaseModel):
    """Latest SMA and EMA values for the 20/60/120 periods."""

    model_config = ConfigDict(frozen=True)

    ma20: Decimal
    ma60: Decimal
    ma120: Decimal
    ema20: Decimal
    ema60: Decimal
    ema120: Decimal

    def values(self) -> list[Decimal]:
        return [self.ma20, self.ma60, self.ma120, self.ema20, self.ema60, self.ema120]

    @property
    def highest(self) -> Decimal:
        return max(self.values())

    @property
    def lowest(self) -> Decimal:
        return min(self.values())

    @property
    def mean(self) -> Decimal:
        values = self.values()
        return sum(values, Decimal("0")) / len(values)

    @property
    def is_bullish_aligned(self) -> bool:
        """MA20 > MA60 > MA120."""
        return self.ma20 > self.ma60 > self.ma120

    @property
    def is_bearish_aligned(self) -> bool:
        """MA20 < MA60 < MA120."""
        return self.ma20 < self.ma60 < self.ma120


class TradeSetup(BaseModel):
    """Evaluated setup for one instrument on one timeframe."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    timeframe: str
    price: Decimal
    mas: MovingAverageSet
    density_score: Decimal  # Spread of the six averages, % of price
    price_deviation: Decimal  # Distance of price from the six-average mean, % of price
    atr: Decimal
    signal: Signal
    entry_price: Decimal
    stop_loss: Decimal
    take_profit: Decimal
    is_dense: bool
    reason: str

    @property
    def risk_amount(self) -> Decimal:
        """Get the risk amount (distance to stop loss)."""
        return abs(self.entry_price - self.stop_loss)

    @property
    def reward_amount(self) -> Decimal:
        """Get the reward amount (distance to take profit)."""
        return abs(self.take_profit - self.entry_price)

    @property
    def plan_is_consistent(self) -> bool:
        """Check SL/TP lie on the expected sides of entry for the signal."""
        if self.signal.uses_long_plan:
            return self.stop_loss < self.entry_price < self.take_profit
        return self.take_profit < self.entry_price < self.stop_loss
