"""Timeframe selection and result ordering rules.

Given the setups of a shorter and a longer timeframe, surface one:
1. A WATCH setup wins (the longer timeframe if both are WATCH)
2. Else a directional (LONG/SHORT) setup wins (longer timeframe if both)
3. Else the longer timeframe's setup if present, otherwise the shorter one
"""

from typing import Iterable

from sixline.models import Signal, TradeSetup


def select_setup(
    short: TradeSetup | None,
    long: TradeSetup | None,
) -> TradeSetup | None:
    """Pick the setup to surface from the short- and long-timeframe results."""
    for candidate in (long, short):
        if candidate is not None and candidate.signal == Signal.WATCH:
            return candidate

    for candidate in (long, short):
        if candidate is not None and candidate.signal.is_directional:
            return candidate

    return long if long is not None else short


def sort_watch_first(setups: Iterable[TradeSetup]) -> list[TradeSetup]:
    """Order WATCH setups before all others, keeping relative order otherwise."""
    return sorted(setups, key=lambda s: s.signal != Signal.WATCH)
