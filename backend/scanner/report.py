"""Report formatting for scan results.

Outputs results to console (formatted tables) and JSON files.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Iterable

from sixline.models import Signal, TradeSetup


class DecimalEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def filter_setups(
    setups: Iterable[TradeSetup], signal: Signal | None = None
) -> list[TradeSetup]:
    """Keep setups with the given signal (all setups when ``signal`` is None)."""
    if signal is None:
        return list(setups)
    return [s for s in setups if s.signal == signal]


class ReportFormatter:
    """Format scan results for display and export."""

    @staticmethod
    def print_console(
        setups: list[TradeSetup],
        narratives: dict[str, str] | None = None,
        finished_at: datetime | None = None,
    ) -> None:
        """Print formatted report to console."""
        print("\n" + "=" * 100)
        print("  SIX-LINE CONFLUENCE SCAN (MA/EMA 20/60/120)")
        print("=" * 100)

        if not setups:
            print("  No setups available (no data or no instrument matched).")
        else:
            print(
                f"  {'Symbol':<10} {'TF':>4} {'Signal':>7} {'Price':>14} "
                f"{'Density%':>9} {'Dev%':>7} {'Stop':>14} {'Target':>14}"
            )
            print("-" * 100)
            for s in setups:
                print(
                    f"  {s.symbol:<10} {s.timeframe:>4} {s.signal.value.upper():>7} "
                    f"{s.price:>14.4f} {s.density_score:>9.2f} {s.price_deviation:>7.2f} "
                    f"{s.stop_loss:>14.4f} {s.take_profit:>14.4f}"
                )
                print(f"  {'':<10} {s.reason}")

        if narratives:
            print("\n" + "-" * 100)
            print("  AI ANALYSIS")
            print("-" * 100)
            for symbol, text in narratives.items():
                print(f"\n  [{symbol}]")
                for line in text.splitlines():
                    print(f"  {line}")

        print("\n" + "=" * 100)
        if finished_at:
            print(f"  Last updated: {finished_at:%Y-%m-%d %H:%M:%S}")
        print("  Technical analysis reference only, not investment advice.")
        print("=" * 100 + "\n")

    @staticmethod
    def to_dict(setup: TradeSetup) -> dict:
        """Convert a setup to a JSON-serializable dict (with risk/reward)."""
        data = setup.model_dump()
        data["risk_amount"] = setup.risk_amount
        data["reward_amount"] = setup.reward_amount
        return json.loads(json.dumps(data, cls=DecimalEncoder))

    @classmethod
    def save_json(cls, setups: list[TradeSetup], path: Path) -> Path:
        """Save setups to a JSON file."""
        data = {
            "generated_at": datetime.now().isoformat(),
            "setups": [cls.to_dict(s) for s in setups],
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        return path
