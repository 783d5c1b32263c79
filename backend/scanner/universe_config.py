"""Universe configuration loaded from universe.yaml.

Supports:
- The instrument list to scan
- The short/long timeframe pair
- Evaluator threshold overrides
- Backward compatible: no YAML file = default universe on 1h/4h
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator, model_validator

from sixline.models import EvaluatorConfig

logger = logging.getLogger(__name__)

DEFAULT_SYMBOLS = [
    "BTCUSDT", "ETHUSDT", "BNBUSDT", "SOLUSDT", "XRPUSDT",
    "DOGEUSDT", "ADAUSDT", "AVAXUSDT", "LINKUSDT", "DOTUSDT",
    "MATICUSDT", "LTCUSDT", "ATOMUSDT", "NEARUSDT", "APTUSDT",
]

# Binance kline intervals -> duration in minutes
TIMEFRAME_MINUTES = {
    "1m": 1, "3m": 3, "5m": 5, "15m": 15, "30m": 30,
    "1h": 60, "2h": 120, "4h": 240, "6h": 360, "8h": 480, "12h": 720,
    "1d": 1440, "3d": 4320, "1w": 10080,
}


class UniverseConfig(BaseModel):
    """Top-level universe.yaml configuration."""

    symbols: list[str] = list(DEFAULT_SYMBOLS)
    short_timeframe: str = "1h"
    long_timeframe: str = "4h"
    evaluator: EvaluatorConfig = EvaluatorConfig()

    @field_validator("symbols")
    @classmethod
    def _normalize_symbols(cls, value: list[str]) -> list[str]:
        symbols = [s.strip().upper() for s in value if s.strip()]
        if not symbols:
            raise ValueError("symbols must contain at least one instrument")
        return symbols

    @field_validator("short_timeframe", "long_timeframe")
    @classmethod
    def _check_timeframe(cls, value: str) -> str:
        if value not in TIMEFRAME_MINUTES:
            raise ValueError(
                f"timeframe must be one of {tuple(TIMEFRAME_MINUTES)}, got '{value}'"
            )
        return value

    @model_validator(mode="after")
    def _validate(self):
        if TIMEFRAME_MINUTES[self.short_timeframe] >= TIMEFRAME_MINUTES[self.long_timeframe]:
            raise ValueError(
                f"short_timeframe ({self.short_timeframe}) must be shorter than "
                f"long_timeframe ({self.long_timeframe})"
            )
        return self


_DEFAULT_PATH = Path(__file__).parent.parent / "universe.yaml"


def load_universe_config(path: Path | None = None) -> UniverseConfig:
    """Load universe config from YAML file.

    Falls back to defaults if the file doesn't exist.
    """
    config_path = path or _DEFAULT_PATH

    if not config_path.exists():
        logger.info(
            "No universe.yaml found at %s, using defaults (%d symbols)",
            config_path,
            len(DEFAULT_SYMBOLS),
        )
        return UniverseConfig()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    config = UniverseConfig(**raw)
    logger.info(
        "Loaded universe config: %d symbols, timeframes %s/%s",
        len(config.symbols),
        config.short_timeframe,
        config.long_timeframe,
    )
    return config
