"""Market data clients."""

from scanner.clients.candle_source import (
    CandleSource,
    DirectStrategy,
    KlineRequest,
    PayloadError,
    ProxyStrategy,
    RetrievalStrategy,
    default_strategies,
    parse_klines,
)

__all__ = [
    "CandleSource",
    "DirectStrategy",
    "KlineRequest",
    "PayloadError",
    "ProxyStrategy",
    "RetrievalStrategy",
    "default_strategies",
    "parse_klines",
]
