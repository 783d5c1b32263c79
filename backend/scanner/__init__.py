"""Live scanner: market data retrieval, dual-timeframe evaluation and reporting."""
