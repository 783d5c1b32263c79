"""Tests for the sequential universe scan."""

import asyncio
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

from scanner.services.batch_orchestrator import BatchOrchestrator
from sixline.models import MovingAverageSet, Signal, TradeSetup


def _make_setup(symbol: str, signal: Signal) -> TradeSetup:
    price = Decimal("100")
    mas = MovingAverageSet(
        ma20=price, ma60=price, ma120=price, ema20=price, ema60=price, ema120=price
    )
    return TradeSetup(
        symbol=symbol,
        timeframe="4h",
        price=price,
        mas=mas,
        density_score=Decimal("0"),
        price_deviation=Decimal("0"),
        atr=Decimal("1"),
        signal=signal,
        entry_price=price,
        stop_loss=Decimal("98"),
        take_profit=Decimal("104"),
        is_dense=signal == Signal.WATCH,
        reason="test",
    )


def _make_arbiter(results: dict) -> MagicMock:
    arbiter = MagicMock()
    arbiter.evaluate_instrument = AsyncMock(side_effect=lambda symbol: results[symbol])
    return arbiter


class TestBatchOrchestrator:
    """Tests for BatchOrchestrator.run_universe."""

    @pytest.mark.asyncio
    async def test_drops_missing_and_sorts_watch_first(self):
        results = {
            "A": _make_setup("A", Signal.LONG),
            "B": _make_setup("B", Signal.WATCH),
            "C": None,
            "D": _make_setup("D", Signal.WAIT),
            "E": _make_setup("E", Signal.WATCH),
        }
        orchestrator = BatchOrchestrator(_make_arbiter(results), pause_seconds=0)

        setups = await orchestrator.run_universe(["A", "B", "C", "D", "E"])

        assert [s.symbol for s in setups] == ["B", "E", "A", "D"]

    @pytest.mark.asyncio
    async def test_processes_in_order(self):
        results = {s: _make_setup(s, Signal.WAIT) for s in ["X", "Y", "Z"]}
        arbiter = _make_arbiter(results)
        orchestrator = BatchOrchestrator(arbiter, pause_seconds=0)

        await orchestrator.run_universe(["X", "Y", "Z"])

        called = [call.args[0] for call in arbiter.evaluate_instrument.await_args_list]
        assert called == ["X", "Y", "Z"]

    @pytest.mark.asyncio
    async def test_never_runs_instruments_concurrently(self):
        active = 0
        max_active = 0

        async def evaluate(symbol):
            nonlocal active, max_active
            active += 1
            max_active = max(max_active, active)
            await asyncio.sleep(0)
            active -= 1
            return None

        arbiter = MagicMock()
        arbiter.evaluate_instrument = evaluate
        orchestrator = BatchOrchestrator(arbiter, pause_seconds=0)

        await orchestrator.run_universe(["A", "B", "C", "D"])

        assert max_active == 1

    @pytest.mark.asyncio
    async def test_pauses_between_instruments_only(self):
        results = {s: None for s in ["A", "B", "C"]}
        orchestrator = BatchOrchestrator(_make_arbiter(results))

        with patch(
            "scanner.services.batch_orchestrator.asyncio.sleep", new_callable=AsyncMock
        ) as sleep:
            await orchestrator.run_universe(["A", "B", "C"])

        assert sleep.await_count == 2
        assert all(call.args[0] == 1.5 for call in sleep.await_args_list)

    @pytest.mark.asyncio
    async def test_reports_progress_after_each_instrument(self):
        results = {s: None for s in ["A", "B", "C", "D"]}
        on_progress = AsyncMock()
        orchestrator = BatchOrchestrator(
            _make_arbiter(results), pause_seconds=0, on_progress=on_progress
        )

        await orchestrator.run_universe(["A", "B", "C", "D"])

        fractions = [call.args[0] for call in on_progress.await_args_list]
        assert fractions == [0.25, 0.5, 0.75, 1.0]

    @pytest.mark.asyncio
    async def test_total_outage_returns_empty_list(self):
        results = {s: None for s in ["A", "B"]}
        orchestrator = BatchOrchestrator(_make_arbiter(results), pause_seconds=0)

        assert await orchestrator.run_universe(["A", "B"]) == []

    @pytest.mark.asyncio
    async def test_empty_universe(self):
        on_progress = AsyncMock()
        orchestrator = BatchOrchestrator(
            _make_arbiter({}), pause_seconds=0, on_progress=on_progress
        )

        assert await orchestrator.run_universe([]) == []
        on_progress.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_each_pass_returns_fresh_results(self):
        results = {"A": _make_setup("A", Signal.LONG)}
        orchestrator = BatchOrchestrator(_make_arbiter(results), pause_seconds=0)

        first = await orchestrator.run_universe(["A"])
        results["A"] = None
        second = await orchestrator.run_universe(["A"])

        assert len(first) == 1
        assert second == []
