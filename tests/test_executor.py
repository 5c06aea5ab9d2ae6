"""Tests for offloading capital maximization onto the worker pool."""

import asyncio
import logging
import threading
import time
from decimal import Decimal

import pytest

from capital_allocate.executor import CapitalOptimizationExecutor
from capital_allocate.models import NULL_QUERY_MESSAGE, InvalidInputError, OptimizationQuery, Project
from capital_allocate.solver import GreedyCapitalSolver, OptimizationCancelledError


@pytest.fixture()
def executor():
    with CapitalOptimizationExecutor(max_workers=2) as pool:
        yield pool


class TestExecutorConstruction:
    def test_default_workers_bounded(self):
        with CapitalOptimizationExecutor() as pool:
            assert 1 <= pool.max_workers <= 4

    def test_invalid_workers_raises(self):
        with pytest.raises(ValueError, match="at least 1"):
            CapitalOptimizationExecutor(max_workers=0)


class TestExecutorSubmit:
    def test_matches_synchronous_result(self, executor, sample_query):
        expected = GreedyCapitalSolver()(sample_query)
        assert executor.submit(sample_query).result(timeout=5) == expected

    def test_maximize(self, executor, sequential_projects):
        result = executor.maximize(OptimizationQuery(sequential_projects, 2, 0), timeout=5)
        assert result.final_capital == Decimal("4")

    def test_concurrent_runs_independent(self, executor, sample_query, sequential_projects):
        other = OptimizationQuery(sequential_projects, 2, 0)
        futures = [executor.submit(q) for q in [sample_query, other] * 5]
        capitals = [f.result(timeout=5).final_capital for f in futures]
        assert capitals == [Decimal("21"), Decimal("4")] * 5

    def test_null_query_raises_in_caller(self, executor):
        with pytest.raises(InvalidInputError, match=NULL_QUERY_MESSAGE):
            executor.submit(None)

    def test_cancel_event_propagates(self, executor, sample_query):
        event = threading.Event()
        event.set()
        future = executor.submit(sample_query, cancel_event=event)
        with pytest.raises(OptimizationCancelledError):
            future.result(timeout=5)

    def test_worker_failure_logged(self, sample_query, caplog):
        def failing(query, cancel_event=None):
            raise RuntimeError("boom")

        with CapitalOptimizationExecutor(solver=failing, max_workers=1) as pool:
            with caplog.at_level(logging.ERROR, logger="capital_allocate.executor"):
                with pytest.raises(RuntimeError, match="boom"):
                    pool.maximize(sample_query, timeout=5)
        assert "error during capital maximization" in caplog.text.lower()

    def test_timeout_sets_cancel_event(self, sample_query):
        release = threading.Event()

        def blocking(query, cancel_event=None):
            release.wait(5)
            return GreedyCapitalSolver()(query)

        event = threading.Event()
        with CapitalOptimizationExecutor(solver=blocking, max_workers=1) as pool:
            with pytest.raises(TimeoutError):
                pool.maximize(sample_query, timeout=0.05, cancel_event=event)
            assert event.is_set()
            release.set()


class TestExecutorAsync:
    @pytest.mark.asyncio
    async def test_maximize_async(self, executor, sample_query):
        result = await executor.maximize_async(sample_query)
        assert result.selected_names == ["Bakery", "Workshop", "Warehouse", "Refinery"]

    @pytest.mark.asyncio
    async def test_gather(self, executor, sample_query, sequential_projects):
        other = OptimizationQuery(sequential_projects, 2, 0)
        results = await asyncio.gather(executor.maximize_async(sample_query), executor.maximize_async(other))
        assert [r.final_capital for r in results] == [Decimal("21"), Decimal("4")]

    @pytest.mark.asyncio
    async def test_null_query_raises(self, executor):
        with pytest.raises(InvalidInputError, match=NULL_QUERY_MESSAGE):
            await executor.maximize_async(None)


class TestExecutorTimeout:
    def test_timeout_stops_worker_without_caller_event(self):
        projects = [Project(f"P{i}", 0, 1) for i in range(20)]
        query = OptimizationQuery(projects, 20, 0)
        rounds = []

        def slow_round(r):
            rounds.append(r)
            time.sleep(0.05)

        with CapitalOptimizationExecutor(solver=GreedyCapitalSolver(observer=slow_round), max_workers=1) as pool:
            with pytest.raises(TimeoutError):
                pool.maximize(query, timeout=0.1)
        assert len(rounds) < len(projects)
