"""Offload capital maximization onto a dedicated worker pool.

The greedy computation is CPU-bound and has no suspension points, so callers
running I/O loops hand it to a bounded thread pool reserved for this work.
Each run operates on its own query, so no locking is needed.
"""

import asyncio
import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor

from capital_allocate.models import OptimizationQuery, OptimizationResult
from capital_allocate.solver._common import OptimizationCancelledError, check_query
from capital_allocate.solver.greedy import GreedyCapitalSolver

logger = logging.getLogger(__name__)


def _default_workers() -> int:
    return min(4, os.cpu_count() or 1)


class CapitalOptimizationExecutor:
    """Run greedy capital maximization on a bounded worker pool.

    Parameters
    ----------
    solver : GreedyCapitalSolver, optional
        Solver to run. Defaults to a fresh :class:`GreedyCapitalSolver`.
    max_workers : int, optional
        Pool size. Defaults to ``min(4, os.cpu_count())``.
    """

    def __init__(self, solver: GreedyCapitalSolver | None = None, max_workers: int | None = None) -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1.")
        self._solver = solver or GreedyCapitalSolver()
        self.max_workers = max_workers or _default_workers()
        self._pool = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="capital-optimizer")

    def submit(
        self,
        query: OptimizationQuery,
        cancel_event: threading.Event | None = None,
    ) -> "Future[OptimizationResult]":
        """Validate ``query`` and schedule it on the pool.

        Validation happens in the calling thread, so an invalid query raises
        :class:`~capital_allocate.models.InvalidInputError` here rather than
        from the future.
        """
        query = check_query(query)
        future = self._pool.submit(self._run, query, cancel_event)
        return future

    def maximize(
        self,
        query: OptimizationQuery,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> OptimizationResult:
        """Run ``query`` on the pool and wait for the result.

        Raises
        ------
        concurrent.futures.TimeoutError
            If ``timeout`` seconds pass first. ``cancel_event`` (created when
            not given) is set so the worker stops at its next round boundary.
        """
        event = cancel_event if cancel_event is not None else threading.Event()
        future = self.submit(query, event)
        try:
            return future.result(timeout=timeout)
        except TimeoutError:
            logger.warning("Capital maximization timed out after %s seconds", timeout)
            event.set()
            future.cancel()
            raise

    async def maximize_async(
        self,
        query: OptimizationQuery,
        cancel_event: threading.Event | None = None,
    ) -> OptimizationResult:
        """Await ``query`` on the pool without blocking the event loop.

        If the awaiting task is cancelled, ``cancel_event`` (created when not
        given) is set so the worker stops at its next round boundary.
        """
        query = check_query(query)
        event = cancel_event if cancel_event is not None else threading.Event()
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._pool, self._run, query, event)
        except asyncio.CancelledError:
            event.set()
            raise

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> "CapitalOptimizationExecutor":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def _run(self, query: OptimizationQuery, cancel_event: threading.Event | None) -> OptimizationResult:
        try:
            return self._solver(query, cancel_event=cancel_event)
        except OptimizationCancelledError:
            raise
        except Exception:
            logger.exception("Error during capital maximization")
            raise
