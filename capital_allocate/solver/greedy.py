"""Greedy capital maximization.

Selects up to ``max_projects`` projects one at a time. Each round admits every
project that the current capital can afford into a max-heap keyed by profit,
then takes the most profitable one. Because affordability only grows with
capital, the locally best choice is also globally optimal.
"""

import heapq
import logging
from decimal import Decimal
from typing import Protocol

from capital_allocate._validation import exact_context
from capital_allocate.models import OptimizationQuery, OptimizationResult, Project
from capital_allocate.solver._common import (
    OptimizationCancelledError,
    check_query,
    empty_result,
    sort_by_required_capital,
)
from capital_allocate.solver._types import RoundObserver, SelectionRound

logger = logging.getLogger(__name__)


class CancelFlag(Protocol):
    """Anything with ``is_set()``, e.g. :class:`threading.Event`."""

    def is_set(self) -> bool: ...


class GreedyCapitalSolver:
    """Two-pointer / max-heap greedy solver.

    Runs in O(n log n) for n candidate projects. Profit ties go to the
    project that became affordable first: lower required capital, then
    earlier input position.

    Parameters
    ----------
    observer : RoundObserver, optional
        Called with a :class:`SelectionRound` at the end of every round.
        Purely informational; it cannot affect the selection.
    """

    rule = "greedy_capital"

    def __init__(self, observer: RoundObserver | None = None) -> None:
        self._observer = observer

    def __call__(
        self,
        query: OptimizationQuery,
        cancel_event: CancelFlag | None = None,
    ) -> OptimizationResult:
        """Select projects to maximize final capital.

        Parameters
        ----------
        query : OptimizationQuery
            Validated query.
        cancel_event : CancelFlag, optional
            Checked once per round; if set, the run stops with
            :class:`OptimizationCancelledError`.

        Returns
        -------
        OptimizationResult

        Raises
        ------
        InvalidInputError
            If ``query`` is ``None`` or not an :class:`OptimizationQuery`.
        """
        query = check_query(query)
        logger.info("Starting capital maximization with initial capital: %s", query.initial_capital)

        if query.max_projects == 0 or not query.available_projects:
            logger.info(
                "Nothing to select: max_projects=%d, candidates=%d",
                query.max_projects,
                len(query.available_projects),
            )
            return empty_result(query)

        projects = sort_by_required_capital(query.available_projects)
        logger.debug("Number of available projects: %d", len(projects))

        # entries are (-profit, position in capital order, project)
        profit_heap: list[tuple[Decimal, int, Project]] = []
        selected: list[Project] = []
        capital = query.initial_capital
        cursor = 0

        for round_index in range(query.max_projects):
            if cancel_event is not None and cancel_event.is_set():
                logger.warning("Capital maximization cancelled at round %d", round_index)
                raise OptimizationCancelledError(f"Cancelled at round {round_index}")

            logger.debug("Round %d: current capital %s", round_index, capital)
            capital_before = capital
            admitted_start = cursor
            while cursor < len(projects) and projects[cursor].required_capital <= capital:
                project = projects[cursor]
                heapq.heappush(profit_heap, (project.profit.copy_negate(), cursor, project))
                logger.debug("Project %s (profit: %s) is affordable", project.name, project.profit)
                cursor += 1
            admitted = tuple(p.name for p in projects[admitted_start:cursor])

            if not profit_heap:
                logger.info("No further projects can be selected with current capital: %s", capital)
                self._emit(round_index, capital_before, admitted, None, capital, 0)
                break

            _, _, chosen = heapq.heappop(profit_heap)
            selected.append(chosen)
            with exact_context():
                capital += chosen.profit
            logger.info("Selected project %s. Updated capital: %s", chosen.name, capital)
            self._emit(round_index, capital_before, admitted, chosen, capital, len(profit_heap))

        logger.info("Capital maximization complete. Final capital: %s", capital)
        return OptimizationResult(selected_projects=tuple(selected), final_capital=capital)

    def _emit(
        self,
        index: int,
        capital_before: Decimal,
        admitted: tuple[str, ...],
        selected: Project | None,
        capital_after: Decimal,
        pool_size: int,
    ) -> None:
        if self._observer is None:
            return
        self._observer(
            SelectionRound(
                index=index,
                capital_before=capital_before,
                admitted=admitted,
                selected=selected,
                capital_after=capital_after,
                pool_size=pool_size,
            )
        )
