"""Capital maximization solvers.

Provides the greedy decision rule, an exact integer-programming reference
solver, shared result helpers, and the ``CapitalSolver`` protocol that all
solvers satisfy.

Convenience function ``maximize_capital`` validates its arguments and runs the
greedy solver in a single call.
"""

from collections.abc import Iterable
from typing import Any

from capital_allocate.models import OptimizationQuery, OptimizationResult, Project
from capital_allocate.solver._common import (
    OptimizationCancelledError,
    build_result,
    check_query,
    empty_result,
    sort_by_required_capital,
)
from capital_allocate.solver._types import CapitalSolver, RoundObserver, SelectionRound
from capital_allocate.solver.greedy import GreedyCapitalSolver
from capital_allocate.solver.milp import MilpCapitalSolver

__all__ = [
    "CapitalSolver",
    "GreedyCapitalSolver",
    "MilpCapitalSolver",
    "OptimizationCancelledError",
    "RoundObserver",
    "SelectionRound",
    "build_result",
    "check_query",
    "empty_result",
    "maximize_capital",
    "sort_by_required_capital",
]


def maximize_capital(
    projects: OptimizationQuery | Iterable[Project] | None,
    max_projects: int | None = None,
    initial_capital: Any = None,
    observer: RoundObserver | None = None,
) -> OptimizationResult:
    """Run the greedy solver in one call.

    Accepts either a ready :class:`OptimizationQuery` or the three query
    fields, which are validated before any selection happens.

    Parameters
    ----------
    projects : OptimizationQuery | Iterable[Project]
        A query, or the candidate projects.
    max_projects : int, optional
        Maximum number of selections. Required unless ``projects`` is a query.
    initial_capital : Decimal | int | str, optional
        Starting capital. Required unless ``projects`` is a query.
    observer : RoundObserver, optional
        Receives a :class:`SelectionRound` per round.

    Returns
    -------
    OptimizationResult

    Raises
    ------
    InvalidInputError
        If the query or any of its fields is invalid.
    """
    if isinstance(projects, OptimizationQuery):
        query = projects
    elif projects is None:
        query = check_query(None)
    else:
        query = OptimizationQuery(projects, max_projects, initial_capital)  # type: ignore[arg-type]
    return GreedyCapitalSolver(observer=observer)(query)
