"""Shared utilities for capital maximization solvers.

Contains query entry checks, the stable capital ordering every solver starts
from, and result assembly.
"""

import logging
from collections.abc import Iterable, Sequence
from decimal import Decimal

from capital_allocate._validation import InvalidInputError, exact_context
from capital_allocate.models import NULL_QUERY_MESSAGE, OptimizationQuery, OptimizationResult, Project

logger = logging.getLogger(__name__)


class OptimizationCancelledError(Exception):
    """Raised when a run is cancelled at a round boundary."""


def check_query(query: object) -> OptimizationQuery:
    """Reject anything that is not a constructed :class:`OptimizationQuery`.

    Raises
    ------
    InvalidInputError
        With :data:`~capital_allocate.models.NULL_QUERY_MESSAGE`.
    """
    if not isinstance(query, OptimizationQuery):
        logger.error("Received null query or available projects list.")
        raise InvalidInputError(NULL_QUERY_MESSAGE)
    return query


def sort_by_required_capital(projects: Iterable[Project]) -> list[Project]:
    """Return a new list sorted ascending by required capital.

    ``sorted`` is stable, so projects with equal capital keep their input order.
    """
    return sorted(projects, key=lambda p: p.required_capital)


def build_result(selected: Sequence[Project], initial_capital: Decimal) -> OptimizationResult:
    """Assemble a result whose capital is recomputed from the selection."""
    final_capital = initial_capital
    with exact_context():
        for project in selected:
            final_capital += project.profit
    return OptimizationResult(selected_projects=tuple(selected), final_capital=final_capital)


def empty_result(query: OptimizationQuery) -> OptimizationResult:
    """Build a result with no selection and the initial capital unchanged."""
    return OptimizationResult(selected_projects=(), final_capital=query.initial_capital)
