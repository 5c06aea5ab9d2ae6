"""Data models for capital maximization."""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from capital_allocate._validation import (
    ZERO,
    InvalidInputError,
    exact_context,
    require_no_none_elements,
    require_non_blank,
    require_non_negative_decimal,
    require_non_negative_int,
)

NULL_QUERY_MESSAGE = "Capital maximization query must not be null"
PROJECTS_MESSAGE = "Available projects list must not be null nor contain null elements"
MAX_PROJECTS_MESSAGE = "Max projects must be non-negative"
INITIAL_CAPITAL_MESSAGE = "Initial capital must not be null and must be non-negative"
PROJECT_NAME_MESSAGE = "Project name must not be blank"
REQUIRED_CAPITAL_MESSAGE = "Required capital must be non-negative"
PROFIT_MESSAGE = "Profit must be non-negative"
SELECTED_PROJECTS_MESSAGE = "Selected projects list must not be null nor contain null elements"
FINAL_CAPITAL_MESSAGE = "Final capital must not be null and must be non-negative"


@dataclass(frozen=True)
class Project:
    """Candidate project with a capital threshold and a profit.

    Parameters
    ----------
    name : str
        Non-blank identifier.
    required_capital : Decimal
        Capital needed before the project can be started.
    profit : Decimal
        Capital added once the project is completed.
    """

    name: str
    required_capital: Decimal
    profit: Decimal

    def __post_init__(self) -> None:
        """Validate fields and normalize numbers to ``Decimal``."""
        require_non_blank(self.name, PROJECT_NAME_MESSAGE)
        # frozen: assign through object.__setattr__
        object.__setattr__(
            self,
            "required_capital",
            require_non_negative_decimal(self.required_capital, REQUIRED_CAPITAL_MESSAGE),
        )
        object.__setattr__(self, "profit", require_non_negative_decimal(self.profit, PROFIT_MESSAGE))


@dataclass(frozen=True)
class OptimizationQuery:
    """Input to a capital maximization run.

    Parameters
    ----------
    available_projects : tuple[Project, ...]
        Candidate projects. Any iterable is accepted and materialized.
    max_projects : int
        Maximum number of projects that may be selected.
    initial_capital : Decimal
        Capital available before the first selection.

    Raises
    ------
    InvalidInputError
        If any field violates its invariant.
    """

    available_projects: tuple[Project, ...]
    max_projects: int
    initial_capital: Decimal

    def __post_init__(self) -> None:
        """Validate eagerly so a bad query never reaches a solver."""
        projects = require_no_none_elements(self.available_projects, PROJECTS_MESSAGE)
        if not all(isinstance(p, Project) for p in projects):
            raise InvalidInputError(PROJECTS_MESSAGE)
        object.__setattr__(self, "available_projects", projects)
        require_non_negative_int(self.max_projects, MAX_PROJECTS_MESSAGE)
        object.__setattr__(
            self,
            "initial_capital",
            require_non_negative_decimal(self.initial_capital, INITIAL_CAPITAL_MESSAGE),
        )

    @classmethod
    def build(
        cls,
        available_projects: Iterable[Project] | None,
        max_projects: Any,
        initial_capital: Any,
    ) -> "QueryOutcome":
        """Construct a query without raising.

        Returns
        -------
        QueryOutcome
            Holds either the query or the :class:`InvalidInputError` that
            construction produced.
        """
        try:
            query = cls(available_projects, max_projects, initial_capital)  # type: ignore[arg-type]
        except InvalidInputError as exc:
            return QueryOutcome(query=None, error=exc)
        return QueryOutcome(query=query, error=None)


@dataclass(frozen=True)
class QueryOutcome:
    """Success/failure result of :meth:`OptimizationQuery.build`."""

    query: OptimizationQuery | None
    error: InvalidInputError | None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> OptimizationQuery:
        """Return the query, or raise the stored error."""
        if self.error is not None:
            raise self.error
        if self.query is None:
            raise InvalidInputError(NULL_QUERY_MESSAGE)
        return self.query


@dataclass(frozen=True)
class OptimizationResult:
    """Projects chosen by a solver and the capital they produce.

    Parameters
    ----------
    selected_projects : tuple[Project, ...]
        Projects in the order they were selected.
    final_capital : Decimal
        Initial capital plus the profit of every selected project.
    """

    selected_projects: tuple[Project, ...]
    final_capital: Decimal

    def __post_init__(self) -> None:
        """Validate that the selection holds projects and capital is non-negative."""
        selected = require_no_none_elements(self.selected_projects, SELECTED_PROJECTS_MESSAGE)
        object.__setattr__(self, "selected_projects", selected)
        object.__setattr__(
            self,
            "final_capital",
            require_non_negative_decimal(self.final_capital, FINAL_CAPITAL_MESSAGE),
        )

    @property
    def selected_names(self) -> list[str]:
        return [p.name for p in self.selected_projects]

    @property
    def total_profit(self) -> Decimal:
        with exact_context():
            return sum((p.profit for p in self.selected_projects), ZERO)
