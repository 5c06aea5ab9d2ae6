"""Type definitions for the solver protocol and round events."""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from capital_allocate.models import OptimizationQuery, OptimizationResult, Project


@dataclass(frozen=True)
class SelectionRound:
    """Diagnostic record emitted at the end of every selection round.

    Parameters
    ----------
    index : int
        Zero-based round number.
    capital_before : Decimal
        Capital at the start of the round.
    admitted : tuple[str, ...]
        Names of projects that became affordable during this round.
    selected : Project | None
        Project chosen in this round, or ``None`` if none was affordable.
    capital_after : Decimal
        Capital once the selected project's profit is added.
    pool_size : int
        Affordable projects still waiting after the selection.
    """

    index: int
    capital_before: Decimal
    admitted: tuple[str, ...]
    selected: Project | None
    capital_after: Decimal
    pool_size: int


RoundObserver = Callable[[SelectionRound], None]


class CapitalSolver(Protocol):
    """Protocol for capital maximization solvers.

    Implementations receive a validated :class:`OptimizationQuery` and return
    an :class:`OptimizationResult`.
    """

    rule: str

    def __call__(self, query: OptimizationQuery) -> OptimizationResult: ...
