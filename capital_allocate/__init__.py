"""Greedy capital maximization over a catalog of projects."""

from capital_allocate._validation import InvalidInputError
from capital_allocate.adapter import CapitalAllocateComponent
from capital_allocate.executor import CapitalOptimizationExecutor
from capital_allocate.models import OptimizationQuery, OptimizationResult, Project, QueryOutcome
from capital_allocate.solver import (
    GreedyCapitalSolver,
    MilpCapitalSolver,
    OptimizationCancelledError,
    SelectionRound,
    maximize_capital,
)

__all__ = [
    "CapitalAllocateComponent",
    "CapitalOptimizationExecutor",
    "GreedyCapitalSolver",
    "InvalidInputError",
    "MilpCapitalSolver",
    "OptimizationCancelledError",
    "OptimizationQuery",
    "OptimizationResult",
    "Project",
    "QueryOutcome",
    "SelectionRound",
    "maximize_capital",
]
