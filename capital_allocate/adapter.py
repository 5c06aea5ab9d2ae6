"""ALLOCATE component: capital maximization for orchestrator pipelines."""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Protocol

from capital_allocate._validation import InvalidInputError, exact_context
from capital_allocate.models import PROJECTS_MESSAGE, OptimizationQuery, OptimizationResult, Project
from capital_allocate.solver._types import CapitalSolver
from capital_allocate.solver.greedy import GreedyCapitalSolver

logger = logging.getLogger(__name__)


class PipelineComponent(Protocol):
    """Structural interface for pipeline stage components."""

    def execute(self, event: dict) -> dict:
        """Process event and return result."""
        ...


@dataclass
class AllocateResult:
    """Serialized capital maximization outcome."""

    selected_projects: list[str]
    final_capital: str
    capital_gained: str


_FIELD_MAP_IN: dict[str, str] = {
    "requiredCapital": "required_capital",
    "projectName": "name",
}

_PROJECT_FIELDS = ("name", "required_capital", "profit")


def _to_project(payload: dict[str, Any]) -> Project:
    """Build a :class:`Project` from a wire-format project dict.

    Parameters
    ----------
    payload : dict[str, Any]
        Project dict with either wire (camelCase) or solver field names.
        Keys other than name, capital and profit (``id``, ``version``,
        audit metadata) are ignored.

    Returns
    -------
    Project
    """
    mapped = {_FIELD_MAP_IN.get(key, key): value for key, value in payload.items()}
    return Project(**{field: mapped.get(field) for field in _PROJECT_FIELDS})


class CapitalAllocateComponent(PipelineComponent):
    """Select projects that maximize final capital.

    Handles field mapping and query construction, then delegates the
    selection to the configured solver.

    Parameters
    ----------
    solver : CapitalSolver, optional
        Solver to use. Defaults to :class:`GreedyCapitalSolver`.
    """

    def __init__(self, solver: CapitalSolver | None = None) -> None:
        self._solver = solver or GreedyCapitalSolver()

    def execute(self, event: dict) -> dict:
        """Run capital maximization and return an ``AllocateResult`` dict with solver detail.

        Parameters
        ----------
        event : dict
            Must contain ``projects`` (list of project dicts), ``max_projects``
            (int) and ``initial_capital`` (number or numeric string).

        Returns
        -------
        dict
            Serialized ``AllocateResult`` with ``selected_projects``,
            ``final_capital``, ``capital_gained`` and ``solver_detail``.

        Raises
        ------
        InvalidInputError
            If the event does not describe a valid query.
        """
        raw_projects = event.get("projects")
        if not isinstance(raw_projects, (list, tuple)):
            raise InvalidInputError(PROJECTS_MESSAGE)
        if not all(isinstance(p, dict) for p in raw_projects):
            raise InvalidInputError(PROJECTS_MESSAGE)
        projects = [_to_project(p) for p in raw_projects]
        query = OptimizationQuery(projects, event.get("max_projects"), event.get("initial_capital"))  # type: ignore[arg-type]

        result: OptimizationResult = self._solver(query)
        with exact_context():
            gained = result.final_capital - query.initial_capital
        selected = len(result.selected_projects)
        exhausted = selected < min(query.max_projects, len(query.available_projects))

        if exhausted:
            logger.warning(
                "Affordable projects exhausted after %d of %d selections",
                selected,
                query.max_projects,
            )
        else:
            logger.info("Allocation complete: selected=%d projects, final capital=%s", selected, result.final_capital)

        output = asdict(
            AllocateResult(
                selected_projects=result.selected_names,
                final_capital=str(result.final_capital),
                capital_gained=str(gained),
            )
        )
        output["solver_detail"] = {
            "rule": getattr(self._solver, "rule", type(self._solver).__name__),
            "rounds": selected,
            "exhausted": exhausted,
        }
        return output
