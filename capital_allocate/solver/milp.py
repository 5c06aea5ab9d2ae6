"""Exact capital maximization as a binary integer program.

Reference formulation used to check the greedy rule. Variable ``x[i, t]``
is 1 when project ``i`` is taken in round ``t``. A project taken in round
``t`` must be affordable with the initial capital plus the profit of
everything taken in earlier rounds. Uses PuLP with the CBC solver.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

import pulp as lp

from capital_allocate._validation import exact_context
from capital_allocate.models import OptimizationQuery, OptimizationResult, Project
from capital_allocate.solver._common import build_result, check_query, empty_result

logger = logging.getLogger(__name__)


def decimal_places(values: Iterable[Decimal]) -> int:
    """Return the largest number of fractional digits among ``values``."""
    return max((max(0, -v.as_tuple().exponent) for v in values), default=0)


def to_scaled_int(value: Decimal, places: int) -> int:
    """Shift ``value`` left by ``places`` digits and return it as an exact ``int``."""
    with exact_context():
        return int(value.scaleb(places))


def extract_selection(
    x_vars: dict[tuple[int, int], lp.LpVariable],
    projects: list[Project],
    rounds: int,
) -> list[Project]:
    """Read the selected projects out of a solved program, in round order.

    Parameters
    ----------
    x_vars : dict[tuple[int, int], LpVariable]
        Binary variables keyed by ``(project index, round)``.
    projects : list[Project]
        Candidates, indexed as in ``x_vars``.
    rounds : int
        Number of rounds in the formulation.

    Returns
    -------
    list[Project]
    """
    selected: list[Project] = []
    for t in range(rounds):
        for i, project in enumerate(projects):
            value = x_vars[(i, t)].varValue
            if value is not None and value > 0.5:
                selected.append(project)
    return selected


class MilpCapitalSolver:
    """Exact solver for the capital maximization problem.

    All amounts are scaled by a common power of ten so every coefficient is
    an integer. A project short of capital by the smallest representable
    amount then violates its constraint by at least 1, far outside CBC's
    feasibility tolerance. The returned capital is recomputed from the
    selection in ``Decimal``. This holds while scaled amounts stay below
    2**53, where CBC's doubles are still exact. Intended for small instances,
    since the program has ``n * min(k, n)`` binary variables.
    """

    rule = "milp_capital"

    def __call__(self, query: OptimizationQuery) -> OptimizationResult:
        """Solve the program and return the selection in round order.

        Raises
        ------
        InvalidInputError
            If ``query`` is not an :class:`OptimizationQuery`.
        RuntimeError
            If CBC fails or does not report an optimal solution.
        """
        query = check_query(query)
        projects = list(query.available_projects)
        rounds = min(query.max_projects, len(projects))
        if rounds == 0:
            return empty_result(query)

        places = decimal_places(
            [query.initial_capital]
            + [p.required_capital for p in projects]
            + [p.profit for p in projects]
        )
        initial = to_scaled_int(query.initial_capital, places)
        profit = [to_scaled_int(p.profit, places) for p in projects]
        required = [to_scaled_int(p.required_capital, places) for p in projects]
        keys = [(i, t) for i in range(len(projects)) for t in range(rounds)]

        logger.info("Formulating capital maximization program: %d projects, %d rounds", len(projects), rounds)
        prob = lp.LpProblem("Capital_Maximization", lp.LpMaximize)
        x = lp.LpVariable.dicts("Take", keys, 0, 1, lp.LpBinary)

        prob += lp.lpSum(x[(i, t)] * profit[i] for i in range(len(projects)) for t in range(rounds))

        for t in range(rounds):
            prob += lp.lpSum(x[(i, t)] for i in range(len(projects))) <= 1
        for i in range(len(projects)):
            prob += lp.lpSum(x[(i, t)] for t in range(rounds)) <= 1

        for t in range(rounds):
            earned = lp.lpSum(
                x[(j, s)] * profit[j] for j in range(len(projects)) for s in range(t)
            )
            for i in range(len(projects)):
                if required[i] == 0:
                    continue
                prob += x[(i, t)] * required[i] <= initial + earned

        logger.info("Solving the capital maximization program")
        try:
            prob.solve(lp.PULP_CBC_CMD(msg=False))
        except Exception as exc:
            logger.exception("Error solving capital maximization program")
            raise RuntimeError("Error solving capital maximization program") from exc

        status = lp.LpStatus[prob.status]
        if prob.status != lp.LpStatusOptimal:
            logger.warning("Capital maximization program status = %s", status)
            raise RuntimeError(f"Capital maximization program not solved to optimality: {status}")

        selected = extract_selection(x, projects, rounds)
        result = build_result(selected, query.initial_capital)
        logger.info("Program optimum: %d projects, final capital %s", len(selected), result.final_capital)
        return result
