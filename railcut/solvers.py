# railcut/solvers.py
# Strategy registry. Every entry has the same contract:
#   solver(config: CutConfig) -> CutPlan | SolveFailure
#
# "dp" is the production path; the others exist for comparison
# (see benchmark.py).

from __future__ import annotations

from typing import Dict, List

from .solver_base import Solver
from .solver_branch_bound import solve_branch_bound
from .solver_cp_sat import solve_cp_sat
from .solver_dp import solve_dp, solve_dp_bounded
from .solver_greedy import solve_greedy
from .solver_memo import solve_memo
from .types import CutConfig, SolveOutcome

SOLVERS: Dict[str, Solver] = {
    "dp": solve_dp,
    "dp_bounded": solve_dp_bounded,
    "greedy": solve_greedy,
    "branch_bound": solve_branch_bound,
    "memo": solve_memo,
    "cp_sat": solve_cp_sat,
}

DEFAULT_SOLVER = "dp"


def solver_names() -> List[str]:
    return list(SOLVERS)


def get_solver(name: str) -> Solver:
    try:
        return SOLVERS[name]
    except KeyError:
        raise KeyError(f"Unknown solver {name!r}. Known: {', '.join(SOLVERS)}") from None


def solve(config: CutConfig, solver: str = DEFAULT_SOLVER) -> SolveOutcome:
    """Run one solve with the named strategy."""
    return get_solver(solver)(config)
