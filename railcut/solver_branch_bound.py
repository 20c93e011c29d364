# railcut/solver_branch_bound.py
# Branch & bound over piece multisets (optimal cost, slower on big inputs).
#
# Depth-first over lengths in descending order with a non-decreasing index,
# so each multiset is visited once. A branch is abandoned when
# - its total leaves the useful window (required + max(L) - 1) or the waste
#   ceiling, or
# - its bound already meets or exceeds the best cost found.
# The bound is the part of the cost that can only grow when pieces are added
# (overshoot, joints, small pieces); the shortage term only shrinks.

from __future__ import annotations

from typing import List, Optional, Tuple

from .config import DEFAULTS
from .errors import Infeasible, ProblemTooLarge
from .lengths import prepare_problem
from .metrics import build_plan_result, is_admissible, score_state
from .solver_base import check_search_depth, solver_entry
from .types import CutConfig, CutPlan, Problem


def _lower_bound(problem: Problem, total: int, pieces: int, small: int) -> float:
    extra = max(0, total - problem.required)
    # below the window at least one more piece (one more joint) is needed
    joints = pieces if total < problem.min_allowed and pieces > 0 else max(0, pieces - 1)
    return extra + problem.alpha_joint * joints + problem.beta_small * small


def search_best(problem: Problem) -> Optional[List[int]]:
    """Return the best plan found (descending piece order), or None."""
    lengths = sorted(problem.lengths, reverse=True)
    small_set = problem.small_set
    window_max = problem.window_max
    cap = problem.max_pieces

    best_plan: Optional[List[int]] = None
    best_key: Optional[Tuple[float, int, int, int, int]] = None
    plan: List[int] = []

    def visit(total: int, small: int, start: int) -> None:
        nonlocal best_plan, best_key

        if plan:
            m = score_state(problem, total, len(plan), small)
            if is_admissible(problem, m) and (best_key is None or m.key() < best_key):
                best_key = m.key()
                best_plan = list(plan)

        if cap is not None and len(plan) >= cap:
            return

        for i in range(start, len(lengths)):
            li = lengths[i]
            nt = total + li
            if nt > window_max or problem.exceeds_waste(max(0, nt - problem.required)):
                continue
            ns = small + (1 if li in small_set else 0)
            if best_key is not None and _lower_bound(problem, nt, len(plan) + 1, ns) >= best_key[0]:
                continue
            plan.append(li)
            visit(nt, ns, i)
            plan.pop()

    visit(0, 0, 0)
    return best_plan


@solver_entry("branch_bound")
def solve_branch_bound(config: CutConfig) -> CutPlan:
    problem = prepare_problem(config)
    limit = DEFAULTS.branch_bound_max_required
    if problem.required > limit:
        raise ProblemTooLarge(
            f"Problem too large for Branch & Bound (required={problem.required} exceeds {limit:,}). "
            f"Try the DP or greedy strategy."
        )
    check_search_depth(problem, "Branch & Bound")

    plan = search_best(problem)
    if plan is None:
        raise Infeasible("No feasible combination found. Try increasing max pieces or allowing undershoot.")
    return build_plan_result(config, problem, plan, solver="branch_bound")
