# railcut/solver_memo.py
# Top-down recursive formulation, memoized by (remaining, pieces, small).
# Used for comparison with the DP; same admissibility rules and the same
# (cost, extra, pieces, small, total) selection order.

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .config import DEFAULTS
from .errors import Infeasible, ProblemTooLarge
from .lengths import prepare_problem
from .metrics import build_plan_result, is_admissible, score_state
from .solver_base import check_search_depth, solver_entry
from .types import CutConfig, CutPlan, Problem

Key = Tuple[float, int, int, int, int]
Best = Optional[Tuple[Key, Tuple[int, ...]]]


def search_memo(problem: Problem) -> Optional[List[int]]:
    R = problem.required
    lengths = problem.lengths
    flags = problem.small_flags
    cap = problem.max_pieces
    window_max = problem.window_max
    memo: Dict[Tuple[int, int, int], Best] = {}

    def best(remaining: int, pieces: int, small: int) -> Best:
        k = (remaining, pieces, small)
        if k in memo:
            return memo[k]

        total = R - remaining
        result: Best = None

        # stop here
        if pieces > 0:
            m = score_state(problem, total, pieces, small)
            if is_admissible(problem, m):
                result = (m.key(), ())

        # or add one more piece (never useful once the target is reached)
        if remaining > 0 and (cap is None or pieces < cap):
            for i, li in enumerate(lengths):
                nt = total + li
                if nt > window_max or problem.exceeds_waste(max(0, nt - R)):
                    break  # ascending lengths
                sub = best(remaining - li, pieces + 1, small + flags[i])
                if sub is None:
                    continue
                if result is None or sub[0] < result[0]:
                    result = (sub[0], (li,) + sub[1])

        memo[k] = result
        return result

    found = best(R, 0, 0)
    return list(found[1]) if found is not None else None


@solver_entry("memo")
def solve_memo(config: CutConfig) -> CutPlan:
    problem = prepare_problem(config)
    tmax = problem.window_max
    ceiling = DEFAULTS.memo_bound_ceiling
    if tmax > ceiling:
        raise ProblemTooLarge(
            f"Problem too large for Recursive Memo (TMAX={tmax} exceeds {ceiling:,}). Try Greedy."
        )
    check_search_depth(problem, "Recursive Memo")

    plan = search_memo(problem)
    if plan is None:
        raise Infeasible("No feasible combination found. Try increasing max pieces or allowing undershoot.")
    return build_plan_result(config, problem, plan, solver="memo")
