# railcut/solver_greedy.py
# Greedy heuristic (fast, not optimal). Used for comparison only.
#
# Repeatedly appends the length closest to the remaining residual, minus the
# small-piece penalty, as long as the resulting overshoot stays within 10% of
# the required length (and within the waste ceiling, when one is set).

from __future__ import annotations

from typing import List, Optional

from .config import DEFAULTS
from .errors import Infeasible
from .lengths import prepare_problem
from .metrics import build_plan_result
from .solver_base import solver_entry
from .types import CutConfig, CutPlan


@solver_entry("greedy")
def solve_greedy(config: CutConfig) -> CutPlan:
    problem = prepare_problem(config)
    R = problem.required
    small_set = problem.small_set
    max_over = R * DEFAULTS.greedy_overshoot_fraction

    ordered = sorted(problem.lengths, reverse=True)
    plan: List[int] = []
    total = 0

    while total < problem.min_allowed:
        if problem.max_pieces is not None and len(plan) >= problem.max_pieces:
            break

        residual = R - total
        pick: Optional[int] = None
        pick_score = float("-inf")
        for li in ordered:
            overshoot = total + li - R
            if overshoot > max_over or problem.exceeds_waste(max(0, overshoot)):
                continue
            score = -abs(residual - li) - (problem.beta_small if li in small_set else 0.0)
            if score > pick_score:
                pick, pick_score = li, score

        if pick is None:
            break
        plan.append(pick)
        total += pick

    if not plan or total < problem.min_allowed:
        raise Infeasible(
            f"Greedy stopped at {total} mm of {R} mm required. "
            f"Try increasing max pieces, allowing undershoot, or the DP strategy."
        )

    return build_plan_result(config, problem, plan, solver="greedy")
