# railcut/solver_cp_sat.py
# CP-SAT (OR-Tools) formulation of the same selection, for cross-checking
# the DP on benchmark instances.
#
# Model: one integer count per stock length.
#   total    = sum(count_i * l_i)       in [min_allowed, required + max(L) - 1]
#   pieces   = sum(count_i)             <= max_pieces (if set), >= 1
#   small    = sum(count_i for small l_i)
#   extra    = max(0, total - required),  shortage = max(0, required - total)
#
# Objectives are solved lexicographically: cost, extra, pieces, small, total.
# Each optimum is fixed as a constraint before the next objective.
# CP-SAT needs integer coefficients, so the weights are scaled by
# DEFAULTS.cp_sat_weight_scale and rounded. The reported cost is recomputed
# exactly from the plan by build_plan_result().

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from ortools.sat.python import cp_model

from .config import DEFAULTS
from .errors import Infeasible
from .lengths import prepare_problem
from .metrics import build_plan_result
from .solver_base import solver_entry
from .types import CutConfig, CutPlan, Problem


@dataclass(frozen=True)
class CpSatParams:
    time_limit_s: float = DEFAULTS.cp_sat_time_limit_s
    weight_scale: int = DEFAULTS.cp_sat_weight_scale
    num_search_workers: int = 2


def _scaled(w: float, scale: int) -> int:
    return int(round(w * scale))


def solve_counts(problem: Problem, params: CpSatParams) -> Optional[List[int]]:
    """Return the chosen pieces (ascending), or None if infeasible."""
    R = problem.required
    lengths = problem.lengths
    hi_total = problem.window_max
    if problem.max_extra_mm is not None:
        hi_total = min(hi_total, R + problem.max_extra_mm)
    if hi_total < problem.min_allowed:
        return None

    m = cp_model.CpModel()

    counts = []
    for i, li in enumerate(lengths):
        ub = int(math.ceil(hi_total / li))
        if problem.max_pieces is not None:
            ub = min(ub, problem.max_pieces)
        counts.append(m.NewIntVar(0, ub, f"count[{li}]"))

    max_pieces_ub = sum(int(math.ceil(hi_total / li)) for li in lengths)

    total = m.NewIntVar(problem.min_allowed, hi_total, "total")
    m.Add(total == sum(li * c for li, c in zip(lengths, counts)))

    pieces = m.NewIntVar(1, max_pieces_ub, "pieces")
    m.Add(pieces == sum(counts))
    if problem.max_pieces is not None:
        m.Add(pieces <= problem.max_pieces)

    small = m.NewIntVar(0, max_pieces_ub, "small")
    m.Add(small == sum(c for c, f in zip(counts, problem.small_flags) if f))

    zero = m.NewConstant(0)
    over = m.NewIntVar(-R, hi_total - R, "total_minus_required")
    m.Add(over == total - R)
    extra = m.NewIntVar(0, max(0, hi_total - R), "extra")
    m.AddMaxEquality(extra, [over, zero])

    under = m.NewIntVar(R - hi_total, R, "required_minus_total")
    m.Add(under == R - total)
    shortage = m.NewIntVar(0, R, "shortage")
    m.AddMaxEquality(shortage, [under, zero])

    joints = m.NewIntVar(0, max_pieces_ub - 1, "joints")
    m.Add(joints == pieces - 1)

    s = params.weight_scale
    cost = (
        s * extra
        + _scaled(problem.alpha_joint, s) * joints
        + _scaled(problem.beta_small, s) * small
        + _scaled(problem.gamma_short, s) * shortage
    )

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = float(params.time_limit_s)
    solver.parameters.num_search_workers = int(params.num_search_workers)

    chosen: Optional[List[int]] = None
    for objective in (cost, extra, pieces, small, total):
        m.Minimize(objective)
        status = solver.Solve(m)
        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            break  # keep the last solution (time limit hit on a later stage)
        chosen = [int(solver.Value(c)) for c in counts]
        m.Add(objective == int(round(solver.ObjectiveValue())))

    if chosen is None:
        return None

    plan: List[int] = []
    for li, n in zip(lengths, chosen):
        plan.extend([li] * n)
    return plan


@solver_entry("cp_sat")
def solve_cp_sat(config: CutConfig, params: Optional[CpSatParams] = None) -> CutPlan:
    problem = prepare_problem(config)
    plan = solve_counts(problem, params or CpSatParams())
    if not plan:
        if problem.max_waste_pct is not None:
            raise Infeasible(
                f"No solution found within {problem.max_waste_pct * 100:.1f}% waste limit. "
                f"Try increasing max waste, max pieces, or allowing undershoot."
            )
        raise Infeasible("No feasible combination found. Try increasing max pieces or allowing undershoot.")
    return build_plan_result(config, problem, plan, solver="cp_sat")
