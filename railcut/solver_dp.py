# railcut/solver_dp.py
# Primary solver: unbounded-knapsack DP over reachable rail totals.
#
# One solve = prepare lengths -> build table -> select candidate ->
# reconstruct plan -> BOM. Two table variants:
# - exact:   TMAX = required + max(L) - 1, slot t holds the best state whose
#            total is exactly t (transitions past TMAX are dropped)
# - bounded: overshoot capped to max(100 mm, 5% of required); transitions past
#            TMAX are clamped onto slot TMAX. A clamped state keeps its true
#            total, so sum(plan) == total still holds.
#
# Slot tie-break (pieces, small, total) ascending. Lengths are iterated in
# ascending order, which makes the table deterministic.

from __future__ import annotations

from typing import List, Optional, Tuple

from .config import DEFAULTS
from .errors import Infeasible, ProblemTooLarge
from .lengths import prepare_problem
from .metrics import build_plan_result, selection_cost
from .profile import Profiler
from .solver_base import solver_entry
from .types import Candidate, CutConfig, CutPlan, DPState, Problem

Table = List[Optional[DPState]]


def table_limit(problem: Problem, bounded: bool = False) -> int:
    """TMAX for the chosen variant."""
    if not bounded:
        return problem.window_max
    cap = max(DEFAULTS.bounded_overshoot_floor, int(problem.required * DEFAULTS.bounded_overshoot_fraction))
    cap = min(problem.max_length - 1, cap)
    return problem.required + cap


def _better(pieces: int, small: int, total: int, old: DPState) -> bool:
    return (pieces, small, total) < (old.pieces, old.small, old.total)


def build_table(problem: Problem, *, bounded: bool = False) -> Tuple[Table, int]:
    """
    Build the DP table. Returns (best, TMAX).
    Raises ProblemTooLarge when TMAX exceeds the table ceiling.
    """
    tmax = table_limit(problem, bounded=bounded)
    ceiling = DEFAULTS.dp_table_ceiling
    if tmax > ceiling:
        variant = "bounded DP" if bounded else "DP"
        hint = "Try the greedy strategy." if bounded else "Try the bounded DP or the greedy strategy."
        raise ProblemTooLarge(
            f"Problem too large for {variant} (TMAX={tmax} exceeds {ceiling:,}). {hint}"
        )

    lengths = problem.lengths
    flags = problem.small_flags
    cap = problem.max_pieces

    best: Table = [None] * (tmax + 1)
    best[0] = DPState(total=0, pieces=0, small=0)

    for t in range(tmax + 1):
        cur = best[t]
        if cur is None:
            continue
        pieces = cur.pieces + 1
        if cap is not None and pieces > cap:
            continue

        for i, li in enumerate(lengths):
            nt = t + li
            if nt > tmax:
                if not bounded:
                    break  # ascending lengths: the rest overflow too
                nt = tmax
            small = cur.small + flags[i]
            total = cur.total + li
            old = best[nt]
            if old is None or _better(pieces, small, total, old):
                best[nt] = DPState(total=total, pieces=pieces, small=small, prev=t, last_idx=i)

    return best, tmax


def select_candidate(problem: Problem, best: Table, tmax: int) -> Candidate:
    """
    Scan admissible end states and return the winner under
    (cost, extra, pieces, small, t). Raises Infeasible.
    """
    R = problem.required
    winner: Optional[Candidate] = None

    for t in range(problem.min_allowed, tmax + 1):
        s = best[t]
        if s is None or s.pieces == 0:
            continue
        extra = max(0, s.total - R)
        if problem.exceeds_waste(extra):
            continue  # hard limit, not a penalty
        shortage = max(0, R - s.total)
        joints = max(0, s.pieces - 1)
        cost = selection_cost(problem, extra, joints, s.small, shortage)
        cand = Candidate(t=t, state=s, extra=extra, shortage=shortage, joints=joints, cost=cost)
        if winner is None or cand.key() < winner.key():
            winner = cand

    if winner is None:
        if problem.max_waste_pct is not None:
            raise Infeasible(
                f"No solution found within {problem.max_waste_pct * 100:.1f}% waste limit. "
                f"Try increasing max waste, max pieces, or allowing undershoot."
            )
        raise Infeasible("No feasible combination found. Try increasing max pieces or allowing undershoot.")
    return winner


def reconstruct_plan(problem: Problem, best: Table, t: int) -> List[int]:
    """Walk backpointers from slot t to the root; returns pieces in chain order."""
    plan: List[int] = []
    node = best[t]
    while node is not None and node.prev is not None and node.last_idx is not None:
        plan.append(problem.lengths[node.last_idx])
        node = best[node.prev]
    plan.reverse()
    return plan


def _solve(config: CutConfig, *, bounded: bool, solver: str, profiler: Optional[Profiler]) -> CutPlan:
    prof = profiler or Profiler()

    with prof.phase("prepare"):
        problem = prepare_problem(config)
    prof.count("lengths", len(problem.lengths))

    with prof.phase("table"):
        best, tmax = build_table(problem, bounded=bounded)
    prof.count("slots", tmax + 1)

    with prof.phase("select"):
        cand = select_candidate(problem, best, tmax)

    with prof.phase("reconstruct"):
        plan = reconstruct_plan(problem, best, cand.t)
        result = build_plan_result(config, problem, plan, solver=solver)
    prof.count("pieces", len(plan))

    return result


@solver_entry("dp")
def solve_dp(config: CutConfig, profiler: Optional[Profiler] = None) -> CutPlan:
    """Exact DP solve (the production path)."""
    return _solve(config, bounded=False, solver="dp", profiler=profiler)


@solver_entry("dp_bounded")
def solve_dp_bounded(config: CutConfig, profiler: Optional[Profiler] = None) -> CutPlan:
    """DP with the overshoot-limited table (smaller tables for long spans)."""
    return _solve(config, bounded=True, solver="dp_bounded", profiler=profiler)
