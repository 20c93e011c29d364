# railcut/metrics.py
# Plan metrics shared by every strategy:
# - overshoot / shortage / joints / small count
# - the weighted selection cost
# - building the final CutPlan (with BOM costs)
#
# All solvers go through build_plan_result(), so the cost function and the
# result shape are defined exactly once.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Sequence, Tuple

from .costing import PriceModel, compute_bom
from .types import CutConfig, CutPlan, Problem


@dataclass(frozen=True)
class PlanMetrics:
    total: int
    extra: int
    shortage: int
    pieces: int
    joints: int
    small: int
    cost: float

    def key(self) -> Tuple[float, int, int, int, int]:
        """Selection ordering (cost, extra, pieces, small, total)."""
        return (self.cost, self.extra, self.pieces, self.small, self.total)


def selection_cost(problem: Problem, extra: int, joints: int, small: int, shortage: int) -> float:
    return (
        extra
        + problem.alpha_joint * joints
        + problem.beta_small * small
        + problem.gamma_short * shortage
    )


def score_state(problem: Problem, total: int, pieces: int, small: int) -> PlanMetrics:
    """Score a reachable (total, pieces, small) triple."""
    R = problem.required
    extra = max(0, total - R)
    shortage = max(0, R - total)
    joints = max(0, pieces - 1)
    cost = selection_cost(problem, extra, joints, small, shortage)
    return PlanMetrics(
        total=total,
        extra=extra,
        shortage=shortage,
        pieces=pieces,
        joints=joints,
        small=small,
        cost=cost,
    )


def score_plan(problem: Problem, plan: Sequence[int]) -> PlanMetrics:
    small_set = problem.small_set
    small = sum(1 for li in plan if li in small_set)
    return score_state(problem, sum(plan), len(plan), small)


def is_admissible(problem: Problem, m: PlanMetrics) -> bool:
    """Undershoot window, waste ceiling and piece cap."""
    if m.pieces == 0 or m.total < problem.min_allowed:
        return False
    if problem.max_pieces is not None and m.pieces > problem.max_pieces:
        return False
    return not problem.exceeds_waste(m.extra)


def counts_by_length(plan: Iterable[int]) -> Dict[int, int]:
    """Length -> count histogram, ascending by length."""
    counts: Dict[int, int] = {}
    for li in plan:
        counts[li] = counts.get(li, 0) + 1
    return dict(sorted(counts.items()))


def build_plan_result(
    config: CutConfig,
    problem: Problem,
    plan: Sequence[int],
    *,
    solver: str,
) -> CutPlan:
    """Turn an ordered list of chosen lengths into a full CutPlan."""
    plan = tuple(int(li) for li in plan)
    m = score_plan(problem, plan)
    bom = compute_bom(m.total, m.joints, PriceModel.from_config(config))

    return CutPlan(
        plan=plan,
        counts_by_length=counts_by_length(plan),
        total=m.total,
        extra=m.extra,
        shortage=m.shortage,
        pieces=m.pieces,
        joints=m.joints,
        small_count=m.small,
        cost=m.cost,
        material_cost=bom.material_cost,
        joint_set_cost=bom.joint_set_cost,
        total_actual_cost=bom.total_actual_cost,
        solver=solver,
    )
