# railcut/scenarios.py
# Scenario generation: re-run the optimizer over a small grid of piece caps
# and joint weights, keep each distinct physical cut list once, and pick
#   C = cheapest (total actual cost, then overshoot, then joints)
#   L = least overshoot (then cost, then joints)
#   J = fewest joints (then cost, then overshoot)
#
# The grid is an explicit list built up front. Grid points are independent
# solves, so they can run in parallel (workers > 1); results are kept in grid
# order either way, which keeps the dedup (first occurrence wins) stable.

from __future__ import annotations

import math
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .config import DEFAULTS
from .lengths import prepare_lengths, round_mm
from .logger import get_logger
from .solvers import DEFAULT_SOLVER, get_solver
from .types import CutConfig, CutPlan, Scenario, ScenarioSet, SolveOutcome


@dataclass(frozen=True)
class GridPoint:
    max_pieces: int
    alpha_joint: Optional[float]   # None = keep the base config weight
    label: str


def _cap_label(pieces: int, min_pieces: int) -> str:
    if pieces == min_pieces:
        return "Minimum Joints"
    if pieces == min_pieces + 1:
        return "Balanced"
    return f"{pieces} Pieces ({pieces - 1} joints)"


def _alpha_label(pieces: int, alpha: float) -> str:
    if alpha == 0:
        return f"{pieces} Pieces (minimize waste)"
    if alpha >= 500:
        return f"{pieces} Pieces (minimize joints)"
    return f"{pieces} Pieces"


def min_possible_pieces(required: float, lengths: Sequence[float]) -> int:
    return int(math.ceil(required / max(lengths)))


def scenario_grid(min_pieces: int) -> List[GridPoint]:
    """Cap sweep with the base weights, then alpha x cap sweep."""
    d = DEFAULTS
    grid: List[GridPoint] = []

    for pieces in range(min_pieces, min(min_pieces + d.scenario_extra_caps, d.scenario_max_cap) + 1):
        grid.append(GridPoint(max_pieces=pieces, alpha_joint=None, label=_cap_label(pieces, min_pieces)))

    for alpha in d.scenario_alphas:
        top = min(min_pieces + d.scenario_alpha_extra_caps, d.scenario_alpha_max_cap)
        for pieces in range(min_pieces, top + 1):
            grid.append(GridPoint(max_pieces=pieces, alpha_joint=alpha, label=_alpha_label(pieces, alpha)))

    return grid


def _point_config(base: CutConfig, point: GridPoint) -> CutConfig:
    if point.alpha_joint is None:
        return base.with_overrides(max_pieces=point.max_pieces)
    return base.with_overrides(max_pieces=point.max_pieces, alpha_joint=point.alpha_joint)


def _solve_point(job: Tuple[CutConfig, str]) -> SolveOutcome:
    config, solver = job
    return get_solver(solver)(config)


def dedupe_scenarios(scenarios: Sequence[Scenario]) -> List[Scenario]:
    """Keep the first scenario of each sorted-plan signature."""
    seen = set()
    out: List[Scenario] = []
    for sc in scenarios:
        if sc.signature in seen:
            continue
        seen.add(sc.signature)
        out.append(sc)
    return out


def select_canonical(unique: Sequence[Scenario]) -> Dict[str, Scenario]:
    def r(sc: Scenario) -> CutPlan:
        return sc.result

    return {
        "C": min(unique, key=lambda sc: (r(sc).total_actual_cost, r(sc).extra, r(sc).joints)),
        "L": min(unique, key=lambda sc: (r(sc).extra, r(sc).total_actual_cost, r(sc).joints)),
        "J": min(unique, key=lambda sc: (r(sc).joints, r(sc).total_actual_cost, r(sc).extra)),
    }


def generate_scenarios(
    base: CutConfig,
    *,
    solver: str = DEFAULT_SOLVER,
    workers: int = 1,
) -> Optional[ScenarioSet]:
    """
    Build the scenario set for one rail. Returns None when no grid point
    solves (no usable lengths, non-positive required length, or every
    combination infeasible). base.max_pieces is ignored.
    """
    log = get_logger()
    lengths = prepare_lengths(base.lengths)
    try:
        required = float(base.required)
    except (TypeError, ValueError):
        return None
    if not lengths or not math.isfinite(required) or round_mm(required) <= 0:
        return None

    min_pieces = min_possible_pieces(round_mm(required), lengths)
    grid = scenario_grid(min_pieces)
    jobs = [(_point_config(base, p), solver) for p in grid]

    if workers > 1 and len(jobs) > 1:
        with ProcessPoolExecutor(max_workers=workers) as ex:
            outcomes = list(ex.map(_solve_point, jobs))
    else:
        outcomes = [_solve_point(j) for j in jobs]

    scenarios: List[Scenario] = []
    for point, out in zip(grid, outcomes):
        if not out.ok:
            log.debug(f"scenario {point.label!r} (cap={point.max_pieces}): {out.kind}: {out.reason}")
            continue
        alpha = base.alpha_joint if point.alpha_joint is None else point.alpha_joint
        scenarios.append(
            Scenario(result=out, label=point.label, max_pieces_used=point.max_pieces, alpha_joint=float(alpha))
        )

    unique = dedupe_scenarios(scenarios)
    log.debug(f"scenarios: grid={len(grid)} solved={len(scenarios)} unique={len(unique)}")
    if not unique:
        return None

    picks = select_canonical(unique)
    ordered = sorted(unique, key=lambda sc: sc.result.total_actual_cost)
    return ScenarioSet(
        cost_best=picks["C"],
        length_best=picks["L"],
        joints_best=picks["J"],
        all_scenarios=ordered,
    )
