# railcut/validate.py
# Validation utilities:
# - plan invariants (sum, piece count, joints, small count)
# - cost breakdown matches the weighted formula
# - constraints honored (piece cap, undershoot window, waste ceiling)
#
# Useful both in tests and to sanity-check alternative strategies.

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from .errors import SolveError
from .lengths import prepare_problem
from .metrics import counts_by_length, selection_cost
from .types import CutConfig, SolveOutcome


@dataclass(frozen=True)
class ValidationIssue:
    level: str   # "ERROR" or "WARN"
    message: str
    solver: Optional[str] = None


def _close(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-9)


def validate_result(config: CutConfig, outcome: SolveOutcome) -> List[ValidationIssue]:
    """
    Check one outcome against its config.
    Failures are not errors by themselves; they are reported as WARN.
    """
    if not outcome.ok:
        return [ValidationIssue(level="WARN", message=f"{outcome.kind}: {outcome.reason}", solver=outcome.solver)]

    issues: List[ValidationIssue] = []
    name = outcome.solver

    def err(msg: str) -> None:
        issues.append(ValidationIssue(level="ERROR", message=msg, solver=name))

    try:
        problem = prepare_problem(config)
    except SolveError as e:
        err(f"Successful result for an invalid config: {e}")
        return issues

    plan = outcome.plan
    if sum(plan) != outcome.total:
        err(f"Sum mismatch: plan={sum(plan)}, total={outcome.total}")
    if len(plan) != outcome.pieces:
        err(f"Piece count mismatch: pieces={outcome.pieces}, plan has {len(plan)}")
    if outcome.joints != max(0, outcome.pieces - 1):
        err(f"Joint count mismatch: joints={outcome.joints}, pieces={outcome.pieces}")
    if any(li not in problem.lengths for li in plan):
        err(f"Plan uses lengths outside the stock set: {sorted(set(plan) - set(problem.lengths))}")

    small_set = problem.small_set
    small = sum(1 for li in plan if li in small_set)
    if small != outcome.small_count:
        err(f"Small count mismatch: small_count={outcome.small_count}, plan has {small}")
    if counts_by_length(plan) != dict(outcome.counts_by_length):
        err("counts_by_length does not match the plan")

    R = problem.required
    if outcome.extra != max(0, outcome.total - R) or outcome.shortage != max(0, R - outcome.total):
        err(f"Overshoot/shortage mismatch: extra={outcome.extra}, shortage={outcome.shortage}, total={outcome.total}")

    expected = selection_cost(problem, outcome.extra, outcome.joints, outcome.small_count, outcome.shortage)
    if not _close(outcome.cost, expected):
        err(f"Cost mismatch: cost={outcome.cost}, formula gives {expected}")
    for label, v in (
        ("cost", outcome.cost),
        ("material_cost", outcome.material_cost),
        ("joint_set_cost", outcome.joint_set_cost),
        ("total_actual_cost", outcome.total_actual_cost),
    ):
        if v < 0:
            err(f"Negative {label}: {v}")
    if not _close(outcome.total_actual_cost, outcome.material_cost + outcome.joint_set_cost):
        err("total_actual_cost != material_cost + joint_set_cost")

    if problem.max_pieces is not None and outcome.pieces > problem.max_pieces:
        err(f"Piece cap exceeded: {outcome.pieces} > {problem.max_pieces}")
    if outcome.total < problem.min_allowed:
        err(f"Total {outcome.total} below the allowed minimum {problem.min_allowed}")
    if problem.exceeds_waste(outcome.extra):
        err(f"Waste ceiling exceeded: extra={outcome.extra} ({outcome.extra / R:.2%} of required)")

    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errs = [i for i in issues if i.level.upper() == "ERROR"]
    if errs:
        msg = "\n".join(f"[{e.level}] solver={e.solver} :: {e.message}" for e in errs)
        raise ValueError("Validation failed:\n" + msg)
