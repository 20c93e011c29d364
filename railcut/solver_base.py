# railcut/solver_base.py
# Shared contract for all strategies: CutConfig -> SolveOutcome.
#
# A strategy is written as a function that may raise SolveError subclasses;
# solver_entry() wraps it so callers only ever get CutPlan or SolveFailure.

from __future__ import annotations

import functools
from typing import Callable, Protocol

from .config import DEFAULTS
from .errors import ProblemTooLarge, SolveError
from .logger import get_logger
from .types import CutConfig, Problem, SolveFailure, SolveOutcome


class Solver(Protocol):
    def __call__(self, config: CutConfig) -> SolveOutcome:
        ...


def solver_entry(name: str) -> Callable[[Callable[..., SolveOutcome]], Callable[..., SolveOutcome]]:
    """
    Decorator for strategy entry points.
    Domain errors become SolveFailure(kind, reason, solver=name).
    """
    def wrap(fn: Callable[..., SolveOutcome]) -> Callable[..., SolveOutcome]:
        @functools.wraps(fn)
        def run(config: CutConfig, *args, **kwargs) -> SolveOutcome:
            try:
                return fn(config, *args, **kwargs)
            except SolveError as e:
                get_logger().debug(f"{name}: {e.kind}: {e}")
                return SolveFailure.from_error(e, solver=name)

        run.solver_name = name  # type: ignore[attr-defined]
        return run

    return wrap


def check_search_depth(problem: Problem, strategy: str) -> int:
    """
    Recursive strategies go one call deeper per piece. Refuse plans that
    could be deeper than the interpreter allows.
    """
    depth = problem.window_max // problem.min_length + 1
    if problem.max_pieces is not None:
        depth = min(depth, problem.max_pieces)
    limit = DEFAULTS.memo_max_depth
    if depth > limit:
        raise ProblemTooLarge(
            f"Problem too large for {strategy} (up to {depth} pieces deep, limit {limit}). "
            f"Try the DP strategy."
        )
    return depth
