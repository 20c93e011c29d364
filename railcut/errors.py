# railcut/errors.py
# Domain errors raised inside the strategies.
# They never leave a solver: solver_base.solver_entry turns them into
# SolveFailure values. raise_on_failure() goes the other way for scripts.

from __future__ import annotations

from typing import Dict, Type

from .types import SolveOutcome


class SolveError(ValueError):
    kind = "SolveError"


class InvalidInput(SolveError):
    """No usable lengths, non-positive required length or bad parameters."""
    kind = "InvalidInput"


class ProblemTooLarge(SolveError):
    """Table / search bound above the strategy's safety ceiling."""
    kind = "ProblemTooLarge"


class Infeasible(SolveError):
    """Nothing satisfies the undershoot / waste / piece constraints."""
    kind = "Infeasible"


ERRORS_BY_KIND: Dict[str, Type[SolveError]] = {
    InvalidInput.kind: InvalidInput,
    ProblemTooLarge.kind: ProblemTooLarge,
    Infeasible.kind: Infeasible,
}


def raise_on_failure(outcome: SolveOutcome) -> None:
    if outcome.ok:
        return
    exc = ERRORS_BY_KIND.get(outcome.kind, SolveError)
    raise exc(f"[{outcome.solver}] {outcome.reason}")
