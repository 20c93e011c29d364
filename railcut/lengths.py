# railcut/lengths.py
# Length set preparation + config checks.
# Every strategy starts here, so bad input is rejected the same way
# everywhere (InvalidInput) before any table or search is built.

from __future__ import annotations

import math
from typing import Iterable, List, Optional

from .errors import InvalidInput
from .types import CutConfig, Problem


def _as_finite(v) -> Optional[float]:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return None
    return x if math.isfinite(x) else None


def round_mm(x: float) -> int:
    """Round to whole mm, halves up (1500.5 -> 1501)."""
    return int(math.floor(x + 0.5))


def prepare_lengths(raw: Iterable) -> List[int]:
    """
    Normalize candidate stock lengths:
    drop non-numeric / non-finite / non-positive values, round to whole mm,
    deduplicate, sort ascending.
    """
    out = set()
    for v in raw or ():
        x = _as_finite(v)
        if x is None or x <= 0:
            continue
        mm = round_mm(x)
        if mm > 0:
            out.add(mm)
    return sorted(out)


def _check_weight(name: str, value) -> float:
    x = _as_finite(value)
    if x is None or x < 0:
        raise InvalidInput(f"{name} must be a finite number >= 0 (got {value!r}).")
    return x


def prepare_problem(config: CutConfig) -> Problem:
    """
    Validate config and build the integer Problem view.
    Raises InvalidInput.
    """
    lengths = prepare_lengths(config.lengths)
    if not lengths:
        raise InvalidInput("No valid cut lengths.")

    req = _as_finite(config.required)
    required = round_mm(req) if req is not None else 0
    if required <= 0:
        raise InvalidInput("Required length must be greater than 0.")

    max_pieces = config.max_pieces
    if max_pieces is not None:
        try:
            cap = int(max_pieces)
        except (TypeError, ValueError, OverflowError):
            cap = 0
        if cap != max_pieces or cap < 1:
            raise InvalidInput(f"max_pieces must be a positive integer (got {max_pieces!r}).")
        max_pieces = cap

    under = _as_finite(config.allow_undershoot_pct)
    if under is None or under < 0 or under >= 1:
        raise InvalidInput(
            f"allow_undershoot_pct must be in [0, 1) (got {config.allow_undershoot_pct!r})."
        )
    min_allowed = int(math.ceil(required * (1 - under))) if under > 0 else required

    waste: Optional[float] = None
    if config.max_waste_pct is not None:
        waste = _as_finite(config.max_waste_pct)
        if waste is None or waste < 0:
            raise InvalidInput(f"max_waste_pct must be >= 0 (got {config.max_waste_pct!r}).")

    small = set(prepare_lengths(config.small_lengths))
    small_flags = tuple(1 if li in small else 0 for li in lengths)

    return Problem(
        required=required,
        lengths=tuple(lengths),
        small_flags=small_flags,
        max_pieces=max_pieces,
        min_allowed=min_allowed,
        max_waste_pct=waste,
        alpha_joint=_check_weight("alpha_joint", config.alpha_joint),
        beta_small=_check_weight("beta_small", config.beta_small),
        gamma_short=_check_weight("gamma_short", config.gamma_short),
    )
