# railcut/config.py
# Centralized defaults and configuration helpers.
# Keeps "magic numbers" (weights, stock lengths, safety ceilings) in one place.

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .types import CutConfig


@dataclass(frozen=True)
class Defaults:
    # Selection weights (mm-equivalent units)
    alpha_joint: float = 220.0
    beta_small: float = 60.0
    gamma_short: float = 5.0

    # Typical stock rail lengths (mm) and the ones we'd rather not use
    stock_lengths: Tuple[int, ...] = (1595, 1798, 2400, 2750, 3200, 3600, 4800)
    small_lengths: Tuple[int, ...] = (1595, 1798, 2400)

    # Module row geometry (mm)
    module_width: int = 1303
    mid_clamp: int = 20
    end_clamp_width: int = 40
    buffer: int = 15

    # Safety ceilings
    dp_table_ceiling: int = 10_000_000
    memo_bound_ceiling: int = 100_000_000
    memo_max_depth: int = 900
    branch_bound_max_required: int = 50_000

    # Bounded DP: overshoot cap = max(floor, fraction * required)
    bounded_overshoot_floor: int = 100
    bounded_overshoot_fraction: float = 0.05

    # Greedy: never overshoot by more than this fraction of required
    greedy_overshoot_fraction: float = 0.10

    # Scenario grid
    scenario_extra_caps: int = 4
    scenario_max_cap: int = 8
    scenario_alpha_extra_caps: int = 2
    scenario_alpha_max_cap: int = 6
    scenario_alphas: Tuple[float, ...] = (0.0, 100.0, 500.0, 1000.0)

    # CP-SAT
    cp_sat_time_limit_s: float = 10.0
    cp_sat_weight_scale: int = 1000


DEFAULTS = Defaults()


def make_config(
    required: float,
    lengths: Optional[Sequence[float]] = None,
    *,
    small_lengths: Optional[Sequence[float]] = None,
    max_pieces: Optional[int] = None,
    allow_undershoot_pct: float = 0.0,
    max_waste_pct: Optional[float] = None,
    alpha_joint: Optional[float] = None,
    beta_small: Optional[float] = None,
    gamma_short: Optional[float] = None,
    cost_per_unit_length: float = 0.0,
    cost_per_joint_set: float = 0.0,
    joiner_length: float = 0.0,
) -> CutConfig:
    """
    Convenience factory: fills stock lengths and weights from DEFAULTS.
    small_lengths defaults to the standard small set only when the standard
    stock lengths are used as well.
    """
    if lengths is None:
        lengths = DEFAULTS.stock_lengths
        if small_lengths is None:
            small_lengths = DEFAULTS.small_lengths
    return CutConfig(
        required=required,
        lengths=tuple(lengths),
        small_lengths=tuple(small_lengths or ()),
        max_pieces=max_pieces,
        allow_undershoot_pct=float(allow_undershoot_pct),
        max_waste_pct=max_waste_pct,
        alpha_joint=float(alpha_joint if alpha_joint is not None else DEFAULTS.alpha_joint),
        beta_small=float(beta_small if beta_small is not None else DEFAULTS.beta_small),
        gamma_short=float(gamma_short if gamma_short is not None else DEFAULTS.gamma_short),
        cost_per_unit_length=float(cost_per_unit_length),
        cost_per_joint_set=float(cost_per_joint_set),
        joiner_length=float(joiner_length),
    )


def parse_lengths_text(text: str) -> List[float]:
    """
    Parse '1595, 1798 2400' -> [1595.0, 1798.0, 2400.0]
    Tokens that are not positive finite numbers are dropped.
    """
    out: List[float] = []
    for tok in re.split(r"[,\s]+", str(text)):
        tok = tok.strip()
        if not tok:
            continue
        try:
            v = float(tok)
        except ValueError:
            continue
        if math.isfinite(v) and v > 0:
            out.append(v)
    return out
