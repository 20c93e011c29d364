# railcut/sample_data.py
# Utilities to generate random rail jobs for quick benchmarking and tuning.
# Helps stress-test overshoot vs joint trade-offs without real project data.

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Tuple

from .config import DEFAULTS
from .geometry import required_rail_length
from .types import CutConfig


@dataclass(frozen=True)
class RandomJobsConfig:
    seed: int = 123
    n_jobs: int = 20

    # modules per row (required length comes from the row geometry)
    modules_range: Tuple[int, int] = (1, 12)

    # stock set: a random subset of the default lengths
    min_lengths: int = 3
    p_small: float = 0.4          # chance that a picked length counts as small

    max_pieces_range: Tuple[int, int] = (2, 8)
    p_no_cap: float = 0.2
    p_undershoot: float = 0.15
    undershoot_range: Tuple[float, float] = (0.005, 0.03)


def generate_random_jobs(cfg: RandomJobsConfig) -> List[CutConfig]:
    """
    Deterministic for a given seed. Every job has a positive required length
    and at least cfg.min_lengths stock lengths.
    """
    rnd = random.Random(cfg.seed)
    stock = list(DEFAULTS.stock_lengths)
    jobs: List[CutConfig] = []

    for _ in range(cfg.n_jobs):
        modules = rnd.randint(*cfg.modules_range)
        required = required_rail_length(modules)

        k = rnd.randint(min(cfg.min_lengths, len(stock)), len(stock))
        lengths = sorted(rnd.sample(stock, k))
        small = [li for li in lengths if rnd.random() < cfg.p_small]

        max_pieces = None if rnd.random() < cfg.p_no_cap else rnd.randint(*cfg.max_pieces_range)
        undershoot = rnd.uniform(*cfg.undershoot_range) if rnd.random() < cfg.p_undershoot else 0.0

        jobs.append(
            CutConfig(
                required=required,
                lengths=tuple(lengths),
                small_lengths=tuple(small),
                max_pieces=max_pieces,
                allow_undershoot_pct=undershoot,
            )
        )

    return jobs
