# railcut/profile.py
# Phase timings for one DP solve (prepare / table / select / reconstruct)
# plus a few size counters. Printed by `python -m railcut.cli --profile`.

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Dict, Iterator, Union

Number = Union[int, float]


class Profiler:
    def __init__(self) -> None:
        self.phases: Dict[str, float] = {}     # seconds, accumulated per name
        self.counters: Dict[str, Number] = {}

    @contextmanager
    def phase(self, name: str) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.phases[name] = self.phases.get(name, 0.0) + (time.perf_counter() - t0)

    def count(self, name: str, value: Number) -> None:
        self.counters[name] = value

    def elapsed(self, name: str) -> float:
        return self.phases.get(name, 0.0)

    def report(self) -> str:
        total = sum(self.phases.values())
        lines = ["--- DP profile ---"]
        for name, sec in self.phases.items():
            share = sec / total * 100.0 if total > 0 else 0.0
            lines.append(f"{name:14s} {sec * 1000:10.3f} ms  {share:5.1f}%")
        lines.append(f"{'TOTAL':14s} {total * 1000:10.3f} ms")
        for name, value in self.counters.items():
            lines.append(f"{name:14s} {value:>10,}")
        return "\n".join(lines)
