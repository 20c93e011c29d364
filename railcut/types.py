# railcut/types.py
# Core data structures for rail cut planning (1D stock-length selection).
# Keep this file dependency-light so it can be imported everywhere.

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union


# ----------------------------
# Inputs
# ----------------------------

@dataclass(frozen=True)
class CutConfig:
    """
    One solve request. Lengths are in millimeters.

    Construction never raises: the values are checked by
    lengths.prepare_problem(), which turns bad input into an InvalidInput
    failure instead of an exception.
    """
    required: float
    lengths: Sequence[float]
    small_lengths: Sequence[float] = ()

    # Hard cap on number of pieces (None = no cap)
    max_pieces: Optional[int] = None

    # Permitted shortfall as a fraction of required, in [0, 1)
    allow_undershoot_pct: float = 0.0

    # Hard overshoot ceiling as a fraction of required (None = no ceiling)
    max_waste_pct: Optional[float] = None

    # Selection weights, in "mm units" (overshoot weighs 1 per mm)
    alpha_joint: float = 220.0
    beta_small: float = 60.0
    gamma_short: float = 5.0

    # BOM only, no effect on selection
    cost_per_unit_length: float = 0.0   # per mm of rail
    cost_per_joint_set: float = 0.0
    joiner_length: float = 0.0          # informational, never added to the span

    def with_overrides(self, **changes) -> "CutConfig":
        return replace(self, **changes)


@dataclass(frozen=True)
class Problem:
    """Validated, integer view of a CutConfig shared by all strategies."""
    required: int
    lengths: Tuple[int, ...]            # ascending, unique, > 0
    small_flags: Tuple[int, ...]        # 1 if lengths[i] is small
    max_pieces: Optional[int]
    min_allowed: int
    max_waste_pct: Optional[float]      # None = no ceiling
    alpha_joint: float
    beta_small: float
    gamma_short: float

    def exceeds_waste(self, extra: int) -> bool:
        if self.max_waste_pct is None:
            return False
        return extra / self.required > self.max_waste_pct

    @property
    def max_extra_mm(self) -> Optional[int]:
        """Largest whole-mm overshoot the waste ceiling admits."""
        if self.max_waste_pct is None:
            return None
        e = int(self.max_waste_pct * self.required)
        while e > 0 and self.exceeds_waste(e):
            e -= 1
        while not self.exceeds_waste(e + 1):
            e += 1
        return e

    @property
    def max_length(self) -> int:
        return self.lengths[-1]

    @property
    def min_length(self) -> int:
        return self.lengths[0]

    @property
    def small_set(self) -> FrozenSet[int]:
        return frozenset(li for li, f in zip(self.lengths, self.small_flags) if f)

    @property
    def window_max(self) -> int:
        # Largest useful total: any plan overshooting by max_length or more
        # stays admissible after dropping one piece, at lower cost.
        return self.required + self.max_length - 1


# ----------------------------
# DP internals
# ----------------------------

@dataclass(frozen=True)
class DPState:
    """Best known way to reach one table slot."""
    total: int
    pieces: int
    small: int
    prev: Optional[int] = None       # slot index of the predecessor
    last_idx: Optional[int] = None   # index into Problem.lengths


@dataclass(frozen=True)
class Candidate:
    """A feasible end state scored by the selection cost."""
    t: int
    state: DPState
    extra: int
    shortage: int
    joints: int
    cost: float

    def key(self) -> Tuple[float, int, int, int, int]:
        # (cost, extra, pieces, small, t): the selection contract
        return (self.cost, self.extra, self.state.pieces, self.state.small, self.t)


# ----------------------------
# Outputs
# ----------------------------

@dataclass(frozen=True)
class CutPlan:
    """Successful solve: chosen pieces, score breakdown and BOM costs."""
    plan: Tuple[int, ...]
    counts_by_length: Dict[int, int]
    total: int
    extra: int
    shortage: int
    pieces: int
    joints: int
    small_count: int
    cost: float

    # BOM
    material_cost: float = 0.0
    joint_set_cost: float = 0.0
    total_actual_cost: float = 0.0

    solver: str = "dp"

    @property
    def ok(self) -> bool:
        return True

    @property
    def overshoot_mm(self) -> int:
        return self.extra

    @property
    def signature(self) -> Tuple[int, ...]:
        """Physical cut list, independent of piece order."""
        return tuple(sorted(self.plan))

    def extra_pct(self, required: float) -> float:
        if required <= 0:
            return 0.0
        return self.extra / required * 100.0


@dataclass(frozen=True)
class SolveFailure:
    """Failed solve. kind is one of InvalidInput, ProblemTooLarge, Infeasible."""
    kind: str
    reason: str
    solver: str = "dp"

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_error(cls, err, solver: str = "dp") -> "SolveFailure":
        return cls(kind=err.kind, reason=str(err), solver=solver)


SolveOutcome = Union[CutPlan, SolveFailure]


# ----------------------------
# Scenarios
# ----------------------------

@dataclass(frozen=True)
class Scenario:
    """One solve of the scenario grid, with the parameters that produced it."""
    result: CutPlan
    label: str
    max_pieces_used: int
    alpha_joint: float

    @property
    def signature(self) -> Tuple[int, ...]:
        return self.result.signature


@dataclass
class ScenarioSet:
    """Unique scenarios plus the three canonical picks."""
    cost_best: Scenario
    length_best: Scenario
    joints_best: Scenario
    all_scenarios: List[Scenario] = field(default_factory=list)

    # Short names used by the rail table (C / L / J)
    @property
    def C(self) -> Scenario:
        return self.cost_best

    @property
    def L(self) -> Scenario:
        return self.length_best

    @property
    def J(self) -> Scenario:
        return self.joints_best

    def pick(self, priority: str = "cost") -> Scenario:
        """Select by priority: 'cost', 'length' or 'joints' (unknown -> cost)."""
        p = str(priority).strip().lower()
        if p == "length":
            return self.length_best
        if p == "joints":
            return self.joints_best
        return self.cost_best

    def is_cheapest(self, scenario: Scenario) -> bool:
        return scenario is self.cost_best
