# railcut/utils.py
# Small utilities used across the project:
# - timing context manager
# - JSON export for solve outcomes and scenario sets
#
# Keeps dependencies minimal (stdlib only).

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from .types import Scenario, ScenarioSet, SolveOutcome


@contextmanager
def timer(label: str = "timer") -> Iterator[Dict[str, float]]:
    """
    Usage:
      with timer("solve") as t:
          ...
      print(t["seconds"])
    """
    t0 = time.perf_counter()
    payload: Dict[str, float] = {}
    try:
        yield payload
    finally:
        payload["seconds"] = time.perf_counter() - t0


def _to_jsonable(obj: Any) -> Any:
    """Convert dataclasses and other objects to JSON-serializable structures."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_jsonable(asdict(obj))
    if isinstance(obj, dict):
        return {str(k): _to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_jsonable(x) for x in obj]
    if isinstance(obj, Path):
        return str(obj)
    return obj


def outcome_to_dict(outcome: SolveOutcome, required: Optional[float] = None) -> Dict[str, Any]:
    """
    Convert a CutPlan / SolveFailure to a JSON-friendly dict.
    With required given, the overshoot percentage is included as well.
    """
    if not outcome.ok:
        return {
            "ok": False,
            "kind": outcome.kind,
            "reason": outcome.reason,
            "solver": outcome.solver,
        }

    out: Dict[str, Any] = {
        "ok": True,
        "solver": outcome.solver,
        "plan": list(outcome.plan),
        "counts_by_length": {str(k): v for k, v in outcome.counts_by_length.items()},
        "total": outcome.total,
        "extra": outcome.extra,
        "shortage": outcome.shortage,
        "pieces": outcome.pieces,
        "joints": outcome.joints,
        "small_count": outcome.small_count,
        "cost": outcome.cost,
        "bom": {
            "material_cost": outcome.material_cost,
            "joint_set_cost": outcome.joint_set_cost,
            "total_actual_cost": outcome.total_actual_cost,
        },
    }
    if required is not None:
        out["extra_pct"] = outcome.extra_pct(required)
    return out


def scenario_to_dict(sc: Scenario) -> Dict[str, Any]:
    return {
        "label": sc.label,
        "max_pieces_used": sc.max_pieces_used,
        "alpha_joint": sc.alpha_joint,
        "result": outcome_to_dict(sc.result),
    }


def scenario_set_to_dict(ss: Optional[ScenarioSet]) -> Optional[Dict[str, Any]]:
    if ss is None:
        return None
    return {
        "C": scenario_to_dict(ss.C),
        "L": scenario_to_dict(ss.L),
        "J": scenario_to_dict(ss.J),
        "all_scenarios": [scenario_to_dict(sc) for sc in ss.all_scenarios],
    }


def save_json(payload: Any, path: str | Path, *, indent: int = 2) -> None:
    """Save any payload (dicts / dataclasses) into JSON for debugging/integration."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(_to_jsonable(payload), f, ensure_ascii=False, indent=indent)
