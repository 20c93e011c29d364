# railcut/io_json.py
# Load / save solve settings as JSON.
#
# Expected JSON shape (job file):
# {
#   "required": 4000,                       # or a "geometry" block, see below
#   "geometry": {"modules": 3, "module_width": 1303, "mid_clamp": 20,
#                "end_clamp_width": 40, "buffer": 15},
#   "lengths": [1595, 1798, 2400, 2750, 3200, 3600, 4800],
#   "small_lengths": [1595, 1798, 2400],
#   "max_pieces": 3,
#   "allow_undershoot_pct": 0, "max_waste_pct": null,
#   "alpha_joint": 220, "beta_small": 60, "gamma_short": 5,
#   "cost_per_unit_length": 0.1, "cost_per_joint_set": 50, "joiner_length": 100,
#   "priority": "cost"
# }
#
# The settings files written by the web front end use camelCase keys
# (maxPieces, lengthsInput, enabledLengths, costPerMm, ...); those are
# accepted as aliases. maxPieces == 0 means "no cap" there.

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import DEFAULTS, parse_lengths_text
from .geometry import required_rail_length
from .types import CutConfig

# snake_case key -> accepted camelCase aliases
_ALIASES: Dict[str, List[str]] = {
    "required": ["requiredLength", "requiredOverride"],
    "small_lengths": ["smallLengths", "smallInput"],
    "max_pieces": ["maxPieces"],
    "allow_undershoot_pct": ["allowUndershootPct"],
    "max_waste_pct": ["maxWastePct"],
    "alpha_joint": ["alphaJoint"],
    "beta_small": ["betaSmall"],
    "gamma_short": ["gammaShort"],
    "cost_per_unit_length": ["costPerMm", "costPerUnitLength"],
    "cost_per_joint_set": ["costPerJointSet"],
    "joiner_length": ["joinerLength"],
    "module_width": ["moduleWidth"],
    "mid_clamp": ["midClamp"],
    "end_clamp_width": ["endClampWidth"],
}


@dataclass(frozen=True)
class JsonLoadResult:
    config: CutConfig
    mode: str = "solve"
    priority: str = "cost"
    solver: str = "dp"


def _get(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    if key in data:
        return data[key]
    for alias in _ALIASES.get(key, ()):
        if alias in data:
            return data[alias]
    return default


def _blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and v.strip() == "")


def _as_float(v: Any, default: float) -> float:
    if _blank(v):
        return float(default)
    return float(v)


def _as_lengths(v: Any) -> List[float]:
    if _blank(v):
        return []
    if isinstance(v, str):
        return parse_lengths_text(v)
    return [float(x) for x in v]


def _read_lengths(data: Dict[str, Any]) -> List[float]:
    if "lengths" in data:
        lengths = _as_lengths(data["lengths"])
    elif "lengthsInput" in data:
        lengths = _as_lengths(data["lengthsInput"])
    else:
        lengths = [float(x) for x in DEFAULTS.stock_lengths]

    # Front end toggles: {"1595": true, "1798": false, ...}
    enabled = data.get("enabledLengths")
    if isinstance(enabled, dict):
        off = set()
        for k, flag in enabled.items():
            if not flag:
                try:
                    off.add(float(k))
                except ValueError:
                    continue
        lengths = [li for li in lengths if li not in off]
    return lengths


def _read_max_pieces(v: Any) -> Any:
    """0 or blank means no cap; non-integral values go through for the solver to reject."""
    if _blank(v):
        return None
    try:
        x = float(v)
    except (TypeError, ValueError):
        return v
    if x == 0:
        return None
    return int(x) if x.is_integer() else x


def _read_required(data: Dict[str, Any]) -> float:
    required = _get(data, "required")
    if not _blank(required):
        return float(required)

    geo = data.get("geometry")
    if geo is None and "modules" in data:
        geo = data
    if geo is None:
        raise ValueError("JSON missing 'required' (or a 'geometry' block with 'modules').")

    return float(
        required_rail_length(
            int(geo["modules"]),
            module_width=_as_float(_get(geo, "module_width"), DEFAULTS.module_width),
            mid_clamp=_as_float(_get(geo, "mid_clamp"), DEFAULTS.mid_clamp),
            end_clamp_width=_as_float(_get(geo, "end_clamp_width"), DEFAULTS.end_clamp_width),
            buffer=_as_float(_get(geo, "buffer"), DEFAULTS.buffer),
        )
    )


def config_from_dict(data: Dict[str, Any]) -> CutConfig:
    """
    Build a CutConfig from a settings dict (snake_case or camelCase keys).
    Values are converted but not range-checked: that happens in the solver
    (InvalidInput failure).
    """
    small = _get(data, "small_lengths")
    if small is None:
        custom = "lengths" in data or "lengthsInput" in data
        small_lengths = [] if custom else list(DEFAULTS.small_lengths)
    else:
        small_lengths = _as_lengths(small)

    waste = _get(data, "max_waste_pct")
    return CutConfig(
        required=_read_required(data),
        lengths=tuple(_read_lengths(data)),
        small_lengths=tuple(small_lengths),
        max_pieces=_read_max_pieces(_get(data, "max_pieces")),
        allow_undershoot_pct=_as_float(_get(data, "allow_undershoot_pct"), 0.0),
        max_waste_pct=None if _blank(waste) else float(waste),
        alpha_joint=_as_float(_get(data, "alpha_joint"), DEFAULTS.alpha_joint),
        beta_small=_as_float(_get(data, "beta_small"), DEFAULTS.beta_small),
        gamma_short=_as_float(_get(data, "gamma_short"), DEFAULTS.gamma_short),
        cost_per_unit_length=_as_float(_get(data, "cost_per_unit_length"), 0.0),
        cost_per_joint_set=_as_float(_get(data, "cost_per_joint_set"), 0.0),
        joiner_length=_as_float(_get(data, "joiner_length"), 0.0),
    )


def config_to_dict(config: CutConfig) -> Dict[str, Any]:
    return {
        "required": config.required,
        "lengths": list(config.lengths),
        "small_lengths": list(config.small_lengths),
        "max_pieces": config.max_pieces,
        "allow_undershoot_pct": config.allow_undershoot_pct,
        "max_waste_pct": config.max_waste_pct,
        "alpha_joint": config.alpha_joint,
        "beta_small": config.beta_small,
        "gamma_short": config.gamma_short,
        "cost_per_unit_length": config.cost_per_unit_length,
        "cost_per_joint_set": config.cost_per_joint_set,
        "joiner_length": config.joiner_length,
    }


def load_job_json(path: str | Path) -> JsonLoadResult:
    """
    Load a job definition from JSON.
    - "required" wins over "geometry"
    - "mode": "solve" | "scenarios" (default "solve")
    - "priority": "cost" | "length" | "joints" (default "cost")
    - "solver": registry name (default "dp")
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("Job JSON must be an object.")

    return JsonLoadResult(
        config=config_from_dict(data),
        mode=str(data.get("mode") or "solve"),
        priority=str(data.get("priority") or "cost"),
        solver=str(data.get("solver") or "dp"),
    )


def save_config_json(config: CutConfig, path: str | Path, *, priority: Optional[str] = None) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = config_to_dict(config)
    if priority is not None:
        payload["priority"] = priority
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
