# railcut/io_csv.py
# CSV export helpers:
# - cut list of one plan (one row per piece, cumulative position, joint flag)
# - scenario table (one row per unique scenario, C/L/J marked)
#
# (Plotting is handled in plotting.py.)

from __future__ import annotations

import csv
from pathlib import Path
from typing import Optional

from .lengths import round_mm
from .types import CutPlan, ScenarioSet


def export_plan_csv(plan: CutPlan, path: str | Path, *, small_lengths=()) -> None:
    """
    Write the cut list into a CSV file.
    start/end are positions along the rail; joint_after is 1 between pieces.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    small_set = {round_mm(float(s)) for s in small_lengths}

    fieldnames = [
        "index",
        "length",
        "start",
        "end",
        "small",
        "joint_after",
    ]

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        pos = 0
        for i, li in enumerate(plan.plan):
            w.writerow(
                {
                    "index": i + 1,
                    "length": li,
                    "start": pos,
                    "end": pos + li,
                    "small": int(li in small_set),
                    "joint_after": int(i < len(plan.plan) - 1),
                }
            )
            pos += li


def export_scenarios_csv(scenarios: ScenarioSet, path: str | Path) -> None:
    """One row per unique scenario, in the set's order (cheapest first)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "label",
        "picks",
        "max_pieces_used",
        "alpha_joint",
        "plan",
        "pieces",
        "joints",
        "total",
        "extra",
        "shortage",
        "small_count",
        "cost",
        "material_cost",
        "joint_set_cost",
        "total_actual_cost",
    ]

    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for sc in scenarios.all_scenarios:
            r = sc.result
            picks = "".join(
                tag for tag, best in (("C", scenarios.C), ("L", scenarios.L), ("J", scenarios.J)) if best is sc
            )
            w.writerow(
                {
                    "label": sc.label,
                    "picks": picks,
                    "max_pieces_used": sc.max_pieces_used,
                    "alpha_joint": sc.alpha_joint,
                    "plan": " + ".join(str(li) for li in r.plan),
                    "pieces": r.pieces,
                    "joints": r.joints,
                    "total": r.total,
                    "extra": r.extra,
                    "shortage": r.shortage,
                    "small_count": r.small_count,
                    "cost": r.cost,
                    "material_cost": r.material_cost,
                    "joint_set_cost": r.joint_set_cost,
                    "total_actual_cost": r.total_actual_cost,
                }
            )


def export_all(
    plan: CutPlan,
    out_dir: str | Path,
    prefix: str = "rail",
    *,
    scenarios: Optional[ScenarioSet] = None,
    small_lengths=(),
) -> None:
    """
    Export the cut list (and the scenario table, if given) into out_dir.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    export_plan_csv(plan, out_dir / f"{prefix}_cuts.csv", small_lengths=small_lengths)
    if scenarios is not None:
        export_scenarios_csv(scenarios, out_dir / f"{prefix}_scenarios.csv")
