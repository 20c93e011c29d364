# railcut/debug.py
# Debug / inspection helpers:
# - pretty-print one outcome
# - scenario table with C/L/J marks
# - helpful when tuning the weights

from __future__ import annotations

from typing import Optional

from .types import ScenarioSet, SolveOutcome


def print_result(outcome: SolveOutcome, required: Optional[float] = None) -> None:
    if not outcome.ok:
        print(f"[{outcome.solver}] FAILED ({outcome.kind}): {outcome.reason}")
        return

    r = outcome
    print(f"[{r.solver}] plan: {' + '.join(str(li) for li in r.plan)}")
    counts = ", ".join(f"{li} x{n}" for li, n in r.counts_by_length.items())
    print(f"  counts: {counts}")
    line = f"  total={r.total:,} mm  pieces={r.pieces}  joints={r.joints}  small={r.small_count}"
    print(line)
    over = f"  extra={r.extra:,} mm"
    if required:
        over += f" ({r.extra_pct(required):.2f}%)"
    print(f"{over}  shortage={r.shortage:,} mm  cost={r.cost:.2f}")
    if r.total_actual_cost:
        print(
            f"  BOM: material={r.material_cost:,.2f}  joints={r.joint_set_cost:,.2f}  "
            f"total={r.total_actual_cost:,.2f}"
        )


def print_scenarios(scenarios: Optional[ScenarioSet]) -> None:
    if scenarios is None:
        print("No scenarios.")
        return

    print(f"{'':3s} {'label':34s} {'plan':28s} {'pcs':>3s} {'over':>6s} {'cost':>10s}")
    for sc in scenarios.all_scenarios:
        r = sc.result
        tags = "".join(t for t, b in (("C", scenarios.C), ("L", scenarios.L), ("J", scenarios.J)) if b is sc)
        plan = " + ".join(str(li) for li in r.plan)
        print(f"{tags:3s} {sc.label:34s} {plan:28s} {r.pieces:3d} {r.extra:6d} {r.total_actual_cost:10.2f}")
