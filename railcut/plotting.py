# railcut/plotting.py
# Minimal matplotlib visualization:
# - one plan as a segmented bar against the required length
# - the scenario set as overshoot vs joints, coloured by cost, C/L/J marked

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from .lengths import round_mm
from .types import CutPlan, ScenarioSet


@dataclass(frozen=True)
class PlotStyle:
    show_labels: bool = True
    show_required: bool = True
    show_grid: bool = False
    font_size: int = 8
    bar_height: float = 1.0
    small_hatch: str = "//"   # hatch for pieces from the small set


def _length_color(li: int) -> Tuple[float, float, float]:
    """Deterministic pastel-ish color per stock length."""
    h = 2166136261
    for ch in str(li).encode("utf-8"):
        h ^= ch
        h *= 16777619
        h &= 0xFFFFFFFF
    r = 0.3 + ((h >> 0) & 0xFF) / 255 * 0.6
    g = 0.3 + ((h >> 8) & 0xFF) / 255 * 0.6
    b = 0.3 + ((h >> 16) & 0xFF) / 255 * 0.6
    return (r, g, b)


def _plan_title(plan: CutPlan, required: float) -> str:
    bits = [
        f"required {required:,.0f} mm",
        f"total {plan.total:,} mm",
        f"{plan.pieces} pcs / {plan.joints} joints",
    ]
    if plan.extra:
        bits.append(f"over {plan.extra:,} mm")
    if plan.shortage:
        bits.append(f"short {plan.shortage:,} mm")
    if plan.total_actual_cost:
        bits.append(f"cost {plan.total_actual_cost:,.2f}")
    return " | ".join(bits)


def plot_plan(
    plan: CutPlan,
    required: float,
    *,
    small_lengths=(),
    style: Optional[PlotStyle] = None,
    figsize: Optional[Tuple[float, float]] = None,
) -> plt.Figure:
    """Draw the chosen pieces end to end; the required span is a dashed line."""
    style = style or PlotStyle()
    if not plan.plan:
        raise ValueError("Plan has no pieces to plot")

    small_set = {round_mm(float(s)) for s in small_lengths}
    fig, ax = plt.subplots(figsize=figsize or (10, 2.2))
    H = style.bar_height

    x = 0
    for li in plan.plan:
        rect = Rectangle(
            (x, 0),
            li,
            H,
            facecolor=_length_color(li),
            edgecolor="black",
            linewidth=0.8,
            hatch=style.small_hatch if li in small_set else None,
        )
        ax.add_patch(rect)
        if style.show_labels:
            ax.text(x + li / 2, H / 2, f"{li}", ha="center", va="center", fontsize=style.font_size)
        x += li

    if style.show_required:
        ax.axvline(required, linestyle="--", linewidth=1.2, color="red")

    right = max(plan.total, required)
    pad = right * 0.02
    ax.set_xlim(-pad, right + pad)
    ax.set_ylim(-0.2 * H, 1.4 * H)
    ax.set_xlabel("mm")
    ax.set_title(_plan_title(plan, required), fontsize=10)
    ax.tick_params(labelleft=False, left=False)
    ax.grid(bool(style.show_grid), linewidth=0.3)

    fig.tight_layout()
    return fig


def plot_scenarios(
    scenarios: ScenarioSet,
    style: Optional[PlotStyle] = None,
    figsize: Optional[Tuple[float, float]] = None,
) -> plt.Figure:
    """Overshoot (x) vs joints (y), coloured by total actual cost."""
    style = style or PlotStyle()
    items = scenarios.all_scenarios
    if not items:
        raise ValueError("Scenario set is empty")

    xs: List[int] = [sc.result.extra for sc in items]
    ys: List[int] = [sc.result.joints for sc in items]
    cs: List[float] = [sc.result.total_actual_cost for sc in items]

    fig, ax = plt.subplots(figsize=figsize or (7, 4.5))
    points = ax.scatter(xs, ys, c=cs, cmap="viridis", s=60, edgecolors="black", linewidths=0.6)
    fig.colorbar(points, ax=ax, label="total actual cost")

    for tag, sc in (("C", scenarios.C), ("L", scenarios.L), ("J", scenarios.J)):
        ax.annotate(
            tag,
            (sc.result.extra, sc.result.joints),
            textcoords="offset points",
            xytext=(6, 6),
            fontsize=style.font_size + 2,
            fontweight="bold",
        )

    if style.show_labels:
        for sc in items:
            ax.annotate(
                " + ".join(str(li) for li in sc.result.signature),
                (sc.result.extra, sc.result.joints),
                textcoords="offset points",
                xytext=(6, -10),
                fontsize=style.font_size - 1,
            )

    ax.set_xlabel("overshoot (mm)")
    ax.set_ylabel("joints")
    ax.set_title(f"{len(items)} unique scenarios", fontsize=10)
    ax.grid(bool(style.show_grid), linewidth=0.3)

    fig.tight_layout()
    return fig


def show_figure(fig: plt.Figure) -> None:
    plt.show()


def save_figure_png(fig: plt.Figure, path: str, dpi: int = 200) -> None:
    """Save figure to PNG and release it."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)


def close_figure(fig: plt.Figure) -> None:
    plt.close(fig)
