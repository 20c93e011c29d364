# railcut/run.py
# High-level convenience runner that ties together:
# - one solve, or the scenario sweep + priority pick
# - validation
# - optional CSV / JSON export
# - matplotlib figure (plan bar, scenario scatter)
#
# Called by cli.py and run_json.py, or from your own scripts:
#   from railcut.run import run_rail
#   res = run_rail(config, mode="scenarios", priority="joints", out_dir="out")

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .errors import SolveError
from .io_csv import export_all
from .lengths import prepare_problem
from .logger import get_logger
from .plotting import PlotStyle, close_figure, plot_plan, plot_scenarios, save_figure_png, show_figure
from .profile import Profiler
from .scenarios import generate_scenarios
from .solvers import DEFAULT_SOLVER, get_solver
from .types import CutConfig, ScenarioSet, SolveFailure, SolveOutcome
from .utils import outcome_to_dict, save_json, scenario_set_to_dict
from .validate import raise_on_errors, validate_result

MODES = ("solve", "scenarios")
PROFILED_SOLVERS = ("dp", "dp_bounded")


@dataclass(frozen=True)
class RunResult:
    config: CutConfig
    outcome: SolveOutcome
    scenarios: Optional[ScenarioSet] = None
    label: Optional[str] = None        # scenario label of the pick
    plan_figure: Any = None
    scenario_figure: Any = None


def _solve_one(config: CutConfig, solver: str, profiler: Optional[Profiler]) -> SolveOutcome:
    solve = get_solver(solver)
    if profiler is None:
        return solve(config)
    if solver not in PROFILED_SOLVERS:
        get_logger().warn(f"profiling is only recorded for {', '.join(PROFILED_SOLVERS)}")
        return solve(config)
    return solve(config, profiler=profiler)


def _sweep_failure(config: CutConfig, solver: str) -> SolveFailure:
    # the sweep sets its own piece caps, so the base cap is not checked
    try:
        prepare_problem(config.with_overrides(max_pieces=None))
    except SolveError as e:
        return SolveFailure.from_error(e, solver=solver)
    return SolveFailure(
        kind="Infeasible",
        reason="No scenario produced a feasible plan.",
        solver=solver,
    )


def run_rail(
    config: CutConfig,
    *,
    mode: str = "solve",
    solver: str = DEFAULT_SOLVER,
    priority: str = "cost",
    workers: int = 1,
    validate: bool = True,
    out_dir: Optional[str | Path] = None,
    export_prefix: str = "rail",
    make_plot: bool = False,
    plot_style: Optional[PlotStyle] = None,
    profiler: Optional[Profiler] = None,
) -> RunResult:
    """
    Run one rail end-to-end. A failed solve is returned, not raised;
    validation errors on a successful result raise ValueError.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode {mode!r}. Known: {', '.join(MODES)}")

    scenarios: Optional[ScenarioSet] = None
    label: Optional[str] = None
    if mode == "scenarios":
        scenarios = generate_scenarios(config, solver=solver, workers=workers)
        if scenarios is None:
            outcome: SolveOutcome = _sweep_failure(config, solver)
        else:
            chosen = scenarios.pick(priority)
            outcome, label = chosen.result, chosen.label
    else:
        outcome = _solve_one(config, solver, profiler)

    if validate and outcome.ok:
        raise_on_errors(validate_result(config, outcome))

    if out_dir is not None and outcome.ok:
        outp = Path(out_dir)
        export_all(outcome, outp, prefix=export_prefix, scenarios=scenarios, small_lengths=config.small_lengths)
        save_json(
            {
                "result": outcome_to_dict(outcome, required=float(config.required)),
                "label": label,
                "scenarios": scenario_set_to_dict(scenarios),
            },
            outp / f"{export_prefix}.json",
        )

    plan_fig = scen_fig = None
    if make_plot and outcome.ok:
        style = plot_style or PlotStyle()
        plan_fig = plot_plan(outcome, float(config.required), small_lengths=config.small_lengths, style=style)
        if scenarios is not None:
            scen_fig = plot_scenarios(scenarios, style=style)

    return RunResult(
        config=config,
        outcome=outcome,
        scenarios=scenarios,
        label=label,
        plan_figure=plan_fig,
        scenario_figure=scen_fig,
    )


def finish_figures(res: RunResult, *, png: str = "", scenario_png: str = "", show: bool = False) -> None:
    """
    Save the figures that have a target path, show the rest if asked,
    then close everything the run opened.
    """
    log = get_logger()
    pending = []
    for fig, path, what in (
        (res.plan_figure, png, "Plan"),
        (res.scenario_figure, scenario_png, "Scenario"),
    ):
        if fig is None:
            continue
        if path:
            save_figure_png(fig, path)
            log.info(f"{what} figure saved to: {path}")
        else:
            pending.append(fig)

    if show and pending:
        show_figure(pending[0])
    for fig in pending:
        close_figure(fig)
