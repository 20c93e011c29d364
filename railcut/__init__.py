# railcut/__init__.py
"""
Rail cut optimizer (1D stock length selection for mounting rails).

Current state:
- Exact DP over reachable totals (unbounded knapsack style) with:
  - piece cap, undershoot window, overshoot (waste) ceiling
  - weighted cost: overshoot + joints + small pieces + shortage
  - deterministic tie-breaking and plan reconstruction
- Bounded DP variant for very long rails
- Greedy / branch-and-bound / recursive memo / CP-SAT strategies for comparison
- Scenario sweep over piece caps and joint weights with C / L / J picks
- BOM costs (material + joint sets), CSV/JSON export, matplotlib figures
"""

from .types import (
    CutConfig,
    Problem,
    DPState,
    Candidate,
    CutPlan,
    SolveFailure,
    SolveOutcome,
    Scenario,
    ScenarioSet,
)

from .errors import (
    SolveError,
    InvalidInput,
    ProblemTooLarge,
    Infeasible,
    raise_on_failure,
)

from .config import DEFAULTS, Defaults, make_config, parse_lengths_text

from .costing import PriceModel, BomCost, compute_bom

from .geometry import required_rail_length

from .solver_dp import solve_dp, solve_dp_bounded

from .solvers import SOLVERS, get_solver, solve, solver_names

from .scenarios import generate_scenarios

from .plotting import (
    PlotStyle,
    plot_plan,
    plot_scenarios,
    show_figure,
    save_figure_png,
)

__all__ = [
    # types
    "CutConfig",
    "Problem",
    "DPState",
    "Candidate",
    "CutPlan",
    "SolveFailure",
    "SolveOutcome",
    "Scenario",
    "ScenarioSet",
    # errors
    "SolveError",
    "InvalidInput",
    "ProblemTooLarge",
    "Infeasible",
    "raise_on_failure",
    # config
    "DEFAULTS",
    "Defaults",
    "make_config",
    "parse_lengths_text",
    # costing
    "PriceModel",
    "BomCost",
    "compute_bom",
    "required_rail_length",
    # solvers
    "solve_dp",
    "solve_dp_bounded",
    "SOLVERS",
    "get_solver",
    "solve",
    "solver_names",
    "generate_scenarios",
    # plotting
    "PlotStyle",
    "plot_plan",
    "plot_scenarios",
    "show_figure",
    "save_figure_png",
]
