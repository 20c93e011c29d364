# railcut/cli.py
# Command line front end for one rail:
# - required length directly, or from module row geometry
# - stock / small lengths as text ("1595, 1798 2400")
# - single solve or the scenario sweep with a priority pick
# - optional CSV + JSON export folder, PNGs of the plan and scenario scatter
#
# Run:
#   python -m railcut.cli --required 4000
#   python -m railcut.cli --modules 3 --lengths "1595, 2400, 3200, 4800" --max_pieces 3
#   python -m railcut.cli --modules 5 --scenarios --priority joints --out out/

from __future__ import annotations

import argparse
from typing import List, Optional

from .config import DEFAULTS, parse_lengths_text
from .debug import print_result, print_scenarios
from .geometry import required_rail_length
from .logger import get_logger, set_enabled, set_verbose
from .plotting import PlotStyle
from .profile import Profiler
from .run import finish_figures, run_rail
from .solvers import DEFAULT_SOLVER, solver_names
from .types import CutConfig


def _fmt_lengths(values) -> str:
    return ", ".join(str(v) for v in values)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Rail cut optimizer (stock length selection)")

    # Required length
    p.add_argument("--required", type=float, default=None, help="Required rail length in mm (overrides geometry)")
    p.add_argument("--modules", type=int, default=None, help="Modules in the row (computes required length)")
    p.add_argument("--module_width", type=float, default=DEFAULTS.module_width, help="Module width (mm)")
    p.add_argument("--mid_clamp", type=float, default=DEFAULTS.mid_clamp, help="Mid clamp spacing (mm)")
    p.add_argument("--end_clamp", type=float, default=DEFAULTS.end_clamp_width, help="End clamp width (mm)")
    p.add_argument("--buffer", type=float, default=DEFAULTS.buffer, help="Buffer at each end (mm)")

    # Stock
    p.add_argument("--lengths", type=str, default=_fmt_lengths(DEFAULTS.stock_lengths), help="Stock lengths (mm)")
    p.add_argument("--small", type=str, default=None, help="Small lengths to discourage (default: standard set)")

    # Limits
    p.add_argument("--max_pieces", type=int, default=0, help="Max pieces per rail (0 = no cap)")
    p.add_argument("--undershoot", type=float, default=0.0, help="Allowed shortfall as a fraction, e.g. 0.01")
    p.add_argument("--max_waste", type=float, default=None, help="Max overshoot as a fraction of required")

    # Weights
    p.add_argument("--alpha", type=float, default=DEFAULTS.alpha_joint, help="Joint penalty (mm per joint)")
    p.add_argument("--beta", type=float, default=DEFAULTS.beta_small, help="Small piece penalty (mm per piece)")
    p.add_argument("--gamma", type=float, default=DEFAULTS.gamma_short, help="Shortage penalty (per mm short)")

    # Prices (BOM only)
    p.add_argument("--cost_per_mm", type=float, default=0.0, help="Rail price per mm")
    p.add_argument("--cost_per_joint", type=float, default=0.0, help="Price per joint connector set")
    p.add_argument("--joiner_length", type=float, default=0.0, help="Joiner length (display only)")

    # Strategy
    p.add_argument("--solver", type=str, default=DEFAULT_SOLVER, choices=solver_names(), help="Strategy")
    p.add_argument("--scenarios", action="store_true", help="Run the scenario sweep and pick by --priority")
    p.add_argument("--priority", type=str, default="cost", choices=["cost", "length", "joints"], help="Scenario pick")
    p.add_argument("--workers", type=int, default=1, help="Processes for the scenario sweep")

    # Output
    p.add_argument("--out", type=str, default="", help="Output directory for CSV + JSON exports (optional)")
    p.add_argument("--prefix", type=str, default="rail", help="Export filename prefix")
    p.add_argument("--png", type=str, default="", help="Save the plan figure as PNG (optional)")
    p.add_argument("--scenario_png", type=str, default="", help="Save the scenario scatter as PNG (with --scenarios)")
    p.add_argument("--no_plot", action="store_true", help="Do not show matplotlib plot")
    p.add_argument("--profile", action="store_true", help="Print DP phase timings")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    p.add_argument("--quiet", action="store_true", help="No [RAIL] log lines")
    return p


def config_from_args(args: argparse.Namespace) -> CutConfig:
    if args.required is not None:
        required = float(args.required)
    elif args.modules is not None:
        required = float(
            required_rail_length(
                args.modules,
                module_width=args.module_width,
                mid_clamp=args.mid_clamp,
                end_clamp_width=args.end_clamp,
                buffer=args.buffer,
            )
        )
    else:
        raise SystemExit("Give --required or --modules.")

    small = parse_lengths_text(args.small) if args.small is not None else list(DEFAULTS.small_lengths)
    return CutConfig(
        required=required,
        lengths=tuple(parse_lengths_text(args.lengths)),
        small_lengths=tuple(small),
        max_pieces=args.max_pieces if args.max_pieces and args.max_pieces > 0 else None,
        allow_undershoot_pct=float(args.undershoot),
        max_waste_pct=args.max_waste,
        alpha_joint=float(args.alpha),
        beta_small=float(args.beta),
        gamma_short=float(args.gamma),
        cost_per_unit_length=float(args.cost_per_mm),
        cost_per_joint_set=float(args.cost_per_joint),
        joiner_length=float(args.joiner_length),
    )


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)
    set_verbose(bool(args.verbose))
    set_enabled(not args.quiet)
    log = get_logger()

    config = config_from_args(args)
    profiler = Profiler() if args.profile else None
    png, scenario_png = args.png.strip(), args.scenario_png.strip()

    res = run_rail(
        config,
        mode="scenarios" if args.scenarios else "solve",
        solver=args.solver,
        priority=args.priority,
        workers=int(args.workers),
        out_dir=args.out.strip() or None,
        export_prefix=args.prefix,
        make_plot=bool(png or scenario_png) or not args.no_plot,
        plot_style=PlotStyle(),
        profiler=profiler,
    )

    print(f"Required: {config.required:,.0f} mm")
    print(f"Lengths: {_fmt_lengths(config.lengths)}  small: {_fmt_lengths(config.small_lengths) or '-'}")
    if res.scenarios is not None:
        print_scenarios(res.scenarios)
        print(f"Picked ({args.priority}): {res.label}")
    print_result(res.outcome, required=config.required)

    if profiler is not None:
        print(profiler.report())

    if not res.outcome.ok:
        raise SystemExit(1)

    if args.out.strip():
        log.info(f"Exported CSV + JSON to: {args.out.strip()}")

    finish_figures(res, png=png, scenario_png=scenario_png, show=not args.no_plot)


if __name__ == "__main__":
    main()
