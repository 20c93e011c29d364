# railcut/run_json.py
# Runner for JSON job files (see io_json.py for the accepted shape) with a
# mode switch.
#
# Modes:
#   --mode solve      : one solve with the chosen strategy
#   --mode scenarios  : scenario sweep, then pick by --priority
#
# Usage:
#   python -m railcut.run_json --job job.json
#   python -m railcut.run_json --job job.json --mode scenarios --priority joints
#
# Exports:
#   python -m railcut.run_json --job job.json --out out/ --png plan.png

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .debug import print_result, print_scenarios
from .io_json import load_job_json
from .logger import get_logger, set_verbose
from .run import MODES, finish_figures, run_rail
from .solvers import solver_names


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run the rail cut optimizer from a JSON job file.")
    p.add_argument("--job", type=str, required=True, help="Path to job JSON")
    p.add_argument("--mode", type=str, default=None, choices=list(MODES), help="Override the job's mode")
    p.add_argument("--solver", type=str, default=None, choices=solver_names(), help="Override the job's solver")
    p.add_argument("--priority", type=str, default=None, choices=["cost", "length", "joints"], help="Scenario pick")
    p.add_argument("--workers", type=int, default=1, help="Processes for the scenario sweep")

    # Output
    p.add_argument("--out", type=str, default="", help="Output directory for CSV + JSON exports (optional)")
    p.add_argument("--prefix", type=str, default="rail", help="Export filename prefix")
    p.add_argument("--png", type=str, default="", help="Save the plan figure as PNG (optional)")
    p.add_argument("--scenario_png", type=str, default="", help="Save the scenario scatter as PNG (scenarios mode)")
    p.add_argument("--no_plot", action="store_true", help="Do not show matplotlib plot")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)
    set_verbose(bool(args.verbose))
    log = get_logger()

    job_path = Path(args.job)
    if not job_path.exists():
        raise SystemExit(f"Job JSON not found: {job_path}")

    loaded = load_job_json(job_path)
    mode = args.mode or loaded.mode
    if mode not in MODES:
        raise SystemExit(f"Unknown mode in job file: {mode!r}")
    solver = args.solver or loaded.solver
    if solver not in solver_names():
        raise SystemExit(f"Unknown solver in job file: {solver!r}")
    priority = args.priority or loaded.priority

    png, scenario_png = args.png.strip(), args.scenario_png.strip()
    res = run_rail(
        loaded.config,
        mode=mode,
        solver=solver,
        priority=priority,
        workers=int(args.workers),
        out_dir=args.out.strip() or None,
        export_prefix=args.prefix,
        make_plot=bool(png or scenario_png) or not args.no_plot,
    )

    config = loaded.config
    print(f"Mode: {mode}  solver: {solver}")
    print(f"Required: {float(config.required):,.0f} mm")
    if res.scenarios is not None:
        print_scenarios(res.scenarios)
        print(f"Picked ({priority}): {res.label}")
    print_result(res.outcome, required=float(config.required))

    if not res.outcome.ok:
        raise SystemExit(1)

    if args.out.strip():
        log.info(f"Exported CSV + JSON to: {args.out.strip()}")

    finish_figures(res, png=png, scenario_png=scenario_png, show=not args.no_plot)


if __name__ == "__main__":
    main()
