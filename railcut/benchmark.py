# railcut/benchmark.py
# Strategy benchmark: run every registered solver over a fixed case list,
# time each call, validate the result and check the expected fields.
#
# Run:
#   python -m railcut.benchmark
#   python -m railcut.benchmark --solvers dp greedy --time 2
#   python -m railcut.benchmark --random 20 --seed 7
#
# Solves cannot be interrupted; a call that finishes after the time budget
# is reported as TIMEOUT.

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .logger import get_logger, set_verbose
from .sample_data import RandomJobsConfig, generate_random_jobs
from .solvers import get_solver, solver_names
from .types import CutConfig, SolveOutcome
from .utils import timer
from .validate import validate_result


@dataclass(frozen=True)
class BenchmarkCase:
    name: str
    config: CutConfig
    # exact values: pieces / total / extra, or {"ok": False}
    expected: Dict[str, object] = field(default_factory=dict)
    # upper bounds: pieces / extra
    expected_max: Dict[str, int] = field(default_factory=dict)
    # random jobs: a domain failure is an acceptable answer
    allow_failure: bool = False


TEST_CASES: List[BenchmarkCase] = [
    BenchmarkCase(
        name="Small - Exact match exists",
        config=CutConfig(required=2000, lengths=(500, 1000, 2000), small_lengths=(500,), max_pieces=10),
        expected={"pieces": 1, "total": 2000, "extra": 0},
    ),
    BenchmarkCase(
        name="Small - Need combination",
        config=CutConfig(required=1500, lengths=(500, 800, 1000), small_lengths=(500,), max_pieces=10),
        expected={"pieces": 2, "total": 1500},
    ),
    BenchmarkCase(
        name="Medium - Multiple options",
        config=CutConfig(
            required=3500,
            lengths=(600, 800, 1000, 1200, 1500, 2000),
            small_lengths=(600, 800),
            max_pieces=8,
        ),
        expected_max={"pieces": 4, "extra": 200},
    ),
    BenchmarkCase(
        name="Large - Complex optimization",
        config=CutConfig(
            required=8000,
            lengths=(500, 800, 1000, 1200, 1500, 2000, 2500, 3000),
            small_lengths=(500, 800),
            max_pieces=10,
        ),
        expected_max={"pieces": 6, "extra": 500},
    ),
    BenchmarkCase(
        name="Very Large - Stress test",
        config=CutConfig(
            required=15000,
            lengths=(600, 800, 1000, 1200, 1500, 2000, 2500, 3000, 4000, 5000),
            small_lengths=(600, 800, 1000),
            max_pieces=12,
        ),
        expected_max={"pieces": 8, "extra": 1000},
    ),
    # Without a waste ceiling a single 500 piece is a valid answer (400 mm over).
    BenchmarkCase(
        name="Edge - No solution without overshoot",
        config=CutConfig(required=100, lengths=(500, 1000), max_pieces=1, max_waste_pct=1.0),
        expected={"ok": False},
    ),
    BenchmarkCase(
        name="Edge - Single piece only",
        config=CutConfig(required=750, lengths=(500, 1000, 1500), max_pieces=1),
        expected={"pieces": 1, "total": 1000},
    ),
]


@dataclass
class CaseResult:
    solver: str
    case: str
    passed: bool
    reason: str
    seconds: float
    outcome: Optional[SolveOutcome] = None


@dataclass
class SolverSummary:
    solver: str
    passed: int = 0
    failed: int = 0
    seconds: float = 0.0


@dataclass
class BenchmarkReport:
    results: List[CaseResult] = field(default_factory=list)

    def for_solver(self, solver: str) -> List[CaseResult]:
        return [r for r in self.results if r.solver == solver]

    def summaries(self) -> List[SolverSummary]:
        out: Dict[str, SolverSummary] = {}
        for r in self.results:
            s = out.setdefault(r.solver, SolverSummary(solver=r.solver))
            if r.passed:
                s.passed += 1
            else:
                s.failed += 1
            s.seconds += r.seconds
        return list(out.values())


def _check_expectations(case: BenchmarkCase, outcome: SolveOutcome) -> Optional[str]:
    """Return the first mismatch, or None."""
    for key in ("pieces", "total", "extra"):
        if key in case.expected and getattr(outcome, key) != case.expected[key]:
            return f"Expected {key} {case.expected[key]}, got {getattr(outcome, key)}"
    if "pieces" in case.expected_max and outcome.pieces > case.expected_max["pieces"]:
        return f"Too many pieces: {outcome.pieces} > {case.expected_max['pieces']}"
    if "extra" in case.expected_max and outcome.extra > case.expected_max["extra"]:
        return f"Too much waste: {outcome.extra} > {case.expected_max['extra']}"
    return None


def run_case(solver_name: str, case: BenchmarkCase, time_budget_s: float = 5.0) -> CaseResult:
    solve = get_solver(solver_name)
    with timer(f"{solver_name}:{case.name}") as t:
        outcome = solve(case.config)
    seconds = t["seconds"]

    def result(passed: bool, reason: str) -> CaseResult:
        return CaseResult(
            solver=solver_name,
            case=case.name,
            passed=passed,
            reason=reason,
            seconds=seconds,
            outcome=outcome,
        )

    if seconds > time_budget_s:
        return result(False, "TIMEOUT")

    if case.expected.get("ok") is False:
        if outcome.ok:
            return result(False, "Expected failure but got solution")
        return result(True, "PASS")

    if not outcome.ok:
        return result(case.allow_failure, f"{outcome.kind}: {outcome.reason}")

    errors = [i for i in validate_result(case.config, outcome) if i.level == "ERROR"]
    if errors:
        return result(False, errors[0].message)

    mismatch = _check_expectations(case, outcome)
    if mismatch is not None:
        return result(False, mismatch)
    return result(True, "PASS")


def run_benchmark(
    solvers: Optional[Sequence[str]] = None,
    cases: Optional[Sequence[BenchmarkCase]] = None,
    time_budget_s: float = 5.0,
) -> BenchmarkReport:
    log = get_logger()
    report = BenchmarkReport()
    for case in cases if cases is not None else TEST_CASES:
        for name in solvers or solver_names():
            r = run_case(name, case, time_budget_s)
            log.debug(f"{case.name} / {name}: {r.reason} ({r.seconds * 1000:.3f} ms)")
            report.results.append(r)
    return report


def random_cases(n: int, seed: int = 123) -> List[BenchmarkCase]:
    """Random jobs with no expectations: only validity is checked."""
    jobs = generate_random_jobs(RandomJobsConfig(seed=seed, n_jobs=n))
    return [
        BenchmarkCase(name=f"Random #{i + 1} (R={cfg.required})", config=cfg, allow_failure=True)
        for i, cfg in enumerate(jobs)
    ]


def format_report(report: BenchmarkReport) -> str:
    lines: List[str] = ["=" * 80, "RAIL CUT STRATEGY BENCHMARK", "=" * 80]

    current = None
    for r in report.results:
        if r.case != current:
            current = r.case
            lines.append("")
            lines.append(f"Test: {r.case}")
            lines.append("-" * 80)
        mark = "+" if r.passed else "x"
        lines.append(f"{mark} {r.solver:20s} {r.seconds * 1000:10.3f}ms  {r.reason}")
        if r.passed and r.outcome is not None and r.outcome.ok:
            o = r.outcome
            lines.append(f"    {o.pieces} pieces, total={o.total}mm, extra={o.extra}mm, cost={o.cost:.2f}")
            lines.append(f"    Plan: [{', '.join(str(li) for li in o.plan)}]")

    lines.append("")
    lines.append("=" * 80)
    lines.append("SUMMARY")
    lines.append("=" * 80)
    for s in report.summaries():
        total = s.passed + s.failed
        avg_ms = s.seconds / total * 1000 if total else 0.0
        lines.append(f"{s.solver:20s} {s.passed}/{total} passed   avg {avg_ms:10.3f}ms")
    return "\n".join(lines)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Benchmark rail cut strategies.")
    p.add_argument("--solvers", nargs="*", default=None, help=f"Subset of: {', '.join(solver_names())}")
    p.add_argument("--time", type=float, default=5.0, help="Time budget per call (seconds)")
    p.add_argument("--random", type=int, default=0, help="Also run N random jobs (validity only)")
    p.add_argument("--seed", type=int, default=123, help="Seed for --random")
    p.add_argument("--verbose", action="store_true", help="Log each call")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_argparser().parse_args(argv)
    if args.verbose:
        set_verbose(True)

    for name in args.solvers or ():
        try:
            get_solver(name)
        except KeyError as e:
            raise SystemExit(str(e.args[0]))

    cases: List[BenchmarkCase] = list(TEST_CASES)
    if args.random > 0:
        cases.extend(random_cases(args.random, seed=args.seed))

    report = run_benchmark(args.solvers, cases, time_budget_s=float(args.time))
    print(format_report(report))


if __name__ == "__main__":
    main()
