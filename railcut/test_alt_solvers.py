# railcut/test_alt_solvers.py
# Comparison strategies: same contract as the DP, same cost where they are
# exact (branch & bound, memo, CP-SAT), plus their own size limits.

from __future__ import annotations

import pytest

from railcut.solver_base import solver_entry
from railcut.solver_greedy import solve_greedy
from railcut.solvers import SOLVERS, get_solver, solve, solver_names
from railcut.types import CutConfig
from railcut.validate import raise_on_errors, validate_result

EXACT = ["dp", "branch_bound", "memo", "cp_sat"]

# No small lengths: for these the DP optimum is also the cost optimum, so
# every exact strategy must land on the same cost.
PARITY_CASES = [
    CutConfig(required=1500, lengths=[500, 800, 1000]),
    CutConfig(required=3500, lengths=[600, 800, 1000, 1200, 1500, 2000], max_pieces=8),
    CutConfig(required=8000, lengths=[500, 800, 1000, 1200, 1500, 2000, 2500, 3000], max_pieces=10),
    CutConfig(required=2345, lengths=[400, 700, 1100], alpha_joint=50),
    CutConfig(required=1000, lengths=[990, 2000], allow_undershoot_pct=0.02),
    CutConfig(required=1000, lengths=[520, 1300], alpha_joint=500, max_waste_pct=0.25),
    CutConfig(required=750, lengths=[500, 1000, 1500], max_pieces=1),
]


def test_registry() -> None:
    assert solver_names() == ["dp", "dp_bounded", "greedy", "branch_bound", "memo", "cp_sat"]
    for name, fn in SOLVERS.items():
        assert get_solver(name) is fn
        assert fn.solver_name == name
    with pytest.raises(KeyError, match="Known: dp"):
        get_solver("simplex")


@pytest.mark.parametrize("config", PARITY_CASES)
@pytest.mark.parametrize("name", EXACT)
def test_exact_strategies_agree_on_cost(name: str, config: CutConfig) -> None:
    reference = solve(config, "dp")
    res = solve(config, name)
    assert reference.ok
    assert res.ok, res.reason
    assert res.solver == name
    raise_on_errors(validate_result(config, res))
    assert res.cost == pytest.approx(reference.cost)


@pytest.mark.parametrize("name", solver_names())
def test_invalid_input_everywhere(name: str) -> None:
    for config in (CutConfig(required=0, lengths=[500]), CutConfig(required=1000, lengths=[])):
        res = solve(config, name)
        assert not res.ok
        assert res.kind == "InvalidInput"
        assert res.solver == name


@pytest.mark.parametrize("name", ["dp", "dp_bounded", "branch_bound", "memo", "cp_sat"])
def test_waste_limit_infeasible_everywhere(name: str) -> None:
    res = solve(CutConfig(required=100, lengths=[500, 1000], max_pieces=1, max_waste_pct=1.0), name)
    assert not res.ok
    assert res.kind == "Infeasible"


def test_greedy_fills_toward_residual() -> None:
    config = CutConfig(required=1500, lengths=[500, 800, 1000])
    res = solve_greedy(config)
    assert res.ok
    assert res.plan == (1000, 500)
    raise_on_errors(validate_result(config, res))


def test_greedy_respects_overshoot_fraction() -> None:
    # 1000 would overshoot by 250 (> 10% of 750), 500 alone falls short
    res = solve_greedy(CutConfig(required=750, lengths=[500, 1000, 1500], max_pieces=1))
    assert not res.ok
    assert res.kind == "Infeasible"
    assert "750" in res.reason


def test_greedy_uses_undershoot_window() -> None:
    res = solve_greedy(CutConfig(required=1000, lengths=[990], allow_undershoot_pct=0.02))
    assert res.ok
    assert res.plan == (990,)
    assert res.shortage == 10


def test_branch_bound_size_limit() -> None:
    res = solve(CutConfig(required=60_000, lengths=[1000, 5000]), "branch_bound")
    assert not res.ok
    assert res.kind == "ProblemTooLarge"
    assert "Branch & Bound" in res.reason


def test_memo_depth_limit() -> None:
    res = solve(CutConfig(required=5000, lengths=[1, 5]), "memo")
    assert not res.ok
    assert res.kind == "ProblemTooLarge"

    capped = solve(CutConfig(required=5000, lengths=[1, 5000], max_pieces=2), "memo")
    assert capped.ok
    assert capped.plan == (5000,)


def test_memo_table_ceiling() -> None:
    res = solve(CutConfig(required=100_000_001, lengths=[1000]), "memo")
    assert not res.ok
    assert res.kind == "ProblemTooLarge"
    assert "100,000,000" in res.reason


def test_solver_entry_wraps_domain_errors_only() -> None:
    from railcut.errors import Infeasible

    @solver_entry("custom")
    def always_infeasible(config: CutConfig):
        raise Infeasible("nothing fits")

    @solver_entry("broken")
    def broken(config: CutConfig):
        raise RuntimeError("bug")

    res = always_infeasible(CutConfig(required=1, lengths=[1]))
    assert (res.ok, res.kind, res.reason, res.solver) == (False, "Infeasible", "nothing fits", "custom")
    with pytest.raises(RuntimeError):
        broken(CutConfig(required=1, lengths=[1]))
