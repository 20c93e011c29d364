# railcut/test_solver_dp.py
# DP solver: end-to-end cases, result invariants, constraints and failures.
#
#   pytest railcut/test_solver_dp.py

from __future__ import annotations

import pytest

from railcut.errors import Infeasible, InvalidInput, raise_on_failure
from railcut.lengths import prepare_lengths, prepare_problem, round_mm
from railcut.profile import Profiler
from railcut.solver_dp import build_table, reconstruct_plan, select_candidate, solve_dp, solve_dp_bounded, table_limit
from railcut.types import CutConfig
from railcut.validate import raise_on_errors, validate_result


def _ok(config: CutConfig, solve=solve_dp):
    res = solve(config)
    assert res.ok, getattr(res, "reason", "")
    raise_on_errors(validate_result(config, res))
    return res


# ----------------------------
# End-to-end cases
# ----------------------------

def test_exact_single_piece() -> None:
    res = _ok(CutConfig(required=2000, lengths=[500, 1000, 2000]))
    assert res.plan == (2000,)
    assert (res.pieces, res.total, res.extra, res.joints) == (1, 2000, 0, 0)


def test_two_piece_combination() -> None:
    res = _ok(CutConfig(required=1500, lengths=[500, 800, 1000]))
    assert sorted(res.plan) == [500, 1000]
    assert res.pieces == 2
    assert res.joints == 1
    assert res.total == 1500
    assert res.cost == 220.0


def test_plan_keeps_reconstruction_order() -> None:
    res = _ok(CutConfig(required=1500, lengths=[1000, 800, 500]))
    assert res.plan == (500, 1000)
    assert res.counts_by_length == {500: 1, 1000: 1}


def test_single_piece_cap_prefers_smaller_overshoot() -> None:
    res = _ok(CutConfig(required=750, lengths=[500, 1000, 1500], max_pieces=1))
    assert res.plan == (1000,)
    assert res.extra == 250


@pytest.mark.parametrize(
    "config",
    [
        CutConfig(required=0, lengths=[500, 1000]),
        CutConfig(required=-10, lengths=[500, 1000]),
        CutConfig(required=1000, lengths=[]),
        CutConfig(required=1000, lengths=["abc", -5, float("nan"), float("inf"), 0]),
        CutConfig(required=1000, lengths=[500], max_pieces=0),
        CutConfig(required=1000, lengths=[500], allow_undershoot_pct=1.0),
        CutConfig(required=1000, lengths=[500], max_waste_pct=-0.1),
        CutConfig(required=1000, lengths=[500], alpha_joint=-1),
    ],
)
def test_invalid_input(config: CutConfig) -> None:
    res = solve_dp(config)
    assert not res.ok
    assert res.kind == "InvalidInput"
    assert res.solver == "dp"
    with pytest.raises(InvalidInput):
        raise_on_failure(res)


def test_invalid_input_messages() -> None:
    assert solve_dp(CutConfig(required=1000, lengths=[])).reason == "No valid cut lengths."
    assert solve_dp(CutConfig(required=0, lengths=[500])).reason == "Required length must be greater than 0."


# ----------------------------
# Length preparation
# ----------------------------

def test_prepare_lengths_filters_and_sorts() -> None:
    assert prepare_lengths([1000, "500", 500, -1, None, float("nan"), 1000.2, "x"]) == [500, 1000]


def test_half_mm_rounds_up() -> None:
    assert round_mm(1500.5) == 1501
    assert round_mm(2.5) == 3
    assert round_mm(1500.4) == 1500
    assert prepare_lengths([500.5, 999.5]) == [501, 1000]
    assert prepare_problem(CutConfig(required=1500.5, lengths=[500])).required == 1501


def test_small_lengths_counted() -> None:
    res = _ok(CutConfig(required=1500, lengths=[500, 800, 1000], small_lengths=[500]))
    assert res.small_count == 1
    assert res.cost == 220.0 + 60.0


# ----------------------------
# Constraints
# ----------------------------

def test_piece_cap_infeasible() -> None:
    res = solve_dp(CutConfig(required=3000, lengths=[1000], max_pieces=2))
    assert not res.ok
    assert res.kind == "Infeasible"
    assert "max pieces" in res.reason
    with pytest.raises(Infeasible):
        raise_on_failure(res)


def test_piece_cap_reached() -> None:
    res = _ok(CutConfig(required=3000, lengths=[1000], max_pieces=3))
    assert res.plan == (1000, 1000, 1000)


def test_undershoot_window() -> None:
    strict = _ok(CutConfig(required=1000, lengths=[990, 2000]))
    assert strict.plan == (2000,)

    loose = _ok(CutConfig(required=1000, lengths=[990, 2000], allow_undershoot_pct=0.02))
    assert loose.plan == (990,)
    assert loose.shortage == 10
    assert loose.extra == 0
    assert loose.cost == 5.0 * 10


def test_waste_ceiling_is_hard() -> None:
    at_limit = _ok(CutConfig(required=1000, lengths=[600, 1100], max_waste_pct=0.10))
    assert at_limit.plan == (1100,)

    res = solve_dp(CutConfig(required=1000, lengths=[600, 1100], max_waste_pct=0.05))
    assert not res.ok
    assert res.kind == "Infeasible"
    assert "5.0% waste limit" in res.reason


def test_tightening_waste_ceiling_respects_new_limit() -> None:
    base = CutConfig(required=1000, lengths=[520, 1300], alpha_joint=500)
    loose = _ok(base)
    assert loose.plan == (1300,)

    tight = _ok(base.with_overrides(max_waste_pct=0.25))
    assert tight.plan == (520, 520)
    assert tight.extra / 1000 <= 0.25
    assert tight.cost >= loose.cost


def test_bom_does_not_change_selection() -> None:
    plain = _ok(CutConfig(required=1500, lengths=[500, 800, 1000]))
    priced = _ok(
        CutConfig(
            required=1500,
            lengths=[500, 800, 1000],
            cost_per_unit_length=0.1,
            cost_per_joint_set=50,
            joiner_length=100,
        )
    )
    assert priced.plan == plain.plan
    assert priced.total == 1500
    assert priced.material_cost == pytest.approx(150.0)
    assert priced.joint_set_cost == pytest.approx(50.0)
    assert priced.total_actual_cost == pytest.approx(200.0)


# ----------------------------
# Determinism / tie-break
# ----------------------------

def test_deterministic_and_order_independent() -> None:
    a = CutConfig(required=8000, lengths=[500, 800, 1000, 1200, 1500, 2000, 2500, 3000], small_lengths=[500, 800])
    b = a.with_overrides(lengths=list(reversed(a.lengths)))
    assert solve_dp(a) == solve_dp(a)
    assert solve_dp(a) == solve_dp(b)


def test_table_prefers_fewer_pieces_then_fewer_small() -> None:
    problem = prepare_problem(CutConfig(required=1200, lengths=[400, 600, 1200], small_lengths=[400]))
    best, tmax = build_table(problem)
    assert tmax == 1200 + 1200 - 1
    assert best[1200].pieces == 1
    # 1000 = 400 + 600 only
    assert (best[1000].pieces, best[1000].small) == (2, 1)
    # 1800 = 600 + 1200
    assert (best[1800].pieces, best[1800].small) == (2, 0)


def test_select_and_reconstruct() -> None:
    problem = prepare_problem(CutConfig(required=1500, lengths=[500, 800, 1000]))
    best, tmax = build_table(problem)
    cand = select_candidate(problem, best, tmax)
    assert cand.t == 1500
    assert cand.key() == (220.0, 0, 2, 0, 1500)
    assert reconstruct_plan(problem, best, cand.t) == [500, 1000]


# ----------------------------
# Table bounds
# ----------------------------

def test_too_large_table() -> None:
    res = solve_dp(CutConfig(required=10_000_000, lengths=[5000]))
    assert not res.ok
    assert res.kind == "ProblemTooLarge"
    assert "TMAX" in res.reason
    assert "10,000,000" in res.reason


def test_bounded_table_limit() -> None:
    problem = prepare_problem(CutConfig(required=4000, lengths=[1000, 3000]))
    assert table_limit(problem) == 4000 + 2999
    assert table_limit(problem, bounded=True) == 4000 + 200

    small = prepare_problem(CutConfig(required=1000, lengths=[50, 80]))
    # cap never exceeds max(L) - 1
    assert table_limit(small, bounded=True) == 1000 + 79


def test_bounded_matches_exact() -> None:
    config = CutConfig(required=4000, lengths=[1000, 3000])
    exact = _ok(config)
    bounded = _ok(config, solve_dp_bounded)
    assert exact.plan == bounded.plan
    assert bounded.solver == "dp_bounded"


def test_bounded_clamp_keeps_true_total() -> None:
    res = _ok(CutConfig(required=1000, lengths=[3000]), solve_dp_bounded)
    assert res.plan == (3000,)
    assert res.total == 3000
    assert res.extra == 2000


def test_profiler_records_phases() -> None:
    prof = Profiler()
    res = solve_dp(CutConfig(required=2000, lengths=[500, 1000, 2000]), profiler=prof)
    assert res.ok
    assert set(prof.phases) == {"prepare", "table", "select", "reconstruct"}
    assert prof.elapsed("table") >= 0.0
    assert prof.elapsed("missing") == 0.0
    assert prof.counters == {"lengths": 3, "slots": 2000 + 2000, "pieces": 1}
    report = prof.report()
    assert "TOTAL" in report
    assert "slots" in report


def test_profiler_keeps_phase_of_failed_solve() -> None:
    prof = Profiler()
    res = solve_dp(CutConfig(required=0, lengths=[500]), profiler=prof)
    assert res.kind == "InvalidInput"
    assert set(prof.phases) == {"prepare"}
    assert prof.counters == {}
