# railcut/test_costing_io.py
# BOM costing, geometry, settings I/O, exports, plotting and validation.

from __future__ import annotations

import csv
import json
from dataclasses import replace

import matplotlib

matplotlib.use("Agg")

import pytest

from railcut.config import DEFAULTS, make_config, parse_lengths_text
from railcut.costing import PriceModel, compute_bom
from railcut.geometry import required_rail_length
from railcut.io_csv import export_all, export_plan_csv
from railcut.io_json import config_from_dict, config_to_dict, load_job_json, save_config_json
from railcut.plotting import plot_plan, plot_scenarios, save_figure_png
from railcut.scenarios import generate_scenarios
from railcut.solver_dp import solve_dp
from railcut.types import CutConfig
from railcut.utils import outcome_to_dict, save_json, scenario_set_to_dict, timer
from railcut.validate import raise_on_errors, validate_result


# ----------------------------
# Costing / geometry / config
# ----------------------------

def test_bom_cost() -> None:
    bom = compute_bom(4200, 2, PriceModel(cost_per_unit_length=0.1, cost_per_joint_set=50, joiner_length=100))
    assert bom.material_cost == pytest.approx(420.0)
    assert bom.joint_set_cost == pytest.approx(100.0)
    assert bom.total_actual_cost == pytest.approx(520.0)
    assert bom.total_length_mm == 4200
    assert bom.joiner_count == 2


def test_price_per_meter() -> None:
    price = PriceModel.from_per_meter(12.5, cost_per_joint_set=3)
    assert price.cost_per_unit_length == pytest.approx(0.0125)
    assert compute_bom(2000, 0, price).total_actual_cost == pytest.approx(25.0)


def test_joiner_length_is_not_added_to_span() -> None:
    res = solve_dp(CutConfig(required=2000, lengths=[1000], joiner_length=100, cost_per_unit_length=1))
    assert res.total == 2000
    assert res.extra == 0
    assert res.material_cost == pytest.approx(2000.0)


def test_required_rail_length() -> None:
    assert required_rail_length(3) == 3 * 1303 + 2 * 20 + 2 * 40 + 2 * 15
    assert required_rail_length(1) == 1303 + 80 + 30
    assert required_rail_length(0) == 110
    assert required_rail_length(2, module_width=1000.4, mid_clamp=0, end_clamp_width=0, buffer=0) == 2001


def test_parse_lengths_text() -> None:
    assert parse_lengths_text("1595, 1798 2400,,x, -5, 0") == [1595.0, 1798.0, 2400.0]
    assert parse_lengths_text("") == []


def test_make_config_defaults() -> None:
    c = make_config(4000)
    assert tuple(c.lengths) == DEFAULTS.stock_lengths
    assert tuple(c.small_lengths) == DEFAULTS.small_lengths
    assert (c.alpha_joint, c.beta_small, c.gamma_short) == (220.0, 60.0, 5.0)

    custom = make_config(4000, [1000, 2000])
    assert tuple(custom.small_lengths) == ()


# ----------------------------
# Settings JSON
# ----------------------------

def test_config_dict_round_trip() -> None:
    c = make_config(4000, max_pieces=3, max_waste_pct=0.1, cost_per_unit_length=0.1)
    assert config_from_dict(config_to_dict(c)) == c


def test_front_end_settings_aliases() -> None:
    data = {
        "moduleWidth": 1303,
        "midClamp": 20,
        "endClampWidth": 40,
        "buffer": 15,
        "modules": 3,
        "lengthsInput": "1595, 1798, 2400, 2750",
        "enabledLengths": {"1595": True, "1798": False, "2400": True, "2750": True},
        "maxPieces": 0,
        "maxWastePct": "",
        "alphaJoint": 300,
        "costPerMm": "0.1",
        "costPerJointSet": "50",
        "joinerLength": "100",
    }
    c = config_from_dict(data)
    assert c.required == required_rail_length(3)
    assert list(c.lengths) == [1595.0, 2400.0, 2750.0]
    assert tuple(c.small_lengths) == ()
    assert c.max_pieces is None
    assert c.max_waste_pct is None
    assert c.alpha_joint == 300.0
    assert c.beta_small == DEFAULTS.beta_small
    assert c.cost_per_unit_length == pytest.approx(0.1)
    assert c.cost_per_joint_set == pytest.approx(50.0)


def test_missing_required_is_an_error() -> None:
    with pytest.raises(ValueError, match="required"):
        config_from_dict({"lengths": [1000]})


@pytest.mark.parametrize("raw, expected", [("3", 3), (4.0, 4), (0, None), ("", None)])
def test_max_pieces_whole_numbers(raw, expected) -> None:
    assert config_from_dict({"required": 1000, "lengths": [500], "maxPieces": raw}).max_pieces == expected


def test_fractional_max_pieces_reaches_the_solver() -> None:
    c = config_from_dict({"required": 1000, "lengths": [500], "maxPieces": "3.7"})
    assert c.max_pieces == 3.7
    res = solve_dp(c)
    assert res.kind == "InvalidInput"
    assert "max_pieces" in res.reason


def test_load_and_save_job(tmp_path) -> None:
    job = tmp_path / "job.json"
    job.write_text(
        json.dumps({"required": 1500, "lengths": [500, 800, 1000], "mode": "scenarios", "priority": "joints"}),
        encoding="utf-8",
    )
    loaded = load_job_json(job)
    assert loaded.mode == "scenarios"
    assert loaded.priority == "joints"
    assert loaded.solver == "dp"
    assert loaded.config.required == 1500.0

    out = tmp_path / "nested" / "settings.json"
    save_config_json(loaded.config, out, priority="joints")
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["required"] == 1500.0
    assert data["priority"] == "joints"
    assert load_job_json(out).config == loaded.config


# ----------------------------
# Exports
# ----------------------------

def test_outcome_to_dict() -> None:
    res = solve_dp(CutConfig(required=1500, lengths=[500, 800, 1000]))
    d = outcome_to_dict(res, required=1500)
    assert d["ok"] is True
    assert d["plan"] == [500, 1000]
    assert d["counts_by_length"] == {"500": 1, "1000": 1}
    assert d["extra_pct"] == 0.0

    fail = outcome_to_dict(solve_dp(CutConfig(required=0, lengths=[500])))
    assert fail == {"ok": False, "kind": "InvalidInput", "reason": "Required length must be greater than 0.", "solver": "dp"}


def test_save_json(tmp_path) -> None:
    ss = generate_scenarios(CutConfig(required=1500, lengths=[500, 800, 1000]))
    path = tmp_path / "out" / "scenarios.json"
    save_json(scenario_set_to_dict(ss), path)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert set(data) == {"C", "L", "J", "all_scenarios"}
    assert data["C"]["result"]["ok"] is True


def test_export_plan_csv(tmp_path) -> None:
    res = solve_dp(CutConfig(required=1500, lengths=[500, 800, 1000], small_lengths=[500]))
    path = tmp_path / "cuts.csv"
    export_plan_csv(res, path, small_lengths=[500])
    with path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [(r["length"], r["start"], r["end"], r["small"], r["joint_after"]) for r in rows] == [
        ("500", "0", "500", "1", "1"),
        ("1000", "500", "1500", "0", "0"),
    ]


def test_export_all(tmp_path) -> None:
    config = CutConfig(required=1500, lengths=[500, 800, 1000])
    ss = generate_scenarios(config)
    export_all(ss.C.result, tmp_path / "out", prefix="r1", scenarios=ss)
    assert (tmp_path / "out" / "r1_cuts.csv").exists()
    with (tmp_path / "out" / "r1_scenarios.csv").open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == len(ss.all_scenarios)
    assert any("C" in r["picks"] for r in rows)


def test_timer() -> None:
    with timer("x") as t:
        pass
    assert t["seconds"] >= 0.0


# ----------------------------
# Plotting
# ----------------------------

def test_plot_plan_and_scenarios(tmp_path) -> None:
    config = make_config(4000)
    res = solve_dp(config)
    fig = plot_plan(res, 4000, small_lengths=config.small_lengths)
    assert len(fig.axes[0].patches) == res.pieces
    save_figure_png(fig, str(tmp_path / "plan.png"))
    assert (tmp_path / "plan.png").exists()

    ss = generate_scenarios(config)
    fig2 = plot_scenarios(ss)
    save_figure_png(fig2, str(tmp_path / "scenarios.png"))
    assert (tmp_path / "scenarios.png").exists()


# ----------------------------
# Validation
# ----------------------------

def test_validate_flags_broken_results() -> None:
    config = CutConfig(required=1500, lengths=[500, 800, 1000])
    good = solve_dp(config)
    assert validate_result(config, good) == []

    bad = replace(good, total=1400, cost=1.0)
    issues = validate_result(config, bad)
    messages = " ".join(i.message for i in issues)
    assert "Sum mismatch" in messages
    assert "Cost mismatch" in messages
    with pytest.raises(ValueError, match="Validation failed"):
        raise_on_errors(issues)


def test_validate_reports_failure_as_warning() -> None:
    config = CutConfig(required=0, lengths=[500])
    issues = validate_result(config, solve_dp(config))
    assert [i.level for i in issues] == ["WARN"]
    raise_on_errors(issues)
