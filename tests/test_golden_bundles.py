"""Golden bundle tests - validate example bundles produce expected results."""

import json
import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from emsig_engine.cli import app
from emsig_engine.core.schemas import EnergyModelConfig
from emsig_engine.io.bundle import init_bundle, load_bundle
from emsig_engine.io.formats import read_parquet_schedule
from emsig_engine.runners.schedule import run_schedule


@pytest.fixture
def examples_dir():
    """Get examples directory path."""
    return Path(__file__).parent.parent / "examples" / "bundles"


@pytest.fixture
def bundle_path(examples_dir, tmp_path):
    """Copy the arbitrage bundle so results are written outside the repo."""
    target = tmp_path / "arbitrage_4x15"
    shutil.copytree(examples_dir / "arbitrage_4x15", target)
    return target


def test_arbitrage_bundle(bundle_path):
    """Test the four-period arbitrage bundle."""
    schedule, metrics = run_schedule(str(bundle_path))

    assert len(schedule) == 4

    # Charges 1250 Wh in the negative-price period
    assert metrics["total_buy_wh"] == pytest.approx(1250.0, abs=1e-6)
    assert metrics["total_sell_wh"] == pytest.approx(0.0, abs=1e-6)
    assert metrics["net_cost"] == pytest.approx(-0.0625)
    assert metrics["ess_final_energy_wh"] == pytest.approx(6250.0, abs=1e-6)
    assert metrics["ess_throughput_wh"] >= 1250.0 - 1e-6

    for filename in ["schedule.parquet", "solve_stats.json", "metrics.json", "bundle_metadata.json"]:
        assert (bundle_path / filename).exists(), f"{filename} should be written"

    stored = read_parquet_schedule(str(bundle_path / "schedule.parquet"))
    assert list(stored.index) == ["00", "01", "02", "03"]

    with open(bundle_path / "solve_stats.json") as f:
        assert json.load(f)["solver_status"] == "ok"


def test_init_bundle_round_trip(tmp_path):
    """Test a bundle written by init_bundle loads back to the same config."""
    config = EnergyModelConfig(
        no_of_periods=2,
        minutes_per_period=60,
        ess_max_charge=3000.0,
        ess_max_discharge=3000.0,
        ess_min_energy=500.0,
        ess_max_energy=9000.0,
        ess_initial_energy=1000.0,
        grid_buy_limit=4000.0,
        grid_sell_limit=2000.0,
        grid_buy_cost=(0.2, 0.4),
        grid_sell_revenue=(0.1, 0.1),
        grid_sell_enabled_periods=frozenset({1}),
    )
    init_bundle(tmp_path / "bundle", config)

    loaded, solver_config = load_bundle(tmp_path / "bundle")

    assert loaded == config
    assert solver_config.solver_name == "highs"


def test_cli_schedule_and_report(bundle_path):
    """Test the schedule and report commands on a bundle."""
    runner = CliRunner()

    result = runner.invoke(app, ["schedule", str(bundle_path)])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["report", str(bundle_path)])
    assert result.exit_code == 0, result.output
    assert "ESSEnergy  6250" in result.output


def test_cli_validate_rejects_bad_config(tmp_path):
    """Test validate fails on an inconsistent configuration."""
    bundle = tmp_path / "bad"
    bundle.mkdir()
    (bundle / "config.yaml").write_text(
        "no_of_periods: 2\n"
        "minutes_per_period: 15\n"
        "ess_max_charge: 1000\n"
        "ess_max_discharge: 1000\n"
        "ess_min_energy: 10000\n"
        "ess_max_energy: 5000\n"
        "ess_initial_energy: 5000\n"
        "grid_buy_limit: 1000\n"
        "grid_sell_limit: 0\n"
        "grid_buy_cost: [0.1, 0.1]\n"
        "grid_sell_revenue: [0.0, 0.0]\n"
    )

    result = CliRunner().invoke(app, ["validate", str(bundle)])
    assert result.exit_code == 1
