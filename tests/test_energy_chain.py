"""Test solved schedules satisfy the coupling equations and the energy chain."""

import linopy
import numpy as np
import pytest

from emsig_engine.core.constants import (
    COL_ESS_CHARGE_POWER_W,
    COL_ESS_DISCHARGE_POWER_W,
    COL_ESS_ENERGY_WH,
    COL_ESS_POWER_W,
    COL_GRID_BUY_POWER_W,
    COL_GRID_POWER_W,
    COL_GRID_SELL_POWER_W,
)
from emsig_engine.core.schemas import EnergyModelConfig, SolverConfig
from emsig_engine.core.validate import ValidationError, validate_schedule
from emsig_engine.model.build import build_energy_model
from emsig_engine.model.results import ResultAccessor
from emsig_engine.model.solve import SolverError, solve_model


@pytest.fixture
def config():
    """Create configuration with one negative-price period."""
    return EnergyModelConfig(
        no_of_periods=4,
        minutes_per_period=15,
        ess_max_charge=5000.0,
        ess_max_discharge=5000.0,
        ess_min_energy=0.0,
        ess_max_energy=10000.0,
        ess_initial_energy=5000.0,
        grid_buy_limit=10000.0,
        grid_sell_limit=0.0,
        grid_buy_cost=(0.30, -0.05, 0.10, 0.30),
        grid_sell_revenue=(0.05, 0.05, 0.05, 0.05),
    )


@pytest.fixture
def solver_config():
    """Create solver configuration."""
    return SolverConfig(solver_time_limit_seconds=30.0)


def _solve(config, solver_config):
    energy_model = build_energy_model(config)
    result = solve_model(energy_model, solver_config)
    return energy_model, result


def test_coupling_equations_hold(config, solver_config):
    """Test net power, grid balance and grid split in every period."""
    energy_model, result = _solve(config, solver_config)
    schedule = ResultAccessor(energy_model).to_frame()

    assert result.solver_status == "ok"

    ess_power = schedule[COL_ESS_POWER_W].values
    discharge = schedule[COL_ESS_DISCHARGE_POWER_W].values
    charge = schedule[COL_ESS_CHARGE_POWER_W].values
    grid_power = schedule[COL_GRID_POWER_W].values
    buy = schedule[COL_GRID_BUY_POWER_W].values
    sell = schedule[COL_GRID_SELL_POWER_W].values

    np.testing.assert_allclose(ess_power, discharge - charge, atol=1e-6)
    np.testing.assert_allclose(grid_power, -ess_power, atol=1e-6)
    np.testing.assert_allclose(grid_power, buy - sell, atol=1e-6)


def test_energy_chain_holds(config, solver_config):
    """Test energy[i] = energy[i-1] - ess_power[i] * hours, from the initial energy."""
    energy_model, _ = _solve(config, solver_config)
    schedule = ResultAccessor(energy_model).to_frame()

    energy = schedule[COL_ESS_ENERGY_WH].values
    ess_power = schedule[COL_ESS_POWER_W].values
    hours = config.minutes_per_period / 60

    assert energy[0] == pytest.approx(config.ess_initial_energy - ess_power[0] * hours, abs=1e-6)
    for i in range(1, len(energy)):
        assert energy[i] == pytest.approx(energy[i - 1] - ess_power[i] * hours, abs=1e-6)


def test_negative_price_charges_battery(config, solver_config):
    """Test that a negative buy price is used to charge at full power."""
    energy_model, result = _solve(config, solver_config)
    schedule = ResultAccessor(energy_model).to_frame()

    # 5000 W for 15 minutes is 1250 Wh, bought at -0.05 per kWh
    assert schedule[COL_GRID_BUY_POWER_W].tolist() == pytest.approx([0, 5000, 0, 0], abs=1e-6)
    assert schedule[COL_ESS_POWER_W].iloc[1] == pytest.approx(-5000.0)
    assert schedule[COL_ESS_ENERGY_WH].tolist() == pytest.approx(
        [5000.0, 6250.0, 6250.0, 6250.0], abs=1e-6
    )
    assert result.objective_value == pytest.approx(-0.0625)


def test_bounds_hold(config, solver_config):
    """Test every solved value sits within its declared bounds."""
    energy_model, _ = _solve(config, solver_config)
    schedule = ResultAccessor(energy_model).to_frame()

    assert (schedule[COL_ESS_CHARGE_POWER_W] >= -1e-6).all()
    assert (schedule[COL_ESS_CHARGE_POWER_W] <= config.ess_max_charge + 1e-6).all()
    assert (schedule[COL_ESS_DISCHARGE_POWER_W] >= -1e-6).all()
    assert (schedule[COL_ESS_DISCHARGE_POWER_W] <= config.ess_max_discharge + 1e-6).all()
    assert (schedule[COL_ESS_ENERGY_WH] >= config.ess_min_energy - 1e-6).all()
    assert (schedule[COL_ESS_ENERGY_WH] <= config.ess_max_energy + 1e-6).all()
    assert (schedule[COL_GRID_BUY_POWER_W] <= config.grid_buy_limit + 1e-6).all()
    assert (schedule[COL_GRID_SELL_POWER_W].abs() <= 1e-6).all()

    validate_schedule(schedule, config)


def test_discharge_drains_battery_when_selling(config, solver_config):
    """Test an enabled sell period discharges and lowers stored energy."""
    config = config.model_copy(
        update={
            "grid_sell_limit": 5000.0,
            "grid_sell_enabled_periods": frozenset({2}),
            "grid_buy_cost": (0.30, 0.30, 0.30, 0.30),
            "grid_sell_revenue": (0.0, 0.0, 0.50, 0.0),
        }
    )
    energy_model, _ = _solve(config, solver_config)
    schedule = ResultAccessor(energy_model).to_frame()

    assert schedule[COL_GRID_SELL_POWER_W].tolist() == pytest.approx([0, 0, 5000, 0], abs=1e-6)
    assert schedule[COL_ESS_POWER_W].iloc[2] == pytest.approx(5000.0)
    assert schedule[COL_ESS_ENERGY_WH].tolist() == pytest.approx(
        [5000.0, 5000.0, 3750.0, 3750.0], abs=1e-6
    )


def test_energy_floor_limits_discharge(config, solver_config):
    """Test the minimum energy bound stops discharge part-way."""
    config = config.model_copy(
        update={
            "ess_min_energy": 4000.0,
            "grid_sell_limit": 5000.0,
            "grid_sell_enabled_periods": frozenset({0, 1, 2, 3}),
            "grid_buy_cost": (0.30, 0.30, 0.30, 0.30),
            "grid_sell_revenue": (0.20, 0.20, 0.20, 0.20),
        }
    )
    energy_model, _ = _solve(config, solver_config)
    schedule = ResultAccessor(energy_model).to_frame()

    # Only 1000 Wh can leave the store over the whole horizon
    assert schedule[COL_GRID_SELL_POWER_W].sum() * 0.25 == pytest.approx(1000.0, abs=1e-6)
    assert schedule[COL_ESS_ENERGY_WH].iloc[-1] == pytest.approx(4000.0, abs=1e-6)


def test_solve_freezes_model(config, solver_config):
    """Test the model accepts no declarations once solved."""
    energy_model, _ = _solve(config, solver_config)

    with pytest.raises(RuntimeError):
        energy_model.capability.declare_variable("extra", 0.0, 1.0)


def test_non_optimal_status_raises(config, solver_config, monkeypatch):
    """Test infeasibility reported by the solver surfaces as SolverError."""
    monkeypatch.setattr(
        linopy.Model, "solve", lambda self, **kwargs: ("warning", "infeasible")
    )
    energy_model = build_energy_model(config)

    with pytest.raises(SolverError, match="infeasible"):
        solve_model(energy_model, solver_config)

    assert not energy_model.capability.solved


def test_validate_schedule_detects_broken_chain(config, solver_config):
    """Test schedule validation rejects a tampered energy column."""
    energy_model, _ = _solve(config, solver_config)
    schedule = ResultAccessor(energy_model).to_frame()
    schedule.loc["02", COL_ESS_ENERGY_WH] += 100.0

    with pytest.raises(ValidationError):
        validate_schedule(schedule, config)
