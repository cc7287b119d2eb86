"""Metrics computation for solved schedules."""

import pandas as pd

from emsig_engine.core.constants import (
    COL_BUY_COST,
    COL_ESS_CHARGE_POWER_W,
    COL_ESS_DISCHARGE_POWER_W,
    COL_ESS_ENERGY_WH,
    COL_GRID_BUY_POWER_W,
    COL_GRID_SELL_POWER_W,
    COL_SELL_REVENUE,
    MINUTES_PER_HOUR,
    WATTS_PER_KILOWATT,
)
from emsig_engine.core.schemas import EnergyModelConfig


def compute_cost(schedule: pd.DataFrame, period_hours: float) -> float:
    """Compute net cost of a schedule.

    Args:
        schedule: Schedule with grid flows in W and prices per kWh
        period_hours: Period duration in hours

    Returns:
        Net cost (positive = cost, negative = profit)
    """
    buy_kwh = schedule[COL_GRID_BUY_POWER_W] * period_hours / WATTS_PER_KILOWATT
    sell_kwh = schedule[COL_GRID_SELL_POWER_W] * period_hours / WATTS_PER_KILOWATT

    buy_cost = (buy_kwh * schedule[COL_BUY_COST]).sum()
    sell_revenue = (sell_kwh * schedule[COL_SELL_REVENUE]).sum()

    return float(buy_cost - sell_revenue)


def compute_metrics(schedule: pd.DataFrame, config: EnergyModelConfig) -> dict:
    """Compute summary metrics for a solved schedule.

    Args:
        schedule: Schedule dataframe from ``ResultAccessor.to_frame``
        config: Configuration the model was built from

    Returns:
        Dictionary of metrics
    """
    period_hours = config.minutes_per_period / MINUTES_PER_HOUR

    # Energy flows
    total_buy_wh = (schedule[COL_GRID_BUY_POWER_W] * period_hours).sum()
    total_sell_wh = (schedule[COL_GRID_SELL_POWER_W] * period_hours).sum()

    # ESS utilization
    ess_throughput_wh = (
        (schedule[COL_ESS_CHARGE_POWER_W] + schedule[COL_ESS_DISCHARGE_POWER_W]) * period_hours
    ).sum()

    return {
        "net_cost": compute_cost(schedule, period_hours),
        "total_buy_wh": float(total_buy_wh),
        "total_sell_wh": float(total_sell_wh),
        "ess_throughput_wh": float(ess_throughput_wh),
        "ess_initial_energy_wh": config.ess_initial_energy,
        "ess_final_energy_wh": float(schedule[COL_ESS_ENERGY_WH].iloc[-1]),
    }
