"""Optimization objective function."""

from emsig_engine.core.constants import MINUTES_PER_HOUR, WATTS_PER_KILOWATT
from emsig_engine.model.build import EnergyModel
from emsig_engine.model.capability import Variable


def cost_terms(energy_model: EnergyModel) -> dict[Variable, float]:
    """Linear cost of a schedule, to be minimized.

    Objective = sum(buy_power * buy_cost - sell_power * sell_revenue) * kWh_per_W

    Prices are per kWh and powers in W, so each term is scaled by the period
    duration in hours divided by 1000.

    Args:
        energy_model: Built energy model carrying per-period prices

    Returns:
        Mapping from variable to objective coefficient
    """
    terms: dict[Variable, float] = {}
    for period in energy_model.periods:
        kwh_per_w = period.minutes / MINUTES_PER_HOUR / WATTS_PER_KILOWATT
        terms[period.grid.buy_power] = period.grid.buy_cost * kwh_per_w
        terms[period.grid.sell_power] = -period.grid.sell_revenue * kwh_per_w
    return terms
