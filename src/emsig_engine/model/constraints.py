"""Per-period coupling equations and the energy chain."""

from fractions import Fraction
from typing import Optional

from emsig_engine.core.constants import (
    EQ_ESS_CHARGE_DISCHARGE,
    EQ_ESS_ENERGY,
    EQ_ESS_ENERGY_FIRST,
    EQ_GRID_BUY_SELL,
    EQ_GRID_POWER,
    MINUS_ONE,
    ONE,
)
from emsig_engine.model.capability import ModelCapability
from emsig_engine.model.periods import Period


def add_ess_constraints(model: ModelCapability, period: Period) -> None:
    """Add the ESS net-power identity.

    ess_power - discharge_power + charge_power = 0

    Args:
        model: Capability to declare into
        period: Period whose variables are coupled
    """
    ess = period.ess
    model.declare_equality(
        EQ_ESS_CHARGE_DISCHARGE.format(period.name),
        {ess.power: ONE, ess.discharge_power: MINUS_ONE, ess.charge_power: ONE},
        0,
    )


def add_grid_constraints(model: ModelCapability, period: Period) -> None:
    """Add grid balance and the buy/sell split.

    grid_power + ess_power = 0 (no production or consumption on site)
    grid_power - buy_power + sell_power = 0

    Args:
        model: Capability to declare into
        period: Period whose variables are coupled
    """
    grid = period.grid
    model.declare_equality(
        EQ_GRID_POWER.format(period.name),
        {grid.power: ONE, period.ess.power: ONE},
        0,
    )
    model.declare_equality(
        EQ_GRID_BUY_SELL.format(period.name),
        {grid.power: ONE, grid.buy_power: MINUS_ONE, grid.sell_power: ONE},
        0,
    )


def add_energy_chain(
    model: ModelCapability,
    period: Period,
    previous: Optional[Period],
    initial_energy_wm: Fraction,
) -> None:
    """Link stored energy to the previous period.

    Positive ESS power is discharge, so it drains the store:
    energy[i] = energy[i-1] - ess_power[i] * minutes

    Period 0 has no predecessor and is pinned to the initial energy instead:
    energy[0] + ess_power[0] * minutes = initial_energy

    Args:
        model: Capability to declare into
        period: Period being linked
        previous: Preceding period, None for period 0
        initial_energy_wm: Stored energy before period 0 in watt-minutes
    """
    duration = Fraction(period.minutes)

    if previous is None:
        model.declare_equality(
            EQ_ESS_ENERGY_FIRST.format(period.name),
            {period.ess.energy: ONE, period.ess.power: duration},
            initial_energy_wm,
        )
    else:
        model.declare_equality(
            EQ_ESS_ENERGY.format(period.name),
            {
                previous.ess.energy: ONE,
                period.ess.power: -duration,
                period.ess.energy: MINUS_ONE,
            },
            0,
        )
