"""Build the battery and grid energy model."""

import logging
import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from emsig_engine.core.constants import (
    VAR_ESS_CHARGE_POWER,
    VAR_ESS_DISCHARGE_POWER,
    VAR_ESS_ENERGY,
    VAR_ESS_POWER,
    VAR_GRID_BUY_POWER,
    VAR_GRID_POWER,
    VAR_GRID_SELL_POWER,
    WATT_MINUTES_PER_WATT_HOUR,
)
from emsig_engine.core.schemas import EnergyModelConfig
from emsig_engine.core.validate import validate_config
from emsig_engine.model.capability import ModelCapability, RecordingModel
from emsig_engine.model.periods import (
    EssState,
    GridState,
    Period,
    PeriodDescriptor,
    create_periods,
)

logger = logging.getLogger(__name__)


@dataclass
class EnergyModel:
    """A built model: its configuration, periods, and the capability written into."""

    config: EnergyModelConfig
    periods: tuple[Period, ...]
    capability: ModelCapability


def _declare_ess(
    model: ModelCapability, descriptor: PeriodDescriptor, config: EnergyModelConfig
) -> EssState:
    name = descriptor.name
    return EssState(
        power=model.declare_variable(
            VAR_ESS_POWER.format(name), -config.ess_max_charge, config.ess_max_discharge
        ),
        charge_power=model.declare_variable(
            VAR_ESS_CHARGE_POWER.format(name), 0.0, config.ess_max_charge
        ),
        discharge_power=model.declare_variable(
            VAR_ESS_DISCHARGE_POWER.format(name), 0.0, config.ess_max_discharge
        ),
        # Stored energy is tracked in watt-minutes
        energy=model.declare_variable(
            VAR_ESS_ENERGY.format(name),
            config.ess_min_energy * WATT_MINUTES_PER_WATT_HOUR,
            config.ess_max_energy * WATT_MINUTES_PER_WATT_HOUR,
        ),
    )


def _declare_grid(
    model: ModelCapability, descriptor: PeriodDescriptor, config: EnergyModelConfig
) -> GridState:
    name = descriptor.name

    # Selling can never exceed on-site production. Production is not modelled,
    # so selling is only possible in explicitly enabled periods.
    if descriptor.index in config.grid_sell_enabled_periods:
        sell_upper = config.grid_sell_limit
    else:
        sell_upper = 0.0

    return GridState(
        power=model.declare_variable(VAR_GRID_POWER.format(name), -math.inf, math.inf),
        buy_power=model.declare_variable(
            VAR_GRID_BUY_POWER.format(name), 0.0, config.grid_buy_limit
        ),
        sell_power=model.declare_variable(VAR_GRID_SELL_POWER.format(name), 0.0, sell_upper),
        buy_cost=config.grid_buy_cost[descriptor.index],
        sell_revenue=config.grid_sell_revenue[descriptor.index],
    )


def build_energy_model(
    config: EnergyModelConfig, model: Optional[ModelCapability] = None
) -> EnergyModel:
    """Build the energy model for one planning run.

    Declares seven variables and four equalities per period: the ESS
    net-power identity, grid balance, the grid buy/sell split, and one link
    of the energy chain.

    Args:
        config: Energy model configuration
        model: Capability to declare into (a fresh RecordingModel if omitted)

    Returns:
        EnergyModel holding the periods and the populated capability

    Raises:
        ConfigurationError: If the configuration is malformed; raised before
            anything is declared
    """
    validate_config(config)

    if model is None:
        model = RecordingModel()

    from emsig_engine.model.constraints import (
        add_energy_chain,
        add_ess_constraints,
        add_grid_constraints,
    )

    initial_energy_wm = Fraction(config.ess_initial_energy) * WATT_MINUTES_PER_WATT_HOUR

    periods: list[Period] = []
    for descriptor in create_periods(config.no_of_periods, config.minutes_per_period):
        period = Period(
            descriptor=descriptor,
            ess=_declare_ess(model, descriptor, config),
            grid=_declare_grid(model, descriptor, config),
        )

        add_ess_constraints(model, period)
        add_grid_constraints(model, period)
        add_energy_chain(model, period, periods[-1] if periods else None, initial_energy_wm)

        periods.append(period)

    logger.info(
        "Built energy model: %d periods of %d minutes",
        config.no_of_periods,
        config.minutes_per_period,
    )

    return EnergyModel(config=config, periods=tuple(periods), capability=model)
