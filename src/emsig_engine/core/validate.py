"""Input validation beyond Pydantic schemas, and post-solve schedule checks."""

import numpy as np
import pandas as pd

from emsig_engine.core.constants import (
    ABSOLUTE_TOLERANCE,
    COL_ESS_CHARGE_POWER_W,
    COL_ESS_DISCHARGE_POWER_W,
    COL_ESS_ENERGY_WH,
    COL_ESS_POWER_W,
    COL_GRID_BUY_POWER_W,
    COL_GRID_POWER_W,
    COL_GRID_SELL_POWER_W,
    MINUTES_PER_HOUR,
    NUMERICAL_TOLERANCE,
)
from emsig_engine.core.schemas import EnergyModelConfig


class ValidationError(ValueError):
    """Raised when validation fails."""

    pass


class ConfigurationError(ValidationError):
    """Raised when an energy model configuration is malformed."""

    pass


def validate_config(config: EnergyModelConfig) -> None:
    """Validate a configuration before anything is declared from it.

    Pydantic already enforces the field-level limits, but a config created
    through ``model_construct`` skips them, so they are repeated here along
    with the cross-field rules.

    Args:
        config: Energy model configuration

    Raises:
        ConfigurationError: If any rule is violated
    """
    if config.no_of_periods < 1:
        raise ConfigurationError(f"no_of_periods must be >= 1, got {config.no_of_periods}")

    if config.minutes_per_period <= 0:
        raise ConfigurationError(
            f"minutes_per_period must be positive, got {config.minutes_per_period}"
        )

    scalars = {
        "ess_max_charge": config.ess_max_charge,
        "ess_max_discharge": config.ess_max_discharge,
        "ess_min_energy": config.ess_min_energy,
        "ess_max_energy": config.ess_max_energy,
        "ess_initial_energy": config.ess_initial_energy,
        "grid_buy_limit": config.grid_buy_limit,
        "grid_sell_limit": config.grid_sell_limit,
    }
    for name, value in scalars.items():
        if not np.isfinite(value):
            raise ConfigurationError(f"{name} must be finite, got {value}")

    # Limits that become the upper bound of a [0, limit] pair
    for name in ["ess_max_charge", "ess_max_discharge", "grid_buy_limit", "grid_sell_limit"]:
        if scalars[name] < 0:
            raise ConfigurationError(f"{name} must be >= 0, got {scalars[name]}")

    if config.ess_min_energy > config.ess_max_energy:
        raise ConfigurationError(
            f"ess_min_energy ({config.ess_min_energy} Wh) exceeds "
            f"ess_max_energy ({config.ess_max_energy} Wh)"
        )

    if not config.ess_min_energy <= config.ess_initial_energy <= config.ess_max_energy:
        raise ConfigurationError(
            f"ess_initial_energy ({config.ess_initial_energy} Wh) outside "
            f"[{config.ess_min_energy}, {config.ess_max_energy}] Wh"
        )

    for name, prices in [
        ("grid_buy_cost", config.grid_buy_cost),
        ("grid_sell_revenue", config.grid_sell_revenue),
    ]:
        if len(prices) != config.no_of_periods:
            raise ConfigurationError(
                f"{name} has {len(prices)} entries, expected {config.no_of_periods}"
            )
        if not np.isfinite(np.asarray(prices, dtype=float)).all():
            raise ConfigurationError(f"{name} contains non-finite values")

    out_of_range = sorted(
        i for i in config.grid_sell_enabled_periods if not 0 <= i < config.no_of_periods
    )
    if out_of_range:
        raise ConfigurationError(
            f"grid_sell_enabled_periods outside [0, {config.no_of_periods}): {out_of_range}"
        )


def _close(a, b) -> np.ndarray:
    return np.isclose(a, b, rtol=NUMERICAL_TOLERANCE, atol=ABSOLUTE_TOLERANCE)


def validate_schedule(df: pd.DataFrame, config: EnergyModelConfig) -> None:
    """Validate a solved schedule satisfies the model identities and bounds.

    Args:
        df: Schedule dataframe from ``ResultAccessor.to_frame``
        config: Configuration the model was built from

    Raises:
        ValidationError: If an identity or bound is violated
    """
    ess_power = df[COL_ESS_POWER_W].to_numpy()
    charge = df[COL_ESS_CHARGE_POWER_W].to_numpy()
    discharge = df[COL_ESS_DISCHARGE_POWER_W].to_numpy()
    grid_power = df[COL_GRID_POWER_W].to_numpy()
    buy = df[COL_GRID_BUY_POWER_W].to_numpy()
    sell = df[COL_GRID_SELL_POWER_W].to_numpy()
    energy_wh = df[COL_ESS_ENERGY_WH].to_numpy()

    if not _close(ess_power, discharge - charge).all():
        raise ValidationError("ESS net power differs from discharge minus charge")

    if not _close(grid_power, -ess_power).all():
        raise ValidationError("Grid power does not balance ESS power")

    if not _close(grid_power, buy - sell).all():
        raise ValidationError("Grid power differs from buy minus sell")

    # Energy chain, starting from the initial energy
    hours = config.minutes_per_period / MINUTES_PER_HOUR
    previous = np.concatenate([[config.ess_initial_energy], energy_wh[:-1]])
    if not _close(energy_wh, previous - ess_power * hours).all():
        raise ValidationError("Stored energy does not follow the energy chain")

    lower = -ABSOLUTE_TOLERANCE
    if (charge < lower).any() or (charge > config.ess_max_charge + ABSOLUTE_TOLERANCE).any():
        raise ValidationError(f"Charge power outside [0, {config.ess_max_charge}] W")

    if (discharge < lower).any() or (
        discharge > config.ess_max_discharge + ABSOLUTE_TOLERANCE
    ).any():
        raise ValidationError(f"Discharge power outside [0, {config.ess_max_discharge}] W")

    if (energy_wh < config.ess_min_energy - ABSOLUTE_TOLERANCE).any():
        raise ValidationError(f"Stored energy below minimum: {config.ess_min_energy} Wh")

    if (energy_wh > config.ess_max_energy + ABSOLUTE_TOLERANCE).any():
        raise ValidationError(f"Stored energy above maximum: {config.ess_max_energy} Wh")

    if (buy < lower).any() or (buy > config.grid_buy_limit + ABSOLUTE_TOLERANCE).any():
        raise ValidationError(f"Grid buy power outside [0, {config.grid_buy_limit}] W")

    sell_upper = np.array(
        [
            config.grid_sell_limit if i in config.grid_sell_enabled_periods else 0.0
            for i in range(len(df))
        ]
    )
    if (sell < lower).any() or (sell > sell_upper + ABSOLUTE_TOLERANCE).any():
        raise ValidationError("Grid sell power exceeds the per-period sell cap")
