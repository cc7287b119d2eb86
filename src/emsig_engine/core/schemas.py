"""Pydantic schemas for configuration and result metadata."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EnergyModelConfig(BaseModel):
    """Immutable input for one planning run.

    Field-level limits are checked here; cross-field rules (bound ordering,
    price array lengths, enabled sell periods) are checked by
    :func:`emsig_engine.core.validate.validate_config` before a model is built.
    """

    model_config = ConfigDict(frozen=True)

    no_of_periods: int = Field(..., ge=1, description="Number of periods in the horizon")
    minutes_per_period: int = Field(..., gt=0, description="Period duration in minutes")

    ess_max_charge: float = Field(..., ge=0, description="Max ESS charge power in W")
    ess_max_discharge: float = Field(..., ge=0, description="Max ESS discharge power in W")
    ess_min_energy: float = Field(..., description="Min stored energy in Wh")
    ess_max_energy: float = Field(..., description="Max stored energy in Wh")
    ess_initial_energy: float = Field(..., description="Stored energy before period 0 in Wh")

    grid_buy_limit: float = Field(..., ge=0, description="Max grid buy power in W")
    grid_sell_limit: float = Field(..., ge=0, description="Max grid sell power in W")
    grid_buy_cost: tuple[float, ...] = Field(..., description="Buy price per period (per kWh)")
    grid_sell_revenue: tuple[float, ...] = Field(..., description="Sell price per period (per kWh)")

    # Periods where selling up to grid_sell_limit is allowed; zero elsewhere
    grid_sell_enabled_periods: frozenset[int] = Field(default_factory=frozenset)


class SolverConfig(BaseModel):
    """Solver settings for one planning run."""

    solver_name: str = Field(default="highs")
    solver_time_limit_seconds: float = Field(default=60.0, gt=0)


class SolveResult(BaseModel):
    """Result of a single optimization solve."""

    objective_value: float
    solve_time_seconds: float
    solver_status: str
    solver_termination_condition: str


class BundleMetadata(BaseModel):
    """Metadata for reproducibility tracking."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    emsig_version: str
    solver_name: str = Field(default="highs")
    solver_version: Optional[str] = None
