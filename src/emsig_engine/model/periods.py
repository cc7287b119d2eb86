"""Horizon discretization and per-period model state."""

from dataclasses import dataclass
from typing import Optional

from emsig_engine.core.validate import ConfigurationError
from emsig_engine.model.capability import Variable


@dataclass(frozen=True)
class PeriodDescriptor:
    """Position and duration of one time slice in the horizon."""

    index: int
    name: str
    minutes: int


def create_periods(no_of_periods: int, minutes_per_period: int) -> tuple[PeriodDescriptor, ...]:
    """Create the ordered period descriptors for a horizon.

    Names are the zero-padded index, at least two digits wide and wide enough
    for the last index, so they sort in horizon order.

    Args:
        no_of_periods: Number of periods (>= 1)
        minutes_per_period: Duration of every period in minutes (> 0)

    Returns:
        Tuple of descriptors ordered by index

    Raises:
        ConfigurationError: If the count or duration is not positive
    """
    if no_of_periods < 1:
        raise ConfigurationError(f"no_of_periods must be >= 1, got {no_of_periods}")
    if minutes_per_period <= 0:
        raise ConfigurationError(f"minutes_per_period must be positive, got {minutes_per_period}")

    width = max(2, len(str(no_of_periods - 1)))
    return tuple(
        PeriodDescriptor(index=i, name=str(i).zfill(width), minutes=minutes_per_period)
        for i in range(no_of_periods)
    )


@dataclass
class EssState:
    power: Variable
    charge_power: Variable
    discharge_power: Variable
    energy: Variable


@dataclass
class GridState:
    power: Variable
    buy_power: Variable
    sell_power: Variable
    buy_cost: Optional[float] = None
    sell_revenue: Optional[float] = None


@dataclass
class Period:
    """One period of a built model: its descriptor plus declared variables."""

    descriptor: PeriodDescriptor
    ess: EssState
    grid: GridState

    @property
    def index(self) -> int:
        return self.descriptor.index

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def minutes(self) -> int:
        return self.descriptor.minutes
