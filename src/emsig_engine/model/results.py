"""Read-only access to solved values, per period."""

from typing import Iterator, NamedTuple

import pandas as pd

from emsig_engine.core.constants import (
    COL_BUY_COST,
    COL_PERIOD,
    COL_SELL_REVENUE,
    OUTPUT_COLUMNS,
    WATT_MINUTES_PER_WATT_HOUR,
)
from emsig_engine.model.build import EnergyModel
from emsig_engine.model.capability import Variable
from emsig_engine.model.periods import Period


class SolutionNotAvailableError(RuntimeError):
    """Raised when results are read before the model has been solved."""

    pass


class PeriodResult(NamedTuple):
    """Solved values of one period, in W and Wh."""

    grid_power: float
    grid_buy_power: float
    grid_sell_power: float
    ess_power: float
    ess_charge_power: float
    ess_discharge_power: float
    ess_energy_wh: float


def _solved(variable: Variable) -> float:
    if variable.value is None:
        raise SolutionNotAvailableError(
            f"No solved value for {variable.name}; solve the model first"
        )
    return variable.value


class ResultAccessor:
    """Projects solved variable values back onto the periods of a model.

    Never mutates the model, so reads can be repeated freely.
    """

    def __init__(self, energy_model: EnergyModel) -> None:
        self._energy_model = energy_model

    def __len__(self) -> int:
        return len(self._energy_model.periods)

    def __iter__(self) -> Iterator[PeriodResult]:
        return (self._read(period) for period in self._energy_model.periods)

    def __getitem__(self, index: int) -> PeriodResult:
        return self._read(self._energy_model.periods[index])

    @staticmethod
    def _read(period: Period) -> PeriodResult:
        return PeriodResult(
            grid_power=_solved(period.grid.power),
            grid_buy_power=_solved(period.grid.buy_power),
            grid_sell_power=_solved(period.grid.sell_power),
            ess_power=_solved(period.ess.power),
            ess_charge_power=_solved(period.ess.charge_power),
            ess_discharge_power=_solved(period.ess.discharge_power),
            ess_energy_wh=_solved(period.ess.energy) / WATT_MINUTES_PER_WATT_HOUR,
        )

    def to_frame(self) -> pd.DataFrame:
        """Solved schedule as a dataframe indexed by period name.

        Returns:
            DataFrame with the output columns plus the carried prices
        """
        periods = self._energy_model.periods
        df = pd.DataFrame(
            [tuple(self._read(period)) for period in periods],
            columns=OUTPUT_COLUMNS,
            index=pd.Index([period.name for period in periods], name=COL_PERIOD),
        )
        df[COL_BUY_COST] = [period.grid.buy_cost for period in periods]
        df[COL_SELL_REVENUE] = [period.grid.sell_revenue for period in periods]
        return df
