"""Test horizon discretization."""

import pytest

from emsig_engine.core.validate import ConfigurationError
from emsig_engine.model.periods import create_periods


def test_periods_ordered_with_duration():
    """Test that periods come back in index order with the given duration."""
    periods = create_periods(4, 15)

    assert [p.index for p in periods] == [0, 1, 2, 3]
    assert all(p.minutes == 15 for p in periods)


def test_period_names_zero_padded():
    """Test that names are padded to at least two digits."""
    assert [p.name for p in create_periods(3, 60)] == ["00", "01", "02"]


def test_period_names_widen_for_long_horizons():
    """Test that names stay unique and sortable beyond 100 periods."""
    periods = create_periods(101, 15)
    names = [p.name for p in periods]

    assert names[0] == "000"
    assert names[-1] == "100"
    assert len(set(names)) == len(names)
    assert sorted(names) == names


def test_periods_deterministic():
    """Test that the factory is a pure function of its inputs."""
    assert create_periods(96, 15) == create_periods(96, 15)


@pytest.mark.parametrize("no_of_periods, minutes", [(0, 15), (-1, 15), (4, 0), (4, -15)])
def test_invalid_horizon_rejected(no_of_periods, minutes):
    """Test that empty horizons and non-positive durations are rejected."""
    with pytest.raises(ConfigurationError):
        create_periods(no_of_periods, minutes)
