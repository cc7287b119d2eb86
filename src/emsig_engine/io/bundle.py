"""Run bundle I/O operations.

A run bundle is a folder containing:
- config.yaml: Energy model configuration, with an optional ``solver`` section
- (outputs):
  - schedule.parquet: Solved schedule per period
  - metrics.json: Computed metrics
  - solve_stats.json: Solver statistics
  - bundle_metadata.json: Reproducibility metadata
"""

import json
from pathlib import Path

import pandas as pd
import pydantic
import yaml

from emsig_engine import __version__
from emsig_engine.core.schemas import (
    BundleMetadata,
    EnergyModelConfig,
    SolverConfig,
    SolveResult,
)
from emsig_engine.core.validate import ConfigurationError, validate_config
from emsig_engine.io.formats import write_parquet_schedule

CONFIG_FILE = "config.yaml"
SCHEDULE_FILE = "schedule.parquet"


def parse_config(data: dict) -> tuple[EnergyModelConfig, SolverConfig]:
    """Parse and validate raw configuration data.

    Args:
        data: Mapping as read from config.yaml

    Returns:
        Tuple of (model_config, solver_config)

    Raises:
        ConfigurationError: If any field or cross-field rule is invalid
    """
    data = dict(data)
    solver_data = data.pop("solver", None) or {}

    try:
        config = EnergyModelConfig(**data)
        solver_config = SolverConfig(**solver_data)
    except pydantic.ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    validate_config(config)
    return config, solver_config


def load_bundle(bundle_path: str | Path) -> tuple[EnergyModelConfig, SolverConfig]:
    """Load a run bundle.

    Args:
        bundle_path: Path to bundle directory

    Returns:
        Tuple of (model_config, solver_config)
    """
    bundle_path = Path(bundle_path)

    if not bundle_path.exists():
        raise FileNotFoundError(f"Bundle not found: {bundle_path}")

    with open(bundle_path / CONFIG_FILE) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ConfigurationError(f"{CONFIG_FILE} must contain a mapping")

    return parse_config(data)


def write_results(
    bundle_path: str | Path,
    schedule: pd.DataFrame,
    solve_result: SolveResult,
    metrics: dict | None = None,
) -> None:
    """Write results to bundle.

    Args:
        bundle_path: Path to bundle directory
        schedule: Solved schedule dataframe
        solve_result: Solver result
        metrics: Optional metrics dictionary
    """
    bundle_path = Path(bundle_path)
    bundle_path.mkdir(exist_ok=True)

    write_parquet_schedule(schedule, str(bundle_path / SCHEDULE_FILE))

    with open(bundle_path / "solve_stats.json", "w") as f:
        json.dump(solve_result.model_dump(), f, indent=2, default=str)

    if metrics is not None:
        with open(bundle_path / "metrics.json", "w") as f:
            json.dump(metrics, f, indent=2, default=str)

    metadata = BundleMetadata(emsig_version=__version__)
    with open(bundle_path / "bundle_metadata.json", "w") as f:
        json.dump(metadata.model_dump(), f, indent=2, default=str)


def init_bundle(
    bundle_path: str | Path,
    config: EnergyModelConfig,
    solver_config: SolverConfig | None = None,
) -> None:
    """Initialize a new run bundle.

    Args:
        bundle_path: Path to bundle directory
        config: Energy model configuration
        solver_config: Solver settings (defaults if omitted)
    """
    bundle_path = Path(bundle_path)
    bundle_path.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json")
    data["grid_sell_enabled_periods"] = sorted(config.grid_sell_enabled_periods)
    data["solver"] = (solver_config or SolverConfig()).model_dump(mode="json")

    with open(bundle_path / CONFIG_FILE, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def validate_bundle(bundle_path: str | Path) -> bool:
    """Validate that a bundle exists and holds a valid configuration.

    Args:
        bundle_path: Path to bundle directory

    Returns:
        True if valid

    Raises:
        ValueError: If bundle is invalid
    """
    bundle_path = Path(bundle_path)

    if not (bundle_path / CONFIG_FILE).exists():
        raise ValueError(f"Missing required file: {CONFIG_FILE}")

    load_bundle(bundle_path)
    return True
