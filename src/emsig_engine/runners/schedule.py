"""Schedule runner: build, solve and record one planning run."""

import logging

from emsig_engine.core.metrics import compute_metrics
from emsig_engine.core.validate import validate_schedule
from emsig_engine.io.bundle import load_bundle, write_results
from emsig_engine.model.build import build_energy_model
from emsig_engine.model.results import ResultAccessor
from emsig_engine.model.solve import solve_model

logger = logging.getLogger(__name__)


def run_schedule(bundle_path: str) -> tuple:
    """Run a single planning horizon for a bundle.

    Args:
        bundle_path: Path to run bundle

    Returns:
        Tuple of (schedule_df, metrics)
    """
    logger.info("Loading bundle from %s", bundle_path)
    config, solver_config = load_bundle(bundle_path)

    logger.info(
        "Horizon: %d periods of %d minutes",
        config.no_of_periods,
        config.minutes_per_period,
    )

    energy_model = build_energy_model(config)
    solve_result = solve_model(energy_model, solver_config)

    schedule = ResultAccessor(energy_model).to_frame()
    validate_schedule(schedule, config)
    logger.info("Schedule validation passed")

    metrics = compute_metrics(schedule, config)
    logger.info(
        "Net cost %.4f, ESS throughput %.1f Wh",
        metrics["net_cost"],
        metrics["ess_throughput_wh"],
    )

    logger.info("Writing results to %s", bundle_path)
    write_results(bundle_path, schedule, solve_result, metrics)

    return schedule, metrics
