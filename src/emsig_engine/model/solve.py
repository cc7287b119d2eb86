"""Model solving through linopy and HiGHS."""

import logging
import time
from typing import Mapping, Optional

import linopy

from emsig_engine.core.schemas import SolverConfig, SolveResult
from emsig_engine.model.build import EnergyModel
from emsig_engine.model.capability import RecordingModel, Variable
from emsig_engine.model.objective import cost_terms

logger = logging.getLogger(__name__)


class SolverError(RuntimeError):
    """Raised when the solver fails or reports a non-optimal outcome."""

    pass


def to_linopy(model: RecordingModel, objective: Mapping[Variable, float]) -> linopy.Model:
    """Translate recorded declarations into a linopy Model.

    Args:
        model: Frozen recording model
        objective: Coefficient per variable of the cost to minimize

    Returns:
        linopy.Model instance ready for solving
    """
    lp = linopy.Model()

    handles = {
        variable.name: lp.add_variables(
            lower=variable.lower, upper=variable.upper, name=variable.name
        )
        for variable in model.variables
    }

    for equality in model.equalities:
        lhs = sum(
            handles[variable.name] * float(coefficient)
            for variable, coefficient in equality.terms.items()
        )
        lp.add_constraints(lhs == float(equality.level), name=equality.name)

    lp.add_objective(
        sum(handles[variable.name] * coefficient for variable, coefficient in objective.items()),
        sense="min",
    )

    return lp


def solve_model(
    energy_model: EnergyModel, solver_config: Optional[SolverConfig] = None
) -> SolveResult:
    """Solve a built energy model and write solved values back into it.

    The model is frozen first; no further declarations are accepted.

    Args:
        energy_model: Model built into a RecordingModel
        solver_config: Solver settings (defaults if omitted)

    Returns:
        SolveResult with objective value and solver status

    Raises:
        SolverError: If the solver fails or the model is infeasible/unbounded
    """
    if solver_config is None:
        solver_config = SolverConfig()

    model = energy_model.capability
    if not isinstance(model, RecordingModel):
        raise TypeError(
            f"solve_model needs a RecordingModel, got {type(model).__name__}"
        )

    model.freeze()
    lp = to_linopy(model, cost_terms(energy_model))

    logger.info(
        "Solving %d variables and %d equalities with %s",
        len(model.variables),
        len(model.equalities),
        solver_config.solver_name,
    )
    start_time = time.time()

    try:
        status, termination_condition = lp.solve(
            solver_name=solver_config.solver_name,
            time_limit=solver_config.solver_time_limit_seconds,
        )
    except Exception as e:
        raise SolverError(f"Solver failed: {e}") from e

    solve_time = time.time() - start_time

    if status != "ok":
        raise SolverError(
            f"Solver returned non-optimal status: {status} ({termination_condition})"
        )

    model.assign_solution(
        {variable.name: lp.solution[variable.name].item() for variable in model.variables}
    )

    result = SolveResult(
        objective_value=float(lp.objective.value),
        solve_time_seconds=solve_time,
        solver_status=str(status),
        solver_termination_condition=str(termination_condition),
    )
    logger.info("Solve completed in %.2fs, objective %.4f", solve_time, result.objective_value)

    return result
