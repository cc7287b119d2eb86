"""Solver-facing model capability and the in-process model that records it."""

import logging
import math
from dataclasses import dataclass, field
from fractions import Fraction
from numbers import Rational
from typing import Mapping, Optional, Protocol, Union

logger = logging.getLogger(__name__)

Coefficient = Union[int, Fraction]


@dataclass(eq=False)
class Variable:
    """A bounded decision variable.

    Hashed by identity so it can key the terms of an equality. ``value`` stays
    None until a solver assigns it.
    """

    name: str
    lower: float
    upper: float
    _value: Optional[float] = field(default=None, repr=False)

    @property
    def value(self) -> Optional[float]:
        return self._value


@dataclass(eq=False)
class Equality:
    """Linear equality ``sum(coefficient * variable) == level``."""

    name: str
    terms: Mapping[Variable, Fraction]
    level: Fraction


class ModelCapability(Protocol):
    """Minimal interface the model builder writes into.

    Any LP/MIP backend can sit behind it; the builder never talks to a solver
    library directly.
    """

    def declare_variable(self, name: str, lower: float, upper: float) -> Variable:
        """Declare a variable with inclusive bounds."""
        ...

    def declare_equality(
        self, name: str, terms: Mapping[Variable, Coefficient], level: Coefficient
    ) -> Equality:
        """Declare a linear equality over previously declared variables."""
        ...


def _exact(value: Coefficient, what: str) -> Fraction:
    # Floats are refused so identity coefficients cannot pick up rounding
    if isinstance(value, bool) or not isinstance(value, Rational):
        raise TypeError(f"{what} must be an int or Fraction, got {type(value).__name__}")
    return Fraction(value)


class RecordingModel:
    """Append-only in-memory implementation of :class:`ModelCapability`.

    Keeps declarations in order, rejects malformed ones, and receives solved
    values exactly once after :meth:`freeze`.
    """

    def __init__(self) -> None:
        self._variables: dict[str, Variable] = {}
        self._equalities: dict[str, Equality] = {}
        self._frozen = False
        self._solved = False

    @property
    def variables(self) -> tuple[Variable, ...]:
        return tuple(self._variables.values())

    @property
    def equalities(self) -> tuple[Equality, ...]:
        return tuple(self._equalities.values())

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def solved(self) -> bool:
        return self._solved

    def variable(self, name: str) -> Variable:
        return self._variables[name]

    def equality(self, name: str) -> Equality:
        return self._equalities[name]

    def _check_open(self) -> None:
        if self._frozen:
            raise RuntimeError("Model is frozen; no further declarations allowed")

    def declare_variable(
        self, name: str, lower: float = -math.inf, upper: float = math.inf
    ) -> Variable:
        self._check_open()
        if name in self._variables:
            raise ValueError(f"Variable {name!r} already declared")
        if math.isnan(lower) or math.isnan(upper):
            raise ValueError(f"Variable {name!r} has a NaN bound")
        if lower > upper:
            raise ValueError(f"Variable {name!r} has lower bound {lower} > upper bound {upper}")

        variable = Variable(name=name, lower=float(lower), upper=float(upper))
        self._variables[name] = variable
        return variable

    def declare_equality(
        self, name: str, terms: Mapping[Variable, Coefficient], level: Coefficient
    ) -> Equality:
        self._check_open()
        if name in self._equalities:
            raise ValueError(f"Equality {name!r} already declared")
        if not terms:
            raise ValueError(f"Equality {name!r} has no terms")

        exact_terms: dict[Variable, Fraction] = {}
        for variable, coefficient in terms.items():
            if self._variables.get(variable.name) is not variable:
                raise ValueError(
                    f"Equality {name!r} references undeclared variable {variable.name!r}"
                )
            exact_terms[variable] = _exact(coefficient, f"Coefficient of {variable.name!r}")

        equality = Equality(name=name, terms=exact_terms, level=_exact(level, "Level"))
        self._equalities[name] = equality
        return equality

    def freeze(self) -> None:
        """Stop accepting declarations. Idempotent."""
        if not self._frozen:
            logger.debug(
                "Freezing model with %d variables and %d equalities",
                len(self._variables),
                len(self._equalities),
            )
        self._frozen = True

    def assign_solution(self, values: Mapping[str, float]) -> None:
        """Store solved values for every declared variable.

        Args:
            values: Solved value per variable name

        Raises:
            RuntimeError: If the model is not frozen or already solved
            KeyError: If a declared variable has no value
        """
        if not self._frozen:
            raise RuntimeError("Model must be frozen before a solution is assigned")
        if self._solved:
            raise RuntimeError("Solution already assigned")

        missing = [name for name in self._variables if name not in values]
        if missing:
            raise KeyError(f"No solved value for variables: {missing}")

        for name, variable in self._variables.items():
            variable._value = float(values[name])
        self._solved = True
