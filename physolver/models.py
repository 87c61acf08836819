"""
Core data structures for physolver.

These dataclasses define the contract between layers.
"""

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from numbers import Real
from typing import Dict, Iterable, List, Mapping, Optional

from .classification.context import SystemContext
from .utils.errors import InvalidValueError, SolveError


class VariableStore(dict):
    """
    Known physical quantities for one problem, keyed by variable symbol.

    Keys are used exactly as given: "Q", "q" and "heat" are different
    entries, and it is up to each solver to accept the aliases it knows.
    Values must be real numbers; NaN is rejected, infinities are allowed.

    Solvers add derived values through derive(), which never replaces an
    entry that is already present.
    """

    def __init__(self, values: Optional[Mapping[str, float]] = None):
        super().__init__()
        for name, value in (values or {}).items():
            self[name] = value

    def __setitem__(self, name: str, value: float):
        if not isinstance(name, str) or not name:
            raise InvalidValueError(str(name), value, reason="needs a non-empty name")
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidValueError(name, value)
        value = float(value)
        if math.isnan(value):
            raise InvalidValueError(name, value)
        super().__setitem__(name, value)

    def update(self, *args, **kwargs):
        for name, value in dict(*args, **kwargs).items():
            self[name] = value

    def setdefault(self, name: str, value: float = 0.0) -> float:
        if name not in self:
            self[name] = value
        return self[name]

    def get_any(self, *aliases: str) -> Optional[float]:
        """Return the value of the first alias present, or None."""
        for alias in aliases:
            if alias in self:
                return self[alias]
        return None

    def known(self, *aliases: str) -> bool:
        """True if any of the aliases has a value."""
        return any(alias in self for alias in aliases)

    def derive(self, name: str, value: float) -> float:
        """
        Record a derived value and return the value stored under name.

        An existing entry wins over the new value.
        """
        if name in self:
            return self[name]
        if math.isnan(value):
            raise SolveError(f"Computation of '{name}' produced an undefined value (NaN)")
        self[name] = value
        return self[name]

    def copy(self) -> "VariableStore":
        return VariableStore(self)


class DispatchStatus(Enum):
    """How a dispatch ended."""

    SOLVED = auto()
    NO_SOLVER = auto()  # nothing matched, not an error
    FAILED = auto()  # a matching solver raised while computing


@dataclass
class DispatchOutcome:
    """
    Result of dispatching one problem.

    SOLVED carries the solver identity, its domain and the updated store.
    NO_SOLVER and FAILED carry a human-readable reason; FAILED also keeps
    the exception the solver raised.
    """

    status: DispatchStatus
    solver_name: str = ""
    domain: str = ""
    values: Optional[VariableStore] = None
    derived: List[str] = field(default_factory=list)
    reason: str = ""
    error: Optional[Exception] = None
    context: Optional[SystemContext] = None

    @property
    def success(self) -> bool:
        return self.status == DispatchStatus.SOLVED

    @classmethod
    def solved(
        cls,
        solver_name: str,
        domain: str,
        values: VariableStore,
        derived: Iterable[str] = (),
        context: Optional[SystemContext] = None,
    ) -> "DispatchOutcome":
        """Create a successful outcome."""
        return cls(
            status=DispatchStatus.SOLVED,
            solver_name=solver_name,
            domain=domain,
            values=values,
            derived=list(derived),
            context=context,
        )

    @classmethod
    def absent(
        cls, reason: str, context: Optional[SystemContext] = None
    ) -> "DispatchOutcome":
        """Create an outcome for 'no solver matched'."""
        return cls(status=DispatchStatus.NO_SOLVER, reason=reason, context=context)

    @classmethod
    def failed(
        cls,
        solver_name: str,
        domain: str,
        error: Exception,
        values: Optional[VariableStore] = None,
        context: Optional[SystemContext] = None,
    ) -> "DispatchOutcome":
        """Create an outcome for a solver that raised."""
        return cls(
            status=DispatchStatus.FAILED,
            solver_name=solver_name,
            domain=domain,
            values=values,
            reason=f"{type(error).__name__}: {error}",
            error=error,
            context=context,
        )

    def derived_values(self) -> Dict[str, float]:
        """The values this dispatch added to the store."""
        if self.values is None:
            return {}
        return {name: self.values[name] for name in self.derived}


@dataclass
class SolverDiagnostic:
    """Why a registered solver was or was not chosen for an input."""

    name: str
    domain: str
    description: str
    context_compatible: bool
    can_solve: bool
    validated: bool
    priority: int

    @property
    def eligible(self) -> bool:
        return self.context_compatible and self.can_solve and self.validated

    def as_dict(self) -> Dict[str, object]:
        return {
            "solver": self.name,
            "domain": self.domain,
            "description": self.description,
            "context_compatible": self.context_compatible,
            "can_handle": self.can_solve,
            "is_valid": self.validated,
            "priority": self.priority,
        }
