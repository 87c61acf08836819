"""
Base solver interface and the solver registry.

Every physics law is a BaseSolver. The dispatcher asks each registered
solver three questions, in order:

1. is_context_compatible(context): is this physics valid for the regime
   and substance of the problem?
2. can_solve(names, context): are enough of the formula's variables named?
3. validate_inputs(values): are exactly the right values known, and in range?

Only then is solve(values) called.
"""

import logging
from abc import ABC, abstractmethod
from typing import AbstractSet, Dict, FrozenSet, Iterator, List, Optional, Tuple

import sympy as sp

from ..classification.context import (
    PhysicsType,
    ScaleRegime,
    SubstanceType,
    SystemContext,
    is_regime_valid,
)
from ..models import VariableStore
from ..utils.constants import get_constant_symbol, get_constant_value
from ..utils.errors import InsufficientInputsError, SolverContractError
from ..utils.units import is_valid_unit

logger = logging.getLogger(__name__)

MIN_PRIORITY = 0
MAX_PRIORITY = 100


def check_positive(values: VariableStore, *names: str) -> bool:
    """Check that every named variable that is present is positive."""
    for name in names:
        if name in values and values[name] <= 0:
            return False
    return True


def check_range(value: float, min_val: float, max_val: float) -> bool:
    """Check that value lies in [min_val, max_val]."""
    return min_val <= value <= max_val


class BaseSolver(ABC):
    """
    Abstract base class for physics solvers.

    Subclasses implement can_solve() and solve(), and describe themselves
    through the class attributes below. Solvers are stateless: one
    instance is registered at startup and shared by every request.

    Priority bands (0-100, higher wins):
    - 90-100: very specific geometry (e.g. finite line charge)
    - 70-89:  specific named laws (e.g. ideal gas, Coulomb force)
    - 50-69:  general laws (e.g. first law of thermodynamics)
    - 30-49:  catch-alls
    """

    # Identity of this solver, reported in outcomes
    name: str = "BaseSolver"

    # Description of what this solver handles
    description: str = ""

    # Coarse grouping, e.g. "thermodynamics"
    domain: str = ""

    priority: int = 50

    # CLASSICAL_MACRO means "no regime restriction"
    required_regime: ScaleRegime = ScaleRegime.CLASSICAL_MACRO

    # Empty means "any substance"
    required_substances: FrozenSet[SubstanceType] = frozenset()

    physics_type: PhysicsType = PhysicsType.UNKNOWN

    # Display-only metadata
    equation: str = ""
    output_units: Dict[str, str] = {}
    input_constraints: Dict[str, str] = {}

    @abstractmethod
    def can_solve(self, variables: AbstractSet[str], context: SystemContext) -> bool:
        """
        Check if this solver recognises enough of the given variable names.

        Args:
            variables: Names of the known variables (values are not looked at)
            context: Physical context of the problem

        Returns:
            True if the formula could apply to these names
        """

    @abstractmethod
    def solve(self, values: VariableStore) -> VariableStore:
        """
        Compute the unknown variable(s) and add them to values.

        Existing entries are never changed. May raise SolveError or an
        arithmetic error when the inputs make the formula undefined.

        Args:
            values: Known values, already accepted by validate_inputs()

        Returns:
            The same store, with the derived values added
        """

    def validate_inputs(self, values: VariableStore) -> bool:
        """Check that the known values are exactly what solve() needs."""
        return True

    def is_context_compatible(self, context: SystemContext) -> bool:
        """
        Check if this solver's physics applies in the given context.

        Checks regime, substance, then the physics/regime validity table.
        """
        required_regime = self.get_required_regime()
        if required_regime != ScaleRegime.CLASSICAL_MACRO and context.regime != required_regime:
            return False

        required_substances = self.get_required_substance()
        if required_substances and context.substance not in required_substances:
            return False

        physics_type = self.get_physics_type()
        if physics_type != PhysicsType.UNKNOWN and not is_regime_valid(context, physics_type):
            return False

        return True

    def get_domain(self) -> str:
        return self.domain

    def get_priority(self) -> int:
        return self.priority

    def get_required_regime(self) -> ScaleRegime:
        return self.required_regime

    def get_required_substance(self) -> FrozenSet[SubstanceType]:
        return frozenset(self.required_substances)

    def get_physics_type(self) -> PhysicsType:
        return self.physics_type

    def get_output_units(self) -> Dict[str, str]:
        return dict(self.output_units)

    def get_input_constraints(self) -> Dict[str, str]:
        return dict(self.input_constraints)

    def get_equation(self) -> str:
        return self.equation

    def get_description(self) -> str:
        return self.description or type(self).__name__

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} domain={self.domain!r} priority={self.priority}>"


class FormulaSolver(BaseSolver):
    """
    Solver for one closed-form law relating a fixed set of quantities.

    Subclasses declare:
    - quantities: canonical name -> accepted aliases. The first alias is the
      key a derived value is stored under.
    - relation: SymPy expression in the canonical names, equal to zero.
    - constants: names from PHYSICAL_CONSTANTS used in the relation.
    - positive: canonical names whose known values must be > 0.

    With N quantities the solver needs exactly N-1 of them. The relation is
    rearranged for every quantity once, when the solver is created.
    """

    quantities: Dict[str, Tuple[str, ...]] = {}
    relation: str = ""
    constants: Tuple[str, ...] = ()
    positive: Tuple[str, ...] = ()

    def __init__(self):
        self._rearrangements = self._build_rearrangements()

    @property
    def required_known(self) -> int:
        return len(self.quantities) - 1

    def _build_rearrangements(self) -> Dict[str, Tuple[sp.Basic, object]]:
        """Isolate each quantity in the relation and compile it."""
        if len(self.quantities) < 2 or not self.relation:
            raise SolverContractError(
                f"{type(self).__name__} must declare a relation over at least two quantities"
            )

        symbols = {name: sp.Symbol(name, real=True) for name in self.quantities}
        const_symbols = {name: get_constant_symbol(name) for name in self.constants}

        try:
            relation = sp.sympify(self.relation, locals={**symbols, **const_symbols})
        except (sp.SympifyError, SyntaxError, TypeError) as e:
            raise SolverContractError(
                f"{type(self).__name__} has an unparsable relation '{self.relation}'",
                technical_details=str(e),
            )

        rearrangements = {}
        for name, symbol in symbols.items():
            solutions = sp.solve(relation, symbol)
            if len(solutions) != 1:
                raise SolverContractError(
                    f"{type(self).__name__} cannot isolate '{name}' uniquely in '{self.relation}'"
                )
            expr = solutions[0]
            arguments = [s for n, s in symbols.items() if n != name]
            arguments += list(const_symbols.values())
            rearrangements[name] = (expr, sp.lambdify(arguments, expr, modules="math"))

        return rearrangements

    def _known_quantities(self, values: VariableStore) -> Dict[str, Optional[float]]:
        return {name: values.get_any(*aliases) for name, aliases in self.quantities.items()}

    def can_solve(self, variables: AbstractSet[str], context: SystemContext) -> bool:
        named = sum(
            1 for aliases in self.quantities.values() if any(a in variables for a in aliases)
        )
        return named >= self.required_known

    def validate_inputs(self, values: VariableStore) -> bool:
        known = self._known_quantities(values)

        for name in self.positive:
            if known[name] is not None and known[name] <= 0:
                return False

        return sum(v is not None for v in known.values()) == self.required_known

    def solve(self, values: VariableStore) -> VariableStore:
        known = self._known_quantities(values)
        missing = [name for name, value in known.items() if value is None]
        if len(missing) != 1:
            raise InsufficientInputsError(
                self.name, self.required_known, len(known) - len(missing)
            )

        target = missing[0]
        _, func = self._rearrangements[target]
        args = [value for name, value in known.items() if name != target]
        args += [get_constant_value(c) for c in self.constants]

        values.derive(self.quantities[target][0], float(func(*args)))
        return values

    def derivation(self, target: str) -> sp.Eq:
        """The rearranged equation used to compute a canonical quantity."""
        expr, _ = self._rearrangements[target]
        return sp.Eq(sp.Symbol(self.quantities[target][0]), expr)


class SolverRegistry:
    """
    Ordered collection of registered solvers.

    Registration order is kept and breaks priority ties in dispatch.
    Populate it once at startup; register() and clear() are not safe while
    other threads are dispatching.
    """

    def __init__(self):
        self._solvers: List[BaseSolver] = []

    def register(self, solver: BaseSolver) -> BaseSolver:
        """
        Append a solver after checking its metadata.

        Raises:
            SolverContractError: If the object is not a usable solver
        """
        self._check_contract(solver)
        self._solvers.append(solver)
        logger.info("Registered: %s [domain: %s]", solver.name, solver.get_domain())
        return solver

    def _check_contract(self, solver: BaseSolver):
        if not isinstance(solver, BaseSolver):
            raise SolverContractError(
                f"{type(solver).__name__} does not implement the solver interface"
            )

        priority = solver.get_priority()
        if (
            isinstance(priority, bool)
            or not isinstance(priority, int)
            or not MIN_PRIORITY <= priority <= MAX_PRIORITY
        ):
            raise SolverContractError(
                f"{solver.name} has priority {priority!r}, "
                f"expected an integer in {MIN_PRIORITY}-{MAX_PRIORITY}"
            )

        if not solver.get_domain():
            raise SolverContractError(f"{solver.name} does not declare a domain")

        for variable, unit in solver.get_output_units().items():
            if not is_valid_unit(unit):
                raise SolverContractError(
                    f"{solver.name} declares unknown unit '{unit}' for '{variable}'"
                )

    def all(self) -> Tuple[BaseSolver, ...]:
        """All registered solvers, in registration order."""
        return tuple(self._solvers)

    def clear(self):
        """Remove every solver."""
        self._solvers.clear()
        logger.info("Registry cleared.")

    def describe(self) -> List[Dict[str, object]]:
        """Summary of the registered solvers, for listings."""
        return [
            {
                "index": i,
                "name": solver.name,
                "domain": solver.get_domain(),
                "priority": solver.get_priority(),
                "equation": solver.get_equation(),
                "description": solver.get_description(),
                "inputs": solver.get_input_constraints(),
            }
            for i, solver in enumerate(self._solvers, 1)
        ]

    @property
    def solvers(self) -> List[BaseSolver]:
        """Get all registered solvers in registration order."""
        return list(self._solvers)

    def __len__(self) -> int:
        return len(self._solvers)

    def __iter__(self) -> Iterator[BaseSolver]:
        return iter(tuple(self._solvers))
