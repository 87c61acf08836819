"""
Solver dispatch.

Routes a set of known values to the single best solver in a registry:

    values ──► context ──► filter (context, names, values) ──► rank ──► solve

Dispatch is single-shot. The top-ranked candidate runs once; if it fails,
the failure is the answer and no lower-ranked candidate is tried.
"""

import logging
from typing import Callable, List, Mapping, Optional

from .classification.context import SystemContext, infer_context
from .models import DispatchOutcome, SolverDiagnostic, VariableStore
from .solvers.base import BaseSolver, SolverRegistry
from .utils.errors import SolveError

logger = logging.getLogger(__name__)

# Errors a solver may raise for bad-but-well-formed input. Anything else is
# a bug in the solver and propagates.
COMPUTATION_ERRORS = (SolveError, ArithmeticError, ValueError)


class Dispatcher:
    """
    Selects and runs one solver per problem.

    Usage:
        dispatcher = Dispatcher(get_default_registry())
        outcome = dispatcher.dispatch({"Q": 100, "W": 40})
        if outcome.success:
            print(outcome.values["ΔU"])  # 60.0
    """

    def __init__(
        self,
        registry: SolverRegistry,
        infer: Callable[[Mapping[str, float]], SystemContext] = infer_context,
    ):
        """
        Args:
            registry: Populated solver registry (read-only from here on)
            infer: Context inference used when dispatch() gets no context
        """
        self.registry = registry
        self._infer = infer

    def _prepare(
        self, values: Mapping[str, float], context: Optional[SystemContext]
    ) -> tuple:
        store = values if isinstance(values, VariableStore) else VariableStore(values)
        if context is None:
            context = self._infer(store)
        return store, context

    def find_candidates(
        self, values: Mapping[str, float], context: Optional[SystemContext] = None
    ) -> List[BaseSolver]:
        """
        All solvers that pass the three filters, best first.

        Ties in priority keep registration order.
        """
        store, context = self._prepare(values, context)
        return self._rank(store, context)

    def _rank(self, store: VariableStore, context: SystemContext) -> List[BaseSolver]:
        names = frozenset(store)
        candidates = []

        for solver in self.registry.all():
            if not solver.is_context_compatible(context):
                logger.debug("%s rejected: incompatible with %s", solver.name, context.regime.name)
                continue
            if not solver.can_solve(names, context):
                logger.debug("%s rejected: does not handle %s", solver.name, sorted(names))
                continue
            if not solver.validate_inputs(store):
                logger.debug("%s rejected: inputs not valid", solver.name)
                continue
            candidates.append(solver)

        # sorted() is stable, so equal priorities stay in registration order
        return sorted(candidates, key=lambda s: -s.get_priority())

    def find_solver(
        self, values: Mapping[str, float], context: Optional[SystemContext] = None
    ) -> Optional[BaseSolver]:
        """The solver dispatch() would run, or None."""
        candidates = self.find_candidates(values, context)
        return candidates[0] if candidates else None

    def dispatch(
        self, values: Mapping[str, float], context: Optional[SystemContext] = None
    ) -> DispatchOutcome:
        """
        Select the best solver for values and run it.

        A VariableStore argument gains the derived values; any other mapping
        is copied into a new store, available as outcome.values. The solver
        works on a copy, so a failed solve leaves the store as it was.

        Args:
            values: Known variables
            context: Physical context; inferred from values if None

        Returns:
            DispatchOutcome with status SOLVED, NO_SOLVER or FAILED

        Raises:
            Only COMPUTATION_ERRORS become a FAILED outcome. Anything else a
            solver raises (TypeError, KeyError, ...) is a bug in that solver
            and propagates to the caller unchanged.
        """
        store, context = self._prepare(values, context)

        candidates = self._rank(store, context)
        if not candidates:
            reason = f"No solver can handle variables: {', '.join(sorted(store)) or '(none)'}"
            logger.info(reason)
            return DispatchOutcome.absent(reason, context=context)

        solver = candidates[0]
        logger.info(
            "Dispatching to %s (priority %d, %d candidate(s))",
            solver.name,
            solver.get_priority(),
            len(candidates),
        )

        try:
            result = solver.solve(store.copy())
        except COMPUTATION_ERRORS as e:
            logger.warning("Solver %s failed: %s", solver.name, e)
            return DispatchOutcome.failed(
                solver.name, solver.get_domain(), e, values=store, context=context
            )

        derived = [name for name in result if name not in store]
        for name in derived:
            store[name] = result[name]
        return DispatchOutcome.solved(
            solver.name, solver.get_domain(), store, derived=derived, context=context
        )

    def explain(
        self, values: Mapping[str, float], context: Optional[SystemContext] = None
    ) -> List[SolverDiagnostic]:
        """
        Report, for every registered solver, which filters it passes.

        can_solve is only asked of context-compatible solvers, and
        validate_inputs only of solvers whose can_solve holds.
        """
        store, context = self._prepare(values, context)
        names = frozenset(store)

        diagnostics = []
        for solver in self.registry.all():
            compatible = solver.is_context_compatible(context)
            handles = compatible and solver.can_solve(names, context)
            valid = handles and solver.validate_inputs(store)
            diagnostics.append(
                SolverDiagnostic(
                    name=solver.name,
                    domain=solver.get_domain(),
                    description=solver.get_description(),
                    context_compatible=compatible,
                    can_solve=handles,
                    validated=valid,
                    priority=solver.get_priority(),
                )
            )
        return diagnostics


def dispatch(
    values: Mapping[str, float],
    registry: SolverRegistry,
    context: Optional[SystemContext] = None,
) -> DispatchOutcome:
    """Dispatch once against registry."""
    return Dispatcher(registry).dispatch(values, context)
