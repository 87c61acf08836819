#!/usr/bin/env python3
"""
physolver - plug-in physics problem solver.

Entry point for the command line.

Usage:
    physolver "Q=100, W=40"            # Solve and print the result
    physolver -f json "P=101325, V=0.5, T=300"
    physolver --explain "Q=100"        # Show why each solver was (not) chosen
    physolver --list-solvers           # List registered solvers
"""

import argparse
import dataclasses
import json
import logging
import os
import sys
from typing import Dict, List, Optional

from . import __version__
from .classification.context import ScaleRegime, SubstanceType, SystemContext, infer_context
from .dispatcher import Dispatcher
from .input.parser import parse_input
from .logging_config import parse_level, setup_logging
from .models import DispatchOutcome, VariableStore
from .solvers import get_default_registry
from .solvers.base import SolverRegistry
from .utils.errors import ParseError, format_error_for_json, format_error_for_user
from .utils.units import format_value

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "PHYSOLVER_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="physolver",
        description="Solve physics problems given as NAME=VALUE assignments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  physolver "Q=100, W=40"                  First law: derives ΔU
  physolver "P=101325, V=0.5, T=300"       Ideal gas: derives n
  physolver -f json "Q1=1e-6, Q2=2e-6, x1=0, y1=0, z1=0, x2=1, y2=0, z2=0"
  physolver --explain "Q=100"              Show each solver's decision
  physolver --list-solvers                 List available solvers

Environment:
  PHYSOLVER_LOG_LEVEL   Default log level (overridden by --log-level)
        """,
    )

    # Positional: problem statement
    parser.add_argument(
        "problem",
        nargs="?",
        help="Known values as NAME=VALUE pairs, e.g. 'Q=100, W=40'",
    )

    # Output format
    parser.add_argument(
        "-f",
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )

    # Context overrides
    parser.add_argument(
        "--context-regime",
        choices=[r.name.lower() for r in ScaleRegime],
        help="Force the scale regime instead of inferring it",
    )
    parser.add_argument(
        "--context-substance",
        choices=[s.name.lower() for s in SubstanceType],
        help="Force the substance type instead of inferring it",
    )

    # List solvers
    parser.add_argument(
        "--list-solvers",
        action="store_true",
        help="List registered solvers",
    )

    # Explain
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Show which solvers could handle the input, and why",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        help=f"Log level: debug, info, warning, error (default: ${LOG_LEVEL_ENV} or warning)",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write the log to this file",
    )

    # Version
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Verbose
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed output",
    )

    return parser


def build_context(
    values: VariableStore,
    regime: Optional[str] = None,
    substance: Optional[str] = None,
) -> Optional[SystemContext]:
    """
    Context for a CLI run: inferred, with any overrides applied.

    Returns None when nothing is overridden, leaving inference to the
    dispatcher.
    """
    if regime is None and substance is None:
        return None

    context = infer_context(values)
    changes = {}
    if regime is not None:
        changes["regime"] = ScaleRegime[regime.upper()]
    if substance is not None:
        changes["substance"] = SubstanceType[substance.upper()]
    return dataclasses.replace(context, **changes)


def context_to_dict(context: Optional[SystemContext]) -> Dict[str, object]:
    if context is None:
        return {}
    return {
        "regime": context.regime.name.lower(),
        "substance": context.substance.name.lower(),
        "knudsen_number": context.knudsen_number,
        "reynolds_number": context.reynolds_number,
        "beta": context.beta,
    }


def list_solvers(registry: SolverRegistry, output_format: str) -> int:
    """List registered solvers, grouped by domain."""
    entries = registry.describe()

    if output_format == "json":
        print(json.dumps(entries, indent=2, ensure_ascii=False))
        return 0

    by_domain: Dict[str, List[dict]] = {}
    for entry in entries:
        by_domain.setdefault(entry["domain"], []).append(entry)

    for domain, domain_entries in sorted(by_domain.items()):
        print(f"\n{domain.upper()}")
        print("-" * len(domain))
        for entry in domain_entries:
            print(f"  {entry['index']}. {entry['name']} (priority {entry['priority']})")
            print(f"     {entry['equation']}")
            for name, meaning in entry["inputs"].items():
                print(f"       {name}: {meaning}")

    print(f"\nTotal: {len(entries)} solvers")
    return 0


def explain_cli(
    dispatcher: Dispatcher,
    values: VariableStore,
    context: Optional[SystemContext],
    output_format: str,
) -> int:
    """Print the per-solver dispatch decision."""
    diagnostics = dispatcher.explain(values, context)

    if output_format == "json":
        print(json.dumps([d.as_dict() for d in diagnostics], indent=2, ensure_ascii=False))
        return 0

    def mark(flag: bool) -> str:
        return "yes" if flag else "no"

    print(f"{'Solver':<30} {'Prio':>4}  {'Context':<7} {'Handles':<7} {'Valid':<5}")
    for d in diagnostics:
        print(
            f"{d.name:<30} {d.priority:>4}  {mark(d.context_compatible):<7} "
            f"{mark(d.can_solve):<7} {mark(d.validated):<5}"
        )

    eligible = [d for d in diagnostics if d.eligible]
    if eligible:
        best = max(eligible, key=lambda d: d.priority)
        print(f"\nSelected: {best.name}")
    else:
        print("\nSelected: none")
    return 0


def print_outcome(
    problem: str,
    outcome: DispatchOutcome,
    registry: SolverRegistry,
    output_format: str,
    verbose: bool,
):
    """Print a dispatch outcome in the chosen format."""
    solver = next((s for s in registry if s.name == outcome.solver_name), None)
    units = solver.get_output_units() if solver else {}

    if output_format == "json":
        output = {
            "input": problem,
            "status": outcome.status.name.lower(),
            "context": context_to_dict(outcome.context),
        }
        if outcome.solver_name:
            output["solver"] = outcome.solver_name
            output["domain"] = outcome.domain
        if outcome.success:
            output["values"] = dict(outcome.values)
            output["derived"] = list(outcome.derived)
            output["units"] = {k: v for k, v in units.items() if k in outcome.values}
        else:
            output["reason"] = outcome.reason
            if outcome.error is not None:
                output["error"] = format_error_for_json(outcome.error)
        print(json.dumps(output, indent=2, ensure_ascii=False))
        return

    if not outcome.success:
        return

    print(f"Input:  {problem}")
    print(f"Solver: {outcome.solver_name}")
    print(f"Domain: {outcome.domain}")
    if solver and solver.get_equation():
        print(f"Law:    {solver.get_equation()}")
    print()
    print("Results:")
    for name in sorted(outcome.values):
        marker = " *" if name in outcome.derived else ""
        print(f"  {name:<12} = {format_value(outcome.values[name], units.get(name, ''))}{marker}")

    if verbose and outcome.context is not None:
        print(f"\nContext: {outcome.context.describe()}")


def solve_problem_cli(
    problem: str,
    output_format: str,
    regime: Optional[str],
    substance: Optional[str],
    explain: bool,
    verbose: bool,
) -> int:
    """Parse a problem statement, dispatch it and print the result."""
    logger.info("Solving: %s", problem)
    try:
        values = parse_input(problem)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.suggestions:
            print(f"Suggestion: {e.suggestions[0]}", file=sys.stderr)
        if output_format == "json":
            output = {
                "input": problem,
                "status": "parse_error",
                "error": format_error_for_json(e),
            }
            print(json.dumps(output, indent=2, ensure_ascii=False))
        return 1

    registry = get_default_registry()
    dispatcher = Dispatcher(registry)
    context = build_context(values, regime, substance)

    if explain:
        return explain_cli(dispatcher, values, context, output_format)

    if verbose:
        shown = context or infer_context(values)
        print(f"Context: {shown.describe()}", file=sys.stderr)
        candidates = dispatcher.find_candidates(values, context)
        print(f"Candidates: {', '.join(s.name for s in candidates) or '(none)'}", file=sys.stderr)

    outcome = dispatcher.dispatch(values, context)
    print_outcome(problem, outcome, registry, output_format, verbose)

    if outcome.success:
        return 0

    if outcome.error is not None:
        print(f"Error: {outcome.solver_name} failed. {format_error_for_user(outcome.error)}", file=sys.stderr)
    else:
        print(f"Error: {outcome.reason}", file=sys.stderr)
    return 1


def configure_logging(level_name: Optional[str], log_file: Optional[str], verbose: bool) -> bool:
    """Set up logging from the flag, the environment, or the default."""
    if level_name is None:
        level_name = os.environ.get(LOG_LEVEL_ENV) or ("INFO" if verbose else DEFAULT_LOG_LEVEL)
    try:
        level = parse_level(level_name)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return False
    setup_logging(level, log_file)
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not configure_logging(args.log_level, args.log_file, args.verbose):
        return 1

    # List solvers mode
    if args.list_solvers:
        return list_solvers(get_default_registry(), args.format)

    if not args.problem:
        parser.error("a problem statement is required, e.g. physolver \"Q=100, W=40\"")

    return solve_problem_cli(
        problem=args.problem,
        output_format=args.format,
        regime=args.context_regime,
        substance=args.context_substance,
        explain=args.explain,
        verbose=args.verbose,
    )


if __name__ == "__main__":
    sys.exit(main() or 0)
