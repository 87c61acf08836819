"""Utilities: errors, constants, unit handling."""

from .constants import PHYSICAL_CONSTANTS, REGIME_THRESHOLDS
from .errors import PhysolverError, SolveError, SolverContractError

__all__ = [
    "PHYSICAL_CONSTANTS",
    "REGIME_THRESHOLDS",
    "PhysolverError",
    "SolveError",
    "SolverContractError",
]
