"""Solver layer: the solver contract, the registry and the built-in laws."""

from .base import BaseSolver, FormulaSolver, SolverRegistry
from .thermodynamics import FirstLawSolver, IdealGasSolver, HeatCapacitySolver
from .electromagnetics import (
    PointChargeFieldSolver,
    ElectricPotentialSolver,
    CoulombForceSolver,
    InfiniteLineChargeSolver,
    InfinitePlaneSolver,
    ChargedRingSolver,
    ChargedDiskSolver,
    FiniteLineChargeSolver,
    ParallelPlateCapacitorSolver,
)

__all__ = [
    "BaseSolver",
    "FormulaSolver",
    "SolverRegistry",
    "FirstLawSolver",
    "IdealGasSolver",
    "HeatCapacitySolver",
    "PointChargeFieldSolver",
    "ElectricPotentialSolver",
    "CoulombForceSolver",
    "InfiniteLineChargeSolver",
    "InfinitePlaneSolver",
    "ChargedRingSolver",
    "ChargedDiskSolver",
    "FiniteLineChargeSolver",
    "ParallelPlateCapacitorSolver",
    "get_default_registry",
]


def get_default_registry() -> SolverRegistry:
    """
    Create and return a registry with every built-in solver.

    Registration order breaks priority ties, so it is part of the
    dispatch behaviour:
    - Thermodynamics: first law (60), ideal gas (70), heat capacity (65)
    - Electrostatics: point charge field (80), potential (75),
      Coulomb force (85), infinite line (70), infinite plane (65),
      ring (75), disk (75), finite line (90), capacitor (80)
    """
    registry = SolverRegistry()
    registry.register(FirstLawSolver())
    registry.register(IdealGasSolver())
    registry.register(HeatCapacitySolver())
    registry.register(PointChargeFieldSolver())
    registry.register(ElectricPotentialSolver())
    registry.register(CoulombForceSolver())
    registry.register(InfiniteLineChargeSolver())
    registry.register(InfinitePlaneSolver())
    registry.register(ChargedRingSolver())
    registry.register(ChargedDiskSolver())
    registry.register(FiniteLineChargeSolver())
    registry.register(ParallelPlateCapacitorSolver())
    return registry
