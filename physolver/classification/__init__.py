"""Classification layer: physical context inference for solver routing."""

from .context import (
    BoundaryType,
    PhysicsType,
    ScaleRegime,
    SubstanceType,
    SystemContext,
    SystemType,
    infer_context,
    is_regime_valid,
)

__all__ = [
    "BoundaryType",
    "PhysicsType",
    "ScaleRegime",
    "SubstanceType",
    "SystemContext",
    "SystemType",
    "infer_context",
    "is_regime_valid",
]
