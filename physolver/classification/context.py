"""
Physical context inference.

Classifies a set of known values into a scale regime (classical,
statistical, quantum, relativistic) and a substance type, so that the
dispatcher only considers solvers whose physics is valid for the problem.

The heuristics are deliberately coarse. Callers that know better can
build a SystemContext themselves and pass it to the dispatcher.
"""

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping, Optional

from ..utils.constants import REGIME_THRESHOLDS, get_constant_value


class ScaleRegime(Enum):
    """Which of the four pillars of physics applies."""

    CLASSICAL_MACRO = auto()  # size > 1 um, v << c
    STATISTICAL_MESO = auto()  # Knudsen effects, molecular scale
    QUANTUM_MICRO = auto()  # de Broglie length ~ size
    RELATIVISTIC = auto()  # v comparable to c


class SystemType(Enum):
    """Thermodynamic system classification."""

    ISOLATED = auto()  # no mass or energy transfer
    CLOSED = auto()  # energy transfer only
    OPEN = auto()  # mass and energy transfer


class BoundaryType(Enum):
    """Properties of the system boundary."""

    RIGID = auto()
    FLEXIBLE = auto()
    PERMEABLE = auto()
    CONDUCTING = auto()
    INSULATING = auto()


class SubstanceType(Enum):
    """What the system is made of."""

    IDEAL_GAS = auto()
    REAL_GAS = auto()
    LIQUID = auto()
    SOLID = auto()
    PLASMA = auto()
    POINT_CHARGES = auto()
    FIELDS = auto()
    VACUUM = auto()


class PhysicsType(Enum):
    """The kind of physics a solver implements, used for regime checks."""

    UNKNOWN = auto()
    CLASSICAL_THERMODYNAMICS = auto()
    IDEAL_GAS_LAW = auto()
    QUANTUM_MECHANICS = auto()
    STATISTICAL_MECHANICS = auto()
    RELATIVISTIC_MECHANICS = auto()
    ELECTROSTATICS = auto()


# Variable names that identify an electrostatics problem
CHARGE_NAMES = frozenset({"Q1", "Q2", "q1", "q2"})
FIELD_NAMES = frozenset({"E", "C", "lambda", "λ", "sigma", "σ"})
GEOMETRY_NAMES = frozenset(
    {"x", "y", "z", "x0", "y0", "z0", "x1", "y1", "z1", "x2", "y2", "z2", "R", "A", "d"}
)
GAS_NAMES = frozenset({"P", "V", "n", "T"})


def compute_knudsen(
    length: Optional[float], pressure: Optional[float], temperature: Optional[float]
) -> Optional[float]:
    """
    Knudsen number Kn = mean free path / characteristic length.

    Kn < 0.01 is continuum flow, 0.01 < Kn < 10 transitional and
    Kn > 10 free molecular flow. Returns None when any input is missing
    or non-positive.
    """
    if length is None or pressure is None or temperature is None:
        return None
    if length <= 0 or pressure <= 0 or temperature <= 0:
        return None

    d = get_constant_value("d_air")
    mean_free_path = (
        get_constant_value("k_B") * temperature / (math.sqrt(2) * math.pi * d**2 * pressure)
    )
    return mean_free_path / length


def compute_reynolds(length: Optional[float], velocity: Optional[float]) -> Optional[float]:
    """Order-of-magnitude Reynolds number Re = rho v L / mu for air."""
    if length is None or velocity is None:
        return None
    rho = get_constant_value("rho_air")
    mu = get_constant_value("mu_air")
    return rho * velocity * length / mu


@dataclass(frozen=True)
class SystemContext:
    """
    Complete description of the physical system.

    Regime and substance decide which solvers are physically valid. The
    optional parameters are recorded for diagnostics, and the dimensionless
    numbers are derived from them on construction.
    """

    regime: ScaleRegime = ScaleRegime.CLASSICAL_MACRO
    substance: SubstanceType = SubstanceType.IDEAL_GAS
    system_type: SystemType = SystemType.CLOSED
    boundary_type: BoundaryType = BoundaryType.FLEXIBLE

    characteristic_length: Optional[float] = None  # m
    characteristic_velocity: Optional[float] = None  # m/s
    temperature: Optional[float] = None  # K
    pressure: Optional[float] = None  # Pa
    particle_energy: Optional[float] = None  # J

    knudsen_number: Optional[float] = field(init=False, default=None)
    reynolds_number: Optional[float] = field(init=False, default=None)
    beta: Optional[float] = field(init=False, default=None)  # v/c

    def __post_init__(self):
        object.__setattr__(
            self,
            "knudsen_number",
            compute_knudsen(self.characteristic_length, self.pressure, self.temperature),
        )
        object.__setattr__(
            self,
            "reynolds_number",
            compute_reynolds(self.characteristic_length, self.characteristic_velocity),
        )
        if self.characteristic_velocity is not None:
            object.__setattr__(
                self, "beta", self.characteristic_velocity / get_constant_value("c")
            )

    def describe(self) -> str:
        """One-line summary for logs and CLI output."""
        return f"{describe_regime(self.regime)}; substance: {self.substance.name.lower()}"


def infer_regime(values: Mapping[str, float]) -> ScaleRegime:
    """
    Detect which physical regime applies.

    Checks, in order: relativistic speed, quantum length or energy scale,
    rarefied gas (Knudsen number), and falls back to classical.
    """
    # 1. Relativistic: v/c above threshold
    if "v" in values:
        beta = abs(values["v"]) / get_constant_value("c")
        if beta > REGIME_THRESHOLDS["beta"]:
            return ScaleRegime.RELATIVISTIC

    # 2. Quantum: de Broglie length comparable to size, or tiny energies
    energy = values.get("E")
    mass = values.get("m")
    if energy is not None and mass is not None and energy > 0 and mass > 0:
        speed = math.sqrt(2 * energy / mass)
        # reduced de Broglie length hbar / p
        wavelength = get_constant_value("hbar") / (mass * speed)

        length = values.get("L")
        if length and length > 0 and wavelength / length > REGIME_THRESHOLDS["de_broglie_ratio"]:
            return ScaleRegime.QUANTUM_MICRO

        if energy < REGIME_THRESHOLDS["quantum_energy"]:
            return ScaleRegime.QUANTUM_MICRO

    # 3. Statistical: outside the continuum regime
    kn = compute_knudsen(values.get("L"), values.get("P"), values.get("T"))
    if kn is not None and kn > REGIME_THRESHOLDS["knudsen"]:
        return ScaleRegime.STATISTICAL_MESO

    return ScaleRegime.CLASSICAL_MACRO


def infer_substance(values: Mapping[str, float]) -> SubstanceType:
    """
    Detect what substance the problem is about from its variable names.

    Q and V are ambiguous (heat or charge, volume or potential); they only
    count as electrostatic when geometry variables accompany them.
    """
    names = set(values)
    has_geometry = bool(names & GEOMETRY_NAMES)
    has_gas = bool(names & {"P", "n", "T"})

    if names & CHARGE_NAMES or ("Q" in names and has_geometry):
        return SubstanceType.POINT_CHARGES

    if names & FIELD_NAMES or ("V" in names and has_geometry and not has_gas):
        return SubstanceType.FIELDS

    if names & GAS_NAMES:
        pressure = values.get("P")
        temperature = values.get("T")
        if pressure is not None and temperature is not None:
            if (
                pressure < REGIME_THRESHOLDS["ideal_gas_max_pressure"]
                and temperature > REGIME_THRESHOLDS["ideal_gas_min_temperature"]
            ):
                return SubstanceType.IDEAL_GAS
            return SubstanceType.REAL_GAS
        return SubstanceType.IDEAL_GAS

    return SubstanceType.IDEAL_GAS


def infer_context(values: Mapping[str, float]) -> SystemContext:
    """
    Infer the complete system context from the known values.

    Called by the dispatcher whenever no context is supplied.
    """
    return SystemContext(
        regime=infer_regime(values),
        substance=infer_substance(values),
        characteristic_length=values.get("L"),
        characteristic_velocity=values.get("v"),
        temperature=values.get("T"),
        pressure=values.get("P"),
        particle_energy=values.get("E"),
    )


def is_regime_valid(context: SystemContext, physics: PhysicsType) -> bool:
    """Check if the given kind of physics is valid in this context."""
    if physics == PhysicsType.CLASSICAL_THERMODYNAMICS:
        return context.regime == ScaleRegime.CLASSICAL_MACRO

    if physics == PhysicsType.IDEAL_GAS_LAW:
        return (
            context.regime == ScaleRegime.CLASSICAL_MACRO
            and context.substance == SubstanceType.IDEAL_GAS
        )

    if physics == PhysicsType.QUANTUM_MECHANICS:
        return context.regime == ScaleRegime.QUANTUM_MICRO

    if physics == PhysicsType.STATISTICAL_MECHANICS:
        return context.regime in (ScaleRegime.STATISTICAL_MESO, ScaleRegime.QUANTUM_MICRO)

    if physics == PhysicsType.RELATIVISTIC_MECHANICS:
        return context.regime == ScaleRegime.RELATIVISTIC

    if physics == PhysicsType.ELECTROSTATICS:
        return context.substance in (SubstanceType.POINT_CHARGES, SubstanceType.FIELDS)

    return True


def describe_regime(regime: ScaleRegime) -> str:
    """Human-readable description of a regime."""
    descriptions = {
        ScaleRegime.CLASSICAL_MACRO: "Classical Macroscopic (L > 1μm, v << c, kT >> ℏω)",
        ScaleRegime.STATISTICAL_MESO: "Statistical/Mesoscopic (Molecular scale, Knudsen effects)",
        ScaleRegime.QUANTUM_MICRO: "Quantum Microscopic (λ_dB ~ L, ℏ matters)",
        ScaleRegime.RELATIVISTIC: "Relativistic (v ≈ c, E ≈ mc²)",
    }
    return descriptions.get(regime, "Unknown")
