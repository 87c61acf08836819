"""
Thermodynamics solvers.

Each law relates a handful of quantities; give all but one and the
solver fills in the missing one.
"""

from ..classification.context import PhysicsType, SubstanceType
from .base import FormulaSolver


class FirstLawSolver(FormulaSolver):
    """
    First law of thermodynamics: ΔU = Q - W.

    W is work done by the system. Needs exactly two of Q, W, ΔU.
    """

    name = "FirstLawSolver"
    description = "First Law of Thermodynamics (ΔU = Q - W)"
    domain = "thermodynamics"
    priority = 60
    physics_type = PhysicsType.CLASSICAL_THERMODYNAMICS
    equation = "ΔU = Q - W"

    quantities = {
        "Q": ("Q", "q", "heat"),
        "W": ("W", "w", "work"),
        "dU": ("ΔU", "U", "u", "deltaU", "dU"),
    }
    relation = "dU - (Q - W)"

    output_units = {"Q": "J", "W": "J", "ΔU": "J"}
    input_constraints = {
        "Q": "Heat added to the system in joules",
        "W": "Work in joules (positive = done by system)",
        "ΔU": "Internal energy change in joules",
    }


class IdealGasSolver(FormulaSolver):
    """Ideal gas law: PV = nRT, with R = 8.314 J/(mol·K)."""

    name = "IdealGasSolver"
    description = "Ideal Gas Law (PV = nRT)"
    domain = "thermodynamics"
    priority = 70
    required_substances = frozenset({SubstanceType.IDEAL_GAS})
    physics_type = PhysicsType.IDEAL_GAS_LAW
    equation = "PV = nRT, R = 8.314 J/(mol·K)"

    quantities = {
        "P": ("P", "p", "pressure"),
        "V": ("V", "v", "volume"),
        "n": ("n", "moles"),
        "T": ("T", "t", "temperature"),
    }
    relation = "P*V - n*R*T"
    constants = ("R",)
    positive = ("P", "V", "n", "T")

    output_units = {"P": "Pa", "V": "m**3", "n": "mol", "T": "K"}
    input_constraints = {
        "P": "P > 0 (not too high for ideal behavior)",
        "V": "V > 0",
        "n": "n > 0",
        "T": "T > 0 (not too low for ideal behavior)",
    }


class HeatCapacitySolver(FormulaSolver):
    """Sensible heat: Q = m c ΔT."""

    name = "HeatCapacitySolver"
    description = "Heat Capacity (Q = mcΔT)"
    domain = "thermodynamics"
    priority = 65
    physics_type = PhysicsType.CLASSICAL_THERMODYNAMICS
    equation = "Q = mcΔT"

    quantities = {
        "Q": ("Q", "q", "heat"),
        "m": ("m", "mass"),
        "c": ("c", "specific_heat"),
        "dT": ("ΔT", "deltaT", "dT"),
    }
    relation = "Q - m*c*dT"
    positive = ("m", "c")

    output_units = {"Q": "J", "m": "kg", "c": "J/(kg*K)", "ΔT": "K"}
    input_constraints = {
        "m": "m > 0",
        "c": "c > 0 (material property)",
        "ΔT": "Temperature change in kelvin",
    }
