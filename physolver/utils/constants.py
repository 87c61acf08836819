"""
Physical constants and regime thresholds.

Standard SI values for the solvers and for context inference.
"""

import math

import sympy as sp


# Physical constants as SymPy symbols with numerical values
# These can be substituted into expressions for numerical evaluation

PHYSICAL_CONSTANTS = {
    "c": {
        "value": 299792458.0,
        "unit": "m/s",
        "name": "Speed of light in vacuum",
        "symbol": sp.Symbol("c"),
    },
    "hbar": {
        "value": 1.054571817e-34,
        "unit": "J*s",
        "name": "Reduced Planck constant",
        "symbol": sp.Symbol("ℏ"),
    },
    "k_B": {
        "value": 1.380649e-23,
        "unit": "J/K",
        "name": "Boltzmann constant",
        "symbol": sp.Symbol("k_B"),
    },
    "epsilon_0": {
        "value": 8.8541878128e-12,
        "unit": "F/m",
        "name": "Vacuum permittivity",
        "symbol": sp.Symbol("ε_0"),
    },
    # Three significant figures, matching the textbook form of PV = nRT
    "R": {
        "value": 8.314,
        "unit": "J/(mol*K)",
        "name": "Gas constant",
        "symbol": sp.Symbol("R", positive=True),
    },
    # Effective molecular diameter of air, used for the mean free path
    "d_air": {
        "value": 3.7e-10,
        "unit": "m",
        "name": "Kinetic diameter of air molecules",
        "symbol": sp.Symbol("d"),
    },
    "rho_air": {
        "value": 1.0,
        "unit": "kg/m**3",
        "name": "Density of air (order of magnitude)",
        "symbol": sp.Symbol("ρ"),
    },
    "mu_air": {
        "value": 1.8e-5,
        "unit": "Pa*s",
        "name": "Dynamic viscosity of air",
        "symbol": sp.Symbol("μ"),
    },
}

# Coulomb constant k = 1 / (4 pi epsilon_0)
COULOMB_K = 1.0 / (4.0 * math.pi * PHYSICAL_CONSTANTS["epsilon_0"]["value"])

# Thresholds used to classify the physical regime of a problem
REGIME_THRESHOLDS = {
    # v/c above this is relativistic
    "beta": 0.1,
    # de Broglie length / characteristic length above this is quantum
    "de_broglie_ratio": 0.1,
    # particle energies below this (J, roughly 1 keV) are quantum
    "quantum_energy": 1e-16,
    # Knudsen numbers above this leave the continuum regime
    "knudsen": 0.01,
    # ideal gas behaviour: P below this (Pa) and T above this (K)
    "ideal_gas_max_pressure": 1e6,
    "ideal_gas_min_temperature": 100.0,
}

# Distances below this (m) are treated as coincident points
COINCIDENCE_TOLERANCE = 1e-15


def get_constant_value(name: str) -> float:
    """Get the numerical value of a constant."""
    if name in PHYSICAL_CONSTANTS:
        return PHYSICAL_CONSTANTS[name]["value"]
    raise KeyError(f"Unknown constant: {name}")


def get_constant_symbol(name: str) -> sp.Symbol:
    """Get the SymPy symbol for a constant."""
    if name in PHYSICAL_CONSTANTS:
        return PHYSICAL_CONSTANTS[name]["symbol"]
    raise KeyError(f"Unknown constant: {name}")
