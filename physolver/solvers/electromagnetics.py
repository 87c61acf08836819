"""
Electrostatics solvers.

Field, potential and force for point charges and for simple continuous
charge distributions. Each solver needs a fixed set of named coordinates
and charges; the field point is (x, y, z) throughout.
"""

import math
from typing import AbstractSet, Iterable, Sequence, Tuple

from ..classification.context import PhysicsType, SystemContext
from ..models import VariableStore
from ..utils.constants import COINCIDENCE_TOLERANCE, COULOMB_K, get_constant_value
from ..utils.errors import InconsistentInputsError, SingularGeometryError, SolveError
from .base import BaseSolver

EPSILON_0 = get_constant_value("epsilon_0")

FIELD_UNITS = {"Ex": "N/C", "Ey": "N/C", "Ez": "N/C", "E_magnitude": "N/C"}

Vector = Tuple[float, float, float]


def _vector(values: VariableStore, names: Sequence[str]) -> Vector:
    return tuple(values[name] for name in names)


def _sub(a: Vector, b: Vector) -> Vector:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _norm(a: Vector) -> float:
    return math.sqrt(a[0] ** 2 + a[1] ** 2 + a[2] ** 2)


def _store_field(values: VariableStore, field: Vector, prefix: str = "E") -> VariableStore:
    components = {
        f"{prefix}x": field[0],
        f"{prefix}y": field[1],
        f"{prefix}z": field[2],
        f"{prefix}_magnitude": _norm(field),
    }
    for name, value in components.items():
        if math.isnan(value):
            raise SolveError(f"Computation of '{name}' produced an undefined value (NaN)")
    for name, value in components.items():
        values.derive(name, value)
    return values


def _lambda(values: VariableStore) -> float:
    return values.get_any("lambda", "λ")


def _sigma(values: VariableStore) -> float:
    return values.get_any("sigma", "σ")


class ElectrostaticSolver(BaseSolver):
    """
    Common base for solvers that need a fixed set of variables.

    required: every name in this tuple must be present.
    required_any: for each group, at least one alias must be present.
    """

    domain = "electromagnetics"
    physics_type = PhysicsType.ELECTROSTATICS
    output_units = FIELD_UNITS

    required: Tuple[str, ...] = ()
    required_any: Tuple[Tuple[str, ...], ...] = ()

    def _has_all(self, names: Iterable[str]) -> bool:
        names = set(names)
        return all(v in names for v in self.required) and all(
            any(alias in names for alias in group) for group in self.required_any
        )

    def can_solve(self, variables: AbstractSet[str], context: SystemContext) -> bool:
        return self._has_all(variables)

    def validate_inputs(self, values: VariableStore) -> bool:
        return self._has_all(values.keys())


class PointChargeFieldSolver(ElectrostaticSolver):
    """Field of a point charge Q at (x0, y0, z0): E = kQ/r² r̂."""

    name = "PointChargeFieldSolver"
    description = "Point Charge Electric Field (E = kQ/r²)"
    priority = 80
    equation = "E = kQ/r²"
    required = ("Q", "x", "y", "z", "x0", "y0", "z0")

    def solve(self, values: VariableStore) -> VariableStore:
        r_vec = _sub(_vector(values, ("x", "y", "z")), _vector(values, ("x0", "y0", "z0")))
        r = _norm(r_vec)
        if r < COINCIDENCE_TOLERANCE:
            raise SingularGeometryError(
                "Field point coincides with the charge position; the field is undefined there"
            )

        scale = COULOMB_K * values["Q"] / r**3
        return _store_field(values, (scale * r_vec[0], scale * r_vec[1], scale * r_vec[2]))


class ElectricPotentialSolver(ElectrostaticSolver):
    """
    Potential of a point charge: V = kQ/r.

    At zero distance the potential is infinite with the sign of Q.
    """

    name = "ElectricPotentialSolver"
    description = "Electric Potential (V = kQ/r)"
    priority = 75
    equation = "V = kQ/r"
    output_units = {"V": "V"}
    required = ("Q", "x", "y", "z", "x0", "y0", "z0")

    def solve(self, values: VariableStore) -> VariableStore:
        r = _norm(_sub(_vector(values, ("x", "y", "z")), _vector(values, ("x0", "y0", "z0"))))
        charge = values["Q"]

        if r < COINCIDENCE_TOLERANCE:
            potential = math.copysign(math.inf, charge) if charge else 0.0
        else:
            potential = COULOMB_K * charge / r

        values.derive("V", potential)
        return values


class CoulombForceSolver(ElectrostaticSolver):
    """Force on charge Q2 from charge Q1: F = kQ₁Q₂/r² r̂."""

    name = "CoulombForceSolver"
    description = "Coulomb's Law (F = kQ₁Q₂/r²)"
    priority = 85
    equation = "F = kQ₁Q₂/r²"
    output_units = {"Fx": "N", "Fy": "N", "Fz": "N", "F_magnitude": "N"}
    required = ("Q1", "Q2", "x1", "y1", "z1", "x2", "y2", "z2")

    def solve(self, values: VariableStore) -> VariableStore:
        pos1 = _vector(values, ("x1", "y1", "z1"))
        pos2 = _vector(values, ("x2", "y2", "z2"))
        r_vec = _sub(pos2, pos1)
        r = _norm(r_vec)
        if r < COINCIDENCE_TOLERANCE:
            raise SingularGeometryError(
                f"Charges Q1 and Q2 are at the same position {pos1}; "
                "the Coulomb force is undefined at zero separation"
            )

        scale = COULOMB_K * values["Q1"] * values["Q2"] / r**3
        force = (scale * r_vec[0], scale * r_vec[1], scale * r_vec[2])
        return _store_field(values, force, prefix="F")


class InfiniteLineChargeSolver(ElectrostaticSolver):
    """Infinite line charge along the z-axis: E = λ/(2πε₀r), radial."""

    name = "InfiniteLineChargeSolver"
    description = "Infinite Line Charge (E = λ/2πε₀r)"
    priority = 70
    equation = "E = λ/(2πε₀r)"
    required = ("x", "y")
    required_any = (("lambda", "λ"),)

    def solve(self, values: VariableStore) -> VariableStore:
        x, y = values["x"], values["y"]
        r = math.hypot(x, y)
        if r < COINCIDENCE_TOLERANCE:
            raise SingularGeometryError("Field point lies on the line charge (x = y = 0)")

        magnitude = _lambda(values) / (2 * math.pi * EPSILON_0 * r)
        values.derive("Ex", magnitude * x / r)
        values.derive("Ey", magnitude * y / r)
        values.derive("Ez", 0.0)
        values.derive("E_magnitude", abs(magnitude))
        return values


class InfinitePlaneSolver(ElectrostaticSolver):
    """Infinite charged plane (the xy-plane): E = σ/2ε₀ along z."""

    name = "InfinitePlaneSolver"
    description = "Infinite Plane Charge (E = σ/2ε₀)"
    priority = 65
    equation = "E = σ/(2ε₀)"
    required_any = (("sigma", "σ"),)

    def solve(self, values: VariableStore) -> VariableStore:
        return _store_field(values, (0.0, 0.0, _sigma(values) / (2 * EPSILON_0)))


class ChargedRingSolver(ElectrostaticSolver):
    """Ring of charge Q and radius R in the xy-plane, field on the z-axis."""

    name = "ChargedRingSolver"
    description = "Uniformly Charged Ring on Axis"
    priority = 75
    equation = "E_z = kQz/(R² + z²)^(3/2)"
    required = ("Q", "R", "z")

    def validate_inputs(self, values: VariableStore) -> bool:
        return super().validate_inputs(values) and values["R"] > 0

    def solve(self, values: VariableStore) -> VariableStore:
        radius, z = values["R"], values["z"]
        e_z = COULOMB_K * values["Q"] * z / (radius**2 + z**2) ** 1.5
        return _store_field(values, (0.0, 0.0, e_z))


class ChargedDiskSolver(ElectrostaticSolver):
    """Disk with surface charge σ and radius R in the xy-plane, field on axis."""

    name = "ChargedDiskSolver"
    description = "Uniformly Charged Disk on Axis"
    priority = 75
    equation = "E_z = (σ/2ε₀)(1 - z/√(R² + z²))"
    required = ("R", "z")
    required_any = (("sigma", "σ"),)

    def validate_inputs(self, values: VariableStore) -> bool:
        return super().validate_inputs(values) and values["R"] > 0

    def solve(self, values: VariableStore) -> VariableStore:
        radius, z = values["R"], values["z"]
        e_z = (_sigma(values) / (2 * EPSILON_0)) * (1 - z / math.sqrt(radius**2 + z**2))
        return _store_field(values, (0.0, 0.0, e_z))


class FiniteLineChargeSolver(ElectrostaticSolver):
    """
    Line segment with charge density λ from (x0, y0, z0) to (x1, y1, z1).

    The field is integrated numerically with the midpoint rule.
    """

    name = "FiniteLineChargeSolver"
    description = "Finite Line Charge (Numerical)"
    priority = 90
    equation = "E = ∫ kλ dl / r² r̂"
    required = ("x0", "y0", "z0", "x1", "y1", "z1", "x", "y", "z")
    required_any = (("lambda", "λ"),)

    segments = 1000

    def solve(self, values: VariableStore) -> VariableStore:
        start = _vector(values, ("x0", "y0", "z0"))
        end = _vector(values, ("x1", "y1", "z1"))
        point = _vector(values, ("x", "y", "z"))

        axis = _sub(end, start)
        length = _norm(axis)
        if length < COINCIDENCE_TOLERANCE:
            raise SingularGeometryError("Line charge endpoints coincide (zero-length line)")

        # closest point of the segment to the field point
        t = sum((point[i] - start[i]) * axis[i] for i in range(3)) / length**2
        t = min(max(t, 0.0), 1.0)
        closest = tuple(start[i] + t * axis[i] for i in range(3))
        if _norm(_sub(point, closest)) < COINCIDENCE_TOLERANCE:
            raise SingularGeometryError("Field point lies on the line charge")

        dq = COULOMB_K * _lambda(values) * length / self.segments
        field = [0.0, 0.0, 0.0]
        for i in range(self.segments):
            s = (i + 0.5) / self.segments
            source = tuple(start[j] + s * axis[j] for j in range(3))
            r_vec = _sub(point, source)
            r = _norm(r_vec)
            for j in range(3):
                field[j] += dq * r_vec[j] / r**3

        return _store_field(values, tuple(field))


class ParallelPlateCapacitorSolver(ElectrostaticSolver):
    """
    Parallel plate capacitor of plate area A and separation d.

    C = ε₀A/d, Q = CV, V = Ed. The geometry fixes C, so exactly one of
    Q, V or E is needed. A given C must agree with ε₀A/d.
    """

    name = "ParallelPlateCapacitorSolver"
    description = "Parallel Plate Capacitor"
    priority = 80
    equation = "C = ε₀A/d, Q = CV, V = Ed"
    output_units = {"C": "F", "Q": "C", "V": "V", "E": "V/m"}
    required = ("A", "d")

    electric = ("Q", "V", "E")
    rel_tol = 1e-9

    def can_solve(self, variables: AbstractSet[str], context: SystemContext) -> bool:
        return super().can_solve(variables, context) and any(
            v in variables for v in self.electric
        )

    def validate_inputs(self, values: VariableStore) -> bool:
        if not super().validate_inputs(values):
            return False
        if values["A"] <= 0 or values["d"] <= 0:
            return False
        return sum(v in values for v in self.electric) == 1

    def solve(self, values: VariableStore) -> VariableStore:
        area, separation = values["A"], values["d"]
        capacitance = EPSILON_0 * area / separation

        if "C" in values and not math.isclose(values["C"], capacitance, rel_tol=self.rel_tol):
            raise InconsistentInputsError(
                f"Given C = {values['C']:g} F but ε₀A/d = {capacitance:g} F"
            )
        capacitance = values.derive("C", capacitance)

        if "V" in values:
            voltage = values["V"]
        elif "E" in values:
            voltage = values["E"] * separation
        else:
            voltage = values["Q"] / capacitance

        voltage = values.derive("V", voltage)
        values.derive("Q", capacitance * voltage)
        values.derive("E", voltage / separation)
        return values
