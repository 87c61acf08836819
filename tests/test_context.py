"""
Tests for physical context inference and the regime validity table.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class TestInferRegime:
    """Tests for scale regime detection."""

    def test_default_is_classical(self):
        """Test that plain thermodynamics inputs are classical."""
        from physolver.classification.context import ScaleRegime, infer_regime

        assert infer_regime({"Q": 100.0, "W": 40.0}) == ScaleRegime.CLASSICAL_MACRO

    def test_fast_particle_is_relativistic(self):
        """Test v/c above 0.1."""
        from physolver.classification.context import ScaleRegime, infer_regime

        assert infer_regime({"v": 1e8}) == ScaleRegime.RELATIVISTIC
        assert infer_regime({"v": -1e8}) == ScaleRegime.RELATIVISTIC
        assert infer_regime({"v": 1e6}) == ScaleRegime.CLASSICAL_MACRO

    def test_tiny_energy_is_quantum(self):
        """Test the absolute energy threshold."""
        from physolver.classification.context import ScaleRegime, infer_regime

        assert infer_regime({"E": 1e-19, "m": 9.109e-31}) == ScaleRegime.QUANTUM_MICRO

    def test_de_broglie_length_against_size(self):
        """Test that an electron in a nanometre box is quantum."""
        from physolver.classification.context import ScaleRegime, infer_regime

        values = {"E": 1e-15, "m": 9.109e-31, "L": 1e-12}
        assert infer_regime(values) == ScaleRegime.QUANTUM_MICRO

    def test_relativistic_takes_precedence(self):
        """Test check order: relativistic before quantum."""
        from physolver.classification.context import ScaleRegime, infer_regime

        values = {"v": 2e8, "E": 1e-19, "m": 9.109e-31}
        assert infer_regime(values) == ScaleRegime.RELATIVISTIC

    def test_rarefied_gas_is_statistical(self):
        """Test that a large Knudsen number selects the mesoscopic regime."""
        from physolver.classification.context import ScaleRegime, infer_regime

        # Mean free path at 1 Pa, 300 K is several mm; L = 1 mm
        values = {"P": 1.0, "T": 300.0, "L": 1e-3}
        assert infer_regime(values) == ScaleRegime.STATISTICAL_MESO

    def test_dense_gas_is_classical(self):
        """Test atmospheric gas in a metre-sized container."""
        from physolver.classification.context import ScaleRegime, infer_regime

        values = {"P": 101325.0, "T": 300.0, "L": 1.0}
        assert infer_regime(values) == ScaleRegime.CLASSICAL_MACRO


class TestInferSubstance:
    """Tests for substance detection."""

    def test_named_charges(self):
        """Test that Q1/Q2 mean point charges."""
        from physolver.classification.context import SubstanceType, infer_substance

        assert infer_substance({"Q1": 1e-6, "Q2": 1e-6}) == SubstanceType.POINT_CHARGES

    def test_heat_is_not_a_charge(self):
        """Test that Q without geometry stays thermodynamic."""
        from physolver.classification.context import SubstanceType, infer_substance

        assert infer_substance({"Q": 100.0, "W": 40.0}) == SubstanceType.IDEAL_GAS

    def test_charge_with_geometry(self):
        """Test that Q with coordinates is a point charge."""
        from physolver.classification.context import SubstanceType, infer_substance

        assert infer_substance({"Q": 1e-9, "x": 1.0}) == SubstanceType.POINT_CHARGES

    def test_field_names(self):
        """Test that field-like names mean fields."""
        from physolver.classification.context import SubstanceType, infer_substance

        assert infer_substance({"sigma": 1e-6}) == SubstanceType.FIELDS
        assert infer_substance({"λ": 1e-6, "x": 1.0, "y": 0.0}) == SubstanceType.FIELDS

    def test_volume_is_not_a_potential(self):
        """Test that V with gas variables is a volume."""
        from physolver.classification.context import SubstanceType, infer_substance

        values = {"P": 101325.0, "V": 0.5, "T": 300.0}
        assert infer_substance(values) == SubstanceType.IDEAL_GAS

    def test_high_pressure_is_real_gas(self):
        """Test the ideal gas pressure limit."""
        from physolver.classification.context import SubstanceType, infer_substance

        assert infer_substance({"P": 5e7, "T": 300.0, "V": 0.01}) == SubstanceType.REAL_GAS

    def test_cold_gas_is_real_gas(self):
        """Test the ideal gas temperature limit."""
        from physolver.classification.context import SubstanceType, infer_substance

        assert infer_substance({"P": 1e5, "T": 50.0}) == SubstanceType.REAL_GAS


class TestSystemContext:
    """Tests for the context record."""

    def test_defaults(self):
        """Test default regime and substance."""
        from physolver.classification.context import ScaleRegime, SubstanceType, SystemContext

        ctx = SystemContext()
        assert ctx.regime == ScaleRegime.CLASSICAL_MACRO
        assert ctx.substance == SubstanceType.IDEAL_GAS
        assert ctx.knudsen_number is None

    def test_dimensionless_numbers_derived(self):
        """Test that Kn, Re and beta are computed on construction."""
        from physolver.classification.context import SystemContext

        ctx = SystemContext(
            characteristic_length=1.0,
            characteristic_velocity=3e6,
            temperature=300.0,
            pressure=101325.0,
        )

        assert ctx.knudsen_number == pytest.approx(6.8e-8, rel=0.05)
        assert ctx.reynolds_number == pytest.approx(3e6 / 1.8e-5)
        assert ctx.beta == pytest.approx(0.01, rel=1e-2)

    def test_is_frozen(self):
        """Test that contexts are immutable."""
        import dataclasses

        from physolver.classification.context import ScaleRegime, SystemContext

        ctx = SystemContext()
        with pytest.raises(dataclasses.FrozenInstanceError):
            ctx.regime = ScaleRegime.RELATIVISTIC

    def test_infer_context_records_parameters(self):
        """Test that inference fills the optional parameters."""
        from physolver.classification.context import infer_context

        ctx = infer_context({"P": 101325.0, "T": 300.0, "L": 2.0})
        assert ctx.pressure == 101325.0
        assert ctx.temperature == 300.0
        assert ctx.characteristic_length == 2.0

    def test_knudsen_needs_positive_inputs(self):
        """Test that missing or non-positive inputs give no Knudsen number."""
        from physolver.classification.context import compute_knudsen

        assert compute_knudsen(None, 1.0, 1.0) is None
        assert compute_knudsen(1.0, 0.0, 300.0) is None


class TestRegimeValidity:
    """Tests for the physics/regime compatibility table."""

    def test_classical_thermodynamics(self):
        from physolver.classification.context import (
            PhysicsType,
            ScaleRegime,
            SystemContext,
            is_regime_valid,
        )

        assert is_regime_valid(SystemContext(), PhysicsType.CLASSICAL_THERMODYNAMICS)
        quantum = SystemContext(regime=ScaleRegime.QUANTUM_MICRO)
        assert not is_regime_valid(quantum, PhysicsType.CLASSICAL_THERMODYNAMICS)

    def test_ideal_gas_needs_ideal_gas(self):
        from physolver.classification.context import (
            PhysicsType,
            SubstanceType,
            SystemContext,
            is_regime_valid,
        )

        real = SystemContext(substance=SubstanceType.REAL_GAS)
        assert not is_regime_valid(real, PhysicsType.IDEAL_GAS_LAW)
        assert is_regime_valid(SystemContext(), PhysicsType.IDEAL_GAS_LAW)

    def test_statistical_mechanics(self):
        from physolver.classification.context import (
            PhysicsType,
            ScaleRegime,
            SystemContext,
            is_regime_valid,
        )

        for regime, expected in [
            (ScaleRegime.STATISTICAL_MESO, True),
            (ScaleRegime.QUANTUM_MICRO, True),
            (ScaleRegime.CLASSICAL_MACRO, False),
            (ScaleRegime.RELATIVISTIC, False),
        ]:
            ctx = SystemContext(regime=regime)
            assert is_regime_valid(ctx, PhysicsType.STATISTICAL_MECHANICS) is expected

    def test_electrostatics_needs_charges_or_fields(self):
        from physolver.classification.context import (
            PhysicsType,
            SubstanceType,
            SystemContext,
            is_regime_valid,
        )

        assert is_regime_valid(
            SystemContext(substance=SubstanceType.FIELDS), PhysicsType.ELECTROSTATICS
        )
        assert not is_regime_valid(SystemContext(), PhysicsType.ELECTROSTATICS)

    def test_unknown_is_always_valid(self):
        from physolver.classification.context import (
            PhysicsType,
            ScaleRegime,
            SystemContext,
            is_regime_valid,
        )

        ctx = SystemContext(regime=ScaleRegime.RELATIVISTIC)
        assert is_regime_valid(ctx, PhysicsType.UNKNOWN)
