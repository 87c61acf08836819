"""
Tests for unit handling and physical constants.
"""

import math
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class TestUnitHandler:
    """Tests for pint-backed unit checks."""

    @pytest.mark.parametrize("unit", ["J", "Pa", "m**3", "mol", "K", "J/(kg*K)", "N/C", "V/m", "F"])
    def test_valid_units(self, unit):
        from physolver.utils.units import is_valid_unit

        assert is_valid_unit(unit)

    @pytest.mark.parametrize("unit", ["", "   ", "blorps", "kg*blorps"])
    def test_invalid_units(self, unit):
        from physolver.utils.units import is_valid_unit

        assert not is_valid_unit(unit)

    def test_shared_handler(self):
        from physolver.utils.units import get_handler

        assert get_handler() is get_handler()


class TestFormatValue:
    """Tests for display formatting."""

    def test_plain_value(self):
        from physolver.utils.units import format_value

        assert format_value(60.0, "J") == "60.0000 J"

    def test_large_value_scientific(self):
        from physolver.utils.units import format_value

        assert format_value(250000.0, "Pa") == "2.5000e+05 Pa"

    def test_small_value_scientific(self):
        from physolver.utils.units import format_value

        assert format_value(1.6e-19) == "1.6000e-19"

    def test_zero_and_infinity(self):
        from physolver.utils.units import format_value

        assert format_value(0.0) == "0.0000"
        assert format_value(math.inf, "V") == "inf V"


class TestConstants:
    """Tests for the constants table."""

    def test_gas_constant(self):
        from physolver.utils.constants import get_constant_value

        assert get_constant_value("R") == 8.314

    def test_coulomb_constant(self):
        from physolver.utils.constants import COULOMB_K

        assert COULOMB_K == pytest.approx(8.9875e9, rel=1e-4)

    def test_every_constant_has_symbol_and_unit(self):
        import sympy as sp

        from physolver.utils.constants import PHYSICAL_CONSTANTS, get_constant_symbol
        from physolver.utils.units import is_valid_unit

        for name, info in PHYSICAL_CONSTANTS.items():
            assert isinstance(get_constant_symbol(name), sp.Symbol)
            assert is_valid_unit(info["unit"]), name

    def test_unknown_constant(self):
        from physolver.utils.constants import get_constant_value

        with pytest.raises(KeyError, match="m_e"):
            get_constant_value("m_e")

    def test_thresholds(self):
        from physolver.utils.constants import REGIME_THRESHOLDS

        assert REGIME_THRESHOLDS["beta"] == 0.1
        assert REGIME_THRESHOLDS["knudsen"] == 0.01
