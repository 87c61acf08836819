"""
Tests for the core data structures: VariableStore and DispatchOutcome.
"""

import math
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


class TestVariableStore:
    """Tests for value validation and append-only derivation."""

    def test_values_become_floats(self):
        """Test that integer inputs are stored as floats."""
        from physolver.models import VariableStore

        store = VariableStore({"Q": 100, "W": 40})

        assert store["Q"] == 100.0
        assert isinstance(store["Q"], float)

    def test_rejects_nan(self):
        """Test that NaN is not a valid value."""
        from physolver.models import VariableStore
        from physolver.utils.errors import InvalidValueError

        with pytest.raises(InvalidValueError):
            VariableStore({"Q": float("nan")})

    def test_allows_infinity(self):
        """Test that infinities are allowed."""
        from physolver.models import VariableStore

        store = VariableStore({"V": math.inf})
        assert store["V"] == math.inf

    def test_rejects_non_numbers(self):
        """Test that strings and booleans are rejected."""
        from physolver.models import VariableStore
        from physolver.utils.errors import InvalidValueError

        store = VariableStore()
        with pytest.raises(InvalidValueError):
            store["Q"] = "100"
        with pytest.raises(InvalidValueError):
            store["Q"] = True

    def test_rejects_empty_name(self):
        """Test that names must be non-empty strings."""
        from physolver.models import VariableStore
        from physolver.utils.errors import InvalidValueError

        with pytest.raises(InvalidValueError):
            VariableStore({"": 1.0})

    def test_update_validates(self):
        """Test that dict.update cannot bypass validation."""
        from physolver.models import VariableStore
        from physolver.utils.errors import InvalidValueError

        store = VariableStore()
        with pytest.raises(InvalidValueError):
            store.update({"T": float("nan")})

    def test_get_any_returns_first_present_alias(self):
        """Test alias lookup order."""
        from physolver.models import VariableStore

        store = VariableStore({"q": 5.0, "heat": 7.0})

        assert store.get_any("Q", "q", "heat") == 5.0
        assert store.get_any("W", "w") is None
        assert store.known("W", "heat")

    def test_derive_adds_new_value(self):
        """Test that derive stores a missing value."""
        from physolver.models import VariableStore

        store = VariableStore({"Q": 100.0})
        assert store.derive("ΔU", 60.0) == 60.0
        assert store["ΔU"] == 60.0

    def test_derive_never_overwrites(self):
        """Test that an existing value wins over a derived one."""
        from physolver.models import VariableStore

        store = VariableStore({"ΔU": 60.0})
        assert store.derive("ΔU", 59.0) == 60.0
        assert store["ΔU"] == 60.0

    def test_derive_nan_is_solve_error(self):
        """Test that an undefined computation is reported as a solve error."""
        from physolver.models import VariableStore
        from physolver.utils.errors import SolveError

        store = VariableStore()
        with pytest.raises(SolveError):
            store.derive("x", float("nan"))

    def test_copy_is_variable_store(self):
        """Test that copies keep the store type and are independent."""
        from physolver.models import VariableStore

        store = VariableStore({"Q": 1.0})
        clone = store.copy()
        clone["W"] = 2.0

        assert isinstance(clone, VariableStore)
        assert "W" not in store


class TestDispatchOutcome:
    """Tests for outcome construction."""

    def test_solved_outcome(self):
        """Test the success constructor."""
        from physolver.models import DispatchOutcome, DispatchStatus, VariableStore

        store = VariableStore({"Q": 100.0, "W": 40.0, "ΔU": 60.0})
        outcome = DispatchOutcome.solved("FirstLawSolver", "thermodynamics", store, derived=["ΔU"])

        assert outcome.success
        assert outcome.status == DispatchStatus.SOLVED
        assert outcome.derived_values() == {"ΔU": 60.0}

    def test_absent_outcome(self):
        """Test the no-solver constructor."""
        from physolver.models import DispatchOutcome, DispatchStatus

        outcome = DispatchOutcome.absent("No solver can handle variables: Q")

        assert not outcome.success
        assert outcome.status == DispatchStatus.NO_SOLVER
        assert outcome.solver_name == ""
        assert outcome.derived_values() == {}

    def test_failed_outcome_keeps_error(self):
        """Test that failures carry the exception and a readable reason."""
        from physolver.models import DispatchOutcome, DispatchStatus
        from physolver.utils.errors import SingularGeometryError

        error = SingularGeometryError("charges coincide")
        outcome = DispatchOutcome.failed("CoulombForceSolver", "electromagnetics", error)

        assert outcome.status == DispatchStatus.FAILED
        assert outcome.error is error
        assert outcome.reason == "SingularGeometryError: charges coincide"


class TestSolverDiagnostic:
    """Tests for explain() records."""

    def test_eligible_needs_all_three(self):
        """Test that eligibility requires every filter to pass."""
        from physolver.models import SolverDiagnostic

        passing = SolverDiagnostic("A", "d", "desc", True, True, True, 50)
        failing = SolverDiagnostic("B", "d", "desc", True, True, False, 50)

        assert passing.eligible
        assert not failing.eligible
        assert failing.as_dict()["is_valid"] is False
        assert failing.as_dict()["can_handle"] is True
