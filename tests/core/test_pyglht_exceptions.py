"""
Tests for the pyglht exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyglhtError)
    - Diagnostic attributes on the domain errors
    - Default attribute values (None for optional attributes)
"""

import pytest

from pyglht.core.exceptions import (
    DegenerateTestError,
    DimensionError,
    DimensionMismatchError,
    NumericalError,
    PyglhtError,
    RankDeficientError,
    SingularMatrixError,
    UnknownLevelError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyglhtError."""

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_unknown_level_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise UnknownLevelError("bad", index=0, label='x', levels=['a'])

    def test_dimension_mismatch_is_dimension_error(self):
        with pytest.raises(DimensionError):
            raise DimensionMismatchError("bad", expected=3, actual=2)

    def test_rank_deficient_is_singular_matrix_error(self):
        with pytest.raises(SingularMatrixError):
            raise RankDeficientError("bad")

    def test_rank_deficient_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise RankDeficientError("bad")

    def test_degenerate_test_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise DegenerateTestError("bad", row=0, estimate=0.0, standard_error=0.0)

    @pytest.mark.parametrize("exc", [
        ValidationError("x"),
        NumericalError("x"),
        UnknownLevelError("x", index=None, label='q', levels=['a']),
        DimensionMismatchError("x", expected=1, actual=2),
        RankDeficientError("x"),
        DegenerateTestError("x", row=1, estimate=1.0, standard_error=0.0),
    ])
    def test_all_are_pyglht_errors(self, exc):
        assert isinstance(exc, PyglhtError)
        assert isinstance(exc, Exception)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestAttributes:

    def test_unknown_level_attributes(self):
        e = UnknownLevelError("msg", index=4, label='q', levels=['l', 'm'])
        assert e.index == 4
        assert e.label == 'q'
        assert e.levels == ('l', 'm')
        assert str(e) == "msg"

    def test_rank_deficient_attributes(self):
        e = RankDeficientError(
            "msg", matrix_name='X', rank=2, expected_rank=3,
            n_observations=6, n_parameters=3,
        )
        assert e.matrix_name == 'X'
        assert e.rank == 2
        assert e.expected_rank == 3
        assert e.n_observations == 6
        assert e.n_parameters == 3

    def test_rank_deficient_defaults(self):
        e = RankDeficientError("msg")
        assert e.matrix_name is None
        assert e.rank is None
        assert e.expected_rank is None
        assert e.n_observations is None
        assert e.n_parameters is None

    def test_dimension_mismatch_attributes(self):
        e = DimensionMismatchError("msg", expected=3, actual=2)
        assert e.expected == 3
        assert e.actual == 2

    def test_degenerate_test_attributes(self):
        e = DegenerateTestError("msg", row=2, estimate=0.5, standard_error=0.0, name='C3')
        assert e.row == 2
        assert e.name == 'C3'
        assert e.estimate == 0.5
        assert e.standard_error == 0.0

    def test_degenerate_test_name_default(self):
        e = DegenerateTestError("msg", row=0, estimate=0.0, standard_error=0.0)
        assert e.name is None
