"""
Tests for contrast evaluation.

Validates:
    - Identity rows reproduce β_i and sqrt(Cov_ii)
    - Three-level example estimates and standard errors
    - DimensionMismatchError diagnostics
    - rhs offsets and row naming
    - Negative variance clamping with RuntimeWarning
    - Contrast builders for one treatment-coded factor
"""

import warnings
from dataclasses import dataclass

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pyglht.core.exceptions import DimensionMismatchError, ValidationError
from pyglht.factor import FactorLevels
from pyglht.hypothesis import (
    ContrastEstimate,
    evaluate_contrasts,
    level_mean_contrasts,
    make_family,
    pairwise_contrasts,
    treatment_contrasts,
)


@dataclass
class FakeModel:
    """Minimal fitted-model stand-in with a chosen covariance."""
    coefficients: np.ndarray
    covariance: np.ndarray
    df_residual: int = 10


# ═══════════════════════════════════════════════════════════════════════
# evaluate_contrasts
# ═══════════════════════════════════════════════════════════════════════


class TestEvaluateContrasts:

    def test_identity_reproduces_coefficients(self, simple_regression_data):
        from pyglht.regression import fit

        X, y, _ = simple_regression_data
        model = fit(X, y)
        rows = evaluate_contrasts(model, np.eye(3))
        assert_allclose([r.estimate for r in rows], model.coefficients, rtol=1e-14)
        assert_allclose(
            [r.standard_error for r in rows],
            np.sqrt(np.diag(model.covariance)),
            rtol=1e-14,
        )

    def test_three_level_means(self, three_level_model):
        rows = evaluate_contrasts(three_level_model, [[1, 0, 0], [1, 1, 0]])
        assert len(rows) == 2
        assert_allclose(rows[0].estimate, 1.0, rtol=1e-12)
        assert_allclose(rows[1].estimate, 3.0, rtol=1e-12)
        assert_allclose(rows[0].standard_error, np.sqrt(1 / 3), rtol=1e-10)
        assert_allclose(rows[1].standard_error, np.sqrt(1 / 3), rtol=1e-10)

    def test_marginal_contrast(self, three_level_model):
        # mean(l) - (mean(m) + mean(h)) / 2 = 1 - 4.5
        (row,) = evaluate_contrasts(three_level_model, [0, -0.5, -0.5])
        assert_allclose(row.estimate, -3.5, rtol=1e-12)
        # 0.25 * (2/3 + 2/3 + 2 * 1/3)
        assert_allclose(row.standard_error, np.sqrt(0.5), rtol=1e-10)

    def test_single_row_input(self, three_level_model):
        rows = evaluate_contrasts(three_level_model, [0, 1, 0])
        assert len(rows) == 1
        assert isinstance(rows[0], ContrastEstimate)

    def test_default_names(self, three_level_model):
        rows = evaluate_contrasts(three_level_model, np.eye(3))
        assert [r.name for r in rows] == ['C1', 'C2', 'C3']

    def test_explicit_names(self, three_level_model):
        rows = evaluate_contrasts(three_level_model, np.eye(3)[:2], names=['a', 'b'])
        assert [r.name for r in rows] == ['a', 'b']

    def test_mapping_rows(self, three_level_model):
        rows = evaluate_contrasts(three_level_model, {'l': [1, 0, 0], 'h': [1, 0, 1]})
        assert [r.name for r in rows] == ['l', 'h']
        assert_allclose(rows[1].estimate, 6.0, rtol=1e-12)

    def test_rhs_offset(self, three_level_model):
        rows = evaluate_contrasts(three_level_model, [[1, 0, 0], [1, 1, 0]], rhs=[1.0, 2.0])
        assert_allclose([r.estimate for r in rows], [0.0, 1.0], atol=1e-12)
        assert [r.rhs for r in rows] == [1.0, 2.0]

    def test_zero_row_has_zero_se(self, three_level_model):
        (row,) = evaluate_contrasts(three_level_model, [0, 0, 0])
        assert row.estimate == 0.0
        assert row.standard_error == 0.0
        assert not row.clamped


class TestDimensionMismatch:

    def test_too_few_columns(self, three_level_model):
        with pytest.raises(DimensionMismatchError) as exc_info:
            evaluate_contrasts(three_level_model, [[1, 0]])
        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2

    def test_too_many_columns(self, three_level_model):
        with pytest.raises(DimensionMismatchError) as exc_info:
            evaluate_contrasts(three_level_model, np.eye(4))
        assert exc_info.value.actual == 4


class TestClamping:

    def test_negative_variance_clamped_with_warning(self):
        model = FakeModel(
            coefficients=np.array([1.0, 2.0]),
            covariance=np.array([[1.0, 0.0], [0.0, -1e-12]]),
        )
        with pytest.warns(RuntimeWarning, match="clamped"):
            rows = evaluate_contrasts(model, np.eye(2))
        assert rows[0].standard_error == 1.0
        assert not rows[0].clamped
        assert rows[1].standard_error == 0.0
        assert rows[1].clamped

    def test_no_warning_for_psd(self, three_level_model):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            evaluate_contrasts(three_level_model, np.eye(3))


class TestMakeFamily:

    def test_empty_rejected(self):
        with pytest.raises(ValidationError):
            make_family(np.zeros((0, 3)))

    def test_rhs_length(self):
        with pytest.raises(ValidationError, match="rhs"):
            make_family(np.eye(3), rhs=[0.0, 1.0])

    def test_row_names_length(self):
        with pytest.raises(ValidationError, match="row_names"):
            make_family(np.eye(3), row_names=['a'])

    def test_non_finite_rejected(self):
        with pytest.raises(ValidationError):
            make_family([[1.0, np.inf, 0.0]])

    def test_family_passthrough(self):
        family = make_family(np.eye(2), name='id')
        assert make_family(family) is family


# ═══════════════════════════════════════════════════════════════════════
# Contrast builders
# ═══════════════════════════════════════════════════════════════════════


class TestBuilders:

    def test_level_means(self):
        family = level_mean_contrasts(['l', 'm', 'h'])
        np.testing.assert_array_equal(family.matrix, [[1, 0, 0], [1, 1, 0], [1, 0, 1]])
        assert family.row_names == ('l', 'm', 'h')
        assert family.name == 'means'

    def test_level_means_estimates(self, three_level_model):
        rows = evaluate_contrasts(three_level_model, level_mean_contrasts(three_level_model.levels))
        assert_allclose([r.estimate for r in rows], [1.0, 3.0, 6.0], rtol=1e-12)

    def test_treatment(self):
        family = treatment_contrasts(FactorLevels(('l', 'm', 'h')))
        np.testing.assert_array_equal(family.matrix, [[0, 1, 0], [0, 0, 1]])
        assert family.row_names == ('m - l', 'h - l')

    def test_pairwise(self):
        family = pairwise_contrasts(['l', 'm', 'h'])
        np.testing.assert_array_equal(
            family.matrix, [[0, 1, 0], [0, 0, 1], [0, -1, 1]],
        )
        assert family.row_names == ('m - l', 'h - l', 'h - m')

    def test_pairwise_estimates(self, three_level_model):
        rows = evaluate_contrasts(three_level_model, pairwise_contrasts(['l', 'm', 'h']))
        assert_allclose([r.estimate for r in rows], [2.0, 5.0, 3.0], rtol=1e-12)

    def test_single_level_rejected(self):
        with pytest.raises(ValidationError):
            pairwise_contrasts(['a'])
        with pytest.raises(ValidationError):
            treatment_contrasts(['a'])
