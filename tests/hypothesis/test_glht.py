"""
Tests for batch hypothesis testing with glht() and joint_test().

Validates:
    - Rows of several contrast matrices concatenated in inclusion order
    - Adjustment applied across the whole batch, not per matrix
    - Degenerate rows excluded from the adjustment and flagged in output
    - summary(), to_dataframe(), adjusted()
    - Wald F-test: one-row F equals t², dependent rows rejected
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy import stats

from pyglht.core.exceptions import (
    DegenerateTestError,
    DimensionMismatchError,
    RankDeficientError,
    ValidationError,
)
from pyglht.hypothesis import (
    GLHTSolution,
    JointTestSolution,
    adjust_p_values,
    glht,
    joint_test,
    level_mean_contrasts,
    make_family,
    pairwise_contrasts,
)


# ═══════════════════════════════════════════════════════════════════════
# glht
# ═══════════════════════════════════════════════════════════════════════


class TestSingleMatrix:

    def test_matrix_input(self, three_level_model):
        result = glht(three_level_model, [[1, 0, 0], [1, 1, 0]])
        assert isinstance(result, GLHTSolution)
        assert_allclose(result.estimates, [1.0, 3.0], rtol=1e-12)
        assert result.df_residual == 6
        assert result.n_tests == 2
        assert result.names == ('C1', 'C2')

    def test_adjusted_columns(self, three_level_model):
        result = glht(three_level_model, [[1, 0, 0], [1, 1, 0]])
        assert_allclose(result.p_bonferroni, np.minimum(2 * result.p_values, 1.0))
        assert_allclose(result.p_fdr, adjust_p_values(result.p_values, 'fdr'))

    def test_rhs(self, three_level_model):
        result = glht(three_level_model, [[1, 0, 0]], rhs=[1.0])
        assert_allclose(result.estimates, [0.0], atol=1e-12)
        assert_allclose(result.p_values, [1.0])

    def test_dimension_mismatch(self, three_level_model):
        with pytest.raises(DimensionMismatchError):
            glht(three_level_model, [[1, 0]])


class TestBatch:

    def test_mapping_concatenates_in_order(self, three_level_model):
        result = glht(three_level_model, {
            'means': [[1, 0, 0], [1, 1, 0]],
            'marginal': {'l vs rest': [0, -0.5, -0.5]},
        })
        assert result.families == ('means', 'means', 'marginal')
        assert result.family_names == ('means', 'marginal')
        assert result.names == ('C1', 'C2', 'l vs rest')
        assert len(result.families) == len(result.estimates)
        assert_allclose(result.estimates, [1.0, 3.0, -3.5], rtol=1e-12)

    def test_adjusted_jointly(self, three_level_model):
        batch = glht(three_level_model, [
            level_mean_contrasts(['l', 'm', 'h']),
            pairwise_contrasts(['l', 'm', 'h']),
        ])
        assert batch.n_tests == 6
        assert_allclose(batch.p_fdr, adjust_p_values(batch.p_values, 'fdr'))

        alone = glht(three_level_model, level_mean_contrasts(['l', 'm', 'h']))
        assert_allclose(batch.p_values[:3], alone.p_values, rtol=1e-14)
        # m = 6 for the batch, m = 3 alone
        assert np.all(batch.p_bonferroni[:3] >= alone.p_bonferroni)

    def test_all_families_checked_first(self, three_level_model):
        with pytest.raises(DimensionMismatchError):
            glht(three_level_model, {'ok': np.eye(3), 'bad': [[1, 0]]})

    def test_rhs_with_several_families_rejected(self, three_level_model):
        with pytest.raises(ValidationError, match="rhs"):
            glht(three_level_model, {'a': np.eye(3), 'b': np.eye(3)}, rhs=[0, 0, 0])

    def test_empty_mapping_rejected(self, three_level_model):
        with pytest.raises(ValidationError):
            glht(three_level_model, {})


class TestDegenerateRow:

    def test_failed_row_does_not_abort_batch(self, three_level_model):
        result = glht(three_level_model, [[1, 0, 0], [0, 0, 0], [1, 1, 0]])
        assert len(result.rows) == 3
        assert isinstance(result.errors[1], DegenerateTestError)
        assert result.errors[0] is None and result.errors[2] is None
        assert np.isnan(result.p_values[1])
        assert np.isnan(result.p_fdr[1])
        assert result.n_tests == 2

    def test_failed_row_excluded_from_m(self, three_level_model):
        result = glht(three_level_model, [[1, 0, 0], [0, 0, 0], [1, 1, 0]])
        ok = result.p_values[[0, 2]]
        assert_allclose(result.p_bonferroni[[0, 2]], np.minimum(2 * ok, 1.0))

    def test_failed_row_in_warnings_and_summary(self, three_level_model):
        result = glht(three_level_model, [[1, 0, 0], [0, 0, 0]])
        assert any('standard error is 0' in w for w in result.warnings)
        assert 'undefined' in result.summary()


class TestOutput:

    def test_summary(self, three_level_model):
        result = glht(three_level_model, {'means': level_mean_contrasts(['l', 'm', 'h']).matrix})
        text = result.summary()
        assert 'Simultaneous Tests for General Linear Hypotheses' in text
        assert '[means]' in text
        assert 'Residual DF: 6' in text

    def test_to_dataframe(self, three_level_model):
        pytest.importorskip("pandas")
        result = glht(three_level_model, pairwise_contrasts(['l', 'm', 'h']))
        df = result.to_dataframe()
        assert list(df['contrast']) == ['m - l', 'h - l', 'h - m']
        assert list(df.columns[:3]) == ['family', 'contrast', 'estimate']
        assert_allclose(df['p_fdr'].to_numpy(), result.p_fdr)

    def test_adjusted_other_method(self, three_level_model):
        result = glht(three_level_model, pairwise_contrasts(['l', 'm', 'h']))
        assert_allclose(result.adjusted('holm'), adjust_p_values(result.p_values, 'holm'))

    def test_info_and_timing(self, three_level_model):
        result = glht(three_level_model, np.eye(3))
        assert result.info['adjustment'] == ('bonferroni', 'fdr')
        assert 'evaluate' in result.timing
        assert 'hypotheses=3' in repr(result)


# ═══════════════════════════════════════════════════════════════════════
# joint_test
# ═══════════════════════════════════════════════════════════════════════


class TestJointTest:

    def test_single_row_equals_t_squared(self, three_level_model):
        joint = joint_test(three_level_model, [[1, 1, 0]])
        marginal = glht(three_level_model, [[1, 1, 0]])
        assert isinstance(joint, JointTestSolution)
        assert_allclose(joint.f_value, marginal.t_statistics[0] ** 2, rtol=1e-10)
        assert_allclose(joint.p_value, marginal.p_values[0], rtol=1e-8)
        assert (joint.df_num, joint.df_den) == (1, 6)

    def test_equal_means(self, three_level_model):
        # H0: all three means equal is the one-way ANOVA F-test
        joint = joint_test(three_level_model, [[0, 1, 0], [0, 0, 1]])
        # between SS = 3 * ((1-10/3)^2 + (3-10/3)^2 + (6-10/3)^2), 2 df
        ss_between = 3 * ((1 - 10 / 3) ** 2 + (3 - 10 / 3) ** 2 + (6 - 10 / 3) ** 2)
        f_expected = (ss_between / 2) / 1.0
        assert_allclose(joint.f_value, f_expected, rtol=1e-10)
        assert_allclose(joint.p_value, stats.f.sf(f_expected, 2, 6), rtol=1e-8)

    def test_rhs(self, three_level_model):
        joint = joint_test(three_level_model, [[0, 1, 0], [0, 0, 1]], rhs=[2.0, 5.0])
        assert_allclose(joint.f_value, 0.0, atol=1e-12)
        assert_allclose(joint.p_value, 1.0)

    def test_family_input(self, three_level_model):
        family = make_family([[0, 1, 0]], name='m vs l')
        joint = joint_test(three_level_model, family)
        assert joint.df_num == 1

    def test_dependent_rows(self, three_level_model):
        with pytest.raises(RankDeficientError) as exc_info:
            joint_test(three_level_model, pairwise_contrasts(['l', 'm', 'h']))
        assert exc_info.value.rank == 2
        assert exc_info.value.expected_rank == 3

    def test_dimension_mismatch(self, three_level_model):
        with pytest.raises(DimensionMismatchError):
            joint_test(three_level_model, np.eye(2))

    def test_summary(self, three_level_model):
        text = joint_test(three_level_model, [[0, 1, 0], [0, 0, 1]]).summary()
        assert 'F = 19.0000 on 2 and 6 DF' in text
