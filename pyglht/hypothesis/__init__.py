"""
General linear hypotheses on a fitted linear model.

Public API:
    evaluate_contrasts(model, C)      - estimates and standard errors of C β
    test_hypotheses(estimates, df)    - marginal two-sided t-tests per row
    adjust_p_values(p, method)        - Bonferroni / BH (fdr) / Holm / BY
    glht(model, contrasts)            - all of the above over a batch,
                                        adjusted jointly
    joint_test(model, C)              - Wald F-test of C β = rhs

Contrast builders:
    level_mean_contrasts(levels)
    treatment_contrasts(levels)
    pairwise_contrasts(levels)
"""

from pyglht.hypothesis._common import (
    ContrastFamily,
    ContrastEstimate,
    HypothesisResult,
    AdjustedHypothesisResult,
)
from pyglht.hypothesis._contrasts import (
    evaluate_contrasts,
    make_family,
    level_mean_contrasts,
    treatment_contrasts,
    pairwise_contrasts,
)
from pyglht.hypothesis._ttest import test_hypotheses
from pyglht.hypothesis._p_adjust import adjust_p_values
from pyglht.hypothesis.solvers import glht, joint_test
from pyglht.hypothesis.solution import GLHTSolution, JointTestSolution

__all__ = [
    "evaluate_contrasts",
    "test_hypotheses",
    "adjust_p_values",
    "glht",
    "joint_test",
    "make_family",
    "level_mean_contrasts",
    "treatment_contrasts",
    "pairwise_contrasts",
    "ContrastFamily",
    "ContrastEstimate",
    "HypothesisResult",
    "AdjustedHypothesisResult",
    "GLHTSolution",
    "JointTestSolution",
]
