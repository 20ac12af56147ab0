"""
pyglht: general linear hypotheses for one-factor linear models.

Dummy-code a categorical predictor, fit the model by least squares, test
arbitrary linear combinations of its coefficients, and adjust the
resulting p-values for multiple comparisons.

Submodules:
    factor: Level sets and treatment-coded design matrices
    regression: OLS fit with coefficient covariance
    hypothesis: Contrast evaluation, t-tests, p-value adjustment, joint F-test
    simulation: Seeded one-factor normal data

Example:
    >>> from pyglht import build_design_matrix, fit, glht
    >>> dm = build_design_matrix(group, ['l', 'm', 'h'])
    >>> model = fit(dm, y)
    >>> print(glht(model, [[1, 0, 0], [1, 1, 0]]).summary())
"""

__version__ = "0.1.0"

from pyglht import factor
from pyglht import regression
from pyglht import hypothesis
from pyglht.core import DataSource
from pyglht.factor import FactorLevels, build_design_matrix
from pyglht.regression import ModelSpec, fit, fit_model
from pyglht.hypothesis import (
    adjust_p_values,
    evaluate_contrasts,
    glht,
    joint_test,
    test_hypotheses,
)
from pyglht.simulation import simulate_one_factor

__all__ = [
    "__version__",
    "factor",
    "regression",
    "hypothesis",
    "DataSource",
    "FactorLevels",
    "ModelSpec",
    "build_design_matrix",
    "fit",
    "fit_model",
    "evaluate_contrasts",
    "test_hypotheses",
    "adjust_p_values",
    "glht",
    "joint_test",
    "simulate_one_factor",
]
