"""
Ordinary least squares for dummy-coded designs.

Public API:
    fit(X, y) -> LinearSolution
    fit_model(data, spec) -> LinearSolution

Example:
    >>> from pyglht.regression import fit
    >>> result = fit(X, y)
    >>> result.coefficients, result.covariance, result.df_residual
"""

from pyglht.regression.design import ModelSpec, RegressionDesign
from pyglht.regression.solution import LinearSolution, LinearParams
from pyglht.regression.solvers import fit, fit_model

__all__ = [
    "fit",
    "fit_model",
    "ModelSpec",
    "RegressionDesign",
    "LinearSolution",
    "LinearParams",
]
