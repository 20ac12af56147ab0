"""
Solver dispatch for regression.

This module provides the fit() and fit_model() functions (public API).
"""

from typing import Any, Mapping

from pyglht.core.datasource import DataSource
from pyglht.regression.design import ModelSpec, RegressionDesign
from pyglht.regression.solution import LinearSolution
from pyglht.regression.backends.cpu import CPUQRBackend


def fit(
    X: Any,
    y: Any,
) -> LinearSolution:
    """
    Fit a linear model by ordinary least squares.

    Solves:
        min_β ||y - Xβ||²

    and estimates the residual variance σ̂² = r'r / (n - p) and the
    coefficient covariance σ̂² (X'X)⁻¹.

    Args:
        X: Design matrix (n x p), array-like or DesignMatrix
        y: Response vector (n,)

    Returns:
        LinearSolution with coefficients, covariance and df_residual

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If X and y have inconsistent dimensions
        RankDeficientError: If n <= p or X is not full column rank

    Example:
        >>> from pyglht.factor import build_design_matrix
        >>> from pyglht.regression import fit
        >>> dm = build_design_matrix(group, ['l', 'm', 'h'])
        >>> result = fit(dm, y)
        >>> print(result.summary())
    """
    # This is the boundary - validate here, trust everywhere else
    design = RegressionDesign.build(X, y)
    return _solve(design)


def fit_model(
    data: DataSource | Mapping[str, Any],
    spec: ModelSpec,
) -> LinearSolution:
    """
    Fit outcome ~ factor from named columns.

    Args:
        data: DataSource, mapping of column name -> values, or DataFrame
        spec: Outcome, predictor and reference-level description

    Returns:
        LinearSolution whose column names follow the dummy coding

    Example:
        >>> ds = DataSource.from_arrays(y=y, group=group)
        >>> result = fit_model(ds, ModelSpec('y', ['group'], {'group': 'l'}))
    """
    design = RegressionDesign.from_datasource(data, spec)
    return _solve(design)


def _solve(design: RegressionDesign) -> LinearSolution:
    result = CPUQRBackend().solve(design)
    return LinearSolution(_result=result, _design=design)
