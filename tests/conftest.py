"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def three_level_data():
    """
    Three-level factor with exact group means l=1, m=3, h=6.

    OLS gives β = [1, 2, 5], rss = 6, df = 6, σ̂² = 1.
    """
    y = np.array([0.0, 1.0, 2.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0])
    group = np.array(['l', 'l', 'l', 'm', 'm', 'm', 'h', 'h', 'h'])
    levels = ['l', 'm', 'h']
    return y, group, levels


@pytest.fixture
def three_level_model(three_level_data):
    """Fitted model of the three-level dataset."""
    from pyglht.factor import build_design_matrix
    from pyglht.regression import fit

    y, group, levels = three_level_data
    return fit(build_design_matrix(group, levels), y)


@pytest.fixture
def simple_regression_data(rng):
    """Continuous regression dataset for solver tests."""
    n, p = 100, 3
    X = np.column_stack([np.ones(n), rng.standard_normal((n, p - 1))])
    beta_true = np.array([1.0, -2.0, 0.5])
    y = X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true
