"""
Common data types for general linear hypotheses.

Frozen payloads only; computation lives in the sibling modules.
"""

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyglht.core.exceptions import DegenerateTestError


@dataclass(frozen=True)
class ContrastFamily:
    """
    A named contrast matrix: one row per hypothesis c_i β = rhs_i.

    Attributes:
        name: Family label carried into the result table
        matrix: (k, p) contrast matrix
        row_names: One name per row
        rhs: (k,) hypothesised values, zeros by default
    """
    name: str | None
    matrix: NDArray[np.floating[Any]]
    row_names: tuple[str, ...]
    rhs: NDArray[np.floating[Any]]

    @property
    def k(self) -> int:
        return self.matrix.shape[0]


@dataclass(frozen=True)
class ContrastEstimate:
    """Linear-combination estimate c β - rhs and its standard error."""
    name: str
    estimate: float
    standard_error: float
    rhs: float = 0.0
    clamped: bool = False       # negative variance was clamped to 0


@dataclass(frozen=True)
class HypothesisResult:
    """
    Marginal t-test of one contrast row.

    t_statistic, p_value and the interval are NaN when `error` is set.
    """
    name: str
    estimate: float
    standard_error: float
    t_statistic: float
    p_value: float
    ci_lower: float
    ci_upper: float
    df: int
    error: DegenerateTestError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AdjustedHypothesisResult:
    """One row of the adjusted result table."""
    family: str | None
    name: str
    estimate: float
    standard_error: float
    t_statistic: float
    p_value: float
    p_bonferroni: float
    p_fdr: float
    ci_lower: float
    ci_upper: float
    error: DegenerateTestError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class GLHTParams:
    """Parameter payload for a batch of general linear hypotheses."""
    rows: tuple[AdjustedHypothesisResult, ...]
    df_residual: int
    conf_level: float
    n_tests: int                     # rows entering the adjustment
    families: tuple[str | None, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class JointTestParams:
    """Parameter payload for the Wald F-test of C β = rhs."""
    f_value: float
    p_value: float
    df_num: int
    df_den: int
    estimates: NDArray[np.floating[Any]]
