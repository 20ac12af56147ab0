"""
Fitted linear model.

LinearParams is what the backend computes; LinearSolution is what users
hold. The solution is also the model object consumed by contrast
evaluation: anything downstream only needs `coefficients`, `covariance`
and `df_residual`.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyglht.core.result import Result
from pyglht.factor import FactorLevels
from pyglht.regression.design import RegressionDesign


@dataclass(frozen=True)
class LinearParams:
    """
    OLS payload.

    Attributes:
        coefficients: β̂ (p,)
        covariance: σ̂² (X'X)⁻¹ (p, p), exactly symmetric
        residuals: y - Xβ̂ (n,)
        fitted_values: Xβ̂ (n,)
        rss: Residual sum of squares r'r
        tss: Total sum of squares around the mean of y
        residual_variance: σ̂² = rss / df_residual
        rank: Numerical rank of X (equals p for any successful fit)
        df_residual: n - p
    """
    coefficients: NDArray[np.floating[Any]]
    covariance: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    tss: float
    residual_variance: float
    rank: int
    df_residual: int


@dataclass
class LinearSolution:
    """Result of fit() / fit_model()."""
    _result: Result[LinearParams]
    _design: RegressionDesign

    # --- payload ---

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def covariance(self) -> NDArray[np.floating[Any]]:
        return self._result.params.covariance

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def residual_variance(self) -> float:
        return self._result.params.residual_variance

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    # --- derived ---

    @property
    def residual_std_error(self) -> float:
        return float(np.sqrt(self.residual_variance))

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        return np.sqrt(np.diag(self.covariance))

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        """β̂_j / SE_j, NaN for a zero standard error."""
        se = self.standard_errors
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / se
        t[~np.isfinite(t)] = np.nan
        return t

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values for H0: β_j = 0."""
        return 2.0 * sp_stats.t.sf(np.abs(self.t_statistics), self.df_residual)

    @property
    def r_squared(self) -> float:
        # constant y: a perfect fit explains everything, otherwise nothing
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - self.rss / self.tss

    @property
    def adjusted_r_squared(self) -> float:
        if self.tss == 0:
            return self.r_squared
        n = self._design.n
        return 1.0 - (1.0 - self.r_squared) * (n - 1) / self.df_residual

    # --- design and provenance ---

    @property
    def n_observations(self) -> int:
        return self._design.n

    @property
    def column_names(self) -> tuple[str, ...]:
        return self._design.column_names

    @property
    def levels(self) -> FactorLevels | None:
        """Level set of the coded factor; None when fitted from a raw matrix."""
        dm = self._design.design_matrix
        return None if dm is None else dm.levels

    @property
    def design(self) -> RegressionDesign:
        return self._design

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Coefficient table in the layout of R's summary.lm()."""
        header = f"{'':<20} {'Estimate':>14} {'Std.Error':>12} {'t value':>10} {'Pr(>|t|)':>12}"
        lines = [
            "Linear Model Fit (OLS)",
            "=" * 72,
            f"Observations: {self.n_observations}, coefficients: {len(self.coefficients)}",
            "",
            header,
            "-" * 72,
        ]
        for name, b, se, t, p in zip(
            self.column_names, self.coefficients, self.standard_errors,
            self.t_statistics, self.p_values,
        ):
            t_str = "NA" if np.isnan(t) else f"{t:.3f}"
            p_str = "NA" if np.isnan(p) else f"{p:.4e}"
            lines.append(f"{name:<20} {b:14.6f} {se:12.6f} {t_str:>10} {p_str:>12}")
        lines += [
            "-" * 72,
            f"Residual standard error: {self.residual_std_error:.6f} on {self.df_residual} DF",
            f"R-squared: {self.r_squared:.6f}, adjusted: {self.adjusted_r_squared:.6f}",
        ]
        if self.timing:
            lines.append(f"[{self.backend_name}, {self.timing['total_seconds']:.4f}s]")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self.n_observations}, p={len(self.coefficients)}, "
            f"df_residual={self.df_residual}, r_squared={self.r_squared:.4f})"
        )
