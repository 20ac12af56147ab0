"""
User-facing solution types for general linear hypotheses.

Each solution wraps a Result[Params] and provides accessors and an
R-style summary table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyglht.core.result import Result
from pyglht.hypothesis._common import AdjustedHypothesisResult, GLHTParams, JointTestParams
from pyglht.hypothesis._p_adjust import adjust_p_values

if TYPE_CHECKING:
    import pandas as pd


def _significance_stars(p: float) -> str:
    if np.isnan(p):
        return ""
    if p < 0.001:
        return "***"
    if p < 0.01:
        return "**"
    if p < 0.05:
        return "*"
    if p < 0.1:
        return "."
    return ""


# =====================================================================
# GLHTSolution  (batch of marginal tests + joint adjustment)
# =====================================================================


@dataclass
class GLHTSolution:
    """
    Adjusted result table for a batch of contrast rows.

    Produced by glht(). Row order follows the order in which contrast
    families and their rows were supplied.
    """
    _result: Result[GLHTParams]

    @property
    def rows(self) -> tuple[AdjustedHypothesisResult, ...]:
        return self._result.params.rows

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(r.name for r in self.rows)

    @property
    def families(self) -> tuple[str | None, ...]:
        """Family label of each row."""
        return tuple(r.family for r in self.rows)

    @property
    def family_names(self) -> tuple[str | None, ...]:
        """One label per contrast family, in inclusion order."""
        return self._result.params.families

    @property
    def estimates(self) -> NDArray[np.floating[Any]]:
        return np.array([r.estimate for r in self.rows], dtype=np.float64)

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        return np.array([r.standard_error for r in self.rows], dtype=np.float64)

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        return np.array([r.t_statistic for r in self.rows], dtype=np.float64)

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Raw (unadjusted) two-sided p-values."""
        return np.array([r.p_value for r in self.rows], dtype=np.float64)

    @property
    def p_bonferroni(self) -> NDArray[np.floating[Any]]:
        return np.array([r.p_bonferroni for r in self.rows], dtype=np.float64)

    @property
    def p_fdr(self) -> NDArray[np.floating[Any]]:
        return np.array([r.p_fdr for r in self.rows], dtype=np.float64)

    @property
    def errors(self) -> tuple[Any, ...]:
        """Per-row DegenerateTestError, or None for rows that were tested."""
        return tuple(r.error for r in self.rows)

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def n_tests(self) -> int:
        return self._result.params.n_tests

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def adjusted(self, method: str) -> NDArray[np.floating[Any]]:
        """Raw p-values of the whole batch adjusted with any supported method."""
        return adjust_p_values(self.p_values, method)

    def to_dataframe(self) -> 'pd.DataFrame':
        """Result table as a pandas DataFrame (requires pandas)."""
        import pandas as pd

        return pd.DataFrame({
            'family': [r.family for r in self.rows],
            'contrast': [r.name for r in self.rows],
            'estimate': self.estimates,
            'std_error': self.standard_errors,
            't_value': self.t_statistics,
            'p_value': self.p_values,
            'p_bonferroni': self.p_bonferroni,
            'p_fdr': self.p_fdr,
            'ci_lower': [r.ci_lower for r in self.rows],
            'ci_upper': [r.ci_upper for r in self.rows],
            'error': [None if r.error is None else str(r.error) for r in self.rows],
        })

    def summary(self) -> str:
        """Generate the adjusted result table."""
        width = 100
        lines = [
            "Simultaneous Tests for General Linear Hypotheses",
            "=" * width,
            f"Hypotheses: {len(self.rows)} ({self.n_tests} tested)",
            f"Residual DF: {self.df_residual}",
            "",
            f"{'Contrast':<24} {'Estimate':>12} {'Std.Error':>11} {'t value':>9} "
            f"{'Pr(>|t|)':>11} {'Bonferroni':>11} {'FDR':>11}",
            "-" * width,
        ]

        current_family: Any = object()
        for row in self.rows:
            if row.family != current_family and row.family is not None:
                lines.append(f"[{row.family}]")
            current_family = row.family

            label = row.name if len(row.name) <= 24 else row.name[:21] + "..."
            if row.ok:
                lines.append(
                    f"{label:<24} {row.estimate:>12.4f} {row.standard_error:>11.4f} "
                    f"{row.t_statistic:>9.3f} {row.p_value:>11.4e} "
                    f"{row.p_bonferroni:>11.4e} {row.p_fdr:>11.4e} "
                    f"{_significance_stars(row.p_fdr)}"
                )
            else:
                lines.append(
                    f"{label:<24} {row.estimate:>12.4f} {row.standard_error:>11.4f} "
                    f"{'undefined':>9}"
                )

        lines.append("-" * width)
        lines.append("Signif. codes (FDR): 0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1")
        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"GLHTSolution(hypotheses={len(self.rows)}, tested={self.n_tests}, "
            f"df_residual={self.df_residual})"
        )


# =====================================================================
# JointTestSolution  (Wald F-test of C β = rhs)
# =====================================================================


@dataclass
class JointTestSolution:
    """User-facing result of joint_test()."""
    _result: Result[JointTestParams]

    @property
    def f_value(self) -> float:
        return self._result.params.f_value

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def df_num(self) -> int:
        return self._result.params.df_num

    @property
    def df_den(self) -> int:
        return self._result.params.df_den

    @property
    def estimates(self) -> NDArray[np.floating[Any]]:
        return self._result.params.estimates

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    def summary(self) -> str:
        return "\n".join([
            "Global Test (Wald F)",
            "=" * 50,
            f"F = {self.f_value:.4f} on {self.df_num} and {self.df_den} DF",
            f"p-value = {self.p_value:.4e} {_significance_stars(self.p_value)}",
        ])

    def __repr__(self) -> str:
        return (
            f"JointTestSolution(F={self.f_value:.4f}, df=({self.df_num}, {self.df_den}), "
            f"p={self.p_value:.4g})"
        )
