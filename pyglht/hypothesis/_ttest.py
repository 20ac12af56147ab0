"""
Marginal t-tests of contrast estimates.

Every row is tested on its own against Student's t with the residual
degrees of freedom of the one fitted model (single-step, unadjusted).
Multiplicity is handled afterwards by adjusting the raw p-values of the
whole batch.

A row with zero standard error has no defined t statistic. It gets a
DegenerateTestError attached and NaN statistics; the other rows of the
batch are unaffected.
"""

from typing import Any, Iterable

import numpy as np
from scipy import stats as sp_stats

from pyglht.core.exceptions import DegenerateTestError, ValidationError
from pyglht.core.validation import check_conf_level
from pyglht.hypothesis._common import ContrastEstimate, HypothesisResult


def _as_estimate(item: Any, i: int) -> ContrastEstimate:
    if isinstance(item, ContrastEstimate):
        return item
    if hasattr(item, 'estimate') and hasattr(item, 'standard_error'):
        return ContrastEstimate(
            name=str(getattr(item, 'name', f"C{i + 1}")),
            estimate=float(item.estimate),
            standard_error=float(item.standard_error),
        )
    try:
        estimate, se = item
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"contrast_results[{i}]: expected ContrastEstimate or "
            f"(estimate, standard_error) pair, got {item!r}"
        ) from e
    return ContrastEstimate(name=f"C{i + 1}", estimate=float(estimate), standard_error=float(se))


def test_hypotheses(
    contrast_results: Iterable[Any],
    df_residual: int,
    *,
    conf_level: float = 0.95,
) -> tuple[HypothesisResult, ...]:
    """
    Two-sided t-test of H0: c_i β = rhs_i for every contrast row.

        t = estimate / se
        p = 2 * P(T_df > |t|)

    Args:
        contrast_results: Output of evaluate_contrasts(), or
            (estimate, standard_error) pairs
        df_residual: Residual degrees of freedom of the fitted model
        conf_level: Level of the per-row confidence interval

    Returns:
        One HypothesisResult per input row, in input order. Rows with
        zero standard error carry `error` and NaN statistics.

    Raises:
        ValidationError: If df_residual < 1 or conf_level is outside (0, 1)
    """
    if int(df_residual) != df_residual or df_residual < 1:
        raise ValidationError(
            f"df_residual: must be a positive integer, got {df_residual}"
        )
    df_residual = int(df_residual)
    check_conf_level(conf_level)

    t_crit = float(sp_stats.t.ppf(1.0 - (1.0 - conf_level) / 2.0, df_residual))

    results = []
    for i, item in enumerate(contrast_results):
        row = _as_estimate(item, i)
        est, se = row.estimate, row.standard_error

        if se == 0.0:
            error = DegenerateTestError(
                f"row {i} ({row.name}): standard error is 0 "
                f"(estimate={est:g}, SE=0); the t-test is undefined",
                row=i,
                estimate=est,
                standard_error=se,
                name=row.name,
            )
            results.append(HypothesisResult(
                name=row.name,
                estimate=est,
                standard_error=se,
                t_statistic=np.nan,
                p_value=np.nan,
                ci_lower=np.nan,
                ci_upper=np.nan,
                df=df_residual,
                error=error,
            ))
            continue

        t_stat = est / se
        p_value = min(2.0 * float(sp_stats.t.sf(abs(t_stat), df_residual)), 1.0)
        margin = t_crit * se

        results.append(HypothesisResult(
            name=row.name,
            estimate=est,
            standard_error=se,
            t_statistic=float(t_stat),
            p_value=p_value,
            ci_lower=est - margin,
            ci_upper=est + margin,
            df=df_residual,
        ))

    return tuple(results)


# Library function, not a pytest test
test_hypotheses.__test__ = False
