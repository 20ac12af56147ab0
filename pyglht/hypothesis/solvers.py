"""
General linear hypothesis dispatch.

Public API:
    glht(model, contrasts, ...) -> GLHTSolution
    joint_test(model, contrast_matrix, ...) -> JointTestSolution
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Union

import numpy as np
from numpy.typing import ArrayLike

from pyglht.core.result import Result
from pyglht.core.compute.timing import Timer
from pyglht.core.exceptions import ValidationError
from pyglht.core.validation import check_conf_level
from pyglht.hypothesis._common import (
    AdjustedHypothesisResult,
    ContrastFamily,
    GLHTParams,
)
from pyglht.hypothesis._contrasts import (
    FittedModel,
    check_contrast_columns,
    evaluate_contrasts,
    make_family,
)
from pyglht.hypothesis._joint import wald_f_test
from pyglht.hypothesis._p_adjust import adjust_p_values
from pyglht.hypothesis._ttest import test_hypotheses
from pyglht.hypothesis.solution import GLHTSolution, JointTestSolution


ContrastInput = Union[
    ArrayLike,
    ContrastFamily,
    Mapping[str, Any],
    Sequence[ContrastFamily],
]


def _normalise_families(
    contrasts: ContrastInput,
    rhs: ArrayLike | None,
) -> list[ContrastFamily]:
    if isinstance(contrasts, ContrastFamily):
        families = [contrasts]
    elif isinstance(contrasts, Mapping):
        families = [make_family(m, name=str(name)) for name, m in contrasts.items()]
    elif (
        isinstance(contrasts, (list, tuple))
        and len(contrasts) > 0
        and all(isinstance(c, ContrastFamily) for c in contrasts)
    ):
        families = list(contrasts)
    else:
        families = [make_family(contrasts)]

    if not families:
        raise ValidationError("contrasts: no contrast matrices given")

    if rhs is not None:
        if len(families) != 1:
            raise ValidationError(
                "rhs: only valid with a single contrast matrix; set rhs on "
                "each ContrastFamily instead"
            )
        f = families[0]
        families = [make_family(f.matrix, name=f.name, rhs=rhs, row_names=f.row_names)]

    return families


def _model_df(model: FittedModel) -> int:
    df = getattr(model, 'df_residual', None)
    if df is None:
        raise ValidationError(
            "model: must expose df_residual (fit it with pyglht.regression.fit)"
        )
    return int(df)


def glht(
    model: FittedModel,
    contrasts: ContrastInput,
    *,
    rhs: ArrayLike | None = None,
    conf_level: float = 0.95,
) -> GLHTSolution:
    """
    Test a batch of general linear hypotheses and adjust them jointly.

    Every row of every contrast matrix is evaluated against the one
    fitted model and t-tested marginally. The raw p-values of the whole
    concatenated batch are then adjusted together with Bonferroni (FWER)
    and Benjamini-Hochberg (FDR).

    Args:
        model: Fitted model (LinearSolution)
        contrasts: A single (k, p) matrix or row, a ContrastFamily, a
            sequence of ContrastFamily, or a mapping
            {family_name: matrix or {row_name: row}}
        rhs: Hypothesised values for a single contrast matrix
        conf_level: Level of the per-row confidence intervals

    Returns:
        GLHTSolution with one row per contrast row, in inclusion order

    Raises:
        DimensionMismatchError: If any matrix has the wrong column count
            (checked for all families before any row is tested)
        ValidationError: On malformed contrasts or arguments

    Example:
        >>> from pyglht.hypothesis import glht, level_mean_contrasts
        >>> result = glht(model, {
        ...     'means': [[1, 0, 0], [1, 1, 0]],
        ...     'marginal': {'l vs rest': [0, -0.5, -0.5]},
        ... })
        >>> print(result.summary())
    """
    check_conf_level(conf_level)
    families = _normalise_families(contrasts, rhs)
    df_residual = _model_df(model)
    p = np.asarray(model.coefficients).shape[0]

    for family in families:
        check_contrast_columns(family, p)

    timer = Timer()
    timer.start()

    tested: list[tuple[str | None, Any]] = []
    clamped_rows: list[str] = []
    with timer.section('evaluate'):
        for family in families:
            estimates = evaluate_contrasts(model, family)
            clamped_rows.extend(e.name for e in estimates if e.clamped)
            for row in test_hypotheses(estimates, df_residual, conf_level=conf_level):
                tested.append((family.name, row))

    with timer.section('adjust'):
        raw = np.array([row.p_value for _, row in tested], dtype=np.float64)
        p_bonf = adjust_p_values(raw, 'bonferroni')
        p_fdr = adjust_p_values(raw, 'fdr')

    timer.stop()

    rows = tuple(
        AdjustedHypothesisResult(
            family=family_name,
            name=row.name,
            estimate=row.estimate,
            standard_error=row.standard_error,
            t_statistic=row.t_statistic,
            p_value=row.p_value,
            p_bonferroni=float(p_bonf[i]),
            p_fdr=float(p_fdr[i]),
            ci_lower=row.ci_lower,
            ci_upper=row.ci_upper,
            error=row.error,
        )
        for i, (family_name, row) in enumerate(tested)
    )

    warnings_list = []
    if clamped_rows:
        warnings_list.append(
            f"negative contrast variance clamped to 0 for rows {clamped_rows}"
        )
    for r in rows:
        if r.error is not None:
            warnings_list.append(str(r.error))

    params = GLHTParams(
        rows=rows,
        df_residual=df_residual,
        conf_level=conf_level,
        n_tests=int(np.sum(~np.isnan(raw))),
        families=tuple(f.name for f in families),
    )

    result = Result(
        params=params,
        info={
            'method': 'single-step t',
            'adjustment': ('bonferroni', 'fdr'),
            'n_families': len(families),
        },
        timing=timer.result(),
        backend_name='cpu',
        warnings=tuple(warnings_list),
    )

    return GLHTSolution(_result=result)


def joint_test(
    model: FittedModel,
    contrast_matrix: ArrayLike | ContrastFamily | Mapping[str, Any],
    *,
    rhs: ArrayLike | None = None,
) -> JointTestSolution:
    """
    Joint Wald F-test of H0: C β = rhs across all rows of one matrix.

    Complements the marginal per-row tests of glht(): one p-value for
    the whole matrix, using the same residual variance and df.

    Raises:
        DimensionMismatchError: If C has the wrong column count
        RankDeficientError: If the rows of C are linearly dependent
    """
    if isinstance(contrast_matrix, ContrastFamily):
        family = contrast_matrix
        if rhs is not None:
            family = make_family(family.matrix, name=family.name, rhs=rhs,
                                 row_names=family.row_names)
    else:
        family = make_family(contrast_matrix, rhs=rhs)

    beta = np.asarray(model.coefficients, dtype=np.float64)
    cov = np.asarray(model.covariance, dtype=np.float64)
    check_contrast_columns(family, beta.shape[0])

    df_residual = _model_df(model)

    timer = Timer()
    timer.start()
    with timer.section('wald'):
        params = wald_f_test(beta, cov, family, df_residual)
    timer.stop()

    result = Result(
        params=params,
        info={'method': 'wald_f', 'rows': family.row_names},
        timing=timer.result(),
        backend_name='cpu',
    )
    return JointTestSolution(_result=result)
