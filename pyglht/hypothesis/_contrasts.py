"""
Contrast matrices and their evaluation against a fitted model.

For each row c_i of a contrast matrix C (k x p):

    estimate_i = c_i β - rhs_i
    variance_i = c_i Cov(β) c_iᵀ
    se_i       = sqrt(variance_i)

Variances that come out negative (ill-conditioned covariance) are
clamped to zero and reported with a RuntimeWarning instead of turning
into NaN standard errors.

Also provides builders for the usual one-factor families under
treatment coding: level means, each level vs the reference, and all
pairwise differences.
"""

from __future__ import annotations

import warnings
from itertools import combinations
from typing import Any, Iterable, Mapping, Protocol, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyglht.core.exceptions import DimensionMismatchError, ValidationError
from pyglht.core.validation import check_array, check_finite, check_2d
from pyglht.factor import FactorLevels
from pyglht.hypothesis._common import ContrastEstimate, ContrastFamily


class FittedModel(Protocol):
    """Anything exposing a coefficient vector and its covariance."""

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]: ...

    @property
    def covariance(self) -> NDArray[np.floating[Any]]: ...


def make_family(
    contrasts: ArrayLike | Mapping[str, ArrayLike],
    *,
    name: str | None = None,
    rhs: ArrayLike | None = None,
    row_names: Sequence[str] | None = None,
) -> ContrastFamily:
    """
    Normalise a contrast specification into a ContrastFamily.

    Args:
        contrasts: (k, p) matrix, a single (p,) row, or a mapping
            {row_name: row}
        name: Family label
        rhs: Hypothesised values (k,), default zeros
        row_names: Row labels, default 'C1', 'C2', ...

    Raises:
        ValidationError: On non-numeric/non-finite entries, empty matrices
            or mismatched rhs / row_names lengths
    """
    if isinstance(contrasts, ContrastFamily):
        return contrasts

    if isinstance(contrasts, Mapping):
        if row_names is None:
            row_names = [str(k) for k in contrasts.keys()]
        contrasts = [np.asarray(v, dtype=np.float64).ravel() for v in contrasts.values()]

    C = check_array(contrasts, 'contrast_matrix')
    if C.ndim == 1:
        C = C.reshape(1, -1)
    check_2d(C, 'contrast_matrix')
    check_finite(C, 'contrast_matrix')
    k = C.shape[0]
    if k == 0:
        raise ValidationError("contrast_matrix: needs at least one row")

    if row_names is None:
        row_names = [f"C{i + 1}" for i in range(k)]
    elif len(row_names) != k:
        raise ValidationError(
            f"row_names: expected {k} names, got {len(row_names)}"
        )

    if rhs is None:
        rhs_arr = np.zeros(k, dtype=np.float64)
    else:
        rhs_arr = check_array(rhs, 'rhs').ravel()
        check_finite(rhs_arr, 'rhs')
        if rhs_arr.shape[0] != k:
            raise ValidationError(
                f"rhs: expected {k} values (one per contrast row), got {rhs_arr.shape[0]}"
            )

    return ContrastFamily(
        name=name,
        matrix=C,
        row_names=tuple(str(r) for r in row_names),
        rhs=rhs_arr,
    )


def check_contrast_columns(family: ContrastFamily, p: int) -> None:
    """
    Verify the contrast matrix has one column per coefficient.

    Raises:
        DimensionMismatchError: If the column count differs from p
    """
    actual = family.matrix.shape[1]
    if actual != p:
        label = f" {family.name!r}" if family.name is not None else ""
        raise DimensionMismatchError(
            f"contrast matrix{label}: expected {p} columns (one per coefficient), "
            f"got {actual}",
            expected=p,
            actual=actual,
        )


def evaluate_contrasts(
    model: FittedModel,
    contrast_matrix: ArrayLike | Mapping[str, ArrayLike] | ContrastFamily,
    *,
    rhs: ArrayLike | None = None,
    names: Sequence[str] | None = None,
) -> tuple[ContrastEstimate, ...]:
    """
    Estimate each linear combination c_i β and its standard error.

    Args:
        model: Fitted model (LinearSolution or any object with
            `coefficients` and `covariance`)
        contrast_matrix: (k, p) matrix, one (p,) row, mapping
            {row_name: row}, or a ContrastFamily
        rhs: Hypothesised values; estimates are reported as c_i β - rhs_i
        names: Row labels

    Returns:
        One ContrastEstimate per row, in row order

    Raises:
        DimensionMismatchError: If the column count differs from len(β)

    Example:
        >>> evaluate_contrasts(model, [[1, 0, 0], [1, 1, 0]])
    """
    family = make_family(contrast_matrix, rhs=rhs, row_names=names)
    beta = np.asarray(model.coefficients, dtype=np.float64)
    cov = np.asarray(model.covariance, dtype=np.float64)
    check_contrast_columns(family, beta.shape[0])

    C = family.matrix
    estimates = C @ beta - family.rhs
    variances = np.einsum('ij,jk,ik->i', C, cov, C)

    clamped = variances < 0.0
    if np.any(clamped):
        rows = [family.row_names[i] for i in np.flatnonzero(clamped)]
        warnings.warn(
            f"Negative contrast variance clamped to 0 for rows {rows} "
            f"(min {variances.min():.3e}); the coefficient covariance may be "
            f"ill-conditioned.",
            RuntimeWarning,
            stacklevel=2,
        )
        variances = np.where(clamped, 0.0, variances)

    standard_errors = np.sqrt(variances)

    return tuple(
        ContrastEstimate(
            name=family.row_names[i],
            estimate=float(estimates[i]),
            standard_error=float(standard_errors[i]),
            rhs=float(family.rhs[i]),
            clamped=bool(clamped[i]),
        )
        for i in range(family.k)
    )


# =====================================================================
# Contrast builders for one treatment-coded factor
# =====================================================================


def _as_levels(levels: FactorLevels | Iterable[Any]) -> FactorLevels:
    if isinstance(levels, FactorLevels):
        return levels
    return FactorLevels(tuple(levels))


def _mean_row(level_set: FactorLevels, level: str) -> NDArray[np.floating[Any]]:
    # mean(level) = intercept + indicator coefficient of the level
    row = np.zeros(level_set.k, dtype=np.float64)
    row[0] = 1.0
    j = level_set.index(level)
    if j > 0:
        row[j] = 1.0
    return row


def level_mean_contrasts(
    levels: FactorLevels | Iterable[Any],
    *,
    name: str = 'means',
) -> ContrastFamily:
    """
    One row per level testing H0: mean(level) = 0.

    For levels (l, m, h) the rows are [1,0,0], [1,1,0], [1,0,1].
    """
    level_set = _as_levels(levels)
    C = np.vstack([_mean_row(level_set, lv) for lv in level_set])
    return make_family(C, name=name, row_names=list(level_set.levels))


def treatment_contrasts(
    levels: FactorLevels | Iterable[Any],
    *,
    name: str = 'vs reference',
) -> ContrastFamily:
    """
    One row per non-reference level testing H0: mean(level) - mean(ref) = 0.
    """
    level_set = _as_levels(levels)
    if level_set.k < 2:
        raise ValidationError("levels: need at least 2 levels for treatment contrasts")
    C = np.eye(level_set.k, dtype=np.float64)[1:]
    row_names = [f"{lv} - {level_set.reference}" for lv in level_set.non_reference]
    return make_family(C, name=name, row_names=row_names)


def pairwise_contrasts(
    levels: FactorLevels | Iterable[Any],
    *,
    name: str = 'pairwise',
) -> ContrastFamily:
    """
    All k(k-1)/2 differences mean(b) - mean(a) for a before b in level order.
    """
    level_set = _as_levels(levels)
    if level_set.k < 2:
        raise ValidationError("levels: need at least 2 levels for pairwise contrasts")
    rows = []
    row_names = []
    for a, b in combinations(level_set.levels, 2):
        rows.append(_mean_row(level_set, b) - _mean_row(level_set, a))
        row_names.append(f"{b} - {a}")
    return make_family(np.vstack(rows), name=name, row_names=row_names)
