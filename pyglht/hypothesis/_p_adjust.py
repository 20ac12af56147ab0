"""
Multiple testing correction, matching R's p.adjust() for the methods
provided.

    bonferroni  FWER, min(1, m p_i)
    holm        FWER, step-down Bonferroni
    BH / fdr    FDR, Benjamini-Hochberg step-up
    BY          FDR under arbitrary dependence
    none        raw p-values

m counts the non-NaN p-values of the whole batch: adjusting rows from
several contrast matrices together is different from adjusting each
matrix on its own.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray, ArrayLike

from pyglht.core.exceptions import ValidationError

VALID_METHODS = ("bonferroni", "holm", "BH", "fdr", "BY", "none")


def adjust_p_values(
    p: ArrayLike,
    method: str,
    *,
    n: int | None = None,
) -> NDArray[np.floating]:
    """
    Adjust p-values for multiple comparisons.

    Parameters
    ----------
    p : array-like
        Raw p-values, in result order.
    method : str
        One of "bonferroni", "fdr" (alias "BH"), "holm", "BY", "none".
    n : int or None
        Number of comparisons. Default: number of non-NaN p-values.
        May exceed that when some tests are not reported.

    Returns
    -------
    ndarray
        Adjusted p-values in input order, clipped to [0, 1]. NaN
        positions stay NaN.
    """
    if method not in VALID_METHODS:
        raise ValidationError(
            f"method must be one of {VALID_METHODS}, got {method!r}"
        )

    p_arr = np.asarray(p, dtype=np.float64).ravel()
    if len(p_arr) == 0:
        return np.array([], dtype=np.float64)

    nan_mask = np.isnan(p_arr)
    valid = p_arr[~nan_mask]
    if np.any((valid < 0.0) | (valid > 1.0)):
        raise ValidationError(
            f"p: values must lie in [0, 1], got min={valid.min()}, max={valid.max()}"
        )

    lp = len(valid)
    if n is None:
        n_tests = lp
    else:
        if n < lp:
            raise ValidationError(
                f"n ({n}) must be >= number of non-NaN p-values ({lp})"
            )
        n_tests = n

    result = p_arr.copy()
    if method == "none" or lp == 0:
        return result

    if method == "bonferroni":
        adjusted = valid * n_tests
    elif method == "holm":
        adjusted = _holm(valid, n_tests)
    elif method in ("BH", "fdr"):
        adjusted = _bh(valid, n_tests)
    else:
        adjusted = _by(valid, n_tests)

    result[~nan_mask] = np.clip(adjusted, 0.0, 1.0)
    return result


def _holm(pv: NDArray, n: int) -> NDArray:
    """Holm's step-down method: p_(r) (n - r + 1), cumulative max."""
    lp = len(pv)
    order = np.argsort(pv, kind='stable')
    scaled = pv[order] * np.arange(n, n - lp, -1, dtype=np.float64)
    scaled = np.maximum.accumulate(np.minimum(scaled, 1.0))

    result = np.empty(lp, dtype=np.float64)
    result[order] = scaled
    return result


def _step_up(pv: NDArray, n: int, factor: float) -> NDArray:
    """
    Step-up FDR core.

    Candidate for rank r (ascending, 1-based) is p_(r) * factor * n / r;
    the adjusted value is the running minimum from the largest rank down.
    """
    lp = len(pv)
    order = np.argsort(pv, kind='stable')[::-1]    # descending
    ranks = np.arange(lp, 0, -1, dtype=np.float64)
    candidates = pv[order] * factor * n / ranks
    adjusted = np.minimum.accumulate(candidates)

    result = np.empty(lp, dtype=np.float64)
    result[order] = adjusted
    return result


def _bh(pv: NDArray, n: int) -> NDArray:
    """Benjamini-Hochberg (FDR under independence/PRDS)."""
    return _step_up(pv, n, 1.0)


def _by(pv: NDArray, n: int) -> NDArray:
    """Benjamini-Yekutieli: BH inflated by c(n) = sum_{i<=n} 1/i."""
    cm = float(np.sum(1.0 / np.arange(1, n + 1, dtype=np.float64)))
    return _step_up(pv, n, cm)
