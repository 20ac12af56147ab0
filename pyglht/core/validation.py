"""
Boundary validators.

Public entry points (fit, build_design_matrix, evaluate_contrasts, glht)
run their inputs through these checks once; everything downstream
trusts the arrays it receives. Problems are raised, never repaired: a
NaN outcome or a 3-D contrast matrix is a ValidationError with the
parameter name and the offending shape or count in the message.
"""

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyglht.core.exceptions import ValidationError, DimensionError


def check_array(array: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """
    Convert numeric input to a floating array.

    Integer and boolean input is promoted to float64; existing floating
    dtypes are kept. Labels, mixed objects and ragged lists are rejected.

    Raises:
        ValidationError: If the input is not numeric
    """
    try:
        arr = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: not array-like ({e})") from e

    if arr.dtype == object or not (
        np.issubdtype(arr.dtype, np.number) or arr.dtype == bool
    ):
        raise ValidationError(
            f"{name}: expected numeric values, got dtype {arr.dtype}"
        )

    if np.issubdtype(arr.dtype, np.floating):
        return arr
    return arr.astype(np.float64)


def check_labels(labels: ArrayLike, name: str) -> NDArray[np.str_]:
    """
    Category labels as a 1D str array.

    Labels are compared as strings, so 1 and '1' denote the same level.

    Raises:
        DimensionError: If labels are not 1D
    """
    arr = np.asarray(labels)
    if arr.ndim != 1:
        raise DimensionError(
            f"{name}: expected one label per observation (1D), "
            f"got shape {arr.shape}"
        )
    return np.array([str(v) for v in arr], dtype=str)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """Reject NaN and +/-Inf, reporting how many of each were found."""
    bad = ~np.isfinite(array)
    if bad.any():
        n_nan = int(np.isnan(array).sum())
        raise ValidationError(
            f"{name}: {int(bad.sum())} non-finite entries "
            f"({n_nan} NaN, {int(bad.sum()) - n_nan} Inf)"
        )


def _check_ndim(array: NDArray, ndim: int, name: str) -> None:
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected a {ndim}D array, got shape {array.shape}"
        )


def check_1d(array: NDArray, name: str) -> None:
    _check_ndim(array, 1, name)


def check_2d(array: NDArray, name: str) -> None:
    _check_ndim(array, 2, name)


def check_consistent_length(*arrays: NDArray, names: tuple[str, ...]) -> None:
    """
    Require every array to have the same number of rows.

    Raises:
        DimensionError: Listing each name with its row count
    """
    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{n} has {k} rows" for n, k in zip(names, lengths))
        raise DimensionError(f"row counts differ: {details}")


def check_conf_level(conf_level: float) -> None:
    if not 0.0 < conf_level < 1.0:
        raise ValidationError(
            f"conf_level: must be in (0, 1), got {conf_level}"
        )
