"""
Treatment (dummy) coding of a single categorical factor.

A k-level factor becomes an intercept plus k-1 indicator columns. The
reference (first) level has no column of its own; its mean is absorbed
into the intercept, which keeps the design full rank.

    levels = (l, m, h)

        label   (Intercept)  groupm  grouph
        l            1          0       0
        m            1          1       0
        h            1          0       1
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyglht.core.exceptions import UnknownLevelError, ValidationError
from pyglht.core.validation import check_labels

INTERCEPT_NAME = '(Intercept)'


@dataclass(frozen=True)
class FactorLevels:
    """
    Ordered level set of a categorical factor.

    The first level is the reference level. Order determines the order of
    the indicator columns and is fixed once the object is built.
    """
    levels: tuple[str, ...]

    def __post_init__(self) -> None:
        levels = tuple(str(v) for v in self.levels)
        if len(levels) == 0:
            raise ValidationError("levels: need at least 1 level, got 0")
        if len(set(levels)) != len(levels):
            dupes = sorted({v for v in levels if levels.count(v) > 1})
            raise ValidationError(f"levels: duplicate labels {dupes}")
        object.__setattr__(self, 'levels', levels)

    @classmethod
    def from_observed(cls, labels: Iterable[Any], *, sort: bool = False) -> FactorLevels:
        """
        Build a level set from observed labels.

        Levels are taken in order of first appearance, or sorted when
        sort=True.
        """
        seen: dict[str, None] = {}
        for v in labels:
            seen.setdefault(str(v), None)
        levels = sorted(seen) if sort else list(seen)
        return cls(tuple(levels))

    @property
    def reference(self) -> str:
        return self.levels[0]

    @property
    def non_reference(self) -> tuple[str, ...]:
        return self.levels[1:]

    @property
    def k(self) -> int:
        return len(self.levels)

    def index(self, label: str) -> int:
        """Position of a level; raises UnknownLevelError if absent."""
        try:
            return self.levels.index(str(label))
        except ValueError:
            raise UnknownLevelError(
                f"label {label!r} is not one of the declared levels {list(self.levels)}",
                index=None,
                label=str(label),
                levels=self.levels,
            ) from None

    def with_reference(self, reference: str) -> FactorLevels:
        """Return a copy with `reference` moved to the front."""
        self.index(reference)
        rest = tuple(v for v in self.levels if v != str(reference))
        return FactorLevels((str(reference),) + rest)

    def __len__(self) -> int:
        return len(self.levels)

    def __iter__(self):
        return iter(self.levels)


@dataclass(frozen=True)
class DesignMatrix:
    """
    Dummy-coded design matrix with column metadata.

    Attributes:
        X: (n, k) float64 matrix, column 0 is the intercept
        column_names: '(Intercept)' followed by '<factor><level>' for each
            non-reference level
        levels: the level set used for coding
        factor_name: name of the coded factor
    """
    X: NDArray[np.floating[Any]]
    column_names: tuple[str, ...]
    levels: FactorLevels
    factor_name: str

    @property
    def n(self) -> int:
        return self.X.shape[0]

    @property
    def p(self) -> int:
        return self.X.shape[1]

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self.X
        return self.X.astype(dtype)


def _as_levels(levels: FactorLevels | Iterable[Any]) -> FactorLevels:
    if isinstance(levels, FactorLevels):
        return levels
    return FactorLevels(tuple(levels))


def encode_treatment(
    categories: ArrayLike,
    levels: FactorLevels | Iterable[Any],
) -> NDArray[np.floating[Any]]:
    """
    Indicator block for the non-reference levels.

    Args:
        categories: 1D sequence of labels (compared as strings)
        levels: Level set; first element is the reference

    Returns:
        (n, k-1) float64 indicator matrix

    Raises:
        UnknownLevelError: On the first label outside the level set
    """
    level_set = _as_levels(levels)
    labels = check_labels(categories, 'categories')

    known = np.isin(labels, np.array(level_set.levels, dtype=str))
    if not np.all(known):
        bad = int(np.flatnonzero(~known)[0])
        raise UnknownLevelError(
            f"categories[{bad}]: label {labels[bad]!r} is not one of the "
            f"declared levels {list(level_set.levels)}",
            index=bad,
            label=str(labels[bad]),
            levels=level_set.levels,
        )

    X = np.zeros((labels.shape[0], level_set.k - 1), dtype=np.float64)
    for j, level in enumerate(level_set.non_reference):
        X[:, j] = (labels == level).astype(np.float64)
    return X


def build_design_matrix(
    categories: ArrayLike,
    levels: FactorLevels | Iterable[Any],
    *,
    factor_name: str = 'group',
) -> DesignMatrix:
    """
    Build the intercept + treatment-coded design matrix of one factor.

    Args:
        categories: 1D sequence of labels, one per observation
        levels: Ordered level set; the first level is the reference
        factor_name: Prefix used for indicator column names

    Returns:
        DesignMatrix with columns [intercept, level_2, ..., level_k]

    Raises:
        UnknownLevelError: If any label is not a declared level
    """
    level_set = _as_levels(levels)
    indicators = encode_treatment(categories, level_set)
    n = indicators.shape[0]

    X = np.hstack([np.ones((n, 1), dtype=np.float64), indicators])
    names = (INTERCEPT_NAME,) + tuple(f"{factor_name}{lv}" for lv in level_set.non_reference)

    return DesignMatrix(
        X=X,
        column_names=names,
        levels=level_set,
        factor_name=factor_name,
    )
