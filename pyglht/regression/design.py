"""
Regression Design.

RegressionDesign holds a validated (X, y) pair plus column names. It can
be built from raw arrays, from a dummy-coded DesignMatrix, or from a
DataSource described by a ModelSpec.

ModelSpec is the explicit replacement for a symbolic model formula:
outcome column, predictor columns, and the reference level of each
categorical predictor. No expression parsing is involved.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence
import numpy as np
from numpy.typing import NDArray

from pyglht.core.datasource import DataSource
from pyglht.core.exceptions import ValidationError
from pyglht.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_1d,
    check_consistent_length,
)
from pyglht.factor import DesignMatrix, FactorLevels, build_design_matrix


@dataclass(frozen=True)
class ModelSpec:
    """
    Explicit model description: outcome ~ predictors.

    Attributes:
        outcome: Name of the numeric outcome column
        predictors: Names of predictor columns. Exactly one categorical
            predictor is supported.
        reference_levels: For each categorical predictor, either the full
            level ordering (first = reference) or a single reference label
            (any scalar, compared as a string).
            Predictors missing here use first-appearance order.

    Example:
        >>> ModelSpec('y', ['group'], {'group': ['l', 'm', 'h']})
        >>> ModelSpec('y', ['group'], {'group': 'l'})
    """
    outcome: str
    predictors: tuple[str, ...]
    reference_levels: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        predictors = (self.predictors,) if isinstance(self.predictors, str) else tuple(self.predictors)
        object.__setattr__(self, 'predictors', predictors)
        if len(predictors) != 1:
            raise ValidationError(
                f"predictors: exactly one categorical predictor is supported, "
                f"got {len(predictors)}: {list(predictors)}"
            )
        if self.outcome in predictors:
            raise ValidationError(
                f"outcome {self.outcome!r} cannot also be a predictor"
            )

    def levels_for(self, name: str, observed: NDArray) -> FactorLevels:
        """Resolve the level set of predictor `name` given its observed labels."""
        spec = self.reference_levels.get(name)
        if spec is None:
            return FactorLevels.from_observed(observed)
        if isinstance(spec, str) or not isinstance(spec, Iterable):
            # a single label, e.g. 'l' or 2 for an integer-coded factor
            return FactorLevels.from_observed(observed).with_reference(str(spec))
        return FactorLevels(tuple(spec))


@dataclass(frozen=True)
class RegressionDesign:
    """
    Validated design matrix and response.

    Immutable after construction. Built via the classmethods, not directly.
    """
    X: NDArray[np.floating[Any]]
    y: NDArray[np.floating[Any]]
    n: int
    p: int
    column_names: tuple[str, ...]
    design_matrix: DesignMatrix | None = None

    @classmethod
    def build(
        cls,
        X: Any,
        y: Any,
        *,
        column_names: Sequence[str] | None = None,
    ) -> RegressionDesign:
        """
        Validate arrays and build a design.

        X may be a DesignMatrix, in which case its column names are used.

        Raises:
            ValidationError: If inputs are non-numeric or non-finite
            DimensionError: If shapes are wrong or inconsistent
        """
        design_matrix = X if isinstance(X, DesignMatrix) else None
        if design_matrix is not None:
            X = design_matrix.X
            if column_names is None:
                column_names = design_matrix.column_names

        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')

        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()

        check_2d(X_arr, 'X')
        check_1d(y_arr, 'y')
        check_finite(X_arr, 'X')
        check_finite(y_arr, 'y')
        check_consistent_length(X_arr, y_arr, names=('X', 'y'))

        n, p = X_arr.shape
        if p == 0:
            raise ValidationError("X: design matrix has no columns")
        if column_names is None:
            column_names = tuple(f"x{j}" for j in range(p))
        elif len(column_names) != p:
            raise ValidationError(
                f"column_names: expected {p} names, got {len(column_names)}"
            )

        return cls(
            X=X_arr,
            y=y_arr,
            n=n,
            p=p,
            column_names=tuple(column_names),
            design_matrix=design_matrix,
        )

    @classmethod
    def from_datasource(
        cls,
        source: DataSource | Mapping[str, Any],
        spec: ModelSpec,
    ) -> RegressionDesign:
        """
        Build a design from named columns.

        `source` may be a DataSource or any mapping of column name to
        1D values (a pandas DataFrame works too).

        Raises:
            KeyError: If a named column is missing
            UnknownLevelError: If a label is outside the declared levels
        """
        factor_name = spec.predictors[0]
        labels = np.array([str(v) for v in np.asarray(source[factor_name])], dtype=str)
        levels = spec.levels_for(factor_name, labels)

        dm = build_design_matrix(labels, levels, factor_name=factor_name)
        return cls.build(dm, np.asarray(source[spec.outcome]))
