"""
Exception hierarchy for pyglht.

All exceptions inherit from PyglhtError so callers can catch any
library-specific error in one place. The four domain errors of the
hypothesis pipeline sit under the generic base classes:

    UnknownLevelError       -> ValidationError   (design matrix)
    DimensionMismatchError  -> DimensionError    (contrast evaluation)
    RankDeficientError      -> SingularMatrixError (model fit)
    DegenerateTestError     -> NumericalError    (per-row t-test)

Exceptions carry the offending index or the expected vs actual
dimensions as attributes so a failure can be diagnosed without
re-running the computation.
"""

from typing import Sequence


class PyglhtError(Exception):
    """Base exception for all pyglht errors."""
    pass


class ValidationError(PyglhtError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.
    """
    pass


class NumericalError(PyglhtError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        rank: Numerical rank, if computed
        expected_rank: Rank required for the operation
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.rank = rank
        self.expected_rank = expected_rank


class UnknownLevelError(ValidationError):
    """
    A category label is not one of the declared factor levels.

    Attributes:
        index: Position of the offending observation, None for a
            direct level lookup
        label: The offending label
        levels: The declared level set
    """

    def __init__(
        self,
        message: str,
        index: int | None,
        label: str,
        levels: Sequence[str],
    ):
        super().__init__(message)
        self.index = index
        self.label = label
        self.levels = tuple(levels)


class RankDeficientError(SingularMatrixError):
    """
    Design matrix is not full column rank, or has no residual degrees
    of freedom (n <= p).

    The fit is aborted; columns are never dropped automatically.

    Attributes:
        n_observations: Number of rows of the design matrix
        n_parameters: Number of columns of the design matrix
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
        n_observations: int | None = None,
        n_parameters: int | None = None,
    ):
        super().__init__(
            message,
            matrix_name=matrix_name,
            rank=rank,
            expected_rank=expected_rank,
        )
        self.n_observations = n_observations
        self.n_parameters = n_parameters


class DimensionMismatchError(DimensionError):
    """
    Contrast matrix column count does not match the coefficient count.

    Attributes:
        expected: Number of model coefficients
        actual: Number of contrast matrix columns
    """

    def __init__(self, message: str, expected: int, actual: int):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class DegenerateTestError(NumericalError):
    """
    A contrast row has zero standard error, so its t-test is undefined.

    Reported per row: sibling rows of the same batch are still tested.

    Attributes:
        row: Zero-based row index within the batch
        name: Row name, if any
        estimate: Contrast estimate of the row
        standard_error: Standard error of the row (0.0)
    """

    def __init__(
        self,
        message: str,
        row: int,
        estimate: float,
        standard_error: float,
        name: str | None = None,
    ):
        super().__init__(message)
        self.row = row
        self.name = name
        self.estimate = estimate
        self.standard_error = standard_error
