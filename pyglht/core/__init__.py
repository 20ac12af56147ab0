"""
Core infrastructure for pyglht.

Shared abstractions used by the factor, regression and hypothesis subpackages.

Key components:
    datasource: DataSource column container
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, tolerances, QR kernels
"""

from pyglht.core.datasource import DataSource
from pyglht.core.result import Result
from pyglht.core.exceptions import (
    PyglhtError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    UnknownLevelError,
    RankDeficientError,
    DimensionMismatchError,
    DegenerateTestError,
)

__all__ = [
    "DataSource",
    "Result",
    "PyglhtError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "UnknownLevelError",
    "RankDeficientError",
    "DimensionMismatchError",
    "DegenerateTestError",
]
