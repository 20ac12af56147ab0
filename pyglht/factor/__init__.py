"""
Categorical factors and their design matrices.

Public API:
    build_design_matrix(categories, levels) -> DesignMatrix
    encode_treatment(categories, levels) -> ndarray
    FactorLevels: ordered level set, first level is the reference
"""

from pyglht.factor._coding import (
    FactorLevels,
    DesignMatrix,
    INTERCEPT_NAME,
    build_design_matrix,
    encode_treatment,
)

__all__ = [
    "FactorLevels",
    "DesignMatrix",
    "INTERCEPT_NAME",
    "build_design_matrix",
    "encode_treatment",
]
