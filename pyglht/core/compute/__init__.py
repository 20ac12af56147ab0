"""
Shared numeric infrastructure for pyglht.

Submodules:
    timing: Execution timing utilities
    tolerances: Numerical thresholds and comparison tiers
    linalg: Linear algebra kernels (QR)
"""

from pyglht.core.compute.timing import Timer

__all__ = [
    "Timer",
]
