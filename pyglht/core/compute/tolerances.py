"""
Numerical tolerances used across pyglht.

Module-level constants are the configuration surface for numerical
thresholds; public functions take everything else as keyword arguments.
Used by the QR rank check and by the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Well-conditioned double precision problems
CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision, well-conditioned',
)

# Published reference values quoted to a few significant digits
REFERENCE_4DP = ToleranceTier(
    rtol=1e-4,
    atol=1e-6,
    name='reference_4dp',
    description='Comparison against values printed to ~4 significant digits',
)

# Numerical rank from QR: |R_jj| > RANK_TOLERANCE_FACTOR * max(n, p) * eps * |R_00|
RANK_TOLERANCE_FACTOR = 1.0
