"""
Linear algebra kernels for pyglht.

Submodules:
    qr: QR decomposition, least squares solve, unscaled covariance
"""

from pyglht.core.compute.linalg.qr import (
    QRResult,
    qr_cpu,
    qr_solve,
    qr_unscaled_covariance,
)

__all__ = [
    "QRResult",
    "qr_cpu",
    "qr_solve",
    "qr_unscaled_covariance",
]
