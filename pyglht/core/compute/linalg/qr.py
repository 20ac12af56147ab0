"""
QR decomposition kernels.

Least squares and the unscaled coefficient covariance (X'X)⁻¹ are both
obtained from the triangular factor R, so X'X is never formed or
inverted directly.
"""

from dataclasses import dataclass
from typing import Literal, Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular

from pyglht.core.compute.tolerances import RANK_TOLERANCE_FACTOR


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Orthogonal matrix (n x k where k = min(n, p) for reduced mode)
        R: Upper triangular matrix (k x p)
        rank: Numerical rank determined from R diagonal
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int


def qr_cpu(
    X: NDArray[np.floating[Any]],
    mode: Literal['reduced', 'complete'] = 'reduced'
) -> QRResult:
    """
    QR decomposition using LAPACK (via NumPy).

    Args:
        X: Matrix to decompose (n x p)
        mode: 'reduced' for economy QR, 'complete' for full QR

    Returns:
        QRResult with Q, R, and numerical rank
    """
    Q, R = np.linalg.qr(X, mode=mode)

    diag_R = np.abs(np.diag(R))
    if len(diag_R) > 0 and diag_R[0] > 0:
        tol = RANK_TOLERANCE_FACTOR * max(X.shape) * np.finfo(X.dtype).eps * diag_R[0]
        rank = int(np.sum(diag_R > tol))
    else:
        rank = 0

    return QRResult(Q=Q, R=R, rank=rank)


def qr_solve(
    qr_result: QRResult,
    y: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve least squares from an existing QR factorisation.

    β = R⁻¹ Q'y, computed by back substitution. The caller is responsible
    for having checked that R has full rank.

    Args:
        qr_result: Reduced QR of X (n x p, n >= p)
        y: Response vector (n,)

    Returns:
        Coefficient vector β (p,)
    """
    p = qr_result.R.shape[1]
    Qty = qr_result.Q.T @ y
    return solve_triangular(qr_result.R[:p, :p], Qty[:p], lower=False)


def qr_unscaled_covariance(qr_result: QRResult) -> NDArray[np.floating[Any]]:
    """
    Compute (X'X)⁻¹ from the triangular factor.

    With X = QR, X'X = R'R, so (X'X)⁻¹ = R⁻¹ R⁻ᵀ. R⁻¹ is obtained by a
    triangular solve against the identity. The result is symmetrised to
    remove rounding asymmetry.
    """
    p = qr_result.R.shape[1]
    R_inv = solve_triangular(qr_result.R[:p, :p], np.eye(p), lower=False)
    unscaled = R_inv @ R_inv.T
    return (unscaled + unscaled.T) / 2.0
