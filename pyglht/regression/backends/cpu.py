"""
CPU backend for ordinary least squares.

Uses QR decomposition via LAPACK (through NumPy/SciPy). The coefficient
covariance comes from the same triangular factor as the coefficients,
matching R's lm() / vcov() to machine precision on well-conditioned data.
"""

from typing import Any
import numpy as np

from pyglht.core.result import Result
from pyglht.core.exceptions import RankDeficientError
from pyglht.core.compute.timing import Timer
from pyglht.core.compute.linalg import qr_cpu, qr_solve, qr_unscaled_covariance
from pyglht.regression.design import RegressionDesign
from pyglht.regression.solution import LinearParams


class CPUQRBackend:
    """
    CPU backend using QR decomposition.

    Solves RegressionDesign -> LinearParams. Rank-deficient designs are
    fatal: no column is dropped and no regularisation is applied.
    """

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Solve OLS via QR decomposition.

        Algorithm:
            1. X = QR (reduced)
            2. β = R⁻¹ Q'y
            3. r = y - Xβ, df = n - p, σ̂² = r'r / df
            4. Cov(β) = σ̂² R⁻¹ R⁻ᵀ

        Raises:
            RankDeficientError: If n <= p or rank(X) < p
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n, p = design.n, design.p

        if n <= p:
            raise RankDeficientError(
                f"Design matrix has {n} observations for {p} coefficients; "
                f"need n > p for residual degrees of freedom.",
                matrix_name='X',
                rank=None,
                expected_rank=p,
                n_observations=n,
                n_parameters=p,
            )

        with timer.section('qr_decomposition'):
            qr_result = qr_cpu(X, mode='reduced')

        if qr_result.rank < p:
            raise RankDeficientError(
                f"Design matrix is rank-deficient: rank={qr_result.rank}, expected={p}. "
                f"This indicates perfect multicollinearity (e.g. an empty factor level).",
                matrix_name='X',
                rank=qr_result.rank,
                expected_rank=p,
                n_observations=n,
                n_parameters=p,
            )

        with timer.section('solve'):
            coefficients = qr_solve(qr_result, y)

        with timer.section('residuals'):
            fitted_values = X @ coefficients
            residuals = y - fitted_values

        with timer.section('covariance'):
            df_residual = n - p
            rss = float(residuals @ residuals)
            residual_variance = rss / df_residual
            covariance = residual_variance * qr_unscaled_covariance(qr_result)

        tss = float(np.sum((y - np.mean(y)) ** 2))

        timer.stop()

        params = LinearParams(
            coefficients=coefficients,
            covariance=covariance,
            residuals=residuals,
            fitted_values=fitted_values,
            rss=rss,
            tss=tss,
            residual_variance=residual_variance,
            rank=qr_result.rank,
            df_residual=df_residual,
        )

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr_result.rank,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
