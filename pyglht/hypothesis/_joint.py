"""
Joint Wald F-test of all rows of one contrast matrix.

    d = C β - rhs
    F = dᵀ (C Cov(β) Cᵀ)⁻¹ d / q,   F ~ F(q, df_residual) under H0

This is the global test of H0: C β = rhs (all rows at once), as opposed
to the marginal per-row t-tests. Rows must be linearly independent.
"""

import numpy as np
from scipy import linalg as sp_linalg
from scipy import stats as sp_stats

from pyglht.core.exceptions import RankDeficientError
from pyglht.hypothesis._common import ContrastFamily, JointTestParams


def wald_f_test(
    coefficients: np.ndarray,
    covariance: np.ndarray,
    family: ContrastFamily,
    df_residual: int,
) -> JointTestParams:
    """
    Compute the Wald F statistic for a validated contrast family.

    Raises:
        RankDeficientError: If the rows of C are linearly dependent
    """
    C = family.matrix
    q = family.k
    d = C @ coefficients - family.rhs
    middle = C @ covariance @ C.T
    middle = (middle + middle.T) / 2.0

    rank = int(np.linalg.matrix_rank(C))
    if rank < q:
        raise RankDeficientError(
            f"contrast matrix rows are linearly dependent: rank={rank}, rows={q}. "
            f"Drop redundant rows for a joint test.",
            matrix_name='C',
            rank=rank,
            expected_rank=q,
        )

    try:
        solved = sp_linalg.solve(middle, d, assume_a='pos')
    except np.linalg.LinAlgError as e:
        raise RankDeficientError(
            f"C Cov(β) Cᵀ is singular: {e}",
            matrix_name='C Cov C\'',
            expected_rank=q,
        ) from e

    f_value = float(d @ solved) / q
    p_value = float(sp_stats.f.sf(f_value, q, df_residual))

    return JointTestParams(
        f_value=f_value,
        p_value=p_value,
        df_num=q,
        df_den=int(df_residual),
        estimates=d,
    )
