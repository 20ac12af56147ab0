"""
Seeded data-generating process for one-factor normal models.

    y_ij ~ Normal(mean_j, sd²),  i = 1..n_j,  j over the factor levels

The generator is created from an explicit seed on every call; no global
random state is read or modified.

Example:
    >>> ds = simulate_one_factor({'l': 1.0, 'm': 3.0, 'h': 6.0}, sd=1.0,
    ...                          n_per_level=10, seed=1)
    >>> ds['y'].shape, ds['group'][:3]
"""

from typing import Any, Mapping, Sequence

import numpy as np

from pyglht.core.datasource import DataSource
from pyglht.core.exceptions import ValidationError
from pyglht.factor import FactorLevels


def simulate_one_factor(
    means: Mapping[str, float] | Sequence[float],
    sd: float,
    n_per_level: int | Mapping[str, int],
    *,
    seed: int | None,
    levels: Sequence[Any] | None = None,
) -> DataSource:
    """
    Draw a dataset with columns 'y' (float) and 'group' (str).

    Args:
        means: Level -> mean, or a sequence of means aligned with `levels`
        sd: Common residual standard deviation (> 0)
        n_per_level: Observations per level, a single int or level -> int
        seed: Seed for numpy.random.default_rng
        levels: Level labels when `means` is a sequence

    Returns:
        DataSource with rows grouped by level, in level order
    """
    if isinstance(means, Mapping):
        level_set = FactorLevels(tuple(means.keys()))
        mean_values = [float(means[k]) for k in means.keys()]
    else:
        if levels is None:
            raise ValidationError("levels: required when means is a sequence")
        level_set = FactorLevels(tuple(levels))
        mean_values = [float(m) for m in means]
        if len(mean_values) != level_set.k:
            raise ValidationError(
                f"means: expected {level_set.k} values (one per level), got {len(mean_values)}"
            )

    if not sd > 0:
        raise ValidationError(f"sd: must be > 0, got {sd}")

    if isinstance(n_per_level, Mapping):
        counts = [int(n_per_level[lv]) for lv in level_set]
    else:
        counts = [int(n_per_level)] * level_set.k
    if any(c < 1 for c in counts):
        raise ValidationError(f"n_per_level: every level needs >= 1 observation, got {counts}")

    rng = np.random.default_rng(seed)
    y = np.concatenate([
        rng.normal(mu, sd, size=n) for mu, n in zip(mean_values, counts)
    ])
    group = np.repeat(np.array(level_set.levels, dtype=str), counts)

    return DataSource.from_arrays(y=y, group=group)


__all__ = [
    "simulate_one_factor",
]
