"""
Column store for model inputs.

DataSource is the "I have data" abstraction. It holds named 1D columns,
numeric or categorical, and knows nothing about the model that will
consume them. ModelSpec picks the outcome and predictor columns out of it.

Usage:
    from pyglht.core import DataSource

    ds = DataSource.from_arrays(y=y, group=labels)
    ds = DataSource.from_dataframe(df)
    ds = DataSource.from_file("data.csv")

    ds.keys()     # frozenset({'y', 'group'})
    ds['group']   # array of str
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyglht.core.exceptions import ValidationError, DimensionError

if TYPE_CHECKING:
    import pandas as pd


@dataclass
class DataSource:
    """
    Named-column data container. Domain-agnostic.

    Construct via factory classmethods, not directly. Floating columns are
    stored as float64, integer and bool columns keep their dtype (so an
    integer-coded factor keeps labels like '1', not '1.0'), and anything
    else is stored as an array of str.
    """
    _data: dict[str, NDArray]
    _metadata: dict[str, Any] = field(default_factory=dict)

    def keys(self) -> frozenset[str]:
        """Return the names of all available columns."""
        return frozenset(self._data.keys())

    def __getitem__(self, key: str) -> NDArray:
        """
        Access a named column.

        Raises:
            KeyError: If key not found, listing the available columns
        """
        if key not in self._data:
            raise KeyError(
                f"DataSource has no column '{key}'. Available: {sorted(self.keys())}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    @property
    def n_observations(self) -> int:
        """Number of rows."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    # === Factory Methods ===

    @classmethod
    def from_arrays(cls, **columns: ArrayLike) -> DataSource:
        """Construct from named 1D array-likes of equal length."""
        return cls._build(columns, {'source': 'arrays'})

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, source_path: str | None = None) -> DataSource:
        """Construct from a pandas DataFrame, one column per DataFrame column."""
        metadata: dict[str, Any] = {
            'source': 'dataframe',
            'columns': [str(c) for c in df.columns],
        }
        if source_path:
            metadata['source_path'] = source_path
        columns = {str(col): df[col].to_numpy() for col in df.columns}
        return cls._build(columns, metadata)

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> DataSource:
        """Construct from a CSV/TSV file (requires pandas)."""
        import pandas as pd

        path = Path(path)
        suffix = path.suffix.lower()
        if suffix == '.csv':
            df = pd.read_csv(path, usecols=columns)
        elif suffix == '.tsv':
            df = pd.read_csv(path, sep='\t', usecols=columns)
        else:
            raise ValidationError(f"Unknown file format: {suffix}")
        return cls.from_dataframe(df, source_path=str(path))

    @classmethod
    def _build(cls, columns: dict[str, Any], metadata: dict[str, Any]) -> DataSource:
        storage: dict[str, NDArray] = {}

        for name, values in columns.items():
            arr = np.asarray(values)
            if arr.ndim != 1:
                raise DimensionError(
                    f"{name}: expected 1D column, got {arr.ndim}D with shape {arr.shape}"
                )
            if np.issubdtype(arr.dtype, np.floating):
                arr = arr.astype(np.float64)
            elif not (np.issubdtype(arr.dtype, np.integer) or arr.dtype == bool):
                arr = np.array([str(v) for v in arr], dtype=str)
            storage[name] = arr

        lengths = {name: arr.shape[0] for name, arr in storage.items()}
        if len(set(lengths.values())) > 1:
            details = ", ".join(f"{k}={v}" for k, v in lengths.items())
            raise DimensionError(f"Inconsistent column lengths: {details}")

        metadata = dict(metadata)
        metadata['n_observations'] = next(iter(lengths.values()), 0)

        return cls(
            _data=storage,
            _metadata=metadata,
        )
