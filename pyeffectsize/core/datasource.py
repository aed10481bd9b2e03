"""
Tabular DataSource for pyeffectsize.

DataSource is the "I have trials" abstraction. It holds named columns
(subject ids, factor levels, repetition index, response) and doesn't know
which of them are factors. Designs pick the columns they need.

Usage:
    from pyeffectsize import DataSource

    ds = DataSource.from_arrays(subject=s, layout=l, size=z, time=t)
    ds = DataSource.from_file("trials.csv")
    ds = DataSource.from_dataframe(df)

    ds.keys()      # frozenset({'subject', 'layout', 'size', 'time'})
    ds['time']     # numpy array
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING

import numpy as np

from pyeffectsize.core.exceptions import ValidationError

if TYPE_CHECKING:
    import pandas as pd


@dataclass
class DataSource:
    """
    Column container for long-format trial data. Domain-agnostic.

    Construct via factory classmethods, not directly. Columns are stored
    as 1D numpy arrays of equal length; dtypes are preserved so that
    string subject ids stay strings.
    """
    _data: dict[str, Any]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Column Access ===

    def keys(self) -> frozenset[str]:
        """Return the names of all available columns."""
        return frozenset(self._data.keys())

    def __getitem__(self, key: str) -> Any:
        """
        Access a named column.

        Raises:
            KeyError: If key not found, with helpful message listing available columns
        """
        if key not in self._data:
            available = sorted(self.keys())
            raise KeyError(
                f"DataSource has no column '{key}'. Available: {available}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        """Check if a column exists."""
        return key in self._data

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of rows (trials)."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    # === Factory Methods ===

    @classmethod
    def from_arrays(cls, **columns: Any) -> DataSource:
        """Construct from 1D array-likes of equal length."""
        storage: dict[str, Any] = {}
        n_obs: int | None = None

        for name, col in columns.items():
            arr = np.asarray(col)
            if arr.ndim != 1:
                raise ValidationError(
                    f"{name}: expected 1D column, got {arr.ndim}D"
                )
            if n_obs is None:
                n_obs = len(arr)
            elif len(arr) != n_obs:
                raise ValidationError(
                    f"{name}: length {len(arr)} doesn't match other columns ({n_obs})"
                )
            storage[name] = arr

        return cls(
            _data=storage,
            _metadata={'n_observations': n_obs or 0, 'source': 'arrays'},
        )

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> DataSource:
        """Construct from a delimited text file (CSV, TSV)."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in ('.csv', '.tsv'):
            import pandas as pd
            sep = '\t' if suffix == '.tsv' else ','
            df = pd.read_csv(path, sep=sep, usecols=columns)
            return cls.from_dataframe(df, source_path=str(path))
        else:
            raise ValidationError(f"Unknown file format: {suffix}")

    @classmethod
    def from_dataframe(cls, df: 'pd.DataFrame', *, source_path: str | None = None) -> DataSource:
        """Construct from pandas DataFrame."""
        storage: dict[str, Any] = {}

        for col in df.columns:
            storage[str(col)] = df[col].to_numpy()

        metadata = {
            'n_observations': len(df),
            'source': 'dataframe',
            'columns': [str(c) for c in df.columns],
        }
        if source_path:
            metadata['source_path'] = source_path

        return cls(_data=storage, _metadata=metadata)

    @classmethod
    def coerce(cls, data: Any) -> DataSource:
        """
        Accept a DataSource, a pandas DataFrame, or a mapping of columns.

        DataFrames are detected by duck typing (a ``columns`` attribute and
        ``to_numpy`` on columns), so pandas is never imported here.
        """
        if isinstance(data, DataSource):
            return data
        if hasattr(data, 'columns') and hasattr(data, 'iloc'):
            return cls.from_dataframe(data)
        if isinstance(data, Mapping):
            return cls.from_arrays(**{str(k): v for k, v in data.items()})
        raise ValidationError(
            f"data: expected DataSource, DataFrame, or mapping of columns, "
            f"got {type(data).__name__}"
        )
