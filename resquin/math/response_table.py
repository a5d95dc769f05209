"""
Response table implementation for resquin.

This module provides a data structure for survey responses: positional rows
(respondents) by named columns (items), with NaN as the missing marker.
Row identity is positional; the original index is carried along only so that
result tables line up with the caller's data frame.
"""

import numpy as np
import pandas as pd
from typing import List, Optional, Union, Any


class ResponseTable:
    """
    A matrix of item responses with named columns and positional rows.

    Uses a float numpy array as the underlying storage so that missing
    responses are plain NaN cells.
    """

    def __init__(self,
                 matrix: Union[np.ndarray, pd.DataFrame],
                 colnames: Optional[List[Any]] = None,
                 index: Optional[pd.Index] = None):
        """
        Initialize a ResponseTable.

        Args:
            matrix: Response data (numpy array or pandas DataFrame)
            colnames: List of item names, defaults to the frame's columns
            index: Row labels to carry through to results
        """
        if isinstance(matrix, pd.DataFrame):
            self._values = matrix.to_numpy(dtype=float, na_value=np.nan, copy=True)
            self._colnames = list(matrix.columns) if colnames is None else list(colnames)
            self._index = matrix.index if index is None else index
        else:
            # Copy so the read-only flag below never reaches the caller's array
            values = np.array(matrix, dtype=float)
            if values.ndim != 2:
                raise ValueError(f"Expected a 2-dimensional matrix, got {values.ndim} dimensions")
            self._values = values
            self._colnames = (list(range(values.shape[1]))
                              if colnames is None else list(colnames))
            self._index = pd.RangeIndex(values.shape[0]) if index is None else index

        if len(self._colnames) != self._values.shape[1]:
            raise ValueError(
                f"Got {len(self._colnames)} column names for {self._values.shape[1]} columns"
            )

        # Results are derived from this array, never written back
        self._values.setflags(write=False)

    @property
    def values(self) -> np.ndarray:
        """Get the responses as a read-only float array."""
        return self._values

    @property
    def index(self) -> pd.Index:
        """Get the row labels of the source data."""
        return self._index

    @property
    def n_rows(self) -> int:
        return self._values.shape[0]

    @property
    def n_items(self) -> int:
        return self._values.shape[1]

    def colnames(self) -> List[Any]:
        """Get the list of item names."""
        return list(self._colnames)

    def missing(self) -> np.ndarray:
        """Boolean matrix, True where a response is missing."""
        return np.isnan(self._values)

    def valid_counts(self) -> np.ndarray:
        """Number of non-missing responses per row."""
        return (~self.missing()).sum(axis=1)

    def na_counts(self) -> np.ndarray:
        """Number of missing responses per row."""
        return self.missing().sum(axis=1)

    def __repr__(self) -> str:
        return f"ResponseTable(rows={self.n_rows}, items={self.n_items})"
