"""
Intra-individual location and spread statistics.

Each statistic is computed across one respondent's own non-missing
responses. Rows that are not eligible get NaN.
"""

import numpy as np
from typing import Dict


ROW_STATISTICS = ['mean', 'median', 'median_abs_dev', 'sd', 'var']


def _fill(n_rows: int, eligible: np.ndarray, values: np.ndarray) -> np.ndarray:
    """Spread values for the eligible rows into a full-length NaN array."""
    result = np.full(n_rows, np.nan)
    result[eligible] = values
    return result


def row_sd(values: np.ndarray) -> np.ndarray:
    """
    Sample standard deviation of each row, ignoring NaN.

    A row with a single valid response divides zero by zero and yields NaN.

    Args:
        values: Matrix with at least one valid response per row

    Returns:
        Standard deviation per row
    """
    n_valid = (~np.isnan(values)).sum(axis=1)
    means = np.nanmean(values, axis=1)
    squares = np.nansum((values - means[:, np.newaxis]) ** 2, axis=1)
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.sqrt(squares / (n_valid - 1))


def row_median_abs_dev(values: np.ndarray) -> np.ndarray:
    """
    Median absolute deviation of each row around its own median.

    No consistency constant is applied.

    Args:
        values: Matrix with at least one valid response per row

    Returns:
        Median absolute deviation per row
    """
    medians = np.nanmedian(values, axis=1)
    return np.nanmedian(np.abs(values - medians[:, np.newaxis]), axis=1)


def row_statistics(values: np.ndarray, eligible: np.ndarray) -> Dict[str, np.ndarray]:
    """
    Compute location and spread statistics for the eligible rows.

    Args:
        values: Response matrix with NaN for missing responses
        eligible: Boolean array, True for rows to compute

    Returns:
        Dictionary mapping statistic name to a full-length array
    """
    n_rows = values.shape[0]
    subset = values[eligible]

    sd = row_sd(subset)
    stats = {
        'mean': np.nanmean(subset, axis=1),
        'median': np.nanmedian(subset, axis=1),
        'median_abs_dev': row_median_abs_dev(subset),
        'sd': sd,
        'var': sd ** 2,
    }

    return {name: _fill(n_rows, eligible, stats[name]) for name in ROW_STATISTICS}
