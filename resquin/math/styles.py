"""
Response style classification for resquin.

Responses are classified relative to the scale bounds and the scale
midpoint, then counted per respondent:

- MRS: middle response style, responses at the midpoint
- ARS: acquiescence response style, responses above the midpoint
- DRS: disacquiescence response style, responses below the midpoint
- ERS: extreme response style, responses at either scale bound
- NERS: non-extreme response style, responses away from both bounds
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict

# Set up logging
logger = logging.getLogger(__name__)


STYLE_INDICATORS = ['MRS', 'ARS', 'DRS', 'ERS', 'NERS']


@dataclass(frozen=True)
class ScaleSpec:
    """Bounds of the shared response scale and its derived midpoint."""
    scale_min: float
    scale_max: float
    scale_mid: float
    has_integer_midpoint: bool

    @classmethod
    def from_bounds(cls, scale_min: float, scale_max: float) -> 'ScaleSpec':
        scale_mid = (scale_min + scale_max) / 2
        return cls(
            scale_min=scale_min,
            scale_max=scale_max,
            scale_mid=scale_mid,
            has_integer_midpoint=float(scale_mid).is_integer(),
        )


def style_counts(values: np.ndarray,
                 eligible: np.ndarray,
                 scale: ScaleSpec) -> Dict[str, np.ndarray]:
    """
    Count responses per style category for the eligible rows.

    Missing responses fall in no category, so MRS + ARS + DRS and ERS + NERS
    both equal the number of valid responses of a row. MRS is NaN for every
    row when the scale has no integer midpoint.

    Args:
        values: Response matrix with NaN for missing responses
        eligible: Boolean array, True for rows to compute
        scale: Scale bounds and midpoint

    Returns:
        Dictionary mapping indicator name to a full-length float array
    """
    n_rows = values.shape[0]
    subset = values[eligible]
    observed = ~np.isnan(subset)

    # Comparisons against NaN are False, so missing cells count nowhere
    with np.errstate(invalid='ignore'):
        categories = {
            'MRS': subset == scale.scale_mid,
            'ARS': subset > scale.scale_mid,
            'DRS': subset < scale.scale_mid,
            'ERS': (subset == scale.scale_min) | (subset == scale.scale_max),
            'NERS': observed & (subset != scale.scale_min) & (subset != scale.scale_max),
        }

    if not scale.has_integer_midpoint:
        logger.warning("No scale midpoint found. Middle response style will not be calculated.")
        del categories['MRS']

    counts = {}
    for name in STYLE_INDICATORS:
        column = np.full(n_rows, np.nan)
        if name in categories:
            column[eligible] = categories[name].sum(axis=1)
        counts[name] = column
    return counts


def normalize_counts(counts: Dict[str, np.ndarray], n_valid: np.ndarray) -> Dict[str, np.ndarray]:
    """
    Turn style counts into shares of each row's valid responses.

    Args:
        counts: Output of style_counts
        n_valid: Number of valid responses per row

    Returns:
        Dictionary with the same keys holding proportions
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return {name: column / n_valid for name, column in counts.items()}
