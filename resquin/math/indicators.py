"""
Response quality indicators per respondent.

This module assembles the output of the eligibility, row statistics,
response style and Mahalanobis stages into one data frame per indicator
family. Output rows always correspond one to one, in order, to input rows.
"""

import logging
import warnings
import numpy as np
import pandas as pd

from resquin.errors import SingularCovarianceWarning
from resquin.math.eligibility import eligible_rows
from resquin.math.mahalanobis import MahalanobisResult, mahalanobis_distances
from resquin.math.response_table import ResponseTable
from resquin.math.row_stats import row_statistics
from resquin.math.styles import STYLE_INDICATORS, ScaleSpec, normalize_counts, style_counts
from resquin.math.validation import (
    check_min_valid_responses, check_normalize, check_response_range,
    check_scale_bounds, check_scale_order, check_table
)

# Set up logging
logger = logging.getLogger(__name__)


DISTRIBUTION_INDICATORS = [
    'n_valid', 'n_na', 'prop_na',
    'mean', 'median', 'median_abs_dev', 'sd', 'var',
    'mahalanobis_distance',
]

SINGULAR_COVARIANCE_MESSAGE = (
    "Mahalanobis distance could not be calculated. Matrix may be singular. "
    "This may be due to high collinearity between items or too many missing "
    "values."
)


def distance_column(result: MahalanobisResult, n_rows: int) -> np.ndarray:
    """
    Turn the Mahalanobis stage result into an output column.

    When the covariance matrix could not be inverted every row gets NaN and
    a SingularCovarianceWarning is issued.

    Args:
        result: Result of the Mahalanobis stage
        n_rows: Number of rows in the output

    Returns:
        Distance per row
    """
    if result.ok:
        return result.distances

    logger.warning(f"{SINGULAR_COVARIANCE_MESSAGE} ({result.error})")
    warnings.warn(SINGULAR_COVARIANCE_MESSAGE, SingularCovarianceWarning, stacklevel=3)
    return np.full(n_rows, np.nan)


def resp_styles(x: pd.DataFrame,
                scale_min: float,
                scale_max: float,
                min_valid_responses: float = 1,
                normalize: bool = True) -> pd.DataFrame:
    """
    Compute response style indicators per respondent.

    Args:
        x: Responses in wide format, one row per respondent, one column per
            item, integer values with NaN for missing responses
        scale_min: Lowest response option of the scale
        scale_max: Highest response option of the scale
        min_valid_responses: Share of valid responses a respondent needs to
            receive indicators, between 0 and 1
        normalize: Divide counts by each respondent's number of valid
            responses

    Returns:
        DataFrame with columns MRS, ARS, DRS, ERS, NERS and one row per row
        of x. Respondents below the threshold get NaN. MRS is NaN throughout
        when the scale has no integer midpoint.

    Raises:
        InvalidShapeError, NonIntegerDataError, InvalidArgumentError,
        OutOfRangeResponseError, AllRowsExcludedError
    """
    check_table(x)
    check_scale_bounds(scale_min, scale_max)
    check_normalize(normalize)
    check_min_valid_responses(min_valid_responses)
    check_scale_order(scale_min, scale_max)

    table = ResponseTable(x)
    check_response_range(table.values, table.colnames(), scale_min, scale_max)

    eligible = eligible_rows(table, min_valid_responses)
    scale = ScaleSpec.from_bounds(scale_min, scale_max)

    counts = style_counts(table.values, eligible, scale)
    if normalize:
        counts = normalize_counts(counts, table.valid_counts())

    return pd.DataFrame(counts, index=table.index, columns=STYLE_INDICATORS)


def resp_distributions(x: pd.DataFrame, min_valid_responses: float = 1) -> pd.DataFrame:
    """
    Compute response distribution indicators per respondent.

    The following indicators are calculated:

    - n_valid: number of valid responses
    - n_na: number of missing responses
    - prop_na: proportion of missing responses
    - mean: intra-individual mean
    - median: intra-individual median
    - median_abs_dev: intra-individual median absolute deviation
    - sd: intra-individual standard deviation
    - var: intra-individual variance
    - mahalanobis_distance: distance of the respondent from the centre of
      all eligible respondents

    n_valid, n_na and prop_na are reported for every respondent, the other
    indicators only for respondents meeting min_valid_responses.

    Args:
        x: Responses in wide format, one row per respondent, one column per
            item, integer values with NaN for missing responses
        min_valid_responses: Share of valid responses a respondent needs to
            receive indicators, between 0 and 1

    Returns:
        DataFrame with the indicators above as columns and one row per row
        of x

    Raises:
        InvalidShapeError, NonIntegerDataError, InvalidArgumentError,
        AllRowsExcludedError
    """
    check_table(x)
    check_min_valid_responses(min_valid_responses)

    table = ResponseTable(x)
    eligible = eligible_rows(table, min_valid_responses)

    n_na = table.na_counts()
    output = {
        'n_valid': table.valid_counts(),
        'n_na': n_na,
        'prop_na': n_na / table.n_items,
    }
    output.update(row_statistics(table.values, eligible))
    output['mahalanobis_distance'] = distance_column(
        mahalanobis_distances(table.values, eligible), table.n_rows
    )

    return pd.DataFrame(output, index=table.index, columns=DISTRIBUTION_INDICATORS)
