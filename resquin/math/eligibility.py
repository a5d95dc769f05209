"""
Eligibility of respondents for indicator computation.

A respondent receives computed indicators only if enough of their responses
are non-missing. The policy is a single share, min_valid_responses, with
special meaning at both ends of [0, 1].
"""

import logging
import numpy as np

from resquin.errors import AllRowsExcludedError
from resquin.math.response_table import ResponseTable
from resquin.math.validation import check_min_valid_responses

# Set up logging
logger = logging.getLogger(__name__)


def exclusion_mask(table: ResponseTable, min_valid_responses: float) -> np.ndarray:
    """
    Flag the rows that are excluded from indicator computation.

    With min_valid_responses == 0 only rows without any valid response are
    excluded, with 1 every row with a missing response is excluded, and in
    between a row is excluded when its share of valid responses is less than
    or equal to min_valid_responses.

    Args:
        table: Response table
        min_valid_responses: Share of valid responses required, in [0, 1]

    Returns:
        Boolean array, True for excluded rows

    Raises:
        InvalidArgumentError: min_valid_responses is not a number in [0, 1]
        AllRowsExcludedError: every row is excluded
    """
    check_min_valid_responses(min_valid_responses)

    n_valid = table.valid_counts()
    n_na = table.na_counts()

    if min_valid_responses == 0:
        excluded = n_na == table.n_items
    elif min_valid_responses == 1:
        excluded = n_na > 0
    else:
        excluded = (n_valid / table.n_items) <= min_valid_responses

    if np.all(excluded):
        raise AllRowsExcludedError(
            "No response quality indicators were calculated as the proportion of "
            "missing data per respondent is larger than defined in "
            "min_valid_responses."
        )

    logger.debug(f"Excluding {int(excluded.sum())} of {table.n_rows} respondents "
                 f"(min_valid_responses={min_valid_responses})")
    return excluded


def eligible_rows(table: ResponseTable, min_valid_responses: float) -> np.ndarray:
    """Boolean array, True for rows that receive computed indicators."""
    return ~exclusion_mask(table, min_valid_responses)
