"""
Input checks shared by the indicator functions.

All checks raise before any computation starts so that a call either
completes or fails without a partial result.
"""

import logging
import numbers
import numpy as np
import pandas as pd
from typing import Any, List

from resquin.errors import (
    InvalidArgumentError, InvalidShapeError, NonIntegerDataError,
    OutOfRangeResponseError
)

# Set up logging
logger = logging.getLogger(__name__)


def is_number(value: Any) -> bool:
    """
    Check whether a value is a real scalar number.

    Booleans are not numbers here, even though bool subclasses int.

    Args:
        value: Value to check

    Returns:
        True if value is a real, non-boolean scalar
    """
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, numbers.Real)


def _column_is_integer(column: pd.Series) -> bool:
    """
    Check that every non-missing entry of a column is an integer value.

    Args:
        column: One item column

    Returns:
        True if the column can be cast to integers without loss
    """
    observed = column.dropna()
    if observed.empty:
        return True

    if pd.api.types.is_bool_dtype(observed) or pd.api.types.is_complex_dtype(observed):
        return False

    if pd.api.types.is_numeric_dtype(observed):
        values = observed.to_numpy(dtype=float)
    else:
        # Object columns: every entry must itself be a number
        if not all(is_number(value) for value in observed):
            return False
        values = observed.to_numpy(dtype=float)

    return bool(np.all(np.isfinite(values)) and np.all(values == np.round(values)))


def check_table(x: Any) -> None:
    """
    Check that x is a data frame of integer-valued item responses.

    Args:
        x: Candidate response data

    Raises:
        InvalidShapeError: x is not a non-empty pandas DataFrame
        NonIntegerDataError: some columns hold non-integer data
    """
    if not isinstance(x, pd.DataFrame):
        raise InvalidShapeError(
            f"x must be a pandas DataFrame. You have supplied a(n) {type(x).__name__}."
        )

    if x.shape[1] == 0:
        raise InvalidShapeError("x must contain at least one column.")

    bad_columns = [name for name, column in x.items() if not _column_is_integer(column)]
    if bad_columns:
        raise NonIntegerDataError(bad_columns)


def check_number(value: Any, name: str) -> None:
    """
    Check that a scalar argument is numeric.

    Args:
        value: Argument value
        name: Argument name used in the message

    Raises:
        InvalidArgumentError: value is not a real number
    """
    if not is_number(value):
        raise InvalidArgumentError(f"Argument '{name}' must be numeric.")


def check_min_valid_responses(min_valid_responses: Any) -> None:
    """
    Check that min_valid_responses is a number in [0, 1].

    Args:
        min_valid_responses: Share of valid responses required per respondent

    Raises:
        InvalidArgumentError: not numeric or out of range
    """
    check_number(min_valid_responses, 'min_valid_responses')
    # NaN fails both comparisons and is rejected too
    if not 0 <= min_valid_responses <= 1:
        raise InvalidArgumentError(
            "Argument 'min_valid_responses' must be between or equal to 0 and 1."
        )


def check_normalize(normalize: Any) -> None:
    if not isinstance(normalize, (bool, np.bool_)):
        raise InvalidArgumentError("Argument 'normalize' must be logical.")


def check_scale_bounds(scale_min: Any, scale_max: Any) -> None:
    """
    Check that the scale bounds are numeric.

    Args:
        scale_min: Lowest response option
        scale_max: Highest response option

    Raises:
        InvalidArgumentError: a bound is not numeric
    """
    check_number(scale_min, 'scale_min')
    check_number(scale_max, 'scale_max')


def check_scale_order(scale_min: float, scale_max: float) -> None:
    if not scale_min <= scale_max:
        raise InvalidArgumentError(
            "Argument 'scale_min' must be smaller than or equal to 'scale_max'."
        )


def out_of_range_columns(values: np.ndarray,
                         colnames: List[Any],
                         scale_min: float,
                         scale_max: float) -> List[Any]:
    """
    Find the columns holding responses outside [scale_min, scale_max].

    Args:
        values: Response matrix with NaN for missing responses
        colnames: Item names, one per column
        scale_min: Lowest response option
        scale_max: Highest response option

    Returns:
        Names of the offending columns, in column order
    """
    with np.errstate(invalid='ignore'):
        outside = (values < scale_min) | (values > scale_max)
    return [name for name, bad in zip(colnames, outside.any(axis=0)) if bad]


def check_response_range(values: np.ndarray,
                         colnames: List[Any],
                         scale_min: float,
                         scale_max: float) -> None:
    """
    Check that all observed responses lie on the scale.

    Raises:
        OutOfRangeResponseError: naming every offending column
    """
    bad_columns = out_of_range_columns(values, colnames, scale_min, scale_max)
    if bad_columns:
        logger.debug(f"Responses outside [{scale_min}, {scale_max}] in {bad_columns}")
        raise OutOfRangeResponseError(bad_columns)
