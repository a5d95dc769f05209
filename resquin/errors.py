"""
Exceptions and warnings raised by resquin.

Every fatal condition derives from ResquinError so callers can catch the
whole family at once. The covariance failure of the Mahalanobis stage is
the only recoverable condition and is surfaced as a warning.
"""

from typing import List, Optional


class ResquinError(Exception):
    """Base class for all resquin errors."""


class InvalidArgumentError(ResquinError, ValueError):
    """A scalar parameter is of the wrong type or out of range."""


class InvalidShapeError(ResquinError, TypeError):
    """The response data is not a rectangular table of the expected kind."""


class NonIntegerDataError(ResquinError, ValueError):
    """One or more columns hold non-integer or non-numeric entries."""

    def __init__(self, columns: List[str], message: Optional[str] = None):
        self.columns = list(columns)
        if message is None:
            message = (
                "Non-integer data found in following columns: "
                f"{', '.join(map(str, self.columns))}. "
                "Please supply only integer values."
            )
        super().__init__(message)


class OutOfRangeResponseError(ResquinError, ValueError):
    """Observed responses fall outside [scale_min, scale_max]."""

    def __init__(self, columns: List[str], message: Optional[str] = None):
        self.columns = list(columns)
        if message is None:
            message = (
                "Response options outside of range defined by `scale_min` and "
                "`scale_max` were found. Following columns contain response "
                f"options outside of `scale_min` and `scale_max`: "
                f"{' '.join(map(str, self.columns))}"
            )
        super().__init__(message)


class AllRowsExcludedError(ResquinError, ValueError):
    """The missing-data threshold leaves no respondent to compute indicators for."""


class SingularCovarianceError(ResquinError):
    """
    The item covariance matrix could not be inverted.

    Returned as a value by the Mahalanobis stage rather than raised.
    """


class SingularCovarianceWarning(UserWarning):
    """Mahalanobis distances were not computed for this data set."""
