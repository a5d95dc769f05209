"""
resquin: survey response quality indicators.

Computes per-respondent response style and response distribution
indicators from multi-item survey scales, tolerant of missing responses.
"""

__version__ = '0.1.0'

from resquin.errors import (
    ResquinError, InvalidArgumentError, InvalidShapeError, NonIntegerDataError,
    OutOfRangeResponseError, AllRowsExcludedError, SingularCovarianceError,
    SingularCovarianceWarning
)
from resquin.math.indicators import resp_styles, resp_distributions
