"""
Mahalanobis distance tolerant of missing responses.

The distance of each respondent from the sample centre is computed in two
phases. First the eligible rows are reduced to a column mean vector and a
pairwise-complete covariance matrix. Then each eligible row is centred,
missing cells are set to zero so they add nothing to the quadratic form, and
the distance is taken against the inverse covariance matrix.
"""

import logging
import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import Optional, Tuple

import scipy.linalg

from resquin.errors import SingularCovarianceError

# Set up logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MahalanobisResult:
    """Distances for all rows, or the reason they could not be computed."""
    distances: Optional[np.ndarray] = None
    error: Optional[SingularCovarianceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def center_and_covariance(values: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Reduce a response matrix to its column means and covariance.

    Means ignore missing cells per column. The covariance of columns i and j
    uses only rows where both are observed (sample covariance, ddof=1).

    Args:
        values: Response matrix of the eligible rows

    Returns:
        Tuple of (mean vector, covariance matrix)
    """
    frame = pd.DataFrame(values)
    center = frame.mean(axis=0).to_numpy()
    cov = frame.cov().to_numpy()
    return center, cov


def covariance_problem(cov: np.ndarray) -> Optional[SingularCovarianceError]:
    """
    Check whether a covariance matrix can be inverted reliably.

    Args:
        cov: Square covariance matrix

    Returns:
        None if cov is usable, otherwise the error describing why not
    """
    if not np.all(np.isfinite(cov)):
        return SingularCovarianceError(
            "Covariance matrix has undefined entries; too few pairwise complete "
            "observations. There may be too many missing values."
        )

    # Same tolerance as LAPACK-based solvers: rcond below machine epsilon
    rcond = 1.0 / np.linalg.cond(cov, 1)
    if not rcond >= np.finfo(float).eps:
        return SingularCovarianceError(
            f"Covariance matrix is singular (reciprocal condition number {rcond:.3g}). "
            "Items may be collinear."
        )
    return None


def quadratic_distances(centered: np.ndarray, inv_cov: np.ndarray) -> np.ndarray:
    """
    Compute sqrt(x · inv_cov · xᵀ) for every row x.

    A negative quadratic form, possible when a pairwise covariance matrix is
    not positive semi-definite, yields NaN for that row.

    Args:
        centered: Centred rows with missing cells set to zero
        inv_cov: Inverse covariance matrix

    Returns:
        Distance per row
    """
    forms = np.einsum('ij,jk,ik->i', centered, inv_cov, centered)
    with np.errstate(invalid='ignore'):
        return np.sqrt(forms)


def mahalanobis_distances(values: np.ndarray, eligible: np.ndarray) -> MahalanobisResult:
    """
    Compute Mahalanobis distances for the eligible rows.

    Both the mean vector and the covariance matrix are computed from the
    eligible rows only.

    Args:
        values: Response matrix with NaN for missing responses
        eligible: Boolean array, True for rows to compute

    Returns:
        MahalanobisResult holding a full-length distance array (NaN for
        rows that are not eligible) or the covariance error
    """
    subset = values[eligible]
    center, cov = center_and_covariance(subset)

    error = covariance_problem(cov)
    if error is None:
        try:
            inv_cov = scipy.linalg.inv(cov)
        except scipy.linalg.LinAlgError as e:
            error = SingularCovarianceError(f"Covariance matrix could not be inverted: {e}")

    if error is not None:
        logger.debug(f"Skipping Mahalanobis distances: {error}")
        return MahalanobisResult(error=error)

    centered = subset - center
    centered[np.isnan(centered)] = 0.0

    distances = np.full(values.shape[0], np.nan)
    distances[eligible] = quadratic_distances(centered, inv_cov)
    return MahalanobisResult(distances=distances)
