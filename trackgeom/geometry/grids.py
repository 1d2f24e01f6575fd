"""
Sampling grids over covariance ellipsoids
"""

import logging
import numpy as np
from scipy import linalg
from scipy.stats import chi2
from typing import Optional, Sequence, Tuple, Union

from ..constants import DEFAULT_GRID_PROBABILITY
from ..validators import (
    ParameterOutOfRangeError, ShapeMismatchError, validate_dimension, validate_probability
)

logger = logging.getLogger(__name__)


def chi_square_inv_cdf(prob: float, dim: int) -> float:
    """
    Inverse CDF of the chi-square distribution

    Args:
        prob: Probability in [0, 1]
        dim: Degrees of freedom

    Returns:
        Value x with P(X <= x) = prob for X ~ chi2(dim)
    """
    prob = validate_probability(prob)
    dim = validate_dimension(dim)
    return float(chi2.ppf(prob, dim))


def create_grid_from_cov_mat(mat: np.ndarray,
                             num_pts: Union[int, Sequence[int]],
                             center: Optional[np.ndarray] = None,
                             gamma: Optional[float] = None) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Grid of points mapped from the unit hypercube by a covariance matrix

    The matrix is factored with a real Schur decomposition mat = U T U^T.
    The diagonal of T is replaced by sqrt(gamma * T_ii) and the axes
    linspace(-1, 1, num_pts[d]) are mapped through U T and shifted to the
    center. Grid points are ordered with the first dimension varying
    fastest.

    Args:
        mat: dim x dim matrix, normally a covariance
        num_pts: Points per axis, either a scalar or one value per dimension
        center: Center of the grid; the origin if None
        gamma: Eigenvalue scaling. Defaults to the chi-square inverse CDF at
            probability 0.9997 (about 3-sigma). Use 1 for a plain mapping of
            the unit hypercube.

    Returns:
        Tuple of (dim x prod(num_pts) grid, dim x dim transformation matrix).
        An empty matrix or zero points give an empty grid and None.

    Raises:
        ShapeMismatchError: If mat is not square or num_pts has the wrong length
        ParameterOutOfRangeError: If num_pts is negative or mat has negative
            eigenvalues
    """
    mat = np.asarray(mat, dtype=float)
    if mat.size == 0:
        return np.empty((0, 0)), None
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        raise ShapeMismatchError(f"mat must be a square matrix, got shape {mat.shape}")
    num_dim = mat.shape[0]

    num_pts = np.atleast_1d(np.asarray(num_pts, dtype=int))
    if np.any(num_pts < 0):
        raise ParameterOutOfRangeError("num_pts", int(num_pts.min()), 0, np.inf)
    if num_pts.size == 1:
        num_pts = np.full(num_dim, num_pts[0])
    elif num_pts.size != num_dim:
        raise ShapeMismatchError(
            f"num_pts must be a scalar or have {num_dim} entries, got {num_pts.size}"
        )
    if np.prod(num_pts) == 0:
        return np.empty((num_dim, 0)), None

    if center is None:
        center = np.zeros(num_dim)
    center = np.asarray(center, dtype=float).reshape(num_dim, 1)

    if gamma is None:
        gamma = chi_square_inv_cdf(DEFAULT_GRID_PROBABILITY, num_dim)

    T, U = linalg.schur(mat, output='real')
    diag = gamma * np.diag(T)
    scale = np.max(np.abs(diag)) if diag.size else 0.0
    if np.any(diag < -1e-12 * max(scale, 1.0)):
        raise ParameterOutOfRangeError("eigenvalue", float(diag.min()), 0.0, np.inf)
    T = T.copy()
    T[np.diag_indices(num_dim)] = np.sqrt(np.clip(diag, 0.0, None))
    trans_mat = U @ T

    axes = [np.linspace(-1, 1, n) for n in num_pts]
    nd_mats = np.meshgrid(*axes, indexing='ij')
    unit_grid = np.vstack([m.ravel(order='F') for m in nd_mats])

    grid = trans_mat @ unit_grid + center
    logger.debug(f"Created {grid.shape[1]} grid points in {num_dim} dimensions (gamma={gamma:.4f})")

    return grid, trans_mat
