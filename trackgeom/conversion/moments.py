"""
Moment reconstruction from weighted point clouds.
"""

import numpy as np
from typing import Tuple

from ..validators import ShapeMismatchError


def calc_mixture_moments(points: np.ndarray, weights: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Weighted mean and covariance of a point cloud

    The covariance is symmetrized by averaging it with its transpose.
    Inputs are not checked for NaN or Inf; they propagate to the output.

    Args:
        points: dim x K points
        weights: K weights, expected to sum to one

    Returns:
        Tuple of (mean of length dim, dim x dim covariance)
    """
    points = np.asarray(points, dtype=float)
    weights = np.asarray(weights, dtype=float).reshape(-1)
    if points.ndim != 2 or points.shape[1] != weights.shape[0]:
        raise ShapeMismatchError(
            f"Got {weights.shape[0]} weights for points of shape {points.shape}"
        )

    # Work relative to the first point so identical points give exactly zero spread
    ref = points[:, :1]
    shifted = points - ref
    shift_mean = shifted @ weights
    mean = ref[:, 0] + shift_mean
    diff = shifted - shift_mean[:, np.newaxis]
    cov = (diff * weights) @ diff.T
    cov = (cov + cov.T) / 2

    return mean, cov
