"""
Cubature rules for Gaussian moment integration.

The fifth-order rule integrates every polynomial of total degree five or
less exactly against the standard normal density N(0, I). For dimension n it
uses 2n^2 + 1 points:

    origin                              weight 2/(n+2)
    +-sqrt(n+2) e_i                     weight (4-n)/(2(n+2)^2)
    sqrt((n+2)/2) (+-e_i +- e_j), i<j   weight 1/(n+2)^2

Points are stored as the columns of a dim x K array so that an affine
change of variables is a single matrix product.
"""

import numpy as np
from functools import lru_cache
from dataclasses import dataclass

from ..validators import (
    ParameterOutOfRangeError, ShapeMismatchError, validate_dimension, validate_points
)
from ..constants import WEIGHT_SUM_TOLERANCE


@dataclass(frozen=True, eq=False)
class CubaturePointSet:
    """Read-only cubature points (columns) and their weights"""
    points: np.ndarray
    weights: np.ndarray

    @classmethod
    def from_arrays(cls, points, weights) -> 'CubaturePointSet':
        """
        Build a point set from caller supplied arrays

        Args:
            points: dim x K array of points
            weights: K weights

        Raises:
            ShapeMismatchError: If the number of weights does not match the
                number of points
            ParameterOutOfRangeError: If the weights do not sum to one
        """
        points = np.array(points, dtype=float)
        if points.ndim != 2:
            raise ShapeMismatchError(f"Cubature points must be 2D, got shape {points.shape}")
        weights = np.array(weights, dtype=float).reshape(-1)
        if weights.shape[0] != points.shape[1]:
            raise ShapeMismatchError(
                f"Got {weights.shape[0]} weights for {points.shape[1]} cubature points"
            )
        weight_sum = float(weights.sum())
        if not abs(weight_sum - 1.0) <= WEIGHT_SUM_TOLERANCE:
            raise ParameterOutOfRangeError("sum(weights)", weight_sum, 1.0, 1.0)
        points.setflags(write=False)
        weights.setflags(write=False)
        return cls(points=points, weights=weights)

    @property
    def dim(self) -> int:
        return self.points.shape[0]

    @property
    def num_points(self) -> int:
        return self.points.shape[1]


@lru_cache(maxsize=None)
def _fifth_order_rule(n: int) -> CubaturePointSet:
    num_points = 2 * n * n + 1
    xi = np.zeros((n, num_points))
    w = np.zeros(num_points)

    w[0] = 2.0 / (n + 2)

    idx = 1
    r1 = np.sqrt(n + 2.0)
    w1 = (4.0 - n) / (2.0 * (n + 2)**2)
    for i in range(n):
        xi[i, idx] = r1
        xi[i, idx + 1] = -r1
        w[idx] = w1
        w[idx + 1] = w1
        idx += 2

    r2 = np.sqrt((n + 2.0) / 2.0)
    w2 = 1.0 / (n + 2)**2
    for i in range(n):
        for j in range(i + 1, n):
            for si, sj in ((1, 1), (1, -1), (-1, 1), (-1, -1)):
                xi[i, idx] = si * r2
                xi[j, idx] = sj * r2
                w[idx] = w2
                idx += 1

    return CubaturePointSet.from_arrays(xi, w)


def fifth_order_cubature_points(dim: int) -> CubaturePointSet:
    """
    Fifth-order cubature rule for the standard normal distribution

    The same (read-only) point set is returned for repeated calls with the
    same dimensionality.

    Args:
        dim: Dimensionality of the Gaussian

    Returns:
        CubaturePointSet with 2*dim**2 + 1 points

    Raises:
        InvalidDimensionError: If dim is not a positive integer
    """
    return _fifth_order_rule(validate_dimension(dim))


def transform_cubature_points(points: np.ndarray, mean: np.ndarray,
                              sqrt_cov: np.ndarray) -> np.ndarray:
    """
    Map standard normal cubature points onto N(mean, S S^T)

    A singular S is allowed; the points then collapse onto the mean along
    the degenerate directions.

    Args:
        points: dim x K standardized points
        mean: Mean vector of length dim
        sqrt_cov: dim x dim square root S of the covariance

    Returns:
        dim x K transformed points, in the same order
    """
    points = np.asarray(points, dtype=float)
    dim = points.shape[0]
    mean = validate_points(mean, "mean", dim)
    if mean.shape[1] != 1:
        raise ShapeMismatchError(f"mean must be a single {dim} vector, got {mean.shape}")
    sqrt_cov = np.asarray(sqrt_cov, dtype=float)
    if sqrt_cov.shape != (dim, dim):
        raise ShapeMismatchError(
            f"Covariance square root must be {dim}x{dim}, got {sqrt_cov.shape}"
        )
    return sqrt_cov @ points + mean
