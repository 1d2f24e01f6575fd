"""
Cubature-based conversion of Cartesian Gaussians into refraction-corrupted
bistatic r-u-v coordinates.

For every input measurement the cubature points are mapped onto the
measurement's Gaussian, pushed through the nonlinear measurement model and
recombined into a mean and covariance. Measurements are independent: the
point set and geometry are shared read-only, each result is written to its
own slot, and a failure in one measurement is recorded without stopping the
others.
"""

import logging
import numpy as np
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Tuple
from dataclasses import dataclass, field

from .cubature import CubaturePointSet, fifth_order_cubature_points, transform_cubature_points
from .geometry import GaussianEstimate, MeasurementGeometry
from .measurement import StdRefracRuvModel
from .moments import calc_mixture_moments
from ..constants import MEASUREMENT_DIM
from ..validators import (
    ConversionError, ShapeMismatchError, validate_points, validate_sqrt_covariances
)

logger = logging.getLogger(__name__)


@dataclass
class PropagationResult:
    """Converted means and covariances for a batch of measurements

    Attributes:
        means: 3xN converted means; column i belongs to measurement i
        covariances: Nx3x3 converted covariances
        errors: Errors of the measurements that could not be converted,
            keyed by index. Their mean and covariance entries are NaN.
    """
    means: np.ndarray
    covariances: np.ndarray
    errors: Dict[int, ConversionError] = field(default_factory=dict)

    @property
    def num_measurements(self) -> int:
        return self.means.shape[1]

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def estimate(self, index: int) -> GaussianEstimate:
        """Converted estimate of one measurement"""
        return GaussianEstimate(self.means[:, index], self.covariances[index])

    def raise_if_failed(self):
        """Raise the error of the first failed measurement, if any"""
        if self.errors:
            first = min(self.errors)
            raise self.errors[first]


class CubatureUncertaintyPropagator:
    """Convert Cartesian measurement Gaussians to r-u-v with cubature integration"""

    def __init__(self,
                 geometry: Optional[MeasurementGeometry] = None,
                 cubature: Optional[CubaturePointSet] = None,
                 max_workers: int = 1):
        """
        Initialize the propagator

        Args:
            geometry: Sensor layout and atmosphere; defaults are used if None
            cubature: Cubature points and weights for N(0, I) in 3D. The
                fifth-order rule is used if None.
            max_workers: Number of threads used to convert a batch; 1 runs
                the measurements sequentially
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.geometry = geometry if geometry is not None else MeasurementGeometry()
        self.cubature = cubature if cubature is not None else fifth_order_cubature_points(MEASUREMENT_DIM)
        if self.cubature.dim != MEASUREMENT_DIM:
            raise ShapeMismatchError(
                f"Cubature points must be {MEASUREMENT_DIM}-dimensional, got {self.cubature.dim}"
            )
        self.max_workers = max_workers
        self.model = StdRefracRuvModel(self.geometry)

    def convert_one(self, mean: np.ndarray, sqrt_cov: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        Convert a single Cartesian Gaussian

        Args:
            mean: Cartesian mean (3,)
            sqrt_cov: 3x3 lower-triangular square root of the covariance

        Returns:
            Tuple of (r-u-v mean (3,), 3x3 r-u-v covariance)
        """
        points = transform_cubature_points(self.cubature.points, mean, sqrt_cov)
        ruv_points = self.model.convert(points)
        return calc_mixture_moments(ruv_points, self.cubature.weights)

    def convert(self, means: np.ndarray, sqrt_covs: np.ndarray) -> PropagationResult:
        """
        Convert a batch of Cartesian Gaussians

        Args:
            means: 3xN Cartesian means (a single (3,) mean is accepted)
            sqrt_covs: A 3x3 square root shared by every measurement or an
                Nx3x3 stack with one square root per measurement

        Returns:
            PropagationResult aligned with the input order

        Raises:
            ShapeMismatchError: If the inputs do not describe N 3D Gaussians
        """
        means = validate_points(means, "means")
        num_meas = means.shape[1]
        sqrt_covs, broadcast = validate_sqrt_covariances(sqrt_covs, num_meas)

        logger.info(
            f"Converting {num_meas} measurement(s) with {self.cubature.num_points} "
            f"cubature points ({'shared' if broadcast else 'per-measurement'} covariance, "
            f"{self.max_workers} worker(s))"
        )

        out_means = np.full((MEASUREMENT_DIM, num_meas), np.nan)
        out_covs = np.full((num_meas, MEASUREMENT_DIM, MEASUREMENT_DIM), np.nan)
        errors: Dict[int, ConversionError] = {}

        def task(i: int):
            sqrt_cov = sqrt_covs if broadcast else sqrt_covs[i]
            try:
                return i, self.convert_one(means[:, i], sqrt_cov), None
            except ConversionError as e:
                return i, None, e

        if self.max_workers == 1 or num_meas == 1:
            outcomes = map(task, range(num_meas))
            self._collect(outcomes, out_means, out_covs, errors)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                self._collect(executor.map(task, range(num_meas)), out_means, out_covs, errors)

        if errors:
            logger.warning(f"{len(errors)} of {num_meas} measurement(s) could not be converted")
        else:
            logger.info(f"Converted {num_meas} measurement(s)")

        return PropagationResult(means=out_means, covariances=out_covs, errors=errors)

    @staticmethod
    def _collect(outcomes, out_means, out_covs, errors):
        for i, moments, error in outcomes:
            if error is not None:
                logger.warning(f"Measurement {i}: {error}")
                errors[i] = error
                continue
            out_means[:, i], out_covs[i] = moments
            logger.debug(f"Measurement {i}: r-u-v mean {out_means[:, i]}")


def cart_to_ruv_std_refrac_cubature(means: np.ndarray,
                                    sqrt_covs: np.ndarray,
                                    geometry: Optional[MeasurementGeometry] = None,
                                    cubature: Optional[CubaturePointSet] = None,
                                    max_workers: int = 1) -> PropagationResult:
    """
    Approximate the moments of Cartesian measurements converted into
    refraction-corrupted bistatic r-u-v coordinates

    For a two-way monostatic conversion leave the transmitter and receiver
    collocated (the default geometry places both at the origin).

    Args:
        means: 3xN Cartesian means in meters
        sqrt_covs: 3x3 or Nx3x3 lower-triangular covariance square roots
        geometry: Sensor layout and atmosphere; defaults are used if None
        cubature: Custom cubature points and weights; fifth-order if None
        max_workers: Number of threads for the per-measurement map

    Returns:
        PropagationResult with 3xN means and Nx3x3 covariances
    """
    propagator = CubatureUncertaintyPropagator(geometry, cubature, max_workers)
    return propagator.convert(means, sqrt_covs)
