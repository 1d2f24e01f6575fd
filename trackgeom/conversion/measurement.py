"""
Refraction-corrupted bistatic range / direction-cosine measurement model.

A Cartesian point is observed as [r; u; v]:

    r  bistatic range, transmitter -> target -> receiver, where each leg is
       lengthened by the excess electrical path through a standard
       exponential atmosphere (halved when use_half_range is set)
    u  first direction cosine in the receiver's local frame
    v  second direction cosine in the receiver's local frame

Only the range is affected by refraction; u and v are purely geometric.

References:
  - D. F. Crouse, "Basic tracking using 3D monostatic and bistatic
    measurements in refractive environments," IEEE AES Magazine, vol. 29,
    no. 8, Part II, pp. 54-75, Aug. 2014.
  - B. R. Bean and G. D. Thayer, CRPL Exponential Reference Atmosphere,
    National Bureau of Standards, 1959.
"""

import logging
import numpy as np
from typing import Optional

from .geometry import MeasurementGeometry
from ..validators import DegenerateGeometryError, validate_points

logger = logging.getLogger(__name__)


class StdRefracRuvModel:
    """Cartesian to refraction-corrupted r-u-v conversion for one geometry"""

    def __init__(self, geometry: Optional[MeasurementGeometry] = None):
        """
        Initialize the measurement model

        Args:
            geometry: Sensor layout and atmosphere; defaults are used if None
        """
        self.geometry = geometry if geometry is not None else MeasurementGeometry()
        atmosphere = self.geometry.atmosphere

        ends = np.column_stack([self.geometry.transmitter, self.geometry.receiver])
        self._tx_height, self._rx_height = atmosphere.heights(ends, self.geometry.frame_origin)

        logger.debug(
            f"Measurement model: Ns={atmosphere.surface_refractivity}, "
            f"ce={atmosphere.decay_constant:.6e} 1/m, "
            f"tx height={self._tx_height:.2f} m, rx height={self._rx_height:.2f} m"
        )

    def local_coordinates(self, points: np.ndarray) -> np.ndarray:
        """Points expressed in the receiver's local frame"""
        points = validate_points(points)
        return self.geometry.rotation @ (points - self.geometry.receiver[:, np.newaxis])

    def direction_cosines(self, points: np.ndarray) -> np.ndarray:
        """
        u-v direction cosines of points as seen by the receiver

        Raises:
            DegenerateGeometryError: If a point coincides with the receiver
        """
        x_local = self.local_coordinates(points)
        r_local = np.linalg.norm(x_local, axis=0)
        if np.any(r_local == 0):
            bad = np.flatnonzero(r_local == 0)
            raise DegenerateGeometryError(
                f"Point(s) {bad.tolist()} coincide with the receiver; direction cosines are undefined"
            )
        return x_local[:2] / r_local

    def geometric_range(self, points: np.ndarray) -> np.ndarray:
        """Unrefracted bistatic range (halved if use_half_range)"""
        points = validate_points(points)
        d_tx = np.linalg.norm(points - self.geometry.transmitter[:, np.newaxis], axis=0)
        d_rx = np.linalg.norm(points - self.geometry.receiver[:, np.newaxis], axis=0)
        r = d_tx + d_rx
        if self.geometry.use_half_range:
            r = r / 2
        return r

    def refracted_range(self, points: np.ndarray) -> np.ndarray:
        """Bistatic range including the excess path on both legs"""
        points = validate_points(points)
        atmosphere = self.geometry.atmosphere

        d_tx = np.linalg.norm(points - self.geometry.transmitter[:, np.newaxis], axis=0)
        d_rx = np.linalg.norm(points - self.geometry.receiver[:, np.newaxis], axis=0)
        h_target = atmosphere.heights(points, self.geometry.frame_origin)

        excess_tx = atmosphere.excess_path_length(self._tx_height, h_target, d_tx)
        excess_rx = atmosphere.excess_path_length(h_target, self._rx_height, d_rx)

        r = d_tx + excess_tx + d_rx + excess_rx
        if self.geometry.use_half_range:
            r = r / 2
        return r

    def convert(self, points: np.ndarray) -> np.ndarray:
        """
        Convert Cartesian points to refraction-corrupted r-u-v

        Args:
            points: 3xN Cartesian points (a single (3,) point is accepted)

        Returns:
            3xN array of [r; u; v]

        Raises:
            DegenerateGeometryError: If a point coincides with the receiver
        """
        points = validate_points(points)
        uv = self.direction_cosines(points)
        r = self.refracted_range(points)
        return np.vstack([r, uv])

    __call__ = convert


def cart_to_ruv_std_refrac(points: np.ndarray,
                           geometry: Optional[MeasurementGeometry] = None) -> np.ndarray:
    """
    Convert Cartesian points to refraction-corrupted bistatic r-u-v

    Args:
        points: 3xN Cartesian points in meters
        geometry: Sensor layout and atmosphere; defaults are used if None

    Returns:
        3xN array of [r; u; v]
    """
    return StdRefracRuvModel(geometry).convert(points)
