"""
Geodesy primitives for measurement conversion
==============================================

Supported frames:
  - Geodetic (lat, lon, height) on an arbitrary reference ellipsoid
  - ECEF (Earth-Centered Earth-Fixed)
  - ENU (East-North-Up) local tangent plane anchored on the ellipsoid

All angles are in radians and all routines accept 3xN arrays of points so
that whole cubature point clouds are converted in one call.

References:
  - Bowring (1976) - ECEF to geodetic
  - Farrell (2008) - Aided Navigation: GPS with High Rate Sensors
"""

import numpy as np
from typing import Optional, Sequence, Tuple

from .constants import (
    WGS84_SEMI_MAJOR_AXIS, WGS84_FLATTENING,
    ellipsoid_eccentricity_squared, ellipsoid_semi_minor_axis
)


# ===== GEODETIC <-> ECEF =====

def geodetic_to_ecef(lat: np.ndarray, lon: np.ndarray, height: np.ndarray,
                     a: float = WGS84_SEMI_MAJOR_AXIS,
                     f: float = WGS84_FLATTENING) -> np.ndarray:
    """Geodetic coordinates to ECEF.

    Args:
        lat: Geodetic latitude(s) [rad]
        lon: Longitude(s) [rad]
        height: Height(s) above the ellipsoid [m]
        a: Semi-major axis [m]
        f: Flattening

    Returns:
        np.ndarray: 3xN [x; y; z] ECEF in meters (3 elements for scalars)
    """
    lat = np.asarray(lat, dtype=float)
    lon = np.asarray(lon, dtype=float)
    height = np.asarray(height, dtype=float)
    e2 = ellipsoid_eccentricity_squared(f)

    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)

    N = a / np.sqrt(1 - e2 * sin_lat**2)

    x = (N + height) * cos_lat * np.cos(lon)
    y = (N + height) * cos_lat * np.sin(lon)
    z = (N * (1 - e2) + height) * sin_lat

    return np.array([x, y, z])


def ecef_to_geodetic(points: np.ndarray,
                     a: float = WGS84_SEMI_MAJOR_AXIS,
                     f: float = WGS84_FLATTENING) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """ECEF to geodetic (Bowring start, two fixed-point refinements).

    Args:
        points: 3xN ECEF positions [m]

    Returns:
        Tuple: (lat_rad, lon_rad, height_m), each of length N
    """
    points = np.asarray(points, dtype=float).reshape(3, -1)
    x, y, z = points
    b = ellipsoid_semi_minor_axis(a, f)
    e2 = ellipsoid_eccentricity_squared(f)
    ep2 = e2 / (1 - e2)

    lon = np.arctan2(y, x)
    p = np.hypot(x, y)

    # Bowring's parametric latitude start
    theta = np.arctan2(z * a, p * b)
    lat = np.arctan2(
        z + ep2 * b * np.sin(theta)**3,
        p - e2 * a * np.cos(theta)**3
    )

    for _ in range(2):
        sin_lat = np.sin(lat)
        N = a / np.sqrt(1 - e2 * sin_lat**2)
        lat = np.arctan2(z + e2 * N * sin_lat, p)

    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    # Valid at the poles as well as the equator
    height = p * cos_lat + z * sin_lat - a * np.sqrt(1 - e2 * sin_lat**2)

    return lat, lon, height


# ===== ECEF <-> ENU =====

def _ecef_to_enu_rotation(lat_rad: float, lon_rad: float) -> np.ndarray:
    """Rotation matrix from ECEF to ENU frame."""
    sin_lat = np.sin(lat_rad)
    cos_lat = np.cos(lat_rad)
    sin_lon = np.sin(lon_rad)
    cos_lon = np.cos(lon_rad)

    return np.array([
        [-sin_lon,             cos_lon,             0       ],
        [-sin_lat * cos_lon,  -sin_lat * sin_lon,   cos_lat ],
        [ cos_lat * cos_lon,   cos_lat * sin_lon,   sin_lat ]
    ])


def enu_to_ecef(enu: np.ndarray, origin: Sequence[float],
                a: float = WGS84_SEMI_MAJOR_AXIS,
                f: float = WGS84_FLATTENING) -> np.ndarray:
    """ENU to ECEF for a frame whose origin sits on the ellipsoid surface.

    Args:
        enu: 3xN [east; north; up] positions [m]
        origin: (lat, lon) of the frame origin [rad]; its height is zero

    Returns:
        np.ndarray: 3xN ECEF positions
    """
    enu = np.asarray(enu, dtype=float).reshape(3, -1)
    lat0, lon0 = origin
    ref_ecef = geodetic_to_ecef(lat0, lon0, 0.0, a, f)
    R = _ecef_to_enu_rotation(lat0, lon0)
    return R.T @ enu + ref_ecef.reshape(3, 1)


def ecef_to_enu(ecef: np.ndarray, origin: Sequence[float],
                a: float = WGS84_SEMI_MAJOR_AXIS,
                f: float = WGS84_FLATTENING) -> np.ndarray:
    """ECEF to ENU for a frame whose origin sits on the ellipsoid surface."""
    ecef = np.asarray(ecef, dtype=float).reshape(3, -1)
    lat0, lon0 = origin
    ref_ecef = geodetic_to_ecef(lat0, lon0, 0.0, a, f)
    R = _ecef_to_enu_rotation(lat0, lon0)
    return R @ (ecef - ref_ecef.reshape(3, 1))


# ===== HEIGHTS AND CURVATURE =====

def ellipsoid_height(points: np.ndarray,
                     a: float = WGS84_SEMI_MAJOR_AXIS,
                     f: float = WGS84_FLATTENING,
                     frame_origin: Optional[Sequence[float]] = None) -> np.ndarray:
    """Height of points above the reference ellipsoid.

    Args:
        points: 3xN Cartesian positions [m]
        a: Semi-major axis [m]
        f: Flattening
        frame_origin: (lat, lon) [rad] of the ENU frame the points are given
            in. None means the points are already ECEF.

    Returns:
        np.ndarray: N heights [m]
    """
    points = np.asarray(points, dtype=float).reshape(3, -1)
    if frame_origin is not None:
        points = enu_to_ecef(points, frame_origin, a, f)
    _, _, height = ecef_to_geodetic(points, a, f)
    return height


def osculating_sphere_radius(lat: float,
                             a: float = WGS84_SEMI_MAJOR_AXIS,
                             f: float = WGS84_FLATTENING) -> float:
    """Radius of the sphere matching the Gaussian curvature at a latitude.

    This is the geometric mean of the meridional (M) and prime vertical (N)
    radii of curvature.
    """
    e2 = ellipsoid_eccentricity_squared(f)
    w2 = 1 - e2 * np.sin(lat)**2
    M = a * (1 - e2) / w2**1.5
    N = a / np.sqrt(w2)
    return float(np.sqrt(M * N))
