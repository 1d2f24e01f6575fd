"""
Orthographic projection between a sphere and its tangent plane.

The tangent plane touches the sphere at a reference latitude/longitude. A
point in the plane is x * u_east + y * u_north, with u_east and u_north the
local East and North unit vectors at the reference point.

References:
  - J. P. Snyder, "Map projections - a working manual," U.S. Geological
    Survey, Tech. Rep. 1395, 1987, chapter 20.
"""

import numpy as np
from typing import Optional, Sequence, Tuple

from ..geodesy import osculating_sphere_radius
from ..validators import ShapeMismatchError


def _as_lat_lon(points, name: str) -> np.ndarray:
    arr = np.asarray(points, dtype=float)
    if arr.ndim == 1 and arr.shape[0] == 2:
        arr = arr.reshape(2, 1)
    if arr.ndim != 2 or arr.shape[0] != 2:
        raise ShapeMismatchError(f"{name} must have shape (2, N), got {arr.shape}")
    return arr


def spher_to_orthographic_proj(lat_lon_pts: np.ndarray,
                               lat_lon_ref: Sequence[float],
                               r: Optional[float] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Project points on a sphere orthographically onto a tangent plane.

    Args:
        lat_lon_pts: 2xN [lat; lon] points on the sphere [rad]
        lat_lon_ref: (lat, lon) of the tangent point [rad]
        r: Sphere radius [m]. Defaults to the osculating sphere of the WGS-84
            ellipsoid at the reference latitude.

    Returns:
        Tuple: (2xN [x; y] plane coordinates, N values of cos(c)). cos(c) is
        the cosine of the angular distance from the reference point; negative
        values mark points on the far side of the sphere, which the inverse
        projection cannot recover.
    """
    pts = _as_lat_lon(lat_lon_pts, "lat_lon_pts")
    phi1, lambda0 = float(lat_lon_ref[0]), float(lat_lon_ref[1])
    if r is None:
        r = osculating_sphere_radius(phi1)

    sin_phi1 = np.sin(phi1)
    cos_phi1 = np.cos(phi1)

    cos_phi = np.cos(pts[0])
    sin_phi = np.sin(pts[0])
    d_lambda = pts[1] - lambda0
    cos_d_lambda = np.cos(d_lambda)

    # Snyder eqs. 20-3 and 20-4
    xy = r * np.vstack([
        cos_phi * np.sin(d_lambda),
        cos_phi1 * sin_phi - sin_phi1 * cos_phi * cos_d_lambda
    ])
    # Snyder eq. 20-5
    cos_c = sin_phi1 * sin_phi + cos_phi1 * cos_phi * cos_d_lambda

    return xy, cos_c


def orthographic_proj_to_spher(xy: np.ndarray,
                               lat_lon_ref: Sequence[float],
                               r: Optional[float] = None) -> np.ndarray:
    """Map tangent-plane points back onto the near side of the sphere.

    Args:
        xy: 2xN [x; y] plane coordinates [m]
        lat_lon_ref: (lat, lon) of the tangent point [rad]
        r: Sphere radius [m]; same default as spher_to_orthographic_proj

    Returns:
        np.ndarray: 2xN [lat; lon] in radians. Points further than r from
        the tangent point have no preimage and come back as NaN.
    """
    pts = _as_lat_lon(xy, "xy")
    phi1, lambda0 = float(lat_lon_ref[0]), float(lat_lon_ref[1])
    if r is None:
        r = osculating_sphere_radius(phi1)

    x, y = pts
    rho = np.hypot(x, y)
    with np.errstate(invalid='ignore'):
        c = np.arcsin(rho / r)
    sin_c = np.sin(c)
    cos_c = np.cos(c)
    sin_phi1 = np.sin(phi1)
    cos_phi1 = np.cos(phi1)

    # Snyder eq. 20-14; y*sin(c)/rho -> 0 at the tangent point
    at_ref = rho == 0
    safe_rho = np.where(at_ref, 1.0, rho)
    lat = np.arcsin(np.clip(cos_c * sin_phi1 + np.where(at_ref, 0.0, y * sin_c * cos_phi1 / safe_rho),
                            -1.0, 1.0))
    # Snyder eq. 20-15 in its atan2 form
    lon = lambda0 + np.arctan2(x * sin_c, rho * cos_phi1 * cos_c - y * sin_phi1 * sin_c)
    lat = np.where(np.isnan(c), np.nan, lat)
    lon = np.where(np.isnan(c), np.nan, lon)
    lon = np.where(at_ref, lambda0, lon)

    return np.vstack([lat, lon])
