"""
Physical and Default Constants for Measurement Geometry

This module contains the reference-ellipsoid parameters, the standard
exponential atmosphere constants and the default values used throughout the
measurement conversion routines. Every default that a conversion falls back
on is listed here.
"""

import numpy as np
from dataclasses import dataclass


# ============================================================================
# FUNDAMENTAL PHYSICAL CONSTANTS
# ============================================================================

# Refractivity is (n - 1) * 1e6, so N-units scale back by this factor
REFRACTIVITY_SCALE = 1e-6


# ============================================================================
# REFERENCE ELLIPSOID (WGS-84)
# ============================================================================

WGS84_SEMI_MAJOR_AXIS = 6378137.0  # m
WGS84_FLATTENING = 1.0 / 298.257223563


@dataclass
class EllipsoidLimits:
    """Accepted ranges for user supplied ellipsoid parameters"""

    MIN_SEMI_MAJOR_AXIS = 1.0  # m
    MAX_SEMI_MAJOR_AXIS = 1e8  # m

    MIN_FLATTENING = 0.0  # sphere
    MAX_FLATTENING = 0.5


# ============================================================================
# STANDARD EXPONENTIAL ATMOSPHERE
# ============================================================================

# Surface refractivity reduced to the ellipsoid (N-units)
DEFAULT_SURFACE_REFRACTIVITY = 313.0

# CRPL exponential reference atmosphere: the refractivity change over the
# first kilometre is DeltaN = -MULT_CONST * exp(EXP_CONST * Ns)
REFRACTIVITY_EXP_CONST = 0.005577
REFRACTIVITY_MULT_CONST = 7.32

# Height of the reference surface the profile is anchored to (m)
REFERENCE_SURFACE_HEIGHT = 0.0


@dataclass
class AtmosphereLimits:
    """Accepted ranges for refractivity model parameters"""

    MIN_SURFACE_REFRACTIVITY = 0.0  # N-units; exclusive when ce is derived from Ns

    MIN_DECAY_CONSTANT = 0.0  # 1/m, exclusive


# ============================================================================
# CONVERSION DEFAULTS
# ============================================================================

# Dimensionality of the Cartesian and r-u-v spaces
MEASUREMENT_DIM = 3

# Default geodetic (lat, lon) in radians of the local Cartesian frame origin
DEFAULT_FRAME_ORIGIN = (0.0, 0.0)

# Tolerance used when checking that a matrix is a proper rotation
ROTATION_TOLERANCE = 1e-6

# Allowed deviation of cubature weights from summing to one
WEIGHT_SUM_TOLERANCE = 1e-10

# Probability mass enclosed by default covariance grids (about 3-sigma)
DEFAULT_GRID_PROBABILITY = 0.9997


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================

def standard_decay_constant(surface_refractivity: float) -> float:
    """
    Decay constant of the standard exponential atmosphere

    Args:
        surface_refractivity: Refractivity Ns at the reference surface

    Returns:
        Decay constant ce in inverse meters
    """
    delta_n = -REFRACTIVITY_MULT_CONST * np.exp(REFRACTIVITY_EXP_CONST * surface_refractivity)
    return np.log(surface_refractivity / (surface_refractivity + delta_n)) / 1000.0


def ellipsoid_eccentricity_squared(flattening: float) -> float:
    """First eccentricity squared of an ellipsoid"""
    return flattening * (2.0 - flattening)


def ellipsoid_semi_minor_axis(semi_major_axis: float, flattening: float) -> float:
    """Semi-minor axis of an ellipsoid"""
    return semi_major_axis * (1.0 - flattening)
