"""
trackgeom: measurement geometry routines for tracking sensors

Cubature-based propagation of Cartesian uncertainty into refraction-corrupted
bistatic range / direction-cosine coordinates, plus covariance sampling
grids, orthographic projection and direction-cosine Hessians.
"""

import logging

from .constants import (
    DEFAULT_SURFACE_REFRACTIVITY,
    WGS84_SEMI_MAJOR_AXIS,
    WGS84_FLATTENING,
    standard_decay_constant,
)
from .validators import (
    ConversionError,
    InvalidDimensionError,
    ShapeMismatchError,
    DegenerateGeometryError,
    ParameterOutOfRangeError,
    ValidationResult,
)
from .environment import AtmosphericModel
from .geodesy import ellipsoid_height, osculating_sphere_radius
from .conversion import (
    CubaturePointSet,
    fifth_order_cubature_points,
    transform_cubature_points,
    MeasurementGeometry,
    GaussianEstimate,
    StdRefracRuvModel,
    cart_to_ruv_std_refrac,
    calc_mixture_moments,
    CubatureUncertaintyPropagator,
    PropagationResult,
    cart_to_ruv_std_refrac_cubature,
)
from .geometry import (
    chi_square_inv_cdf,
    create_grid_from_cov_mat,
    spher_to_orthographic_proj,
    orthographic_proj_to_spher,
    uv_gradient,
    uv_hessian,
)

__version__ = "1.0.0"

__all__ = [
    # Constants
    'DEFAULT_SURFACE_REFRACTIVITY',
    'WGS84_SEMI_MAJOR_AXIS',
    'WGS84_FLATTENING',
    'standard_decay_constant',

    # Errors
    'ConversionError',
    'InvalidDimensionError',
    'ShapeMismatchError',
    'DegenerateGeometryError',
    'ParameterOutOfRangeError',
    'ValidationResult',

    # Atmosphere and geodesy
    'AtmosphericModel',
    'ellipsoid_height',
    'osculating_sphere_radius',

    # Conversion
    'CubaturePointSet',
    'fifth_order_cubature_points',
    'transform_cubature_points',
    'MeasurementGeometry',
    'GaussianEstimate',
    'StdRefracRuvModel',
    'cart_to_ruv_std_refrac',
    'calc_mixture_moments',
    'CubatureUncertaintyPropagator',
    'PropagationResult',
    'cart_to_ruv_std_refrac_cubature',

    # Geometry utilities
    'chi_square_inv_cdf',
    'create_grid_from_cov_mat',
    'spher_to_orthographic_proj',
    'orthographic_proj_to_spher',
    'uv_gradient',
    'uv_hessian',
]

# Set up logging for the package
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Add console handler if none exists
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.debug(f"trackgeom v{__version__} initialized")
