"""
Measurement conversion module

Cubature-based propagation of Cartesian measurement uncertainty into
refraction-corrupted bistatic range / direction-cosine (r-u-v) coordinates.

Components:
- Fifth-order cubature rule and sigma point transformation
- Standard exponential atmosphere r-u-v measurement model
- Weighted moment reconstruction
- Batch propagator with per-measurement error isolation
"""

from .cubature import (
    CubaturePointSet,
    fifth_order_cubature_points,
    transform_cubature_points,
)

from .geometry import (
    MeasurementGeometry,
    GaussianEstimate,
)

from .measurement import (
    StdRefracRuvModel,
    cart_to_ruv_std_refrac,
)

from .moments import calc_mixture_moments

from .propagator import (
    CubatureUncertaintyPropagator,
    PropagationResult,
    cart_to_ruv_std_refrac_cubature,
)

__all__ = [
    # Cubature
    'CubaturePointSet',
    'fifth_order_cubature_points',
    'transform_cubature_points',

    # Configuration
    'MeasurementGeometry',
    'GaussianEstimate',

    # Measurement model
    'StdRefracRuvModel',
    'cart_to_ruv_std_refrac',

    # Moments
    'calc_mixture_moments',

    # Propagation
    'CubatureUncertaintyPropagator',
    'PropagationResult',
    'cart_to_ruv_std_refrac_cubature',
]
