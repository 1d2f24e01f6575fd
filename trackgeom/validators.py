"""
Input Validation Module for Measurement Conversion

This module provides the exception hierarchy used by the conversion routines
together with validators for the array shapes, rotation matrices and
atmospheric parameters they consume.
"""

import numpy as np
from typing import List, Optional, Tuple
from dataclasses import dataclass

from .constants import (
    AtmosphereLimits, EllipsoidLimits, MEASUREMENT_DIM, ROTATION_TOLERANCE,
    REFRACTIVITY_EXP_CONST, REFRACTIVITY_MULT_CONST
)


# ============================================================================
# CUSTOM EXCEPTIONS
# ============================================================================

class ConversionError(Exception):
    """Base exception for measurement conversion errors"""
    pass


class InvalidDimensionError(ConversionError):
    """Raised when a cubature rule is requested for an unusable dimensionality"""
    def __init__(self, dim):
        self.dim = dim
        super().__init__(f"Dimensionality must be a positive integer, got {dim!r}")


class ShapeMismatchError(ConversionError):
    """Raised when an array does not have the shape a routine requires"""
    pass


class DegenerateGeometryError(ConversionError):
    """Raised when a point coincides with the receiver and u-v is undefined"""
    pass


class ParameterOutOfRangeError(ConversionError):
    """Raised when a parameter is outside acceptable range"""
    def __init__(self, param_name: str, value: float, min_val: float, max_val: float):
        self.param_name = param_name
        self.value = value
        self.min_val = min_val
        self.max_val = max_val
        super().__init__(
            f"{param_name} = {value} is outside valid range [{min_val}, {max_val}]"
        )


# ============================================================================
# VALIDATION RESULTS
# ============================================================================

@dataclass
class ValidationResult:
    """Container for validation results"""
    is_valid: bool
    errors: List[str]
    warnings: List[str]

    def add_error(self, message: str):
        """Add an error message"""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str):
        """Add a warning message"""
        self.warnings.append(message)

    def raise_if_invalid(self):
        """Raise exception if validation failed"""
        if not self.is_valid:
            raise ConversionError("\n".join(self.errors))


# ============================================================================
# ARRAY VALIDATORS
# ============================================================================

def validate_dimension(dim) -> int:
    """
    Check that a dimensionality is a positive integer

    Raises:
        InvalidDimensionError: If dim is not a positive integer
    """
    if isinstance(dim, (bool, np.bool_)) or not isinstance(dim, (int, np.integer)):
        raise InvalidDimensionError(dim)
    if dim <= 0:
        raise InvalidDimensionError(dim)
    return int(dim)


def validate_points(points, name: str = "points", dim: int = MEASUREMENT_DIM) -> np.ndarray:
    """
    Coerce a set of points to a dim x K float array

    A single point of shape (dim,) is returned as a dim x 1 column.

    Raises:
        ShapeMismatchError: If the array cannot be read as dim x K
    """
    arr = np.asarray(points, dtype=float)
    if arr.ndim == 1 and arr.shape[0] == dim:
        arr = arr.reshape(dim, 1)
    if arr.ndim != 2 or arr.shape[0] != dim:
        raise ShapeMismatchError(
            f"{name} must have shape ({dim}, K), got {arr.shape}"
        )
    return arr


def validate_vector(vector, name: str, dim: int = MEASUREMENT_DIM) -> np.ndarray:
    """Coerce a position vector to shape (dim,)"""
    arr = np.asarray(vector, dtype=float).reshape(-1)
    if arr.shape != (dim,):
        raise ShapeMismatchError(f"{name} must have {dim} elements, got {arr.size}")
    return arr


def validate_square_matrix(matrix, name: str, dim: int = MEASUREMENT_DIM) -> np.ndarray:
    """Coerce a matrix to a dim x dim float array"""
    arr = np.asarray(matrix, dtype=float)
    if arr.shape != (dim, dim):
        raise ShapeMismatchError(f"{name} must have shape ({dim}, {dim}), got {arr.shape}")
    return arr


def validate_sqrt_covariances(sqrt_cov, num_meas: int,
                              dim: int = MEASUREMENT_DIM) -> Tuple[np.ndarray, bool]:
    """
    Check a stack of covariance square roots against the measurement count

    Args:
        sqrt_cov: A single dim x dim matrix or a num_meas x dim x dim stack
        num_meas: Number of measurements the stack must cover

    Returns:
        Tuple of (array, broadcast) where broadcast is True if a single
        matrix was supplied for every measurement

    Raises:
        ShapeMismatchError: If the count is neither 1 nor num_meas or the
            matrices are not dim x dim
    """
    arr = np.asarray(sqrt_cov, dtype=float)
    if arr.ndim == 2:
        if arr.shape != (dim, dim):
            raise ShapeMismatchError(
                f"Covariance square root must be {dim}x{dim}, got {arr.shape}"
            )
        return arr, True

    if arr.ndim != 3 or arr.shape[1:] != (dim, dim):
        raise ShapeMismatchError(
            f"Covariance square roots must have shape (N, {dim}, {dim}), got {arr.shape}"
        )
    if arr.shape[0] == 1:
        return arr[0], True
    if arr.shape[0] != num_meas:
        raise ShapeMismatchError(
            f"Got {arr.shape[0]} covariance square roots for {num_meas} measurements"
        )
    return arr, False


def validate_rotation_matrix(matrix, name: str = "rotation",
                             tolerance: float = ROTATION_TOLERANCE) -> np.ndarray:
    """
    Check that a matrix is a proper 3D rotation

    Raises:
        ShapeMismatchError: If the matrix is not 3x3
        ParameterOutOfRangeError: If it is not orthonormal or its
            determinant is not +1
    """
    arr = validate_square_matrix(matrix, name)
    ortho_error = float(np.max(np.abs(arr @ arr.T - np.eye(MEASUREMENT_DIM))))
    if not ortho_error <= tolerance:
        raise ParameterOutOfRangeError(f"orthonormality error of {name}", ortho_error, 0.0, tolerance)
    det = float(np.linalg.det(arr))
    if abs(det - 1.0) > tolerance:
        raise ParameterOutOfRangeError(f"det({name})", det, 1.0, 1.0)
    return arr


# ============================================================================
# PARAMETER VALIDATORS
# ============================================================================

class AtmosphereParameterValidator:
    """Validates exponential atmosphere and ellipsoid parameters"""

    @staticmethod
    def validate_surface_refractivity(ns: float, strict: bool = True,
                                      standard_decay: bool = True) -> ValidationResult:
        """
        Validate the surface refractivity

        When the decay constant is derived from Ns, the standard model needs
        Ns > 0 and Ns + DeltaN > 0. With an explicit decay constant any
        non-negative Ns is usable; Ns = 0 disables refraction.

        Args:
            ns: Surface refractivity in N-units
            strict: If True, raise exception on failure
            standard_decay: Whether the decay constant will be derived from Ns

        Returns:
            ValidationResult
        """
        result = ValidationResult(is_valid=True, errors=[], warnings=[])

        if not np.isfinite(ns) or ns < AtmosphereLimits.MIN_SURFACE_REFRACTIVITY:
            result.add_error(f"Surface refractivity must be non-negative, got {ns}")
        elif standard_decay and ns == AtmosphereLimits.MIN_SURFACE_REFRACTIVITY:
            result.add_error("Surface refractivity must be positive for the standard decay model")
        elif standard_decay and ns - REFRACTIVITY_MULT_CONST * np.exp(REFRACTIVITY_EXP_CONST * ns) <= 0:
            result.add_error(
                f"Surface refractivity {ns} is outside the domain of the standard decay model"
            )

        if strict and not result.is_valid:
            raise ParameterOutOfRangeError(
                "surface_refractivity", ns, AtmosphereLimits.MIN_SURFACE_REFRACTIVITY, np.inf
            )

        return result

    @staticmethod
    def validate_decay_constant(ce: float, strict: bool = True) -> ValidationResult:
        """Validate the exponential decay constant"""
        result = ValidationResult(is_valid=True, errors=[], warnings=[])

        if not np.isfinite(ce) or ce <= AtmosphereLimits.MIN_DECAY_CONSTANT:
            result.add_error(f"Decay constant must be positive, got {ce}")
        elif ce > 1e-2:
            result.add_warning(f"Decay constant {ce} 1/m implies a scale height below 100 m")

        if strict and not result.is_valid:
            raise ParameterOutOfRangeError(
                "decay_constant", ce, AtmosphereLimits.MIN_DECAY_CONSTANT, np.inf
            )

        return result

    @staticmethod
    def validate_ellipsoid(semi_major_axis: float, flattening: float,
                           strict: bool = True) -> ValidationResult:
        """Validate reference ellipsoid parameters"""
        result = ValidationResult(is_valid=True, errors=[], warnings=[])

        if not (EllipsoidLimits.MIN_SEMI_MAJOR_AXIS <= semi_major_axis
                <= EllipsoidLimits.MAX_SEMI_MAJOR_AXIS):
            result.add_error(f"Semi-major axis {semi_major_axis} m is out of range")
            if strict:
                raise ParameterOutOfRangeError(
                    "semi_major_axis", semi_major_axis,
                    EllipsoidLimits.MIN_SEMI_MAJOR_AXIS, EllipsoidLimits.MAX_SEMI_MAJOR_AXIS
                )

        if not (EllipsoidLimits.MIN_FLATTENING <= flattening < EllipsoidLimits.MAX_FLATTENING):
            result.add_error(f"Flattening {flattening} is out of range")
            if strict:
                raise ParameterOutOfRangeError(
                    "flattening", flattening,
                    EllipsoidLimits.MIN_FLATTENING, EllipsoidLimits.MAX_FLATTENING
                )

        return result


def validate_probability(prob: float, name: str = "prob") -> float:
    """Check that a probability lies in [0, 1]"""
    if not (0.0 <= prob <= 1.0):
        raise ParameterOutOfRangeError(name, prob, 0.0, 1.0)
    return float(prob)


def validate_all_parameters(surface_refractivity: float,
                            decay_constant: Optional[float],
                            semi_major_axis: float,
                            flattening: float) -> ValidationResult:
    """
    Validate a complete atmosphere configuration without raising

    Returns:
        Combined ValidationResult
    """
    combined = ValidationResult(is_valid=True, errors=[], warnings=[])
    results = [
        AtmosphereParameterValidator.validate_surface_refractivity(
            surface_refractivity, strict=False, standard_decay=decay_constant is None
        ),
        AtmosphereParameterValidator.validate_ellipsoid(semi_major_axis, flattening, strict=False),
    ]
    if decay_constant is not None:
        results.append(
            AtmosphereParameterValidator.validate_decay_constant(decay_constant, strict=False)
        )

    for result in results:
        for error in result.errors:
            combined.add_error(error)
        for warning in result.warnings:
            combined.add_warning(warning)

    return combined
