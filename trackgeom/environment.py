"""
Standard exponential atmosphere for refraction-corrupted range measurements
"""

import numpy as np
from typing import Optional, Sequence
from dataclasses import dataclass

from .constants import (
    DEFAULT_SURFACE_REFRACTIVITY, REFERENCE_SURFACE_HEIGHT, REFRACTIVITY_SCALE,
    WGS84_SEMI_MAJOR_AXIS, WGS84_FLATTENING, standard_decay_constant
)
from .geodesy import ellipsoid_height
from .validators import AtmosphereParameterValidator


@dataclass(frozen=True)
class AtmosphericModel:
    """Exponential refractivity profile over a reference ellipsoid

    The refractivity at height h above the ellipsoid is
    N(h) = Ns * exp(-ce * (h - h0)) with h0 the ellipsoid surface.
    """
    surface_refractivity: float = DEFAULT_SURFACE_REFRACTIVITY  # N-units
    decay_constant: Optional[float] = None  # 1/m, derived from Ns if None
    semi_major_axis: float = WGS84_SEMI_MAJOR_AXIS  # m
    flattening: float = WGS84_FLATTENING

    def __post_init__(self):
        AtmosphereParameterValidator.validate_surface_refractivity(
            self.surface_refractivity, standard_decay=self.decay_constant is None
        )
        AtmosphereParameterValidator.validate_ellipsoid(self.semi_major_axis, self.flattening)
        if self.decay_constant is None:
            object.__setattr__(self, 'decay_constant',
                               standard_decay_constant(self.surface_refractivity))
        else:
            AtmosphereParameterValidator.validate_decay_constant(self.decay_constant)

    def refractivity(self, height) -> np.ndarray:
        """
        Refractivity at the given height(s)

        Args:
            height: Height(s) above the reference ellipsoid in meters

        Returns:
            Refractivity in N-units
        """
        height = np.asarray(height, dtype=float)
        return self.surface_refractivity * np.exp(
            -self.decay_constant * (height - REFERENCE_SURFACE_HEIGHT)
        )

    def refraction_index(self, height) -> np.ndarray:
        """Index of refraction n = 1 + N * 1e-6"""
        return 1.0 + REFRACTIVITY_SCALE * self.refractivity(height)

    def heights(self, points: np.ndarray,
                frame_origin: Optional[Sequence[float]] = None) -> np.ndarray:
        """Heights of 3xN points above this model's ellipsoid"""
        return ellipsoid_height(points, self.semi_major_axis, self.flattening, frame_origin)

    def excess_path_length(self, start_heights, end_heights, lengths) -> np.ndarray:
        """
        Extra electrical length of straight propagation segments

        Integrates 1e-6 * N(h) along each segment with the height varying
        linearly between the end points:

            dL = 1e-6 * Ns * L * exp(-ce*hA) * (1 - exp(-ce*dh)) / (ce*dh)

        which tends to 1e-6 * Ns * L * exp(-ce*hA) as dh -> 0.

        Args:
            start_heights: Heights of the segment starts (m)
            end_heights: Heights of the segment ends (m)
            lengths: Geometric segment lengths (m)

        Returns:
            Excess path length for each segment (m)
        """
        h_a = np.asarray(start_heights, dtype=float)
        h_b = np.asarray(end_heights, dtype=float)
        lengths = np.asarray(lengths, dtype=float)

        ce = self.decay_constant
        x = ce * (h_b - h_a)
        small = np.abs(x) < 1e-12
        safe_x = np.where(small, 1.0, x)
        # Mean of exp(-x*t) over t in [0, 1]
        mean_factor = np.where(small, 1.0 - 0.5 * x, -np.expm1(-safe_x) / safe_x)

        return (REFRACTIVITY_SCALE * self.surface_refractivity * lengths
                * np.exp(-ce * (h_a - REFERENCE_SURFACE_HEIGHT)) * mean_factor)
