"""
Configuration structures shared by the measurement conversion routines.

Every default a conversion relies on is set here (or in ``constants``) so
that callers never depend on per-call fallbacks:

    transmitter     = [0, 0, 0]
    receiver        = [0, 0, 0]
    rotation        = identity
    use_half_range  = False
    atmosphere      = AtmosphericModel()  (Ns = 313, standard ce, WGS-84)
    frame_origin    = (0, 0)              (local ENU frame on the equator)
"""

import numpy as np
from typing import Optional, Tuple
from dataclasses import dataclass, field

from ..constants import DEFAULT_FRAME_ORIGIN, MEASUREMENT_DIM
from ..environment import AtmosphericModel
from ..validators import (
    validate_rotation_matrix, validate_square_matrix, validate_vector
)


def _frozen(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=float)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class MeasurementGeometry:
    """Transmitter/receiver layout and propagation environment

    Attributes:
        transmitter: Transmitter position in the Cartesian frame (m)
        receiver: Receiver position in the Cartesian frame (m)
        rotation: Rotation from the Cartesian frame to the receiver's local
            frame; the local z axis is the receiver boresight
        use_half_range: Whether the reported bistatic range is halved
        atmosphere: Refractivity model
        frame_origin: Geodetic (lat, lon) in radians of the origin of the
            Cartesian frame, taken as a local ENU frame on the ellipsoid
            surface. None means the Cartesian frame is ECEF.
    """
    transmitter: np.ndarray = field(default_factory=lambda: np.zeros(MEASUREMENT_DIM))
    receiver: np.ndarray = field(default_factory=lambda: np.zeros(MEASUREMENT_DIM))
    rotation: np.ndarray = field(default_factory=lambda: np.eye(MEASUREMENT_DIM))
    use_half_range: bool = False
    atmosphere: AtmosphericModel = field(default_factory=AtmosphericModel)
    frame_origin: Optional[Tuple[float, float]] = DEFAULT_FRAME_ORIGIN

    def __post_init__(self):
        object.__setattr__(self, 'transmitter',
                           _frozen(validate_vector(self.transmitter, "transmitter")))
        object.__setattr__(self, 'receiver',
                           _frozen(validate_vector(self.receiver, "receiver")))
        object.__setattr__(self, 'rotation',
                           _frozen(validate_rotation_matrix(self.rotation)))
        object.__setattr__(self, 'use_half_range', bool(self.use_half_range))
        if self.frame_origin is not None:
            lat, lon = self.frame_origin
            object.__setattr__(self, 'frame_origin', (float(lat), float(lon)))

    @property
    def is_monostatic(self) -> bool:
        """True if transmitter and receiver are collocated"""
        return bool(np.array_equal(self.transmitter, self.receiver))


@dataclass
class GaussianEstimate:
    """Mean and covariance of a 3D Gaussian"""
    mean: np.ndarray
    covariance: np.ndarray

    def __post_init__(self):
        self.mean = validate_vector(self.mean, "mean")
        self.covariance = validate_square_matrix(self.covariance, "covariance")

    @property
    def std(self) -> np.ndarray:
        """Standard deviations of the components"""
        return np.sqrt(np.clip(np.diag(self.covariance), 0.0, None))
