"""
Pytest configuration and shared fixtures for the conversion tests.
"""

import pytest
import numpy as np
from scipy.spatial.transform import Rotation

from ..geometry import MeasurementGeometry
from ...environment import AtmosphericModel


@pytest.fixture
def random_seed():
    """Set random seed for reproducible tests."""
    np.random.seed(42)
    return 42


@pytest.fixture
def default_geometry():
    """Monostatic sensor at the frame origin looking along x."""
    return MeasurementGeometry()


@pytest.fixture
def boresight_mean():
    """Target 1 km from the default sensor."""
    return np.array([1000.0, 0.0, 0.0])


@pytest.fixture
def unit_sqrt_cov():
    """Square root of a 1 m^2 isotropic covariance."""
    return np.eye(3)


@pytest.fixture
def rotation_matrix():
    """A generic proper rotation."""
    return Rotation.from_euler('zyx', [30.0, -20.0, 75.0], degrees=True).as_matrix()


@pytest.fixture
def bistatic_geometry(rotation_matrix):
    """Separated transmitter and rotated receiver."""
    return MeasurementGeometry(
        transmitter=np.array([-5000.0, 2000.0, 30.0]),
        receiver=np.array([1500.0, -800.0, 12.0]),
        rotation=rotation_matrix,
        atmosphere=AtmosphericModel(surface_refractivity=340.0)
    )


@pytest.fixture
def random_sqrt_covs(random_seed):
    """Generator of lower-triangular covariance square roots."""
    def _generate(num: int, scale: float = 10.0) -> np.ndarray:
        mats = np.tril(np.random.randn(num, 3, 3)) * scale
        # Positive diagonal keeps each factor full rank
        idx = np.arange(3)
        mats[:, idx, idx] = np.abs(mats[:, idx, idx]) + scale
        return mats
    return _generate


# Configure numpy for testing
np.seterr(all='warn')
