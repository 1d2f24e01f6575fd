"""
Pytest configuration and shared fixtures for the geometry tests.
"""

import pytest
import numpy as np
from scipy.spatial.transform import Rotation


@pytest.fixture
def random_seed():
    """Set random seed for reproducible tests."""
    np.random.seed(7)
    return 7


@pytest.fixture
def rotation_matrix():
    """A generic proper rotation."""
    return Rotation.from_euler('xyz', [10.0, 40.0, -65.0], degrees=True).as_matrix()


@pytest.fixture
def target_points():
    """Targets around a receiver near [500, 20, -400]."""
    return np.array([[100.0, -3000.0, 800.0],
                     [-1000.0, 250.0, 4000.0],
                     [500.0, 1200.0, -2500.0]])


np.seterr(all='warn')
