"""
Tests for direction-cosine gradients and Hessians.
"""

import pytest
import numpy as np

from ..hessians import uv_gradient, uv_hessian
from ...conversion.geometry import MeasurementGeometry
from ...conversion.measurement import StdRefracRuvModel
from ...validators import DegenerateGeometryError, ParameterOutOfRangeError, ShapeMismatchError

RECEIVER = np.array([500.0, 20.0, -400.0])


def _numerical_jacobian(func, x, step=1e-3):
    """Central difference Jacobian of a vector function of a 3-vector."""
    cols = []
    for k in range(3):
        dx = np.zeros(3)
        dx[k] = step
        cols.append((func(x + dx) - func(x - dx)) / (2 * step))
    return np.stack(cols, axis=-1)


class TestUvGradient:

    def test_matches_finite_differences(self, target_points, rotation_matrix):
        """Gradient agrees with differencing the measurement model."""
        model = StdRefracRuvModel(MeasurementGeometry(receiver=RECEIVER, rotation=rotation_matrix))
        J = uv_gradient(target_points, RECEIVER, rotation_matrix)

        assert J.shape == (3, 2, 3)
        for i in range(3):
            numeric = _numerical_jacobian(
                lambda x: model.direction_cosines(x)[:, 0], target_points[:, i]
            )
            np.testing.assert_allclose(J[i], numeric, rtol=1e-6, atol=1e-12)

    def test_defaults(self):
        """Receiver at the origin with an identity rotation."""
        J = uv_gradient(np.array([1000.0, 0.0, 0.0]))

        np.testing.assert_allclose(J[0], [[0.0, 0.0, 0.0], [0.0, 1e-3, 0.0]], atol=1e-18)


class TestUvHessian:

    def test_shape_and_symmetry(self, target_points, rotation_matrix):
        H = uv_hessian(target_points, RECEIVER, rotation_matrix)

        assert H.shape == (3, 2, 3, 3)
        np.testing.assert_allclose(H, np.swapaxes(H, -1, -2), rtol=1e-12, atol=1e-20)

    def test_matches_finite_differences(self, target_points, rotation_matrix):
        """Hessian is the Jacobian of the gradient."""
        H = uv_hessian(target_points, RECEIVER, rotation_matrix)

        for i in range(3):
            numeric = _numerical_jacobian(
                lambda x: uv_gradient(x, RECEIVER, rotation_matrix)[0], target_points[:, i]
            )
            np.testing.assert_allclose(H[i], numeric, rtol=1e-6, atol=1e-14)

    def test_points_are_independent(self, target_points):
        """Each point's Hessian equals converting it alone."""
        H = uv_hessian(target_points, RECEIVER)

        for i in range(3):
            np.testing.assert_allclose(H[i], uv_hessian(target_points[:, i], RECEIVER)[0], rtol=1e-14)

    def test_boresight_values(self):
        """Closed form along the local x axis."""
        r = 1000.0
        H = uv_hessian(np.array([r, 0.0, 0.0]))

        np.testing.assert_allclose(np.diag(H[0, 0]), [0.0, -1.0 / r**2, -1.0 / r**2], atol=1e-20)
        assert H[0, 1, 0, 1] == pytest.approx(-1.0 / r**2)

    def test_point_at_receiver(self):
        with pytest.raises(DegenerateGeometryError):
            uv_hessian(RECEIVER, RECEIVER)

    def test_invalid_rotation(self):
        with pytest.raises(ParameterOutOfRangeError):
            uv_hessian(np.ones(3), None, np.diag([1.0, 1.0, -1.0]))

    def test_bad_point_shape(self):
        with pytest.raises(ShapeMismatchError):
            uv_hessian(np.ones((2, 4)))
