"""
Tests for weighted moment reconstruction.
"""

import pytest
import numpy as np

from ..moments import calc_mixture_moments
from ...validators import ShapeMismatchError


class TestCalcMixtureMoments:
    """Test weighted mean and covariance."""

    def test_two_point_cloud(self):
        """Symmetric pair about a center."""
        points = np.array([[1.0, 3.0],
                           [2.0, 2.0]])
        mean, cov = calc_mixture_moments(points, [0.5, 0.5])

        np.testing.assert_allclose(mean, [2.0, 2.0])
        np.testing.assert_allclose(cov, [[1.0, 0.0], [0.0, 0.0]])

    def test_unequal_weights(self):
        """Weights shift the mean towards heavier points."""
        points = np.array([[0.0, 4.0]])
        mean, cov = calc_mixture_moments(points, [0.75, 0.25])

        assert mean[0] == pytest.approx(1.0)
        # 0.75 * 1 + 0.25 * 9
        assert cov[0, 0] == pytest.approx(3.0)

    def test_covariance_exactly_symmetric(self, random_seed):
        """Symmetrization makes the result equal its transpose bit for bit."""
        points = np.random.randn(3, 19) * np.array([[1e3], [1.0], [1e-3]])
        weights = np.random.rand(19)
        weights /= weights.sum()

        _, cov = calc_mixture_moments(points, weights)
        assert np.array_equal(cov, cov.T)

    def test_identical_points_have_zero_covariance(self):
        """A collapsed cloud gives its point back and exactly zero spread."""
        point = np.array([[30000.123], [-20000.456], [5000.789]])
        points = np.tile(point, (1, 19))
        weights = np.full(19, 1.0 / 19)

        mean, cov = calc_mixture_moments(points, weights)

        np.testing.assert_allclose(mean, point[:, 0], rtol=1e-15)
        assert np.array_equal(cov, np.zeros((3, 3)))

    def test_offset_does_not_change_covariance(self, random_seed):
        """Moments are computed relative to the cloud, not the origin."""
        points = np.random.randn(3, 7)
        weights = np.random.rand(7)
        weights /= weights.sum()
        offset = np.array([[1e6], [-2e6], [5e5]])

        mean, cov = calc_mixture_moments(points, weights)
        mean_far, cov_far = calc_mixture_moments(points + offset, weights)

        np.testing.assert_allclose(mean_far, mean + offset[:, 0], rtol=1e-12)
        np.testing.assert_allclose(cov_far, cov, rtol=1e-8, atol=1e-9)

    def test_negative_weights_allowed(self):
        """Cubature weights may be negative in high dimensions."""
        points = np.array([[0.0, 1.0, -1.0]])
        mean, cov = calc_mixture_moments(points, [1.5, -0.25, -0.25])

        assert mean[0] == pytest.approx(0.0)
        assert cov[0, 0] == pytest.approx(-0.5)

    def test_nan_propagates(self):
        """Non-finite inputs are not filtered."""
        points = np.array([[0.0, np.nan], [1.0, 1.0]])
        mean, cov = calc_mixture_moments(points, [0.5, 0.5])

        assert np.isnan(mean[0])
        assert np.isnan(cov[0, 0])

    def test_weight_count_mismatch(self):
        """Weights must match the number of points."""
        with pytest.raises(ShapeMismatchError):
            calc_mixture_moments(np.zeros((3, 5)), np.ones(4) / 4)
