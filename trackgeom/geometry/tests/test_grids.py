"""
Tests for covariance sampling grids.
"""

import pytest
import numpy as np
from scipy.stats import chi2

from ..grids import chi_square_inv_cdf, create_grid_from_cov_mat
from ...validators import InvalidDimensionError, ParameterOutOfRangeError, ShapeMismatchError


class TestChiSquareInvCdf:

    def test_two_degrees_of_freedom(self):
        """chi2(2) has the closed form -2 ln(1 - p)."""
        assert chi_square_inv_cdf(0.5, 2) == pytest.approx(2 * np.log(2.0), rel=1e-12)

    def test_default_probability(self):
        x = chi_square_inv_cdf(0.9997, 3)
        assert chi2.cdf(x, 3) == pytest.approx(0.9997, rel=1e-12)

    def test_invalid_probability(self):
        with pytest.raises(ParameterOutOfRangeError):
            chi_square_inv_cdf(1.5, 2)

    def test_invalid_dimension(self):
        with pytest.raises(InvalidDimensionError):
            chi_square_inv_cdf(0.5, 0)


class TestCreateGridFromCovMat:

    def test_diagonal_matrix(self):
        """Axes are scaled by the standard deviations and shifted."""
        grid, trans_mat = create_grid_from_cov_mat(
            np.diag([4.0, 9.0]), [3, 2], center=[1.0, 2.0], gamma=1.0
        )

        assert grid.shape == (2, 6)
        assert trans_mat.shape == (2, 2)
        np.testing.assert_allclose(np.unique(np.round(grid[0], 12)), [-1.0, 1.0, 3.0])
        np.testing.assert_allclose(np.unique(np.round(grid[1], 12)), [-1.0, 5.0])

    def test_first_dimension_varies_fastest(self):
        grid, _ = create_grid_from_cov_mat(np.diag([4.0, 9.0]), [3, 2], gamma=1.0)

        assert grid[1, 0] == grid[1, 1] == grid[1, 2]
        assert grid[1, 3] == grid[1, 4] == grid[1, 5]
        assert grid[1, 0] != grid[1, 3]
        assert len(set(grid[0, :3])) == 3

    def test_transformation_reproduces_matrix(self, random_seed):
        """T T^T recovers gamma times a symmetric positive definite input."""
        A = np.random.randn(3, 3)
        mat = A @ A.T + np.eye(3)
        _, trans_mat = create_grid_from_cov_mat(mat, 3, gamma=2.0)

        np.testing.assert_allclose(trans_mat @ trans_mat.T, 2.0 * mat, rtol=1e-8, atol=1e-10)

    def test_default_gamma(self):
        """The default scaling encloses 99.97% of the probability mass."""
        grid, _ = create_grid_from_cov_mat(np.array([[4.0]]), 3)
        gamma = chi2.ppf(0.9997, 1)

        np.testing.assert_allclose(grid[0], [-2.0 * np.sqrt(gamma), 0.0, 2.0 * np.sqrt(gamma)])

    def test_grid_count(self):
        grid, _ = create_grid_from_cov_mat(np.eye(3), 5)
        assert grid.shape == (3, 125)

    def test_center_defaults_to_origin(self):
        grid, _ = create_grid_from_cov_mat(np.eye(2), 3, gamma=1.0)

        # Middle point of a 3x3 grid is the center
        np.testing.assert_allclose(grid[:, 4], [0.0, 0.0], atol=1e-15)

    def test_singular_matrix(self):
        """Zero variance directions collapse onto the center."""
        grid, _ = create_grid_from_cov_mat(np.diag([1.0, 0.0]), 3, center=[0.0, 7.0], gamma=1.0)
        np.testing.assert_allclose(grid[1], 7.0)

    def test_empty_matrix(self):
        grid, trans_mat = create_grid_from_cov_mat(np.zeros((0, 0)), 3)

        assert grid.size == 0
        assert trans_mat is None

    def test_zero_points(self):
        grid, trans_mat = create_grid_from_cov_mat(np.eye(2), [3, 0])

        assert grid.shape == (2, 0)
        assert trans_mat is None

    def test_non_square_matrix(self):
        with pytest.raises(ShapeMismatchError):
            create_grid_from_cov_mat(np.ones((2, 3)), 3)

    def test_wrong_number_of_axes(self):
        with pytest.raises(ShapeMismatchError):
            create_grid_from_cov_mat(np.eye(2), [2, 3, 4])

    def test_negative_point_count(self):
        with pytest.raises(ParameterOutOfRangeError):
            create_grid_from_cov_mat(np.eye(2), -1)

    def test_negative_eigenvalue(self):
        with pytest.raises(ParameterOutOfRangeError):
            create_grid_from_cov_mat(np.diag([1.0, -1.0]), 3)
