"""
Closed-form geometric utilities

- Covariance ellipsoid sampling grids and the chi-square inverse CDF
- Orthographic projection onto a tangent plane (and its inverse)
- Gradients and Hessians of direction-cosine measurements
"""

from .grids import chi_square_inv_cdf, create_grid_from_cov_mat
from .projection import spher_to_orthographic_proj, orthographic_proj_to_spher
from .hessians import uv_gradient, uv_hessian

__all__ = [
    'chi_square_inv_cdf',
    'create_grid_from_cov_mat',
    'spher_to_orthographic_proj',
    'orthographic_proj_to_spher',
    'uv_gradient',
    'uv_hessian',
]
