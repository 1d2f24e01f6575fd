"""
Tests for covariance grids, orthographic projection and direction-cosine
derivatives.

To run all tests:
    pytest trackgeom/geometry/tests/
"""
