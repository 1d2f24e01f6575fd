"""
Test suite for the measurement conversion routines.

Test Structure:
- test_cubature.py: Fifth-order cubature rule and point transformation
- test_moments.py: Weighted moment reconstruction
- test_environment.py: Exponential atmosphere and ellipsoid heights
- test_measurement.py: Refraction-corrupted r-u-v measurement model
- test_propagator.py: Batch cubature conversion of Cartesian Gaussians

To run all tests:
    pytest trackgeom/conversion/tests/
"""
