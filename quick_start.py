#!/usr/bin/env python3
"""
trackgeom Quick Start Example
Demonstrates cubature conversion of a Cartesian measurement into
refraction-corrupted bistatic r-u-v coordinates
"""

import numpy as np
import matplotlib.pyplot as plt
from trackgeom import (
    AtmosphericModel, MeasurementGeometry, CubatureUncertaintyPropagator,
    fifth_order_cubature_points, transform_cubature_points, create_grid_from_cov_mat,
    uv_hessian
)
from trackgeom.visualization import Visualizer


def main():
    """Run a simple conversion walkthrough"""

    print("=" * 60)
    print("trackgeom - Quick Start Demonstration")
    print("=" * 60)

    # 1. Cubature rule
    print("\n1. Generating the fifth-order cubature rule...")
    cubature = fifth_order_cubature_points(3)
    print(f"   - Points: {cubature.num_points}")
    print(f"   - Weight sum: {cubature.weights.sum():.15f}")

    # 2. Geometry
    print("\n2. Setting up a monostatic radar at the frame origin...")
    atmosphere = AtmosphericModel(surface_refractivity=313.0)
    geometry = MeasurementGeometry(atmosphere=atmosphere)
    print(f"   - Ns = {atmosphere.surface_refractivity:.1f} N-units")
    print(f"   - ce = {atmosphere.decay_constant:.6e} 1/m")

    # 3. Measurement
    print("\n3. Converting a target 1 km east with 1 m position noise...")
    mean = np.array([1000.0, 0.0, 0.0])
    sqrt_cov = np.eye(3)
    propagator = CubatureUncertaintyPropagator(geometry, cubature)
    result = propagator.convert(mean, sqrt_cov)
    result.raise_if_failed()
    estimate = result.estimate(0)

    geometric_range = 2 * np.linalg.norm(mean)
    print(f"   - Two-way geometric range: {geometric_range:.3f} m")
    print(f"   - Converted range:        {estimate.mean[0]:.3f} m "
          f"(refraction bias {estimate.mean[0] - geometric_range:.3f} m)")
    print(f"   - u = {estimate.mean[1]:.6f}, v = {estimate.mean[2]:.6f}")
    print(f"   - Standard deviations: {estimate.std}")

    # 4. Hessian of the direction cosines at the mean
    print("\n4. Direction-cosine curvature at the mean...")
    H = uv_hessian(mean)
    print(f"   - |d2u/dx2| max = {np.abs(H[0, 0]).max():.3e}")
    print(f"   - |d2v/dx2| max = {np.abs(H[0, 1]).max():.3e}")

    # 5. Plots
    print("\n5. Plotting the sigma points and a 3-sigma grid...")
    viz = Visualizer()
    points = transform_cubature_points(cubature.points, mean, sqrt_cov)
    viz.plot_cubature_points(points, cubature, title="Transformed cubature points")
    grid, _ = create_grid_from_cov_mat(sqrt_cov @ sqrt_cov.T, 5, mean)
    viz.plot_grid(grid, center=mean, title="3-sigma covariance grid")
    plt.show()

    print("\n" + "=" * 60)
    print("Quick start complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
