"""
Visualization utilities for measurement conversion
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Ellipse
from typing import Optional, Sequence, Tuple

from .conversion.cubature import CubaturePointSet
from .conversion.propagator import PropagationResult


class Visualizer:
    """Plots of cubature clouds, grids and converted estimates"""

    def __init__(self, figsize: Tuple[int, int] = (12, 8)):
        """
        Initialize visualizer

        Args:
            figsize: Default figure size
        """
        self.figsize = figsize
        self.colormap = 'viridis'

    def plot_cubature_points(self, points: np.ndarray,
                             cubature: Optional[CubaturePointSet] = None,
                             title: str = "Cubature Points") -> plt.Figure:
        """
        3D scatter of a (transformed) cubature point cloud

        Args:
            points: 3xK points
            cubature: Point set whose weights color the markers
            title: Plot title

        Returns:
            Figure object
        """
        fig = plt.figure(figsize=self.figsize)
        ax = fig.add_subplot(111, projection='3d')

        colors = cubature.weights if cubature is not None else 'b'
        sc = ax.scatter(points[0], points[1], points[2], c=colors,
                        cmap=self.colormap if cubature is not None else None, s=40)
        if cubature is not None:
            cbar = plt.colorbar(sc, ax=ax, shrink=0.7)
            cbar.set_label('Weight')

        ax.set_xlabel('x (m)')
        ax.set_ylabel('y (m)')
        ax.set_zlabel('z (m)')
        ax.set_title(title)

        return fig

    def plot_grid(self, grid: np.ndarray, center: Optional[np.ndarray] = None,
                  title: str = "Covariance Grid") -> plt.Figure:
        """
        Plot a covariance grid in its first two (or three) dimensions

        Args:
            grid: dim x K grid points
            center: Grid center to mark
            title: Plot title

        Returns:
            Figure object
        """
        fig = plt.figure(figsize=self.figsize)
        if grid.shape[0] >= 3:
            ax = fig.add_subplot(111, projection='3d')
            ax.plot(grid[0], grid[1], grid[2], 'k^-', linewidth=1, markersize=2)
            if center is not None:
                ax.plot([center[0]], [center[1]], [center[2]], 'bo')
            ax.set_zlabel('x3')
        else:
            ax = fig.add_subplot(111)
            ax.plot(grid[0], grid[1], 'ok', markersize=3)
            if center is not None:
                ax.plot(center[0], center[1], 'bo')
            ax.set_aspect('equal')
            ax.grid(True, alpha=0.3)

        ax.set_xlabel('x1')
        ax.set_ylabel('x2')
        ax.set_title(title)

        return fig

    def plot_ruv_estimates(self, result: PropagationResult,
                           n_sigma: float = 3.0,
                           title: str = "Converted u-v Estimates") -> plt.Figure:
        """
        Plot converted estimates in the u-v plane with covariance ellipses,
        and the converted ranges with their standard deviations

        Args:
            result: Output of a propagation
            n_sigma: Ellipse size in standard deviations
            title: Plot title

        Returns:
            Figure object
        """
        fig, (ax_uv, ax_r) = plt.subplots(1, 2, figsize=self.figsize)
        ok = [i for i in range(result.num_measurements) if i not in result.errors]

        for i in ok:
            u, v = result.means[1:, i]
            cov_uv = result.covariances[i][1:, 1:]
            eigvals, eigvecs = np.linalg.eigh(cov_uv)
            eigvals = np.clip(eigvals, 0.0, None)
            angle = np.degrees(np.arctan2(eigvecs[1, 1], eigvecs[0, 1]))
            ellipse = Ellipse((u, v),
                              width=2 * n_sigma * np.sqrt(eigvals[1]),
                              height=2 * n_sigma * np.sqrt(eigvals[0]),
                              angle=angle, fill=False, color='b', alpha=0.7)
            ax_uv.add_patch(ellipse)
            ax_uv.plot(u, v, 'r+', markersize=8)

        # Direction cosines live inside the unit circle
        theta = np.linspace(0, 2 * np.pi, 200)
        ax_uv.plot(np.cos(theta), np.sin(theta), 'k--', linewidth=0.5)
        ax_uv.set_xlabel('u')
        ax_uv.set_ylabel('v')
        ax_uv.set_aspect('equal')
        ax_uv.grid(True, alpha=0.3)
        ax_uv.set_title(title)

        ranges = result.means[0, ok]
        range_std = np.sqrt(np.clip(result.covariances[ok, 0, 0], 0.0, None)) if ok else []
        ax_r.errorbar(ok, ranges / 1000, yerr=np.asarray(range_std) * n_sigma / 1000,
                      fmt='o', capsize=3)
        ax_r.set_xlabel('Measurement index')
        ax_r.set_ylabel('Bistatic range (km)')
        ax_r.set_title(f'Range with {n_sigma:g}-sigma bars')
        ax_r.grid(True, alpha=0.3)

        return fig

    def plot_orthographic_projection(self, xy: np.ndarray,
                                     cos_c: Optional[np.ndarray] = None,
                                     labels: Optional[Sequence[str]] = None,
                                     title: str = "Orthographic Projection") -> plt.Figure:
        """
        Plot tangent-plane coordinates, marking far-side points

        Args:
            xy: 2xN projected points in meters
            cos_c: Cosine of the angular distance; negative values are far-side
            labels: Optional point labels
            title: Plot title

        Returns:
            Figure object
        """
        fig, ax = plt.subplots(figsize=self.figsize)

        near = np.ones(xy.shape[1], dtype=bool) if cos_c is None else cos_c >= 0
        ax.plot(xy[0, near] / 1000, xy[1, near] / 1000, 'bo', label='Near side')
        if np.any(~near):
            ax.plot(xy[0, ~near] / 1000, xy[1, ~near] / 1000, 'rx', label='Far side')

        if labels is not None:
            for label, x, y in zip(labels, xy[0], xy[1]):
                ax.annotate(label, (x / 1000, y / 1000), textcoords='offset points', xytext=(4, 4))

        ax.plot(0, 0, 'k+', markersize=12, label='Tangent point')
        ax.set_xlabel('East (km)')
        ax.set_ylabel('North (km)')
        ax.set_aspect('equal')
        ax.grid(True, alpha=0.3)
        ax.legend()
        ax.set_title(title)

        return fig
