"""
Derivatives of direction-cosine measurements with respect to position.

Relativity and atmospheric effects are not taken into account. Derivatives
are formed in the receiver's local frame, x_local = M (x - l_rx), and then
rotated back into the global frame.

References:
  - D. F. Crouse, "Basic tracking using nonlinear 3D monostatic and
    bistatic measurements," IEEE AES Magazine, vol. 29, no. 8, Part II,
    pp. 4-53, Aug. 2014.
"""

import numpy as np
from typing import Optional

from ..validators import (
    DegenerateGeometryError, validate_points, validate_rotation_matrix, validate_vector
)


def _local_points(xG, l_rx, M):
    points = validate_points(xG, "xG")
    l_rx = np.zeros(3) if l_rx is None else validate_vector(l_rx, "l_rx")
    M = np.eye(3) if M is None else validate_rotation_matrix(M, "M")

    x_local = M @ (points - l_rx[:, np.newaxis])
    r = np.linalg.norm(x_local, axis=0)
    if np.any(r == 0):
        raise DegenerateGeometryError(
            f"Point(s) {np.flatnonzero(r == 0).tolist()} coincide with the receiver"
        )
    return x_local, r, M


def uv_gradient(xG: np.ndarray,
                l_rx: Optional[np.ndarray] = None,
                M: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Jacobian of the u-v direction cosines with respect to global position

    Args:
        xG: 3xN target positions in the global frame
        l_rx: Receiver position; the origin if None
        M: Rotation from the global frame to the receiver frame; identity
            if None

    Returns:
        Nx2x3 array; [i, 0] is du/d[x, y, z] and [i, 1] is dv/d[x, y, z]
    """
    x_local, r, M = _local_points(xG, l_rx, M)
    x, y, z = x_local
    r3 = r**3

    J = np.empty((x_local.shape[1], 2, 3))
    J[:, 0, 0] = (y**2 + z**2) / r3
    J[:, 0, 1] = -x * y / r3
    J[:, 0, 2] = -x * z / r3
    J[:, 1, 0] = -x * y / r3
    J[:, 1, 1] = (x**2 + z**2) / r3
    J[:, 1, 2] = -y * z / r3

    return J @ M


def uv_hessian(xG: np.ndarray,
               l_rx: Optional[np.ndarray] = None,
               M: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Hessian matrices of the u-v direction cosines with respect to position

    Args:
        xG: 3xN target positions in the global frame
        l_rx: Receiver position; the origin if None
        M: Rotation from the global frame to the receiver frame; identity
            if None

    Returns:
        Nx2x3x3 array; [i, 0] is the Hessian of u and [i, 1] the Hessian of
        v for point i, ordered [d2/dxdx, d2/dxdy, d2/dxdz; ...]. Each
        matrix is symmetric.

    Raises:
        DegenerateGeometryError: If a point coincides with the receiver
    """
    x_local, r, M = _local_points(xG, l_rx, M)
    x, y, z = x_local
    r5 = r**5
    num_pts = x_local.shape[1]

    H = np.empty((num_pts, 2, 3, 3))

    # u
    H[:, 0, 0, 0] = -(3 * x * (y**2 + z**2)) / r5
    H[:, 0, 1, 1] = -(x * (x**2 - 2 * y**2 + z**2)) / r5
    H[:, 0, 2, 2] = -(x * (x**2 + y**2 - 2 * z**2)) / r5
    H[:, 0, 0, 1] = -(y * (-2 * x**2 + y**2 + z**2)) / r5
    H[:, 0, 0, 2] = -(z * (-2 * x**2 + y**2 + z**2)) / r5
    H[:, 0, 1, 2] = (3 * x * y * z) / r5

    # v
    H[:, 1, 0, 0] = -(y * (-2 * x**2 + y**2 + z**2)) / r5
    H[:, 1, 1, 1] = -(3 * y * (x**2 + z**2)) / r5
    H[:, 1, 2, 2] = -(y * (x**2 + y**2 - 2 * z**2)) / r5
    H[:, 1, 0, 1] = -(x * (x**2 - 2 * y**2 + z**2)) / r5
    H[:, 1, 0, 2] = (3 * x * y * z) / r5
    H[:, 1, 1, 2] = -(z * (x**2 - 2 * y**2 + z**2)) / r5

    for i, j in ((1, 0), (2, 0), (2, 1)):
        H[:, :, i, j] = H[:, :, j, i]

    # Rotate back into global coordinates
    return M.T @ H @ M
