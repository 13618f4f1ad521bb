"""
===============================================================================
KEPLERORBIT - Reference Frame Transformations
===============================================================================
Supports: Perifocal (PQW) and inertial (XYZ) frames.

The orbit generator solves the motion in the perifocal frame, where the
orbit lies in the P-Q plane with P pointing at periapsis.  The three
classical orientation angles then carry it into the fixed inertial frame:

    w  (argument of periapsis) -- in-plane rotation about the orbit normal
    i  (inclination)           -- tilt about the line of nodes
    W  (RAAN)                  -- swing of the line of nodes about Z

This module provides the elementary rotation matrices and the composed
perifocal -> inertial transform.  All functions operate on NumPy arrays
and return fresh NumPy arrays.  The elementary rotations take radians;
build_transform takes degrees, matching the orbital element inputs.

References
----------
    [1] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.
    [2] Curtis, "Orbital Mechanics for Engineering Students", 4th ed.

===============================================================================
"""

import numpy as np

from keplerorbit.core.constants import DEG2RAD


# =============================================================================
# ELEMENTARY ROTATION MATRICES
# =============================================================================

def _axis_rotation(axis: int, angle: float) -> np.ndarray:
    """Frame rotation by *angle* radians about coordinate axis 0, 1 or 2."""
    c = np.cos(angle)
    s = np.sin(angle)
    j, k = (axis + 1) % 3, (axis + 2) % 3
    R = np.eye(3, dtype=np.float64)
    R[j, j] = c
    R[j, k] = s
    R[k, j] = -s
    R[k, k] = c
    return R


def Rx(angle: float) -> np.ndarray:
    """
    Frame rotation about X by *angle* radians.

    Re-expresses a fixed vector in axes turned by +angle, so +Y maps to
    -Z for a quarter turn.  Rx(-i) is the active tilt of the orbit plane
    by the inclination i about the line of nodes.
    """
    return _axis_rotation(0, angle)


def Ry(angle: float) -> np.ndarray:
    """
    Frame rotation about Y by *angle* radians.

    Only used to stand the inclination arc up out of the XY plane:
    Ry(-pi/2) turns +X onto -Z.
    """
    return _axis_rotation(1, angle)


def Rz(angle: float) -> np.ndarray:
    """
    Frame rotation about Z by *angle* radians.

    With a negative angle it turns vectors counter-clockwise in the XY
    plane: Rz(-w) carries periapsis away from the node within the orbit
    plane and Rz(-W) swings the line of nodes away from +X.
    """
    return _axis_rotation(2, angle)


# =============================================================================
# PERIFOCAL -> INERTIAL
# =============================================================================

def build_transform(i: float, w: float, W: float) -> np.ndarray:
    """
    Build the perifocal (PQW) -> inertial (XYZ) rotation matrix.

    The perifocal frame is related to the inertial frame by the classical
    3-1-3 Euler sequence.  Undoing the three rotations gives:

        T = Rz(-W) * Rx(-i) * Rz(-w)

    so that a perifocal column vector maps to inertial as

        r_xyz = T * r_pqw

    Rotation composition is not commutative; the order above is the one
    that places periapsis at angle w from the ascending node.

    Parameters
    ----------
    i : float
        Inclination (deg).
    w : float
        Argument of periapsis (deg).
    W : float
        Right ascension of the ascending node (deg).

    Returns
    -------
    np.ndarray
        3x3 orthonormal matrix, read-only.
    """
    T = Rz(-W * DEG2RAD) @ Rx(-i * DEG2RAD) @ Rz(-w * DEG2RAD)
    T.flags.writeable = False
    return T


def perifocal_to_inertial(points: np.ndarray, transform: np.ndarray) -> np.ndarray:
    """
    Rotate perifocal vectors into the inertial frame.

    Parameters
    ----------
    points : np.ndarray
        A single 3-element vector or an (N, 3) array of row vectors in
        the perifocal frame.
    transform : np.ndarray
        3x3 matrix from build_transform.

    Returns
    -------
    np.ndarray
        Array of the same shape as *points*, in the inertial frame.
    """
    p = np.asarray(points, dtype=np.float64)
    if p.ndim == 1:
        return transform @ p
    # Row vectors: (T @ p_k^T)^T = p_k @ T^T
    return p @ transform.T


def is_orthonormal(matrix: np.ndarray, atol: float = 1e-12) -> bool:
    """True when *matrix* is a 3x3 proper rotation (M M^T = I, det = +1)."""
    m = np.asarray(matrix, dtype=np.float64)
    if m.shape != (3, 3):
        return False
    return bool(
        np.allclose(m @ m.T, np.eye(3), atol=atol)
        and np.isclose(np.linalg.det(m), 1.0, atol=atol)
    )
