"""
===============================================================================
KEPLERORBIT - Orbit Geometry
===============================================================================
Vectors and angle arcs that describe the orientation of an orbit.

    h  -- specific angular momentum, normal to the orbit plane
    n  -- node vector, Z x h, pointing at the ascending node
    e  -- eccentricity vector, pointing at periapsis

The three orientation angles can be read off these vectors:

    i = angle(Z, h)     w = angle(n, e)     W = angle(X, n)

and the arc helpers below return point sets that sweep exactly those
angles, for drawing by a viewer.  Arcs are returned as (segments + 1, 3)
arrays of points on a circle of the given radius centred at the origin.
===============================================================================
"""

import logging
from dataclasses import dataclass

import numpy as np

from keplerorbit.core.constants import (
    EARTH_MU,
    PI,
    DEG2RAD,
    DEFAULT_VECTOR_LENGTH,
    DEFAULT_ARC_RADIUS,
    DEFAULT_ARC_SEGMENTS,
)
from keplerorbit.core.frames import Rx, Ry, Rz, build_transform, perifocal_to_inertial
from keplerorbit.dynamics.elements import OrbitalElements

logger = logging.getLogger(__name__)

Z_HAT = np.array([0.0, 0.0, 1.0])

# Below this ratio |Z x h| / |h| the orbit is treated as equatorial.
_EQUATORIAL_TOL = 1e-12


# =============================================================================
# ORIENTATION VECTORS
# =============================================================================

def angular_momentum_vector(elements: OrbitalElements) -> np.ndarray:
    """
    Specific angular momentum vector in the inertial frame (km^2/s).

    In the perifocal frame h lies along the orbit normal R:

        h_pqw = (0, 0, sqrt(mu a (1 - e^2)))

    and is carried to the inertial frame by the same transform as the
    orbit points, so it is perpendicular to every generated position.
    """
    h_pqw = np.array([0.0, 0.0, elements.angular_momentum])
    return perifocal_to_inertial(h_pqw, build_transform(elements.i, elements.w, elements.W))


def specific_angular_momentum(
    a: float,
    e: float,
    i: float = 0.0,
    w: float = 0.0,
    W: float = 0.0,
    mu: float = EARTH_MU,
) -> np.ndarray:
    """
    Specific angular momentum vector for raw orbital elements.

    Parameters
    ----------
    a : float
        Semi-major axis (km).
    e : float
        Eccentricity, 0 <= e < 1.
    i, w, W : float
        Inclination, argument of periapsis, RAAN (deg).
    mu : float
        Gravitational parameter (km^3/s^2).

    Returns
    -------
    np.ndarray
        3-element vector (km^2/s).

    Raises
    ------
    InvalidElementsError
        For a <= 0, e outside [0, 1) or mu <= 0.
    """
    return angular_momentum_vector(OrbitalElements(a=a, e=e, i=i, w=w, W=W, mu=mu))


def node_vector(elements: OrbitalElements) -> np.ndarray:
    """
    Unit vector toward the ascending node, n = Z x h / |Z x h|.

    For an equatorial orbit (i = 0 or 180 deg) the node is undefined;
    the RAAN reference direction (cos W, sin W, 0) is returned instead.
    """
    h = angular_momentum_vector(elements)
    n = np.cross(Z_HAT, h)
    n_mag = np.linalg.norm(n)
    if n_mag <= _EQUATORIAL_TOL * np.linalg.norm(h):
        logger.debug("Equatorial orbit (i = %g deg): using RAAN direction as node", elements.i)
        W = elements.W * DEG2RAD
        return np.array([np.cos(W), np.sin(W), 0.0])
    return n / n_mag


def periapsis_direction(elements: OrbitalElements) -> np.ndarray:
    """Unit vector toward periapsis: the perifocal P axis in the inertial frame."""
    T = build_transform(elements.i, elements.w, elements.W)
    return T[:, 0].copy()


def eccentricity_vector(elements: OrbitalElements) -> np.ndarray:
    """Eccentricity vector, magnitude e, pointing at periapsis."""
    return elements.e * periapsis_direction(elements)


def display_vector(vector: np.ndarray, length: float = DEFAULT_VECTOR_LENGTH) -> np.ndarray:
    """Rescale *vector* to *length*, keeping its direction.  Zero stays zero."""
    v = np.asarray(vector, dtype=np.float64)
    v_mag = np.linalg.norm(v)
    if v_mag == 0.0:
        return np.zeros(3)
    return v * (length / v_mag)


# =============================================================================
# ANGLE ARCS
# =============================================================================

def angle_arc(
    radius: float,
    sweep_deg: float,
    segments: int = DEFAULT_ARC_SEGMENTS,
    start_deg: float = 0.0,
) -> np.ndarray:
    """
    Points on a circular arc in the XY plane.

    Parameters
    ----------
    radius : float
        Arc radius (km).
    sweep_deg : float
        Angle swept (deg); negative sweeps run clockwise.
    segments : int
        Number of straight segments; segments + 1 points are returned.
    start_deg : float
        Angle of the first point, measured from +X (deg).

    Returns
    -------
    np.ndarray
        (segments + 1, 3) array of points.
    """
    if segments < 1:
        raise ValueError(f"An arc needs at least one segment (got {segments}).")
    if radius < 0.0:
        raise ValueError(f"Arc radius must be non-negative (got {radius}).")
    theta = (start_deg + np.linspace(0.0, sweep_deg, segments + 1)) * DEG2RAD
    return np.column_stack((radius * np.cos(theta),
                            radius * np.sin(theta),
                            np.zeros(segments + 1)))


def inclination_arc(
    elements: OrbitalElements,
    radius: float = DEFAULT_ARC_RADIUS,
    segments: int = DEFAULT_ARC_SEGMENTS,
) -> np.ndarray:
    """
    Arc from +Z to the angular momentum direction, sweeping i.

    The XY arc is stood up into the plane containing Z and h: a quarter
    turn about Y and a half turn about X take +X to +Z, then a turn by W
    about Z aligns the arc with the line of nodes.
    """
    arc = angle_arc(radius, elements.i, segments)
    M = Rz(-elements.W * DEG2RAD) @ Rx(-PI) @ Ry(-0.5 * PI)
    return perifocal_to_inertial(arc, M)


def periapsis_arc(
    elements: OrbitalElements,
    radius: float = DEFAULT_ARC_RADIUS,
    segments: int = DEFAULT_ARC_SEGMENTS,
) -> np.ndarray:
    """Arc in the orbit plane from the periapsis direction back to the node, sweeping w."""
    arc = angle_arc(radius, -elements.w, segments)
    return perifocal_to_inertial(arc, build_transform(elements.i, elements.w, elements.W))


def raan_arc(
    elements: OrbitalElements,
    radius: float = DEFAULT_ARC_RADIUS,
    segments: int = DEFAULT_ARC_SEGMENTS,
) -> np.ndarray:
    """Arc in the reference XY plane from +X to the node, sweeping W."""
    return angle_arc(radius, elements.W, segments)


# =============================================================================
# BUNDLE
# =============================================================================

@dataclass(frozen=True)
class OrbitGeometry:
    """
    Orientation vectors and angle arcs of one orbit.

    Attributes
    ----------
    angular_momentum : np.ndarray
        h (km^2/s).
    node : np.ndarray
        Unit node vector.
    eccentricity : np.ndarray
        Eccentricity vector (dimensionless, |e| = e).
    h_display, n_display, e_display : np.ndarray
        The three vectors rescaled to the display length (km).
    inclination_arc, periapsis_arc, raan_arc : np.ndarray
        (segments + 1, 3) arc points (km).
    """
    angular_momentum: np.ndarray
    node: np.ndarray
    eccentricity: np.ndarray
    h_display: np.ndarray
    n_display: np.ndarray
    e_display: np.ndarray
    inclination_arc: np.ndarray
    periapsis_arc: np.ndarray
    raan_arc: np.ndarray


def compute_geometry(
    elements: OrbitalElements,
    vector_length: float = DEFAULT_VECTOR_LENGTH,
    arc_radius: float = DEFAULT_ARC_RADIUS,
    arc_segments: int = DEFAULT_ARC_SEGMENTS,
) -> OrbitGeometry:
    """Compute every orientation vector and arc of *elements*."""
    h = angular_momentum_vector(elements)
    n = node_vector(elements)
    e_vec = eccentricity_vector(elements)
    # A circular orbit has no eccentricity direction; show periapsis instead.
    e_dir = e_vec if elements.e > 0.0 else periapsis_direction(elements)

    return OrbitGeometry(
        angular_momentum=h,
        node=n,
        eccentricity=e_vec,
        h_display=display_vector(h, vector_length),
        n_display=display_vector(n, vector_length),
        e_display=display_vector(e_dir, vector_length),
        inclination_arc=inclination_arc(elements, arc_radius, arc_segments),
        periapsis_arc=periapsis_arc(elements, arc_radius, arc_segments),
        raan_arc=raan_arc(elements, arc_radius, arc_segments),
    )
