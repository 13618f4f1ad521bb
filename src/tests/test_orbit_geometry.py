"""
===============================================================================
KEPLERORBIT - Orbit Geometry Test Suite
===============================================================================
Tests for the orientation vectors (h, n, e), their display rescaling, and
the arcs that sweep i, w and W.
===============================================================================
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import logging

import numpy as np
import pytest
from numpy.testing import assert_allclose

from keplerorbit.core.exceptions import InvalidElementsError
from keplerorbit.dynamics.elements import OrbitalElements
from keplerorbit.dynamics.orbit_generator import generate
from keplerorbit.dynamics.orbit_geometry import (
    OrbitGeometry,
    angular_momentum_vector, specific_angular_momentum, node_vector,
    periapsis_direction, eccentricity_vector, display_vector,
    angle_arc, inclination_arc, periapsis_arc, raan_arc, compute_geometry,
)


# =============================================================================
# Helper functions
# =============================================================================

def angle_between(u, v):
    """Unsigned angle between two vectors (deg)."""
    c = np.dot(u, v) / (np.linalg.norm(u) * np.linalg.norm(v))
    return np.degrees(np.arccos(np.clip(c, -1.0, 1.0)))


@pytest.fixture
def molniya():
    """Return a Molniya-type orbit."""
    return OrbitalElements(a=26560.0, e=0.74, i=63.4, w=270.0, W=120.0)


# =============================================================================
# Test: Angular momentum
# =============================================================================

class TestAngularMomentum:
    """Tests for specific_angular_momentum."""

    def test_equatorial_along_z(self):
        """i = 0: h = (0, 0, sqrt(mu a (1 - e^2)))."""
        h = specific_angular_momentum(5137.0, 0.6)
        assert_allclose(h[:2], [0.0, 0.0], atol=1e-12)
        assert_allclose(h[2], np.sqrt(398600.4415 * 5137.0 * (1.0 - 0.36)), rtol=1e-14)

    def test_polar_along_minus_y(self):
        """i = 90 deg, W = 0: h points along -Y."""
        h = specific_angular_momentum(7000.0, 0.1, i=90.0)
        assert_allclose(h / np.linalg.norm(h), [0.0, -1.0, 0.0], atol=1e-15)

    def test_retrograde_along_minus_z(self):
        """i = 180 deg: h points along -Z."""
        h = specific_angular_momentum(7000.0, 0.1, i=180.0)
        assert_allclose(h / np.linalg.norm(h), [0.0, 0.0, -1.0], atol=1e-15)

    def test_magnitude_independent_of_orientation(self):
        """|h| depends on a, e and mu only."""
        ref = np.linalg.norm(specific_angular_momentum(9000.0, 0.3))
        for i, w, W in [(10.0, 20.0, 30.0), (120.0, 300.0, 45.0), (179.0, 0.0, 359.0)]:
            h = specific_angular_momentum(9000.0, 0.3, i, w, W)
            assert_allclose(np.linalg.norm(h), ref, rtol=1e-14)

    def test_inclination_from_z(self, molniya):
        """angle(Z, h) = i."""
        h = angular_momentum_vector(molniya)
        assert_allclose(angle_between([0.0, 0.0, 1.0], h), 63.4, atol=1e-10)

    def test_independent_of_argument_of_periapsis(self):
        """w rotates within the orbit plane and leaves h unchanged."""
        h1 = specific_angular_momentum(8000.0, 0.2, 40.0, 0.0, 70.0)
        h2 = specific_angular_momentum(8000.0, 0.2, 40.0, 133.0, 70.0)
        assert_allclose(h1, h2, atol=1e-9)

    def test_invalid_elements(self):
        with pytest.raises(InvalidElementsError):
            specific_angular_momentum(7000.0, 1.2)


# =============================================================================
# Test: Node and eccentricity vectors
# =============================================================================

class TestNodeAndEccentricity:
    """Tests for node_vector, periapsis_direction and eccentricity_vector."""

    @pytest.mark.parametrize("i, W", [(30.0, 0.0), (63.4, 120.0), (90.0, 250.0), (150.0, 10.0)])
    def test_node_on_equator_at_raan(self, i, W):
        """For inclined orbits n = (cos W, sin W, 0)."""
        n = node_vector(OrbitalElements(a=7000.0, e=0.1, i=i, w=15.0, W=W))
        Wr = np.radians(W)
        assert_allclose(n, [np.cos(Wr), np.sin(Wr), 0.0], atol=1e-14)

    def test_node_perpendicular_to_z_and_h(self, molniya):
        n = node_vector(molniya)
        h = angular_momentum_vector(molniya)
        assert_allclose(np.linalg.norm(n), 1.0, rtol=1e-15)
        assert abs(n[2]) < 1e-15
        assert abs(np.dot(n, h)) < 1e-12 * np.linalg.norm(h)

    def test_eccentricity_along_first_point(self, molniya):
        """The periapsis direction is the normalized first generated point."""
        first = generate(molniya.a, molniya.e, molniya.i, molniya.w, molniya.W, dt=600.0)[0]
        assert_allclose(periapsis_direction(molniya), first / np.linalg.norm(first), atol=1e-15)

    def test_raan_from_x(self, molniya):
        """angle(X, n) = W when W <= 180 deg."""
        assert_allclose(angle_between([1.0, 0.0, 0.0], node_vector(molniya)), 120.0, atol=1e-10)

    @pytest.mark.parametrize("w", [0.0, 35.0, 90.0, 170.0])
    def test_argument_of_periapsis_from_node(self, w):
        """angle(n, e) = w for 0 <= w <= 180 deg."""
        el = OrbitalElements(a=12000.0, e=0.4, i=50.0, w=w, W=80.0)
        assert_allclose(angle_between(node_vector(el), eccentricity_vector(el)), w, atol=1e-6)

    def test_equatorial_fallback(self, caplog):
        """For i = 0 the node falls back to (cos W, sin W, 0)."""
        el = OrbitalElements(a=7000.0, e=0.1, i=0.0, w=10.0, W=60.0)
        with caplog.at_level(logging.DEBUG, logger='keplerorbit'):
            n = node_vector(el)
        assert_allclose(n, [0.5, np.sqrt(3.0) / 2.0, 0.0], atol=1e-15)
        assert "Equatorial orbit" in caplog.text

    def test_retrograde_equatorial_fallback(self):
        """i = 180 deg is also equatorial."""
        n = node_vector(OrbitalElements(a=7000.0, e=0.1, i=180.0, W=0.0))
        assert_allclose(n, [1.0, 0.0, 0.0], atol=1e-15)

    def test_eccentricity_magnitude(self, molniya):
        """|e_vec| = e and e_vec points at periapsis."""
        e_vec = eccentricity_vector(molniya)
        assert_allclose(np.linalg.norm(e_vec), 0.74, rtol=1e-14)
        assert_allclose(e_vec / 0.74, periapsis_direction(molniya), atol=1e-15)

    def test_eccentricity_perpendicular_to_h(self, molniya):
        """The eccentricity vector lies in the orbit plane."""
        e_vec = eccentricity_vector(molniya)
        h = angular_momentum_vector(molniya)
        assert abs(np.dot(e_vec, h)) < 1e-9 * np.linalg.norm(h)

    def test_circular_eccentricity_is_zero(self):
        assert_allclose(eccentricity_vector(OrbitalElements(a=7000.0, e=0.0, i=20.0)),
                        np.zeros(3), atol=0.0)


# =============================================================================
# Test: Display vectors
# =============================================================================

class TestDisplayVector:
    """Tests for display_vector."""

    def test_rescales_to_length(self):
        v = display_vector([3.0, 4.0, 0.0], 2000.0)
        assert_allclose(v, [1200.0, 1600.0, 0.0], rtol=1e-15)

    def test_zero_vector_stays_zero(self):
        assert_allclose(display_vector(np.zeros(3), 2000.0), np.zeros(3), atol=0.0)

    def test_keeps_direction_of_h(self, molniya):
        h = angular_momentum_vector(molniya)
        v = display_vector(h, 500.0)
        assert_allclose(np.linalg.norm(v), 500.0, rtol=1e-14)
        assert_allclose(v / 500.0, h / np.linalg.norm(h), atol=1e-15)


# =============================================================================
# Test: Angle arcs
# =============================================================================

class TestArcs:
    """Tests for angle_arc and the three orientation arcs."""

    def test_angle_arc_shape_and_radius(self):
        arc = angle_arc(1000.0, 75.0, segments=30)
        assert arc.shape == (31, 3)
        assert_allclose(np.linalg.norm(arc, axis=1), 1000.0, rtol=1e-14)
        assert np.all(arc[:, 2] == 0.0)

    def test_angle_arc_endpoints(self):
        arc = angle_arc(2.0, 90.0, segments=10, start_deg=90.0)
        assert_allclose(arc[0], [0.0, 2.0, 0.0], atol=1e-15)
        assert_allclose(arc[-1], [-2.0, 0.0, 0.0], atol=1e-15)

    def test_negative_sweep_runs_clockwise(self):
        arc = angle_arc(1.0, -90.0, segments=4)
        assert_allclose(arc[-1], [0.0, -1.0, 0.0], atol=1e-15)

    @pytest.mark.parametrize("radius, segments", [(1000.0, 0), (-1.0, 10)])
    def test_angle_arc_invalid(self, radius, segments):
        with pytest.raises(ValueError):
            angle_arc(radius, 45.0, segments)

    def test_inclination_arc_spans_z_to_h(self, molniya):
        """The inclination arc starts on +Z and ends on h."""
        arc = inclination_arc(molniya, radius=1000.0, segments=40)
        h_hat = angular_momentum_vector(molniya)
        h_hat = h_hat / np.linalg.norm(h_hat)
        assert arc.shape == (41, 3)
        assert_allclose(arc[0], [0.0, 0.0, 1000.0], atol=1e-9)
        assert_allclose(arc[-1], 1000.0 * h_hat, atol=1e-9)
        assert_allclose(np.linalg.norm(arc, axis=1), 1000.0, rtol=1e-14)

    def test_inclination_arc_in_z_h_plane(self, molniya):
        """Every point is perpendicular to the node vector."""
        arc = inclination_arc(molniya)
        assert np.max(np.abs(arc @ node_vector(molniya))) < 1e-9

    def test_periapsis_arc_spans_periapsis_to_node(self, molniya):
        """The periapsis arc runs from the periapsis direction to the node."""
        arc = periapsis_arc(molniya, radius=1000.0)
        assert_allclose(arc[0], 1000.0 * periapsis_direction(molniya), atol=1e-9)
        assert_allclose(arc[-1], 1000.0 * node_vector(molniya), atol=1e-9)

    def test_periapsis_arc_in_orbit_plane(self, molniya):
        arc = periapsis_arc(molniya)
        h = angular_momentum_vector(molniya)
        assert np.max(np.abs(arc @ (h / np.linalg.norm(h)))) < 1e-9

    def test_raan_arc_spans_x_to_node(self, molniya):
        """The RAAN arc stays in the XY plane from +X to the node."""
        arc = raan_arc(molniya, radius=1000.0)
        assert_allclose(arc[0], [1000.0, 0.0, 0.0], atol=1e-12)
        assert_allclose(arc[-1], 1000.0 * node_vector(molniya), atol=1e-9)
        assert np.all(arc[:, 2] == 0.0)


# =============================================================================
# Test: Bundle
# =============================================================================

class TestComputeGeometry:
    """Tests for compute_geometry."""

    def test_fields(self, molniya):
        geo = compute_geometry(molniya, vector_length=2000.0, arc_radius=1000.0, arc_segments=20)
        assert isinstance(geo, OrbitGeometry)
        assert_allclose(geo.angular_momentum, angular_momentum_vector(molniya))
        for v in (geo.h_display, geo.n_display, geo.e_display):
            assert_allclose(np.linalg.norm(v), 2000.0, rtol=1e-14)
        for arc in (geo.inclination_arc, geo.periapsis_arc, geo.raan_arc):
            assert arc.shape == (21, 3)

    def test_circular_shows_periapsis_direction(self):
        """With e = 0 the displayed e vector points along the P axis."""
        el = OrbitalElements(a=7000.0, e=0.0, i=30.0, w=45.0, W=60.0)
        geo = compute_geometry(el, vector_length=100.0)
        assert_allclose(geo.eccentricity, np.zeros(3), atol=0.0)
        assert_allclose(geo.e_display, 100.0 * periapsis_direction(el), atol=1e-12)
