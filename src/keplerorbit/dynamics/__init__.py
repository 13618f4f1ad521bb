"""
===============================================================================
KEPLERORBIT - Dynamics Module
===============================================================================
Two-body orbit models built on the core frame rotations.

Submodules:
    elements         -- Orbital element and sampling value types
    anomaly_solver   -- Kepler's equation, true anomaly, orbital radius
    orbit_generator  -- Full-period trajectory sampling in the inertial frame
    orbit_geometry   -- Angular momentum, node and eccentricity vectors, arcs
===============================================================================
"""
