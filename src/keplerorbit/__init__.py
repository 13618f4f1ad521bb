"""
keplerorbit: trajectories of bound Keplerian orbits.

Samples one period of a two-body elliptical orbit by solving Kepler's
equation at every time step, rotates the points from the perifocal frame
into the inertial frame, and derives the orbit's orientation vectors
(angular momentum, node, eccentricity) for display.
"""

from keplerorbit.core.exceptions import (
    OrbitError,
    InvalidElementsError,
    ConvergenceError,
    ConfigError,
)
from keplerorbit.core.frames import (
    Rx,
    Ry,
    Rz,
    build_transform,
    perifocal_to_inertial,
    is_orthonormal,
)
from keplerorbit.dynamics.elements import OrbitalElements, SampleSpec
from keplerorbit.dynamics.anomaly_solver import (
    AnomalySolution,
    solve_kepler,
    solve_anomaly,
    true_anomaly,
    orbit_radius,
)
from keplerorbit.dynamics.orbit_generator import (
    OrbitTrajectory,
    generate,
    generate_trajectory,
    sample_count,
    sample_times,
)
from keplerorbit.dynamics.orbit_geometry import (
    OrbitGeometry,
    angular_momentum_vector,
    specific_angular_momentum,
    node_vector,
    periapsis_direction,
    eccentricity_vector,
    display_vector,
    angle_arc,
    inclination_arc,
    periapsis_arc,
    raan_arc,
    compute_geometry,
)

__version__ = "0.1.0"
