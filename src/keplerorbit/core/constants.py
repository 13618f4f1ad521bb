"""
===============================================================================
KEPLERORBIT - Physical Constants and Solver Defaults
===============================================================================
Central repository for the constants used by the orbit generator.

Unlike a full mission simulation, this package works in the units of the
orbit viewer it feeds: kilometres, seconds, and km^3/s^2.  Angles handed
to the public functions are in degrees; everything internal is radians.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi
DEG2RAD = PI / 180.0
RAD2DEG = 180.0 / PI

# =============================================================================
# EARTH PARAMETERS
# =============================================================================
EARTH_MU = 398600.4415                 # Gravitational parameter (km^3/s^2)

# =============================================================================
# KEPLER SOLVER DEFAULTS
# =============================================================================
DEFAULT_TIME_STEP = 10.0               # s
DEFAULT_TOLERANCE = 1.0e-3             # rad, on successive E iterates
MAX_KEPLER_ITERATIONS = 100            # Newton-Raphson cap per sample

# Above this many samples per period the generator logs a warning.
LARGE_SAMPLE_COUNT = 1_000_000

# =============================================================================
# DISPLAY GEOMETRY DEFAULTS
# =============================================================================
DEFAULT_VECTOR_LENGTH = 2000.0         # km, length of h / n / e display vectors
DEFAULT_ARC_RADIUS = 1000.0            # km, radius of angle arcs
DEFAULT_ARC_SEGMENTS = 50
