"""
===============================================================================
KEPLERORBIT - Orbital Element Value Types
===============================================================================
Immutable inputs to the orbit generator:

    OrbitalElements -- size, shape and orientation of a bound ellipse
    SampleSpec      -- time step and Newton-Raphson convergence settings

Both validate their fields on construction, so every downstream function
can assume a > 0, 0 <= e < 1, mu > 0, dt > 0 and tol > 0.
===============================================================================
"""

from dataclasses import dataclass

import numpy as np

from keplerorbit.core.constants import (
    EARTH_MU,
    TWO_PI,
    DEFAULT_TIME_STEP,
    DEFAULT_TOLERANCE,
    MAX_KEPLER_ITERATIONS,
)
from keplerorbit.core.exceptions import InvalidElementsError


def _require_finite(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidElementsError(f"{name} must be a number (got {value!r}).") from None
    if not np.isfinite(value):
        raise InvalidElementsError(f"{name} must be finite (got {value}).")
    return value


# =============================================================================
# ORBITAL ELEMENTS
# =============================================================================

@dataclass(frozen=True)
class OrbitalElements:
    """
    Classical elements of a bound (elliptical) Keplerian orbit.

    Attributes
    ----------
    a : float
        Semi-major axis (km).  Must be positive.
    e : float
        Eccentricity, 0 <= e < 1.
    i : float
        Inclination (deg).
    w : float
        Argument of periapsis (deg).
    W : float
        Right ascension of the ascending node (deg).
    mu : float
        Gravitational parameter of the central body (km^3/s^2).

    Raises
    ------
    InvalidElementsError
        If any invariant is violated.
    """
    a: float
    e: float
    i: float = 0.0
    w: float = 0.0
    W: float = 0.0
    mu: float = EARTH_MU

    def __post_init__(self):
        for name in ('a', 'e', 'i', 'w', 'W', 'mu'):
            object.__setattr__(self, name, _require_finite(name, getattr(self, name)))

        if self.a <= 0.0:
            raise InvalidElementsError(
                f"Semi-major axis must be positive (got a = {self.a})."
            )
        if not 0.0 <= self.e < 1.0:
            raise InvalidElementsError(
                f"Eccentricity must satisfy 0 <= e < 1 (got e = {self.e}); "
                "only bound elliptical orbits are supported."
            )
        if self.mu <= 0.0:
            raise InvalidElementsError(
                f"Gravitational parameter must be positive (got mu = {self.mu})."
            )

    # ------------------------------------------------------------------ #
    #  Derived quantities
    # ------------------------------------------------------------------ #
    @property
    def periapsis_radius(self) -> float:
        """rp = a (1 - e)  (km)."""
        return self.a * (1.0 - self.e)

    @property
    def apoapsis_radius(self) -> float:
        """ra = a (1 + e)  (km)."""
        return self.a * (1.0 + self.e)

    @property
    def semi_latus_rectum(self) -> float:
        """p = a (1 - e^2) = h^2 / mu  (km)."""
        return self.a * (1.0 - self.e * self.e)

    @property
    def angular_momentum(self) -> float:
        """Specific angular momentum magnitude h = sqrt(mu a (1 - e^2))  (km^2/s)."""
        return float(np.sqrt(self.mu * self.semi_latus_rectum))

    @property
    def mean_motion(self) -> float:
        """n = sqrt(mu / a^3)  (rad/s)."""
        return float(np.sqrt(self.mu / self.a ** 3))

    @property
    def period(self) -> float:
        """Kepler's third law, T = 2 pi sqrt(a^3 / mu)  (s)."""
        return float(TWO_PI * np.sqrt(self.a ** 3 / self.mu))


# =============================================================================
# SAMPLING SPECIFICATION
# =============================================================================

@dataclass(frozen=True)
class SampleSpec:
    """
    Time grid and solver settings for one generation pass.

    Attributes
    ----------
    dt : float
        Time step between samples (s).  Must be positive.
    tol : float
        Convergence tolerance on successive eccentric anomaly iterates
        (rad).  Must be positive.
    max_iterations : int
        Newton-Raphson iteration cap per sample.
    """
    dt: float = DEFAULT_TIME_STEP
    tol: float = DEFAULT_TOLERANCE
    max_iterations: int = MAX_KEPLER_ITERATIONS

    def __post_init__(self):
        object.__setattr__(self, 'dt', _require_finite('dt', self.dt))
        object.__setattr__(self, 'tol', _require_finite('tol', self.tol))
        if self.dt <= 0.0:
            raise InvalidElementsError(f"Time step must be positive (got dt = {self.dt}).")
        if self.tol <= 0.0:
            raise InvalidElementsError(f"Tolerance must be positive (got tol = {self.tol}).")
        try:
            max_iterations = int(self.max_iterations)
        except (TypeError, ValueError, OverflowError):
            max_iterations = None
        if (max_iterations is None or isinstance(self.max_iterations, bool)
                or max_iterations != self.max_iterations):
            raise InvalidElementsError(
                f"max_iterations must be an integer (got {self.max_iterations!r})."
            )
        object.__setattr__(self, 'max_iterations', max_iterations)
        if self.max_iterations < 1:
            raise InvalidElementsError(
                f"max_iterations must be at least 1 (got {self.max_iterations})."
            )
