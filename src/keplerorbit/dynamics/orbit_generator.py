"""
===============================================================================
KEPLERORBIT - Orbit Point Generator
===============================================================================
Samples one full period of a Keplerian orbit and expresses it in the
inertial frame.

The generation pass is:

    1. Build the time grid t_k = k * dt, k = 0 .. floor(T / dt), so the
       grid always starts at periapsis (t = 0) and never runs past T.
    2. Solve the anomaly problem at every t_k, seeding Newton-Raphson with
       the eccentric anomaly of the previous sample (M = 0 for the first).
    3. Emit the perifocal point (r cos f, r sin f, 0).
    4. Rotate every point once through T = Rz(-W) Rx(-i) Rz(-w).

Each call starts from a fresh seed and returns freshly allocated arrays,
so repeated calls with the same inputs give identical results and callers
may keep or modify what they receive.
===============================================================================
"""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from keplerorbit.core.constants import (
    EARTH_MU,
    DEFAULT_TIME_STEP,
    DEFAULT_TOLERANCE,
    LARGE_SAMPLE_COUNT,
)
from keplerorbit.core.exceptions import ConvergenceError, InvalidElementsError
from keplerorbit.core.frames import build_transform, perifocal_to_inertial
from keplerorbit.dynamics.anomaly_solver import solve_anomaly
from keplerorbit.dynamics.elements import OrbitalElements, SampleSpec

logger = logging.getLogger(__name__)


# =============================================================================
# TRAJECTORY CONTAINER
# =============================================================================

@dataclass(frozen=True)
class OrbitTrajectory:
    """
    One sampled period of an orbit.

    All per-sample arrays share the same length N and ordering; row k
    corresponds to time[k].

    Attributes
    ----------
    elements : OrbitalElements
        Orbit that was sampled.
    sample : SampleSpec
        Time step and solver settings used.
    time : np.ndarray
        (N,) sample times (s).
    mean_anomaly : np.ndarray
        (N,) mean anomaly (rad).
    eccentric_anomaly : np.ndarray
        (N,) eccentric anomaly (rad).
    true_anomaly : np.ndarray
        (N,) true anomaly (rad).
    radius : np.ndarray
        (N,) orbital radius (km).
    perifocal : np.ndarray
        (N, 3) positions in the perifocal frame (km).
    inertial : np.ndarray
        (N, 3) positions in the inertial frame (km).
    transform : np.ndarray
        3x3 perifocal -> inertial rotation.
    """
    elements: OrbitalElements
    sample: SampleSpec
    time: np.ndarray
    mean_anomaly: np.ndarray
    eccentric_anomaly: np.ndarray
    true_anomaly: np.ndarray
    radius: np.ndarray
    perifocal: np.ndarray
    inertial: np.ndarray
    transform: np.ndarray

    def __len__(self) -> int:
        return int(self.time.shape[0])

    def to_dataframe(self) -> pd.DataFrame:
        """Per-sample table with columns t, M, E, f, r, p, q, x, y, z."""
        return pd.DataFrame({
            't': self.time,
            'M': self.mean_anomaly,
            'E': self.eccentric_anomaly,
            'f': self.true_anomaly,
            'r': self.radius,
            'p': self.perifocal[:, 0],
            'q': self.perifocal[:, 1],
            'x': self.inertial[:, 0],
            'y': self.inertial[:, 1],
            'z': self.inertial[:, 2],
        })


# =============================================================================
# GENERATION
# =============================================================================

def sample_count(period: float, dt: float) -> int:
    """Number of samples on the grid 0, dt, 2dt, ... <= period."""
    if dt <= 0.0:
        raise InvalidElementsError(f"Time step must be positive (got dt = {dt}).")
    return int(np.floor(period / dt)) + 1


def sample_times(period: float, dt: float) -> np.ndarray:
    """
    Sample times t_k = k * dt for k = 0 .. floor(period / dt).

    Times are formed by multiplication rather than repeated addition so
    that the last sample does not drift across the period boundary.
    """
    return np.arange(sample_count(period, dt), dtype=np.float64) * dt


def generate_trajectory(
    elements: OrbitalElements,
    sample: SampleSpec = SampleSpec(),
) -> OrbitTrajectory:
    """
    Sample one full period of *elements* on the grid defined by *sample*.

    Parameters
    ----------
    elements : OrbitalElements
        Orbit to sample.
    sample : SampleSpec
        Time step, tolerance and iteration cap.

    Returns
    -------
    OrbitTrajectory

    Raises
    ------
    ConvergenceError
        If Kepler's equation fails to converge at any sample.  The error's
        ``time`` attribute names the offending sample.
    """
    period = elements.period
    times = sample_times(period, sample.dt)
    n = times.shape[0]
    if n > LARGE_SAMPLE_COUNT:
        logger.warning(
            "Sampling %d points per period (T = %.1f s, dt = %g s); "
            "consider a larger time step.", n, period, sample.dt,
        )

    M = np.empty(n)
    E = np.empty(n)
    f = np.empty(n)
    r = np.empty(n)

    E_seed = None
    total_iterations = 0
    worst_iterations = 0
    for k, t in enumerate(times):
        try:
            sol = solve_anomaly(t, elements, sample.tol, E_seed, sample.max_iterations)
        except ConvergenceError as exc:
            raise exc.at_time(float(t)) from exc
        M[k] = sol.mean_anomaly
        E[k] = sol.eccentric_anomaly
        f[k] = sol.true_anomaly
        r[k] = sol.radius
        E_seed = sol.eccentric_anomaly
        total_iterations += sol.iterations
        worst_iterations = max(worst_iterations, sol.iterations)

    perifocal = np.column_stack((r * np.cos(f), r * np.sin(f), np.zeros(n)))
    transform = build_transform(elements.i, elements.w, elements.W)
    inertial = perifocal_to_inertial(perifocal, transform)

    logger.debug(
        "Generated %d samples over T = %.3f s (%d Newton iterations, max %d per sample)",
        n, period, total_iterations, worst_iterations,
    )

    return OrbitTrajectory(
        elements=elements,
        sample=sample,
        time=times,
        mean_anomaly=M,
        eccentric_anomaly=E,
        true_anomaly=f,
        radius=r,
        perifocal=perifocal,
        inertial=inertial,
        transform=transform,
    )


def generate(
    a: float,
    e: float,
    i: float = 0.0,
    w: float = 0.0,
    W: float = 0.0,
    mu: float = EARTH_MU,
    dt: float = DEFAULT_TIME_STEP,
    tol: float = DEFAULT_TOLERANCE,
) -> np.ndarray:
    """
    Inertial-frame points of one orbit period.

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
    dt : float
        Time step (s).
    tol : float
        Kepler solver tolerance (rad).

    Returns
    -------
    np.ndarray
        (floor(T/dt) + 1, 3) array of positions (km); row 0 is periapsis.

    Raises
    ------
    InvalidElementsError
        For a <= 0, e outside [0, 1), mu <= 0, dt <= 0 or tol <= 0.
    ConvergenceError
        If Kepler's equation fails to converge at some sample.
    """
    elements = OrbitalElements(a=a, e=e, i=i, w=w, W=W, mu=mu)
    sample = SampleSpec(dt=dt, tol=tol)
    return generate_trajectory(elements, sample).inertial
