"""
===============================================================================
KEPLERORBIT - Anomaly Solver
===============================================================================
Time -> position-on-orbit for an unperturbed elliptical orbit.

For a body that passed periapsis at t = 0:

    M = n * t                            (mean anomaly)
    M = E - e * sin(E)                   (Kepler's equation, solved for E)
    f = 2 * atan2( sqrt(1+e) sin(E/2),   (true anomaly)
                   sqrt(1-e) cos(E/2) )
    r = (h^2 / mu) / (1 + e * cos(f))    (orbit equation)

Kepler's equation is transcendental and is solved by Newton-Raphson.  The
caller may pass the eccentric anomaly of the previous time sample as the
starting guess; along a finely sampled orbit this cuts the iteration count
to one or two per sample.

References
----------
    [1] Vallado, "Fundamentals of Astrodynamics and Applications", 4th ed.,
        Algorithm 2 (KepEqtnE).
    [2] Curtis, "Orbital Mechanics for Engineering Students", 4th ed.,
        Section 3.4.

===============================================================================
"""

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from keplerorbit.core.constants import DEFAULT_TOLERANCE, MAX_KEPLER_ITERATIONS
from keplerorbit.core.exceptions import ConvergenceError, InvalidElementsError
from keplerorbit.dynamics.elements import OrbitalElements


@dataclass(frozen=True)
class AnomalySolution:
    """
    Solved state of the body at one instant.

    Attributes
    ----------
    true_anomaly : float
        Angle from periapsis to the body, measured at the focus (rad).
    radius : float
        Distance from the focus (km).
    eccentric_anomaly : float
        Solution of Kepler's equation (rad).  Not wrapped to [0, 2 pi);
        it grows with time so it can seed the next sample.
    mean_anomaly : float
        n * t (rad).
    iterations : int
        Newton-Raphson iterations used.
    """
    true_anomaly: float
    radius: float
    eccentric_anomaly: float
    mean_anomaly: float
    iterations: int


def _check_solver_settings(tol: float, max_iterations: int) -> None:
    if not np.isfinite(tol) or tol <= 0.0:
        raise InvalidElementsError(f"Tolerance must be positive (got tol = {tol}).")
    if max_iterations < 1:
        raise InvalidElementsError(
            f"max_iterations must be at least 1 (got {max_iterations})."
        )


def solve_kepler(
    M: float,
    e: float,
    tol: float = DEFAULT_TOLERANCE,
    E_seed: Optional[float] = None,
    max_iterations: int = MAX_KEPLER_ITERATIONS,
) -> Tuple[float, int]:
    """
    Solve Kepler's equation M = E - e sin(E) for the eccentric anomaly.

    Newton-Raphson on g(E) = E - e sin(E) - M, with g'(E) = 1 - e cos(E):

        E <- E + (M - E + e sin(E)) / (1 - e cos(E))

    At least one update is always applied.  Iteration stops once the
    update magnitude |E_new - E_prev| is <= tol.

    Parameters
    ----------
    M : float
        Mean anomaly (rad).  Not wrapped; any real value is accepted.
    e : float
        Eccentricity, 0 <= e < 1.
    tol : float
        Convergence tolerance (rad).
    E_seed : float, optional
        Starting guess.  Defaults to M.
    max_iterations : int
        Iteration cap.

    Returns
    -------
    E : float
        Eccentric anomaly (rad).
    iterations : int
        Number of Newton updates applied.

    Raises
    ------
    InvalidElementsError
        If e, tol or max_iterations is out of range.
    ConvergenceError
        If the cap is reached before the update falls within tol.
    """
    if not 0.0 <= e < 1.0:
        raise InvalidElementsError(f"Eccentricity must satisfy 0 <= e < 1 (got e = {e}).")
    _check_solver_settings(tol, max_iterations)

    E = float(M) if E_seed is None else float(E_seed)
    step = np.inf
    for iteration in range(1, max_iterations + 1):
        step = (M - E + e * np.sin(E)) / (1.0 - e * np.cos(E))
        E += step
        if abs(step) <= tol:
            return float(E), iteration

    raise ConvergenceError(
        mean_anomaly=float(M),
        eccentricity=float(e),
        iterations=max_iterations,
        last_step=float(abs(step)),
    )


def true_anomaly(E: float, e: float) -> float:
    """
    True anomaly from eccentric anomaly.

    Uses the two-argument form, which stays finite at E = pi where the
    half-angle tangent form 2 atan(sqrt((1+e)/(1-e)) tan(E/2)) does not.
    For E in [0, 2 pi] the result lies in [0, 2 pi] and increases with E.
    """
    return float(2.0 * np.arctan2(np.sqrt(1.0 + e) * np.sin(0.5 * E),
                                  np.sqrt(1.0 - e) * np.cos(0.5 * E)))


def orbit_radius(f: float, elements: OrbitalElements) -> float:
    """Orbit equation r = (h^2/mu) / (1 + e cos f), in km."""
    h = elements.angular_momentum
    return float((h * h / elements.mu) / (1.0 + elements.e * np.cos(f)))


def solve_anomaly(
    t: float,
    elements: OrbitalElements,
    tol: float = DEFAULT_TOLERANCE,
    E_seed: Optional[float] = None,
    max_iterations: int = MAX_KEPLER_ITERATIONS,
) -> AnomalySolution:
    """
    Position on the orbit *t* seconds after periapsis passage.

    Parameters
    ----------
    t : float
        Time since periapsis (s).
    elements : OrbitalElements
        Orbit being sampled.  Only a, e and mu are used.
    tol : float
        Kepler solver tolerance (rad).
    E_seed : float, optional
        Starting guess for E, typically the previous sample's solution.
        Defaults to the mean anomaly.
    max_iterations : int
        Kepler solver iteration cap.

    Returns
    -------
    AnomalySolution

    Raises
    ------
    InvalidElementsError
        If t is not finite or the solver settings are out of range.
    ConvergenceError
        If Kepler's equation does not converge.
    """
    if not np.isfinite(t):
        raise InvalidElementsError(f"Time must be finite (got t = {t}).")
    _check_solver_settings(tol, max_iterations)

    M = elements.mean_motion * t
    E, iterations = solve_kepler(M, elements.e, tol, E_seed, max_iterations)
    f = true_anomaly(E, elements.e)
    r = orbit_radius(f, elements)

    return AnomalySolution(
        true_anomaly=f,
        radius=r,
        eccentric_anomaly=E,
        mean_anomaly=float(M),
        iterations=iterations,
    )
