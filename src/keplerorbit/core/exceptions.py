"""
Exception hierarchy for keplerorbit.

Both computational errors are final: the calculation is deterministic, so
repeating a failed call with the same inputs fails the same way.
"""

from typing import Optional


class OrbitError(Exception):
    """Base class for every error raised by keplerorbit."""


class InvalidElementsError(OrbitError, ValueError):
    """Raised when orbital elements or sampling parameters are out of range."""


class ConfigError(OrbitError, ValueError):
    """Raised when a configuration file cannot be read or has unknown keys."""


class ConvergenceError(OrbitError, RuntimeError):
    """
    Raised when Newton-Raphson on Kepler's equation hits its iteration cap.

    Attributes
    ----------
    mean_anomaly : float
        Mean anomaly (rad) being solved for.
    eccentricity : float
        Orbit eccentricity.
    iterations : int
        Number of iterations performed before giving up.
    last_step : float
        Magnitude of the final Newton update (rad).
    time : float or None
        Sample time (s), filled in by the orbit generator.
    """

    def __init__(
        self,
        mean_anomaly: float,
        eccentricity: float,
        iterations: int,
        last_step: float,
        time: Optional[float] = None,
    ) -> None:
        self.mean_anomaly = mean_anomaly
        self.eccentricity = eccentricity
        self.iterations = iterations
        self.last_step = last_step
        self.time = time
        super().__init__(self._message())

    def _message(self) -> str:
        where = f" at t = {self.time:.6g} s" if self.time is not None else ""
        return (
            f"Kepler's equation did not converge{where}: "
            f"M = {self.mean_anomaly:.6g} rad, e = {self.eccentricity:.6g}, "
            f"last step {self.last_step:.3e} rad after {self.iterations} iterations"
        )

    def at_time(self, time: float) -> "ConvergenceError":
        """Return a copy of this error tagged with the sample time."""
        return ConvergenceError(
            self.mean_anomaly, self.eccentricity,
            self.iterations, self.last_step, time,
        )
