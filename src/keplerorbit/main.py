#!/usr/bin/env python3
"""
===============================================================================
KEPLERORBIT - COMMAND-LINE ENTRY POINT
===============================================================================
Generate one period of a Keplerian orbit and export it.

USAGE:
    keplerorbit                                   # Default orbit, summary only
    keplerorbit --config config/orbit_config.yaml # Orbit from a YAML file
    keplerorbit -a 7000 -e 0.1 -i 51.6 --output output/orbit.csv
    keplerorbit -a 26560 -e 0.74 -i 63.4 -w 270 --plot output/molniya.png

OUTPUTS:
    --output  CSV table t, M, E, f, r, p, q, x, y, z (one row per sample)
    --plot    Static 3-D figure of the orbit and its orientation vectors

EXIT STATUS:
    0  success
    1  invalid orbital elements, sampling parameters or configuration
    2  Kepler's equation failed to converge
===============================================================================
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import Optional

import numpy as np

from keplerorbit.config import (
    load_config, elements_from_config, sample_from_config, geometry_from_config,
)
from keplerorbit.core.constants import RAD2DEG
from keplerorbit.core.exceptions import ConvergenceError, OrbitError
from keplerorbit.core.frames import is_orthonormal
from keplerorbit.dynamics.orbit_generator import generate_trajectory
from keplerorbit.dynamics.orbit_geometry import compute_geometry

logger = logging.getLogger(__name__)

# CLI flag -> (config section, config key)
_OVERRIDES = {
    'a': ('orbit', 'semi_major_axis'),
    'e': ('orbit', 'eccentricity'),
    'i': ('orbit', 'inclination'),
    'w': ('orbit', 'argument_of_periapsis'),
    'W': ('orbit', 'raan'),
    'mu': ('orbit', 'mu'),
    'dt': ('sampling', 'time_step'),
    'tol': ('sampling', 'tolerance'),
    'max_iterations': ('sampling', 'max_iterations'),
}


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None) -> None:
    """Configure root logging for command-line runs."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode='w'))
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='keplerorbit',
        description='Sample one period of a Keplerian orbit in the inertial frame.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  keplerorbit --config config/orbit_config.yaml
  keplerorbit -a 7000 -e 0.1 -i 51.6 --output output/orbit.csv
  keplerorbit -a 26560 -e 0.74 -i 63.4 -w 270 --plot output/molniya.png
        """
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Path to orbit config YAML')
    parser.add_argument('-a', dest='a', type=float, default=None,
                        help='Semi-major axis (km)')
    parser.add_argument('-e', dest='e', type=float, default=None,
                        help='Eccentricity, 0 <= e < 1')
    parser.add_argument('-i', dest='i', type=float, default=None,
                        help='Inclination (deg)')
    parser.add_argument('-w', dest='w', type=float, default=None,
                        help='Argument of periapsis (deg)')
    parser.add_argument('-W', '--raan', dest='W', type=float, default=None,
                        help='Right ascension of the ascending node (deg)')
    parser.add_argument('--mu', type=float, default=None,
                        help='Gravitational parameter (km^3/s^2)')
    parser.add_argument('--dt', type=float, default=None,
                        help='Time step (s)')
    parser.add_argument('--tol', type=float, default=None,
                        help='Kepler solver tolerance (rad)')
    parser.add_argument('--max-iterations', dest='max_iterations', type=int, default=None,
                        help='Kepler solver iteration cap per sample')
    parser.add_argument('--output', type=str, default=None,
                        help='Write the sampled trajectory to this CSV file')
    parser.add_argument('--plot', type=str, default=None,
                        help='Save a 3-D figure of the orbit to this image file')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity (default: INFO)')
    parser.add_argument('--log-file', type=str, default=None,
                        help='Also write the log to this file')
    return parser


def apply_overrides(config: dict, args: argparse.Namespace) -> dict:
    """Overwrite config values with any flags given on the command line."""
    for attr, (section, key) in _OVERRIDES.items():
        value = getattr(args, attr)
        if value is not None:
            config[section][key] = value
    return config
def run(args: argparse.Namespace) -> int:
    """Generate, summarise and export one orbit.  Returns the exit status."""
    try:
        config = apply_overrides(load_config(args.config), args)
        elements = elements_from_config(config)
        sample = sample_from_config(config)
        geometry_kwargs = geometry_from_config(config)
        trajectory = generate_trajectory(elements, sample)
        geometry = compute_geometry(elements, **geometry_kwargs)
    except ConvergenceError as exc:
        logger.error("%s", exc)
        return 2
    except (OrbitError, ValueError) as exc:
        logger.error("%s", exc)
        return 1

    h = geometry.angular_momentum
    logger.info("Period T = %.3f s, rp = %.3f km, ra = %.3f km",
                elements.period, elements.periapsis_radius, elements.apoapsis_radius)
    logger.info("Samples: %d (dt = %g s, tol = %g rad)", len(trajectory), sample.dt, sample.tol)
    logger.info("|h| = %.3f km^2/s, h_hat = %s", np.linalg.norm(h),
                np.array2string(h / np.linalg.norm(h), precision=6))
    logger.info("Node n_hat = %s, periapsis r = %s km",
                np.array2string(geometry.node, precision=6),
                np.array2string(trajectory.inertial[0], precision=3))
    logger.info("Angle between Z and h: %.6f deg",
                np.arccos(np.clip(h[2] / np.linalg.norm(h), -1.0, 1.0)) * RAD2DEG)
    if not is_orthonormal(trajectory.transform, atol=1e-9):
        logger.warning("Perifocal -> inertial transform is not orthonormal")

    try:
        if args.output:
            out = Path(args.output)
            out.parent.mkdir(parents=True, exist_ok=True)
            trajectory.to_dataframe().to_csv(out, index=False)
            logger.info("Trajectory written to %s", out)

        if args.plot:
            from keplerorbit.visualization.trajectory_plots import plot_orbit_3d
            plot_orbit_3d(trajectory, geometry, args.plot)
            logger.info("Figure saved to %s", args.plot)
    except OSError as exc:
        logger.error("Cannot write output: %s", exc)
        return 1

    return 0


def main(argv=None) -> int:
    """
    Main entry point. Parses command line arguments and runs the generator.
    """
    args = build_parser().parse_args(argv)
    try:
        setup_logging(args.log_level, args.log_file)
    except OSError as exc:
        setup_logging(args.log_level)
        logger.error("Cannot open log file %s: %s", args.log_file, exc)
        return 1
    return run(args)


if __name__ == '__main__':
    sys.exit(main())
