"""
===============================================================================
KEPLERORBIT - Configuration
===============================================================================
YAML configuration for the command-line generator.

The file has three sections; every key is optional and falls back to
DEFAULT_CONFIG::

    orbit:
        semi_major_axis: 5137.0        # km
        eccentricity: 0.6
        inclination: 0.0               # deg
        argument_of_periapsis: 0.0     # deg
        raan: 0.0                      # deg
        mu: 398600.4415                # km^3/s^2
    sampling:
        time_step: 1.0                 # s
        tolerance: 0.001               # rad
        max_iterations: 100
    geometry:
        vector_length: 2000.0          # km
        arc_radius: 1000.0             # km
        arc_segments: 50

Unknown sections or keys are rejected so that typos do not silently fall
back to defaults.
===============================================================================
"""

import copy
import math
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from keplerorbit.core.constants import (
    EARTH_MU,
    DEFAULT_TOLERANCE,
    MAX_KEPLER_ITERATIONS,
    DEFAULT_VECTOR_LENGTH,
    DEFAULT_ARC_RADIUS,
    DEFAULT_ARC_SEGMENTS,
)
from keplerorbit.core.exceptions import ConfigError
from keplerorbit.dynamics.elements import OrbitalElements, SampleSpec

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    'orbit': {
        'semi_major_axis': 5137.0,
        'eccentricity': 0.6,
        'inclination': 0.0,
        'argument_of_periapsis': 0.0,
        'raan': 0.0,
        'mu': EARTH_MU,
    },
    'sampling': {
        'time_step': 1.0,
        'tolerance': DEFAULT_TOLERANCE,
        'max_iterations': MAX_KEPLER_ITERATIONS,
    },
    'geometry': {
        'vector_length': DEFAULT_VECTOR_LENGTH,
        'arc_radius': DEFAULT_ARC_RADIUS,
        'arc_segments': DEFAULT_ARC_SEGMENTS,
    },
}


def merge_config(base: Dict[str, Dict[str, Any]], overrides: Any) -> Dict[str, Dict[str, Any]]:
    """
    Return a copy of *base* with *overrides* applied section by section.

    Raises
    ------
    ConfigError
        If *overrides* is not a mapping of mappings, or names a section or
        key that *base* does not have.
    """
    merged = copy.deepcopy(base)
    if overrides is None:
        return merged
    if not isinstance(overrides, dict):
        raise ConfigError(
            f"Configuration must be a mapping of sections (got {type(overrides).__name__})."
        )
    for section, values in overrides.items():
        if section not in merged:
            raise ConfigError(
                f"Unknown configuration section '{section}'; "
                f"expected one of {sorted(merged)}."
            )
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ConfigError(f"Section '{section}' must be a mapping.")
        unknown = sorted(set(values) - set(merged[section]))
        if unknown:
            raise ConfigError(
                f"Unknown key(s) {unknown} in section '{section}'; "
                f"expected some of {sorted(merged[section])}."
            )
        merged[section].update(values)
    return merged


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Dict[str, Any]]:
    """
    Load a YAML configuration file over DEFAULT_CONFIG.

    Args:
        config_path: Path to the YAML file.  None returns the defaults.

    Returns:
        Dictionary with 'orbit', 'sampling' and 'geometry' sections.

    Raises:
        ConfigError: If the file cannot be read or parsed, or has unknown keys.
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    logger.info("Loading configuration from: %s", config_path)
    try:
        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration file {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    return merge_config(DEFAULT_CONFIG, raw)


def elements_from_config(config: Dict[str, Dict[str, Any]]) -> OrbitalElements:
    """Build OrbitalElements from the 'orbit' section."""
    orbit = config['orbit']
    return OrbitalElements(
        a=orbit['semi_major_axis'],
        e=orbit['eccentricity'],
        i=orbit['inclination'],
        w=orbit['argument_of_periapsis'],
        W=orbit['raan'],
        mu=orbit['mu'],
    )


def sample_from_config(config: Dict[str, Dict[str, Any]]) -> SampleSpec:
    """Build SampleSpec from the 'sampling' section."""
    sampling = config['sampling']
    return SampleSpec(
        dt=sampling['time_step'],
        tol=sampling['tolerance'],
        max_iterations=sampling['max_iterations'],
    )


def geometry_from_config(config: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Validated keyword arguments for compute_geometry from the 'geometry' section.

    Raises:
        ConfigError: If a length is not a finite non-negative number or
            arc_segments is not an integer of at least 1.
    """
    geometry = config['geometry']
    kwargs: Dict[str, Any] = {}
    for key in ('vector_length', 'arc_radius'):
        value = geometry[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"geometry.{key} must be a number (got {value!r}).")
        value = float(value)
        if not math.isfinite(value) or value < 0.0:
            raise ConfigError(f"geometry.{key} must be finite and non-negative (got {value}).")
        kwargs[key] = value

    segments = geometry['arc_segments']
    if isinstance(segments, bool) or not isinstance(segments, int):
        raise ConfigError(f"geometry.arc_segments must be an integer (got {segments!r}).")
    if segments < 1:
        raise ConfigError(f"geometry.arc_segments must be at least 1 (got {segments}).")
    kwargs['arc_segments'] = segments
    return kwargs
