"""
===============================================================================
KEPLERORBIT - Core Module
===============================================================================
Shared constants, exception types, and reference frame rotations.

Submodules:
    constants   -- Mathematical constants, Earth parameters, solver defaults
    exceptions  -- Error hierarchy raised by the library
    frames      -- Elementary rotations and the perifocal -> inertial transform
===============================================================================
"""
