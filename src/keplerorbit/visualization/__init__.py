"""
===============================================================================
KEPLERORBIT - Visualization Module
===============================================================================
Static figure export for generated trajectories.

Submodules:
    trajectory_plots  -- PlotStyle and the 3-D orbit plot
===============================================================================
"""
