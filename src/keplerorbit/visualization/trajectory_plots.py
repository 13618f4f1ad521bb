"""
Plotting utilities for generated orbits.
Static, file-based matplotlib figures: the orbit in the inertial frame
together with its angular momentum, node and eccentricity vectors.
"""

import os

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for saving
import matplotlib.pyplot as plt


# ---------------------------------------------------------------------------
# PlotStyle -- shared styling helpers
# ---------------------------------------------------------------------------

class PlotStyle:
    """Centralised styling and figure management for orbit plots."""

    COLORS = {
        'orbit': '#2E86AB',        # Steel blue
        'h': '#2E7D32',            # Green
        'e': '#1976D2',            # Blue
        'n': '#C73E1D',            # Red
        'body': '#546E7A',         # Blue grey
        'periapsis': '#F18F01',    # Orange
        'arc': '#7B1FA2',          # Purple
    }

    @staticmethod
    def setup_style():
        """Set matplotlib rcParams for the project figures."""
        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.sans-serif': ['Helvetica Neue', 'Arial', 'DejaVu Sans'],
            'font.size': 11,
            'axes.labelsize': 12,
            'axes.titlesize': 14,
            'axes.titleweight': 'bold',
            'legend.fontsize': 10,
            'figure.facecolor': 'white',
            'savefig.dpi': 300,
            'savefig.bbox': 'tight',
            'lines.linewidth': 2.0,
            'legend.frameon': True,
            'legend.framealpha': 0.95,
        })

    @staticmethod
    def save_figure(fig, filepath, dpi=300):
        """Save *fig* to *filepath*, creating directories as needed."""
        try:
            directory = os.path.dirname(filepath)
            if directory:
                os.makedirs(directory, exist_ok=True)
            fig.savefig(filepath, dpi=dpi, bbox_inches='tight',
                        facecolor='white', edgecolor='none')
        finally:
            plt.close(fig)


# ---------------------------------------------------------------------------
# Standalone plotting functions
# ---------------------------------------------------------------------------

def _set_equal_axes(ax, points):
    """Give all three axes the same span so the orbit is not distorted."""
    lo = points.min(axis=0)
    hi = points.max(axis=0)
    centre = 0.5 * (lo + hi)
    half = 0.5 * float(np.max(hi - lo)) or 1.0
    ax.set_xlim(centre[0] - half, centre[0] + half)
    ax.set_ylim(centre[1] - half, centre[1] + half)
    ax.set_zlim(centre[2] - half, centre[2] + half)
    ax.set_box_aspect((1.0, 1.0, 1.0))


def plot_orbit_3d(trajectory, geometry, filepath, title=None, dpi=150):
    """3-D plot of one orbit with its orientation vectors.

    Parameters
    ----------
    trajectory : OrbitTrajectory
        Generated orbit (inertial positions are plotted).
    geometry : OrbitGeometry
        Orientation vectors; the display-length versions are drawn from
        the origin.
    filepath : str
        Output image path.
    title : str or None
        Figure title.  Defaults to a summary of the elements.
    dpi : int
        Output resolution.
    """
    PlotStyle.setup_style()
    fig = plt.figure(figsize=(10, 9))
    ax = fig.add_subplot(111, projection='3d')

    pos = np.asarray(trajectory.inertial)
    ax.plot(pos[:, 0], pos[:, 1], pos[:, 2],
            color=PlotStyle.COLORS['orbit'], label='Orbit')
    ax.scatter(*pos[0], color=PlotStyle.COLORS['periapsis'], s=30, label='Periapsis')
    ax.scatter(0.0, 0.0, 0.0, color=PlotStyle.COLORS['body'], s=60, label='Central body')

    for key, vec, label in (('h', geometry.h_display, 'h (angular momentum)'),
                            ('n', geometry.n_display, 'n (node)'),
                            ('e', geometry.e_display, 'e (eccentricity)')):
        ax.plot([0.0, vec[0]], [0.0, vec[1]], [0.0, vec[2]],
                color=PlotStyle.COLORS[key], label=label)

    for arc in (geometry.inclination_arc, geometry.periapsis_arc, geometry.raan_arc):
        ax.plot(arc[:, 0], arc[:, 1], arc[:, 2],
                color=PlotStyle.COLORS['arc'], linewidth=1.0, linestyle='--')

    extent = np.vstack((pos, np.zeros(3), geometry.h_display,
                        geometry.n_display, geometry.e_display))
    _set_equal_axes(ax, extent)

    el = trajectory.elements
    if title is None:
        title = (f"a = {el.a:g} km, e = {el.e:g}, i = {el.i:g} deg, "
                 f"w = {el.w:g} deg, W = {el.W:g} deg")
    ax.set_xlabel('X [km]')
    ax.set_ylabel('Y [km]')
    ax.set_zlabel('Z [km]')
    ax.set_title(title)
    ax.legend(loc='upper left', fontsize=9)
    PlotStyle.save_figure(fig, filepath, dpi=dpi)
