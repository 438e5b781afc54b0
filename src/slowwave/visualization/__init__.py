"""
Visualization utilities for slowwave simulations.

Provides tools for visualizing:
- Recorded membrane potential and sodium traces
- Stimulation markers overlaid on the traces
"""

from .traces import (
    DPI_DEFAULT,
    FIGURE_SIZE_MEDIUM,
    plot_column_traces,
    plot_membrane_trace,
)

__all__ = [
    'plot_membrane_trace',
    'plot_column_traces',
    # Constants
    'DPI_DEFAULT',
    'FIGURE_SIZE_MEDIUM',
]
