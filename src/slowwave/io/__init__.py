"""
Slowwave I/O - in-memory extraction of simulation output.

- ColumnRecorder: downsampled traces of the committed column state
- export_markers: stimulation markers rescaled to sample indices
"""

from __future__ import annotations

from .recorder import RECORDED_VARIABLES, ColumnRecorder, export_markers

__all__ = [
    "ColumnRecorder",
    "RECORDED_VARIABLES",
    "export_markers",
]
