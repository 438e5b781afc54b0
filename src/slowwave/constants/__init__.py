"""
Constants for the cortical column model and its simulation runs.

- time: unit conversions and run defaults
- column: biophysical defaults of the neural mass model
"""

from __future__ import annotations

from .time import (
    DEFAULT_DOWNSAMPLE,
    DEFAULT_ONSET_S,
    DEFAULT_STEPS_PER_SECOND,
    MS_PER_SECOND,
    SECONDS_PER_MS,
)

__all__ = [
    "MS_PER_SECOND",
    "SECONDS_PER_MS",
    "DEFAULT_STEPS_PER_SECOND",
    "DEFAULT_ONSET_S",
    "DEFAULT_DOWNSAMPLE",
]
