# pyright: strict
"""
Time conversion constants and run-time defaults.

The model is integrated in milliseconds; stimulation protocols are specified
partly in seconds (inter-event intervals) and partly in milliseconds
(durations, delays). Every conversion to integer ticks goes through these
constants once, at configuration time.
"""

from __future__ import annotations

# ============================================================================
# TIME UNIT CONVERSIONS
# ============================================================================

MS_PER_SECOND = 1000.0
"""Milliseconds per second (1000.0 ms/s)."""

SECONDS_PER_MS = 1.0 / 1000.0
"""Seconds per millisecond (0.001 s/ms)."""

# ============================================================================
# SIMULATION DEFAULTS
# ============================================================================

DEFAULT_STEPS_PER_SECOND = 10_000
"""Integration steps per simulated second (dt = 0.1 ms)."""

DEFAULT_ONSET_S = 10
"""Seconds simulated before data recording and marker reporting start."""

DEFAULT_DOWNSAMPLE = 100
"""Ticks between two recorded samples (100 Hz output at the default resolution)."""

__all__ = [
    "MS_PER_SECOND",
    "SECONDS_PER_MS",
    "DEFAULT_STEPS_PER_SECOND",
    "DEFAULT_ONSET_S",
    "DEFAULT_DOWNSAMPLE",
]
