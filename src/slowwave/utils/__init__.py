"""Shared utilities: random sources, validation helpers and oscillation analysis."""

from __future__ import annotations

from .fft_analysis import SLOW_WAVE_BAND_HZ, event_locked_average, measure_oscillation
from .numerical_validation import validate_finite, validate_non_negative, validate_positive
from .rng import RandomSource, UniformIntStream

__all__ = [
    "RandomSource",
    "UniformIntStream",
    "validate_finite",
    "validate_positive",
    "validate_non_negative",
    "measure_oscillation",
    "event_locked_average",
    "SLOW_WAVE_BAND_HZ",
]
