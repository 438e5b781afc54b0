"""Utilities for analyzing slow oscillations in recorded column traces."""

from typing import Optional, Sequence, Tuple, Union

import numpy as np
import torch
from scipy.fft import rfft, rfftfreq

from slowwave.errors import ConfigurationError

SLOW_WAVE_BAND_HZ = (0.1, 4.0)

Trace = Union[torch.Tensor, np.ndarray, Sequence[float]]


def _as_array(trace: Trace) -> np.ndarray:
    if isinstance(trace, torch.Tensor):
        return trace.detach().cpu().numpy().astype(np.float64)
    return np.asarray(trace, dtype=np.float64)


def measure_oscillation(
    trace: Trace,
    sample_rate_hz: float,
    freq_range: Optional[Tuple[float, float]] = SLOW_WAVE_BAND_HZ,
) -> Tuple[float, float]:
    """Detect the dominant oscillation frequency of a trace using FFT.

    The mean is removed before the transform, so a constant offset (e.g. the
    resting potential) does not show up as power.

    Args:
        trace: Uniformly sampled signal, e.g. ``result.data["v_e"]``
        sample_rate_hz: Sampling rate of the trace (100 Hz for the default run)
        freq_range: (min_hz, max_hz) to search for the peak. If None,
                    searches the full positive spectrum.

    Returns:
        Tuple of (dominant_freq_hz, spectral_amplitude)
        Returns (0.0, 0.0) if the trace is too short or flat

    Example:
        >>> freq, amp = measure_oscillation(result.data["v_e"], 100.0)
        >>> print(f"Slow oscillation at {freq:.2f} Hz")
    """
    if sample_rate_hz <= 0:
        raise ConfigurationError(f"sample_rate_hz must be positive, got {sample_rate_hz}")
    x = _as_array(trace)
    n = len(x)
    if n < 10:
        return 0.0, 0.0

    x = x - x.mean()
    amplitude = 2.0 / n * np.abs(rfft(x))
    freqs = rfftfreq(n, 1.0 / sample_rate_hz)

    # Skip DC
    mask = freqs > 0
    if freq_range is not None:
        min_hz, max_hz = freq_range
        mask &= (freqs >= min_hz) & (freqs <= max_hz)
    if not np.any(mask) or not np.any(amplitude[mask] > 0):
        return 0.0, 0.0

    band_freqs = freqs[mask]
    band_amplitude = amplitude[mask]
    peak = int(np.argmax(band_amplitude))
    return float(band_freqs[peak]), float(band_amplitude[peak])


def event_locked_average(
    trace: Trace,
    markers: Trace,
    before: int,
    after: int,
) -> Tuple[np.ndarray, int]:
    """Average a trace in a window around each marker.

    Args:
        trace: Recorded signal
        markers: Event positions in sample indices (see ``export_markers``)
        before: Samples before each marker included in the window
        after: Samples after each marker included in the window

    Returns:
        Tuple of (average of shape ``(before + after,)``, number of events used).
        Events whose window leaves the trace are skipped; with no usable
        event the average is all-NaN.
    """
    if before < 0 or after < 0:
        raise ConfigurationError("Window bounds must be non-negative")
    x = _as_array(trace)
    width = before + after
    windows = [
        x[m - before : m + after]
        for m in _as_array(markers).astype(np.int64)
        if m - before >= 0 and m + after <= len(x)
    ]
    if not windows:
        return np.full(width, np.nan), 0
    return np.mean(windows, axis=0), len(windows)
