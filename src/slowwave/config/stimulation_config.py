"""
Stimulation protocol configuration.

The protocol arrives as a flat vector in external units and is converted
exactly once, at setup, into a ``StimulationSchedule`` holding tick counts.
Nothing downstream recomputes a conversion per tick.

Flat vector layout:
===================

    index  name                  unit
    0      mode                  0 = none, 1 = semi-periodic, 2 = phase dependent
    1      strength              Hz (converted to ms^-1)
    2      duration              ms
    3      ISI                   s   inter-event interval
    4      ISI range             s   half-width of the uniform jitter
    5      stimuli per event     count
    6      time between stimuli  ms
    7      delay after minimum   ms  (phase-dependent mode only)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

from slowwave.config.run_config import RunConfig
from slowwave.constants.time import MS_PER_SECOND
from slowwave.errors import ConfigurationError
from slowwave.utils.numerical_validation import validate_non_negative


class StimulationMode(IntEnum):
    """Stimulation strategy selected by the first protocol entry."""

    NONE = 0
    SEMI_PERIODIC = 1
    PHASE_DEPENDENT = 2


DEFAULT_THRESHOLD_MV = -72.0
"""Voltage below which phase-dependent stimulation starts looking for a minimum."""


def _as_integer(value: float, name: str) -> int:
    """Return ``value`` as an int; reject non-integral numbers instead of truncating."""
    if not math.isfinite(value) or value != int(value):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return int(value)


@dataclass(frozen=True)
class StimulationSchedule:
    """Stimulation protocol expressed in ticks. Built by ``StimulationConfig.to_schedule``."""

    mode: StimulationMode
    strength: float  # ms^-1
    duration: int
    isi: int
    isi_range: int
    n_stimuli: int
    time_between_stimuli: int
    time_to_stimulus: int
    threshold: float
    onset_correction: int


@dataclass(frozen=True)
class StimulationConfig:
    """Stimulation protocol in external units (Hz, ms, s).

    Attributes:
        mode: Stimulation strategy
        strength_hz: Input drive while a stimulus is on (Hz)
        duration_ms: How long the drive stays on per stimulus
        isi_s: Interval between stimulation events. In phase-dependent mode
            this is the pause after an event before detection re-arms.
        isi_range_s: Half-width of the uniform jitter on the interval
            (semi-periodic mode). 0 = fixed interval.
        n_stimuli: Stimuli per event
        time_between_stimuli_ms: Spacing of stimuli within an event
        delay_ms: Delay from the detected minimum to the first stimulus
            (phase-dependent mode)
        threshold_mv: Detection threshold (phase-dependent mode)
    """

    mode: StimulationMode = StimulationMode.NONE
    strength_hz: float = 0.0
    duration_ms: float = 120.0
    isi_s: float = 5.0
    isi_range_s: float = 1.0
    n_stimuli: int = 1
    time_between_stimuli_ms: float = 1050.0
    delay_ms: float = 350.0
    threshold_mv: float = DEFAULT_THRESHOLD_MV

    def __post_init__(self) -> None:
        mode = _as_integer(self.mode, "Stimulation mode")
        try:
            object.__setattr__(self, "mode", StimulationMode(mode))
        except ValueError:
            raise ConfigurationError(
                f"Unknown stimulation mode {self.mode!r}; "
                f"choose from {[int(m) for m in StimulationMode]}"
            ) from None
        object.__setattr__(self, "n_stimuli", _as_integer(self.n_stimuli, "n_stimuli"))
        if not math.isfinite(self.strength_hz):
            raise ConfigurationError(f"strength_hz must be finite, got {self.strength_hz}")
        for name in ("duration_ms", "isi_s", "isi_range_s",
                     "time_between_stimuli_ms", "delay_ms"):
            validate_non_negative(getattr(self, name), name)
        if self.n_stimuli < 1:
            raise ConfigurationError(f"n_stimuli must be >= 1, got {self.n_stimuli}")
        if self.isi_range_s > self.isi_s:
            raise ConfigurationError(
                f"isi_range_s ({self.isi_range_s}) must not exceed isi_s ({self.isi_s})"
            )

    @classmethod
    def from_array(cls, values: Sequence[float], **overrides: float) -> "StimulationConfig":
        """Build a config from the flat protocol vector.

        Seven entries suffice unless the mode is phase dependent, which also
        needs the delay after the detected minimum.

        Raises:
            ConfigurationError: On a wrong vector length or an unknown mode
        """
        values = [float(v) for v in values]
        if len(values) not in (7, 8):
            raise ConfigurationError(
                f"Stimulation parameter array must have 7 or 8 entries, got {len(values)}"
            )
        mode = _as_integer(values[0], "Stimulation mode")
        if mode == StimulationMode.PHASE_DEPENDENT and len(values) < 8:
            raise ConfigurationError(
                "Phase-dependent stimulation requires the delay after the minimum (entry 7)"
            )
        params = dict(
            mode=mode,
            strength_hz=values[1],
            duration_ms=values[2],
            isi_s=values[3],
            isi_range_s=values[4],
            n_stimuli=values[5],
            time_between_stimuli_ms=values[6],
        )
        if len(values) == 8:
            params["delay_ms"] = values[7]
        params.update(overrides)
        return cls(**params)

    def to_schedule(self, run: RunConfig) -> StimulationSchedule:
        """Convert to tick counts using the run's fixed step size.

        Raises:
            ConfigurationError: If an interval the state machine advances by
                rounds to less than one tick. Such a schedule would point at
                a tick that has already passed and stimulation would stop
                for the rest of the run.
        """
        isi = run.seconds_to_ticks(self.isi_s)
        isi_range = run.seconds_to_ticks(self.isi_range_s)
        time_between_stimuli = run.ms_to_ticks(self.time_between_stimuli_ms)

        if self.mode == StimulationMode.SEMI_PERIODIC:
            if isi - isi_range < 1:
                raise ConfigurationError(
                    f"Inter-event interval must be at least one tick: isi_s={self.isi_s}, "
                    f"isi_range_s={self.isi_range_s} gives a minimum of {isi - isi_range} "
                    f"ticks at {run.steps_per_second} steps/s"
                )
        if self.mode != StimulationMode.NONE and self.n_stimuli > 1 and time_between_stimuli < 1:
            raise ConfigurationError(
                f"time_between_stimuli_ms={self.time_between_stimuli_ms} is shorter than "
                f"one tick ({run.dt_ms} ms) with n_stimuli={self.n_stimuli}"
            )

        if self.mode == StimulationMode.SEMI_PERIODIC:
            # first stimulus one second after recording starts
            time_to_stimulus = run.onset_ticks + run.seconds_to_ticks(1.0)
        else:
            time_to_stimulus = run.ms_to_ticks(self.delay_ms)
        return StimulationSchedule(
            mode=self.mode,
            strength=self.strength_hz / MS_PER_SECOND,
            duration=run.ms_to_ticks(self.duration_ms),
            isi=isi,
            isi_range=isi_range,
            n_stimuli=self.n_stimuli,
            time_between_stimuli=time_between_stimuli,
            time_to_stimulus=time_to_stimulus,
            threshold=self.threshold_mv,
            onset_correction=run.onset_ticks,
        )
