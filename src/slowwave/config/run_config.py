"""
Run configuration: time step and run-wide constants.

``dt`` and its square root are fixed for a whole run because the stochastic
integrator scales its noise increments with them and the stimulation
protocol converts its wall-clock parameters into ticks with them. Both are
derived from ``steps_per_second`` and never change after construction.

Usage:
======

    from slowwave.config import RunConfig

    run = RunConfig(steps_per_second=10_000, onset_s=10, seed=1234)
    run.dt_ms                # 0.1
    run.ms_to_ticks(120.0)   # 1200
    run.total_ticks(30)      # (10 + 30) * 10_000
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from slowwave.constants.time import (
    DEFAULT_DOWNSAMPLE,
    DEFAULT_ONSET_S,
    DEFAULT_STEPS_PER_SECOND,
    MS_PER_SECOND,
)
from slowwave.errors import ConfigurationError


@dataclass(frozen=True)
class RunConfig:
    """Immutable run-wide settings shared by integrator, stimulation and recorder."""

    steps_per_second: int = DEFAULT_STEPS_PER_SECOND
    """Integration steps per simulated second."""

    onset_s: int = DEFAULT_ONSET_S
    """Seconds simulated before recording starts (transient removal)."""

    downsample: int = DEFAULT_DOWNSAMPLE
    """Ticks between two recorded samples."""

    seed: Optional[int] = None
    """Seed of the run's random source. None = seed from system entropy."""

    reproducible: bool = False
    """Require an explicit seed. A run that must be repeatable without one is misconfigured."""

    check_finite: bool = False
    """Abort with NumericalDivergenceError when a committed state value is NaN/Inf."""

    def __post_init__(self) -> None:
        if isinstance(self.steps_per_second, bool) or not isinstance(self.steps_per_second, int):
            raise ConfigurationError(
                f"steps_per_second must be an integer, got {self.steps_per_second!r}"
            )
        if self.steps_per_second <= 0:
            raise ConfigurationError(
                f"steps_per_second must be positive (dt > 0), got {self.steps_per_second}"
            )
        if self.onset_s < 0:
            raise ConfigurationError(f"onset_s must be non-negative, got {self.onset_s}")
        if self.downsample < 1:
            raise ConfigurationError(f"downsample must be >= 1, got {self.downsample}")
        if self.reproducible and self.seed is None:
            raise ConfigurationError("A reproducible run requires an explicit seed")

    @property
    def dt_ms(self) -> float:
        """Duration of one tick in milliseconds."""
        return MS_PER_SECOND / self.steps_per_second

    @property
    def sqrt_dt(self) -> float:
        """Square root of dt, the scale of one Wiener increment."""
        return math.sqrt(self.dt_ms)

    @property
    def onset_ticks(self) -> int:
        """Number of ticks excluded from recording and marker reporting."""
        return int(self.onset_s * self.steps_per_second)

    def ms_to_ticks(self, value_ms: float) -> int:
        """Convert a duration in milliseconds to a whole number of ticks."""
        return int(round(value_ms * self.steps_per_second / MS_PER_SECOND))

    def seconds_to_ticks(self, value_s: float) -> int:
        """Convert a duration in seconds to a whole number of ticks."""
        return int(round(value_s * self.steps_per_second))

    def total_ticks(self, duration_s: float) -> int:
        """Ticks of a run recording ``duration_s`` seconds after the onset."""
        return self.onset_ticks + self.seconds_to_ticks(duration_s)

    def n_samples(self, total_ticks: int) -> int:
        """Number of recorded samples in a run of ``total_ticks`` ticks.

        A tick is recorded when it is at or after the onset and a multiple
        of ``downsample``.
        """
        first = -(-self.onset_ticks // self.downsample) * self.downsample
        if first >= total_ticks:
            return 0
        return (total_ticks - 1 - first) // self.downsample + 1
