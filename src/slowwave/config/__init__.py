"""
Slowwave configuration.

Three frozen dataclasses, each validated at construction:

- RunConfig: time step, onset, downsampling, seed
- ColumnConfig: biophysical parameters (flat array via ``from_array``)
- StimulationConfig: stimulation protocol in external units, converted
  once into a tick-based ``StimulationSchedule``

Usage:
======

    from slowwave.config import ColumnConfig, RunConfig, StimulationConfig

    run = RunConfig(seed=42)
    column = ColumnConfig.from_array([30, -58.5, 4, 2, 1, 1.33, 30e-3])
    stim = StimulationConfig.from_array([1, 40, 120, 5, 0, 1, 1050])
    schedule = stim.to_schedule(run)
"""

from __future__ import annotations

from .column_config import COLUMN_PARAMETER_ORDER, ColumnConfig
from .run_config import RunConfig
from .stimulation_config import (
    DEFAULT_THRESHOLD_MV,
    StimulationConfig,
    StimulationMode,
    StimulationSchedule,
)

__all__ = [
    "RunConfig",
    "ColumnConfig",
    "COLUMN_PARAMETER_ORDER",
    "StimulationConfig",
    "StimulationMode",
    "StimulationSchedule",
    "DEFAULT_THRESHOLD_MV",
]
