"""Stimulation protocols perturbing a column's input drive.

One strategy per stimulation mode, matching the protocols used in
closed- and open-loop sleep stimulation experiments:

- **NoStimulation**: input drive held at zero
- **SemiPeriodicStimulation**: events at fixed or jittered intervals
- **PhaseDependentStimulation**: events timed to the trough of a slow wave

Example:
    >>> from slowwave.stimuli import StimulationController
    >>> from slowwave.config import StimulationConfig
    >>>
    >>> stim = StimulationController(column, StimulationConfig.from_array(
    ...     [2, 40, 120, 5, 0, 2, 1050, 350]), run, rng)
    >>> stim.check(tick)
"""

from __future__ import annotations

from slowwave.config.stimulation_config import StimulationMode

from .base import NoStimulation, StimulationState, StimulationStrategy
from .controller import StimulationController, create_strategy
from .phase_dependent import PhaseDependentStimulation
from .semi_periodic import SemiPeriodicStimulation

__all__ = [
    "StimulationMode",
    "StimulationState",
    "StimulationStrategy",
    "NoStimulation",
    "SemiPeriodicStimulation",
    "PhaseDependentStimulation",
    "StimulationController",
    "create_strategy",
]
