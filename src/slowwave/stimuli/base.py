"""Base class for stimulation strategies and the shared protocol state."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

from slowwave.config.stimulation_config import StimulationMode, StimulationSchedule

if TYPE_CHECKING:
    from .controller import StimulationController


@dataclass
class StimulationState:
    """Mutable state of a stimulation protocol, updated once per tick.

    Counters are in ticks. ``markers`` is append-only.
    """

    time_to_stimulus: int = 0
    count_stimuli: int = 1
    count_duration: int = 0
    count_to_start: int = 0
    count_pause: int = 0

    started: bool = False
    threshold_crossed: bool = False
    minimum_found: bool = False
    paused: bool = False

    previous_voltage: float = 0.0
    markers: List[int] = field(default_factory=list)


class StimulationStrategy(ABC):
    """Mode-specific transition of the stimulation state machine.

    A strategy decides *when* stimuli are delivered. Delivering a stimulus
    and switching the drive off again is shared across modes and lives in
    ``StimulationController``.

    Subclasses:
        - NoStimulation: drive held at zero
        - SemiPeriodicStimulation: fixed or jittered inter-event intervals
        - PhaseDependentStimulation: closed loop on the excitatory voltage
    """

    mode: StimulationMode

    def __init__(self, schedule: StimulationSchedule):
        self.schedule = schedule

    @abstractmethod
    def step(self, tick: int, controller: "StimulationController") -> None:
        """Apply this tick's mode-specific transition.

        Args:
            tick: Current tick index (0-based)
            controller: Owner of the shared state and the column handle
        """
        pass


class NoStimulation(StimulationStrategy):
    """No transitions; the input drive stays at zero."""

    mode = StimulationMode.NONE

    def step(self, tick: int, controller: "StimulationController") -> None:
        return None
