"""Semi-periodic (open loop) stimulation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from slowwave.config.stimulation_config import StimulationMode, StimulationSchedule
from slowwave.errors import ConfigurationError
from slowwave.utils.rng import UniformIntStream

from .base import StimulationStrategy

if TYPE_CHECKING:
    from .controller import StimulationController


class SemiPeriodicStimulation(StimulationStrategy):
    """Stimulation events at fixed or uniformly jittered intervals.

    Each event holds ``n_stimuli`` stimuli spaced ``time_between_stimuli``
    apart. After the last stimulus of an event the next event is scheduled
    ``isi`` ticks later, or ``U[isi - isi_range, isi + isi_range]`` ticks
    later when a jitter range is configured (redrawn every event).

    Example:
        >>> # events every 5 s, single stimulus, no jitter
        >>> # markers at onset + 1 s, onset + 6 s, onset + 11 s, ...
    """

    mode = StimulationMode.SEMI_PERIODIC

    def __init__(self, schedule: StimulationSchedule, jitter: Optional[UniformIntStream] = None):
        super().__init__(schedule)
        if schedule.isi_range != 0 and jitter is None:
            raise ConfigurationError(
                "A jittered inter-event interval needs a uniform integer stream"
            )
        self.jitter = jitter

    def next_interval(self) -> int:
        if self.schedule.isi_range == 0:
            return self.schedule.isi
        return self.jitter()

    def step(self, tick: int, controller: "StimulationController") -> None:
        state = controller.state
        if tick != state.time_to_stimulus:
            return

        controller.deliver_stimulus(tick)

        if state.count_stimuli < self.schedule.n_stimuli:
            state.time_to_stimulus += self.schedule.time_between_stimuli
            state.count_stimuli += 1
        else:
            state.time_to_stimulus += self.next_interval()
            state.count_stimuli = 1
