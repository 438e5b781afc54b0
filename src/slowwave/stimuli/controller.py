"""
Stimulation controller: the per-tick state machine driving a column's input.

The controller owns the protocol state and a non-owning handle to the column
it perturbs. Each tick (after the integrator has committed the step) it

1. runs the mode-specific transition of its strategy, then
2. runs the two mode-independent countdowns:
   - duration: switches the drive back to exactly 0 ``duration`` ticks
     after a stimulus started,
   - pause: clears the post-event pause ``isi`` ticks after it began.

The column never references the controller.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from slowwave.components.column import CorticalColumn
from slowwave.config.run_config import RunConfig
from slowwave.config.stimulation_config import StimulationConfig, StimulationMode, StimulationSchedule
from slowwave.utils.rng import RandomSource

from .base import NoStimulation, StimulationState, StimulationStrategy
from .phase_dependent import PhaseDependentStimulation
from .semi_periodic import SemiPeriodicStimulation

logger = logging.getLogger(__name__)


def create_strategy(
    schedule: StimulationSchedule,
    rng: Optional[RandomSource] = None,
    run: Optional[RunConfig] = None,
) -> StimulationStrategy:
    """Instantiate the strategy for ``schedule.mode``.

    A random source is only consumed for semi-periodic stimulation with a
    jittered interval. Without an explicit ``rng`` one is seeded from
    ``run.seed``, so the jitter follows the run's seed.
    """
    if schedule.mode == StimulationMode.SEMI_PERIODIC:
        jitter = None
        if schedule.isi_range != 0:
            if rng is None:
                rng = RandomSource(run.seed if run is not None else None)
            jitter = rng.uniform_ints(
                schedule.isi - schedule.isi_range, schedule.isi + schedule.isi_range
            )
        return SemiPeriodicStimulation(schedule, jitter)
    if schedule.mode == StimulationMode.PHASE_DEPENDENT:
        return PhaseDependentStimulation(schedule)
    return NoStimulation(schedule)


class StimulationController:
    """Stimulation protocol bound to one column.

    Args:
        column: Column whose input drive is switched
        config: Protocol in external units
        run: Run-wide constants used for the one-time conversion to ticks
        rng: The run's random source (jittered semi-periodic mode only).
            Defaults to a source seeded from ``run.seed``.

    Example:
        >>> run = RunConfig(seed=1)
        >>> column = CorticalColumn()
        >>> stim = StimulationController(
        ...     column, StimulationConfig.from_array([1, 40, 120, 5, 0, 1, 1050]), run
        ... )
        >>> for t in range(run.total_ticks(30)):
        ...     integrator.step(column)
        ...     stim.check(t)
        >>> stim.markers
    """

    def __init__(
        self,
        column: CorticalColumn,
        config: Optional[StimulationConfig] = None,
        run: Optional[RunConfig] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.column = column
        self.config = config if config is not None else StimulationConfig()
        self.run = run if run is not None else RunConfig()
        self.schedule = self.config.to_schedule(self.run)
        self.strategy = create_strategy(self.schedule, rng, self.run)
        self.state = StimulationState(time_to_stimulus=self.schedule.time_to_stimulus)
        self.column.set_input(0.0)

    @property
    def mode(self) -> StimulationMode:
        return self.schedule.mode

    @property
    def markers(self) -> List[int]:
        """Onset ticks (relative to the onset correction) of the first stimulus of each event."""
        return list(self.state.markers)

    def check(self, tick: int) -> None:
        """Advance the state machine by one tick."""
        self.strategy.step(tick, self)
        self._count_duration()
        self._count_pause()

    def deliver_stimulus(self, tick: int) -> None:
        """Switch the drive on; mark the first stimulus of an event."""
        state = self.state
        state.started = True
        self.column.set_input(self.schedule.strength)
        if state.count_stimuli == 1:
            state.markers.append(tick - self.schedule.onset_correction)
            logger.debug(
                "Stimulation event %d at tick %d", len(state.markers), tick
            )

    def start_pause(self) -> None:
        self.state.paused = True
        self.state.count_pause = 0

    def _count_duration(self) -> None:
        state = self.state
        if not state.started:
            return
        if state.count_duration == self.schedule.duration:
            state.started = False
            state.count_duration = 0
            self.column.set_input(0.0)
        else:
            state.count_duration += 1

    def _count_pause(self) -> None:
        state = self.state
        if not state.paused:
            return
        if state.count_pause == self.schedule.isi:
            state.paused = False
            state.count_pause = 0
        else:
            state.count_pause += 1
