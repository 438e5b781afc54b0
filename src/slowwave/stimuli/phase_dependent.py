"""Phase-dependent (closed loop) stimulation.

The strategy watches the committed excitatory membrane potential and times
stimuli relative to the trough of a slow wave:

1. Armed: after the onset, wait for ``v_e <= threshold``.
2. Threshold crossed: follow the voltage down until a sample is strictly
   greater than the previous one (local minimum).
3. Minimum found: count ticks; fire stimulus ``n`` of the event when the
   count reaches ``delay + (n - 1) * time_between_stimuli``.
4. After the last stimulus the controller pauses detection for ``isi``
   ticks before re-arming.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from slowwave.components.column import StateVariable
from slowwave.config.stimulation_config import StimulationMode

from .base import StimulationStrategy

if TYPE_CHECKING:
    from .controller import StimulationController


class PhaseDependentStimulation(StimulationStrategy):
    """Stimulate at a fixed delay after the minimum of a sub-threshold excursion."""

    mode = StimulationMode.PHASE_DEPENDENT

    def step(self, tick: int, controller: "StimulationController") -> None:
        state = controller.state
        schedule = self.schedule
        v_e = controller.column.value(StateVariable.V_E)

        # Search for threshold
        if (not state.started
                and not state.minimum_found
                and not state.threshold_crossed
                and not state.paused
                and tick > schedule.onset_correction):
            if v_e <= schedule.threshold:
                state.threshold_crossed = True

        # Search for minimum
        if state.threshold_crossed:
            if v_e > state.previous_voltage:
                state.threshold_crossed = False
                state.minimum_found = True
                state.previous_voltage = 0.0
            else:
                state.previous_voltage = v_e

        # Wait until the stimulation should start
        if state.minimum_found:
            due = schedule.time_to_stimulus + (state.count_stimuli - 1) * schedule.time_between_stimuli
            if state.count_to_start == due:
                controller.deliver_stimulus(tick)

                if state.count_stimuli < schedule.n_stimuli:
                    state.count_stimuli += 1
                else:
                    state.minimum_found = False
                    state.count_to_start = 0
                    state.count_stimuli = 1
                    controller.start_pause()
                    return
            state.count_to_start += 1
