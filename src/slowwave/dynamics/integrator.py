"""
Stochastic Runge-Kutta integration of the cortical column.

One call to ``StochasticRK4.step`` advances every state variable of a column
by exactly one fixed time step ``dt``. The deterministic part is the classical
fourth-order Runge-Kutta scheme; the additive noise on the excitatory drive
is sampled as a Brownian path over the step.

Scheme:
=======

Stage ``s`` (0..3) evaluates the derivatives ``k_s`` from slot ``s``. For
``s < 3`` the estimate of the next slot is

    y_{s+1} = y_0 + a_s dt k_s + sigma W(c_{s+1} dt),   a = (1/2, 1/2, 1)

and the committed value is

    y_0 <- y_0 + dt/6 (k_0 + 2 k_1 + 2 k_2 + k_3) + sigma W(dt)

Noise:
======

Each tick the noise buffer receives one standard-normal variate per stage
and stochastic variable, ``xi_1..xi_4``. They are the Wiener increments of
the four quarter steps, ``dW_q = (h/2) xi_q`` with ``h = sqrt(dt)``. The
stage estimates at mid-step see ``W(dt/2) = (h/2)(xi_1 + xi_2)``; the
end-of-step estimate and the committed value see
``W(dt) = (h/2)(xi_1 + xi_2 + xi_3 + xi_4)``. Consumption order is
stage-major, then ``STOCHASTIC_VARIABLES`` order.

Every stage estimate carries noise because each one samples the state at a
point of the same Brownian path the committed step ends on. Leaving the
intermediate estimates noise-free would evaluate the drift along a different
path and bias the drift of the noisy variables.
"""

from __future__ import annotations

from typing import List, Sequence

from slowwave.components.column import (
    N_STAGES,
    STOCHASTIC_VARIABLES,
    CorticalColumn,
    StateVariable,
)
from slowwave.config.run_config import RunConfig
from slowwave.utils.numerical_validation import validate_finite
from slowwave.utils.rng import RandomSource

STAGE_STEPS = (0.5, 0.5, 1.0)
"""Fraction of dt between slot 0 and the estimate written by stages 0..2."""

RK_WEIGHTS = (1.0, 2.0, 2.0, 1.0)

STAGE_NOISE_WEIGHTS = (
    (0.5, 0.5, 0.0, 0.0),
    (0.5, 0.5, 0.0, 0.0),
    (0.5, 0.5, 0.5, 0.5),
)
"""Coefficients of xi_1..xi_4 (in units of h) in the estimates written by stages 0..2."""

STEP_NOISE_WEIGHTS = (0.5, 0.5, 0.5, 0.5)
"""Coefficients of xi_1..xi_4 (in units of h) in the committed step."""


class StochasticRK4:
    """Fixed-step 4-stage stochastic Runge-Kutta integrator.

    Args:
        run: Run-wide constants; ``dt`` and ``sqrt(dt)`` are read once here
        rng: The run's random source

    Example:
        >>> run = RunConfig(seed=3)
        >>> integrator = StochasticRK4(run, RandomSource(run.seed))
        >>> column = CorticalColumn()
        >>> for _ in range(1000):
        ...     integrator.step(column)
    """

    def __init__(self, run: RunConfig, rng: RandomSource):
        self.dt = run.dt_ms
        self.h = run.sqrt_dt
        self.check_finite = run.check_finite
        self.rng = rng
        self.noise: List[List[float]] = [
            [0.0] * len(STOCHASTIC_VARIABLES) for _ in range(N_STAGES)
        ]
        self.ticks = 0

    def draw_noise(self) -> None:
        """Refill the noise buffer: one variate per stage and stochastic variable."""
        for row in self.noise:
            for j in range(len(row)):
                row[j] = self.rng.normal()

    def wiener(self, weights: Sequence[float], sigma: Sequence[float]) -> List[float]:
        """Scaled Wiener increment per stochastic variable for the given quarter-step weights."""
        increments = []
        for j, amplitude in enumerate(sigma):
            w = 0.0
            for stage, weight in enumerate(weights):
                if weight:
                    w += weight * self.noise[stage][j]
            increments.append(amplitude * self.h * w)
        return increments

    def step(self, column: CorticalColumn) -> None:
        """Advance ``column`` by one time step and commit the result to slot 0."""
        self.draw_noise()
        sigma = column.noise_amplitudes()

        k: List[List[float]] = []
        for stage in range(N_STAGES):
            k_stage = column.derivatives(stage)
            k.append(k_stage)
            if stage < N_STAGES - 1:
                column.set_stage(
                    stage + 1,
                    STAGE_STEPS[stage] * self.dt,
                    k_stage,
                    self.wiener(STAGE_NOISE_WEIGHTS[stage], sigma),
                )

        scale = self.dt / sum(RK_WEIGHTS)
        w0, w1, w2, w3 = RK_WEIGHTS
        increments = [
            scale * (w0 * k0 + w1 * k1 + w2 * k2 + w3 * k3)
            for k0, k1, k2, k3 in zip(*k)
        ]
        column.commit(increments, self.wiener(STEP_NOISE_WEIGHTS, sigma))

        if self.check_finite:
            for variable in StateVariable:
                validate_finite(column.stages[variable][0], variable.name.lower(), self.ticks)
        self.ticks += 1


__all__ = [
    "StochasticRK4",
    "STAGE_STEPS",
    "RK_WEIGHTS",
    "STAGE_NOISE_WEIGHTS",
    "STEP_NOISE_WEIGHTS",
]
