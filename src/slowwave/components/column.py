"""Cortical Column - Neural mass model of an excitatory/inhibitory column.

This module implements the mean-field dynamics of one cortical column with
an excitatory (pyramidal) and an inhibitory population coupled through
conductance-based synapses, plus a sodium-dependent potassium current (KNa)
that adapts the excitatory population.

**Membrane Dynamics**:
=====================

    dV_e/dt = (I_L_e + I_ee + I_ie) / tau_e + I_KNa
    dV_i/dt = (I_L_i + I_ei + I_ii) / tau_i

    I_L      = g_L  (E_L - V)
    I_ab     = g_syn Phi_ab (E_syn - V_b)         (AMPA for a = e, GABA for a = i)
    I_KNa    = g_KNa w(Na) (E_K - V_e),  w(Na) = 0.37 / (1 + (38.7 / Na)^3.5)

**Firing Rates**:
================

    Q(V) = Q_max / (1 + exp(-C1 (V - theta) / sigma))

**Synaptic Kernel** (critically damped second-order filter per projection):
==========================================================================

    dPhi/dt = x
    dx/dt   = gamma^2 (N Q_pre + phi - Phi) - 2 gamma x

where ``phi`` is the external drive (background mean, stimulation input and
white noise) and only enters the excitatory-sourced projections.

**Sodium**:
==========

    dNa/dt = (alpha_Na Q_e - pump(Na)) / tau_Na
    pump   = R_pump (Na^3 / (Na^3 + 15^3) - Na_eq^3 / (Na_eq^3 + 15^3))

**Stage Buffers**:
=================
Every state variable is a list of exactly ``N_STAGES`` slots. Slot 0 holds
the committed value carried from tick to tick; slots 1..3 hold the
intermediate Runge-Kutta estimates of the current tick and are overwritten
every tick. Observers (stimulation, recorder) only read slot 0.

The column draws no random numbers; noise increments are supplied by the
integrator.
"""

from __future__ import annotations

import math
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

from slowwave.config.column_config import ColumnConfig
from slowwave.constants.column import C1, KNA_HILL, NA_KNA_HALF, NA_PUMP_HALF, W_KNA_MAX
from slowwave.errors import ConfigurationError


class StateVariable(IntEnum):
    """Index of each dynamical variable in the column's stage buffers."""

    V_E = 0
    V_I = 1
    NA = 2
    PHI_EE = 3
    PHI_EI = 4
    PHI_IE = 5
    PHI_II = 6
    X_EE = 7
    X_EI = 8
    X_IE = 9
    X_II = 10


N_STAGES = 4
"""Slots per state variable, one per Runge-Kutta stage."""

N_VARIABLES = len(StateVariable)

STOCHASTIC_VARIABLES: Tuple[StateVariable, ...] = (StateVariable.X_EE, StateVariable.X_EI)
"""Variables receiving white noise: the excitatory drive to both populations."""


def firing_rate(v: float, q_max: float, theta: float, sigma: float) -> float:
    """Sigmoidal population firing rate, evaluated without overflow for any finite v."""
    z = C1 * (v - theta) / sigma
    if z >= 0:
        return q_max / (1.0 + math.exp(-z))
    e = math.exp(z)
    return q_max * e / (1.0 + e)


class CorticalColumn:
    """Neural mass model of a single cortical column.

    Args:
        config: Biophysical parameters (defaults: ``ColumnConfig()``)

    Example:
        >>> column = CorticalColumn(ColumnConfig(g_KNa=1.33))
        >>> column.get_Qe(0)          # excitatory firing rate at slot 0 (ms^-1)
        >>> column.derivatives(0)     # time derivative of every state variable
    """

    def __init__(self, config: Optional[ColumnConfig] = None):
        self.config = config if config is not None else ColumnConfig()
        self.input = 0.0
        self.stages: List[List[float]] = []
        self.reset_state()

    # =========================================================================
    # State management
    # =========================================================================

    def initial_state(self) -> List[float]:
        """Resting state: potentials at leak reversal, sodium at equilibrium, no PSPs."""
        c = self.config
        state = [0.0] * N_VARIABLES
        state[StateVariable.V_E] = c.E_L_e
        state[StateVariable.V_I] = c.E_L_i
        state[StateVariable.NA] = c.Na_eq
        return state

    def reset_state(self) -> None:
        self.stages = [[value] + [0.0] * (N_STAGES - 1) for value in self.initial_state()]
        self.input = 0.0

    def set_input(self, drive: float) -> None:
        """Set the external input drive (ms^-1) added to the excitatory projections."""
        self.input = drive

    def value(self, variable: StateVariable, stage: int = 0) -> float:
        return self.stages[variable][stage]

    def committed_state(self) -> List[float]:
        """Slot 0 of every state variable, in ``StateVariable`` order."""
        return [buffer[0] for buffer in self.stages]

    def load_state(self, values: Sequence[float]) -> None:
        """Overwrite slot 0 of every state variable."""
        if len(values) != N_VARIABLES:
            raise ConfigurationError(
                f"State vector must have {N_VARIABLES} entries, got {len(values)}"
            )
        for buffer, value in zip(self.stages, values):
            buffer[0] = float(value)

    @property
    def v_e(self) -> List[float]:
        return self.stages[StateVariable.V_E]

    @property
    def v_i(self) -> List[float]:
        return self.stages[StateVariable.V_I]

    @property
    def na(self) -> List[float]:
        return self.stages[StateVariable.NA]

    # =========================================================================
    # Firing rates
    # =========================================================================

    def get_Qe(self, stage: int) -> float:
        c = self.config
        return firing_rate(self.stages[StateVariable.V_E][stage], c.Qe_max, c.theta_e, c.sigma_e)

    def get_Qi(self, stage: int) -> float:
        c = self.config
        return firing_rate(self.stages[StateVariable.V_I][stage], c.Qi_max, c.theta_i, c.sigma_i)

    # =========================================================================
    # Currents (positive = depolarising)
    # =========================================================================

    def I_ee(self, stage: int) -> float:
        c = self.config
        s = self.stages
        return c.g_AMPA * s[StateVariable.PHI_EE][stage] * (c.E_AMPA - s[StateVariable.V_E][stage])

    def I_ei(self, stage: int) -> float:
        c = self.config
        s = self.stages
        return c.g_AMPA * s[StateVariable.PHI_EI][stage] * (c.E_AMPA - s[StateVariable.V_I][stage])

    def I_ie(self, stage: int) -> float:
        c = self.config
        s = self.stages
        return c.g_GABA * s[StateVariable.PHI_IE][stage] * (c.E_GABA - s[StateVariable.V_E][stage])

    def I_ii(self, stage: int) -> float:
        c = self.config
        s = self.stages
        return c.g_GABA * s[StateVariable.PHI_II][stage] * (c.E_GABA - s[StateVariable.V_I][stage])

    def I_L_e(self, stage: int) -> float:
        c = self.config
        return c.g_L * (c.E_L_e - self.stages[StateVariable.V_E][stage])

    def I_L_i(self, stage: int) -> float:
        c = self.config
        return c.g_L * (c.E_L_i - self.stages[StateVariable.V_I][stage])

    def I_KNa(self, stage: int) -> float:
        c = self.config
        na = self.stages[StateVariable.NA][stage]
        w_kna = W_KNA_MAX / (1.0 + (NA_KNA_HALF / na) ** KNA_HILL)
        return c.g_KNa * w_kna * (c.E_K - self.stages[StateVariable.V_E][stage])

    def Na_pump(self, stage: int) -> float:
        c = self.config
        na3 = self.stages[StateVariable.NA][stage] ** 3
        eq3 = c.Na_eq ** 3
        k3 = NA_PUMP_HALF ** 3
        return c.R_pump * (na3 / (na3 + k3) - eq3 / (eq3 + k3))

    # =========================================================================
    # Dynamics
    # =========================================================================

    def derivatives(self, stage: int) -> List[float]:
        """Deterministic time derivative of every state variable at a stage slot."""
        c = self.config
        s = self.stages
        q_e = self.get_Qe(stage)
        q_i = self.get_Qi(stage)
        drive = c.mphi + self.input
        ge2 = c.gamma_e * c.gamma_e
        gi2 = c.gamma_i * c.gamma_i

        d = [0.0] * N_VARIABLES
        d[StateVariable.V_E] = (
            (self.I_L_e(stage) + self.I_ee(stage) + self.I_ie(stage)) / c.tau_e
            + self.I_KNa(stage)
        )
        d[StateVariable.V_I] = (self.I_L_i(stage) + self.I_ei(stage) + self.I_ii(stage)) / c.tau_i
        d[StateVariable.NA] = (c.alpha_Na * q_e - self.Na_pump(stage)) / c.tau_Na

        d[StateVariable.PHI_EE] = s[StateVariable.X_EE][stage]
        d[StateVariable.PHI_EI] = s[StateVariable.X_EI][stage]
        d[StateVariable.PHI_IE] = s[StateVariable.X_IE][stage]
        d[StateVariable.PHI_II] = s[StateVariable.X_II][stage]

        d[StateVariable.X_EE] = (
            ge2 * (c.N_ee * q_e + drive - s[StateVariable.PHI_EE][stage])
            - 2.0 * c.gamma_e * s[StateVariable.X_EE][stage]
        )
        d[StateVariable.X_EI] = (
            ge2 * (c.N_ei * q_e + drive - s[StateVariable.PHI_EI][stage])
            - 2.0 * c.gamma_e * s[StateVariable.X_EI][stage]
        )
        d[StateVariable.X_IE] = (
            gi2 * (c.N_ie * q_i - s[StateVariable.PHI_IE][stage])
            - 2.0 * c.gamma_i * s[StateVariable.X_IE][stage]
        )
        d[StateVariable.X_II] = (
            gi2 * (c.N_ii * q_i - s[StateVariable.PHI_II][stage])
            - 2.0 * c.gamma_i * s[StateVariable.X_II][stage]
        )
        return d

    def noise_amplitudes(self) -> Tuple[float, ...]:
        """Diffusion coefficient of each variable in ``STOCHASTIC_VARIABLES``."""
        sigma = self.config.gamma_e * self.config.gamma_e * self.config.dphi
        return (sigma,) * len(STOCHASTIC_VARIABLES)

    def set_stage(
        self,
        stage: int,
        step: float,
        derivatives: Sequence[float],
        noise: Sequence[float],
    ) -> None:
        """Write the estimate ``slot0 + step * derivative (+ noise)`` into a scratch slot.

        Args:
            stage: Slot to write (1..3)
            step: Fraction of dt covered by this estimate, already multiplied by dt
            derivatives: Derivatives of the previous stage
            noise: Stochastic increment per variable in ``STOCHASTIC_VARIABLES``
        """
        if not 1 <= stage < N_STAGES:
            raise ConfigurationError(f"Scratch stage must be in 1..{N_STAGES - 1}, got {stage}")
        for buffer, k in zip(self.stages, derivatives):
            buffer[stage] = buffer[0] + step * k
        for variable, increment in zip(STOCHASTIC_VARIABLES, noise):
            self.stages[variable][stage] += increment

    def commit(self, increments: Sequence[float], noise: Sequence[float]) -> None:
        """Add the combined step to slot 0."""
        for buffer, delta in zip(self.stages, increments):
            buffer[0] += delta
        for variable, increment in zip(STOCHASTIC_VARIABLES, noise):
            self.stages[variable][0] += increment
