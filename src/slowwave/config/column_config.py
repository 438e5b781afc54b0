"""
Column configuration: biophysical parameters of the neural mass model.

Seven parameters are configurable from a flat positional array (the format
the host environment passes in); all others are fixed constants from
``slowwave.constants.column`` that can still be overridden by keyword for
numerical experiments.

Flat array layout:
==================

    index  name       unit
    0      tau_e      ms     membrane time constant, excitatory population
    1      theta_e    mV     firing threshold, excitatory population
    2      sigma_e    mV     sigmoid gain, excitatory population
    3      alpha_Na   mM ms  sodium influx per spike
    4      tau_Na     ms     sodium time constant
    5      g_KNa      mS/cm2 KNa conductance
    6      dphi       ms^-1  spread of the background noise
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Sequence

from slowwave.constants import column as C
from slowwave.errors import ConfigurationError
from slowwave.utils.numerical_validation import validate_non_negative, validate_positive

COLUMN_PARAMETER_ORDER = (
    "tau_e",
    "theta_e",
    "sigma_e",
    "alpha_Na",
    "tau_Na",
    "g_KNa",
    "dphi",
)
"""Positional meaning of the flat column parameter array."""


@dataclass(frozen=True)
class ColumnConfig:
    """Parameters of one cortical column.

    Attributes:
        tau_e, tau_i: Membrane time constants (ms)
        Qe_max, Qi_max: Maximal firing rates (ms^-1)
        theta_e, theta_i: Sigmoid thresholds (mV)
        sigma_e, sigma_i: Sigmoid gains (mV)
        alpha_Na: Sodium influx per spike (mM ms)
        tau_Na: Sodium time constant (ms)
        R_pump: Na-K pump strength (mM/ms)
        Na_eq: Resting sodium concentration (mM)
        gamma_e, gamma_i: PSP rise rates (ms^-1)
        g_L, g_KNa, g_AMPA, g_GABA: Conductances (mS/cm^2)
        N_ee, N_ei, N_ie, N_ii: Connectivities (source, target)
        E_AMPA, E_GABA, E_L_e, E_L_i, E_K: Reversal potentials (mV)
        mphi, dphi: Mean and spread of the background drive (ms^-1)
    """

    # Membrane
    tau_e: float = C.TAU_E
    tau_i: float = C.TAU_I

    # Firing rates
    Qe_max: float = C.QE_MAX
    Qi_max: float = C.QI_MAX
    theta_e: float = C.THETA_E
    theta_i: float = C.THETA_I
    sigma_e: float = C.SIGMA_E
    sigma_i: float = C.SIGMA_I

    # Sodium / adaptation
    alpha_Na: float = C.ALPHA_NA
    tau_Na: float = C.TAU_NA
    R_pump: float = C.R_PUMP
    Na_eq: float = C.NA_EQ

    # Synapses
    gamma_e: float = C.GAMMA_E
    gamma_i: float = C.GAMMA_I
    N_ee: float = C.N_EE
    N_ei: float = C.N_EI
    N_ie: float = C.N_IE
    N_ii: float = C.N_II

    # Conductances
    g_L: float = C.G_L
    g_KNa: float = C.G_KNA
    g_AMPA: float = C.G_AMPA
    g_GABA: float = C.G_GABA

    # Reversal potentials
    E_AMPA: float = C.E_AMPA
    E_GABA: float = C.E_GABA
    E_L_e: float = C.E_L_E
    E_L_i: float = C.E_L_I
    E_K: float = C.E_K

    # Background drive
    mphi: float = C.MPHI
    dphi: float = C.DPHI

    def __post_init__(self) -> None:
        for name in ("tau_e", "tau_i", "tau_Na", "sigma_e", "sigma_i",
                     "Qe_max", "Qi_max", "gamma_e", "gamma_i", "Na_eq"):
            validate_positive(getattr(self, name), name)
        for name in ("alpha_Na", "R_pump", "g_L", "g_KNa", "g_AMPA", "g_GABA",
                     "N_ee", "N_ei", "N_ie", "N_ii", "dphi"):
            validate_non_negative(getattr(self, name), name)

    @classmethod
    def from_array(cls, values: Sequence[float], **overrides: float) -> "ColumnConfig":
        """Build a config from the flat positional parameter array.

        Args:
            values: Seven values in ``COLUMN_PARAMETER_ORDER``
            **overrides: Keyword overrides for the fixed constants

        Raises:
            ConfigurationError: If the array does not hold exactly seven values
        """
        values = [float(v) for v in values]
        if len(values) != len(COLUMN_PARAMETER_ORDER):
            raise ConfigurationError(
                f"Column parameter array must have {len(COLUMN_PARAMETER_ORDER)} "
                f"entries {COLUMN_PARAMETER_ORDER}, got {len(values)}"
            )
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(f"Unknown column parameters: {sorted(unknown)}")
        params = dict(zip(COLUMN_PARAMETER_ORDER, values))
        params.update(overrides)
        return cls(**params)

    def to_array(self) -> list:
        """Inverse of ``from_array`` for the configurable subset."""
        return [getattr(self, name) for name in COLUMN_PARAMETER_ORDER]
