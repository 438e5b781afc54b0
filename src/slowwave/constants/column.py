"""
Column Constants - Biophysical parameters of the cortical neural mass model.

Units follow the model's internal convention:
- time in ms, rates in ms^-1
- potentials in mV
- concentrations in mM
- conductances in mS/cm^2 (leak conductance is the reference, g_L = 1)

Biological Basis:
=================

Firing rates:
-------------
Population firing rates are sigmoidal in the mean membrane potential. The
scaling constant C1 = pi/sqrt(3) maps the sigmoid "gain" sigma onto the
standard deviation of the underlying threshold distribution.

Sodium-dependent potassium current (KNa):
-----------------------------------------
Spiking loads the cell with sodium, which activates a slow K+ current and
hyperpolarises the excitatory population. This is the adaptation mechanism
that produces down states and K-complexes.

References:
-----------
- Weigenand et al. (2014): Characterization of K-Complexes and Slow Wave
  Activity in a Neural Mass Model. PLoS Comput Biol 10:e1003923
- Compte et al. (2003): Cellular and network mechanisms of slow oscillatory
  activity (<1 Hz) and wave propagations in a cortical network model

Author: Slowwave Project
Date: October 2026
"""

import math

# =============================================================================
# MEMBRANE TIME CONSTANTS (ms)
# =============================================================================

TAU_E = 30.0
"""Membrane time constant of the excitatory (pyramidal) population."""

TAU_I = 30.0
"""Membrane time constant of the inhibitory population."""

# =============================================================================
# FIRING RATE SIGMOID
# =============================================================================

QE_MAX = 30.0e-3
"""Maximum excitatory firing rate (ms^-1, i.e. 30 Hz)."""

QI_MAX = 60.0e-3
"""Maximum inhibitory firing rate (ms^-1, i.e. 60 Hz)."""

THETA_E = -58.5
THETA_I = -58.5
"""Sigmoid thresholds (mV)."""

SIGMA_E = 4.0
SIGMA_I = 6.0
"""Sigmoid gains (mV)."""

C1 = math.pi / math.sqrt(3.0)
"""Scaling between sigmoid gain and the slope of the firing rate function."""

# =============================================================================
# SODIUM DYNAMICS AND KNa ADAPTATION
# =============================================================================

ALPHA_NA = 2.0
"""Sodium influx per spike (mM ms)."""

TAU_NA = 1.0
"""Sodium time constant (ms)."""

R_PUMP = 0.09
"""Na-K pump strength (mM/ms)."""

NA_EQ = 9.5
"""Resting sodium concentration (mM)."""

NA_PUMP_HALF = 15.0
"""Half-activation concentration of the cubic pump law (mM)."""

W_KNA_MAX = 0.37
"""Maximal activation of the KNa channel."""

NA_KNA_HALF = 38.7
"""Half-activation sodium concentration of the KNa channel (mM)."""

KNA_HILL = 3.5
"""Hill exponent of the KNa activation."""

# =============================================================================
# SYNAPSES
# =============================================================================

GAMMA_E = 70.0e-3
GAMMA_I = 58.6e-3
"""PSP rise rates (ms^-1) for excitatory and inhibitory projections."""

N_EE = 120.0
N_EI = 72.0
N_IE = 90.0
N_II = 90.0
"""Connectivity counts; first letter = source, second = target population."""

# =============================================================================
# CONDUCTANCES (mS/cm^2)
# =============================================================================

G_L = 1.0
G_KNA = 1.33
G_AMPA = 1.0
G_GABA = 1.0

# =============================================================================
# REVERSAL POTENTIALS (mV)
# =============================================================================

E_AMPA = 0.0
E_GABA = -70.0
E_L_E = -66.0
E_L_I = -64.0
E_K = -100.0

# =============================================================================
# BACKGROUND NOISE (ms^-1)
# =============================================================================

MPHI = 0.0
"""Mean of the background excitatory drive."""

DPHI = 30.0e-3
"""Spread of the background excitatory drive."""
