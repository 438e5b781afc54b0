"""
Integration and simulation of the cortical column.

This module provides:
- StochasticRK4: fixed-step 4-stage stochastic Runge-Kutta integrator
- ColumnSimulation / run_simulation: the per-tick driving loop
"""

from .integrator import (
    RK_WEIGHTS,
    STAGE_NOISE_WEIGHTS,
    STAGE_STEPS,
    STEP_NOISE_WEIGHTS,
    StochasticRK4,
)
from .simulation import ColumnSimulation, SimulationResult, run_simulation

__all__ = [
    # Integrator
    "StochasticRK4",
    "STAGE_STEPS",
    "RK_WEIGHTS",
    "STAGE_NOISE_WEIGHTS",
    "STEP_NOISE_WEIGHTS",
    # Simulation
    "ColumnSimulation",
    "SimulationResult",
    "run_simulation",
]
