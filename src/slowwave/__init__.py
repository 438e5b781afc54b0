"""
SLOWWAVE - Stochastic neural mass model of a cortical column

Simulates the mean-field activity of an excitatory/inhibitory cortical column
with sodium-dependent adaptation, integrated by a fixed-step stochastic
Runge-Kutta scheme and optionally driven by open- or closed-loop stimulation.

Quick Start:
============

    from slowwave import RunConfig, run_simulation

    result = run_simulation(
        duration_s=30,
        column_params=[30, -58.5, 4, 2, 1, 1.33, 30e-3],
        stim_params=[2, 40, 120, 5, 0, 1, 1050, 350],
        run=RunConfig(seed=42),
    )
    v_e = result.data["v_e"]          # 100 Hz trace of the excitatory potential
    markers = result.markers          # stimulation onsets, in sample indices

Internal Development:
====================

    from slowwave.components.column import CorticalColumn, StateVariable
    from slowwave.dynamics.integrator import StochasticRK4
    from slowwave.stimuli.controller import StimulationController
"""

__version__ = "0.1.0"

# Configuration
from slowwave.config import (
    ColumnConfig,
    RunConfig,
    StimulationConfig,
    StimulationMode,
    StimulationSchedule,
)

# Model
from slowwave.components.column import CorticalColumn, StateVariable, firing_rate

# Integration and simulation
from slowwave.dynamics.integrator import StochasticRK4
from slowwave.dynamics.simulation import ColumnSimulation, SimulationResult, run_simulation

# Stimulation
from slowwave.stimuli.controller import StimulationController

# Output
from slowwave.io.recorder import ColumnRecorder, export_markers

# Utilities
from slowwave.utils.rng import RandomSource, UniformIntStream

# Errors
from slowwave.errors import (
    ComponentError,
    ConfigurationError,
    NumericalDivergenceError,
    SlowwaveError,
)

__all__ = [
    "__version__",
    # Configuration
    "RunConfig",
    "ColumnConfig",
    "StimulationConfig",
    "StimulationMode",
    "StimulationSchedule",
    # Model
    "CorticalColumn",
    "StateVariable",
    "firing_rate",
    # Integration and simulation
    "StochasticRK4",
    "ColumnSimulation",
    "SimulationResult",
    "run_simulation",
    # Stimulation
    "StimulationController",
    # Output
    "ColumnRecorder",
    "export_markers",
    # Utilities
    "RandomSource",
    "UniformIntStream",
    # Errors
    "SlowwaveError",
    "ConfigurationError",
    "ComponentError",
    "NumericalDivergenceError",
]
