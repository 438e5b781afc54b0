"""
Custom exception classes for Slowwave.

Exception Hierarchy:
====================
SlowwaveError (base) - Base exception for all Slowwave-specific errors
├── ConfigurationError - Invalid configuration parameters
├── ComponentError - Component used outside its valid state
└── NumericalDivergenceError - Non-finite state detected after an integration step

The core model performs no guarding of its own: a parameter combination that
destabilises the fixed-step scheme simply produces unbounded output. The
divergence error is only raised when a run opts into the post-step check
(``RunConfig.check_finite``).

Author: Slowwave Project
Date: October 2026
"""

from __future__ import annotations

from typing import Optional

# =============================================================================
# Exception Hierarchy
# =============================================================================


class SlowwaveError(Exception):
    """Base exception for all Slowwave-specific errors.

    All custom exceptions in Slowwave inherit from this class, enabling
    code to catch Slowwave errors specifically.
    """


class ConfigurationError(SlowwaveError):
    """Invalid configuration parameters.

    Raised when configuration values are out of valid range or incompatible
    with each other.

    Example:
        raise ConfigurationError("steps_per_second must be positive, got 0")
    """


class ComponentError(SlowwaveError):
    """Error in a simulation component used outside its valid state.

    Args:
        component_name: Name of the component (e.g., "ColumnRecorder")
        message: Description of the error

    Example:
        raise ComponentError("ColumnRecorder", "buffer is full (300 samples)")
    """

    def __init__(self, component_name: str, message: str):
        super().__init__(f"[{component_name}] {message}")
        self.component_name = component_name


class NumericalDivergenceError(SlowwaveError):
    """State variable became NaN or infinite during integration.

    Args:
        variable: Name of the offending state variable
        value: The non-finite value
        tick: Tick at which the value was committed (if known)
    """

    def __init__(self, variable: str, value: float, tick: Optional[int] = None):
        where = f" at tick {tick}" if tick is not None else ""
        super().__init__(
            f"State variable '{variable}' diverged{where} (value={value}). "
            f"Choose a smaller time step or a more stable parameter set."
        )
        self.variable = variable
        self.value = value
        self.tick = tick
