"""Utility functions for numerical and configuration validation."""

from __future__ import annotations

import math
from typing import Optional

from slowwave.errors import ConfigurationError, NumericalDivergenceError


def validate_finite(value: float, name: str, tick: Optional[int] = None) -> None:
    """Validate that a state value is finite.

    Args:
        value: Value to validate
        name: State variable name for the error message
        tick: Tick at which the value was produced

    Raises:
        NumericalDivergenceError: If value is NaN or Inf
    """
    if math.isnan(value) or math.isinf(value):
        raise NumericalDivergenceError(name, value, tick)


def validate_positive(value: float, name: str) -> None:
    """Validate that a configuration value is strictly positive.

    Raises:
        ConfigurationError: If value is not finite or <= 0
    """
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")


def validate_non_negative(value: float, name: str) -> None:
    """Validate that a configuration value is finite and >= 0.

    Raises:
        ConfigurationError: If value is not finite or < 0
    """
    if not math.isfinite(value) or value < 0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")
