"""Model components: the cortical column and its state layout."""

from __future__ import annotations

from .column import (
    N_STAGES,
    N_VARIABLES,
    STOCHASTIC_VARIABLES,
    CorticalColumn,
    StateVariable,
    firing_rate,
)

__all__ = [
    "CorticalColumn",
    "StateVariable",
    "N_STAGES",
    "N_VARIABLES",
    "STOCHASTIC_VARIABLES",
    "firing_rate",
]
