"""
Data extraction from a running column.

``ColumnRecorder`` copies the committed values (slot 0) of a fixed subset of
state variables into preallocated float64 buffers, one column per recorded
tick. It never mutates model state.

Example:
    >>> recorder = ColumnRecorder(n_samples=run.n_samples(total))
    >>> for t in range(total):
    ...     integrator.step(column)
    ...     stim.check(t)
    ...     if t >= run.onset_ticks and t % run.downsample == 0:
    ...         recorder.record(column)
    >>> recorder.as_dict()["v_e"]
"""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

import numpy as np
import torch

from slowwave.components.column import CorticalColumn, StateVariable
from slowwave.errors import ComponentError, ConfigurationError

RECORDED_VARIABLES: Tuple[StateVariable, ...] = (
    StateVariable.V_E,
    StateVariable.V_I,
    StateVariable.NA,
    StateVariable.PHI_EE,
    StateVariable.PHI_EI,
    StateVariable.PHI_IE,
    StateVariable.PHI_II,
)
"""Membrane potentials, sodium and the four PSP amplitudes."""


class ColumnRecorder:
    """Fixed-size recorder of committed column state.

    Args:
        n_samples: Number of samples the buffers hold
        variables: State variables to record, in buffer row order
    """

    def __init__(
        self,
        n_samples: int,
        variables: Sequence[StateVariable] = RECORDED_VARIABLES,
    ):
        if n_samples < 0:
            raise ConfigurationError(f"n_samples must be non-negative, got {n_samples}")
        self.variables = tuple(StateVariable(v) for v in variables)
        self.n_samples = n_samples
        self.buffers = torch.zeros(len(self.variables), n_samples, dtype=torch.float64)
        self.count = 0

    @property
    def full(self) -> bool:
        return self.count >= self.n_samples

    def record(self, column: CorticalColumn) -> None:
        """Write slot 0 of every recorded variable at the next sample position."""
        if self.full:
            raise ComponentError("ColumnRecorder", f"buffer is full ({self.n_samples} samples)")
        self.buffers[:, self.count] = torch.tensor(
            [column.stages[v][0] for v in self.variables], dtype=torch.float64
        )
        self.count += 1

    def reset(self) -> None:
        self.buffers.zero_()
        self.count = 0

    def as_dict(self) -> Dict[str, torch.Tensor]:
        """Recorded traces keyed by variable name (views, trimmed to ``count``)."""
        return {
            v.name.lower(): self.buffers[row, : self.count]
            for row, v in enumerate(self.variables)
        }

    def as_numpy(self) -> Dict[str, np.ndarray]:
        """Recorded traces as independent numpy arrays for the host environment."""
        return {name: trace.numpy().copy() for name, trace in self.as_dict().items()}


def export_markers(markers: Sequence[int], downsample: int) -> torch.Tensor:
    """Rescale stimulation markers from ticks to recorded-sample indices.

    Division truncates toward zero.
    """
    if downsample < 1:
        raise ConfigurationError(f"downsample must be >= 1, got {downsample}")
    ticks = torch.tensor(list(markers), dtype=torch.int64)
    return torch.div(ticks, downsample, rounding_mode="trunc")
