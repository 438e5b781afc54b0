"""Recorded column trace visualization."""

from typing import Dict, Optional, Sequence, Union

import matplotlib.pyplot as plt
import numpy as np
import torch
from matplotlib.axes import Axes
from matplotlib.figure import Figure

FIGURE_SIZE_MEDIUM = (10, 6)
DPI_DEFAULT = 100
"""Default DPI (dots per inch) for saved figures."""

MARKER_COLOR = "tab:red"


def _to_numpy(x: Union[torch.Tensor, np.ndarray, Sequence[float]]) -> np.ndarray:
    if isinstance(x, torch.Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def plot_membrane_trace(
    v_e: Union[torch.Tensor, np.ndarray],
    sample_rate_hz: float = 100.0,
    markers: Optional[Union[torch.Tensor, Sequence[int]]] = None,
    threshold: Optional[float] = None,
    title: str = "Excitatory Membrane Potential",
    ax: Optional[Axes] = None,
) -> Axes:
    """Plot the excitatory potential over time with stimulation onsets.

    Args:
        v_e: Recorded ``v_e`` trace
        sample_rate_hz: Sampling rate of the trace
        markers: Stimulation onsets in sample indices
        threshold: Optional phase-dependent detection threshold (mV)
        title: Plot title
        ax: Matplotlib axes to plot on. Creates new if None.

    Returns:
        The axes object
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(12, 4))

    v_e = _to_numpy(v_e)
    times = np.arange(len(v_e)) / sample_rate_hz
    ax.plot(times, v_e, color="k", linewidth=0.8, label="V_e")

    if markers is not None:
        for i, m in enumerate(_to_numpy(markers)):
            ax.axvline(m / sample_rate_hz, color=MARKER_COLOR, alpha=0.6,
                       label="Stimulus" if i == 0 else None)
    if threshold is not None:
        ax.axhline(y=threshold, color="b", linestyle="--", alpha=0.5, label="Threshold")

    ax.set_xlabel("Time (s)")
    ax.set_ylabel("Membrane Potential (mV)")
    ax.set_title(title)
    ax.legend(loc="lower right")
    return ax


def plot_column_traces(
    data: Dict[str, Union[torch.Tensor, np.ndarray]],
    sample_rate_hz: float = 100.0,
    markers: Optional[Union[torch.Tensor, Sequence[int]]] = None,
    threshold: Optional[float] = None,
) -> Figure:
    """Two-panel figure: potentials on top, sodium concentration below.

    Args:
        data: Recorded traces, as in ``SimulationResult.data``
        sample_rate_hz: Sampling rate of the traces
        markers: Stimulation onsets in sample indices
        threshold: Optional detection threshold drawn on the potential panel

    Returns:
        The figure (the caller saves or shows it)
    """
    fig, (ax_v, ax_na) = plt.subplots(2, 1, figsize=FIGURE_SIZE_MEDIUM, sharex=True)
    plot_membrane_trace(data["v_e"], sample_rate_hz, markers, threshold, ax=ax_v)
    if "v_i" in data:
        v_i = _to_numpy(data["v_i"])
        ax_v.plot(np.arange(len(v_i)) / sample_rate_hz, v_i,
                  color="tab:blue", linewidth=0.6, alpha=0.7, label="V_i")
        ax_v.legend(loc="lower right")

    na = _to_numpy(data["na"])
    ax_na.plot(np.arange(len(na)) / sample_rate_hz, na, color="tab:green")
    ax_na.set_xlabel("Time (s)")
    ax_na.set_ylabel("[Na] (mM)")
    ax_na.set_title("Sodium Concentration")
    fig.tight_layout()
    return fig
