"""Shared test fixtures and configuration."""

import pytest
import torch
import numpy as np

from slowwave.components.column import CorticalColumn
from slowwave.config import ColumnConfig, RunConfig


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure reproducible tests by setting all global random seeds.

    Simulation code draws from its own per-run generator; this fixture only
    pins helpers that use the global torch/numpy state.
    """
    torch.manual_seed(42)
    np.random.seed(42)


@pytest.fixture
def run_config():
    """Seeded run at the default 0.1 ms step with a short onset."""
    return RunConfig(onset_s=1, seed=1234)


@pytest.fixture
def coarse_run():
    """1 ms step, no onset; ticks equal milliseconds."""
    return RunConfig(steps_per_second=1000, onset_s=0, downsample=10, seed=7)


@pytest.fixture
def noiseless_config():
    """Default column with the background noise switched off."""
    return ColumnConfig(dphi=0.0)


@pytest.fixture
def column():
    return CorticalColumn()
