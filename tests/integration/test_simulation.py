"""
Integration tests for the simulation driver.

Level: full runs (column + integrator + stimulation + recorder).

The steady-state tests compare long noise-free runs against a documented
resting state, which is itself checked against the fixed-point equations
solved independently of the model code with scipy.
"""

import math

import numpy as np
import pytest
import torch
from scipy.optimize import fsolve

from slowwave import (
    ColumnConfig,
    ColumnSimulation,
    ConfigurationError,
    RunConfig,
    StateVariable,
    run_simulation,
)
from slowwave.__main__ import main

SEMI_PERIODIC = [1, 40, 120, 5, 0, 1, 1050]

# Noise-free resting state of the default column (10 kHz, no stimulation).
# The default column is bistable; a depolarised start (v_e = -50 mV,
# Na = 15 mM) ends in an up state near v_e = -54.8 mV, Na = 22.2 mM instead.
V_E_REST = -67.100  # mV
V_I_REST = -64.823  # mV
NA_REST = 9.757  # mM
V_TOLERANCE = 0.05  # mV
NA_TOLERANCE = 0.01  # mM


@pytest.fixture
def short_run():
    """4 s of 1 ms ticks, 1 s onset, 100 Hz sampling."""
    return RunConfig(steps_per_second=1000, onset_s=1, downsample=10, seed=3)


@pytest.mark.integration
class TestRunSimulation:

    def test_output_shapes(self, short_run):
        result = run_simulation(3, None, SEMI_PERIODIC, short_run)
        assert result.n_ticks == 4000
        assert set(result.data) == {"v_e", "v_i", "na", "phi_ee", "phi_ei", "phi_ie", "phi_ii"}
        for trace in result.data.values():
            assert trace.shape == (300,)
            assert torch.isfinite(trace).all()
        assert result.seed == 3

    def test_markers_rescaled_to_samples(self, short_run):
        result = run_simulation(3, None, SEMI_PERIODIC, short_run)
        # first semi-periodic stimulus one second after the onset
        assert result.marker_ticks == [1000]
        assert result.markers.tolist() == [100]

    def test_same_seed_same_output(self, short_run):
        a = run_simulation(3, None, SEMI_PERIODIC, short_run)
        b = run_simulation(3, None, SEMI_PERIODIC, short_run)
        for name in a.data:
            assert torch.equal(a.data[name], b.data[name])
        assert a.marker_ticks == b.marker_ticks

    def test_different_seed_different_output(self):
        a = run_simulation(2, run=RunConfig(steps_per_second=1000, onset_s=0, seed=1))
        b = run_simulation(2, run=RunConfig(steps_per_second=1000, onset_s=0, seed=2))
        assert not torch.equal(a.data["v_e"], b.data["v_e"])

    def test_seed_irrelevant_without_noise(self):
        params = ColumnConfig(dphi=0.0)
        a = run_simulation(2, params, run=RunConfig(steps_per_second=1000, onset_s=0, seed=1))
        b = run_simulation(2, params, run=RunConfig(steps_per_second=1000, onset_s=0, seed=2))
        assert torch.equal(a.data["v_e"], b.data["v_e"])

    def test_flat_parameter_arrays(self, short_run):
        result = run_simulation(
            1, [30, -58.5, 4, 2, 1, 1.33, 30e-3], [2, 40, 120, 5, 0, 1, 1050, 350], short_run
        )
        assert result.data["v_e"].shape == (100,)

    def test_stimulation_depolarises(self):
        """The excitatory PSP rises above its stimulus-free trace once the drive is on."""
        run = RunConfig(steps_per_second=1000, onset_s=0, downsample=1, seed=5)
        quiet = run_simulation(1.2, ColumnConfig(dphi=0.0), None, run)
        driven = run_simulation(1.2, ColumnConfig(dphi=0.0), [1, 200, 120, 5, 0, 1, 1050], run)
        window = slice(1001, 1021)
        assert (driven.data["phi_ee"][window] > quiet.data["phi_ee"][window]).all()
        assert torch.equal(driven.data["v_e"][:1000], quiet.data["v_e"][:1000])

    def test_negative_duration_rejected(self):
        with pytest.raises(ConfigurationError):
            run_simulation(-1.0)


@pytest.mark.integration
class TestColumnSimulation:

    def test_step_records_after_onset_only(self):
        run = RunConfig(steps_per_second=1000, onset_s=1, downsample=10, seed=1)
        sim = ColumnSimulation(run=run, n_samples=run.n_samples(1500))
        sim.run_ticks(1000)
        assert sim.tick == 1000
        assert sim.recorder.count == 0
        sim.run_ticks(500)
        assert sim.recorder.count == 50


@pytest.mark.integration
class TestCommandLine:

    def test_run_and_save(self, tmp_path, capsys):
        output = tmp_path / "run.npz"
        figure = tmp_path / "run.png"
        code = main([
            "--duration", "2", "--onset", "0", "--steps-per-second", "1000",
            "--downsample", "10", "--seed", "1",
            "--stim-params", "1", "40", "120", "5", "0", "1", "1050",
            "--output", str(output), "--plot", str(figure),
        ])
        assert code == 0
        assert "simulation done!" in capsys.readouterr().out
        saved = np.load(output)
        assert saved["v_e"].shape == (200,)
        assert saved["markers"].tolist() == [100]
        assert figure.exists()

    def test_invalid_protocol_exit_code(self):
        code = main([
            "--duration", "1", "--onset", "0", "--steps-per-second", "1000",
            "--stim-params", "2", "40", "120", "5", "0", "1", "1050",
        ])
        assert code == 1


def steady_state(config):
    """Fixed point of the noise-free, unstimulated column (Phi = N Q, x = 0)."""
    c1 = math.pi / math.sqrt(3.0)

    def rate(v, q_max, theta, sigma):
        return q_max / (1.0 + math.exp(-c1 * (v - theta) / sigma))

    def equations(y):
        v_e, v_i, na = y
        q_e = rate(v_e, config.Qe_max, config.theta_e, config.sigma_e)
        q_i = rate(v_i, config.Qi_max, config.theta_i, config.sigma_i)
        phi_ee = config.N_ee * q_e + config.mphi
        phi_ei = config.N_ei * q_e + config.mphi
        phi_ie = config.N_ie * q_i
        phi_ii = config.N_ii * q_i
        w_kna = 0.37 / (1.0 + (38.7 / na) ** 3.5)
        pump = config.R_pump * (
            na ** 3 / (na ** 3 + 15.0 ** 3)
            - config.Na_eq ** 3 / (config.Na_eq ** 3 + 15.0 ** 3)
        )
        return [
            (config.g_L * (config.E_L_e - v_e)
             + config.g_AMPA * phi_ee * (config.E_AMPA - v_e)
             + config.g_GABA * phi_ie * (config.E_GABA - v_e)) / config.tau_e
            + config.g_KNa * w_kna * (config.E_K - v_e),
            (config.g_L * (config.E_L_i - v_i)
             + config.g_AMPA * phi_ei * (config.E_AMPA - v_i)
             + config.g_GABA * phi_ii * (config.E_GABA - v_i)) / config.tau_i,
            config.alpha_Na * q_e - pump,
        ]

    return equations


def final_potentials(column):
    return (
        column.value(StateVariable.V_E),
        column.value(StateVariable.V_I),
        column.value(StateVariable.NA),
    )


@pytest.mark.integration
def test_resting_state_solves_fixed_point_equations():
    config = ColumnConfig(dphi=0.0)
    solution, _, converged, message = fsolve(
        steady_state(config), (V_E_REST, V_I_REST, NA_REST), full_output=True
    )
    assert converged == 1, message
    assert solution[0] == pytest.approx(V_E_REST, abs=V_TOLERANCE)
    assert solution[1] == pytest.approx(V_I_REST, abs=V_TOLERANCE)
    assert solution[2] == pytest.approx(NA_REST, abs=NA_TOLERANCE)


@pytest.mark.integration
@pytest.mark.slow
class TestSteadyState:
    """300,000 noise-free ticks (30 s at 10 kHz) without stimulation."""

    N_TICKS = 300_000

    def test_settles_on_resting_state(self):
        config = ColumnConfig(dphi=0.0)
        sim = ColumnSimulation(config, None, RunConfig(onset_s=0, seed=0))
        sim.run_ticks(self.N_TICKS)

        v_e, v_i, na = final_potentials(sim.column)
        assert v_e == pytest.approx(V_E_REST, abs=V_TOLERANCE)
        assert v_i == pytest.approx(V_I_REST, abs=V_TOLERANCE)
        assert na == pytest.approx(NA_REST, abs=NA_TOLERANCE)
        assert abs(sim.column.derivatives(0)[StateVariable.V_E]) < 1e-2
        assert sim.column.input == 0.0

    def test_relaxes_back_after_perturbation(self):
        """A hyperpolarised start with extra sodium returns to the resting state."""
        config = ColumnConfig(dphi=0.0)
        sim = ColumnSimulation(config, None, RunConfig(onset_s=0, seed=0))
        state = sim.column.initial_state()
        state[StateVariable.V_E] -= 3.0
        state[StateVariable.V_I] -= 3.0
        state[StateVariable.NA] += 1.0
        sim.column.load_state(state)

        sim.run_ticks(self.N_TICKS)

        v_e, v_i, na = final_potentials(sim.column)
        assert v_e == pytest.approx(V_E_REST, abs=V_TOLERANCE)
        assert v_i == pytest.approx(V_I_REST, abs=V_TOLERANCE)
        assert na == pytest.approx(NA_REST, abs=NA_TOLERANCE)
