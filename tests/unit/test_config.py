"""
Tests for run, column and stimulation configuration.

Unit conversions are checked against an independent reference
(``round(value * rate)``) written out in this module.
"""

from dataclasses import FrozenInstanceError

import pytest
from hypothesis import given, settings, strategies as st

from slowwave.config import (
    COLUMN_PARAMETER_ORDER,
    DEFAULT_THRESHOLD_MV,
    ColumnConfig,
    RunConfig,
    StimulationConfig,
    StimulationMode,
)
from slowwave.errors import ConfigurationError

DEFAULT_COLUMN_ARRAY = [30.0, -58.5, 4.0, 2.0, 1.0, 1.33, 30e-3]


def reference_ticks(value, unit_per_second, steps_per_second):
    """Ticks for ``value`` expressed in a unit with ``unit_per_second`` units per second."""
    return int(round(value / unit_per_second * steps_per_second))


@pytest.mark.unit
class TestRunConfig:

    def test_defaults(self):
        run = RunConfig()
        assert run.steps_per_second == 10_000
        assert run.dt_ms == pytest.approx(0.1)
        assert run.sqrt_dt == pytest.approx(0.1 ** 0.5)
        assert run.onset_ticks == 100_000
        assert run.downsample == 100

    @pytest.mark.parametrize("steps", [0, -10])
    def test_non_positive_step_count_rejected(self, steps):
        with pytest.raises(ConfigurationError):
            RunConfig(steps_per_second=steps)

    def test_non_integer_step_count_rejected(self):
        with pytest.raises(ConfigurationError):
            RunConfig(steps_per_second=10.5)
        with pytest.raises(ConfigurationError):
            RunConfig(steps_per_second=True)

    def test_invalid_onset_and_downsample(self):
        with pytest.raises(ConfigurationError):
            RunConfig(onset_s=-1)
        with pytest.raises(ConfigurationError):
            RunConfig(downsample=0)

    def test_reproducible_requires_seed(self):
        with pytest.raises(ConfigurationError, match="seed"):
            RunConfig(reproducible=True)
        assert RunConfig(reproducible=True, seed=3).seed == 3

    def test_frozen(self):
        run = RunConfig()
        with pytest.raises(FrozenInstanceError):
            run.steps_per_second = 5

    @given(
        value=st.floats(min_value=0.0, max_value=1e5, allow_nan=False),
        steps=st.sampled_from([1000, 2000, 10_000, 20_000]),
    )
    @settings(max_examples=100, deadline=1000)
    def test_ms_conversion_matches_reference(self, value, steps):
        run = RunConfig(steps_per_second=steps)
        assert run.ms_to_ticks(value) == pytest.approx(
            reference_ticks(value, 1000.0, steps), abs=1
        )

    @pytest.mark.parametrize("value_ms, steps, ticks", [
        (120.0, 10_000, 1200),
        (1050.0, 10_000, 10_500),
        (350.0, 10_000, 3500),
        (0.26, 10_000, 3),
        (120.0, 1000, 120),
    ])
    def test_ms_conversion_exact_values(self, value_ms, steps, ticks):
        assert RunConfig(steps_per_second=steps).ms_to_ticks(value_ms) == ticks

    def test_seconds_conversion(self):
        run = RunConfig()
        assert run.seconds_to_ticks(5) == 50_000
        assert run.seconds_to_ticks(0.5) == 5_000
        assert run.total_ticks(30) == 400_000

    @pytest.mark.parametrize("onset_s, downsample, steps, total, expected", [
        (0, 1, 1000, 10, 10),
        (0, 10, 1000, 100, 10),
        (0, 10, 1000, 101, 11),
        (1, 100, 1000, 1000, 0),
        (1, 100, 1000, 3000, 20),
        (1, 300, 1000, 3000, 6),
    ])
    def test_n_samples_counts_recorded_ticks(self, onset_s, downsample, steps, total, expected):
        run = RunConfig(steps_per_second=steps, onset_s=onset_s, downsample=downsample)
        assert run.n_samples(total) == expected
        brute = sum(
            1 for t in range(total) if t >= run.onset_ticks and t % downsample == 0
        )
        assert brute == expected


@pytest.mark.unit
class TestColumnConfig:

    def test_from_array_defaults_round_trip(self):
        config = ColumnConfig.from_array(DEFAULT_COLUMN_ARRAY)
        assert config == ColumnConfig()
        assert config.to_array() == pytest.approx(DEFAULT_COLUMN_ARRAY)

    def test_from_array_positions(self):
        values = [25.0, -60.0, 5.0, 3.0, 1.5, 0.0, 0.0]
        config = ColumnConfig.from_array(values)
        for name, value in zip(COLUMN_PARAMETER_ORDER, values):
            assert getattr(config, name) == value

    @pytest.mark.parametrize("length", [0, 6, 8])
    def test_wrong_length_rejected(self, length):
        with pytest.raises(ConfigurationError, match="7"):
            ColumnConfig.from_array([1.0] * length)

    def test_overrides(self):
        config = ColumnConfig.from_array(DEFAULT_COLUMN_ARRAY, mphi=0.01)
        assert config.mphi == 0.01
        with pytest.raises(ConfigurationError, match="Unknown"):
            ColumnConfig.from_array(DEFAULT_COLUMN_ARRAY, not_a_parameter=1.0)

    @pytest.mark.parametrize("name", ["tau_e", "tau_Na", "sigma_e", "gamma_e"])
    def test_non_positive_time_constants_rejected(self, name):
        with pytest.raises(ConfigurationError, match=name):
            ColumnConfig(**{name: 0.0})

    def test_negative_noise_rejected(self):
        with pytest.raises(ConfigurationError, match="dphi"):
            ColumnConfig(dphi=-0.1)


@pytest.mark.unit
class TestStimulationConfig:

    def test_defaults_are_inactive(self):
        config = StimulationConfig()
        assert config.mode == StimulationMode.NONE
        assert config.threshold_mv == DEFAULT_THRESHOLD_MV

    def test_from_array_seven_entries(self):
        config = StimulationConfig.from_array([1, 40, 120, 5, 1, 2, 1050])
        assert config.mode == StimulationMode.SEMI_PERIODIC
        assert config.strength_hz == 40
        assert config.n_stimuli == 2
        assert config.delay_ms == 350.0

    def test_from_array_eight_entries(self):
        config = StimulationConfig.from_array([2, 40, 120, 5, 0, 1, 1050, 400])
        assert config.mode == StimulationMode.PHASE_DEPENDENT
        assert config.delay_ms == 400

    def test_phase_dependent_requires_delay(self):
        with pytest.raises(ConfigurationError, match="delay"):
            StimulationConfig.from_array([2, 40, 120, 5, 0, 1, 1050])

    @pytest.mark.parametrize("length", [6, 9])
    def test_wrong_length_rejected(self, length):
        with pytest.raises(ConfigurationError):
            StimulationConfig.from_array([0.0] * length)

    @pytest.mark.parametrize("mode", [3, -1, 1.5])
    def test_unknown_mode_rejected(self, mode):
        with pytest.raises(ConfigurationError):
            StimulationConfig.from_array([mode, 40, 120, 5, 0, 1, 1050, 350])

    def test_negative_values_rejected(self):
        with pytest.raises(ConfigurationError, match="duration_ms"):
            StimulationConfig(duration_ms=-1.0)
        with pytest.raises(ConfigurationError, match="n_stimuli"):
            StimulationConfig(n_stimuli=0)

    def test_jitter_wider_than_interval_rejected(self):
        with pytest.raises(ConfigurationError):
            StimulationConfig(isi_s=1.0, isi_range_s=2.0)

    def test_schedule_conversion(self):
        run = RunConfig(onset_s=10)
        schedule = StimulationConfig.from_array([2, 40, 120, 5, 1, 2, 1050, 350]).to_schedule(run)
        assert schedule.strength == pytest.approx(0.04)
        assert schedule.duration == 1200
        assert schedule.isi == 50_000
        assert schedule.isi_range == 10_000
        assert schedule.time_between_stimuli == 10_500
        assert schedule.time_to_stimulus == 3500
        assert schedule.onset_correction == 100_000
        assert schedule.threshold == DEFAULT_THRESHOLD_MV

    def test_semi_periodic_first_stimulus_one_second_after_onset(self):
        run = RunConfig(onset_s=10)
        schedule = StimulationConfig.from_array([1, 40, 120, 5, 0, 1, 1050]).to_schedule(run)
        assert schedule.time_to_stimulus == 110_000

    def test_threshold_keyword(self):
        config = StimulationConfig.from_array([2, 40, 120, 5, 0, 1, 1050, 350], threshold_mv=-70.0)
        assert config.to_schedule(RunConfig()).threshold == -70.0

    @pytest.mark.parametrize("params", [
        [1, 40, 120, 0, 0, 1, 1050],            # no interval between events
        [1, 40, 120, 5, 5, 1, 1050],            # jitter can draw a zero interval
        [1, 40, 120, 5, 0, 2, 0],               # stimuli of one event on the same tick
        [1, 40, 120, 5, 0, 2, 0.4],             # spacing rounds to zero ticks
        [2, 40, 120, 1, 0, 2, 0, 50],           # phase-dependent event would never end
    ])
    def test_sub_tick_intervals_rejected_at_setup(self, params):
        run = RunConfig(steps_per_second=1000, onset_s=0, seed=1)
        config = StimulationConfig.from_array(params)
        with pytest.raises(ConfigurationError, match="tick"):
            config.to_schedule(run)

    @pytest.mark.parametrize("params", [
        [1, 40, 120, 5, 0, 1, 0],               # spacing unused with one stimulus
        [2, 40, 120, 0, 0, 1, 1050, 350],       # no pause after a phase-dependent event
        [0, 0, 120, 0, 0, 2, 0],                # inactive protocol
    ])
    def test_unused_zero_intervals_accepted(self, params):
        run = RunConfig(steps_per_second=1000, onset_s=0, seed=1)
        StimulationConfig.from_array(params).to_schedule(run)

    @pytest.mark.parametrize("mode", [1.7, 0.5])
    def test_non_integer_mode_rejected_by_constructor(self, mode):
        with pytest.raises(ConfigurationError, match="mode"):
            StimulationConfig(mode=mode)

    def test_non_integer_stimulus_count_rejected(self):
        with pytest.raises(ConfigurationError, match="n_stimuli"):
            StimulationConfig.from_array([1, 40, 120, 5, 0, 1.5, 1050])
        with pytest.raises(ConfigurationError, match="n_stimuli"):
            StimulationConfig(n_stimuli=2.5)

    def test_integral_floats_become_ints(self):
        config = StimulationConfig(mode=2.0, n_stimuli=3.0)
        assert config.mode is StimulationMode.PHASE_DEPENDENT
        assert config.n_stimuli == 3
        assert isinstance(config.n_stimuli, int)
