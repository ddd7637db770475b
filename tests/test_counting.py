import math

import numpy as np
import pytest

from scalesim.simulation.counting import (
    checkpoints,
    displayed_count,
    max_abs_deviation,
    run_simulation,
    simulate_checkpoint,
)
from scalesim.simulation.errors import ConfigError, DegenerateRunError
from scalesim.simulation.types import (
    CheckpointResult,
    DiscreteWeights,
    Finite,
    InstrumentConfig,
    NormalWeights,
    SimulationConfig,
    Unmeasurable,
)


def _config(
    *,
    total_parts=1000,
    calibration=10,
    model=None,
    resolution=0.1,
    noise=0.0,
):
    if model is None:
        model = DiscreteWeights(values=(2.1, 2.2, 2.3), probabilities=(0.1, 0.2, 0.7))
    return SimulationConfig(
        total_parts=total_parts,
        calibration_sample_size=calibration,
        weight_model=model,
        instrument=InstrumentConfig(scale_resolution=resolution, measurement_noise_std=noise),
    )


def test_checkpoints_for_1000_parts():
    assert checkpoints(1000) == [100, 200, 300, 400, 500, 600, 700, 800, 900, 1000]


def test_checkpoints_stop_at_last_full_hundred():
    assert checkpoints(1099) == [100 * i for i in range(1, 11)]
    assert checkpoints(100) == [100]


def test_report_has_one_result_per_checkpoint():
    report = run_simulation(_config(total_parts=1000), np.random.default_rng(2026))
    assert [r.actual_count for r in report.checkpoints] == checkpoints(1000)


def test_certain_weight_without_noise_counts_exactly():
    model = DiscreteWeights(values=(2.5,), probabilities=(1.0,))
    report = run_simulation(_config(model=model, resolution=0.5, calibration=10), np.random.default_rng(1))
    for r in report.checkpoints:
        assert r.displayed_count == Finite(r.actual_count)
        assert r.deviation == 0
    assert report.max_abs_deviation == 0
    assert report.max_abs_deviation_percent == 0.0
    assert report.final_deviation == 0
    assert report.final_deviation_percent == 0.0


def test_max_deviation_percent_matches_argmax_checkpoint():
    config = _config(
        total_parts=3000,
        calibration=5,
        model=NormalWeights(mean=2.2, stddev=0.1),
        noise=0.05,
    )
    report = run_simulation(config, np.random.default_rng(2027))

    finite = [r for r in report.checkpoints if r.deviation is not None]
    expected = max(abs(r.deviation) for r in finite)
    argmax = next(r for r in finite if abs(r.deviation) == expected)

    assert report.max_abs_deviation == expected
    assert report.max_abs_deviation_percent == pytest.approx(expected / argmax.actual_count * 100.0)


def test_small_calibration_sample_produces_deviation():
    config = _config(total_parts=5000, calibration=1)
    report = run_simulation(config, np.random.default_rng(2028))
    assert report.max_abs_deviation > 0


def test_same_seed_reproduces_report():
    config = _config(model=NormalWeights(mean=2.2, stddev=0.1), noise=0.01)
    a = run_simulation(config, np.random.default_rng(42))
    b = run_simulation(config, np.random.default_rng(42))
    assert a == b


def test_calibration_sample_capped_at_part_count():
    model = DiscreteWeights(values=(2.0,), probabilities=(1.0,))
    config = _config(model=model, calibration=10_000, resolution=1.0)
    result = simulate_checkpoint(100, config, np.random.default_rng(0))
    assert result == CheckpointResult(actual_count=100, displayed_count=Finite(100), deviation=0)


def test_displayed_count_sentinels():
    assert displayed_count(5.0, 0.0) == Unmeasurable()
    assert displayed_count(0.0, 0.0) == Finite(0)
    assert displayed_count(-1.0, 0.0) == Finite(0)
    assert displayed_count(10.0, 4.0) == Finite(3)  # 2.5 rounds up


def test_displayed_count_overflow_is_unmeasurable():
    assert displayed_count(1e308, 1e-300) == Unmeasurable()
    assert displayed_count(math.inf, 2.0) == Unmeasurable()
    assert displayed_count(math.nan, 2.0) == Unmeasurable()


def test_zero_weight_parts_display_zero():
    model = DiscreteWeights(values=(0.0,), probabilities=(1.0,))
    report = run_simulation(_config(model=model, total_parts=300), np.random.default_rng(0))
    assert [r.displayed_count for r in report.checkpoints] == [Finite(0)] * 3
    assert report.max_abs_deviation == 300
    assert report.max_abs_deviation_percent == pytest.approx(100.0)


def test_all_unmeasurable_checkpoints_raise_degenerate_error():
    model = DiscreteWeights(values=(0.01,), probabilities=(1.0,))
    config = _config(model=model, resolution=1.0, total_parts=500, calibration=100)
    with pytest.raises(DegenerateRunError):
        run_simulation(config, np.random.default_rng(0))


def test_unmeasurable_checkpoints_are_skipped_and_ties_keep_first():
    results = [
        CheckpointResult(actual_count=100, displayed_count=Finite(103), deviation=3),
        CheckpointResult(actual_count=200, displayed_count=Unmeasurable(), deviation=None),
        CheckpointResult(actual_count=300, displayed_count=Finite(297), deviation=-3),
    ]
    max_dev, pct = max_abs_deviation(results)
    assert max_dev == 3
    assert pct == pytest.approx(3.0)


@pytest.mark.parametrize(
    "config, field",
    [
        (_config(total_parts=99), "total_parts"),
        (_config(calibration=0), "calibration_sample_size"),
        (_config(resolution=0.0), "instrument.scale_resolution"),
        (_config(resolution=-0.1), "instrument.scale_resolution"),
        (_config(noise=-1.0), "instrument.measurement_noise_std"),
        (
            _config(model=DiscreteWeights(values=(1.0, 2.0), probabilities=(1.0,))),
            "weight_model.probabilities",
        ),
        (_config(resolution=math.inf), "instrument.scale_resolution"),
        (_config(resolution=math.nan), "instrument.scale_resolution"),
        (_config(resolution=1e-310), "instrument.scale_resolution"),
        (_config(noise=math.inf), "instrument.measurement_noise_std"),
        (_config(model=NormalWeights(mean=math.nan, stddev=0.1)), "weight_model.mean"),
        (_config(model=NormalWeights(mean=2.2, stddev=math.inf)), "weight_model.stddev"),
        (_config(model=DiscreteWeights(values=(math.inf,), probabilities=(1.0,))), "weight_model.values"),
        (
            _config(model=DiscreteWeights(values=(1.0, 2.0), probabilities=(0.5, math.inf))),
            "weight_model.probabilities",
        ),
    ],
)
def test_invalid_config_fails_before_any_draw(config, field):
    rng = np.random.default_rng(2026)
    before = rng.bit_generator.state
    with pytest.raises(ConfigError) as excinfo:
        run_simulation(config, rng)
    assert excinfo.value.field == field
    assert field in str(excinfo.value)
    assert rng.bit_generator.state == before
