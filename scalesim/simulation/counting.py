from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from scalesim.config import CHECKPOINT_STEP
from scalesim.simulation.errors import DegenerateRunError
from scalesim.simulation.instrument import add_noise, quantize, round_half_up
from scalesim.simulation.types import (
    CheckpointResult,
    DisplayedCount,
    Finite,
    SimulationConfig,
    SimulationReport,
    Unmeasurable,
)
from scalesim.simulation.validate import validate_config
from scalesim.simulation.weights import generate_weights


def checkpoints(total_parts: int, step: int = CHECKPOINT_STEP) -> List[int]:
    """Successive multiples of step not exceeding total_parts."""
    return [(i + 1) * step for i in range(int(total_parts) // step)]


def displayed_count(effective_total: float, effective_average: float) -> DisplayedCount:
    if effective_average != 0:
        with np.errstate(over="ignore", invalid="ignore"):
            ratio = np.float64(effective_total) / np.float64(effective_average)
        if not np.isfinite(ratio):
            return Unmeasurable()
        return Finite(int(round_half_up(ratio)))
    if effective_total > 0:
        return Unmeasurable()
    return Finite(0)


def simulate_checkpoint(
    part_count: int,
    config: SimulationConfig,
    rng: np.random.Generator,
) -> CheckpointResult:
    """One independent counting trial with a fresh population of part_count parts.

    Random draws are consumed in a fixed order: population, calibration
    noise, total-weight noise.
    """

    resolution = config.instrument.scale_resolution
    noise_std = config.instrument.measurement_noise_std

    weights = generate_weights(config.weight_model, part_count, rng)

    # The first k parts in generation order are a random sample without replacement.
    k = min(int(config.calibration_sample_size), part_count)
    true_calibration_sum = float(np.sum(weights[:k]))
    measured_calibration_sum = add_noise(true_calibration_sum, noise_std, rng)
    raw_average = measured_calibration_sum / k if k > 0 else 1.0
    effective_average = quantize(raw_average, resolution)

    true_total = float(np.sum(weights))
    measured_total = add_noise(true_total, noise_std, rng)
    effective_total = quantize(measured_total, resolution)

    shown = displayed_count(effective_total, effective_average)
    deviation = shown.value - part_count if isinstance(shown, Finite) else None
    return CheckpointResult(actual_count=part_count, displayed_count=shown, deviation=deviation)


def max_abs_deviation(results: Sequence[CheckpointResult]) -> Tuple[int, float]:
    """Largest |deviation| over measurable checkpoints and its percent of the actual count.

    Ties keep the first checkpoint in iteration order.
    """

    best: Optional[CheckpointResult] = None
    for r in results:
        if r.deviation is None:
            continue
        if best is None or abs(r.deviation) > abs(best.deviation):
            best = r
    if best is None:
        raise DegenerateRunError(
            f"All {len(results)} checkpoints were unmeasurable (calibration average quantized to zero)."
        )
    max_dev = abs(best.deviation)
    return max_dev, max_dev / best.actual_count * 100.0


def summarize_checkpoints(results: Sequence[CheckpointResult]) -> SimulationReport:
    max_dev, max_dev_pct = max_abs_deviation(results)
    final = results[-1]
    final_pct = None
    if final.deviation is not None:
        final_pct = final.deviation / final.actual_count * 100.0
    return SimulationReport(
        checkpoints=tuple(results),
        max_abs_deviation=max_dev,
        max_abs_deviation_percent=max_dev_pct,
        final_deviation=final.deviation,
        final_deviation_percent=final_pct,
    )


def run_simulation(config: SimulationConfig, rng: np.random.Generator) -> SimulationReport:
    """Simulate the counting scale over every checkpoint of the configured run.

    Raises ConfigError before any random draw when the configuration is
    invalid, and DegenerateRunError when no checkpoint was measurable.
    """

    validate_config(config)
    results = [simulate_checkpoint(n, config, rng) for n in checkpoints(config.total_parts)]
    return summarize_checkpoints(results)
