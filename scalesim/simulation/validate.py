from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from scalesim.config import MIN_CALIBRATION_SAMPLE_SIZE, MIN_TOTAL_PARTS
from scalesim.simulation.errors import ConfigError
from scalesim.simulation.types import (
    DiscreteWeights,
    InstrumentConfig,
    NormalWeights,
    SimulationConfig,
    WeightModel,
)


def normalize_probabilities(probabilities: Sequence[float]) -> np.ndarray:
    """Rescale probabilities to sum to 1 (left untouched when they already do)."""

    p = np.asarray(probabilities, dtype=float)
    total = float(p.sum())
    if total <= 0:
        raise ConfigError("weight_model.probabilities", f"sum must be > 0, got {total}")
    if total != 1.0:
        p = p / total
    return p


def validate_weight_model(model: WeightModel) -> None:
    if isinstance(model, DiscreteWeights):
        n_values = len(model.values)
        n_probs = len(model.probabilities)
        if n_values == 0:
            raise ConfigError("weight_model.values", "must not be empty")
        if n_probs == 0:
            raise ConfigError("weight_model.probabilities", "must not be empty")
        if n_values != n_probs:
            raise ConfigError(
                "weight_model.probabilities",
                f"length {n_probs} does not match {n_values} weight values",
            )
        if not np.all(np.isfinite(np.asarray(model.values, dtype=float))):
            raise ConfigError("weight_model.values", f"must be finite, got {list(model.values)}")
        if not np.all(np.isfinite(np.asarray(model.probabilities, dtype=float))):
            raise ConfigError("weight_model.probabilities", f"must be finite, got {list(model.probabilities)}")
        negative = [p for p in model.probabilities if p < 0]
        if negative:
            raise ConfigError("weight_model.probabilities", f"must be non-negative, got {negative}")
        total = float(np.sum(np.asarray(model.probabilities, dtype=float)))
        if not total > 0:
            raise ConfigError("weight_model.probabilities", f"sum must be > 0, got {total}")
    elif isinstance(model, NormalWeights):
        if not np.isfinite(model.mean):
            raise ConfigError("weight_model.mean", f"must be finite, got {model.mean}")
        if not np.isfinite(model.stddev):
            raise ConfigError("weight_model.stddev", f"must be finite, got {model.stddev}")
        if not model.stddev >= 0:
            raise ConfigError("weight_model.stddev", f"must be >= 0, got {model.stddev}")
    else:
        raise ConfigError("weight_model", f"unsupported model type {type(model).__name__}")


def validate_instrument(instrument: InstrumentConfig) -> None:
    resolution = instrument.scale_resolution
    if not np.isfinite(resolution):
        raise ConfigError("instrument.scale_resolution", f"must be finite, got {resolution}")
    if not instrument.scale_resolution > 0:
        raise ConfigError("instrument.scale_resolution", f"must be > 0, got {instrument.scale_resolution}")
    # Readings are divided by the resolution; subnormal steps overflow.
    if resolution < np.finfo(float).tiny:
        raise ConfigError("instrument.scale_resolution", f"too small to divide by, got {resolution}")
    if not np.isfinite(instrument.measurement_noise_std):
        raise ConfigError(
            "instrument.measurement_noise_std",
            f"must be finite, got {instrument.measurement_noise_std}",
        )
    if not instrument.measurement_noise_std >= 0:
        raise ConfigError(
            "instrument.measurement_noise_std",
            f"must be >= 0, got {instrument.measurement_noise_std}",
        )


def validate_config(config: SimulationConfig) -> None:
    """Fail fast on the first invalid field; performs no sampling."""

    if int(config.total_parts) < MIN_TOTAL_PARTS:
        raise ConfigError("total_parts", f"must be >= {MIN_TOTAL_PARTS}, got {config.total_parts}")
    if int(config.calibration_sample_size) < MIN_CALIBRATION_SAMPLE_SIZE:
        raise ConfigError(
            "calibration_sample_size",
            f"must be >= {MIN_CALIBRATION_SAMPLE_SIZE}, got {config.calibration_sample_size}",
        )
    validate_weight_model(config.weight_model)
    validate_instrument(config.instrument)


def discrete_table(model: DiscreteWeights) -> Tuple[np.ndarray, np.ndarray]:
    """Return (values, cumulative probabilities) ready for inverse-CDF lookup."""

    values = np.asarray(model.values, dtype=float)
    cumulative = np.cumsum(normalize_probabilities(model.probabilities))
    return values, cumulative
