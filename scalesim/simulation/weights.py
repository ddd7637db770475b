from __future__ import annotations

import numpy as np

from scalesim.simulation.errors import ConfigError
from scalesim.simulation.instrument import box_muller
from scalesim.simulation.types import DiscreteWeights, NormalWeights, WeightModel
from scalesim.simulation.validate import discrete_table, validate_weight_model


def _sample_discrete(model: DiscreteWeights, n: int, rng: np.random.Generator) -> np.ndarray:
    values, cumulative = discrete_table(model)
    u = rng.random(n)
    # First index whose cumulative sum is >= u; rounding shortfall maps to the last value.
    idx = np.searchsorted(cumulative, u, side="left")
    idx = np.minimum(idx, values.size - 1)
    return values[idx]


def _sample_normal(model: NormalWeights, n: int, rng: np.random.Generator) -> np.ndarray:
    # No clamping: negative weights are allowed through.
    return float(model.mean) + float(model.stddev) * box_muller(rng, n)


def generate_weights(model: WeightModel, n: int, rng: np.random.Generator) -> np.ndarray:
    """Draw n independent part weights under the given model."""

    if n < 0:
        raise ConfigError("n", f"must be >= 0, got {n}")
    validate_weight_model(model)
    if isinstance(model, DiscreteWeights):
        return _sample_discrete(model, n, rng)
    return _sample_normal(model, n, rng)
