from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from scalesim.simulation.errors import ConfigError
from scalesim.simulation.types import DiscreteWeights, NormalWeights, WeightModel


def parse_number_list(text: str, field_name: str) -> List[float]:
    """Parse a comma-separated list like '2.1, 2.2, 2.3' into floats.

    Raises ValueError naming the field for empty input or any token that is
    not a number. Empty tokens (e.g. a trailing comma) count as invalid.
    """

    if text is None or not str(text).strip():
        raise ValueError(f"{field_name} must not be empty.")

    numbers: List[float] = []
    for token in str(text).split(","):
        token = token.strip()
        try:
            value = float(token)
        except ValueError:
            raise ValueError(
                f"Invalid value '{token}' in field {field_name}. Use numbers separated by commas only."
            ) from None
        if np.isnan(value):
            raise ValueError(f"Invalid value '{token}' in field {field_name}. NaN is not a weight.")
        numbers.append(value)
    return numbers


def probabilities_from_counts(counts: Sequence[float]) -> List[float]:
    """Turn a calibration tally (parts seen per weight class) into factors count / total."""

    c = np.asarray(counts, dtype=float)
    if c.size == 0:
        raise ConfigError("counts", "must not be empty")
    if np.any(c < 0):
        raise ConfigError("counts", f"must be non-negative, got {c.tolist()}")
    total = float(c.sum())
    if total <= 0:
        raise ConfigError("counts", f"total must be > 0, got {total}")
    return (c / total).tolist()


def build_weight_model(
    kind: str,
    *,
    values_text: Optional[str] = None,
    probabilities_text: Optional[str] = None,
    mean: Optional[float] = None,
    stddev: Optional[float] = None,
) -> WeightModel:
    """Build a WeightModel from form-style inputs.

    Only the discrete kind reads the two comma-separated fields; the normal
    kind needs mean and stddev.
    """

    kind = str(kind).strip().lower()
    if kind == "discrete":
        values = parse_number_list(values_text, "weight values")
        probabilities = parse_number_list(probabilities_text, "weight probabilities")
        if len(values) != len(probabilities):
            raise ValueError(
                f"Number of weight values ({len(values)}) and probabilities ({len(probabilities)}) must match."
            )
        return DiscreteWeights(values=tuple(values), probabilities=tuple(probabilities))
    if kind == "normal":
        if mean is None or stddev is None:
            raise ValueError("Normal weight model requires both mean and stddev.")
        return NormalWeights(mean=float(mean), stddev=float(stddev))
    raise ValueError(f"Unknown weight model '{kind}'. Expected one of: discrete, normal.")


def parse_seed_list(text: str) -> List[int]:
    """Parse comma-separated seeds; each must be a non-negative whole number."""

    seeds: List[int] = []
    for value in parse_number_list(text, "seeds"):
        if not np.isfinite(value) or not float(value).is_integer() or value < 0:
            raise ValueError(f"Invalid seed {value!r} in field seeds. Seeds must be non-negative integers.")
        seeds.append(int(value))
    return seeds
