from __future__ import annotations

import numpy as np

from scalesim.simulation.errors import ConfigError


def round_half_up(x):
    """Round to the nearest integer, halves toward +inf (floor(x + 0.5))."""
    return np.floor(np.asarray(x, dtype=float) + 0.5)


def box_muller(rng: np.random.Generator, size: int) -> np.ndarray:
    """Standard normal deviates from pairs of uniforms in (0, 1].

    The first uniform of each pair feeds the log, so it is drawn as
    1 - U[0, 1) to keep log(0) out of reach.
    """

    u1 = 1.0 - rng.random(size)
    u2 = 1.0 - rng.random(size)
    return np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)


def add_noise(true_value: float, std_dev: float, rng: np.random.Generator) -> float:
    if std_dev == 0:
        return float(true_value)
    return float(true_value + std_dev * box_muller(rng, 1)[0])


def quantize(value: float, resolution: float) -> float:
    """Nearest multiple of the display resolution."""
    if not resolution > 0:
        raise ConfigError("instrument.scale_resolution", f"must be > 0, got {resolution}")
    return float(round_half_up(value / resolution) * resolution)
