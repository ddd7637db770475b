from __future__ import annotations

from typing import Dict, Iterable, Tuple

import numpy as np
import pandas as pd

from scalesim.simulation.counting import run_simulation
from scalesim.simulation.errors import DegenerateRunError
from scalesim.simulation.types import SimulationConfig
from scalesim.simulation.validate import validate_config

SWEEP_COLUMNS = [
    "seed",
    "degenerate",
    "max_abs_deviation",
    "max_abs_deviation_percent",
    "final_deviation",
    "final_deviation_percent",
]
SWEEP_METRICS = tuple(c for c in SWEEP_COLUMNS if c not in ("seed", "degenerate"))


def run_seed_sweep(config: SimulationConfig, seeds: Iterable[int]) -> pd.DataFrame:
    """Run one simulation per seed, each on its own np.random.default_rng(seed) stream.

    A degenerate seed is kept as a row with NaN statistics so the sweep
    still reports how often the configuration cannot count at all.
    """

    validate_config(config)
    rows = []
    for seed in seeds:
        rng = np.random.default_rng(int(seed))
        try:
            report = run_simulation(config, rng)
        except DegenerateRunError:
            rows.append(
                {
                    "seed": int(seed),
                    "degenerate": True,
                    "max_abs_deviation": np.nan,
                    "max_abs_deviation_percent": np.nan,
                    "final_deviation": np.nan,
                    "final_deviation_percent": np.nan,
                }
            )
            continue
        rows.append(
            {
                "seed": int(seed),
                "degenerate": False,
                "max_abs_deviation": float(report.max_abs_deviation),
                "max_abs_deviation_percent": float(report.max_abs_deviation_percent),
                "final_deviation": float(report.final_deviation) if report.final_deviation is not None else np.nan,
                "final_deviation_percent": (
                    float(report.final_deviation_percent) if report.final_deviation_percent is not None else np.nan
                ),
            }
        )
    return pd.DataFrame(rows, columns=SWEEP_COLUMNS)


def summarize_sweep(
    draws: pd.DataFrame,
    *,
    alpha: float = 0.05,
    metrics: Iterable[str] = SWEEP_METRICS,
) -> Dict[str, Tuple[float, float, float]]:
    """Return metric -> (mean, lower, upper) percentile interval across seeds."""

    if draws.empty:
        return {m: (np.nan, np.nan, np.nan) for m in metrics}
    lo = float(100.0 * (alpha / 2.0))
    hi = float(100.0 * (1.0 - alpha / 2.0))
    out: Dict[str, Tuple[float, float, float]] = {}
    for m in metrics:
        vals = draws[m].dropna().to_numpy(dtype=float)
        if vals.size == 0:
            out[m] = (np.nan, np.nan, np.nan)
        else:
            out[m] = (float(np.mean(vals)), float(np.percentile(vals, lo)), float(np.percentile(vals, hi)))
    return out


def sweep_summary_frame(draws: pd.DataFrame, *, alpha: float = 0.05) -> pd.DataFrame:
    summary = summarize_sweep(draws, alpha=alpha)
    n_degenerate = int(draws["degenerate"].sum()) if not draws.empty else 0
    rows = [
        {
            "metric": m,
            "mean": mean,
            "ci_low": low,
            "ci_high": high,
            "alpha": alpha,
            "n_seeds": len(draws),
            "n_degenerate": n_degenerate,
        }
        for m, (mean, low, high) in summary.items()
    ]
    return pd.DataFrame(rows)
