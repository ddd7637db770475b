from __future__ import annotations

from dataclasses import asdict
from typing import Dict

import numpy as np
import pandas as pd

from scalesim.simulation.types import (
    DiscreteWeights,
    Finite,
    NormalWeights,
    SimulationConfig,
    SimulationReport,
)

CHECKPOINT_COLUMNS = ["actual_count", "displayed_count", "measurable", "deviation", "deviation_percent"]


def report_to_frame(report: SimulationReport) -> pd.DataFrame:
    """One row per checkpoint, in iteration order.

    Unmeasurable checkpoints keep the row with displayed_count/deviation as NA.
    """

    rows = []
    for r in report.checkpoints:
        shown = r.displayed_count.value if isinstance(r.displayed_count, Finite) else pd.NA
        dev = r.deviation if r.deviation is not None else pd.NA
        pct = round(r.deviation / r.actual_count * 100.0, 6) if r.deviation is not None else np.nan
        rows.append(
            {
                "actual_count": r.actual_count,
                "displayed_count": shown,
                "measurable": r.measurable,
                "deviation": dev,
                "deviation_percent": pct,
            }
        )
    df = pd.DataFrame(rows, columns=CHECKPOINT_COLUMNS)
    df["displayed_count"] = df["displayed_count"].astype("Int64")
    df["deviation"] = df["deviation"].astype("Int64")
    return df


def summary_row(report: SimulationReport) -> Dict[str, object]:
    n_unmeasurable = sum(1 for r in report.checkpoints if not r.measurable)
    return {
        "n_checkpoints": len(report.checkpoints),
        "n_unmeasurable": n_unmeasurable,
        "max_abs_deviation": report.max_abs_deviation,
        "max_abs_deviation_percent": round(report.max_abs_deviation_percent, 6),
        "final_deviation": report.final_deviation,
        "final_deviation_percent": (
            round(report.final_deviation_percent, 6) if report.final_deviation_percent is not None else None
        ),
    }


def config_to_dict(config: SimulationConfig) -> Dict[str, object]:
    out = asdict(config)
    if isinstance(config.weight_model, DiscreteWeights):
        out["weight_model"] = {"kind": "discrete", **out["weight_model"]}
    elif isinstance(config.weight_model, NormalWeights):
        out["weight_model"] = {"kind": "normal", **out["weight_model"]}
    return out
