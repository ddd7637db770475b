from __future__ import annotations

import argparse

from scalesim.config import (
    DEFAULT_CALIBRATION_SAMPLE_SIZE,
    DEFAULT_MEASUREMENT_NOISE_STD,
    DEFAULT_NORMAL_MEAN,
    DEFAULT_NORMAL_STDDEV,
    DEFAULT_SCALE_RESOLUTION,
    DEFAULT_TOTAL_PARTS,
    DEFAULT_WEIGHT_MODEL,
    DEFAULT_WEIGHT_PROBABILITIES,
    DEFAULT_WEIGHT_VALUES,
)
from scalesim.data.parsing import build_weight_model, parse_number_list, probabilities_from_counts
from scalesim.simulation.types import InstrumentConfig, SimulationConfig


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--total-parts", type=int, default=DEFAULT_TOTAL_PARTS, help="Largest part count simulated.")
    parser.add_argument(
        "--calibration-parts",
        type=int,
        default=DEFAULT_CALIBRATION_SAMPLE_SIZE,
        help="Parts placed on the scale to learn the average piece weight.",
    )
    parser.add_argument("--weight-model", choices=["discrete", "normal"], default=DEFAULT_WEIGHT_MODEL)
    parser.add_argument("--weights", type=str, default=DEFAULT_WEIGHT_VALUES, help="Comma-separated weight values.")
    parser.add_argument(
        "--probabilities",
        type=str,
        default=DEFAULT_WEIGHT_PROBABILITIES,
        help="Comma-separated probabilities (renormalized if they do not sum to 1).",
    )
    parser.add_argument(
        "--probability-counts",
        type=str,
        default=None,
        help="Optional: comma-separated tally per weight value; overrides --probabilities.",
    )
    parser.add_argument("--mean", type=float, default=DEFAULT_NORMAL_MEAN, help="Normal model mean weight.")
    parser.add_argument("--stddev", type=float, default=DEFAULT_NORMAL_STDDEV, help="Normal model weight stddev.")
    parser.add_argument("--resolution", type=float, default=DEFAULT_SCALE_RESOLUTION, help="Scale display step.")
    parser.add_argument(
        "--noise-std",
        type=float,
        default=DEFAULT_MEASUREMENT_NOISE_STD,
        help="Gaussian sensor noise stddev added to each reading.",
    )


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Translate CLI fields into a SimulationConfig; bad input aborts with SystemExit."""

    probabilities_text = args.probabilities
    try:
        if args.probability_counts is not None:
            counts = parse_number_list(args.probability_counts, "probability counts")
            probabilities_text = ",".join(repr(p) for p in probabilities_from_counts(counts))
        model = build_weight_model(
            args.weight_model,
            values_text=args.weights,
            probabilities_text=probabilities_text,
            mean=args.mean,
            stddev=args.stddev,
        )
    except ValueError as exc:
        raise SystemExit(str(exc))

    return SimulationConfig(
        total_parts=args.total_parts,
        calibration_sample_size=args.calibration_parts,
        weight_model=model,
        instrument=InstrumentConfig(scale_resolution=args.resolution, measurement_noise_std=args.noise_std),
    )
