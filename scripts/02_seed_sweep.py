from __future__ import annotations

import argparse
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from scalesim.cli_args import add_config_arguments, config_from_args  # noqa: E402
from scalesim.config import EXPERIMENT_NAMESPACE, OUTPUTS_DIR, RANDOM_SEEDS, RECORDED_PACKAGES, SWEEP_ALPHA  # noqa: E402
from scalesim.data.parsing import parse_seed_list  # noqa: E402
from scalesim.evaluation.sweep import run_seed_sweep, sweep_summary_frame  # noqa: E402
from scalesim.reporting.tables import config_to_dict  # noqa: E402
from scalesim.simulation.errors import ConfigError  # noqa: E402
from scalesim.utils.logging import package_versions, sha256_df, write_json  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Repeat the counting-scale simulation across seeds.")
    add_config_arguments(parser)
    parser.add_argument(
        "--seeds",
        type=str,
        default=",".join(str(s) for s in RANDOM_SEEDS),
        help="Comma-separated seeds (default: RANDOM_SEEDS from scalesim/config.py).",
    )
    parser.add_argument("--alpha", type=float, default=SWEEP_ALPHA, help="Two-sided percentile interval level.")
    parser.add_argument("--outdir", type=Path, default=OUTPUTS_DIR, help="Output directory (default: outputs/).")
    args = parser.parse_args()

    if not 0 < args.alpha < 1:
        raise SystemExit("--alpha must be in (0, 1).")
    try:
        seeds = parse_seed_list(args.seeds)
    except ValueError as exc:
        raise SystemExit(str(exc))

    config = config_from_args(args)
    try:
        draws = run_seed_sweep(config, seeds)
    except ConfigError as exc:
        raise SystemExit(str(exc))
    summary = sweep_summary_frame(draws, alpha=args.alpha)

    out_tables = args.outdir / "tables"
    out_tables.mkdir(parents=True, exist_ok=True)
    draws_path = out_tables / f"seed_sweep_{args.weight_model}.csv"
    summary_path = out_tables / f"seed_sweep_summary_{args.weight_model}.csv"
    draws.to_csv(draws_path, index=False)
    summary.to_csv(summary_path, index=False)

    meta = {
        "experiment_namespace": EXPERIMENT_NAMESPACE,
        "seeds": seeds,
        "alpha": args.alpha,
        "random_stream": "one np.random.default_rng(seed) per seed",
        "config": config_to_dict(config),
        "n_degenerate": int(draws["degenerate"].sum()),
        "artifacts": {
            "seed_sweep_csv": str(draws_path),
            "seed_sweep_summary_csv": str(summary_path),
        },
        "seed_sweep_sha256": sha256_df(draws),
        "runtime": {
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            "python_version": sys.version,
            "platform": platform.platform(),
            "argv": sys.argv,
            "packages": package_versions(RECORDED_PACKAGES),
        },
    }
    meta_path = args.outdir / "logs" / f"seed_sweep_{args.weight_model}.json"
    write_json(meta_path, meta)

    print(f"Wrote {draws_path}")
    print(f"Wrote {summary_path}")
    print(f"Wrote {meta_path}")


if __name__ == "__main__":
    main()
