from __future__ import annotations

import argparse
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path

import numpy as np
import pandas as pd


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from scalesim.cli_args import add_config_arguments, config_from_args  # noqa: E402
from scalesim.config import DEFAULT_SEED, EXPERIMENT_NAMESPACE, OUTPUTS_DIR, RECORDED_PACKAGES  # noqa: E402
from scalesim.reporting.tables import config_to_dict, report_to_frame, summary_row  # noqa: E402
from scalesim.simulation.counting import run_simulation  # noqa: E402
from scalesim.simulation.errors import ConfigError, DegenerateRunError  # noqa: E402
from scalesim.utils.logging import package_versions, sha256_df, write_json  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Simulate a piece-counting scale: displayed vs. actual counts.")
    add_config_arguments(parser)
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Seed for np.random.default_rng.")
    parser.add_argument("--outdir", type=Path, default=OUTPUTS_DIR, help="Output directory (default: outputs/).")
    parser.add_argument("--run-id", type=str, default=None, help="Optional run id; otherwise deterministic.")
    args = parser.parse_args()

    config = config_from_args(args)
    rng = np.random.default_rng(args.seed)
    try:
        report = run_simulation(config, rng)
    except (ConfigError, DegenerateRunError) as exc:
        raise SystemExit(str(exc))

    run_id = args.run_id or f"{EXPERIMENT_NAMESPACE}_seed{args.seed}_{args.weight_model}"
    out_tables = args.outdir / "tables"
    out_logs = args.outdir / "logs"
    out_tables.mkdir(parents=True, exist_ok=True)

    checkpoints_df = report_to_frame(report)
    checkpoints_path = out_tables / f"checkpoints_{run_id}.csv"
    checkpoints_df.to_csv(checkpoints_path, index=False)

    summary = summary_row(report)
    summary_path = out_tables / f"summary_{run_id}.csv"
    pd.DataFrame([{"run_id": run_id, "seed": args.seed, **summary}]).to_csv(summary_path, index=False)

    meta = {
        "experiment_namespace": EXPERIMENT_NAMESPACE,
        "run_id": run_id,
        "seed": args.seed,
        "random_stream": "single np.random.default_rng(seed) consumed in checkpoint order",
        "config": config_to_dict(config),
        "summary": summary,
        "artifacts": {
            "checkpoints_csv": str(checkpoints_path),
            "summary_csv": str(summary_path),
        },
        "checkpoints_sha256": sha256_df(checkpoints_df),
        "runtime": {
            "timestamp_utc": datetime.now(timezone.utc).isoformat(),
            "python_version": sys.version,
            "platform": platform.platform(),
            "argv": sys.argv,
            "packages": package_versions(RECORDED_PACKAGES),
        },
    }
    meta_path = out_logs / f"run_{run_id}.json"
    write_json(meta_path, meta)

    print(
        f"Max deviation: {report.max_abs_deviation} parts "
        f"({report.max_abs_deviation_percent:.2f}%) over {len(report.checkpoints)} checkpoints"
    )
    print(f"Wrote {checkpoints_path}")
    print(f"Wrote {summary_path}")
    print(f"Wrote {meta_path}")


if __name__ == "__main__":
    main()
