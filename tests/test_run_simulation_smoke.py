import json
import subprocess
import sys
from pathlib import Path

import pandas as pd


def test_run_simulation_smoke(tmp_path: Path):
    repo_root = Path(__file__).resolve().parents[1]

    cmd = [
        sys.executable,
        str(repo_root / "scripts" / "01_run_simulation.py"),
        "--total-parts",
        "1000",
        "--calibration-parts",
        "10",
        "--noise-std",
        "0.05",
        "--seed",
        "2026",
        "--run-id",
        "smoke",
        "--outdir",
        str(tmp_path),
    ]
    subprocess.run(cmd, cwd=repo_root, check=True)

    checkpoints_csv = tmp_path / "tables" / "checkpoints_smoke.csv"
    summary_csv = tmp_path / "tables" / "summary_smoke.csv"
    run_json = tmp_path / "logs" / "run_smoke.json"

    assert checkpoints_csv.exists()
    df = pd.read_csv(checkpoints_csv)
    assert df.columns.tolist() == ["actual_count", "displayed_count", "measurable", "deviation", "deviation_percent"]
    assert df["actual_count"].tolist() == [100 * i for i in range(1, 11)]

    summary = pd.read_csv(summary_csv)
    assert summary.loc[0, "max_abs_deviation"] == df["deviation"].abs().max()

    payload = json.loads(run_json.read_text(encoding="utf-8"))
    assert payload["seed"] == 2026
    assert payload["config"]["weight_model"]["kind"] == "discrete"
    assert payload["config"]["total_parts"] == 1000


def test_run_simulation_rejects_bad_probabilities(tmp_path: Path):
    repo_root = Path(__file__).resolve().parents[1]

    cmd = [
        sys.executable,
        str(repo_root / "scripts" / "01_run_simulation.py"),
        "--weights",
        "2.1,2.2",
        "--probabilities",
        "0.5,0.3,0.2",
        "--outdir",
        str(tmp_path),
    ]
    proc = subprocess.run(cmd, cwd=repo_root, capture_output=True, text=True)
    assert proc.returncode != 0
    assert "must match" in proc.stderr
    assert not (tmp_path / "tables").exists()


def test_run_simulation_rejects_infinite_resolution(tmp_path: Path):
    repo_root = Path(__file__).resolve().parents[1]

    cmd = [
        sys.executable,
        str(repo_root / "scripts" / "01_run_simulation.py"),
        "--resolution",
        "inf",
        "--outdir",
        str(tmp_path),
    ]
    proc = subprocess.run(cmd, cwd=repo_root, capture_output=True, text=True)
    assert proc.returncode == 1
    assert "instrument.scale_resolution" in proc.stderr
    assert "Traceback" not in proc.stderr
