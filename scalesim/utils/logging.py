from __future__ import annotations

import hashlib
import json
from importlib import metadata
from pathlib import Path
from typing import Dict, Iterable, Optional

import pandas as pd


def write_json(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True, default=str), encoding="utf-8")


def package_versions(packages: Iterable[str]) -> Dict[str, Optional[str]]:
    out: Dict[str, Optional[str]] = {}
    for pkg in packages:
        try:
            out[pkg] = metadata.version(pkg)
        except metadata.PackageNotFoundError:
            out[pkg] = None
    return out


def sha256_df(df: pd.DataFrame) -> str:
    h = hashlib.sha256()
    h.update("||".join(df.columns.astype(str).tolist()).encode("utf-8"))
    h.update("||".join(map(str, df.dtypes.tolist())).encode("utf-8"))
    row_hashes = pd.util.hash_pandas_object(df, index=True).to_numpy()
    h.update(row_hashes.tobytes())
    return h.hexdigest()
