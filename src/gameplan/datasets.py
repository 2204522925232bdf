"""
Export of the recommendation table with a provenance manifest.

Writes the table in one or more formats plus ``manifest.json`` holding row
counts, checksums, environment versions and summary statistics.
"""
from __future__ import annotations

import csv
import hashlib
import importlib.util
import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

from .game_basics import TOTAL_CELLS
from .paths import get_git_commit, get_git_is_dirty
from .render import render_js, render_json, table_rows
from .tracking import Tracker
from .tree import PositionTreeBuilder

FORMATS = ("csv", "json", "js", "parquet", "all")

DATASET_VERSION = "1.0.0"

CSV_FIELDS = ['key', 'board_state', 'recommended_move', 'score']


@dataclass
class ExportArgs:
    out: Path
    format: str = "csv"  # one of FORMATS
    verbose: bool = False
    cli_argv: List[str] | None = None


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open('rb') as f:
        for chunk in iter(lambda: f.read(8192), b''):
            h.update(chunk)
    return h.hexdigest()


def table_summary(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    if not rows:
        return {"move_histogram": [0] * TOTAL_CELLS, "score": None}
    moves = np.array([r['recommended_move'] for r in rows], dtype=np.int64)
    scores = np.array([r['score'] for r in rows], dtype=np.float64)
    return {
        "move_histogram": np.bincount(moves, minlength=TOTAL_CELLS).tolist(),
        "score": {
            "mean": float(scores.mean()),
            "std": float(scores.std()),
            "min": float(scores.min()),
            "max": float(scores.max()),
        },
    }


def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    with path.open('w', newline='') as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        w.writeheader()
        for r in rows:
            w.writerow(r)


def _have_parquet() -> bool:
    return (importlib.util.find_spec('pandas') is not None
            and importlib.util.find_spec('pyarrow') is not None)


def _package_versions() -> Dict[str, str]:
    versions: Dict[str, str] = {}
    for pkg in ["numpy", "pandas", "pyarrow"]:
        if importlib.util.find_spec(pkg) is None:
            continue
        mod = __import__(pkg)
        ver = getattr(mod, "__version__", None)
        if ver:
            versions[pkg] = ver
    return versions


def run_export(args: ExportArgs, tracker: Tracker | None = None) -> Path:
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="[%(levelname)s] %(message)s")
    fmt = (args.format or "csv").lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unknown export format: {args.format}")
    wanted = {"csv", "json", "js", "parquet"} if fmt == "all" else {fmt}

    if "parquet" in wanted and not _have_parquet():
        msg = ("Parquet dependencies not available (install pandas and pyarrow). "
               "Use pip install .[parquet] to enable parquet support.")
        if fmt == "parquet":
            raise RuntimeError(msg)
        logging.warning("%s Skipping parquet output.", msg)
        wanted.discard("parquet")

    args.out.mkdir(parents=True, exist_ok=True)
    logging.info("Building position tree...")
    builder = PositionTreeBuilder()
    moves = builder.get_recommended_moves()
    rows = table_rows(builder)
    logging.info("Built %d nodes, %d recommendations", len(builder.cache), len(moves))

    files: Dict[str, Path] = {}
    if "csv" in wanted:
        files["csv"] = args.out / "recommended_moves.csv"
        _write_csv(files["csv"], rows)
    if "json" in wanted:
        files["json"] = args.out / "recommended_moves.json"
        files["json"].write_text(render_json(moves))
    if "js" in wanted:
        files["js"] = args.out / "recommended_moves.js"
        files["js"].write_text(render_js(moves))
    if "parquet" in wanted:
        import pandas as pd  # type: ignore

        files["parquet"] = args.out / "recommended_moves.parquet"
        pd.DataFrame(rows, columns=CSV_FIELDS).to_parquet(files["parquet"])
    for label, path in files.items():
        logging.info("Wrote %s: %s", label, path)

    manifest = {
        "dataset_version": DATASET_VERSION,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "args": {"format": fmt},
        "cli_argv": args.cli_argv,
        "git_commit": get_git_commit(),
        "git_is_dirty": get_git_is_dirty(),
        "python": {
            "python_version": sys.version.split(" ")[0],
            "packages": _package_versions(),
        },
        "row_counts": {"recommended_moves": len(rows), "nodes": len(builder.cache)},
        "summary": table_summary(rows),
        "files": {label: path.name for label, path in files.items()},
        "checksums": {label: sha256_file(path) for label, path in files.items()},
    }
    manifest_path = args.out / "manifest.json"
    manifest_path.write_text(json.dumps(manifest, indent=2))
    logging.info("Wrote manifest.json")

    if tracker is not None:
        tracker.log_params({"format": fmt, "rows": len(rows)})
        tracker.log_metrics({"nodes": float(len(builder.cache)),
                             "rows": float(len(rows))})
        tracker.log_artifact(manifest_path)
        for path in files.values():
            tracker.log_artifact(path)
    return args.out
