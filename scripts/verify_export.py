#!/usr/bin/env python3
"""
Verify a game plan export directory.

Checks performed:
- manifest.json exists and is parseable
- Row count in manifest is positive
- Files listed in manifest exist and their SHA256 checksums match
- CSV / JSON / JS row counts match manifest.row_counts
- Every recommended move in the CSV points at an empty cell of its board

Exit codes:
 0 on success, non-zero on any validation failure.
"""
from __future__ import annotations

import argparse
import csv
import json
import re
import sys
from pathlib import Path
from typing import Any, Dict, List

from gameplan.datasets import sha256_file


def check_csv(path: Path, expected: int) -> List[str]:
    errors: List[str] = []
    with path.open('r', newline='') as f:
        rows = list(csv.DictReader(f))
    if len(rows) != expected:
        errors.append(f"csv row count mismatch: manifest={expected} actual={len(rows)}")
    for r in rows:
        board, move = r['board_state'], int(r['recommended_move'])
        if board[move] != '0':
            errors.append(f"key {r['key']}: move {move} is not an empty cell of {board}")
    return errors


def count_entries(label: str, path: Path) -> int:
    text = path.read_text()
    if label == "json":
        return len(json.loads(text))
    return len(re.findall(r"\d+:\d+,", text))


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Verify game plan export")
    ap.add_argument("out", type=Path, help="Export directory (contains manifest.json)")
    ns = ap.parse_args(argv)
    manifest_path = ns.out / "manifest.json"
    if not manifest_path.exists():
        print(f"ERROR: manifest not found: {manifest_path}", file=sys.stderr)
        return 2
    try:
        manifest = json.loads(manifest_path.read_text())
    except json.JSONDecodeError as e:
        print(f"ERROR: failed to parse manifest: {e}", file=sys.stderr)
        return 2

    errors: List[str] = []
    files: Dict[str, Any] = manifest.get("files", {}) or {}
    checksums: Dict[str, Any] = manifest.get("checksums", {}) or {}
    expected = (manifest.get("row_counts", {}) or {}).get("recommended_moves")
    if not isinstance(expected, int) or expected <= 0:
        errors.append("manifest.row_counts.recommended_moves must be a positive integer")
        expected = -1

    for label, name in files.items():
        fp = ns.out / name
        if not fp.exists():
            errors.append(f"missing file listed in manifest: {label} -> {fp}")
            continue
        want = checksums.get(label)
        have = sha256_file(fp)
        if want != have:
            errors.append(f"checksum mismatch for {label}: manifest={want} computed={have}")
        if label == "csv":
            errors.extend(check_csv(fp, expected))
        elif label in ("json", "js"):
            n = count_entries(label, fp)
            if n != expected:
                errors.append(f"{label} entry count mismatch: manifest={expected} actual={n}")

    for e in errors:
        print(f"ERROR: {e}", file=sys.stderr)
    if errors:
        return 1
    print("OK: export verified", file=sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
