#!/usr/bin/env python3
from __future__ import annotations

import argparse
import math
import statistics as stats
import time
from pathlib import Path
from typing import List, Tuple

from gameplan.tracking import tracking_run
from gameplan.tree import PositionTreeBuilder


def ci95(values: List[float]) -> Tuple[float, float]:
    if not values:
        return (float("nan"), float("nan"))
    m = stats.fmean(values)
    s = stats.pstdev(values) if len(values) > 1 else 0.0
    half = 1.96 * (s / math.sqrt(len(values)))
    return m, half


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Time full tree builds")
    ap.add_argument("--repeats", type=int, default=10)
    ap.add_argument("--tracking", choices=["none", "mlflow"], default="none")
    ap.add_argument("--log-dir", type=Path, default=Path("runs"))
    ns = ap.parse_args(argv)

    with tracking_run(ns.tracking == "mlflow", run_name="benchmarks", log_dir=ns.log_dir) as tracker:
        tracker.log_params({"repeats": ns.repeats})
        build_times: List[float] = []
        sizes = set()
        for _ in range(ns.repeats):
            t0 = time.perf_counter()
            builder = PositionTreeBuilder()
            moves = builder.get_recommended_moves()
            build_times.append(time.perf_counter() - t0)
            sizes.add((len(builder.cache), len(moves)))
        if len(sizes) != 1:
            print(f"ERROR: non-deterministic table sizes: {sorted(sizes)}")
            return 1
        m, h = ci95(build_times)
        tracker.log_metrics({"build_mean_s": m, "build_ci95_half_s": h})
        nodes, entries = sizes.pop()
        print(f"build: mean={m:.4f}s ± {h:.4f}s (95% CI, N={ns.repeats}) nodes={nodes} entries={entries}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
