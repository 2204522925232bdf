from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path

from .datasets import FORMATS, CSV_FIELDS, ExportArgs, run_export
from .encoding import position_to_int
from .game_basics import Position
from .paths import data_out
from .render import render_js, render_json, table_rows
from .tracking import tracking_run
from .tree import PositionTreeBuilder


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gameplan", description="Tic-tac-toe game plan for Circle")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )

    p_moves = sub.add_parser("moves", help="Print the recommended move table")
    p_moves.add_argument(
        "--format",
        choices=["js", "json", "csv"],
        default="js",
        help="Output format: js lookup function (default), json object, csv rows",
    )

    p_look = sub.add_parser(
        "lookup",
        help="Recommended move for a Circle-to-move board (9 digits, 0=empty,1=O,2=X)",
    )
    p_look.add_argument("--board", required=True, help="Board string, e.g., 200000000")

    p_export = sub.add_parser("export", help="Export the table with a manifest")
    p_export.add_argument(
        "--out", type=Path, default=None, help="Output directory (default: $GAMEPLAN_OUT_DIR or data_out)"
    )
    p_export.add_argument(
        "--format",
        choices=list(FORMATS),
        default="csv",
        help="Export format: csv (default), json, js, parquet, all; parquet requires pandas+pyarrow",
    )
    p_export.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_export.add_argument(
        "--log-dir",
        type=Path,
        default=Path("runs"),
        help="Directory for tracking logs/artifacts (for mlflow local backend)",
    )
    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "pandas", "pyarrow", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _cmd_moves(fmt: str) -> int:
    builder = PositionTreeBuilder()
    moves = builder.get_recommended_moves()
    if fmt == "js":
        print(render_js(moves))
    elif fmt == "json":
        print(render_json(moves))
    else:
        w = csv.DictWriter(sys.stdout, fieldnames=CSV_FIELDS)
        w.writeheader()
        for row in table_rows(builder):
            w.writerow(row)
    logging.debug("Printed %d recommendations", len(moves))
    return 0


def _cmd_lookup(raw: str) -> int:
    try:
        position = Position.from_string(raw.strip())
    except ValueError:
        logging.error("Invalid board string. Must be 9 chars of 0/1/2.")
        return 2
    builder = PositionTreeBuilder()
    moves = builder.get_recommended_moves()
    key = position_to_int(position)
    if key not in moves:
        logging.error("No recommendation: board is terminal, unreachable, or not Circle to move.")
        return 1
    logging.info("key=%d move=%d score=%.6f", key, moves[key], builder.cache[key].score)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    if getattr(ns, "version", False):
        from . import __version__

        print(__version__)
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if ns.cmd == "moves":
        return _cmd_moves(ns.format)

    if ns.cmd == "lookup":
        return _cmd_lookup(ns.board)

    if ns.cmd == "export":
        out = ns.out if ns.out is not None else data_out()
        with tracking_run(ns.tracking == "mlflow", run_name="gameplan_export", log_dir=ns.log_dir) as tracker:
            try:
                res = run_export(ExportArgs(
                    out=out,
                    format=ns.format,
                    verbose=ns.verbose,
                    cli_argv=list(argv) if argv is not None else sys.argv[1:],
                ), tracker=tracker)
            except RuntimeError as e:
                logging.error("%s", e)
                return 2
        logging.info("Exported table to: %s", res)
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
