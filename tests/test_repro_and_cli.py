import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from gameplan.cli import main

SRC = Path(__file__).resolve().parents[1] / "src"


def _run_cli(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    exe = [sys.executable, "-m", "gameplan.cli"]
    return subprocess.run(exe + args, cwd=cwd, capture_output=True, text=True, env=env)


def test_cli_moves_js_and_lookup(tmp_path: Path):
    r = _run_cli(["moves"], cwd=tmp_path)
    assert r.returncode == 0
    assert r.stdout.startswith("function getMoves() { return {")
    r = _run_cli(["lookup", "--board", "200000000"], cwd=tmp_path)
    assert r.returncode == 0
    s = r.stdout + r.stderr
    assert "key=2" in s and "move=" in s and "score=" in s


def test_cli_moves_json_in_process(capsys):
    assert main(["moves", "--format", "json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert len(data) == 2097
    assert "0" not in data


def test_cli_moves_csv_in_process(capsys):
    assert main(["moves", "--format", "csv"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == "key,board_state,recommended_move,score"
    assert len(lines) == 2098


def test_cli_export(tmp_path: Path):
    outdir = tmp_path / "cli_out"
    r = _run_cli(["export", "--out", str(outdir), "--format", "js"], cwd=tmp_path)
    assert r.returncode == 0
    assert (outdir / "recommended_moves.js").exists()
    manifest = json.loads((outdir / "manifest.json").read_text())
    assert manifest["cli_argv"] == ["export", "--out", str(outdir), "--format", "js"]


@pytest.mark.parametrize("bad", ["abc", "012345678", "0123456789", "12345678x", "00000000"])
def test_cli_error_invalid_boards(bad: str):
    assert main(["lookup", "--board", bad]) == 2


@pytest.mark.parametrize("board", [
    "000000000",  # Cross to move
    "222110000",  # Cross already won
    "111000000",  # never reached in a legal game
])
def test_cli_lookup_without_recommendation(board: str):
    assert main(["lookup", "--board", board]) == 1


def test_cli_version_and_help(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == "0.1.0"
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out
