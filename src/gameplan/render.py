"""
Text renderings of the recommendation table.

All renderings list keys in ascending order so output is byte-stable.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

from .game_basics import CellState
from .tree import PositionTreeBuilder


def render_js(moves: Dict[int, int]) -> str:
    body = ''.join(f"{key}:{moves[key]}," for key in sorted(moves))
    return "function getMoves() { return {" + body + "};}"


def render_json(moves: Dict[int, int]) -> str:
    return json.dumps({str(key): moves[key] for key in sorted(moves)}, indent=2)


def table_rows(builder: PositionTreeBuilder) -> List[Dict[str, Any]]:
    """One row per board in the table of an already built ``builder``."""
    rows: List[Dict[str, Any]] = []
    for key, node in builder.nodes_to_move(CellState.CIRCLE):
        if node.recommended_move is None:
            continue
        rows.append({
            'key': key,
            'board_state': node.position.serialize(),
            'recommended_move': node.recommended_move,
            'score': node.score,
        })
    return rows
