"""
Exhaustive position tree with a transposition table.

Scoring is a uniform expectation, not minimax:
- A terminal node scores its outcome (+1 Cross win, -1 Circle win, 0 draw).
- Any other node scores the plain mean of its children, whoever is to move.
- Circle's recommended move is the child with the lowest score; scanning in
  ascending cell order, only a strictly lower score replaces the current
  pick, so ties go to the lowest cell index.

Nodes are cached by board key, so boards reached through different move
orders share one node and the structure is a DAG rather than a tree.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional, Tuple

from .encoding import position_to_int
from .game_basics import CellState, Position, other_side
from .scoring import is_terminal, position_score


class PositionTree:
    def __init__(self, position: Position, who_moves: CellState,
                 children: Dict[int, "PositionTree"]):
        self.position = position
        self.who_moves = who_moves
        self.children = children
        self.recommended_move: Optional[int] = None

        if children:
            self.score = sum(c.score for c in children.values()) / len(children)
            if who_moves == CellState.CIRCLE:
                # reached after Cross's move; Circle wants the lowest score
                best: Optional[int] = None
                for cell in sorted(children):
                    if best is None or children[cell].score < children[best].score:
                        best = cell
                self.recommended_move = best
        else:
            self.score = position_score(position)

    @property
    def is_terminal(self) -> bool:
        return not self.children

    def __repr__(self) -> str:
        return (f"PositionTree(board={self.position.serialize()}, "
                f"who_moves={self.who_moves.name}, score={self.score:.6f}, "
                f"recommended_move={self.recommended_move})")


class PositionTreeBuilder:
    """Builds the full game DAG once and extracts Circle's move table.

    The cache is owned by the builder; use a fresh builder per computation.
    """

    def __init__(self) -> None:
        self.cache: Dict[int, PositionTree] = {}
        self.stats = {"hits": 0, "misses": 0}

    def get_recommended_moves(self) -> Dict[int, int]:
        self.build_tree(Position(), CellState.CROSS)
        logging.debug(
            "Built %d nodes (cache hits=%d misses=%d)",
            len(self.cache), self.stats["hits"], self.stats["misses"],
        )
        return {key: node.recommended_move
                for key, node in self.nodes_to_move(CellState.CIRCLE)
                if node.recommended_move is not None}

    def nodes_to_move(self, side: CellState) -> Iterator[Tuple[int, PositionTree]]:
        for key in sorted(self.cache):
            node = self.cache[key]
            if node.who_moves == side:
                yield key, node

    def build_tree(self, position: Position, who_moves: CellState) -> PositionTree:
        n = position_to_int(position)
        tree = self.cache.get(n)
        if tree is not None:
            self.stats["hits"] += 1
            return tree
        self.stats["misses"] += 1
        tree = self._build_tree_no_cache(position, who_moves)
        self.cache[n] = tree
        return tree

    def _build_tree_no_cache(self, position: Position, who_moves: CellState) -> PositionTree:
        if is_terminal(position):
            return PositionTree(position, who_moves, {})

        next_side = other_side(who_moves)
        children: Dict[int, PositionTree] = {}
        for cell in position.empty_cells():
            children[cell] = self.build_tree(position.move(cell, who_moves), next_side)
        return PositionTree(position, who_moves, children)


def get_recommended_moves() -> Dict[int, int]:
    """Key -> recommended cell for every non-terminal Circle-to-move board."""
    return PositionTreeBuilder().get_recommended_moves()


def recommended_move_for(position: Position,
                         moves: Optional[Dict[int, int]] = None) -> Optional[int]:
    """Recommended cell for one board, or None when the board has no entry.

    Pass a table from ``get_recommended_moves`` when looking up many boards;
    without one, the whole tree is rebuilt for this single lookup.
    """
    if moves is None:
        moves = get_recommended_moves()
    return moves.get(position_to_int(position))
