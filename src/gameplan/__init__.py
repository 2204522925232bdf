"""gameplan package.

Precomputes Circle's recommended reply for every reachable tic-tac-toe
board by averaging terminal outcomes over the full game DAG.

Convenience imports are exposed for common workflows.
"""

from .encoding import position_to_int
from .game_basics import CellState, OccupiedCellError, Position
from .scoring import is_winner, position_score
from .tree import PositionTree, PositionTreeBuilder, get_recommended_moves

__version__ = "0.1.0"

__all__ = [
    "CellState",
    "OccupiedCellError",
    "Position",
    "PositionTree",
    "PositionTreeBuilder",
    "get_recommended_moves",
    "is_winner",
    "position_score",
    "position_to_int",
]
