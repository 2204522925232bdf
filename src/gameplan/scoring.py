"""
Terminal outcome scoring from Cross's point of view.

- +1.0 when Cross owns a line, -1.0 when Circle does, 0.0 otherwise.
- A 0.0 score only means "draw" on a board already known to be terminal.
"""
from .game_basics import CellState, Position

WIN_PATTERNS = [
    [0, 1, 2], [3, 4, 5], [6, 7, 8],
    [0, 3, 6], [1, 4, 7], [2, 5, 8],
    [0, 4, 8], [2, 4, 6]
]


def is_winner(position: Position, side: CellState) -> bool:
    return any(all(position[i] == side for i in pattern) for pattern in WIN_PATTERNS)


def position_score(position: Position) -> float:
    if is_winner(position, CellState.CROSS):
        return 1.0
    if is_winner(position, CellState.CIRCLE):
        return -1.0
    return 0.0


def is_terminal(position: Position) -> bool:
    return not position.has_empty_cells() or position_score(position) != 0
