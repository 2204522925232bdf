"""
Base-3 board keys.

Each cell value is a base-3 digit, cell 0 being the least significant, so
distinct boards never share a key. Keys are transposition-table lookups only.
"""
from .game_basics import TOTAL_CELLS, Position

POWERS = tuple(3 ** i for i in range(TOTAL_CELLS))

KEY_SPACE = 3 ** TOTAL_CELLS


def position_to_int(position: Position) -> int:
    n = 0
    for i in range(TOTAL_CELLS):
        n += int(position[i]) * POWERS[i]
    return n
