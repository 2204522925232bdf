"""
Game basics: cell states and the immutable board.

- A board is 9 cells, row-major: 0,1,2 / 3,4,5 / 6,7,8.
- Cell values are 0=empty, 1=circle (O), 2=cross (X). Cross always starts.
- Boards never change in place; ``move`` returns a new board.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, Tuple

TOTAL_CELLS = 9


class CellState(IntEnum):
    EMPTY = 0
    CIRCLE = 1
    CROSS = 2


_SYMBOLS = {CellState.EMPTY: '.', CellState.CIRCLE: 'O', CellState.CROSS: 'X'}


class OccupiedCellError(RuntimeError):
    """Raised when a mark is placed on a cell that is not empty."""


def other_side(side: CellState) -> CellState:
    return CellState.CIRCLE if side == CellState.CROSS else CellState.CROSS


@dataclass(frozen=True)
class Position:
    cells: Tuple[CellState, ...] = (CellState.EMPTY,) * TOTAL_CELLS

    def __post_init__(self) -> None:
        cells = tuple(CellState(c) for c in self.cells)
        if len(cells) != TOTAL_CELLS:
            raise ValueError(f"Cannot initialize position with {len(cells)} cells")
        object.__setattr__(self, 'cells', cells)

    @classmethod
    def from_string(cls, raw: str) -> "Position":
        """Parse a 9-digit board string, e.g. ``200010000``."""
        if any(c not in "012" for c in raw):
            raise ValueError(f"Invalid board string: {raw!r}")
        return cls(tuple(int(c) for c in raw))

    def serialize(self) -> str:
        return ''.join(str(int(c)) for c in self.cells)

    def __getitem__(self, idx: int) -> CellState:
        return self.cells[idx]

    def __iter__(self) -> Iterator[CellState]:
        return iter(self.cells)

    def __str__(self) -> str:
        rows = [self.cells[i:i + 3] for i in range(0, TOTAL_CELLS, 3)]
        return "\n".join(' '.join(_SYMBOLS[c] for c in row) for row in rows)

    def has_empty_cells(self) -> bool:
        return CellState.EMPTY in self.cells

    def empty_cells(self) -> List[int]:
        return [i for i, c in enumerate(self.cells) if c == CellState.EMPTY]

    def move(self, cell: int, content: CellState) -> "Position":
        current = self.cells[cell]
        if current != CellState.EMPTY:
            raise OccupiedCellError(
                f"Cannot put {CellState(content).name} in cell {cell}, "
                f"it already contains {current.name}"
            )
        cells = list(self.cells)
        cells[cell] = content
        return Position(tuple(cells))
