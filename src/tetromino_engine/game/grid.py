from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .pieces import Piece


@dataclass(frozen=True)
class ClearResult:
    grid: "GameGrid"
    lines_cleared: int


class GameGrid:
    """Immutable 2D board of locked cells.

    The grid uses 0 for empty cells and the tetromino value (1..7) for filled
    cells. Row 0 is the top of the board. Operations that change cells return a
    new ``GameGrid``; the backing array is read-only.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: np.ndarray) -> None:
        arr = np.array(cells, dtype=np.int8)
        if arr.ndim != 2:
            raise ValueError(f"grid must be 2-D, got shape {arr.shape}")
        arr.setflags(write=False)
        self._cells = arr

    @classmethod
    def empty(cls, width: int, height: int) -> "GameGrid":
        return cls(np.zeros((int(height), int(width)), dtype=np.int8))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "GameGrid":
        widths = {len(r) for r in rows}
        if len(widths) != 1:
            raise ValueError("rows must be non-empty and of equal length")
        return cls(np.array(rows, dtype=np.int8))

    @property
    def cells(self) -> np.ndarray:
        return self._cells

    @property
    def width(self) -> int:
        return int(self._cells.shape[1])

    @property
    def height(self) -> int:
        return int(self._cells.shape[0])

    def cell(self, x: int, y: int) -> int:
        return int(self._cells[y, x])

    def to_array(self) -> np.ndarray:
        return self._cells.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameGrid):
            return NotImplemented
        return self._cells.shape == other._cells.shape and bool(np.array_equal(self._cells, other._cells))

    def __hash__(self) -> int:
        return hash((self._cells.shape, self._cells.tobytes()))

    def __repr__(self) -> str:
        return f"GameGrid(width={self.width}, height={self.height}, filled={int(np.count_nonzero(self._cells))})"

    def collides(self, piece: Piece) -> bool:
        for x, y in piece.cells():
            if x < 0 or x >= self.width or y >= self.height:
                return True
            # Rows above the board only collide through their columns.
            if y >= 0 and self._cells[y, x] != 0:
                return True
        return False

    def place(self, piece: Piece) -> "GameGrid":
        """Write the piece's in-bounds cells into a copy of the grid."""
        out = self._cells.copy()
        value = int(piece.kind)
        for x, y in piece.cells():
            if 0 <= x < self.width and 0 <= y < self.height:
                out[y, x] = value
        return GameGrid(out)

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self._cells != 0, axis=1))[0]]

    def clear_rows(self) -> ClearResult:
        full = np.all(self._cells != 0, axis=1)
        num = int(full.sum())
        if num == 0:
            return ClearResult(grid=self, lines_cleared=0)
        # Remove full rows and add empty rows at the top
        kept = self._cells[~full]
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        return ClearResult(grid=GameGrid(np.vstack((new_rows, kept))), lines_cleared=num)

    def is_topped(self) -> bool:
        return bool(np.any(self._cells[0] != 0))

    def column_heights(self) -> List[int]:
        heights: List[int] = []
        for x in range(self.width):
            filled = np.flatnonzero(self._cells[:, x])
            heights.append(self.height - int(filled[0]) if filled.size else 0)
        return heights

    def max_height(self) -> int:
        non_empty_rows = np.where(np.any(self._cells != 0, axis=1))[0]
        if non_empty_rows.size == 0:
            return 0
        return self.height - int(non_empty_rows[0])

    def count_holes(self) -> int:
        holes = 0
        for x in range(self.width):
            seen_block = False
            for cell in self._cells[:, x]:
                if cell != 0:
                    seen_block = True
                elif seen_block:
                    holes += 1
        return holes
