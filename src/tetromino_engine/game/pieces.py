from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


def _frozen(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.int8)
    arr.setflags(write=False)
    return arr


# Spawn orientations. Padding rows/columns are significant: they decide where
# a piece sits inside its bounding matrix and therefore where it spawns.
BASE_SHAPES = {
    TetrominoType.I: _frozen([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]),
    TetrominoType.O: _frozen([[1, 1], [1, 1]]),
    TetrominoType.T: _frozen([[0, 1, 0], [1, 1, 1], [0, 0, 0]]),
    TetrominoType.S: _frozen([[0, 1, 1], [1, 1, 0], [0, 0, 0]]),
    TetrominoType.Z: _frozen([[1, 1, 0], [0, 1, 1], [0, 0, 0]]),
    TetrominoType.J: _frozen([[1, 0, 0], [1, 1, 1], [0, 0, 0]]),
    TetrominoType.L: _frozen([[0, 0, 1], [1, 1, 1], [0, 0, 0]]),
}


def rotate(shape: Shape, rotation: int) -> Shape:
    """Rotate ``shape`` clockwise ``rotation % 4`` times.

    Always returns a fresh, writable array; the input is never modified.
    """
    k = rotation % 4
    return np.rot90(shape, k, axes=(1, 0)).copy()  # clockwise when k>0


def _occupied(shape: Shape) -> Tuple[np.ndarray, np.ndarray]:
    rows, cols = np.nonzero(shape)
    if rows.size == 0:
        raise ValueError("shape has no occupied cells")
    return rows, cols


@dataclass(frozen=True)
class Piece:
    kind: TetrominoType
    x: int = 0
    y: int = 0
    rotation: int = 0  # 0..3

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotation", self.rotation % 4)

    def shape(self) -> Shape:
        return rotate(BASE_SHAPES[self.kind], self.rotation)

    def moved(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self, delta: int = 1) -> "Piece":
        return replace(self, rotation=(self.rotation + delta) % 4)

    def cells(self) -> List[Tuple[int, int]]:
        """Board coordinates ``(x, y)`` of every occupied cell."""
        s = self.shape()
        rows, cols = np.nonzero(s)
        return [(self.x + int(dx), self.y + int(dy)) for dy, dx in zip(rows, cols)]


def bounding_columns(piece: Piece) -> Tuple[int, int]:
    """Inclusive (min, max) occupied column of the rotated shape."""
    _, cols = _occupied(piece.shape())
    return int(cols.min()), int(cols.max())


def bounding_rows(piece: Piece) -> Tuple[int, int]:
    """Inclusive (min, max) occupied row of the rotated shape."""
    rows, _ = _occupied(piece.shape())
    return int(rows.min()), int(rows.max())
