import unittest

import numpy as np

from tetromino_engine.game.grid import GameGrid
from tetromino_engine.game.pieces import Piece, TetrominoType, bounding_columns, bounding_rows

WIDTH, HEIGHT = 10, 20


class CollisionTests(unittest.TestCase):
    def setUp(self):
        self.grid = GameGrid.empty(WIDTH, HEIGHT)

    def test_boundaries_for_every_shape(self):
        for kind in TetrominoType:
            for r in range(4):
                with self.subTest(kind=kind.name, rotation=r):
                    probe = Piece(kind, rotation=r)
                    min_c, max_c = bounding_columns(probe)
                    _, max_r = bounding_rows(probe)
                    y_ok = HEIGHT - 1 - max_r
                    # Flush against each edge fits.
                    self.assertFalse(self.grid.collides(Piece(kind, x=-min_c, y=y_ok, rotation=r)))
                    self.assertFalse(self.grid.collides(Piece(kind, x=WIDTH - 1 - max_c, y=y_ok, rotation=r)))
                    # One step past any edge does not.
                    self.assertTrue(self.grid.collides(Piece(kind, x=-min_c - 1, y=0, rotation=r)))
                    self.assertTrue(self.grid.collides(Piece(kind, x=WIDTH - max_c, y=0, rotation=r)))
                    self.assertTrue(self.grid.collides(Piece(kind, x=-min_c, y=y_ok + 1, rotation=r)))

    def test_rows_above_board_do_not_collide(self):
        self.assertFalse(self.grid.collides(Piece(TetrominoType.T, x=4, y=-1)))
        self.assertFalse(self.grid.collides(Piece(TetrominoType.I, x=2, y=-3, rotation=1)))
        # Column bounds still apply above the board.
        self.assertTrue(self.grid.collides(Piece(TetrominoType.O, x=-1, y=-2)))

    def test_overlap_with_locked_cell(self):
        grid = self.grid.place(Piece(TetrominoType.O, x=0, y=18))
        self.assertTrue(grid.collides(Piece(TetrominoType.O, x=1, y=17)))
        self.assertFalse(grid.collides(Piece(TetrominoType.O, x=2, y=18)))


class PlacementTests(unittest.TestCase):
    def test_place_returns_new_grid(self):
        grid = GameGrid.empty(WIDTH, HEIGHT)
        placed = grid.place(Piece(TetrominoType.L, x=0, y=18))
        self.assertEqual(int(np.count_nonzero(grid.cells)), 0)
        self.assertEqual(placed.cell(2, 18), int(TetrominoType.L))
        self.assertEqual(placed.cell(0, 19), int(TetrominoType.L))
        self.assertEqual(int(np.count_nonzero(placed.cells)), 4)

    def test_out_of_range_cells_are_dropped(self):
        placed = GameGrid.empty(WIDTH, HEIGHT).place(Piece(TetrominoType.T, x=4, y=-1))
        self.assertEqual(int(np.count_nonzero(placed.cells)), 3)
        self.assertEqual([x for x in range(WIDTH) if placed.cell(x, 0)], [4, 5, 6])

    def test_cells_are_read_only(self):
        grid = GameGrid.empty(WIDTH, HEIGHT)
        with self.assertRaises(ValueError):
            grid.cells[0, 0] = 1
        copy = grid.to_array()
        copy[0, 0] = 1
        self.assertEqual(grid.cell(0, 0), 0)


class LineClearTests(unittest.TestCase):
    def _board_with_full_rows(self, full):
        rows = []
        for r in range(HEIGHT):
            if r in full:
                rows.append([2] * WIDTH)
            else:
                row = [0] * WIDTH
                row[r % WIDTH] = 1
                rows.append(row)
        return GameGrid.from_rows(rows)

    def test_full_rows_top_to_bottom(self):
        grid = self._board_with_full_rows({12, 3, 5})
        self.assertEqual(grid.full_rows(), [3, 5, 12])

    def test_clear_non_adjacent_rows(self):
        grid = self._board_with_full_rows({3, 5})
        result = grid.clear_rows()
        self.assertEqual(result.lines_cleared, 2)
        self.assertEqual(result.grid.height, HEIGHT)
        self.assertEqual(result.grid.width, WIDTH)
        self.assertFalse(result.grid.cells[0].any())
        self.assertFalse(result.grid.cells[1].any())
        survivors = [r for r in range(HEIGHT) if r not in (3, 5)]
        self.assertTrue(np.array_equal(result.grid.cells[2:], grid.cells[survivors]))

    def test_clear_nothing_returns_same_grid(self):
        grid = self._board_with_full_rows(set())
        result = grid.clear_rows()
        self.assertEqual(result.lines_cleared, 0)
        self.assertIs(result.grid, grid)

    def test_is_topped(self):
        grid = GameGrid.empty(WIDTH, HEIGHT)
        self.assertFalse(grid.is_topped())
        self.assertFalse(grid.place(Piece(TetrominoType.O, x=0, y=1)).is_topped())
        self.assertTrue(grid.place(Piece(TetrominoType.O, x=0, y=0)).is_topped())


class GridValueTests(unittest.TestCase):
    def test_equality_and_hash(self):
        a = GameGrid.empty(WIDTH, HEIGHT).place(Piece(TetrominoType.Z, x=3, y=10))
        b = GameGrid.empty(WIDTH, HEIGHT).place(Piece(TetrominoType.Z, x=3, y=10))
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertNotEqual(a, GameGrid.empty(WIDTH, HEIGHT))
        self.assertNotEqual(GameGrid.empty(4, 4), GameGrid.empty(4, 5))

    def test_from_rows_rejects_ragged_input(self):
        with self.assertRaises(ValueError):
            GameGrid.from_rows([[0, 0], [0]])
        with self.assertRaises(ValueError):
            GameGrid.from_rows([])

    def test_board_statistics(self):
        grid = GameGrid.from_rows([
            [0, 0, 0, 0],
            [0, 1, 0, 0],
            [0, 0, 0, 1],
            [1, 1, 0, 1],
        ])
        self.assertEqual(grid.column_heights(), [1, 3, 0, 2])
        self.assertEqual(grid.max_height(), 3)
        self.assertEqual(grid.count_holes(), 1)
        self.assertEqual(GameGrid.empty(4, 4).max_height(), 0)


if __name__ == "__main__":
    unittest.main()
