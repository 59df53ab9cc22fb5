import unittest
from unittest.mock import MagicMock

from lightswap.core.constants import Color
from lightswap.core.exceptions import InvalidConfiguration, InvalidState, OutOfBounds
from lightswap.core.models import Move
from lightswap.engine.grid import GridConfig, LightGrid

P = Color.POSITIVE
N = Color.NEGATIVE
E = Color.EMPTY


def count_empty(grid: LightGrid) -> int:
    return sum(1 for cell in grid.iter_cells() if cell.is_empty())


def uniform_rng(empty_row: int, empty_col: int) -> MagicMock:
    rng = MagicMock()
    rng.choice.return_value = Color.POSITIVE
    rng.randrange.side_effect = [empty_row, empty_col]
    return rng


class GridConfigTests(unittest.TestCase):
    def test_default_size_is_four(self) -> None:
        grid = LightGrid()
        self.assertEqual(grid.get_size(), 4)

    def test_rejects_sizes_below_two(self) -> None:
        for size in (1, 0, -3):
            with self.assertRaises(InvalidConfiguration):
                LightGrid(GridConfig(size=size))

    def test_seed_makes_generation_reproducible(self) -> None:
        grid_a = LightGrid(GridConfig(size=5, rng_seed=99))
        grid_b = LightGrid(GridConfig(size=5, rng_seed=99))
        self.assertEqual(grid_a.snapshot(), grid_b.snapshot())


class GridGenerationTests(unittest.TestCase):
    def test_generated_boards_have_one_empty_and_are_unsolved(self) -> None:
        for size in range(2, 9):
            for seed in range(25):
                grid = LightGrid(GridConfig(size=size, rng_seed=seed))
                self.assertEqual(count_empty(grid), 1)
                self.assertFalse(grid.is_solved(), f"size={size} seed={seed}")
                row, col = grid.empty_position()
                self.assertTrue(grid.cell_at(row, col).is_empty())

    def test_uniform_board_is_unsolved_by_flipping_fixed_cells(self) -> None:
        grid = LightGrid(GridConfig(size=4), rng=uniform_rng(2, 3))
        self.assertEqual(grid.color_at(0, 0), N)
        self.assertEqual(grid.color_at(0, 1), N)
        self.assertEqual(grid.color_at(3, 3), P)
        self.assertFalse(grid.is_solved())

    def test_uniform_board_with_empty_on_fixed_cell_stays_unsolved(self) -> None:
        # Only one of the two corrective flips lands; the other is a no-op.
        for empty in ((0, 0), (0, 1)):
            for size in (2, 3, 4):
                grid = LightGrid(GridConfig(size=size), rng=uniform_rng(*empty))
                self.assertEqual(grid.empty_position(), empty)
                self.assertEqual(count_empty(grid), 1)
                flipped = [cell.position for cell in grid.iter_cells() if cell.color == N]
                self.assertEqual(len(flipped), 1)
                self.assertFalse(grid.is_solved())

    def test_generate_replaces_cells_and_notifies(self) -> None:
        events = []
        grid = LightGrid(GridConfig(size=3, rng_seed=4), on_board_changed=events.append)
        old_cells = [cell for cell in grid.iter_cells()]
        grid.press(0, 0)
        grid.generate()
        self.assertEqual(events, [True, False, True])
        self.assertIsNone(grid.last_move)
        self.assertTrue(all(new is not old for new, old in zip(grid.iter_cells(), old_cells)))


class GridPressTests(unittest.TestCase):
    def _grid(self, rows) -> LightGrid:
        grid = LightGrid(GridConfig(size=len(rows), rng_seed=0))
        grid.load(rows)
        return grid

    def test_press_out_of_bounds_leaves_board_unchanged(self) -> None:
        grid = LightGrid(GridConfig(size=4, rng_seed=3))
        before = grid.snapshot()
        for row, col in ((-1, 0), (0, -1), (4, 0), (0, 4), (7, 7)):
            with self.assertRaises(OutOfBounds):
                grid.press(row, col)
        self.assertEqual(grid.snapshot(), before)

    def test_plain_press_toggles_plus_shape(self) -> None:
        grid = self._grid([
            [P, P, P, P],
            [P, P, P, P],
            [P, P, P, P],
            [P, P, P, E],
        ])
        grid.press(1, 2)
        self.assertEqual(grid.snapshot().colors, (
            (P, P, N, P),
            (P, N, N, N),
            (P, P, N, P),
            (P, P, P, E),
        ))
        self.assertEqual(grid.empty_position(), (3, 3))
        self.assertEqual(grid.last_move, Move(1, 2))

    def test_press_next_to_empty_slides(self) -> None:
        grid = self._grid([
            [P, N, P, P],
            [P, N, P, P],
            [P, P, E, P],
            [P, P, N, P],
        ])
        grid.press(1, 2)
        # (1,2) flips to N and slides into (2,2); its other neighbors flip.
        self.assertEqual(grid.snapshot().colors, (
            (P, N, N, P),
            (P, P, E, N),
            (P, P, N, P),
            (P, P, N, P),
        ))
        self.assertEqual(grid.empty_position(), (1, 2))
        self.assertEqual(count_empty(grid), 1)

    def test_pressing_empty_cell_changes_nothing(self) -> None:
        grid = self._grid([
            [P, N, P],
            [N, E, P],
            [P, P, N],
        ])
        before = grid.snapshot().colors
        grid.press(1, 1)
        self.assertEqual(grid.snapshot().colors, before)
        self.assertEqual(grid.last_move, Move(1, 1))

    def test_double_press_without_slide_is_identity(self) -> None:
        grid = LightGrid(GridConfig(size=5, rng_seed=11))
        empty_row, empty_col = grid.empty_position()
        for row in range(5):
            for col in range(5):
                if abs(row - empty_row) + abs(col - empty_col) <= 1:
                    continue
                before = grid.snapshot().colors
                grid.press(row, col)
                grid.press(row, col)
                self.assertEqual(grid.snapshot().colors, before)

    def test_double_press_after_slide_is_not_identity(self) -> None:
        grid = self._grid([
            [P, P, P],
            [P, E, P],
            [P, P, P],
        ])
        before = grid.snapshot().colors
        grid.press(0, 1)
        self.assertEqual(grid.empty_position(), (0, 1))
        grid.press(0, 1)
        self.assertNotEqual(grid.snapshot().colors, before)
        self.assertEqual(grid.empty_position(), (0, 1))

    def test_every_press_keeps_one_empty(self) -> None:
        grid = LightGrid(GridConfig(size=4, rng_seed=21))
        for step in range(200):
            grid.press(grid.rng.randrange(4), grid.rng.randrange(4))
            self.assertEqual(count_empty(grid), 1, f"step {step}")
            row, col = grid.empty_position()
            self.assertTrue(grid.cell_at(row, col).is_empty())

    def test_press_notifies_driver(self) -> None:
        changes, moves = [], []
        grid = LightGrid(
            GridConfig(size=3, rng_seed=5),
            on_board_changed=changes.append,
            on_move=moves.append,
        )
        grid.press(2, 1)
        self.assertEqual(changes, [True, False])
        self.assertEqual(moves, [Move(2, 1)])


class GridSolvedTests(unittest.TestCase):
    def test_is_solved_ignores_empty_reference_cell(self) -> None:
        grid = LightGrid(GridConfig(size=2, rng_seed=0))
        grid.load([[E, N], [N, N]])
        self.assertTrue(grid.is_solved())

    def test_is_solved_is_idempotent(self) -> None:
        grid = LightGrid(GridConfig(size=4, rng_seed=8))
        first = grid.is_solved()
        self.assertEqual([grid.is_solved() for _ in range(3)], [first] * 3)

    def test_on_solved_fires_once_per_transition(self) -> None:
        solved_calls = MagicMock()
        grid = LightGrid(GridConfig(size=3, rng_seed=2), on_solved=solved_calls)
        grid.load([[P, P, P], [P, E, P], [P, P, P]])
        self.assertTrue(grid.is_solved())
        self.assertTrue(grid.is_solved())
        self.assertEqual(solved_calls.call_count, 1)
        grid.press(0, 0)
        self.assertFalse(grid.is_solved())
        grid.press(0, 0)
        self.assertTrue(grid.is_solved())
        self.assertEqual(solved_calls.call_count, 2)


class GridLoadTests(unittest.TestCase):
    def test_load_rejects_wrong_shape(self) -> None:
        grid = LightGrid(GridConfig(size=3, rng_seed=0))
        with self.assertRaises(InvalidState):
            grid.load([[P, E], [P, P]])

    def test_load_requires_exactly_one_empty(self) -> None:
        grid = LightGrid(GridConfig(size=2, rng_seed=0))
        with self.assertRaises(InvalidState):
            grid.load([[P, P], [P, P]])
        with self.assertRaises(InvalidState):
            grid.load([[E, P], [P, E]])

    def test_load_accepts_plain_integers(self) -> None:
        grid = LightGrid(GridConfig(size=2, rng_seed=0))
        grid.load([[1, -1], [0, 1]])
        self.assertEqual(grid.color_at(0, 1), N)
        self.assertEqual(grid.empty_position(), (1, 0))
        with self.assertRaises(InvalidState):
            grid.load([[1, 3], [0, 1]])

    def test_restore_returns_to_snapshot(self) -> None:
        grid = LightGrid(GridConfig(size=4, rng_seed=13))
        snapshot = grid.snapshot()
        grid.press(0, 0)
        grid.press(3, 3)
        grid.restore(snapshot)
        self.assertEqual(grid.snapshot(), snapshot)

    def test_to_jsonable(self) -> None:
        grid = LightGrid(GridConfig(size=2, rng_seed=0))
        grid.load([[P, N], [N, E]])
        grid.press(0, 0)
        payload = grid.to_jsonable()
        self.assertEqual(payload["size"], 2)
        self.assertEqual(payload["cells"], [[-1, 1], [1, 0]])
        self.assertEqual(payload["empty"], [1, 1])
        self.assertEqual(payload["last_move"], [0, 0])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
