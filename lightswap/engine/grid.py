"""Board representation, generation and the press rule."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

from ..core.constants import Bounds, Color, DEFAULT_SIZE, MIN_SIZE, ORTHOGONAL_STEPS
from ..core.exceptions import InvalidConfiguration, InvalidState, OutOfBounds
from ..core.models import Cell, Move
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

COLORED: Tuple[Color, Color] = (Color.POSITIVE, Color.NEGATIVE)

BoardChangedCallback = Callable[[bool], None]
SolvedCallback = Callable[[], None]
MoveCallback = Callable[[Move], None]


@dataclass
class GridConfig:
    """Configuration values driving the board."""

    size: int = DEFAULT_SIZE
    rng_seed: Optional[int] = None

    def bounds(self) -> Bounds:
        return Bounds(rows=self.size, cols=self.size)


@dataclass(frozen=True)
class GridSnapshot:
    colors: Tuple[Tuple[Color, ...], ...]
    last_move: Optional[Move] = None


class LightGrid:
    """An N x N board of two-colored lights with a single empty slot.

    The grid owns every :class:`Cell`. Drivers talk to it through
    :meth:`generate`, :meth:`press` and the read accessors, and are told
    about changes through the optional callbacks.
    """

    def __init__(
        self,
        config: Optional[GridConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        on_board_changed: Optional[BoardChangedCallback] = None,
        on_solved: Optional[SolvedCallback] = None,
        on_move: Optional[MoveCallback] = None,
    ) -> None:
        self.config = config or GridConfig()
        if self.config.size < MIN_SIZE:
            raise InvalidConfiguration(
                f"Board size must be at least {MIN_SIZE}, got {self.config.size}"
            )
        self.size = self.config.size
        self.bounds = self.config.bounds()
        self.rng = rng or random.Random(self.config.rng_seed)
        self.on_board_changed = on_board_changed
        self.on_solved = on_solved
        self.on_move = on_move
        self.cells: List[List[Cell]] = []
        self.last_move: Optional[Move] = None
        self._empty: Tuple[int, int] = (0, 0)
        self._solved = False
        self.generate()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def generate(self) -> None:
        """Replace the whole board with a random, unsolved layout."""

        self.cells = [
            [Cell(r, c, self.rng.choice(COLORED)) for c in range(self.size)]
            for r in range(self.size)
        ]
        empty_row = self.rng.randrange(self.size)
        empty_col = self.rng.randrange(self.size)
        self.cells[empty_row][empty_col].set_color(Color.EMPTY)
        self._empty = (empty_row, empty_col)
        self.last_move = None
        self._solved = False
        if self._all_match():
            self._break_trivial_solve()
        LOGGER.info(
            "Generated %sx%s board with empty slot at (%s,%s)",
            self.size,
            self.size,
            empty_row,
            empty_col,
        )
        self._notify_board_changed(True)

    def _break_trivial_solve(self) -> None:
        # Fixed cells, even if one of them is the empty slot.
        LOGGER.debug("Generated board was already solved; flipping (0,0) and (0,1)")
        self.cells[0][0].flip_and_check_empty()
        self.cells[0][1].flip_and_check_empty()

    def load(self, rows: Sequence[Sequence[Union[Color, int]]]) -> None:
        """Replace the board with an explicit layout of colors."""

        if len(rows) != self.size or any(len(row) != self.size for row in rows):
            raise InvalidState(f"Board layout must be {self.size}x{self.size}")
        cells: List[List[Cell]] = []
        empties: List[Tuple[int, int]] = []
        for r, row in enumerate(rows):
            built: List[Cell] = []
            for c, value in enumerate(row):
                try:
                    color = Color(value)
                except ValueError as exc:
                    raise InvalidState(f"Invalid color {value!r} at ({r},{c})") from exc
                if color is Color.EMPTY:
                    empties.append((r, c))
                built.append(Cell(r, c, color))
            cells.append(built)
        if len(empties) != 1:
            raise InvalidState(f"Board must hold exactly one empty cell, found {len(empties)}")
        self.cells = cells
        self._empty = empties[0]
        self.last_move = None
        self._solved = False
        self._notify_board_changed(True)

    def snapshot(self) -> GridSnapshot:
        return GridSnapshot(
            colors=tuple(tuple(cell.color for cell in row) for row in self.cells),
            last_move=self.last_move,
        )

    def restore(self, snapshot: GridSnapshot) -> None:
        self.load(snapshot.colors)
        self.last_move = snapshot.last_move

    # ------------------------------------------------------------------
    # Press rule
    # ------------------------------------------------------------------
    def press(self, row: int, col: int) -> None:
        """Press the light at ``(row, col)``.

        The pressed cell and its in-bounds orthogonal neighbors flip. When
        one of the neighbors is the empty slot it takes the pressed cell's
        flipped color and the pressed cell becomes empty instead. Pressing
        the empty slot itself does nothing.
        """

        if not self.bounds.contains(row, col):
            raise OutOfBounds(f"Press outside the {self.size}x{self.size} board: {(row, col)}")
        self._press_cell(row, col)
        self.last_move = Move(row, col)
        LOGGER.debug("Pressed (%s,%s); empty slot at %s", row, col, self._empty)
        self._notify_board_changed(False)
        if self.on_move is not None:
            self.on_move(self.last_move)

    def _press_cell(self, row: int, col: int) -> None:
        pressed = self.cells[row][col]
        if pressed.flip_and_check_empty():
            return
        for dr, dc in ORTHOGONAL_STEPS:
            nr, nc = row + dr, col + dc
            if not self.bounds.contains(nr, nc):
                continue
            neighbor = self.cells[nr][nc]
            if neighbor.flip_and_check_empty():
                # Slide: the empty slot trades places with the pressed cell.
                neighbor.set_color(pressed.color)
                pressed.set_color(Color.EMPTY)
                self._empty = (row, col)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def is_solved(self) -> bool:
        """Return whether every colored light shares one color.

        ``on_solved`` fires when the answer turns from unsolved to solved.
        """

        solved = self._all_match()
        if solved and not self._solved and self.on_solved is not None:
            self.on_solved()
        self._solved = solved
        return solved

    def _all_match(self) -> bool:
        reference = self.cells[0][0].color
        if reference is Color.EMPTY:
            reference = self.cells[0][1].color
        return all(cell.color in (reference, Color.EMPTY) for cell in self.iter_cells())

    def get_size(self) -> int:
        return self.size

    def cell_at(self, row: int, col: int) -> Cell:
        if not self.bounds.contains(row, col):
            raise OutOfBounds(f"Cell outside the {self.size}x{self.size} board: {(row, col)}")
        return self.cells[row][col]

    def color_at(self, row: int, col: int) -> Color:
        return self.cell_at(row, col).color

    def empty_position(self) -> Tuple[int, int]:
        return self._empty

    def iter_cells(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------
    def _notify_board_changed(self, is_new_board: bool) -> None:
        if self.on_board_changed is not None:
            self.on_board_changed(is_new_board)

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def to_jsonable(self) -> dict:
        return {
            "size": self.size,
            "cells": [[cell.color.value for cell in row] for row in self.cells],
            "empty": list(self._empty),
            "last_move": list(self.last_move.as_tuple()) if self.last_move else None,
        }
