"""Data models supporting the light-swap board."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .constants import Color
from .exceptions import InvalidState


@dataclass(frozen=True)
class Move:
    """A single press, as recorded for the driver."""

    row: int
    col: int

    def as_tuple(self) -> Tuple[int, int]:
        return self.row, self.col


class Cell:
    """One board position holding a color or the empty slot."""

    __slots__ = ("_row", "_col", "_color")

    def __init__(self, row: int, col: int, color: Color = Color.POSITIVE) -> None:
        self._row = row
        self._col = col
        self._color = Color.EMPTY
        self.set_color(color)

    @property
    def row(self) -> int:
        return self._row

    @property
    def col(self) -> int:
        return self._col

    @property
    def position(self) -> Tuple[int, int]:
        return self._row, self._col

    @property
    def color(self) -> Color:
        return self._color

    def get_color(self) -> Color:
        return self._color

    def set_color(self, color: Color) -> None:
        """Force the cell's color; anything but a :class:`Color` is rejected."""

        if not isinstance(color, Color):
            raise InvalidState(f"Invalid cell color {color!r} at {self.position}")
        self._color = color

    def is_empty(self) -> bool:
        return self._color is Color.EMPTY

    def flip_and_check_empty(self) -> bool:
        """Swap POSITIVE and NEGATIVE in place.

        The empty slot is left untouched. Returns whether the cell is empty
        afterwards, which only happens when it already was.
        """

        self._color = self._color.flipped()
        return self._color is Color.EMPTY

    def __repr__(self) -> str:
        return f"Cell(row={self._row}, col={self._col}, color={self._color.name})"
