"""Shared constants and enumerations for the light-swap puzzle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class Color(int, Enum):
    """Cell colors. Colored values are signs so a flip is a negation."""

    POSITIVE = 1
    NEGATIVE = -1
    EMPTY = 0

    def flipped(self) -> "Color":
        return Color(-self.value)


class SolverPhase(str, Enum):
    """States of the automatic solver."""

    NOT_STARTED = "NOT_STARTED"
    SMALL_CASE = "SMALL_CASE"
    ALIGNING = "ALIGNING"
    RAKING = "RAKING"
    TOP_RESOLUTION = "TOP_RESOLUTION"
    DONE = "DONE"
    FATAL = "FATAL"
    CANCELLED = "CANCELLED"


class SessionState(str, Enum):
    """Who is allowed to press cells on a board."""

    IDLE = "IDLE"
    SOLVING = "SOLVING"


# Neighbor order used by a press: up, down, left, right.
ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

DEFAULT_SIZE = 4
MIN_SIZE = 2


@dataclass(frozen=True)
class Bounds:
    """Simple rectangle bounds helper."""

    rows: int
    cols: int

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
