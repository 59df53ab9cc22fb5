"""Phased automatic solver that drives a board to a single color.

Boards larger than 2x2 go through three phases:
  1. Aligning: walk the empty slot to the top-left corner.
  2. Raking: chase every off-color light up row by row into the top row,
     detouring around the empty slot when it sits in the way.
  3. Top resolution: fix the top row with back-and-forth moves next to
     the empty slot.
The 2x2 board is handled by a dedicated lookup of at most two presses.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

from ..core.constants import Color, SolverPhase
from ..core.exceptions import SolverExhausted
from ..core.models import Move
from ..utils.logger import get_logger
from .grid import LightGrid


LOGGER = get_logger(__name__)

StepSink = Callable[[str], None]
PressSink = Callable[[Move], None]


@dataclass
class SolveResult:
    phase: SolverPhase
    presses: List[Move] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)

    @property
    def solved(self) -> bool:
        return self.phase == SolverPhase.DONE

    @property
    def cancelled(self) -> bool:
        return self.phase == SolverPhase.CANCELLED


class Solver:
    """Presses cells on a :class:`LightGrid` until it is solved.

    A solver is built for one attempt. It checks ``cancel_event`` between
    presses and during the pacing ``delay``; a set event stops the solve
    cleanly with a ``CANCELLED`` result.
    """

    def __init__(
        self,
        grid: LightGrid,
        *,
        delay: float = 0.0,
        step_sink: Optional[StepSink] = None,
        press_sink: Optional[PressSink] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.grid = grid
        self.size = grid.get_size()
        self.delay = delay
        self.step_sink = step_sink
        self.press_sink = press_sink
        self.cancel_event = cancel_event
        self.phase = SolverPhase.NOT_STARTED
        self.done = False
        self.goal = Color.POSITIVE
        self.presses: List[Move] = []
        self.steps: List[str] = []
        self.empty_row, self.empty_col = grid.empty_position()

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def solve(self) -> SolveResult:
        """Run the solve to completion.

        Raises:
            SolverExhausted: every phase ran and the board is still unsolved.
        """

        if self.grid.is_solved():
            self.done = True
            self.phase = SolverPhase.DONE
            self._step("Already solved")
            return self._result()

        self._step("Solving board")
        if self._pause():
            return self._finish()
        if self.size == 2:
            self._solve_small()
        else:
            self._solve_general()
        return self._finish()

    # ------------------------------------------------------------------
    # Press helpers
    # ------------------------------------------------------------------
    def _press(self, row: int, col: int) -> bool:
        """Press one cell and return True when solving should stop."""

        if self._cancel_requested():
            self.phase = SolverPhase.CANCELLED
            return True
        self.grid.press(row, col)
        move = Move(row, col)
        self.presses.append(move)
        if self.press_sink is not None:
            self.press_sink(move)
        if self.grid.is_solved():
            self.done = True
            self.phase = SolverPhase.DONE
            return True
        return self._pause()

    def _press_sequence(self, moves: Iterable[Tuple[int, int]]) -> bool:
        return any(self._press(row, col) for row, col in moves)

    def _pause(self) -> bool:
        """Wait out the pacing delay; True means a cancel was requested."""

        if self.cancel_event is not None:
            if self.delay > 0:
                cancelled = self.cancel_event.wait(self.delay)
            else:
                cancelled = self.cancel_event.is_set()
            if cancelled:
                self.phase = SolverPhase.CANCELLED
            return cancelled
        if self.delay > 0:
            time.sleep(self.delay)
        return False

    def _cancel_requested(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def _color(self, row: int, col: int) -> Color:
        return self.grid.color_at(row, col)

    def _step(self, label: str) -> None:
        self.steps.append(label)
        if self.step_sink is not None:
            self.step_sink(label)

    def _enter(self, phase: SolverPhase, label: str) -> None:
        self.phase = phase
        LOGGER.info("%s (empty slot at (%s,%s))", label, self.empty_row, self.empty_col)
        self._step(label)

    # ------------------------------------------------------------------
    # 2x2 board
    # ------------------------------------------------------------------
    def _solve_small(self) -> None:
        self._enter(SolverPhase.SMALL_CASE, "2*2: Memorized")
        if self._pause():
            return
        row, col = self.empty_row, self.empty_col
        diagonal = self._color(1 - row, 1 - col)
        side = self._color(row, 1 - col)
        if side != diagonal:
            self._press_sequence([(1 - row, col), (1 - row, 1 - col)])
        else:
            self._press(row, 1 - col)

    # ------------------------------------------------------------------
    # General board
    # ------------------------------------------------------------------
    def _solve_general(self) -> None:
        self._enter(SolverPhase.ALIGNING, "Aligning black")
        if self._align():
            return

        self.goal = self._bottom_row_goal()
        self._enter(SolverPhase.RAKING, "Raking rows up")
        LOGGER.debug("Raking towards %s", self.goal.name)
        if self._rake_rows():
            return

        self._enter(SolverPhase.TOP_RESOLUTION, "Working the top")
        self._work_top_row()

    def _align(self) -> bool:
        while self.empty_row != 0:
            if self._press(self.empty_row - 1, self.empty_col):
                return True
            self.empty_row -= 1
        while self.empty_col != 0:
            if self._press(self.empty_row, self.empty_col - 1):
                return True
            self.empty_col -= 1
        return False

    def _bottom_row_goal(self) -> Color:
        total = sum(self._color(self.size - 1, col).value for col in range(self.size))
        return Color.NEGATIVE if total < 0 else Color.POSITIVE

    def _rake_rows(self) -> bool:
        for row in range(self.size - 1, 0, -1):
            for col in range(self.size - 1, -1, -1):
                if self._color(row, col) != self.goal and self._rake(row, col):
                    return True
        return False

    def _rake(self, row: int, col: int) -> bool:
        """Flip ``(row, col)`` by pressing the cell above it."""

        if row == 1 and col == self.empty_col:
            # The cell above is the empty slot: go right, left, right.
            if self._press_sequence([(0, col + 1), (0, col), (0, col + 1)]):
                return True
            self.empty_col += 1
        else:
            if self._press(row - 1, col):
                return True
            if row == 1 and abs(self.empty_col - col) == 1:
                self.empty_col = col
        if row == 2 and col == self.empty_col:
            # The press slid the empty slot down into row 1; lift it back.
            if self._press(0, col):
                return True
        return False

    def _work_top_row(self) -> None:
        while True:
            col = self.empty_col
            offset = 0
            if col != 0 and self._color(0, col - 1) != self.goal:
                offset = -1
            elif col != self.size - 1 and self._color(0, col + 1) != self.goal:
                offset = 1

            if offset:
                target = col + offset
                if self._press_sequence([(1, target), (0, target), (1, target), (0, target)]):
                    return
                self.empty_col = target
            elif col < self.size - 2:
                if self._press_sequence([(0, col + 1), (0, col + 2), (0, col + 1), (0, col + 2)]):
                    return
                self.empty_col = col + 2
            else:
                return

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------
    def _finish(self) -> SolveResult:
        if self.phase == SolverPhase.CANCELLED:
            LOGGER.warning("Solve cancelled after %s presses", len(self.presses))
            self._step("Cancelled")
            return self._result()
        if self.done:
            LOGGER.info("Board solved in %s presses", len(self.presses))
            self._step("Input unlocked")
            return self._result()
        self.phase = SolverPhase.FATAL
        self._step("ERROR: unsolved")
        LOGGER.error("Solver exhausted after %s presses without solving", len(self.presses))
        raise SolverExhausted(
            f"Board of size {self.size} still unsolved after {len(self.presses)} presses"
        )

    def _result(self) -> SolveResult:
        return SolveResult(phase=self.phase, presses=list(self.presses), steps=list(self.steps))


def solve_board(grid: LightGrid, **kwargs) -> SolveResult:
    """Convenience wrapper building a one-shot :class:`Solver`."""

    return Solver(grid, **kwargs).solve()
