"""Driver-side ownership of a board while the solver runs in the background."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..core.constants import SessionState
from ..core.exceptions import LightswapError
from ..core.models import Move
from ..utils.logger import get_logger
from .grid import LightGrid
from .solver import SolveResult, Solver


LOGGER = get_logger(__name__)

CompletionCallback = Callable[[Optional[SolveResult], Optional[LightswapError]], None]


@dataclass
class ProgressMessage:
    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)


class SolveSession:
    """Gates interactive presses behind an Idle/Solving state.

    ``start_solve`` hands the board to a :class:`Solver` on a worker thread.
    Step labels and presses are posted to a queue the driver drains with
    :meth:`poll_progress`; ``on_complete`` receives ``(result, error)`` once
    the solver finishes, is cancelled, or gives up.
    """

    def __init__(
        self,
        grid: LightGrid,
        *,
        delay: float = 1.0,
        on_complete: Optional[CompletionCallback] = None,
    ) -> None:
        self.grid = grid
        self.delay = delay
        self.on_complete = on_complete
        self.state = SessionState.IDLE
        self.last_result: Optional[SolveResult] = None
        self.last_error: Optional[LightswapError] = None
        self._lock = threading.Lock()
        self._cancel_evt = threading.Event()
        self._progress_q: "queue.Queue[ProgressMessage]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    @property
    def solving(self) -> bool:
        return self.state == SessionState.SOLVING

    # ------------------------------------------------------------------
    # Interactive input
    # ------------------------------------------------------------------
    def press(self, row: int, col: int) -> bool:
        """Apply a user press unless the solver currently owns the board."""

        if self.solving:
            LOGGER.debug("Ignoring press at (%s,%s) while solving", row, col)
            return False
        self.grid.press(row, col)
        self.grid.is_solved()
        return True

    def new_board(self) -> bool:
        if self.solving:
            LOGGER.debug("Ignoring new board request while solving")
            return False
        self.grid.generate()
        return True

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------
    def start_solve(self) -> bool:
        with self._lock:
            if self.state == SessionState.SOLVING:
                return False
            self.state = SessionState.SOLVING
            self.last_result = None
            self.last_error = None
            self._cancel_evt.clear()
            self._thread = threading.Thread(target=self._run, name="SolverWorker", daemon=True)
        LOGGER.info("Starting background solve")
        self._thread.start()
        return True

    def abort(self) -> None:
        """Ask a running solve to stop after its current press."""

        self._cancel_evt.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the worker finishes; False if it is still running."""

        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def poll_progress(self) -> Optional[ProgressMessage]:
        try:
            return self._progress_q.get_nowait()
        except queue.Empty:
            return None

    def drain_progress(self) -> List[ProgressMessage]:
        messages: List[ProgressMessage] = []
        while True:
            message = self.poll_progress()
            if message is None:
                return messages
            messages.append(message)

    def _post_step(self, label: str) -> None:
        self._progress_q.put(ProgressMessage(kind="step", payload={"label": label}))

    def _post_press(self, move: Move) -> None:
        self._progress_q.put(ProgressMessage(kind="press", payload={"row": move.row, "col": move.col}))

    def _run(self) -> None:
        solver = Solver(
            self.grid,
            delay=self.delay,
            step_sink=self._post_step,
            press_sink=self._post_press,
            cancel_event=self._cancel_evt,
        )
        result: Optional[SolveResult] = None
        error: Optional[LightswapError] = None
        try:
            result = solver.solve()
        except LightswapError as exc:
            LOGGER.error("Background solve failed: %s", exc)
            error = exc
        finally:
            with self._lock:
                self.state = SessionState.IDLE
                self.last_result = result
                self.last_error = error
            payload: Dict[str, Any] = {"phase": solver.phase.value, "presses": len(solver.presses)}
            if error is not None:
                payload["error"] = str(error)
            self._progress_q.put(ProgressMessage(kind="finished", payload=payload))
        if self.on_complete is not None:
            self.on_complete(result, error)
