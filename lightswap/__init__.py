"""Light-swap puzzle: a Lights Out board with a sliding empty slot.

This package exposes the public API surface via:

- ``lightswap.engine.grid.LightGrid``: the board, its generation and press rule.
- ``lightswap.engine.solver.Solver``: the phased automatic solver.
- ``lightswap.engine.session.SolveSession``: background solving with an abort handle.
"""

from .core.constants import Color, SessionState, SolverPhase
from .core.exceptions import (InvalidConfiguration, InvalidState, LightswapError,
                              OutOfBounds, SolverExhausted)
from .engine.grid import GridConfig, LightGrid
from .engine.session import SolveSession
from .engine.solver import SolveResult, Solver, solve_board

__all__ = [
    "Color",
    "SessionState",
    "SolverPhase",
    "LightswapError",
    "InvalidConfiguration",
    "InvalidState",
    "OutOfBounds",
    "SolverExhausted",
    "GridConfig",
    "LightGrid",
    "SolveSession",
    "SolveResult",
    "Solver",
    "solve_board",
]

__version__ = "0.1.0"
