"""Pretty-print helpers for light-swap boards."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Optional

from ..core.constants import Color

if TYPE_CHECKING:
    from ..engine.grid import LightGrid
    from ..engine.solver import SolveResult


SYMBOLS = {
    Color.POSITIVE: "+",
    Color.NEGATIVE: "-",
    Color.EMPTY: "#",
}


def format_grid(grid: LightGrid) -> str:
    size = grid.get_size()
    header_cells = [f"{c:>2}" for c in range(size)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * (3 * size - 1))
    for r in range(size):
        row_render = " ".join(f"{SYMBOLS[grid.color_at(r, c)]:>2}" for c in range(size))
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def pretty_print_grid(grid: LightGrid, *, label: Optional[str] = None, stream=None) -> None:
    """Print the board in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_grid(grid), file=stream)


def print_solve_summary(result: SolveResult, *, stream=None) -> None:
    stream = stream or sys.stdout
    print(file=stream)
    print("--- Solve ---", file=stream)
    print(f"  Outcome:  {result.phase.value}", file=stream)
    print(f"  Presses:  {len(result.presses)}", file=stream)
    if result.presses:
        moves = " ".join(f"({m.row},{m.col})" for m in result.presses)
        print(f"  Moves:    {moves}", file=stream)
    print(f"  Steps:    {' > '.join(result.steps)}", file=stream)
