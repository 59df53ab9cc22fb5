"""CLI entrypoint for the light-swap puzzle."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

from lightswap.core.constants import DEFAULT_SIZE
from lightswap.core.exceptions import LightswapError
from lightswap.engine.grid import GridConfig, LightGrid
from lightswap.engine.solver import Solver
from lightswap.utils.logger import configure_logging
from lightswap.utils.pretty import pretty_print_grid, print_solve_summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a light-swap board and solve it automatically",
    )
    parser.add_argument("--size", type=int, default=DEFAULT_SIZE, help="Board size in cells (min 2)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument(
        "--delay",
        type=float,
        default=0.0,
        help="Pause in seconds after every solver press",
    )
    parser.add_argument(
        "--press",
        nargs=2,
        type=int,
        action="append",
        metavar=("ROW", "COL"),
        default=[],
        help="Press a cell before solving (repeatable)",
    )
    parser.add_argument("--no-solve", action="store_true", help="Only generate and apply presses")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = getattr(logging, args.log_level.upper(), logging.WARNING)
    configure_logging(level)

    try:
        grid = LightGrid(GridConfig(size=args.size, rng_seed=args.seed))
    except LightswapError as exc:
        parser.error(str(exc))

    for row, col in args.press:
        try:
            grid.press(row, col)
        except LightswapError as exc:
            parser.error(str(exc))

    pretty_print_grid(grid, label="Board:")
    payload: Dict[str, Any] = {"seed": args.seed, "initial": grid.to_jsonable()}

    exit_code = 0
    if not args.no_solve:
        solver = Solver(grid, delay=args.delay, step_sink=lambda label: print(f"> {label}"))
        try:
            result = solver.solve()
        except LightswapError as exc:
            print(f"Solver failed: {exc}", file=sys.stderr)
            payload["error"] = str(exc)
            exit_code = 1
        else:
            print_solve_summary(result)
            pretty_print_grid(grid, label="\nFinal board:")
            payload["solve"] = {
                "phase": result.phase.value,
                "presses": [list(move.as_tuple()) for move in result.presses],
                "steps": result.steps,
            }
        payload["final"] = grid.to_jsonable()

    if args.output:
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
