"""Command-line front end for generating and auto-filling boards.

Usage::

    pairleroy generate --radius 6 --seed 42 --types 40,40,20 --color-pct 25,25,25,25

    # Pick the general search instead of the cascading apportionment
    pairleroy generate --radius 3 --seed 7 --strategy backtrack

    # Grow a board from the palette until it fills up or gets stuck
    pairleroy autofill --radius 4 --seed 1234 --max-steps 30

    # Reuse the percentages and colors of a shared link
    pairleroy autofill --query "pct=40,40,20,25,25,25,25&col=#e57373,#64b5f6,#81c784,#ffd54f"
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections import Counter

from pairleroy.config import settings
from pairleroy.core.combos import unit_totals
from pairleroy.core.generation import compute_quotas, generate_layout
from pairleroy.core.session import BoardSession
from pairleroy.core.topology import build_grid
from pairleroy.core.types import TileType
from pairleroy.engine.errors import ConfigurationError, InfeasibleQuotaError
from pairleroy.engine.models import PALETTE_SIZE, BoardConfig
from pairleroy.engine.rng import Xorshift32, random_seed


def _number_list(text: str) -> list[float]:
    try:
        return [float(part) for part in text.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated numbers, got {text!r}") from None


def _add_board_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--radius", type=int, default=None, help=f"Board radius (default {settings.radius})")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (random if omitted)")
    parser.add_argument("--types", type=_number_list, default=None, help="Mono,bi,tri percentages")
    parser.add_argument("--color-pct", type=_number_list, default=None, help="Per-color percentages")
    parser.add_argument("--query", default=None, help="Shared-link query string (pct=...&col=...)")


def _build_config(args: argparse.Namespace) -> BoardConfig:
    overrides: dict = {}
    if args.radius is not None:
        overrides["radius"] = args.radius
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.types is not None:
        overrides["types_pct"] = args.types
    if args.color_pct is not None:
        overrides["color_pct"] = args.color_pct
    if args.query:
        return BoardConfig.from_query(args.query, **overrides)
    return BoardConfig.load(**overrides)


def _run_generate(args: argparse.Namespace) -> None:
    config = _build_config(args)
    seed = config.seed if config.seed is not None else random_seed()
    grid = build_grid(config.radius)
    quotas = compute_quotas(config, len(grid))

    layout = generate_layout(
        config,
        grid=grid,
        rng=Xorshift32(seed),
        strategy=args.strategy,
    )
    combos = [entry.combo for entry in layout]
    by_type = Counter(combo.type for combo in combos)

    print(f"Board: radius {config.radius}, {len(grid)} tiles, seed {seed}")
    print(f"  Type quota:   mono={quotas.type_counts[0]} bi={quotas.type_counts[1]} tri={quotas.type_counts[2]}")
    print(f"  Unit quota:   {list(quotas.color_units)}")
    print(
        f"  Tiles built:  mono={by_type[TileType.MONO]} "
        f"bi={by_type[TileType.BI]} tri={by_type[TileType.TRI]}"
    )
    print(f"  Units used:   {unit_totals(combos, PALETTE_SIZE)}")


def _run_autofill(args: argparse.Namespace) -> None:
    config = _build_config(args)
    session = BoardSession(config)
    status = session.run_auto_fill(args.max_steps)
    board = session.board

    print(f"Board: radius {config.radius}, {len(session.grid)} tiles, seed {session.rng.seed}")
    print(f"  Placed:           {board.placed_count}/{len(board.placements)}")
    print(f"  Status:           {status.value}")
    print(f"  Ready junctions:  {len(session.ready_junctions())}/{len(session.junctions)}")
    conflicts = session.edge_conflicts()
    if conflicts:
        print(f"  Edge conflicts:   {len(conflicts)}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="pairleroy", description="Pairleroy board generator")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Synthesize a full-board combo layout")
    _add_board_options(generate)
    generate.add_argument(
        "--strategy",
        default=None,
        help=f"Combo synthesis strategy: cascade or backtrack (default {settings.synthesis_strategy})",
    )

    autofill = subparsers.add_parser("autofill", help="Fill a board from palette draws")
    _add_board_options(autofill)
    autofill.add_argument("--max-steps", type=int, default=None, help="Stop after this many placements")

    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level)

    try:
        if args.command == "generate":
            _run_generate(args)
        else:
            _run_autofill(args)
    except ConfigurationError as e:
        for message in e.errors:
            print(f"Configuration error: {message}", file=sys.stderr)
        return 2
    except InfeasibleQuotaError as e:
        print(f"Cannot build board: {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
