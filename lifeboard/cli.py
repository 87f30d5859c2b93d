"""
Command-line interface for lifeboard.

Usage:
    lifeboard create '[[0,1,0],[0,1,0],[0,1,0]]'
    lifeboard create --random 25 25 --seed 7
    lifeboard get 1
    lifeboard next 1
    lifeboard after 1 10
    lifeboard final 1 --max-iterations 900
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

import numpy as np

from .config import Settings, configure_logging
from .core.grid import Grid
from .errors import EndStateNotReached, InvalidArgument, NotFound
from .service.presentation import board_to_dict, outcome_to_dict, to_json
from .storage.codec import encode_state

logger = logging.getLogger(__name__)

EXIT_INVALID_ARGUMENT = 2
EXIT_NOT_FOUND = 3
EXIT_END_STATE_NOT_REACHED = 4


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="lifeboard",
        description="Game of Life boards with end-state and cycle detection",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--store", type=str, default=None,
        help="Board file (overrides LIFEBOARD_STORE_PATH)"
    )
    parser.add_argument(
        "--verify-cycles", action="store_true",
        help="Confirm detected cycles with a full board comparison"
    )
    parser.add_argument(
        "--indent", type=int, default=None,
        help="Indent JSON output"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="Store a new starting board")
    create.add_argument("state", nargs="?", default=None, help="Board as JSON, e.g. [[0,1],[1,0]]")
    create.add_argument("--random", nargs=2, type=int, metavar=("WIDTH", "HEIGHT"),
                        help="Generate a random board instead")
    create.add_argument("--seed", type=int, default=None, help="Random seed for --random")
    create.add_argument("--modulus", type=int, default=25,
                        help="A cell is alive when a draw in [0, 100) is divisible by this")

    get = commands.add_parser("get", help="Show a stored board")
    get.add_argument("board_id", type=int)

    next_state = commands.add_parser("next", help="Board after one generation")
    next_state.add_argument("board_id", type=int)

    after = commands.add_parser("after", help="Board after N generations")
    after.add_argument("board_id", type=int)
    after.add_argument("iterations", type=int)

    final = commands.add_parser("final", help="Run until a fixed point or cycle")
    final.add_argument("board_id", type=int)
    final.add_argument("--max-iterations", type=int, default=None,
                       help="Iteration bound (default LIFEBOARD_MAX_ITERATIONS)")

    return parser


def _state_from_args(args: argparse.Namespace) -> str:
    if args.random is not None:
        width, height = args.random
        rng = np.random.default_rng(args.seed)
        return encode_state(Grid.generate(width, height, rng, modulus=args.modulus))

    if args.state is None:
        raise InvalidArgument("Provide a board state or --random WIDTH HEIGHT")
    return args.state


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_INVALID_ARGUMENT

    if args.store is not None:
        settings.store_path = args.store
    if args.verify_cycles:
        settings.verify_cycles = True

    configure_logging(settings)
    service = settings.build_service()

    try:
        if args.command == "create":
            payload = {"id": service.create_board(_state_from_args(args))}
        elif args.command == "get":
            payload = board_to_dict(service.get_board(args.board_id))
        elif args.command == "next":
            payload = outcome_to_dict(service.step(args.board_id), args.board_id)
        elif args.command == "after":
            payload = outcome_to_dict(service.run_for(args.board_id, args.iterations), args.board_id)
        else:
            max_iterations = args.max_iterations
            if max_iterations is None:
                max_iterations = settings.default_max_iterations
            payload = outcome_to_dict(service.run_to_completion(args.board_id, max_iterations), args.board_id)
    except InvalidArgument as e:
        logger.error(f"Invalid argument: {e}")
        return EXIT_INVALID_ARGUMENT
    except NotFound as e:
        logger.error(str(e))
        return EXIT_NOT_FOUND
    except EndStateNotReached as e:
        logger.error(str(e))
        return EXIT_END_STATE_NOT_REACHED

    print(to_json(payload, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
