#!/usr/bin/env python3
"""
Final State Demonstration Script

Generates a seeded random board, stores it, and runs it until it reaches a
fixed point or a repeating cycle. Progress and the outcome are logged; the
outcome is also written as JSON.
"""

import sys
import os
import json
import logging
from pathlib import Path

# Add repository root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np

from lifeboard.config import LOG_FORMAT
from lifeboard.core.grid import Grid
from lifeboard.errors import EndStateNotReached
from lifeboard.service.conway_service import ConwayService
from lifeboard.service.presentation import outcome_to_dict
from lifeboard.storage.board_store import InMemoryBoardStore
from lifeboard.storage.codec import encode_state

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


def run_final_state_demo(grid_size=25, seed=7, modulus=4, max_iterations=900, verify_cycles=False):
    """Run one random board to completion and return the response payload."""
    logger.info("=== FINAL STATE DEMONSTRATION ===")
    logger.info(f"Grid size: {grid_size}x{grid_size}")
    logger.info(f"Seed: {seed}, modulus: {modulus}")
    logger.info(f"Iteration bound: {max_iterations}")

    rng = np.random.default_rng(seed)
    grid = Grid.generate(grid_size, grid_size, rng, modulus=modulus)
    logger.info(f"Initial live cells: {grid.count_alive()} ({grid.density() * 100:.1f}%)")

    service = ConwayService(InMemoryBoardStore(), verify_cycles=verify_cycles)
    board_id = service.create_board(encode_state(grid))

    outcome = service.run_to_completion(board_id, max_iterations)

    logger.info("\n=== OUTCOME ===")
    logger.info(f"Steps taken: {outcome.steps_taken}")
    logger.info(f"End state: {'YES' if outcome.is_end_state else 'NO'}")
    logger.info(f"Looping: {'YES' if outcome.is_looping else 'NO'}")
    if outcome.is_looping:
        logger.info(f"Cycle starts at history index {outcome.cycle_start}, length {outcome.cycle_length}")
    logger.info(f"Final live cells: {outcome.final_grid.count_alive()}")
    logger.info(f"\n{outcome.final_grid}")

    return outcome_to_dict(outcome, board_id)


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Run a random board to its final state")
    parser.add_argument("--grid-size", type=int, default=25, help="Grid size (square)")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument("--modulus", type=int, default=4, help="Live cell density divisor")
    parser.add_argument("--max-iterations", type=int, default=900, help="Iteration bound")
    parser.add_argument("--verify-cycles", action="store_true", help="Confirm cycles by board comparison")
    parser.add_argument("--output", type=str, default=None, help="Write the outcome JSON here")

    args = parser.parse_args()

    try:
        payload = run_final_state_demo(args.grid_size, args.seed, args.modulus,
                                       args.max_iterations, args.verify_cycles)
    except EndStateNotReached as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, 'w') as f:
            json.dump(payload, f)
        logger.info(f"Outcome saved to: {args.output}")

    sys.exit(0)
