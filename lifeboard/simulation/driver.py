"""Iteration driver: runs an engine forward and classifies where it ends.

The driver steps a ``GridEngine`` up to a bound while keeping the ordered
history of structural hashes seen so far. A step that changes nothing is
an end state; a step that reproduces an earlier hash closes a cycle. If
the bound runs out first the outcome is inconclusive, which is a normal
return value here. Escalating it to an error is the caller's decision.
"""

from dataclasses import dataclass
from typing import List, Optional
import logging

import numpy as np

from ..core.conway import ConwayEngine, GridEngine
from ..core.grid import Grid
from ..errors import InvalidArgument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOutcome:
    """Result of driving a board for up to N steps."""
    final_grid: Grid
    iterations_run: int         # Zero-based index of the last step executed
    steps_taken: int            # Number of step() calls performed
    is_end_state: bool = False
    is_looping: bool = False
    cycle_start: int = 0        # Index into the hash history where the cycle begins
    cycle_length: int = 0

    @property
    def is_conclusive(self) -> bool:
        """True if the run reached a fixed point or a cycle."""
        return self.is_end_state or self.is_looping


def _snapshot(grid: Grid) -> bytes:
    return np.packbits(grid.state).tobytes()


class IterationDriver:
    """Drives a grid engine and detects fixed points and cycles.

    Cycle detection is hash based. With ``verify_cycles`` enabled, a hash
    hit is only reported as a cycle when the board is also bit-for-bit
    equal to the earlier board with that hash; this costs a packed copy of
    every visited board.
    """

    def __init__(self, engine: Optional[GridEngine] = None, verify_cycles: bool = False):
        """Initialize the driver.

        Args:
            engine: Engine to step (a fresh ConwayEngine if None)
            verify_cycles: Confirm hash hits with a full board comparison
        """
        self.engine = engine if engine is not None else ConwayEngine()
        self.verify_cycles = verify_cycles

    def run(self, initial_grid: Grid, max_iterations: int) -> RunOutcome:
        """Step ``initial_grid`` at most ``max_iterations`` times.

        Args:
            initial_grid: Starting board
            max_iterations: Upper bound on the number of steps

        Returns:
            RunOutcome describing the final board and why the run stopped

        Raises:
            InvalidArgument: If max_iterations is negative
        """
        if max_iterations < 0:
            raise InvalidArgument(f"Iterations must be zero or greater, got {max_iterations}")

        self.engine.load(initial_grid)

        initial_hash = initial_grid.structural_hash()
        history: List[int] = [initial_hash]
        seen = {initial_hash}
        # Packed boards parallel to history, only kept when verifying cycles
        snapshots: List[bytes] = [_snapshot(initial_grid)] if self.verify_cycles else []

        iterations_run = 0
        steps_taken = 0
        is_end_state = False
        is_looping = False
        cycle_start = 0
        cycle_length = 0

        for i in range(max_iterations):
            outcome = self.engine.step()
            iterations_run = i
            steps_taken = i + 1

            if not outcome.did_change:
                is_end_state = True
                logger.debug(f"Board stopped changing at iteration {i}")
                break

            step_hash = outcome.structural_hash
            current = _snapshot(self.engine.current_grid()) if self.verify_cycles else b""

            if step_hash in seen:
                start = self._find_cycle_start(history, snapshots, step_hash, current)
                if start is not None:
                    is_looping = True
                    cycle_start = start
                    cycle_length = len(history) - cycle_start
                    logger.debug(f"Cycle detected at iteration {i}: start={cycle_start}, length={cycle_length}")
                    break
                logger.warning(f"Structural hash collision at iteration {i} (hash {step_hash}); continuing")

            if self.verify_cycles:
                snapshots.append(current)
            history.append(step_hash)
            seen.add(step_hash)

        final_grid = self.engine.current_grid()

        result = RunOutcome(
            final_grid=final_grid,
            iterations_run=iterations_run,
            steps_taken=steps_taken,
            is_end_state=is_end_state,
            is_looping=is_looping,
            cycle_start=cycle_start,
            cycle_length=cycle_length,
        )

        if not result.is_conclusive:
            logger.info(f"No end state or cycle within {max_iterations} iterations")
        else:
            logger.info(f"Run finished after {steps_taken} steps: "
                        f"end_state={is_end_state}, looping={is_looping}")

        return result

    def _find_cycle_start(self, history: List[int], snapshots: List[bytes],
                          step_hash: int, current: bytes) -> Optional[int]:
        """Index of the earlier history entry the current board repeats.

        Without verification this is the first occurrence of the hash.
        With verification it is the first occurrence whose stored board
        equals the current one, or None for a pure hash collision.
        """
        if not self.verify_cycles:
            return history.index(step_hash)

        for index, value in enumerate(history):
            if value == step_hash and snapshots[index] == current:
                return index

        return None
