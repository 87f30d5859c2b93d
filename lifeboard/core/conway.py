"""Conway's Game of Life stepping engine.

Holds a board and advances it one generation at a time. Each step reads
the current buffer and writes a second, same-sized scratch buffer, then
the two swap. Every cell's transition is therefore computed against the
same pre-step snapshot and no grid is allocated per step.
"""

import abc
from dataclasses import dataclass
from typing import Optional
import logging

import numpy as np
from numba import jit

from .conway_rules import ConwayRuleParams
from .grid import Grid
from .hashing import structural_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepOutcome:
    """Result of advancing a board by one generation."""
    did_change: bool        # True iff at least one cell differs from the pre-step grid
    structural_hash: int    # Hash of the post-step grid


@jit(nopython=True, cache=True)
def _step_kernel(cells: np.ndarray, out: np.ndarray,
                 survival: np.ndarray, birth: np.ndarray) -> bool:
    """Write the next generation of ``cells`` into ``out``.

    Args:
        cells: Current board, 2D boolean array indexed [x, y] (read only)
        out: Buffer of the same shape receiving the next generation
        survival: Lookup table, neighbor count -> live cell survives
        birth: Lookup table, neighbor count -> dead cell is born

    Returns:
        True if any cell changed state
    """
    width, height = cells.shape
    changed = False

    for x in range(width):
        for y in range(height):
            count = 0
            for dx in range(-1, 2):
                nx = x + dx
                if nx < 0 or nx >= width:
                    continue
                for dy in range(-1, 2):
                    ny = y + dy
                    if ny < 0 or ny >= height or (dx == 0 and dy == 0):
                        continue
                    if cells[nx, ny]:
                        count += 1

            if cells[x, y]:
                alive = survival[count]
            else:
                alive = birth[count]

            out[x, y] = alive
            if alive != cells[x, y]:
                changed = True

    return changed


class GridEngine(abc.ABC):
    """Capability interface for anything that can step a board.

    The iteration driver depends only on this interface, so tests can
    substitute scripted engines without reimplementing the rules.
    """

    @abc.abstractmethod
    def load(self, grid: Grid) -> None:
        """Replace the held board."""

    @abc.abstractmethod
    def step(self) -> StepOutcome:
        """Advance the held board by one generation."""

    @abc.abstractmethod
    def current_grid(self) -> Grid:
        """Return the held board."""


class ConwayEngine(GridEngine):
    """Conway's Game of Life engine with a dead (non-wrapping) border.

    One instance holds run-local buffers and must not be shared between
    concurrent runs.
    """

    def __init__(self, rule_params: Optional[ConwayRuleParams] = None):
        """Initialize the engine.

        Args:
            rule_params: Birth/survival rules (standard Conway if None)
        """
        self.rule_params = rule_params or ConwayRuleParams.standard()
        self._survival = self.rule_params.survival_table()
        self._birth = self.rule_params.birth_table()

        self._cells: Optional[np.ndarray] = None
        self._scratch: Optional[np.ndarray] = None

    def load(self, grid: Grid) -> None:
        """Replace the held board and reset the scratch buffer.

        The board's cells are copied, so later changes to ``grid`` do not
        leak into the engine.
        """
        self._cells = np.array(grid.state, dtype=bool, copy=True)
        self._scratch = np.zeros_like(self._cells)
        logger.debug(f"Loaded {grid.width}x{grid.height} board into engine")

    def step(self) -> StepOutcome:
        """Apply one generation of Conway's rules.

        Returns:
            StepOutcome for the new board

        Raises:
            RuntimeError: If no board has been loaded
        """
        if self._cells is None:
            raise RuntimeError("No board loaded; call load() before step()")

        changed = _step_kernel(self._cells, self._scratch, self._survival, self._birth)

        # Old board becomes the scratch buffer for the next step
        self._cells, self._scratch = self._scratch, self._cells

        return StepOutcome(did_change=bool(changed), structural_hash=structural_hash(self._cells))

    def current_grid(self) -> Grid:
        """Snapshot of the held board.

        A copy is returned because the underlying buffer is overwritten
        on the step after next.

        Raises:
            RuntimeError: If no board has been loaded
        """
        if self._cells is None:
            raise RuntimeError("No board loaded; call load() before current_grid()")

        return Grid.from_array(self._cells)
