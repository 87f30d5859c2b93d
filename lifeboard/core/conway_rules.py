"""
Conway's Game of Life Rules

This module provides the birth/survival rules the stepping engine is built
on. The engine reads them as two boolean lookup tables indexed by live
neighbour count; the dead border is handled by the engine itself.
"""

from typing import Set, Optional

import numpy as np


# Standard Conway rules
SURVIVAL_SET: Set[int] = {2, 3}  # Live cells survive with 2-3 neighbors
BIRTH_SET: Set[int] = {3}        # Dead cells born with exactly 3 neighbors

MAX_NEIGHBORS = 8


class ConwayRuleParams:
    """Birth and survival neighbour counts for a life-like rule.

    Defaults to standard Conway rules.
    """

    def __init__(self,
                 survival_set: Optional[Set[int]] = None,
                 birth_set: Optional[Set[int]] = None):
        """Initialize rule parameters.

        Args:
            survival_set: Neighbor counts for live cell survival (default {2,3})
            birth_set: Neighbor counts for dead cell birth (default {3})

        Raises:
            ValueError: If a neighbor count is outside 0-8
        """
        self.survival_set: Set[int] = set(survival_set) if survival_set is not None else SURVIVAL_SET.copy()
        self.birth_set: Set[int] = set(birth_set) if birth_set is not None else BIRTH_SET.copy()

        for count in self.survival_set | self.birth_set:
            if not 0 <= count <= MAX_NEIGHBORS:
                raise ValueError(f"Neighbor count {count} outside 0-{MAX_NEIGHBORS}")

    @classmethod
    def standard(cls) -> 'ConwayRuleParams':
        """Create standard Conway rules."""
        return cls(SURVIVAL_SET.copy(), BIRTH_SET.copy())

    def next_state(self, alive: bool, live_neighbors: int) -> bool:
        """State of a cell after one generation.

        Args:
            alive: Current cell state
            live_neighbors: Number of live neighbors (0-8)
        """
        counts = self.survival_set if alive else self.birth_set
        return live_neighbors in counts

    def _table(self, alive: bool) -> np.ndarray:
        return np.array([self.next_state(alive, count) for count in range(MAX_NEIGHBORS + 1)], dtype=bool)

    def survival_table(self) -> np.ndarray:
        """Boolean lookup table: index = neighbor count, value = live cell survives."""
        return self._table(True)

    def birth_table(self) -> np.ndarray:
        """Boolean lookup table: index = neighbor count, value = dead cell is born."""
        return self._table(False)

    def __repr__(self) -> str:
        return f"ConwayRuleParams(survival={self.survival_set}, birth={self.birth_set})"
