"""Board grid state for Conway's Game of Life.

This module implements the rectangular boolean grid that boards are stored
as and simulations are run on. The grid uses a numpy boolean array indexed
``state[x, y]``, where ``x`` is the index of the inner array in the
serialized ``[[0,1],[1,0]]`` form and ``y`` the index inside it.
"""

import numpy as np
from typing import List, Optional, Sequence
import logging

from ..errors import InvalidArgument
from .hashing import structural_hash

logger = logging.getLogger(__name__)

MAX_BOARD_DIMENSION = 100


def validate_dimensions(width: int, height: int, max_dimension: int = MAX_BOARD_DIMENSION) -> None:
    """Check that both dimensions lie in [1, max_dimension].

    Raises:
        InvalidArgument: If either dimension is out of range
    """
    if width < 1 or height < 1:
        raise InvalidArgument("The board state is empty.")

    if width > max_dimension or height > max_dimension:
        raise InvalidArgument(f"The board state cannot exceed {max_dimension} in either dimension.")


class Grid:
    """2D boolean grid representing a Game of Life board.

    Attributes:
        width: Size of the outer axis (number of inner arrays)
        height: Size of the inner axis
        state: numpy boolean array of shape (width, height), True=alive
    """

    def __init__(self, width: int, height: int, initial_state: Optional[np.ndarray] = None):
        """Initialize grid with given dimensions.

        Args:
            width: Size of the outer axis
            height: Size of the inner axis
            initial_state: Optional boolean array of shape (width, height)

        Raises:
            InvalidArgument: If dimensions are out of range or initial_state doesn't match
        """
        validate_dimensions(width, height)

        self.width = width
        self.height = height

        if initial_state is not None:
            if initial_state.shape != (width, height):
                raise InvalidArgument(
                    f"Initial state shape {initial_state.shape} doesn't match grid size {(width, height)}"
                )
            if initial_state.dtype != bool:
                raise InvalidArgument("Initial state must be boolean array")
            self.state = initial_state.copy()
        else:
            self.state = np.zeros((width, height), dtype=bool)

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'Grid':
        """Create grid from a 2D array, coercing it to booleans."""
        if array.ndim != 2:
            raise InvalidArgument(f"Board state must be two-dimensional, got {array.ndim} dimensions")
        width, height = array.shape
        return cls(width, height, array.astype(bool))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[object]]) -> 'Grid':
        """Create grid from nested lists of 0/1 (or booleans).

        Raises:
            InvalidArgument: If rows are ragged, empty or contain other values
        """
        if not isinstance(rows, (list, tuple)) or not all(isinstance(row, (list, tuple)) for row in rows):
            raise InvalidArgument("Board state must be an array of arrays")

        width = len(rows)
        height = len(rows[0]) if width else 0
        validate_dimensions(width, height)

        grid = cls(width, height)
        for x, row in enumerate(rows):
            if len(row) != height:
                raise InvalidArgument(f"Row {x} has {len(row)} cells, expected {height}")
            for y, value in enumerate(row):
                # bool is a subclass of int, so True/False pass through here too
                if not isinstance(value, int) or value not in (0, 1):
                    raise InvalidArgument(f"Cell ({x}, {y}) must be 0 or 1, got {value!r}")
                grid.state[x, y] = bool(value)

        return grid

    @classmethod
    def generate(cls, width: int, height: int, rng: np.random.Generator,
                 use_random: bool = True, modulus: int = 25) -> 'Grid':
        """Generate a board, optionally filled at random.

        A cell is alive when a draw from [0, 100) is divisible by
        ``modulus``, so the default gives roughly one live cell in 25.

        Args:
            width: Size of the outer axis
            height: Size of the inner axis
            rng: Seeded random generator owned by the caller
            use_random: If False, return an all-dead grid
            modulus: Divisor controlling live cell density

        Returns:
            Grid: New board
        """
        if modulus < 1:
            raise InvalidArgument(f"modulus must be positive, got {modulus}")

        grid = cls(width, height)
        if use_random:
            draws = rng.integers(0, 100, size=(width, height))
            grid.state[:] = draws % modulus == 0

        logger.debug(f"Generated {width}x{height} board with {grid.count_alive()} live cells")
        return grid

    def to_rows(self) -> List[List[int]]:
        """Get grid as nested lists of 0/1 ints."""
        return self.state.astype(np.uint8).tolist()

    def copy(self) -> 'Grid':
        """Create a deep copy of the grid."""
        return Grid(self.width, self.height, self.state)

    def get(self, x: int, y: int) -> bool:
        """Get cell state at coordinates.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds for {self.width}x{self.height} grid")
        return bool(self.state[x, y])

    def set(self, x: int, y: int, alive: bool) -> None:
        """Set cell state at coordinates.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds for {self.width}x{self.height} grid")
        self.state[x, y] = alive

    def count_alive(self) -> int:
        """Count total number of alive cells."""
        return int(np.sum(self.state))

    def density(self) -> float:
        """Get fraction of cells that are alive."""
        return self.count_alive() / (self.width * self.height)

    def is_empty(self) -> bool:
        """Check if all cells are dead."""
        return not np.any(self.state)

    def structural_hash(self) -> int:
        """Hash of the alive cell positions (see ``hashing.structural_hash``)."""
        return structural_hash(self.state)

    def __getitem__(self, key) -> bool:
        """Access cell state using grid[x, y] syntax."""
        x, y = key
        return self.get(x, y)

    def __setitem__(self, key, value: bool) -> None:
        """Set cell state using grid[x, y] = value syntax."""
        x, y = key
        self.set(x, y, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return False
        return (self.width == other.width and
                self.height == other.height and
                np.array_equal(self.state, other.state))

    __hash__ = None

    def __str__(self) -> str:
        """String representation, one line per inner array."""
        return '\n'.join(
            ''.join('X' if alive else '.' for alive in row)
            for row in self.state
        )

    def __repr__(self) -> str:
        alive_count = self.count_alive()
        density_pct = self.density() * 100
        return f"Grid({self.width}x{self.height}, alive={alive_count}, density={density_pct:.1f}%)"
