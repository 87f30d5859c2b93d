"""Structural hashing of grid states for cycle detection.

The hash depends only on the positions of alive cells. It is accumulated
in row-major order with a 397 multiplier and wraps like a signed 32-bit
integer, so values stay interoperable with hashes produced by earlier
versions of the board service.
"""

import numpy as np
from numba import jit

HASH_PRIME = 397
_UINT32_MASK = 0xFFFFFFFF


@jit(nopython=True, cache=True)
def _accumulate_hash(cells: np.ndarray) -> int:
    """Accumulate the unsigned 32-bit hash of alive cell positions.

    Args:
        cells: 2D boolean array indexed [x, y]

    Returns:
        Hash in the range [0, 2**32)
    """
    width, height = cells.shape
    result = 0

    for x in range(width):
        for y in range(height):
            if cells[x, y]:
                result = ((result * HASH_PRIME) ^ (x * width + y)) & _UINT32_MASK

    return result


def to_int32(value: int) -> int:
    """Reinterpret an unsigned 32-bit value as signed."""
    value &= _UINT32_MASK
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def structural_hash(cells: np.ndarray) -> int:
    """Compute the structural hash of a grid state.

    Args:
        cells: 2D boolean array indexed [x, y]

    Returns:
        Signed 32-bit hash. Grids with no alive cells hash to 0.
    """
    return to_int32(int(_accumulate_hash(cells)))
