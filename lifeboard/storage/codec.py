"""Wire codec for board states.

Boards travel as a JSON array of equally long arrays. Cells are written as
the integers 0 and 1, never as JSON booleans, so that stored boards stay
readable by existing clients. ``true``/``false`` are still accepted when
reading.
"""

import json
import logging

from ..core.grid import Grid
from ..errors import InvalidArgument

logger = logging.getLogger(__name__)

EXAMPLE_STATE = "[[0,1],[0,1]]"


def decode_state(state_json: str) -> Grid:
    """Parse a JSON board state into a Grid.

    Args:
        state_json: Text such as ``[[0,1],[0,1]]``

    Returns:
        Grid: Parsed board

    Raises:
        InvalidArgument: If the text is not a rectangular 0/1 array within bounds
    """
    if state_json is None:
        raise InvalidArgument(f"Please provide a state like the following: {EXAMPLE_STATE}")

    try:
        rows = json.loads(state_json)
    except (TypeError, RecursionError, json.JSONDecodeError) as e:
        raise InvalidArgument(f"Please provide a state like the following: {EXAMPLE_STATE}") from e

    if rows is None:
        raise InvalidArgument(f"Please provide a state like the following: {EXAMPLE_STATE}")

    try:
        return Grid.from_rows(rows)
    except InvalidArgument as e:
        logger.debug(f"Rejected board state: {e}")
        raise


def encode_state(grid: Grid) -> str:
    """Serialize a Grid to compact 0/1 JSON."""
    return json.dumps(grid.to_rows(), separators=(",", ":"))
