"""Response shaping for boards and run outcomes.

Keys are camelCase and cell states are 0/1 integers, matching the JSON
that existing clients consume.
"""

import json
from typing import Any, Dict, Optional

from ..simulation.driver import RunOutcome
from ..storage.board_store import BoardRecord


def board_to_dict(record: BoardRecord) -> Dict[str, Any]:
    return {
        "id": record.board_id,
        "state": record.grid.to_rows(),
        "lastUpdated": record.last_updated.isoformat(),
    }


def outcome_to_dict(outcome: RunOutcome, board_id: Optional[int] = None) -> Dict[str, Any]:
    """Shape a run outcome for a response body.

    ``iterations`` is the zero-based index of the last step executed.
    """
    return {
        "id": board_id,
        "state": outcome.final_grid.to_rows(),
        "isEndState": outcome.is_end_state,
        "isLooping": outcome.is_looping,
        "cycleStart": outcome.cycle_start,
        "cycleLength": outcome.cycle_length,
        "iterations": outcome.iterations_run,
    }


def to_json(payload: Dict[str, Any], indent: Optional[int] = None) -> str:
    return json.dumps(payload, indent=indent)
