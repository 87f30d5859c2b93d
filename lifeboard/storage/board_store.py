"""Board storage for starting states.

A store assigns sequential integer ids to new boards and keeps each
board's starting state as canonical 0/1 JSON text together with the time
it was last updated. Intermediate generations are never persisted.
"""

import abc
import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Union
import logging

from ..core.grid import Grid, validate_dimensions
from ..errors import NotFound
from .codec import decode_state, encode_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoardRecord:
    """A stored starting board."""
    board_id: int
    state_json: str
    last_updated: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def grid(self) -> Grid:
        """Decoded starting board."""
        return decode_state(self.state_json)

    def to_dict(self) -> dict:
        return {
            "board_id": self.board_id,
            "state_json": self.state_json,
            "last_updated": self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "BoardRecord":
        return cls(
            board_id=int(d["board_id"]),
            state_json=d["state_json"],
            last_updated=datetime.fromisoformat(d["last_updated"]),
        )


class BoardStore(abc.ABC):
    """Loads and creates starting boards by id."""

    def create_board(self, grid: Grid) -> int:
        """Store a new starting board.

        Args:
            grid: Board to store

        Returns:
            Identifier assigned to the board

        Raises:
            InvalidArgument: If either dimension is outside [1, 100]; nothing is stored
        """
        validate_dimensions(grid.width, grid.height)
        record = self._insert(encode_state(grid))
        logger.info(f"Created board {record.board_id} ({grid.width}x{grid.height}, "
                    f"{grid.count_alive()} live cells)")
        return record.board_id

    def get_board(self, board_id: int) -> BoardRecord:
        """Fetch a stored board record.

        Raises:
            NotFound: If no board is stored under board_id
        """
        record = self._fetch(board_id)
        if record is None:
            raise NotFound(board_id)
        return record

    def load_initial_grid(self, board_id: int) -> Grid:
        """Fetch and decode a stored starting board.

        Raises:
            NotFound: If no board is stored under board_id
        """
        return self.get_board(board_id).grid

    @abc.abstractmethod
    def _insert(self, state_json: str) -> BoardRecord:
        """Persist encoded state under the next id."""

    @abc.abstractmethod
    def _fetch(self, board_id: int) -> Optional[BoardRecord]:
        """Return the record for board_id, or None."""


class InMemoryBoardStore(BoardStore):
    """Process-local store, used for tests and one-shot runs."""

    def __init__(self):
        self._boards: Dict[int, BoardRecord] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def _insert(self, state_json: str) -> BoardRecord:
        with self._lock:
            record = BoardRecord(board_id=self._next_id, state_json=state_json)
            self._boards[record.board_id] = record
            self._next_id += 1
        return record

    def _fetch(self, board_id: int) -> Optional[BoardRecord]:
        return self._boards.get(board_id)

    def __len__(self) -> int:
        return len(self._boards)


class JsonlBoardStore(BoardStore):
    """Append-only JSON Lines file store.

    Each line holds one record: ``{"board_id", "state_json", "last_updated"}``.
    The file is read once on first access and then appended to.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._boards: Optional[Dict[int, BoardRecord]] = None
        self._lock = threading.Lock()

    def _load(self) -> Dict[int, BoardRecord]:
        if self._boards is not None:
            return self._boards

        boards: Dict[int, BoardRecord] = {}
        if self.path.exists():
            with open(self.path, 'r', encoding='utf-8') as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        record = BoardRecord.from_dict(json.loads(line))
                    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                        raise ValueError(f"Corrupt board record at {self.path}:{line_number}: {e}") from e
                    boards[record.board_id] = record
            logger.debug(f"Loaded {len(boards)} boards from {self.path}")

        self._boards = boards
        return boards

    def _insert(self, state_json: str) -> BoardRecord:
        with self._lock:
            boards = self._load()
            record = BoardRecord(board_id=max(boards, default=0) + 1, state_json=state_json)

            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'a', encoding='utf-8') as f:
                f.write(json.dumps(record.to_dict()) + "\n")

            boards[record.board_id] = record
        return record

    def _fetch(self, board_id: int) -> Optional[BoardRecord]:
        with self._lock:
            return self._load().get(board_id)
