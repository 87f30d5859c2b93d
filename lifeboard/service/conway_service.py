"""Board service: the entry points request handlers call.

Each simulation request loads the stored starting board and runs it on a
freshly built engine, so concurrent requests never share buffers.
"""

from typing import Callable
import logging

from ..core.conway import ConwayEngine, GridEngine
from ..errors import EndStateNotReached
from ..simulation.driver import IterationDriver, RunOutcome
from ..storage.board_store import BoardRecord, BoardStore
from ..storage.codec import decode_state

logger = logging.getLogger(__name__)


class ConwayService:
    """Creates boards and answers next-state, N-state and final-state requests."""

    def __init__(self, store: BoardStore,
                 engine_factory: Callable[[], GridEngine] = ConwayEngine,
                 verify_cycles: bool = False):
        """Initialize the service.

        Args:
            store: Where starting boards are kept
            engine_factory: Builds one engine per run
            verify_cycles: Confirm hash-detected cycles with a full board comparison
        """
        self.store = store
        self.engine_factory = engine_factory
        self.verify_cycles = verify_cycles

    def create_board(self, state_json: str) -> int:
        """Validate and store a new starting board.

        Raises:
            InvalidArgument: If the state cannot be parsed or is out of bounds
        """
        grid = decode_state(state_json)
        return self.store.create_board(grid)

    def get_board(self, board_id: int) -> BoardRecord:
        return self.store.get_board(board_id)

    def step(self, board_id: int) -> RunOutcome:
        """State of the board after one generation."""
        return self._run(board_id, 1)

    def run_for(self, board_id: int, iterations: int) -> RunOutcome:
        """State of the board after up to ``iterations`` generations."""
        return self._run(board_id, iterations)

    def run_to_completion(self, board_id: int, max_iterations: int) -> RunOutcome:
        """Run until the board reaches a fixed point or a cycle.

        Raises:
            EndStateNotReached: If neither happens within max_iterations
        """
        outcome = self._run(board_id, max_iterations)

        if not outcome.is_conclusive:
            raise EndStateNotReached(max_iterations, outcome)

        return outcome

    def _run(self, board_id: int, iterations: int) -> RunOutcome:
        grid = self.store.load_initial_grid(board_id)
        driver = IterationDriver(self.engine_factory(), verify_cycles=self.verify_cycles)

        logger.debug(f"Running board {board_id} for up to {iterations} iterations")
        return driver.run(grid, iterations)
