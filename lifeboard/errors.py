"""Error taxonomy for board creation and simulation requests.

All three errors are terminal for the current request. Nothing in the
package retries or re-computes after raising one of them.
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .simulation.driver import RunOutcome


class LifeboardError(Exception):
    """Base class for all lifeboard errors."""


class InvalidArgument(LifeboardError, ValueError):
    """Grid failed to parse, is empty, or exceeds the dimension bound."""


class NotFound(LifeboardError, LookupError):
    """No board is stored under the requested identifier."""

    def __init__(self, board_id: int, message: Optional[str] = None):
        self.board_id = board_id
        super().__init__(message or f"Board {board_id} not found")


class EndStateNotReached(LifeboardError, RuntimeError):
    """Iteration bound exhausted with neither a fixed point nor a cycle.

    Raised only by run-to-completion requests. The driver itself reports
    this case as a normal, inconclusive outcome.
    """

    def __init__(self, max_iterations: int, outcome: Optional["RunOutcome"] = None):
        self.max_iterations = max_iterations
        self.outcome = outcome
        super().__init__(f"End state not reached after {max_iterations} iterations.")
