"""
lifeboard - Game of Life boards with end-state and cycle detection

Stores starting boards, advances them under Conway's rules and reports
whether a board settled into a fixed point or a repeating cycle.
"""

__version__ = "0.1.0"

from .core.grid import Grid, MAX_BOARD_DIMENSION
from .core.conway import ConwayEngine, GridEngine, StepOutcome
from .simulation.driver import IterationDriver, RunOutcome
from .errors import EndStateNotReached, InvalidArgument, LifeboardError, NotFound

__all__ = [
    'Grid',
    'MAX_BOARD_DIMENSION',
    'ConwayEngine',
    'GridEngine',
    'StepOutcome',
    'IterationDriver',
    'RunOutcome',
    'EndStateNotReached',
    'InvalidArgument',
    'LifeboardError',
    'NotFound',
    '__version__',
]
