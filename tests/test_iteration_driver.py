"""Tests for the iteration driver.

Covers end-state and cycle classification against the real engine, and
the bookkeeping rules (history indices, tie-breaks, bounds, collisions)
against a scripted engine that replays fixed step outcomes.
"""

from typing import List, Optional, Tuple

import pytest
import numpy as np
from lifeboard.core.grid import Grid
from lifeboard.core.conway import ConwayEngine, GridEngine, StepOutcome
from lifeboard.simulation.driver import IterationDriver, RunOutcome
from lifeboard.errors import InvalidArgument


BLINKER = [
    [0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0],
    [0, 1, 1, 1, 0],
    [0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0],
]

GLIDER = [
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 1, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 1, 0, 0, 0, 0, 0, 0],
    [0, 1, 1, 1, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
]


class ScriptedEngine(GridEngine):
    """Engine double that replays scripted (did_change, hash[, grid]) steps."""

    def __init__(self, script: List[Tuple]):
        self.script = list(script)
        self.loaded: Optional[Grid] = None
        self.current: Optional[Grid] = None
        self.steps = 0

    def load(self, grid: Grid) -> None:
        self.loaded = grid
        self.current = grid.copy()

    def step(self) -> StepOutcome:
        entry = self.script[self.steps]
        self.steps += 1
        if len(entry) > 2:
            self.current = entry[2]
        return StepOutcome(did_change=entry[0], structural_hash=entry[1])

    def current_grid(self) -> Grid:
        return self.current.copy()


def run_rows(rows, max_iterations, **kwargs) -> RunOutcome:
    return IterationDriver(**kwargs).run(Grid.from_rows(rows), max_iterations)


class TestEndStates:
    """Test fixed point detection with the real engine."""

    def test_all_dead_board(self):
        """A dead 2x2 board is an end state on the first step."""
        outcome = run_rows([[0, 0], [0, 0]], 1)

        assert outcome.is_end_state is True
        assert outcome.is_looping is False
        assert outcome.iterations_run == 0
        assert outcome.steps_taken == 1

    def test_isolated_cell(self):
        """A lone cell dies on step one and is an end state on step two."""
        one = run_rows([[0, 0, 0], [0, 1, 0], [0, 0, 0]], 1)
        assert one.final_grid.is_empty()
        assert not one.is_conclusive

        outcome = run_rows([[0, 0, 0], [0, 1, 0], [0, 0, 0]], 10)
        assert outcome.is_end_state is True
        assert outcome.iterations_run == 1
        assert outcome.final_grid.is_empty()

    def test_block_still_life(self):
        """A block reports an end state, not a self-loop."""
        outcome = run_rows([[1, 1], [1, 1]], 50)

        assert outcome.is_end_state is True
        assert outcome.is_looping is False
        assert outcome.iterations_run == 0
        assert outcome.final_grid == Grid.from_rows([[1, 1], [1, 1]])


class TestCycles:
    """Test cycle detection with the real engine."""

    def test_blinker_cycle(self):
        outcome = run_rows(BLINKER, 2)

        assert outcome.is_looping is True
        assert outcome.is_end_state is False
        assert outcome.cycle_start == 0
        assert outcome.cycle_length == 2
        assert outcome.iterations_run == 1
        assert outcome.final_grid == Grid.from_rows(BLINKER)

    def test_blinker_not_detected_with_one_step(self):
        outcome = run_rows(BLINKER, 1)

        assert not outcome.is_conclusive
        assert outcome.iterations_run == 0
        assert outcome.steps_taken == 1

    def test_cycle_consistency(self):
        """Stepping the final board cycle_length times reproduces its hash."""
        rows = [[0] * 7 for _ in range(7)]
        rows[3][2] = rows[3][3] = rows[3][4] = 1
        rows[0][6] = 1
        outcome = run_rows(rows, 100)
        assert outcome.is_looping

        engine = ConwayEngine()
        engine.load(outcome.final_grid)
        for _ in range(outcome.cycle_length):
            last = engine.step()

        assert last.structural_hash == outcome.final_grid.structural_hash()

    def test_blinker_cycle_consistency(self):
        outcome = run_rows(BLINKER, 10)

        engine = ConwayEngine()
        engine.load(outcome.final_grid)
        for _ in range(outcome.cycle_length):
            engine.step()

        assert engine.current_grid() == outcome.final_grid

    def test_cycle_after_transient(self):
        """A stray cell that dies first pushes the cycle start past index 0."""
        rows = [[0] * 7 for _ in range(7)]
        rows[3][2] = rows[3][3] = rows[3][4] = 1
        rows[0][6] = 1
        outcome = run_rows(rows, 100)

        # history: [start, vertical, horizontal]; vertical repeats at index 1
        assert outcome.is_looping is True
        assert outcome.cycle_start == 1
        assert outcome.cycle_length == 2
        assert outcome.iterations_run == 2


class TestBounds:
    """Test iteration bound handling."""

    def test_inconclusive_glider(self):
        outcome = run_rows(GLIDER, 5)

        assert not outcome.is_end_state
        assert not outcome.is_looping
        assert outcome.steps_taken == 5
        assert outcome.iterations_run == 4

    def test_zero_iterations(self):
        outcome = run_rows(BLINKER, 0)

        assert outcome.steps_taken == 0
        assert outcome.iterations_run == 0
        assert not outcome.is_conclusive
        assert outcome.final_grid == Grid.from_rows(BLINKER)

    def test_negative_iterations(self):
        engine = ScriptedEngine([])
        with pytest.raises(InvalidArgument):
            IterationDriver(engine).run(Grid(2, 2), -1)
        assert engine.loaded is None

    @pytest.mark.parametrize("max_iterations", [1, 3, 7, 20])
    def test_bound_respected(self, max_iterations):
        """steps_taken never exceeds the bound and equals it when inconclusive."""
        start = Grid.generate(20, 20, np.random.default_rng(max_iterations), modulus=3)
        outcome = IterationDriver().run(start, max_iterations)

        assert outcome.steps_taken <= max_iterations
        if not outcome.is_conclusive:
            assert outcome.steps_taken == max_iterations

    def test_dimensions_preserved(self):
        start = Grid.generate(33, 7, np.random.default_rng(9), modulus=3)
        outcome = IterationDriver().run(start, 40)

        assert (outcome.final_grid.width, outcome.final_grid.height) == (33, 7)


class TestHistoryBookkeeping:
    """Test classification rules with scripted step outcomes."""

    def test_cycle_start_indexes_history(self):
        start = Grid(3, 3)  # hashes to 0
        engine = ScriptedEngine([(True, 5), (True, 7), (True, 5)])
        outcome = IterationDriver(engine).run(start, 10)

        # history: [0, 5, 7]; 5 first appears at index 1
        assert outcome.is_looping
        assert outcome.cycle_start == 1
        assert outcome.cycle_length == 2
        assert outcome.iterations_run == 2

    def test_return_to_initial_hash(self):
        engine = ScriptedEngine([(True, 11), (True, 12), (True, 0)])
        outcome = IterationDriver(engine).run(Grid(3, 3), 10)

        assert outcome.is_looping
        assert outcome.cycle_start == 0
        assert outcome.cycle_length == 3

    def test_end_state_wins_over_repeat(self):
        """An unchanged step is an end state even if its hash was seen."""
        engine = ScriptedEngine([(True, 9), (False, 9)])
        outcome = IterationDriver(engine).run(Grid(3, 3), 10)

        assert outcome.is_end_state
        assert not outcome.is_looping
        assert outcome.iterations_run == 1

    def test_stops_at_first_conclusion(self):
        engine = ScriptedEngine([(True, 1), (False, 1), (True, 2)])
        IterationDriver(engine).run(Grid(2, 2), 10)
        assert engine.steps == 2

    def test_default_cycle_fields(self):
        engine = ScriptedEngine([(True, 1), (True, 2)])
        outcome = IterationDriver(engine).run(Grid(2, 2), 2)

        assert outcome.cycle_start == 0
        assert outcome.cycle_length == 0

    def test_engine_receives_initial_grid(self):
        start = Grid.from_rows([[1, 0], [0, 1]])
        engine = ScriptedEngine([(False, 0)])
        IterationDriver(engine).run(start, 1)
        assert engine.loaded == start


class TestVerifiedCycles:
    """Test the full-board confirmation of hash hits."""

    def test_hash_collision_reported_as_cycle_without_verification(self):
        a = Grid.from_rows([[1, 0], [0, 0]])
        b = Grid.from_rows([[0, 1], [0, 0]])
        c = Grid.from_rows([[0, 0], [1, 0]])
        engine = ScriptedEngine([(True, 100, a), (True, 200, b), (True, 100, c)])

        outcome = IterationDriver(engine).run(Grid(2, 2), 3)
        assert outcome.is_looping

    def test_hash_collision_ignored_with_verification(self):
        a = Grid.from_rows([[1, 0], [0, 0]])
        b = Grid.from_rows([[0, 1], [0, 0]])
        c = Grid.from_rows([[0, 0], [1, 0]])
        engine = ScriptedEngine([(True, 100, a), (True, 200, b), (True, 100, c)])

        outcome = IterationDriver(engine, verify_cycles=True).run(Grid(2, 2), 3)
        assert not outcome.is_conclusive
        assert outcome.steps_taken == 3

    def test_collision_then_real_repeat(self):
        """After a collision the genuine repeat is still found."""
        a = Grid.from_rows([[1, 0], [0, 0]])
        b = Grid.from_rows([[0, 1], [0, 0]])
        c = Grid.from_rows([[0, 0], [1, 0]])
        script = [(True, 100, a), (True, 200, b), (True, 100, c), (True, 100, a)]

        outcome = IterationDriver(ScriptedEngine(script), verify_cycles=True).run(Grid(2, 2), 10)

        # history: [0, 100(a), 200(b), 100(c)]; a repeats at index 1
        assert outcome.is_looping
        assert outcome.cycle_start == 1
        assert outcome.cycle_length == 3

    def test_verified_blinker(self):
        outcome = run_rows(BLINKER, 10, verify_cycles=True)

        assert outcome.is_looping
        assert outcome.cycle_start == 0
        assert outcome.cycle_length == 2


class TestCornerCellHash:
    """A lone cell at (0, 0) hashes like a dead board."""

    def test_single_cell_board_reported_as_cycle(self):
        """Hash-only detection mistakes the dead successor for the start board."""
        outcome = run_rows([[1]], 5)

        assert outcome.final_grid.is_empty()
        assert outcome.is_looping is True
        assert outcome.is_end_state is False
        assert outcome.cycle_start == 0
        assert outcome.cycle_length == 1
        assert outcome.steps_taken == 1

    def test_single_cell_board_with_verification(self):
        """Comparing boards rejects the collision; the dead board then settles."""
        outcome = run_rows([[1]], 5, verify_cycles=True)

        assert outcome.is_end_state is True
        assert outcome.is_looping is False
        assert outcome.iterations_run == 1
        assert outcome.steps_taken == 2

    def test_corner_cell_with_verification(self):
        outcome = run_rows([[1, 0, 0], [0, 0, 0], [0, 0, 0]], 5, verify_cycles=True)

        assert outcome.is_end_state is True
        assert outcome.final_grid.is_empty()
