"""
neighbourhood.py – the solution being worked on and the moves around it.

A `WorkingSolution` carries its line list, the built-track matrix and the
construction-plus-trains cost.  Moves never rebuild the track matrix from
the routes: every track a move introduces is built when missing, and every
track it breaks is retired once no remaining line runs on it.  The cost is
then priced from the matrix exactly as `Solution.cost` prices it, so the
budget check during the search and on the final solution agree to the bit.
`recompute_cost` is the from-scratch check the incremental state must agree
with.

Move families
-------------
* duplicate a line
* remove a line (only when another line remains)
* insert a stop at a random position
* remove a stop (only from lines with three or more stops)
* add or take away a train (never below one)
* toggle the schedule type
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Set, Tuple

import numpy as np

from .evaluate import DEFAULT_MAX_SWITCHES, evaluate
from .models import (
    Solution,
    Track,
    TrainLine,
    build_track_matrix,
    n_trains,
    network_cost,
    required_tracks,
    track_key,
    train_tracks,
)
from .problem import Problem

log = logging.getLogger("railnet.neighbourhood")


def line_track_set(line: TrainLine) -> Set[Track]:
    return {track_key(a, b) for a, b in train_tracks(line)}


@dataclass(eq=False)
class WorkingSolution:
    """A candidate network the search is currently considering."""

    lines: Tuple[TrainLine, ...]
    built_tracks: np.ndarray
    # tracks + trains, not the objective
    cost: float

    def __post_init__(self):
        self.lines = tuple(self.lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WorkingSolution):
            return NotImplemented
        return self.lines == other.lines

    def __hash__(self) -> int:
        return hash(self.lines)

    # ------------------------------------------------------------------ build
    @classmethod
    def from_lines(cls, problem: Problem, lines: Iterable[TrainLine]) -> "WorkingSolution":
        lines = tuple(lines)
        ws = cls(lines, build_track_matrix(problem.n, lines), 0.0)
        ws.cost = ws.recompute_cost(problem)
        return ws

    @classmethod
    def from_solution(cls, problem: Problem, solution: Solution) -> "WorkingSolution":
        """Start from a solution, e.g. a baseline; its lines decide the tracks."""
        return cls.from_lines(problem, solution.train_lines)

    def to_solution(self, obj_value: float) -> Solution:
        return Solution(
            built_tracks=self.built_tracks.copy(),
            train_lines=list(self.lines),
            obj_value=obj_value,
        )

    # ---------------------------------------------------------------- queries
    @property
    def signature(self) -> Tuple[TrainLine, ...]:
        return self.lines

    def evaluate(self, problem: Problem, max_switches: int = DEFAULT_MAX_SWITCHES) -> float:
        return evaluate(problem, self.lines, max_switches)

    def recompute_cost(self, problem: Problem) -> float:
        """Cost of the tracks the lines require plus their trains, from scratch."""
        return network_cost(problem, build_track_matrix(problem.n, self.lines), n_trains(self.lines))

    # ------------------------------------------------------------ bookkeeping
    @staticmethod
    def _priced(
        problem: Problem, lines: Tuple[TrainLine, ...], built: np.ndarray
    ) -> "WorkingSolution":
        return WorkingSolution(lines, built, network_cost(problem, built, n_trains(lines)))

    def _derive(
        self,
        problem: Problem,
        lines: Tuple[TrainLine, ...],
        old_tracks: Set[Track],
        new_tracks: Set[Track],
    ) -> "WorkingSolution":
        """
        Neighbour with `lines`, where one line went from needing `old_tracks`
        to needing `new_tracks`.
        """
        added = new_tracks - old_tracks
        removed = old_tracks - new_tracks
        built = self.built_tracks
        if added or removed:
            built = built.copy()
        for a, b in added:
            built[a, b] = built[b, a] = True
        if removed:
            still_needed = required_tracks(lines)
            for a, b in removed:
                if (a, b) not in still_needed:
                    built[a, b] = built[b, a] = False
        return self._priced(problem, lines, built)

    def _swap_line(self, problem: Problem, i: int, line: TrainLine) -> "WorkingSolution":
        lines = self.lines[:i] + (line,) + self.lines[i + 1:]
        return self._derive(problem, lines, line_track_set(self.lines[i]), line_track_set(line))

    # ------------------------------------------------------------------ moves
    def duplicate_line(self, problem: Problem, i: int) -> "WorkingSolution":
        # tracks are already built, only the trains are new
        return self._priced(problem, self.lines + (self.lines[i],), self.built_tracks)

    def remove_line(self, problem: Problem, i: int) -> "WorkingSolution":
        line = self.lines[i]
        lines = self.lines[:i] + self.lines[i + 1:]
        return self._derive(problem, lines, line_track_set(line), set())

    def insert_stop(self, problem: Problem, i: int, station: int, index: int) -> "WorkingSolution":
        route = self.lines[i].route
        return self._swap_line(
            problem, i, self.lines[i].with_route(route[:index] + (station,) + route[index:])
        )

    def remove_stop(self, problem: Problem, i: int, index: int) -> "WorkingSolution":
        route = self.lines[i].route
        return self._swap_line(problem, i, self.lines[i].with_route(route[:index] + route[index + 1:]))

    def change_trains(self, problem: Problem, i: int, delta: int) -> "WorkingSolution":
        line = self.lines[i]
        lines = self.lines[:i] + (line.with_trains(line.n + delta),) + self.lines[i + 1:]
        return self._priced(problem, lines, self.built_tracks)

    def toggle_schedule(self, problem: Problem, i: int) -> "WorkingSolution":
        line = self.lines[i]
        return self._swap_line(problem, i, line.with_schedule(line.schedule.toggled()))


def generate_neighbours(
    solution: WorkingSolution,
    problem: Problem,
    neighbour_chance: float,
    rng: np.random.Generator,
) -> List[WorkingSolution]:
    """
    Propose neighbours of `solution`, each site kept with probability
    `neighbour_chance`.  The input is left untouched.
    """

    def skip() -> bool:
        return rng.random() > neighbour_chance

    lines = solution.lines
    neighbours: List[WorkingSolution] = []

    # Clone a line
    for i in range(len(lines)):
        if skip():
            continue
        neighbours.append(solution.duplicate_line(problem, i))

    # Remove a line
    if len(lines) > 1:
        for i in range(len(lines)):
            if skip():
                continue
            neighbours.append(solution.remove_line(problem, i))

    # Add a stop to a line
    for i, line in enumerate(lines):
        on_route = set(line.route)
        for station in range(problem.n):
            if station in on_route or skip():
                continue
            index = int(rng.integers(0, len(line.route) + 1))
            neighbours.append(solution.insert_stop(problem, i, station, index))

    # Remove a stop; a line must keep at least two
    for i, line in enumerate(lines):
        if len(line.route) < 3:
            continue
        for index in range(len(line.route)):
            if skip():
                continue
            neighbours.append(solution.remove_stop(problem, i, index))

    # Increase/decrease number of trains on a line
    for i, line in enumerate(lines):
        if skip():
            continue
        neighbours.append(solution.change_trains(problem, i, +1))
        if line.n > 1:
            neighbours.append(solution.change_trains(problem, i, -1))

    # Change the type of a line
    for i in range(len(lines)):
        if skip():
            continue
        neighbours.append(solution.toggle_schedule(problem, i))

    log.debug("Generated %d neighbours from %d lines", len(neighbours), len(lines))
    return neighbours

