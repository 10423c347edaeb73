"""Core dataclasses: schedule type, train line, and the solver's solution."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Iterator, List, Tuple

import numpy as np

from .problem import Problem

Track = Tuple[int, int]


class ScheduleType(Enum):
    """
    Which way a train follows its route:

    * ``CIRCULAR`` goes back to the first stop after the last one.
    * ``BIDIRECTIONAL`` repeats the route reversed.
    """

    CIRCULAR = "circular"
    BIDIRECTIONAL = "bidirectional"

    def toggled(self) -> "ScheduleType":
        if self is ScheduleType.CIRCULAR:
            return ScheduleType.BIDIRECTIONAL
        return ScheduleType.CIRCULAR


@dataclass(frozen=True)
class TrainLine:
    route: Tuple[int, ...]
    schedule: ScheduleType
    n: int = 1

    def __post_init__(self):
        object.__setattr__(self, "route", tuple(int(s) for s in self.route))
        if self.n < 1:
            raise ValueError("a line must run at least one train")
        if len(self.route) < 2:
            raise ValueError("a route needs at least two stops")
        if len(set(self.route)) != len(self.route):
            raise ValueError(f"route visits a station twice: {self.route}")

    @property
    def first(self) -> int:
        return self.route[0]

    @property
    def last(self) -> int:
        return self.route[-1]

    def with_route(self, route: Iterable[int]) -> "TrainLine":
        return replace(self, route=tuple(route))

    def with_schedule(self, schedule: ScheduleType) -> "TrainLine":
        return replace(self, schedule=schedule)

    def with_trains(self, n: int) -> "TrainLine":
        return replace(self, n=n)


def train_tracks(line: TrainLine) -> Iterator[Track]:
    """Every track the line runs on, including the wrap track of a circular line."""
    route = line.route
    for a, b in zip(route, route[1:]):
        yield a, b
    if line.schedule is ScheduleType.CIRCULAR:
        yield route[0], route[-1]


def track_key(a: int, b: int) -> Track:
    return (a, b) if a < b else (b, a)


def required_tracks(lines: Iterable[TrainLine]) -> set:
    return {track_key(a, b) for line in lines for a, b in train_tracks(line)}


def build_track_matrix(n: int, lines: Iterable[TrainLine]) -> np.ndarray:
    """Symmetric boolean matrix of the tracks `lines` need, built from scratch."""
    built = np.zeros((n, n), dtype=bool)
    for a, b in required_tracks(lines):
        built[a, b] = built[b, a] = True
    return built


def n_trains(lines: Iterable[TrainLine]) -> int:
    return sum(line.n for line in lines)


def network_cost(problem: Problem, built_tracks: np.ndarray, trains: int) -> float:
    """Construction cost of `built_tracks` plus the price of `trains` trains."""
    track_cost = float((problem.track_costs * built_tracks).sum()) / 2.0
    return track_cost + trains * problem.train_price


@dataclass
class Solution:
    """The solver's answer: what to build, which lines to run, how good it is."""

    # symmetric matrix of the tracks to build
    built_tracks: np.ndarray
    train_lines: List[TrainLine]
    # lower is better
    obj_value: float

    @property
    def n_trains(self) -> int:
        return n_trains(self.train_lines)

    def cost(self, problem: Problem) -> float:
        return network_cost(problem, self.built_tracks, self.n_trains)

    def check_feasibility(self, problem: Problem) -> bool:
        return self.cost(problem) <= problem.total_budget
