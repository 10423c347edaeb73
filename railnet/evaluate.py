"""
evaluate.py – scores a network by simulating commuter flow on it.

For every origin station a best-first search runs over a ride graph whose
states are (station, line, direction, switches used).  Riding to the next
stop costs the track time; boarding another line at the current station
costs that line's expected wait.  Pairs that cannot reach each other get a
large finite penalty so the objective never becomes infinite.
"""

from __future__ import annotations

import heapq
import logging
from bisect import bisect_left
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Sequence, Tuple

import numpy as np

from .models import ScheduleType, TrainLine
from .problem import Problem

log = logging.getLogger("railnet.evaluate")

# penalty time for a disconnected pair of stations
UNREACHABLE_TIME = 1e10
# switches allowed per journey
DEFAULT_MAX_SWITCHES = 1


class Direction(IntEnum):
    FORWARD = 0
    BACKWARD = 1


@dataclass(order=True)
class _QueueNode:
    # Only the score takes part in heap ordering.  Scores are sums of
    # finite non-negative times, so the ordering is total.
    score: float
    station: int = field(compare=False)
    line: int = field(compare=False)
    direction: Direction = field(compare=False)
    # index of `station` in the line's route
    progress: int = field(compare=False)
    switches: int = field(compare=False)


def line_delays(problem: Problem, lines: Sequence[TrainLine]) -> List[float]:
    """
    Expected wait for each line: half a full cycle over the number of trains.
    """
    delays = []
    for line in lines:
        route = line.route
        cycle = sum(problem.track_times[a, b] for a, b in zip(route, route[1:]))
        if line.schedule is ScheduleType.CIRCULAR:
            cycle += problem.track_times[route[-1], route[0]]
        delays.append(float(cycle) / (2.0 * line.n))
    return delays


def _stops_by_station(n: int, lines: Sequence[TrainLine]) -> List[List[Tuple[int, int]]]:
    stops: List[List[Tuple[int, int]]] = [[] for _ in range(n)]
    for idx, line in enumerate(lines):
        for pos, station in enumerate(line.route):
            stops[station].append((idx, pos))
    return stops


def _directions(line: TrainLine) -> Tuple[Direction, ...]:
    if line.schedule is ScheduleType.BIDIRECTIONAL:
        return (Direction.FORWARD, Direction.BACKWARD)
    return (Direction.FORWARD,)


def travel_times(
    problem: Problem,
    lines: Sequence[TrainLine],
    max_switches: int = DEFAULT_MAX_SWITCHES,
    unreachable_time: float = UNREACHABLE_TIME,
) -> np.ndarray:
    """
    Symmetric matrix of the fastest commute between every pair of stations.

    States are deduplicated per (station, line, direction, switches used), not
    per (station, line, direction): a state reached with spare switches is
    still expanded after the same triple was reached with none left.
    """
    n = problem.n
    tt = problem.track_times
    delays = line_delays(problem, lines)
    stops = _stops_by_station(n, lines)
    dirs = [_directions(line) for line in lines]

    times = np.full((n, n), unreachable_time, dtype=np.float64)
    np.fill_diagonal(times, 0.0)

    for origin in range(n):
        # Pairs with lower stations were settled by earlier origins.
        unvisited = list(range(origin, n))
        processed: List[Tuple[int, int, int, int]] = []
        queue: List[_QueueNode] = []

        for idx, pos in stops[origin]:
            for d in dirs[idx]:
                queue.append(_QueueNode(0.0, origin, idx, d, pos, 0))
        heapq.heapify(queue)

        while queue and unvisited:
            node = heapq.heappop(queue)

            i = bisect_left(unvisited, node.station)
            if i < len(unvisited) and unvisited[i] == node.station:
                times[origin, node.station] = node.score
                times[node.station, origin] = node.score
                del unvisited[i]

            state = (node.station, node.line, int(node.direction), node.switches)
            j = bisect_left(processed, state)
            if j < len(processed) and processed[j] == state:
                continue
            processed.insert(j, state)

            # stay on the same train
            route = lines[node.line].route
            step = 1 if node.direction is Direction.FORWARD else -1
            next_pos = (node.progress + step) % len(route)
            next_station = route[next_pos]
            heapq.heappush(queue, _QueueNode(
                node.score + float(tt[node.station, next_station]),
                next_station, node.line, node.direction, next_pos, node.switches,
            ))

            # or change to another line here
            if node.switches >= max_switches:
                continue
            for idx, pos in stops[node.station]:
                if idx == node.line:
                    continue
                score = node.score + delays[idx]
                for d in dirs[idx]:
                    heapq.heappush(queue, _QueueNode(
                        score, node.station, idx, d, pos, node.switches + 1,
                    ))

    return times


def evaluate(
    problem: Problem,
    lines: Sequence[TrainLine],
    max_switches: int = DEFAULT_MAX_SWITCHES,
) -> float:
    """
    Demand-weighted total travel time of the network; lower is better.

    Each unordered pair is counted once.
    """
    times = travel_times(problem, lines, max_switches)
    score = float((times * problem.travel_frequencies).sum()) / 2.0
    log.debug("Evaluated %d lines → %.4f", len(lines), score)
    return score
