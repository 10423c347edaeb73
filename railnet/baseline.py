"""
Extremely simple solvers, used to seed the local search and as a
yardstick for it.  Note that due to their simplicity these may violate
the budget.
"""
from __future__ import annotations

import logging

from .evaluate import evaluate
from .models import ScheduleType, Solution, TrainLine, build_track_matrix
from .problem import Problem

log = logging.getLogger("railnet.baseline")


def big_loop(problem: Problem, schedule: ScheduleType) -> Solution:
    """A single train visiting every station in index order."""
    lines = [TrainLine(tuple(range(problem.n)), schedule, 1)]
    solution = Solution(
        built_tracks=build_track_matrix(problem.n, lines),
        train_lines=lines,
        obj_value=evaluate(problem, lines),
    )
    log.info(
        "Big loop (%s): objective %.3f, cost %.3f / %.3f",
        schedule.value,
        solution.obj_value,
        solution.cost(problem),
        problem.total_budget,
    )
    return solution
