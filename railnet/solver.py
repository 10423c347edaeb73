"""
solver.py – local search loop over train networks.

Each iteration proposes neighbours of the current network, drops the ones
over budget and lets the metaheuristic choose the next move.  The best
network seen is kept, good networks are pooled periodically, and after a
run of stale iterations the search restarts from a random pooled network
(intensification).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Union

import numpy as np
from tqdm import tqdm

from .baseline import big_loop
from .evaluate import DEFAULT_MAX_SWITCHES
from .metaheuristic import AnnealParams, Metaheuristic, TabuParams
from .models import ScheduleType, Solution
from .neighbourhood import WorkingSolution, generate_neighbours
from .problem import Problem

log = logging.getLogger("railnet.solver")

StrategyParams = Union[TabuParams, AnnealParams]


@dataclass
class SearchStats:
    """Counters collected over one solve, for diagnostics."""

    iterations: int = 0
    moves: int = 0
    skipped: int = 0
    improvements: int = 0
    restarts: int = 0
    infeasible_dropped: int = 0
    pool_size: int = 0


@dataclass
class Solver:
    """
    Parameters for the solver.  Varying these changes the quality and speed
    of the solution.

    Parameters
    ----------
    problem          : the train problem to solve
    mh_params        : TabuParams or AnnealParams; picks the metaheuristic
    max_iterations   : iterations to run, skipped ones included
    neighbour_chance : probability each possible neighbour is constructed
    rng              : random source; built from `seed` when omitted
    max_switches     : line changes a commuter may make per journey
    stale_limit      : stale iterations before restarting from the pool
    pool_interval    : how often the best solution is pooled
    initial          : starting network; the bidirectional big loop by default
    """

    problem: Problem
    mh_params: StrategyParams
    max_iterations: int = 1000
    neighbour_chance: float = 0.8
    rng: Optional[np.random.Generator] = None
    seed: Optional[int] = None
    max_switches: int = DEFAULT_MAX_SWITCHES
    stale_limit: int = 20
    pool_interval: int = 100
    initial: Optional[Solution] = None
    progress: bool = False
    stats: SearchStats = field(default_factory=SearchStats, init=False)

    def __post_init__(self):
        if not 0.0 <= self.neighbour_chance <= 1.0:
            raise ValueError("neighbour_chance must be in [0, 1]")
        if self.max_iterations < 0:
            raise ValueError("max_iterations must be >= 0")
        if self.pool_interval < 1:
            raise ValueError("pool_interval must be >= 1")
        if self.rng is None:
            self.rng = np.random.default_rng(self.seed)

    # SearchContext
    def evaluate(self, candidate: WorkingSolution) -> float:
        return candidate.evaluate(self.problem, self.max_switches)

    def make_metaheuristic(self) -> Metaheuristic:
        return self.mh_params.strategy.from_params(self.mh_params, self.rng)

    def initial_solution(self) -> WorkingSolution:
        seed = self.initial or big_loop(self.problem, ScheduleType.BIDIRECTIONAL)
        return WorkingSolution.from_solution(self.problem, seed)

    def feasible(self, candidates: List[WorkingSolution]) -> List[WorkingSolution]:
        # priced like Solution.cost, so this agrees with check_feasibility
        kept = [c for c in candidates if c.cost <= self.problem.total_budget]
        self.stats.infeasible_dropped += len(candidates) - len(kept)
        return kept

    def solve(self) -> Solution:
        """Solve the problem."""
        self.stats = SearchStats()
        solution = self.initial_solution()
        initial_score = self.evaluate(solution)
        best_solution = solution
        best_score = initial_score
        if solution.cost > self.problem.total_budget:
            log.warning(
                "Starting network costs %.3f, over the %.3f budget",
                solution.cost,
                self.problem.total_budget,
            )
            # any feasible move beats an infeasible start
            best_score = math.inf
        current_score = initial_score
        stale_time = 0
        good_solutions: List[WorkingSolution] = []

        mh = self.make_metaheuristic()
        log.info(
            "Starting %s on %d stations: %d iterations, initial objective %.3f",
            type(mh).__name__,
            self.problem.n,
            self.max_iterations,
            initial_score,
        )

        iterations = tqdm(
            range(self.max_iterations), desc="Searching", disable=not self.progress
        )
        for time in iterations:
            self.stats.iterations += 1
            # Consider possible neighbours to this solution
            neighbours = self.feasible(
                generate_neighbours(solution, self.problem, self.neighbour_chance, self.rng)
            )
            choice = mh.choose_update(neighbours, self, current_score, time)
            if choice is None:
                self.stats.skipped += 1
                continue
            solution, score = choice
            self.stats.moves += 1

            if score < best_score:
                best_solution = solution
                best_score = score
                self.stats.improvements += 1
                log.debug("Iter %d: new best %.4f (cost %.3f)", time, score, solution.cost)

            if current_score <= score:
                stale_time += 1
            else:
                stale_time = 0
            current_score = score

            if stale_time > self.stale_limit and good_solutions:
                pick = good_solutions[int(self.rng.integers(len(good_solutions)))]
                solution = pick
                current_score = self.evaluate(solution)
                stale_time = 0
                self.stats.restarts += 1
                log.debug("Iter %d: intensifying from pooled solution (%.4f)", time, current_score)

            if (
                time % self.pool_interval == 0
                and not math.isinf(best_score)
                and best_solution not in good_solutions
            ):
                good_solutions.append(best_solution)

            if self.progress:
                iterations.set_postfix(best=f"{best_score:.3f}", current=f"{current_score:.3f}")

        self.stats.pool_size = len(good_solutions)
        if math.isinf(best_score):
            log.warning("No feasible network found – returning the starting network")
            best_score = initial_score
        log.info(
            "Search finished: best objective %.4f, cost %.3f / %.3f (%d moves, %d skipped, %d restarts)",
            best_score,
            best_solution.cost,
            self.problem.total_budget,
            self.stats.moves,
            self.stats.skipped,
            self.stats.restarts,
        )
        return best_solution.to_solution(best_score)
