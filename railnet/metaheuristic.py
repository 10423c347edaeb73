"""
metaheuristic.py – tabu search and simulated annealing.

Both strategies share one capability: given a batch of budget-feasible
neighbours, pick the next solution (and its score) or decline to move.
Each is built from its own params dataclass, which is how the solver knows
which strategy to run.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, Tuple, Type

import numpy as np

from .models import TrainLine
from .neighbourhood import WorkingSolution

log = logging.getLogger("railnet.metaheuristic")

Choice = Optional[Tuple[WorkingSolution, float]]


class SearchContext(Protocol):
    """What a strategy needs from the solver: a way to score candidates."""

    def evaluate(self, candidate: WorkingSolution) -> float: ...


class Metaheuristic(Protocol):
    """Abstraction over tabu search, simulated annealing, etc."""

    @classmethod
    def from_params(cls, params, rng: np.random.Generator) -> "Metaheuristic": ...

    def choose_update(
        self,
        candidates: Sequence[WorkingSolution],
        context: SearchContext,
        prev_score: float,
        time: int,
    ) -> Choice:
        """
        Select a neighbouring candidate, returning it with its score, and
        update internal state; ``None`` when nothing is acceptable.
        """
        ...


# ---------------------------------------------------------------------------#
# Tabu search                                                                #
# ---------------------------------------------------------------------------#


@dataclass(frozen=True)
class TabuParams:
    # iterations before a tabu entry times out
    initial_timeout: int = 1000
    # amount the timeout moves by every iteration
    size_adjust: int = 10
    # the timeout never shrinks below this
    min_timeout: int = 1

    def __post_init__(self):
        if self.initial_timeout < self.min_timeout:
            raise ValueError("initial_timeout must be >= min_timeout")
        if self.size_adjust < 0 or self.min_timeout < 0:
            raise ValueError("size_adjust and min_timeout must be >= 0")

    @property
    def strategy(self) -> Type["TabuSearch"]:
        return TabuSearch


class TabuSearch:
    """Recency-based tabu list keyed on the full line list."""

    def __init__(self, params: TabuParams):
        self.params = params
        self.tabu: Dict[Tuple[TrainLine, ...], int] = {}
        self.tabu_timeout = params.initial_timeout

    @classmethod
    def from_params(cls, params: TabuParams, rng: np.random.Generator) -> "TabuSearch":
        return cls(params)

    def _shrink(self) -> None:
        self.tabu_timeout = max(self.params.min_timeout, self.tabu_timeout - self.params.size_adjust)

    def is_tabu(self, candidate: WorkingSolution) -> bool:
        return candidate.signature in self.tabu

    def choose_update(
        self,
        candidates: Sequence[WorkingSolution],
        context: SearchContext,
        prev_score: float,
        time: int,
    ) -> Choice:
        self.tabu = {
            sig: t for sig, t in self.tabu.items() if t + self.tabu_timeout >= time
        }

        best: Choice = None
        for candidate in candidates:
            if self.is_tabu(candidate):
                continue
            score = context.evaluate(candidate)
            if best is None or score < best[1]:
                best = (candidate, score)

        if best is None:
            self._shrink()
            log.debug("All %d candidates tabu – timeout now %d", len(candidates), self.tabu_timeout)
            return None

        solution, score = best
        if score > prev_score:
            # selected neighbour is worse: loosen the tabu
            self._shrink()
        else:
            self.tabu_timeout += self.params.size_adjust
        self.tabu[solution.signature] = time
        return best


# ---------------------------------------------------------------------------#
# Simulated annealing                                                        #
# ---------------------------------------------------------------------------#


@dataclass(frozen=True)
class AnnealParams:
    initial_temp: float
    # geometric cooling factor applied on every call, in (0, 1]
    temp_scale: float

    def __post_init__(self):
        if self.initial_temp <= 0:
            raise ValueError("initial_temp must be positive")
        if not 0.0 < self.temp_scale <= 1.0:
            raise ValueError("temp_scale must be in (0, 1]")

    @classmethod
    def for_schedule(cls, initial_temp: float, final_temp: float, iterations: int) -> "AnnealParams":
        """Cool from `initial_temp` to `final_temp` over `iterations` calls."""
        scale = (final_temp / initial_temp) ** (1.0 / max(1, iterations))
        return cls(initial_temp=initial_temp, temp_scale=min(1.0, scale))

    @property
    def strategy(self) -> Type["SimulatedAnnealing"]:
        return SimulatedAnnealing


class SimulatedAnnealing:
    """Metropolis acceptance with geometric cooling."""

    def __init__(self, params: AnnealParams, rng: np.random.Generator):
        self.params = params
        self.temp = params.initial_temp
        self.rng = rng

    @classmethod
    def from_params(cls, params: AnnealParams, rng: np.random.Generator) -> "SimulatedAnnealing":
        return cls(params, rng)

    def acceptance_probability(self, prev_score: float, score: float) -> float:
        if self.temp <= 0.0:
            return 0.0
        return math.exp(min(0.0, (prev_score - score) / self.temp))

    def choose_update(
        self,
        candidates: Sequence[WorkingSolution],
        context: SearchContext,
        prev_score: float,
        time: int,
    ) -> Choice:
        self.temp *= self.params.temp_scale
        order: List[int] = list(self.rng.permutation(len(candidates)))
        for idx in order:
            candidate = candidates[int(idx)]
            score = context.evaluate(candidate)
            if score < prev_score or self.rng.random() < self.acceptance_probability(prev_score, score):
                return candidate, score
        return None
