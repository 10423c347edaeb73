"""
problem.py – the train routing problem and its validated wire form.

`Problem` is what the solver works on: numpy matrices, frozen for the
lifetime of a solve.  `ProblemDescription` is the pydantic model the loader
validates files against; the core itself never re-checks its input.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

MATRIX_FIELDS = ("track_costs", "track_times", "travel_frequencies")


@dataclass(frozen=True, eq=False)
class Problem:
    """A description of a general train route problem."""

    n: int
    # symmetric cost to build the track between two stations
    track_costs: np.ndarray
    # symmetric time to ride between two stations once a track exists
    track_times: np.ndarray
    # symmetric demand between two stations
    travel_frequencies: np.ndarray
    train_price: float
    total_budget: float

    def __post_init__(self):
        for name in MATRIX_FIELDS:
            arr = np.array(getattr(self, name), dtype=np.float64)
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)
        object.__setattr__(self, "train_price", float(self.train_price))
        object.__setattr__(self, "total_budget", float(self.total_budget))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Problem):
            return NotImplemented
        return (
            self.n == other.n
            and self.train_price == other.train_price
            and self.total_budget == other.total_budget
            and all(
                np.array_equal(getattr(self, f), getattr(other, f))
                for f in MATRIX_FIELDS
            )
        )

    def replace(self, **changes) -> "Problem":
        """Return a copy with some fields swapped out."""
        fields = {
            "n": self.n,
            "track_costs": self.track_costs,
            "track_times": self.track_times,
            "travel_frequencies": self.travel_frequencies,
            "train_price": self.train_price,
            "total_budget": self.total_budget,
        }
        fields.update(changes)
        return Problem(**fields)


class ProblemDescription(BaseModel):
    """Serialisable problem, as stored on disk."""

    model_config = ConfigDict(extra="forbid")

    n: int = Field(..., ge=2)
    track_costs: List[List[float]]
    track_times: List[List[float]]
    travel_frequencies: List[List[float]]
    train_price: float = Field(..., gt=0)
    total_budget: float = Field(..., ge=0)

    # ────────────── validators ──────────────────────────────────────────
    @model_validator(mode="after")
    def _check_matrices(self) -> "ProblemDescription":
        for name in MATRIX_FIELDS:
            mat = getattr(self, name)
            if len(mat) != self.n or any(len(row) != self.n for row in mat):
                raise ValueError(f"{name} must be {self.n}x{self.n}")
            for i in range(self.n):
                if mat[i][i] != 0.0:
                    raise ValueError(f"{name} has non-zero diagonal at {i}")
                for j in range(i + 1, self.n):
                    v = mat[i][j]
                    if not math.isfinite(v) or v < 0:
                        raise ValueError(f"{name}[{i}][{j}] must be finite and >= 0")
                    if v != mat[j][i]:
                        raise ValueError(f"{name} is not symmetric at ({i}, {j})")
        return self

    def to_problem(self) -> Problem:
        return Problem(
            n=self.n,
            track_costs=np.asarray(self.track_costs),
            track_times=np.asarray(self.track_times),
            travel_frequencies=np.asarray(self.travel_frequencies),
            train_price=self.train_price,
            total_budget=self.total_budget,
        )

    @classmethod
    def from_problem(cls, problem: Problem) -> "ProblemDescription":
        return cls(
            n=problem.n,
            track_costs=problem.track_costs.tolist(),
            track_times=problem.track_times.tolist(),
            travel_frequencies=problem.travel_frequencies.tolist(),
            train_price=problem.train_price,
            total_budget=problem.total_budget,
        )
