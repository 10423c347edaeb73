"""
generate.py – random problem instances for experiments.

Two flavours:

* `random_problem` – every matrix entry uniform in [0, 1).
* `random_location_problem` – stations scattered in the unit square, matrix
  entries are distances plus some noise, so cost, time and demand are
  correlated the way they are on a real map.

Both return symmetric, zero-diagonal matrices and draw every number from
the generator passed in.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .problem import Problem

logger = logging.getLogger("railnet.generate")

# ─────────────────────────────────────────────────────────────────────────────
# PUBLIC PARAMETERS
# ─────────────────────────────────────────────────────────────────────────────
COST_NOISE = 0.05
TIME_NOISE = 0.05
DEMAND_NOISE = 0.4


def _symmetric(upper: np.ndarray) -> np.ndarray:
    """Mirror the strict upper triangle; zero diagonal."""
    mat = np.triu(upper, k=1)
    return mat + mat.T


def random_matrix(n: int, rng: np.random.Generator) -> np.ndarray:
    return _symmetric(rng.random((n, n)))


def location_matrix(
    x: np.ndarray, y: np.ndarray, noise: float, rng: np.random.Generator
) -> np.ndarray:
    """Distances between (x, y) points with uniform noise of width `noise`."""
    dist = np.hypot(x[:, None] - x[None, :], y[:, None] - y[None, :])
    noisy = np.maximum(0.0, dist + (rng.random(dist.shape) - 0.5) * noise)
    return _symmetric(noisy)


def random_problem(
    n: int,
    train_price: float,
    total_budget: float,
    rng: Optional[np.random.Generator] = None,
) -> Problem:
    if n < 2:
        raise ValueError("a problem needs at least two stations")
    rng = rng if rng is not None else np.random.default_rng()
    return Problem(
        n=n,
        track_costs=random_matrix(n, rng),
        track_times=random_matrix(n, rng),
        travel_frequencies=random_matrix(n, rng),
        train_price=train_price,
        total_budget=total_budget,
    )


def random_location_problem(
    n: int,
    train_price: float,
    total_budget: float,
    rng: Optional[np.random.Generator] = None,
) -> Problem:
    if n < 2:
        raise ValueError("a problem needs at least two stations")
    rng = rng if rng is not None else np.random.default_rng()
    x = rng.random(n)
    y = rng.random(n)
    problem = Problem(
        n=n,
        track_costs=location_matrix(x, y, COST_NOISE, rng),
        track_times=location_matrix(x, y, TIME_NOISE, rng),
        travel_frequencies=location_matrix(x, y, DEMAND_NOISE, rng),
        train_price=train_price,
        total_budget=total_budget,
    )
    logger.debug("Generated location problem with %d stations", n)
    return problem
