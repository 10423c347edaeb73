import sys
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from railnet.problem import Problem  # noqa: E402


@pytest.fixture
def triangle():
    """Three stations, every pair connectable."""
    return Problem(
        n=3,
        track_costs=np.array([
            [0.0, 1.0, 2.0],
            [1.0, 0.0, 3.0],
            [2.0, 3.0, 0.0],
        ]),
        track_times=np.array([
            [0.0, 3.0, 2.0],
            [3.0, 0.0, 4.0],
            [2.0, 4.0, 0.0],
        ]),
        travel_frequencies=np.array([
            [0.0, 5.0, 1.0],
            [5.0, 0.0, 2.0],
            [1.0, 2.0, 0.0],
        ]),
        train_price=10.0,
        total_budget=1000.0,
    )


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_instance():
    from railnet.generate import random_location_problem

    return random_location_problem(7, 0.5, 6.0, np.random.default_rng(7))
