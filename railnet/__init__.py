"""
railnet – transit network design by local search.
Top-level package.  Exposes the public API and sets the package log
level early so every sub-module inherits it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Final

__all__ = [
    "logger",
    "PROJECT_ROOT",
    "Problem",
    "ScheduleType",
    "TrainLine",
    "Solution",
    "evaluate",
    "big_loop",
    "load_problem",
    "save_problem",
    "Solver",
    "TabuParams",
    "AnnealParams",
]

# ---------- paths ----------
PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parent.parent

# ---------- logging ----------
LOG_LEVEL = os.getenv("RAILNET_LOG_LEVEL", "INFO").upper()

logger = logging.getLogger("railnet")
logger.setLevel(LOG_LEVEL)
logger.debug("Logging initialised (level=%s)", LOG_LEVEL)

from .problem import Problem  # noqa: E402
from .models import ScheduleType, Solution, TrainLine  # noqa: E402
from .evaluate import evaluate  # noqa: E402
from .baseline import big_loop  # noqa: E402
from .problem_io import load_problem, save_problem  # noqa: E402
from .metaheuristic import AnnealParams, TabuParams  # noqa: E402
from .solver import Solver  # noqa: E402
