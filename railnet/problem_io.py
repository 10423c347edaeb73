"""
problem_io.py – read and write problem files (YAML or JSON).

The suffix decides the format: ``.yaml`` / ``.yml`` are YAML, anything
else is JSON.  Every file goes through `ProblemDescription` on the way in,
so the solver only ever sees square, symmetric, zero-diagonal matrices.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from .problem import Problem, ProblemDescription

logger = logging.getLogger("railnet.io")

YAML_SUFFIXES = (".yaml", ".yml")


class ProblemFormatError(ValueError):
    """Raised when a problem file cannot be parsed or fails validation."""


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in YAML_SUFFIXES


def save_problem(problem: Problem, file_path: Union[str, Path]) -> Path:
    """Write `problem` to `file_path` and return the path."""
    file_path = Path(file_path)
    data = ProblemDescription.from_problem(problem).model_dump()

    with open(file_path, "w") as f:
        if _is_yaml(file_path):
            yaml.safe_dump(data, f, default_flow_style=None, sort_keys=False)
        else:
            json.dump(data, f, indent=2)

    logger.info("Problem with %d stations written to %s", problem.n, file_path)
    return file_path


def load_problem(file_path: Union[str, Path]) -> Problem:
    """
    Read a problem file.

    Raises
    ------
    FileNotFoundError   if the file does not exist
    ProblemFormatError  if it is not valid YAML/JSON or fails validation
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(file_path)

    try:
        with open(file_path, "r") as f:
            raw: Any = yaml.safe_load(f) if _is_yaml(file_path) else json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ProblemFormatError(f"{file_path}: cannot parse – {exc}") from exc

    if not isinstance(raw, dict):
        raise ProblemFormatError(f"{file_path}: expected a mapping at top level")

    problem = parse_problem(raw, source=str(file_path))
    logger.info("Loaded problem with %d stations from %s", problem.n, file_path)
    return problem


def parse_problem(raw: Dict[str, Any], source: str = "<data>") -> Problem:
    """Validate an already-decoded mapping."""
    try:
        return ProblemDescription(**raw).to_problem()
    except ValidationError as err:
        raise ProblemFormatError(f"{source}: invalid problem – {err}") from err
