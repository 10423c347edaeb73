import json

import numpy as np
import pytest
import yaml

from railnet.generate import random_problem
from railnet.problem_io import ProblemFormatError, load_problem, parse_problem, save_problem


@pytest.mark.parametrize("suffix", [".yaml", ".yml", ".json"])
def test_round_trip_is_exact(tmp_path, suffix):
    problem = random_problem(6, 0.3, 12.5, np.random.default_rng(0))
    path = save_problem(problem, tmp_path / f"problem{suffix}")
    assert load_problem(path) == problem


def test_yaml_file_is_readable(tmp_path, triangle):
    path = save_problem(triangle, tmp_path / "triangle.yaml")
    data = yaml.safe_load(path.read_text())
    assert data["n"] == 3
    assert data["track_costs"][1] == [1.0, 0.0, 3.0]
    assert data["train_price"] == 10.0


def _raw(triangle):
    return {
        "n": 3,
        "track_costs": triangle.track_costs.tolist(),
        "track_times": triangle.track_times.tolist(),
        "travel_frequencies": triangle.travel_frequencies.tolist(),
        "train_price": 10.0,
        "total_budget": 1000.0,
    }


def test_parse_mapping(triangle):
    assert parse_problem(_raw(triangle)) == triangle


def test_asymmetric_matrix_rejected(triangle):
    raw = _raw(triangle)
    raw["track_times"][0][1] = 9.0
    with pytest.raises(ProblemFormatError, match="symmetric"):
        parse_problem(raw)


def test_wrong_shape_rejected(triangle):
    raw = _raw(triangle)
    raw["track_costs"] = [[0.0, 1.0], [1.0, 0.0]]
    with pytest.raises(ProblemFormatError):
        parse_problem(raw)


def test_nonzero_diagonal_rejected(triangle):
    raw = _raw(triangle)
    raw["travel_frequencies"][2][2] = 1.0
    with pytest.raises(ProblemFormatError):
        parse_problem(raw)


@pytest.mark.parametrize("field, value", [
    ("train_price", 0.0),
    ("total_budget", -1.0),
    ("n", 1),
])
def test_bad_scalars_rejected(triangle, field, value):
    raw = _raw(triangle)
    raw[field] = value
    with pytest.raises(ProblemFormatError):
        parse_problem(raw)


def test_unknown_key_rejected(triangle):
    raw = _raw(triangle)
    raw["colour"] = "red"
    with pytest.raises(ProblemFormatError):
        parse_problem(raw)


def test_garbage_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{ not json")
    with pytest.raises(ProblemFormatError):
        load_problem(path)


def test_top_level_list(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ProblemFormatError, match="mapping"):
        load_problem(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_problem(tmp_path / "nope.yaml")


def test_format_error_is_value_error(tmp_path, triangle):
    path = tmp_path / "bad.json"
    raw = _raw(triangle)
    raw["n"] = 4
    path.write_text(json.dumps(raw))
    with pytest.raises(ValueError):
        load_problem(path)
