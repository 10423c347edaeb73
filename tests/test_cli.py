import json

import pytest

from railnet.__main__ import main
from railnet.problem_io import load_problem, save_problem


@pytest.fixture
def problem_file(tmp_path, triangle):
    return save_problem(triangle, tmp_path / "triangle.yaml")


def test_generate(tmp_path):
    out = tmp_path / "gen.json"
    assert main(["generate", str(out), "-n", "5", "--seed", "1", "--location"]) == 0
    assert load_problem(out).n == 5


def test_baseline(problem_file, capsys):
    assert main(["baseline", str(problem_file), "--schedule", "circular"]) == 0
    assert "objective 30.0000" in capsys.readouterr().out


def test_solve_writes_summary(tmp_path, problem_file):
    out_dir = tmp_path / "result"
    code = main([
        "solve", str(problem_file),
        "--iterations", "20", "--seed", "4", "--output-dir", str(out_dir),
    ])
    assert code == 0
    summary = json.loads((out_dir / "summary.json").read_text())
    assert summary["feasible"] is True
    assert summary["objective"] <= 25.0


def test_solve_with_config_file(tmp_path, problem_file):
    config = tmp_path / "run.yaml"
    config.write_text("solver:\n  strategy: anneal\n  max_iterations: 10\n")
    assert main(["solve", str(problem_file), "--config", str(config), "--seed", "2"]) == 0


def test_missing_problem(tmp_path):
    assert main(["baseline", str(tmp_path / "absent.yaml")]) == 1


def test_invalid_problem(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"n": 3}))
    assert main(["baseline", str(path)]) == 1


def test_invalid_settings(problem_file):
    assert main(["solve", str(problem_file), "--neighbour-chance", "3"]) == 1


def test_unknown_config_key(tmp_path, problem_file):
    config = tmp_path / "run.yaml"
    config.write_text("solver:\n  speed: 11\n")
    assert main(["solve", str(problem_file), "--config", str(config)]) == 1


def _namespace(**kwargs):
    import argparse

    defaults = dict(
        output=None, stations=4, train_price=1.0, budget=10.0, location=False, seed=0,
    )
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


def test_execute_generate_uniform(tmp_path):
    from railnet.__main__ import execute_generate

    out = tmp_path / "uniform.yml"
    assert execute_generate(_namespace(output=str(out))) == 0
    problem = load_problem(out)
    assert problem.n == 4
    assert problem.total_budget == 10.0


def test_generate_rejects_single_station(tmp_path):
    out = tmp_path / "tiny.json"
    assert main(["generate", str(out), "-n", "1"]) == 1
    assert not out.exists()


def test_log_file(tmp_path, problem_file):
    log_file = tmp_path / "run.log"
    assert main(["--log-file", str(log_file), "baseline", str(problem_file)]) == 0
    text = log_file.read_text()
    assert "railnet.baseline" in text
    assert "Big loop" in text
