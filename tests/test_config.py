import pytest

from railnet.config import LogLevel, RunConfig, Strategy, get_default_config
from railnet.metaheuristic import AnnealParams, TabuParams


def test_defaults_are_valid():
    config = get_default_config()
    assert config.validate() == []
    assert config.solver.strategy is Strategy.TABU
    assert config.logging.level is LogLevel.INFO


def test_tabu_params_from_config():
    config = RunConfig()
    config.tabu.initial_timeout = 50
    params = config.solver_params()
    assert isinstance(params, TabuParams)
    assert params.initial_timeout == 50


def test_anneal_params_from_schedule():
    config = RunConfig()
    config.solver.strategy = Strategy.ANNEAL
    config.solver.max_iterations = 10
    config.anneal.initial_temp = 100.0
    config.anneal.final_temp = 1.0
    params = config.solver_params()
    assert isinstance(params, AnnealParams)
    assert params.temp_scale == pytest.approx(0.01 ** 0.1)


def test_explicit_temp_scale_wins():
    config = RunConfig()
    config.solver.strategy = Strategy.ANNEAL
    config.anneal.temp_scale = 0.9
    assert config.solver_params().temp_scale == 0.9


@pytest.mark.parametrize("suffix", [".yaml", ".json"])
def test_save_and_load(tmp_path, suffix):
    config = RunConfig()
    config.solver.strategy = Strategy.ANNEAL
    config.solver.seed = 7
    config.logging.level = LogLevel.DEBUG
    config.logging.log_file = "railnet.log"
    path = tmp_path / f"run{suffix}"
    config.save_to_file(path)
    assert RunConfig.load_from_file(path) == config


def test_partial_file(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("solver:\n  strategy: anneal\n  max_iterations: 5\nlogging:\n  level: WARNING\n")
    config = RunConfig.load_from_file(path)
    assert config.solver.strategy is Strategy.ANNEAL
    assert config.solver.max_iterations == 5
    assert config.logging.level is LogLevel.WARNING
    assert config.tabu.initial_timeout == 1000


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        RunConfig.load_from_file(tmp_path / "absent.yaml")


def test_validate_reports_issues():
    config = RunConfig()
    config.solver.neighbour_chance = 2.0
    config.solver.max_iterations = -3
    config.tabu.initial_timeout = 0
    config.tabu.min_timeout = 5
    config.anneal.final_temp = 0.0
    issues = config.validate()
    assert len(issues) == 4
    assert any("neighbour_chance" in issue for issue in issues)
