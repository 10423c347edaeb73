"""
railnet configuration management.
Centralised settings for a solve: search parameters, strategy choice and
logging, saved and loaded as YAML or JSON.
"""
import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .metaheuristic import AnnealParams, TabuParams


class LogLevel(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Strategy(Enum):
    TABU = "tabu"
    ANNEAL = "anneal"


@dataclass
class TabuConfig:
    """Tabu search configuration"""
    initial_timeout: int = 1000
    size_adjust: int = 10
    min_timeout: int = 1


@dataclass
class AnnealConfig:
    """Simulated annealing configuration"""
    initial_temp: float = 540.0
    # Derived from final_temp over the iteration budget when left unset
    temp_scale: Optional[float] = None
    final_temp: float = 1.0


@dataclass
class SolverConfig:
    """Local search configuration"""
    strategy: Strategy = Strategy.TABU
    max_iterations: int = 1000
    neighbour_chance: float = 0.8
    seed: Optional[int] = None
    max_switches: int = 1
    stale_limit: int = 20
    pool_interval: int = 100
    progress: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: LogLevel = LogLevel.INFO
    # also write records to this file when set
    log_file: Optional[str] = None


@dataclass
class RunConfig:
    """Main configuration class containing all settings"""
    solver: SolverConfig = field(default_factory=SolverConfig)
    tabu: TabuConfig = field(default_factory=TabuConfig)
    anneal: AnnealConfig = field(default_factory=AnnealConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def solver_params(self) -> Union[TabuParams, AnnealParams]:
        """Params object for the configured strategy"""
        if self.solver.strategy is Strategy.TABU:
            return TabuParams(
                initial_timeout=self.tabu.initial_timeout,
                size_adjust=self.tabu.size_adjust,
                min_timeout=self.tabu.min_timeout,
            )
        if self.anneal.temp_scale is not None:
            return AnnealParams(self.anneal.initial_temp, self.anneal.temp_scale)
        return AnnealParams.for_schedule(
            self.anneal.initial_temp, self.anneal.final_temp, self.solver.max_iterations
        )

    def save_to_file(self, file_path: Union[str, Path]):
        """Save configuration to file (JSON or YAML)"""
        file_path = Path(file_path)
        config_dict = self.to_dict()

        if file_path.suffix.lower() in ['.yaml', '.yml']:
            with open(file_path, 'w') as f:
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
        else:
            with open(file_path, 'w') as f:
                json.dump(config_dict, f, indent=2, default=str)

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> 'RunConfig':
        """Load configuration from file"""
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        if file_path.suffix.lower() in ['.yaml', '.yml']:
            with open(file_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        else:
            with open(file_path, 'r') as f:
                config_data = json.load(f)

        return cls.from_dict(config_data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        def convert_value(value):
            if isinstance(value, Enum):
                return value.value
            elif isinstance(value, dict):
                return {k: convert_value(v) for k, v in value.items()}
            elif isinstance(value, (list, tuple)):
                return [convert_value(item) for item in value]
            else:
                return value

        return convert_value(asdict(self))

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'RunConfig':
        """Create configuration from dictionary"""
        config_kwargs = {}

        if 'solver' in config_dict:
            solver = dict(config_dict['solver'])
            if isinstance(solver.get('strategy'), str):
                solver['strategy'] = Strategy(solver['strategy'])
            config_kwargs['solver'] = SolverConfig(**solver)

        if 'tabu' in config_dict:
            config_kwargs['tabu'] = TabuConfig(**config_dict['tabu'])

        if 'anneal' in config_dict:
            config_kwargs['anneal'] = AnnealConfig(**config_dict['anneal'])

        if 'logging' in config_dict:
            logging_cfg = dict(config_dict['logging'])
            if isinstance(logging_cfg.get('level'), str):
                logging_cfg['level'] = LogLevel(logging_cfg['level'].lower())
            config_kwargs['logging'] = LoggingConfig(**logging_cfg)

        return cls(**config_kwargs)

    def validate(self) -> List[str]:
        """Validate configuration and return list of issues"""
        issues = []

        if self.solver.max_iterations < 0:
            issues.append(f"Invalid max_iterations: {self.solver.max_iterations} (must be >= 0)")

        if not 0.0 <= self.solver.neighbour_chance <= 1.0:
            issues.append(f"Invalid neighbour_chance: {self.solver.neighbour_chance} (must be between 0 and 1)")

        if self.solver.max_switches < 0:
            issues.append(f"Invalid max_switches: {self.solver.max_switches} (must be >= 0)")

        if self.solver.pool_interval < 1:
            issues.append(f"Invalid pool_interval: {self.solver.pool_interval} (must be >= 1)")

        if self.tabu.initial_timeout < self.tabu.min_timeout:
            issues.append("Tabu initial_timeout is below min_timeout")

        if self.tabu.size_adjust < 0 or self.tabu.min_timeout < 0:
            issues.append("Tabu size_adjust and min_timeout must be >= 0")

        if self.anneal.initial_temp <= 0 or self.anneal.final_temp <= 0:
            issues.append("Annealing temperatures must be positive")

        if self.anneal.temp_scale is not None and not 0.0 < self.anneal.temp_scale <= 1.0:
            issues.append(f"Invalid temp_scale: {self.anneal.temp_scale} (must be in (0, 1])")

        return issues


def get_default_config() -> RunConfig:
    """Get default configuration"""
    return RunConfig()
