# ── railnet/__main__.py ──────────────────────────────────────
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from .baseline import big_loop
from .config import RunConfig, Strategy
from .generate import random_location_problem, random_problem
from .logging_config import configure
from .models import ScheduleType
from .problem_io import ProblemFormatError, load_problem, save_problem
from .report import export_summary, network_stats, solution_frame
from .solver import Solver

LOG = logging.getLogger("railnet.cli")


def create_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="railnet",
        description="Design a train network within a budget by local search",
    )
    parser.add_argument("--log-level", choices=["debug", "info", "warning", "error"],
                        help="Logging level (overrides the config file)")
    parser.add_argument("--log-file", help="Also write log records to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Write a random problem file")
    gen.add_argument("output", help="Problem file to write (.yaml/.yml or .json)")
    gen.add_argument("--stations", "-n", type=int, default=10)
    gen.add_argument("--train-price", type=float, default=1.0)
    gen.add_argument("--budget", type=float, default=100.0)
    gen.add_argument("--location", action="store_true",
                     help="Place stations on a map instead of uniform matrices")
    gen.add_argument("--seed", type=int)

    base = sub.add_parser("baseline", help="Score the single big-loop network")
    base.add_argument("problem", help="Problem file")
    base.add_argument("--schedule", choices=[s.value for s in ScheduleType],
                      default=ScheduleType.BIDIRECTIONAL.value)

    solve = sub.add_parser("solve", help="Run the local search")
    solve.add_argument("problem", help="Problem file")
    solve.add_argument("--config", help="Configuration file (YAML or JSON)")
    solve.add_argument("--strategy", choices=[s.value for s in Strategy])
    solve.add_argument("--iterations", type=int)
    solve.add_argument("--neighbour-chance", type=float)
    solve.add_argument("--seed", type=int)
    solve.add_argument("--max-switches", type=int)
    solve.add_argument("--progress", action="store_true", help="Show a progress bar")
    solve.add_argument("--output-dir", help="Write lines.csv and summary.json here")
    return parser


def _load_config(args: argparse.Namespace) -> RunConfig:
    config = RunConfig.load_from_file(args.config) if getattr(args, "config", None) else RunConfig()
    if getattr(args, "strategy", None):
        config.solver.strategy = Strategy(args.strategy)
    if getattr(args, "iterations", None) is not None:
        config.solver.max_iterations = args.iterations
    if getattr(args, "neighbour_chance", None) is not None:
        config.solver.neighbour_chance = args.neighbour_chance
    if getattr(args, "seed", None) is not None:
        config.solver.seed = args.seed
    if getattr(args, "max_switches", None) is not None:
        config.solver.max_switches = args.max_switches
    if getattr(args, "progress", False):
        config.solver.progress = True
    return config


def _print_solution(problem, solution) -> None:
    print(solution_frame(problem, solution).to_string(index=False))
    stats = network_stats(problem, solution)
    print(
        f"\nobjective {stats['objective']:.4f} │ cost {stats['cost']:.3f} / "
        f"{stats['budget']:.3f} │ feasible {stats['feasible']} │ "
        f"{stats['built_tracks']} tracks, {stats['components']} component(s)"
    )


def execute_generate(args: argparse.Namespace) -> int:
    rng = np.random.default_rng(args.seed)
    make = random_location_problem if args.location else random_problem
    problem = make(args.stations, args.train_price, args.budget, rng)
    save_problem(problem, args.output)
    return 0


def execute_baseline(args: argparse.Namespace) -> int:
    problem = load_problem(args.problem)
    solution = big_loop(problem, ScheduleType(args.schedule))
    _print_solution(problem, solution)
    return 0


def execute_solve(args: argparse.Namespace, config: RunConfig) -> int:
    problem = load_problem(args.problem)
    solver = Solver(
        problem=problem,
        mh_params=config.solver_params(),
        max_iterations=config.solver.max_iterations,
        neighbour_chance=config.solver.neighbour_chance,
        seed=config.solver.seed,
        max_switches=config.solver.max_switches,
        stale_limit=config.solver.stale_limit,
        pool_interval=config.solver.pool_interval,
        progress=config.solver.progress,
    )
    solution = solver.solve()
    _print_solution(problem, solution)
    if args.output_dir:
        export_summary(problem, solution, Path(args.output_dir))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args)
    except (FileNotFoundError, ValueError, TypeError) as exc:
        configure(args.log_level or "info", args.log_file)
        LOG.error("Cannot load configuration: %s", exc)
        return 1

    configure(args.log_level or config.logging.level.value, args.log_file or config.logging.log_file)
    issues = config.validate()
    if issues:
        for issue in issues:
            LOG.error("Configuration issue: %s", issue)
        return 1

    try:
        if args.command == "generate":
            return execute_generate(args)
        if args.command == "baseline":
            return execute_baseline(args)
        return execute_solve(args, config)
    except FileNotFoundError as exc:
        LOG.error("File not found: %s", exc)
    except ProblemFormatError as exc:
        LOG.error("Invalid problem file: %s", exc)
    except ValueError as exc:
        LOG.error("Invalid input: %s", exc)
    return 1


if __name__ == "__main__":
    sys.exit(main())
# ───────────────────────────────────────────────────────────
