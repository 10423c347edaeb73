"""
report.py – tabular summary of a solution and a CSV/JSON export.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import networkx as nx
import pandas as pd

from .evaluate import line_delays
from .models import Solution
from .problem import Problem

logger = logging.getLogger("railnet.report")


def built_track_graph(problem: Problem, solution: Solution) -> nx.Graph:
    """Stations as nodes, built tracks as edges weighted by ride time."""
    g = nx.Graph()
    g.add_nodes_from(range(problem.n))
    n = problem.n
    for a in range(n):
        for b in range(a + 1, n):
            if solution.built_tracks[a, b]:
                g.add_edge(
                    a,
                    b,
                    cost=float(problem.track_costs[a, b]),
                    time=float(problem.track_times[a, b]),
                )
    return g


def solution_frame(problem: Problem, solution: Solution) -> pd.DataFrame:
    """One row per train line."""
    delays = line_delays(problem, solution.train_lines)
    rows = []
    for idx, (line, delay) in enumerate(zip(solution.train_lines, delays)):
        rows.append(
            {
                "line": idx,
                "route": "-".join(str(s) for s in line.route),
                "schedule": line.schedule.value,
                "trains": line.n,
                "stops": len(line.route),
                # wait is half a cycle per train
                "cycle_time": delay * 2.0 * line.n,
                "expected_wait": delay,
            }
        )
    return pd.DataFrame(
        rows,
        columns=["line", "route", "schedule", "trains", "stops", "cycle_time", "expected_wait"],
    )


def network_stats(problem: Problem, solution: Solution) -> Dict[str, Any]:
    g = built_track_graph(problem, solution)
    served = {s for line in solution.train_lines for s in line.route}
    return {
        "stations": problem.n,
        "lines": len(solution.train_lines),
        "trains": solution.n_trains,
        "built_tracks": g.number_of_edges(),
        "components": nx.number_connected_components(g),
        "unserved_stations": sorted(set(range(problem.n)) - served),
        "cost": solution.cost(problem),
        "budget": problem.total_budget,
        "feasible": solution.check_feasibility(problem),
        "objective": solution.obj_value,
    }


def export_summary(problem: Problem, solution: Solution, out_dir: Path) -> Path:
    """Write ``lines.csv`` and ``summary.json`` into `out_dir`."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    solution_frame(problem, solution).to_csv(out_dir / "lines.csv", index=False)
    with open(out_dir / "summary.json", "w") as f:
        json.dump(network_stats(problem, solution), f, indent=2)
    logger.info("Summary written to %s", out_dir)
    return out_dir
