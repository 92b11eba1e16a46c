from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import logging

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from ...core import VNSBalancedCluster, VNSConfig
from ...metrics.distance_cache import DistanceCache
from ...preprocessing import read_snapshot, snapshot_path
from ...solvers.park_miller import ParkMiller
from ...solvers.solution import Solution
from ...solvers.vns_heuristic import VNSResult
from ...visualisation import PartitionVisualizer
from .results import BatchSummary

_LOG = logging.getLogger(__name__)


def run_trials(
    points          : np.ndarray,
    instance        : str,
    n_clusters      : int,
    time_limit      : float,
    n_runs          : int,
    seed            : int,
    init_dir        : Optional[str | Path] = None,
    **overrides     : Any,
) -> BatchSummary:
    """
    Run the VNS *n_runs* times on one instance.

    Run *r* (0-based) gets its own generator seeded with ``seed + r`` and its
    own solutions; only the read-only distance cache is shared. With
    *init_dir*, run *r* starts from ``<init_dir>/<stem>-init<r+1>.bin``
    instead of a random partition.

    Extra keyword arguments are forwarded to :class:`VNSConfig`.
    """
    if n_runs < 1:
        raise ValueError(f"n_runs must be >= 1, got {n_runs}")

    cache = DistanceCache(points)
    results: List[VNSResult] = []
    seeds: List[int] = []

    for run in range(n_runs):
        run_seed = seed + run
        cfg = VNSConfig(
            n_clusters=n_clusters,
            random_state=run_seed,
            time_limit=time_limit,
            **overrides,
        )
        solver = VNSBalancedCluster(cfg, generator=ParkMiller(run_seed))

        initial, init_time = None, 0.0
        if init_dir is not None:
            init_file = snapshot_path(init_dir, instance, run + 1)
            _LOG.info("Loading initial solution from: %s", init_file)
            initial = Solution(n_clusters, cache.n, cache)
            init_time = read_snapshot(init_file, initial)

        _LOG.info("Execution %d/%d, seed = %d, max time = %.4f", run + 1, n_runs, run_seed, time_limit)
        solver.fit(D=cache, initial=initial, init_time=init_time)
        _LOG.info(
            "Objective function value: %.8e in %.4f seconds",
            solver.score_, solver.solution_.elapsed,
        )

        results.append(VNSResult(
            solution=solver.solution_,
            iterations=solver.iterations_,
            elapsed=solver.runtime_ + init_time,
            trace=solver.trace_,
        ))
        seeds.append(run_seed)

    summary = BatchSummary.from_runs(instance, results, seeds)
    _LOG.info(
        "Best objective function value found: %.8e in %.4f seconds; average %.8e, average time %.4fs",
        summary.best_objective, summary.best_time, summary.mean_objective, summary.mean_time,
    )
    return summary


# ------- kedro node wrappers ----------------------

def benchmark_instance(
    points          : np.ndarray,
    instance        : str,
    n_clusters      : int,
    time_limit      : float,
    n_runs          : int,
    seed            : int,
    init_dir        : Optional[str],
    vns_options     : Optional[Dict[str, Any]],
) -> BatchSummary:
    """Node form of :func:`run_trials` taking the VNS options as one dict."""
    return run_trials(
        points, instance, n_clusters, time_limit, n_runs, seed,
        init_dir=init_dir or None,
        **(vns_options or {}),
    )


def summarise_batch(
    summary: BatchSummary,
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """Statistics row, assignment row and per-run table of one batch."""
    stats = summary.statistics_table()
    stats.columns = ["instance", "best_objective", "mean_objective", "best_time", "mean_time"]
    assignment = summary.assignment_table()
    assignment.columns = ["instance", *[f"p{i}" for i in range(assignment.shape[1] - 1)]]
    return stats, assignment, summary.runs.copy()


def convergence_figure(summary: BatchSummary) -> plt.Figure:
    fig = PartitionVisualizer.plot_convergence(summary.best_trace, title=summary.instance)
    fig.tight_layout()
    return fig
