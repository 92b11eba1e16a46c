from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

import numpy as np
import pandas as pd

from ...solvers.vns_heuristic import TracePoint, VNSResult


# ------------------------------------------------------------------
# one batch of runs on the same instance
# ------------------------------------------------------------------
@dataclass(slots=True)
class BatchSummary:
    instance        : str
    best_objective  : float
    mean_objective  : float
    best_time       : float
    mean_time       : float
    best_labels     : np.ndarray = field(repr=False)
    runs            : pd.DataFrame = field(repr=False)
    best_trace      : List[TracePoint] = field(default_factory=list, repr=False)

    @classmethod
    def from_runs(
            cls,
            instance: str,
            results: Sequence[VNSResult],
            seeds: Sequence[int],
        ) -> "BatchSummary":
        """
        Aggregate *results* (one per seed). The best run is the first with
        the lowest objective; its ``elapsed`` is the time its best solution
        was found.
        """
        if not results:
            raise ValueError("Empty results collection")
        if len(results) != len(seeds):
            raise ValueError("Need exactly one seed per result")

        runs = pd.DataFrame([
            {
                "run"       : r,
                "seed"      : seed,
                "objective" : res.objective,
                "time"      : res.solution.elapsed,
                "iterations": res.iterations,
                "elapsed"   : res.elapsed,
            }
            for r, (seed, res) in enumerate(zip(seeds, results), start=1)
        ])

        best = min(range(len(results)), key=lambda r: results[r].objective)
        best_res = results[best]
        return cls(
            instance        = str(instance),
            best_objective  = float(best_res.objective),
            mean_objective  = float(runs["objective"].mean()),
            best_time       = float(best_res.solution.elapsed),
            mean_time       = float(runs["time"].mean()),
            best_labels     = best_res.labels,
            runs            = runs,
            best_trace      = list(best_res.trace),
        )

    # table that is easy to persist (CSV/Parquet/…)
    def statistics_table(self) -> pd.DataFrame:
        """One-row table in the column order of the statistics file, preformatted."""
        return pd.DataFrame([[
            self.instance,
            f"{self.best_objective:.8e}",
            f"{self.mean_objective:.8e}",
            f"{self.best_time:.4f}",
            f"{self.mean_time:.4f}",
        ]])

    def assignment_table(self) -> pd.DataFrame:
        """One-row table: instance followed by the cluster of every point."""
        return pd.DataFrame([[self.instance, *self.best_labels.tolist()]])


# ------------------------------------------------------------------
# append-only writers
# ------------------------------------------------------------------
def _append_row(path: str | Path, table: pd.DataFrame) -> Path:
    path = Path(path)
    table.to_csv(path, mode="a", header=False, index=False)
    return path


def append_statistics(path: str | Path, summary: BatchSummary) -> Path:
    """``instance,best,mean,best_time,mean_time`` appended to *path*."""
    return _append_row(path, summary.statistics_table())


def append_assignment(path: str | Path, summary: BatchSummary) -> Path:
    """``instance,label_0,...,label_{n-1}`` appended to *path*."""
    return _append_row(path, summary.assignment_table())
