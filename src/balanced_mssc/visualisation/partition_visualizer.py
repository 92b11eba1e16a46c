from __future__ import annotations

"""partition_visualizer.py

Quick visual inspection of balanced clustering results and of how a VNS run
converged.

Example
-------
>>> from balanced_mssc import get_solver, VNSConfig
>>> solver = get_solver("vns", config=VNSConfig(n_clusters=3, time_limit=2.0))
>>> labels = solver.fit_predict(X)
>>>
>>> viz = PartitionVisualizer(X, labels)
>>> viz.summary_table()
>>> viz.plot_partition()
>>> PartitionVisualizer.plot_convergence(solver.trace_)
"""

from collections.abc import Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

import logging

_LOG = logging.getLogger(__name__)


class PartitionVisualizer:
    """Visualise a partition of points.

    Parameters
    ----------
    data : array-like | pandas.DataFrame
        ``(n, d)`` coordinates, one row per point.
    labels : Sequence[int] | numpy.ndarray
        Cluster of every point; must have the same length as *data*.
    label_name : str, optional (default="cluster")
        Name of the partition column in generated tables.
    """

    def __init__(
        self,
        data,
        labels: Sequence[int],
        *,
        label_name: str = "cluster",
    ) -> None:
        if not isinstance(data, pd.DataFrame):
            arr = np.asarray(data, dtype=float)
            if arr.ndim == 1:
                arr = arr.reshape(-1, 1)
            data = pd.DataFrame(arr, columns=[f"x{j}" for j in range(arr.shape[1])])
        if len(data) != len(labels):
            raise ValueError("'data' and 'labels' must be of the same length.")
        self.data: pd.DataFrame = data.reset_index(drop=True)
        self.labels: pd.Series = pd.Series(np.asarray(labels), name=label_name)
        self._df: pd.DataFrame = pd.concat([self.data, self.labels], axis=1)
        self.label_name: str = label_name

    # ---------------------------------------------------------------------
    # Tabular summaries
    # ---------------------------------------------------------------------
    def summary_table(self) -> pd.DataFrame:
        """
        Per-cluster size and feature means.

        Returns
        -------
        pd.DataFrame
        """
        grouped = self._df.groupby(self.label_name)
        summary = grouped.mean().add_suffix("_mean")
        summary.insert(0, "size", grouped.size())
        return summary.sort_index()

    # ------------------------------------------------------------------
    #  colour-blind-safe palette helper
    # ------------------------------------------------------------------
    @staticmethod
    def _cluster_palette(k: int) -> list:
        """Return ≥ *k* discernible colours (Okabe–Ito, then tab20)."""
        okabe_ito = [
            "#E69F00", "#56B4E9", "#009E73", "#F0E442",
            "#0072B2", "#D55E00", "#CC79A7", "#000000",
        ]
        if k <= 8:
            return okabe_ito[:k]
        cmap = plt.get_cmap("tab20")
        return [cmap(i % cmap.N) for i in range(k)]

    # ------------------------------------------------------------------
    #  Plots
    # ------------------------------------------------------------------
    def plot_partition(self, ax: plt.Axes | None = None, title: str | None = None) -> plt.Figure:
        """Scatter the first two coordinates, one colour per cluster."""
        if ax is None:
            fig, ax = plt.subplots(figsize=(6, 5))
        else:
            fig = ax.figure

        cols = list(self.data.columns)
        x_col = cols[0]
        y_col = cols[1] if len(cols) > 1 else None
        clusters = sorted(self.labels.unique())
        palette = self._cluster_palette(len(clusters))

        for colour, c in zip(palette, clusters):
            part = self._df[self._df[self.label_name] == c]
            y = part[y_col] if y_col is not None else np.zeros(len(part))
            ax.scatter(part[x_col], y, s=18, color=colour, label=f"{self.label_name} {c}")

        ax.set_xlabel(str(x_col))
        ax.set_ylabel(str(y_col) if y_col is not None else "")
        ax.set_title(title or f"{len(clusters)} clusters, n = {len(self._df)}")
        if len(clusters) <= 12:
            ax.legend(fontsize="small", frameon=False)
        return fig

    @staticmethod
    def plot_convergence(trace, ax: plt.Axes | None = None, title: str | None = None) -> plt.Figure:
        """
        Step plot of the best objective against elapsed seconds.

        Parameters
        ----------
        trace : Sequence[TracePoint]
            Improvement points as recorded by the VNS controller.
        """
        if ax is None:
            fig, ax = plt.subplots(figsize=(6, 4))
        else:
            fig = ax.figure

        if not trace:
            _LOG.warning("Empty convergence trace - nothing to plot")
            return fig

        times = [tp.elapsed for tp in trace]
        values = [tp.objective for tp in trace]
        ax.step(times, values, where="post", marker="o", markersize=3)
        ax.set_xlabel("elapsed [s]")
        ax.set_ylabel("best objective")
        ax.set_title(title or "VNS convergence")
        ax.grid(True, alpha=0.3)
        return fig
