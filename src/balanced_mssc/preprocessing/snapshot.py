"""
Binary initial-solution snapshots.

Layout (little-endian, no padding)::

    int32    version            (= 1)
    float64  init_time_seconds
    int32    n_data_points
    int32    n_clusters
    int32    assignment[n_data_points]
    float64  cluster_size[n_clusters]

The objective is never stored: loading always rebuilds ``sc`` and the
objective from the assignment.
"""
from __future__ import annotations

from pathlib import Path
import logging
import struct

import numpy as np

from ..exceptions import SnapshotError
from ..metrics.distance_cache import balanced_sizes
from ..solvers.solution import Solution

_LOG = logging.getLogger(__name__)

VERSION = 1
_HEADER = struct.Struct("<idii")


def snapshot_path(init_dir: str | Path, instance: str | Path, run: int) -> Path:
    """``<init_dir>/<instance stem>-init<run>.bin`` with a 1-based *run*."""
    return Path(init_dir) / f"{Path(instance).stem}-init{run}.bin"


def write_snapshot(path: str | Path, solution: Solution, init_time: float = 0.0) -> Path:
    path = Path(path)
    header = _HEADER.pack(VERSION, float(init_time), solution.n_points, solution.n_clusters)
    payload = (
        header
        + solution.assignment.astype("<i4").tobytes()
        + solution.cluster_sizes.astype("<f8").tobytes()
    )
    path.write_bytes(payload)
    _LOG.debug("Snapshot written to %s (%d bytes)", path, len(payload))
    return path


def read_snapshot(path: str | Path, solution: Solution) -> float:
    """
    Load the snapshot at *path* into *solution* (in place).

    Returns
    -------
    float
        The ``init_time_seconds`` recorded in the file.

    Raises
    ------
    SnapshotError
        On a version, dimension, length or cluster-size mismatch.
    """
    path = Path(path)
    data = path.read_bytes()
    if len(data) < _HEADER.size:
        raise SnapshotError(f"{path}: truncated header ({len(data)} bytes)")

    version, init_time, n_points, n_clusters = _HEADER.unpack_from(data)
    if version != VERSION:
        raise SnapshotError(f"{path}: unsupported snapshot version {version} (expected {VERSION})")
    if n_points != solution.n_points or n_clusters != solution.n_clusters:
        raise SnapshotError(
            f"{path}: snapshot is for N={n_points}, K={n_clusters}; "
            f"expected N={solution.n_points}, K={solution.n_clusters}"
        )

    expected_len = _HEADER.size + 4 * n_points + 8 * n_clusters
    if len(data) != expected_len:
        raise SnapshotError(f"{path}: expected {expected_len} bytes, found {len(data)}")

    offset = _HEADER.size
    labels = np.frombuffer(data, dtype="<i4", count=n_points, offset=offset).astype(np.int64)
    offset += 4 * n_points
    sizes = np.frombuffer(data, dtype="<f8", count=n_clusters, offset=offset)

    if labels.min() < 0 or labels.max() >= n_clusters:
        raise SnapshotError(f"{path}: assignment labels outside 0…{n_clusters - 1}")
    counts = np.bincount(labels, minlength=n_clusters)
    if not np.array_equal(counts, sizes):
        raise SnapshotError(
            f"{path}: stored cluster sizes {sizes.tolist()} do not match the assignment"
        )
    if not np.array_equal(counts, balanced_sizes(n_points, n_clusters)):
        raise SnapshotError(f"{path}: cluster sizes {counts.tolist()} are not balanced")

    solution.set_assignment(labels)
    _LOG.info("Loaded initial solution from %s: value %.5f", path, solution.objective)
    return float(init_time)
