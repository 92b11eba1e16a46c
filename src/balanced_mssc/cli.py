"""
Command-line entry point::

    balanced-mssc <instance> <k> <max time> <n runs> <seed> <output> <assignment> [init dir]

Statistics are appended to ``<output>.csv`` and the best assignment to
``<assignment>.csv``.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence
import argparse
import logging
import sys

from .core._config import VNSConfig
from .exceptions import InstanceFormatError, SnapshotError
from .pipelines.vns_benchmark import append_assignment, append_statistics, run_trials
from .preprocessing import read_instance

_LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="balanced-mssc",
        description="Variable Neighbourhood Search for balanced minimum sum-of-squares clustering.",
    )
    parser.add_argument("instance", type=Path, help="point-set file, one point per line")
    parser.add_argument("k", type=int, help="number of clusters")
    parser.add_argument("max_time", type=float, help="time limit per run in seconds")
    parser.add_argument("n_runs", type=int, help="number of independent runs")
    parser.add_argument("seed", type=int, help="seed of the first run, incremented per run")
    parser.add_argument("output", help="statistics file prefix (.csv is appended)")
    parser.add_argument("assignment", help="assignment file prefix (.csv is appended)")
    parser.add_argument("init_dir", nargs="?", default=None,
                        help="directory of <instance>-init<run>.bin initial solutions")
    parser.add_argument("--local-search", choices=("first", "best"), default="first")
    parser.add_argument("--clock", choices=("cpu", "wall"), default="cpu")
    parser.add_argument("--verify-every", type=int, default=None, metavar="N",
                        help="verify incremental state every N iterations (debug)")
    parser.add_argument("--log-level", default="INFO",
                        choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    return parser


def _check_writable(path: Path, what: str) -> bool:
    try:
        with path.open("a"):
            pass
    except OSError as exc:
        _LOG.error("Problem in the path of the %s file %s: %s", what, path, exc)
        return False
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.instance.is_file():
        _LOG.error("Problem in the path of the instance file: %s", args.instance)
        return 1
    stats_path = Path(f"{args.output}.csv")
    assignment_path = Path(f"{args.assignment}.csv")
    if not _check_writable(stats_path, "output") or not _check_writable(assignment_path, "assignment"):
        return 1
    if args.init_dir is not None and not Path(args.init_dir).is_dir():
        _LOG.error("Initial solutions directory does not exist: %s", args.init_dir)
        return 1

    options = dict(local_search=args.local_search, clock=args.clock, verify_every=args.verify_every)
    try:
        points = read_instance(args.instance)
        VNSConfig(n_clusters=args.k, random_state=args.seed, time_limit=args.max_time,
                  **options).validate(points.shape[0])
        if args.n_runs < 1:
            raise ValueError(f"n_runs must be >= 1, got {args.n_runs}")
        if not 1 <= args.seed <= 2**31 - 2 - (args.n_runs - 1):
            raise ValueError(f"seed {args.seed} leaves the valid range over {args.n_runs} runs")
    except (InstanceFormatError, ValueError) as exc:
        _LOG.error("%s", exc)
        return 1

    _LOG.info(
        "Instance: %s, clusters: %d, points: %d", args.instance, args.k, points.shape[0],
    )
    try:
        summary = run_trials(
            points, str(args.instance), args.k, args.max_time, args.n_runs, args.seed,
            init_dir=args.init_dir, **options,
        )
    except (SnapshotError, FileNotFoundError) as exc:
        _LOG.error("Could not load initial solution: %s", exc)
        return 1

    append_statistics(stats_path, summary)
    append_assignment(assignment_path, summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
