"""
Reader for point-set instances: one point per line, coordinates separated by
commas, tabs or spaces (mixed freely).
"""
from __future__ import annotations

from io import StringIO
from pathlib import Path
import re
import logging

import numpy as np
import pandas as pd

from ..exceptions import InstanceFormatError

_LOG = logging.getLogger(__name__)

_DELIMITERS = r"[,\s]+"


def read_instance(path: str | Path) -> np.ndarray:
    """
    Load an instance file into an ``(n, d)`` float64 matrix.

    Blank lines, ``\\r\\n`` line ends and delimiters at the start or end of
    a line are ignored.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    InstanceFormatError
        If a token is not numeric, a coordinate is nan or inf, or lines have
        different coordinate counts.
    """
    path = Path(path)
    text = path.read_text()

    lines = []
    for raw in text.splitlines():
        line = raw.strip().strip(",").strip()
        if line:
            lines.append(line)
    if not lines:
        raise InstanceFormatError(f"{path} contains no points")

    widths = [len(re.split(_DELIMITERS, line)) for line in lines]
    for row, width in enumerate(widths):
        if width != widths[0]:
            raise InstanceFormatError(
                f"{path}: point {row} has {width} coordinates, the first point has {widths[0]}"
            )

    try:
        df = pd.read_csv(
            StringIO("\n".join(lines)),
            sep=_DELIMITERS,
            header=None,
            engine="python",
        )
    except pd.errors.ParserError as exc:
        raise InstanceFormatError(f"{path}: could not parse points ({exc})") from exc

    try:
        df = df.apply(pd.to_numeric, errors="raise")
    except (ValueError, TypeError) as exc:
        raise InstanceFormatError(f"{path}: non-numeric coordinate ({exc})") from exc

    X = df.to_numpy(dtype=float)
    finite = np.isfinite(X).all(axis=1)
    if not finite.all():
        row = int(np.flatnonzero(~finite)[0])
        raise InstanceFormatError(f"{path}: point {row} has a non-finite coordinate")

    _LOG.info("Read %d points with %d coordinates from %s", X.shape[0], X.shape[1], path)
    return X
