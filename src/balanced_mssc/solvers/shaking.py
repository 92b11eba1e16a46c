"""
Shaking step of the VNS: random exchanges that push a solution out of the
basin of its current local optimum.
"""
from __future__ import annotations

import logging

from .park_miller import ParkMiller
from .solution import Solution

_LOG = logging.getLogger(__name__)


def shake(solution: Solution, strength: int, generator: ParkMiller) -> int:
    """
    Apply exactly *strength* random exchanges to *solution* in place.

    Each exchange draws two distinct clusters, then one member of each, and
    swaps them with the incremental update. The accumulated deltas are not
    trusted: the objective is recomputed from scratch after the batch.

    Returns
    -------
    int
        The number of applied exchanges (always *strength*).
    """
    k = solution.n_clusters
    if k < 2:
        raise ValueError("Shaking needs at least two clusters")
    if strength < 0:
        raise ValueError(f"strength must be non-negative, got {strength}")

    applied = 0
    while applied < strength:
        c1 = generator.integer_in(k) - 1
        c2 = generator.integer_in(k) - 1
        while c2 == c1:
            c2 = generator.integer_in(k) - 1

        members_1 = solution.members(c1)
        members_2 = solution.members(c2)
        if members_1.size == 0 or members_2.size == 0:
            # unreachable while the balance invariant holds; redraw
            _LOG.warning("Shaking drew an empty cluster pair (%d, %d)", c1, c2)
            continue

        i = int(members_1[generator.integer_in(members_1.size) - 1])
        j = int(members_2[generator.integer_in(members_2.size) - 1])
        solution.apply_swap(i, j)
        applied += 1

    solution.recompute_objective()
    _LOG.debug("Shaking applied %d swaps, objective now %.6f", applied, solution.objective)
    return applied
