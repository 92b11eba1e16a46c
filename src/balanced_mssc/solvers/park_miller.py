"""
Lehmer / Park-Miller "minimal standard" generator.

Every stochastic decision of the search (initial shuffle, local-search
scan order, shaking draws) goes through one :class:`ParkMiller` instance,
so two runs with the same seed follow bit-identical trajectories.
The recurrence is ``state = (16807 * state) mod (2**31 - 1)``, evaluated with
Schrage's decomposition so no intermediate exceeds 32-bit range.
"""
from __future__ import annotations

from typing import MutableSequence
import logging

_LOG = logging.getLogger(__name__)

A           = 16807           # 7**5
P           = 2147483647      # 2**31 - 1
_B15        = 32768           # 2**15
_B16        = 65536           # 2**16
_SCALE      = 4.656612875e-10  # ~1 / P

SEED_MIN        = 1
SEED_MAX        = P - 1
SELF_TEST_STATE = 522329230   # state after 1000 advances from 1


def next_state(state: int) -> int:
    """One step of the recurrence via Schrage's decomposition."""
    xhi     = state // _B16                 # 15 high-order bits
    xalo    = (state - xhi * _B16) * A      # low 16 bits times A
    leftlo  = xalo // _B16
    fhi     = xhi * A + leftlo              # 31 highest bits of the full product
    k       = fhi // _B15                   # overflow past bit 31

    # the grouping matters: it keeps every partial sum inside int32
    state = (((xalo - leftlo * _B16) - P) + (fhi - k * _B15) * _B16) + k
    if state < 0:
        state += P
    return state


class ParkMiller:
    """Seeded, reproducible pseudo-random source.

    Parameters
    ----------
    seed : int
        Initial state in ``[1, 2**31 - 2]``. The constructor performs one
        advance, so ``ParkMiller(1).state == 16807``.
    """

    def __init__(self, seed: int):
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise TypeError(f"seed must be an int, got {type(seed).__name__}")
        if not SEED_MIN <= seed <= SEED_MAX:
            raise ValueError(f"seed must lie in [{SEED_MIN}, {SEED_MAX}], got {seed}")
        self.seed  : int = seed
        self._state: int = seed
        self.draw()

    @property
    def state(self) -> int:
        return self._state

    # ------------------------------------------------------------------ #
    # draws                                                              #
    # ------------------------------------------------------------------ #
    def draw_raw(self) -> int:
        """Advance and return the raw state in ``[1, P - 1]``."""
        self._state = next_state(self._state)
        return self._state

    def draw(self) -> float:
        """Advance and return a float in ``[0, 1)``."""
        return self.draw_raw() * _SCALE

    def uniform(self) -> float:
        """Advance and return ``state / P``."""
        return self.draw_raw() / P

    def integer_in(self, size: int) -> int:
        """Integer in ``[1, size]``."""
        if size < 1:
            raise ValueError(f"size must be >= 1, got {size}")
        return int(self.draw_raw() / (P / size)) + 1

    def integer_in_range(self, i: int, j: int) -> int:
        """Integer in ``[i, j]``."""
        if j < i:
            raise ValueError(f"empty range [{i}, {j}]")
        return int(self.draw_raw() / (P / (j - i + 1))) + i

    def shuffle(self, seq: MutableSequence) -> None:
        """In-place Fisher-Yates shuffle driven by :meth:`integer_in_range`."""
        for i in range(1, len(seq)):
            j = self.integer_in_range(0, i)
            if i != j:
                seq[i], seq[j] = seq[j], seq[i]

    # ------------------------------------------------------------------ #
    # regression check                                                   #
    # ------------------------------------------------------------------ #
    @staticmethod
    def self_test() -> bool:
        """
        Check the arithmetic: 1000 advances from state 1 must reach
        :data:`SELF_TEST_STATE`.
        """
        state = 1
        for _ in range(1000):
            state = next_state(state)
        if state != SELF_TEST_STATE:
            _LOG.error("Park-Miller self test failed: reached %d", state)
            return False
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(seed={self.seed}, state={self._state})"
