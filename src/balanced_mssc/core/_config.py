from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional
import logging

_LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class BaseConfig:
    """Generic knobs that *any* balanced clustering solver may use.

    Concrete subclasses extend this dataclass (e.g. :class:`VNSConfig`).
    ``random_state`` seeds the Park-Miller generator and must lie in
    ``[1, 2**31 - 2]``.
    """
    n_clusters: int
    random_state: Optional[int] = 1

    def validate(self, n_items: int) -> None:
        if self.n_clusters < 1:
            raise ValueError("n_clusters must be >= 1")
        if self.n_clusters > n_items:
            raise ValueError(
                f"Cannot split N={n_items} items into K={self.n_clusters} non-empty clusters."
            )


@dataclass(slots=True)
class VNSConfig(BaseConfig):
    """
    Tunable parameters for :class:`VNSBalancedCluster`. Inherits from :class:`BaseConfig`.

    Notes
    -----
    * ``time_limit`` is interpreted in *seconds* of ``clock`` time and bounds
      the whole run, initial descent included. ``None`` is only sensible
      together with ``max_iterations``.
    * ``k_max`` defaults to ``N // 2`` and ``k_step`` to ``k_max // 20``
      (at least 1); both are resolved per instance by :meth:`neighbourhoods`.
    * ``verify_every`` re-checks every incremental table against a full
      recomputation every that-many iterations. Debug/test setting: it
      costs O(n^2 k) per check.
    """
    n_clusters      : int                       = 2
    time_limit      : Optional[float]           = 10.0
    max_iterations  : Optional[int]             = None
    k_min           : int                       = 2
    k_max           : Optional[int]             = None
    k_step          : Optional[int]             = None
    local_search    : Literal["first", "best"]  = "first"
    tol             : float                     = 1e-9
    check_every     : int                       = 16    # rows between budget polls
    recompute_every : int                       = 0     # 0 ⇒ trust incremental deltas
    verify_every    : Optional[int]             = None
    max_ls_moves    : Optional[int]             = None
    clock           : Literal["cpu", "wall"]    = "cpu"

    # guard rails ------------------------------------------------------------

    def validate(self, n_items: int) -> None:
        BaseConfig.validate(self, n_items)
        if self.n_clusters < 2:
            raise ValueError("VNS needs n_clusters >= 2")
        if self.time_limit is None and self.max_iterations is None:
            raise ValueError("Either time_limit or max_iterations must be set")
        if self.time_limit is not None and self.time_limit < 0:
            raise ValueError(f"time_limit must be non-negative, got {self.time_limit}")
        if self.k_min < 1:
            raise ValueError(f"k_min must be >= 1, got {self.k_min}")
        if self.k_step is not None and self.k_step < 1:
            raise ValueError(f"k_step must be >= 1, got {self.k_step}")
        if self.local_search not in ("first", "best"):
            raise ValueError(f"Unknown local search strategy: {self.local_search}")
        if self.clock not in ("cpu", "wall"):
            raise ValueError(f"Unknown clock: {self.clock}")
        if self.check_every < 1:
            raise ValueError("check_every must be >= 1")
        if self.recompute_every < 0:
            raise ValueError("recompute_every must be >= 0")
        if self.verify_every is not None and self.verify_every < 1:
            raise ValueError("verify_every must be >= 1")

    def neighbourhoods(self, n_items: int) -> tuple[int, int, int]:
        """Resolve ``(k_min, k_max, k_step)`` for an instance of *n_items* points."""
        k_max = n_items // 2 if self.k_max is None else self.k_max
        if k_max < self.k_min:
            _LOG.warning("k_max=%d is below k_min=%d; raised to %d", k_max, self.k_min, self.k_min)
            k_max = self.k_min
        k_step = k_max // 20 if self.k_step is None else self.k_step
        if k_step < 1:
            _LOG.warning("k_step=%d (k_max // 20) raised to 1", k_step)
            k_step = 1
        return self.k_min, k_max, k_step


@dataclass(slots=True)
class RandomConfig(BaseConfig):
    """Balanced random assignment baseline (no search)."""
    n_clusters      : int = 2


class Status(str, Enum):
    """Solver status codes used across the package."""

    heuristic = "heuristic"
    timeout   = "timeout"
    error     = "error"
    skipped   = "skipped"

    # -------- convenience helpers ------------------------------------
    @classmethod
    def from_string(cls, value: str) -> "Status":
        """Coerce an arbitrary string into a Status enum (raises on unknown)."""
        try:
            return cls(value)
        except ValueError as exc:
            valid = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown status '{value}'. Valid choices: {valid}") from exc

    @classmethod
    def choices(cls) -> list[str]:
        """Return the plain-string choices – useful for CLI or argparse."""
        return [m.value for m in cls]
