"""
Error types raised across the balanced_mssc package.

Time-budget exhaustion is deliberately absent: running out of time is the
normal way every bounded search returns.
"""


class InstanceFormatError(ValueError):
    """The point-set file could not be parsed into a rectangular matrix."""


class SnapshotError(ValueError):
    """An initial-solution snapshot does not match the expected layout or problem."""


class InvariantViolation(AssertionError):
    """Incrementally maintained solution state disagrees with a full recomputation."""
