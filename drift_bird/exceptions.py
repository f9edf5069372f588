"""Drift Bird exception hierarchy.

Collisions are game states, not errors; only malformed calls at the
public boundary raise.
"""


class DriftBirdError(Exception):
    """Root of all Drift Bird exceptions."""


class InvalidArgument(DriftBirdError, ValueError):
    """A caller passed a value outside the domain of a core operation."""
