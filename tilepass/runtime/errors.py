"""Fault types for clip bookkeeping and pass rendering."""

from __future__ import annotations


class ClipStackConsistencyError(RuntimeError):
    """Raised when clip stack bookkeeping breaks its own invariants.

    This signals a broken driver or stack implementation. It is never
    retried or swallowed inside the package.
    """


def ensure_invariant(condition: bool, message: str) -> None:
    """Raise ``ClipStackConsistencyError`` when ``condition`` does not hold."""
    if not condition:
        raise ClipStackConsistencyError(message)


__all__ = ["ClipStackConsistencyError", "ensure_invariant"]
