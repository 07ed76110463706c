"""Canvas invariant violations; never recoverable at the frame boundary."""

from __future__ import annotations


class RegionGridError(RuntimeError):
    """Grid addressing or regrow invariant violated."""


class TileStateError(RuntimeError):
    """A lifecycle operation was called outside its precondition."""


__all__ = ["RegionGridError", "TileStateError"]
