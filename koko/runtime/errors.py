"""Shared runtime exception policy helpers."""

from __future__ import annotations

import logging
from typing import TypeAlias

from koko.canvas.errors import RegionGridError, TileStateError

# Bounded set of per-frame presentation failures that skip the frame instead of
# stopping the loop. Canvas invariant errors are deliberately absent.
RecoverableRuntimeErrors: TypeAlias = tuple[type[BaseException], ...]
RECOVERABLE_RUNTIME_ERRORS: RecoverableRuntimeErrors = (
    RuntimeError,
    OSError,
    ValueError,
    TypeError,
    AttributeError,
)


def log_recoverable(
    logger: logging.Logger,
    message: str,
    *,
    level: int = logging.DEBUG,
) -> None:
    """Emit structured observability for tolerated recoverable exceptions."""
    logger.log(level, message, exc_info=True)


def is_recoverable_frame_error(exc: BaseException) -> bool:
    """True for presentation failures that may skip a frame.

    Grid and tile invariant violations subclass RuntimeError but are never
    recoverable.
    """
    if isinstance(exc, (RegionGridError, TileStateError)):
        return False
    return isinstance(exc, RECOVERABLE_RUNTIME_ERRORS)


__all__ = [
    "RECOVERABLE_RUNTIME_ERRORS",
    "RecoverableRuntimeErrors",
    "is_recoverable_frame_error",
    "log_recoverable",
]
