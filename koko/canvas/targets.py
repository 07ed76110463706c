"""Scoped render-target switching."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from koko.api.surface import SurfaceBackend, SurfaceHandle


@contextmanager
def render_target(backend: SurfaceBackend, handle: SurfaceHandle) -> Iterator[SurfaceBackend]:
    """Make ``handle`` the active target for the block, then restore the previous one.

    Restoration happens on every exit path, including exceptions raised inside
    the block.
    """
    previous = backend.active_target
    backend.set_active_target(handle)
    try:
        yield backend
    finally:
        if previous is None:
            backend.clear_target()
        else:
            backend.set_active_target(previous)


__all__ = ["render_target"]
