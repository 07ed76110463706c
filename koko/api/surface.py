"""Drawable-surface contracts consumed by the canvas core.

A surface backend owns every pixel buffer the canvas draws into: one surface
per resident tile plus the default target (the back buffer). Mutating calls
(``clear``, ``fill_rect``, ``draw_line``, ``read_all_pixels``) act on the active
target, or on the back buffer when no target is active.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import numpy as np

if TYPE_CHECKING:
    from koko.canvas.units import Color, Rect, Vector2


class SurfaceError(RuntimeError):
    """Raised on drawable-surface misuse (unknown handle, bad upload size)."""


@dataclass(frozen=True, slots=True)
class SurfaceHandle:
    """Opaque handle to one allocated drawable surface."""

    surface_id: int
    width: int
    height: int

    @property
    def byte_count(self) -> int:
        return self.width * self.height * 4


class SurfaceBackend(Protocol):
    """Drawable surface operations used by tiles and the compositor."""

    @property
    def active_target(self) -> SurfaceHandle | None:
        """Currently active render target, None for the back buffer."""

    def allocate(self, width: int, height: int) -> SurfaceHandle:
        """Allocate a zeroed RGBA surface."""

    def release(self, handle: SurfaceHandle) -> None:
        """Release a surface; the handle becomes invalid."""

    def set_active_target(self, handle: SurfaceHandle) -> None:
        """Make ``handle`` the target of subsequent draw calls."""

    def clear_target(self) -> None:
        """Return to the default target (the back buffer)."""

    def clear(self, color: Color) -> None:
        """Fill the whole active target with ``color``."""

    def fill_rect(self, rect: Rect, color: Color) -> None:
        """Fill ``rect`` (clipped) on the active target."""

    def draw_line(self, start: Vector2, end: Vector2, color: Color) -> None:
        """Draw a one-pixel line (clipped) on the active target."""

    def read_all_pixels(self) -> np.ndarray:
        """Return a flat uint8 copy of the active target's RGBA bytes."""

    def upload_pixels(self, handle: SurfaceHandle, data: np.ndarray) -> None:
        """Replace the full contents of ``handle`` with flat RGBA bytes."""

    def composite(self, handle: SurfaceHandle, src: Rect, dst: Rect) -> None:
        """Copy ``src`` of ``handle`` onto the back buffer at ``dst`` (clipped)."""

    def present(self) -> None:
        """Hand the back buffer to the display."""


__all__ = ["SurfaceBackend", "SurfaceError", "SurfaceHandle"]
