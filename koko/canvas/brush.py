"""Brush modes and the stamps they leave on a tile surface."""

from __future__ import annotations

from enum import Enum

from koko.api.surface import SurfaceBackend
from koko.canvas.units import COLOR_CLEAR, Color, Rect, Vector2

STAMP_SIZE = 15
NIB_SIZE = 5


class BrushMode(Enum):
    NORMAL = "Normal"
    SQUAREISH = "Squareish"
    WOW_SO_EDGY = "WowSoEdgy"
    ERASER = "Eraser"

    def next(self) -> BrushMode:
        modes = list(BrushMode)
        return modes[(modes.index(self) + 1) % len(modes)]


def stamp(
    backend: SurfaceBackend,
    point: Vector2,
    mode: BrushMode,
    color: Color,
    *,
    previous: Vector2 | None = None,
) -> None:
    """Draw one brush sample at tile-local ``point`` on the active target.

    ``previous`` is the prior sample on the same tile; the normal brush joins
    the two with a line so fast drags stay continuous.
    """
    if mode is BrushMode.NORMAL:
        if previous is not None:
            backend.draw_line(previous, point, color)
        backend.fill_rect(Rect(0, 0, NIB_SIZE, NIB_SIZE).centered_on(point), color)
        return
    square = Rect(0, 0, STAMP_SIZE, STAMP_SIZE).centered_on(point)
    if mode is BrushMode.SQUAREISH:
        backend.fill_rect(square, color)
    elif mode is BrushMode.ERASER:
        backend.fill_rect(square, COLOR_CLEAR)
    else:
        tl = square.origin
        tr = Vector2(square.right - 1, square.y)
        bl = Vector2(square.x, square.bottom - 1)
        br = Vector2(square.right - 1, square.bottom - 1)
        for start, end in ((tl, tr), (tr, br), (br, bl), (bl, tl)):
            backend.draw_line(start, end, color)


__all__ = ["BrushMode", "NIB_SIZE", "STAMP_SIZE", "stamp"]
