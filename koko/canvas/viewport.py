"""Scanbox viewport: the world-space origin of the visible window."""

from __future__ import annotations

from enum import Enum

from koko.canvas.units import TILE_EXTENT, Rect, Vector2, ZERO


class PanDirection(Enum):
    """Directional pan inputs in screen convention (down is +y)."""

    UP = Vector2(0, -1)
    DOWN = Vector2(0, 1)
    LEFT = Vector2(-1, 0)
    RIGHT = Vector2(1, 0)


class Viewport:
    """Tracks the top-left world coordinate of the visible rectangle.

    The visible rectangle is ``[origin, origin + extent)``. There is no bounds
    checking: a negative origin is what asks the region grid to grow
    leftward/upward.
    """

    __slots__ = ("_origin", "_extent")

    def __init__(self, origin: Vector2 = ZERO, extent: Vector2 = TILE_EXTENT) -> None:
        self._origin = origin
        self._extent = extent

    @property
    def origin(self) -> Vector2:
        return self._origin

    @property
    def extent(self) -> Vector2:
        return self._extent

    @property
    def rect(self) -> Rect:
        return Rect.at(self._origin, self._extent)

    def pan(self, direction: PanDirection, step: int) -> Vector2:
        """Move the origin ``step`` units along ``direction`` and return it."""
        unit = direction.value
        self._origin = self._origin + Vector2(unit.x * step, unit.y * step)
        return self._origin

    def translate(self, delta: Vector2) -> None:
        """Shift the origin; used when the grid re-indexes after leading growth."""
        self._origin = self._origin + delta

    def to_world(self, window_point: Vector2) -> Vector2:
        return self._origin + window_point

    def __repr__(self) -> str:
        return f"Viewport(origin=({self._origin.x}, {self._origin.y}))"


__all__ = ["PanDirection", "Viewport"]
