"""Growable square grid of fixed-size tiles over an unbounded plane.

Tiles live in a flat row-major list indexed by ``row * pitch + col``. The grid
covers world space ``[0, pitch * W) x [0, pitch * H)``. Growth adds one ring per
step:

* trailing growth appends a new right column and bottom row; existing tiles keep
  their ``(row, col)``.
* leading growth prepends a new left column and top row; every existing tile
  moves to ``(row + 1, col + 1)`` and the viewport is shifted by one tile extent
  so it keeps looking at the same tiles.

Either way the whole list is rebuilt with live tiles moved, not copied.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from koko.canvas.errors import RegionGridError
from koko.canvas.tile import Tile
from koko.canvas.units import TILE_EXTENT, Rect, Vector2
from koko.canvas.viewport import Viewport

_LOG = logging.getLogger("koko.canvas.grid")


class GrowthDirection(Enum):
    TRAILING = "trailing"
    LEADING = "leading"


@dataclass(frozen=True, slots=True)
class GrowthEvent:
    """Record of one regrow step."""

    direction: GrowthDirection
    old_pitch: int
    new_pitch: int
    viewport_shift: Vector2


def default_growth_margin(tile_extent: Vector2) -> Vector2:
    """Half a tile of look-ahead past the viewport's right and bottom edges."""
    return Vector2(tile_extent.x // 2, tile_extent.y // 2)


class RegionGrid:
    """Square tile grid with O(1) ``(row, col)`` addressing."""

    def __init__(
        self,
        pitch: int = 3,
        *,
        tile_extent: Vector2 = TILE_EXTENT,
        growth_margin: Vector2 | None = None,
    ) -> None:
        if pitch <= 0:
            raise ValueError("pitch must be > 0")
        self._pitch = pitch
        self._tile_extent = tile_extent
        self._growth_margin = (
            growth_margin if growth_margin is not None else default_growth_margin(tile_extent)
        )
        self._tiles: list[Tile] = [Tile(tile_extent) for _ in range(pitch * pitch)]
        self.regrow_count = 0

    @property
    def pitch(self) -> int:
        return self._pitch

    @property
    def tile_count(self) -> int:
        return len(self._tiles)

    @property
    def tiles(self) -> tuple[Tile, ...]:
        return tuple(self._tiles)

    @property
    def tile_extent(self) -> Vector2:
        return self._tile_extent

    @property
    def world_extent(self) -> Vector2:
        return Vector2(self._pitch * self._tile_extent.x, self._pitch * self._tile_extent.y)

    def index_of(self, row: int, col: int) -> int:
        if not (0 <= row < self._pitch and 0 <= col < self._pitch):
            raise RegionGridError(f"cell ({row}, {col}) outside grid of pitch {self._pitch}")
        return row * self._pitch + col

    def tile_at(self, row: int, col: int) -> Tile:
        return self._tiles[self.index_of(row, col)]

    def cell_rect(self, row: int, col: int) -> Rect:
        w, h = self._tile_extent.x, self._tile_extent.y
        return Rect(col * w, row * h, w, h)

    def cells(self) -> Iterator[tuple[int, int, Tile]]:
        for index, tile in enumerate(self._tiles):
            row, col = divmod(index, self._pitch)
            yield row, col, tile

    def cell_at(self, point: Vector2) -> tuple[int, int] | None:
        """Cell containing a world point, or None when outside the grid."""
        row, col = point.y // self._tile_extent.y, point.x // self._tile_extent.x
        if 0 <= row < self._pitch and 0 <= col < self._pitch:
            return row, col
        return None

    def needs_leading_growth(self, viewport: Viewport) -> bool:
        origin = viewport.origin
        return origin.x < 0 or origin.y < 0

    def needs_trailing_growth(self, viewport: Viewport) -> bool:
        far = viewport.origin + viewport.extent + self._growth_margin
        extent = self.world_extent
        return far.x > extent.x or far.y > extent.y

    def ensure_covers(self, viewport: Viewport) -> list[GrowthEvent]:
        """Grow until the viewport (plus look-ahead margin) lies inside the grid.

        Trailing growth uses a half-tile lookahead: it fires once
        ``origin + extent + margin`` passes the world extent, with the margin
        defaulting to ``(W // 2, H // 2)``. Constructing with
        ``growth_margin=ZERO`` gives the bare ``origin + extent`` edge test.

        Grows one ring per step and keeps stepping, so a pan that overshoots by
        several tiles in one frame is still covered before compositing.
        """
        events: list[GrowthEvent] = []
        while True:
            if self.needs_leading_growth(viewport):
                event = self._regrow(GrowthDirection.LEADING)
                viewport.translate(event.viewport_shift)
            elif self.needs_trailing_growth(viewport):
                event = self._regrow(GrowthDirection.TRAILING)
            else:
                return events
            events.append(event)
            _LOG.info(
                "grid_regrow direction=%s pitch=%d->%d tiles=%d viewport=(%d,%d)",
                event.direction.value,
                event.old_pitch,
                event.new_pitch,
                self.tile_count,
                viewport.origin.x,
                viewport.origin.y,
                extra={
                    "direction": event.direction.value,
                    "old_pitch": event.old_pitch,
                    "new_pitch": event.new_pitch,
                    "tiles": self.tile_count,
                    "viewport": viewport.origin.as_tuple(),
                },
            )

    def visible_indices(self, viewport: Viewport) -> list[tuple[int, int]]:
        """Cells whose world rectangle touches the viewport rectangle."""
        left0, top0 = viewport.origin.x, viewport.origin.y
        right0, bot0 = left0 + viewport.extent.x, top0 + viewport.extent.y
        visible: list[tuple[int, int]] = []
        for row, col, _tile in self.cells():
            cell = self.cell_rect(row, col)
            if cell.right >= left0 and cell.x < right0 and cell.y < bot0 and cell.bottom >= top0:
                visible.append((row, col))
        return visible

    def _regrow(self, direction: GrowthDirection) -> GrowthEvent:
        old_pitch = self._pitch
        new_pitch = old_pitch + 1
        source = iter(self._tiles)
        grown: list[Tile] = []
        for row in range(new_pitch):
            for col in range(new_pitch):
                if direction is GrowthDirection.TRAILING:
                    border = row >= old_pitch or col >= old_pitch
                else:
                    border = row == 0 or col == 0
                if border:
                    grown.append(Tile(self._tile_extent))
                    continue
                try:
                    grown.append(next(source))
                except StopIteration:
                    raise RegionGridError(
                        f"regrow {old_pitch}->{new_pitch} ran out of source tiles at ({row}, {col})"
                    ) from None
        if next(source, None) is not None:
            raise RegionGridError(f"regrow {old_pitch}->{new_pitch} left source tiles unplaced")
        self._tiles = grown
        self._pitch = new_pitch
        self.regrow_count += 1
        shift = Vector2(0, 0)
        if direction is GrowthDirection.LEADING:
            shift = self._tile_extent
            for row, col, tile in self.cells():
                for path in tile.paths:
                    path.reassign((row, col), shift)
        return GrowthEvent(
            direction=direction,
            old_pitch=old_pitch,
            new_pitch=new_pitch,
            viewport_shift=shift,
        )

    def __repr__(self) -> str:
        return f"RegionGrid(pitch={self._pitch}, tiles={self.tile_count})"


__all__ = [
    "GrowthDirection",
    "GrowthEvent",
    "RegionGrid",
    "RegionGridError",
    "default_growth_margin",
]
