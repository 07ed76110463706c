"""Composite resident tiles onto the back buffer at viewport-relative offsets."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from koko.api.surface import SurfaceBackend
from koko.canvas.region_grid import RegionGrid
from koko.canvas.units import COLOR_BACKGROUND, Rect, Vector2
from koko.canvas.viewport import Viewport

_LOG = logging.getLogger("koko.rendering.compositor")


@dataclass(frozen=True, slots=True)
class CompositeReport:
    composited: int
    skipped: bool


@dataclass(frozen=True, slots=True)
class OverlayBatch:
    """Committed path quads in NDC, ready for the presenter."""

    vertices: np.ndarray
    colors: np.ndarray

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])


EMPTY_OVERLAY = OverlayBatch(
    vertices=np.empty((0, 3), dtype=np.float32),
    colors=np.empty((0, 4), dtype=np.float32),
)


def scanbox_unit_offset(origin: Vector2, extent: Vector2) -> tuple[float, float]:
    """Scanbox offset converted to the unit square, negated for the path overlay."""
    return -origin.x / extent.x, -origin.y / extent.y


class TileCompositor:
    """Redraws the back buffer only when the view or a visible tile changed."""

    def __init__(self) -> None:
        self._last_origin: Vector2 | None = None
        self._last_visible: tuple[tuple[int, int], ...] = ()

    def invalidate(self) -> None:
        self._last_origin = None

    def composite(
        self,
        grid: RegionGrid,
        viewport: Viewport,
        backend: SurfaceBackend,
        visible: tuple[tuple[int, int], ...],
    ) -> CompositeReport:
        origin = viewport.origin
        dirty = any(grid.tile_at(row, col).dirty for row, col in visible)
        if not dirty and origin == self._last_origin and visible == self._last_visible:
            return CompositeReport(composited=0, skipped=True)
        backend.clear(COLOR_BACKGROUND)
        extent = grid.tile_extent
        source = Rect(0, 0, extent.x, extent.y)
        composited = 0
        for row, col in visible:
            tile = grid.tile_at(row, col)
            if tile.surface is None:
                _LOG.warning(
                    "composite_skipped_cold_tile cell=(%d,%d) tile=%d", row, col, tile.tile_id
                )
                continue
            cell = grid.cell_rect(row, col)
            backend.composite(tile.surface, source, Rect.at(cell.origin - origin, extent))
            tile.dirty = False
            composited += 1
        self._last_origin = origin
        self._last_visible = visible
        return CompositeReport(composited=composited, skipped=False)

    def path_overlay(
        self,
        grid: RegionGrid,
        viewport: Viewport,
        visible: tuple[tuple[int, int], ...],
    ) -> OverlayBatch:
        """Gather the lazily built quads of every path owned by a visible tile."""
        chunks: list[np.ndarray] = []
        colors: list[np.ndarray] = []
        for row, col in visible:
            for path in grid.tile_at(row, col).paths:
                vertices = path.render()
                if vertices.size == 0:
                    continue
                chunks.append(vertices)
                rgba = np.array(path.color.as_unit_rgba(), dtype=np.float32)
                colors.append(np.tile(rgba, (vertices.shape[0], 1)))
        if not chunks:
            return EMPTY_OVERLAY
        offset_x, offset_y = scanbox_unit_offset(viewport.origin, viewport.extent)
        merged = np.concatenate(chunks)
        merged[:, 0] += offset_x
        merged[:, 1] += offset_y
        return OverlayBatch(vertices=merged, colors=np.concatenate(colors))


__all__ = [
    "CompositeReport",
    "EMPTY_OVERLAY",
    "OverlayBatch",
    "TileCompositor",
    "scanbox_unit_offset",
]
