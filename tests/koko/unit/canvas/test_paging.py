from __future__ import annotations

import numpy as np

from koko.canvas.paging import page_tiles
from koko.canvas.region_grid import RegionGrid
from koko.canvas.rle import RunLengthStream
from koko.canvas.tile import TileState, new_scratch_buffer
from koko.canvas.units import Vector2
from koko.canvas.viewport import PanDirection, Viewport
from koko.rendering.memory_surface import MemorySurfaceBackend


def _assert_resident_iff_visible(grid: RegionGrid, viewport: Viewport) -> None:
    visible = set(grid.visible_indices(viewport))
    for row, col, tile in grid.cells():
        assert tile.is_hot == ((row, col) in visible), (row, col, tile)


def test_first_pass_allocates_only_visible_tiles() -> None:
    grid = RegionGrid()
    viewport = Viewport()
    backend = MemorySurfaceBackend()

    report = page_tiles(grid, viewport, backend, new_scratch_buffer())

    assert report.visible == ((0, 0),)
    assert report.allocated == 1
    assert backend.live_surface_count == 1
    _assert_resident_iff_visible(grid, viewport)


def test_paging_follows_the_viewport_both_ways() -> None:
    grid = RegionGrid()
    viewport = Viewport()
    backend = MemorySurfaceBackend()
    scratch = new_scratch_buffer()
    page_tiles(grid, viewport, backend, scratch)

    viewport.translate(Vector2(1285, 0))
    grid.ensure_covers(viewport)
    away = page_tiles(grid, viewport, backend, scratch)

    assert away.visible == ((0, 1), (0, 2))
    assert (away.swapped_out, away.allocated, away.swapped_in) == (1, 2, 0)
    assert grid.tile_at(0, 0).state is TileState.SWAPPED
    _assert_resident_iff_visible(grid, viewport)

    viewport.translate(Vector2(-1285, 0))
    back = page_tiles(grid, viewport, backend, scratch)

    assert (back.swapped_out, back.allocated, back.swapped_in) == (2, 0, 1)
    assert backend.live_surface_count == 1
    _assert_resident_iff_visible(grid, viewport)


def test_consistency_holds_while_panning_across_tiles() -> None:
    grid = RegionGrid()
    viewport = Viewport()
    backend = MemorySurfaceBackend()
    scratch = new_scratch_buffer()
    for direction, steps in ((PanDirection.RIGHT, 300), (PanDirection.DOWN, 200)):
        for _ in range(steps):
            viewport.pan(direction, 5)
            grid.ensure_covers(viewport)
            page_tiles(grid, viewport, backend, scratch)
        _assert_resident_iff_visible(grid, viewport)
    assert backend.live_surface_count == len(grid.visible_indices(viewport))


def test_corrupt_swapped_tile_is_counted_as_recovered() -> None:
    grid = RegionGrid()
    viewport = Viewport()
    backend = MemorySurfaceBackend()
    scratch = new_scratch_buffer()
    page_tiles(grid, viewport, backend, scratch)
    viewport.translate(Vector2(1280 * 2, 0))
    page_tiles(grid, viewport, backend, scratch)
    grid.tile_at(0, 0).compressed = RunLengthStream(
        values=np.empty(0, dtype=np.uint8), counts=np.empty(0, dtype=np.int64)
    )

    viewport.translate(Vector2(-1280 * 2, 0))
    report = page_tiles(grid, viewport, backend, scratch)

    assert report.swapped_in == 1
    assert report.recovered == 1
    assert grid.tile_at(0, 0).is_hot
