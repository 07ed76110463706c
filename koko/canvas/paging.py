"""Presence-based paging: a tile is resident if and only if it is visible."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from koko.api.surface import SurfaceBackend
from koko.canvas.region_grid import RegionGrid
from koko.canvas.viewport import Viewport

_LOG = logging.getLogger("koko.canvas.paging")


@dataclass(frozen=True, slots=True)
class PagingReport:
    """Work done by one paging pass."""

    visible: tuple[tuple[int, int], ...]
    allocated: int = 0
    swapped_in: int = 0
    swapped_out: int = 0
    recovered: int = 0


def page_tiles(
    grid: RegionGrid,
    viewport: Viewport,
    backend: SurfaceBackend,
    scratch: np.ndarray,
) -> PagingReport:
    """Swap out hot tiles that left the view, then bring visible tiles in.

    Expects ``grid.ensure_covers(viewport)`` to have run this frame.
    """
    visible = tuple(grid.visible_indices(viewport))
    visible_set = set(visible)
    allocated = swapped_in = swapped_out = recovered = 0
    for row, col, tile in grid.cells():
        if (row, col) not in visible_set and tile.is_hot:
            tile.swap_out(backend)
            swapped_out += 1
    for row, col in visible:
        tile = grid.tile_at(row, col)
        if not tile.is_allocated:
            tile.ensure_allocated(backend)
            allocated += 1
        elif not tile.is_hot:
            if not tile.swap_in(backend, scratch):
                recovered += 1
            swapped_in += 1
    report = PagingReport(
        visible=visible,
        allocated=allocated,
        swapped_in=swapped_in,
        swapped_out=swapped_out,
        recovered=recovered,
    )
    if allocated or swapped_in or swapped_out:
        _LOG.debug(
            "paging visible=%d allocated=%d swapped_in=%d swapped_out=%d recovered=%d",
            len(visible),
            allocated,
            swapped_in,
            swapped_out,
            recovered,
        )
    return report


__all__ = ["PagingReport", "page_tiles"]
