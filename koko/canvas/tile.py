"""Tile (region) lifecycle: allocation, swap-out to run-length bytes, swap-in."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

import numpy as np

from koko.api.surface import SurfaceBackend, SurfaceHandle
from koko.canvas.errors import TileStateError
from koko.canvas.rle import RunLengthError, RunLengthStream, compress, expand_into
from koko.canvas.stroke import ControlPath
from koko.canvas.targets import render_target
from koko.canvas.units import COLOR_BORDER, COLOR_CLEAR, TILE_EXTENT, Rect, Vector2

BORDER_THICKNESS = 2

_LOG = logging.getLogger("koko.canvas.tile")
_TILE_IDS = itertools.count(1)


class TileState(Enum):
    UNINITIALIZED = "uninitialized"
    HOT = "hot"
    SWAPPED = "swapped"


def debug_border(extent: Vector2, thickness: int = BORDER_THICKNESS) -> tuple[Rect, ...]:
    """Four edge rectangles framing a tile."""
    w, h = extent.x, extent.y
    return (
        Rect(0, 0, w, thickness),
        Rect(0, h - thickness, w, thickness),
        Rect(0, 0, thickness, h),
        Rect(w - thickness, 0, thickness, h),
    )


def new_scratch_buffer(extent: Vector2 = TILE_EXTENT) -> np.ndarray:
    """Flat RGBA buffer sized for one tile, reused across swap-ins."""
    return np.zeros(extent.x * extent.y * 4, dtype=np.uint8)


class Tile:
    """One grid cell of the canvas.

    Holds either a live surface (``HOT``) or a compressed byte stream
    (``SWAPPED``), never both. Committed paths stay attached across swaps.
    """

    __slots__ = ("tile_id", "extent", "state", "surface", "compressed", "paths", "dirty")

    def __init__(self, extent: Vector2 = TILE_EXTENT) -> None:
        self.tile_id = next(_TILE_IDS)
        self.extent = extent
        self.state = TileState.UNINITIALIZED
        self.surface: SurfaceHandle | None = None
        self.compressed: RunLengthStream | None = None
        self.paths: list[ControlPath] = []
        self.dirty = False

    @property
    def is_allocated(self) -> bool:
        return self.state is not TileState.UNINITIALIZED

    @property
    def is_hot(self) -> bool:
        return self.state is TileState.HOT

    @property
    def byte_count(self) -> int:
        return self.extent.x * self.extent.y * 4

    def ensure_allocated(self, backend: SurfaceBackend) -> bool:
        """Allocate and clear a surface for an uninitialized tile; True if it did."""
        if self.is_allocated:
            return False
        self._initialize(backend)
        _LOG.debug("tile_allocated tile=%d", self.tile_id)
        return True

    def swap_out(self, backend: SurfaceBackend) -> RunLengthStream:
        """Compress the live surface into a run-length stream and release it."""
        if not self.is_hot or self.surface is None:
            raise TileStateError(f"tile {self.tile_id} is not hot ({self.state.value})")
        surface = self.surface
        with render_target(backend, surface):
            raw = backend.read_all_pixels()
        stream = compress(raw)
        backend.release(surface)
        self.surface = None
        self.compressed = stream
        self.state = TileState.SWAPPED
        self.dirty = False
        _LOG.debug(
            "tile_swapped_out tile=%d raw_bytes=%d runs=%d",
            self.tile_id,
            raw.size,
            len(stream),
            extra={"tile": self.tile_id, "raw_bytes": raw.size, "runs": len(stream)},
        )
        return stream

    def swap_in(self, backend: SurfaceBackend, scratch: np.ndarray) -> bool:
        """Restore a swapped tile into a fresh surface.

        Returns True when the compressed content was restored. A corrupt or
        missing stream resets the tile to a cleared, bordered surface and
        returns False.
        """
        if self.state is not TileState.SWAPPED:
            raise TileStateError(f"tile {self.tile_id} is not swapped ({self.state.value})")
        stream = self.compressed
        try:
            if stream is None:
                raise RunLengthError("tile has no compressed stream")
            if scratch.size != self.byte_count:
                raise RunLengthError(
                    f"scratch buffer holds {scratch.size} bytes, tile needs {self.byte_count}"
                )
            pixels = expand_into(stream, scratch)
        except RunLengthError:
            _LOG.warning(
                "tile_swap_in_corrupt tile=%d action=reinitialize",
                self.tile_id,
                exc_info=True,
                extra={"tile": self.tile_id, "action": "reinitialize"},
            )
            self.compressed = None
            self._initialize(backend)
            return False
        surface = backend.allocate(self.extent.x, self.extent.y)
        backend.upload_pixels(surface, pixels)
        self.surface = surface
        self.compressed = None
        self.state = TileState.HOT
        self.dirty = True
        _LOG.debug(
            "tile_swapped_in tile=%d runs=%d",
            self.tile_id,
            len(stream),
            extra={"tile": self.tile_id, "runs": len(stream)},
        )
        return True

    @contextmanager
    def edit(self, backend: SurfaceBackend) -> Iterator[SurfaceBackend]:
        """Scope draw calls to this tile's surface and mark it dirty."""
        if not self.is_hot or self.surface is None:
            raise TileStateError(f"tile {self.tile_id} is not hot ({self.state.value})")
        with render_target(backend, self.surface):
            self.dirty = True
            yield backend

    def reset(self, backend: SurfaceBackend) -> None:
        """Drop paths and content, leaving an allocated tile cleared and bordered."""
        self.paths.clear()
        if not self.is_allocated:
            return
        if self.surface is not None:
            backend.release(self.surface)
            self.surface = None
        self.compressed = None
        self._initialize(backend)

    def attach_path(self, path: ControlPath) -> None:
        self.paths.append(path)

    def _initialize(self, backend: SurfaceBackend) -> None:
        surface = backend.allocate(self.extent.x, self.extent.y)
        self.surface = surface
        self.state = TileState.HOT
        with render_target(backend, surface):
            backend.clear(COLOR_CLEAR)
            for rect in debug_border(self.extent):
                backend.fill_rect(rect, COLOR_BORDER)
        self.dirty = True

    def __repr__(self) -> str:
        return f"Tile(id={self.tile_id}, state={self.state.value}, paths={len(self.paths)})"


__all__ = [
    "BORDER_THICKNESS",
    "Tile",
    "TileState",
    "TileStateError",
    "debug_border",
    "new_scratch_buffer",
]
