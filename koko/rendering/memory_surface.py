"""In-memory drawable surfaces backed by numpy RGBA arrays."""

from __future__ import annotations

import logging
from collections.abc import Callable

import numpy as np

from koko.api.surface import SurfaceError, SurfaceHandle
from koko.canvas.units import TILE_EXTENT, Color, Rect, Vector2

_LOG = logging.getLogger("koko.rendering.surface")

PresentSink = Callable[[np.ndarray], None]


class MemorySurfaceBackend:
    """Surface backend whose surfaces and back buffer are ``(h, w, 4)`` uint8 arrays.

    The back buffer is the default target. ``present`` hands it to an optional
    sink, which is how the pygfx presenter gets its frames.
    """

    def __init__(
        self,
        width: int = TILE_EXTENT.x,
        height: int = TILE_EXTENT.y,
        *,
        present_sink: PresentSink | None = None,
    ) -> None:
        self.back_buffer = np.zeros((height, width, 4), dtype=np.uint8)
        self._surfaces: dict[int, np.ndarray] = {}
        self._next_id = 1
        self._active: SurfaceHandle | None = None
        self._present_sink = present_sink
        self.presented_frames = 0
        self.allocation_count = 0

    @property
    def active_target(self) -> SurfaceHandle | None:
        return self._active

    @property
    def live_surface_count(self) -> int:
        return len(self._surfaces)

    def set_present_sink(self, sink: PresentSink | None) -> None:
        self._present_sink = sink

    def allocate(self, width: int, height: int) -> SurfaceHandle:
        if width <= 0 or height <= 0:
            raise SurfaceError(f"invalid surface size {width}x{height}")
        handle = SurfaceHandle(surface_id=self._next_id, width=width, height=height)
        self._next_id += 1
        self._surfaces[handle.surface_id] = np.zeros((height, width, 4), dtype=np.uint8)
        self.allocation_count += 1
        return handle

    def release(self, handle: SurfaceHandle) -> None:
        if self._surfaces.pop(handle.surface_id, None) is None:
            raise SurfaceError(f"surface {handle.surface_id} is not allocated")
        if self._active is not None and self._active.surface_id == handle.surface_id:
            self._active = None

    def pixels(self, handle: SurfaceHandle) -> np.ndarray:
        """Direct view of a surface's ``(h, w, 4)`` array."""
        try:
            return self._surfaces[handle.surface_id]
        except KeyError:
            raise SurfaceError(f"surface {handle.surface_id} is not allocated") from None

    def set_active_target(self, handle: SurfaceHandle) -> None:
        self.pixels(handle)
        self._active = handle

    def clear_target(self) -> None:
        self._active = None

    def clear(self, color: Color) -> None:
        self._target()[...] = color.as_rgba()

    def fill_rect(self, rect: Rect, color: Color) -> None:
        target = self._target()
        height, width = target.shape[:2]
        x0, y0 = max(rect.x, 0), max(rect.y, 0)
        x1, y1 = min(rect.right, width), min(rect.bottom, height)
        if x0 >= x1 or y0 >= y1:
            return
        target[y0:y1, x0:x1] = color.as_rgba()

    def draw_line(self, start: Vector2, end: Vector2, color: Color) -> None:
        target = self._target()
        height, width = target.shape[:2]
        steps = max(abs(end.x - start.x), abs(end.y - start.y)) + 1
        xs = np.rint(np.linspace(start.x, end.x, steps)).astype(np.int64)
        ys = np.rint(np.linspace(start.y, end.y, steps)).astype(np.int64)
        inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
        target[ys[inside], xs[inside]] = color.as_rgba()

    def read_all_pixels(self) -> np.ndarray:
        return self._target().reshape(-1).copy()

    def upload_pixels(self, handle: SurfaceHandle, data: np.ndarray) -> None:
        pixels = self.pixels(handle)
        flat = np.asarray(data, dtype=np.uint8).reshape(-1)
        if flat.size != pixels.size:
            raise SurfaceError(
                f"upload of {flat.size} bytes into surface {handle.surface_id} "
                f"of {pixels.size} bytes"
            )
        pixels[...] = flat.reshape(pixels.shape)

    def composite(self, handle: SurfaceHandle, src: Rect, dst: Rect) -> None:
        """Copy ``src`` from a surface onto the back buffer at ``dst``.

        Sizes must match; both rectangles are clipped against their buffers.
        """
        if (src.width, src.height) != (dst.width, dst.height):
            raise SurfaceError("composite does not scale: src and dst sizes differ")
        pixels = self.pixels(handle)
        back_h, back_w = self.back_buffer.shape[:2]
        src_h, src_w = pixels.shape[:2]
        # clip against the destination, then carry the same trim to the source
        left = max(0, -dst.x, -src.x)
        top = max(0, -dst.y, -src.y)
        right = min(dst.width, back_w - dst.x, src_w - src.x)
        bottom = min(dst.height, back_h - dst.y, src_h - src.y)
        if left >= right or top >= bottom:
            return
        self.back_buffer[dst.y + top : dst.y + bottom, dst.x + left : dst.x + right] = pixels[
            src.y + top : src.y + bottom, src.x + left : src.x + right
        ]

    def present(self) -> None:
        self.presented_frames += 1
        if self._present_sink is not None:
            self._present_sink(self.back_buffer)

    def _target(self) -> np.ndarray:
        if self._active is None:
            return self.back_buffer
        return self.pixels(self._active)


__all__ = ["MemorySurfaceBackend", "PresentSink"]
