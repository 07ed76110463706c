"""Surface backend, compositing and on-screen presentation."""

from koko.rendering.compositor import (
    EMPTY_OVERLAY,
    CompositeReport,
    OverlayBatch,
    TileCompositor,
    scanbox_unit_offset,
)
from koko.rendering.memory_surface import MemorySurfaceBackend

__all__ = [
    "CompositeReport",
    "EMPTY_OVERLAY",
    "MemorySurfaceBackend",
    "OverlayBatch",
    "TileCompositor",
    "scanbox_unit_offset",
]
