"""Engine-agnostic canvas core: coordinates, viewport, tiles, grid, paging, strokes."""

from koko.canvas.units import (
    TILE_EXTENT,
    TILE_HEIGHT,
    TILE_WIDTH,
    Color,
    Rect,
    Vector2,
    world_to_unit,
)
from koko.canvas.errors import RegionGridError, TileStateError
from koko.canvas.viewport import PanDirection, Viewport
from koko.canvas.rle import RunLengthError, RunLengthStream, compress, expand
from koko.canvas.stroke import ControlPath, StrokeBuffer
from koko.canvas.tile import Tile, TileState
from koko.canvas.region_grid import GrowthDirection, GrowthEvent, RegionGrid
from koko.canvas.paging import PagingReport, page_tiles
from koko.canvas.brush import BrushMode, stamp

__all__ = [
    "BrushMode",
    "Color",
    "ControlPath",
    "GrowthDirection",
    "GrowthEvent",
    "PagingReport",
    "PanDirection",
    "Rect",
    "RegionGrid",
    "RegionGridError",
    "RunLengthError",
    "RunLengthStream",
    "StrokeBuffer",
    "TILE_EXTENT",
    "TILE_HEIGHT",
    "TILE_WIDTH",
    "Tile",
    "TileState",
    "TileStateError",
    "Vector2",
    "Viewport",
    "compress",
    "expand",
    "page_tiles",
    "stamp",
    "world_to_unit",
]
