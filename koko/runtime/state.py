"""Explicit engine state threaded through every frame."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from koko.canvas.brush import BrushMode
from koko.canvas.region_grid import RegionGrid
from koko.canvas.stroke import StrokeBuffer
from koko.canvas.tile import new_scratch_buffer
from koko.canvas.units import COLOR_PEN, TILE_EXTENT, Color, Vector2
from koko.canvas.viewport import Viewport
from koko.rendering.compositor import TileCompositor
from koko.runtime.config import RuntimeConfig


@dataclass(frozen=True, slots=True)
class StampMark:
    """Where the previous brush stamp landed, so the next one can join it."""

    tile_id: int
    point: Vector2


@dataclass(slots=True)
class EngineState:
    viewport: Viewport
    grid: RegionGrid
    strokes: StrokeBuffer = field(default_factory=StrokeBuffer)
    scratch: np.ndarray = field(default_factory=new_scratch_buffer)
    compositor: TileCompositor = field(default_factory=TileCompositor)
    brush: BrushMode = BrushMode.SQUAREISH
    color: Color = COLOR_PEN
    pan_step: int = 5
    running: bool = True
    frame_index: int = 0
    path_count: int = 0
    vertex_count: int = 0
    last_stamp: StampMark | None = None


def create_engine_state(config: RuntimeConfig) -> EngineState:
    """Fresh state: viewport at the world origin over the initial grid."""
    return EngineState(
        viewport=Viewport(extent=TILE_EXTENT),
        grid=RegionGrid(config.canvas.initial_pitch, tile_extent=TILE_EXTENT),
        scratch=new_scratch_buffer(TILE_EXTENT),
        pan_step=config.canvas.pan_step,
    )


__all__ = ["EngineState", "StampMark", "create_engine_state"]
