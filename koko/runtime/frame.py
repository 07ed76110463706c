"""One frame of canvas work: input, grid growth, paging, painting, compositing."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from koko.api.input_snapshot import InputSnapshot
from koko.api.surface import SurfaceBackend
from koko.canvas.brush import stamp
from koko.canvas.paging import PagingReport, page_tiles
from koko.canvas.region_grid import GrowthEvent
from koko.canvas.stroke import ControlPath
from koko.canvas.units import Vector2
from koko.canvas.viewport import PanDirection
from koko.rendering.compositor import CompositeReport, OverlayBatch
from koko.runtime.state import EngineState, StampMark

KEY_EXIT = "escape"
KEY_BRUSH = "b"
KEY_ERASE = "e"
# first held key wins, in this order
HUE_KEYS: tuple[tuple[str, int], ...] = (("i", 0), ("o", 1), ("p", 2))
PAN_KEYS: tuple[tuple[str, PanDirection], ...] = (
    ("arrowup", PanDirection.UP),
    ("arrowdown", PanDirection.DOWN),
    ("arrowleft", PanDirection.LEFT),
    ("arrowright", PanDirection.RIGHT),
)

_LOG = logging.getLogger("koko.runtime.frame")


@dataclass(frozen=True, slots=True)
class FrameReport:
    """Everything one ``step_frame`` call did."""

    frame_index: int
    growth: tuple[GrowthEvent, ...]
    paging: PagingReport
    composite: CompositeReport
    overlay: OverlayBatch
    committed: ControlPath | None
    running: bool


def step_frame(
    state: EngineState,
    snapshot: InputSnapshot,
    backend: SurfaceBackend,
) -> FrameReport:
    """Advance the canvas by one frame.

    Input is applied first, so the grid always covers the viewport that is
    about to be paged and composited.
    """
    keyboard = snapshot.keyboard
    if snapshot.close_requested or keyboard.was_key_pressed(KEY_EXIT):
        state.running = False

    for key, channel in HUE_KEYS:
        if keyboard.is_key_held(key):
            state.color = state.color.with_channel_step(channel)
            break

    for key, direction in PAN_KEYS:
        if keyboard.is_key_held(key):
            state.viewport.pan(direction, state.pan_step)
            break

    if keyboard.was_key_pressed(KEY_BRUSH):
        state.brush = state.brush.next()
        _LOG.debug("brush_changed mode=%s", state.brush.value)
    if keyboard.was_key_pressed(KEY_ERASE):
        erase_all(state, backend)

    growth = tuple(state.grid.ensure_covers(state.viewport))
    if growth:
        state.compositor.invalidate()
        state.last_stamp = None
    paging = page_tiles(state.grid, state.viewport, backend, state.scratch)

    committed = _paint(state, snapshot, backend)

    composite = state.compositor.composite(state.grid, state.viewport, backend, paging.visible)
    overlay = state.compositor.path_overlay(state.grid, state.viewport, paging.visible)
    report = FrameReport(
        frame_index=snapshot.frame_index,
        growth=growth,
        paging=paging,
        composite=composite,
        overlay=overlay,
        committed=committed,
        running=state.running,
    )
    state.frame_index += 1
    return report


def erase_all(state: EngineState, backend: SurfaceBackend) -> None:
    """Drop every committed path and reset allocated tiles to their cleared look."""
    for _row, _col, tile in state.grid.cells():
        tile.reset(backend)
    state.path_count = 0
    state.vertex_count = 0
    state.last_stamp = None
    state.compositor.invalidate()
    _LOG.info("erase_all tiles=%d", state.grid.tile_count)


def _paint(
    state: EngineState,
    snapshot: InputSnapshot,
    backend: SurfaceBackend,
) -> ControlPath | None:
    pointer = snapshot.pointer
    if pointer.down or pointer.pressed:
        point = Vector2(pointer.x, pointer.y)
        if _inside_window(point, state.viewport.extent):
            state.strokes.sample(point)
            _stamp_at(state, point, backend)
    if pointer.down or not state.strokes.active:
        return None
    state.last_stamp = None
    path = state.strokes.commit_stroke(
        state.viewport.origin,
        color=state.color,
        tile_extent=state.grid.tile_extent,
    )
    if path is None:
        return None
    cell = state.grid.cell_at(path.anchor)
    if cell is None:
        _LOG.warning(
            "stroke_outside_grid anchor=(%d,%d) pitch=%d",
            path.anchor.x,
            path.anchor.y,
            state.grid.pitch,
        )
        return None
    state.grid.tile_at(*cell).attach_path(path)
    state.path_count += 1
    state.vertex_count += path.vertex_count
    return path


def _stamp_at(state: EngineState, point: Vector2, backend: SurfaceBackend) -> None:
    world = state.viewport.to_world(point)
    cell = state.grid.cell_at(world)
    if cell is None:
        return
    tile = state.grid.tile_at(*cell)
    if not tile.is_hot:
        return
    local = world - state.grid.cell_rect(*cell).origin
    previous = state.last_stamp
    joined = previous.point if previous is not None and previous.tile_id == tile.tile_id else None
    with tile.edit(backend):
        stamp(backend, local, state.brush, state.color, previous=joined)
    state.last_stamp = StampMark(tile_id=tile.tile_id, point=local)


def _inside_window(point: Vector2, extent: Vector2) -> bool:
    return 0 <= point.x < extent.x and 0 <= point.y < extent.y


__all__ = ["FrameReport", "HUE_KEYS", "PAN_KEYS", "erase_all", "step_frame"]
