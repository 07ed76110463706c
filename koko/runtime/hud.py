"""Status text shown over the canvas."""

from __future__ import annotations

from koko.runtime.state import EngineState


def status_lines(state: EngineState, frame_ms: float) -> tuple[str, str]:
    origin = state.viewport.origin
    first = (
        f"{int(frame_ms)}ms [# paths: {state.path_count}]  [# verts: {state.vertex_count}] "
        f"[sb @ ({origin.x}, {origin.y})]"
    )
    second = (
        f"e = erase all, b = brush ({state.brush.value}), "
        f"hue(i,o,p) => ({state.color.hex_triplet()})"
    )
    return first, second


__all__ = ["status_lines"]
