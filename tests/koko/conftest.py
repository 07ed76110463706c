from __future__ import annotations

from koko.api.input_events import KeyEvent, PointerEvent
from koko.api.input_snapshot import InputSnapshot, KeyboardSnapshot, PointerSnapshot
from koko.rendering.memory_surface import MemorySurfaceBackend
from koko.runtime.config import RuntimeConfig, load_runtime_config
from koko.runtime.state import EngineState, create_engine_state


def make_config(**env: str) -> RuntimeConfig:
    return load_runtime_config(env={"KOKO_WINDOW_BACKEND": "headless", **env})


def make_state(**env: str) -> EngineState:
    return create_engine_state(make_config(**env))


def make_backend() -> MemorySurfaceBackend:
    return MemorySurfaceBackend()


def snapshot(
    frame_index: int = 0,
    *,
    held: tuple[str, ...] = (),
    pressed: tuple[str, ...] = (),
    pointer: tuple[int, int] | None = None,
    down: bool = False,
    pointer_pressed: bool = False,
    close_requested: bool = False,
) -> InputSnapshot:
    x, y = pointer if pointer is not None else (0, 0)
    return InputSnapshot(
        frame_index=frame_index,
        keyboard=KeyboardSnapshot(
            held_keys=frozenset(held) | frozenset(pressed),
            pressed_keys=frozenset(pressed),
        ),
        pointer=PointerSnapshot(x=x, y=y, down=down, pressed=pointer_pressed),
        close_requested=close_requested,
    )


def key_tap(key: str) -> tuple[tuple[KeyEvent, ...], tuple[KeyEvent, ...]]:
    """Two frames of input: key down, then key up."""
    return (KeyEvent("key_down", key),), (KeyEvent("key_up", key),)


def drag(points: list[tuple[float, float]]) -> list[tuple[PointerEvent, ...]]:
    """One frame per point: press at the first, move through the rest, release after."""
    frames: list[tuple[PointerEvent, ...]] = []
    for index, (x, y) in enumerate(points):
        kind = "pointer_down" if index == 0 else "pointer_move"
        frames.append((PointerEvent(kind, x, y, 1),))
    last_x, last_y = points[-1]
    frames.append((PointerEvent("pointer_up", last_x, last_y, 1),))
    return frames


class RecordingPresenter:
    def __init__(self, *, fail_render: Exception | None = None) -> None:
        self.overlays: list[int] = []
        self.huds: list[tuple[str, ...]] = []
        self.cursors: list[tuple[int, int]] = []
        self.renders = 0
        self.fail_render = fail_render

    def update_overlay(self, batch) -> None:
        self.overlays.append(batch.vertex_count)

    def update_hud(self, lines, cursor) -> None:
        self.huds.append(tuple(lines))
        self.cursors.append((cursor.x, cursor.y))

    def render(self) -> None:
        if self.fail_render is not None:
            raise self.fail_render
        self.renders += 1
