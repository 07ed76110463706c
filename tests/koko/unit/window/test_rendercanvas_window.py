from __future__ import annotations

import sys
from types import ModuleType, SimpleNamespace

import pytest

from koko.api.input_events import KeyEvent, PointerEvent
from koko.api.window import WindowCloseEvent, WindowResizeEvent
from koko.window.rendercanvas_glfw import (
    RenderCanvasWindow,
    create_rendercanvas_window,
    run_backend_loop,
    stop_backend_loop,
)


class _Loop:
    def __init__(self) -> None:
        self.ran = 0
        self.stopped = 0

    def run(self) -> None:
        self.ran += 1

    def stop(self) -> None:
        self.stopped += 1


class _AutoWithLoop:
    def __init__(self) -> None:
        self.loop = _Loop()


class _AutoWithRun:
    def __init__(self) -> None:
        self.ran = 0

    def run(self) -> None:
        self.ran += 1


class _Canvas:
    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs
        self.handlers: dict[str, list] = {}
        self.titles: list[str] = []
        self.closed = 0
        self.draw_functions: list = []

    def add_event_handler(self, handler, event_type: str) -> None:
        self.handlers.setdefault(event_type, []).append(handler)

    def set_title(self, title: str) -> None:
        self.titles.append(title)

    def close(self) -> None:
        self.closed += 1

    def request_draw(self, draw_function=None) -> None:
        self.draw_functions.append(draw_function)

    def emit(self, event_type: str, **payload) -> None:
        event = {"event_type": event_type, **payload}
        for handler in self.handlers.get(event_type, []):
            handler(event)

    def emit_obj(self, event_type: str, **payload) -> None:
        event = SimpleNamespace(event_type=event_type, **payload)
        for handler in self.handlers.get(event_type, []):
            handler(event)


def test_run_and_stop_backend_loop_helpers() -> None:
    with_loop = _AutoWithLoop()
    run_backend_loop(with_loop)
    assert with_loop.loop.ran == 1
    stop_backend_loop(with_loop)
    assert with_loop.loop.stopped == 1

    with_run = _AutoWithRun()
    run_backend_loop(with_run)
    assert with_run.ran == 1


def test_run_backend_loop_raises_when_no_entrypoint() -> None:
    with pytest.raises(RuntimeError):
        run_backend_loop(object())


def test_window_events_are_normalized() -> None:
    canvas = _Canvas()
    window = RenderCanvasWindow(canvas=canvas)

    canvas.emit("resize", size=(640.0, 480.0), pixel_ratio=1.5)
    canvas.emit_obj("resize", width=320, height=200)
    canvas.emit("resize", size=None)
    canvas.emit("close")

    events = window.poll_events()
    assert events[0] == WindowResizeEvent(640.0, 480.0, 960, 720, 1.5)
    assert events[1] == WindowResizeEvent(320.0, 200.0, 320, 200, 1.0)
    assert isinstance(events[2], WindowCloseEvent)
    assert window.poll_events() == ()


def test_pointer_and_key_events_are_parsed() -> None:
    canvas = _Canvas()
    window = RenderCanvasWindow(canvas=canvas, trace_enabled=True)

    canvas.emit("pointer_down", x=10, y=20, button=1)
    canvas.emit_obj("pointer_move", x=11.5, y=21.0, button="left")
    canvas.emit("pointer_up", x=12, y=22, button=1)
    canvas.emit("pointer_down", x="nan", y=0, button=1)
    canvas.emit("key_down", key="Escape")
    canvas.emit("key_up", key=None)

    assert window.poll_input_events() == (
        PointerEvent("pointer_down", 10.0, 20.0, 1),
        PointerEvent("pointer_move", 11.5, 21.0, 0),
        PointerEvent("pointer_up", 12.0, 22.0, 1),
        KeyEvent("key_down", "Escape"),
    )
    assert window.poll_input_events() == ()


def test_run_loop_registers_draw_callback_and_closes_when_done() -> None:
    canvas = _Canvas()
    window = RenderCanvasWindow(canvas=canvas)
    results = iter([True, False])
    calls: list[int] = []

    def frame() -> bool:
        calls.append(1)
        return next(results)

    window.run_loop(frame)
    (draw,) = canvas.draw_functions
    draw()
    assert canvas.closed == 0
    draw()
    assert canvas.closed == 1
    draw()
    assert len(calls) == 2


def test_run_loop_requires_request_draw() -> None:
    window = RenderCanvasWindow(canvas=SimpleNamespace())
    with pytest.raises(RuntimeError, match="request_draw"):
        window.run_loop(lambda: True)


def test_title_and_idempotent_close() -> None:
    canvas = _Canvas()
    window = RenderCanvasWindow(canvas=canvas)
    window.set_title("koko gl")
    window.close()
    window.close()
    assert canvas.titles == ["koko gl"]
    assert canvas.closed == 1


def test_create_window_builds_continuous_canvas_and_runs_backend(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    auto = ModuleType("rendercanvas.auto")
    auto.RenderCanvas = _Canvas
    auto.loop = _Loop()
    package = ModuleType("rendercanvas")
    package.auto = auto
    monkeypatch.setitem(sys.modules, "rendercanvas", package)
    monkeypatch.setitem(sys.modules, "rendercanvas.auto", auto)

    window = create_rendercanvas_window(width=1280, height=720, title="koko gl", max_fps=120)
    assert window.canvas.kwargs == {
        "size": (1280, 720),
        "title": "koko gl",
        "update_mode": "continuous",
        "max_fps": 120.0,
    }
    window.run_loop(lambda: True)
    assert auto.loop.ran == 1
    window.close()
    assert auto.loop.stopped == 1


def test_create_window_wraps_existing_canvas() -> None:
    canvas = _Canvas()
    window = create_rendercanvas_window(canvas, width=1, height=1, title="t", max_fps=1)
    assert window.canvas is canvas
    window.run_loop(lambda: True)
    assert len(canvas.draw_functions) == 1
