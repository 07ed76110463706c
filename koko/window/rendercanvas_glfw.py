"""Rendercanvas/GLFW-backed window layer implementation."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from koko.api.input_events import InputEvent, KeyEvent, PointerEvent
from koko.api.window import WindowCloseEvent, WindowEvent, WindowPort, WindowResizeEvent

_LOG = logging.getLogger("koko.window")


def run_backend_loop(rc_auto: Any) -> None:
    """Run rendercanvas backend loop."""
    loop = getattr(rc_auto, "loop", None)
    if loop is not None and hasattr(loop, "run"):
        loop.run()
        return
    run_func = getattr(rc_auto, "run", None)
    if callable(run_func):
        run_func()
        return
    raise RuntimeError("rendercanvas.auto did not expose a runnable loop.")


def stop_backend_loop(rc_auto: Any) -> None:
    """Stop rendercanvas backend loop when supported."""
    loop = getattr(rc_auto, "loop", None)
    if loop is not None and hasattr(loop, "stop"):
        loop.stop()


@dataclass(slots=True)
class RenderCanvasWindow(WindowPort):
    """Window-layer adapter over an existing rendercanvas canvas."""

    canvas: Any
    trace_enabled: bool = False
    _events: deque[WindowEvent] = field(default_factory=deque)
    _input_events: deque[InputEvent] = field(default_factory=deque)
    _rc_auto: Any | None = field(default=None, repr=False)
    _closed: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        self._bind_window_events()

    def poll_events(self) -> tuple[WindowEvent, ...]:
        drained = tuple(self._events)
        self._events.clear()
        return drained

    def poll_input_events(self) -> tuple[InputEvent, ...]:
        drained = tuple(self._input_events)
        self._input_events.clear()
        return drained

    def set_title(self, title: str) -> None:
        setter = getattr(self.canvas, "set_title", None)
        if callable(setter):
            setter(title)

    def run_loop(self, frame_callback: Callable[[], bool]) -> None:
        """Register ``frame_callback`` as the canvas draw function and run the backend loop."""

        def _draw_frame() -> None:
            if self._closed:
                return
            if not frame_callback():
                self.close()

        request_draw = getattr(self.canvas, "request_draw", None)
        if not callable(request_draw):
            raise RuntimeError("Canvas does not support request_draw.")
        request_draw(_draw_frame)
        if self._rc_auto is None:
            return
        run_backend_loop(self._rc_auto)

    def stop_loop(self) -> None:
        if self._rc_auto is None:
            return
        stop_backend_loop(self._rc_auto)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        closer = getattr(self.canvas, "close", None)
        if callable(closer):
            closer()
        self.stop_loop()

    def _bind_window_events(self) -> None:
        add_handler = getattr(self.canvas, "add_event_handler", None)
        if not callable(add_handler):
            return
        add_handler(self._on_resize, "resize")
        add_handler(self._on_close, "close")
        add_handler(self._on_pointer_down, "pointer_down")
        add_handler(self._on_pointer_move, "pointer_move")
        add_handler(self._on_pointer_up, "pointer_up")
        add_handler(self._on_key_down, "key_down")
        add_handler(self._on_key_up, "key_up")

    def _on_resize(self, event: object) -> None:
        size = _event_value(event, "size")
        if isinstance(size, (tuple, list)) and len(size) >= 2:
            lw, lh = size[0], size[1]
        else:
            lw = _event_value(event, "width")
            lh = _event_value(event, "height")
        if not isinstance(lw, (int, float)) or not isinstance(lh, (int, float)):
            return
        ratio_raw = _event_value(event, "pixel_ratio", 1.0)
        dpi_scale = 1.0
        if isinstance(ratio_raw, (int, float)) and ratio_raw > 0:
            dpi_scale = float(ratio_raw)
        self._events.append(
            WindowResizeEvent(
                logical_width=float(lw),
                logical_height=float(lh),
                physical_width=max(1, int(float(lw) * dpi_scale)),
                physical_height=max(1, int(float(lh) * dpi_scale)),
                dpi_scale=dpi_scale,
            )
        )

    def _on_close(self, event: object) -> None:
        _ = event
        self._events.append(WindowCloseEvent())

    def _on_pointer_down(self, event: object) -> None:
        self._push(_parse_pointer_event(event, expected_type="pointer_down"))

    def _on_pointer_move(self, event: object) -> None:
        self._push(_parse_pointer_event(event, expected_type="pointer_move"))

    def _on_pointer_up(self, event: object) -> None:
        self._push(_parse_pointer_event(event, expected_type="pointer_up"))

    def _on_key_down(self, event: object) -> None:
        self._push(_parse_key_event(event, expected_type="key_down"))

    def _on_key_up(self, event: object) -> None:
        self._push(_parse_key_event(event, expected_type="key_up"))

    def _push(self, parsed: InputEvent | None) -> None:
        if parsed is None:
            return
        self._input_events.append(parsed)
        if self.trace_enabled:
            _LOG.debug("window_input_event parsed=%r", parsed)


def create_rendercanvas_window(
    canvas: Any | None = None,
    *,
    width: int,
    height: int,
    title: str,
    max_fps: float,
    trace_enabled: bool = False,
) -> RenderCanvasWindow:
    """Create window adapter over an existing or newly created rendercanvas canvas.

    New canvases run in continuous update mode so the frame callback fires every
    frame, capped at ``max_fps``.
    """
    if canvas is not None:
        return RenderCanvasWindow(canvas=canvas, trace_enabled=trace_enabled)
    try:
        import rendercanvas.auto as rc_auto
    except Exception as exc:
        raise RuntimeError(
            "Render canvas backend unavailable. Install a desktop backend such as glfw."
        ) from exc
    canvas_cls = getattr(rc_auto, "RenderCanvas", None)
    if canvas_cls is None:
        raise RuntimeError("rendercanvas.auto did not expose RenderCanvas.")
    canvas = canvas_cls(
        size=(int(width), int(height)),
        title=title,
        update_mode="continuous",
        max_fps=float(max_fps),
    )
    return RenderCanvasWindow(canvas=canvas, trace_enabled=trace_enabled, _rc_auto=rc_auto)


def _parse_pointer_event(event: object, *, expected_type: str) -> PointerEvent | None:
    raw_type = str(_event_value(event, "event_type", "")).strip().lower()
    if raw_type != expected_type:
        return None
    x = _event_value(event, "x")
    y = _event_value(event, "y")
    button = _event_value(event, "button", 0)
    if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
        return None
    if not isinstance(button, int):
        button = 0
    return PointerEvent(expected_type, float(x), float(y), int(button))


def _parse_key_event(event: object, *, expected_type: str) -> KeyEvent | None:
    if str(_event_value(event, "event_type", "")) != expected_type:
        return None
    key = _event_value(event, "key")
    if not isinstance(key, str):
        return None
    return KeyEvent(expected_type, key)


def _event_value(event: object, key: str, default: object | None = None) -> object | None:
    if isinstance(event, dict):
        return event.get(key, default)
    return getattr(event, key, default)


__all__ = [
    "RenderCanvasWindow",
    "create_rendercanvas_window",
    "run_backend_loop",
    "stop_backend_loop",
]
