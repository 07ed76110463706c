"""Window backend selection and factory helpers."""

from __future__ import annotations

from koko.api.window import WindowPort
from koko.runtime.config import RuntimeConfig
from koko.window.headless import HeadlessWindow
from koko.window.rendercanvas_glfw import create_rendercanvas_window


def create_window_layer(config: RuntimeConfig) -> WindowPort:
    window = config.window
    if window.backend == "rendercanvas_glfw":
        return create_rendercanvas_window(
            width=window.width,
            height=window.height,
            title=window.title,
            max_fps=config.loop.target_fps,
            trace_enabled=config.input.trace_enabled,
        )
    if window.backend == "headless":
        return HeadlessWindow(max_frames=window.headless_frames, title=window.title)
    raise RuntimeError(f"Unsupported KOKO_WINDOW_BACKEND: {window.backend!r}")


__all__ = ["create_window_layer"]
