"""Window subsystem runtime adapters."""

from koko.window.factory import create_window_layer
from koko.window.headless import HeadlessWindow
from koko.window.rendercanvas_glfw import RenderCanvasWindow, create_rendercanvas_window

__all__ = [
    "HeadlessWindow",
    "RenderCanvasWindow",
    "create_rendercanvas_window",
    "create_window_layer",
]
