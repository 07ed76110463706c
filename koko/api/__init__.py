"""Public koko API contracts."""

from koko.api.input_events import InputEvent, KeyEvent, PointerEvent
from koko.api.input_snapshot import InputSnapshot, KeyboardSnapshot, PointerSnapshot
from koko.api.logging import LoggingConfig
from koko.api.surface import SurfaceBackend, SurfaceError, SurfaceHandle
from koko.api.window import WindowCloseEvent, WindowEvent, WindowPort, WindowResizeEvent

__all__ = [
    "InputEvent",
    "InputSnapshot",
    "KeyEvent",
    "KeyboardSnapshot",
    "LoggingConfig",
    "PointerEvent",
    "PointerSnapshot",
    "SurfaceBackend",
    "SurfaceError",
    "SurfaceHandle",
    "WindowCloseEvent",
    "WindowEvent",
    "WindowPort",
    "WindowResizeEvent",
]
