"""Window and event-loop contracts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from koko.api.input_events import InputEvent


@dataclass(frozen=True, slots=True)
class WindowResizeEvent:
    """Normalized resize event in logical and physical units."""

    logical_width: float
    logical_height: float
    physical_width: int
    physical_height: int
    dpi_scale: float


@dataclass(frozen=True, slots=True)
class WindowCloseEvent:
    """Normalized close-request event."""

    requested: bool = True


WindowEvent = WindowResizeEvent | WindowCloseEvent


class WindowPort(Protocol):
    """Engine-facing window/event-loop ownership contract."""

    @property
    def canvas(self) -> object | None:
        """Backend canvas the presenter renders into, if any."""

    def poll_events(self) -> tuple[WindowEvent, ...]:
        """Poll and return normalized window events."""

    def poll_input_events(self) -> tuple[InputEvent, ...]:
        """Poll and return normalized raw input events for the input controller."""

    def set_title(self, title: str) -> None:
        """Set OS window title."""

    def run_loop(self, frame_callback: Callable[[], bool]) -> None:
        """Drive ``frame_callback`` once per frame until it returns False."""

    def stop_loop(self) -> None:
        """Stop the OS/backend event loop when supported."""

    def close(self) -> None:
        """Close window and release backend resources."""


__all__ = [
    "WindowCloseEvent",
    "WindowEvent",
    "WindowPort",
    "WindowResizeEvent",
]
