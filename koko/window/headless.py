"""Headless window: scripted input batches, no canvas, loop driven in-process."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable, Iterable

from koko.api.input_events import InputEvent
from koko.api.window import WindowCloseEvent, WindowEvent

_LOG = logging.getLogger("koko.window")


class HeadlessWindow:
    """Window port for scripted runs and tests.

    Each queued batch of input events is delivered on one frame's poll. The
    loop runs until the frame callback returns False, ``max_frames`` frames
    have run (0 means no cap) or ``stop_loop`` is called.
    """

    def __init__(self, *, max_frames: int = 0, title: str = "") -> None:
        self._batches: deque[tuple[InputEvent, ...]] = deque()
        self._events: deque[WindowEvent] = deque()
        self._max_frames = max(0, int(max_frames))
        self._stop_requested = False
        self.title = title
        self.frames_run = 0
        self.closed = False

    @property
    def canvas(self) -> object | None:
        return None

    def queue_input(self, events: Iterable[InputEvent] = ()) -> None:
        """Queue one frame's worth of input events; an empty batch is an idle frame."""
        self._batches.append(tuple(events))

    def request_close(self) -> None:
        self._events.append(WindowCloseEvent())

    def poll_events(self) -> tuple[WindowEvent, ...]:
        drained = tuple(self._events)
        self._events.clear()
        return drained

    def poll_input_events(self) -> tuple[InputEvent, ...]:
        if not self._batches:
            return ()
        return self._batches.popleft()

    def set_title(self, title: str) -> None:
        self.title = title

    def run_loop(self, frame_callback: Callable[[], bool]) -> None:
        self._stop_requested = False
        while not self._stop_requested:
            if self._max_frames and self.frames_run >= self._max_frames:
                _LOG.info("headless_frame_cap_reached frames=%d", self.frames_run)
                return
            keep_running = frame_callback()
            self.frames_run += 1
            if not keep_running:
                return

    def stop_loop(self) -> None:
        self._stop_requested = True

    def close(self) -> None:
        self.stop_loop()
        self.closed = True


__all__ = ["HeadlessWindow"]
