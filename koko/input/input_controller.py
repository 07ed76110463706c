"""Turn raw window input events into immutable per-frame snapshots."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from koko.api.input_events import InputEvent, KeyEvent, PointerEvent
from koko.api.input_snapshot import InputSnapshot, KeyboardSnapshot, PointerSnapshot

PRIMARY_BUTTON = 1

logger = logging.getLogger(__name__)


def normalize_key(value: str) -> str:
    return str(value).strip().lower()


class InputController:
    """Queue raw events between frames and fold them into one snapshot per frame.

    Pressed and released key sets are per frame; the held set persists until
    the matching key-up arrives.
    """

    def __init__(self, *, trace_enabled: bool = False) -> None:
        self._pointer_events: deque[PointerEvent] = deque()
        self._key_events: deque[KeyEvent] = deque()
        self._held_keys: set[str] = set()
        self._pointer_x = 0
        self._pointer_y = 0
        self._pointer_down = False
        self._trace = trace_enabled

    @property
    def pointer_down(self) -> bool:
        return self._pointer_down

    def consume_window_input_events(self, events: Iterable[InputEvent]) -> None:
        """Ingest normalized raw input events produced by window layer polling."""
        for raw in events:
            if isinstance(raw, PointerEvent):
                self._pointer_events.append(raw)
            elif isinstance(raw, KeyEvent):
                self._key_events.append(raw)
            else:
                continue
            if self._trace:
                logger.debug("input_event raw=%r", raw)

    def build_input_snapshot(
        self,
        *,
        frame_index: int,
        close_requested: bool = False,
    ) -> InputSnapshot:
        """Build one immutable per-frame snapshot and consume queued raw events."""
        pointer_events = tuple(self._pointer_events)
        key_events = tuple(self._key_events)
        self._pointer_events.clear()
        self._key_events.clear()

        pressed = released = False
        for pointer_event in pointer_events:
            self._pointer_x = int(pointer_event.x)
            self._pointer_y = int(pointer_event.y)
            if int(pointer_event.button) != PRIMARY_BUTTON:
                continue
            if pointer_event.event_type == "pointer_down":
                pressed = True
                self._pointer_down = True
            elif pointer_event.event_type == "pointer_up":
                released = True
                self._pointer_down = False

        just_pressed: set[str] = set()
        just_released: set[str] = set()
        for key_event in key_events:
            norm = normalize_key(key_event.value)
            if not norm:
                continue
            if key_event.event_type == "key_down":
                if norm not in self._held_keys:
                    just_pressed.add(norm)
                self._held_keys.add(norm)
            elif key_event.event_type == "key_up":
                just_released.add(norm)
                self._held_keys.discard(norm)

        return InputSnapshot(
            frame_index=frame_index,
            keyboard=KeyboardSnapshot(
                held_keys=frozenset(self._held_keys),
                pressed_keys=frozenset(just_pressed),
                released_keys=frozenset(just_released),
            ),
            pointer=PointerSnapshot(
                x=self._pointer_x,
                y=self._pointer_y,
                down=self._pointer_down,
                pressed=pressed,
                released=released,
            ),
            close_requested=close_requested,
            pointer_events=pointer_events,
            key_events=key_events,
        )


__all__ = ["InputController", "PRIMARY_BUTTON", "normalize_key"]
