"""Public input event types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """Raw pointer event in window coordinates.

    ``event_type`` is one of ``pointer_down``, ``pointer_move`` or ``pointer_up``.
    """

    event_type: str
    x: float
    y: float
    button: int


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """Raw key event (``key_down`` or ``key_up``) carrying the backend key name."""

    event_type: str
    value: str


InputEvent = PointerEvent | KeyEvent

__all__ = ["InputEvent", "KeyEvent", "PointerEvent"]
