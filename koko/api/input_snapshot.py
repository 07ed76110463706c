"""Immutable input snapshot contracts."""

from __future__ import annotations

from dataclasses import dataclass, field

from koko.api.input_events import KeyEvent, PointerEvent


@dataclass(frozen=True, slots=True)
class KeyboardSnapshot:
    """Frame-stable keyboard state."""

    held_keys: frozenset[str] = field(default_factory=frozenset)
    pressed_keys: frozenset[str] = field(default_factory=frozenset)
    released_keys: frozenset[str] = field(default_factory=frozenset)

    def is_key_held(self, key: str) -> bool:
        return key in self.held_keys

    def was_key_pressed(self, key: str) -> bool:
        return key in self.pressed_keys

    def was_key_released(self, key: str) -> bool:
        return key in self.released_keys


@dataclass(frozen=True, slots=True)
class PointerSnapshot:
    """Frame-stable pointer state in window coordinates."""

    x: int = 0
    y: int = 0
    down: bool = False
    pressed: bool = False
    released: bool = False


@dataclass(frozen=True, slots=True)
class InputSnapshot:
    """Immutable frame input snapshot consumed by the frame update."""

    frame_index: int
    keyboard: KeyboardSnapshot = field(default_factory=KeyboardSnapshot)
    pointer: PointerSnapshot = field(default_factory=PointerSnapshot)
    close_requested: bool = False
    pointer_events: tuple[PointerEvent, ...] = ()
    key_events: tuple[KeyEvent, ...] = ()


__all__ = [
    "InputSnapshot",
    "KeyboardSnapshot",
    "PointerSnapshot",
]
