"""Input controller: raw window events to per-frame snapshots."""

from koko.input.input_controller import InputController, normalize_key

__all__ = ["InputController", "normalize_key"]
