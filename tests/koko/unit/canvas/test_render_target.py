from __future__ import annotations

import pytest

from koko.canvas.targets import render_target
from koko.canvas.units import COLOR_PEN
from koko.rendering.memory_surface import MemorySurfaceBackend


def test_render_target_restores_default_target() -> None:
    backend = MemorySurfaceBackend(8, 8)
    handle = backend.allocate(4, 4)
    with render_target(backend, handle):
        assert backend.active_target == handle
        backend.clear(COLOR_PEN)
    assert backend.active_target is None
    assert backend.back_buffer[0, 0].tolist() == [0, 0, 0, 0]
    assert backend.pixels(handle)[0, 0].tolist() == list(COLOR_PEN.as_rgba())


def test_render_target_restores_previous_target_on_failure() -> None:
    backend = MemorySurfaceBackend(8, 8)
    outer = backend.allocate(4, 4)
    inner = backend.allocate(4, 4)
    with render_target(backend, outer):
        with pytest.raises(RuntimeError, match="boom"):
            with render_target(backend, inner):
                raise RuntimeError("boom")
        assert backend.active_target == outer
    assert backend.active_target is None
