from __future__ import annotations

from types import SimpleNamespace

import numpy as np
import pytest

import koko.rendering.presenter as presenter_mod
from koko.canvas.units import Vector2
from koko.rendering.compositor import EMPTY_OVERLAY, OverlayBatch
from koko.rendering.presenter import PresenterInitError, PygfxPresenter, overlay_to_window

pytestmark = pytest.mark.graphics


class _Node:
    def __init__(self, *args, **kwargs) -> None:
        self.args = args
        self.kwargs = kwargs
        self.local = SimpleNamespace(position=(0.0, 0.0, 0.0), scale_y=1.0)
        self.visible = True
        self.geometry = args[0] if args else None
        self.text = kwargs.get("text")

    def set_text(self, text: str) -> None:
        self.text = text


class _Scene:
    def __init__(self) -> None:
        self.children: list[object] = []

    def add(self, node: object) -> None:
        self.children.append(node)


class _Texture:
    def __init__(self, data: np.ndarray, dim: int) -> None:
        self.data = data
        self.dim = dim
        self.size = (data.shape[1], data.shape[0], 1)
        self.updates: list[tuple] = []

    def update_range(self, offset: tuple, size: tuple) -> None:
        self.updates.append((offset, size))


class _Renderer:
    def __init__(self, canvas: object) -> None:
        self.canvas = canvas
        self.renders = 0

    def render(self, scene: object, camera: object) -> None:
        _ = (scene, camera)
        self.renders += 1


def _fake_gfx(renderer_cls: type = _Renderer) -> SimpleNamespace:
    return SimpleNamespace(
        WgpuRenderer=renderer_cls,
        Scene=_Scene,
        OrthographicCamera=_Node,
        Texture=_Texture,
        Image=_Node,
        Geometry=lambda **kwargs: SimpleNamespace(**kwargs),
        ImageBasicMaterial=lambda **kwargs: SimpleNamespace(**kwargs),
        Mesh=_Node,
        plane_geometry=lambda w, h: SimpleNamespace(width=w, height=h),
        MeshBasicMaterial=lambda **kwargs: SimpleNamespace(**kwargs),
        Text=_Node,
        TextMaterial=lambda **kwargs: SimpleNamespace(**kwargs),
    )


def test_presenter_requires_pygfx(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(presenter_mod, "gfx", None)
    with pytest.raises(RuntimeError, match="pygfx dependency unavailable"):
        PygfxPresenter(object())


def test_renderer_failure_raises_structured_init_error(monkeypatch: pytest.MonkeyPatch) -> None:
    class _Broken:
        def __init__(self, canvas: object) -> None:
            raise OSError("no adapter")

    monkeypatch.setattr(presenter_mod, "gfx", _fake_gfx(_Broken))
    with pytest.raises(PresenterInitError) as info:
        PygfxPresenter(object())
    assert info.value.details["exception_type"] == "OSError"
    assert isinstance(info.value, RuntimeError)


def test_camera_is_pixel_space_with_y_down(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(presenter_mod, "gfx", _fake_gfx())
    presenter = PygfxPresenter(object(), width=1280, height=720)
    assert presenter.camera.local.position == (640.0, 360.0, 0.0)
    assert presenter.camera.local.scale_y == -1.0


def test_show_frame_uploads_back_buffer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(presenter_mod, "gfx", _fake_gfx())
    presenter = PygfxPresenter(object(), width=4, height=2)
    frame = np.full((2, 4, 4), 9, dtype=np.uint8)
    presenter.show_frame(frame)
    texture = presenter._texture
    assert texture.data[1, 3].tolist() == [9, 9, 9, 9]
    assert texture.updates == [((0, 0, 0), (4, 2, 1))]
    with pytest.raises(ValueError):
        presenter.show_frame(np.zeros((3, 3, 4), dtype=np.uint8))


def test_overlay_mesh_is_built_then_hidden(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(presenter_mod, "gfx", _fake_gfx())
    presenter = PygfxPresenter(object())
    vertices = np.zeros((6, 3), dtype=np.float32)
    batch = OverlayBatch(vertices=vertices, colors=np.ones((6, 4), dtype=np.float32))

    presenter.update_overlay(batch)
    overlay = presenter._overlay
    assert overlay is not None
    assert overlay.visible
    assert overlay.geometry.indices.shape == (2, 3)
    assert presenter.overlay_vertex_count == 6

    presenter.update_overlay(EMPTY_OVERLAY)
    assert not overlay.visible
    assert presenter.overlay_vertex_count == 0


def test_hud_lines_and_cursor(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(presenter_mod, "gfx", _fake_gfx())
    presenter = PygfxPresenter(object())
    presenter.update_hud(("one", "two"), Vector2(10, 20))
    presenter.update_hud(("three",), Vector2(11, 21))
    nodes = presenter._hud_nodes
    assert [node.text for node in nodes] == ["three", "two"]
    assert [node.visible for node in nodes] == [True, False]
    assert presenter._cursor.local.position[:2] == (11.0, 21.0)
    presenter.render()
    assert presenter.renderer.renders == 1
    assert presenter.frames_rendered == 1


def test_overlay_to_window_inverts_the_unit_transform() -> None:
    ndc = np.array([[-1.0, 1.0, 0.0], [1.0, -1.0, 0.0], [0.0, 0.0, 0.0]], dtype=np.float32)
    px = overlay_to_window(ndc)
    assert px[:, :2].tolist() == [[0.0, 0.0], [1280.0, 720.0], [640.0, 360.0]]
