"""pygfx presenter: back-buffer image, committed path quads, HUD text and cursor."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError, version
from typing import Any

import numpy as np

from koko.canvas.units import COLOR_HUD, HALF_HEIGHT, HALF_WIDTH, TILE_EXTENT, Vector2
from koko.rendering.compositor import OverlayBatch

_gfx_import_error: Exception | None
try:
    import pygfx as gfx
except Exception as exc:  # pragma: no cover - import guard for environments without graphics deps
    gfx = None
    _gfx_import_error = exc
else:
    _gfx_import_error = None

HUD_FONT_SIZE = 14.0
HUD_LINE_SPACING = 20.0
HUD_MARGIN = 8.0
CURSOR_SIZE = 9.0

_Z_IMAGE = -10.0
_Z_OVERLAY = 0.0
_Z_HUD = 5.0

logger = logging.getLogger(__name__)


class PresenterInitError(RuntimeError):
    """GPU renderer creation failed; carries structured details for the startup log."""

    def __init__(self, message: str, *, details: dict[str, object]) -> None:
        super().__init__(message)
        self.details = details


def _package_version(name: str) -> str:
    try:
        return version(name)
    except PackageNotFoundError:
        return "unknown"


def overlay_to_window(vertices: np.ndarray) -> np.ndarray:
    """Map NDC overlay vertices to window pixels (y down) at the overlay depth."""
    positions = np.empty_like(vertices, dtype=np.float32)
    positions[:, 0] = (vertices[:, 0] + 1.0) * HALF_WIDTH
    positions[:, 1] = (1.0 - vertices[:, 1]) * HALF_HEIGHT
    positions[:, 2] = _Z_OVERLAY
    return positions


class PygfxPresenter:
    """Owns the pygfx scene that puts one frame on screen.

    The back buffer arrives through ``show_frame`` (wired as the surface
    backend's present sink) and is uploaded into a texture shown as a full
    window image.
    """

    def __init__(
        self,
        canvas: Any,
        *,
        width: int = TILE_EXTENT.x,
        height: int = TILE_EXTENT.y,
    ) -> None:
        if gfx is None:
            raise RuntimeError(
                f"pygfx dependency unavailable: {_gfx_import_error!r}. Install 'pygfx' and 'wgpu'."
            )
        self.width = width
        self.height = height
        try:
            self.renderer = gfx.WgpuRenderer(canvas)
        except Exception as exc:
            details: dict[str, object] = {
                "pygfx": _package_version("pygfx"),
                "wgpu": _package_version("wgpu"),
                "canvas_type": type(canvas).__name__,
                "exception_type": exc.__class__.__name__,
                "exception_message": str(exc),
            }
            raise PresenterInitError(
                f"wgpu_init_failed details={details!r}", details=details
            ) from exc
        self.scene = gfx.Scene()
        self.camera = gfx.OrthographicCamera(width, height)
        self.camera.local.position = (width / 2.0, height / 2.0, 0.0)
        self.camera.local.scale_y = -1.0

        self._pixels = np.zeros((height, width, 4), dtype=np.uint8)
        self._texture = gfx.Texture(self._pixels, dim=2)
        self._image = gfx.Image(
            gfx.Geometry(grid=self._texture),
            gfx.ImageBasicMaterial(clim=(0, 255)),
        )
        self._image.local.position = (0.0, 0.0, _Z_IMAGE)
        self.scene.add(self._image)

        self._overlay: Any | None = None
        self._overlay_vertex_count = 0
        self._hud_nodes: list[Any] = []
        self._hud_lines: tuple[str, ...] = ()
        self._cursor = gfx.Mesh(
            gfx.plane_geometry(CURSOR_SIZE, CURSOR_SIZE),
            gfx.MeshBasicMaterial(color=COLOR_HUD.as_unit_rgba()),
        )
        self._cursor.local.position = (0.0, 0.0, _Z_HUD)
        self.scene.add(self._cursor)
        self.frames_rendered = 0

    def show_frame(self, pixels: np.ndarray) -> None:
        """Copy the composited back buffer into the display texture."""
        if pixels.shape != self._pixels.shape:
            raise ValueError(
                f"frame of shape {pixels.shape} does not match presenter {self._pixels.shape}"
            )
        self._pixels[...] = pixels
        self._texture.update_range((0, 0, 0), self._texture.size)

    def update_overlay(self, batch: OverlayBatch) -> None:
        """Replace the committed-path mesh with this frame's quads."""
        if batch.vertex_count == 0:
            if self._overlay is not None:
                self._overlay.visible = False
            self._overlay_vertex_count = 0
            return
        positions = overlay_to_window(batch.vertices)
        indices = np.arange(batch.vertex_count, dtype=np.int32).reshape(-1, 3)
        geometry = gfx.Geometry(
            positions=positions,
            indices=indices,
            colors=batch.colors.astype(np.float32),
        )
        if self._overlay is None:
            self._overlay = gfx.Mesh(geometry, gfx.MeshBasicMaterial(color_mode="vertex"))
            self.scene.add(self._overlay)
        else:
            self._overlay.geometry = geometry
        self._overlay.visible = True
        if batch.vertex_count != self._overlay_vertex_count:
            logger.debug("overlay_rebuilt vertices=%d", batch.vertex_count)
        self._overlay_vertex_count = batch.vertex_count

    def update_hud(self, lines: Sequence[str], cursor: Vector2) -> None:
        """Show the status lines top-left and move the cursor marker."""
        self._cursor.local.position = (float(cursor.x), float(cursor.y), _Z_HUD)
        lines = tuple(lines)
        if lines == self._hud_lines:
            return
        while len(self._hud_nodes) < len(lines):
            node = gfx.Text(
                text="",
                font_size=HUD_FONT_SIZE,
                screen_space=True,
                anchor="top-left",
                material=gfx.TextMaterial(color=COLOR_HUD.as_unit_rgba()),
            )
            row = len(self._hud_nodes)
            node.local.position = (HUD_MARGIN, HUD_MARGIN + row * HUD_LINE_SPACING, _Z_HUD)
            self.scene.add(node)
            self._hud_nodes.append(node)
        for index, node in enumerate(self._hud_nodes):
            if index < len(lines):
                node.set_text(lines[index])
                node.visible = True
            else:
                node.visible = False
        self._hud_lines = lines

    def render(self) -> None:
        self.renderer.render(self.scene, self.camera)
        self.frames_rendered += 1

    @property
    def overlay_vertex_count(self) -> int:
        return self._overlay_vertex_count


__all__ = ["PresenterInitError", "PygfxPresenter", "overlay_to_window"]
