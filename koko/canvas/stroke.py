"""Pointer-drag stroke recording and lazy quad expansion."""

from __future__ import annotations

import logging

import numpy as np

from koko.canvas.units import (
    COLOR_PEN,
    HALF_HEIGHT,
    HALF_WIDTH,
    TILE_EXTENT,
    TILE_HEIGHT,
    TILE_WIDTH,
    ZERO,
    Color,
    Vector2,
    cell_of,
)

VERTICES_PER_SAMPLE = 6
QUAD_FUDGE_PX = 7.5
_FUDGE_X = QUAD_FUDGE_PX / TILE_WIDTH
_FUDGE_Y = QUAD_FUDGE_PX / TILE_HEIGHT
# two triangles per sample: TL, TR, BL / BL, BR, TR
_QUAD_CORNERS = np.array(
    [
        (-_FUDGE_X, _FUDGE_Y),
        (_FUDGE_X, _FUDGE_Y),
        (-_FUDGE_X, -_FUDGE_Y),
        (-_FUDGE_X, -_FUDGE_Y),
        (_FUDGE_X, -_FUDGE_Y),
        (_FUDGE_X, _FUDGE_Y),
    ],
    dtype=np.float32,
)

_LOG = logging.getLogger("koko.canvas.stroke")


def correct_sample(point: Vector2, scanbox: Vector2) -> Vector2:
    """Apply the commit-time scanbox correction to one window-space sample.

    Adds half the scanbox x offset and subtracts half the scanbox y offset,
    truncating toward zero.
    """
    return Vector2(int(point.x + scanbox.x / 2.0), int(point.y - scanbox.y / 2.0))


def build_quads(samples: tuple[Vector2, ...]) -> np.ndarray:
    """Expand each sample into six NDC vertices; returns ``(n * 6, 3)`` float32."""
    if not samples:
        return np.empty((0, 3), dtype=np.float32)
    xy = np.array([point.as_tuple() for point in samples], dtype=np.float32)
    centers = np.empty_like(xy)
    centers[:, 0] = xy[:, 0] / HALF_WIDTH - 1.0
    centers[:, 1] = -(xy[:, 1] / HALF_HEIGHT - 1.0)
    vertices = np.zeros((len(samples), VERTICES_PER_SAMPLE, 3), dtype=np.float32)
    vertices[:, :, :2] = centers[:, None, :] + _QUAD_CORNERS[None, :, :]
    return vertices.reshape(-1, 3)


class ControlPath:
    """One committed drag gesture; samples move again only on leading growth."""

    __slots__ = ("_samples", "color", "anchor", "cell", "needs_render", "_vertices", "render_count")

    def __init__(
        self,
        samples: tuple[Vector2, ...],
        *,
        color: Color,
        anchor: Vector2,
        cell: tuple[int, int],
    ) -> None:
        self._samples = samples
        self.color = color
        self.anchor = anchor
        self.cell = cell
        self.needs_render = True
        self._vertices = np.empty((0, 3), dtype=np.float32)
        self.render_count = 0

    @property
    def samples(self) -> tuple[Vector2, ...]:
        return self._samples

    @property
    def vertex_count(self) -> int:
        return len(self._samples) * VERTICES_PER_SAMPLE

    def render(self) -> np.ndarray:
        """Return the path's quad vertices, rebuilding only when flagged."""
        if self.needs_render:
            self._vertices = build_quads(self._samples)
            self.needs_render = False
            self.render_count += 1
        return self._vertices

    def reassign(self, cell: tuple[int, int], shift: Vector2 = ZERO) -> None:
        """Follow the owning tile to a re-indexed grid cell.

        A non-zero ``shift`` is the world translation applied by leading growth.
        Samples take the same scanbox correction so the path keeps its on-screen
        position once the viewport is translated by that shift.
        """
        self.cell = cell
        if shift == ZERO:
            return
        self.anchor = self.anchor + shift
        self._samples = tuple(correct_sample(point, shift) for point in self._samples)
        self.needs_render = True

    def __repr__(self) -> str:
        return f"ControlPath(samples={len(self._samples)}, cell={self.cell})"


class StrokeBuffer:
    """Accumulates pointer samples while the pointer is down."""

    def __init__(self) -> None:
        self._samples: list[Vector2] = []
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @property
    def samples(self) -> tuple[Vector2, ...]:
        return tuple(self._samples)

    def begin_stroke(self) -> None:
        self._active = True

    def sample(self, point: Vector2) -> None:
        if not self._active:
            self.begin_stroke()
        self._samples.append(point)

    def commit_stroke(
        self,
        scanbox: Vector2,
        *,
        color: Color = COLOR_PEN,
        tile_extent: Vector2 = TILE_EXTENT,
    ) -> ControlPath | None:
        """Swap the in-progress samples for a fresh buffer and build the completed path.

        The owning cell is taken from the first sample in world space
        (``scanbox + sample``). Returns None when the gesture recorded no samples.
        """
        raw, self._samples = self._samples, []
        self._active = False
        if not raw:
            return None
        corrected = tuple(correct_sample(point, scanbox) for point in raw)
        anchor = scanbox + raw[0]
        path = ControlPath(corrected, color=color, anchor=anchor, cell=cell_of(anchor, tile_extent))
        _LOG.debug(
            "stroke_committed samples=%d anchor=(%d,%d) cell=%s",
            len(corrected),
            anchor.x,
            anchor.y,
            path.cell,
        )
        return path


__all__ = [
    "ControlPath",
    "QUAD_FUDGE_PX",
    "StrokeBuffer",
    "VERTICES_PER_SAMPLE",
    "build_quads",
    "correct_sample",
]
