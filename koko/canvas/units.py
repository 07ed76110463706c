"""Integer world coordinates, colors and the render-boundary unit transform."""

from __future__ import annotations

from dataclasses import dataclass

TILE_WIDTH = 1280
TILE_HEIGHT = 720
HALF_WIDTH = TILE_WIDTH / 2.0
HALF_HEIGHT = TILE_HEIGHT / 2.0


@dataclass(frozen=True, slots=True)
class Vector2:
    """Signed integer 2D vector in world (or window) pixels."""

    x: int
    y: int

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def as_tuple(self) -> tuple[int, int]:
        return self.x, self.y


ZERO = Vector2(0, 0)
TILE_EXTENT = Vector2(TILE_WIDTH, TILE_HEIGHT)


def add(a: Vector2, b: Vector2) -> Vector2:
    return a + b


def sub(a: Vector2, b: Vector2) -> Vector2:
    return a - b


def cell_of(point: Vector2, extent: Vector2 = TILE_EXTENT) -> tuple[int, int]:
    """Return the ``(row, col)`` grid cell containing a world point."""
    return point.y // extent.y, point.x // extent.x


def world_to_unit(x: float, y: float) -> tuple[float, float]:
    """Map a window pixel coordinate to normalized device coordinates.

    ``(0, 0)`` maps to ``(-1, 1)`` and ``(1280, 720)`` to ``(1, -1)``. Only used at
    the render boundary; grid math stays in integer pixels.
    """
    return x / HALF_WIDTH - 1.0, -(y / HALF_HEIGHT - 1.0)


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned integer rectangle, half-open on the right and bottom."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def origin(self) -> Vector2:
        return Vector2(self.x, self.y)

    @classmethod
    def at(cls, origin: Vector2, extent: Vector2) -> Rect:
        return cls(origin.x, origin.y, extent.x, extent.y)

    def centered_on(self, point: Vector2) -> Rect:
        return Rect(point.x - self.width // 2, point.y - self.height // 2, self.width, self.height)


@dataclass(frozen=True, slots=True)
class Color:
    """8-bit RGBA color."""

    r: int
    g: int
    b: int
    a: int = 255

    def as_rgba(self) -> tuple[int, int, int, int]:
        return self.r, self.g, self.b, self.a

    def as_unit_rgba(self) -> tuple[float, float, float, float]:
        return self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a / 255.0

    def with_channel_step(self, channel: int, step: int = 1) -> Color:
        """Return a copy with one RGB channel advanced, wrapping at 256."""
        values = [self.r, self.g, self.b]
        values[channel] = (values[channel] + step) & 0xFF
        return Color(values[0], values[1], values[2], self.a)

    def hex_triplet(self) -> str:
        return f"{self.r:02x},{self.g:02x},{self.b:02x}"


COLOR_BACKGROUND = Color(0, 0, 0)
COLOR_CLEAR = Color(13, 13, 13)
COLOR_BORDER = Color(40, 40, 90)
COLOR_PEN = Color(125, 0, 175)
COLOR_HUD = Color(255, 255, 0)

__all__ = [
    "COLOR_BACKGROUND",
    "COLOR_BORDER",
    "COLOR_CLEAR",
    "COLOR_HUD",
    "COLOR_PEN",
    "Color",
    "HALF_HEIGHT",
    "HALF_WIDTH",
    "Rect",
    "TILE_EXTENT",
    "TILE_HEIGHT",
    "TILE_WIDTH",
    "Vector2",
    "ZERO",
    "add",
    "cell_of",
    "sub",
    "world_to_unit",
]
