from __future__ import annotations

from koko.canvas.units import (
    COLOR_PEN,
    TILE_EXTENT,
    Color,
    Rect,
    Vector2,
    add,
    cell_of,
    sub,
    world_to_unit,
)


def test_vector_add_and_sub_are_componentwise() -> None:
    a = Vector2(3, -4)
    b = Vector2(-10, 7)
    assert add(a, b) == Vector2(-7, 3)
    assert sub(a, b) == Vector2(13, -11)
    assert a + b - b == a


def test_world_to_unit_maps_window_corners_to_ndc() -> None:
    assert world_to_unit(0, 0) == (-1.0, 1.0)
    assert world_to_unit(1280, 720) == (1.0, -1.0)
    assert world_to_unit(640, 360) == (0.0, 0.0)


def test_cell_of_uses_integer_division_per_axis() -> None:
    assert cell_of(Vector2(0, 0)) == (0, 0)
    assert cell_of(Vector2(1279, 719)) == (0, 0)
    assert cell_of(Vector2(1280, 720)) == (1, 1)
    assert cell_of(Vector2(1300, 10)) == (0, 1)
    assert cell_of(Vector2(-1, -1), TILE_EXTENT) == (-1, -1)


def test_color_channel_step_wraps_at_256() -> None:
    assert Color(255, 0, 0).with_channel_step(0) == Color(0, 0, 0)
    assert COLOR_PEN.with_channel_step(2) == Color(125, 0, 176)
    assert COLOR_PEN.hex_triplet() == "7d,00,af"


def test_rect_centered_on_and_edges() -> None:
    rect = Rect(0, 0, 15, 15).centered_on(Vector2(100, 100))
    assert rect == Rect(93, 93, 15, 15)
    assert (rect.right, rect.bottom) == (108, 108)
    assert Rect.at(Vector2(5, 6), Vector2(7, 8)) == Rect(5, 6, 7, 8)
