import math

import pytest
from shapely.geometry import Point

from pcbmill.shapes import (
    linear_draw_rectangular_aperture,
    make_line_rectangle,
    make_moire,
    make_oval,
    make_rectangle,
    make_regular_polygon,
    make_thermal,
)


def test_regular_polygon_vertices_on_circle():
    shape = make_regular_polygon((3.0, 4.0), 2.0, 6, 0)
    coords = list(shape.geoms[0].exterior.coords)
    assert len(coords) == 7
    for x, y in coords:
        assert math.hypot(x - 3.0, y - 4.0) == pytest.approx(1.0)


def test_regular_polygon_first_vertex_at_zero_angle():
    shape = make_regular_polygon((0.0, 0.0), 2.0, 8, 0)
    first = shape.geoms[0].exterior.coords[0]
    assert first == pytest.approx((1.0, 0.0))


def test_regular_polygon_with_hole():
    solid = make_regular_polygon((0.0, 0.0), 4.0, 32, 0)
    holed = make_regular_polygon((0.0, 0.0), 4.0, 32, 0, 2.0, 32)
    assert holed.area < solid.area
    assert not holed.contains(Point(0, 0))
    assert solid.contains(Point(0, 0))


def test_regular_polygon_too_few_vertices_is_empty():
    assert make_regular_polygon((0.0, 0.0), 2.0, 2, 0).is_empty


def test_rectangle_bounds_and_area():
    width, height = 3.0, 5.0
    shape = make_rectangle((1.0, 2.0), width, height)
    assert shape.bounds == pytest.approx(
        (1.0 - width / 2, 2.0 - height / 2, 1.0 + width / 2, 2.0 + height / 2)
    )
    assert shape.area == pytest.approx(width * height)


def test_rectangle_with_hole():
    shape = make_rectangle((0.0, 0.0), 4.0, 4.0, 1.0, 24)
    assert not shape.contains(Point(0, 0))
    assert shape.area < make_rectangle((0.0, 0.0), 4.0, 4.0).area


def test_zero_width_rectangle_is_empty():
    assert make_rectangle((0.0, 0.0), 0.0, 5.0).is_empty


def test_line_rectangle_bounds():
    shape = make_line_rectangle((0.0, 0.0), (10.0, 0.0), 2.0)
    assert shape.bounds == pytest.approx((0.0, -1.0, 10.0, 1.0))
    assert shape.area == pytest.approx(10.0 * 2.0)


def test_wide_oval_bounds():
    width, height = 4.0, 2.0
    shape = make_oval((0.0, 0.0), width, height, 0, 36)
    assert shape.bounds == pytest.approx((-width / 2, -height / 2, width / 2, height / 2))


def test_tall_oval_bounds():
    width, height = 2.0, 6.0
    shape = make_oval((1.0, 1.0), width, height, 0, 36)
    assert shape.bounds == pytest.approx(
        (1.0 - width / 2, 1.0 - height / 2, 1.0 + width / 2, 1.0 + height / 2)
    )


def test_circle_oval_is_regular_polygon():
    oval = make_oval((0.0, 0.0), 2.0, 2.0, 0, 36)
    circle = make_regular_polygon((0.0, 0.0), 2.0, 36, 0)
    assert oval.area == pytest.approx(circle.area)
    assert oval.equals(circle)


def test_oval_with_hole():
    shape = make_oval((0.0, 0.0), 4.0, 2.0, 1.0, 36)
    assert not shape.contains(Point(0, 0))
    assert shape.contains(Point(1.5, 0))


def test_linear_draw_rectangular_aperture():
    length, width, height = 10.0, 2.0, 2.0
    shape = linear_draw_rectangular_aperture((0.0, 0.0), (length, 0.0), width, height)
    assert shape.bounds == pytest.approx(
        (-width / 2, -height / 2, length + width / 2, height / 2)
    )
    assert shape.area == pytest.approx((length + width) * height)


def test_moire_has_crosshair_and_rings():
    params = [0.0, 0.0, 10.0, 1.0, 1.0, 3, 0.5, 12.0, 0.0]
    shape = make_moire(params, 36)
    assert shape.contains(Point(0, 0))
    assert shape.bounds == pytest.approx((-6.0, -6.0, 6.0, 6.0))
    # Point inside the gap between the two outer rings, away from the crosshair.
    gap_radius = 3.5
    probe = Point(gap_radius * math.cos(math.pi / 4), gap_radius * math.sin(math.pi / 4))
    assert not shape.contains(probe)


def test_thermal_has_four_pieces_and_open_center():
    shape = make_thermal((0.0, 0.0), 4.0, 2.0, 0.5, 36)
    assert len(shape.geoms) == 4
    assert not shape.contains(Point(0, 0))
    assert shape.contains(Point(1.5 * math.cos(math.pi / 4), 1.5 * math.sin(math.pi / 4)))
    assert not shape.contains(Point(1.5, 0))