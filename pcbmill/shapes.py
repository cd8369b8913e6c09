"""Construction of the basic shapes used by Gerber apertures and draws."""

from __future__ import annotations

import math
from collections.abc import Sequence

from shapely.geometry import (
    GeometryCollection,
    LineString,
    MultiPoint,
    MultiPolygon,
    Polygon,
)
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

Point = tuple[float, float]


def _as_multipolygon(geometry: BaseGeometry) -> MultiPolygon:
    if geometry.is_empty:
        return MultiPolygon()
    if isinstance(geometry, MultiPolygon):
        return geometry
    if isinstance(geometry, Polygon):
        return MultiPolygon([geometry])
    if isinstance(geometry, GeometryCollection):
        polygons = []
        for part in geometry.geoms:
            polygons.extend(_as_multipolygon(part).geoms)
        return MultiPolygon(polygons)
    return MultiPolygon()


def _from_ring(points: list[Point]) -> MultiPolygon:
    polygon = Polygon(points)
    if polygon.area == 0:
        return MultiPolygon()
    return MultiPolygon([polygon])


def _circle_quad_segs(circle_points: int) -> int:
    return max(1, math.ceil(circle_points / 4))


def make_regular_polygon(
    center: Point,
    diameter: float,
    vertices: int,
    offset: float = 0.0,
    hole_diameter: float = 0.0,
    circle_points: int | None = None,
) -> MultiPolygon:
    """Regular polygon around ``center``, optionally with a round hole.

    ``offset`` is the angle in degrees of the first vertex.  The hole is drawn
    with ``circle_points`` vertices, or ``vertices`` if that is not given.
    """
    vertices = int(vertices)
    if vertices < 3:
        return MultiPolygon()
    angle_step = -2 * math.pi / vertices
    offset_rad = math.radians(offset)
    cx, cy = center
    ring = [
        (
            math.cos(angle_step * i + offset_rad) * diameter / 2 + cx,
            math.sin(angle_step * i + offset_rad) * diameter / 2 + cy,
        )
        for i in range(vertices)
    ]
    ring.append(ring[0])
    result = _from_ring(ring)
    if hole_diameter > 0:
        hole_points = vertices if circle_points is None else circle_points
        hole = make_regular_polygon(center, hole_diameter, hole_points, 0)
        result = _as_multipolygon(result.difference(hole))
    return result


def make_rectangle(
    center: Point,
    width: float,
    height: float,
    hole_diameter: float = 0.0,
    circle_points: int = 0,
) -> MultiPolygon:
    """Axis-aligned rectangle centred on ``center``, optionally with a hole."""
    x, y = center
    ring = [
        (x - width / 2, y - height / 2),
        (x - width / 2, y + height / 2),
        (x + width / 2, y + height / 2),
        (x + width / 2, y - height / 2),
    ]
    ring.append(ring[0])
    result = _from_ring(ring)
    if hole_diameter > 0:
        hole = make_regular_polygon(center, hole_diameter, circle_points, 0)
        result = _as_multipolygon(result.difference(hole))
    return result


def make_line_rectangle(point1: Point, point2: Point, height: float) -> MultiPolygon:
    """Rectangle of thickness ``height`` along the segment from point1 to point2."""
    line = LineString([point1, point2])
    return _as_multipolygon(line.buffer(height / 2, cap_style="flat", join_style="round"))


def make_oval(
    center: Point,
    width: float,
    height: float,
    hole_diameter: float = 0.0,
    circle_points: int = 0,
) -> MultiPolygon:
    """Obround (stadium) shape with the given overall width and height."""
    cx, cy = center
    if width > height:
        start = (cx - (width - height) / 2, cy)
        end = (cx + (width - height) / 2, cy)
    elif width < height:
        start = (cx, cy - (height - width) / 2)
        end = (cx, cy + (height - width) / 2)
    else:
        return make_regular_polygon(center, width, circle_points, 0, hole_diameter, circle_points)

    oval = LineString([start, end]).buffer(
        min(width, height) / 2,
        quad_segs=_circle_quad_segs(circle_points),
        cap_style="round",
        join_style="round",
    )
    result = _as_multipolygon(oval)
    if hole_diameter > 0:
        hole = make_regular_polygon(center, hole_diameter, circle_points, 0)
        result = _as_multipolygon(result.difference(hole))
    return result


def linear_draw_rectangular_aperture(
    start: Point, end: Point, width: float, height: float
) -> MultiPolygon:
    """Area swept by a rectangular aperture moving from ``start`` to ``end``."""
    corners = [
        (p[0] + w * width / 2, p[1] + h * height / 2)
        for p in (start, end)
        for w in (-1, 1)
        for h in (-1, 1)
    ]
    return _as_multipolygon(MultiPoint(corners).convex_hull)


def make_moire(parameters: Sequence[float], circle_points: int) -> MultiPolygon:
    """Moire macro primitive: concentric rings plus a crosshair.

    ``parameters`` holds centre x, centre y, outer diameter, ring thickness,
    gap, maximum number of rings, crosshair thickness and crosshair length.
    """
    center = (parameters[0], parameters[1])
    crosshair_thickness = parameters[6]
    crosshair_length = parameters[7]
    parts = [
        make_rectangle(center, crosshair_thickness, crosshair_length, 0, 0),
        make_rectangle(center, crosshair_length, crosshair_thickness, 0, 0),
    ]
    max_rings = int(parameters[5])
    outer_diameter = parameters[2]
    ring_thickness = parameters[3]
    gap_thickness = parameters[4]
    for i in range(max_rings):
        external = outer_diameter - 2 * (ring_thickness + gap_thickness) * i
        if external <= 0:
            break
        internal = max(external - 2 * ring_thickness, 0)
        parts.append(
            make_regular_polygon(center, external, circle_points, 0, internal, circle_points)
        )
    return _as_multipolygon(unary_union(parts))


def make_thermal(
    center: Point,
    external_diameter: float,
    internal_diameter: float,
    gap_width: float,
    circle_points: int,
) -> MultiPolygon:
    """Thermal relief: a ring cut by a horizontal and a vertical gap."""
    ring = make_regular_polygon(
        center, external_diameter, circle_points, 0, internal_diameter, circle_points
    )
    rect1 = make_rectangle(center, gap_width, 2 * external_diameter, 0, 0)
    rect2 = make_rectangle(center, 2 * external_diameter, gap_width, 0, 0)
    return _as_multipolygon(ring.difference(rect1).difference(rect2))