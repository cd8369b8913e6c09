"""Conversion between plain coordinate structures and shapely geometries.

The plain structures are:

* point: ``(x, y)`` tuple
* linestring or ring: list of points (a ring is closed, first == last)
* polygon: ``(outer, inners)`` tuple, ``outer`` a ring, ``inners`` a list of rings
* multi-polygon: list of polygons
* multi-linestring: list of linestrings
"""

from __future__ import annotations

from collections.abc import Sequence
from numbers import Real
from typing import Any, Union

from shapely.geometry import (
    LinearRing,
    LineString,
    MultiLineString,
    MultiPolygon,
    Polygon,
)
from shapely.geometry.base import BaseGeometry

Point = tuple[float, float]
Linestring = list[Point]
PolygonCoords = tuple[list[Point], list[list[Point]]]
Coordinates = Union[Linestring, PolygonCoords, list[PolygonCoords], list[Linestring]]


def _is_point(obj: Any) -> bool:
    return (
        isinstance(obj, Sequence)
        and not isinstance(obj, str)
        and len(obj) == 2
        and all(isinstance(c, Real) for c in obj)
    )


def _is_polygon(obj: Any) -> bool:
    return (
        isinstance(obj, tuple)
        and len(obj) == 2
        and not _is_point(obj)
        and isinstance(obj[0], Sequence)
        and isinstance(obj[1], Sequence)
    )


def _is_closed(points: Sequence[Any]) -> bool:
    return len(points) >= 4 and tuple(points[0]) == tuple(points[-1])


def _polygon(coords: PolygonCoords) -> Polygon:
    outer, inners = coords
    if not outer:
        return Polygon()
    return Polygon(outer, list(inners))


def to_geos(geometry: Coordinates) -> BaseGeometry:
    """Build a shapely geometry from a plain coordinate structure.

    A closed list of at least four points becomes a ``LinearRing``; any other
    list of points becomes a ``LineString``.  An empty list becomes an empty
    ``MultiPolygon``.
    """
    if _is_polygon(geometry):
        return _polygon(geometry)  # type: ignore[arg-type]
    if not isinstance(geometry, Sequence) or isinstance(geometry, str):
        raise TypeError(f"Can't convert {type(geometry).__name__} to a geometry")
    if len(geometry) == 0:
        return MultiPolygon()
    first = geometry[0]
    if _is_point(first):
        if _is_closed(geometry):
            return LinearRing(geometry)
        return LineString(geometry)
    if _is_polygon(first):
        return MultiPolygon([_polygon(p) for p in geometry])
    if isinstance(first, Sequence) and (len(first) == 0 or _is_point(first[0])):
        return MultiLineString([list(ls) for ls in geometry])
    raise TypeError("Can't convert the given structure to a geometry")


def _points(coords: Any) -> list[Point]:
    return [(float(c[0]), float(c[1])) for c in coords]


def _polygon_coords(poly: Polygon) -> PolygonCoords:
    if poly.is_empty:
        return ([], [])
    return (
        _points(poly.exterior.coords),
        [_points(ring.coords) for ring in poly.interiors],
    )


def from_geos(geometry: BaseGeometry) -> Coordinates:
    """Turn a shapely geometry into the matching plain coordinate structure."""
    if isinstance(geometry, (LineString, LinearRing)):
        return _points(geometry.coords)
    if isinstance(geometry, Polygon):
        return _polygon_coords(geometry)
    if isinstance(geometry, MultiPolygon):
        return [_polygon_coords(p) for p in geometry.geoms]
    if isinstance(geometry, MultiLineString):
        return [_points(ls.coords) for ls in geometry.geoms]
    raise TypeError(f"Can't convert {geometry.geom_type} to coordinates")


def multi_polygon_from_geos(geometry: BaseGeometry) -> list[PolygonCoords]:
    """Turn a polygon or multi-polygon into a list of polygon structures.

    Raises ValueError for any other kind of geometry.
    """
    if isinstance(geometry, MultiPolygon):
        return [_polygon_coords(p) for p in geometry.geoms]
    if isinstance(geometry, Polygon):
        return [_polygon_coords(geometry)]
    raise ValueError(f"Can't convert to multi-polygon: {geometry.wkt}")