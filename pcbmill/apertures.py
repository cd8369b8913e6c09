"""Gerber aperture definitions and their conversion into shapes."""

from __future__ import annotations

import enum
import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from shapely.affinity import rotate
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.validation import make_valid

from pcbmill.arcs import get_all_rings
from pcbmill.shapes import (
    make_line_rectangle,
    make_moire,
    make_oval,
    make_rectangle,
    make_regular_polygon,
    make_thermal,
)

logger = logging.getLogger(__name__)

Point = tuple[float, float]

_ORIGIN: Point = (0.0, 0.0)


class ApertureType(enum.Enum):
    """Kinds of apertures and aperture macro primitives."""

    NONE = "none"
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    OVAL = "oval"
    POLYGON = "polygon"
    MACRO = "macro"
    MACRO_CIRCLE = "macro_circle"
    MACRO_OUTLINE = "macro_outline"
    MACRO_POLYGON = "macro_polygon"
    MACRO_MOIRE = "macro_moire"
    MACRO_THERMAL = "macro_thermal"
    MACRO_LINE20 = "macro_line20"
    MACRO_LINE21 = "macro_line21"
    MACRO_LINE22 = "macro_line22"


_STANDARD_TYPES = frozenset(
    {
        ApertureType.NONE,
        ApertureType.CIRCLE,
        ApertureType.RECTANGLE,
        ApertureType.OVAL,
        ApertureType.POLYGON,
    }
)

_PRIMITIVE_TYPES = frozenset(
    {
        ApertureType.MACRO_CIRCLE,
        ApertureType.MACRO_OUTLINE,
        ApertureType.MACRO_POLYGON,
        ApertureType.MACRO_MOIRE,
        ApertureType.MACRO_THERMAL,
        ApertureType.MACRO_LINE20,
        ApertureType.MACRO_LINE21,
        ApertureType.MACRO_LINE22,
    }
)


@dataclass
class MacroPrimitive:
    """One primitive of an aperture macro, with its variables substituted."""

    type: ApertureType
    parameters: Sequence[float] = ()

    def __post_init__(self) -> None:
        self.parameters = tuple(float(p) for p in self.parameters)


@dataclass
class Aperture:
    """An aperture definition.

    For a macro aperture ``simplified`` holds its primitives in drawing order;
    a macro without them can't be drawn.
    """

    type: ApertureType
    parameters: Sequence[float] = ()
    simplified: Sequence[MacroPrimitive] | None = field(default=None)

    def __post_init__(self) -> None:
        self.parameters = tuple(float(p) for p in self.parameters)


def _multipolygon(geometry: BaseGeometry) -> MultiPolygon:
    if geometry.is_empty:
        return MultiPolygon()
    if isinstance(geometry, MultiPolygon):
        return geometry
    if isinstance(geometry, Polygon):
        return MultiPolygon([geometry])
    if isinstance(geometry, GeometryCollection):
        return MultiPolygon(
            [p for part in geometry.geoms for p in _multipolygon(part).geoms]
        )
    return MultiPolygon()


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def outline_to_shape(ring: Sequence[Point]) -> MultiPolygon:
    """Fill a closed outline, turning cut-ins back into holes.

    The outline is closed if needed and split wherever it touches itself; the
    pieces with area are combined by exclusive or.
    """
    points = [(float(p[0]), float(p[1])) for p in ring]
    if points and points[0] != points[-1]:
        points.append(points[0])
    if len(points) < 4:
        return MultiPolygon()
    result: BaseGeometry = MultiPolygon()
    for piece in get_all_rings(points):
        if len(piece) < 4:
            continue
        polygon = Polygon(piece)
        if polygon.area == 0:
            continue  # No area so ignore it.
        shape = _multipolygon(polygon if polygon.is_valid else make_valid(polygon))
        result = _multipolygon(result.symmetric_difference(shape))
    return _multipolygon(result)


def _primitive_shape(
    primitive: MacroPrimitive, circle_points: int
) -> tuple[MultiPolygon, int, float] | None:
    """Shape, polarity and rotation of one macro primitive, or None to skip."""
    p = primitive.parameters
    kind = primitive.type
    if kind in _STANDARD_TYPES:
        logger.warning("Non-macro aperture during macro drawing: skipping")
        return None
    if kind is ApertureType.MACRO:
        logger.warning("Macro start aperture during macro drawing: skipping")
        return None
    if kind is ApertureType.MACRO_CIRCLE:
        shape = make_regular_polygon((p[2], p[3]), p[1], circle_points, 0)
        return shape, int(p[0]), p[4]
    if kind is ApertureType.MACRO_OUTLINE:
        count = _round_half_away(p[1])
        outline = [(p[i * 2 + 2], p[i * 2 + 3]) for i in range(count + 1)]
        return outline_to_shape(outline), int(p[0]), p[2 * count + 4]
    if kind is ApertureType.MACRO_POLYGON:
        shape = make_regular_polygon((p[2], p[3]), p[4], p[1], 0)
        return shape, int(p[0]), p[5]
    if kind is ApertureType.MACRO_MOIRE:
        return make_moire(p, circle_points), 1, p[8]
    if kind is ApertureType.MACRO_THERMAL:
        shape = make_thermal((p[0], p[1]), p[2], p[3], p[4], circle_points)
        return shape, 1, p[5]
    if kind is ApertureType.MACRO_LINE20:
        shape = make_line_rectangle((p[2], p[3]), (p[4], p[5]), p[1])
        return shape, int(p[0]), p[6]
    if kind is ApertureType.MACRO_LINE21:
        shape = make_rectangle((p[3], p[4]), p[1], p[2], 0, 0)
        return shape, int(p[0]), p[5]
    if kind is ApertureType.MACRO_LINE22:
        center = (p[3] + p[1] / 2, p[4] + p[2] / 2)
        shape = make_rectangle(center, p[1], p[2], 0, 0)
        return shape, int(p[0]), p[5]
    logger.warning("Unrecognized aperture: skipping")
    return None


def _macro_shape(primitives: Sequence[MacroPrimitive], circle_points: int) -> MultiPolygon:
    result: BaseGeometry = MultiPolygon()
    for primitive in primitives:
        drawn = _primitive_shape(primitive, circle_points)
        if drawn is None:
            continue
        shape, polarity, rotation = drawn
        # Gerber rotations are counterclockwise around the origin.
        rotated = rotate(shape, rotation, origin=_ORIGIN)
        if polarity == 0:
            result = result.difference(rotated)
        else:
            result = result.union(rotated)
        result = _multipolygon(result)
    return _multipolygon(result)


def _aperture_shape(
    number: int, aperture: Aperture, circle_points: int
) -> MultiPolygon | None:
    p = aperture.parameters
    kind = aperture.type
    if kind is ApertureType.NONE:
        return None
    if kind is ApertureType.CIRCLE:
        return make_regular_polygon(_ORIGIN, p[0], circle_points, p[1], p[2], circle_points)
    if kind is ApertureType.RECTANGLE:
        return make_rectangle(_ORIGIN, p[0], p[1], p[2], circle_points)
    if kind is ApertureType.OVAL:
        return make_oval(_ORIGIN, p[0], p[1], p[2], circle_points)
    if kind is ApertureType.POLYGON:
        return make_regular_polygon(_ORIGIN, p[0], p[1], p[2], p[3], circle_points)
    if kind is ApertureType.MACRO:
        if not aperture.simplified:
            logger.warning("Macro aperture %d is not simplified: skipping", number)
            return None
        return _macro_shape(aperture.simplified, circle_points)
    if kind in _PRIMITIVE_TYPES:
        logger.warning("Macro aperture during non-macro drawing: skipping")
        return None
    logger.warning("Unrecognized aperture: skipping")
    return None


def generate_apertures_map(
    apertures: Mapping[int, Aperture | None], circle_points: int
) -> dict[int, MultiPolygon]:
    """Shapes of the drawable apertures, centred on the origin, by number.

    Empty slots, apertures of type NONE, undrawable macros and misplaced
    primitives are left out.  Circles use ``circle_points`` vertices.
    """
    shapes: dict[int, MultiPolygon] = {}
    for number, aperture in sorted(apertures.items()):
        if aperture is None:
            continue
        shape = _aperture_shape(number, aperture, circle_points)
        if shape is not None:
            shapes[number] = shape
    return shapes