"""Circular arc interpolation and splitting of self-touching paths."""

from __future__ import annotations

import math
from collections.abc import Sequence

Point = tuple[float, float]

_TWO_PI = 2 * math.pi


def get_angle(start: Point, center: Point, stop: Point, clockwise: bool) -> float:
    """Signed angle in radians swept from ``start`` to ``stop`` around ``center``.

    Clockwise sweeps are never positive, counterclockwise sweeps never negative.
    """
    start_angle = math.atan2(start[1] - center[1], start[0] - center[0])
    stop_angle = math.atan2(stop[1] - center[1], stop[0] - center[0])
    delta_angle = stop_angle - start_angle
    while clockwise and delta_angle > 0:
        delta_angle -= _TWO_PI
    while not clockwise and delta_angle < 0:
        delta_angle += _TWO_PI
    return delta_angle


def _fix_delta_and_center(
    start: Point,
    stop: Point,
    center: Point,
    radius: float,
    radius2: float,
    delta_angle: float,
    clockwise: bool,
) -> tuple[float, Point]:
    # The reported quadrant mode can't be trusted, so work it out here.
    definitely_single_quadrant = radius != radius2
    if start == stop:
        if definitely_single_quadrant or abs(delta_angle) < math.pi:
            return 0.0, center
        return (-_TWO_PI if clockwise else _TWO_PI), center

    signs = (-1.0, 1.0) if definitely_single_quadrant else (1.0,)
    i = abs(center[0] - start[0])
    j = abs(center[1] - start[1])
    delta_angle = get_angle(start, center, stop, clockwise)
    for i_sign in signs:
        for j_sign in signs:
            candidate = (start[0] + i * i_sign, start[1] + j * j_sign)
            new_angle = get_angle(start, candidate, stop, clockwise)
            if abs(new_angle) > math.pi:
                continue  # Wrong side.
            candidate_error = abs(math.dist(start, candidate) - math.dist(stop, candidate))
            current_error = abs(math.dist(start, center) - math.dist(stop, center))
            if candidate_error < current_error:
                delta_angle = new_angle
                center = candidate
    return delta_angle, center


def circular_arc(
    start: Point,
    stop: Point,
    center: Point,
    radius: float,
    radius2: float,
    delta_angle: float,
    clockwise: bool,
    circle_points: int,
) -> list[Point]:
    """Approximate an arc from ``start`` to ``stop`` by a linestring.

    ``delta_angle`` is in radians, positive counterclockwise.  ``radius`` and
    ``radius2`` differing marks the arc as single-quadrant.  The centre and the
    sweep are corrected before interpolating; ``circle_points`` is the number
    of segments used for a full circle.
    """
    start = (float(start[0]), float(start[1]))
    stop = (float(stop[0]), float(stop[1]))
    center = (float(center[0]), float(center[1]))
    delta_angle, center = _fix_delta_and_center(
        start, stop, center, radius, radius2, delta_angle, clockwise
    )

    start_angle = math.atan2(start[1] - center[1], start[0] - center[0])
    stop_angle = start_angle + delta_angle
    start_radius = math.dist(start, center)
    stop_radius = math.dist(stop, center)
    steps = math.ceil(abs(delta_angle) / _TWO_PI * circle_points) + 1

    points = [start]
    for step in range(1, steps - 1):
        stop_weight = step / (steps - 1)
        start_weight = 1 - stop_weight
        angle = start_angle * start_weight + stop_angle * stop_weight
        current_radius = start_radius * start_weight + stop_radius * stop_weight
        points.append(
            (
                math.cos(angle) * current_radius + center[0],
                math.sin(angle) * current_radius + center[1],
            )
        )
    points.append(stop)
    return points


def get_all_ls(linestring: Sequence[Point]) -> list[list[Point]]:
    """Split a linestring at repeated points.

    Every loop found is cut out as a closed ring in which no point repeats
    except first and last.  What remains (which may itself be a ring) is
    returned first, followed by the loops.
    """
    points = [tuple(p) for p in linestring]
    last = len(points) - 1
    for i, start in enumerate(points):
        try:
            j = points.index(start, i + 1)
        except ValueError:
            continue
        if i == 0 and j == last:
            continue  # The whole linestring is one ring.
        inner = points[i:j] + [start]
        outer = points[:i] + points[j:]
        return get_all_ls(outer) + get_all_ls(inner)
    return [points]


def get_all_rings(ring: Sequence[Point]) -> list[list[Point]]:
    """Split a ring into rings that each visit no point twice."""
    return get_all_ls(ring)