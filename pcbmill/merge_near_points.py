"""Snap points that lie very close together onto a single location."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable

Point = tuple[float, float]


def _merge_points(points: dict[Point, Point], distance: float) -> int:
    """Remap values in ``points`` so that near neighbours share one location."""
    keys = sorted(points)
    distance_2 = distance * distance
    merged = 0
    for start, key in enumerate(keys):
        anchor = points[key]
        stop = max(bisect_right(keys, (anchor[0] + distance, anchor[1] + distance)), start)
        for other in keys[start:stop]:
            target = points[other]
            if target == anchor:
                continue
            dx = target[0] - anchor[0]
            dy = target[1] - anchor[1]
            if dx * dx + dy * dy <= distance_2:
                merged += 1
                points[other] = anchor
    return merged


def _merge_linestrings(linestrings: Iterable[list[Point]], distance: float) -> int:
    linestrings = list(linestrings)
    points = {tuple(p): tuple(p) for ls in linestrings for p in ls}
    merged = _merge_points(points, distance)
    if merged:
        for ls in linestrings:
            ls[:] = [points[tuple(p)] for p in ls]
    return merged


def merge_near_points(paths: list[list[Point]], distance: float) -> int:
    """Snap points of ``paths`` within ``distance`` of each other together.

    The linestrings are updated in place.  Returns how many points moved.
    """
    return _merge_linestrings(paths, distance)


def merge_near_points_flagged(paths: list[tuple[list[Point], bool]], distance: float) -> int:
    """Like :func:`merge_near_points` for ``(linestring, allow_reversal)`` pairs."""
    return _merge_linestrings((ls for ls, _ in paths), distance)