"""Gerber aperture geometry, arc interpolation and milling option handling for PCB milling."""

__version__ = "2.5.0"

__all__ = [
    "apertures",
    "arcs",
    "checks",
    "geometry_convert",
    "merge_near_points",
    "options",
    "shapes",
]