"""Boolean area operations backed by shapely.

Shapes are flattened to polygons (curves sampled with ``segment.point(t)``),
intersected, and converted back to paths. Sub-paths combine with the
even-odd rule, so an inner ring cuts a hole in an outer one.
"""

from __future__ import annotations

import logging

from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from svg.path import Close, Line, Move, Path

from vector_surface.geometry.segments import SegmentType, iter_segments
from vector_surface.geometry.shapes import (
    EMPTY_RECT,
    RectShape,
    Shape,
    ShapeKind,
    shape_kind,
)

logger = logging.getLogger(__name__)

CURVE_SAMPLES = 16


def _flatten_rings(shape: Shape) -> list[list[tuple[float, float]]]:
    rings: list[list[tuple[float, float]]] = []
    ring: list[tuple[float, float]] = []
    current = (0.0, 0.0)

    def sample(t_points, steps):
        # de Casteljau evaluation of a Bezier of any degree
        for i in range(1, steps + 1):
            t = i / steps
            pts = list(t_points)
            while len(pts) > 1:
                pts = [
                    (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)
                    for a, b in zip(pts, pts[1:])
                ]
            ring.append(pts[0])

    for seg_type, coords in iter_segments(shape):
        if seg_type is SegmentType.MOVE_TO:
            if len(ring) >= 3:
                rings.append(ring)
            ring = [(coords[0], coords[1])]
            current = ring[0]
        elif seg_type is SegmentType.LINE_TO:
            current = (coords[0], coords[1])
            ring.append(current)
        elif seg_type is SegmentType.QUAD_TO:
            sample([current, coords[0:2], coords[2:4]], CURVE_SAMPLES)
            current = (coords[2], coords[3])
        elif seg_type is SegmentType.CUBIC_TO:
            sample([current, coords[0:2], coords[2:4], coords[4:6]], CURVE_SAMPLES)
            current = (coords[4], coords[5])
        else:
            current = (coords[0], coords[1])
    if len(ring) >= 3:
        rings.append(ring)
    return rings


def to_geometry(shape: Shape) -> BaseGeometry:
    """Convert a shape to a (possibly empty) shapely geometry."""
    result: BaseGeometry = Polygon()
    for ring in _flatten_rings(shape):
        polygon = Polygon(ring).buffer(0)
        result = result.symmetric_difference(polygon)
    return result


def from_geometry(geometry: BaseGeometry) -> Shape:
    """Convert a shapely geometry back to a path (empty rect if no area)."""
    if geometry.is_empty or geometry.area == 0:
        return EMPTY_RECT
    polygons = [g for g in getattr(geometry, "geoms", [geometry]) if isinstance(g, Polygon)]
    path = Path()
    for polygon in polygons:
        # exterior counter-clockwise, holes clockwise: holes survive nonzero fill
        polygon = orient(polygon, 1.0)
        for ring in (polygon.exterior, *polygon.interiors):
            points = [complex(x, y) for x, y in ring.coords]
            if points[0] == points[-1]:
                points = points[:-1]
            path.append(Move(points[0]))
            for a, b in zip(points, points[1:]):
                path.append(Line(a, b))
            path.append(Close(points[-1], points[0]))
    if not len(path):
        return EMPTY_RECT
    return path


def _intersect_rects(r1: RectShape, r2: RectShape) -> RectShape:
    x0, y0 = max(r1.x, r2.x), max(r1.y, r2.y)
    x1, y1 = min(r1.max_x, r2.max_x), min(r1.max_y, r2.max_y)
    if x1 <= x0 or y1 <= y0:
        return EMPTY_RECT
    return RectShape(x0, y0, x1 - x0, y1 - y0)


def intersect(s1: Shape, s2: Shape) -> Shape:
    """Return the area common to both shapes.

    Two rectangles intersect exactly; anything else goes through shapely.
    A non-overlapping pair yields an empty ``RectShape`` rather than None.
    """
    if shape_kind(s1) is ShapeKind.RECTANGLE and shape_kind(s2) is ShapeKind.RECTANGLE:
        if s1.is_empty or s2.is_empty:
            return EMPTY_RECT
        return _intersect_rects(s1, s2)
    result = to_geometry(s1).intersection(to_geometry(s2))
    logger.debug("Area intersection produced %s", result.geom_type)
    return from_geometry(result)
