"""Segment iteration over shapes.

``iter_segments`` is the single decomposition protocol used by every
backend: it yields MOVE_TO, LINE_TO, QUAD_TO, CUBIC_TO and CLOSE items with
flat coordinate tuples, optionally mapped through an affine transform.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from enum import Enum
from typing import NamedTuple

from svg.path import Arc, Close, CubicBezier, Line, Move, Path, QuadraticBezier

from vector_surface.geometry.affine import AffineTransform
from vector_surface.geometry.shapes import (
    EllipseShape,
    LineShape,
    RectShape,
    RoundRectShape,
    Shape,
    ShapeKind,
    copy_shape,
    shape_kind,
    to_path,
)


class SegmentType(Enum):
    MOVE_TO = "M"
    LINE_TO = "L"
    QUAD_TO = "Q"
    CUBIC_TO = "C"
    CLOSE = "Z"


class PathSegment(NamedTuple):
    type: SegmentType
    coords: tuple[float, ...]


def _arc_steps(arc: Arc) -> int:
    delta = abs(getattr(arc, "delta", 360.0))
    return max(4, math.ceil(delta / 10.0))


def iter_segments(shape: Shape, transform: AffineTransform | None = None) -> Iterator[PathSegment]:
    """Yield the segments of ``shape``.

    A CLOSE segment carries the coordinates of the most recent MOVE_TO. A
    drawing segment that does not start at the current point is preceded by
    an implicit MOVE_TO. Elliptical arcs are flattened into line segments.

    Args:
        shape: Any supported shape.
        transform: Optional transform applied to every coordinate.

    Yields:
        PathSegment items in drawing order.
    """
    if transform is not None and transform.is_identity:
        transform = None

    def pt(z: complex) -> tuple[float, float]:
        if transform is None:
            return (z.real, z.imag)
        return transform.transform_point(z.real, z.imag)

    current: complex | None = None
    subpath_start: complex | None = None
    for seg in to_path(shape):
        if isinstance(seg, Move):
            current = subpath_start = seg.end
            yield PathSegment(SegmentType.MOVE_TO, pt(seg.end))
            continue
        if isinstance(seg, Close):
            if subpath_start is None:
                continue
            current = subpath_start
            yield PathSegment(SegmentType.CLOSE, pt(subpath_start))
            continue
        if current is None or seg.start != current:
            current = subpath_start = seg.start
            yield PathSegment(SegmentType.MOVE_TO, pt(seg.start))
        if isinstance(seg, Line):
            yield PathSegment(SegmentType.LINE_TO, pt(seg.end))
        elif isinstance(seg, QuadraticBezier):
            yield PathSegment(SegmentType.QUAD_TO, (*pt(seg.control), *pt(seg.end)))
        elif isinstance(seg, CubicBezier):
            yield PathSegment(
                SegmentType.CUBIC_TO,
                (*pt(seg.control1), *pt(seg.control2), *pt(seg.end)),
            )
        elif isinstance(seg, Arc):
            steps = _arc_steps(seg)
            for i in range(1, steps):
                yield PathSegment(SegmentType.LINE_TO, pt(seg.point(i / steps)))
            yield PathSegment(SegmentType.LINE_TO, pt(seg.end))
        current = seg.end


def path_from_segments(segments: Iterable[PathSegment]) -> Path:
    """Rebuild an ``svg.path.Path`` from a segment sequence."""
    path = Path()
    current = start = 0j
    for seg_type, coords in segments:
        points = [complex(coords[i], coords[i + 1]) for i in range(0, len(coords), 2)]
        if seg_type is SegmentType.MOVE_TO:
            current = start = points[0]
            path.append(Move(current))
        elif seg_type is SegmentType.LINE_TO:
            path.append(Line(current, points[0]))
            current = points[0]
        elif seg_type is SegmentType.QUAD_TO:
            path.append(QuadraticBezier(current, points[0], points[1]))
            current = points[1]
        elif seg_type is SegmentType.CUBIC_TO:
            path.append(CubicBezier(current, points[0], points[1], points[2]))
            current = points[2]
        else:
            path.append(Close(current, start))
            current = start
    return path


def transform_shape(shape: Shape, transform: AffineTransform) -> Shape:
    """Map a shape through ``transform``.

    Lines always stay lines. Rectangles, rounded rectangles and ellipses keep
    their primitive type when the transform has no rotation or shear; every
    other case becomes a generic path.
    """
    kind = shape_kind(shape)
    if transform.is_identity:
        return copy_shape(shape)
    if kind is ShapeKind.LINE:
        x1, y1 = transform.transform_point(shape.x1, shape.y1)
        x2, y2 = transform.transform_point(shape.x2, shape.y2)
        return LineShape(x1, y1, x2, y2)
    if transform.is_axis_aligned and kind in (
        ShapeKind.RECTANGLE,
        ShapeKind.ELLIPSE,
        ShapeKind.ROUND_RECTANGLE,
    ):
        xa, ya = transform.transform_point(shape.x, shape.y)
        xb, yb = transform.transform_point(shape.x + shape.width, shape.y + shape.height)
        x, y, w, h = min(xa, xb), min(ya, yb), abs(xb - xa), abs(yb - ya)
        if kind is ShapeKind.RECTANGLE:
            return RectShape(x, y, w, h)
        if kind is ShapeKind.ELLIPSE:
            return EllipseShape(x, y, w, h)
        return RoundRectShape(
            x, y, w, h,
            abs(shape.arc_width * transform.a),
            abs(shape.arc_height * transform.d),
        )
    return path_from_segments(iter_segments(shape, transform))
