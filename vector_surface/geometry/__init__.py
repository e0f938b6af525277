"""Geometry primitives: affine transforms, value shapes, segment iteration."""

from vector_surface.geometry.affine import AffineTransform
from vector_surface.geometry.area import intersect
from vector_surface.geometry.segments import (
    PathSegment,
    SegmentType,
    iter_segments,
    path_from_segments,
    transform_shape,
)
from vector_surface.geometry.shapes import (
    EMPTY_RECT,
    ArcShape,
    ArcType,
    EllipseShape,
    LineShape,
    RectShape,
    RoundRectShape,
    Shape,
    ShapeKind,
    integer_bounds,
    shape_bounds,
    shape_kind,
    to_path,
)

__all__ = [
    "AffineTransform",
    "ArcShape",
    "ArcType",
    "EMPTY_RECT",
    "EllipseShape",
    "LineShape",
    "PathSegment",
    "RectShape",
    "RoundRectShape",
    "SegmentType",
    "Shape",
    "ShapeKind",
    "integer_bounds",
    "intersect",
    "iter_segments",
    "path_from_segments",
    "shape_bounds",
    "shape_kind",
    "to_path",
    "transform_shape",
]
