"""Value shapes and shape classification.

Primitive shapes are immutable dataclasses; anything else is a generic
``svg.path.Path`` whose points are complex numbers (``x + y*1j``).
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Union

from svg.path import Arc, Close, CubicBezier, Line, Move, Path, QuadraticBezier

from vector_surface.exceptions import InvalidArgumentError

# Cubic control-point distance for a quarter ellipse
KAPPA = 0.5522847498307936


class ShapeKind(Enum):
    """Closed classification of every shape the surfaces accept."""

    LINE = "line"
    RECTANGLE = "rectangle"
    ROUND_RECTANGLE = "round_rectangle"
    ELLIPSE = "ellipse"
    ARC = "arc"
    PATH = "path"


class ArcType(Enum):
    OPEN = "open"
    CHORD = "chord"
    PIE = "pie"


class _ValueShape:
    """Mixin validating that every numeric field is finite."""

    def __post_init__(self) -> None:
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                if not math.isfinite(value):
                    raise InvalidArgumentError(
                        f"{type(self).__name__}.{f.name} must be finite",
                        f.name,
                        value=value,
                    )


@dataclass(frozen=True)
class LineShape(_ValueShape):
    x1: float
    y1: float
    x2: float
    y2: float

    kind = ShapeKind.LINE


@dataclass(frozen=True)
class RectShape(_ValueShape):
    x: float
    y: float
    width: float
    height: float

    kind = ShapeKind.RECTANGLE

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height


EMPTY_RECT = RectShape(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class RoundRectShape(_ValueShape):
    """Rectangle with rounded corners; arc sizes are corner diameters."""

    x: float
    y: float
    width: float
    height: float
    arc_width: float
    arc_height: float

    kind = ShapeKind.ROUND_RECTANGLE


@dataclass(frozen=True)
class EllipseShape(_ValueShape):
    """Ellipse inscribed in the frame (x, y, width, height)."""

    x: float
    y: float
    width: float
    height: float

    kind = ShapeKind.ELLIPSE

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)


@dataclass(frozen=True)
class ArcShape(_ValueShape):
    """Elliptical arc; angles are in degrees, counter-clockwise from 3 o'clock."""

    x: float
    y: float
    width: float
    height: float
    start: float
    extent: float
    arc_type: ArcType = ArcType.OPEN

    kind = ShapeKind.ARC


Shape = Union[LineShape, RectShape, RoundRectShape, EllipseShape, ArcShape, Path]


def shape_kind(shape: Shape) -> ShapeKind:
    """Classify a shape.

    Raises:
        InvalidArgumentError: If shape is None or not a known shape type.
    """
    if shape is None:
        raise InvalidArgumentError("Null 'shape' argument", "shape")
    if isinstance(shape, Path):
        return ShapeKind.PATH
    kind = getattr(shape, "kind", None)
    if not isinstance(kind, ShapeKind):
        raise InvalidArgumentError(
            f"Unknown shape type: {type(shape).__name__}", "shape"
        )
    return kind


def copy_shape(shape: Shape | None) -> Shape | None:
    """Return a copy that shares no mutable state with ``shape``."""
    if isinstance(shape, Path):
        return copy.deepcopy(shape)
    return shape


def _pt(x: float, y: float) -> complex:
    return complex(x, y)


def rect_path(x: float, y: float, w: float, h: float) -> Path:
    p0, p1, p2, p3 = _pt(x, y), _pt(x + w, y), _pt(x + w, y + h), _pt(x, y + h)
    return Path(
        Move(p0),
        Line(p0, p1),
        Line(p1, p2),
        Line(p2, p3),
        Line(p3, p0),
        Close(p0, p0),
    )


def _ellipse_path(e: EllipseShape) -> Path:
    cx, cy = e.center
    rx, ry = e.width / 2.0, e.height / 2.0
    kx, ky = rx * KAPPA, ry * KAPPA
    right, bottom = _pt(cx + rx, cy), _pt(cx, cy + ry)
    left, top = _pt(cx - rx, cy), _pt(cx, cy - ry)
    return Path(
        Move(right),
        CubicBezier(right, _pt(cx + rx, cy + ky), _pt(cx + kx, cy + ry), bottom),
        CubicBezier(bottom, _pt(cx - kx, cy + ry), _pt(cx - rx, cy + ky), left),
        CubicBezier(left, _pt(cx - rx, cy - ky), _pt(cx - kx, cy - ry), top),
        CubicBezier(top, _pt(cx + kx, cy - ry), _pt(cx + rx, cy - ky), right),
        Close(right, right),
    )


def _round_rect_path(r: RoundRectShape) -> Path:
    x, y, w, h = r.x, r.y, r.width, r.height
    rw = min(abs(w), abs(r.arc_width)) / 2.0
    rh = min(abs(h), abs(r.arc_height)) / 2.0
    if rw == 0 or rh == 0:
        return rect_path(x, y, w, h)
    kx, ky = rw * (1 - KAPPA), rh * (1 - KAPPA)
    p = [
        _pt(x + rw, y),
        _pt(x + w - rw, y),
        _pt(x + w, y + rh),
        _pt(x + w, y + h - rh),
        _pt(x + w - rw, y + h),
        _pt(x + rw, y + h),
        _pt(x, y + h - rh),
        _pt(x, y + rh),
    ]
    return Path(
        Move(p[0]),
        Line(p[0], p[1]),
        CubicBezier(p[1], _pt(x + w - kx, y), _pt(x + w, y + ky), p[2]),
        Line(p[2], p[3]),
        CubicBezier(p[3], _pt(x + w, y + h - ky), _pt(x + w - kx, y + h), p[4]),
        Line(p[4], p[5]),
        CubicBezier(p[5], _pt(x + kx, y + h), _pt(x, y + h - ky), p[6]),
        Line(p[6], p[7]),
        CubicBezier(p[7], _pt(x, y + ky), _pt(x + kx, y), p[0]),
        Close(p[0], p[0]),
    )


def _arc_curves(a: ArcShape) -> list[CubicBezier]:
    cx, cy = a.x + a.width / 2.0, a.y + a.height / 2.0
    rx, ry = a.width / 2.0, a.height / 2.0

    def point(t: float) -> complex:
        return _pt(cx + rx * math.cos(t), cy - ry * math.sin(t))

    def tangent(t: float) -> complex:
        return _pt(-rx * math.sin(t), -ry * math.cos(t))

    extent = max(-360.0, min(360.0, a.extent))
    pieces = max(1, math.ceil(abs(extent) / 90.0 - 1e-9))
    step = math.radians(extent) / pieces
    k = 4.0 / 3.0 * math.tan(step / 4.0)
    t0 = math.radians(a.start)
    curves = []
    for i in range(pieces):
        ta, tb = t0 + i * step, t0 + (i + 1) * step
        pa, pb = point(ta), point(tb)
        curves.append(CubicBezier(pa, pa + k * tangent(ta), pb - k * tangent(tb), pb))
    return curves


def _arc_path(a: ArcShape) -> Path:
    cx, cy = a.x + a.width / 2.0, a.y + a.height / 2.0
    center = _pt(cx, cy)
    start = _pt(
        cx + a.width / 2.0 * math.cos(math.radians(a.start)),
        cy - a.height / 2.0 * math.sin(math.radians(a.start)),
    )
    if a.extent == 0:
        return Path(Move(start))
    curves = _arc_curves(a)
    end = curves[-1].end
    if a.arc_type is ArcType.PIE:
        path = Path(Move(center), Line(center, start), *curves, Line(end, center))
        path.append(Close(center, center))
        return path
    path = Path(Move(start), *curves)
    if a.arc_type is ArcType.CHORD:
        path.append(Close(end, start))
    return path


def to_path(shape: Shape) -> Path:
    """Convert any shape to a generic path (a new object for primitives)."""
    kind = shape_kind(shape)
    if kind is ShapeKind.PATH:
        return shape  # type: ignore[return-value]
    if kind is ShapeKind.LINE:
        p1, p2 = _pt(shape.x1, shape.y1), _pt(shape.x2, shape.y2)
        return Path(Move(p1), Line(p1, p2))
    if kind is ShapeKind.RECTANGLE:
        return rect_path(shape.x, shape.y, shape.width, shape.height)
    if kind is ShapeKind.ROUND_RECTANGLE:
        return _round_rect_path(shape)
    if kind is ShapeKind.ELLIPSE:
        return _ellipse_path(shape)
    return _arc_path(shape)


def _quad_extrema(p0: float, p1: float, p2: float) -> list[float]:
    denom = p0 - 2 * p1 + p2
    if denom == 0:
        return []
    t = (p0 - p1) / denom
    return [t] if 0 < t < 1 else []


def _cubic_extrema(p0: float, p1: float, p2: float, p3: float) -> list[float]:
    a = -p0 + 3 * p1 - 3 * p2 + p3
    b = 2 * (p0 - 2 * p1 + p2)
    c = p1 - p0
    if abs(a) < 1e-12:
        if b == 0:
            return []
        roots = [-c / b]
    else:
        disc = b * b - 4 * a * c
        if disc < 0:
            return []
        sq = math.sqrt(disc)
        roots = [(-b + sq) / (2 * a), (-b - sq) / (2 * a)]
    return [t for t in roots if 0 < t < 1]


def _segment_points(seg) -> list[complex]:
    points = [seg.start, seg.end]
    if isinstance(seg, QuadraticBezier):
        for coord in (lambda z: z.real, lambda z: z.imag):
            for t in _quad_extrema(coord(seg.start), coord(seg.control), coord(seg.end)):
                points.append(seg.point(t))
    elif isinstance(seg, CubicBezier):
        for coord in (lambda z: z.real, lambda z: z.imag):
            for t in _cubic_extrema(
                coord(seg.start), coord(seg.control1), coord(seg.control2), coord(seg.end)
            ):
                points.append(seg.point(t))
    elif isinstance(seg, Arc):
        points.extend(seg.point(i / 32.0) for i in range(1, 32))
    return points


def shape_bounds(shape: Shape) -> RectShape:
    """Return the tight bounding box of a shape."""
    kind = shape_kind(shape)
    if kind is ShapeKind.RECTANGLE:
        return shape  # type: ignore[return-value]
    if kind is ShapeKind.LINE:
        x0, x1 = sorted((shape.x1, shape.x2))
        y0, y1 = sorted((shape.y1, shape.y2))
        return RectShape(x0, y0, x1 - x0, y1 - y0)
    if kind in (ShapeKind.ROUND_RECTANGLE, ShapeKind.ELLIPSE):
        return RectShape(shape.x, shape.y, shape.width, shape.height)
    path = to_path(shape)
    points: list[complex] = []
    for seg in path:
        points.extend(_segment_points(seg))
    if not points:
        return EMPTY_RECT
    xs = [p.real for p in points]
    ys = [p.imag for p in points]
    return RectShape(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def integer_bounds(rect: RectShape) -> RectShape:
    """Expand a rectangle outward to integer coordinates."""
    if rect.is_empty:
        return EMPTY_RECT
    x0, y0 = math.floor(rect.x), math.floor(rect.y)
    x1, y1 = math.ceil(rect.max_x), math.ceil(rect.max_y)
    return RectShape(x0, y0, x1 - x0, y1 - y0)
