"""Backend-independent drawing surface.

A Surface owns the drawing state and exposes the drawing calls. Subclasses
turn each call into output fragments through a small set of hooks
(``_draw_shape``, ``_fill_shape``, ``_draw_text``, ``_draw_image`` ...).

Every public call follows the same protocol: refuse if disposed, validate
arguments, build the complete fragment, then append it. A failed call leaves
the output untouched.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING

from svg.path import Close, Line, Move, Path

from vector_surface.composite import AlphaComposite
from vector_surface.config import Config
from vector_surface.exceptions import (
    InvalidArgumentError,
    SurfaceDisposedError,
    UnsupportedFeatureError,
)
from vector_surface.fonts import Font, StandardFontMapper
from vector_surface.formatting import NumberFormatter
from vector_surface.geometry.affine import AffineTransform
from vector_surface.geometry.shapes import (
    ArcShape,
    ArcType,
    EllipseShape,
    LineShape,
    RectShape,
    RoundRectShape,
    Shape,
    ShapeKind,
    copy_shape,
    shape_kind,
)
from vector_surface.imaging import check_image
from vector_surface.paint import Color, Paint, PaintKind, paint_kind
from vector_surface.state import DrawingState
from vector_surface.stroke import BasicStroke

if TYPE_CHECKING:
    from PIL import Image

logger = logging.getLogger(__name__)


class Capability(Enum):
    """Optional features a backend may or may not provide."""

    DRAW_IMAGE = "draw_image"
    FILL_POLYGON = "fill_polygon"
    XOR_MODE = "xor_mode"
    COPY_AREA = "copy_area"
    GRADIENT_PAINT = "gradient_paint"
    CLIP = "clip"


def _finite(name: str, *values: float) -> None:
    for v in values:
        if v is None or isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
            raise InvalidArgumentError(f"'{name}' must be a finite number", name, value=v)


class Surface(ABC):
    """Abstract drawing surface shared by the SVG and canvas backends."""

    backend_name = "surface"
    capabilities: frozenset[Capability] = frozenset({Capability.CLIP, Capability.GRADIENT_PAINT})

    def __init__(self, config: Config | None = None, state: DrawingState | None = None) -> None:
        self.config = config.copy() if config is not None else Config()
        self._state = state.copy() if state is not None else DrawingState()
        self._disposed = False
        self.font_mapper = StandardFontMapper(self.config.font_substitutes)
        self._geom = NumberFormatter(self.config.geometry_precision)
        self._tfm = NumberFormatter(self.config.transform_precision)

    # Lifecycle

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def _check_open(self, operation: str) -> None:
        if self._disposed:
            raise SurfaceDisposedError(operation)

    def create(self) -> Surface:
        """Return a child surface writing into the same output.

        The child starts with a value copy of this surface's state; changes
        made through either surface do not affect the other.
        """
        self._check_open("create")
        child = self._create_child()
        logger.debug("Created child %s surface", self.backend_name)
        return child

    def dispose(self) -> None:
        """Release the surface. Calling it again has no effect."""
        if self._disposed:
            return
        self._on_dispose()
        self._disposed = True

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    # Paint and style

    def get_paint(self) -> Paint:
        return self._state.paint

    def set_paint(self, paint: Paint) -> None:
        """Set the paint used for drawing and filling.

        Raises:
            InvalidArgumentError: If paint is None.
            UnsupportedPaintError: If paint is not a color or gradient.
        """
        self._check_open("set_paint")
        kind = paint_kind(paint, self.backend_name)
        self._state.paint = paint
        if kind is PaintKind.SOLID:
            self._state.color = paint

    def get_color(self) -> Color:
        return self._state.color

    def set_color(self, color: Color) -> None:
        self._check_open("set_color")
        if not isinstance(color, Color):
            raise InvalidArgumentError("'color' must be a Color", "color")
        self._state.color = color
        self._state.paint = color

    def get_background(self) -> Color | None:
        return self._state.background

    def set_background(self, color: Color | None) -> None:
        self._check_open("set_background")
        if color is not None and not isinstance(color, Color):
            raise InvalidArgumentError("'color' must be a Color or None", "color")
        self._state.background = color

    def get_stroke(self) -> BasicStroke:
        return self._state.stroke

    def set_stroke(self, stroke: BasicStroke) -> None:
        self._check_open("set_stroke")
        if not isinstance(stroke, BasicStroke):
            raise InvalidArgumentError("'stroke' must be a BasicStroke", "stroke")
        self._state.stroke = stroke

    def get_font(self) -> Font:
        return self._state.font

    def set_font(self, font: Font) -> None:
        self._check_open("set_font")
        if not isinstance(font, Font):
            raise InvalidArgumentError("'font' must be a Font", "font")
        self._state.font = font

    def get_composite(self) -> AlphaComposite:
        return self._state.composite

    def set_composite(self, composite: AlphaComposite) -> None:
        """Set the composite rule and constant alpha.

        Raises:
            UnsupportedFeatureError: If the backend cannot express the rule.
        """
        self._check_open("set_composite")
        if not isinstance(composite, AlphaComposite):
            raise InvalidArgumentError("'composite' must be an AlphaComposite", "composite")
        self._check_composite(composite)
        self._state.composite = composite

    def set_paint_mode(self) -> None:
        self._check_open("set_paint_mode")

    def set_xor_mode(self, color: Color) -> None:
        raise UnsupportedFeatureError("xor_mode", self.backend_name)

    # Transform

    def get_transform(self) -> AffineTransform:
        return self._state.transform.get()

    def set_transform(self, transform: AffineTransform | None) -> None:
        """Replace the transform (None resets to identity)."""
        self._check_open("set_transform")
        if transform is not None and not isinstance(transform, AffineTransform):
            raise InvalidArgumentError("'transform' must be an AffineTransform", "transform")
        self._state.transform.set(transform)
        self._transform_changed(None)

    def transform(self, transform: AffineTransform) -> None:
        """Concatenate ``transform`` with the current transform."""
        self._check_open("transform")
        if not isinstance(transform, AffineTransform):
            raise InvalidArgumentError("'transform' must be an AffineTransform", "transform")
        self._concatenate(transform.copy())

    def translate(self, tx: float, ty: float) -> None:
        self._check_open("translate")
        _finite("translate", tx, ty)
        self._concatenate(AffineTransform.translation(tx, ty))

    def scale(self, sx: float, sy: float) -> None:
        self._check_open("scale")
        _finite("scale", sx, sy)
        self._concatenate(AffineTransform.scaling(sx, sy))

    def rotate(self, theta: float, x: float | None = None, y: float | None = None) -> None:
        """Rotate by ``theta`` radians, about (x, y) when given."""
        self._check_open("rotate")
        _finite("theta", theta)
        if x is not None or y is not None:
            _finite("rotate", x or 0.0, y or 0.0)
        self._concatenate(AffineTransform.rotation(theta, x, y))

    def shear(self, shx: float, shy: float) -> None:
        self._check_open("shear")
        _finite("shear", shx, shy)
        self._concatenate(AffineTransform.shearing(shx, shy))

    def _concatenate(self, transform: AffineTransform) -> None:
        self._state.transform.concatenate(transform)
        self._transform_changed(transform)

    # Clip

    def get_clip(self) -> Shape | None:
        """Return the clip in current user space (None when unclipped)."""
        return self._state.clip.get(self._state.transform.current)

    def set_clip(self, shape: Shape | None) -> None:
        self._check_open("set_clip")
        if shape is not None:
            shape_kind(shape)
        self._state.clip.set(shape, self._state.transform.current)
        self._clip_changed()

    def clip(self, shape: Shape | None) -> None:
        """Intersect the clip with ``shape``.

        A line clips to its bounding box. Clipping to a region that does not
        overlap the current clip leaves an empty clip.
        """
        self._check_open("clip")
        if shape is not None:
            shape_kind(shape)
        self._state.clip.clip(shape, self._state.transform.current)
        self._clip_changed()

    def clip_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._check_open("clip_rect")
        _finite("clip_rect", x, y, width, height)
        self.clip(RectShape(x, y, width, height))

    def get_clip_bounds(self) -> RectShape | None:
        return self._state.clip.bounds(self._state.transform.current)

    # Shapes

    def draw(self, shape: Shape) -> None:
        """Stroke the outline of ``shape`` with the current paint and stroke."""
        self._check_open("draw")
        kind = shape_kind(shape)
        self._draw_shape(copy_shape(shape), kind)

    def fill(self, shape: Shape) -> None:
        """Fill the interior of ``shape`` with the current paint."""
        self._check_open("fill")
        kind = shape_kind(shape)
        if kind is ShapeKind.RECTANGLE and shape.is_empty:
            return
        self._fill_shape(copy_shape(shape), kind)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._check_open("draw_line")
        self.draw(LineShape(x1, y1, x2, y2))

    def draw_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._check_open("draw_rect")
        self.draw(RectShape(x, y, width, height))

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._check_open("fill_rect")
        self.fill(RectShape(x, y, width, height))

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        """Fill the rectangle with the background color, if one is set."""
        self._check_open("clear_rect")
        rect = RectShape(x, y, width, height)
        background = self._state.background
        if background is None or rect.is_empty:
            return
        saved = self._state.paint
        self._state.paint = background
        try:
            self._fill_shape(rect, ShapeKind.RECTANGLE)
        finally:
            self._state.paint = saved

    def draw_round_rect(
        self, x: float, y: float, width: float, height: float, arc_width: float, arc_height: float
    ) -> None:
        self._check_open("draw_round_rect")
        self.draw(RoundRectShape(x, y, width, height, arc_width, arc_height))

    def fill_round_rect(
        self, x: float, y: float, width: float, height: float, arc_width: float, arc_height: float
    ) -> None:
        self._check_open("fill_round_rect")
        self.fill(RoundRectShape(x, y, width, height, arc_width, arc_height))

    def draw_oval(self, x: float, y: float, width: float, height: float) -> None:
        self._check_open("draw_oval")
        self.draw(EllipseShape(x, y, width, height))

    def fill_oval(self, x: float, y: float, width: float, height: float) -> None:
        self._check_open("fill_oval")
        self.fill(EllipseShape(x, y, width, height))

    def draw_arc(
        self, x: float, y: float, width: float, height: float, start: float, extent: float
    ) -> None:
        """Stroke an open arc; angles are in degrees."""
        self._check_open("draw_arc")
        self.draw(ArcShape(x, y, width, height, start, extent, ArcType.OPEN))

    def fill_arc(
        self, x: float, y: float, width: float, height: float, start: float, extent: float
    ) -> None:
        """Fill a pie wedge; angles are in degrees."""
        self._check_open("fill_arc")
        self.fill(ArcShape(x, y, width, height, start, extent, ArcType.PIE))

    def draw_polyline(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        self._check_open("draw_polyline")
        self.draw(self._polyline(xs, ys, close=False))

    def draw_polygon(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        self._check_open("draw_polygon")
        self.draw(self._polyline(xs, ys, close=True))

    def fill_polygon(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        raise UnsupportedFeatureError("fill_polygon", self.backend_name)

    def copy_area(self, x: float, y: float, width: float, height: float, dx: float, dy: float) -> None:
        raise UnsupportedFeatureError("copy_area", self.backend_name)

    @staticmethod
    def _polyline(xs: Sequence[float], ys: Sequence[float], close: bool) -> Path:
        if xs is None or ys is None:
            raise InvalidArgumentError("Null point array", "xs" if xs is None else "ys")
        if len(xs) != len(ys):
            raise InvalidArgumentError(
                "x and y arrays must have the same length", "xs", xs=len(xs), ys=len(ys)
            )
        if not xs:
            raise InvalidArgumentError("At least one point is required", "xs")
        _finite("points", *xs, *ys)
        points = [complex(x, y) for x, y in zip(xs, ys)]
        path = Path(Move(points[0]))
        for a, b in zip(points, points[1:]):
            path.append(Line(a, b))
        if close:
            path.append(Close(points[-1], points[0]))
        return path

    # Text and images

    def draw_string(self, text: str, x: float, y: float) -> None:
        """Draw ``text`` with its baseline starting at (x, y)."""
        self._check_open("draw_string")
        if text is None:
            raise InvalidArgumentError("Null 'text' argument", "text")
        if not isinstance(text, str):
            raise InvalidArgumentError("'text' must be a string", "text")
        _finite("draw_string", x, y)
        if not text:
            return
        self._draw_text(text, x, y)

    def draw_image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: float | None = None,
        height: float | None = None,
        background: Color | None = None,
    ) -> bool:
        """Draw a raster image scaled into (x, y, width, height).

        Width and height default to the image size. A ``background`` color
        fills the target rectangle first.

        Returns:
            True if the image was drawn, False for a zero-sized target.

        Raises:
            InvalidArgumentError: If image is None.
            UnsupportedFeatureError: If the backend cannot draw images.
            ImageEncodingError: If the image cannot be encoded.
        """
        self._check_open("draw_image")
        if not self.supports(Capability.DRAW_IMAGE):
            raise UnsupportedFeatureError("draw_image", self.backend_name)
        image = check_image(image)
        width = image.width if width is None else width
        height = image.height if height is None else height
        _finite("draw_image", x, y, width, height)
        if background is not None and not isinstance(background, Color):
            raise InvalidArgumentError("'background' must be a Color", "background")
        if width <= 0 or height <= 0:
            logger.warning("Skipping image with non-positive size %sx%s", width, height)
            return False
        self._draw_image(image, x, y, width, height, background)
        return True

    def draw_image_region(
        self,
        image: Image.Image,
        dx1: int,
        dy1: int,
        dx2: int,
        dy2: int,
        sx1: int,
        sy1: int,
        sx2: int,
        sy2: int,
        background: Color | None = None,
    ) -> bool:
        """Draw the source box (sx1, sy1)-(sx2, sy2) of ``image`` scaled into
        the destination box (dx1, dy1)-(dx2, dy2).

        The region is cropped and resampled to the destination size before
        drawing, so only those pixels are written.
        """
        self._check_open("draw_image_region")
        if not self.supports(Capability.DRAW_IMAGE):
            raise UnsupportedFeatureError("draw_image", self.backend_name)
        image = check_image(image)
        for name, value in zip(
            ("dx1", "dy1", "dx2", "dy2", "sx1", "sy1", "sx2", "sy2"),
            (dx1, dy1, dx2, dy2, sx1, sy1, sx2, sy2),
        ):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentError(f"'{name}' must be an integer", name, value=value)
        width, height = dx2 - dx1, dy2 - dy1
        if width <= 0 or height <= 0 or sx2 <= sx1 or sy2 <= sy1:
            logger.warning("Skipping empty image region")
            return False
        region = image.crop((sx1, sy1, sx2, sy2)).resize((width, height))
        return self.draw_image(region, dx1, dy1, width, height, background)

    def draw_image_transformed(
        self, image: Image.Image, transform: AffineTransform | None
    ) -> bool:
        """Draw ``image`` at its own size at the origin of ``transform``.

        The transform is concatenated for this one image only.
        """
        self._check_open("draw_image_transformed")
        if transform is not None and not isinstance(transform, AffineTransform):
            raise InvalidArgumentError("'transform' must be an AffineTransform", "transform")
        saved = self.get_transform()
        if transform is not None:
            self.transform(transform)
        try:
            return self.draw_image(image, 0, 0)
        finally:
            if transform is not None:
                self.set_transform(saved)

    # Backend hooks

    def _check_composite(self, composite: AlphaComposite) -> None:
        """Raise UnsupportedFeatureError if the backend cannot express it."""

    def _transform_changed(self, concatenated: AffineTransform | None) -> None:
        """Called after the transform changes.

        ``concatenated`` is the matrix that was appended, or None when the
        transform was replaced outright.
        """

    def _clip_changed(self) -> None:
        """Called after the clip changes."""

    def _on_dispose(self) -> None:
        """Called once, on the first dispose()."""

    @abstractmethod
    def _create_child(self) -> Surface: ...

    @abstractmethod
    def _draw_shape(self, shape: Shape, kind: ShapeKind) -> None: ...

    @abstractmethod
    def _fill_shape(self, shape: Shape, kind: ShapeKind) -> None: ...

    @abstractmethod
    def _draw_text(self, text: str, x: float, y: float) -> None: ...

    def _draw_image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: float,
        height: float,
        background: Color | None,
    ) -> None:
        raise UnsupportedFeatureError("draw_image", self.backend_name)
