"""Mutable drawing state: transform and clip trackers plus style values."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from vector_surface.composite import SRC_OVER, AlphaComposite
from vector_surface.exceptions import InvalidArgumentError, NonInvertibleTransformError
from vector_surface.fonts import DEFAULT_FONT, Font
from vector_surface.geometry.affine import AffineTransform
from vector_surface.geometry.area import intersect
from vector_surface.geometry.segments import transform_shape
from vector_surface.geometry.shapes import (
    EMPTY_RECT,
    RectShape,
    Shape,
    ShapeKind,
    copy_shape,
    integer_bounds,
    shape_bounds,
    shape_kind,
)
from vector_surface.paint import BLACK, Color, Paint
from vector_surface.stroke import DEFAULT_STROKE, BasicStroke

logger = logging.getLogger(__name__)


class TransformTracker:
    """Holds the current user-to-device transform.

    Elementary operations right-multiply the current matrix, so each new
    operation acts in the already-transformed local frame.
    """

    def __init__(self, transform: AffineTransform | None = None) -> None:
        self._transform = transform.copy() if transform is not None else AffineTransform()

    @property
    def current(self) -> AffineTransform:
        """The live transform; callers must not mutate it."""
        return self._transform

    def get(self) -> AffineTransform:
        return self._transform.copy()

    def set(self, transform: AffineTransform | None) -> None:
        if transform is None:
            self._transform = AffineTransform()
        else:
            self._transform = transform.copy()

    def concatenate(self, transform: AffineTransform) -> None:
        if transform is None:
            raise InvalidArgumentError("Null 'transform' argument", "transform")
        self._transform.concatenate(transform)

    def copy(self) -> TransformTracker:
        return TransformTracker(self._transform)


class ClipTracker:
    """Holds the clip region in device space.

    ``set`` and ``clip`` map the given user-space shape through the transform
    in effect at call time. Reads map the stored region back through the
    inverse of the current transform.
    """

    def __init__(self, device_clip: Shape | None = None) -> None:
        self._clip = copy_shape(device_clip)

    @property
    def is_set(self) -> bool:
        return self._clip is not None

    @property
    def device_clip(self) -> Shape | None:
        return copy_shape(self._clip)

    def _to_device(self, shape: Shape, transform: AffineTransform) -> Shape:
        kind = shape_kind(shape)
        if kind is ShapeKind.LINE:
            shape = shape_bounds(shape)
        elif kind is ShapeKind.RECTANGLE and shape.is_empty:
            return EMPTY_RECT
        return transform_shape(shape, transform)

    def set(self, shape: Shape | None, transform: AffineTransform) -> None:
        self._clip = None if shape is None else self._to_device(shape, transform)

    def clip(self, shape: Shape | None, transform: AffineTransform) -> None:
        """Narrow the clip to its intersection with ``shape``.

        Raises:
            InvalidArgumentError: If shape is None while a clip is set.
        """
        if shape is None:
            if self._clip is None:
                return
            raise InvalidArgumentError("Null 'shape' cannot narrow an existing clip", "shape")
        device = self._to_device(shape, transform)
        if self._clip is None:
            self._clip = device
        else:
            self._clip = intersect(self._clip, device)
        logger.debug("Clip narrowed to %s", type(self._clip).__name__)

    def get(self, transform: AffineTransform) -> Shape | None:
        if self._clip is None:
            return None
        try:
            inverse = transform.create_inverse()
        except NonInvertibleTransformError:
            return None
        return transform_shape(self._clip, inverse)

    def bounds(self, transform: AffineTransform) -> RectShape | None:
        """Integer bounds of the clip in the current user space."""
        if self._clip is None:
            return None
        clip = self.get(transform)
        if clip is None:
            return None
        return integer_bounds(shape_bounds(clip))

    def copy(self) -> ClipTracker:
        return ClipTracker(self._clip)


@dataclass
class DrawingState:
    """Everything a surface consults when it emits a drawing call."""

    paint: Paint = BLACK
    color: Color = BLACK
    background: Color | None = None
    stroke: BasicStroke = DEFAULT_STROKE
    font: Font = DEFAULT_FONT
    composite: AlphaComposite = SRC_OVER
    transform: TransformTracker = field(default_factory=TransformTracker)
    clip: ClipTracker = field(default_factory=ClipTracker)

    @property
    def alpha(self) -> float:
        return self.composite.alpha

    def copy(self) -> DrawingState:
        """Value copy; transform and clip are duplicated, the rest is immutable."""
        return DrawingState(
            paint=self.paint,
            color=self.color,
            background=self.background,
            stroke=self.stroke,
            font=self.font,
            composite=self.composite,
            transform=self.transform.copy(),
            clip=self.clip.copy(),
        )
