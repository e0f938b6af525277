"""Hints understood by SVGSurface.set_hint()."""

from __future__ import annotations

from enum import Enum


class SVGHint(Enum):
    """Hint keys.

    ELEMENT_ID and IMAGE_HREF apply to the next emitted element only and are
    not inherited by child surfaces.
    BEGIN_GROUP, END_GROUP and ELEMENT_TITLE write markup immediately and
    are never stored.
    """

    ELEMENT_ID = "element_id"
    IMAGE_HANDLING = "image_handling"
    IMAGE_HREF = "image_href"
    TEXT_RENDERING = "text_rendering"
    STROKE_CONTROL = "stroke_control"
    BEGIN_GROUP = "begin_group"
    END_GROUP = "end_group"
    ELEMENT_TITLE = "element_title"


class ImageHandling(Enum):
    EMBED = "embed"
    REFERENCE = "reference"


class TextRendering(Enum):
    AUTO = "auto"
    OPTIMIZE_SPEED = "optimizeSpeed"
    OPTIMIZE_LEGIBILITY = "optimizeLegibility"
    GEOMETRIC_PRECISION = "geometricPrecision"
    INHERIT = "inherit"


class StrokeControl(Enum):
    """Stroke normalization; written as ``shape-rendering`` on strokes."""

    DEFAULT = "default"
    NORMALIZE = "normalize"
    PURE = "pure"


SHAPE_RENDERING = {
    StrokeControl.NORMALIZE: "crispEdges",
    StrokeControl.PURE: "geometricPrecision",
}

ONE_SHOT_HINTS = frozenset({SVGHint.ELEMENT_ID, SVGHint.IMAGE_HREF})
