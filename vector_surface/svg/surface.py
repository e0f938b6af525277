"""SVG markup backend.

Every element carries its complete style (stroke or fill, opacity), plus a
``transform`` attribute when the current transform is not the identity and
a ``clip-path`` reference when a clip is set. Gradients and clip paths are
registered when a drawing call first uses them and written into a single
``<defs>`` block by get_svg_element().
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import defusedxml.ElementTree as ET

from vector_surface.composite import AlphaComposite, CompositeRule
from vector_surface.config import Config
from vector_surface.exceptions import (
    DuplicateElementIdError,
    InvalidArgumentError,
    UnsupportedFeatureError,
)
from vector_surface.formatting import escape_for_xml
from vector_surface.geometry.affine import AffineTransform
from vector_surface.geometry.segments import SegmentType, iter_segments
from vector_surface.geometry.shapes import RectShape, Shape, ShapeKind
from vector_surface.imaging import data_uri
from vector_surface.paint import (
    Color,
    GradientPaint,
    GradientRegistry,
    Paint,
    RadialGradientPaint,
)
from vector_surface.stroke import LineCap, LineJoin
from vector_surface.surface import Capability, Surface
from vector_surface.svg.hints import (
    ONE_SHOT_HINTS,
    SHAPE_RENDERING,
    ImageHandling,
    StrokeControl,
    SVGHint,
    TextRendering,
)
from vector_surface.svg.units import MeetOrSlice, PreserveAspectRatio, SVGUnits, ViewBox

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from PIL import Image

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
VS_NS = "urn:vector-surface"

CLIP_KEY_PREFIX = "clip-"
DEFAULT_MITER_LIMIT = 4.0

XML_HEADER = (
    '<?xml version="1.0"?>\n'
    '<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.0//EN" '
    '"http://www.w3.org/TR/2001/REC-SVG-20010904/DTD/svg10.dtd">\n'
)


@dataclass
class ImageElement:
    """An image written by reference; the file itself is not created."""

    href: str
    image: Image.Image


@dataclass
class _SVGDocument:
    """Output shared by a surface and all of its children."""

    defs_key_prefix: str
    body: list[str] = field(default_factory=list)
    gradients: GradientRegistry = field(default_factory=GradientRegistry)
    clip_paths: list[str] = field(default_factory=list)
    element_ids: set[str] = field(default_factory=set)
    images: list[ImageElement] = field(default_factory=list)

    def register_clip(self, path_data: str) -> str:
        try:
            index = self.clip_paths.index(path_data)
        except ValueError:
            self.clip_paths.append(path_data)
            index = len(self.clip_paths) - 1
            logger.debug("Registered clip path %s%s%d", self.defs_key_prefix, CLIP_KEY_PREFIX, index)
        return f"{self.defs_key_prefix}{CLIP_KEY_PREFIX}{index}"


class SVGSurface(Surface):
    """Surface that records drawing calls as SVG elements.

    Example:
        >>> from vector_surface import SVGSurface, BLUE
        >>> svg = SVGSurface(200, 100)
        >>> svg.set_paint(BLUE)
        >>> svg.fill_rect(10, 20, 30, 40)
        >>> markup = svg.get_svg_element()
    """

    backend_name = "svg"
    capabilities = frozenset(
        {Capability.CLIP, Capability.GRADIENT_PAINT, Capability.DRAW_IMAGE}
    )

    def __init__(
        self,
        width: float,
        height: float,
        units: SVGUnits | str | None = None,
        config: Config | None = None,
        *,
        _parent: SVGSurface | None = None,
    ) -> None:
        for name, value in (("width", width), ("height", height)):
            if (
                isinstance(value, bool)
                or not isinstance(value, (int, float))
                or not math.isfinite(value)
                or value <= 0
            ):
                raise InvalidArgumentError(f"'{name}' must be a positive number", name, value=value)
        if _parent is None:
            super().__init__(config)
            self._doc = _SVGDocument(self.config.resolved_defs_key_prefix())
            self._doc.gradients.prefix = self._doc.defs_key_prefix
            self._hints: dict[SVGHint, Any] = {
                SVGHint.IMAGE_HANDLING: ImageHandling(self.config.image_handling)
            }
            self._font_size_units = SVGUnits(self.config.font_size_units)
            self.check_stroke_control_hint = True
        else:
            super().__init__(_parent.config, _parent._state)
            self.font_mapper = _parent.font_mapper.copy()
            self._doc = _parent._doc
            self._hints = {
                k: v for k, v in _parent._hints.items() if k not in ONE_SHOT_HINTS
            }
            self._font_size_units = _parent._font_size_units
            self.check_stroke_control_hint = _parent.check_stroke_control_hint
        self.width = width
        self.height = height
        unit_name = units if units is not None else self.config.units
        self.units = SVGUnits(str(unit_name)) if unit_name is not None else None
        self._clip_ref: str | None = None

    @property
    def defs_key_prefix(self) -> str:
        return self._doc.defs_key_prefix

    @property
    def font_size_units(self) -> SVGUnits:
        """Units written after the ``font-size`` of text elements."""
        return self._font_size_units

    @font_size_units.setter
    def font_size_units(self, units: SVGUnits | str) -> None:
        try:
            self._font_size_units = SVGUnits(units)
        except ValueError as e:
            raise InvalidArgumentError(f"Unknown font size units {units!r}", "units") from e

    def _create_child(self) -> SVGSurface:
        return SVGSurface(self.width, self.height, self.units, _parent=self)

    # Hints

    def get_hint(self, hint: SVGHint) -> Any:
        return self._hints.get(hint)

    def set_hint(self, hint: SVGHint, value: Any) -> None:
        """Set a hint, or write group/title markup for the group hints.

        Raises:
            DuplicateElementIdError: If a group id is already in use.
        """
        self._check_open("set_hint")
        hint = SVGHint(hint)
        if hint is SVGHint.BEGIN_GROUP:
            if isinstance(value, dict):
                attrs = dict(value)
                self.begin_group(attrs.pop("id", None), attrs.pop("ref", None), **attrs)
            else:
                self.begin_group(value)
        elif hint is SVGHint.END_GROUP:
            self.end_group()
        elif hint is SVGHint.ELEMENT_TITLE:
            if value is not None:
                self.add_title(str(value))
        elif hint is SVGHint.IMAGE_HANDLING:
            self._hints[hint] = ImageHandling(value)
        elif hint is SVGHint.TEXT_RENDERING:
            self._hints[hint] = None if value is None else TextRendering(value)
        elif hint is SVGHint.STROKE_CONTROL:
            self._hints[hint] = None if value is None else StrokeControl(value)
        else:
            self._hints[hint] = value

    def begin_group(
        self, group_id: str | None = None, ref: str | None = None, **attributes: Any
    ) -> None:
        """Open a ``<g>`` element; pair with end_group()."""
        self._check_open("begin_group")
        parts = ["<g"]
        if group_id is not None:
            if group_id in self._doc.element_ids:
                raise DuplicateElementIdError(group_id)
            parts.append(f" id='{escape_for_xml(group_id)}'")
        if ref is not None:
            parts.append(f" vs:ref='{escape_for_xml(str(ref))}'")
        for key, value in attributes.items():
            parts.append(f" {key}='{escape_for_xml(str(value))}'")
        parts.append(">")
        if group_id is not None:
            self._doc.element_ids.add(group_id)
        self._doc.body.append("".join(parts))

    def end_group(self) -> None:
        self._check_open("end_group")
        self._doc.body.append("</g>")

    def add_title(self, title: str) -> None:
        self._check_open("add_title")
        self._doc.body.append(f"<title>{escape_for_xml(title)}</title>")

    def _element_id_attr(self) -> tuple[str, str | None]:
        element_id = self._hints.get(SVGHint.ELEMENT_ID)
        if element_id is None:
            return "", None
        if element_id in self._doc.element_ids:
            raise DuplicateElementIdError(element_id)
        return f" id='{escape_for_xml(element_id)}'", element_id

    def _commit(self, fragment: str, element_id: str | None) -> None:
        if element_id is not None:
            self._doc.element_ids.add(element_id)
            self._hints[SVGHint.ELEMENT_ID] = None
        self._doc.body.append(fragment)

    # State hooks

    def _check_composite(self, composite: AlphaComposite) -> None:
        if composite.rule is not CompositeRule.SRC_OVER:
            raise UnsupportedFeatureError(
                f"composite rule {composite.rule.name}", self.backend_name
            )

    def _transform_changed(self, concatenated: AffineTransform | None) -> None:
        self._clip_ref = None

    def _clip_changed(self) -> None:
        self._clip_ref = None

    # Style

    def _paint_str(self, paint: Paint) -> str:
        if isinstance(paint, Color):
            return paint.rgb_string()
        return f"url(#{self._doc.gradients.register(paint)})"

    def _opacity(self) -> float:
        paint = self._state.paint
        color_alpha = paint.opacity if isinstance(paint, Color) else 1.0
        return color_alpha * self._state.alpha

    def _stroke_style(self) -> str:
        stroke = self._state.stroke
        width = stroke.width if stroke.width > 0 else self.config.zero_stroke_width
        parts = [
            f"stroke-width:{self._geom(width)}",
            f"stroke:{self._paint_str(self._state.paint)}",
            f"stroke-opacity:{self._tfm(self._opacity())}",
        ]
        if stroke.cap is not LineCap.BUTT:
            parts.append(f"stroke-linecap:{stroke.cap.value}")
        if stroke.join is not LineJoin.MITER:
            parts.append(f"stroke-linejoin:{stroke.join.value}")
        if abs(DEFAULT_MITER_LIMIT - stroke.miter_limit) > 0.001:
            parts.append(f"stroke-miterlimit:{self._geom(stroke.miter_limit)}")
        if stroke.dash:
            parts.append(f"stroke-dasharray:{self._geom.join(stroke.dash)}")
        if self.check_stroke_control_hint:
            rendering = SHAPE_RENDERING.get(self._hints.get(SVGHint.STROKE_CONTROL))
            if rendering is not None:
                parts.append(f"shape-rendering:{rendering}")
        return ";".join(parts)

    def _fill_style(self) -> str:
        style = f"fill:{self._paint_str(self._state.paint)}"
        opacity = self._opacity()
        if opacity < 1.0:
            style += f";fill-opacity:{self._tfm(opacity)}"
        return style

    def _font_style(self) -> str:
        font = self._state.font
        family = self.font_mapper(font.family)
        if " " in family and not family.startswith(("'", '"')):
            family = f'"{family}"'
        style = (
            f"fill: {self._paint_str(self._state.paint)}; "
            f"fill-opacity: {self._tfm(self._opacity())}; "
            f"font-family: {escape_for_xml(family)}; "
            f"font-size: {self._geom(font.size)}{self._font_size_units.value};"
        )
        if font.bold:
            style += " font-weight: bold;"
        if font.italic:
            style += " font-style: italic;"
        spacing = font.tracking * font.size
        if abs(spacing) > 0.000001:
            style += f" letter-spacing: {self._geom(spacing)};"
        return style

    def _transform_attr(self) -> str:
        transform = self._state.transform.current
        if transform.is_identity:
            return ""
        return f" transform='matrix({self._tfm.join(transform)})'"

    def _clip_attr(self) -> str:
        if not self._state.clip.is_set:
            return ""
        if self._clip_ref is None:
            clip = self.get_clip()
            if clip is None:
                return ""
            self._clip_ref = self._doc.register_clip(self._path_data(clip))
        return f" clip-path='url(#{self._clip_ref})'"

    def _path_data(self, shape: Shape) -> str:
        parts = []
        for seg_type, coords in iter_segments(shape):
            if seg_type is SegmentType.CLOSE:
                parts.append("Z")
            else:
                parts.append(seg_type.value + self._geom.join(coords))
        return "d='" + "".join(parts) + "'"

    # Drawing

    def _draw_shape(self, shape: Shape, kind: ShapeKind) -> None:
        g = self._geom
        id_attr, element_id = self._element_id_attr()
        if kind is ShapeKind.LINE:
            head = (
                f"<line{id_attr} x1='{g(shape.x1)}' y1='{g(shape.y1)}'"
                f" x2='{g(shape.x2)}' y2='{g(shape.y2)}'"
            )
            style = self._stroke_style()
            fragment = f"{head} style='{style}'{self._transform_attr()}{self._clip_attr()}/>"
        elif kind in (ShapeKind.RECTANGLE, ShapeKind.ROUND_RECTANGLE, ShapeKind.ELLIPSE):
            head = self._primitive_head(shape, kind, id_attr)
            style = self._stroke_style()
            fragment = f"{head} style='{style};fill:none'{self._transform_attr()}{self._clip_attr()}/>"
        else:
            path = self._path_data(shape)
            style = self._stroke_style()
            fragment = (
                f"<g{id_attr} style='{style};fill:none'{self._transform_attr()}{self._clip_attr()}>"
                f"<path {path}/></g>"
            )
        self._commit(fragment, element_id)

    def _fill_shape(self, shape: Shape, kind: ShapeKind) -> None:
        id_attr, element_id = self._element_id_attr()
        if kind in (ShapeKind.RECTANGLE, ShapeKind.ROUND_RECTANGLE, ShapeKind.ELLIPSE):
            head = self._primitive_head(shape, kind, id_attr)
            style = self._fill_style()
            fragment = f"{head} style='{style}'{self._transform_attr()}{self._clip_attr()}/>"
        else:
            path = self._path_data(shape)
            style = self._fill_style()
            fragment = (
                f"<g{id_attr} style='{style};stroke:none'{self._transform_attr()}{self._clip_attr()}>"
                f"<path {path}/></g>"
            )
        self._commit(fragment, element_id)

    def _primitive_head(self, shape: Shape, kind: ShapeKind, id_attr: str) -> str:
        g = self._geom
        if kind is ShapeKind.ELLIPSE:
            cx, cy = shape.center
            return (
                f"<ellipse{id_attr} cx='{g(cx)}' cy='{g(cy)}'"
                f" rx='{g(shape.width / 2.0)}' ry='{g(shape.height / 2.0)}'"
            )
        head = (
            f"<rect{id_attr} x='{g(shape.x)}' y='{g(shape.y)}'"
            f" width='{g(shape.width)}' height='{g(shape.height)}'"
        )
        if kind is ShapeKind.ROUND_RECTANGLE:
            rx = min(abs(shape.width), abs(shape.arc_width)) / 2.0
            ry = min(abs(shape.height), abs(shape.arc_height)) / 2.0
            head += f" rx='{g(rx)}' ry='{g(ry)}'"
        return head

    def _draw_text(self, text: str, x: float, y: float) -> None:
        id_attr, element_id = self._element_id_attr()
        rendering = self._hints.get(SVGHint.TEXT_RENDERING)
        rendering_attr = f" text-rendering='{rendering.value}'" if rendering is not None else ""
        body = escape_for_xml(text)
        fragment = (
            f"<g{id_attr}{self._transform_attr()}>"
            f"<text x='{self._geom(x)}' y='{self._geom(y)}' style='{self._font_style()}'"
            f"{rendering_attr}{self._clip_attr()}>{body}</text></g>"
        )
        self._commit(fragment, element_id)

    def _draw_image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: float,
        height: float,
        background: Color | None,
    ) -> None:
        g = self._geom
        id_attr, element_id = self._element_id_attr()
        reference = self._hints.get(SVGHint.IMAGE_HANDLING) is ImageHandling.REFERENCE
        href_hint = self._hints.get(SVGHint.IMAGE_HREF)
        if reference:
            href = href_hint or (
                f"{self.config.file_prefix}{len(self._doc.images)}{self.config.file_suffix}"
            )
            href_attr = f" xlink:href='{escape_for_xml(href)}'"
        else:
            href_attr = f" preserveAspectRatio='none' xlink:href='{data_uri(image)}'"
        placement = f" x='{g(x)}' y='{g(y)}' width='{g(width)}' height='{g(height)}'"
        if background is None:
            fragment = (
                f"<image{id_attr}{href_attr}{self._clip_attr()}"
                f"{self._transform_attr()}{placement}/>"
            )
        else:
            saved = self._state.paint
            self._state.paint = background
            try:
                rect = (
                    f"{self._primitive_head(RectShape(x, y, width, height), ShapeKind.RECTANGLE, '')}"
                    f" style='{self._fill_style()}'{self._transform_attr()}{self._clip_attr()}/>"
                )
            finally:
                self._state.paint = saved
            fragment = (
                f"<g{id_attr}>{rect}"
                f"<image{href_attr}{self._clip_attr()}{self._transform_attr()}{placement}/></g>"
            )
        if reference:
            self._doc.images.append(ImageElement(href, image))
            if href_hint is not None:
                self._hints[SVGHint.IMAGE_HREF] = None
        self._commit(fragment, element_id)

    # Output

    def _gradient_element(self, ref: str, paint: Paint) -> str:
        g = self._geom
        if isinstance(paint, RadialGradientPaint):
            (cx, cy), (fx, fy) = paint.center, paint.focus
            head = (
                f"<radialGradient id='{ref}' gradientUnits='userSpaceOnUse'"
                f" cx='{g(cx)}' cy='{g(cy)}' r='{g(paint.radius)}' fx='{g(fx)}' fy='{g(fy)}'"
            )
            tag = "radialGradient"
        else:
            if isinstance(paint, GradientPaint):
                (x1, y1), (x2, y2) = paint.point1, paint.point2
            else:
                (x1, y1), (x2, y2) = paint.start, paint.end
            head = (
                f"<linearGradient id='{ref}' x1='{g(x1)}' y1='{g(y1)}' x2='{g(x2)}' y2='{g(y2)}'"
                " gradientUnits='userSpaceOnUse'"
            )
            tag = "linearGradient"
        spread = paint.cycle_method.value
        if spread != "pad":
            head += f" spreadMethod='{spread}'"
        stops = []
        for fraction, color in zip(paint.fractions, paint.colors):
            stop = f"<stop offset='{g(fraction * 100)}%' stop-color='{color.rgb_string()}'"
            if not color.is_opaque:
                stop += f" stop-opacity='{self._tfm(color.opacity)}'"
            stops.append(stop + "/>")
        return f"{head}>{''.join(stops)}</{tag}>"

    def _defs(self) -> str:
        doc = self._doc
        if not doc.gradients and not doc.clip_paths:
            return ""
        parts = ["<defs>"]
        for ref, paint in doc.gradients.items():
            parts.append(self._gradient_element(ref, paint))
        for index, path_data in enumerate(doc.clip_paths):
            parts.append(
                f"<clipPath id='{doc.defs_key_prefix}{CLIP_KEY_PREFIX}{index}'>"
                f"<path {path_data}/></clipPath>"
            )
        parts.append("</defs>")
        return "".join(parts)

    def get_svg_element(
        self,
        element_id: str | None = None,
        include_dimensions: bool = True,
        view_box: ViewBox | None = None,
        preserve_aspect_ratio: PreserveAspectRatio | None = None,
        meet_or_slice: MeetOrSlice | None = None,
    ) -> str:
        """Return the complete ``<svg>`` element.

        Args:
            element_id: Optional id for the root element.
            include_dimensions: Write the width and height attributes.
            view_box: Optional viewBox.
            preserve_aspect_ratio: Only written together with a view box.
            meet_or_slice: Appended to preserveAspectRatio when given.

        Returns:
            The SVG markup as a string.
        """
        parts = ["<svg"]
        if element_id is not None:
            parts.append(f" id='{escape_for_xml(element_id)}'")
        parts.append(f" xmlns='{SVG_NS}' xmlns:xlink='{XLINK_NS}' xmlns:vs='{VS_NS}'")
        if include_dimensions:
            unit = str(self.units) if self.units is not None else ""
            parts.append(
                f" width='{self._geom(self.width)}{unit}' height='{self._geom(self.height)}{unit}'"
            )
        if view_box is not None:
            parts.append(f" viewBox='{view_box.value_str(self._geom)}'")
            if preserve_aspect_ratio is not None:
                value = str(PreserveAspectRatio(preserve_aspect_ratio))
                if meet_or_slice is not None:
                    value += f" {MeetOrSlice(meet_or_slice)}"
                parts.append(f" preserveAspectRatio='{value}'")
        parts.append(">")
        parts.append(self._defs())
        parts.extend(self._doc.body)
        parts.append("</svg>")
        return "".join(parts)

    def get_svg_document(self) -> str:
        """Return the SVG element with an XML declaration and DOCTYPE."""
        return XML_HEADER + self.get_svg_element() + "\n"

    def get_svg_tree(self, **kwargs: Any) -> Element:
        """Parse the current output into an ElementTree element."""
        return ET.fromstring(self.get_svg_element(**kwargs))

    def get_svg_images(self) -> list[ImageElement]:
        """Images written by reference so far, in drawing order."""
        return list(self._doc.images)

    def get_element_ids(self) -> set[str]:
        return set(self._doc.element_ids)

    def clear(self) -> None:
        """Discard all output while keeping the drawing state."""
        self._check_open("clear")
        doc = self._doc
        doc.body.clear()
        doc.gradients = GradientRegistry(doc.defs_key_prefix)
        doc.clip_paths.clear()
        doc.element_ids.clear()
        doc.images.clear()
        self._clip_ref = None

