"""Tests for SVGSurface markup output.

Covers element output for each primitive, style attributes, transform and
clip attributes, gradient and clip-path definitions, hints, images and the
surface lifecycle.
"""

import base64
from io import BytesIO

import pytest
from PIL import Image

from vector_surface.composite import AlphaComposite, CompositeRule
from vector_surface.config import Config
from vector_surface.exceptions import (
    DuplicateElementIdError,
    InvalidArgumentError,
    SurfaceDisposedError,
    UnsupportedFeatureError,
)
from vector_surface.fonts import Font
from vector_surface.geometry import AffineTransform, RectShape
from vector_surface.paint import BLUE, RED, WHITE, Color, GradientPaint, RadialGradientPaint
from vector_surface.stroke import BasicStroke, LineCap, LineJoin
from vector_surface.surface import Capability
from vector_surface.svg import (
    MeetOrSlice,
    PreserveAspectRatio,
    StrokeControl,
    SVGHint,
    SVGSurface,
    SVGUnits,
    TextRendering,
    ViewBox,
)
from vector_surface.svg.surface import XML_HEADER

SVG_NS = "{http://www.w3.org/2000/svg}"

ROOT_OPEN = (
    "<svg xmlns='http://www.w3.org/2000/svg' xmlns:xlink='http://www.w3.org/1999/xlink'"
    " xmlns:vs='urn:vector-surface' width='200' height='100'>"
)
BLACK_STROKE = "stroke-width:1;stroke:rgb(0,0,0);stroke-opacity:1;stroke-miterlimit:10"


def body(svg: SVGSurface) -> str:
    """Return the markup between the root tags (and after any defs)."""
    element = svg.get_svg_element()
    inner = element[len(ROOT_OPEN) : -len("</svg>")]
    if inner.startswith("<defs>"):
        inner = inner[inner.index("</defs>") + len("</defs>") :]
    return inner


def embedded_image(markup: str) -> Image.Image:
    """Decode the first embedded PNG in ``markup``."""
    start = markup.index("base64,") + len("base64,")
    data = base64.b64decode(markup[start : markup.index("'", start)])
    return Image.open(BytesIO(data))


class TestShapes:
    """Tests for primitive shape output."""

    def test_fill_rect_full_document(self, svg: SVGSurface) -> None:
        """A single filled rectangle with no defs block."""
        svg.set_paint(BLUE)
        svg.fill_rect(10, 20, 30, 40)
        assert svg.get_svg_element() == (
            ROOT_OPEN + "<rect x='10' y='20' width='30' height='40' style='fill:rgb(0,0,255)'/></svg>"
        )

    def test_empty_surface(self, svg: SVGSurface) -> None:
        """An empty surface is an empty root element."""
        assert svg.get_svg_element() == ROOT_OPEN + "</svg>"

    def test_draw_line(self, svg: SVGSurface) -> None:
        """Lines are <line> elements with the full stroke style."""
        svg.draw_line(1, 2, 3, 4)
        assert body(svg) == f"<line x1='1' y1='2' x2='3' y2='4' style='{BLACK_STROKE}'/>"

    def test_draw_rect_has_no_fill(self, svg: SVGSurface) -> None:
        """Stroked rectangles turn the fill off."""
        svg.draw_rect(0, 0, 10, 10)
        assert body(svg) == (
            f"<rect x='0' y='0' width='10' height='10' style='{BLACK_STROKE};fill:none'/>"
        )

    def test_fill_oval(self, svg: SVGSurface) -> None:
        """Ovals are <ellipse> elements centred in their frame."""
        svg.fill_oval(0, 0, 10, 20)
        assert body(svg) == "<ellipse cx='5' cy='10' rx='5' ry='10' style='fill:rgb(0,0,0)'/>"

    def test_fill_round_rect(self, svg: SVGSurface) -> None:
        """Rounded rectangles carry rx/ry of half the arc size."""
        svg.fill_round_rect(0, 0, 10, 10, 4, 6)
        assert body(svg) == (
            "<rect x='0' y='0' width='10' height='10' rx='2' ry='3' style='fill:rgb(0,0,0)'/>"
        )

    def test_draw_polygon_is_path(self, svg: SVGSurface) -> None:
        """Polygons are closed paths wrapped in a styled group."""
        svg.draw_polygon([0, 10, 10], [0, 0, 10])
        assert body(svg) == (
            f"<g style='{BLACK_STROKE};fill:none'><path d='M0,0L10,0L10,10Z'/></g>"
        )

    def test_draw_polyline_is_open(self, svg: SVGSurface) -> None:
        """Polylines are not closed."""
        svg.draw_polyline([0, 5], [0, 5])
        assert "d='M0,0L5,5'" in body(svg)

    def test_polygon_arrays_must_match(self, svg: SVGSurface) -> None:
        """x and y arrays of different lengths are rejected."""
        with pytest.raises(InvalidArgumentError):
            svg.draw_polygon([0, 1], [0])
        assert body(svg) == ""

    def test_fill_arc_is_pie(self, svg: SVGSurface) -> None:
        """A filled arc starts at the centre and closes."""
        svg.fill_arc(0, 0, 10, 10, 0, 90)
        out = body(svg)
        assert out.startswith("<g style='fill:rgb(0,0,0);stroke:none'><path d='M5,5L10,5C")
        assert out.endswith("Z'/></g>")

    def test_fill_empty_rect_writes_nothing(self, svg: SVGSurface) -> None:
        """Filling an empty rectangle is a no-op."""
        svg.fill_rect(0, 0, 0, 10)
        assert body(svg) == ""

    def test_draw_none_is_invalid(self, svg: SVGSurface) -> None:
        """draw(None) raises and writes nothing."""
        with pytest.raises(InvalidArgumentError):
            svg.draw(None)
        assert body(svg) == ""

    def test_precision_applies(self) -> None:
        """Coordinates are rounded to the configured places."""
        svg = SVGSurface(200, 100, config=Config(geometry_precision=1, defs_key_prefix="_"))
        svg.fill_rect(0.25, 1.04, 3.333, 4)
        assert "x='0.2' y='1' width='3.3' height='4'" in body(svg)


class TestStyles:
    """Tests for stroke, fill and composite style output."""

    def test_stroke_attributes(self, svg: SVGSurface) -> None:
        """Non-default caps, joins and dashes are written."""
        svg.set_stroke(
            BasicStroke(2, cap=LineCap.ROUND, join=LineJoin.BEVEL, miter_limit=4, dash=(4, 2))
        )
        svg.draw_line(0, 0, 1, 1)
        assert (
            "style='stroke-width:2;stroke:rgb(0,0,0);stroke-opacity:1;"
            "stroke-linecap:round;stroke-linejoin:bevel;stroke-dasharray:4,2'"
        ) in body(svg)

    @pytest.mark.parametrize(
        ("control", "rendering"),
        [(StrokeControl.NORMALIZE, "crispEdges"), (StrokeControl.PURE, "geometricPrecision")],
    )
    def test_stroke_control_hint(
        self, svg: SVGSurface, control: StrokeControl, rendering: str
    ) -> None:
        """The stroke control hint adds shape-rendering to strokes only."""
        svg.set_hint(SVGHint.STROKE_CONTROL, control)
        svg.draw_line(0, 0, 1, 1)
        svg.fill_rect(0, 0, 1, 1)
        out = body(svg)
        assert out.count(f"shape-rendering:{rendering}") == 1
        assert f"{BLACK_STROKE};shape-rendering:{rendering}'" in out

    def test_stroke_control_default_and_disabled(self, svg: SVGSurface) -> None:
        """DEFAULT writes nothing; the check can be switched off."""
        svg.set_hint(SVGHint.STROKE_CONTROL, StrokeControl.DEFAULT)
        svg.draw_line(0, 0, 1, 1)
        svg.set_hint(SVGHint.STROKE_CONTROL, "normalize")
        svg.check_stroke_control_hint = False
        svg.draw_line(0, 0, 1, 1)
        assert "shape-rendering" not in body(svg)

    def test_zero_width_stroke_uses_config(self, svg: SVGSurface) -> None:
        """A zero-width stroke is drawn with the configured thin width."""
        svg.set_stroke(BasicStroke(0))
        svg.draw_line(0, 0, 1, 1)
        assert "stroke-width:0.1;" in body(svg)

    def test_translucent_color(self, svg: SVGSurface) -> None:
        """Color alpha becomes fill-opacity."""
        svg.set_paint(Color(255, 0, 0, 128))
        svg.fill_rect(0, 0, 1, 1)
        assert "style='fill:rgb(255,0,0);fill-opacity:0.501961'" in body(svg)

    def test_composite_alpha(self, svg: SVGSurface) -> None:
        """Composite alpha multiplies into the opacity."""
        svg.set_composite(AlphaComposite(CompositeRule.SRC_OVER, 0.5))
        svg.fill_rect(0, 0, 1, 1)
        assert "fill-opacity:0.5'" in body(svg)

    def test_only_src_over_supported(self, svg: SVGSurface) -> None:
        """Other composite rules are refused and the state is unchanged."""
        with pytest.raises(UnsupportedFeatureError):
            svg.set_composite(AlphaComposite(CompositeRule.XOR))
        assert svg.get_composite().rule is CompositeRule.SRC_OVER

    def test_set_color_updates_paint(self, svg: SVGSurface) -> None:
        """set_color sets both color and paint."""
        svg.set_color(RED)
        assert svg.get_paint() == RED
        assert svg.get_color() == RED

    def test_gradient_paint_keeps_last_color(self, svg: SVGSurface) -> None:
        """A gradient paint does not change the current color."""
        svg.set_color(RED)
        svg.set_paint(GradientPaint((0, 0), RED, (1, 0), BLUE))
        assert svg.get_color() == RED

    def test_set_paint_none_is_invalid(self, svg: SVGSurface) -> None:
        """set_paint(None) raises."""
        with pytest.raises(InvalidArgumentError):
            svg.set_paint(None)


class TestDefinitions:
    """Tests for gradient and clip-path definitions."""

    def test_gradient_defined_once(self, svg: SVGSurface) -> None:
        """Equal gradients share one definition referenced by both elements."""
        svg.set_paint(GradientPaint((0, 0), RED, (10, 0), BLUE))
        svg.fill_rect(0, 0, 10, 10)
        svg.set_paint(GradientPaint((0.0, 0.0), RED, (10.0, 0.0), BLUE))
        svg.fill_rect(10, 0, 10, 10)
        element = svg.get_svg_element()
        assert element.count("<linearGradient") == 1
        assert element.count("fill:url(#_gp0)") == 2
        assert (
            "<defs><linearGradient id='_gp0' x1='0' y1='0' x2='10' y2='0'"
            " gradientUnits='userSpaceOnUse'><stop offset='0%' stop-color='rgb(255,0,0)'/>"
            "<stop offset='100%' stop-color='rgb(0,0,255)'/></linearGradient></defs>"
        ) in element

    def test_cyclic_gradient_reflects(self, svg: SVGSurface) -> None:
        """A cyclic two-color gradient uses the reflect spread method."""
        svg.set_paint(GradientPaint((0, 0), RED, (10, 0), BLUE, cyclic=True))
        svg.fill_rect(0, 0, 10, 10)
        assert "spreadMethod='reflect'" in svg.get_svg_element()

    def test_radial_gradient(self, svg: SVGSurface) -> None:
        """Radial gradients carry centre, radius and focus."""
        svg.set_paint(RadialGradientPaint((5, 5), 10, (0, 1), (RED, Color(0, 0, 255, 0))))
        svg.fill_oval(0, 0, 10, 10)
        element = svg.get_svg_element()
        assert "<radialGradient id='_rgp0' gradientUnits='userSpaceOnUse'" in element
        assert "cx='5' cy='5' r='10' fx='5' fy='5'" in element
        assert "stop-opacity='0'" in element

    def test_gradient_unused_until_drawn(self, svg: SVGSurface) -> None:
        """Setting a gradient alone does not create a definition."""
        svg.set_paint(GradientPaint((0, 0), RED, (10, 0), BLUE))
        assert "<defs>" not in svg.get_svg_element()

    def test_clip_path_definition(self, svg: SVGSurface) -> None:
        """A clipped element references a clipPath in the defs."""
        svg.set_clip(RectShape(10, 11, 12, 13))
        svg.fill_rect(0, 0, 50, 50)
        element = svg.get_svg_element()
        assert (
            "<clipPath id='_clip-0'><path d='M10,11L22,11L22,24L10,24L10,11Z'/></clipPath>"
        ) in element
        assert "clip-path='url(#_clip-0)'" in element

    def test_clip_path_reused(self, svg: SVGSurface) -> None:
        """The same clip in the same space is defined once."""
        svg.clip_rect(0, 0, 5, 5)
        svg.fill_rect(0, 0, 10, 10)
        svg.draw_line(0, 0, 10, 10)
        assert svg.get_svg_element().count("<clipPath") == 1

    def test_transform_change_registers_new_clip(self, svg: SVGSurface) -> None:
        """After a transform change the clip is written in the new user space."""
        svg.clip_rect(0, 0, 5, 5)
        svg.fill_rect(0, 0, 10, 10)
        svg.translate(1, 1)
        svg.fill_rect(0, 0, 10, 10)
        element = svg.get_svg_element()
        assert "<clipPath id='_clip-1'><path d='M-1,-1L4,-1L4,4L-1,4L-1,-1Z'/>" in element


class TestTransformAttribute:
    """Tests for the transform attribute."""

    def test_identity_has_no_transform(self, svg: SVGSurface) -> None:
        """No transform attribute under the identity."""
        svg.fill_rect(0, 0, 1, 1)
        assert "transform" not in body(svg)

    def test_matrix_written(self, svg: SVGSurface) -> None:
        """A non-identity transform is written as matrix(a,b,c,d,e,f)."""
        svg.translate(10, 20)
        svg.scale(2, 2)
        svg.fill_rect(0, 0, 1, 1)
        assert "transform='matrix(2,0,0,2,10,20)'" in body(svg)


class TestText:
    """Tests for text output."""

    def test_draw_string(self, svg: SVGSurface) -> None:
        """Text is escaped and styled with the mapped font family."""
        svg.draw_string("A<B", 5, 10)
        assert body(svg) == (
            "<g><text x='5' y='10' style='fill: rgb(0,0,0); fill-opacity: 1;"
            " font-family: sans-serif; font-size: 12px;'>A&lt;B</text></g>"
        )

    def test_bold_italic_font(self, svg: SVGSurface) -> None:
        """Bold and italic flags add font-weight and font-style."""
        svg.set_font(Font("Times New Roman", 14, bold=True, italic=True))
        svg.draw_string("x", 0, 0)
        out = body(svg)
        assert 'font-family: &quot;Times New Roman&quot;;' in out
        assert "font-weight: bold; font-style: italic;" in out

    def test_font_substitution(self) -> None:
        """Configured substitutes replace the requested family."""
        svg = SVGSurface(
            200, 100, config=Config(defs_key_prefix="_", font_substitutes={"Helvetica": "Arial"})
        )
        svg.set_font(Font("Helvetica", 10))
        svg.draw_string("x", 0, 0)
        assert "font-family: Arial;" in body(svg)

    def test_font_size_units(self, svg: SVGSurface) -> None:
        """Font sizes are written in the chosen units."""
        svg.font_size_units = SVGUnits.PT
        svg.draw_string("x", 0, 0)
        assert "font-size: 12pt;" in body(svg)
        assert svg.create().font_size_units is SVGUnits.PT

    def test_font_size_units_from_config(self) -> None:
        """The configured font size units are the default."""
        svg = SVGSurface(200, 100, config=Config(defs_key_prefix="_", font_size_units="em"))
        svg.set_font(Font("Serif", 2))
        svg.draw_string("x", 0, 0)
        assert "font-size: 2em;" in body(svg)

    def test_unknown_font_size_units(self, svg: SVGSurface) -> None:
        """Unknown unit names are rejected."""
        with pytest.raises(InvalidArgumentError):
            svg.font_size_units = "furlong"
        assert svg.font_size_units is SVGUnits.PX

    def test_empty_string_is_noop(self, svg: SVGSurface) -> None:
        """An empty string writes nothing."""
        svg.draw_string("", 0, 0)
        assert body(svg) == ""

    def test_none_string_is_invalid(self, svg: SVGSurface) -> None:
        """None text raises."""
        with pytest.raises(InvalidArgumentError):
            svg.draw_string(None, 0, 0)

    def test_text_rendering_hint(self, svg: SVGSurface) -> None:
        """The text-rendering hint is written on text elements."""
        svg.set_hint(SVGHint.TEXT_RENDERING, TextRendering.GEOMETRIC_PRECISION)
        svg.draw_string("x", 0, 0)
        assert "text-rendering='geometricPrecision'" in body(svg)


class TestHints:
    """Tests for element ids, groups and titles."""

    def test_element_id_applies_once(self, svg: SVGSurface) -> None:
        """ELEMENT_ID is used by the next element only."""
        svg.set_hint(SVGHint.ELEMENT_ID, "r1")
        svg.fill_rect(0, 0, 1, 1)
        svg.fill_rect(1, 1, 1, 1)
        out = body(svg)
        assert out.count("id='r1'") == 1
        assert svg.get_hint(SVGHint.ELEMENT_ID) is None
        assert svg.get_element_ids() == {"r1"}

    def test_duplicate_element_id(self, svg: SVGSurface) -> None:
        """Reusing an id raises and writes nothing."""
        svg.set_hint(SVGHint.ELEMENT_ID, "r1")
        svg.fill_rect(0, 0, 1, 1)
        before = body(svg)
        svg.set_hint(SVGHint.ELEMENT_ID, "r1")
        with pytest.raises(DuplicateElementIdError):
            svg.fill_rect(0, 0, 1, 1)
        assert body(svg) == before

    def test_groups_with_ref(self, svg: SVGSurface) -> None:
        """Groups carry an id and a namespaced ref attribute."""
        svg.begin_group("bars", ref="series-1")
        svg.fill_rect(0, 0, 1, 1)
        svg.end_group()
        assert body(svg).startswith("<g id='bars' vs:ref='series-1'><rect")
        root = svg.get_svg_tree()
        group = root.find(f"{SVG_NS}g")
        assert group.get("id") == "bars"
        assert group.get("{urn:vector-surface}ref") == "series-1"

    def test_group_hints(self, svg: SVGSurface) -> None:
        """BEGIN_GROUP / END_GROUP hints write group markup."""
        svg.set_hint(SVGHint.BEGIN_GROUP, {"id": "g1", "class": "axis"})
        svg.set_hint(SVGHint.END_GROUP, None)
        assert body(svg) == "<g id='g1' class='axis'></g>"

    def test_title(self, svg: SVGSurface) -> None:
        """Titles are escaped."""
        svg.add_title("A & B")
        assert body(svg) == "<title>A &amp; B</title>"


class TestImages:
    """Tests for raster image output."""

    def test_embedded_image(self, svg: SVGSurface, rgb_image: Image.Image) -> None:
        """Images are embedded as PNG data URIs by default."""
        assert svg.supports(Capability.DRAW_IMAGE)
        assert svg.draw_image(rgb_image, 1, 2) is True
        out = body(svg)
        assert out.startswith("<image preserveAspectRatio='none' xlink:href='data:image/png;base64,")
        assert out.endswith("x='1' y='2' width='4' height='2'/>")

    def test_referenced_image(self, rgb_image: Image.Image) -> None:
        """Reference mode writes an href and records the image."""
        svg = SVGSurface(200, 100, config=Config(defs_key_prefix="_", image_handling="reference"))
        svg.draw_image(rgb_image, 0, 0, 8, 4)
        svg.set_hint(SVGHint.IMAGE_HREF, "logo.png")
        svg.draw_image(rgb_image, 0, 0)
        out = body(svg)
        assert "xlink:href='image-0.png'" in out
        assert "xlink:href='logo.png'" in out
        assert [img.href for img in svg.get_svg_images()] == ["image-0.png", "logo.png"]

    def test_image_background(self, svg: SVGSurface, rgb_image: Image.Image) -> None:
        """A background color fills the target rectangle first."""
        svg.draw_image(rgb_image, 0, 0, background=WHITE)
        out = body(svg)
        assert out.startswith("<g><rect x='0' y='0' width='4' height='2' style='fill:rgb(255,255,255)'/>")
        assert svg.get_paint() != WHITE

    def test_zero_size_image_skipped(self, svg: SVGSurface, rgb_image: Image.Image) -> None:
        """A zero-size target draws nothing and returns False."""
        assert svg.draw_image(rgb_image, 0, 0, 0, 10) is False
        assert body(svg) == ""

    def test_none_image_is_invalid(self, svg: SVGSurface) -> None:
        """None images raise."""
        with pytest.raises(InvalidArgumentError):
            svg.draw_image(None, 0, 0)

    def test_image_region(self, svg: SVGSurface, rgb_image: Image.Image) -> None:
        """Only the source region is embedded, scaled to the destination box."""
        assert svg.draw_image_region(rgb_image, 10, 20, 12, 22, 3, 1, 4, 2) is True
        out = body(svg)
        assert out.endswith("x='10' y='20' width='2' height='2'/>")
        embedded = embedded_image(out)
        assert embedded.size == (2, 2)
        assert embedded.convert("RGB").getpixel((1, 1)) == (0, 0, 255)

    def test_empty_image_region_skipped(self, svg: SVGSurface, rgb_image: Image.Image) -> None:
        """An empty source or destination box draws nothing."""
        assert svg.draw_image_region(rgb_image, 0, 0, 2, 2, 1, 1, 1, 2) is False
        assert svg.draw_image_region(rgb_image, 5, 0, 2, 2, 0, 0, 1, 1) is False
        assert body(svg) == ""

    def test_image_region_needs_integers(self, svg: SVGSurface, rgb_image: Image.Image) -> None:
        """Region corners are pixel positions."""
        with pytest.raises(InvalidArgumentError):
            svg.draw_image_region(rgb_image, 0, 0, 2, 2, 0, 0, 1.5, 1)

    def test_image_with_transform(self, svg: SVGSurface, rgb_image: Image.Image) -> None:
        """The transform applies to this image only."""
        svg.translate(1, 1)
        assert svg.draw_image_transformed(rgb_image, AffineTransform.scaling(2, 3)) is True
        assert svg.get_transform() == AffineTransform.translation(1, 1)
        assert body(svg).endswith(
            "transform='matrix(2,0,0,3,1,1)' x='0' y='0' width='4' height='2'/>"
        )

    def test_image_with_no_transform(self, svg: SVGSurface, rgb_image: Image.Image) -> None:
        """None draws at the origin with the current transform."""
        svg.draw_image_transformed(rgb_image, None)
        assert body(svg).endswith("x='0' y='0' width='4' height='2'/>")
        assert "transform=" not in body(svg)


class TestBackground:
    """Tests for clear_rect."""

    def test_clear_rect_uses_background(self, svg: SVGSurface) -> None:
        """clear_rect fills with the background and restores the paint."""
        svg.set_paint(RED)
        svg.set_background(WHITE)
        svg.clear_rect(0, 0, 5, 5)
        assert body(svg) == "<rect x='0' y='0' width='5' height='5' style='fill:rgb(255,255,255)'/>"
        assert svg.get_paint() == RED

    def test_clear_rect_without_background(self, svg: SVGSurface) -> None:
        """Without a background nothing is written."""
        svg.clear_rect(0, 0, 5, 5)
        assert body(svg) == ""


class TestRootElement:
    """Tests for the root element and document output."""

    def test_units(self, config: Config) -> None:
        """Units are appended to width and height."""
        svg = SVGSurface(200, 100, units="px", config=config)
        assert "width='200px' height='100px'" in svg.get_svg_element()

    def test_view_box(self, svg: SVGSurface) -> None:
        """viewBox and preserveAspectRatio are written together."""
        element = svg.get_svg_element(
            element_id="chart",
            view_box=ViewBox(0, 0, 200, 100),
            preserve_aspect_ratio=PreserveAspectRatio.XMID_YMID,
            meet_or_slice=MeetOrSlice.MEET,
        )
        assert element.startswith("<svg id='chart' ")
        assert "viewBox='0 0 200 100' preserveAspectRatio='xMidYMid meet'" in element

    def test_without_dimensions(self, svg: SVGSurface) -> None:
        """include_dimensions=False omits width and height."""
        assert "width=" not in svg.get_svg_element(include_dimensions=False)

    def test_document_header(self, svg: SVGSurface) -> None:
        """The document form starts with the XML declaration and DOCTYPE."""
        doc = svg.get_svg_document()
        assert doc.startswith(XML_HEADER)
        assert doc.endswith("</svg>\n")

    def test_tree_parses(self, svg: SVGSurface) -> None:
        """Output parses as XML in the SVG namespace."""
        svg.set_paint(GradientPaint((0, 0), RED, (10, 0), BLUE))
        svg.clip_rect(0, 0, 5, 5)
        svg.fill_oval(0, 0, 10, 10)
        svg.draw_string("a & b", 1, 1)
        root = svg.get_svg_tree()
        assert root.tag == f"{SVG_NS}svg"
        assert root.find(f"{SVG_NS}defs/{SVG_NS}clipPath") is not None
        assert root.find(f"{SVG_NS}g/{SVG_NS}text").text == "a & b"

    @pytest.mark.parametrize("size", [(0, 100), (100, -1), (float("nan"), 10)])
    def test_invalid_size(self, size) -> None:
        """Width and height must be positive finite numbers."""
        with pytest.raises(InvalidArgumentError):
            SVGSurface(*size)

    def test_clear(self, svg: SVGSurface) -> None:
        """clear() drops output and definitions."""
        svg.set_paint(GradientPaint((0, 0), RED, (10, 0), BLUE))
        svg.fill_rect(0, 0, 1, 1)
        svg.clear()
        assert svg.get_svg_element() == ROOT_OPEN + "</svg>"


class TestLifecycle:
    """Tests for child surfaces and dispose."""

    def test_child_shares_output(self, svg: SVGSurface) -> None:
        """A child writes into the parent's document."""
        child = svg.create()
        child.set_paint(BLUE)
        child.fill_rect(0, 0, 1, 1)
        child.dispose()
        assert "fill:rgb(0,0,255)" in body(svg)
        assert svg.get_paint() != BLUE

    def test_child_copies_state(self, svg: SVGSurface) -> None:
        """The child starts from the parent's state."""
        svg.translate(5, 5)
        child = svg.create()
        assert child.get_transform() == svg.get_transform()
        child.translate(1, 1)
        assert svg.get_transform().translate_x == 5

    def test_child_does_not_inherit_next_element_hints(self, svg: SVGSurface) -> None:
        """ELEMENT_ID and IMAGE_HREF stay with the surface they were set on."""
        svg.set_hint(SVGHint.ELEMENT_ID, "a")
        svg.set_hint(SVGHint.IMAGE_HREF, "logo.png")
        svg.set_hint(SVGHint.TEXT_RENDERING, TextRendering.AUTO)
        child = svg.create()
        assert child.get_hint(SVGHint.ELEMENT_ID) is None
        assert child.get_hint(SVGHint.IMAGE_HREF) is None
        assert child.get_hint(SVGHint.TEXT_RENDERING) is TextRendering.AUTO
        child.fill_rect(0, 0, 1, 1)
        child.dispose()
        svg.fill_rect(2, 2, 1, 1)
        assert svg.get_element_ids() == {"a"}
        assert body(svg).count("id='a'") == 1

    def test_interleaved_parent_and_child(self, svg: SVGSurface) -> None:
        """Parent changes made while a child is open do not reach the child."""
        child = svg.create()
        child.set_paint(RED)
        child.fill_rect(0, 0, 1, 1)
        svg.set_paint(BLUE)
        svg.translate(100, 100)
        svg.fill_rect(5, 5, 1, 1)
        child.fill_rect(9, 9, 1, 1)
        assert body(svg).endswith(
            "<rect x='9' y='9' width='1' height='1' style='fill:rgb(255,0,0)'/>"
        )
        assert child.get_transform().is_identity

    def test_disposed_surface_refuses_calls(self, svg: SVGSurface) -> None:
        """Drawing after dispose raises; a second dispose is harmless."""
        svg.dispose()
        svg.dispose()
        assert svg.is_disposed
        with pytest.raises(SurfaceDisposedError):
            svg.fill_rect(0, 0, 1, 1)

    @pytest.mark.parametrize(
        "call",
        [
            lambda s: s.fill_polygon([0, 1, 1], [0, 0, 1]),
            lambda s: s.copy_area(0, 0, 1, 1, 2, 2),
            lambda s: s.set_xor_mode(RED),
        ],
    )
    def test_unsupported_operations(self, svg: SVGSurface, call) -> None:
        """Operations outside the backend's reach raise UnsupportedFeatureError."""
        with pytest.raises(UnsupportedFeatureError):
            call(svg)
