"""vector-surface: retarget 2D drawing calls to SVG markup and HTML5 canvas.

This library provides a drawing surface that tracks drawing state and
translates each call into output for a downstream renderer:
- SVG markup with deduplicated gradient and clip-path definitions
- HTML5 canvas JavaScript with minimal style updates
- Affine transforms, clip regions and a shared segment protocol for shapes
- ASCII85 and Flate filters for page-description streams

Example:
    >>> from vector_surface import SVGSurface, BLUE
    >>> svg = SVGSurface(200, 100)
    >>> svg.set_paint(BLUE)
    >>> svg.fill_rect(10, 20, 30, 40)
    >>> print(svg.get_svg_element())  # doctest: +ELLIPSIS
    <svg ...><rect x='10' y='20' width='30' height='40' style='fill:rgb(0,0,255)'/></svg>
"""

from vector_surface.canvas import CanvasSurface
from vector_surface.composite import AlphaComposite, CompositeRule
from vector_surface.config import Config
from vector_surface.exceptions import (
    ConfigError,
    DuplicateElementIdError,
    ImageEncodingError,
    InvalidArgumentError,
    NonInvertibleTransformError,
    SurfaceDisposedError,
    UnsupportedFeatureError,
    UnsupportedPaintError,
    VectorSurfaceError,
)
from vector_surface.filters import FilterType, encode_stream, get_filter
from vector_surface.fonts import Font, FontMapper, StandardFontMapper
from vector_surface.geometry import (
    AffineTransform,
    ArcShape,
    ArcType,
    EllipseShape,
    LineShape,
    RectShape,
    RoundRectShape,
)
from vector_surface.paint import (
    BLACK,
    BLUE,
    GRAY,
    GREEN,
    RED,
    WHITE,
    Color,
    CycleMethod,
    GradientPaint,
    LinearGradientPaint,
    RadialGradientPaint,
)
from vector_surface.stroke import BasicStroke, LineCap, LineJoin
from vector_surface.surface import Capability, Surface
from vector_surface.svg import SVGHint, SVGSurface, SVGUnits, ViewBox

__version__ = "0.1.0"

__all__ = [
    # Surfaces
    "Surface",
    "SVGSurface",
    "CanvasSurface",
    "Capability",
    "Config",
    # SVG options
    "SVGHint",
    "SVGUnits",
    "ViewBox",
    # Drawing state
    "AlphaComposite",
    "CompositeRule",
    "BasicStroke",
    "LineCap",
    "LineJoin",
    "Font",
    "FontMapper",
    "StandardFontMapper",
    # Paint
    "Color",
    "CycleMethod",
    "GradientPaint",
    "LinearGradientPaint",
    "RadialGradientPaint",
    "BLACK",
    "BLUE",
    "GRAY",
    "GREEN",
    "RED",
    "WHITE",
    # Geometry
    "AffineTransform",
    "ArcShape",
    "ArcType",
    "EllipseShape",
    "LineShape",
    "RectShape",
    "RoundRectShape",
    # Stream filters
    "FilterType",
    "encode_stream",
    "get_filter",
    # Exceptions
    "VectorSurfaceError",
    "InvalidArgumentError",
    "UnsupportedFeatureError",
    "UnsupportedPaintError",
    "NonInvertibleTransformError",
    "ImageEncodingError",
    "DuplicateElementIdError",
    "SurfaceDisposedError",
    "ConfigError",
    # Metadata
    "__version__",
]
