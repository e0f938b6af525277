"""SVG markup backend."""

from vector_surface.svg.hints import ImageHandling, StrokeControl, SVGHint, TextRendering
from vector_surface.svg.io import write_html, write_images, write_svg
from vector_surface.svg.surface import ImageElement, SVGSurface
from vector_surface.svg.units import MeetOrSlice, PreserveAspectRatio, SVGUnits, ViewBox

__all__ = [
    "ImageElement",
    "ImageHandling",
    "MeetOrSlice",
    "PreserveAspectRatio",
    "SVGHint",
    "SVGSurface",
    "StrokeControl",
    "SVGUnits",
    "TextRendering",
    "ViewBox",
    "write_html",
    "write_images",
    "write_svg",
]
