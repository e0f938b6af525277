"""HTML5 canvas backend."""

from vector_surface.canvas.io import canvas_html, write_html
from vector_surface.canvas.surface import CanvasSurface

__all__ = ["CanvasSurface", "canvas_html", "write_html"]
