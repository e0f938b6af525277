"""Wrap canvas output in a standalone HTML page."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from vector_surface.formatting import escape_for_xml

if TYPE_CHECKING:
    from vector_surface.canvas.surface import CanvasSurface

logger = logging.getLogger(__name__)


def canvas_html(surface: CanvasSurface, width: int, height: int, title: str = "") -> str:
    """Return an HTML page whose ``draw()`` replays the surface's script."""
    canvas_id = escape_for_xml(surface.canvas_id)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        f"<title>{escape_for_xml(title)}</title>\n"
        '<meta charset="utf-8">\n'
        '<script type="text/javascript">\n'
        "function draw() {\n"
        f'  var canvas = document.getElementById("{canvas_id}");\n'
        "  if (canvas.getContext) {\n"
        '    var ctx = canvas.getContext("2d");\n'
        f"    {surface.get_script()}\n"
        "  }\n"
        "}\n"
        "</script>\n"
        "</head>\n"
        '<body onload="draw();">\n'
        f'<canvas id="{canvas_id}" width="{int(width)}" height="{int(height)}"></canvas>\n'
        "</body>\n"
        "</html>\n"
    )


def write_html(
    path: str | Path, surface: CanvasSurface, width: int, height: int, title: str = ""
) -> Path:
    path = Path(path)
    path.write_text(canvas_html(surface, width, height, title), encoding="utf-8")
    logger.info("Wrote %s", path)
    return path
