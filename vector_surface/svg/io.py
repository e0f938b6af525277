"""Helpers for writing SVG output and referenced images to disk."""

from __future__ import annotations

import gzip
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from vector_surface.exceptions import ImageEncodingError
from vector_surface.formatting import escape_for_xml
from vector_surface.svg.surface import XML_HEADER

if TYPE_CHECKING:
    from vector_surface.svg.surface import SVGSurface

logger = logging.getLogger(__name__)


def write_svg(path: str | Path, svg_element: str, zip: bool = False) -> Path:
    """Write an SVG element to a file as a complete document.

    Args:
        path: Destination file.
        svg_element: Markup returned by SVGSurface.get_svg_element().
        zip: Gzip-compress the output (the ``.svgz`` convention).

    Returns:
        The path written.
    """
    path = Path(path)
    content = (XML_HEADER + svg_element + "\n").encode("utf-8")
    if zip:
        with gzip.open(path, "wb") as f:
            f.write(content)
    else:
        path.write_bytes(content)
    logger.info("Wrote %s (%d bytes uncompressed)", path, len(content))
    return path


def html_page(title: str, svg_element: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        f"<title>{escape_for_xml(title)}</title>\n"
        '<meta charset="utf-8">\n'
        "</head>\n"
        "<body>\n"
        f"{svg_element}\n"
        "</body>\n"
        "</html>\n"
    )


def write_html(path: str | Path, title: str, svg_element: str) -> Path:
    """Write an HTML page with the SVG element inlined in its body."""
    path = Path(path)
    path.write_text(html_page(title, svg_element), encoding="utf-8")
    logger.info("Wrote %s", path)
    return path


def write_images(surface: SVGSurface, directory: str | Path) -> list[Path]:
    """Save every image the surface wrote by reference.

    Each image is written to ``directory / href`` as PNG.

    Raises:
        ImageEncodingError: If an image cannot be saved.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    written = []
    for element in surface.get_svg_images():
        target = directory / element.href
        target.parent.mkdir(parents=True, exist_ok=True)
        try:
            element.image.save(target, format="PNG")
        except (OSError, ValueError) as e:
            raise ImageEncodingError(f"Failed to write {target}: {e}", {"href": element.href}) from e
        written.append(target)
    logger.info("Wrote %d referenced image(s) to %s", len(written), directory)
    return written
