"""Tests for writing SVG documents, HTML pages and referenced images."""

import gzip
from pathlib import Path

from PIL import Image

from vector_surface.config import Config
from vector_surface.svg import SVGSurface, write_html, write_images, write_svg
from vector_surface.svg.io import html_page
from vector_surface.svg.surface import XML_HEADER


class TestWriteSvg:
    """Tests for write_svg."""

    def test_plain(self, svg: SVGSurface, tmp_path: Path) -> None:
        """The file holds the header, the element and a newline."""
        svg.fill_rect(0, 0, 10, 10)
        element = svg.get_svg_element()
        target = write_svg(tmp_path / "out.svg", element)
        assert target.read_text(encoding="utf-8") == XML_HEADER + element + "\n"

    def test_gzip(self, svg: SVGSurface, tmp_path: Path) -> None:
        """zip=True writes a gzip stream of the same document."""
        element = svg.get_svg_element()
        target = write_svg(tmp_path / "out.svgz", element, zip=True)
        with gzip.open(target, "rb") as f:
            assert f.read() == (XML_HEADER + element + "\n").encode("utf-8")


class TestHtml:
    """Tests for the HTML wrapper."""

    def test_page_inlines_element(self) -> None:
        """The element is placed in the body and the title is escaped."""
        page = html_page("R&D", "<svg/>")
        assert page.startswith("<!DOCTYPE html>\n")
        assert "<title>R&amp;D</title>" in page
        assert "<body>\n<svg/>\n</body>" in page

    def test_write_html(self, tmp_path: Path) -> None:
        """write_html writes the page."""
        target = write_html(tmp_path / "page.html", "Chart", "<svg/>")
        assert target.read_text(encoding="utf-8") == html_page("Chart", "<svg/>")


class TestWriteImages:
    """Tests for write_images."""

    def test_referenced_images_saved(self, rgb_image: Image.Image, tmp_path: Path) -> None:
        """Each referenced image is saved under its href."""
        svg = SVGSurface(100, 100, config=Config(defs_key_prefix="_", image_handling="reference"))
        svg.draw_image(rgb_image, 0, 0)
        svg.draw_image(rgb_image.convert("L"), 10, 0)
        written = write_images(svg, tmp_path / "images")
        assert [p.name for p in written] == ["image-0.png", "image-1.png"]
        with Image.open(written[0]) as saved:
            assert saved.size == (4, 2)
            assert saved.getpixel((3, 1)) == (0, 0, 255)

    def test_embedded_images_not_written(
        self, svg: SVGSurface, rgb_image: Image.Image, tmp_path: Path
    ) -> None:
        """Embedded images need no files."""
        svg.draw_image(rgb_image, 0, 0)
        assert write_images(svg, tmp_path) == []
