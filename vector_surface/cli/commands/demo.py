"""Demo command - render a sample drawing with either backend."""

from __future__ import annotations

import math
from pathlib import Path

import click
from PIL import Image
from rich.console import Console

from vector_surface.canvas import CanvasSurface
from vector_surface.canvas import write_html as write_canvas_html
from vector_surface.config import Config
from vector_surface.exceptions import ConfigError, VectorSurfaceError
from vector_surface.fonts import Font
from vector_surface.imaging import load_image
from vector_surface.paint import (
    BLUE,
    DARK_GRAY,
    GREEN,
    LIGHT_GRAY,
    ORANGE,
    RED,
    WHITE,
    Color,
    GradientPaint,
    RadialGradientPaint,
)
from vector_surface.stroke import BasicStroke, LineCap
from vector_surface.surface import Capability, Surface
from vector_surface.svg import SVGSurface, write_html, write_svg

console = Console()

FORMATS = ("svg", "svgz", "html", "canvas")
MIN_SIZE = 100
SAMPLE_VALUES = (
    ("North", 42.0, RED),
    ("South", 73.5, GREEN),
    ("East", 28.0, BLUE),
    ("West", 55.0, ORANGE),
)


def sample_image(size: int = 32) -> Image.Image:
    """Small RGB checkerboard used to exercise image output."""
    image = Image.new("RGB", (size, size), (255, 255, 255))
    cell = max(1, size // 4)
    for y in range(size):
        for x in range(size):
            if (x // cell + y // cell) % 2:
                image.putpixel((x, y), (70, 110, 180))
    return image


def draw_demo(
    surface: Surface, width: float, height: float, image: Image.Image | None = None
) -> None:
    """Draw a small bar chart with a gradient backdrop onto ``surface``.

    ``image`` (default: a generated checkerboard) is placed in the top right
    corner on backends that can draw images.
    """
    surface.set_paint(GradientPaint((0, 0), WHITE, (0, height), LIGHT_GRAY))
    surface.fill_rect(0, 0, width, height)

    margin = 40.0
    plot_w = width - 2 * margin
    plot_h = height - 2 * margin
    top = max(v for _, v, _ in SAMPLE_VALUES)
    bar_w = plot_w / (2 * len(SAMPLE_VALUES))

    surface.set_paint(DARK_GRAY)
    surface.set_stroke(BasicStroke(1.5, cap=LineCap.SQUARE))
    surface.draw_line(margin, height - margin, width - margin, height - margin)
    surface.draw_line(margin, margin, margin, height - margin)

    surface.set_font(Font("SansSerif", 11.0))
    for i, (label, value, color) in enumerate(SAMPLE_VALUES):
        bar_h = plot_h * value / top
        x = margin + bar_w * (2 * i + 0.5)
        y = height - margin - bar_h
        surface.set_paint(color.with_alpha(200))
        surface.fill_rect(x, y, bar_w, bar_h)
        surface.set_paint(DARK_GRAY)
        surface.draw_rect(x, y, bar_w, bar_h)
        surface.draw_string(label, x, height - margin + 16)

    # Clipped highlight in a child surface so the clip does not leak.
    child = surface.create()
    try:
        child.clip_rect(margin, margin, plot_w, plot_h / 2)
        glow = RadialGradientPaint(
            (width / 2, margin),
            plot_h / 2,
            (0.0, 1.0),
            (Color(255, 255, 255, 160), Color(255, 255, 255, 0)),
        )
        child.set_paint(glow)
        child.fill_oval(width / 2 - plot_w / 3, margin - plot_h / 4, 2 * plot_w / 3, plot_h / 2)
    finally:
        child.dispose()

    surface.set_paint(DARK_GRAY)
    surface.set_font(Font("Serif", 14.0, bold=True))
    surface.rotate(-math.pi / 2, 14, height / 2)
    surface.draw_string("Sales", 14, height / 2)
    surface.set_transform(None)

    if surface.supports(Capability.DRAW_IMAGE):
        if image is None:
            image = sample_image()
        surface.draw_image(image, width - margin - 24, margin - 32, 24, 24)


@click.command()
@click.argument("output", type=click.Path(path_type=Path))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(FORMATS),
    default="svg",
    show_default=True,
    help="Output format",
)
@click.option("--width", type=int, default=400, show_default=True, help="Drawing width")
@click.option("--height", type=int, default=300, show_default=True, help="Drawing height")
@click.option("--precision", type=int, help="Decimal places for coordinates (1-10)")
@click.option("--title", default="vector-surface demo", help="Page title for HTML output")
@click.option(
    "--image",
    "image_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Raster image to place in the drawing (SVG formats only)",
)
@click.pass_context
def demo(
    ctx: click.Context,
    output: Path,
    output_format: str,
    width: int,
    height: int,
    precision: int | None,
    title: str,
    image_path: Path | None,
) -> None:
    """Render the sample drawing to OUTPUT."""
    config: Config = (ctx.obj or {}).get("config") or Config()
    config = config.copy()
    if precision is not None:
        config.geometry_precision = precision
    try:
        config.validate()
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {e}")
        raise SystemExit(1) from None
    if width < MIN_SIZE or height < MIN_SIZE:
        console.print(f"[red]Error:[/red] width and height must be at least {MIN_SIZE}")
        raise SystemExit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    try:
        image = load_image(image_path) if image_path is not None else None
        if output_format == "canvas":
            canvas = CanvasSurface("demo", config)
            draw_demo(canvas, width, height)
            write_canvas_html(output, canvas, width, height, title)
        else:
            svg = SVGSurface(width, height, config=config)
            draw_demo(svg, width, height, image)
            element = svg.get_svg_element()
            if output_format == "html":
                write_html(output, title, element)
            else:
                write_svg(output, element, zip=output_format == "svgz")
    except (VectorSurfaceError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from None

    console.print(f"[green]Wrote[/green] {output} ({output_format})")
