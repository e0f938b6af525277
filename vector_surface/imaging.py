"""Raster image encoding for embedded images (Pillow)."""

from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from vector_surface.exceptions import ImageEncodingError, InvalidArgumentError

PNG_MIME = "image/png"


def check_image(image: object) -> Image.Image:
    """Ensure ``image`` is a Pillow image with a non-negative size."""
    if image is None:
        raise InvalidArgumentError("Null 'image' argument", "image")
    if not isinstance(image, Image.Image):
        raise InvalidArgumentError(
            f"Expected a PIL image, got {type(image).__name__}", "image"
        )
    return image


def encode_png(image: Image.Image) -> bytes:
    """Encode an image as PNG bytes.

    Raises:
        ImageEncodingError: If Pillow cannot write the image.
    """
    check_image(image)
    if image.mode not in ("1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16"):
        image = image.convert("RGBA")
    buffer = BytesIO()
    try:
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        raise ImageEncodingError(
            f"Failed to encode image as PNG: {e}",
            {"mode": image.mode, "size": image.size},
        ) from e
    return buffer.getvalue()


def png_base64(image: Image.Image) -> str:
    return base64.b64encode(encode_png(image)).decode("ascii")


def data_uri(image: Image.Image) -> str:
    """Return a ``data:image/png;base64,...`` URI for the image."""
    return f"data:{PNG_MIME};base64,{png_base64(image)}"


def load_image(path: str | Path) -> Image.Image:
    """Open an image file and load its pixels."""
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except (OSError, UnidentifiedImageError) as e:
        raise ImageEncodingError(f"Cannot read image {path}: {e}", {"path": str(path)}) from e
