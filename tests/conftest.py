"""Pytest configuration and shared fixtures for vector-surface tests."""

from collections.abc import Generator
from pathlib import Path

import pytest
from PIL import Image

from vector_surface.canvas import CanvasSurface
from vector_surface.config import CONFIG_ENV_VAR, Config
from vector_surface.svg import SVGSurface

# Paths
PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def config() -> Config:
    """Return a config with a fixed defs key prefix so ids are predictable."""
    return Config(defs_key_prefix="_")


@pytest.fixture
def svg(config: Config) -> SVGSurface:
    """Return a 200x100 SVG surface using the fixed-prefix config."""
    return SVGSurface(200, 100, config=config)


@pytest.fixture
def canvas(config: Config) -> CanvasSurface:
    """Return a canvas surface named 'c1'."""
    return CanvasSurface("c1", config)


@pytest.fixture
def rgb_image() -> Image.Image:
    """Return a small two-tone RGB image."""
    image = Image.new("RGB", (4, 2), (255, 0, 0))
    image.putpixel((3, 1), (0, 0, 255))
    return image


@pytest.fixture
def isolated_config_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Clear the config env var and move the default config path into tmp_path."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(
        "vector_surface.config.DEFAULT_CONFIG_PATH", tmp_path / "missing" / "config.yaml"
    )
    yield tmp_path
