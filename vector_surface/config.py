"""Configuration for vector-surface.

Settings can be given directly, or loaded from a YAML file::

    geometry_precision: 2
    transform_precision: 6
    image_handling: embed        # or: reference
    defs_key_prefix: chart1_
    units: px
    font_size_units: px
    zero_stroke_width: 0.1
    file_prefix: image-
    file_suffix: .png
    font_substitutes:
      Helvetica: Arial
    log_level: WARNING
"""

from __future__ import annotations

import copy
import os
import time
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from vector_surface.exceptions import ConfigError
from vector_surface.formatting import MAX_PLACES, MIN_PLACES

CONFIG_ENV_VAR = "VECTOR_SURFACE_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "vector-surface" / "config.yaml"

IMAGE_HANDLING_MODES = ("embed", "reference")
UNIT_NAMES = ("em", "ex", "px", "pt", "pc", "cm", "mm", "in")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def new_defs_key_prefix() -> str:
    """Return a prefix unique to this moment, e.g. ``_1715000000000000000``."""
    return f"_{time.time_ns()}"


@dataclass
class Config:
    """Output settings shared by the SVG and canvas surfaces."""

    geometry_precision: int = 2
    transform_precision: int = 6
    image_handling: str = "embed"
    defs_key_prefix: str | None = None
    units: str | None = None
    font_size_units: str = "px"
    zero_stroke_width: float = 0.1
    font_substitutes: dict[str, str] = field(default_factory=dict)
    file_prefix: str = "image-"
    file_suffix: str = ".png"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check every field.

        Raises:
            ConfigError: Naming the first invalid field.
        """
        for name in ("geometry_precision", "transform_precision"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name}: expected int, got {type(value).__name__}")
            if not MIN_PLACES <= value <= MAX_PLACES:
                raise ConfigError(
                    f"{name}: must be between {MIN_PLACES} and {MAX_PLACES}, got {value}"
                )
        if self.image_handling not in IMAGE_HANDLING_MODES:
            raise ConfigError(
                f"image_handling: expected one of {', '.join(IMAGE_HANDLING_MODES)}, "
                f"got {self.image_handling!r}"
            )
        if self.units is not None and self.units not in UNIT_NAMES:
            raise ConfigError(f"units: unknown unit {self.units!r}")
        if self.font_size_units not in UNIT_NAMES:
            raise ConfigError(f"font_size_units: unknown unit {self.font_size_units!r}")
        if self.defs_key_prefix is not None and not isinstance(self.defs_key_prefix, str):
            raise ConfigError(
                f"defs_key_prefix: expected string, got {type(self.defs_key_prefix).__name__}"
            )
        if (
            isinstance(self.zero_stroke_width, bool)
            or not isinstance(self.zero_stroke_width, (int, float))
            or self.zero_stroke_width <= 0
        ):
            raise ConfigError(
                f"zero_stroke_width: expected positive number, got {self.zero_stroke_width!r}"
            )
        if not isinstance(self.font_substitutes, dict):
            raise ConfigError(
                f"font_substitutes: expected mapping, got {type(self.font_substitutes).__name__}"
            )
        for key, value in self.font_substitutes.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ConfigError(f"font_substitutes[{key!r}]: expected string, got {value!r}")
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(f"log_level: unknown level {self.log_level!r}")
        self.log_level = str(self.log_level).upper()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def load(cls, path: str | Path | None = None) -> Config:
        """Load configuration from YAML.

        Lookup order: the explicit ``path``, the ``VECTOR_SURFACE_CONFIG``
        environment variable, then ``~/.config/vector-surface/config.yaml``.
        A missing default file yields the defaults.

        Raises:
            FileNotFoundError: If an explicitly requested file is missing.
            ConfigError: If the file is not valid YAML or holds bad values.
        """
        explicit = path is not None or bool(os.environ.get(CONFIG_ENV_VAR))
        config_path = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
        if not config_path.is_file():
            if explicit:
                raise FileNotFoundError(f"Config file not found: {config_path}")
            return cls()
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}") from e
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path}: top level must be a mapping")
        return cls.from_dict(data)

    def copy(self) -> Config:
        """Return a value copy that shares no mutable state."""
        return copy.deepcopy(self)

    def resolved_defs_key_prefix(self) -> str:
        return self.defs_key_prefix if self.defs_key_prefix is not None else new_defs_key_prefix()
