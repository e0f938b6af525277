"""Fonts and logical-family mapping."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

from vector_surface.exceptions import InvalidArgumentError


@dataclass(frozen=True)
class Font:
    """Font request: family name, size in user units and style flags.

    ``tracking`` is extra letter spacing as a fraction of the font size.
    """

    family: str = "SansSerif"
    size: float = 12.0
    bold: bool = False
    italic: bool = False
    tracking: float = 0.0

    def __post_init__(self) -> None:
        if not self.family:
            raise InvalidArgumentError("Font family must not be empty", "family")
        if not math.isfinite(self.size) or self.size <= 0:
            raise InvalidArgumentError("Font size must be positive", "size", value=self.size)
        if not math.isfinite(self.tracking):
            raise InvalidArgumentError("Tracking must be finite", "tracking", value=self.tracking)

    def derive(self, **changes) -> Font:
        values = {
            "family": self.family,
            "size": self.size,
            "bold": self.bold,
            "italic": self.italic,
            "tracking": self.tracking,
        }
        values.update(changes)
        return Font(**values)


DEFAULT_FONT = Font()


class FontMapper:
    """Maps a requested family to the name written into the output.

    Unmapped names pass through unchanged.
    """

    def __init__(self, substitutes: Mapping[str, str] | None = None) -> None:
        self._substitutes = dict(substitutes or {})

    def __call__(self, family: str) -> str:
        return self._substitutes.get(family, family)

    def add(self, family: str, replacement: str) -> None:
        self._substitutes[family] = replacement

    def copy(self) -> FontMapper:
        return type(self)(self._substitutes)

    @property
    def substitutes(self) -> dict[str, str]:
        return dict(self._substitutes)


class StandardFontMapper(FontMapper):
    """FontMapper preloaded with the logical family names."""

    LOGICAL_FAMILIES = {
        "Dialog": "sans-serif",
        "DialogInput": "monospace",
        "SansSerif": "sans-serif",
        "Serif": "serif",
        "Monospaced": "monospace",
    }

    def __init__(self, substitutes: Mapping[str, str] | None = None) -> None:
        merged = dict(self.LOGICAL_FAMILIES)
        merged.update(substitutes or {})
        super().__init__(merged)
