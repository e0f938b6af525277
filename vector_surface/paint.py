"""Paint values: solid colors and gradients, plus gradient deduplication.

All paints are frozen dataclasses, so two gradients built separately from
the same points, stops and colors compare (and hash) equal. That structural
value is the key used by GradientRegistry.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from vector_surface.exceptions import InvalidArgumentError, UnsupportedPaintError

logger = logging.getLogger(__name__)

Point = tuple[float, float]


def _point(value: Sequence[float], name: str) -> Point:
    try:
        x, y = (float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(f"{name} must be an (x, y) pair", name) from e
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidArgumentError(f"{name} must be finite", name, value=(x, y))
    return (x, y)


@dataclass(frozen=True)
class Color:
    """8-bit RGBA color."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "alpha"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise InvalidArgumentError(
                    f"Color component '{name}' must be an int in 0..255", name, value=value
                )

    @classmethod
    def from_hex(cls, text: str) -> Color:
        """Parse ``#rgb``, ``#rrggbb`` or ``#rrggbbaa``."""
        value = text.lstrip("#")
        if len(value) == 3:
            value = "".join(ch * 2 for ch in value)
        if len(value) not in (6, 8):
            raise InvalidArgumentError(f"Invalid hex color: {text!r}", "text")
        try:
            parts = [int(value[i : i + 2], 16) for i in range(0, len(value), 2)]
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid hex color: {text!r}", "text") from e
        return cls(*parts)

    @property
    def opacity(self) -> float:
        return self.alpha / 255.0

    @property
    def is_opaque(self) -> bool:
        return self.alpha == 255

    def rgb_string(self) -> str:
        return f"rgb({self.red},{self.green},{self.blue})"

    def with_alpha(self, alpha: int) -> Color:
        return Color(self.red, self.green, self.blue, alpha)


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)
BLUE = Color(0, 0, 255)
YELLOW = Color(255, 255, 0)
GRAY = Color(128, 128, 128)
LIGHT_GRAY = Color(192, 192, 192)
DARK_GRAY = Color(64, 64, 64)
ORANGE = Color(255, 200, 0)
TRANSPARENT = Color(0, 0, 0, 0)


class CycleMethod(Enum):
    """How a gradient continues past its end points (SVG ``spreadMethod``)."""

    NO_CYCLE = "pad"
    REFLECT = "reflect"
    REPEAT = "repeat"


def _check_stops(fractions: tuple[float, ...], colors: tuple[Color, ...]) -> None:
    if len(fractions) != len(colors):
        raise InvalidArgumentError(
            "Gradient fractions and colors must have the same length",
            "fractions",
            fractions=len(fractions),
            colors=len(colors),
        )
    if len(colors) < 2:
        raise InvalidArgumentError("A gradient needs at least two stops", "colors")
    previous = -1.0
    for f in fractions:
        if not 0.0 <= f <= 1.0 or f <= previous:
            raise InvalidArgumentError(
                "Gradient fractions must be strictly increasing within [0, 1]",
                "fractions",
                value=fractions,
            )
        previous = f
    for c in colors:
        if not isinstance(c, Color):
            raise InvalidArgumentError("Gradient colors must be Color values", "colors")


@dataclass(frozen=True)
class GradientPaint:
    """Two-color linear gradient between two points."""

    point1: Point
    color1: Color
    point2: Point
    color2: Color
    cyclic: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "point1", _point(self.point1, "point1"))
        object.__setattr__(self, "point2", _point(self.point2, "point2"))
        _check_stops((0.0, 1.0), (self.color1, self.color2))

    @property
    def fractions(self) -> tuple[float, ...]:
        return (0.0, 1.0)

    @property
    def colors(self) -> tuple[Color, ...]:
        return (self.color1, self.color2)

    @property
    def cycle_method(self) -> CycleMethod:
        return CycleMethod.REFLECT if self.cyclic else CycleMethod.NO_CYCLE


@dataclass(frozen=True)
class LinearGradientPaint:
    """Multi-stop linear gradient."""

    start: Point
    end: Point
    fractions: tuple[float, ...]
    colors: tuple[Color, ...]
    cycle_method: CycleMethod = CycleMethod.NO_CYCLE

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _point(self.start, "start"))
        object.__setattr__(self, "end", _point(self.end, "end"))
        object.__setattr__(self, "fractions", tuple(float(f) for f in self.fractions))
        object.__setattr__(self, "colors", tuple(self.colors))
        _check_stops(self.fractions, self.colors)


@dataclass(frozen=True)
class RadialGradientPaint:
    """Multi-stop radial gradient; the focus defaults to the center."""

    center: Point
    radius: float
    fractions: tuple[float, ...]
    colors: tuple[Color, ...]
    focus: Point | None = None
    cycle_method: CycleMethod = CycleMethod.NO_CYCLE

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _point(self.center, "center"))
        focus = self.center if self.focus is None else self.focus
        object.__setattr__(self, "focus", _point(focus, "focus"))
        if not math.isfinite(self.radius) or self.radius <= 0:
            raise InvalidArgumentError("Radius must be positive", "radius", value=self.radius)
        object.__setattr__(self, "fractions", tuple(float(f) for f in self.fractions))
        object.__setattr__(self, "colors", tuple(self.colors))
        _check_stops(self.fractions, self.colors)


Paint = Union[Color, GradientPaint, LinearGradientPaint, RadialGradientPaint]
Gradient = Union[GradientPaint, LinearGradientPaint, RadialGradientPaint]


class PaintKind(Enum):
    SOLID = "solid"
    GRADIENT = "gp"
    LINEAR = "lgp"
    RADIAL = "rgp"


_PAINT_KINDS: dict[type, PaintKind] = {
    Color: PaintKind.SOLID,
    GradientPaint: PaintKind.GRADIENT,
    LinearGradientPaint: PaintKind.LINEAR,
    RadialGradientPaint: PaintKind.RADIAL,
}


def paint_kind(paint: object, backend: str | None = None) -> PaintKind:
    """Classify a paint.

    Raises:
        InvalidArgumentError: If paint is None.
        UnsupportedPaintError: If paint is not a color or known gradient.
    """
    if paint is None:
        raise InvalidArgumentError("Null 'paint' argument", "paint")
    kind = _PAINT_KINDS.get(type(paint))
    if kind is None:
        raise UnsupportedPaintError(paint, backend)
    return kind


@dataclass
class GradientRegistry:
    """Maps gradient values to the ids of their emitted definitions.

    Ids are ``<prefix><kind><n>`` with a separate zero-based counter per
    gradient kind (``gp``, ``lgp``, ``rgp``).
    """

    prefix: str = ""
    _ids: dict[Gradient, str] = field(default_factory=dict)
    _counts: dict[PaintKind, int] = field(default_factory=dict)

    def register(self, paint: Gradient) -> str:
        """Return the id for ``paint``, allocating one on first use."""
        ref = self._ids.get(paint)
        if ref is not None:
            return ref
        kind = paint_kind(paint)
        if kind is PaintKind.SOLID:
            raise InvalidArgumentError("Solid colors are not registered", "paint")
        count = self._counts.get(kind, 0)
        ref = f"{self.prefix}{kind.value}{count}"
        self._counts[kind] = count + 1
        self._ids[paint] = ref
        logger.debug("Registered gradient %s", ref)
        return ref

    def get(self, paint: Gradient) -> str | None:
        return self._ids.get(paint)

    def items(self) -> Iterator[tuple[str, Gradient]]:
        """Yield (id, gradient) grouped by kind, each group in first-use order."""
        for kind in (PaintKind.GRADIENT, PaintKind.LINEAR, PaintKind.RADIAL):
            for paint, ref in self._ids.items():
                if _PAINT_KINDS[type(paint)] is kind:
                    yield ref, paint

    def __contains__(self, paint: object) -> bool:
        return paint in self._ids

    def __len__(self) -> int:
        return len(self._ids)
