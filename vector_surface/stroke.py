"""Stroke attributes."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from vector_surface.exceptions import InvalidArgumentError


class LineCap(Enum):
    BUTT = "butt"
    ROUND = "round"
    SQUARE = "square"


class LineJoin(Enum):
    MITER = "miter"
    ROUND = "round"
    BEVEL = "bevel"


@dataclass(frozen=True)
class BasicStroke:
    """Line width, end caps, joins and an optional dash pattern.

    An empty dash tuple means a solid line.
    """

    width: float = 1.0
    cap: LineCap = LineCap.BUTT
    join: LineJoin = LineJoin.MITER
    miter_limit: float = 10.0
    dash: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if not math.isfinite(self.width) or self.width < 0:
            raise InvalidArgumentError("Stroke width must be >= 0", "width", value=self.width)
        if not math.isfinite(self.miter_limit) or self.miter_limit < 1:
            raise InvalidArgumentError(
                "Miter limit must be >= 1", "miter_limit", value=self.miter_limit
            )
        dash = tuple(float(d) for d in self.dash or ())
        if any(not math.isfinite(d) or d < 0 for d in dash):
            raise InvalidArgumentError("Dash lengths must be >= 0", "dash", value=dash)
        if dash and all(d == 0 for d in dash):
            raise InvalidArgumentError("Dash lengths cannot all be zero", "dash", value=dash)
        object.__setattr__(self, "dash", dash)
        object.__setattr__(self, "cap", LineCap(self.cap))
        object.__setattr__(self, "join", LineJoin(self.join))

    @property
    def is_dashed(self) -> bool:
        return bool(self.dash)


DEFAULT_STROKE = BasicStroke()
