"""Units and view-box settings for the root <svg> element."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from vector_surface.exceptions import InvalidArgumentError
from vector_surface.formatting import NumberFormatter


class SVGUnits(Enum):
    EM = "em"
    EX = "ex"
    PX = "px"
    PT = "pt"
    PC = "pc"
    CM = "cm"
    MM = "mm"
    IN = "in"

    def __str__(self) -> str:
        return self.value


class PreserveAspectRatio(Enum):
    NONE = "none"
    XMIN_YMIN = "xMinYMin"
    XMID_YMIN = "xMidYMin"
    XMAX_YMIN = "xMaxYMin"
    XMIN_YMID = "xMinYMid"
    XMID_YMID = "xMidYMid"
    XMAX_YMID = "xMaxYMid"
    XMIN_YMAX = "xMinYMax"
    XMID_YMAX = "xMidYMax"
    XMAX_YMAX = "xMaxYMax"

    def __str__(self) -> str:
        return self.value


class MeetOrSlice(Enum):
    MEET = "meet"
    SLICE = "slice"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ViewBox:
    min_x: float
    min_y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        for name in ("min_x", "min_y", "width", "height"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidArgumentError(f"ViewBox.{name} must be finite", name)
        if self.width < 0 or self.height < 0:
            raise InvalidArgumentError("ViewBox size must not be negative", "width")

    def value_str(self, fmt: NumberFormatter) -> str:
        return fmt.join((self.min_x, self.min_y, self.width, self.height), " ")
