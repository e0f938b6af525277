"""Porter-Duff composite rules with a constant alpha."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from vector_surface.exceptions import InvalidArgumentError


class CompositeRule(Enum):
    CLEAR = "clear"
    SRC = "src"
    DST = "dst"
    SRC_OVER = "src_over"
    DST_OVER = "dst_over"
    SRC_IN = "src_in"
    DST_IN = "dst_in"
    SRC_OUT = "src_out"
    DST_OUT = "dst_out"
    SRC_ATOP = "src_atop"
    DST_ATOP = "dst_atop"
    XOR = "xor"


@dataclass(frozen=True)
class AlphaComposite:
    rule: CompositeRule = CompositeRule.SRC_OVER
    alpha: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "rule", CompositeRule(self.rule))
        if not math.isfinite(self.alpha) or not 0.0 <= self.alpha <= 1.0:
            raise InvalidArgumentError(
                "Composite alpha must be in the range 0.0 to 1.0", "alpha", value=self.alpha
            )

    def derive(self, alpha: float) -> AlphaComposite:
        return AlphaComposite(self.rule, alpha)


SRC_OVER = AlphaComposite()
