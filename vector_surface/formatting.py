"""Locale-independent number formatting and XML text escaping."""

from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_EVEN, Context, Decimal

from vector_surface.exceptions import InvalidArgumentError

MIN_PLACES = 1
MAX_PLACES = 10

_ENTITY_RE = re.compile(r"&(?!(?:#\d+|#x[0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);)")


def check_places(places: int, name: str = "places") -> int:
    """Validate a decimal-places setting (1 to 10 inclusive)."""
    if isinstance(places, bool) or not isinstance(places, int):
        raise InvalidArgumentError(f"{name} must be an integer", name, value=places)
    if not MIN_PLACES <= places <= MAX_PLACES:
        raise InvalidArgumentError(
            f"{name} must be in the range {MIN_PLACES} to {MAX_PLACES}",
            name,
            value=places,
        )
    return places


def format_number(value: float, places: int) -> str:
    """Format a number with at most ``places`` decimals.

    The output always uses '.' as the decimal separator, rounds half-even
    (never truncates), drops trailing zeros and never emits ``-0``.

    Args:
        value: Number to format.
        places: Maximum number of decimal places.

    Returns:
        Compact decimal string, e.g. ``1.0 -> "1"``, ``1234.5678 -> "1234.57"``.

    Raises:
        InvalidArgumentError: If value is NaN or infinite.
    """
    value = float(value)
    if not math.isfinite(value):
        raise InvalidArgumentError("Cannot format a non-finite number", "value", value=value)
    number = Decimal(repr(value))
    precision = max(28, number.adjusted() + places + 2)
    quantum = Decimal(1).scaleb(-places)
    text = format(
        number.quantize(quantum, rounding=ROUND_HALF_EVEN, context=Context(prec=precision)),
        "f",
    )
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


class NumberFormatter:
    """Callable formatter bound to a fixed number of decimal places."""

    def __init__(self, places: int) -> None:
        self.places = check_places(places)

    def __call__(self, value: float) -> str:
        return format_number(value, self.places)

    def join(self, values, sep: str = ",") -> str:
        return sep.join(format_number(v, self.places) for v in values)

    def __repr__(self) -> str:
        return f"NumberFormatter(places={self.places})"


def escape_for_xml(text: str) -> str:
    """Escape text for XML content or attribute values.

    Existing character or entity references (``&amp;``, ``&#169;``) are
    preserved rather than double-escaped.
    """
    text = _ENTITY_RE.sub("&amp;", text)
    return (
        text.replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )
