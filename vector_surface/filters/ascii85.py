"""ASCII base-85 stream encoding."""

from __future__ import annotations

import base64

from vector_surface.exceptions import InvalidArgumentError
from vector_surface.filters.base import Filter, FilterType

EOD = b"~>"
CRLF = b"\r\n"


class ASCII85Filter(Filter):
    """Radix-85 encoding as read by /ASCII85Decode.

    All-zero groups are folded to ``z``, lines are broken with CRLF every
    ``width`` characters and the stream ends with the ``~>`` marker. No
    ``<~`` prefix is written.
    """

    filter_type = FilterType.ASCII85

    def __init__(self, width: int = 72) -> None:
        if not isinstance(width, int) or width < 2:
            raise InvalidArgumentError("Line width must be an integer >= 2", "width", value=width)
        self.width = width

    def encode(self, data: bytes) -> bytes:
        if data is None:
            raise InvalidArgumentError("Null 'data' argument", "data")
        encoded = base64.a85encode(bytes(data))
        lines = [encoded[i : i + self.width] for i in range(0, len(encoded), self.width)]
        if not lines or len(lines[-1]) + len(EOD) > self.width:
            lines.append(EOD)
        else:
            lines[-1] += EOD
        return CRLF.join(lines) + CRLF

    def __repr__(self) -> str:
        return f"ASCII85Filter(width={self.width})"
