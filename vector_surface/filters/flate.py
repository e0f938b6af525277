"""zlib (Flate) stream compression."""

from __future__ import annotations

import zlib

from vector_surface.exceptions import InvalidArgumentError
from vector_surface.filters.base import Filter, FilterType


class FlateFilter(Filter):
    filter_type = FilterType.FLATE

    def __init__(self, level: int = zlib.Z_DEFAULT_COMPRESSION) -> None:
        if not isinstance(level, int) or not -1 <= level <= 9:
            raise InvalidArgumentError("Compression level must be -1..9", "level", value=level)
        self.level = level

    def encode(self, data: bytes) -> bytes:
        if data is None:
            raise InvalidArgumentError("Null 'data' argument", "data")
        return zlib.compress(bytes(data), self.level)

    def __repr__(self) -> str:
        return f"FlateFilter(level={self.level})"
