"""Filter protocol shared by the page-stream encoders."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum


class FilterType(Enum):
    """Stream filter kinds, keyed by their command-line names."""

    ASCII85 = "ascii85"
    FLATE = "flate"

    @property
    def decode(self) -> str:
        """Name of the matching PDF decode filter."""
        return _DECODE_NAMES[self]


_DECODE_NAMES = {
    FilterType.ASCII85: "/ASCII85Decode",
    FilterType.FLATE: "/FlateDecode",
}


class Filter(ABC):
    """Encodes a byte stream."""

    filter_type: FilterType

    @abstractmethod
    def encode(self, data: bytes) -> bytes: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
