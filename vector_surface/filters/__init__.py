"""Byte-stream filters for page-description streams.

Example:
    >>> from vector_surface.filters import encode_stream
    >>> data, entry = encode_stream(b"q 1 0 0 1 0 0 cm Q", ["flate", "ascii85"])
    >>> entry
    '/Filter [/ASCII85Decode /FlateDecode]'
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from vector_surface.exceptions import InvalidArgumentError
from vector_surface.filters.ascii85 import ASCII85Filter
from vector_surface.filters.base import Filter, FilterType
from vector_surface.filters.flate import FlateFilter

logger = logging.getLogger(__name__)

_FILTERS: dict[FilterType, type[Filter]] = {
    FilterType.ASCII85: ASCII85Filter,
    FilterType.FLATE: FlateFilter,
}


def get_filter(filter_type: FilterType | str) -> Filter:
    """Return a filter instance for a FilterType or its name ("ascii85", "flate")."""
    if isinstance(filter_type, str):
        try:
            filter_type = FilterType(filter_type.lower())
        except ValueError:
            raise InvalidArgumentError(
                f"Unknown filter: {filter_type}", "filter_type", known=[t.value for t in FilterType]
            ) from None
    if not isinstance(filter_type, FilterType):
        raise InvalidArgumentError("'filter_type' must be a FilterType or name", "filter_type")
    return _FILTERS[filter_type]()


def encode_stream(
    data: bytes, filters: Iterable[Filter | FilterType | str]
) -> tuple[bytes, str | None]:
    """Apply ``filters`` in order.

    Returns:
        The encoded bytes and the ``/Filter`` dictionary entry, listing the
        decode filters in the order a reader must apply them (the reverse
        of encoding). The entry is None when no filter was applied.
    """
    decodes = []
    for f in filters:
        if not isinstance(f, Filter):
            f = get_filter(f)
        size = len(data)
        data = f.encode(data)
        logger.debug("%r: %d -> %d bytes", f, size, len(data))
        decodes.append(f.filter_type.decode)
    if not decodes:
        return data, None
    if len(decodes) == 1:
        return data, f"/Filter {decodes[0]}"
    return data, "/Filter [" + " ".join(reversed(decodes)) + "]"


__all__ = [
    "ASCII85Filter",
    "Filter",
    "FilterType",
    "FlateFilter",
    "encode_stream",
    "get_filter",
]
