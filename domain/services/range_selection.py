"""Domain service turning a ``Range`` header into a response selection.

Mobile video players are strict about partial-content framing, so the
accepted forms are exactly ``bytes=N-M``, ``bytes=N-`` and ``bytes=-N``.
Anything else is unsatisfiable rather than a request for the whole object.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from domain.exceptions import RangeNotSatisfiableError
from domain.value_objects.byte_range import ByteRange

_SUFFIX_RANGE = re.compile(r"^bytes=-(\d+)$")
_OPEN_RANGE = re.compile(r"^bytes=(\d+)-$")
_BOUNDED_RANGE = re.compile(r"^bytes=(\d+)-(\d+)$")

DEFAULT_CHUNK_CEILING = 1_000_000


class SelectionKind(str, Enum):
    FULL = "full"
    PARTIAL = "partial"


@dataclass(frozen=True)
class RangeSelection:
    kind: SelectionKind
    size_bytes: int
    byte_range: ByteRange | None = None

    @property
    def status_code(self) -> int:
        return 206 if self.kind is SelectionKind.PARTIAL else 200

    @property
    def content_length(self) -> int:
        if self.byte_range is None:
            return self.size_bytes
        return self.byte_range.length


def parse_range_header(range_header: str, size_bytes: int) -> ByteRange:
    """Parse and bounds-check a single-range ``Range`` header value.

    Raises:
        RangeNotSatisfiableError: If the header is not one of the three
            accepted forms or falls outside ``[0, size_bytes)``.

    """
    if match := _SUFFIX_RANGE.match(range_header):
        start = max(0, size_bytes - int(match.group(1)))
        end = size_bytes - 1
    elif match := _OPEN_RANGE.match(range_header):
        start = int(match.group(1))
        end = size_bytes - 1
    elif match := _BOUNDED_RANGE.match(range_header):
        start = int(match.group(1))
        end = min(int(match.group(2)), size_bytes - 1)
    else:
        raise RangeNotSatisfiableError(size_bytes, range_header)

    if start < 0 or start >= size_bytes or end >= size_bytes or start > end:
        raise RangeNotSatisfiableError(size_bytes, range_header)

    return ByteRange(start=start, end=end)


def select_range(
    range_header: str | None,
    size_bytes: int,
    *,
    chunk_ceiling: int = DEFAULT_CHUNK_CEILING,
) -> RangeSelection:
    """Choose between a full and a partial response for an object.

    A served partial range is capped to ``chunk_ceiling`` bytes; clients
    fetch the remainder with follow-up range requests.

    Raises:
        RangeNotSatisfiableError: If a header is present but invalid.

    """
    if range_header is None:
        return RangeSelection(kind=SelectionKind.FULL, size_bytes=size_bytes)

    byte_range = parse_range_header(range_header, size_bytes).capped(chunk_ceiling)
    return RangeSelection(
        kind=SelectionKind.PARTIAL,
        size_bytes=size_bytes,
        byte_range=byte_range,
    )
