"""
=============================================================================
BYTE RANGES (RFC 7233)
=============================================================================

Turns a `Range` request header and a resource size into the byte window a
reply serves.

=============================================================================
HOW A RANGE REQUEST FLOWS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      RANGE NEGOTIATION                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Request                        Response                           │
    │   ───────                        ────────                           │
    │                                                                      │
    │   (no Range)               →     200 OK                             │
    │                                  accept-ranges: bytes               │
    │                                  content-length: 1000               │
    │                                                                      │
    │   Range: bytes=0-499       →     206 Partial Content                │
    │                                  accept-ranges: bytes               │
    │                                  content-range: bytes 0-499/1000    │
    │                                  content-length: 500                │
    │                                                                      │
    │   Range: bytes=500-        →     206, bytes 500-999/1000            │
    │                                                                      │
    │   Range: bytes=2000-       →     416 Range Not Satisfiable          │
    │                                  content-range: bytes */1000        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
INCLUSIVE VS EXCLUSIVE
=============================================================================

The header is INCLUSIVE, the window is EXCLUSIVE:

    Range: bytes=0-499       last byte sent is 499
    RangeWindow(0, 500, …)   end is one past the last byte

    content-range: bytes {start}-{end - 1}/{total}
    content-length: {end - start}

The conversion happens exactly once, in parse_range().

=============================================================================
SUPPORTED SUBSET
=============================================================================

    bytes=START-END     explicit window
    bytes=START-        to the end of the resource
    bytes=-END          start defaults to 0, so this is bytes=0-END

Only one range per request. A list such as `bytes=0-1,5-6`, non-numeric
bounds or a missing dash make the header malformed; the reply layer serves
the whole resource for those unless strict mode asks for a 416.

=============================================================================
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import re

from ..errors import RangeNotSatisfiable


BYTES_UNIT = "bytes"

# "bytes=" prefix is matched separately; this is the single spec after it
_RANGE_SPEC_PATTERN = re.compile(r"^\s*(\d*)\s*-\s*(\d*)\s*$")


@dataclass(frozen=True)
class RangeWindow:
    """
    A byte window `[start, end)` inside a resource of `total` bytes.

    Construction enforces `0 <= start < end <= total`, so a RangeWindow
    that exists can always be served. A zero-byte resource therefore has
    no valid window at all.
    """

    start: int
    end: int
    total: int

    def __post_init__(self):
        if self.total < 0:
            raise RangeNotSatisfiable(f"Negative resource size: {self.total}", total=self.total)
        if not 0 <= self.start < self.end <= self.total:
            raise RangeNotSatisfiable(
                f"Invalid range [{self.start}, {self.end}) for {self.total} bytes",
                total=self.total,
            )

    @classmethod
    def for_part(cls, total: int, start: int, end: Optional[int] = None) -> "RangeWindow":
        """Window for an explicit part; `end` defaults to the resource size."""
        return cls(start, total if end is None else end, total)

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def last(self) -> int:
        """Offset of the last byte served (inclusive)."""
        return self.end - 1

    @property
    def content_range(self) -> str:
        return f"{BYTES_UNIT} {self.start}-{self.last}/{self.total}"

    def headers(self) -> Dict[str, str]:
        """Headers of a 206 response serving this window, in wire order."""
        return {
            "accept-ranges": BYTES_UNIT,
            "content-range": self.content_range,
            "content-length": str(self.length),
        }


def full_file_headers(size: int) -> Dict[str, str]:
    """Headers of a plain 200 response serving all `size` bytes."""
    return {"content-length": str(size)}


def unsatisfiable_content_range(total: int) -> str:
    """The `content-range` value a 416 response carries."""
    return f"{BYTES_UNIT} */{total}"


def is_byte_range(header: Optional[str]) -> bool:
    """True when the header asks for a byte range at all."""
    return bool(header) and header.startswith(f"{BYTES_UNIT}=")


def parse_range(header: Optional[str]) -> Optional[Tuple[int, Optional[int]]]:
    """
    Parse a `Range` header into `(start, end)` with an EXCLUSIVE end.

    Returns None when the header is absent, is not a byte range, or is
    malformed. `end` is None when the header leaves it open.

        >>> parse_range("bytes=0-499")
        (0, 500)
        >>> parse_range("bytes=500-")
        (500, None)
        >>> parse_range("bytes=-20")
        (0, 21)
        >>> parse_range("items=0-1") is None
        True
    """
    if not is_byte_range(header):
        return None

    match = _RANGE_SPEC_PATTERN.match(header[len(BYTES_UNIT) + 1:])
    if match is None:
        return None

    start_part, end_part = match.groups()
    start = int(start_part) if start_part else 0
    end = int(end_part) + 1 if end_part else None
    return start, end


def resolve_range(header: Optional[str], total: int) -> Optional[RangeWindow]:
    """
    Resolve a `Range` header against a resource of `total` bytes.

    Pure: the same header and size always give the same answer.

    Returns:
        The window to serve, or None to serve the whole resource.

    Raises:
        RangeNotSatisfiable: The header is well formed but the window
                             does not fit the resource.
    """
    parsed = parse_range(header)
    if parsed is None:
        return None
    start, end = parsed
    return RangeWindow.for_part(total, start, end)
