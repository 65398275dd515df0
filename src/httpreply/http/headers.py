"""
=============================================================================
HEADER COLLECTION
=============================================================================

HTTP header names are case-insensitive (RFC 7230 §3.2), but the order in
which a handler sets them is worth keeping: it is the order they go out on
the wire.

    headers = Headers()
    headers["Content-Type"] = "text/plain; charset=utf8"
    headers["content-type"]           → "text/plain; charset=utf8"
    "CONTENT-TYPE" in headers         → True
    list(headers)                     → ["content-type"]

Names are stored lower-cased, the same normalization the request parser
applies to incoming headers. Setting an existing name replaces its value in
place, keeping its original position.

=============================================================================
"""

from typing import Dict, Iterable, Iterator, Mapping, MutableMapping, Optional, Tuple, Union
import re


HeaderSource = Union[Mapping[str, str], Iterable[Tuple[str, str]], None]

# a bare CR or LF would end the header line on the wire
_FORBIDDEN = re.compile(r"[\r\n]")


class Headers(MutableMapping[str, str]):
    """
    Ordered mapping of header name → value with case-insensitive keys.

    Values are always strings; integers (content-length) are converted
    on assignment so the wire format never sees a non-string.
    Names or values containing CR or LF raise ValueError.
    """

    def __init__(self, data: HeaderSource = None):
        self._items: Dict[str, str] = {}
        if data is None:
            return
        pairs = data.items() if isinstance(data, Mapping) else data
        for name, value in pairs:
            self[name] = value

    def __getitem__(self, name: str) -> str:
        return self._items[name.lower()]

    def __setitem__(self, name: str, value: Union[str, int]) -> None:
        value = str(value)
        if _FORBIDDEN.search(name) or _FORBIDDEN.search(value):
            raise ValueError(f"Header {name!r} contains CR or LF")
        self._items[name.lower()] = value

    def __delitem__(self, name: str) -> None:
        del self._items[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._items == other._items
        if isinstance(other, Mapping):
            return self._items == {str(k).lower(): v for k, v in other.items()}
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._items.get(name.lower(), default)

    def copy(self) -> "Headers":
        return Headers(self._items)

    def to_dict(self) -> Dict[str, str]:
        """Plain dict copy, handy for assertions and logging."""
        return dict(self._items)
