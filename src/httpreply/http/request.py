"""
=============================================================================
INBOUND REQUEST
=============================================================================

The raw request a reply is built for. httpreply only READS it: the
dispatcher that owns the connection creates it, the reply inspects its
headers (most importantly `Range`).

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    WHAT IS PARSED, WHAT IS NOT                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /media/song.ogg?quality=high HTTP/1.1\r\n   ← request line    │
    │   Host: localhost\r\n                              ← headers         │
    │   Range: bytes=0-499\r\n                           ← (lower-cased)   │
    │   \r\n                                                               │
    │   ...                                              ← body, kept raw │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Body decoding (JSON, forms, multipart) belongs to the layer above.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qs, unquote, urlparse
import re

from .headers import Headers


class HTTPParseError(Exception):
    """
    Raised when raw request bytes cannot be parsed.

    Carries the status code the connection owner should answer with:
    400 for malformed syntax, 405 for unknown methods, 413 when the
    request is too large, 505 for unsupported versions.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HTTPRequest:
    """
    A parsed inbound HTTP request.

    Attributes:
        method:         GET, HEAD, POST, ...
        path:           URL-decoded path without the query string.
        version:        "HTTP/1.1" or "HTTP/1.0".
        headers:        Case-insensitive header collection.
        query_params:   Ordered multi-map, "?a=1&a=2" → {"a": ["1", "2"]}.
        body:           Whatever bytes followed the header block, undecoded.
        client_address: (ip, port) of the peer, for logs.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Headers = field(default_factory=Headers)
    query_params: Dict[str, List[str]] = field(default_factory=dict)
    body: bytes = b""
    client_address: Tuple[str, int] = ("", 0)

    def __post_init__(self):
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)

    @property
    def range(self) -> Optional[str]:
        """The raw `Range` header value, if any."""
        return self.headers.get("range")

    def get_header(self, name: str, default: str = "") -> str:
        return self.headers.get(name, default)


class RequestParser:
    """
    Parses the request line and headers out of raw request bytes.

        1. size check            → 413
        2. find \\r\\n\\r\\n         → 400 if missing
        3. request line          → 400 / 405 / 505
        4. header lines          → lower-cased names, repeats joined ", "
        5. body                  → the remaining bytes, as received
    """

    VALID_METHODS = {
        "GET", "HEAD", "POST", "PUT", "DELETE",
        "PATCH", "OPTIONS", "TRACE", "CONNECT",
    }

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: Tuple[str, int] = ("", 0),
    ) -> HTTPRequest:
        """
        Parse raw request bytes into an HTTPRequest.

        Raises:
            HTTPParseError: If the request is malformed or too large.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(f"Request too large: {len(data)} bytes", status_code=413)

        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        lines = data[:header_end].decode("utf-8", errors="replace").split("\r\n")
        method, path, query_params, version = self._parse_request_line(lines[0])
        try:
            headers = self._parse_headers(lines[1:])
        except ValueError as e:
            raise HTTPParseError(f"Invalid header: {e}") from e

        body = data[header_end + 4:]

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            query_params=query_params,
            body=body,
            client_address=client_address,
        )

    def _parse_request_line(self, line: str) -> Tuple[str, str, Dict[str, List[str]], str]:
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line}")

        method, target, version = match.groups()
        if method not in self.VALID_METHODS:
            raise HTTPParseError(f"Invalid method: {method}", status_code=405)
        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(f"Unsupported HTTP version: {version}", status_code=505)

        parsed = urlparse(target)
        path = unquote(parsed.path) or "/"
        # parse_qs keeps first-seen key order and per-key value order
        query_params = parse_qs(parsed.query, keep_blank_values=True)
        return method, path, query_params, version

    def _parse_headers(self, lines: List[str]) -> Headers:
        headers = Headers()
        current_name: Optional[str] = None

        for line in lines:
            if not line:
                continue

            # obsolete line folding: continuation of the previous header
            if line[0] in (" ", "\t"):
                if current_name is not None:
                    headers[current_name] = f"{headers[current_name]} {line.strip()}"
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue

            name, value = match.groups()
            name = name.strip()
            value = value.strip()
            current_name = name

            if name in headers:
                headers[name] = f"{headers[name]}, {value}"
            else:
                headers[name] = value

        return headers


def parse_request(
    data: bytes,
    client_address: Tuple[str, int] = ("", 0),
    max_size: int = 10 * 1024 * 1024,
) -> HTTPRequest:
    """Parse raw request bytes with a one-off RequestParser."""
    return RequestParser(max_request_size=max_size).parse(data, client_address)
