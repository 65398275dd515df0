"""
=============================================================================
HTTP BUILDING BLOCKS
=============================================================================

    headers.py        case-insensitive, ordered header collection
    status_codes.py   status codes and reason phrases
    request.py        inbound request and its parser
    ranges.py         Range header → byte window
    response.py       the committed response a transport writes

=============================================================================
"""

from .headers import Headers
from .ranges import RangeWindow, full_file_headers, parse_range, resolve_range
from .request import HTTPParseError, HTTPRequest, RequestParser, parse_request
from .response import OutgoingResponse, format_http_date
from .status_codes import HTTPStatus, status_text

__all__ = [
    # Headers
    "Headers",

    # Status codes
    "HTTPStatus",
    "status_text",

    # Request
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",

    # Ranges
    "RangeWindow",
    "parse_range",
    "resolve_range",
    "full_file_headers",

    # Response
    "OutgoingResponse",
    "format_http_date",
]
