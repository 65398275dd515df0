"""
=============================================================================
HTTPREPLY - Per-Request Response Building With Byte-Range File Delivery
=============================================================================

httpreply sits between a request dispatcher and the socket. For every
request the dispatcher creates a Reply; the handler sets status and
headers and finalizes exactly one body.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          REQUEST FLOW                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   dispatcher          handler                 transport             │
    │   ──────────          ───────                 ─────────             │
    │                                                                      │
    │   RequestContext ──►  reply.set_header(...)                         │
    │   + Transport         reply.file_auto_part()                        │
    │   = Reply                   │                                        │
    │                             ├── resolve_range()                     │
    │                             ├── open_bounded()                      │
    │                             └── respond() ─────►  send()            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
QUICK START
=============================================================================

    import socket
    from httpreply import Reply, RequestContext, SocketTransport

    def handle(conn: socket.socket, raw: bytes) -> None:
        reply = Reply(RequestContext.from_bytes(raw), SocketTransport(conn))
        try:
            reply.file_auto_part("media/intro.mp4")
        except FileNotFoundError:
            reply.error(404)

=============================================================================
"""

from .config import ReplyConfig, configure_logging
from .context import Delivery, Reply, RequestContext, ResponseState
from .core import SocketTransport, Transport
from .errors import (
    RangeNotSatisfiable,
    ReplyError,
    ResponseFinalizedError,
    TransmissionError,
)
from .http import (
    Headers,
    HTTPRequest,
    HTTPStatus,
    OutgoingResponse,
    RangeWindow,
    parse_range,
    parse_request,
    resolve_range,
    status_text,
)

__version__ = "1.0.0"

__all__ = [
    # Replies
    "Reply",
    "RequestContext",
    "ResponseState",
    "Delivery",

    # Transport
    "Transport",
    "SocketTransport",
    "OutgoingResponse",

    # HTTP
    "Headers",
    "HTTPRequest",
    "HTTPStatus",
    "parse_request",
    "status_text",

    # Ranges
    "RangeWindow",
    "parse_range",
    "resolve_range",

    # Configuration
    "ReplyConfig",
    "configure_logging",

    # Errors
    "ReplyError",
    "ResponseFinalizedError",
    "RangeNotSatisfiable",
    "TransmissionError",
]
