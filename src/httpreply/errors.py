"""
=============================================================================
REPLY ERRORS
=============================================================================

Exception types raised by httpreply.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ERROR TAXONOMY                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ReplyError                                                         │
    │     ├── ResponseFinalizedError   handler touched a sent reply       │
    │     ├── RangeNotSatisfiable      byte window outside the resource   │
    │     └── TransmissionError        peer went away mid-write           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The first two are programming or client errors and are raised before any
side effect. TransmissionError is raised by transports and swallowed by
Reply.respond(): once the peer is gone there is nothing to retry.

Missing files are NOT wrapped. FileNotFoundError reaches the handler
unchanged, and the handler decides whether that becomes error(404).

=============================================================================
"""

from typing import Optional


class ReplyError(Exception):
    """Base class for all httpreply errors."""


class ResponseFinalizedError(ReplyError, RuntimeError):
    """
    Raised when a finalized reply is mutated.

    A reply is finalized by respond() or any of its convenience wrappers.
    After that the status, headers and body are committed to the transport.
    """

    def __init__(self, message: str = "Response already finalized"):
        super().__init__(message)


class RangeNotSatisfiable(ReplyError, ValueError):
    """
    Raised when a byte window does not fit the resource.

    Carries the 416 status the handler layer should answer with and the
    resource size for the `content-range: bytes */{total}` header.
    """

    status_code = 416

    def __init__(self, message: str, total: Optional[int] = None):
        super().__init__(message)
        self.total = total


class TransmissionError(ReplyError, OSError):
    """Raised by a transport when the response could not be delivered."""
