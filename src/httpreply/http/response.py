"""
=============================================================================
OUTGOING RESPONSE
=============================================================================

The value a finalized reply hands to its transport.

    Reply.respond(body)      OutgoingResponse          Transport.send()
    ───────────────────  ─►  status=206           ─►   status line
                             headers=Headers(...)      header block
                             body=<BoundedReader>      body bytes / chunks

Bodies come in three shapes:

    str        encoded as UTF-8
    bytes      sent as is
    stream     any object with read(n); sent in chunks until EOF

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import BinaryIO, Optional, Union

from .headers import Headers
from .status_codes import status_text


Body = Union[bytes, str, BinaryIO]


@dataclass
class OutgoingResponse:
    """
    A committed response: status, headers and body.

    `headers` is a snapshot taken at finalize time, so later changes to
    the reply's own collection cannot leak into a response in flight.
    """

    status: int = 200
    headers: Headers = field(default_factory=Headers)
    body: Body = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """e.g. "HTTP/1.1 206 Partial Content"."""
        return f"{self.version} {self.status} {status_text(self.status)}"

    @property
    def is_stream(self) -> bool:
        return not isinstance(self.body, (bytes, bytearray, str))

    def body_bytes(self) -> Optional[bytes]:
        """The in-memory body as bytes, or None for a stream body."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        if isinstance(self.body, (bytes, bytearray)):
            return bytes(self.body)
        return None

    def head_bytes(self, server_name: Optional[str] = None, date: Optional[datetime] = None) -> bytes:
        """
        Serialize the status line and header block.

        Adds `content-length` for in-memory bodies, plus `date` and
        `server`, unless the reply set them already. Stream bodies must
        carry their own `content-length`; without one the peer reads
        until the connection closes.
        """
        headers = self.headers.copy()

        payload = self.body_bytes()
        if payload is not None and "content-length" not in headers:
            headers["content-length"] = len(payload)
        if payload is None and "content-length" not in headers:
            headers["connection"] = "close"

        if "date" not in headers:
            headers["date"] = format_http_date(date or datetime.now(timezone.utc))
        if server_name and "server" not in headers:
            headers["server"] = server_name

        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in headers.items())
        lines.append("")
        return ("\r\n".join(lines) + "\r\n").encode("utf-8")


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231 §7.1.1.1).

        Thu, 15 Jan 2026 12:30:45 GMT
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    dt = dt.astimezone(timezone.utc)
    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
