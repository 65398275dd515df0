"""
=============================================================================
REQUEST CONTEXT AND REPLY
=============================================================================

A handler receives a Reply. It reads the request through `reply.context`,
sets status and headers, and finalizes exactly one response body.

    def download(reply: Reply) -> Delivery:
        name = reply.context.params["name"]
        try:
            return reply.file_auto_part(MEDIA_ROOT / name)
        except FileNotFoundError:
            return reply.error(404)

=============================================================================
REPLY STATE MACHINE
=============================================================================

         set_status()
         set_header()
          ┌──────┐
          │      ▼
       ┌──────────┐   respond() / text() / file() / ...   ┌─────────────┐
       │   OPEN   │ ────────────────────────────────────► │  FINALIZED  │
       └──────────┘                                        └─────────────┘
                                                                  │
              set_status() / set_header()  ──►  ResponseFinalizedError
              respond() / text() / ...     ──►  no-op, Delivery.SKIPPED

There is no separate error state: error(404) is a finalized reply whose
status happens to be 404.

A second respond() must not write again. Stream bodies are single-use,
and a second header block on the same connection corrupts the response
already sent. So the second call is logged at DEBUG and ignored.

=============================================================================
DELIVERY
=============================================================================

respond() reports what happened instead of raising:

    Delivery.SENT       transport wrote the response
    Delivery.FAILED     transport failed (peer gone), logged at WARNING
    Delivery.SKIPPED    reply was already finalized, nothing written

A failed write is never raised to the handler: the response is lost
either way and the peer is not there to receive an error page.

=============================================================================
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple, Union

from .config import ReplyConfig
from .core.transport import Transport
from .errors import RangeNotSatisfiable, ResponseFinalizedError, TransmissionError
from .http.headers import Headers
from .http.ranges import (
    BYTES_UNIT,
    RangeWindow,
    full_file_headers,
    is_byte_range,
    resolve_range,
    unsatisfiable_content_range,
)
from .http.request import HTTPRequest, parse_request
from .http.response import Body, OutgoingResponse
from .http.status_codes import HTTPStatus, status_text
from .io.files import PathLike, file_size, open_bounded, open_full


logger = logging.getLogger(__name__)


TEXT_PLAIN = "text/plain; charset=utf8"
TEXT_HTML = "text/html; charset=utf8"
APPLICATION_JSON = "application/json; charset=utf8"


class ResponseState(Enum):
    """Lifecycle of a reply."""
    OPEN = "open"            # status and headers may change
    FINALIZED = "finalized"  # committed to the transport


class Delivery(Enum):
    """Outcome of a finalize call."""
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class RequestContext:
    """
    Everything a handler may read about the request.

    Owned by the dispatcher; handlers and replies only read it.

    Attributes:
        request: The raw inbound request.
        params:  Path parameters, "/files/:name" → {"name": "a.txt"}.
        query:   Ordered multi-map of query parameters. Defaults to the
                 request's own parsed query string.
        match:   Groups captured by the route pattern, in order.
    """

    request: HTTPRequest
    params: Mapping[str, str] = field(default_factory=dict)
    query: Optional[Mapping[str, List[str]]] = None
    match: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.query is None:
            self.query = self.request.query_params
        self.match = tuple(self.match)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        params: Optional[Mapping[str, str]] = None,
        match: Tuple[str, ...] = (),
        client_address: Tuple[str, int] = ("", 0),
    ) -> "RequestContext":
        """Build a context by parsing raw request bytes."""
        return cls(
            request=parse_request(data, client_address),
            params=dict(params or {}),
            match=match,
        )

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.request.headers.get(name, default)

    def query_value(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter."""
        values = self.query.get(name) or []
        return values[0] if values else default

    def query_values(self, name: str) -> List[str]:
        return list(self.query.get(name) or [])


class Reply:
    """
    Response state for one in-flight request.

    Holds the status code and headers a handler builds up, and finalizes
    exactly one response through the transport.

    =========================================================================
    FINALIZERS
    =========================================================================

        respond(body)                  status and headers as set
        text(text)                     content-type: text/plain; charset=utf8
        html(html)                     content-type: text/html; charset=utf8
        json(value)                    content-type: application/json; charset=utf8
        redirect(target, overwrite)    301 + location
        error(status)                  "{status} {phrase}", headers cleared
        file(path)                     200, whole file
        file_part(path, start, end)    206, bytes [start, end)
        file_auto_part(path)           206 or 200, following the Range header

    Every finalizer returns a Delivery and, once the reply is finalized,
    becomes a no-op returning Delivery.SKIPPED.

    =========================================================================
    """

    def __init__(
        self,
        context: RequestContext,
        transport: Transport,
        config: Optional[ReplyConfig] = None,
    ):
        self.context = context
        self.transport = transport
        self.config = config or ReplyConfig()

        self._status: int = HTTPStatus.OK
        self._headers = Headers()
        self._state = ResponseState.OPEN

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def request(self) -> HTTPRequest:
        return self.context.request

    @property
    def state(self) -> ResponseState:
        return self._state

    @property
    def finalized(self) -> bool:
        return self._state is ResponseState.FINALIZED

    @property
    def status(self) -> int:
        return self._status

    @property
    def headers(self) -> Headers:
        """Snapshot of the current headers. Use set_header() to change them."""
        return self._headers.copy()

    # =========================================================================
    # MUTATION
    # =========================================================================

    def set_status(self, code: int) -> "Reply":
        self._ensure_open()
        self._status = code
        return self

    def set_header(self, name: str, value: Union[str, int]) -> "Reply":
        self._ensure_open()
        self._headers[name] = value
        return self

    def remove_header(self, name: str) -> "Reply":
        self._ensure_open()
        self._headers.pop(name, None)
        return self

    def clear_headers(self) -> "Reply":
        self._ensure_open()
        self._headers = Headers()
        return self

    def _ensure_open(self) -> None:
        if self.finalized:
            raise ResponseFinalizedError(
                f"Response for {self._describe()} already finalized"
            )

    # =========================================================================
    # FINALIZE
    # =========================================================================

    def respond(self, body: Body = b"") -> Delivery:
        """
        Finalize the reply and hand it to the transport.

        Blocks until the transport returns. Transmission failures are
        logged and reported as Delivery.FAILED.
        """
        if self.finalized:
            return self._skip()

        self._state = ResponseState.FINALIZED
        response = OutgoingResponse(
            status=self._status,
            headers=self._headers.copy(),
            body=body,
            version=self.request.version,
        )

        try:
            self.transport.send(response)
        except (TransmissionError, OSError) as e:
            logger.warning(f"{self._describe()}: response {self._status} not delivered: {e}")
            return Delivery.FAILED

        logger.debug(f"{self._describe()}: sent {self._status}")
        return Delivery.SENT

    finalize = respond

    def _skip(self) -> Delivery:
        logger.debug(f"{self._describe()}: already finalized, ignoring")
        return Delivery.SKIPPED

    def _describe(self) -> str:
        return f"{self.request.method} {self.request.path}"

    # =========================================================================
    # CONTENT FINALIZERS
    # =========================================================================

    def text(self, text: str) -> Delivery:
        if self.finalized:
            return self._skip()
        self._headers["content-type"] = TEXT_PLAIN
        return self.respond(text)

    def html(self, html: str) -> Delivery:
        if self.finalized:
            return self._skip()
        self._headers["content-type"] = TEXT_HTML
        return self.respond(html)

    def json(self, value: Any) -> Delivery:
        """
        Serialize `value` as compact JSON (non-ASCII kept as UTF-8).

        NaN and infinities raise ValueError before the reply is finalized.
        """
        if self.finalized:
            return self._skip()
        payload = json.dumps(
            value, separators=(",", ":"), ensure_ascii=False, allow_nan=False,
        )
        self._headers["content-type"] = APPLICATION_JSON
        return self.respond(payload)

    def redirect(self, target: str, overwrite: bool = True) -> Delivery:
        """
        Redirect to `target`.

        With overwrite (default) the status becomes 301 and every header
        set so far is dropped, leaving only `location`. Without it only
        `location` is set; status and other headers stay as they are.

        Raises:
            ValueError: `target` contains CR or LF. The reply is unchanged.
        """
        if self.finalized:
            return self._skip()
        if overwrite:
            headers = Headers({"location": target})
            self._status = HTTPStatus.MOVED_PERMANENTLY
            self._headers = headers
        else:
            self._headers["location"] = target
        return self.respond(f"Redirect to {target}")

    def error(self, status: int) -> Delivery:
        """Clear all headers and answer with "{status} {reason phrase}"."""
        if self.finalized:
            return self._skip()
        self._status = status
        self._headers = Headers()
        return self.text(f"{status} {status_text(status)}")

    # =========================================================================
    # FILE FINALIZERS
    # =========================================================================
    #
    # All three stat the file before touching the reply, so a missing file
    # (FileNotFoundError) or a bad window (RangeNotSatisfiable) leaves
    # status and headers exactly as they were.
    #
    # The stream each one opens is closed when respond() returns, whether
    # the transport succeeded or not.

    def file(self, path: PathLike) -> Delivery:
        """Serve the whole file, setting content-length."""
        if self.finalized:
            return self._skip()
        return self._serve_full(path, file_size(path))

    def file_part(self, path: PathLike, start: int, end: Optional[int] = None) -> Delivery:
        """
        Serve bytes `[start, end)` of a file as 206 Partial Content.

        `end` is EXCLUSIVE and defaults to the file size.

        Raises:
            RangeNotSatisfiable: Unless `0 <= start < end <= size`.
        """
        if self.finalized:
            return self._skip()
        window = RangeWindow.for_part(file_size(path), start, end)
        return self._serve_window(path, window)

    def file_auto_part(self, path: PathLike) -> Delivery:
        """
        Serve a file, honouring the request's `Range` header.

        No byte range requested  → 200, whole file, accept-ranges: bytes
        Valid byte range         → 206 for that window
        Window outside the file  → 416 with content-range: bytes */size
        Malformed byte range     → like no range (416 with strict_ranges)
        """
        if self.finalized:
            return self._skip()

        size = file_size(path)
        header = self.request.range

        try:
            window = resolve_range(header, size)
        except RangeNotSatisfiable as e:
            logger.debug(f"{self._describe()}: {e}")
            return self._range_not_satisfiable(size)

        if window is None:
            if is_byte_range(header):
                logger.debug(f"{self._describe()}: malformed range {header!r}")
                if self.config.strict_ranges:
                    return self._range_not_satisfiable(size)
            self._headers["accept-ranges"] = BYTES_UNIT
            return self._serve_full(path, size)

        logger.debug(f"{self._describe()}: serving {window.content_range}")
        return self._serve_window(path, window)

    def _serve_full(self, path: PathLike, size: int) -> Delivery:
        stream = open_full(path)
        try:
            self._headers.update(full_file_headers(size))
            return self.respond(stream)
        finally:
            stream.close()

    def _serve_window(self, path: PathLike, window: RangeWindow) -> Delivery:
        stream = open_bounded(path, window.start, window.length)
        try:
            self._status = HTTPStatus.PARTIAL_CONTENT
            self._headers.update(window.headers())
            return self.respond(stream)
        finally:
            stream.close()

    def _range_not_satisfiable(self, total: int) -> Delivery:
        status = HTTPStatus.RANGE_NOT_SATISFIABLE
        self._status = status
        self._headers = Headers({"content-range": unsatisfiable_content_range(total)})
        return self.text(f"{status.value} {status.phrase}")
