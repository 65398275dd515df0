"""
=============================================================================
TRANSPORT
=============================================================================

The transport performs the wire write for a finalized reply. It is the
only place httpreply blocks.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       SocketTransport.send()                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   head_bytes()          HTTP/1.1 206 Partial Content\r\n            │
    │        │                content-range: bytes 0-499/1000\r\n         │
    │        │                ...\r\n\r\n                                  │
    │        ▼                                                             │
    │   sendall(head)                                                      │
    │        │                                                             │
    │        ▼                                                             │
    │   bytes body?  ── yes ──►  sendall(body)                            │
    │        │                                                             │
    │        no (stream)                                                   │
    │        ▼                                                             │
    │   while chunk := body.read(chunk_size):                              │
    │       sendall(chunk)                                                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

sendall() blocks until every byte is handed to the kernel or the socket
fails. Socket failures surface as TransmissionError; the reply logs and
drops them.

Transports never close a stream body. Whoever opened it (the file-serving
reply) owns it and closes it.

=============================================================================
"""

import logging
import socket
from abc import ABC, abstractmethod
from typing import Optional

from ..config import ReplyConfig
from ..errors import TransmissionError
from ..http.response import OutgoingResponse


logger = logging.getLogger(__name__)


class Transport(ABC):
    """
    Interface between a reply and the connection it answers on.

    Implementations write the response and return, or raise
    TransmissionError (or any OSError) when the peer cannot be reached.
    """

    @abstractmethod
    def send(self, response: OutgoingResponse) -> None:
        """Write `response` to the peer."""


class SocketTransport(Transport):
    """
    Writes responses to a connected socket.

    Args:
        sock: Connected stream socket. Left open after send().
        config: chunk_size and server_name come from here.
    """

    def __init__(self, sock: socket.socket, config: Optional[ReplyConfig] = None):
        self.socket = sock
        self.config = config or ReplyConfig()

    def send(self, response: OutgoingResponse) -> None:
        try:
            self.socket.sendall(response.head_bytes(self.config.server_name))

            payload = response.body_bytes()
            if payload is not None:
                if payload:
                    self.socket.sendall(payload)
                return

            sent = 0
            while True:
                chunk = response.body.read(self.config.chunk_size)
                if not chunk:
                    break
                self.socket.sendall(chunk)
                sent += len(chunk)
            logger.debug(f"Streamed {sent} body bytes")

        except (ConnectionResetError, BrokenPipeError, OSError) as e:
            raise TransmissionError(f"Send failed: {e}") from e
