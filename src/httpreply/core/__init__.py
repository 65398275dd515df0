"""Transport layer: how a finalized reply reaches the wire."""

from .transport import SocketTransport, Transport

__all__ = ["SocketTransport", "Transport"]
