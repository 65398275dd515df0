"""
=============================================================================
REPLY CONFIGURATION
=============================================================================

Settings shared by every reply and transport, in one dataclass.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION SOURCES                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Code           ReplyConfig(chunk_size=16384)                   │
    │   2. Environment    ReplyConfig.from_env()                          │
    │   3. Defaults       ReplyConfig()                                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Validate once, at startup: validate() raises ValueError with a message
naming the bad field.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass


_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ReplyConfig:
    """
    Configuration for replies and transports.

    Development:
        ReplyConfig(log_level="DEBUG")

    Strict HTTP range semantics:
        ReplyConfig(strict_ranges=True)
    """

    chunk_size: int = 64 * 1024
    """
    Bytes per write when streaming a file body.
    Bigger chunks mean fewer syscalls and more memory per request.
    """

    server_name: str = "httpreply/1.0"
    """Value of the Server header written by SocketTransport."""

    strict_ranges: bool = False
    """
    Answer a malformed `Range` header with 416 instead of the whole file.
    Off by default: most clients cope better with a full 200 response.
    """

    log_level: str = "INFO"
    """DEBUG shows range decisions and duplicate finalize calls."""

    @classmethod
    def from_env(cls) -> "ReplyConfig":
        """
        Create configuration from environment variables.

            HTTPREPLY_CHUNK_SIZE     streaming chunk size (default: 65536)
            HTTPREPLY_SERVER_NAME    Server header (default: httpreply/1.0)
            HTTPREPLY_STRICT_RANGES  1/true/yes/on enables strict ranges
            HTTPREPLY_LOG_LEVEL      logging level (default: INFO)
        """
        return cls(
            chunk_size=int(os.getenv("HTTPREPLY_CHUNK_SIZE", str(64 * 1024))),
            server_name=os.getenv("HTTPREPLY_SERVER_NAME", "httpreply/1.0"),
            strict_ranges=os.getenv("HTTPREPLY_STRICT_RANGES", "").strip().lower() in _TRUTHY,
            log_level=os.getenv("HTTPREPLY_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        if self.chunk_size < 1024:
            raise ValueError(f"chunk_size must be >= 1024, got {self.chunk_size}")

        if not self.server_name:
            raise ValueError("server_name must not be empty")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log_level: {self.log_level}")


def configure_logging(config: ReplyConfig) -> None:
    """Configure the root logger and the httpreply logger level."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httpreply").setLevel(level)
