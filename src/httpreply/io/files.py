"""
=============================================================================
FILE ACCESS
=============================================================================

Filesystem operations the file-serving replies depend on:

    file_size(path)                   → int
    open_full(path)                   → binary stream from offset 0
    open_bounded(path, start, length) → BoundedReader over [start, start+length)

Missing or unreadable files raise the usual OSError subclasses
(FileNotFoundError, PermissionError, IsADirectoryError). Nothing here
catches them.

=============================================================================
WHY A BOUNDED READER?
=============================================================================

A 206 response promises exactly `content-length` bytes. Seeking the file
to `start` is not enough: a transport that reads "until EOF" would send
the rest of the file too. BoundedReader reports EOF once `length` bytes
have been handed out:

    file:     [ 0 ........ start ======== start+length ........ size )
    reader:                 ^ read() ...   ^ b""

=============================================================================
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Iterator, Union


logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

DEFAULT_CHUNK_SIZE = 64 * 1024


def file_size(path: PathLike) -> int:
    """Size of the file in bytes (stat)."""
    return os.stat(path).st_size


def open_full(path: PathLike) -> BinaryIO:
    """Open the whole file for binary reading."""
    return open(path, "rb")


def open_bounded(path: PathLike, start: int, length: int) -> "BoundedReader":
    """Open a reader limited to `length` bytes starting at `start`."""
    handle = open(path, "rb")
    try:
        handle.seek(start)
    except OSError:
        handle.close()
        raise
    logger.debug(f"Opened {Path(path).name} at offset {start} for {length} bytes")
    return BoundedReader(handle, length)


class BoundedReader:
    """
    Read-only stream over the next `length` bytes of another stream.

    Closing the reader closes the wrapped stream. Usable as a context
    manager and iterable in chunks:

        with open_bounded("movie.mp4", 1024, 4096) as reader:
            for chunk in reader.iter_chunks(1024):
                sock.sendall(chunk)
    """

    def __init__(self, raw: BinaryIO, length: int):
        if length < 0:
            raise ValueError(f"length must be >= 0, got {length}")
        self._raw = raw
        self._remaining = length
        self.length = length

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def closed(self) -> bool:
        return self._raw.closed

    def read(self, size: int = -1) -> bytes:
        if self._remaining <= 0:
            return b""
        if size is None or size < 0 or size > self._remaining:
            size = self._remaining
        data = self._raw.read(size)
        self._remaining -= len(data)
        return data

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        while True:
            chunk = self.read(chunk_size)
            if not chunk:
                return
            yield chunk

    def close(self) -> None:
        self._raw.close()

    def __enter__(self) -> "BoundedReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
