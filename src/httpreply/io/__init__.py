"""Filesystem collaborators used by the file-serving replies."""

from .files import BoundedReader, file_size, open_bounded, open_full

__all__ = [
    "BoundedReader",
    "file_size",
    "open_bounded",
    "open_full",
]
