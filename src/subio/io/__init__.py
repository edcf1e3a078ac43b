"""I/O layer for subio - byte windows over files, file objects and URLs."""

import io

# Re-export these for import convenience
from .base import (ReadableStream, WritableStream, SeekableStream, PeekableStream,
                   RangeNotSupportedError)
from .read import SubReader, BufferedSubReader
from .write import SubWriter
from .http_sync import HTTPRangeStream, open_http_stream


def _is_url(source) -> bool:
    return str(source).startswith(('http://', 'https://'))


def open_source(source, mode: str = "rb"):
    """Factory function returning a stream a window can wrap.

    File-like objects are returned unchanged, URLs become an HTTPRangeStream
    (read-only) and anything else is opened as a local path with `mode`.
    """
    if hasattr(source, 'read') or hasattr(source, 'write'):  # BinaryIO
        return source

    if _is_url(source):
        if mode != "rb":
            raise ValueError(f"URLs can only be opened for reading, not with mode {mode!r}")
        return open_http_stream(str(source))
    return open(source, mode)


def open_subreader(source, offset: int, length: int, *, whence: int = io.SEEK_SET) -> SubReader:
    """Open `source` and return a `length`-byte read window at `offset`.

    Streams able to peek get a BufferedSubReader, the rest a SubReader.
    """
    inner = open_source(source, "rb")
    cls = BufferedSubReader if isinstance(inner, PeekableStream) else SubReader
    try:
        return cls.from_seek(inner, offset, whence, length)
    except BaseException:
        if inner is not source:
            inner.close()
        raise


def open_subwriter(source, offset: int, length: int, *, whence: int = io.SEEK_SET,
                   write_beyond: bool = False) -> SubWriter:
    """Open `source` for in-place update and return a `length`-byte write window at `offset`."""
    inner = open_source(source, "r+b")
    try:
        return SubWriter.from_seek(inner, offset, whence, length, write_beyond=write_beyond)
    except BaseException:
        if inner is not source:
            inner.close()
        raise


__all__ = [
    "ReadableStream", "WritableStream", "SeekableStream", "PeekableStream",
    "RangeNotSupportedError", "SubReader", "BufferedSubReader", "SubWriter",
    "HTTPRangeStream", "open_http_stream", "open_source", "open_subreader", "open_subwriter",
]
