"""Base protocols and shared types for the I/O layer."""

import io
from typing import Protocol, runtime_checkable


class RangeNotSupportedError(RuntimeError):
    """Raised when server rejects Range and file size > RANGE_FALLBACK_MAX."""


RANGE_FALLBACK_MAX = 10 * 1024 * 1024  # 10 MB


@runtime_checkable
class ReadableStream(Protocol):
    """Anything a SubReader can wrap."""

    def read(self, size: int = -1) -> bytes:
        """Read up to `size` bytes; b'' signals end of stream."""
        ...


@runtime_checkable
class WritableStream(Protocol):
    """Anything a SubWriter can wrap."""

    def write(self, data: bytes) -> int:
        """Write `data`, return the number of bytes actually written."""
        ...

    def flush(self) -> None:
        ...


@runtime_checkable
class SeekableStream(Protocol):
    """Streams that can reposition and report their offset."""

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        ...

    def tell(self) -> int:
        ...


@runtime_checkable
class PeekableStream(Protocol):
    """Buffered streams exposing look-ahead without consuming it."""

    def peek(self, size: int = 0) -> bytes:
        ...

    def read(self, size: int = -1) -> bytes:
        ...


def is_seekable(stream) -> bool:
    """True when `stream` claims (or at least looks) seekable."""
    probe = getattr(stream, "seekable", None)
    if probe is not None:
        return probe()
    return isinstance(stream, SeekableStream)
