"""Read-side window over part of another stream."""

import io

from ..core.bounds import MAX_OFFSET, relative_delta, resolve_seek
from ..core.model import Window
from .base import is_seekable


class SubReader(io.RawIOBase):
    """Readable, seekable view of the bytes ``[start, start + length)`` of `inner`.

    Positions are zero-based: ``tell()`` reports ``absolute - start``.
    The window keeps its own notion of the current offset and never asks
    `inner` where it is, so nothing else may move `inner` while the window
    is in use.

    Prefer wrapping a window in ``io.BufferedReader`` over windowing a
    buffered stream; see BufferedSubReader for the latter.
    """

    _inner = None

    def __init__(self, inner, start: int, length: int):
        """Wrap `inner`, which must already be positioned at absolute offset `start`.

        No I/O is performed; use from_seek() or from_current() to let the
        window find its start itself.
        """
        super().__init__()
        if start < 0 or length < 0:
            raise ValueError(f"Window start and length must be non-negative, got {start} and {length}")
        if start + length > MAX_OFFSET:
            raise ValueError(f"Window end {start + length} exceeds the maximum stream offset")
        self._inner = inner
        self._start = start
        self._end = start + length
        self._pos = start

    @classmethod
    def from_seek(cls, inner, offset: int, whence: int, length: int):
        """Seek `inner` once and open a `length`-byte window at the resulting offset."""
        start = inner.seek(offset, whence)
        return cls(inner, start, length)

    @classmethod
    def from_current(cls, inner, length: int):
        """Open a window starting wherever `inner` currently is."""
        return cls.from_seek(inner, 0, io.SEEK_CUR, length)

    # --- inspection ---
    @property
    def inner(self):
        """The wrapped stream, for inspection only; reading it directly desynchronises the window."""
        return self._inner

    @property
    def window(self) -> Window:
        return Window(self._start, self._end)

    @property
    def inner_position(self) -> int:
        """Absolute offset of the window's cursor in `inner`."""
        return self._pos

    def _check_attached(self):
        if self.closed or self._inner is None:
            raise ValueError("I/O operation on closed or detached window")

    # --- io.RawIOBase ---
    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        self._check_attached()
        return is_seekable(self._inner)

    def readinto(self, b) -> int | None:
        """Read into `b`, never past the end of the window.

        Exactly one read is issued on `inner`; short reads are passed on.
        """
        self._check_attached()
        if self._pos >= self._end:
            return 0
        view = memoryview(b).cast("B")
        to_read = min(len(view), self._end - self._pos)

        readinto = getattr(self._inner, "readinto", None)
        if readinto is not None:
            count = readinto(view[:to_read])
        else:
            data = self._inner.read(to_read)
            count = None if data is None else len(data)
            if count:
                view[:count] = data
        if count is None:  # non-blocking inner had nothing ready
            return None

        self._pos += count
        return count

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move within the window; returns the new zero-based position.

        `inner` is moved relative to where it is (SEEK_CUR), which lets
        buffered streams keep their read-ahead.
        """
        self._check_attached()
        target = resolve_seek(offset, whence, self._start, self._end, self._pos)
        self._inner.seek(relative_delta(target, self._pos), io.SEEK_CUR)
        self._pos = target
        return self._pos - self._start

    def tell(self) -> int:
        return self._pos - self._start

    def detach(self):
        """Close the window and hand `inner` back to the caller."""
        self._check_attached()
        inner = self._inner
        self.close()
        self._inner = None
        return inner

    def __repr__(self) -> str:
        return f"{type(self).__name__}(start={self._start}, end={self._end}, position={self.tell()})"


class BufferedSubReader(SubReader):
    """SubReader over a stream with ``peek()``, e.g. ``io.BufferedReader``.

    `inner` may buffer past the end of the window; only the part of its
    buffer inside the window is ever exposed, so callers must trust the
    length of what peek() returns rather than `inner`'s own buffer.
    """

    def peek(self, size: int = 0) -> bytes:
        """Return buffered bytes without consuming them, cut at the window end."""
        self._check_attached()
        if self._pos >= self._end:
            return b""
        buf = self._inner.peek(size)
        return buf[: self._end - self._pos]

    def consume(self, amount: int) -> None:
        """Mark `amount` previously peeked bytes as read."""
        self._check_attached()
        to_consume = max(0, min(amount, self._end - self._pos))
        consume = getattr(self._inner, "consume", None)
        if consume is not None:
            consume(to_consume)
        else:
            # served from inner's buffer when the bytes were peeked first
            self._inner.read(to_consume)
        self._pos += to_consume
