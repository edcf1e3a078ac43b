"""Write-side window over part of another stream."""

import io
import warnings

from ..core.bounds import MAX_OFFSET, relative_delta, resolve_seek
from ..core.model import Window
from .base import is_seekable


class SubWriter(io.RawIOBase):
    """Writable, seekable view of the bytes ``[start, start + length)`` of `inner`.

    In the default bounded mode a write is cut at the window end and a
    write at the end reports 0 bytes; nothing is raised. With
    ``write_beyond=True`` writes go through untouched and the position may
    run past the end, while SEEK_END keeps resolving against the
    configured end.

    Do not put ``io.BufferedWriter`` on top of a bounded window that may
    fill up: it retries zero-byte raw writes forever.
    """

    _inner = None

    def __init__(self, inner, start: int, length: int, *, write_beyond: bool = False):
        """Wrap `inner`, which must already be positioned at absolute offset `start`."""
        super().__init__()
        if start < 0 or length < 0:
            raise ValueError(f"Window start and length must be non-negative, got {start} and {length}")
        if start + length > MAX_OFFSET:
            raise ValueError(f"Window end {start + length} exceeds the maximum stream offset")
        self._inner = inner
        self._start = start
        self._end = start + length
        self._pos = start
        self._write_beyond = write_beyond

    @classmethod
    def from_seek(cls, inner, offset: int, whence: int, length: int, *, write_beyond: bool = False):
        """Seek `inner` once and open a `length`-byte window at the resulting offset."""
        start = inner.seek(offset, whence)
        return cls(inner, start, length, write_beyond=write_beyond)

    @classmethod
    def from_current(cls, inner, length: int, *, write_beyond: bool = False):
        return cls.from_seek(inner, 0, io.SEEK_CUR, length, write_beyond=write_beyond)

    @property
    def write_beyond(self) -> bool:
        """Whether writes may cross the window end."""
        return self._write_beyond

    @write_beyond.setter
    def write_beyond(self, allow: bool) -> None:
        self._write_beyond = bool(allow)

    @property
    def inner(self):
        return self._inner

    @property
    def window(self) -> Window:
        return Window(self._start, self._end)

    @property
    def inner_position(self) -> int:
        return self._pos

    def _check_attached(self):
        if self.closed or self._inner is None:
            raise ValueError("I/O operation on closed or detached window")

    # --- io.RawIOBase ---
    def writable(self) -> bool:
        return True

    def seekable(self) -> bool:
        self._check_attached()
        return is_seekable(self._inner)

    def write(self, b) -> int | None:
        self._check_attached()
        view = memoryview(b).cast("B")

        if self._write_beyond:
            written = self._inner.write(view)
            if written is None:
                return None
        else:
            if self._pos >= self._end:
                return 0
            to_write = min(len(view), self._end - self._pos)
            written = self._inner.write(view[:to_write])
            if written is None:
                return None
            if self._pos + written > self._end:
                # only reachable when inner claims more than it was handed
                warnings.warn(
                    f"Inner stream reported writing {written} bytes but was given {to_write}; "
                    f"shrinking window end from {self._end} to {self._pos}",
                    RuntimeWarning,
                )
                self._end = self._pos

        self._pos += written
        return written

    def flush(self) -> None:
        self._check_attached()
        self._inner.flush()

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_attached()
        target = resolve_seek(offset, whence, self._start, self._end, self._pos)
        self._inner.seek(relative_delta(target, self._pos), io.SEEK_CUR)
        self._pos = target
        return self._pos - self._start

    def tell(self) -> int:
        return self._pos - self._start

    def detach(self):
        """Flush, close the window and hand `inner` back to the caller."""
        self._check_attached()
        inner = self._inner
        self.close()
        self._inner = None
        return inner

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(start={self._start}, end={self._end}, position={self.tell()}, "
                f"write_beyond={self._write_beyond})")
