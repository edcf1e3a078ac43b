"""Seek arithmetic shared by the window adapters."""

from __future__ import annotations
import io
from typing import NoReturn

from .model import SeekOutOfBoundsError

# largest offset io streams accept (off_t / Py_ssize_t)
MAX_OFFSET = 2**63 - 1
MIN_DELTA = -(2**63)


def seek_out_of_bounds() -> NoReturn:
    raise SeekOutOfBoundsError()


def _checked_add(base: int, offset: int) -> int:
    target = base + offset
    if target < 0 or target > MAX_OFFSET:
        seek_out_of_bounds()
    return target


def resolve_seek(offset: int, whence: int, start: int, end: int, pos: int) -> int:
    """Translate a window-relative seek into an absolute offset of the inner stream.

    SEEK_SET counts from `start`, SEEK_END from `end` and SEEK_CUR from `pos`.
    Targets before `start` and overflowing arithmetic raise SeekOutOfBoundsError.
    """
    if whence == io.SEEK_SET:
        target = _checked_add(start, offset)
    elif whence == io.SEEK_END:
        target = _checked_add(end, offset)
    elif whence == io.SEEK_CUR:
        target = _checked_add(pos, offset)
    else:
        raise ValueError(f"Invalid whence value: {whence}")

    if target < start:
        seek_out_of_bounds()
    return target


def relative_delta(target: int, pos: int) -> int:
    """Signed distance from `pos` to `target`; must fit a signed 64-bit seek."""
    delta = target - pos
    if delta < MIN_DELTA or delta > MAX_OFFSET:
        seek_out_of_bounds()
    return delta
