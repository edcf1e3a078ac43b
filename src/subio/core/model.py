from __future__ import annotations
import errno
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Window:
    start: int          # absolute offset in the inner stream
    end: int            # absolute, exclusive

    @property
    def length(self) -> int:
        return self.end - self.start

    def asdict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end, "length": self.length}


class SeekOutOfBoundsError(OSError, ValueError):
    """Raised when a seek resolves before the window start or overflows."""

    def __init__(self, message: str = "seek position out of bounds"):
        super().__init__(errno.EINVAL, message)
