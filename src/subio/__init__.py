"""subio - zero-based read/write windows over part of another stream."""

from .core.model import Window, SeekOutOfBoundsError                  # re-export
from .core.bounds import MAX_OFFSET
from .io import (SubReader, BufferedSubReader, SubWriter,
                 open_source, open_subreader, open_subwriter)

__version__ = "0.1.0"

__all__ = [
    "Window", "SeekOutOfBoundsError", "MAX_OFFSET",
    "SubReader", "BufferedSubReader", "SubWriter",
    "open_source", "open_subreader", "open_subwriter",
]
