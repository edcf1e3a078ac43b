"""Seekable, readable HTTP stream using requests Range GETs."""

import io
import requests
from typing import Optional

from .base import RangeNotSupportedError, RANGE_FALLBACK_MAX


HEAD_TIMEOUT = 30
GET_TIMEOUT = 60

# Module-level session for connection pooling
_session = None


def _get_session():
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = requests.Session()
    return _session


def _decide_full_get(content_length: Optional[int], accept_ranges: bool) -> bool:
    """Return True only when not accept_ranges and content_length and content_length < RANGE_FALLBACK_MAX."""
    return (not accept_ranges and
            content_length is not None and
            content_length < RANGE_FALLBACK_MAX)


class HTTPRangeStream(io.RawIOBase):
    """Raw stream over a remote resource; each read is one Range request.

    Seeking only moves a local cursor, so windows over this stream cost one
    request per read and nothing per seek.
    """

    def __init__(self, url: str):
        super().__init__()
        self.url = url
        self.bytes_fetched = 0
        self.requests_made = 0
        self.content_length: Optional[int] = None
        self._accept_ranges = False
        self._full_content: Optional[bytes] = None
        self._position = 0
        self._session = _get_session()

        # Perform HEAD request immediately
        self._perform_head()

    def _perform_head(self):
        """Perform HEAD request to check capabilities."""
        try:
            self.requests_made += 1
            response = self._session.head(self.url, timeout=HEAD_TIMEOUT)
            if response.status_code >= 400:
                raise IOError(f"HEAD request failed with status {response.status_code}")

            content_length_header = response.headers.get('content-length')
            if content_length_header:
                self.content_length = int(content_length_header)

            accept_ranges = response.headers.get('accept-ranges', '').lower()
            self._accept_ranges = accept_ranges == 'bytes'

        except requests.RequestException as e:
            raise IOError(f"HEAD request failed: {e}")

    def _fetch_full_content(self):
        """Download entire file content for small files without range support."""
        if self._full_content is not None:
            return

        try:
            self.requests_made += 1
            response = self._session.get(self.url, timeout=GET_TIMEOUT)
            if response.status_code >= 400:
                raise IOError(f"GET request failed with status {response.status_code}")

            self._full_content = response.content
            self.bytes_fetched = len(self._full_content)

        except requests.RequestException as e:
            raise IOError(f"GET request failed: {e}")

    def _fetch_range(self, start: int, length: int) -> bytes:
        """Fetch at most `length` bytes at `start`; short answers are returned as-is."""
        end = start + length - 1
        headers = {'Range': f'bytes={start}-{end}'}

        try:
            self.requests_made += 1
            response = self._session.get(self.url, headers=headers, timeout=GET_TIMEOUT)
        except requests.RequestException as e:
            raise IOError(f"Range request failed: {e}")

        if response.status_code == 206:
            data = response.content
            self.bytes_fetched += len(data)
            return data
        if response.status_code == 416:
            # requested range starts past the end of the resource
            return b''
        if response.status_code == 200:
            # Server ignored the Range header and sent everything
            if self.content_length and self.content_length >= RANGE_FALLBACK_MAX:
                raise RangeNotSupportedError("Server doesn't support ranges and file is too large")
            self._full_content = response.content
            self.bytes_fetched = len(self._full_content)
            return self._full_content[start:start + length]
        raise IOError(f"Range request failed with status {response.status_code}")

    def _fetch(self, start: int, length: int) -> bytes:
        if self._full_content is not None:
            return self._full_content[start:start + length]

        if _decide_full_get(self.content_length, self._accept_ranges):
            self._fetch_full_content()
            return self._full_content[start:start + length]

        if not self._accept_ranges:
            raise RangeNotSupportedError("Server doesn't support ranges and file is too large")

        return self._fetch_range(start, length)

    # --- io.RawIOBase ---
    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        view = memoryview(b).cast("B")
        length = len(view)
        if self.content_length is not None:
            length = min(length, self.content_length - self._position)
        if length <= 0:
            return 0

        # some servers ignore the end of the requested range
        data = self._fetch(self._position, length)[:length]
        count = len(data)
        view[:count] = data
        self._position += count
        return count

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self._position + offset
        elif whence == io.SEEK_END:
            if self.content_length is None:
                raise io.UnsupportedOperation("Server did not report a content length")
            target = self.content_length + offset
        else:
            raise ValueError(f"Invalid whence value: {whence}")
        if target < 0:
            raise ValueError(f"Negative seek position {target}")
        self._position = target
        return self._position

    def tell(self) -> int:
        return self._position

    def __repr__(self) -> str:
        return f"HTTPRangeStream(url={self.url!r}, position={self._position})"


def open_http_stream(url: str) -> HTTPRangeStream:
    """Create a readable HTTP range stream."""
    return HTTPRangeStream(url)
