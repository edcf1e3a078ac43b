"""Tests for the write-side window."""

import io

import pytest

from subio.core.model import SeekOutOfBoundsError
from subio.io.write import SubWriter


class OverReportingStream(io.BytesIO):
    """Claims to have written more than it was given."""

    def write(self, b):
        return super().write(b) + 5


class FlushRecorder(io.BytesIO):
    def __init__(self, *args):
        super().__init__(*args)
        self.flushes = 0

    def flush(self):
        self.flushes += 1
        super().flush()


class FailingStream(io.BytesIO):
    def write(self, b):
        raise BrokenPipeError("inner went away")


class FailingFlushStream(io.BytesIO):
    def flush(self):
        raise BrokenPipeError("flush went away")


class TestBoundedWrite:
    """Test the default, bounded write policy."""

    def test_write_is_clamped(self):
        """Writing 8 bytes into a 3-byte window writes 3, then nothing."""
        cursor = io.BytesIO(bytes(range(10)))
        writer = SubWriter.from_seek(cursor, 5, io.SEEK_SET, 3)

        assert writer.write(bytes(range(8))) == 3
        assert writer.write(bytes([1, 2])) == 0

        assert writer.detach().getvalue() == bytes([0, 1, 2, 3, 4, 0, 1, 2, 8, 9])

    def test_partial_fill(self):
        cursor = io.BytesIO(bytearray(6))
        writer = SubWriter.from_seek(cursor, 1, io.SEEK_SET, 4)
        assert writer.write(b"ab") == 2
        assert writer.tell() == 2
        assert writer.write(b"cdefg") == 2
        assert writer.tell() == 4
        assert writer.write(b"h") == 0
        assert cursor.getvalue() == b"\x00abcd\x00"

    def test_seek_and_overwrite(self):
        """Seeking inside the window moves where the next write lands."""
        cursor = io.BytesIO(b"0123456789")
        writer = SubWriter.from_seek(cursor, 2, io.SEEK_SET, 6)
        writer.write(b"abcdef")
        assert writer.seek(1) == 1
        assert writer.write(b"XY") == 2
        assert writer.seek(-1, io.SEEK_END) == 5
        assert writer.write(b"ZZZ") == 1
        assert cursor.getvalue() == b"01aXYdeZ89"

    def test_seek_then_tell(self):
        """Seeking to k reports k for every position in the window."""
        writer = SubWriter.from_seek(io.BytesIO(bytes(10)), 5, io.SEEK_SET, 3)
        for k in range(4):
            assert writer.seek(k) == k
            assert writer.tell() == k
            assert writer.inner_position == 5 + k

    def test_seek_below_start(self):
        """A seek before the window fails and leaves the position alone."""
        writer = SubWriter.from_seek(io.BytesIO(bytes(10)), 5, io.SEEK_SET, 3)
        writer.write(b"a")
        with pytest.raises(SeekOutOfBoundsError, match="seek position out of bounds"):
            writer.seek(-2, io.SEEK_CUR)
        with pytest.raises(SeekOutOfBoundsError):
            writer.seek(-4, io.SEEK_END)
        assert writer.tell() == 1
        assert writer.inner_position == 6

    def test_empty_window(self):
        writer = SubWriter(io.BytesIO(), 0, 0)
        assert writer.write(b"abc") == 0
        assert writer.tell() == 0

    def test_over_reporting_inner_shrinks_window(self):
        """An inner stream claiming extra bytes shrinks the window to the old position."""
        writer = SubWriter.from_seek(OverReportingStream(bytes(10)), 2, io.SEEK_SET, 4)
        with pytest.warns(RuntimeWarning, match="shrinking window end"):
            assert writer.write(b"ab") == 7
        assert writer.window.end == 2
        assert writer.tell() == 7
        assert writer.write(b"c") == 0


class TestUnboundedWrite:
    """Test write_beyond, the escape hatch past the window end."""

    def test_write_past_end(self):
        """Long writes go through in full and the end stays put."""
        cursor = io.BytesIO(bytes(10))
        writer = SubWriter.from_seek(cursor, 2, io.SEEK_SET, 3, write_beyond=True)
        assert writer.write(b"abcdef") == 6
        assert writer.tell() == 6
        assert writer.window.end == 5
        assert cursor.getvalue() == b"\x00\x00abcdef\x00\x00"

        # SEEK_END still resolves against the configured end
        assert writer.seek(0, io.SEEK_END) == 3
        assert writer.write(b"Z") == 1
        assert cursor.getvalue() == b"\x00\x00abcZef\x00\x00"

    def test_grows_inner(self):
        cursor = io.BytesIO(b"0123")
        writer = SubWriter.from_seek(cursor, 2, io.SEEK_SET, 2, write_beyond=True)
        assert writer.write(b"abcd") == 4
        assert cursor.getvalue() == b"01abcd"

    def test_toggle_policy(self):
        """write_beyond can be switched on an existing window."""
        cursor = io.BytesIO(bytes(6))
        writer = SubWriter.from_seek(cursor, 0, io.SEEK_SET, 2)
        assert not writer.write_beyond
        assert writer.write(b"abc") == 2
        writer.write_beyond = True
        assert writer.write(b"cd") == 2
        assert writer.tell() == 4
        writer.write_beyond = False
        assert writer.write(b"e") == 0
        assert cursor.getvalue() == b"abcd\x00\x00"


class TestWriterLifecycle:
    """Test flush, errors from inner and ownership hand-back."""

    def test_flush_passthrough(self):
        inner = FlushRecorder(bytes(4))
        writer = SubWriter(inner, 0, 4)
        writer.flush()
        assert inner.flushes == 1

    def test_inner_errors_propagate(self):
        """Failures from inner come through unchanged and do not move the window."""
        writer = SubWriter(FailingStream(), 0, 4)
        with pytest.raises(BrokenPipeError, match="inner went away"):
            writer.write(b"ab")
        assert writer.tell() == 0

    def test_detach_flushes(self):
        inner = FlushRecorder(bytes(4))
        writer = SubWriter(inner, 0, 4)
        writer.write(b"ab")
        assert writer.detach() is inner
        assert inner.flushes == 1
        assert writer.closed
        assert not inner.closed
        with pytest.raises(ValueError):
            writer.write(b"c")

    def test_from_current(self):
        cursor = io.BytesIO(bytes(8))
        cursor.seek(3)
        writer = SubWriter.from_current(cursor, 2)
        assert writer.window.start == 3
        assert writer.write(b"xyz") == 2
        assert cursor.getvalue() == b"\x00\x00\x00xy\x00\x00\x00"

    def test_capabilities(self):
        writer = SubWriter(io.BytesIO(), 0, 4)
        assert writer.writable()
        assert writer.seekable()
        assert not writer.readable()
        assert "write_beyond=False" in repr(writer)

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            SubWriter(io.BytesIO(), 0, -1)

    def test_flush_errors_propagate(self):
        """A failing inner flush surfaces unchanged from flush() and detach()."""
        writer = SubWriter(FailingFlushStream(bytes(4)), 0, 4)
        writer.write(b"ab")
        with pytest.raises(BrokenPipeError, match="flush went away"):
            writer.flush()
        with pytest.raises(BrokenPipeError, match="flush went away"):
            writer.detach()
        assert writer.closed

    def test_repr_uses_class_name(self):
        class EntryWriter(SubWriter):
            pass

        writer = EntryWriter(io.BytesIO(), 2, 4)
        assert repr(writer) == "EntryWriter(start=2, end=6, position=0, write_beyond=False)"
