"""Tests for the line reader.

The reader returns one line at a time without its terminator, has no
line-length limit, and reports end-of-input with a sentinel.
"""

import io
import os

import pytest

from py_lsh.config import ReaderConfig
from py_lsh.reader import END_OF_INPUT, LineReader, ResourceExhaustedError


class _RecordingStream(io.StringIO):
    """StringIO that remembers every size passed to readline()."""

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.requests: list[int] = []

    def readline(self, size: int | None = -1) -> str:  # type: ignore[override]
        self.requests.append(-1 if size is None else size)
        return super().readline(size)


class _ExhaustedStream(io.StringIO):
    """Stream whose reads fail as if memory ran out."""

    def readline(self, size: int | None = -1) -> str:  # type: ignore[override]  # noqa: ARG002
        raise MemoryError


class TestReadLine:
    """Verify basic line reading."""

    def test_strips_terminator(self) -> None:
        """The newline should not be part of the returned line."""
        reader = LineReader(io.StringIO("ls -l\n"))
        assert reader.read_line() == "ls -l"

    def test_reads_successive_lines(self) -> None:
        """Each call should return the next line."""
        reader = LineReader(io.StringIO("one\ntwo\n"))
        assert reader.read_line() == "one"
        assert reader.read_line() == "two"

    def test_blank_line_is_not_end_of_input(self) -> None:
        """An empty line is a valid line, distinct from end-of-input."""
        reader = LineReader(io.StringIO("\n"))
        line = reader.read_line()
        assert line == ""
        assert line is not END_OF_INPUT

    def test_end_of_input(self) -> None:
        """An exhausted stream should yield the sentinel."""
        reader = LineReader(io.StringIO(""))
        assert reader.read_line() is END_OF_INPUT

    def test_end_of_input_after_lines(self) -> None:
        """The sentinel should follow the last line."""
        reader = LineReader(io.StringIO("exit\n"))
        reader.read_line()
        assert reader.read_line() is END_OF_INPUT

    def test_unterminated_final_line(self) -> None:
        """Text before end-of-stream is returned, then end-of-input."""
        reader = LineReader(io.StringIO("pwd"))
        assert reader.read_line() == "pwd"
        assert reader.read_line() is END_OF_INPUT

    def test_carriage_return_is_kept(self) -> None:
        """Only the newline is removed; the tokenizer handles '\\r'."""
        reader = LineReader(io.StringIO("ls\r\n"))
        assert reader.read_line() == "ls\r"


class TestBufferGrowth:
    """Verify there is no line-length limit."""

    @pytest.mark.parametrize("length", [0, 1, 7, 8, 9, 16, 1000])
    def test_exact_content_around_capacity(self, length: int) -> None:
        """Lines shorter, equal to, and longer than the buffer are intact."""
        text = "".join(chr(ord("a") + i % 26) for i in range(length))
        reader = LineReader(io.StringIO(text + "\nnext\n"), ReaderConfig(initial_capacity=8))
        assert reader.read_line() == text
        assert reader.read_line() == "next"

    def test_far_longer_than_default_capacity(self) -> None:
        """A 100k-character line should come back unchanged."""
        text = "x" * 100_000
        reader = LineReader(io.StringIO(text + "\n"))
        assert reader.read_line() == text

    def test_request_grows_by_increment(self) -> None:
        """Each full chunk should enlarge the next request."""
        stream = _RecordingStream("a" * 20 + "\n")
        reader = LineReader(stream, ReaderConfig(initial_capacity=4, growth_increment=3))
        assert reader.read_line() == "a" * 20
        assert stream.requests == [4, 7, 10]

    def test_short_line_uses_one_read(self) -> None:
        """A line that fits the first chunk needs a single read."""
        stream = _RecordingStream("ls\n")
        LineReader(stream, ReaderConfig(initial_capacity=16)).read_line()
        assert stream.requests == [16]


class TestResourceExhaustion:
    """Verify memory failures are fatal."""

    def test_memory_error_is_converted(self) -> None:
        """MemoryError should surface as ResourceExhaustedError."""
        reader = LineReader(_ExhaustedStream(""))
        with pytest.raises(ResourceExhaustedError, match="allocation error"):
            reader.read_line()


class TestUndecodableInput:
    """Verify bytes that are not valid UTF-8 do not end the session."""

    def test_invalid_bytes_are_escaped(self) -> None:
        """Bad bytes come through as lone surrogates, and reading continues."""
        stream = io.TextIOWrapper(io.BytesIO(b"\xff ls\nexit\n"), encoding="utf-8")
        reader = LineReader(stream)
        assert reader.read_line() == "\udcff ls"
        assert reader.read_line() == "exit"
        assert reader.read_line() is END_OF_INPUT

    def test_escaped_bytes_round_trip(self) -> None:
        """The original bytes are recoverable with os.fsencode."""
        stream = io.TextIOWrapper(io.BytesIO(b"caf\xe9\n"), encoding="utf-8")
        line = LineReader(stream).read_line()
        assert isinstance(line, str)
        assert os.fsencode(line) == b"caf\xe9"

    def test_explicit_error_handler_kept(self) -> None:
        """A stream with a non-strict handler is left as configured."""
        stream = io.TextIOWrapper(io.BytesIO(b"\xff\n"), encoding="utf-8", errors="replace")
        assert LineReader(stream).read_line() == "�"
