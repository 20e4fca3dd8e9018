"""
Byte offset to line/column translation for one source buffer.

A SourceIndex is built once per file, before any rule runs, and then answers
many resolve() queries (one per span per diagnostic). Line starts are kept in
a sorted tuple so each lookup is a binary search.

Conventions:
    - Lines and columns are 1-based.
    - Lines end at b"\\n". A b"\\r" before the newline is part of the line's
      content, so CRLF files resolve exactly like LF files.
    - Columns count Unicode scalar values, not bytes: a multi-byte UTF-8
      character advances the column by one. Tabs also count as one column.
    - Every offset in [0, len(source)] is valid; the end-of-buffer offset is
      used by zero-length spans at the end of a file.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from typing import Iterator

from westwood.errors import DecodeError
from westwood.findings.models import Position, Span

logger = logging.getLogger(__name__)


def _is_continuation_byte(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def _count_scalars(data: bytes) -> int:
    """Number of UTF-8 encoded characters that start inside data."""
    return sum(1 for byte in data if not _is_continuation_byte(byte))


def _line_starts(source: bytes) -> tuple[int, ...]:
    starts = [0]
    pos = source.find(b"\n")
    while pos != -1:
        starts.append(pos + 1)
        pos = source.find(b"\n", pos + 1)
    return tuple(starts)


class SourceIndex:
    """Immutable map from byte offsets to (line, column) for one buffer."""

    encoding = "utf-8"

    def __init__(self, source: bytes, line_starts: tuple[int, ...]) -> None:
        self._source = source
        self._line_starts = line_starts

    @classmethod
    def build(cls, source: bytes) -> "SourceIndex":
        """
        Index a source buffer.

        Raises:
            DecodeError: if source is not valid UTF-8. The error carries the
                offset of the first bad byte and its line/column.
        """
        try:
            source.decode(cls.encoding)
        except UnicodeDecodeError as exc:
            prefix = source[: exc.start]
            line_start = prefix.rfind(b"\n") + 1
            line = prefix.count(b"\n") + 1
            column = _count_scalars(prefix[line_start:]) + 1
            raise DecodeError(exc.start, line, column, exc.reason) from exc

        starts = _line_starts(source)
        logger.debug("Indexed %d byte(s) in %d line(s)", len(source), len(starts))
        return cls(source, starts)

    @property
    def source(self) -> bytes:
        return self._source

    @property
    def length(self) -> int:
        return len(self._source)

    @property
    def line_starts(self) -> tuple[int, ...]:
        return self._line_starts

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def _line_index(self, offset: int) -> int:
        if offset < 0 or offset > len(self._source):
            raise ValueError(
                f"offset {offset} outside of source buffer [0, {len(self._source)}]"
            )
        return bisect_right(self._line_starts, offset) - 1

    def resolve(self, offset: int) -> tuple[int, int]:
        """Return the 1-based (line, column) of a byte offset."""
        index = self._line_index(offset)
        line_start = self._line_starts[index]
        column = _count_scalars(self._source[line_start:offset]) + 1
        return index + 1, column

    def position(self, offset: int) -> Position:
        line, column = self.resolve(offset)
        return Position(line=line, column=column)

    def resolve_span(self, span: Span) -> Span:
        """Return a copy of span with start/end positions filled in."""
        if span.end > len(self._source):
            raise ValueError(
                f"span [{span.start}, {span.end}) outside of source buffer of "
                f"{len(self._source)} byte(s)"
            )
        return Span(
            start=span.start,
            end=span.end,
            start_position=self.position(span.start),
            end_position=self.position(span.end),
        )

    def line_bounds(self, line: int) -> tuple[int, int]:
        """
        Byte range [start, end) of a 1-based line, excluding its b"\\n".
        """
        if line < 1 or line > len(self._line_starts):
            raise ValueError(f"line {line} outside of 1..{len(self._line_starts)}")
        start = self._line_starts[line - 1]
        if line < len(self._line_starts):
            end = self._line_starts[line] - 1
        else:
            end = len(self._source)
        return start, end

    def lines(self) -> Iterator[tuple[int, int, bytes]]:
        """
        Yield (line number, start offset, line bytes) for every line.

        The terminating b"\\n" is not included. A trailing newline at the end
        of the buffer does not produce an extra empty line.
        """
        count = len(self._line_starts)
        for number in range(1, count + 1):
            start, end = self.line_bounds(number)
            if number == count and start == end and count > 1:
                return
            yield number, start, self._source[start:end]
