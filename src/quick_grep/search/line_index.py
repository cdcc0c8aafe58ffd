"""Offset to (line, column) translation over one file's text."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass

LINE_BREAK = "\n"


@dataclass(slots=True, frozen=True)
class LineIndex:
    """Ascending offsets of every line break in one text.

    Only ``\\n`` is a break. A ``\\r`` before it stays part of the line, so
    CRLF text counts the carriage return in the preceding line's columns.
    """

    breaks: tuple[int, ...]

    @property
    def line_count(self) -> int:
        """Return the number of lines, counting a trailing empty line."""
        return len(self.breaks) + 1

    def locate(self, offset: int) -> tuple[int, int]:
        """Return the 1-based ``(line, column)`` for a character offset.

        An offset sitting on a break belongs to the line that break ends.
        """
        if offset < 0:
            raise ValueError("offset must be >= 0")
        row = bisect_left(self.breaks, offset)
        preceding = self.breaks[row - 1] if row > 0 else -1
        column = offset - preceding - 1
        return row + 1, column + 1

    def offset_of(self, line: int, column: int) -> int:
        """Return the character offset for a 1-based ``(line, column)``."""
        if line < 1 or line > self.line_count:
            raise ValueError(f"line must be between 1 and {self.line_count}")
        if column < 1:
            raise ValueError("column must be >= 1")
        preceding = self.breaks[line - 2] if line > 1 else -1
        return preceding + column


def build_line_index(text: str) -> LineIndex:
    """Scan ``text`` once and record every line-break offset."""
    breaks: list[int] = []
    position = text.find(LINE_BREAK)
    while position != -1:
        breaks.append(position)
        position = text.find(LINE_BREAK, position + 1)
    return LineIndex(breaks=tuple(breaks))
