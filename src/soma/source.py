"""Line bookkeeping: maps byte offsets to line and column positions."""

from __future__ import annotations

from bisect import bisect_right

from soma.tokens import Position


class SourceFile:
    """Line-start table for one source text.

    Line starts are appended by the scanner in scan order. Offsets that do not
    extend the table are ignored, so a file can be reused when re-scanning the
    same source.
    """

    def __init__(self, name: str, size: int) -> None:
        if size < 0:
            raise ValueError(f"invalid file size {size}")
        self._name = name
        self._size = size
        self._lines: list[int] = [0]

    @property
    def name(self) -> str:
        return self._name

    @property
    def size(self) -> int:
        return self._size

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> tuple[int, ...]:
        return tuple(self._lines)

    def add_line(self, offset: int) -> None:
        """Record the byte offset where a new line begins."""
        if self._lines[-1] < offset < self._size:
            self._lines.append(offset)

    def line_start(self, line: int) -> int:
        """Return the byte offset where 1-based line `line` begins."""
        if not 1 <= line <= len(self._lines):
            raise ValueError(f"invalid line number {line} (should be in [1, {len(self._lines)}])")
        return self._lines[line - 1]

    def position(self, offset: int) -> Position:
        """Resolve a byte offset in [0, size] to a Position."""
        if not 0 <= offset <= self._size:
            raise ValueError(f"invalid offset {offset} (should be in [0, {self._size}])")
        idx = bisect_right(self._lines, offset) - 1
        return Position(idx + 1, offset - self._lines[idx] + 1, offset, self._name)

    def __repr__(self) -> str:
        return f"SourceFile({self._name!r}, size={self._size}, lines={len(self._lines)})"
