"""Error types with formatted source context."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from soma.tokens import Position

ErrorHandler = Callable[[Position, str], None]


class SourceSizeError(ValueError):
    """Raised when a scanner is initialized with a file whose size does not match the source."""

    def __init__(self, file_size: int, src_len: int) -> None:
        self.file_size = file_size
        self.src_len = src_len
        super().__init__(f"file size ({file_size}) does not match src len ({src_len})")


class ScanError(Exception):
    """A lexical error, with position and source context.

    Scanning never raises these; they are handed to an error handler such as
    ErrorList and may be raised or printed by the caller.
    """

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str | None = None) -> str:
        if filename is None:
            filename = self.position.filename or "input.soma"
        # Lines end at "\n" only, matching the scanner's line table
        lines = self.source.split("\n")
        line_idx = self.position.line - 1
        col = self.position.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\r")
        else:
            source_line = ""

        # Columns count bytes; pad by the characters those bytes decode to
        prefix = source_line.encode("utf-8", "surrogatepass")[: col - 1]
        pad = " " * len(prefix.decode("utf-8", "replace"))

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )


class ErrorList:
    """Error handler that collects every reported error as a ScanError."""

    def __init__(self, source: str | bytes) -> None:
        if isinstance(source, bytes):
            source = source.decode("utf-8", "replace")
        self._source = source
        self._errors: list[ScanError] = []

    def __call__(self, position: Position, message: str) -> None:
        self._errors.append(ScanError(message, position, self._source))

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[ScanError]:
        return iter(self._errors)

    def __getitem__(self, index: int) -> ScanError:
        return self._errors[index]

    def sort(self) -> None:
        """Order errors by source offset, keeping report order for ties."""
        self._errors.sort(key=lambda e: e.position.offset)

    def format(self, filename: str | None = None) -> str:
        return "\n".join(e.format(filename) for e in self._errors)
