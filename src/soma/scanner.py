"""Soma scanner — converts source text into tokens, one call to scan() at a time."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from soma.errors import ErrorHandler, SourceSizeError
from soma.source import SourceFile
from soma.tokens import (
    PUNCTUATION,
    Position,
    Token,
    TokenType,
    format_char,
    is_binary,
    is_digit,
    is_ident_char,
    is_letter,
    is_lower,
    is_space,
    is_upper,
)

logger = logging.getLogger(__name__)

BOM = "\ufeff"  # byte order mark, only permitted as very first character
EOF = ""  # current character at end of input

_RUNE_ERROR = "\ufffd"

# ASCII identifier bytes, matched directly on the source buffer
_ASCII_IDENT_RUN = re.compile(rb"[A-Za-z0-9_]*")


def _encode(src: str | bytes) -> bytes:
    if isinstance(src, str):
        return src.encode("utf-8", "surrogatepass")
    return bytes(src)


def _utf8_width(lead: int) -> int:
    """Return the sequence length announced by a UTF-8 lead byte, or 0 if invalid."""
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 0


class Scanner:
    """Tokenize Soma source text on demand.

    Each call to scan() returns the next Token. Malformed input is reported
    through the optional error handler and counted in error_count; scanning
    always continues and the stream ends with EOF tokens.
    """

    def __init__(
        self,
        file: SourceFile,
        src: str | bytes,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self.init(file, src, error_handler)

    @classmethod
    def from_string(
        cls,
        text: str | bytes,
        filename: str = "",
        error_handler: ErrorHandler | None = None,
    ) -> Scanner:
        """Create a scanner for a one-off string, with its own SourceFile."""
        src = _encode(text)
        return cls(SourceFile(filename, len(src)), src, error_handler)

    def init(
        self,
        file: SourceFile,
        src: str | bytes,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        """Prepare to tokenize src from the beginning.

        Line starts are recorded in file as they are scanned; a file may be
        reused when re-scanning the same source. Raises SourceSizeError if
        file.size does not match the encoded length of src.

        The handler may already be called here if the first character is
        malformed.
        """
        src = _encode(src)
        if file.size != len(src):
            raise SourceSizeError(file.size, len(src))

        self._file = file
        self._src = src
        self._err = error_handler

        self._ch = " "
        self._offset = 0
        self._rd_offset = 0
        self._line_offset = 0
        self.error_count = 0

        logger.debug("scanning %r (%d bytes)", file.name, len(src))

        self._next()
        if self._ch == BOM:
            self._next()  # ignore BOM at file beginning

    @property
    def file(self) -> SourceFile:
        return self._file

    def position(self, offset: int) -> Position:
        """Resolve a token offset to a line and column."""
        return self._file.position(offset)

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to, but not including, EOF."""
        while True:
            tok = self.scan()
            if tok.type is TokenType.EOF:
                return
            yield tok

    # ------------------------------------------------------------------
    # Error reporting
    # ------------------------------------------------------------------

    def _error(self, offset: int, message: str) -> None:
        position = self._file.position(offset)
        logger.debug("%s: %s", position, message)
        if self._err is not None:
            self._err(position, message)
        self.error_count += 1

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def scan(self) -> Token:
        """Scan and return the next token. Returns EOF indefinitely at end of input."""
        self._skip_whitespace()

        offset = self._offset
        ch = self._ch

        if is_digit(ch):
            return Token(offset, TokenType.INT, self._scan_integer())
        if is_upper(ch):
            return self._scan_name(offset, TokenType.UPPER_IDENT, TokenType.UPPER_KEYWORD)
        if is_lower(ch):
            return self._scan_name(offset, TokenType.LOWER_IDENT, TokenType.LOWER_KEYWORD)
        if is_binary(ch):
            lit = self._scan_binary()
            if lit == "->":
                return Token(offset, TokenType.DEFINE, lit)
            return Token(offset, TokenType.BINARY, lit)

        self._next()

        if ch == EOF:
            return Token(offset, TokenType.EOF, "EOF")
        if ch == "@":
            return self._scan_attribute(offset)
        if ch == "'":
            lit = self._scan_quoted("'", "expecting single-quote (') to end the comment")
            return Token(offset, TokenType.COMMENT, lit)
        if ch == '"':
            lit = self._scan_quoted('"', 'expecting double-quote (") to end the string')
            return Token(offset, TokenType.STRING, lit)
        if ch == ":":
            if self._ch == "=":
                self._next()
                return Token(offset, TokenType.ASSIGN, ":=")
            self._error(offset, "expecting '=' after ':'")
            return Token(offset, TokenType.ILLEGAL, ":")

        tt = PUNCTUATION.get(ch)
        if tt is not None:
            return Token(offset, tt, ch)

        self._error(offset, f"illegal character {format_char(ch)}")
        return Token(offset, TokenType.ILLEGAL, ch)

    def _scan_name(self, offset: int, ident: TokenType, keyword: TokenType) -> Token:
        name = self._scan_identifier()
        if self._ch == ":":
            self._next()
            return Token(offset, keyword, name + ":")
        return Token(offset, ident, name)

    def _scan_attribute(self, offset: int) -> Token:
        # '@' has been consumed; the literal is the bare attribute name
        if is_letter(self._ch):
            name = self._scan_identifier()
        else:
            self._error(self._offset, "expecting attribute name after '@'")
            name = ""
        if self._ch == ":":
            self._next()
            return Token(offset, TokenType.ATTR_SET, name)
        return Token(offset, TokenType.ATTR_GET, name)

    def _scan_identifier(self) -> str:
        """Read the identifier starting at the current character.

        Must only be called when the current character is a letter. ASCII
        letters, digits and underscores are matched straight off the byte
        buffer; the first byte outside that set either becomes the current
        character (ASCII) or hands the rest of the run to _next() (anything
        else). Both paths stop at the same boundary.
        """
        start = self._offset
        end = _ASCII_IDENT_RUN.match(self._src, self._rd_offset).end()

        if end == len(self._src):
            self._offset = self._rd_offset = end
            self._ch = EOF
            return self._literal(start)

        b = self._src[end]
        self._rd_offset = end
        if 0 < b < 0x80:
            # The preceding character belongs to the identifier, so it is
            # not a newline and no line accounting is needed.
            self._ch = chr(b)
            self._offset = end
            self._rd_offset = end + 1
        else:
            self._next()
            while is_ident_char(self._ch):
                self._next()
        return self._literal(start)

    def _scan_integer(self) -> str:
        start = self._offset
        while is_digit(self._ch):
            self._next()
        return self._literal(start)

    def _scan_binary(self) -> str:
        start = self._offset
        while is_binary(self._ch):
            self._next()
        return self._literal(start)

    def _scan_quoted(self, quote: str, message: str) -> str:
        # Opening quote has been consumed; the literal keeps both delimiters
        start = self._offset - 1
        while self._ch != quote and self._ch != EOF:
            self._next()
        if self._ch != quote:
            self._error(self._offset, message)
        self._next()
        return self._literal(start)

    def _literal(self, start: int) -> str:
        return self._src[start : self._offset].decode("utf-8", "replace")

    # ------------------------------------------------------------------
    # Characters
    # ------------------------------------------------------------------

    def _next(self) -> None:
        """Read the next character into _ch; _ch is EOF at end of input."""
        if self._rd_offset < len(self._src):
            self._offset = self._rd_offset
            if self._ch == "\n":
                self._line_offset = self._offset
                self._file.add_line(self._offset)

            b = self._src[self._rd_offset]
            if b < 0x80:
                ch, width = chr(b), 1
                if b == 0:
                    self._error(self._offset, "illegal character NUL")
            else:
                ch, width = self._decode(self._rd_offset)
            self._rd_offset += width
            self._ch = ch
        else:
            self._offset = len(self._src)
            if self._ch == "\n":
                self._line_offset = self._offset
                self._file.add_line(self._offset)
            self._ch = EOF

    def _decode(self, at: int) -> tuple[str, int]:
        width = _utf8_width(self._src[at])
        if width:
            try:
                return self._src[at : at + width].decode("utf-8"), width
            except UnicodeDecodeError:
                pass
        self._error(self._offset, "illegal UTF-8 encoding")
        return _RUNE_ERROR, 1

    def _skip_whitespace(self) -> None:
        while is_space(self._ch):
            self._next()


def tokenize(
    source: str | bytes,
    filename: str = "",
    error_handler: ErrorHandler | None = None,
) -> list[Token]:
    """Convenience function: scan source text and return all tokens, ending with EOF."""
    scanner = Scanner.from_string(source, filename, error_handler)
    tokens = list(scanner)
    tokens.append(scanner.scan())
    return tokens
