"""Token types, scan results, positions, and character classification helpers."""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import NamedTuple


class TokenType(Enum):
    # Special
    ILLEGAL = auto()
    EOF = auto()

    # Lexical types
    COMMENT = auto()  # 'This is a comment'
    STRING = auto()  # "This is a string"
    INT = auto()  # 42

    # Identifiers
    LOWER_IDENT = auto()  # firstName
    UPPER_IDENT = auto()  # Person
    LOWER_KEYWORD = auto()  # ifTrue:
    UPPER_KEYWORD = auto()  # Else:
    BINARY = auto()  # ! * / + | & - > < = ? \ ~ ^ % runs
    ATTR_GET = auto()  # @name
    ATTR_SET = auto()  # @name:

    # Grouping
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    LPAREN = auto()  # (
    RPAREN = auto()  # )

    # Assignment
    ASSIGN = auto()  # :=
    DEFINE = auto()  # ->

    # Punctuation
    COMMA = auto()  # ,
    SEMICOLON = auto()  # ;
    PERIOD = auto()  # .

    def __str__(self) -> str:
        return TOKEN_NAMES[self]

    def is_literal(self) -> bool:
        """Return True for tokens whose literal is taken from the source text."""
        return self in _LITERALS

    def is_operator(self) -> bool:
        """Return True for grouping, assignment and punctuation tokens."""
        return self in _OPERATORS


# Punctuation, grouping and assignment display as their symbol; everything
# else as its tag.
TOKEN_NAMES = MappingProxyType(
    {
        TokenType.ILLEGAL: "ILLEGAL",
        TokenType.EOF: "EOF",
        TokenType.COMMENT: "COMMENT",
        TokenType.STRING: "STRING",
        TokenType.INT: "INT",
        TokenType.LOWER_IDENT: "LOWER_IDENT",
        TokenType.UPPER_IDENT: "UPPER_IDENT",
        TokenType.LOWER_KEYWORD: "LOWER_KEYWORD",
        TokenType.UPPER_KEYWORD: "UPPER_KEYWORD",
        TokenType.BINARY: "BINARY",
        TokenType.ATTR_GET: "ATTR_GET",
        TokenType.ATTR_SET: "ATTR_SET",
        TokenType.LBRACE: "{",
        TokenType.RBRACE: "}",
        TokenType.LBRACKET: "[",
        TokenType.RBRACKET: "]",
        TokenType.LPAREN: "(",
        TokenType.RPAREN: ")",
        TokenType.ASSIGN: ":=",
        TokenType.DEFINE: "->",
        TokenType.COMMA: ",",
        TokenType.SEMICOLON: ";",
        TokenType.PERIOD: ".",
    }
)

_LITERALS = frozenset(
    {
        TokenType.COMMENT,
        TokenType.STRING,
        TokenType.INT,
        TokenType.LOWER_IDENT,
        TokenType.UPPER_IDENT,
        TokenType.LOWER_KEYWORD,
        TokenType.UPPER_KEYWORD,
        TokenType.BINARY,
        TokenType.ATTR_GET,
        TokenType.ATTR_SET,
    }
)

_OPERATORS = frozenset(
    {
        TokenType.LBRACE,
        TokenType.RBRACE,
        TokenType.LBRACKET,
        TokenType.RBRACKET,
        TokenType.LPAREN,
        TokenType.RPAREN,
        TokenType.ASSIGN,
        TokenType.DEFINE,
        TokenType.COMMA,
        TokenType.SEMICOLON,
        TokenType.PERIOD,
    }
)

# Single characters that map straight to a token once consumed.
PUNCTUATION = MappingProxyType(
    {
        "{": TokenType.LBRACE,
        "}": TokenType.RBRACE,
        "[": TokenType.LBRACKET,
        "]": TokenType.RBRACKET,
        "(": TokenType.LPAREN,
        ")": TokenType.RPAREN,
        ",": TokenType.COMMA,
        ";": TokenType.SEMICOLON,
        ".": TokenType.PERIOD,
    }
)


class Token(NamedTuple):
    """A scan result: byte offset of the first character, type, and source text."""

    offset: int
    type: TokenType
    literal: str


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and byte column, 0-based byte offset."""

    line: int
    column: int
    offset: int
    filename: str = ""

    def __str__(self) -> str:
        prefix = f"{self.filename}:" if self.filename else ""
        return f"{prefix}{self.line}:{self.column}"


# Binary operator characters: ! * / + | & - > < = ? \ ~ ^ %
_BINARY = frozenset("!*/+|&-><=?\\~^%")


def is_binary(ch: str) -> bool:
    """Return True if ch may appear in a binary operator run."""
    return ch in _BINARY


def is_digit(ch: str) -> bool:
    """Return True if ch is a decimal digit (ASCII or any Unicode Nd)."""
    return ch.isdecimal()


def is_letter(ch: str) -> bool:
    """Return True if ch is a letter or underscore."""
    return ch == "_" or ch.isalpha()


def is_upper(ch: str) -> bool:
    """Return True if ch is an uppercase letter (category Lu)."""
    return ch != "" and unicodedata.category(ch) == "Lu"


def is_lower(ch: str) -> bool:
    """Return True if ch is a lowercase letter (category Ll)."""
    return ch != "" and unicodedata.category(ch) == "Ll"


# Latin-1 white space; above it, the Unicode separator categories.
_LATIN1_SPACE = frozenset("\t\n\v\f\r \x85\xa0")
_SPACE_CATEGORIES = frozenset(("Zs", "Zl", "Zp"))


def is_space(ch: str) -> bool:
    """Return True if ch is white space separating tokens.

    Unlike str.isspace(), the information separators U+001C..U+001F
    are not white space.
    """
    if ch in _LATIN1_SPACE:
        return True
    return ch > "\xff" and unicodedata.category(ch) in _SPACE_CATEGORIES


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue an identifier."""
    return is_letter(ch) or is_digit(ch)


def format_char(ch: str) -> str:
    """Format a character as U+XXXX, followed by the quoted character if printable."""
    code = f"U+{ord(ch):04X}"
    if ch.isprintable():
        return f"{code} '{ch}'"
    return code
