"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from soma.errors import ErrorList
from soma.scanner import Scanner
from soma.tokens import Token, TokenType, is_ident_char


@pytest.fixture
def scan():
    """Return a helper that scans source and returns tokens (excluding EOF)."""

    def _scan(source: str) -> list[Token]:
        return list(Scanner.from_string(source))

    return _scan


@pytest.fixture
def scan_errors():
    """Return a helper that scans source and returns (tokens, collected errors)."""

    def _scan(source: str | bytes) -> tuple[list[Token], ErrorList]:
        errors = ErrorList(source)
        tokens = list(Scanner.from_string(source, "test.soma", errors))
        return tokens, errors

    return _scan


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_literals(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token literals match the expected list."""
    actual = [t.literal for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def reference_identifier(source: str) -> str:
    """Scan an identifier one character at a time, without the ASCII shortcut."""
    chars = []
    for ch in source:
        if not is_ident_char(ch):
            break
        chars.append(ch)
    return "".join(chars)
