"""Lexical scanner for the Social Machines (soma) language."""

from __future__ import annotations

from soma.scanner import Scanner, tokenize
from soma.source import SourceFile
from soma.tokens import Position, Token, TokenType

__version__ = "0.1.0"

__all__ = [
    "Position",
    "Scanner",
    "SourceFile",
    "Token",
    "TokenType",
    "__version__",
    "tokenize",
]
