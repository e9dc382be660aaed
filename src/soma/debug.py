"""--debug token table dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from soma.scanner import Scanner
from soma.tokens import Token


def dump_tokens(scanner: Scanner, tokens: list[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one row per token: offset, line:column, type name, literal."""
    file.write(f"{'OFFSET':>6}  {'POS':<8} {'TOKEN':<14} LITERAL\n")
    for tok in tokens:
        pos = scanner.position(tok.offset)
        loc = f"{pos.line}:{pos.column}"
        file.write(f"{tok.offset:>6}  {loc:<8} {str(tok.type):<14} {tok.literal!r}\n")
    file.write(f"{len(tokens)} tokens, {scanner.error_count} errors\n")
