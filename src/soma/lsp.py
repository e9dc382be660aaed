"""Minimal LSP server for soma — lexical diagnostics only."""

from __future__ import annotations

import logging

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from soma import __version__
from soma.errors import ErrorList, ScanError
from soma.scanner import Scanner

logger = logging.getLogger(__name__)

server = LanguageServer("soma-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def _character(lines: list[str], line: int, column: int) -> int:
    """Convert a 1-based byte column to a 0-based UTF-16 character offset."""
    if not 0 <= line < len(lines):
        return column - 1
    prefix = lines[line].encode("utf-8", "surrogatepass")[: column - 1]
    text = prefix.decode("utf-8", "replace")
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def _diagnostic(err: ScanError, lines: list[str]) -> Diagnostic:
    line = err.position.line - 1
    col = _character(lines, line, err.position.column)
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=col),
            end=Position(line=line, character=col + 1),
        ),
        message=err.message,
        severity=DiagnosticSeverity.Error,
        source="soma",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Scan the document and publish its lexical errors."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri

    errors = ErrorList(source)
    scanner = Scanner.from_string(source, filename, errors)
    for _ in scanner:
        pass

    lines = source.split("\n")
    diagnostics = [_diagnostic(err, lines) for err in errors]
    logger.debug("%s: %d diagnostics", filename, len(diagnostics))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
