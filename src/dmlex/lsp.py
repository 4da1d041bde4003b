"""Minimal LSP server for DreamMaker sources: lexical diagnostics only."""

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

from dmlex.diagnostics import LoggingSink
from dmlex.lexer import scan
from dmlex.tokens import TAB_WIDTH

logger = logging.getLogger(__name__)

server = LanguageServer("dmlex-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _column_to_character(line_text: str, column: int) -> int:
    """Translate a 1-based lexer column (tabs count TAB_WIDTH) to a 0-based character."""
    col = 1
    for i, ch in enumerate(line_text):
        if col >= column:
            return i
        col += TAB_WIDTH if ch == "\t" else 1
    return len(line_text)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Lex the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    result = scan(doc.source, filename, LoggingSink(logger))
    if result.error is not None:
        exc = result.error
        # Linemarkers remap exc.position; the editor needs the document's own line
        line = exc.physical_line - 1
        col = _column_to_character(exc.source_line, exc.position.column)
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="dmlex",
            )
        )

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
