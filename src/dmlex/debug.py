"""Human-readable token stream dump."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from dmlex.tokens import Span, Token, TokenType


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one token per line to *file*, indented by block depth."""
    depth = 0
    for token in tokens:
        if token.type == TokenType.BLOCK_END:
            depth = max(0, depth - 1)
        file.write(f"{_indent(depth)}{format_token(token)}\n")
        if token.type == TokenType.BLOCK_BEGIN:
            depth += 1


def format_token(token: Token) -> str:
    parts = [token.type.name]
    if token.value is not None:
        parts.append(repr(token.value))
    if token.span is not None:
        parts.append(f"@ {_format_span(token.span)}")
    return " ".join(parts)


def _indent(depth: int) -> str:
    return "  " * depth


def _format_span(span: Span) -> str:
    start, end = span.start, span.end
    if start.unit != end.unit:
        return f"{start}-{end}"
    return f"{start}-{end.line}:{end.column}"
