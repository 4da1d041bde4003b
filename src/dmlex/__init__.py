"""DreamMaker lexer: preprocessed source text to an indentation-aware token stream."""

from __future__ import annotations

from dmlex.errors import (
    BadIndentation,
    LexError,
    MalformedDirective,
    UnexpectedCharacter,
    UnterminatedComment,
    UnterminatedString,
)
from dmlex.lexer import Lexer, ScanResult, lex_unit, scan, tokenize
from dmlex.tokens import Position, Span, Token, TokenType

__version__ = "0.1.0"

__all__ = [
    "BadIndentation",
    "LexError",
    "Lexer",
    "MalformedDirective",
    "Position",
    "ScanResult",
    "Span",
    "Token",
    "TokenType",
    "UnexpectedCharacter",
    "UnterminatedComment",
    "UnterminatedString",
    "lex_unit",
    "scan",
    "tokenize",
]
