"""Token types, positions, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Blocks: synthesized from indentation, or literal braces
    BLOCK_BEGIN = auto()  # indent increase or {
    BLOCK_END = auto()  # indent decrease or }

    # Punctuation
    COMMA = auto()  # ,
    DOT = auto()  # .
    EQUAL = auto()  # =
    EXCLAMATION = auto()  # !
    PAREN_L = auto()  # (
    PAREN_R = auto()  # )
    SHIFT_L = auto()  # <<
    SLASH = auto()  # /

    # Content
    COMMENT = auto()  # /* ... */ or // ..., value is the interior text
    IDENT = auto()  # [A-Za-z0-9_]+
    STRING_DQ = auto()  # "string", value has escapes resolved
    STRING_SQ = auto()  # 'string'

    # Separators
    NEWLINE = auto()  # line break or ;

    # Keywords (only with keyword classification enabled)
    KEYWORD_AS = auto()
    KEYWORD_CONST = auto()
    KEYWORD_DEL = auto()
    KEYWORD_FOR = auto()
    KEYWORD_IF = auto()
    KEYWORD_IN = auto()
    KEYWORD_NEW = auto()
    KEYWORD_PROC = auto()
    KEYWORD_RETURN = auto()
    KEYWORD_SET = auto()
    KEYWORD_TMP = auto()
    KEYWORD_VAR = auto()
    KEYWORD_VERB = auto()


TAB_WIDTH = 8


@dataclass(frozen=True, slots=True)
class Position:
    """Logical source position: compile unit, 1-based line and column."""

    unit: str
    line: int
    column: int

    def advance(self, ch: str) -> Position:
        """Return the position following the consumption of *ch*."""
        if ch == "\n":
            return Position(self.unit, self.line + 1, 1)
        if ch == "\t":
            return Position(self.unit, self.line, self.column + TAB_WIDTH)
        return Position(self.unit, self.line, self.column + 1)

    def __str__(self) -> str:
        return f"{self.unit}:{self.line}:{self.column}"


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open source range [start, end)."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token.

    ``value`` is set for comments, strings and identifiers. ``span`` is None
    for NEWLINE and for blocks synthesized from indentation.
    """

    type: TokenType
    value: str | None = None
    span: Span | None = None


# Ordered: a literal must come before any literal that is a prefix of it.
PUNCTUATION: tuple[tuple[str, TokenType], ...] = (
    ("<<", TokenType.SHIFT_L),
    ("{", TokenType.BLOCK_BEGIN),
    ("}", TokenType.BLOCK_END),
    (",", TokenType.COMMA),
    (".", TokenType.DOT),
    ("=", TokenType.EQUAL),
    ("!", TokenType.EXCLAMATION),
    (";", TokenType.NEWLINE),
    ("(", TokenType.PAREN_L),
    (")", TokenType.PAREN_R),
    ("/", TokenType.SLASH),
)

KEYWORDS: dict[str, TokenType] = {
    "as": TokenType.KEYWORD_AS,
    "const": TokenType.KEYWORD_CONST,
    "del": TokenType.KEYWORD_DEL,
    "for": TokenType.KEYWORD_FOR,
    "if": TokenType.KEYWORD_IF,
    "in": TokenType.KEYWORD_IN,
    "new": TokenType.KEYWORD_NEW,
    "proc": TokenType.KEYWORD_PROC,
    "return": TokenType.KEYWORD_RETURN,
    "set": TokenType.KEYWORD_SET,
    "tmp": TokenType.KEYWORD_TMP,
    "var": TokenType.KEYWORD_VAR,
    "verb": TokenType.KEYWORD_VERB,
}

_IDENT_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")


def is_ident_char(ch: str) -> bool:
    """Return True if ch is a valid identifier character (ASCII only)."""
    return ch in _IDENT_CHARS
