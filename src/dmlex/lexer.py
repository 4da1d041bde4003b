"""DreamMaker lexer: converts preprocessed source text into a token stream.

Tokens are pulled one at a time with :meth:`Lexer.next_token`. Leading tabs
are significant: the first token on a line is preceded by synthesized
BLOCK_BEGIN / BLOCK_END tokens whenever the tab depth differs from the
previous line that had a token. Linemarker lines written by the C
preprocessor (``# 12 "file.dm" 1``) are consumed and remap the positions
stamped on subsequent tokens.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from dmlex.diagnostics import DiagnosticList, DiagnosticsSink
from dmlex.directives import parse_linemarker
from dmlex.errors import (
    BadIndentation,
    LexError,
    MalformedDirective,
    UnexpectedCharacter,
    UnterminatedComment,
    UnterminatedString,
)
from dmlex.tokens import KEYWORDS, PUNCTUATION, Position, Span, Token, TokenType, is_ident_char

logger = logging.getLogger(__name__)

_STRING_ESCAPES = {"t": "\t", "n": "\n"}


class Lexer:
    """Tokenize one compile unit.

    All state belongs to the instance; create one per unit. After the first
    error the lexer is aborted and every later call raises that error again.
    """

    def __init__(
        self,
        unit: str,
        source: str,
        diagnostics: DiagnosticsSink | None = None,
        *,
        keywords: bool = False,
    ) -> None:
        self._unit = unit
        self._source = source
        self._end = len(source)
        self._diag = diagnostics if diagnostics is not None else DiagnosticList()
        self._keywords = keywords
        self._pos = 0
        self._point = Position(unit, 1, 1)  # position of the next character
        # Tokens produced by one scan step beyond the one returned
        self._backlog: deque[Token] = deque()
        # Tab depth of the current line; None once the line's first token is out
        self._indent: int | None = 0
        self._last_indent = 0
        self._failure: LexError | None = None

    @property
    def diagnostics(self) -> DiagnosticsSink:
        return self._diag

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            if token is None:
                return
            yield token

    def next_token(self) -> Token | None:
        """Return the next token, or None at end of input."""
        if self._failure is not None:
            raise self._failure
        if self._backlog:
            return self._backlog.popleft()
        return self._scan()

    # ------------------------------------------------------------------
    # Character helpers
    # ------------------------------------------------------------------

    def _peek(self) -> str:
        if self._pos < self._end:
            return self._source[self._pos]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        self._point = self._point.advance(ch)
        return ch

    def _match(self, literal: str) -> bool:
        """Consume *literal* if the input continues with it."""
        if not self._source.startswith(literal, self._pos):
            return False
        for _ in literal:
            self._advance()
        return True

    def _line_at(self, offset: int) -> str:
        """Return the physical line containing raw *offset*."""
        line_start = self._source.rfind("\n", 0, offset) + 1
        line_end = self._source.find("\n", offset)
        if line_end == -1:
            line_end = self._end
        return self._source[line_start:line_end].rstrip("\r")

    def _error(
        self,
        cls: type[LexError],
        message: str,
        pos: Position | None = None,
        offset: int | None = None,
    ) -> LexError:
        """Report to the diagnostics sink and return the error to raise."""
        if pos is None:
            pos = self._point
        if offset is None:
            offset = self._pos
        physical_line = self._source.count("\n", 0, offset) + 1
        err = cls(message, pos, self._line_at(offset), physical_line)
        self._diag.report(message, pos)
        self._failure = err
        return err

    # ------------------------------------------------------------------
    # Emission and indentation
    # ------------------------------------------------------------------

    def _emit(self, tt: TokenType, value: str | None, start: Position) -> Token:
        token = Token(tt, value, Span(start, self._point))
        if self._indent is None:
            return token

        emissions: list[Token] = []
        if self._indent > self._last_indent:
            emissions.extend(
                Token(TokenType.BLOCK_BEGIN) for _ in range(self._indent - self._last_indent)
            )
        elif self._indent < self._last_indent:
            emissions.extend(
                Token(TokenType.BLOCK_END) for _ in range(self._last_indent - self._indent)
            )
        self._last_indent = self._indent
        self._indent = None

        emissions.append(token)
        self._backlog.extend(emissions[1:])
        return emissions[0]

    def _close_blocks(self) -> Token | None:
        """At end of input, close every block still open."""
        if self._last_indent == 0:
            return None
        logger.debug("%s: closing %d open block(s) at end of input", self._unit, self._last_indent)
        self._backlog.extend(Token(TokenType.BLOCK_END) for _ in range(self._last_indent - 1))
        self._last_indent = 0
        return Token(TokenType.BLOCK_END)

    # ------------------------------------------------------------------
    # Preprocessor linemarkers
    # ------------------------------------------------------------------

    def _consume_directives(self) -> None:
        while self._point.column == 1 and self._peek() == "#":
            line_end = self._source.find("\n", self._pos)
            if line_end == -1:
                line_end = self._end
            text = self._source[self._pos : line_end]

            marker = parse_linemarker(text)
            if marker is None:
                raise self._error(
                    MalformedDirective, f"malformed preprocessor directive {text.rstrip()!r}"
                )

            self._pos = min(line_end + 1, self._end)
            self._point = Position(marker.unit, marker.line, 1)
            logger.debug("%s: linemarker remaps to %s", self._unit, self._point)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _scan(self) -> Token | None:
        self._consume_directives()

        # Whitespace, line breaks and comments
        while self._pos < self._end:
            start = self._point
            ch = self._peek()

            if ch == "\n":
                self._advance()
                self._indent = 0
                return Token(TokenType.NEWLINE)

            if self._match("/*"):
                return self._lex_block_comment(start)

            if self._match("//"):
                return self._lex_line_comment(start)

            if ch == " ":
                if self._indent is not None:
                    raise self._error(BadIndentation, "indentation must use tabs")
                self._advance()
            elif ch == "\t":
                if self._indent is not None:
                    self._indent += 1
                self._advance()
            elif ch == "\r":
                self._advance()
            else:
                break
        else:
            return self._close_blocks()

        start = self._point
        ch = self._peek()

        if ch == '"' or ch == "'":
            return self._lex_string(ch, start)

        if is_ident_char(ch):
            return self._lex_identifier(start)

        for literal, tt in PUNCTUATION:
            if self._match(literal):
                if tt is TokenType.NEWLINE:
                    # ; separates statements without starting a physical line
                    return Token(TokenType.NEWLINE)
                return self._emit(tt, None, start)

        raise self._error(UnexpectedCharacter, f"unexpected character {ch!r}")

    def _lex_block_comment(self, start: Position) -> Token:
        """Scan a nestable block comment; the opening ``/*`` is consumed."""
        start_offset = self._pos - 2
        content_start = self._pos
        depth = 1
        while self._pos < self._end:
            if self._match("/*"):
                depth += 1
            elif self._match("*/"):
                depth -= 1
                if depth == 0:
                    comment = self._source[content_start : self._pos - 2]
                    return self._emit(TokenType.COMMENT, comment, start)
            else:
                self._advance()

        raise self._error(
            UnterminatedComment,
            "reached end of input while parsing a block comment",
            start,
            start_offset,
        )

    def _lex_line_comment(self, start: Position) -> Token:
        content_start = self._pos
        while self._pos < self._end and self._peek() != "\n":
            self._advance()
        comment = self._source[content_start : self._pos].removesuffix("\r")
        return self._emit(TokenType.COMMENT, comment, start)

    def _lex_string(self, quote: str, start: Position) -> Token:
        self._advance()  # opening quote
        chars = []
        escaped = False
        while True:
            if self._pos >= self._end:
                raise self._error(
                    UnterminatedString, "reached end of input while parsing a string literal"
                )
            ch = self._advance()
            if escaped:
                chars.append(_STRING_ESCAPES.get(ch, ch))
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                break
            else:
                chars.append(ch)

        tt = TokenType.STRING_DQ if quote == '"' else TokenType.STRING_SQ
        return self._emit(tt, "".join(chars), start)

    def _lex_identifier(self, start: Position) -> Token:
        chars = []
        while self._pos < self._end and is_ident_char(self._peek()):
            chars.append(self._advance())
        text = "".join(chars)
        tt = TokenType.IDENT
        if self._keywords:
            tt = KEYWORDS.get(text, TokenType.IDENT)
        return self._emit(tt, text, start)


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Tokens scanned before the first error, and that error if any."""

    tokens: list[Token]
    error: LexError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def scan(
    source: str,
    unit: str = "input.dm",
    diagnostics: DiagnosticsSink | None = None,
    *,
    keywords: bool = False,
    comments: bool = True,
) -> ScanResult:
    """Tokenize a whole unit without raising; the caller decides what an error means."""
    lexer = Lexer(unit, source, diagnostics, keywords=keywords)
    tokens: list[Token] = []
    try:
        for token in lexer:
            if comments or token.type is not TokenType.COMMENT:
                tokens.append(token)
    except LexError as exc:
        return ScanResult(tokens, exc)
    return ScanResult(tokens)


def tokenize(
    source: str,
    unit: str = "input.dm",
    diagnostics: DiagnosticsSink | None = None,
    *,
    keywords: bool = False,
    comments: bool = True,
) -> list[Token]:
    """Convenience function: tokenize source text, raising on the first error."""
    result = scan(source, unit, diagnostics, keywords=keywords, comments=comments)
    if result.error is not None:
        raise result.error
    return result.tokens


def lex_unit(
    path: str | Path,
    unit: str | None = None,
    diagnostics: DiagnosticsSink | None = None,
    *,
    keywords: bool = False,
    comments: bool = True,
) -> list[Token]:
    """Read a (preprocessed) source file and tokenize it."""
    path = Path(path)
    source = path.read_text(encoding="utf-8")
    return tokenize(
        source,
        unit if unit is not None else str(path),
        diagnostics,
        keywords=keywords,
        comments=comments,
    )
