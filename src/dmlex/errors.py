"""Lexical error types with formatted source context."""

from __future__ import annotations

from dmlex.tokens import TAB_WIDTH, Position


class LexError(Exception):
    """Raised on the first lexing error, with position and source context.

    ``source_line`` is the physical line the error occurred on, without its
    line break, and ``physical_line`` its 1-based index in the scanned text.
    Positions are logical (linemarkers may have remapped them), so both are
    captured by the lexer rather than looked up later.
    """

    def __init__(
        self,
        message: str,
        position: Position,
        source_line: str = "",
        physical_line: int | None = None,
    ) -> None:
        self.message = message
        self.position = position
        self.source_line = source_line
        self.physical_line = physical_line if physical_line is not None else position.line
        super().__init__(self.format())

    def format(self) -> str:
        # Columns count a tab as TAB_WIDTH, so draw tabs the same way
        source_line = self.source_line.replace("\t", " " * TAB_WIDTH)
        col = self.position.column

        pad = " " * (col - 1)
        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {self.position}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )


class BadIndentation(LexError):
    """A space was found while line-leading indentation was being read."""


class UnterminatedString(LexError):
    """End of input was reached inside a string literal."""


class UnterminatedComment(LexError):
    """End of input was reached inside a block comment."""


class MalformedDirective(LexError):
    """A ``#`` line at column 1 is not a recognized linemarker."""


class UnexpectedCharacter(LexError):
    """No token production matches at the current position."""
