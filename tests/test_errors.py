"""Test error reporting: diagnostics sink, abort policy, and formatted context."""

import logging

import pytest

from dmlex.diagnostics import Diagnostic, DiagnosticList, LoggingSink
from dmlex.errors import BadIndentation, LexError, UnexpectedCharacter, UnterminatedString
from dmlex.lexer import Lexer, scan, tokenize
from dmlex.tokens import Position, TokenType


class RecordingSink:
    def __init__(self):
        self.calls = []

    def report(self, message, position):
        self.calls.append((message, position))


class TestDiagnosticsSink:
    def test_reported_before_raise(self):
        sink = RecordingSink()
        with pytest.raises(UnexpectedCharacter):
            tokenize("a @", "u.dm", sink)
        assert sink.calls == [("unexpected character '@'", Position("u.dm", 1, 3))]

    def test_reported_once(self):
        sink = RecordingSink()
        lexer = Lexer("u.dm", '"open', sink)
        with pytest.raises(UnterminatedString):
            lexer.next_token()
        with pytest.raises(UnterminatedString):
            lexer.next_token()
        assert len(sink.calls) == 1

    def test_default_sink_collects(self):
        lexer = Lexer("u.dm", " x")
        with pytest.raises(BadIndentation):
            lexer.next_token()
        assert [d.message for d in lexer.diagnostics] == ["indentation must use tabs"]

    def test_clean_input_reports_nothing(self):
        sink = DiagnosticList()
        tokenize("a\n\tb", "u.dm", sink)
        assert len(sink) == 0

    def test_diagnostic_str(self):
        diag = Diagnostic("Unexpected character", Position("b.dm", 2, 1))
        assert str(diag) == "Parse error at b.dm:2:1: Unexpected character"

    def test_logging_sink(self, caplog):
        with caplog.at_level(logging.ERROR, logger="dmlex.diagnostics"):
            with pytest.raises(LexError):
                tokenize("@", "u.dm", LoggingSink())
        assert "Parse error at u.dm:1:1" in caplog.text


class TestAbortPolicy:
    def test_error_is_sticky(self):
        lexer = Lexer("u.dm", "a @ b")
        assert lexer.next_token().value == "a"
        with pytest.raises(UnexpectedCharacter) as first:
            lexer.next_token()
        with pytest.raises(UnexpectedCharacter) as second:
            lexer.next_token()
        assert first.value is second.value

    def test_scan_returns_partial_tokens(self):
        result = scan("a b\n@", "u.dm")
        assert not result.ok
        assert isinstance(result.error, UnexpectedCharacter)
        assert [t.type for t in result.tokens] == [
            TokenType.IDENT,
            TokenType.IDENT,
            TokenType.NEWLINE,
        ]

    def test_scan_ok(self):
        result = scan("a", "u.dm")
        assert result.ok
        assert result.error is None

    def test_all_errors_are_lex_errors(self):
        for source in [" a", '"x', "/* x", "#bad", "@"]:
            result = scan(source)
            assert isinstance(result.error, LexError), source


class TestErrorFormatting:
    def test_format_contains_line(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("some text @ more", "u.dm")
        assert "some text @ more" in exc_info.value.format()

    def test_format_contains_error_prefix(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("@", "u.dm")
        assert exc_info.value.format().startswith("error: unexpected character")

    def test_format_contains_position(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("ok\n@", "main.dm")
        assert "--> main.dm:2:1" in exc_info.value.format()

    def test_caret_under_column(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("ab @", "u.dm")
        last = exc_info.value.format().splitlines()[-1]
        assert last.endswith("   ^")
        assert last.index("^") - last.index("|") == 5

    def test_tabs_drawn_as_eight_spaces(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a\n\t@", "u.dm")
        lines = exc_info.value.format().splitlines()
        assert lines[3].endswith("| " + " " * 8 + "@")
        assert lines[4].endswith("| " + " " * 8 + "^")

    def test_str_is_formatted(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("@", "u.dm")
        assert str(exc_info.value) == exc_info.value.format()

    def test_source_line_with_remap(self):
        with pytest.raises(LexError) as exc_info:
            tokenize('# 40 "x.dm" 1\nfoo @ bar', "u.dm")
        err = exc_info.value
        assert err.source_line == "foo @ bar"
        assert "40 | foo @ bar" in err.format()

    def test_physical_line_ignores_remap(self):
        with pytest.raises(LexError) as exc_info:
            tokenize('a\n# 40 "x.dm" 1\nfoo @', "u.dm")
        err = exc_info.value
        assert err.position.line == 40
        assert err.physical_line == 3

    def test_physical_line_of_unterminated_comment(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a\n/* open\n\nmore", "u.dm")
        assert exc_info.value.physical_line == 2

    def test_physical_line_defaults_to_position(self):
        err = LexError("boom", Position("u.dm", 7, 1))
        assert err.physical_line == 7
