"""Test double- and single-quoted string literals and their escapes."""

import pytest

from dmlex.errors import UnterminatedString
from dmlex.tokens import Position, TokenType

from tests.conftest import assert_types, assert_values


class TestDoubleQuoted:
    def test_simple(self, lex):
        tokens = lex('"hello"')
        assert_types(tokens, [TokenType.STRING_DQ])
        assert_values(tokens, ["hello"])

    def test_empty(self, lex):
        assert_values(lex('""'), [""])

    def test_span(self, lex):
        tokens = lex('x "ab"')
        assert tokens[1].span.start == Position("test.dm", 1, 3)
        assert tokens[1].span.end == Position("test.dm", 1, 7)

    def test_single_quote_inside(self, lex):
        assert_values(lex('"it\'s"'), ["it's"])


class TestSingleQuoted:
    def test_simple(self, lex):
        tokens = lex("'icon.dmi'")
        assert_types(tokens, [TokenType.STRING_SQ])
        assert_values(tokens, ["icon.dmi"])

    def test_double_quote_inside(self, lex):
        assert_values(lex("'say \"hi\"'"), ['say "hi"'])


class TestEscapes:
    def test_tab(self, lex):
        tokens = lex(r'"a\tb"')
        assert tokens[0].value == "a\tb"

    def test_newline(self, lex):
        tokens = lex(r'"a\nb"')
        assert tokens[0].value == "a\nb"

    def test_escaped_quote(self, lex):
        tokens = lex(r'"say \"hi\""')
        assert tokens[0].value == 'say "hi"'

    def test_escaped_backslash(self, lex):
        tokens = lex(r'"a\\b"')
        assert tokens[0].value == "a\\b"

    def test_other_escape_drops_backslash(self, lex):
        tokens = lex(r'"\[name]"')
        assert tokens[0].value == "[name]"

    def test_escaped_single_quote(self, lex):
        tokens = lex(r"'don\'t'")
        assert tokens[0].value == "don't"

    def test_escape_before_closing_quote_does_not_close(self, lex):
        with pytest.raises(UnterminatedString):
            lex(r'"abc\"')


class TestUnterminated:
    def test_position_at_end_of_input(self, lex):
        with pytest.raises(UnterminatedString) as exc_info:
            lex('"abc')
        assert exc_info.value.position == Position("test.dm", 1, 5)

    def test_multiline_unterminated(self, lex):
        with pytest.raises(UnterminatedString) as exc_info:
            lex("'abc\ndef")
        assert exc_info.value.position == Position("test.dm", 2, 4)


class TestStringsWithIndentation:
    def test_string_opens_block(self, lex):
        tokens = lex('a\n\t"s"')
        assert_types(
            tokens,
            [
                TokenType.IDENT,
                TokenType.NEWLINE,
                TokenType.BLOCK_BEGIN,
                TokenType.STRING_DQ,
                TokenType.BLOCK_END,
            ],
        )
