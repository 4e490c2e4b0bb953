# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the tinycpp tokenizer.
#
# Test coverage includes:
#   - Identifiers, keywords and interned symbols
#   - Number formats: decimal, hexadecimal, binary, octal, double
#   - String and character literals with escape sequences
#   - Longest-match operators
#   - Comments, positions and exact source spellings
#   - Error conditions
# =============================================================================

import pytest

from tinycpp.frontend.lexer import Lexer, TokenKind, tokenize
from tinycpp.frontend.errors import (
    LexerError,
    UnterminatedStringError,
    InvalidCharacterError,
)


# =============================================================================
# Helper Function
# =============================================================================

def lex(source: str) -> list:
    """Tokenize and drop the trailing EOF token."""
    tokens = tokenize(source, "<test>")
    assert tokens[-1].kind == TokenKind.EOF
    return tokens[:-1]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF
        assert tokens[0].describe() == "end of input"

    def test_declaration(self):
        tokens = lex("int * x;")
        assert [t.kind for t in tokens] == [
            TokenKind.IDENTIFIER,
            TokenKind.OPERATOR,
            TokenKind.IDENTIFIER,
            TokenKind.OPERATOR,
        ]
        assert [t.value for t in tokens] == ["int", "*", "x", ";"]

    def test_keywords_are_identifiers(self):
        """Keywords lex as identifiers; is_keyword() classifies them."""
        token = lex("namespace")[0]
        assert token.kind == TokenKind.IDENTIFIER
        assert token.is_keyword("namespace")
        assert not lex("geo")[0].is_keyword("geo")

    def test_identifiers_are_interned(self):
        first, second = lex("shape shape")
        assert first.value is second.value

    def test_underscore_identifier(self):
        assert lex("_private_2")[0].value == "_private_2"


# =============================================================================
# Number Format Tests
# =============================================================================

class TestNumberFormats:
    """Test numeric literal formats."""

    @pytest.mark.parametrize("source, value", [
        ("42", 42),
        ("0", 0),
        ("0x1F", 31),
        ("0b101", 5),
        ("017", 15),
    ])
    def test_integers(self, source, value):
        token = lex(source)[0]
        assert token.kind == TokenKind.INTEGER
        assert token.value == value
        assert token.text == source

    def test_double(self):
        token = lex("2.5")[0]
        assert token.kind == TokenKind.DOUBLE
        assert token.value == 2.5

    def test_member_access_is_not_double(self):
        """A dot not followed by a digit is an operator."""
        tokens = lex("1.x")
        assert tokens[0].kind == TokenKind.INTEGER
        assert tokens[1].is_operator(".")

    @pytest.mark.parametrize("source", ["int x = ²;", "x = 1٣;"])
    def test_non_ascii_digits_are_invalid(self, source):
        """Only ASCII digits start or continue a number."""
        with pytest.raises(InvalidCharacterError):
            lex(source)

    def test_missing_hex_digits(self):
        with pytest.raises(LexerError, match="expected digits after '0x'"):
            lex("0x;")


# =============================================================================
# String and Character Literal Tests
# =============================================================================

class TestLiterals:
    """Test string and character literals."""

    def test_string_value_and_text(self):
        token = lex(r'"a\nb"')[0]
        assert token.kind == TokenKind.STRING
        assert token.value == "a\nb"
        assert token.text == r'"a\nb"'

    def test_char_literal(self):
        token = lex("'c'")[0]
        assert token.kind == TokenKind.CHAR
        assert token.value == "c"

    def test_hex_escape(self):
        assert lex(r'"\x41"')[0].value == "A"

    @pytest.mark.parametrize("source, value", [
        (r'"\012"', "\n"),
        (r'"\0"', "\0"),
        (r'"\101B"', "AB"),
    ])
    def test_octal_escape(self, source, value):
        assert lex(source)[0].value == value

    def test_unterminated_at_end_of_input(self):
        with pytest.raises(UnterminatedStringError) as exc_info:
            lex('"abc')
        assert exc_info.value.at_eof

    def test_unterminated_at_newline(self):
        with pytest.raises(UnterminatedStringError) as exc_info:
            lex('"abc\n"')
        assert not exc_info.value.at_eof
        assert exc_info.value.location.line == 1


# =============================================================================
# Operator Tests
# =============================================================================

class TestOperators:
    """Test operator scanning."""

    @pytest.mark.parametrize("source, spelling", [
        ("a<<=b", "<<="),
        ("a::b", "::"),
        ("a->b", "->"),
        ("a&&b", "&&"),
    ])
    def test_longest_match(self, source, spelling):
        tokens = lex(source)
        assert len(tokens) == 3
        assert tokens[1].is_operator(spelling)

    def test_invalid_character(self):
        with pytest.raises(InvalidCharacterError) as exc_info:
            lex("int @x;")
        assert exc_info.value.location.column == 5
        assert exc_info.value.source_line == "int @x;"


# =============================================================================
# Comment and Position Tests
# =============================================================================

class TestCommentsAndPositions:
    """Test comment skipping and source positions."""

    def test_comments_skipped(self):
        tokens = lex("int /* inline */ x; // trailing")
        assert [t.value for t in tokens] == ["int", "x", ";"]

    def test_unterminated_comment(self):
        with pytest.raises(LexerError, match="unterminated multi-line comment") as exc_info:
            lex("int x; /* never closed")
        assert exc_info.value.at_eof

    def test_line_and_column(self):
        tokens = lex("int\n  x;")
        assert (tokens[1].line, tokens[1].column) == (2, 3)
        assert str(tokens[1].location) == "<test>:2:3"

    def test_starting_line_number(self):
        tokens = list(Lexer("x", "<test>", line_number=10).tokenize())
        assert tokens[0].line == 10
