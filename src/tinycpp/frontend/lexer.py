"""
tinycpp Lexer (Tokenizer)
=========================

This module converts tinycpp source text into the token stream consumed
by the parser.

Token Kinds
-----------
- IDENTIFIER: names and keywords (keywords are identifiers whose value is
  in KEYWORDS; the parser decides what they mean)
- INTEGER: decimal, hexadecimal (0x), octal (0), binary (0b)
- DOUBLE: decimal literals with a fractional part (1.5)
- STRING: "double quoted"
- CHAR: 'single quoted'
- OPERATOR: punctuation, longest match first (::, ->, <<=, ...)
- EOF: always the last token

Every token keeps its exact source spelling in ``text`` so passthrough
content can be re-emitted verbatim.

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */

Example Usage
-------------
>>> from tinycpp.frontend.lexer import Lexer
>>> for token in Lexer('int * x;', "test.tcpp").tokenize():
...     print(token)
Token(IDENTIFIER, 'int', 1:1)
Token(OPERATOR, '*', 1:5)
Token(IDENTIFIER, 'x', 1:7)
Token(OPERATOR, ';', 1:8)
Token(EOF, 1:9)
"""

import string
import sys
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from tinycpp.errors import SourceLocation
from tinycpp.frontend.errors import (
    LexerError,
    UnterminatedStringError,
    InvalidCharacterError,
)


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Lexical categories of tinycpp tokens."""
    EOF = auto()
    IDENTIFIER = auto()
    INTEGER = auto()
    DOUBLE = auto()
    STRING = auto()         # "double quoted"
    CHAR = auto()           # 'single quoted'
    OPERATOR = auto()


# =============================================================================
# Keywords and Operators
# =============================================================================

KEYWORDS: frozenset[str] = frozenset({
    # tinyc
    "break", "case", "cast", "const", "continue", "default", "do", "else",
    "enum", "extern", "for", "goto", "if", "return", "signed", "sizeof",
    "static", "struct", "switch", "typedef", "union", "unsigned", "while",
    # tinycpp
    "namespace", "class", "trait", "virtual", "override",
    "public", "private", "protected",
})

# Sorted longest first so that scanning takes the longest match
OPERATORS: tuple[str, ...] = tuple(sorted(
    (
        "<<=", ">>=", "...",
        "::", "->", "++", "--", "+=", "-=", "*=", "/=", "%=", "&=", "|=",
        "^=", "==", "!=", "<=", ">=", "&&", "||", "<<", ">>",
        "+", "-", "*", "/", "%", "&", "|", "^", "~", "!", "=", "<", ">",
        "(", ")", "[", "]", "{", "}", ";", ",", ":", ".", "?", "#",
    ),
    key=len,
    reverse=True,
))


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of tinycpp source.

    Attributes:
        kind: The TokenKind classification
        value: Decoded value (interned str for identifiers and operators,
               int, float, or the decoded string contents)
        text: Exact source spelling of the token
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    kind: TokenKind
    value: str | int | float | None
    text: str
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        if self.value is not None:
            return f"Token({self.kind.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.kind.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_operator(self, *spellings: str) -> bool:
        """Return True if this is an operator token with one of the spellings."""
        return self.kind == TokenKind.OPERATOR and self.value in spellings

    def is_keyword(self, *names: str) -> bool:
        """Return True if this is one of the given keywords."""
        return self.kind == TokenKind.IDENTIFIER and self.value in names and self.value in KEYWORDS

    def describe(self) -> str:
        """Human-readable description used in error messages."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        return f"'{self.text}'"


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes tinycpp source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    ESCAPE_SEQUENCES = {
        "n": "\n",
        "r": "\r",
        "t": "\t",
        "b": "\b",
        "f": "\f",
        "v": "\v",
        "\\": "\\",
        "'": "'",
        '"': '"',
        "a": "\a",
    }

    def __init__(self, source: str, filename: str = "<input>", line_number: int = 1):
        """
        Initialize the lexer with source code.

        Args:
            source: The source code to tokenize
            filename: Name of the source file (for error messages)
            line_number: Starting line number
        """
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = line_number
        self._column = 1
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code, ending with EOF.

        Raises:
            LexerError: If invalid syntax is encountered
        """
        while not self._at_end():
            self._skip_whitespace_and_comments()
            if self._at_end():
                break
            yield self._scan_token()

        yield Token(TokenKind.EOF, None, "", self._line, self._column, self.filename)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at current position + offset, or "" past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _peek_digit(self, offset: int = 0) -> bool:
        """True if the character at offset is an ASCII decimal digit."""
        char = self._peek(offset)
        return bool(char) and char in string.digits

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        if self._at_end():
            return ""
        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    # =========================================================================
    # Token Creation
    # =========================================================================

    def _make_token(
        self,
        kind: TokenKind,
        value: str | int | float | None,
        start_pos: int,
        start_line: int,
        start_column: int,
    ) -> Token:
        return Token(
            kind=kind,
            value=value,
            text=self.source[start_pos:self._pos],
            line=start_line,
            column=start_column,
            filename=self.filename,
        )

    def _error(self, message: str, hint: Optional[str] = None) -> LexerError:
        """Create a lexer error at the current location."""
        location = SourceLocation(self.filename, self._line, self._column)
        return LexerError(
            message,
            location,
            at_eof=self._at_end(),
            hint=hint,
            source_line=self._get_current_line(),
        )

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char in " \t\n\r\f\v":
                self._advance()
                continue

            if char == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            if char == "/" and self._peek(1) == "*":
                self._skip_multi_line_comment()
                continue

            break

    def _skip_multi_line_comment(self) -> None:
        start_line = self._line
        start_col = self._column

        self._advance()
        self._advance()

        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()

        raise LexerError(
            "unterminated multi-line comment",
            SourceLocation(self.filename, start_line, start_col),
            at_eof=True,
            hint="add closing */ to terminate the comment",
        )

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        start = (self._pos, self._line, self._column)
        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_identifier(*start)

        if self._peek_digit():
            return self._scan_number(*start)

        if char in "\"'":
            return self._scan_string(char, *start)

        return self._scan_operator(*start)

    def _scan_identifier(self, start_pos: int, start_line: int, start_column: int) -> Token:
        """Identifiers and keywords; the value is an interned symbol."""
        while self._peek() and self._peek() in self.IDENT_CHARS:
            self._advance()

        name = sys.intern(self.source[start_pos:self._pos])
        return self._make_token(TokenKind.IDENTIFIER, name, start_pos, start_line, start_column)

    def _scan_number(self, start_pos: int, start_line: int, start_column: int) -> Token:
        """
        Scan a numeric literal.

        Handles decimal (123), hexadecimal (0x7F), octal (0177),
        binary (0b1010) and doubles (1.5).
        """
        if self._peek() == "0":
            next_char = self._peek(1).lower()

            if next_char == "x":
                return self._scan_prefixed(16, string.hexdigits, start_pos, start_line, start_column)

            if next_char == "b":
                return self._scan_prefixed(2, "01", start_pos, start_line, start_column)

            if next_char and next_char in "01234567":
                self._advance()
                while self._peek() and self._peek() in "01234567":
                    self._advance()
                value = int(self.source[start_pos + 1:self._pos], 8)
                return self._make_token(TokenKind.INTEGER, value, start_pos, start_line, start_column)

        while self._peek_digit():
            self._advance()

        if self._peek() == "." and self._peek_digit(1):
            self._advance()
            while self._peek_digit():
                self._advance()
            value = float(self.source[start_pos:self._pos])
            return self._make_token(TokenKind.DOUBLE, value, start_pos, start_line, start_column)

        value = int(self.source[start_pos:self._pos])
        return self._make_token(TokenKind.INTEGER, value, start_pos, start_line, start_column)

    def _scan_prefixed(
        self,
        base: int,
        digits: str,
        start_pos: int,
        start_line: int,
        start_column: int,
    ) -> Token:
        """Scan digits after a 0x / 0b prefix."""
        prefix = self._advance() + self._advance()
        digits_start = self._pos
        while self._peek() and self._peek() in digits:
            self._advance()

        if self._pos == digits_start:
            raise self._error(f"expected digits after '{prefix}'")

        value = int(self.source[digits_start:self._pos], base)
        return self._make_token(TokenKind.INTEGER, value, start_pos, start_line, start_column)

    def _scan_string(self, quote: str, start_pos: int, start_line: int, start_column: int) -> Token:
        """
        Scan a string ("...") or character ('...') literal.

        Supports escape sequences: \\n, \\r, \\t, \\\\, \\", \\', \\xNN, \\NNN
        """
        self._advance()
        kind = TokenKind.STRING if quote == '"' else TokenKind.CHAR

        chars = []
        while not self._at_end():
            char = self._peek()

            if char == quote:
                self._advance()
                return self._make_token(kind, "".join(chars), start_pos, start_line, start_column)

            if char == "\n":
                raise UnterminatedStringError(
                    quote,
                    SourceLocation(self.filename, start_line, start_column),
                    self._get_current_line(),
                )

            if char == "\\":
                self._advance()
                chars.append(self._scan_escape_sequence())
            else:
                chars.append(self._advance())

        raise UnterminatedStringError(
            quote,
            SourceLocation(self.filename, start_line, start_column),
            at_eof=True,
        )

    def _scan_escape_sequence(self) -> str:
        """Return the character represented by the escape after a backslash."""
        if self._at_end():
            raise self._error("unexpected end of input in escape sequence")

        char = self._advance()

        if char in self.ESCAPE_SEQUENCES:
            return self.ESCAPE_SEQUENCES[char]

        if char == "x":
            hex_chars = []
            for _ in range(2):
                if self._peek() and self._peek() in string.hexdigits:
                    hex_chars.append(self._advance())
                else:
                    break

            if not hex_chars:
                raise self._error("expected hexadecimal digits after '\\x'")

            return chr(int("".join(hex_chars), 16))

        if char in "01234567":
            octal_chars = [char]
            for _ in range(2):
                if self._peek() and self._peek() in "01234567":
                    octal_chars.append(self._advance())
                else:
                    break
            return chr(int("".join(octal_chars), 8) & 0xFF)

        # Unknown escape: keep the character as-is
        return char

    def _scan_operator(self, start_pos: int, start_line: int, start_column: int) -> Token:
        for spelling in OPERATORS:
            if self.source.startswith(spelling, self._pos):
                for _ in spelling:
                    self._advance()
                return self._make_token(
                    TokenKind.OPERATOR,
                    sys.intern(spelling),
                    start_pos,
                    start_line,
                    start_column,
                )

        raise InvalidCharacterError(
            self._peek(),
            SourceLocation(self.filename, start_line, start_column),
            self._get_current_line(),
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Tokenize source into a list ending with an EOF token."""
    return list(Lexer(source, filename).tokenize())
