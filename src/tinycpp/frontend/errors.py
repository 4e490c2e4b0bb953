"""
Front End Error Hierarchy
=========================

All lexer and parser failures are raised as a ParseError. The first error
aborts the parse; no partial tree is returned.

Exception Hierarchy
-------------------
ParseError (base for all front end errors)
├── LexerError - tokenization errors
│   ├── UnterminatedStringError - missing closing quote
│   └── InvalidCharacterError - unexpected character
├── UnexpectedTokenError - token does not match the production
├── UnknownTypeError - identifier required to be a type is not registered
├── TypeAsIdentifierError - declared name collides with a registered type
├── UnsignedExpectedError - negative literal where only unsigned is valid
└── UnimplementedError - construct the grammar does not cover yet

Only UnexpectedTokenError is recoverable: a caller holding a Savepoint may
restore it and try another production. Every other error is fatal.

Error Message Format
--------------------
    shapes.tcpp:5:12: error: unknown type 'Pont'
        Pont * origin;
        ^
    hint: declare 'Pont' with 'struct' or 'class' before using it
"""

from typing import Optional

from tinycpp.errors import TinyCppError, SourceLocation


# =============================================================================
# Base Parse Exception
# =============================================================================

class ParseError(TinyCppError):
    """
    Base exception for all front end errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        at_eof: True if the failing token was the end of input
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        at_eof: bool = False,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.at_eof = at_eof
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            shapes.tcpp:5:12: error: unknown type 'Pont'
                Pont * origin;
                ^
            hint: declare 'Pont' with 'struct' or 'class' before using it
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexer Errors
# =============================================================================

class LexerError(ParseError):
    """Source text that cannot be tokenized."""
    pass


class UnterminatedStringError(LexerError):
    """
    Unterminated string or character literal.

    Example:
        char * s = "hello    // Missing closing quote
    """

    def __init__(
        self,
        quote: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        at_eof: bool = False,
    ):
        self.quote = quote
        super().__init__(
            "unterminated string literal",
            location=location,
            at_eof=at_eof,
            hint=f"add closing {quote} to complete the literal",
            source_line=source_line,
        )


class InvalidCharacterError(LexerError):
    """Character that is not valid in source code."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"invalid character '{char}' (0x{ord(char):02X})",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Parser Errors
# =============================================================================

class UnexpectedTokenError(ParseError):
    """
    Unexpected token during parsing.

    Raised when the next token does not have the kind or spelling the
    current production requires.
    """

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        at_eof: bool = False,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected {found}",
            location=location,
            at_eof=at_eof,
            hint=hint,
            source_line=source_line,
        )


class UnknownTypeError(ParseError):
    """
    Identifier required to be a type name is not registered.

    Example:
        Pont origin;     // 'Pont' was never declared
    """

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        at_eof: bool = False,
        source_line: Optional[str] = None,
    ):
        self.name = name
        super().__init__(
            f"unknown type '{name}'",
            location=location,
            at_eof=at_eof,
            hint=f"declare '{name}' with 'struct' or 'class' before using it",
            source_line=source_line,
        )


class TypeAsIdentifierError(ParseError):
    """
    Declared name collides with a registered type name.

    Example:
        struct Point { int x; };
        int Point;       // 'Point' is a type
    """

    def __init__(
        self,
        name: str,
        location: Optional[SourceLocation] = None,
        at_eof: bool = False,
        source_line: Optional[str] = None,
    ):
        self.name = name
        super().__init__(
            f"type name '{name}' used as identifier",
            location=location,
            at_eof=at_eof,
            source_line=source_line,
        )


class UnsignedExpectedError(ParseError):
    """Signed integer literal where only non-negative values are valid."""

    def __init__(
        self,
        value: int,
        location: Optional[SourceLocation] = None,
        at_eof: bool = False,
        source_line: Optional[str] = None,
    ):
        self.value = value
        super().__init__(
            f"expected unsigned integer, got {value}",
            location=location,
            at_eof=at_eof,
            source_line=source_line,
        )


class UnimplementedError(ParseError):
    """
    Construct not covered by any production yet.

    Signals incompleteness of the grammar rather than a user error, and is
    never caught by speculative parsing.
    """

    def __init__(
        self,
        construct: str,
        location: Optional[SourceLocation] = None,
        at_eof: bool = False,
        source_line: Optional[str] = None,
    ):
        self.construct = construct
        super().__init__(
            f"not implemented: {construct}",
            location=location,
            at_eof=at_eof,
            source_line=source_line,
        )
