"""
tinycpp Error Hierarchy
=======================

This module defines the root of the exception hierarchy for tinycpp.
All exceptions inherit from TinyCppError, allowing callers to catch all
tinycpp errors with a single except clause if desired.

Exception Hierarchy
-------------------
TinyCppError (base)
└── ParseError (front end, see tinycpp.frontend.errors)
    ├── LexerError - invalid characters, unterminated literals
    ├── UnexpectedTokenError - token kind or spelling mismatch
    ├── UnknownTypeError - identifier used as a type is not a type
    ├── TypeAsIdentifierError - type name used where a name is declared
    ├── UnsignedExpectedError - negative literal where unsigned is required
    └── UnimplementedError - construct not covered by the grammar

Design Philosophy
-----------------
Each exception captures source location information (filename, line, column)
when applicable. Error messages follow this format:

    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class TinyCppError(Exception):
    """
    Base exception for all tinycpp errors.

        try:
            scope = parse_file("shapes.tcpp")
        except TinyCppError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
