"""
tinycpp - Namespaces and Classes for a C Subset
===============================================

tinycpp extends a small C dialect with namespaces, classes, traits and
function-pointer fields, and flattens them back into plain C declarations.

Main Components
---------------
- **frontend**: lexer, parser and renderer
    Turns tinycpp source into a syntax tree and renders it with
    namespace-qualified names

- **cli**: command-line tool (tcpp)
    Translates a source file and writes the result

Quick Start
-----------
    >>> from tinycpp import parse_source, render
    >>> scope = parse_source("namespace geo { struct Point { int x; }; }")
    >>> print(render(scope), end="")
    struct geo_Point {
        int x;
    };

Or use the command-line tool:
    $ tcpp shapes.tcpp -o shapes.h
"""

__version__ = "1.0.0"

from tinycpp.errors import TinyCppError, SourceLocation
from tinycpp.frontend import (
    Frontend,
    FrontendOptions,
    TranslationResult,
    ParseError,
    parse_file,
    parse_source,
    render,
)

__all__ = [
    "__version__",
    "TinyCppError",
    "SourceLocation",
    "ParseError",
    "Frontend",
    "FrontendOptions",
    "TranslationResult",
    "parse_file",
    "parse_source",
    "render",
]
