"""
tinycpp Front End
=================

Pipeline
--------
    Source → Lexer → Parser → Scope → PrintContext → flattened C text

The parser is a backtracking recursive descent parser. Declarations and
expressions are told apart by a transactional environment of type names
(see typenames.py); anything the grammar does not model is passed through
as raw token runs.

Usage
-----
>>> from tinycpp.frontend import parse_source, render
>>> scope = parse_source("class Node { public: Node * next; };")
>>> print(render(scope), end="")
struct Node {
    Node *next;
};
"""

from tinycpp.frontend.driver import (
    Frontend,
    FrontendOptions,
    TranslationResult,
    parse_file,
    parse_source,
    render,
)
from tinycpp.frontend.errors import (
    ParseError,
    LexerError,
    UnterminatedStringError,
    InvalidCharacterError,
    UnexpectedTokenError,
    UnknownTypeError,
    TypeAsIdentifierError,
    UnsignedExpectedError,
    UnimplementedError,
)
from tinycpp.frontend.lexer import Lexer, Token, TokenKind, tokenize
from tinycpp.frontend.typenames import TypeEnvironment, BUILTIN_TYPES
from tinycpp.frontend.parser import Parser, Savepoint
from tinycpp.frontend.printer import PrettyPrinter, PrintContext, Style
from tinycpp.frontend.ast import (
    Node,
    Scope,
    RawRun,
    Access,
    TypeRef,
    Variable,
    Field,
    FunctionPointer,
    Function,
    Struct,
    Class,
    Namespace,
    ASTVisitor,
    ASTPrinter,
)

__all__ = [
    # Main API
    "Frontend",
    "FrontendOptions",
    "TranslationResult",
    "parse_file",
    "parse_source",
    "render",
    # Errors
    "ParseError",
    "LexerError",
    "UnterminatedStringError",
    "InvalidCharacterError",
    "UnexpectedTokenError",
    "UnknownTypeError",
    "TypeAsIdentifierError",
    "UnsignedExpectedError",
    "UnimplementedError",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    # Type names
    "TypeEnvironment",
    "BUILTIN_TYPES",
    # Parser
    "Parser",
    "Savepoint",
    # Rendering
    "PrettyPrinter",
    "PrintContext",
    "Style",
    # Syntax tree
    "Node",
    "Scope",
    "RawRun",
    "Access",
    "TypeRef",
    "Variable",
    "Field",
    "FunctionPointer",
    "Function",
    "Struct",
    "Class",
    "Namespace",
    "ASTVisitor",
    "ASTPrinter",
]
