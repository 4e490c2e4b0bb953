"""
tinycpp Front End Driver
========================

Glues the pipeline together:

    Source → Lexer → Parser → Scope → PrintContext → flattened C text

Frontend is the configurable entry point; parse_source(), parse_file() and
render() are shortcuts that build a Frontend with default options.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tinycpp.frontend.ast import ASTVisitor, Node, Scope
from tinycpp.frontend.lexer import Lexer, Token
from tinycpp.frontend.parser import Parser
from tinycpp.frontend.printer import PrettyPrinter, PrintContext
from tinycpp.frontend.typenames import BUILTIN_TYPES

logger = logging.getLogger(__name__)


# =============================================================================
# Options and Results
# =============================================================================

@dataclass
class FrontendOptions:
    """
    Front end configuration options.

    Attributes:
        builtin_types: Permanent type names known before parsing starts
        separator: Joins namespace components in qualified names
        indent_width: Spaces per indentation level in rendered output
        color: Style rendered output with ANSI colors
        encoding: Encoding used to read source files
    """
    builtin_types: tuple[str, ...] = BUILTIN_TYPES
    separator: str = "_"
    indent_width: int = 4
    color: bool = False
    encoding: str = "utf-8"


@dataclass
class TranslationResult:
    """
    Result of translating one source.

    Attributes:
        filename: Source filename
        scope: The parsed tree
        output: Rendered text
        token_count: Number of tokens lexed (including EOF)
    """
    filename: str = ""
    scope: Optional[Scope] = None
    output: str = ""
    token_count: int = 0


class _NodeCounter(ASTVisitor):
    def __init__(self):
        self.count = 0

    def visit(self, node: Node):
        self.count += 1
        self.generic_visit(node)


# =============================================================================
# Front End
# =============================================================================

class Frontend:
    """
    tinycpp front end.

    Usage:
        frontend = Frontend(FrontendOptions(separator="__"))
        result = frontend.translate_file("shapes.tcpp")
        print(result.output)

    Attributes:
        options: Front end configuration options
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        self.options = options or FrontendOptions()

    def parse_source(self, source: str, filename: str = "<input>") -> Scope:
        """
        Parse source text into a tree.

        Raises:
            ParseError: On the first lexical or syntax error
        """
        scope, _ = self._parse(source, filename)
        return scope

    def parse_file(self, filepath: str | Path) -> Scope:
        """
        Parse a source file into a tree.

        Raises:
            ParseError: On the first lexical or syntax error
            FileNotFoundError: If the file does not exist
        """
        path = Path(filepath)
        return self.parse_source(self._read(path), str(path))

    def render(self, scope: Scope) -> str:
        """Render a tree as flattened C declarations."""
        printer = PrettyPrinter(indent_width=self.options.indent_width, color=self.options.color)
        context = PrintContext(
            printer,
            separator=self.options.separator,
            builtin_types=self.options.builtin_types,
        )
        return context.render(scope)

    def translate_source(self, source: str, filename: str = "<input>") -> TranslationResult:
        """Parse and render source text in one step."""
        scope, token_count = self._parse(source, filename)
        return TranslationResult(
            filename=filename,
            scope=scope,
            output=self.render(scope),
            token_count=token_count,
        )

    def translate_file(self, filepath: str | Path) -> TranslationResult:
        """Parse and render a source file in one step."""
        path = Path(filepath)
        return self.translate_source(self._read(path), str(path))

    def _read(self, path: Path) -> str:
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {path}")
        return path.read_text(encoding=self.options.encoding)

    def _parse(self, source: str, filename: str) -> tuple[Scope, int]:
        tokens = self._lex(source, filename)
        parser = Parser(
            tokens,
            filename,
            source.splitlines(),
            builtin_types=self.options.builtin_types,
        )
        scope = parser.parse()

        counter = _NodeCounter()
        counter.visit(scope)
        logger.debug(
            f"{filename}: {len(tokens)} tokens, {counter.count} nodes, "
            f"{len(parser.types)} type registrations"
        )
        return scope, len(tokens)

    def _lex(self, source: str, filename: str) -> list[Token]:
        return list(Lexer(source, filename).tokenize())


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>", options: Optional[FrontendOptions] = None) -> Scope:
    """
    Parse tinycpp source text.

    >>> scope = parse_source("namespace geo { struct Point { int x; }; }")
    >>> scope.children[0].children[0].name
    'Point'
    """
    return Frontend(options).parse_source(source, filename)


def parse_file(filepath: str | Path, options: Optional[FrontendOptions] = None) -> Scope:
    """Parse a tinycpp source file."""
    return Frontend(options).parse_file(filepath)


def render(scope: Scope, options: Optional[FrontendOptions] = None) -> str:
    """
    Render a tree as flattened C declarations.

    >>> print(render(parse_source("namespace geo { int origin; }")), end="")
    int geo_origin;
    """
    return Frontend(options).render(scope)
