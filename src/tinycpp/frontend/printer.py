"""
tinycpp Output Rendering
========================

This module renders a syntax tree as flattened C-style declarations.

PrettyPrinter is the streaming backend: it appends text with an optional
style tag, handles indentation at line starts, and colors output through
click.style when enabled.

PrintContext walks the tree. It keeps the stack of enclosing namespaces
so that every nested declaration gets a fully qualified, flattened name:

    namespace geo { namespace shapes { class Point { int x; }; } }

renders as

    struct geo_shapes_Point {
        int x;
    };

Raw runs are re-emitted token by token, so re-tokenizing the output
yields the same token sequence that was captured.
"""

from enum import Enum, auto
from typing import Iterable, Iterator, Optional

import click

from tinycpp.frontend.lexer import Token, TokenKind, KEYWORDS
from tinycpp.frontend.typenames import BUILTIN_TYPES
from tinycpp.frontend.ast import (
    ASTVisitor,
    Node,
    Scope,
    RawRun,
    TypeRef,
    Variable,
    Field,
    FunctionPointer,
    Function,
    Struct,
    Class,
    Namespace,
)


# =============================================================================
# Print Backend
# =============================================================================

class Style(Enum):
    """Style tags understood by the print backend."""
    PLAIN = auto()
    KEYWORD = auto()
    IDENTIFIER = auto()
    NUMBER = auto()
    STRING = auto()
    OPERATOR = auto()
    COMMENT = auto()


# click.style() arguments per style tag
STYLE_COLORS: dict[Style, dict] = {
    Style.KEYWORD: {"fg": "blue", "bold": True},
    Style.IDENTIFIER: {"fg": "yellow"},
    Style.NUMBER: {"fg": "cyan"},
    Style.STRING: {"fg": "green"},
    Style.OPERATOR: {"fg": "white"},
    Style.COMMENT: {"fg": "bright_black"},
}


class PrettyPrinter:
    """
    Streaming text formatter with indentation and style tags.

    Usage:
        printer = PrettyPrinter()
        printer.write("struct", Style.KEYWORD).write(" Point {")
        printer.newline()
        printer.indent()
        ...
        text = printer.getvalue()

    Attributes:
        indent_width: Spaces per indentation level
        color: Emit ANSI colors for style tags
    """

    def __init__(self, indent_width: int = 4, color: bool = False):
        self.indent_width = indent_width
        self.color = color
        self._chunks: list[str] = []
        self._level = 0
        self._at_line_start = True

    @property
    def at_line_start(self) -> bool:
        return self._at_line_start

    def write(self, text: str, style: Style = Style.PLAIN) -> "PrettyPrinter":
        """Append text, indenting first if at the start of a line."""
        if not text:
            return self
        if self._at_line_start:
            self._chunks.append(" " * (self._level * self.indent_width))
            self._at_line_start = False
        if self.color and style in STYLE_COLORS:
            text = click.style(text, **STYLE_COLORS[style])
        self._chunks.append(text)
        return self

    def newline(self) -> "PrettyPrinter":
        self._chunks.append("\n")
        self._at_line_start = True
        return self

    def indent(self) -> "PrettyPrinter":
        self._level += 1
        return self

    def dedent(self) -> "PrettyPrinter":
        self._level = max(0, self._level - 1)
        return self

    def getvalue(self) -> str:
        return "".join(self._chunks)


# =============================================================================
# Print Context
# =============================================================================

class PrintContext(ASTVisitor):
    """
    Renders a syntax tree with namespace-qualified names.

    Usage:
        context = PrintContext()
        text = context.render(scope)

    Attributes:
        printer: The output backend
        separator: Joins namespace components in qualified names
    """

    def __init__(
        self,
        printer: Optional[PrettyPrinter] = None,
        separator: str = "_",
        builtin_types: Iterable[str] = BUILTIN_TYPES,
    ):
        self.printer = printer or PrettyPrinter()
        self.separator = separator
        self.builtin_types = frozenset(builtin_types)
        self._domain: list[str] = []
        self._declared: set[tuple[str, ...]] = set()

    def render(self, scope: Scope) -> str:
        """Render the whole tree and return the accumulated output."""
        self._declared = set(self._collect_types(scope.children, ()))
        self.visit(scope)
        return self.printer.getvalue()

    def _collect_types(self, nodes: list[Node], path: tuple[str, ...]) -> Iterator[tuple[str, ...]]:
        """Yield the namespace path of every struct and class."""
        for node in nodes:
            if isinstance(node, (Struct, Class)):
                yield path + (node.name,)
            elif isinstance(node, Namespace):
                yield from self._collect_types(node.children, path + (node.name,))

    # =========================================================================
    # Qualified Names
    # =========================================================================

    def enter_namespace(self, name: str) -> None:
        self._domain.append(name)

    def exit_namespace(self) -> None:
        self._domain.pop()

    def qualified_name(self, name: str) -> str:
        """Join the enclosing namespaces and the name: geo_shapes_Point."""
        return self.separator.join([*self._domain, name])

    def print_name(self, name: str, style: Style = Style.IDENTIFIER) -> None:
        self.printer.write(self.qualified_name(name), style)

    def resolve_type(self, name: str) -> str:
        """
        Qualify a type reference by the innermost enclosing namespace that
        declares it. Builtins and unknown names are returned unchanged.
        """
        for depth in range(len(self._domain), -1, -1):
            path = (*self._domain[:depth], name)
            if path in self._declared:
                return self.separator.join(path)
        return name

    # =========================================================================
    # Containers
    # =========================================================================

    def visit_Scope(self, node: Scope):
        for child in node.children:
            self.visit(child)

    def visit_Namespace(self, node: Namespace):
        self.enter_namespace(node.name)
        for child in node.children:
            self.visit(child)
        self.exit_namespace()

    def visit_Struct(self, node: Struct):
        if self._open_aggregate(node.name, node.is_forward_decl):
            return
        for member in node.fields:
            self._member(member)
        self._close_aggregate()

    def visit_Class(self, node: Class):
        if self._open_aggregate(node.name, node.is_forward_decl):
            return
        if node.traits:
            traits = ", ".join(self.resolve_type(trait.name) for trait in node.traits)
            self.printer.write(f"// traits: {traits}", Style.COMMENT).newline()
        for member in node.fields:
            self._member(member)
        self._close_aggregate()

        # Methods become free functions named after the class
        self.enter_namespace(node.name)
        for method in node.methods:
            self.visit(method)
        self.exit_namespace()

    def _open_aggregate(self, name: str, is_forward_decl: bool) -> bool:
        """Write the aggregate header; returns True if nothing else follows."""
        p = self.printer
        p.write("struct", Style.KEYWORD).write(" ")
        self.print_name(name)
        if is_forward_decl:
            p.write(";", Style.OPERATOR).newline()
            return True
        p.write(" ").write("{", Style.OPERATOR).newline()
        p.indent()
        return False

    def _close_aggregate(self) -> None:
        self.printer.dedent()
        self.printer.write("};", Style.OPERATOR).newline()

    def _member(self, node: Node) -> None:
        if isinstance(node, FunctionPointer):
            self.visit(node)
        else:
            self._declaration(node, self.printer.write)
            self.printer.write(";", Style.OPERATOR).newline()

    # =========================================================================
    # Declarations
    # =========================================================================

    def visit_Variable(self, node: Variable):
        self._declaration(node, self.print_name)
        self.printer.write(";", Style.OPERATOR).newline()

    def visit_Field(self, node: Field):
        self._member(node)

    def visit_Function(self, node: Function):
        p = self.printer
        self._return_type(node.return_type)
        self.print_name(node.name)
        self._parameters(node.parameters)
        p.write(";", Style.OPERATOR).newline()

    def visit_FunctionPointer(self, node: FunctionPointer):
        p = self.printer
        self._return_type(node.return_type)
        p.write("(*", Style.OPERATOR)
        p.write(node.name, Style.IDENTIFIER)
        p.write(")", Style.OPERATOR)
        self._parameters(node.parameters)
        p.write(";", Style.OPERATOR).newline()

    def visit_TypeRef(self, node: TypeRef):
        style = Style.KEYWORD if node.name in self.builtin_types else Style.IDENTIFIER
        self.printer.write(self.resolve_type(node.name), style)

    def _return_type(self, type_ref: TypeRef) -> None:
        """Write ``type *`` ahead of a function or function-pointer name."""
        self.visit(type_ref)
        self.printer.write(" ")
        if type_ref.pointers:
            self.printer.write("*" * type_ref.pointers, Style.OPERATOR)

    def _declaration(self, node: Variable, write_name) -> None:
        """Write ``type *name[size] = init`` without the terminator."""
        p = self.printer
        self.visit(node.type_ref)
        p.write(" ")
        if node.type_ref.pointers:
            p.write("*" * node.type_ref.pointers, Style.OPERATOR)
        write_name(node.name, Style.IDENTIFIER)
        if node.type_ref.array_size:
            p.write("[", Style.OPERATOR)
            p.write(str(node.type_ref.array_size), Style.NUMBER)
            p.write("]", Style.OPERATOR)
        if node.initializer is not None:
            p.write(" ").write("=", Style.OPERATOR).write(" ")
            self._tokens(node.initializer.tokens, multiline=False)

    def _parameters(self, parameters: list[Variable]) -> None:
        p = self.printer
        p.write("(", Style.OPERATOR)
        if not parameters:
            p.write("void", Style.KEYWORD)
        for index, parameter in enumerate(parameters):
            if index:
                p.write(",", Style.OPERATOR).write(" ")
            self._declaration(parameter, p.write)
        p.write(")", Style.OPERATOR)

    # =========================================================================
    # Raw Passthrough
    # =========================================================================

    def visit_RawRun(self, node: RawRun):
        self._tokens(node.tokens, multiline=True)
        if not self.printer.at_line_start:
            self.printer.newline()

    def _tokens(self, tokens: list[Token], multiline: bool) -> None:
        """
        Re-emit tokens separated by spaces. In multiline mode, break lines
        after ';', '{' and '}' outside parentheses and indent brace groups.
        """
        p = self.printer
        parens = 0
        separate = False

        for token in tokens:
            if multiline and parens == 0 and token.is_operator("}"):
                if not p.at_line_start:
                    p.newline()
                p.dedent()

            if separate and not p.at_line_start:
                p.write(" ")
            p.write(token.text, self._token_style(token))
            separate = True

            if token.is_operator("(", "["):
                parens += 1
            elif token.is_operator(")", "]"):
                parens = max(0, parens - 1)
            elif multiline and parens == 0 and token.is_operator(";", "{", "}"):
                p.newline()
                if token.is_operator("{"):
                    p.indent()

    def _token_style(self, token: Token) -> Style:
        if token.kind == TokenKind.IDENTIFIER:
            if token.value in KEYWORDS or token.value in self.builtin_types:
                return Style.KEYWORD
            return Style.IDENTIFIER
        if token.kind in (TokenKind.INTEGER, TokenKind.DOUBLE):
            return Style.NUMBER
        if token.kind in (TokenKind.STRING, TokenKind.CHAR):
            return Style.STRING
        return Style.OPERATOR
