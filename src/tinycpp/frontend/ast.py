"""
tinycpp Syntax Tree Definitions
===============================

This module defines the node types built by the parser. The set of node
kinds is closed; rendering and traversal live outside the nodes, in
ASTVisitor subclasses.

Node Hierarchy
--------------
Node (base)
├── Scope - root compilation unit content
├── RawRun - passthrough tokens the grammar does not interpret
├── TypeRef - named type + pointer count + fixed array size
├── Variable - typed name with optional initializer
│   └── Field - variable with an access level (class/struct member)
├── FunctionPointer - function-pointer typed field
├── Function - function or method prototype
├── Struct - plain aggregate
├── Class - aggregate with traits and methods
└── Namespace - named container of declarations

Design Notes
------------
- All nodes are dataclasses holding their anchor token for diagnostics
- A parent exclusively owns its children; the tree is acyclic
- Nodes are complete when their container receives them and are not
  modified afterwards
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from tinycpp.errors import SourceLocation
from tinycpp.frontend.lexer import Token


# =============================================================================
# Base Node
# =============================================================================

@dataclass
class Node:
    """
    Base class for all syntax tree nodes.

    Attributes:
        token: The source token this node is anchored to
    """
    token: Token

    @property
    def location(self) -> SourceLocation:
        return self.token.location

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}@{self.token.line}:{self.token.column}"


# =============================================================================
# Containers and Passthrough
# =============================================================================

@dataclass
class Scope(Node):
    """
    Root of a compilation unit.

    Attributes:
        children: Top-level declarations and raw runs, in source order
    """
    children: list[Node] = field(default_factory=list)


@dataclass
class RawRun(Node):
    """
    Verbatim run of tokens not modeled by a dedicated node.

    Attributes:
        tokens: The captured tokens, in source order
    """
    tokens: list[Token] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(token.text for token in self.tokens)


# =============================================================================
# Types and Declarations
# =============================================================================

class Access(Enum):
    """Member access levels."""
    OVERRIDE = auto()
    PRIVATE = auto()
    PROTECTED = auto()
    PUBLIC = auto()


@dataclass
class TypeRef(Node):
    """
    Reference to a named type.

    Attributes:
        name: The base type symbol
        pointers: Pointer indirection count
        array_size: Fixed array size (0 = not an array)
    """
    name: str = ""
    pointers: int = 0
    array_size: int = 0

    @property
    def is_array(self) -> bool:
        return self.array_size > 0

    def __str__(self) -> str:
        stars = " " + "*" * self.pointers if self.pointers else ""
        suffix = f"[{self.array_size}]" if self.array_size else ""
        return f"{self.name}{stars}{suffix}"


@dataclass
class Variable(Node):
    """
    Variable declaration.

        int x;
        char * name;
        int values[10];
        double ratio = 0.5;

    Attributes:
        name: Variable name
        type_ref: The declared type (including pointer/array info)
        initializer: Optional initializer tokens
    """
    name: str = ""
    type_ref: Optional[TypeRef] = None
    initializer: Optional[RawRun] = None


@dataclass
class Field(Variable):
    """
    Member of a struct or class.

    Attributes:
        access: Member access level
    """
    access: Access = Access.PUBLIC


@dataclass
class FunctionPointer(Node):
    """
    Function-pointer typed field.

        virtual int (*area)(Shape * self, int scale);

    Attributes:
        name: Field name
        return_type: The pointed-to function's return type
        parameters: Parameter declarations
    """
    name: str = ""
    return_type: Optional[TypeRef] = None
    parameters: list[Variable] = field(default_factory=list)


@dataclass
class Function(Node):
    """
    Function or method prototype. Bodies are not modeled.

    Attributes:
        name: Function name
        return_type: The return type
        parameters: Parameter declarations
    """
    name: str = ""
    return_type: Optional[TypeRef] = None
    parameters: list[Variable] = field(default_factory=list)


# =============================================================================
# Aggregates and Namespaces
# =============================================================================

@dataclass
class Struct(Node):
    """
    Struct definition or forward declaration.

    Attributes:
        name: Struct name (registered as a type)
        fields: Field and FunctionPointer members
        is_forward_decl: True for ``struct Name;``
    """
    name: str = ""
    fields: list[Node] = field(default_factory=list)
    is_forward_decl: bool = False


@dataclass
class Class(Node):
    """
    Class definition or forward declaration.

    Attributes:
        name: Class name (registered as a type before the body is parsed)
        traits: Referenced traits
        fields: Field and FunctionPointer members
        methods: Method prototypes
        is_forward_decl: True for ``class Name;``
    """
    name: str = ""
    traits: list[TypeRef] = field(default_factory=list)
    fields: list[Node] = field(default_factory=list)
    methods: list[Function] = field(default_factory=list)
    is_forward_decl: bool = False


@dataclass
class Namespace(Node):
    """
    Named container. Nesting is represented by containment.

    Attributes:
        name: Namespace name (not a type)
        children: Nested declarations and raw runs
    """
    name: str = ""
    children: list[Node] = field(default_factory=list)


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for syntax tree visitors.

    Subclasses override visit_* methods for the node types they care about.

    Usage:
        class ClassCounter(ASTVisitor):
            def __init__(self):
                self.count = 0

            def visit_Class(self, node):
                self.count += 1
    """

    def visit(self, node: Node):
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Node) -> None:
        """Visit all child nodes."""
        for field_value in node.__dict__.values():
            if isinstance(field_value, Node):
                self.visit(field_value)
            elif isinstance(field_value, list):
                for item in field_value:
                    if isinstance(item, Node):
                        self.visit(item)

    def visit_Scope(self, node: Scope): return self.generic_visit(node)
    def visit_RawRun(self, node: RawRun): return self.generic_visit(node)
    def visit_TypeRef(self, node: TypeRef): return self.generic_visit(node)
    def visit_Variable(self, node: Variable): return self.generic_visit(node)
    def visit_Field(self, node: Field): return self.generic_visit(node)
    def visit_FunctionPointer(self, node: FunctionPointer): return self.generic_visit(node)
    def visit_Function(self, node: Function): return self.generic_visit(node)
    def visit_Struct(self, node: Struct): return self.generic_visit(node)
    def visit_Class(self, node: Class): return self.generic_visit(node)
    def visit_Namespace(self, node: Namespace): return self.generic_visit(node)


# =============================================================================
# AST Dump
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Human-readable dump of the tree structure, for debugging.

    Usage:
        print(ASTPrinter().print(scope))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: Node) -> str:
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        self.output.append(f"{'  ' * self.indent_level}{text}")

    def _children(self, title: str, nodes: list[Node]) -> None:
        self._emit(title)
        self.indent_level += 1
        for child in nodes:
            self.visit(child)
        self.indent_level -= 1

    def visit_Scope(self, node: Scope):
        self._children("Scope", node.children)

    def visit_Namespace(self, node: Namespace):
        self._children(f"Namespace: {node.name}", node.children)

    def visit_Struct(self, node: Struct):
        if node.is_forward_decl:
            self._emit(f"Struct: {node.name} (forward)")
            return
        self._children(f"Struct: {node.name}", node.fields)

    def visit_Class(self, node: Class):
        if node.is_forward_decl:
            self._emit(f"Class: {node.name} (forward)")
            return
        traits = ", ".join(trait.name for trait in node.traits)
        self._children(f"Class: {node.name}" + (f" : {traits}" if traits else ""), node.fields)
        self.indent_level += 1
        for method in node.methods:
            self.visit(method)
        self.indent_level -= 1

    def visit_Variable(self, node: Variable):
        init = f" = {node.initializer.text}" if node.initializer else ""
        self._emit(f"Variable: {node.type_ref} {node.name}{init}")

    def visit_Field(self, node: Field):
        init = f" = {node.initializer.text}" if node.initializer else ""
        self._emit(f"Field ({node.access.name.lower()}): {node.type_ref} {node.name}{init}")

    def visit_Function(self, node: Function):
        params = ", ".join(f"{p.type_ref} {p.name}" for p in node.parameters)
        self._emit(f"Function: {node.return_type} {node.name}({params})")

    def visit_FunctionPointer(self, node: FunctionPointer):
        params = ", ".join(f"{p.type_ref} {p.name}" for p in node.parameters)
        self._emit(f"FunctionPointer: {node.return_type} (*{node.name})({params})")

    def visit_RawRun(self, node: RawRun):
        self._emit(f"Raw: {node.text}")

    def visit_TypeRef(self, node: TypeRef):
        self._emit(f"Type: {node}")
