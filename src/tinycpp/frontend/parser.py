"""
tinycpp Recursive Descent Parser
================================

This module turns the token stream produced by the lexer into a syntax
tree. Each grammar production is one method; a production either returns a
finished node with the cursor advanced past it, or raises a ParseError.

Grammar (Simplified EBNF)
-------------------------
program      ::= scope_body EOF
scope_body   ::= (namespace | class | struct | declaration | raw_statement)*
namespace    ::= 'namespace' IDENT '{' scope_body '}'
class        ::= 'class' IDENT (';' | (':' IDENT (',' IDENT)*)? '{' member* '}' ';')
struct       ::= 'struct' IDENT (';' | '{' field* '}' ';')
member       ::= ('public' | 'private' | 'protected') ':'
               | 'override'? (fnptr_field | declaration)
field        ::= fnptr_field | declaration           (no methods)
fnptr_field  ::= 'virtual' type_ref '(' '*' NAME ')' '(' parameters ')' ';'
declaration  ::= type_ref NAME ( '(' parameters ')' ';'
                               | ('[' UNSIGNED ']')? ('=' tokens)? ';' )
parameters   ::= ('void' | variable (',' variable)*)?
variable     ::= type_ref NAME ('[' UNSIGNED ']')? ('=' tokens)?
type_ref     ::= TYPE_NAME '*'*

TYPE_NAME is an identifier currently registered as a type; NAME is an
identifier that is not. Struct and class names are registered as soon as
they are read, so a class can refer to itself inside its own body.

Speculative Parsing
-------------------
At scope level a declaration production is tried under a Savepoint. If it
fails with an UnexpectedTokenError, the Savepoint is restored, which rewinds
the cursor *and* unregisters the type names added during the attempt, and
the tokens are captured verbatim as a raw statement instead. Every other
error aborts the parse.

Example Usage
-------------
>>> from tinycpp.frontend.lexer import tokenize
>>> from tinycpp.frontend.parser import Parser
>>> scope = Parser(tokenize('class Node { Node * next; };')).parse()
>>> scope.children[0].fields[0].type_ref.pointers
1
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from tinycpp.frontend.lexer import Token, TokenKind, KEYWORDS
from tinycpp.frontend.typenames import TypeEnvironment, BUILTIN_TYPES
from tinycpp.frontend.ast import (
    Node,
    Scope,
    RawRun,
    TypeRef,
    Variable,
    Field,
    Access,
    FunctionPointer,
    Function,
    Struct,
    Class,
    Namespace,
)
from tinycpp.frontend.errors import (
    ParseError,
    UnexpectedTokenError,
    UnknownTypeError,
    TypeAsIdentifierError,
    UnsignedExpectedError,
    UnimplementedError,
)

logger = logging.getLogger(__name__)


OPENERS = ("(", "[", "{")
CLOSERS = (")", "]", "}")


# =============================================================================
# Backtracking Parser Base
# =============================================================================

class ParserBase:
    """
    Token cursor primitives shared by recursive descent parsers.

    The token list must end with an EOF token; peeking past the end keeps
    returning it.

    Attributes:
        tokens: List of tokens to parse
        filename: Source filename for error reporting
        source_lines: Original source lines for error context
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            raise ValueError("token list must end with an EOF token")
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []

        self._pos = 0

    # =========================================================================
    # Cursor Primitives
    # =========================================================================

    def peek(self, offset: int = 0) -> Token:
        """Look at the token at current position + offset."""
        pos = self._pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def at_end(self) -> bool:
        return self.peek().kind == TokenKind.EOF

    def pop(self, kind: Optional[TokenKind] = None, expected: Optional[str] = None) -> Token:
        """
        Consume and return the current token.

        Args:
            kind: If given, the token must be of this kind
            expected: Description of the expected token for the error hint

        Raises:
            UnexpectedTokenError: If the token kind does not match
        """
        token = self.peek()
        if kind is not None and token.kind != kind:
            raise self._error(
                UnexpectedTokenError,
                token.describe(),
                expected=expected or kind.name.lower(),
            )
        if token.kind != TokenKind.EOF:
            self._pos += 1
        return token

    def position(self) -> int:
        return self._pos

    def revert_to(self, position: int) -> None:
        self._pos = position

    # =========================================================================
    # Matching Helpers
    # =========================================================================

    def _check_operator(self, *spellings: str) -> bool:
        return self.peek().is_operator(*spellings)

    def _match_operator(self, spelling: str) -> Optional[Token]:
        """Consume the current token if it is the given operator."""
        if self._check_operator(spelling):
            return self.pop()
        return None

    def _expect_operator(self, spelling: str, expected: Optional[str] = None) -> Token:
        if self._check_operator(spelling):
            return self.pop()
        raise self._error(
            UnexpectedTokenError,
            self.peek().describe(),
            expected=expected or f"'{spelling}'",
        )

    def _match_keyword(self, name: str) -> Optional[Token]:
        if self.peek().is_keyword(name):
            return self.pop()
        return None

    def _expect_keyword(self, name: str) -> Token:
        if self.peek().is_keyword(name):
            return self.pop()
        raise self._error(
            UnexpectedTokenError,
            self.peek().describe(),
            expected=f"keyword '{name}'",
        )

    @staticmethod
    def _is_identifier(token: Token) -> bool:
        """True for identifier tokens that are not keywords."""
        return token.kind == TokenKind.IDENTIFIER and token.value not in KEYWORDS

    def _pop_identifier(self, expected: str) -> Token:
        if self._is_identifier(self.peek()):
            return self.pop()
        raise self._error(UnexpectedTokenError, self.peek().describe(), expected=expected)

    # =========================================================================
    # Error Reporting
    # =========================================================================

    def _error(self, error_class: type[ParseError], *args, token: Optional[Token] = None, **kwargs) -> ParseError:
        """Build an error located at ``token`` (default: the current token)."""
        token = token or self.peek()
        return error_class(
            *args,
            location=token.location,
            at_eof=token.kind == TokenKind.EOF,
            source_line=self._source_line(token.line),
            **kwargs,
        )

    def _source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None


# =============================================================================
# Savepoints
# =============================================================================

@dataclass(frozen=True)
class Savepoint:
    """
    Combined snapshot of the token cursor and the type name history.

    Restoring a savepoint rewinds both, so type names registered after the
    snapshot are unrolled together with the tokens that introduced them.
    """
    position: int
    history_length: int


# =============================================================================
# tinycpp Parser
# =============================================================================

class Parser(ParserBase):
    """
    Recursive descent parser for tinycpp.

    Attributes:
        types: The tentative type name environment
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
        builtin_types: Iterable[str] = BUILTIN_TYPES,
    ):
        super().__init__(tokens, filename, source_lines)
        self.types = TypeEnvironment(builtin_types)

    def parse(self) -> Scope:
        """
        Parse the whole token stream.

        Returns:
            Scope containing all top-level declarations and raw runs

        Raises:
            ParseError: On the first error; no partial tree is returned
        """
        anchor = self.peek()
        children = self._scope_body(nested=False)
        self.pop(TokenKind.EOF, "end of input")
        return Scope(token=anchor, children=children)

    # =========================================================================
    # Backtracking
    # =========================================================================

    def snapshot(self) -> Savepoint:
        return Savepoint(self.position(), self.types.mark())

    def restore(self, savepoint: Savepoint) -> None:
        self.revert_to(savepoint.position)
        self.types.rollback_to(savepoint.history_length)

    def _attempt(self, production: Callable[[], Node]) -> Optional[Node]:
        """
        Run a production speculatively.

        Returns the node, or None after restoring the savepoint if the
        production failed on an unexpected token before the end of input.
        """
        savepoint = self.snapshot()
        try:
            return production()
        except UnexpectedTokenError as e:
            if e.at_eof:
                raise
            logger.debug(f"Backtracking to {self.tokens[savepoint.position].location}: {e.message}")
            self.restore(savepoint)
            return None

    # =========================================================================
    # Scopes
    # =========================================================================

    def _scope_body(self, nested: bool) -> list[Node]:
        """
        Parse declarations until EOF, or until the closing '}' if nested.

        Consecutive raw statements are merged into a single RawRun.
        """
        children: list[Node] = []
        raw_tokens: list[Token] = []

        while not self.at_end():
            if nested and self._check_operator("}"):
                break

            production = self._select_production()
            node = self._attempt(production) if production else None
            if node is None:
                raw_tokens.extend(self._raw_statement())
                continue

            self._flush_raw(raw_tokens, children)
            children.append(node)

        self._flush_raw(raw_tokens, children)
        return children

    def _select_production(self) -> Optional[Callable[[], Node]]:
        """Pick the production for the current token, or None for raw."""
        token = self.peek()
        if token.is_keyword("namespace"):
            return self._namespace
        if token.is_keyword("class"):
            return self._class
        if token.is_keyword("struct"):
            return self._struct
        if self._starts_declaration():
            return self._declaration
        return None

    def _starts_declaration(self) -> bool:
        """
        Decide whether the current position commits to a declaration.

        A known type name starts a declaration. So do two identifiers in a
        row: ``foo bar`` is never an expression, so ``foo`` must be a type
        and an unknown ``foo`` is reported instead of passed through. In
        ``foo * a`` with unknown ``foo`` the statement is an expression.
        """
        token = self.peek()
        if not self._is_identifier(token):
            return False
        if self.types.is_type_name(token.value):
            return True
        return self._is_identifier(self.peek(1))

    def _flush_raw(self, raw_tokens: list[Token], children: list[Node]) -> None:
        if raw_tokens:
            children.append(RawRun(token=raw_tokens[0], tokens=list(raw_tokens)))
            raw_tokens.clear()

    def _raw_statement(self) -> list[Token]:
        """
        Consume one statement verbatim.

        A statement ends with ';' at bracket depth 0, or with the '}' that
        closes a brace group opened at depth 0.
        """
        tokens: list[Token] = []
        depth = 0

        while True:
            token = self.peek()

            if token.kind == TokenKind.EOF:
                if depth:
                    raise self._error(UnexpectedTokenError, token.describe(), expected="closing bracket")
                return tokens

            if token.is_operator(*CLOSERS):
                if depth == 0:
                    if tokens:
                        return tokens
                    raise self._error(UnexpectedTokenError, token.describe(), expected="declaration or statement")
                depth -= 1
            elif token.is_operator(*OPENERS):
                depth += 1

            tokens.append(self.pop())
            if depth == 0 and token.is_operator(";", "}"):
                return tokens

    def _initializer(self, stops: tuple[str, ...]) -> RawRun:
        """Capture initializer tokens up to one of ``stops`` at depth 0."""
        tokens: list[Token] = []
        depth = 0

        while True:
            token = self.peek()
            if token.kind == TokenKind.EOF or (depth == 0 and token.is_operator(*stops, *CLOSERS)):
                if depth == 0 and tokens and token.is_operator(*stops):
                    return RawRun(token=tokens[0], tokens=tokens)
                raise self._error(UnexpectedTokenError, token.describe(), expected="initializer expression")

            if token.is_operator(*CLOSERS):
                depth -= 1
            elif token.is_operator(*OPENERS):
                depth += 1
            tokens.append(self.pop())

    # =========================================================================
    # Namespaces and Aggregates
    # =========================================================================

    def _namespace(self) -> Namespace:
        self._expect_keyword("namespace")
        name_token = self._pop_identifier("namespace name")
        self._expect_operator("{")
        children = self._scope_body(nested=True)
        self._expect_operator("}")
        return Namespace(token=name_token, name=name_token.value, children=children)

    def _struct(self) -> Struct:
        """
        Parse a struct definition or forward declaration.

            struct Point { int x; int y; };
            struct Node;
        """
        self._expect_keyword("struct")
        name_token = self._register_type_name("struct name")

        if self._match_operator(";"):
            return Struct(token=name_token, name=name_token.value, is_forward_decl=True)

        self._expect_operator("{")
        fields: list[Node] = []
        while not self._check_operator("}"):
            fields.append(self._member(Access.PUBLIC, allow_methods=False))
        self._expect_operator("}")
        self._expect_operator(";")

        return Struct(token=name_token, name=name_token.value, fields=fields)

    def _class(self) -> Class:
        """
        Parse a class definition or forward declaration.

            class Circle : Shape, Printable {
            public:
                int radius;
                override int id;
                virtual int (*area)(Circle * self);
                int scale(int factor);
            };

        Members are private until an access label says otherwise.
        """
        self._expect_keyword("class")
        name_token = self._register_type_name("class name")

        if self._match_operator(";"):
            return Class(token=name_token, name=name_token.value, is_forward_decl=True)

        traits: list[TypeRef] = []
        if self._match_operator(":"):
            traits.append(self._trait())
            while self._match_operator(","):
                traits.append(self._trait())

        self._expect_operator("{")
        fields: list[Node] = []
        methods: list[Function] = []
        access = Access.PRIVATE

        while not self._check_operator("}"):
            label = self.peek()
            if label.is_keyword("public", "private", "protected"):
                self.pop()
                self._expect_operator(":")
                access = Access[label.value.upper()]
                continue

            member_access = Access.OVERRIDE if self._match_keyword("override") else access
            member = self._member(member_access, allow_methods=True)
            if isinstance(member, Function):
                methods.append(member)
            else:
                fields.append(member)

        self._expect_operator("}")
        self._expect_operator(";")

        return Class(
            token=name_token,
            name=name_token.value,
            traits=traits,
            fields=fields,
            methods=methods,
        )

    def _register_type_name(self, expected: str) -> Token:
        """Read an aggregate name and register it as a type immediately."""
        name_token = self._pop_identifier(expected)
        self.types.add_type_name(name_token.value)
        logger.debug(f"Registered type name '{name_token.value}' at {name_token.location}")
        return name_token

    def _trait(self) -> TypeRef:
        token = self._pop_identifier("trait name")
        return TypeRef(token=token, name=token.value)

    def _member(self, access: Access, allow_methods: bool) -> Node:
        """Parse one field, function-pointer field, or method of an aggregate."""
        token = self.peek()
        if token.is_keyword("namespace", "class", "struct", "trait"):
            raise self._error(UnimplementedError, f"'{token.value}' declarations inside aggregates")
        if token.is_keyword("virtual"):
            return self._function_pointer()
        return self._declaration(access, allow_methods=allow_methods)

    # =========================================================================
    # Declarations
    # =========================================================================

    def _declaration(self, access: Optional[Access] = None, allow_methods: bool = True) -> Node:
        """
        Parse a variable, field, or function prototype.

        ``access`` is None at namespace level (producing Variable) and set
        for aggregate members (producing Field).
        """
        type_ref = self._type_ref()
        name_token = self._declared_name()

        if allow_methods and self._check_operator("("):
            return self._function(type_ref, name_token, member=access is not None)

        variable = self._variable_tail(type_ref, name_token, access, stops=(";",))
        self._expect_operator(";")
        return variable

    def _function(self, return_type: TypeRef, name_token: Token, member: bool) -> Function:
        self._expect_operator("(")
        parameters = self._parameters()
        self._expect_operator(")")

        if member and self._check_operator("{"):
            raise self._error(UnimplementedError, "method bodies")
        self._expect_operator(";")

        return Function(
            token=name_token,
            name=name_token.value,
            return_type=return_type,
            parameters=parameters,
        )

    def _function_pointer(self) -> FunctionPointer:
        """
        Parse a function-pointer field.

            virtual int (*compare)(Item * a, Item * b);
        """
        self._expect_keyword("virtual")
        return_type = self._type_ref()
        self._expect_operator("(")
        self._expect_operator("*")
        name_token = self._declared_name()
        self._expect_operator(")")
        self._expect_operator("(")
        parameters = self._parameters()
        self._expect_operator(")")
        self._expect_operator(";")

        return FunctionPointer(
            token=name_token,
            name=name_token.value,
            return_type=return_type,
            parameters=parameters,
        )

    def _parameters(self) -> list[Variable]:
        """Parse a parameter list up to (not including) the closing ')'."""
        if self._check_operator(")"):
            return []

        token = self.peek()
        if token.kind == TokenKind.IDENTIFIER and token.value == "void" and self.peek(1).is_operator(")"):
            self.pop()
            return []

        parameters = [self._parameter()]
        while self._match_operator(","):
            parameters.append(self._parameter())
        return parameters

    def _parameter(self) -> Variable:
        type_ref = self._type_ref()
        name_token = self._declared_name()
        return self._variable_tail(type_ref, name_token, None, stops=(",", ")"))

    def _variable_tail(
        self,
        type_ref: TypeRef,
        name_token: Token,
        access: Optional[Access],
        stops: tuple[str, ...],
    ) -> Variable:
        """Parse the optional array suffix and initializer after a name."""
        if self._match_operator("["):
            type_ref.array_size = self._unsigned()
            if type_ref.array_size == 0:
                raise self._error(ParseError, "array size must be positive", token=self.peek(-1))
            self._expect_operator("]")

        initializer = None
        if self._match_operator("="):
            initializer = self._initializer(stops)

        if access is None:
            return Variable(
                token=name_token,
                name=name_token.value,
                type_ref=type_ref,
                initializer=initializer,
            )
        return Field(
            token=name_token,
            name=name_token.value,
            type_ref=type_ref,
            initializer=initializer,
            access=access,
        )

    # =========================================================================
    # Terminals
    # =========================================================================

    def _type_ref(self) -> TypeRef:
        """Parse a known type name followed by pointer markers."""
        token = self._pop_identifier("type name")
        if not self.types.is_type_name(token.value):
            raise self._error(UnknownTypeError, token.value, token=token)

        pointers = 0
        while self._match_operator("*"):
            pointers += 1

        return TypeRef(token=token, name=token.value, pointers=pointers)

    def _declared_name(self) -> Token:
        """Parse the name being declared; it must not be a type name."""
        token = self._pop_identifier("identifier")
        if self.types.is_type_name(token.value):
            raise self._error(TypeAsIdentifierError, token.value, token=token)
        return token

    def _unsigned(self) -> int:
        """Parse a non-negative integer literal."""
        sign = self._match_operator("-")
        token = self.pop(TokenKind.INTEGER, "unsigned integer")
        value = -token.value if sign else token.value
        if value < 0:
            raise self._error(UnsignedExpectedError, value, token=sign)
        return value
