# =============================================================================
# test_printer.py - Rendering Tests
# =============================================================================
# Tests for the print backend and the namespace-qualifying print context.
#
# Test coverage includes:
#   - Qualified names for namespace-level declarations
#   - Structs, classes, traits, methods and function-pointer fields
#   - Type references resolved against enclosing namespaces
#   - Raw passthrough layout and re-tokenization
#   - Colors and configurable separators/indentation
# =============================================================================

import click
import pytest

from tinycpp.frontend import FrontendOptions, parse_source, render
from tinycpp.frontend.lexer import TokenKind, tokenize
from tinycpp.frontend.printer import PrettyPrinter, PrintContext, Style


# =============================================================================
# Helper Function
# =============================================================================

def translate(source: str, **options) -> str:
    """Parse and render source with the given FrontendOptions fields."""
    frontend_options = FrontendOptions(**options)
    return render(parse_source(source, "<test>", frontend_options), frontend_options)


def token_texts(source: str) -> list[str]:
    return [t.text for t in tokenize(source) if t.kind != TokenKind.EOF]


# =============================================================================
# Print Backend Tests
# =============================================================================

class TestPrettyPrinter:
    """Test the streaming print backend."""

    def test_indentation_applies_at_line_start(self):
        printer = PrettyPrinter()
        printer.write("a {").newline().indent()
        printer.write("b").write(";").newline().dedent()
        printer.write("}")
        assert printer.getvalue() == "a {\n    b;\n}"

    def test_dedent_stops_at_zero(self):
        printer = PrettyPrinter(indent_width=2)
        printer.dedent().write("x")
        assert printer.getvalue() == "x"

    def test_plain_output_ignores_styles(self):
        printer = PrettyPrinter()
        printer.write("int", Style.KEYWORD)
        assert printer.getvalue() == "int"

    def test_color_output(self):
        printer = PrettyPrinter(color=True)
        printer.write("int", Style.KEYWORD).write(" ").write("x", Style.PLAIN)
        value = printer.getvalue()
        assert "\x1b[" in value
        assert click.unstyle(value) == "int x"


# =============================================================================
# Qualified Name Tests
# =============================================================================

class TestQualifiedNames:
    """Test the namespace stack of the print context."""

    def test_enter_and_exit(self):
        context = PrintContext()
        assert context.qualified_name("x") == "x"

        context.enter_namespace("geo")
        context.enter_namespace("shapes")
        assert context.qualified_name("Point") == "geo_shapes_Point"

        context.exit_namespace()
        assert context.qualified_name("Point") == "geo_Point"

    def test_print_name(self):
        context = PrintContext()
        context.enter_namespace("geo")
        context.print_name("origin")
        assert context.printer.getvalue() == "geo_origin"

    def test_namespace_variable(self):
        assert translate("namespace a { namespace b { int count; } }") == "int a_b_count;\n"

    def test_namespace_function(self):
        assert translate("namespace m { int f(void); }") == "int m_f(void);\n"

    def test_custom_separator(self):
        assert translate("namespace a { namespace b { int c; } }", separator="__") == "int a__b__c;\n"


# =============================================================================
# Aggregate Rendering Tests
# =============================================================================

class TestAggregates:
    """Test struct and class rendering."""

    def test_struct(self):
        assert translate("namespace geo { struct Point { int x; int y; }; }") == (
            "struct geo_Point {\n"
            "    int x;\n"
            "    int y;\n"
            "};\n"
        )

    def test_forward_declaration(self):
        assert translate("namespace geo { struct Point; }") == "struct geo_Point;\n"

    def test_class_methods_become_functions(self):
        source = "namespace geo { class Shape { public: int sides; int area(int scale); }; }"
        assert translate(source) == (
            "struct geo_Shape {\n"
            "    int sides;\n"
            "};\n"
            "int geo_Shape_area(int scale);\n"
        )

    def test_traits_comment(self):
        assert translate("class Circle : Drawable, Printable { int r; };") == (
            "struct Circle {\n"
            "    // traits: Drawable, Printable\n"
            "    int r;\n"
            "};\n"
        )

    def test_function_pointer_field(self):
        assert translate("struct Ops { virtual int (*apply)(int a, int b); };") == (
            "struct Ops {\n"
            "    int (*apply)(int a, int b);\n"
            "};\n"
        )

    def test_function_returning_pointer(self):
        assert translate("char * make(int n);") == "char *make(int n);\n"
        assert translate("namespace m { char ** names(void); }") == "char **m_names(void);\n"

    def test_function_pointer_returning_pointer(self):
        assert translate("struct S { virtual char * (*name)(void); };") == (
            "struct S {\n"
            "    char *(*name)(void);\n"
            "};\n"
        )

    def test_method_returning_class_pointer(self):
        output = translate("namespace geo { class Shape { public: Shape * copy(void); }; }")
        assert output.endswith("geo_Shape *geo_Shape_copy(void);\n")

    def test_class_in_nested_namespaces(self):
        output = translate("namespace geo { namespace shapes { class Point { int x; }; } }")
        assert output == (
            "struct geo_shapes_Point {\n"
            "    int x;\n"
            "};\n"
        )

    def test_field_arrays_and_initializers(self):
        assert translate("struct Buffer { char data[16]; int used = 0; };") == (
            "struct Buffer {\n"
            "    char data[16];\n"
            "    int used = 0;\n"
            "};\n"
        )

    def test_indent_width(self):
        assert translate("struct P { int x; };", indent_width=2) == "struct P {\n  int x;\n};\n"


# =============================================================================
# Type Resolution Tests
# =============================================================================

class TestTypeResolution:
    """Type references are qualified by the namespace that declares them."""

    def test_type_in_same_namespace(self):
        output = translate("namespace geo { struct Point { int x; }; Point * origin; }")
        assert output.endswith("geo_Point *geo_origin;\n")

    def test_type_from_enclosing_namespace(self):
        output = translate("namespace a { struct T; namespace b { T * p; } }")
        assert output == "struct a_T;\na_T *a_b_p;\n"

    def test_innermost_declaration_wins(self):
        output = translate("namespace a { struct T; namespace b { struct T; T * p; } }")
        assert output == "struct a_T;\nstruct a_b_T;\na_b_T *a_b_p;\n"

    def test_self_reference_in_class(self):
        output = translate("namespace list { class Node { Node * next; }; }")
        assert "    list_Node *next;\n" in output

    def test_method_parameters_resolve_types(self):
        output = translate("namespace geo { class Shape { public: int same(Shape * other); }; }")
        assert output.endswith("int geo_Shape_same(geo_Shape *other);\n")

    def test_top_level_type_prints_bare(self):
        assert translate("struct Node; Node * head;") == "struct Node;\nNode *head;\n"


# =============================================================================
# Raw Passthrough Tests
# =============================================================================

class TestRawPassthrough:
    """Raw runs are re-emitted token by token."""

    def test_statements_on_separate_lines(self):
        assert translate("x = 1; y = 2;") == "x = 1 ;\ny = 2 ;\n"

    def test_brace_group_is_indented(self):
        assert translate("int main() { return 0; }") == (
            "int main ( ) {\n"
            "    return 0 ;\n"
            "}\n"
        )

    def test_no_break_inside_parentheses(self):
        assert translate("for (i = 0; i < 3; i++) x;") == "for ( i = 0 ; i < 3 ; i ++ ) x ;\n"

    @pytest.mark.parametrize("source", [
        'x = foo(1, "a b") + 0x1F;',
        "if (a->b <<= 2) { y = 2.5; } else { z = 'c'; }",
    ])
    def test_retokenizing_output_preserves_tokens(self, source):
        output = render(parse_source(source))
        assert token_texts(output) == token_texts(source)

    def test_raw_inside_namespace_is_not_qualified(self):
        assert translate("namespace n { counter++; } done();") == "counter ++ ;\ndone ( ) ;\n"

    def test_colored_raw_tokens(self):
        output = translate('x = "s";', color=True)
        assert "\x1b[" in output
        assert click.unstyle(output) == 'x = "s" ;\n'
