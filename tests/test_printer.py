"""
Tests for the canonical AST printer.
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from mirrow.parser import AstPrinter, format_program, parse_source


def render(source):
    result = parse_source(source)
    assert result.success, [e.report() for e in result.errors]
    return format_program(result.program)


class TestPrinterForms(unittest.TestCase):
    """Each node kind renders in its canonical form."""

    def test_binary_is_fully_parenthesized(self):
        self.assertEqual(render("2 + 3 * 4"), "(2 + (3 * 4))")
        self.assertEqual(render("2 * 3 + 4"), "((2 * 3) + 4)")

    def test_grouping(self):
        self.assertEqual(render("(1 + 2) * 3"), "((1 + 2) * 3)")
        self.assertEqual(render("(x)"), "(x)")

    def test_pipeline(self):
        self.assertEqual(render("a |> b |> c"), "((a |> b) |> c)")

    def test_call_list_and_access(self):
        self.assertEqual(render("f(a, b)"), "f(a, b)")
        self.assertEqual(render("[1, 2,]"), "[1, 2]")
        self.assertEqual(render("xs[0].name"), "xs[0].name")

    def test_struct_forms(self):
        self.assertEqual(render('{ name = "ada" age = 36 }'), '{ name = "ada", age = 36 }')
        self.assertEqual(render("user <- { age = 37 }"), "user <- { age = 37 }")
        self.assertEqual(render("xs <- [4]"), "xs <- [4]")
        self.assertEqual(render("{}"), "{}")

    def test_lambda(self):
        self.assertEqual(render("fn(a, b) -> a + b"), "fn(a, b) -> { (a + b) }")
        self.assertEqual(render("async fn() -> { x; y }"), "async fn() -> { x; y }")

    def test_function(self):
        self.assertEqual(render("func add(a, b) { a + b }"), "func add(a, b) { (a + b) }")
        self.assertEqual(render("async func noop() {}"), "async func noop() {}")

    def test_let_and_import(self):
        self.assertEqual(render("let x = 1"), "let x = 1")
        self.assertEqual(render("let! y = f()"), "let! y = f()")
        self.assertEqual(render('import "std/io"'), 'import "std/io"')

    def test_match(self):
        self.assertEqual(
            render("match x { 1 | 2 -> a, { p, q } -> p, _ -> b, }"),
            "match x { 1 | 2 -> a, { p, q } -> p, _ -> b }"
        )
        self.assertEqual(render("match x {}"), "match x {}")

    def test_match_block_arms(self):
        self.assertEqual(
            render("match x { 1 -> { log(x); x }, 2 -> { y }, _ -> {} }"),
            "match x { 1 -> { log(x); x }, 2 -> y, _ -> {} }"
        )

    def test_match_arm_struct_results(self):
        self.assertEqual(render("match x { _ -> ({ ok = true }) }"),
                         "match x { _ -> ({ ok = true }) }")
        self.assertEqual(render("match x { _ -> { { ok = true } } }"),
                         "match x { _ -> { { ok = true } } }")

    def test_enum_forms(self):
        self.assertEqual(render("enum Shape { Circle { r }, Empty, }"),
                         "enum Shape { Circle { r }, Empty }")
        self.assertEqual(render("enum Never {}"), "enum Never {}")
        self.assertEqual(render("Shape::Circle { r = 1 }"), "Shape::Circle { r = 1 }")
        self.assertEqual(render("Color::Red"), "Color::Red")
        self.assertEqual(
            render("match s { Shape::Circle { r } | Shape::Empty -> r }"),
            "match s { Shape::Circle { r } | Shape::Empty -> r }"
        )

    def test_power(self):
        self.assertEqual(render("2 ^ 3 ^ 2"), "((2 ^ 3) ^ 2)")

    def test_interpolated_string(self):
        self.assertEqual(render('$"Hi ${a + b}!"'), '$"Hi ${(a + b)}!"')
        self.assertEqual(render('$"${name}"'), '$"${name}"')

    def test_if_and_await(self):
        self.assertEqual(render("if a { b } else { c }"), "if a { b } else { c }")
        self.assertEqual(render("await load(id)"), "await load(id)")

    def test_program_is_one_statement_per_line(self):
        self.assertEqual(render("let a = 1; let b = 2"), "let a = 1\nlet b = 2")

    def test_printer_accepts_single_nodes(self):
        program = parse_source("1 - 2").program
        self.assertEqual(AstPrinter().print(program[0].expression), "(1 - 2)")


class TestRoundTrip(unittest.TestCase):
    """Printed output re-parses to a tree that prints identically."""

    SOURCES = [
        "(1 + 2) * 3",
        "func add(a, b) { a + b }",
        'match n { 0 -> "zero", _ -> "many" }',
        "let total = items |> filter(fn(x) -> x > 0) |> sum",
        "let! user = load(id) <- { seen = true }",
        "if a { 1 } else if b { 2 } else { -3 }",
        'import "std/list"\nlet xs = [1, 2] <- [3]',
        "match p { { x, y } -> x * y, 0 | 1 -> { log(p); ({ zero = true }) } }",
        "enum Shape { Circle { r }, Empty }\nlet s = Shape::Circle { r = 2 ^ 2 }",
        "match s { Shape::Circle { r } -> { { area = r ^ 2 } }, _ -> 0 }",
        'let greeting = $"hello ${user.name}, you have ${count(xs) + 1} items"',
        "async func run() { await step(!done, a.b[c]) }",
    ]

    def test_round_trip_is_stable(self):
        for source in self.SOURCES:
            with self.subTest(source=source):
                first = render(source)
                self.assertEqual(render(first), first)


if __name__ == '__main__':
    unittest.main()
