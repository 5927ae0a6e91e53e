"""
Tests for AST node ownership: children, traversal and destruction.
"""

import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from mirrow.lexer import Token, TokenType
from mirrow.parser import (
    ASTVisitor, Binary, Call, ExpressionStmt, Literal, NodeType, Program,
    destroy, parse_source
)


def label(node):
    """Short name for a node: literal/variable text, else the node kind."""
    if node.node_type == NodeType.LITERAL:
        return node.token.lexeme
    if node.node_type == NodeType.VARIABLE:
        return node.name.lexeme
    return node.node_type.value


def parse(source):
    result = parse_source(source)
    assert result.success, [e.report() for e in result.errors]
    return result.program


class TestTraversal(unittest.TestCase):

    def test_children_in_source_order(self):
        call = parse("f(a, b)")[0].expression
        self.assertEqual([label(c) for c in call.children()], ["f", "a", "b"])

    def test_walk_is_pre_order(self):
        expr = parse("1 + 2 * 3")[0].expression
        self.assertEqual([label(n) for n in expr.walk()],
                         ["Binary", "1", "Binary", "2", "3"])

    def test_match_children_interleave_patterns_and_bodies(self):
        stmt = parse("match x { 1 -> a, _ -> b }")[0]
        self.assertEqual([label(c) for c in stmt.children()],
                         ["x", "1", "ExpressionStmt", "Wildcard", "ExpressionStmt"])

    def test_match_block_arm_children(self):
        stmt = parse("match x { 1 -> { let y = x; y }, _ -> {} }")[0]
        self.assertEqual([label(c) for c in stmt.children()],
                         ["x", "1", "LetStmt", "ExpressionStmt", "Wildcard"])

    def test_enum_children(self):
        self.assertEqual(parse("enum E { A { x }, B }")[0].children(), [])
        ctor = parse("E::A { x = 1, y = f() }")[0].expression
        self.assertEqual([label(c) for c in ctor.children()], ["1", "Call"])
        pattern = parse("match e { E::A { x } -> x }")[0].arms[0].pattern
        self.assertEqual(pattern.children(), [])

    def test_interpolation_children(self):
        expr = parse('$"a ${b} c"')[0].expression
        self.assertEqual([label(c) for c in expr.children()], ['a ', "b", ' c'])

    def test_struct_children_are_values(self):
        expr = parse("base <- { a = 1, b = 2 }")[0].expression
        self.assertEqual([label(c) for c in expr.children()], ["base", "1", "2"])

    def test_block_bearing_nodes(self):
        func = parse("func f(x) { let y = x; y }")[0]
        self.assertEqual([label(c) for c in func.children()], ["LetStmt", "ExpressionStmt"])
        lam = parse("fn() -> 1")[0].expression
        self.assertEqual([label(c) for c in lam.children()], ["ExpressionStmt"])

    def test_if_children(self):
        expr = parse("if c { a } else { b }")[0].expression
        self.assertEqual(len(expr.children()), 3)

    def test_visitor(self):
        class Counter(ASTVisitor):
            def __init__(self):
                self.seen = []

            def visit(self, node):
                self.seen.append(node.node_type)
                for child in node.children():
                    child.accept(self)

        counter = Counter()
        parse("let x = -1")[0].accept(counter)
        self.assertEqual(counter.seen, [NodeType.LET_STMT, NodeType.UNARY, NodeType.LITERAL])


class TestDestroy(unittest.TestCase):
    """Trees are released children first."""

    def test_post_order(self):
        expr = parse("1 + 2 * 3")[0].expression
        released = []
        destroy(expr, lambda node: released.append(label(node)))
        self.assertEqual(released, ["1", "2", "3", "Binary", "Binary"])

    def test_owned_lists_are_emptied(self):
        call = parse("f(a, [b, c])")[0].expression
        inner = call.arguments[1]
        destroy(call)
        self.assertEqual(call.arguments, [])
        self.assertEqual(inner.elements, [])

    def test_struct_fields_are_emptied(self):
        update = parse("p <- { x = 1 }")[0].expression
        destroy(update)
        self.assertEqual(update.fields, [])

    def test_enum_lists_are_emptied(self):
        decl = parse("enum E { A { x }, B }")[0]
        destroy(decl)
        self.assertEqual(decl.variants, [])

        ctor = parse("E::A { x = 1 }")[0].expression
        released = []
        destroy(ctor, lambda node: released.append(label(node)))
        self.assertEqual(released, ["1", "EnumConstructor"])
        self.assertEqual(ctor.fields, [])

    def test_interpolation_parts_are_released_first(self):
        expr = parse('$"n = ${n + 1}"')[0].expression
        released = []
        destroy(expr, lambda node: released.append(label(node)))
        self.assertEqual(released, ["n = ", "n", "1", "Binary", "StringInterpolation"])
        self.assertEqual(expr.parts, [])

    def test_program_clear_destroys_statements_in_order(self):
        program = parse("let a = 1\nf(x)")
        released = []
        program.clear(lambda node: released.append(label(node)))

        self.assertEqual(released, ["1", "LetStmt", "f", "x", "Call", "ExpressionStmt"])
        self.assertEqual(len(program), 0)

    def test_destroy_program(self):
        program = parse("a; b")
        released = []
        destroy(program, lambda node: released.append(label(node)))
        self.assertEqual(released[-1], "Program")
        self.assertEqual(program.statements, [])


class TestProgram(unittest.TestCase):

    def test_sequence_protocol(self):
        program = Program()
        one = ExpressionStmt(Literal(Token(TokenType.NUMBER, "1", 1.0, 1)))
        two = ExpressionStmt(Call(Literal(Token(TokenType.NUMBER, "2", 2.0, 1))))

        program.append(one)
        program.append(two)

        self.assertEqual(len(program), 2)
        self.assertIs(program[0], one)
        self.assertEqual(list(program), [one, two])
        self.assertEqual(program[1].expression.arguments, [])

    def test_structural_equality(self):
        self.assertEqual(parse("1 + 2")[0], parse("1 + 2")[0])
        self.assertIsInstance(parse("1 + 2")[0].expression, Binary)


if __name__ == '__main__':
    unittest.main()
