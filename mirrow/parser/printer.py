"""
Canonical text rendering of Mirrow syntax trees.

Binary, unary and pipeline expressions are fully parenthesized, so the output
shows exactly how the parser grouped operators. Re-parsing printed output
yields a tree that prints to the same text.
"""

from typing import List, Optional

from ..lexer.tokens import Token, TokenType
from .ast_nodes import (
    ASTVisitor, Literal, MatchArm, Node, NodeType, Program, Stmt, StructField
)


# These already print with their own parentheses
_SELF_PARENTHESIZED = frozenset({NodeType.BINARY, NodeType.UNARY, NodeType.PIPELINE})


class AstPrinter(ASTVisitor):
    """Renders nodes back to source-like text."""

    def print(self, node: Node) -> str:
        return node.accept(self)

    def visit(self, node: Node) -> str:
        method = getattr(self, f"_visit_{node.node_type.name.lower()}")
        return method(node)

    def _block(self, statements: Optional[List[Stmt]]) -> str:
        if not statements:
            return "{}"
        return "{ " + "; ".join(self.print(s) for s in statements) + " }"

    def _fields(self, fields: List[StructField]) -> str:
        if not fields:
            return "{}"
        entries = ", ".join(f"{f.key.lexeme} = {self.print(f.value)}" for f in fields)
        return "{ " + entries + " }"

    def _join(self, nodes) -> str:
        return ", ".join(self.print(n) for n in nodes)

    def _names(self, tokens: List[Token]) -> str:
        return "{ " + ", ".join(t.lexeme for t in tokens) + " }"

    def _arm(self, arm: MatchArm) -> str:
        pattern = self.print(arm.pattern)
        if len(arm.body) == 1 and arm.body[0].node_type == NodeType.EXPRESSION_STMT:
            result = self.print(arm.body[0])
            # A leading brace would re-parse as a block
            if not result.startswith("{"):
                return f"{pattern} -> {result}"
        return f"{pattern} -> {self._block(arm.body)}"

    # Expressions

    def _visit_literal(self, node) -> str:
        return node.token.lexeme

    def _visit_variable(self, node) -> str:
        return node.name.lexeme

    def _visit_unary(self, node) -> str:
        return f"({node.operator.lexeme}{self.print(node.operand)})"

    def _visit_binary(self, node) -> str:
        return f"({self.print(node.left)} {node.operator.lexeme} {self.print(node.right)})"

    def _visit_grouping(self, node) -> str:
        inner = self.print(node.expression)
        if node.expression.node_type in _SELF_PARENTHESIZED:
            return inner
        return f"({inner})"

    def _visit_pipeline(self, node) -> str:
        return f"({self.print(node.left)} |> {self.print(node.right)})"

    def _visit_property_access(self, node) -> str:
        return f"{self.print(node.object)}.{node.name.lexeme}"

    def _visit_index_access(self, node) -> str:
        return f"{self.print(node.object)}[{self.print(node.index)}]"

    def _visit_call(self, node) -> str:
        return f"{self.print(node.callee)}({self._join(node.arguments)})"

    def _visit_list_literal(self, node) -> str:
        return f"[{self._join(node.elements)}]"

    def _visit_struct_literal(self, node) -> str:
        return self._fields(node.fields)

    def _visit_struct_update(self, node) -> str:
        return f"{self.print(node.base)} <- {self._fields(node.fields)}"

    def _visit_list_append(self, node) -> str:
        return f"{self.print(node.base)} <- [{self._join(node.elements)}]"

    def _visit_lambda(self, node) -> str:
        params = ", ".join(p.lexeme for p in node.params)
        prefix = "async fn" if node.is_async else "fn"
        return f"{prefix}({params}) -> {self._block(node.body)}"

    def _visit_if_expr(self, node) -> str:
        text = f"if {self.print(node.condition)} {self._block(node.then_branch)}"
        if node.else_branch is not None:
            text += f" else {self._block(node.else_branch)}"
        return text

    def _visit_await(self, node) -> str:
        return f"await {self.print(node.expression)}"

    def _visit_enum_constructor(self, node) -> str:
        path = f"{node.enum_name.lexeme}::{node.variant.lexeme}"
        if not node.fields:
            return path
        return f"{path} {self._fields(node.fields)}"

    def _visit_string_interpolation(self, node) -> str:
        pieces = []
        for part in node.parts:
            if isinstance(part, Literal) and part.token.type == TokenType.STRING:
                pieces.append(part.token.value)
            else:
                pieces.append("${" + self.print(part) + "}")
        return '$"' + "".join(pieces) + '"'

    # Patterns

    def _visit_wildcard(self, node) -> str:
        return "_"

    def _visit_struct_pattern(self, node) -> str:
        return self._names(node.fields)

    def _visit_or_pattern(self, node) -> str:
        return " | ".join(self.print(a) for a in node.alternatives)

    def _visit_enum_pattern(self, node) -> str:
        path = f"{node.enum_name.lexeme}::{node.variant.lexeme}"
        if not node.fields:
            return path
        return f"{path} {self._names(node.fields)}"

    # Statements

    def _visit_let_stmt(self, node) -> str:
        keyword = "let!" if node.fallible else "let"
        return f"{keyword} {node.name.lexeme} = {self.print(node.initializer)}"

    def _visit_function_stmt(self, node) -> str:
        params = ", ".join(p.lexeme for p in node.params)
        prefix = "async func" if node.is_async else "func"
        return f"{prefix} {node.name.lexeme}({params}) {self._block(node.body)}"

    def _visit_match_stmt(self, node) -> str:
        subject = self.print(node.subject)
        if not node.arms:
            return f"match {subject} {{}}"
        arms = ", ".join(self._arm(arm) for arm in node.arms)
        return f"match {subject} {{ {arms} }}"

    def _visit_enum_stmt(self, node) -> str:
        if not node.variants:
            return f"enum {node.name.lexeme} {{}}"
        variants = ", ".join(
            f"{v.name.lexeme} {self._names(v.fields)}" if v.fields else v.name.lexeme
            for v in node.variants
        )
        return f"enum {node.name.lexeme} {{ {variants} }}"

    def _visit_import_stmt(self, node) -> str:
        return f"import {node.path.lexeme}"

    def _visit_expression_stmt(self, node) -> str:
        return self.print(node.expression)

    def _visit_program(self, node) -> str:
        return "\n".join(self.print(s) for s in node.statements)


def format_program(program: Program) -> str:
    """Render a whole program, one top-level statement per line."""
    return AstPrinter().print(program)
