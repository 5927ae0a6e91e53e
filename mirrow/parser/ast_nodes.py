"""
Abstract Syntax Tree node definitions for Mirrow.

The node set is closed: every construct the parser can build has its own
dataclass here, carrying only the fields that construct needs. Expressions
derive from ``Expr`` and statements from ``Stmt``. All nodes support the
visitor pattern and expose their owned children in source order.

Trees are strictly hierarchical. A node owns its children exclusively and
tokens are held by value, so ``destroy`` can release a tree depth-first
without worrying about sharing.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Iterator, List, Optional

from ..lexer.tokens import Token


class NodeType(Enum):
    """Enumeration of all AST node kinds."""

    # Expressions
    LITERAL = "Literal"
    UNARY = "Unary"
    BINARY = "Binary"
    GROUPING = "Grouping"
    VARIABLE = "Variable"
    PROPERTY_ACCESS = "PropertyAccess"
    INDEX_ACCESS = "IndexAccess"
    CALL = "Call"
    LIST_LITERAL = "ListLiteral"
    STRUCT_LITERAL = "StructLiteral"
    STRUCT_UPDATE = "StructUpdate"
    LIST_APPEND = "ListAppend"
    PIPELINE = "Pipeline"
    LAMBDA = "Lambda"
    IF_EXPR = "IfExpr"
    AWAIT = "Await"
    ENUM_CONSTRUCTOR = "EnumConstructor"
    STRING_INTERPOLATION = "StringInterpolation"

    # Patterns (match arms)
    WILDCARD = "Wildcard"
    STRUCT_PATTERN = "StructPattern"
    OR_PATTERN = "OrPattern"
    ENUM_PATTERN = "EnumPattern"

    # Statements
    LET_STMT = "LetStmt"
    FUNCTION_STMT = "FunctionStmt"
    MATCH_STMT = "MatchStmt"
    IMPORT_STMT = "ImportStmt"
    ENUM_STMT = "EnumStmt"
    EXPRESSION_STMT = "ExpressionStmt"

    # Top-level
    PROGRAM = "Program"


class ASTVisitor(ABC):
    """Abstract visitor interface for traversing AST nodes."""

    @abstractmethod
    def visit(self, node: 'Node') -> Any:
        """Visit a node."""
        pass


class Node(ABC):
    """Base class for all AST nodes."""

    node_type: NodeType

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['Node']:
        """Get all owned child nodes, in source order."""
        pass

    def walk(self) -> Iterator['Node']:
        """Depth-first pre-order traversal starting at this node."""
        yield self
        for child in self.children():
            yield from child.walk()


class Expr(Node):
    """Base class for expressions (and match patterns)."""
    pass


class Stmt(Node):
    """Base class for statements."""
    pass


def _statements(body: Optional[List['Stmt']]) -> List[Node]:
    return list(body) if body else []


# ============================================================================
# Expressions
# ============================================================================

@dataclass
class Literal(Expr):
    """Number, string, true or false. The token keeps both lexeme and value."""
    token: Token
    node_type = NodeType.LITERAL

    @property
    def value(self) -> Any:
        return self.token.value

    def children(self) -> List[Node]:
        return []


@dataclass
class Unary(Expr):
    operator: Token
    operand: Expr
    node_type = NodeType.UNARY

    def children(self) -> List[Node]:
        return [self.operand]


@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr
    node_type = NodeType.BINARY

    def children(self) -> List[Node]:
        return [self.left, self.right]


@dataclass
class Grouping(Expr):
    expression: Expr
    node_type = NodeType.GROUPING

    def children(self) -> List[Node]:
        return [self.expression]


@dataclass
class Variable(Expr):
    name: Token
    node_type = NodeType.VARIABLE

    def children(self) -> List[Node]:
        return []


@dataclass
class PropertyAccess(Expr):
    """``object.name``"""
    object: Expr
    name: Token
    node_type = NodeType.PROPERTY_ACCESS

    def children(self) -> List[Node]:
        return [self.object]


@dataclass
class IndexAccess(Expr):
    """``object[index]``"""
    object: Expr
    index: Expr
    node_type = NodeType.INDEX_ACCESS

    def children(self) -> List[Node]:
        return [self.object, self.index]


@dataclass
class Call(Expr):
    callee: Expr
    arguments: List[Expr] = field(default_factory=list)
    node_type = NodeType.CALL

    def children(self) -> List[Node]:
        return [self.callee] + list(self.arguments)


@dataclass
class ListLiteral(Expr):
    elements: List[Expr] = field(default_factory=list)
    node_type = NodeType.LIST_LITERAL

    def children(self) -> List[Node]:
        return list(self.elements)


@dataclass
class StructField:
    """One ``key = value`` entry of a struct literal or update."""
    key: Token
    value: Expr


@dataclass
class StructLiteral(Expr):
    """``{ k = v, ... }``; fields keep source order."""
    fields: List[StructField] = field(default_factory=list)
    node_type = NodeType.STRUCT_LITERAL

    def children(self) -> List[Node]:
        return [entry.value for entry in self.fields]


@dataclass
class StructUpdate(Expr):
    """``base <- { k = v, ... }``"""
    base: Expr
    fields: List[StructField] = field(default_factory=list)
    node_type = NodeType.STRUCT_UPDATE

    def children(self) -> List[Node]:
        return [self.base] + [entry.value for entry in self.fields]


@dataclass
class ListAppend(Expr):
    """``base <- [ e, ... ]``"""
    base: Expr
    elements: List[Expr] = field(default_factory=list)
    node_type = NodeType.LIST_APPEND

    def children(self) -> List[Node]:
        return [self.base] + list(self.elements)


@dataclass
class Pipeline(Expr):
    """``left |> right``: feeds the left value into the right callable."""
    left: Expr
    right: Expr
    node_type = NodeType.PIPELINE

    def children(self) -> List[Node]:
        return [self.left, self.right]


@dataclass
class Lambda(Expr):
    params: List[Token] = field(default_factory=list)
    body: List[Stmt] = field(default_factory=list)
    is_async: bool = False
    node_type = NodeType.LAMBDA

    def children(self) -> List[Node]:
        return _statements(self.body)


@dataclass
class IfExpr(Expr):
    """
    ``if cond { ... } else { ... }``.

    An ``else if`` chain is stored as an else branch holding a single
    expression statement that wraps the nested IfExpr.
    """
    condition: Expr
    then_branch: List[Stmt] = field(default_factory=list)
    else_branch: Optional[List[Stmt]] = None
    node_type = NodeType.IF_EXPR

    def children(self) -> List[Node]:
        return [self.condition] + _statements(self.then_branch) + _statements(self.else_branch)


@dataclass
class Await(Expr):
    expression: Expr
    node_type = NodeType.AWAIT

    def children(self) -> List[Node]:
        return [self.expression]


@dataclass
class EnumConstructor(Expr):
    """``Name::Variant { f = v }``; a unit variant has no fields."""
    enum_name: Token
    variant: Token
    fields: List[StructField] = field(default_factory=list)
    node_type = NodeType.ENUM_CONSTRUCTOR

    def children(self) -> List[Node]:
        return [entry.value for entry in self.fields]


@dataclass
class StringInterpolation(Expr):
    """
    ``$"text ${expr} text"``.

    Parts alternate freely between STRING literals holding the literal text
    and the embedded expressions, in source order. Empty text runs are
    omitted.
    """
    token: Token
    parts: List[Expr] = field(default_factory=list)
    node_type = NodeType.STRING_INTERPOLATION

    def children(self) -> List[Node]:
        return list(self.parts)


# ============================================================================
# Patterns
# ============================================================================

@dataclass
class Wildcard(Expr):
    """The ``_`` pattern; matches anything."""
    token: Token
    node_type = NodeType.WILDCARD

    def children(self) -> List[Node]:
        return []


@dataclass
class StructPattern(Expr):
    """``{ a, b }``: binds the named fields of the subject."""
    fields: List[Token] = field(default_factory=list)
    node_type = NodeType.STRUCT_PATTERN

    def children(self) -> List[Node]:
        return []


@dataclass
class OrPattern(Expr):
    """``p | q``: matches when any alternative does."""
    alternatives: List[Expr] = field(default_factory=list)
    node_type = NodeType.OR_PATTERN

    def children(self) -> List[Node]:
        return list(self.alternatives)


@dataclass
class EnumPattern(Expr):
    """``Name::Variant { a, b }``: matches one variant and binds its fields."""
    enum_name: Token
    variant: Token
    fields: List[Token] = field(default_factory=list)
    node_type = NodeType.ENUM_PATTERN

    def children(self) -> List[Node]:
        return []


# ============================================================================
# Statements
# ============================================================================

@dataclass
class LetStmt(Stmt):
    """``let name = init``; ``let!`` marks an error-propagating binding."""
    name: Token
    initializer: Expr
    fallible: bool = False
    node_type = NodeType.LET_STMT

    def children(self) -> List[Node]:
        return [self.initializer]


@dataclass
class FunctionStmt(Stmt):
    name: Token
    params: List[Token] = field(default_factory=list)
    body: List[Stmt] = field(default_factory=list)
    is_async: bool = False
    node_type = NodeType.FUNCTION_STMT

    def children(self) -> List[Node]:
        return _statements(self.body)


@dataclass
class MatchArm:
    """
    ``pattern -> body``.

    A braced arm keeps its statements; a bare expression arm is stored as a
    single ``ExpressionStmt``, the same way lambda bodies are.
    """
    pattern: Expr
    body: List[Stmt] = field(default_factory=list)


@dataclass
class MatchStmt(Stmt):
    subject: Expr
    arms: List[MatchArm] = field(default_factory=list)
    node_type = NodeType.MATCH_STMT

    def children(self) -> List[Node]:
        nodes: List[Node] = [self.subject]
        for arm in self.arms:
            nodes.append(arm.pattern)
            nodes.extend(arm.body)
        return nodes


@dataclass
class EnumVariant:
    """One variant of an enum declaration, with its field names."""
    name: Token
    fields: List[Token] = field(default_factory=list)


@dataclass
class EnumStmt(Stmt):
    """``enum Name { A { x, y }, B }``"""
    name: Token
    variants: List[EnumVariant] = field(default_factory=list)
    node_type = NodeType.ENUM_STMT

    def children(self) -> List[Node]:
        return []


@dataclass
class ImportStmt(Stmt):
    """``import "path"``; the path token is a STRING literal."""
    path: Token
    node_type = NodeType.IMPORT_STMT

    def children(self) -> List[Node]:
        return []


@dataclass
class ExpressionStmt(Stmt):
    expression: Expr
    node_type = NodeType.EXPRESSION_STMT

    def children(self) -> List[Node]:
        return [self.expression]


# ============================================================================
# Top-level
# ============================================================================

@dataclass
class Program(Node):
    """Root node: the ordered, growable list of top-level statements."""
    statements: List[Stmt] = field(default_factory=list)
    node_type = NodeType.PROGRAM

    def children(self) -> List[Node]:
        return list(self.statements)

    def append(self, statement: Stmt):
        self.statements.append(statement)

    def clear(self, on_release: Optional[Callable[[Node], None]] = None):
        """Destroy every statement in order, leaving the program empty."""
        for statement in self.statements:
            destroy(statement, on_release)
        self.statements.clear()

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[Stmt]:
        return iter(self.statements)

    def __getitem__(self, index):
        return self.statements[index]


def destroy(node: Node, on_release: Optional[Callable[[Node], None]] = None):
    """
    Release a tree depth-first: every child before its parent.

    Owned lists are emptied as their nodes are released. ``on_release`` is
    called once per node, in post-order.
    """
    for child in node.children():
        destroy(child, on_release)

    for node_field in fields(node):
        owned = getattr(node, node_field.name)
        if isinstance(owned, list):
            owned.clear()

    if on_release is not None:
        on_release(node)


__all__ = [
    "NodeType", "ASTVisitor", "Node", "Expr", "Stmt",
    "Literal", "Unary", "Binary", "Grouping", "Variable",
    "PropertyAccess", "IndexAccess", "Call", "ListLiteral",
    "StructField", "StructLiteral", "StructUpdate", "ListAppend",
    "Pipeline", "Lambda", "IfExpr", "Await", "EnumConstructor",
    "StringInterpolation",
    "Wildcard", "StructPattern", "OrPattern", "EnumPattern",
    "LetStmt", "FunctionStmt", "MatchArm", "MatchStmt", "EnumVariant",
    "EnumStmt", "ImportStmt",
    "ExpressionStmt", "Program", "destroy",
]
