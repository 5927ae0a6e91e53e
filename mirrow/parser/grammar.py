"""
Operator precedence and the Pratt dispatch table for Mirrow.

``RULES`` maps each token type to the handlers that parse it in prefix and
infix position plus its infix binding power. Handlers are stored by name and
bound to a ``Parser`` instance when the parser is constructed; the table
itself is built once at import time and is read-only.
"""

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, Optional

from ..lexer.tokens import TokenType


class Precedence(IntEnum):
    """Operator precedence levels for Pratt parsing (low to high)."""
    NONE = 0
    PIPELINE = 5        # |>
    OR = 6              # ||
    AND = 7             # &&
    EQUALITY = 8        # ==, !=
    COMPARISON = 9      # <, <=, >, >=
    TERM = 10           # +, -
    FACTOR = 20         # *, /
    UNARY = 25          # prefix -, !, await
    CALL = 30           # f(...)
    MEMBER = 40         # a.b, a[i]
    POWER = 50          # ^
    UPDATE = 50         # <- (alias of POWER, the two share a level)


@dataclass(frozen=True)
class ParseRule:
    """Prefix handler, infix handler and infix precedence for one token type."""
    prefix: Optional[str] = None
    infix: Optional[str] = None
    precedence: Precedence = Precedence.NONE


DEFAULT_RULE = ParseRule()


def _binary(precedence: Precedence) -> ParseRule:
    return ParseRule(None, "binary", precedence)


RULES: Mapping[TokenType, ParseRule] = MappingProxyType({
    # Grouping, calls and collections
    TokenType.LEFT_PAREN: ParseRule("grouping", "call", Precedence.CALL),
    TokenType.LEFT_BRACKET: ParseRule("list_literal", "index", Precedence.MEMBER),
    TokenType.LEFT_BRACE: ParseRule("struct_literal", None, Precedence.NONE),
    TokenType.DOT: ParseRule(None, "property", Precedence.MEMBER),
    TokenType.LEFT_ARROW: ParseRule(None, "update", Precedence.UPDATE),

    # Arithmetic
    TokenType.MINUS: ParseRule("unary", "binary", Precedence.TERM),
    TokenType.PLUS: _binary(Precedence.TERM),
    TokenType.STAR: _binary(Precedence.FACTOR),
    TokenType.SLASH: _binary(Precedence.FACTOR),
    TokenType.CARET: _binary(Precedence.POWER),

    # Logic and comparison
    TokenType.BANG: ParseRule("unary", None, Precedence.NONE),
    TokenType.BANG_EQUAL: _binary(Precedence.EQUALITY),
    TokenType.EQUAL_EQUAL: _binary(Precedence.EQUALITY),
    TokenType.GREATER: _binary(Precedence.COMPARISON),
    TokenType.GREATER_EQUAL: _binary(Precedence.COMPARISON),
    TokenType.LESS: _binary(Precedence.COMPARISON),
    TokenType.LESS_EQUAL: _binary(Precedence.COMPARISON),
    TokenType.AND: _binary(Precedence.AND),
    TokenType.OR: _binary(Precedence.OR),

    TokenType.PIPELINE: ParseRule(None, "pipeline", Precedence.PIPELINE),

    # Literals and names
    TokenType.NUMBER: ParseRule("literal"),
    TokenType.STRING: ParseRule("literal"),
    TokenType.INTERPOLATED_STRING: ParseRule("interpolated_string"),
    TokenType.TRUE: ParseRule("literal"),
    TokenType.FALSE: ParseRule("literal"),
    TokenType.IDENTIFIER: ParseRule("variable"),
    TokenType.UNDERSCORE: ParseRule("wildcard"),

    # Expression keywords
    TokenType.FN: ParseRule("lambda"),
    TokenType.ASYNC: ParseRule("async_lambda"),
    TokenType.IF: ParseRule("if"),
    TokenType.AWAIT: ParseRule("await"),
})


def get_rule(token_type: TokenType) -> ParseRule:
    """Rule for ``token_type``; tokens without one get the inert default."""
    return RULES.get(token_type, DEFAULT_RULE)
