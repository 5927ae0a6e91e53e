"""
Mirrow Parser Package

Pratt-based parser for the Mirrow language. Produces a tree of plain
dataclass nodes and reports syntax errors as ``ParseError`` values.

Key Features:
- Top-down operator precedence driven by a read-only dispatch table
- Left-associative infix operators, including the pipeline (|>)
- Struct literals, struct updates (<-), lambdas and match statements
- Enum declarations, variant constructors and enum patterns (Name::Variant)
- Interpolated strings ($"..${expr}..")
- Single-shot error reporting by default, optional panic-mode recovery
"""

from .ast_nodes import *
from .ast_nodes import __all__ as _node_names
from .grammar import Precedence, ParseRule, RULES, get_rule
from .options import ParseMode, ParserOptions
from .errors import ParseError, ParseResult, PARSER_ERROR_CODES
from .parser import Parser, parse_source, parse_string
from .printer import AstPrinter, format_program

__all__ = [
    # Core parser
    "Parser", "parse_source", "parse_string",
    "Precedence", "ParseRule", "RULES", "get_rule",
    "ParseMode", "ParserOptions",

    # Printing
    "AstPrinter", "format_program",

    # Error handling
    "ParseError", "ParseResult", "PARSER_ERROR_CODES",
] + list(_node_names)
