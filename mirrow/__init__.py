"""
Mirrow Front End Package

Lexer and parser for Mirrow, a small expression-oriented language with
immutable bindings, first-class functions, pattern matching, struct literals,
a pipeline operator and error-propagating bindings.

Architecture:
    mirrow/
    ├── lexer/           # Pull-based scanner producing tokens
    └── parser/          # Pratt parser, AST nodes and printer

Source text flows one way: characters -> tokens -> AST -> Program.
"""

import logging

__version__ = "0.1.0"

# Library logging stays silent unless the application configures handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())

from .lexer import Lexer, Token, TokenType, tokenize
from .parser import Parser, ParseError, ParseResult, ParserOptions, parse_source, format_program

__all__ = [
    # Core classes
    "Lexer",
    "Token",
    "TokenType",
    "Parser",
    "ParserOptions",
    "ParseResult",
    "ParseError",

    # Convenience functions
    "tokenize",
    "parse_source",
    "format_program",

    # Version info
    "__version__",
]
