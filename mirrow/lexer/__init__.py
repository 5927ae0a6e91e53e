"""
Mirrow Lexer Package

Pull-based scanner for the Mirrow language. Tokens are produced one at a time
on request; lexical problems are reported in-band as ERROR tokens.

Key Features:
- Line and block comments, newline tracking for diagnostics
- Two-character operators including the pipeline (|>) and update (<-)
- Keyword reclassification through a static lookup table
- EOF repeats forever once the input is exhausted
"""

from .tokens import Token, TokenType, SourceLocation, KEYWORDS
from .lexer import Lexer, tokenize, tokenize_string
from .errors import Diagnostic, LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "KEYWORDS",
    "Diagnostic",
    "LexerError",
    "tokenize",
    "tokenize_string",
]
