"""
Token definitions for the Mirrow lexer.

This module defines every token type the scanner can produce:
- Keywords (let, func, fn, match, import, ...)
- Operators, including the pipeline (|>) and update (<-) arrows
- Literals (numbers, plain and interpolated strings, booleans)
- Identifiers, punctuation and the two special kinds EOF and ERROR

ERROR tokens carry a diagnostic message in place of a source lexeme.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Dict


class TokenType(Enum):
    """
    Enumeration of all token types in Mirrow.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input (repeats forever)
    ERROR = auto()                  # Lexical error, lexeme holds the message

    # ========================================================================
    # Literals
    # ========================================================================
    NUMBER = auto()                 # 42, 3.14
    STRING = auto()                 # "hello"
    INTERPOLATED_STRING = auto()    # $"hi ${name}"
    TRUE = auto()                   # true
    FALSE = auto()                  # false

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    IDENTIFIER = auto()             # user, _tmp, x1
    UNDERSCORE = auto()             # _ (match-anything pattern)

    LET = auto()                    # let
    FUNC = auto()                   # func (named function declaration)
    FN = auto()                     # fn (lambda)
    IF = auto()                     # if
    ELSE = auto()                   # else
    MATCH = auto()                  # match
    ASYNC = auto()                  # async
    AWAIT = auto()                  # await
    THROW = auto()                  # throw (reserved)
    TRY = auto()                    # try (reserved)
    CATCH = auto()                  # catch (reserved)
    IMPORT = auto()                 # import
    ENUM = auto()                   # enum

    # ========================================================================
    # Operators
    # ========================================================================
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    STAR = auto()                   # *
    SLASH = auto()                  # /
    CARET = auto()                  # ^ (power)

    EQUAL = auto()                  # =
    EQUAL_EQUAL = auto()            # ==
    BANG = auto()                   # !
    BANG_EQUAL = auto()             # !=
    LESS = auto()                   # <
    LESS_EQUAL = auto()             # <=
    GREATER = auto()                # >
    GREATER_EQUAL = auto()          # >=

    AND = auto()                    # &&
    OR = auto()                     # ||
    PIPE = auto()                   # | (pattern alternation)
    PIPELINE = auto()               # |>
    LEFT_ARROW = auto()             # <- (struct update / list append)
    ARROW = auto()                  # ->

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]

    COMMA = auto()                  # ,
    DOT = auto()                    # .
    SEMICOLON = auto()              # ;
    COLON = auto()                  # :
    DOUBLE_COLON = auto()           # :: (enum variant path)
    QUESTION = auto()               # ?
    HASH = auto()                   # #


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Only line numbers are tracked; the offset is kept for tooling that wants
    to slice the original buffer.
    """
    filename: str
    line: int
    offset: int = 0

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Mirrow language.

    Contains the token type, lexeme (raw text, or the message for ERROR
    tokens), semantic value, the 1-based line the token starts on and the
    offset of its first character in the source buffer.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # float for NUMBER, body for STRING, ...
    line: int
    offset: int = 0

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, line={self.line})")

    def location(self, filename: str = "<string>") -> SourceLocation:
        return SourceLocation(filename, self.line, self.offset)

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in LITERALS

    @property
    def is_keyword(self) -> bool:
        """Check if this token is a keyword."""
        return self.type in KEYWORD_TYPES

    @property
    def is_error(self) -> bool:
        return self.type == TokenType.ERROR

    @property
    def is_identifier(self) -> bool:
        """Check if this token is an identifier."""
        return self.type == TokenType.IDENTIFIER


# Lookup tables for token recognition, consulted once per identifier
KEYWORDS: Dict[str, TokenType] = {
    "let": TokenType.LET,
    "func": TokenType.FUNC,
    "fn": TokenType.FN,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "match": TokenType.MATCH,
    "async": TokenType.ASYNC,
    "await": TokenType.AWAIT,
    "throw": TokenType.THROW,
    "try": TokenType.TRY,
    "catch": TokenType.CATCH,
    "import": TokenType.IMPORT,
    "enum": TokenType.ENUM,
    "_": TokenType.UNDERSCORE,
}

KEYWORD_TYPES = frozenset(KEYWORDS.values()) - {TokenType.UNDERSCORE}

LITERALS = frozenset({
    TokenType.NUMBER, TokenType.STRING, TokenType.INTERPOLATED_STRING,
    TokenType.TRUE, TokenType.FALSE,
})

SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    ";": TokenType.SEMICOLON,
    "?": TokenType.QUESTION,
    "#": TokenType.HASH,
    "+": TokenType.PLUS,
    "*": TokenType.STAR,
    "^": TokenType.CARET,
}

# first char -> [(second char, compound type)], single-char fallback
COMPOUND_TOKENS: Dict[str, tuple] = {
    "=": ((("=", TokenType.EQUAL_EQUAL),), TokenType.EQUAL),
    "!": ((("=", TokenType.BANG_EQUAL),), TokenType.BANG),
    ">": ((("=", TokenType.GREATER_EQUAL),), TokenType.GREATER),
    "<": ((("=", TokenType.LESS_EQUAL), ("-", TokenType.LEFT_ARROW)), TokenType.LESS),
    "-": (((">", TokenType.ARROW),), TokenType.MINUS),
    "|": ((("|", TokenType.OR), (">", TokenType.PIPELINE)), TokenType.PIPE),
    ":": (((":", TokenType.DOUBLE_COLON),), TokenType.COLON),
}
