"""
Error handling for the Mirrow parser.

Syntax errors are raised as ``ParseError`` from the handler that found them
and caught by the statement loop, which records them. Lexical ERROR tokens are
surfaced through the same type with code P000.
"""

from typing import Optional, List
from dataclasses import dataclass, field

from ..lexer.tokens import Token, TokenType, SourceLocation
from ..lexer.errors import Diagnostic
from .ast_nodes import Program


class ParseError(Exception):
    """
    Exception raised when the parser encounters a syntax error.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def line(self) -> int:
        return self.diagnostic.location.line

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def report(self) -> str:
        """One-line report: ``[line N] Error at 'x': message``."""
        if self.token is None or self.token.type == TokenType.ERROR:
            where = ""
        elif self.token.type == TokenType.EOF:
            where = " at end"
        else:
            where = f" at '{self.token.lexeme}'"
        return f"[line {self.line}] Error{where}: {self.message}"

    def __str__(self) -> str:
        return str(self.diagnostic)


class SyntaxErrorRecovery:
    """
    Utilities for error recovery in the parser.

    In recovering mode the parser skips ahead to one of these points and
    resumes, so several errors can be collected in a single pass.
    """

    # Keywords that begin a new declaration
    STATEMENT_BOUNDARIES = frozenset({
        TokenType.LET,
        TokenType.FUNC,
        TokenType.MATCH,
        TokenType.IMPORT,
        TokenType.ASYNC,
        TokenType.ENUM,
    })

    @staticmethod
    def at_boundary(previous: Optional[Token], current: Token) -> bool:
        """Check whether parsing may resume at ``current``."""
        if current.type == TokenType.ERROR:
            return False
        if current.type == TokenType.EOF:
            return True
        if previous is not None and previous.type == TokenType.SEMICOLON:
            return True
        return current.type in SyntaxErrorRecovery.STATEMENT_BOUNDARIES


@dataclass
class ParseResult:
    """The program built so far plus every recorded error."""
    program: Program
    errors: List[ParseError] = field(default_factory=list)

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    @property
    def success(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> Program:
        """Return the program, or raise the first recorded error."""
        if self.errors:
            raise self.errors[0]
        return self.program


# Common error codes for categorization
PARSER_ERROR_CODES = {
    "P000": "Lexical error",
    "P001": "Expected expression",
    "P002": "Expected token not found",
    "P003": "Too many arguments",
    "P004": "Unclosed block",
    "P005": "Invalid string interpolation",
    "P006": "Invalid pattern",
}


def create_lexical_error(token: Token, filename: str = "<string>") -> ParseError:
    """Surface an ERROR token; its lexeme is the scanner's message."""
    return ParseError(
        message=token.lexeme,
        location=token.location(filename),
        token=token,
        code="P000",
    )


def create_expected_expression_error(token: Token, filename: str = "<string>") -> ParseError:
    """Create an error for a token that cannot start an expression."""
    return ParseError(
        message="Expected expression.",
        location=token.location(filename),
        token=token,
        code="P001",
        help_text=f"'{token.lexeme}' cannot begin an expression." if token.lexeme else None,
    )


def create_missing_token_error(message: str, found: Token, filename: str = "<string>") -> ParseError:
    """Create an error for a required token that is not where it should be."""
    return ParseError(
        message=message,
        location=found.location(filename),
        token=found,
        code="P002",
    )


def create_too_many_arguments_error(found: Token, limit: int, filename: str = "<string>") -> ParseError:
    return ParseError(
        message="Too many arguments in function call.",
        location=found.location(filename),
        token=found,
        code="P003",
        help_text=f"A call may pass at most {limit} arguments.",
    )


def create_unclosed_block_error(found: Token, filename: str = "<string>") -> ParseError:
    return ParseError(
        message="Expected '}' at end of block.",
        location=found.location(filename),
        token=found,
        code="P004",
        suggestions=["Add a closing brace '}'"],
    )


def create_interpolation_error(message: str, token: Token, filename: str = "<string>") -> ParseError:
    """Create an error for a malformed ``${...}`` section of an interpolated string."""
    return ParseError(
        message=message,
        location=token.location(filename),
        token=token,
        code="P005",
    )


def create_invalid_pattern_error(message: str, found: Token, filename: str = "<string>") -> ParseError:
    return ParseError(
        message=message,
        location=found.location(filename),
        token=found,
        code="P006",
    )
