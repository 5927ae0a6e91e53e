"""
Error handling for the Mirrow lexer.

The scanner itself never raises: malformed input becomes an ERROR token whose
lexeme is one of the fixed messages below. The exception and diagnostic types
here are used by callers that want lexical problems reported as values or
raised eagerly (see ``tokenize_string``).
"""

from typing import Optional, List
from dataclasses import dataclass

from .tokens import SourceLocation, Token


# Fixed messages carried by ERROR tokens
UNTERMINATED_STRING = "Unterminated string."
UNEXPECTED_CHARACTER = "Unexpected character."
UNEXPECTED_AMPERSAND = "Unexpected '&'."


@dataclass
class Diagnostic:
    """Base record for diagnostics (errors, warnings)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """
    Exception raised when a caller asks for lexical errors to be fatal.

    Contains detailed diagnostic information for error reporting.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
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

    @property
    def line(self) -> int:
        return self.diagnostic.location.line

    def __str__(self) -> str:
        return str(self.diagnostic)


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L002": "Unterminated string literal",
}

_MESSAGE_CODES = {
    UNTERMINATED_STRING: "L002",
    UNEXPECTED_CHARACTER: "L001",
    UNEXPECTED_AMPERSAND: "L001",
}

_HELP = {
    UNTERMINATED_STRING: "String literals must be closed with a matching '\"'.",
    UNEXPECTED_AMPERSAND: "Use '&&' for logical and.",
}


def error_code_for(message: str) -> str:
    """Map a fixed ERROR-token message to its lexer error code."""
    return _MESSAGE_CODES.get(message, "L001")


def create_error_from_token(token: Token, filename: str = "<string>") -> LexerError:
    """Turn an ERROR token into a LexerError carrying the same message."""
    return LexerError(
        message=token.lexeme,
        location=token.location(filename),
        code=error_code_for(token.lexeme),
        help_text=_HELP.get(token.lexeme),
    )
