"""
Mirrow Lexer - turns a source buffer into tokens on demand.

The scanner is pull-based: each call to ``next_token`` consumes exactly one
token. It keeps a single cursor that only moves forward (plus one character
of lookahead) and never raises; bad input comes back as ERROR tokens that the
parser has to check for.
"""

from typing import Iterator, List, Optional

from .tokens import (
    Token, TokenType, KEYWORDS, SINGLE_CHAR_TOKENS, COMPOUND_TOKENS
)
from .errors import (
    LexerError, UNTERMINATED_STRING, UNEXPECTED_CHARACTER,
    UNEXPECTED_AMPERSAND, create_error_from_token
)


class Lexer:
    """
    Mirrow lexical analyzer.

    Converts source text into a stream of tokens. After the end of input
    every further call returns an EOF token.
    """

    def __init__(self, source: str, filename: str = "<string>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code, already fully loaded in memory
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.start = 0
        self.pos = 0
        self.line = 1
        self._start_line = 1

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        """Consume and return the next token."""
        # Comments loop back here instead of recursing
        while True:
            self._skip_whitespace()

            self.start = self.pos
            self._start_line = self.line
            if self._is_at_end():
                return self._make_token(TokenType.EOF)

            char = self._advance()

            if char == '/' and self._match('/'):
                self._skip_line_comment()
                continue
            if char == '/' and self._match('*'):
                self._skip_block_comment()
                continue

            return self._scan_token(char)

    def _scan_token(self, char: str) -> Token:
        # Identifiers and keywords
        if self._is_identifier_start(char):
            return self._identifier()

        # Numbers
        if self._is_digit(char):
            return self._number()

        # String literals
        if char == '"':
            return self._string()
        if char == '$' and self._match('"'):
            return self._string(TokenType.INTERPOLATED_STRING)

        if char == '/':
            return self._make_token(TokenType.SLASH)

        if char in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[char])

        # Operators, two-char first
        if char in COMPOUND_TOKENS:
            pairs, fallback = COMPOUND_TOKENS[char]
            for second, token_type in pairs:
                if self._match(second):
                    return self._make_token(token_type)
            return self._make_token(fallback)

        if char == '&':
            if self._match('&'):
                return self._make_token(TokenType.AND)
            return self._error_token(UNEXPECTED_AMPERSAND)

        return self._error_token(UNEXPECTED_CHARACTER)

    def _identifier(self) -> Token:
        """Tokenize an identifier or keyword."""
        while self._is_identifier_continue(self._peek()):
            self._advance()

        lexeme = self.source[self.start:self.pos]
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)

        if token_type == TokenType.IDENTIFIER:
            value = lexeme
        elif token_type in (TokenType.TRUE, TokenType.FALSE):
            value = token_type == TokenType.TRUE
        else:
            value = None

        return self._make_token(token_type, value)

    def _number(self) -> Token:
        """Tokenize a number; the fraction needs a digit after the dot."""
        while self._is_digit(self._peek()):
            self._advance()

        if self._peek() == '.' and self._is_digit(self._peek_next()):
            self._advance()  # Consume '.'
            while self._is_digit(self._peek()):
                self._advance()

        lexeme = self.source[self.start:self.pos]
        return self._make_token(TokenType.NUMBER, float(lexeme))

    def _string(self, token_type: TokenType = TokenType.STRING) -> Token:
        """
        Tokenize a string literal; embedded newlines are allowed.

        The opening quote (and the ``$`` of an interpolated string) is already
        consumed. The value is the raw body between the quotes; ``${...}``
        sections are split out by the parser.
        """
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == '\n':
                self.line += 1
            self._advance()

        if self._is_at_end():
            return self._error_token(UNTERMINATED_STRING)

        self._advance()  # Closing quote

        opening = 2 if token_type == TokenType.INTERPOLATED_STRING else 1
        body = self.source[self.start + opening:self.pos - 1]
        return self._make_token(token_type, body)

    def _skip_whitespace(self):
        while not self._is_at_end():
            char = self._peek()
            if char in ' \r\t':
                self._advance()
            elif char == '\n':
                self.line += 1
                self._advance()
            else:
                break

    def _skip_line_comment(self):
        while self._peek() != '\n' and not self._is_at_end():
            self._advance()

    def _skip_block_comment(self):
        # An unterminated block comment runs to the end of input
        while not self._is_at_end():
            if self._peek() == '*' and self._peek_next() == '/':
                self._advance()
                self._advance()
                return
            if self._peek() == '\n':
                self.line += 1
            self._advance()

    def _make_token(self, token_type: TokenType, value=None) -> Token:
        lexeme = self.source[self.start:self.pos]
        return Token(token_type, lexeme, value, self._start_line, self.start)

    def _error_token(self, message: str) -> Token:
        return Token(TokenType.ERROR, message, None, self._start_line, self.start)

    def _is_digit(self, char: str) -> bool:
        return '0' <= char <= '9'

    def _is_identifier_start(self, char: str) -> bool:
        return char.isascii() and (char.isalpha() or char == '_')

    def _is_identifier_continue(self, char: str) -> bool:
        return char.isascii() and (char.isalnum() or char == '_')

    def _advance(self) -> str:
        char = self.source[self.pos]
        self.pos += 1
        return char

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self.pos += 1
        return True

    def _peek(self) -> str:
        if self._is_at_end():
            return '\0'
        return self.source[self.pos]

    def _peek_next(self) -> str:
        if self.pos + 1 >= len(self.source):
            return '\0'
        return self.source[self.pos + 1]

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)


def tokenize(source: str, filename: str = "<string>") -> List[Token]:
    """
    Scan a whole source string.

    Returns:
        List of tokens ending with the first EOF token. ERROR tokens are kept
        in place.
    """
    return list(Lexer(source, filename))


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string strictly.

    Raises:
        LexerError: For the first ERROR token encountered
    """
    tokens = tokenize(source, filename)
    first_error: Optional[Token] = next(
        (token for token in tokens if token.type == TokenType.ERROR), None
    )
    if first_error is not None:
        raise create_error_from_token(first_error, filename)
    return tokens


__all__ = ["Lexer", "LexerError", "tokenize", "tokenize_string"]
