"""
Mirrow Pratt Parser Implementation

Top-down operator precedence parsing for expressions, driven by the dispatch
table in ``grammar``, plus a small recursive descent layer for statements
(``let``, ``func``, ``match``, ``enum``, ``import``).

Errors are raised as ``ParseError`` and caught by the statement loop in
``parse``. By default parsing stops at the first error and keeps the
statements completed before it; with ``ParserOptions(recover=True)`` the
parser resynchronizes at the next statement boundary and keeps going.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union

from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType
from .ast_nodes import (
    Expr, Stmt, Literal, Unary, Binary, Grouping, Variable, PropertyAccess,
    IndexAccess, Call, ListLiteral, StructField, StructLiteral, StructUpdate,
    ListAppend, Pipeline, Lambda, IfExpr, Await, EnumConstructor,
    StringInterpolation, Wildcard, StructPattern, OrPattern, EnumPattern,
    LetStmt, FunctionStmt, MatchArm, MatchStmt, EnumVariant, EnumStmt,
    ImportStmt, ExpressionStmt, Program
)
from .errors import (
    ParseError, ParseResult, SyntaxErrorRecovery, create_lexical_error,
    create_expected_expression_error, create_missing_token_error,
    create_too_many_arguments_error, create_unclosed_block_error,
    create_interpolation_error, create_invalid_pattern_error
)
from .grammar import Precedence, RULES, get_rule
from .options import ParserOptions


logger = logging.getLogger(__name__)


TokenSource = Union[Lexer, Iterable[Token]]


class _TokenStream:
    """Adapts a lexer or any token iterable to a ``next_token`` pull."""

    def __init__(self, source: TokenSource):
        if hasattr(source, "next_token"):
            self._pull: Callable[[], Token] = source.next_token
        else:
            self._pull = self._from_iterator(iter(source))
        self._last_line = 1

    def _from_iterator(self, tokens: Iterator[Token]) -> Callable[[], Token]:
        def pull() -> Token:
            token = next(tokens, None)
            if token is None:
                return Token(TokenType.EOF, "", None, self._last_line)
            return token
        return pull

    def next_token(self) -> Token:
        token = self._pull()
        self._last_line = token.line
        return token


class Parser:
    """
    Mirrow Pratt parser.

    Consumes tokens one at a time from a lexer (or any iterable of tokens) and
    builds a ``Program``. A parser instance is single-use.
    """

    def __init__(self, source: TokenSource, options: Optional[ParserOptions] = None):
        """
        Initialize parser with a token source.

        Args:
            source: A ``Lexer`` or an iterable of tokens
            options: Recovery mode and limits; strict defaults when omitted
        """
        self.options = options or ParserOptions()
        self.tokens = _TokenStream(source)
        self.current: Optional[Token] = None
        self.previous: Optional[Token] = None
        self.had_error = False
        self.panic_mode = False
        self.errors: List[ParseError] = []

        # Bind the shared dispatch table to this instance
        self.prefix_parsers: Dict[TokenType, Callable[[], Expr]] = {}
        self.infix_parsers: Dict[TokenType, Callable[[Expr], Expr]] = {}
        for token_type, rule in RULES.items():
            if rule.prefix:
                self.prefix_parsers[token_type] = getattr(self, f"_parse_{rule.prefix}")
            if rule.infix:
                self.infix_parsers[token_type] = getattr(self, f"_parse_{rule.infix}")

    @property
    def filename(self) -> str:
        return self.options.filename

    def parse(self) -> ParseResult:
        """
        Parse the whole token stream.

        Returns:
            ParseResult holding the statements parsed successfully and every
            recorded error. Statements interrupted by an error are dropped.
        """
        logger.debug("Parsing %s (recover=%s)", self.filename, self.options.recover)
        program = Program()
        self._advance()

        while not self.had_error or self.options.recover:
            if self._check(TokenType.EOF):
                break
            try:
                program.append(self._parse_declaration())
            except ParseError as e:
                self._record(e)
                if not self.options.recover:
                    break
                self._synchronize()

        logger.debug(
            "Parsed %s: %d statement(s), %d error(s)",
            self.filename, len(program), len(self.errors)
        )
        return ParseResult(program, list(self.errors))

    def parse_expression(self, min_power: int = Precedence.NONE) -> Expr:
        """
        Parse an expression whose operators all bind tighter than ``min_power``.

        Raises:
            ParseError: If the next token cannot start an expression
        """
        self._advance()
        if self.previous.type == TokenType.ERROR:
            raise create_lexical_error(self.previous, self.filename)
        prefix_parser = self.prefix_parsers.get(self.previous.type)
        if prefix_parser is None:
            raise create_expected_expression_error(self.previous, self.filename)

        return self._parse_infix_operators(prefix_parser(), min_power)

    def _parse_infix_operators(self, left: Expr, min_power: int) -> Expr:
        while (not self._check(TokenType.EOF)
               and get_rule(self.current.type).precedence > min_power):
            self._advance()
            left = self.infix_parsers[self.previous.type](left)
        return left

    # ========================================================================
    # Declarations and statements
    # ========================================================================

    def _parse_declaration(self) -> Stmt:
        if self._check(TokenType.ERROR):
            raise create_lexical_error(self.current, self.filename)

        if self._match(TokenType.IMPORT):
            statement = self._parse_import()
        elif self._match(TokenType.LET):
            statement = self._parse_let()
        elif self._match(TokenType.FUNC):
            statement = self._parse_function(is_async=False)
        elif self._match(TokenType.ASYNC):
            if self._match(TokenType.FUNC):
                statement = self._parse_function(is_async=True)
            else:
                # 'async fn ...' used as an expression statement
                expr = self._parse_infix_operators(self._parse_async_lambda(), Precedence.NONE)
                statement = ExpressionStmt(expr)
        elif self._match(TokenType.MATCH):
            statement = self._parse_match()
        elif self._match(TokenType.ENUM):
            statement = self._parse_enum()
        else:
            statement = ExpressionStmt(self.parse_expression(Precedence.NONE))

        self._match(TokenType.SEMICOLON)
        return statement

    def _parse_import(self) -> ImportStmt:
        path = self._consume(TokenType.STRING, "Expected string literal after 'import'.")
        return ImportStmt(path)

    def _parse_let(self) -> LetStmt:
        fallible = self._match(TokenType.BANG)
        name = self._consume(TokenType.IDENTIFIER, "Expected variable name after 'let'.")
        self._consume(TokenType.EQUAL, "Expected '=' after variable name.")
        initializer = self.parse_expression(Precedence.NONE)
        return LetStmt(name, initializer, fallible)

    def _parse_function(self, is_async: bool) -> FunctionStmt:
        name = self._consume(TokenType.IDENTIFIER, "Expected function name after 'func'.")
        self._consume(TokenType.LEFT_PAREN, "Expected '(' after function name.")
        params = self._parse_parameters()
        self._consume(TokenType.LEFT_BRACE, "Expected '{' before function body.")
        body = self._parse_block()
        return FunctionStmt(name, params, body, is_async)

    def _parse_match(self) -> MatchStmt:
        subject = self.parse_expression(Precedence.NONE)
        self._consume(TokenType.LEFT_BRACE, "Expected '{' after match subject.")

        arms: List[MatchArm] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
            pattern = self._parse_pattern()
            self._consume(TokenType.ARROW, "Expected '->' after pattern in match arm.")
            if self._match(TokenType.LEFT_BRACE):
                body = self._parse_block()
            else:
                body = [ExpressionStmt(self.parse_expression(Precedence.NONE))]
            arms.append(MatchArm(pattern, body))
            if not self._match(TokenType.COMMA):
                break

        self._consume(TokenType.RIGHT_BRACE, "Expected '}' after match arms.")
        return MatchStmt(subject, arms)

    def _parse_pattern(self) -> Expr:
        """Parse a match-arm pattern, including ``p | q`` alternation."""
        pattern = self._parse_pattern_alternative()
        if not self._check(TokenType.PIPE):
            return pattern

        pipe = self.current
        alternatives = [pattern]
        while self._match(TokenType.PIPE):
            alternatives.append(self._parse_pattern_alternative())

        if any(isinstance(alternative, StructPattern) for alternative in alternatives):
            raise create_invalid_pattern_error(
                "Struct patterns cannot be combined with other patterns using OR operator.",
                pipe, self.filename
            )
        return OrPattern(alternatives)

    def _parse_pattern_alternative(self) -> Expr:
        if self._match(TokenType.LEFT_BRACE):
            return self._parse_struct_pattern()

        if self._match(TokenType.IDENTIFIER):
            name = self.previous
            if self._match(TokenType.DOUBLE_COLON):
                return self._parse_enum_pattern(name)
            return self._parse_infix_operators(Variable(name), Precedence.NONE)

        return self.parse_expression(Precedence.NONE)

    def _parse_struct_pattern(self) -> StructPattern:
        if self._check(TokenType.RIGHT_BRACE):
            raise create_invalid_pattern_error(
                "Empty struct patterns are not allowed.", self.current, self.filename
            )
        fields = self._parse_field_names(
            "Expected field name in struct pattern.", "Expected '}' after struct pattern."
        )
        return StructPattern(fields)

    def _parse_enum_pattern(self, enum_name: Token) -> EnumPattern:
        variant = self._consume(TokenType.IDENTIFIER, "Expected variant name in enum pattern.")
        fields: List[Token] = []
        if self._match(TokenType.LEFT_BRACE):
            fields = self._parse_field_names(
                "Expected field name in enum pattern.", "Expected ',' or '}' in enum pattern."
            )
        return EnumPattern(enum_name, variant, fields)

    def _parse_enum(self) -> EnumStmt:
        """Parse ``Name { A { x, y }, B }``; 'enum' is already consumed."""
        name = self._consume(TokenType.IDENTIFIER, "Expected enum name after 'enum'.")
        self._consume(TokenType.LEFT_BRACE, "Expected '{' after enum name.")

        variants: List[EnumVariant] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
            variant = self._consume(TokenType.IDENTIFIER, "Expected variant name in enum declaration.")
            fields: List[Token] = []
            if self._match(TokenType.LEFT_BRACE):
                fields = self._parse_field_names(
                    "Expected field name in struct variant.", "Expected ',' or '}' in struct variant."
                )
            variants.append(EnumVariant(variant, fields))
            if not self._match(TokenType.COMMA):
                break

        self._consume(TokenType.RIGHT_BRACE, "Expected ',' or '}' in enum declaration.")
        return EnumStmt(name, variants)

    def _parse_block(self) -> List[Stmt]:
        """Parse statements up to the closing brace; '{' is already consumed."""
        statements: List[Stmt] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
            statements.append(self._parse_declaration())

        if not self._check(TokenType.RIGHT_BRACE):
            raise create_unclosed_block_error(self.current, self.filename)
        self._advance()
        return statements

    def _parse_parameters(self) -> List[Token]:
        """Parse ``a, b, c)``; '(' is already consumed. Trailing comma allowed."""
        params: List[Token] = []
        while not self._check(TokenType.RIGHT_PAREN):
            params.append(self._consume(TokenType.IDENTIFIER, "Expected parameter name."))
            if self._match(TokenType.COMMA):
                continue
            if not self._check(TokenType.RIGHT_PAREN):
                raise create_missing_token_error(
                    "Expected ',' or ')' after parameter.", self.current, self.filename
                )
        self._advance()
        return params

    # ========================================================================
    # Prefix handlers
    # ========================================================================

    def _parse_literal(self) -> Literal:
        return Literal(self.previous)

    def _parse_variable(self) -> Expr:
        name = self.previous
        if self._match(TokenType.DOUBLE_COLON):
            return self._parse_enum_constructor(name)
        return Variable(name)

    def _parse_enum_constructor(self, enum_name: Token) -> EnumConstructor:
        variant = self._consume(TokenType.IDENTIFIER, "Expected variant name in enum constructor.")
        fields: List[StructField] = []
        if self._match(TokenType.LEFT_BRACE):
            while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
                key = self._consume(TokenType.IDENTIFIER, "Expected field name in enum constructor.")
                self._consume(TokenType.EQUAL, "Expected '=' after field name in enum constructor.")
                fields.append(StructField(key, self.parse_expression(Precedence.NONE)))
                if not self._match(TokenType.COMMA):
                    break
            self._consume(TokenType.RIGHT_BRACE, "Expected ',' or '}' in enum constructor.")
        return EnumConstructor(enum_name, variant, fields)

    def _parse_interpolated_string(self) -> StringInterpolation:
        """
        Split ``$"..."`` into text parts and ``${...}`` expressions.

        Braces nest inside a section, so ``${ {a = 1}.a }`` is one
        expression. Each section is scanned and parsed on its own.
        """
        token = self.previous
        body: str = token.value
        parts: List[Expr] = []

        text_start = pos = 0
        while pos < len(body):
            if not body.startswith("${", pos):
                pos += 1
                continue
            if pos > text_start:
                parts.append(self._text_part(token, body[text_start:pos]))

            end = _closing_brace(body, pos + 2)
            if end < 0:
                raise create_interpolation_error(
                    "Unclosed interpolation expression.", token, self.filename
                )
            section = body[pos + 2:end]
            if section:
                parts.append(self._parse_section(token, section))
            text_start = pos = end + 1

        if text_start < len(body):
            parts.append(self._text_part(token, body[text_start:]))
        return StringInterpolation(token, parts)

    def _text_part(self, token: Token, text: str) -> Literal:
        return Literal(Token(TokenType.STRING, text, text, token.line, token.offset))

    def _parse_section(self, token: Token, section: str) -> Expr:
        parser = Parser(Lexer(section, self.filename), self.options)
        try:
            parser._advance()
            expression = parser.parse_expression(Precedence.NONE)
            if not parser._check(TokenType.EOF):
                raise create_missing_token_error(
                    "Expected end of interpolation.", parser.current, self.filename
                )
        except ParseError as e:
            raise create_interpolation_error(
                "Invalid expression in string interpolation.", token, self.filename
            ) from e
        return expression

    def _parse_wildcard(self) -> Wildcard:
        return Wildcard(self.previous)

    def _parse_grouping(self) -> Grouping:
        expression = self.parse_expression(Precedence.NONE)
        self._consume(TokenType.RIGHT_PAREN, "Expected ')' after expression.")
        return Grouping(expression)

    def _parse_unary(self) -> Unary:
        operator = self.previous
        operand = self.parse_expression(Precedence.UNARY)
        return Unary(operator, operand)

    def _parse_await(self) -> Await:
        return Await(self.parse_expression(Precedence.UNARY))

    def _parse_list_literal(self) -> ListLiteral:
        return ListLiteral(self._parse_list_elements())

    def _parse_struct_literal(self) -> StructLiteral:
        return StructLiteral(self._parse_struct_fields())

    def _parse_lambda(self, is_async: bool = False) -> Lambda:
        self._consume(TokenType.LEFT_PAREN, "Expected '(' after 'fn'.")
        params = self._parse_parameters()
        self._consume(TokenType.ARROW, "Expected '->' after lambda parameters.")

        if self._match(TokenType.LEFT_BRACE):
            body = self._parse_block()
        else:
            body = [ExpressionStmt(self.parse_expression(Precedence.NONE))]
        return Lambda(params, body, is_async)

    def _parse_async_lambda(self) -> Lambda:
        self._consume(TokenType.FN, "Expected 'fn' after 'async'.")
        return self._parse_lambda(is_async=True)

    def _parse_if(self) -> IfExpr:
        condition = self.parse_expression(Precedence.NONE)
        self._consume(TokenType.LEFT_BRACE, "Expected '{' after if condition.")
        then_branch = self._parse_block()

        else_branch: Optional[List[Stmt]] = None
        if self._match(TokenType.ELSE):
            if self._match(TokenType.IF):
                else_branch = [ExpressionStmt(self._parse_if())]
            else:
                self._consume(TokenType.LEFT_BRACE, "Expected '{' after 'else'.")
                else_branch = self._parse_block()
        return IfExpr(condition, then_branch, else_branch)

    # ========================================================================
    # Infix handlers
    # ========================================================================

    def _parse_binary(self, left: Expr) -> Binary:
        operator = self.previous
        right = self.parse_expression(get_rule(operator.type).precedence)
        return Binary(left, operator, right)

    def _parse_pipeline(self, left: Expr) -> Pipeline:
        right = self.parse_expression(Precedence.PIPELINE)
        return Pipeline(left, right)

    def _parse_call(self, callee: Expr) -> Call:
        arguments: List[Expr] = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= self.options.max_arguments:
                    raise create_too_many_arguments_error(
                        self.current, self.options.max_arguments, self.filename
                    )
                arguments.append(self.parse_expression(Precedence.NONE))
                if not self._match(TokenType.COMMA):
                    break
        self._consume(TokenType.RIGHT_PAREN, "Expected ')' after arguments.")
        return Call(callee, arguments)

    def _parse_property(self, obj: Expr) -> PropertyAccess:
        name = self._consume(TokenType.IDENTIFIER, "Expected property name after '.'.")
        return PropertyAccess(obj, name)

    def _parse_index(self, obj: Expr) -> IndexAccess:
        index = self.parse_expression(Precedence.NONE)
        self._consume(TokenType.RIGHT_BRACKET, "Expected ']' after index.")
        return IndexAccess(obj, index)

    def _parse_update(self, base: Expr) -> Expr:
        if self._match(TokenType.LEFT_BRACKET):
            return ListAppend(base, self._parse_list_elements())
        self._consume(TokenType.LEFT_BRACE, "Expected '{' or '[' after '<-'.")
        return StructUpdate(base, self._parse_struct_fields())

    # ========================================================================
    # Shared pieces
    # ========================================================================

    def _parse_list_elements(self) -> List[Expr]:
        """Parse ``a, b]``; '[' is already consumed. Trailing comma allowed."""
        elements: List[Expr] = []
        while not self._check(TokenType.RIGHT_BRACKET) and not self._check(TokenType.EOF):
            elements.append(self.parse_expression(Precedence.NONE))
            if not self._match(TokenType.COMMA):
                break
        self._consume(TokenType.RIGHT_BRACKET, "Expected ']' after list elements.")
        return elements

    def _parse_field_names(self, field_message: str, close_message: str) -> List[Token]:
        """Parse ``a, b }``; '{' is already consumed. Trailing comma allowed."""
        names: List[Token] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
            names.append(self._consume(TokenType.IDENTIFIER, field_message))
            if not self._match(TokenType.COMMA):
                break
        self._consume(TokenType.RIGHT_BRACE, close_message)
        return names

    def _parse_struct_fields(self) -> List[StructField]:
        """Parse ``k = v, ... }``; '{' is already consumed. Commas optional."""
        fields: List[StructField] = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._check(TokenType.EOF):
            key = self._consume(TokenType.IDENTIFIER, "Expected field name.")
            self._consume(TokenType.EQUAL, "Expected '=' after field name.")
            fields.append(StructField(key, self.parse_expression(Precedence.NONE)))
            self._match(TokenType.COMMA)
        self._consume(TokenType.RIGHT_BRACE, "Expected '}' after struct fields.")
        return fields

    # ========================================================================
    # Token handling and error reporting
    # ========================================================================

    def _advance(self) -> Token:
        """
        Move to the next token and return the one just consumed.

        An ERROR token waiting in ``current`` is not reported here. It raises
        only when the parser actually needs it: as the start of an expression,
        as a required token, or as the start of a statement.
        """
        self.previous = self.current
        self.current = self.tokens.next_token()
        return self.previous

    def _check(self, token_type: TokenType) -> bool:
        return self.current is not None and self.current.type == token_type

    def _match(self, token_type: TokenType) -> bool:
        if not self._check(token_type):
            return False
        self._advance()
        return True

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        if self._check(TokenType.ERROR):
            raise create_lexical_error(self.current, self.filename)
        raise create_missing_token_error(message, self.current, self.filename)

    def _record(self, error: ParseError):
        """Record an error unless one was already reported for this episode."""
        if self.panic_mode:
            return
        self.panic_mode = True
        self.had_error = True
        self.errors.append(error)
        logger.error(error.report())

    def _synchronize(self):
        """Skip tokens until a statement boundary, then leave panic mode."""
        while not SyntaxErrorRecovery.at_boundary(self.previous, self.current):
            self._advance()
        self.panic_mode = False


def _closing_brace(body: str, start: int) -> int:
    """Index of the brace closing a section opened just before ``start``, or -1."""
    depth = 1
    for index in range(start, len(body)):
        if body[index] == "{":
            depth += 1
        elif body[index] == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


def parse_source(
    source: str,
    filename: Optional[str] = None,
    options: Optional[ParserOptions] = None
) -> ParseResult:
    """
    Convenience function to scan and parse a source string.

    Args:
        source: Source code string
        filename: Filename for error reporting; overrides ``options.filename``
        options: Parser options; strict defaults when omitted

    Returns:
        ParseResult with the program and any errors
    """
    options = options or ParserOptions()
    if filename is not None:
        options = replace(options, filename=filename)
    return Parser(Lexer(source, options.filename), options).parse()


def parse_string(source: str, filename: Optional[str] = None) -> Program:
    """
    Parse a source string, raising on the first error.

    Raises:
        ParseError: If parsing fails
    """
    return parse_source(source, filename).raise_for_errors()
