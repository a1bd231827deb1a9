"""
Wu expression parser.

Implements precedence climbing over a token stream produced by the lexer.
Binary operator ranks come from the operator table; associativity is a
parser-side rule (``^`` groups to the right, everything else to the left).
Prefix ``-`` and the postfix forms (``!``, calls, indexing) bind tighter than
any binary operator, and postfix binds tighter than prefix.

Author: xwest
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from ..lexer.tokens import Token, TokenType, SourceLocation
from .ast_nodes import (
    Array, Binary, Bool, Call, Char, Expression, Float, Identifier, Index,
    Int, Neg, Str, Unwrap,
)
from .errors import (
    create_missing_operand_error, create_missing_token_error,
    create_nesting_too_deep_error, create_unexpected_eof_error,
    create_unexpected_token_error, create_unknown_operator_error,
)
from .operators import Operator, Precedence, is_right_associative

logger: logging.Logger = logging.getLogger(__name__)

NEGATION_LEXEME = "-"


class Parser:
    """
    Precedence-climbing expression parser.

    Stops cleanly at the first token that cannot continue the expression
    (a closing delimiter, a comma, a semicolon, end of input) and raises
    ``ParseError`` for operator tokens the operator table does not know.
    """

    def __init__(self, tokens: List[Token]):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: List of tokens from the lexer
        """
        self.tokens = tokens
        self.current = 0

        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize prefix and postfix parsing tables."""

        # Tokens that can start an operand
        self.prefix_parsers: Dict[TokenType, Callable[[], Expression]] = {
            TokenType.INTEGER: self._parse_integer_literal,
            TokenType.FLOAT: self._parse_float_literal,
            TokenType.STRING: self._parse_string_literal,
            TokenType.CHARACTER: self._parse_character_literal,
            TokenType.TRUE: self._parse_boolean_literal,
            TokenType.FALSE: self._parse_boolean_literal,
            TokenType.IDENTIFIER: self._parse_identifier,
            TokenType.OPERATOR: self._parse_negation,
            TokenType.LEFT_PAREN: self._parse_grouping,
            TokenType.LEFT_BRACKET: self._parse_array_literal,
        }

        # Tokens that extend an operand in place
        self.postfix_parsers: Dict[TokenType, Callable[[Expression], Expression]] = {
            TokenType.BANG: self._parse_unwrap,
            TokenType.LEFT_PAREN: self._parse_call,
            TokenType.LEFT_BRACKET: self._parse_index,
        }

    def parse(self) -> Expression:
        """Parse one complete expression and require the input to end after it."""
        logger.debug("Parsing expression from %d tokens", len(self.tokens))

        try:
            expr = self.parse_expression()
        except RecursionError:
            # Only nesting (groupings, brackets, prefix `-`) consumes stack
            raise create_nesting_too_deep_error(self._peek()) from None

        if not self._is_at_end():
            raise create_unexpected_token_error("end of expression", self._peek())

        logger.debug("Parsed %s", expr)
        return expr

    def parse_expression(self, min_precedence: int = Precedence.COMPARISON) -> Expression:
        """Parse an expression whose binary operators all rank at least ``min_precedence``."""
        left = self._parse_unary()
        return self._parse_binary(left, min_precedence)

    def _parse_binary(self, left: Expression, min_precedence: int) -> Expression:
        """Fold operators into ``left`` until one ranks below ``min_precedence``."""
        while True:
            entry = self._peek_operator()
            if entry is None:
                return left

            operator, precedence = entry
            if precedence < min_precedence:
                return left

            if is_right_associative(operator):
                left = self._parse_right_associative_run(left, precedence)
                continue

            operator_token = self._advance()
            right = self._parse_right_operand(operator_token, precedence + 1)
            left = Expression(Binary(left, operator, right), operator_token.location)

    def _parse_right_associative_run(self, first: Expression, precedence: int) -> Expression:
        """
        Parse ``a ^ b ^ c ...`` where every operator has rank ``precedence``
        and groups to the right.

        Operands are collected in a loop and folded from the right, so a long
        chain costs no extra stack depth.
        """
        operands = [first]
        operators: List[Tuple[Operator, SourceLocation]] = []

        while True:
            entry = self._peek_operator()
            if entry is None:
                break
            operator, rank = entry
            if rank != precedence or not is_right_associative(operator):
                break

            operator_token = self._advance()
            operators.append((operator, operator_token.location))
            operands.append(self._parse_right_operand(operator_token, precedence + 1))

        result = operands.pop()
        for operator, location in reversed(operators):
            result = Expression(Binary(operands.pop(), operator, result), location)
        return result

    def _peek_operator(self) -> Optional[Tuple[Operator, Precedence]]:
        """
        Look up the binary operator at the current token.

        Returns None when the token cannot continue an expression and raises
        P009 for an operator token the table does not know.
        """
        token = self._peek()
        if not token.is_operator:
            return None

        entry = Operator.from_str(token.lexeme)
        if entry is None:
            logger.debug("Unknown operator %r at %s", token.lexeme, token.location)
            raise create_unknown_operator_error(token)
        return entry

    def _parse_right_operand(self, operator_token: Token, min_precedence: int) -> Expression:
        """Parse the operand after a binary operator."""
        if not self._starts_operand(self._peek()):
            raise create_missing_operand_error(operator_token.lexeme, self._peek())
        return self.parse_expression(min_precedence)

    def _starts_operand(self, token: Token) -> bool:
        if token.is_operator:
            return token.lexeme == NEGATION_LEXEME
        return token.type in self.prefix_parsers

    def _parse_unary(self) -> Expression:
        """Parse an operand with its prefix and postfix operators."""
        token = self._peek()
        prefix_parser = self.prefix_parsers.get(token.type)
        if prefix_parser is None:
            if self._is_at_end():
                raise create_unexpected_eof_error("expression", token.location)
            raise create_unexpected_token_error("expression", token)

        left = prefix_parser()

        while True:
            postfix_parser = self.postfix_parsers.get(self._peek().type)
            if postfix_parser is None:
                return left
            left = postfix_parser(left)

    # Prefix parsers (tokens that can start expressions)

    def _parse_integer_literal(self) -> Expression:
        token = self._advance()
        return Expression(Int(token.value), token.location)

    def _parse_float_literal(self) -> Expression:
        token = self._advance()
        return Expression(Float(token.value), token.location)

    def _parse_string_literal(self) -> Expression:
        token = self._advance()
        return Expression(Str(token.value), token.location)

    def _parse_character_literal(self) -> Expression:
        token = self._advance()
        return Expression(Char(token.value), token.location)

    def _parse_boolean_literal(self) -> Expression:
        token = self._advance()
        return Expression(Bool(token.type == TokenType.TRUE), token.location)

    def _parse_identifier(self) -> Expression:
        token = self._advance()
        return Expression(Identifier(token.lexeme), token.location)

    def _parse_negation(self) -> Expression:
        """Parse prefix negation; ``-`` is the only prefix operator."""
        token = self._peek()
        if token.lexeme != NEGATION_LEXEME:
            raise create_unexpected_token_error("expression", token)

        self._advance()
        operand = self._parse_unary()
        return Expression(Neg(operand), token.location)

    def _parse_grouping(self) -> Expression:
        """Parse parenthesized expression."""
        self._advance()  # Consume (

        expr = self.parse_expression()

        self._consume(TokenType.RIGHT_PAREN)

        return expr

    def _parse_array_literal(self) -> Expression:
        """Parse array literal [1, 2, 3]."""
        start_token = self._advance()  # Consume [

        elements = self._parse_comma_separated(TokenType.RIGHT_BRACKET)

        return Expression(Array(elements), start_token.location)

    # Postfix parsers

    def _parse_unwrap(self, left: Expression) -> Expression:
        bang = self._advance()
        return Expression(Unwrap(left), bang.location)

    def _parse_call(self, left: Expression) -> Expression:
        """Parse function call."""
        paren = self._advance()  # Consume (

        args = self._parse_comma_separated(TokenType.RIGHT_PAREN)

        return Expression(Call(left, args), paren.location)

    def _parse_index(self, left: Expression) -> Expression:
        """Parse index access (array[index])."""
        bracket = self._advance()  # Consume [

        index = self.parse_expression()

        self._consume(TokenType.RIGHT_BRACKET)

        return Expression(Index(left, index), bracket.location)

    # Utility methods

    def _parse_comma_separated(self, closing: TokenType) -> List[Expression]:
        """Parse ``expr, expr, ...`` up to and including ``closing``. A trailing comma is allowed."""
        items = []
        if not self._check(closing):
            items.append(self.parse_expression())
            while self._match(TokenType.COMMA):
                if self._check(closing):
                    break
                items.append(self.parse_expression())

        self._consume(closing)
        return items

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        if self._is_at_end():
            return False
        return self._peek().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._peek()
        if not self._is_at_end():
            self.current += 1
        return token

    def _is_at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self.current >= len(self.tokens) or self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        """Return current token without consuming."""
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        # Synthesize EOF at the last known location
        location = self.tokens[-1].location if self.tokens else SourceLocation("<eof>", 0, 0, 0)
        return Token(TokenType.EOF, "", None, location)

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()

        current_token = self._peek()
        if self._is_at_end():
            raise create_unexpected_eof_error(token_type.name, current_token.location)
        raise create_missing_token_error(token_type, current_token)


def parse_tokens(tokens: List[Token]) -> Expression:
    """
    Convenience function to parse a complete token list into one expression.

    Args:
        tokens: Tokens from the lexer, optionally terminated by EOF

    Returns:
        Expression tree

    Raises:
        ParseError: If parsing fails
    """
    parser = Parser(tokens)
    return parser.parse()
