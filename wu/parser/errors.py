"""
Error handling for the Wu parser.

Provides error reporting with source location information and
suggestions for syntax errors found while parsing expressions.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass

from ..lexer.tokens import Token, TokenType, SourceLocation
from .operators import OPERATOR_TABLE


@dataclass
class Diagnostic:
    """A located diagnostic (error, warning, info)."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning", "info", "hint"
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


class ParseError(Exception):
    """
    Exception raised when the parser encounters a fatal syntax error.

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
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def category(self) -> Optional[str]:
        """Category of the error code, e.g. "Invalid operator usage" for P009."""
        return PARSER_ERROR_CODES.get(self.code)

    def __str__(self) -> str:
        return str(self.diagnostic)


def suggest_operator_corrections(invalid_op: str) -> List[str]:
    """Suggest known operators within one edit of an unrecognized one."""
    suggestions = [
        operator for operator in OPERATOR_TABLE
        if _edit_distance(invalid_op, operator) <= 1
    ]
    return sorted(suggestions)[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        return _edit_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Expected token not found",
    "P005": "Invalid expression",
    "P009": "Invalid operator usage",
    "P010": "Unexpected end of input",
    "P011": "Expression nested too deeply",
}


# Helper functions for creating common parser errors

def create_unexpected_token_error(expected: str, found: Token) -> ParseError:
    """Create an error for an unexpected token."""
    return ParseError(
        message=f"Expected {expected}, found {found.type.name} {found.lexeme!r}",
        location=found.location,
        token=found,
        code="P001",
        help_text=f"The parser expected to see {expected} at this position."
    )


def create_missing_token_error(expected: TokenType, found: Token) -> ParseError:
    """Create an error for a missing closing delimiter or separator."""
    return ParseError(
        message=f"Expected {expected.name}",
        location=found.location,
        token=found,
        code="P002",
        help_text=f"The parser expected to see {expected.name} before {found.lexeme!r}."
    )


def create_unknown_operator_error(token: Token) -> ParseError:
    """Create an error for an operator token missing from the operator table."""
    return ParseError(
        message=f"Unknown operator `{token.lexeme}`",
        location=token.location,
        token=token,
        code="P009",
        help_text="Binary operators must be one of: " + " ".join(OPERATOR_TABLE),
        suggestions=[f"Did you mean `{op}`?" for op in suggest_operator_corrections(token.lexeme)]
    )


def create_missing_operand_error(operator: str, found: Token) -> ParseError:
    """Create an error for an operator with nothing after it."""
    return ParseError(
        message=f"Expected expression after `{operator}`",
        location=found.location,
        token=found,
        code="P005",
        help_text=f"The operator `{operator}` needs an operand on its right.",
        suggestions=["Ensure all operators have operands"]
    )


def create_unexpected_eof_error(expected: str, location: SourceLocation) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        location=location,
        code="P010",
        help_text=f"The parser reached the end of the input while expecting {expected}."
    )


def create_nesting_too_deep_error(found: Token) -> ParseError:
    """Create an error for input nested deeper than the parser can follow."""
    return ParseError(
        message="Expression nested too deeply",
        location=found.location,
        token=found,
        code="P011",
        help_text="Split the expression into smaller named parts."
    )
