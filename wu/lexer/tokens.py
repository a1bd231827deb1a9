"""
Token definitions for the Wu lexer.

This module defines the token categories the parser consumes:
- Literals (integers, floats, strings, characters, booleans)
- Identifiers
- Operators (binary operator lexemes plus the postfix unwrap bang)
- Punctuation and delimiters

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """Enumeration of the token types the parser understands."""

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of file

    # ========================================================================
    # Literals
    # ========================================================================
    INTEGER = auto()                # 42
    FLOAT = auto()                  # 3.14
    STRING = auto()                 # "hello"
    CHARACTER = auto()              # 'a'
    TRUE = auto()                   # true
    FALSE = auto()                  # false

    # ========================================================================
    # Identifiers and Operators
    # ========================================================================
    IDENTIFIER = auto()             # name
    OPERATOR = auto()               # + - * / % ^ ++ == != < > <= >=
    BANG = auto()                   # ! (postfix unwrap)

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]
    COMMA = auto()                  # ,
    SEMICOLON = auto()              # ;


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and diagnostics. Attached to every syntax tree
    node at construction and never recomputed afterwards.
    """
    filename: str
    line: int
    column: int
    offset: int  # Byte offset from start of file

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Wu language.

    Contains the token type, lexeme (raw text), semantic value,
    and source location for error reporting.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # Parsed/semantic value (e.g., int for INTEGER)
    location: SourceLocation        # Source location

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_operator(self) -> bool:
        """Check if this token is a binary operator token."""
        return self.type == TokenType.OPERATOR


# Every lexeme the lexer may emit as an OPERATOR token. The parser's operator
# table must cover exactly this set.
OPERATOR_LEXEMES = frozenset({
    # Arithmetic
    "+", "-", "*", "/", "%", "^",

    # String concatenation
    "++",

    # Comparison
    "==", "!=", "<", ">", "<=", ">=",
})
