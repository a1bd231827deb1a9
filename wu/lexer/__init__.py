"""
Wu Lexer Package

Token and source-location vocabulary shared between the lexer and the parser.
Scanning source text into tokens is done by the lexer proper; this package
only defines what a token is and where it came from.

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation, OPERATOR_LEXEMES

__all__ = [
    "Token",
    "TokenType",
    "SourceLocation",
    "OPERATOR_LEXEMES",
]
