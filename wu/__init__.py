"""
Wu Front-End Core

Syntax tree and expression-precedence model for the Wu scripting language.

Architecture:
    wu/
    ├── lexer/           # Token and source-position vocabulary
    └── parser/          # Syntax tree, operator table, expression parser

Author: xwest
License: MIT
"""

__version__ = "0.1.0-alpha"
__author__ = "xwest"
__email__ = "dev@wu-lang.org"
__license__ = "MIT"

from .lexer import Token, TokenType, SourceLocation
from .parser import Parser, Operator, Precedence, Statement, Expression

__all__ = [
    "Token",
    "TokenType",
    "SourceLocation",
    "Parser",
    "Operator",
    "Precedence",
    "Statement",
    "Expression",

    # Version info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
]
