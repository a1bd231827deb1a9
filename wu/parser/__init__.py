"""
Wu Parser Package

Syntax tree, operator table and expression parser for the Wu language.

Key Features:
- Immutable statement and expression nodes with source positions
- Single operator table driving precedence-climbing expression parsing
- Exhaustive visitor interface over every node variant
- Located diagnostics for syntax errors

Author: xwest
"""

from .ast_nodes import *
from .operators import (
    Operator, Precedence, OPERATOR_TABLE, RIGHT_ASSOCIATIVE, is_right_associative,
)
from .parser import Parser, parse_tokens
from .printer import Entry, ExpressionFormatter, TreePrinter, dump, format_expression
from .errors import Diagnostic, ParseError, PARSER_ERROR_CODES

__all__ = [
    # Parser
    "Parser", "parse_tokens",

    # Operators
    "Operator", "Precedence", "OPERATOR_TABLE", "RIGHT_ASSOCIATIVE",
    "is_right_associative",

    # AST nodes
    "Statement", "Expression", "StatementNode", "ExpressionNode",
    "StatementKind", "ExpressionKind", "ASTNode", "ASTVisitor", "walk",
    "TypeRef", "Param", "StructField", "FieldInit", "ElseClause",
    "ExpressionStatement", "Variable", "Assignment", "Return", "Import",
    "Implement", "Break", "Skip",
    "Int", "Float", "Str", "Char", "Bool", "Identifier",
    "Unwrap", "Neg", "Binary", "Block", "Cast", "Array", "Index",
    "Function", "Call", "If", "Module", "While", "Struct",
    "Initialization", "Extern", "EOF", "Empty",

    # Printing
    "Entry", "TreePrinter", "ExpressionFormatter", "dump", "format_expression",

    # Error handling
    "Diagnostic", "ParseError", "PARSER_ERROR_CODES",
]
