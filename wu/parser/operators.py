"""
Binary operator table for the Wu parser.

Maps operator lexemes to operator tags and binding powers. This table is the
only place precedence is defined; the expression parser looks every operator
token up here.

Author: xwest
"""

from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class Precedence(IntEnum):
    """Binding power of binary operators. Higher binds tighter."""
    NONE = 0
    COMPARISON = 1      # ==, !=, <, >, <=, >=
    TERM = 2            # +, -, ++
    FACTOR = 3          # *, /, %
    POWER = 4           # ^
    UNARY = 5           # prefix -, postfix ! (parser-side only)


class Operator(Enum):
    """Binary operators. The enum value is the canonical source lexeme."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"
    CONCAT = "++"
    EQ = "=="
    LT = "<"
    GT = ">"
    NEQ = "!="
    LT_EQ = "<="
    GT_EQ = ">="

    @staticmethod
    def from_str(lexeme: str) -> Optional[Tuple["Operator", Precedence]]:
        """
        Look up an operator lexeme.

        Returns:
            ``(operator, precedence)`` for a recognized lexeme, ``None``
            otherwise. Never raises.
        """
        return OPERATOR_TABLE.get(lexeme)

    def as_str(self) -> str:
        """Return the exact source lexeme of this operator."""
        return self.value

    @property
    def precedence(self) -> Precedence:
        return OPERATOR_TABLE[self.value][1]

    def __str__(self) -> str:
        return self.value


OPERATOR_TABLE: Mapping[str, Tuple[Operator, Precedence]] = MappingProxyType({
    # Comparison
    "==": (Operator.EQ, Precedence.COMPARISON),
    "!=": (Operator.NEQ, Precedence.COMPARISON),
    "<":  (Operator.LT, Precedence.COMPARISON),
    ">":  (Operator.GT, Precedence.COMPARISON),
    "<=": (Operator.LT_EQ, Precedence.COMPARISON),
    ">=": (Operator.GT_EQ, Precedence.COMPARISON),

    # Additive
    "+":  (Operator.ADD, Precedence.TERM),
    "-":  (Operator.SUB, Precedence.TERM),
    "++": (Operator.CONCAT, Precedence.TERM),

    # Multiplicative
    "*":  (Operator.MUL, Precedence.FACTOR),
    "/":  (Operator.DIV, Precedence.FACTOR),
    "%":  (Operator.MOD, Precedence.FACTOR),

    # Exponentiation
    "^":  (Operator.POW, Precedence.POWER),
})

# Associativity is not encoded in the rank table. Every operator folds to the
# left except the ones listed here.
RIGHT_ASSOCIATIVE = frozenset({Operator.POW})


def is_right_associative(operator: Operator) -> bool:
    """Check if chains of this operator group to the right."""
    return operator in RIGHT_ASSOCIATIVE
