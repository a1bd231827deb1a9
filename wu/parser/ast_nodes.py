"""
Abstract Syntax Tree node definitions for Wu.

Every statement and expression is a ``Statement`` or ``Expression`` wrapper
pairing one variant payload with the source position it was parsed from.
Nodes are immutable once built; sequences are stored as tuples so their
order survives any copy. Sub-expressions are plain shared references.

Author: xwest
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, ClassVar, Iterator, List, Optional, Tuple, Union

from ..lexer.tokens import SourceLocation
from .operators import Operator


class StatementKind(Enum):
    """Tags of all statement variants."""
    EXPRESSION_STATEMENT = "ExpressionStatement"
    VARIABLE = "Variable"
    ASSIGNMENT = "Assignment"
    RETURN = "Return"
    IMPORT = "Import"
    IMPLEMENT = "Implement"
    BREAK = "Break"
    SKIP = "Skip"


class ExpressionKind(Enum):
    """Tags of all expression variants."""

    # Literals
    INT = "Int"
    FLOAT = "Float"
    STR = "Str"
    CHAR = "Char"
    BOOL = "Bool"
    IDENTIFIER = "Identifier"

    # Operators
    UNWRAP = "Unwrap"
    NEG = "Neg"
    BINARY = "Binary"

    # Compound expressions
    BLOCK = "Block"
    CAST = "Cast"
    ARRAY = "Array"
    INDEX = "Index"
    FUNCTION = "Function"
    CALL = "Call"
    IF = "If"
    MODULE = "Module"
    WHILE = "While"
    STRUCT = "Struct"
    INITIALIZATION = "Initialization"
    EXTERN = "Extern"

    # Sentinels
    EOF = "EOF"
    EMPTY = "Empty"


def _freeze(node: Any, *names: str) -> None:
    """Store the named sequence fields of a frozen dataclass as tuples."""
    for name in names:
        object.__setattr__(node, name, tuple(getattr(node, name)))


# ============================================================================
# Payload records
# ============================================================================

@dataclass(frozen=True)
class TypeRef:
    """Declared type such as ``int`` or ``array[int]``."""
    name: str
    args: Tuple["TypeRef", ...] = ()

    def __post_init__(self):
        _freeze(self, "args")

    def __str__(self) -> str:
        if self.args:
            return f"{self.name}[{', '.join(str(arg) for arg in self.args)}]"
        return self.name


@dataclass(frozen=True)
class Param:
    """Function parameter."""
    name: str
    type_ref: TypeRef


@dataclass(frozen=True)
class StructField:
    """Struct field declaration."""
    name: str
    type_ref: TypeRef


@dataclass(frozen=True)
class FieldInit:
    """One ``name: value`` pair of a struct initialization."""
    name: str
    value: "Expression"


@dataclass(frozen=True)
class ElseClause:
    """An ``else if`` clause (with condition) or final ``else`` (without)."""
    condition: Optional["Expression"]
    body: "Expression"
    pos: SourceLocation


# ============================================================================
# Wrappers
# ============================================================================

class StatementNode:
    """Base class for statement payloads."""
    kind: ClassVar[StatementKind]

    def children(self) -> Tuple["ASTNode", ...]:
        return ()


class ExpressionNode:
    """Base class for expression payloads."""
    kind: ClassVar[ExpressionKind]

    def children(self) -> Tuple["ASTNode", ...]:
        return ()


@dataclass(frozen=True)
class Statement:
    """A statement payload paired with its source position."""
    node: StatementNode
    pos: SourceLocation

    @property
    def kind(self) -> StatementKind:
        return self.node.kind

    def children(self) -> Tuple["ASTNode", ...]:
        """Direct sub-nodes in source order."""
        return self.node.children()

    def accept(self, visitor: "ASTVisitor") -> Any:
        return getattr(visitor, "visit_" + self.node.kind.name.lower())(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Statement):
            return NotImplemented
        return _same_tree(self, other)

    def __str__(self) -> str:
        return f"{self.node.kind.value}@{self.pos}"


@dataclass(frozen=True)
class Expression:
    """An expression payload paired with its source position."""
    node: ExpressionNode
    pos: SourceLocation

    @property
    def kind(self) -> ExpressionKind:
        return self.node.kind

    def children(self) -> Tuple["ASTNode", ...]:
        """Direct sub-nodes in source order."""
        return self.node.children()

    def accept(self, visitor: "ASTVisitor") -> Any:
        return getattr(visitor, "visit_" + self.node.kind.name.lower())(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Expression):
            return NotImplemented
        return _same_tree(self, other)

    def __str__(self) -> str:
        return f"{self.node.kind.value}@{self.pos}"


ASTNode = Union[Statement, Expression]


def _same_tree(a: ASTNode, b: ASTNode) -> bool:
    """Structural equality including positions, compared without recursion."""
    pending: List[Tuple[Any, Any]] = [(a, b)]
    while pending:
        x, y = pending.pop()
        if x is y:
            continue
        if type(x) is not type(y):
            return False
        if isinstance(x, tuple):
            if len(x) != len(y):
                return False
            pending.extend(zip(x, y))
        elif is_dataclass(x):
            pending.extend((getattr(x, f.name), getattr(y, f.name)) for f in fields(x))
        elif x != y:
            return False
    return True


def walk(root: ASTNode) -> Iterator[ASTNode]:
    """Yield ``root`` and every node below it, depth-first, pre-order."""
    stack: List[ASTNode] = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children()))


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class ExpressionStatement(StatementNode):
    """Bare expression used as a statement."""
    kind: ClassVar[StatementKind] = StatementKind.EXPRESSION_STATEMENT
    expression: Expression

    def children(self):
        return (self.expression,)


@dataclass(frozen=True)
class Variable(StatementNode):
    """Variable binding with an optional initializer."""
    kind: ClassVar[StatementKind] = StatementKind.VARIABLE
    declared_type: TypeRef
    name: str
    value: Optional[Expression] = None

    def children(self):
        return (self.value,) if self.value is not None else ()


@dataclass(frozen=True)
class Assignment(StatementNode):
    kind: ClassVar[StatementKind] = StatementKind.ASSIGNMENT
    target: Expression
    value: Expression

    def children(self):
        return (self.target, self.value)


@dataclass(frozen=True)
class Return(StatementNode):
    kind: ClassVar[StatementKind] = StatementKind.RETURN
    value: Optional[Expression] = None

    def children(self):
        return (self.value,) if self.value is not None else ()


@dataclass(frozen=True)
class Import(StatementNode):
    """Import of ``names`` from the module at ``path``."""
    kind: ClassVar[StatementKind] = StatementKind.IMPORT
    path: str
    names: Tuple[str, ...] = ()

    def __post_init__(self):
        _freeze(self, "names")


@dataclass(frozen=True)
class Implement(StatementNode):
    """Attaches the definitions in ``body`` to ``target`` for the given traits."""
    kind: ClassVar[StatementKind] = StatementKind.IMPLEMENT
    target: Expression
    traits: Tuple[str, ...]
    body: Expression

    def __post_init__(self):
        _freeze(self, "traits")

    def children(self):
        return (self.target, self.body)


@dataclass(frozen=True)
class Break(StatementNode):
    kind: ClassVar[StatementKind] = StatementKind.BREAK


@dataclass(frozen=True)
class Skip(StatementNode):
    kind: ClassVar[StatementKind] = StatementKind.SKIP


# ============================================================================
# Literals
# ============================================================================

@dataclass(frozen=True)
class Int(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.INT
    value: int


@dataclass(frozen=True)
class Float(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.FLOAT
    value: float


@dataclass(frozen=True)
class Str(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.STR
    value: str


@dataclass(frozen=True)
class Char(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.CHAR
    value: str


@dataclass(frozen=True)
class Bool(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.BOOL
    value: bool


@dataclass(frozen=True)
class Identifier(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.IDENTIFIER
    name: str


# ============================================================================
# Operators
# ============================================================================

@dataclass(frozen=True)
class Unwrap(ExpressionNode):
    """Postfix unwrap, ``expr!``."""
    kind: ClassVar[ExpressionKind] = ExpressionKind.UNWRAP
    expression: Expression

    def children(self):
        return (self.expression,)


@dataclass(frozen=True)
class Neg(ExpressionNode):
    """Prefix negation, ``-expr``."""
    kind: ClassVar[ExpressionKind] = ExpressionKind.NEG
    expression: Expression

    def children(self):
        return (self.expression,)


@dataclass(frozen=True)
class Binary(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.BINARY
    left: Expression
    op: Operator
    right: Expression

    def children(self):
        return (self.left, self.right)


# ============================================================================
# Compound expressions
# ============================================================================

@dataclass(frozen=True)
class Block(ExpressionNode):
    """Ordered statement sequence forming a scope."""
    kind: ClassVar[ExpressionKind] = ExpressionKind.BLOCK
    statements: Tuple[Statement, ...] = ()

    def __post_init__(self):
        _freeze(self, "statements")

    def children(self):
        return self.statements


@dataclass(frozen=True)
class Cast(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.CAST
    expression: Expression
    target_type: TypeRef

    def children(self):
        return (self.expression,)


@dataclass(frozen=True)
class Array(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.ARRAY
    elements: Tuple[Expression, ...] = ()

    def __post_init__(self):
        _freeze(self, "elements")

    def children(self):
        return self.elements


@dataclass(frozen=True)
class Index(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.INDEX
    target: Expression
    index: Expression

    def children(self):
        return (self.target, self.index)


@dataclass(frozen=True)
class Function(ExpressionNode):
    """
    Function literal.

    ``attributes`` lists captured names and annotations in source order.
    A function refers to itself by name through an ``Identifier``, never by
    holding its own node.
    """
    kind: ClassVar[ExpressionKind] = ExpressionKind.FUNCTION
    params: Tuple[Param, ...]
    return_type: TypeRef
    body: Expression
    attributes: Tuple[str, ...] = ()

    def __post_init__(self):
        _freeze(self, "params", "attributes")

    def children(self):
        return (self.body,)


@dataclass(frozen=True)
class Call(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.CALL
    callee: Expression
    args: Tuple[Expression, ...] = ()

    def __post_init__(self):
        _freeze(self, "args")

    def children(self):
        return (self.callee,) + self.args


@dataclass(frozen=True)
class If(ExpressionNode):
    """
    Conditional with optional ``else if``/``else`` clauses.

    ``clauses`` is ``None`` when there are none; an empty sequence is stored
    as ``None`` too.
    """
    kind: ClassVar[ExpressionKind] = ExpressionKind.IF
    condition: Expression
    then_branch: Expression
    clauses: Optional[Tuple[ElseClause, ...]] = None

    def __post_init__(self):
        if self.clauses is not None:
            clauses = tuple(self.clauses)
            object.__setattr__(self, "clauses", clauses or None)

    def children(self):
        children = [self.condition, self.then_branch]
        for clause in self.clauses or ():
            if clause.condition is not None:
                children.append(clause.condition)
            children.append(clause.body)
        return tuple(children)


@dataclass(frozen=True)
class Module(ExpressionNode):
    """Namespace wrapping a body expression."""
    kind: ClassVar[ExpressionKind] = ExpressionKind.MODULE
    body: Expression

    def children(self):
        return (self.body,)


@dataclass(frozen=True)
class While(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.WHILE
    condition: Expression
    body: Expression

    def children(self):
        return (self.condition, self.body)


@dataclass(frozen=True)
class Struct(ExpressionNode):
    """Struct declaration. Duplicate field names are left to semantic analysis."""
    kind: ClassVar[ExpressionKind] = ExpressionKind.STRUCT
    name: str
    fields: Tuple[StructField, ...] = ()
    attributes: Tuple[str, ...] = ()

    def __post_init__(self):
        _freeze(self, "fields", "attributes")


@dataclass(frozen=True)
class Initialization(ExpressionNode):
    """Struct initialization, ``target { name: value, ... }``."""
    kind: ClassVar[ExpressionKind] = ExpressionKind.INITIALIZATION
    target: Expression
    fields: Tuple[FieldInit, ...] = ()

    def __post_init__(self):
        _freeze(self, "fields")

    def children(self):
        return (self.target,) + tuple(init.value for init in self.fields)


@dataclass(frozen=True)
class Extern(ExpressionNode):
    """Externally defined value of ``declared_type``, optionally under another linkage name."""
    kind: ClassVar[ExpressionKind] = ExpressionKind.EXTERN
    declared_type: TypeRef
    linkage_name: Optional[str] = None


# ============================================================================
# Sentinels
# ============================================================================

@dataclass(frozen=True)
class EOF(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.EOF


@dataclass(frozen=True)
class Empty(ExpressionNode):
    kind: ClassVar[ExpressionKind] = ExpressionKind.EMPTY


# ============================================================================
# Visitor
# ============================================================================

class ASTVisitor(ABC):
    """
    Visitor over every statement and expression variant.

    Each ``visit_*`` method receives the ``Statement``/``Expression`` wrapper,
    so the position is at hand. A subclass that leaves a variant unhandled
    cannot be instantiated.
    """

    def visit(self, node: ASTNode) -> Any:
        return node.accept(self)

    # Statements

    @abstractmethod
    def visit_expression_statement(self, stmt: Statement) -> Any: ...

    @abstractmethod
    def visit_variable(self, stmt: Statement) -> Any: ...

    @abstractmethod
    def visit_assignment(self, stmt: Statement) -> Any: ...

    @abstractmethod
    def visit_return(self, stmt: Statement) -> Any: ...

    @abstractmethod
    def visit_import(self, stmt: Statement) -> Any: ...

    @abstractmethod
    def visit_implement(self, stmt: Statement) -> Any: ...

    @abstractmethod
    def visit_break(self, stmt: Statement) -> Any: ...

    @abstractmethod
    def visit_skip(self, stmt: Statement) -> Any: ...

    # Expressions

    @abstractmethod
    def visit_int(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_float(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_str(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_char(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_bool(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_identifier(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_unwrap(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_neg(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_binary(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_block(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_cast(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_array(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_index(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_function(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_call(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_if(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_module(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_while(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_struct(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_initialization(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_extern(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_eof(self, expr: Expression) -> Any: ...

    @abstractmethod
    def visit_empty(self, expr: Expression) -> Any: ...
