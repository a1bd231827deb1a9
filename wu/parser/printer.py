"""
Text renderings of Wu syntax trees for diagnostics and tests.

``dump`` produces an indented one-node-per-line tree; ``format_expression``
renders operator expressions back to fully parenthesized source form.

Both are visitors that describe one level of the tree at a time; the
drivers below expand the result with an explicit stack, so the depth of
the tree does not matter.

Author: xwest
"""

from typing import List, NamedTuple, Sequence, Tuple, Union

from .ast_nodes import ASTNode, ASTVisitor, Expression, ExpressionKind, Statement

INDENT = "  "


class Entry(NamedTuple):
    """One line of a tree dump and the items indented beneath it."""
    header: str
    children: Tuple[Union[ASTNode, "Entry"], ...] = ()


class TreePrinter(ASTVisitor):
    """Describes a statement or expression as a header line plus children."""

    def _node(self, header: str, *children: Union[ASTNode, Entry]) -> Entry:
        return Entry(header, children)

    # Statements

    def visit_expression_statement(self, stmt: Statement) -> Entry:
        return self._node("ExpressionStatement", stmt.node.expression)

    def visit_variable(self, stmt: Statement) -> Entry:
        node = stmt.node
        return self._node(f"Variable {node.name}: {node.declared_type}", *node.children())

    def visit_assignment(self, stmt: Statement) -> Entry:
        return self._node("Assignment", stmt.node.target, stmt.node.value)

    def visit_return(self, stmt: Statement) -> Entry:
        return self._node("Return", *stmt.node.children())

    def visit_import(self, stmt: Statement) -> Entry:
        node = stmt.node
        return self._node(f"Import {node.path} ({', '.join(node.names)})")

    def visit_implement(self, stmt: Statement) -> Entry:
        node = stmt.node
        return self._node(f"Implement {', '.join(node.traits)}", node.target, node.body)

    def visit_break(self, stmt: Statement) -> Entry:
        return self._node("Break")

    def visit_skip(self, stmt: Statement) -> Entry:
        return self._node("Skip")

    # Literals

    def visit_int(self, expr: Expression) -> Entry:
        return self._node(f"Int {expr.node.value}")

    def visit_float(self, expr: Expression) -> Entry:
        return self._node(f"Float {expr.node.value!r}")

    def visit_str(self, expr: Expression) -> Entry:
        return self._node(f"Str {expr.node.value!r}")

    def visit_char(self, expr: Expression) -> Entry:
        return self._node(f"Char {expr.node.value!r}")

    def visit_bool(self, expr: Expression) -> Entry:
        return self._node(f"Bool {'true' if expr.node.value else 'false'}")

    def visit_identifier(self, expr: Expression) -> Entry:
        return self._node(f"Identifier {expr.node.name}")

    # Operators

    def visit_unwrap(self, expr: Expression) -> Entry:
        return self._node("Unwrap", expr.node.expression)

    def visit_neg(self, expr: Expression) -> Entry:
        return self._node("Neg", expr.node.expression)

    def visit_binary(self, expr: Expression) -> Entry:
        node = expr.node
        return self._node(f"Binary {node.op.as_str()}", node.left, node.right)

    # Compound expressions

    def visit_block(self, expr: Expression) -> Entry:
        return self._node("Block", *expr.node.statements)

    def visit_cast(self, expr: Expression) -> Entry:
        return self._node(f"Cast {expr.node.target_type}", expr.node.expression)

    def visit_array(self, expr: Expression) -> Entry:
        return self._node("Array", *expr.node.elements)

    def visit_index(self, expr: Expression) -> Entry:
        return self._node("Index", expr.node.target, expr.node.index)

    def visit_function(self, expr: Expression) -> Entry:
        node = expr.node
        params = ", ".join(f"{param.name}: {param.type_ref}" for param in node.params)
        header = f"Function ({params}) -> {node.return_type}"
        if node.attributes:
            header += f" [{', '.join(node.attributes)}]"
        return self._node(header, node.body)

    def visit_call(self, expr: Expression) -> Entry:
        return self._node("Call", expr.node.callee, *expr.node.args)

    def visit_if(self, expr: Expression) -> Entry:
        node = expr.node
        clauses = []
        for clause in node.clauses or ():
            if clause.condition is not None:
                clauses.append(self._node("ElseIf", clause.condition, clause.body))
            else:
                clauses.append(self._node("Else", clause.body))
        return self._node("If", node.condition, node.then_branch, *clauses)

    def visit_module(self, expr: Expression) -> Entry:
        return self._node("Module", expr.node.body)

    def visit_while(self, expr: Expression) -> Entry:
        return self._node("While", expr.node.condition, expr.node.body)

    def visit_struct(self, expr: Expression) -> Entry:
        node = expr.node
        header = f"Struct {node.name}"
        if node.attributes:
            header += f" [{', '.join(node.attributes)}]"
        return self._node(header, *(Entry(f"{field.name}: {field.type_ref}") for field in node.fields))

    def visit_initialization(self, expr: Expression) -> Entry:
        node = expr.node
        fields = (self._node(f"{init.name}:", init.value) for init in node.fields)
        return self._node("Initialization", node.target, *fields)

    def visit_extern(self, expr: Expression) -> Entry:
        node = expr.node
        header = f"Extern {node.declared_type}"
        if node.linkage_name is not None:
            header += f" as {node.linkage_name}"
        return self._node(header)

    # Sentinels

    def visit_eof(self, expr: Expression) -> Entry:
        return self._node("EOF")

    def visit_empty(self, expr: Expression) -> Entry:
        return self._node("Empty")


def dump(node: ASTNode) -> str:
    """Render ``node`` and its descendants as an indented tree."""
    printer = TreePrinter()
    lines: List[str] = []
    pending: List[Tuple[int, Union[ASTNode, Entry]]] = [(0, node)]

    while pending:
        depth, item = pending.pop()
        entry = item if isinstance(item, Entry) else item.accept(printer)
        lines.append(INDENT * depth + entry.header)
        pending.extend((depth + 1, child) for child in reversed(entry.children))

    return "\n".join(lines)


# Rendered pieces: literal text, or a sub-expression still to be rendered
Piece = Union[str, Expression]


def _needs_grouping(expr: Expression) -> bool:
    """Whether ``expr`` must be parenthesized after ``-`` or before a postfix form."""
    kind = expr.kind
    if kind is ExpressionKind.NEG:
        return True
    if kind is ExpressionKind.INT or kind is ExpressionKind.FLOAT:
        # Covers -0.0 as well
        return repr(expr.node.value).startswith("-")
    return False


def _grouped(expr: Expression) -> Tuple[Piece, ...]:
    if _needs_grouping(expr):
        return ("(", expr, ")")
    return (expr,)


def _separated(items: Sequence[Expression]) -> List[Piece]:
    pieces: List[Piece] = []
    for i, item in enumerate(items):
        if i:
            pieces.append(", ")
        pieces.append(item)
    return pieces


def _quoted(value: str, quote: str) -> str:
    return quote + value.replace("\\", "\\\\").replace(quote, "\\" + quote) + quote


class ExpressionFormatter(ASTVisitor):
    """
    Renders one level of an expression in source form.

    Each visit returns the pieces of that level. Binary operations are
    always parenthesized, and so is an operand whose text would read back
    differently after ``-`` or before ``!``, a call or an index. Constructs
    with no inline form render as ``<Kind>``.
    """

    def _opaque(self, node: ASTNode) -> Tuple[Piece, ...]:
        return (f"<{node.kind.value}>",)

    # Statements have no inline form

    def visit_expression_statement(self, stmt: Statement) -> Tuple[Piece, ...]:
        return self._opaque(stmt)

    def visit_variable(self, stmt: Statement) -> Tuple[Piece, ...]:
        return self._opaque(stmt)

    def visit_assignment(self, stmt: Statement) -> Tuple[Piece, ...]:
        return self._opaque(stmt)

    def visit_return(self, stmt: Statement) -> Tuple[Piece, ...]:
        return self._opaque(stmt)

    def visit_import(self, stmt: Statement) -> Tuple[Piece, ...]:
        return self._opaque(stmt)

    def visit_implement(self, stmt: Statement) -> Tuple[Piece, ...]:
        return self._opaque(stmt)

    def visit_break(self, stmt: Statement) -> Tuple[Piece, ...]:
        return self._opaque(stmt)

    def visit_skip(self, stmt: Statement) -> Tuple[Piece, ...]:
        return self._opaque(stmt)

    # Literals

    def visit_int(self, expr: Expression) -> Tuple[Piece, ...]:
        return (str(expr.node.value),)

    def visit_float(self, expr: Expression) -> Tuple[Piece, ...]:
        return (repr(expr.node.value),)

    def visit_str(self, expr: Expression) -> Tuple[Piece, ...]:
        return (_quoted(expr.node.value, '"'),)

    def visit_char(self, expr: Expression) -> Tuple[Piece, ...]:
        return (_quoted(expr.node.value, "'"),)

    def visit_bool(self, expr: Expression) -> Tuple[Piece, ...]:
        return ("true" if expr.node.value else "false",)

    def visit_identifier(self, expr: Expression) -> Tuple[Piece, ...]:
        return (expr.node.name,)

    # Operators

    def visit_unwrap(self, expr: Expression) -> Tuple[Piece, ...]:
        return _grouped(expr.node.expression) + ("!",)

    def visit_neg(self, expr: Expression) -> Tuple[Piece, ...]:
        return ("-",) + _grouped(expr.node.expression)

    def visit_binary(self, expr: Expression) -> Tuple[Piece, ...]:
        node = expr.node
        return ("(", node.left, f" {node.op.as_str()} ", node.right, ")")

    # Compound expressions

    def visit_block(self, expr: Expression) -> Tuple[Piece, ...]:
        return self._opaque(expr)

    def visit_cast(self, expr: Expression) -> Tuple[Piece, ...]:
        return ("(", expr.node.expression, f" as {expr.node.target_type})")

    def visit_array(self, expr: Expression) -> Tuple[Piece, ...]:
        return ("[", *_separated(expr.node.elements), "]")

    def visit_index(self, expr: Expression) -> Tuple[Piece, ...]:
        return _grouped(expr.node.target) + ("[", expr.node.index, "]")

    def visit_function(self, expr: Expression) -> Tuple[Piece, ...]:
        return self._opaque(expr)

    def visit_call(self, expr: Expression) -> Tuple[Piece, ...]:
        return _grouped(expr.node.callee) + ("(", *_separated(expr.node.args), ")")

    def visit_if(self, expr: Expression) -> Tuple[Piece, ...]:
        return self._opaque(expr)

    def visit_module(self, expr: Expression) -> Tuple[Piece, ...]:
        return self._opaque(expr)

    def visit_while(self, expr: Expression) -> Tuple[Piece, ...]:
        return self._opaque(expr)

    def visit_struct(self, expr: Expression) -> Tuple[Piece, ...]:
        return self._opaque(expr)

    def visit_initialization(self, expr: Expression) -> Tuple[Piece, ...]:
        return self._opaque(expr)

    def visit_extern(self, expr: Expression) -> Tuple[Piece, ...]:
        return self._opaque(expr)

    # Sentinels

    def visit_eof(self, expr: Expression) -> Tuple[Piece, ...]:
        return self._opaque(expr)

    def visit_empty(self, expr: Expression) -> Tuple[Piece, ...]:
        return self._opaque(expr)


def format_expression(expr: Expression) -> str:
    """Render an operator expression in source form, parenthesizing every binary operation."""
    formatter = ExpressionFormatter()
    output: List[str] = []
    pending: List[Piece] = [expr]

    while pending:
        piece = pending.pop()
        if isinstance(piece, str):
            output.append(piece)
        else:
            pending.extend(reversed(piece.accept(formatter)))

    return "".join(output)
