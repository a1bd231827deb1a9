"""
Test suite for Wu syntax tree nodes.

Tests cover:
- Value equality including positions
- Immutability and sharing of sub-expressions
- Ordering of statement sequences under construction and copying
- Traversal and visitor dispatch

Author: xwest
"""

import copy
import dataclasses
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from wu.lexer.tokens import SourceLocation
from wu.parser.ast_nodes import (
    ASTVisitor, Array, Assignment, Binary, Block, Bool, Break, Call, Cast,
    Char, ElseClause, Empty, EOF, Expression, ExpressionKind,
    ExpressionStatement, Extern, FieldInit, Float, Function, Identifier, If,
    Implement, Import, Index, Initialization, Int, Module, Neg, Param, Return,
    Skip, Statement, StatementKind, Str, Struct, StructField, TypeRef, Unwrap,
    Variable, While, walk,
)
from wu.parser.operators import Operator
from wu.parser.printer import TreePrinter


def loc(line: int, column: int = 1) -> SourceLocation:
    return SourceLocation("main.wu", line, column, 0)


def int_expr(value: int, line: int = 1, column: int = 1) -> Expression:
    return Expression(Int(value), loc(line, column))


def stmt(expr: Expression) -> Statement:
    return Statement(ExpressionStatement(expr), expr.pos)


INT = TypeRef("int")


class TestEquality(unittest.TestCase):

    def test_identical_nodes_are_equal(self):
        a = Expression(Binary(int_expr(1), Operator.ADD, int_expr(2, column=5)), loc(1, 3))
        b = Expression(Binary(int_expr(1), Operator.ADD, int_expr(2, column=5)), loc(1, 3))
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))

    def test_position_change_breaks_equality(self):
        a = Expression(Identifier("x"), loc(1, 1))
        b = Expression(Identifier("x"), loc(1, 2))
        self.assertNotEqual(a, b)

        s1 = Statement(Break(), loc(3))
        s2 = Statement(Break(), loc(4))
        self.assertNotEqual(s1, s2)

    def test_swapped_operands_are_not_equal(self):
        one, two = int_expr(1), int_expr(2)
        a = Expression(Binary(one, Operator.ADD, two), loc(1))
        b = Expression(Binary(two, Operator.ADD, one), loc(1))
        self.assertNotEqual(a, b)

    def test_distinct_variants_with_same_value_differ(self):
        self.assertNotEqual(Expression(Int(1), loc(1)), Expression(Float(1.0), loc(1)))
        self.assertNotEqual(Expression(Unwrap(int_expr(1)), loc(1)), Expression(Neg(int_expr(1)), loc(1)))
        self.assertNotEqual(Expression(EOF(), loc(1)), Expression(Empty(), loc(1)))

    def test_deep_trees_compare_without_recursion_limit(self):
        def chain(last: int) -> Expression:
            expr = int_expr(0)
            for i in range(1, 1500):
                expr = Expression(Binary(expr, Operator.ADD, int_expr(i if i < 1499 else last)), loc(1, i))
            return expr

        self.assertEqual(chain(1499), chain(1499))
        self.assertNotEqual(chain(1499), chain(0))

    def test_statement_and_expression_never_equal(self):
        expr = int_expr(1)
        self.assertNotEqual(stmt(expr), expr)


class TestImmutability(unittest.TestCase):

    def test_nodes_are_frozen(self):
        expr = int_expr(1)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            expr.pos = loc(2)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            expr.node.value = 2

    def test_binary_does_not_mutate_operands(self):
        left = Expression(Neg(int_expr(1)), loc(1))
        right = int_expr(2, column=5)
        left_before = copy.deepcopy(left)
        right_before = copy.deepcopy(right)

        first = Expression(Binary(left, Operator.MUL, right), loc(1, 3))
        second = Expression(Binary(right, Operator.SUB, left), loc(2, 3))

        self.assertEqual(left, left_before)
        self.assertEqual(right, right_before)
        # Both parents share the same children
        self.assertIs(first.node.left, second.node.right)
        self.assertIs(first.node.right, second.node.left)

    def test_sequences_are_stored_as_tuples(self):
        params = [Param("a", INT)]
        fn = Function(params, INT, Expression(Block([]), loc(1)), ["pure"])
        params.append(Param("b", INT))

        self.assertEqual(fn.params, (Param("a", INT),))
        self.assertEqual(fn.attributes, ("pure",))
        self.assertIsInstance(Call(int_expr(1), [int_expr(2)]).args, tuple)
        self.assertIsInstance(Import("std/io", ["print"]).names, tuple)


class TestBlockOrdering(unittest.TestCase):

    def setUp(self):
        self.statements = [stmt(int_expr(i, line=i)) for i in range(1, 6)]
        self.block = Expression(Block(self.statements), loc(1))

    def test_construction_preserves_order(self):
        self.assertEqual(list(self.block.node.statements), self.statements)

    def test_source_list_changes_do_not_leak(self):
        self.statements.reverse()
        values = [s.node.expression.node.value for s in self.block.node.statements]
        self.assertEqual(values, [1, 2, 3, 4, 5])

    def test_copies_preserve_order(self):
        for clone in (copy.copy(self.block), copy.deepcopy(self.block)):
            self.assertEqual(clone, self.block)
            values = [s.node.expression.node.value for s in clone.node.statements]
            self.assertEqual(values, [1, 2, 3, 4, 5])


class TestIf(unittest.TestCase):

    def test_no_clauses_stores_none(self):
        node = If(Expression(Bool(True), loc(1)), Expression(Block(), loc(1)))
        self.assertIsNone(node.clauses)

    def test_empty_clause_list_stores_none(self):
        node = If(Expression(Bool(True), loc(1)), Expression(Block(), loc(1)), [])
        self.assertIsNone(node.clauses)

    def test_clauses_keep_order(self):
        clauses = [
            ElseClause(Expression(Identifier("a"), loc(2)), Expression(Block(), loc(2)), loc(2)),
            ElseClause(Expression(Identifier("b"), loc(3)), Expression(Block(), loc(3)), loc(3)),
            ElseClause(None, Expression(Block(), loc(4)), loc(4)),
        ]
        node = If(Expression(Identifier("c"), loc(1)), Expression(Block(), loc(1)), clauses)
        self.assertEqual(node.clauses, tuple(clauses))

        names = [c.node.name for c in node.children() if c.kind is ExpressionKind.IDENTIFIER]
        self.assertEqual(names, ["c", "a", "b"])


class TestConstruction(unittest.TestCase):

    def test_sentinels_carry_positions(self):
        eof = Expression(EOF(), loc(9, 1))
        empty = Expression(Empty(), loc(2, 4))
        self.assertEqual(eof.pos, loc(9, 1))
        self.assertEqual(empty.kind, ExpressionKind.EMPTY)
        self.assertEqual(str(eof), "EOF@main.wu:9:1")

    def test_statement_variants(self):
        target = Expression(Identifier("x"), loc(1))
        cases = {
            StatementKind.EXPRESSION_STATEMENT: ExpressionStatement(target),
            StatementKind.VARIABLE: Variable(INT, "x"),
            StatementKind.ASSIGNMENT: Assignment(target, int_expr(1)),
            StatementKind.RETURN: Return(),
            StatementKind.IMPORT: Import("std/math", ["sqrt", "pi"]),
            StatementKind.IMPLEMENT: Implement(target, ["Show"], Expression(Block(), loc(1))),
            StatementKind.BREAK: Break(),
            StatementKind.SKIP: Skip(),
        }
        for kind, node in cases.items():
            with self.subTest(kind=kind):
                self.assertEqual(Statement(node, loc(1)).kind, kind)

        self.assertIsNone(Variable(INT, "x").value)
        self.assertIsNone(Return().value)

    def test_struct_accepts_duplicate_fields(self):
        node = Struct("Point", [StructField("x", INT), StructField("x", INT)], ["packed"])
        self.assertEqual(len(node.fields), 2)

    def test_type_ref_rendering(self):
        self.assertEqual(str(TypeRef("array", [INT])), "array[int]")
        self.assertEqual(str(INT), "int")

    def test_nodes_are_hashable(self):
        nodes = {int_expr(1), int_expr(1), int_expr(2)}
        self.assertEqual(len(nodes), 2)


class TestTraversal(unittest.TestCase):

    def test_walk_is_preorder(self):
        body = Expression(Block([
            Statement(Variable(INT, "y", Expression(Identifier("a"), loc(2))), loc(2)),
            Statement(Return(Expression(Identifier("y"), loc(3))), loc(3)),
        ]), loc(1, 20))
        fn = Expression(Function([Param("a", INT)], INT, body), loc(1))

        kinds = [node.kind for node in walk(fn)]
        self.assertEqual(kinds, [
            ExpressionKind.FUNCTION,
            ExpressionKind.BLOCK,
            StatementKind.VARIABLE,
            ExpressionKind.IDENTIFIER,
            StatementKind.RETURN,
            ExpressionKind.IDENTIFIER,
        ])

    def test_initialization_children(self):
        init = Initialization(
            Expression(Identifier("Point"), loc(1)),
            [FieldInit("x", int_expr(1)), FieldInit("y", int_expr(2))],
        )
        values = [child.node for child in init.children()]
        self.assertEqual(values, [Identifier("Point"), Int(1), Int(2)])

    def test_leaf_nodes_have_no_children(self):
        for node in (Int(1), Str("s"), Char("c"), Bool(False), Extern(INT, "c_abs"),
                     Struct("S"), Break(), Skip(), EOF(), Empty()):
            self.assertEqual(node.children(), ())

    def test_every_kind_visits(self):
        x = Expression(Identifier("x"), loc(1))
        block = Expression(Block(), loc(1))
        expressions = [
            Int(1), Float(1.5), Str("s"), Char("c"), Bool(True), Identifier("x"),
            Unwrap(x), Neg(x), Binary(x, Operator.ADD, x), Block(), Cast(x, INT),
            Array([x]), Index(x, x), Function([], INT, block), Call(x, []),
            If(x, block), Module(block), While(x, block), Struct("S"),
            Initialization(x, []), Extern(INT), EOF(), Empty(),
        ]
        self.assertEqual({node.kind for node in expressions}, set(ExpressionKind))

        printer = TreePrinter()
        for node in expressions:
            with self.subTest(kind=node.kind):
                entry = Expression(node, loc(1)).accept(printer)
                self.assertTrue(entry.header.startswith(node.kind.value))


class TestVisitor(unittest.TestCase):

    def test_visitor_missing_a_handler_is_abstract(self):
        handlers = {
            name: (lambda self, node: None)
            for name in ASTVisitor.__abstractmethods__
            if name != "visit_while"
        }
        Partial = type(ASTVisitor)("Partial", (ASTVisitor,), handlers)
        with self.assertRaises(TypeError):
            Partial()

    def test_complete_visitor_dispatches_by_kind(self):
        handlers = {
            name: (lambda self, node, name=name: name)
            for name in ASTVisitor.__abstractmethods__
        }
        Complete = type(ASTVisitor)("Complete", (ASTVisitor,), handlers)
        visitor = Complete()

        self.assertEqual(visitor.visit(Statement(Skip(), loc(1))), "visit_skip")
        self.assertEqual(visitor.visit(Expression(While(int_expr(1), int_expr(2)), loc(1))), "visit_while")
        self.assertEqual(
            visitor.visit(Statement(ExpressionStatement(int_expr(1)), loc(1))),
            "visit_expression_statement",
        )


if __name__ == "__main__":
    unittest.main()
