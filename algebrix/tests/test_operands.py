"""Tests for the operand container."""

import pytest

from algebrix import Node, Operands, Operator, TokenKind


def texts(nodes):
    return [str(n) for n in nodes]


class TestOperands:
    """Tests for Operands bookkeeping."""

    def test_buckets_and_insertion_order(self):
        ops = Operands()
        ops.add(Node.variable("y"))
        ops.add(Node.constant(2))
        ops.add(Node.variable("x"))
        assert texts(ops.canonical()) == ["2", "x", "y"]
        assert texts(ops.inserted()) == ["y", "2", "x"]

    def test_operators_bucket_last(self):
        ops = Operands()
        ops.add(Node.operator(Operator.POW, Node.variable("x"), Node.constant(2)))
        ops.add(Node.variable("a"))
        ops.add(Node.constant(1))
        kinds = [n.kind for n in ops.canonical()]
        assert kinds == [TokenKind.CONSTANT, TokenKind.VARIABLE, TokenKind.OPERATOR]

    def test_equal_variables_keep_insertion_order(self):
        ops = Operands()
        first, second = Node.variable("x"), Node.variable("x")
        ops.add(first)
        ops.add(second)
        variables = ops.variables()
        assert variables[0] is first
        assert variables[1] is second

    def test_positions_are_stable(self):
        ops = Operands()
        a = ops.add(Node.constant(1))
        b = ops.add(Node.constant(2))
        ops.remove(a)
        assert b in ops
        assert a not in ops
        assert str(ops[b]) == "2"
        assert len(ops) == 1

    def test_replace_keeps_insertion_slot(self):
        """A replaced operand moves bucket but keeps its place in insertion order."""
        ops = Operands()
        first = ops.add(Node.constant(1))
        ops.add(Node.variable("x"))
        ops.replace(first, Node.variable("a"))
        assert texts(ops.inserted()) == ["a", "x"]
        assert texts(ops.constants()) == []
        assert texts(ops.variables()) == ["a", "x"]

    def test_replace_returns_old(self):
        ops = Operands()
        pos = ops.add(Node.constant(1))
        old = ops.replace(pos, Node.constant(2))
        assert str(old) == "1"

    def test_remove_missing_position(self):
        ops = Operands()
        with pytest.raises(KeyError):
            ops.remove(7)

    def test_empty_is_falsy(self):
        ops = Operands()
        assert not ops
        ops.add(Node.constant(0))
        assert ops

    def test_items_follow_requested_order(self):
        ops = Operands()
        p = ops.add(Node.variable("b"))
        q = ops.add(Node.constant(3))
        assert [pos for pos, _ in ops.items()] == [q, p]
        assert [pos for pos, _ in ops.items(canonical=False)] == [p, q]
