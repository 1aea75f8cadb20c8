"""Tests for expression tree nodes."""

import pytest

from algebrix import Node, Operator, Token, parse_node


def x():
    return Node.variable("x")


class TestConstruction:
    """Tests for building nodes."""

    def test_leaves(self):
        assert Node.constant(2).is_constant
        assert Node.variable("x").is_variable
        assert Node.constant(2).is_leaf
        assert not Node.operator(Operator.ADD, x(), x()).is_leaf

    def test_accessors(self):
        node = Node.operator(Operator.SUBTRACT, Node.constant(5), x())
        assert node.op is Operator.SUBTRACT
        assert node.left.value == 5
        assert node.right.name == "x"
        assert Node.constant(5).op is None

    def test_zero_and_one(self):
        assert Node.constant(0).is_zero()
        assert Node.constant("1.0").is_one()
        assert not x().is_zero()


class TestCanonicalMerge:
    """Adding a same-operator child to an orderless parent splices it."""

    def test_merge_on_construction(self):
        inner = Node.operator(Operator.ADD, Node.variable("a"), Node.variable("b"))
        outer = Node.operator(Operator.ADD, inner, Node.constant(1))
        assert len(outer.operands) == 3
        assert not any(child.is_operator for child in outer.children())

    def test_repeated_operand_stays_separate(self):
        """a + b + a keeps all three terms at one level."""
        tree = parse_node("a + b + a")
        assert len(tree.operands) == 3
        assert [c.name for c in tree.children()] == ["a", "a", "b"]

    def test_no_merge_for_different_operator(self):
        inner = Node.operator(Operator.MULTIPLY, Node.variable("a"), Node.variable("b"))
        outer = Node.operator(Operator.ADD, inner, Node.constant(1))
        assert len(outer.operands) == 2

    def test_no_merge_for_subtract(self):
        inner = Node.operator(Operator.SUBTRACT, Node.variable("a"), Node.variable("b"))
        outer = Node.operator(Operator.SUBTRACT, inner, Node.constant(1))
        assert len(outer.operands) == 2

    def test_replace_operand_merges(self):
        node = Node.operator(Operator.MULTIPLY, Node.constant(2), x())
        pos = node.positions()[1]
        node.replace_operand(pos, Node.operator(Operator.MULTIPLY, Node.variable("a"), Node.constant(3)))
        assert len(node.operands) == 3
        assert [str(c) for c in node.children()] == ["2", "3", "a"]

    def test_self_operand_rejected(self):
        node = Node.operator(Operator.ADD, x(), Node.constant(1))
        with pytest.raises(ValueError):
            node.add_operand(node)

    def test_operands_result(self):
        node = Node.operator(Operator.ADD, Node.constant(2), Node.constant(3), x())
        first, second = node.positions()[:2]
        node.operands_result(first, second, Node.constant(5))
        assert [str(c) for c in node.children()] == ["5", "x"]


class TestSharing:
    """Nodes are shared by reference."""

    def test_mutation_visible_through_both_parents(self):
        shared = Node.operator(Operator.ADD, x(), Node.constant(1))
        left = Node.operator(Operator.MULTIPLY, Node.constant(2), shared)
        right = Node.operator(Operator.POW, shared, Node.constant(2))
        shared.add_operand(Node.variable("y"))
        assert str(left) == "2*(x + y + 1)"
        assert str(right) == "(x + y + 1)^2"

    def test_copy_is_independent(self):
        tree = parse_node("2*(x + 1)")
        clone = tree.copy()
        assert clone == tree
        (inner,) = clone.operands.operators()
        inner.add_operand(Node.variable("y"))
        assert clone != tree
        assert str(tree) == "2*(x + 1)"


class TestEquality:
    """Structural equality."""

    def test_orderless_ignores_order(self):
        assert parse_node("x + 2") == parse_node("2 + x")
        assert parse_node("a*b*c") == parse_node("c*a*b")

    def test_ordered_respects_order(self):
        assert parse_node("x - 2") != parse_node("2 - x")
        assert parse_node("x ^ 2") != parse_node("2 ^ x")

    def test_numeric_constants(self):
        assert Node.constant("2.0") == Node.constant(2)

    def test_nested(self):
        assert parse_node("(x + 1)*(y + 2)") == parse_node("(2 + y)*(1 + x)")
        assert parse_node("(x + 1)*(y + 2)") != parse_node("(x + 2)*(y + 1)")

    def test_structural_key(self):
        assert parse_node("x + 2").structural_key() == parse_node("2 + x").structural_key()

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(x())


class TestTraversal:
    """Tests for count, find, variables and postfix."""

    def test_count(self):
        assert parse_node("2*x + 1").count() == 5

    def test_find(self):
        tree = parse_node("x*x + y")
        assert len(tree.find(Token.variable("x"))) == 2
        assert tree.find(Token.variable("z")) == []

    def test_variables(self):
        assert parse_node("y*x + x").variables() == ["x", "y"]

    def test_postfix(self):
        tokens, slots = parse_node("x^2 + 1").postfix()
        assert [str(t) for t in tokens] == ["1", "x", "2", "^", "+"]
        assert slots == {"x": 0}

    def test_postfix_multi_operand(self):
        """An orderless node with k operands emits k - 1 operator tokens."""
        tokens, slots = parse_node("a + b + c").postfix()
        assert [str(t) for t in tokens] == ["a", "b", "+", "c", "+"]
        assert slots == {"a": 0, "b": 1, "c": 2}


class TestDisplayOrder:
    """Operand order used when rendering."""

    def test_product(self):
        tree = parse_node("(a + b)*x*2")
        assert [str(c) for c in tree.display_order()] == ["2", "x", "a + b"]

    def test_sum(self):
        tree = parse_node("1 + x + x*y")
        assert [str(c) for c in tree.display_order()] == ["x*y", "x", "1"]

    def test_repr(self):
        assert repr(parse_node("x - 1")) == "Node(SUBTRACT: Node(x), Node(1))"
