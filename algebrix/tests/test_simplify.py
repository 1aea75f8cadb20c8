"""Tests for the fixed-point simplifier."""

import pytest

from algebrix import (
    DivisionByZero,
    Node,
    Operator,
    Overflow,
    RewriteLimitExceeded,
    UndefinedOperation,
    VariableBounds,
    measure,
    parse_node,
    simplify,
)


def simplified(text):
    return str(simplify(parse_node(text)))


class TestConstantFolding:
    """Constant subtrees reduce to a single constant."""

    @pytest.mark.parametrize("text,expected", [
        ("1 + 2 + 3", "6"),
        ("2 + 2^2", "6"),
        ("2 + 2^3", "10"),
        ("5 - (-2)", "7"),
        ("-(-2)", "2"),
        ("1/4", "0.25"),
        ("(2 + 3)*(4 - 1)", "15"),
    ])
    def test_fold(self, text, expected):
        assert simplified(text) == expected

    def test_fold_yields_constant_node(self):
        assert simplify(parse_node("2*3 + 4")).is_constant

    def test_root(self):
        tree = Node.operator(Operator.ROOT, Node.constant(4), Node.constant(2))
        assert simplify(tree).value == 2


class TestIdentities:
    """Identity and annihilator elimination."""

    @pytest.mark.parametrize("text,expected", [
        ("0 + x", "x"),
        ("x + 0", "x"),
        ("1*x", "x"),
        ("0*x", "0"),
        ("x - 0", "x"),
        ("x/1", "x"),
        ("x^0", "1"),
        ("x^1", "x"),
        ("x/x", "1"),
        ("x - x", "0"),
    ])
    def test_identity(self, text, expected):
        assert simplified(text) == expected


class TestCombining:
    """Equal operands combine and like terms collect."""

    def test_self_addition(self):
        assert simplified("x + x") == "2*x"

    def test_like_terms(self):
        assert simplified("2*x + x") == "3*x"
        assert simplified("2*x + 4*x") == "6*x"

    def test_self_multiplication(self):
        assert simplified("x*x") == "x^2"

    def test_cancellation(self):
        assert simplified("x + 5 - 5") == "x"

    def test_double_negation(self):
        assert simplified("-(-x)") == "x"

    def test_repeated_operand_in_sum(self):
        assert simplified("a + b + a") == "2*a + b"

    def test_factor_then_fold(self):
        """Factoring and folding agree on equal inputs."""
        assert simplify(parse_node("2*x + 4*x")) == simplify(parse_node("2*x*(1 + 2)"))


class TestFactoring:
    """Sums with a common factor are factored."""

    def test_constant_factor(self):
        assert simplified("2*x + 4") == "2*(x + 2)"

    def test_fractional_constant_factor(self):
        result = simplify(parse_node("0.5*x + 4"))
        assert result == simplify(parse_node("0.5*(x + 8)"))
        assert result == parse_node("0.5*(x + 8)")

    def test_variable_factor(self):
        result = simplify(parse_node("x^2 + x^3"))
        assert result == parse_node("x^2*(1 + x)")


class TestDivision:
    """Cancellation across a division."""

    def test_identical_sides(self):
        assert simplified("(2*x)/(2*x)") == "1"

    def test_constant_cancels(self):
        assert simplified("2*x/2") == "x"

    def test_power_cancels(self):
        assert simplified("(x^2)/x") == "x"

    def test_coefficients_and_powers(self):
        assert simplified("(6*x^2)/(3*x)") == "2*x"

    def test_cancelled_variable_is_bounded(self):
        bounds = VariableBounds()
        result = simplify(parse_node("x*y/y"), bounds)
        assert str(result) == "x"
        assert str(bounds) == "y ≠ 0"


class TestCanonicalForm:
    """Results are flat and stable."""

    @pytest.mark.parametrize("text", [
        "x + x", "2*x + 4", "x*(y + y)", "x + 5 - 5", "(x^2)/x",
        "a + b + a", "x*y*x", "2*x^2 + 4*x", "(x + 1)*(x + 1)", "0.5*x + 4",
    ])
    def test_idempotent(self, text):
        once = simplify(parse_node(text))
        twice = simplify(once.copy())
        assert twice == once

    @pytest.mark.parametrize("text", ["x*(y + y)", "(a + a) + (b + b)", "2*(3*x)"])
    def test_no_nested_orderless(self, text):
        result = simplify(parse_node(text))
        for node in result.walk():
            if node.orderless:
                assert not any(child.is_op(node.op) for child in node.children())

    @pytest.mark.parametrize("text", ["x + x", "2*x + 4", "x*y/y", "a + b + a", "x - y"])
    def test_nothing_pending(self, text):
        _, pending = measure(simplify(parse_node(text)))
        assert pending == 0

    def test_pending_before(self):
        count, pending = measure(parse_node("x + x"))
        assert count == 3
        assert pending > 0

    def test_check_measure(self):
        result = simplify(parse_node("2*x + x"), check_measure=True)
        assert str(result) == "3*x"

    def test_root_may_be_replaced(self):
        tree = parse_node("x + 0")
        result = simplify(tree)
        assert result is not tree
        assert result == Node.variable("x")

    def test_leaf_unchanged(self):
        leaf = Node.variable("x")
        assert simplify(leaf) is leaf


class TestErrors:
    """Errors raised while simplifying."""

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZero):
            simplify(parse_node("x/0"))

    def test_division_by_folded_zero(self):
        with pytest.raises(DivisionByZero):
            simplify(parse_node("x/(2 - 2)"))

    def test_overflow(self):
        with pytest.raises(Overflow):
            simplify(parse_node("2^1000"))

    def test_undefined(self):
        with pytest.raises(UndefinedOperation):
            simplify(parse_node("(-8)^0.5"))

    def test_pass_limit(self):
        with pytest.raises(RewriteLimitExceeded):
            simplify(parse_node("x + x"), max_passes=1)


class TestTrace:
    """Rewrite traces from simplify(trace=True)."""

    def test_returns_pair(self):
        result, trace = simplify(parse_node("5 - (-2)"), trace=True)
        assert str(result) == "7"
        assert trace.rules_applied() == ["constant-fold", "constant-fold"]
        assert trace.initial == "5 - (0 - 2)"
        assert trace.final == "7"

    def test_factor_and_fold(self):
        _, trace = simplify(parse_node("x + x"), trace=True)
        assert trace.rules_applied() == ["factor", "constant-fold"]

    def test_merge_recorded(self):
        result, trace = simplify(parse_node("x*(y + y)"), trace=True)
        assert str(result) == "2*x*y"
        assert trace.rules_applied() == ["factor", "merge", "constant-fold"]

    def test_nothing_to_do(self):
        result, trace = simplify(parse_node("x + y"), trace=True)
        assert not trace
        assert trace.final == "x + y"
