"""Tests for cancellation across a division."""

from algebrix import RewriteTrace, parse_node, symmetrical_scan


class TestSymmetricalScan:
    """Tests for symmetrical_scan."""

    def test_cancels_common_factor(self):
        node = parse_node("(6*x^2)/(3*x)")
        assert symmetrical_scan(node)
        assert str(node.left) == "2*x"
        assert node.right.is_one()

    def test_cancels_constant(self):
        node = parse_node("2*x/2")
        assert symmetrical_scan(node)
        assert str(node) == "x/1"

    def test_modifies_in_place(self):
        node = parse_node("(x*y)/y")
        left_before = node.left
        symmetrical_scan(node)
        assert node.left is not left_before
        assert str(node.left) == "x"

    def test_identical_sides_left_alone(self):
        node = parse_node("(2*x)/(2*x)")
        assert not symmetrical_scan(node)

    def test_constants_left_alone(self):
        assert not symmetrical_scan(parse_node("2/4"))

    def test_zero_divisor_left_alone(self):
        assert not symmetrical_scan(parse_node("x/0"))

    def test_nothing_in_common(self):
        assert not symmetrical_scan(parse_node("x/y"))

    def test_only_divisions(self):
        assert not symmetrical_scan(parse_node("2*x*2"))

    def test_trace(self):
        trace = RewriteTrace()
        symmetrical_scan(parse_node("x^2/x"), trace)
        (step,) = trace.steps
        assert step.rule == "symmetry"
        assert step.before == "x^2/x"
        assert step.after == "x/1"
