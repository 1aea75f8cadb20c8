"""Tests for rewrite traces."""

import json

from algebrix import RewriteStep, RewriteTrace, parse_node, simplify


def traced(text):
    return simplify(parse_node(text), trace=True)[1]


class TestRewriteStep:
    """Tests for RewriteStep."""

    def test_repr(self):
        assert repr(RewriteStep("constant-fold", "2 + 3", "5")) == "constant-fold: 2 + 3 → 5"

    def test_to_dict(self):
        step = RewriteStep("by-one", "x*1", "x")
        assert step.to_dict() == {"rule": "by-one", "before": "x*1", "after": "x"}


class TestRewriteTrace:
    """Tests for RewriteTrace formatting and queries."""

    def test_empty(self):
        trace = RewriteTrace("x")
        assert not trace
        assert len(trace) == 0
        assert trace.format("rules") == "(no rules applied)"
        assert trace.summary() == "No rewriting performed"

    def test_compact(self):
        assert traced("x + x").format("compact") == "x + x --[factor, constant-fold]--> 2*x"

    def test_rules(self):
        assert traced("x + x").format("rules") == "factor -> constant-fold"

    def test_chain(self):
        """The chain shows local rewrites, then the final whole expression."""
        assert traced("x + x").format("chain") == "\n".join([
            "x + x",
            "  --(factor)-->",
            "x*(1 + 1)",
            "  --(constant-fold)-->",
            "2",
            "  = 2*x",
        ])

    def test_verbose(self):
        text = traced("x + x").format()
        assert text.startswith("Initial: x + x")
        assert "  1. factor: x + x → x*(1 + 1)" in text
        assert text.endswith("Final: 2*x")

    def test_counts(self):
        trace = traced("1 + 2 + 3")
        assert trace.rule_counts() == {"constant-fold": 2}
        assert trace.summary() == "2 steps using 1 unique rules. Most used: constant-fold (2x)"

    def test_iteration(self):
        trace = traced("5 - (-2)")
        assert [step.after for step in trace] == ["-2", "7"]

    def test_json_serializable(self):
        data = traced("x - x").to_dict()
        assert json.loads(json.dumps(data)) == data
        assert data["step_count"] == 1
        assert data["final"] == "0"
