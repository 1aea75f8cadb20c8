"""
Rewrite traces recorded by the simplifier.

    result, trace = simplify(parse_node("2 + 3 + x"), trace=True)
    print(trace.format("chain"))
    # x + 2 + 3
    #   --(constant-fold)-->
    # 5
    #   = x + 5

Each step shows the rewritten subtree, not the whole expression.

Rule names used by the simplifier:
    constant-fold, equal-operand, by-zero, by-one, eliminate-subtract,
    negate, factor, symmetry, flatten, merge
"""

from typing import Dict, List, Optional


class RewriteStep:
    """A single local rewrite: the subtree before and after."""

    __slots__ = ('rule', 'before', 'after')

    def __init__(self, rule: str, before: str, after: str):
        self.rule = rule
        self.before = before
        self.after = after

    def __repr__(self) -> str:
        return f"{self.rule}: {self.before} → {self.after}"

    def to_dict(self) -> Dict:
        """Convert step to dictionary for serialization."""
        return {
            "rule": self.rule,
            "before": self.before,
            "after": self.after,
        }


class RewriteTrace:
    """
    A trace of all rewriting steps applied.

    Provides multiple formatting options:
        - Default repr: verbose multi-line format
        - format("compact"): single line showing rule chain
        - format("rules"): just the rule names applied
        - format("chain"): local rewrites as a chain
        - to_dict(): JSON-serializable dictionary
    """

    def __init__(self, initial: Optional[str] = None):
        self.steps: List[RewriteStep] = []
        self.initial: Optional[str] = initial
        self.final: Optional[str] = None

    def record(self, rule: str, before: str, after: str) -> None:
        self.steps.append(RewriteStep(rule, before, after))

    def format(self, style: str = "verbose") -> str:
        """
        Format the trace in different styles.

        Args:
            style: One of "verbose", "compact", "rules", "chain"

        Returns:
            Formatted string representation of the trace.
        """
        if style == "compact":
            rules = ", ".join(self.rules_applied())
            return f"{self.initial} --[{rules}]--> {self.final}"

        elif style == "rules":
            rules = self.rules_applied()
            return " -> ".join(rules) if rules else "(no rules applied)"

        elif style == "chain":
            parts = [self.initial or ""]
            for step in self.steps:
                parts.append(f"  --({step.rule})-->")
                parts.append(step.after)
            if self.steps and self.final != self.steps[-1].after:
                parts.append(f"  = {self.final}")
            return "\n".join(parts)

        return repr(self)

    def __repr__(self) -> str:
        lines = [f"Initial: {self.initial}"]
        for i, step in enumerate(self.steps, 1):
            lines.append(f"  {i}. {step}")
        lines.append(f"Final: {self.final}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def __bool__(self) -> bool:
        """True if any rewriting was done."""
        return len(self.steps) > 0

    def to_dict(self) -> Dict:
        """Convert trace to dictionary for JSON serialization."""
        return {
            "initial": self.initial,
            "final": self.final,
            "steps": [step.to_dict() for step in self.steps],
            "step_count": len(self.steps),
        }

    def rule_counts(self) -> Dict[str, int]:
        """Count how many times each rule was applied."""
        counts: Dict[str, int] = {}
        for step in self.steps:
            counts[step.rule] = counts.get(step.rule, 0) + 1
        return counts

    def rules_applied(self) -> List[str]:
        return [s.rule for s in self.steps]

    def summary(self) -> str:
        """Get a brief summary of the rewriting."""
        if not self.steps:
            return "No rewriting performed"
        counts = self.rule_counts()
        most_used = max(counts.items(), key=lambda x: x[1])
        return (f"{len(self.steps)} steps using {len(counts)} unique rules. "
                f"Most used: {most_used[0]} ({most_used[1]}x)")
