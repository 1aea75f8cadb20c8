"""
Expression: a root node plus the bounds learned about its variables.

    expr = Expression.parse("x*y/y")
    expr.simplify()
    str(expr)              # => "x"
    str(expr.bounds)       # => "y ≠ 0"

add_op applies an operator to the whole expression, the primitive that
equation solving builds on:

    lhs = Expression.parse("x - 3")
    lhs.add_op(Operator.ADD, "3").simplify()
    str(lhs)               # => "x"
"""

from typing import Dict, List, Tuple, Union

from .bounds import VariableBounds
from .function import as_node
from .node import Node
from .parser import parse_node
from .pattern import Bindings, _NoMatch, like
from .render import to_latex, to_text
from .simplify import MAX_PASSES, simplify
from .tokens import Operator, Token
from .trace import RewriteTrace


class Expression:
    """An expression tree with its variable bounds."""

    __slots__ = ('root', 'bounds')

    def __init__(self, root: Node, bounds: VariableBounds = None):
        self.root = root
        self.bounds = bounds if bounds is not None else VariableBounds()

    @classmethod
    def parse(cls, text: str) -> 'Expression':
        return cls(parse_node(text))

    def simplify(self, trace: bool = False,
                 max_passes: int = MAX_PASSES) -> Union['Expression', Tuple['Expression', RewriteTrace]]:
        """Simplify in place. Returns self, or (self, trace) if trace=True."""
        if trace:
            self.root, rewrite_trace = simplify(self.root, self.bounds, trace=True,
                                                max_passes=max_passes)
            return self, rewrite_trace
        self.root = simplify(self.root, self.bounds, max_passes=max_passes)
        return self

    def copy(self) -> 'Expression':
        copied = Expression(self.root.copy())
        for name, bounds in self.bounds.items():
            for bound in bounds:
                copied.bounds.add(name, bound)
        return copied

    def add_op(self, op: Operator, operand) -> 'Expression':
        """Replace the expression e by (e op operand). Returns self."""
        self.root = Node.operator(op, self.root, as_node(operand))
        return self

    def find(self, token: Token) -> List[Node]:
        return self.root.find(token)

    def variables(self) -> List[str]:
        return self.root.variables()

    def postfix(self) -> Tuple[List[Token], Dict[str, int]]:
        return self.root.postfix()

    def like(self, template: str) -> Union[Bindings, _NoMatch]:
        return like(self.root, template)

    def to_text(self) -> str:
        return to_text(self.root)

    def to_latex(self) -> str:
        return to_latex(self.root)

    def __eq__(self, other) -> bool:
        if isinstance(other, Expression):
            return self.root == other.root
        if isinstance(other, Node):
            return self.root == other
        return NotImplemented

    __hash__ = None

    def __str__(self) -> str:
        return to_text(self.root)

    def __repr__(self) -> str:
        return f"Expression({to_text(self.root)!r})"
