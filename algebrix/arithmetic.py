"""
Arithmetic rules: pairwise rewrites of adjacent operands.

Every adjacent pair (a, b) of an operator node is first classified by
describe() and then handed to the operator's rule:

    BOTH_CONSTANTS   a and b are constants      -> fold
    BY_ZERO          one side is the constant 0
    BY_ONE           one side is the constant 1
    EQUAL_OPERAND    a structurally equals b
    NONE             nothing applies

A Description records which side was zero or one; non-commutative
rules only act on a right-hand zero or one (Subtract also handles a
left-hand zero, which is how unary minus reaches it).

    Add        2 + 3 -> 5        x + x -> x*2        x + 0 -> x
    Subtract   x - x -> 0        0 - x -> x*-1       a - b -> a + b*-1
    Multiply   x * x -> x^2      x * 0 -> 0          x * 1 -> x
    Divide     x / x -> 1        x / 1 -> x          x / 0 -> DivisionByZero
    Pow        x ^ 0 -> 1        x ^ 1 -> x

Rules return (result, rule_name) or None when the pair is unresolved.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from . import number
from .bounds import Bound, VariableBounds
from .errors import DivisionByZero
from .node import Node
from .tokens import Operator, Token

logger = logging.getLogger(__name__)


class DescriptionKind(Enum):
    NONE = 'none'
    BOTH_CONSTANTS = 'both-constants'
    BY_ZERO = 'by-zero'
    BY_ONE = 'by-one'
    EQUAL_OPERAND = 'equal-operand'


LEFT = 'left'
RIGHT = 'right'


class Description:
    """Classification of an operand pair."""

    __slots__ = ('kind', 'side', 'other')

    def __init__(self, kind: DescriptionKind, side: Optional[str] = None,
                 other: Optional[Node] = None):
        self.kind = kind
        # side holding the zero/one; other is the operand on the opposite side
        self.side = side
        self.other = other

    def __repr__(self) -> str:
        if self.side:
            return f"Description({self.kind.value}, {self.side})"
        return f"Description({self.kind.value})"


NONE = Description(DescriptionKind.NONE)
BOTH_CONSTANTS = Description(DescriptionKind.BOTH_CONSTANTS)
EQUAL_OPERAND = Description(DescriptionKind.EQUAL_OPERAND)


def describe(a: Node, b: Node) -> Description:
    """Classify the operand pair (a, b)."""
    if a.is_constant and b.is_constant:
        return BOTH_CONSTANTS
    if b.is_zero():
        return Description(DescriptionKind.BY_ZERO, RIGHT, a)
    if a.is_zero():
        return Description(DescriptionKind.BY_ZERO, LEFT, b)
    if b.is_one():
        return Description(DescriptionKind.BY_ONE, RIGHT, a)
    if a.is_one():
        return Description(DescriptionKind.BY_ONE, LEFT, b)
    if a == b:
        return EQUAL_OPERAND
    return NONE


RuleResult = Optional[Tuple[Node, str]]
Rule = Callable[[Description, Node, Node, VariableBounds], RuleResult]


def _negated(node: Node) -> Node:
    return Node.operator(Operator.MULTIPLY, node, Node.constant(number.MINUS_ONE))


def note_divisor(divisor: Node, bounds: VariableBounds) -> None:
    """Record that a variable used as a divisor is not zero."""
    if divisor.is_variable:
        if bounds.add(divisor.name, Bound.not_zero()):
            logger.debug(f"bound learned: {divisor.name} ≠ 0")


# ============================================================
# Rules per operator
# ============================================================

def add_rule(d: Description, a: Node, b: Node, bounds: VariableBounds) -> RuleResult:
    if d.kind is DescriptionKind.BOTH_CONSTANTS:
        return Node.constant(number.add(a.value, b.value)), 'constant-fold'
    if d.kind is DescriptionKind.BY_ZERO:
        return d.other, 'by-zero'
    if d.kind is DescriptionKind.EQUAL_OPERAND:
        return Node.operator(Operator.MULTIPLY, a, Node.constant(number.TWO)), 'equal-operand'
    return None


def subtract_rule(d: Description, a: Node, b: Node, bounds: VariableBounds) -> RuleResult:
    if d.kind is DescriptionKind.BOTH_CONSTANTS:
        return Node.constant(number.subtract(a.value, b.value)), 'constant-fold'
    if d.kind is DescriptionKind.BY_ZERO:
        if d.side == RIGHT:
            return a, 'by-zero'
        return _negated(b), 'negate'
    if d.kind is DescriptionKind.EQUAL_OPERAND:
        return Node.constant(number.ZERO), 'equal-operand'
    return Node.operator(Operator.ADD, a, _negated(b)), 'eliminate-subtract'


def multiply_rule(d: Description, a: Node, b: Node, bounds: VariableBounds) -> RuleResult:
    if d.kind is DescriptionKind.BOTH_CONSTANTS:
        return Node.constant(number.multiply(a.value, b.value)), 'constant-fold'
    if d.kind is DescriptionKind.BY_ZERO:
        return Node.constant(number.ZERO), 'by-zero'
    if d.kind is DescriptionKind.BY_ONE:
        return d.other, 'by-one'
    if d.kind is DescriptionKind.EQUAL_OPERAND:
        return Node.operator(Operator.POW, a, Node.constant(number.TWO)), 'equal-operand'
    return None


def divide_rule(d: Description, a: Node, b: Node, bounds: VariableBounds) -> RuleResult:
    note_divisor(b, bounds)
    if d.kind is DescriptionKind.BOTH_CONSTANTS:
        return Node.constant(number.divide(a.value, b.value)), 'constant-fold'
    if d.kind is DescriptionKind.BY_ZERO and d.side == RIGHT:
        raise DivisionByZero(str(a))
    if d.kind is DescriptionKind.BY_ONE and d.side == RIGHT:
        return a, 'by-one'
    if d.kind is DescriptionKind.EQUAL_OPERAND:
        return Node.constant(number.ONE), 'equal-operand'
    return None


def pow_rule(d: Description, a: Node, b: Node, bounds: VariableBounds) -> RuleResult:
    if d.kind is DescriptionKind.BOTH_CONSTANTS:
        return Node.constant(number.power(a.value, b.value)), 'constant-fold'
    if d.kind is DescriptionKind.BY_ZERO and d.side == RIGHT:
        return Node.constant(number.ONE), 'by-zero'
    if d.kind is DescriptionKind.BY_ONE and d.side == RIGHT:
        return a, 'by-one'
    return None


def root_rule(d: Description, a: Node, b: Node, bounds: VariableBounds) -> RuleResult:
    # a root b is the b-th root of a
    if d.kind is DescriptionKind.BOTH_CONSTANTS:
        exponent = number.divide(number.ONE, b.value)
        return Node.constant(number.power(a.value, exponent)), 'constant-fold'
    if d.kind is DescriptionKind.BY_ONE and d.side == RIGHT:
        return a, 'by-one'
    return None


RULES: Dict[Operator, Rule] = {
    Operator.ADD: add_rule,
    Operator.SUBTRACT: subtract_rule,
    Operator.MULTIPLY: multiply_rule,
    Operator.DIVIDE: divide_rule,
    Operator.POW: pow_rule,
    Operator.ROOT: root_rule,
}


def _pair_text(op: Operator, a: Node, b: Node) -> str:
    from .render import to_text
    pair = Node(Token.operator(op))
    pair.operands.add(a)
    pair.operands.add(b)
    return to_text(pair)


def perform_op(node: Node, bounds: VariableBounds, trace=None) -> Node:
    """
    Apply the node's rule to adjacent operand pairs until none resolves.

    Each resolved pair is replaced by its result, which merges into the
    node when it carries the same orderless operator. Returns the node,
    or its last operand when only one is left.

    Raises:
        DivisionByZero: division by the constant zero
        Overflow, UndefinedOperation: a constant fold is not representable
    """
    rule = RULES.get(node.op)
    if rule is None:
        return node

    index = 0
    while len(node.operands) > 1:
        positions = node.positions()
        if index >= len(positions) - 1:
            break
        first, second = positions[index], positions[index + 1]
        a, b = node.operand(first), node.operand(second)
        outcome = rule(describe(a, b), a, b, bounds)
        if outcome is None:
            index += 1
            continue

        result, name = outcome
        if trace is not None or logger.isEnabledFor(logging.DEBUG):
            before = _pair_text(node.op, a, b)
            after = str(result)
            logger.debug(f"{name}: {before} -> {after}")
            if trace is not None:
                trace.record(name, before, after)
        node.operands_result(first, second, result)
        index = 0

    if len(node.operands) == 1:
        return node.children()[0]
    return node
