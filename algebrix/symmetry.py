"""
Symmetry cancellation across a division.

The common factor of the dividend and the divisor is divided out of
both sides in place:

    (6*x^2) / (3*x)   ->   (2*x) / 1
    (2*x) / 2         ->   x / 1

Identical sides are left alone; the Divide rule folds them to 1.
"""

import logging

from .factorization import divide_out, find_common_factor
from .node import Node
from .tokens import Operator

logger = logging.getLogger(__name__)


def symmetrical_scan(node: Node, trace=None) -> bool:
    """
    Cancel the common factor of a division's two sides.

    Returns True if the node was changed.
    """
    if not node.is_op(Operator.DIVIDE) or len(node.operands) != 2:
        return False

    left_pos, right_pos = node.operands.positions(canonical=False)
    left, right = node.operand(left_pos), node.operand(right_pos)
    if left.is_constant and right.is_constant:
        return False
    if right.is_zero() or left == right:
        return False

    common = find_common_factor([left, right])
    if common is None:
        return False

    before = str(node)
    coefficient, factors, (left_parts, right_parts) = common
    node.replace_operand(left_pos, divide_out(left_parts, coefficient, factors))
    node.replace_operand(right_pos, divide_out(right_parts, coefficient, factors))
    after = str(node)
    logger.debug(f"symmetry cancelled {before} to {after}")
    if trace is not None:
        trace.record('symmetry', before, after)
    return True
