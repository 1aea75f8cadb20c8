"""
The simplifier: bottom-up, fixed-point rewriting of a tree.

For each operator node, simplify_node:

1. replaces a node holding a single operand by that operand;
2. simplifies every operator operand, putting replacements back with
   replace_operand (which re-merges same-operator children) and
   restarting the node;
3. cancels common factors across a division (symmetrical_scan);
4. factors a sum; a factored sum is returned as is, folding waits for
   the next visit;
5. folds adjacent operand pairs with the arithmetic rules.

simplify() repeats whole-tree passes until one pass neither replaces
the root nor changes its structure.

    simplify(parse_node("x + x"))           # => 2*x
    simplify(parse_node("(2*x)/(2*x)"))     # => 1

    result, trace = simplify(parse_node("5-(-2)"), trace=True)
    trace.rules_applied()   # => ['constant-fold', 'constant-fold']

The tree is rewritten in place where possible; always use the returned
node, since the root itself may be replaced.
"""

import logging
from typing import Optional, Tuple, Union

from .arithmetic import RULES, describe, note_divisor, perform_op
from .bounds import VariableBounds
from .errors import RewriteLimitExceeded
from .factorization import find_common_factor, factorize
from .node import Node
from .symmetry import symmetrical_scan
from .tokens import Operator
from .trace import RewriteTrace

logger = logging.getLogger(__name__)

MAX_PASSES = 1000


def simplify_node(node: Node, bounds: VariableBounds, trace: Optional[RewriteTrace] = None,
                  max_passes: int = MAX_PASSES) -> Node:
    """
    Simplify one subtree. Returns the node, or the node that replaces it.

    Raises:
        DivisionByZero, Overflow, UndefinedOperation: from constant folding
        RewriteLimitExceeded: the node keeps changing for max_passes rounds
    """
    for _ in range(max_passes):
        if node.is_leaf:
            return node

        if len(node.operands) == 1:
            only = node.children()[0]
            if trace is not None:
                trace.record('flatten', str(node), str(only))
            node = only
            continue

        restart = False
        for pos, child in node.items():
            if not child.is_operator:
                continue
            replacement = simplify_node(child, bounds, trace, max_passes)
            if replacement is not child:
                if trace is not None and node.orderless and replacement.is_op(node.op):
                    trace.record('merge', str(replacement), str(node))
                node.replace_operand(pos, replacement)
                restart = True
                break
        if restart:
            continue

        if node.is_op(Operator.DIVIDE):
            note_divisor(node.right, bounds)
            if symmetrical_scan(node, trace):
                continue

        if node.is_op(Operator.ADD):
            factored = factorize(node)
            if factored is not None:
                if trace is not None:
                    trace.record('factor', str(node), str(factored))
                return factored

        return perform_op(node, bounds, trace)

    raise RewriteLimitExceeded(f"node did not settle after {max_passes} rounds: {node}")


def simplify(node: Node, bounds: Optional[VariableBounds] = None, trace: bool = False,
             max_passes: int = MAX_PASSES,
             check_measure: bool = False) -> Union[Node, Tuple[Node, RewriteTrace]]:
    """
    Simplify a tree to a fixed point.

    Args:
        node: Tree to simplify; rewritten in place
        bounds: Receives variable bounds learned while simplifying
        trace: If True, return (result, trace) instead of just result
        max_passes: Upper bound on whole-tree passes
        check_measure: If True, verify the result has no pending rewrites

    Returns:
        Simplified tree, or (tree, RewriteTrace) if trace=True

    Raises:
        DivisionByZero: division by the constant zero
        Overflow: a constant power is not representable
        RewriteLimitExceeded: no fixed point within max_passes
    """
    if bounds is None:
        bounds = VariableBounds()
    rewrite_trace = RewriteTrace(str(node)) if trace else None

    for passes in range(1, max_passes + 1):
        key = node.structural_key()
        result = simplify_node(node, bounds, rewrite_trace, max_passes)
        if result is node and result.structural_key() == key:
            break
        node = result
    else:
        raise RewriteLimitExceeded(f"no fixed point after {max_passes} passes")

    logger.debug(f"simplified to {node} in {passes} passes")

    if check_measure:
        count, pending = measure(node)
        if pending:
            raise RewriteLimitExceeded(
                f"{node} still has {pending} pending rewrites after {passes} passes")

    if trace:
        rewrite_trace.final = str(node)
        return node, rewrite_trace
    return node


# ============================================================
# Termination measure
# ============================================================

def _pending(node: Node) -> int:
    if node.is_leaf:
        return 0
    total = sum(_pending(child) for child in node.operands.inserted())
    if len(node.operands) == 1:
        return total + 1
    if node.is_op(Operator.ADD) and find_common_factor(node.children()) is not None:
        return total + 1
    if node.is_op(Operator.DIVIDE):
        left, right = node.left, node.right
        if (not (left.is_constant and right.is_constant) and not right.is_zero()
                and left != right and find_common_factor([left, right]) is not None):
            total += 1
    rule = RULES.get(node.op)
    if rule is None:
        return total
    scratch = VariableBounds()
    children = node.children()
    for a, b in zip(children, children[1:]):
        if rule(describe(a, b), a, b, scratch) is not None:
            total += 1
    return total


def measure(node: Node) -> Tuple[int, int]:
    """
    Termination measure of a tree: (node count, pending rewrites).

    Pending rewrites counts single-operand nodes, factorable sums,
    cancellable divisions and adjacent operand pairs some rule would
    rewrite. It is zero exactly when simplify() would leave the tree
    unchanged.

    Raises:
        DivisionByZero, Overflow: a pending constant fold is itself invalid
    """
    return node.count(), _pending(node)
