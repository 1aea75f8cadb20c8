"""
Greatest common factor extraction.

A term is decomposed into a constant coefficient and a list of
(base, exponent) factors:

    decompose(6*x^2*y)  -> (6, [(x, 2), (y, 1)])
    decompose(x)        -> (1, [(x, 1)])
    decompose(5)        -> (5, [])

The common factor of several terms is the largest constant dividing
all their coefficients times every base they all share, raised
to the smallest exponent it appears with. Quotients are computed on the
decomposed form, so no Divide nodes are ever introduced:

    factorize(2*x^2 + 4*x)  -> 2*x*(x + 2)
"""

import logging
import math
from decimal import Decimal
from functools import reduce
from typing import List, Optional, Tuple

from . import number
from .node import Node
from .tokens import Operator

logger = logging.getLogger(__name__)

Factors = List[Tuple[Node, Decimal]]
Decomposed = Tuple[Decimal, Factors]


def _push(factors: Factors, base: Node, exponent: Decimal) -> None:
    for i, (known, power) in enumerate(factors):
        if known == base:
            factors[i] = (known, number.add(power, exponent))
            return
    factors.append((base, exponent))


def _as_power(node: Node) -> Tuple[Node, Decimal]:
    if node.is_op(Operator.POW) and len(node.operands) == 2 and node.right.is_constant:
        return node.left, node.right.value
    return node, number.ONE


def decompose(term: Node) -> Decomposed:
    """Split a term into its constant coefficient and (base, exponent) factors."""
    if term.is_constant:
        return term.value, []

    coefficient = number.ONE
    factors: Factors = []
    parts = term.children() if term.is_op(Operator.MULTIPLY) else [term]
    for part in parts:
        if part.is_constant:
            coefficient = number.multiply(coefficient, part.value)
        else:
            base, exponent = _as_power(part)
            _push(factors, base, exponent)
    return coefficient, factors


def build_term(coefficient: Decimal, factors: Factors) -> Node:
    """Rebuild a term from a coefficient and factors; exponent-0 factors vanish."""
    if coefficient == number.ZERO:
        return Node.constant(number.ZERO)

    parts: List[Node] = []
    for base, exponent in factors:
        if exponent == number.ZERO:
            continue
        if exponent == number.ONE:
            parts.append(base.copy())
        else:
            parts.append(Node.operator(Operator.POW, base.copy(), Node.constant(exponent)))

    if coefficient != number.ONE or not parts:
        parts.insert(0, Node.constant(coefficient))
    if len(parts) == 1:
        return parts[0]
    return Node.operator(Operator.MULTIPLY, *parts)


def divide_out(decomposed: Decomposed, coefficient: Decimal, factors: Factors) -> Node:
    """The quotient of a decomposed term by the factor (coefficient, factors)."""
    term_coefficient, term_factors = decomposed
    quotient = number.divide(term_coefficient, coefficient)
    remaining: Factors = list(term_factors)
    for base, exponent in factors:
        for i, (known, power) in enumerate(remaining):
            if known == base:
                remaining[i] = (known, number.subtract(power, exponent))
                break
    return build_term(quotient, remaining)


def find_common_constant(coefficients: List[Decimal]) -> Decimal:
    """
    Largest d such that every coefficient divided by d is an integer.

    Coefficients are exact decimals, so d is the gcd of their digits taken
    at a common scale:

        find_common_constant([4, 6])       -> 2
        find_common_constant([4, 8, 0.5])  -> 0.5
        find_common_constant([2, 2.5])     -> 0.5

    Returns 1 when any coefficient is zero, or when one was rounded to the
    full scale (1/3 has no exact common divisor with anything).
    """
    if not coefficients or any(c == number.ZERO for c in coefficients):
        return number.ONE
    places = max(number.fraction_digits(c) for c in coefficients)
    if places >= number.SCALE:
        return number.ONE
    gcd = reduce(math.gcd, (abs(number.shifted(c, places)) for c in coefficients))
    common = Decimal(gcd).scaleb(-places)
    if not all(number.divides(common, c) for c in coefficients):
        return number.ONE
    return common


def find_common_variable(factor_lists: List[Factors]) -> Factors:
    """Bases shared by every factor list, each at its smallest positive exponent."""
    if not factor_lists:
        return []
    common: Factors = []
    for base, exponent in factor_lists[0]:
        smallest = exponent
        for factors in factor_lists[1:]:
            match = next((power for known, power in factors if known == base), None)
            if match is None:
                break
            smallest = min(smallest, match)
        else:
            if smallest > number.ZERO:
                common.append((base, smallest))
    return common


def find_common_factor(terms: List[Node]) -> Optional[Tuple[Decimal, Factors, List[Decomposed]]]:
    """
    Common factor of terms, or None when it is trivial.

    Only applies to two or more terms with at least one non-constant term
    and no zero coefficient. Returns (coefficient, factors, decomposed terms).
    """
    if len(terms) < 2 or all(t.is_constant for t in terms):
        return None
    decomposed = [decompose(t) for t in terms]
    if any(coefficient == number.ZERO for coefficient, _ in decomposed):
        return None

    coefficient = find_common_constant([c for c, _ in decomposed])
    factors = find_common_variable([f for _, f in decomposed])
    if coefficient == number.ONE and not factors:
        return None
    return coefficient, factors, decomposed


def factorize(node: Node) -> Optional[Node]:
    """
    Factor a sum as (sum of quotients) * factor.

    Returns the new node, or None when the terms share no nontrivial factor.
    The input node is not modified.
    """
    if not node.is_op(Operator.ADD):
        return None
    common = find_common_factor(node.children())
    if common is None:
        return None

    coefficient, factors, decomposed = common
    quotients = [divide_out(d, coefficient, factors) for d in decomposed]
    factor = build_term(coefficient, factors)
    result = Node.operator(Operator.MULTIPLY, Node.operator(Operator.ADD, *quotients), factor)
    logger.debug(f"factored {node} to {result}")
    return result
