"""
Rendering of expression trees as plain text and LaTeX.

Operands are written in display order (see Node.display_order) and
parenthesised only where precedence requires it:

    to_text(parse_node("(a+b)*c"))     # => "c*(a + b)"
    to_text(parse_node("a-(b-c)"))     # => "a - (b - c)"
    to_latex(parse_node("x^2/(x+1)"))  # => "\\frac{x^{2}}{x + 1}"

Negative constants are parenthesised wherever a leading minus would
be read as an operator, so the text parses back to the same value.
"""

from .node import Node
from .number import format_decimal
from .tokens import Operator, Token

_TEXT_SEPARATORS = {
    Operator.ADD: " + ",
    Operator.SUBTRACT: " - ",
    Operator.MULTIPLY: "*",
    Operator.DIVIDE: "/",
    Operator.POW: "^",
    Operator.ROOT: " root ",
}

_LATEX_SEPARATORS = {
    Operator.ADD: " + ",
    Operator.SUBTRACT: " - ",
    Operator.MULTIPLY: " \\cdot ",
}


def format_token(token: Token) -> str:
    """Text of a single token."""
    if token.is_constant:
        return format_decimal(token.value)
    if token.is_variable:
        return token.value
    return token.value.symbol


def _needs_parens(child: Node, parent: Node, index: int) -> bool:
    if not child.is_operator:
        return False
    if len(child.operands) < 2:
        return False
    child_prec = child.op.info().precedence
    parent_prec = parent.op.info().precedence
    if child_prec < parent_prec:
        return True
    if child_prec == parent_prec and index > 0:
        # a/b after another factor would regroup as (x*a)/b
        return not parent.orderless or child.is_op(Operator.DIVIDE)
    return False


def _wrap_sign(text: str, parent: Node, index: int) -> str:
    if text.startswith("-") and (index > 0 or parent.is_op(Operator.POW)):
        return f"({text})"
    return text


def to_text(node: Node) -> str:
    """Plain infix text with minimal parentheses."""
    if node.is_leaf:
        return format_token(node.token)

    parts = []
    for index, child in enumerate(node.display_order()):
        text = to_text(child)
        if _needs_parens(child, node, index):
            text = f"({text})"
        else:
            text = _wrap_sign(text, node, index)
        parts.append(text)
    return _TEXT_SEPARATORS[node.op].join(parts)


def to_latex(node: Node) -> str:
    """
    LaTeX markup: products use \\cdot, quotients \\frac, powers ^{}.

    Example:
        to_latex(parse_node("2*x^2/3"))   # => "\\frac{2 \\cdot x^{2}}{3}"
    """
    if node.is_leaf:
        text = format_token(node.token)
        if node.is_variable and text == 'pi':
            return "\\pi"
        return text

    children = node.display_order()
    op = node.op

    if op is Operator.DIVIDE and len(children) == 2:
        return f"\\frac{{{to_latex(children[0])}}}{{{to_latex(children[1])}}}"

    if op is Operator.POW and len(children) == 2:
        base = to_latex(children[0])
        if children[0].is_operator or base.startswith("-"):
            base = f"\\left({base}\\right)"
        return f"{base}^{{{to_latex(children[1])}}}"

    if op is Operator.ROOT and len(children) == 2:
        return f"\\sqrt[{to_latex(children[1])}]{{{to_latex(children[0])}}}"

    parts = []
    for index, child in enumerate(children):
        text = to_latex(child)
        if (_needs_parens(child, node, index)
                and not child.is_op(Operator.DIVIDE)
                and not child.is_op(Operator.POW)):
            text = f"\\left({text}\\right)"
        elif text.startswith("-") and index > 0:
            text = f"\\left({text}\\right)"
        parts.append(text)
    return _LATEX_SEPARATORS[op].join(parts)
