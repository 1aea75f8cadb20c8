"""
Parser: tokens to a canonical expression tree.

Parsing runs in three steps:

1. insert_unary_zeros: a '+' or '-' that starts the input or follows
   '(' gets a synthetic 0 in front, so "-x" parses as "0 - x".
2. to_postfix: shunting-yard conversion to postfix order. Equal
   precedence pops the stack, so operators associate to the left
   ("2^3^2" is "(2^3)^2").
3. build_tree: postfix to tree. Orderless operators merge children that
   carry the same operator while the tree is being built.

    parse_node("1 + x + 2")
    # => Add node with operands 1, x, 2 (flat, not nested)
"""

from typing import List, Union

from .errors import MissingOperand, MissingOperator, ParenthesesMismatch
from .lexer import tokenize
from .node import Node
from .tokens import Operator, Token


def insert_unary_zeros(tokens: List[Token]) -> List[Token]:
    """Turn unary +/- into binary operators with a 0 left operand."""
    result: List[Token] = []
    previous = None
    for token in tokens:
        if (token.is_operator
                and token.value in (Operator.ADD, Operator.SUBTRACT)
                and (previous is None
                     or (previous.is_operator and previous.value is Operator.LPAREN))):
            result.append(Token.constant(0))
        result.append(token)
        previous = token
    return result


def to_postfix(tokens: List[Token]) -> List[Token]:
    """
    Shunting-yard conversion of infix tokens to postfix order.

    Raises:
        ParenthesesMismatch: on an unmatched ')' or a leftover '('
    """
    output: List[Token] = []
    stack: List[Token] = []

    for token in tokens:
        if not token.is_operator:
            output.append(token)
            continue

        op = token.value
        if op is Operator.LPAREN:
            stack.append(token)
        elif op is Operator.RPAREN:
            while stack and stack[-1].value is not Operator.LPAREN:
                output.append(stack.pop())
            if not stack:
                raise ParenthesesMismatch()
            stack.pop()
        else:
            precedence = op.info().precedence
            while (stack
                   and stack[-1].value is not Operator.LPAREN
                   and precedence <= stack[-1].value.info().precedence):
                output.append(stack.pop())
            stack.append(token)

    while stack:
        token = stack.pop()
        if token.value is Operator.LPAREN:
            raise ParenthesesMismatch()
        output.append(token)

    return output


def build_tree(postfix: List[Token]) -> Node:
    """
    Build a tree from postfix tokens.

    Raises:
        MissingOperand: an operator has too few operands, or there are no tokens
        MissingOperator: operands are left over with no operator joining them
    """
    stack: List[Node] = []
    for token in postfix:
        if not token.is_operator:
            stack.append(Node(token))
            continue
        arity = token.value.info().arity
        if len(stack) < arity:
            raise MissingOperand(token.value.symbol)
        children = stack[-arity:]
        del stack[-arity:]
        stack.append(Node.operator(token.value, *children))

    if not stack:
        raise MissingOperand()
    if len(stack) > 1:
        raise MissingOperator()
    return stack[0]


def parse_node(source: Union[str, List[Token]]) -> Node:
    """
    Parse text (or a token list) into a canonical tree.

    Examples:
        parse_node("2*x + 1")
        parse_node("-(x - 1)")    # => 0 - (x - 1)

    Raises:
        LexError, MissingOperand, MissingOperator, ParenthesesMismatch
    """
    tokens = tokenize(source) if isinstance(source, str) else list(source)
    return build_tree(to_postfix(insert_unary_zeros(tokens)))
