"""
Tokens: the leaves and operators of an expression.

A Token is a closed tagged value of one of three kinds:

    Token.constant(Decimal("2"))   - fixed-scale decimal constant
    Token.variable("x")            - interned variable name
    Token.operator(Operator.ADD)   - operator with static metadata

Operator metadata (arity, precedence, orderless) is a pure lookup
keyed by the operator, see Operator.info().
"""

import sys
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from .number import format_decimal, to_decimal


class OperatorInfo:
    """Static metadata of an operator."""

    __slots__ = ('arity', 'precedence', 'orderless')

    def __init__(self, arity: int, precedence: int, orderless: bool):
        self.arity = arity
        self.precedence = precedence
        self.orderless = orderless

    def __repr__(self) -> str:
        return (f"OperatorInfo(arity={self.arity}, precedence={self.precedence}, "
                f"orderless={self.orderless})")


class Operator(Enum):
    """Operator kinds. Parentheses are operators only while lexing and parsing."""
    ADD = '+'
    SUBTRACT = '-'
    MULTIPLY = '*'
    DIVIDE = '/'
    POW = '^'
    ROOT = 'root'
    LPAREN = '('
    RPAREN = ')'

    @property
    def symbol(self) -> str:
        return self.value

    def info(self) -> OperatorInfo:
        """Arity, precedence and commutativity of this operator."""
        try:
            return _OPERATOR_INFO[self]
        except KeyError:
            raise ValueError(f"{self.name} has no operator metadata") from None

    @property
    def orderless(self) -> bool:
        return self.info().orderless

    @classmethod
    def from_char(cls, char: str) -> Optional['Operator']:
        return _CHAR_OPERATORS.get(char)


_OPERATOR_INFO = {
    Operator.ADD: OperatorInfo(2, 1, True),
    Operator.SUBTRACT: OperatorInfo(2, 1, False),
    Operator.MULTIPLY: OperatorInfo(2, 2, True),
    Operator.DIVIDE: OperatorInfo(2, 2, False),
    Operator.POW: OperatorInfo(2, 3, False),
    Operator.ROOT: OperatorInfo(2, 3, False),
}

_CHAR_OPERATORS = {
    op.value: op for op in Operator if len(op.value) == 1
}


class TokenKind(Enum):
    CONSTANT = 0
    VARIABLE = 1
    OPERATOR = 2


class Token:
    """
    An immutable constant, variable or operator token.

    Tokens compare by kind and value; numerically equal constants
    (2 and 2.0) are equal tokens.
    """

    __slots__ = ('kind', 'value')

    def __init__(self, kind: TokenKind, value: Union[Decimal, str, Operator]):
        object.__setattr__(self, 'kind', kind)
        object.__setattr__(self, 'value', value)

    def __setattr__(self, name, value):
        raise AttributeError("Token is immutable")

    @classmethod
    def constant(cls, value) -> 'Token':
        return cls(TokenKind.CONSTANT, to_decimal(value))

    @classmethod
    def variable(cls, name: str) -> 'Token':
        # identical names share one string object
        return cls(TokenKind.VARIABLE, sys.intern(name))

    @classmethod
    def operator(cls, op: Operator) -> 'Token':
        return cls(TokenKind.OPERATOR, op)

    @property
    def is_constant(self) -> bool:
        return self.kind is TokenKind.CONSTANT

    @property
    def is_variable(self) -> bool:
        return self.kind is TokenKind.VARIABLE

    @property
    def is_operator(self) -> bool:
        return self.kind is TokenKind.OPERATOR

    def __eq__(self, other) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def __str__(self) -> str:
        if self.kind is TokenKind.CONSTANT:
            return format_decimal(self.value)
        if self.kind is TokenKind.VARIABLE:
            return self.value
        return self.value.symbol

    def __repr__(self) -> str:
        if self.kind is TokenKind.CONSTANT:
            return f"Token.constant({format_decimal(self.value)})"
        if self.kind is TokenKind.VARIABLE:
            return f"Token.variable({self.value!r})"
        return f"Token.operator({self.value.name})"
