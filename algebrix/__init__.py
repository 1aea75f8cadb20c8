"""
algebrix - symbolic simplification of algebraic expressions

Parses infix expressions over constants, variables and + - * / ^ into a
canonical tree and rewrites it to a fixed point: constant folding,
identity elimination, self-combination, common factor extraction and
cancellation across division.

Quick Start:
    from algebrix import Expression

    expr = Expression.parse("2*x + x")
    expr.simplify()
    str(expr)                      # => "3*x"

    Expression.parse("(x^2)/x").simplify().to_latex()   # => "x"

Lower level:
    from algebrix import parse_node, simplify, like

    tree = simplify(parse_node("5 - (-2)"))      # => 7
    like(parse_node("(x+2)^2"), "(a+b)^2")       # => Bindings(a=x, b=2)

Evaluation:
    from algebrix import Function, FastFunction

    Function("x^x")(3)                 # => Decimal('27'), exact
    FastFunction("x^2 + 1")(2.0)       # => 5.0, numpy float64

Errors:
    LexError, MissingOperand, MissingOperator, ParenthesesMismatch
    Overflow, UndefinedOperation, DivisionByZero, RewriteLimitExceeded
    (all derive from AlgebraError)
"""

__version__ = "0.1.0"

from .errors import (
    AlgebraError,
    LexError,
    ParseError,
    MissingOperand,
    MissingOperator,
    ParenthesesMismatch,
    OperationError,
    Overflow,
    UndefinedOperation,
    DivisionByZero,
    RewriteLimitExceeded,
    UnboundVariable,
)

from .tokens import Operator, OperatorInfo, Token, TokenKind
from .lexer import Lexer, tokenize
from .operands import Operands
from .node import Node
from .parser import build_tree, insert_unary_zeros, parse_node, to_postfix
from .bounds import Bound, BoundKind, VariableBounds
from .arithmetic import Description, DescriptionKind, RULES, describe, perform_op
from .factorization import (
    build_term,
    decompose,
    divide_out,
    factorize,
    find_common_constant,
    find_common_factor,
    find_common_variable,
)
from .symmetry import symmetrical_scan
from .simplify import MAX_PASSES, measure, simplify, simplify_node
from .trace import RewriteStep, RewriteTrace
from .pattern import Bindings, NoMatch, like, match
from .render import format_token, to_latex, to_text
from .constants import DEFAULT_CONSTANTS, ConstantTable
from .function import FastFunction, Function, Instruction
from .expression import Expression

__all__ = [
    # Errors
    "AlgebraError",
    "LexError",
    "ParseError",
    "MissingOperand",
    "MissingOperator",
    "ParenthesesMismatch",
    "OperationError",
    "Overflow",
    "UndefinedOperation",
    "DivisionByZero",
    "RewriteLimitExceeded",
    "UnboundVariable",
    # Tokens and lexing
    "Operator",
    "OperatorInfo",
    "Token",
    "TokenKind",
    "Lexer",
    "tokenize",
    # Tree
    "Operands",
    "Node",
    # Parsing
    "insert_unary_zeros",
    "to_postfix",
    "build_tree",
    "parse_node",
    # Bounds
    "Bound",
    "BoundKind",
    "VariableBounds",
    # Rewriting
    "Description",
    "DescriptionKind",
    "RULES",
    "describe",
    "perform_op",
    "decompose",
    "build_term",
    "divide_out",
    "find_common_constant",
    "find_common_variable",
    "find_common_factor",
    "factorize",
    "symmetrical_scan",
    "simplify",
    "simplify_node",
    "measure",
    "MAX_PASSES",
    "RewriteStep",
    "RewriteTrace",
    # Pattern matching
    "Bindings",
    "NoMatch",
    "match",
    "like",
    # Rendering
    "to_text",
    "to_latex",
    "format_token",
    # Evaluation
    "ConstantTable",
    "DEFAULT_CONSTANTS",
    "Function",
    "FastFunction",
    "Instruction",
    # Facade
    "Expression",
]
