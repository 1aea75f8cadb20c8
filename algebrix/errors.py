"""
Exception hierarchy for algebrix.

Every failure the core can surface derives from AlgebraError and from
the closest builtin exception, so callers may catch either:

    LexError, ParseError      -> ValueError
    OperationError            -> ArithmeticError
    Overflow                  -> OverflowError
    DivisionByZero            -> ZeroDivisionError
    RewriteLimitExceeded      -> RuntimeError

The core raises these and never logs or formats them itself.
"""

from typing import Optional


class AlgebraError(Exception):
    """Base class for all algebrix errors."""


# ============================================================
# Lexical and syntactic errors
# ============================================================

class LexError(AlgebraError, ValueError):
    """Raised when the lexer meets a character it does not recognize."""

    def __init__(self, char: str, position: int):
        self.char = char
        self.position = position
        super().__init__(f"Unrecognized character {char!r} at position {position}")


class ParseError(AlgebraError, ValueError):
    """Base class for parse failures."""


class MissingOperand(ParseError):
    """An operator lacked enough preceding operands."""

    def __init__(self, operator: Optional[str] = None):
        self.operator = operator
        if operator:
            super().__init__(f"Missing operand for '{operator}'")
        else:
            super().__init__("Missing operand")


class MissingOperator(ParseError):
    """Two operands appear with no operator joining them."""

    def __init__(self):
        super().__init__("Missing operator between operands")


class ParenthesesMismatch(ParseError):
    """Unbalanced parentheses."""

    def __init__(self):
        super().__init__("Parentheses mismatch")


# ============================================================
# Arithmetic errors
# ============================================================

class OperationError(AlgebraError, ArithmeticError):
    """A constant operation could not be carried out."""


class Overflow(OperationError, OverflowError):
    """The result of a constant operation is not representable."""

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"Overflow: {detail}" if detail else "Overflow")


class UndefinedOperation(OperationError):
    """The operation has no real result (e.g. (-8)^0.5)."""


class DivisionByZero(AlgebraError, ZeroDivisionError):
    """Division by the constant zero: the expression itself is undefined."""

    def __init__(self, dividend: str = ""):
        self.dividend = dividend
        if dividend:
            super().__init__(f"Division by zero: {dividend} / 0")
        else:
            super().__init__("Division by zero")


class RewriteLimitExceeded(AlgebraError, RuntimeError):
    """The simplifier failed to reach a fixed point within max_passes."""


class UnboundVariable(AlgebraError, NameError):
    """A variable had no value at evaluation time."""

    def __init__(self, name: str):
        super().__init__(f"No value for variable '{name}'")
        # NameError.__init__ resets .name on 3.10+
        self.name = name
