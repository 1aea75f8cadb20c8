"""
Fixed-scale decimal arithmetic used on the symbolic path.

Constants are Python Decimals limited to SCALE fractional digits and
28 significant digits, with magnitude at most MAX_VALUE (the largest
96-bit mantissa). Floating point is never used while rewriting, so
repeated folding does not accumulate rounding drift.
"""

from decimal import (
    Decimal, Context, ROUND_HALF_EVEN,
    InvalidOperation, DivisionByZero as _DecimalDivisionByZero,
    Overflow as _DecimalOverflow,
)
from typing import Union

from .errors import Overflow, UndefinedOperation, DivisionByZero

SCALE = 28
PRECISION = 28
MAX_VALUE = Decimal("79228162514264337593543950335")
MIN_POSITIVE = Decimal(1).scaleb(-SCALE)

ZERO = Decimal(0)
ONE = Decimal(1)
TWO = Decimal(2)
MINUS_ONE = Decimal(-1)

NumberLike = Union[Decimal, int, float, str]

CONTEXT = Context(
    prec=PRECISION,
    rounding=ROUND_HALF_EVEN,
    traps=[InvalidOperation, _DecimalDivisionByZero, _DecimalOverflow],
)

# quantize() may need more digits than PRECISION to hold SCALE decimals
_WIDE = Context(prec=PRECISION + SCALE + 2, rounding=ROUND_HALF_EVEN,
                traps=[InvalidOperation])
_QUANTUM = Decimal(1).scaleb(-SCALE)


def to_decimal(value: NumberLike) -> Decimal:
    """Convert an int, string or Decimal into a fixed-scale Decimal."""
    if isinstance(value, float):
        # repr keeps the shortest round-tripping digits
        value = repr(value)
    try:
        return _fit(Decimal(value))
    except InvalidOperation:
        raise ValueError(f"Not a decimal number: {value!r}") from None


def _fit(value: Decimal) -> Decimal:
    """Clamp a raw result to the fixed scale, or raise Overflow."""
    if not value.is_finite():
        raise Overflow(str(value))
    if abs(value) > MAX_VALUE:
        raise Overflow(format_decimal(value))
    if value.as_tuple().exponent < -SCALE:
        value = value.quantize(_QUANTUM, context=_WIDE)
    return value


def _checked(operation, a: Decimal, b: Decimal, symbol: str) -> Decimal:
    try:
        return _fit(operation(a, b))
    except _DecimalOverflow:
        raise Overflow(f"{a} {symbol} {b}") from None


def add(a: Decimal, b: Decimal) -> Decimal:
    return _checked(CONTEXT.add, a, b, "+")


def subtract(a: Decimal, b: Decimal) -> Decimal:
    return _checked(CONTEXT.subtract, a, b, "-")


def multiply(a: Decimal, b: Decimal) -> Decimal:
    return _checked(CONTEXT.multiply, a, b, "*")


def divide(a: Decimal, b: Decimal) -> Decimal:
    """Divide a by b; b must not be zero."""
    if b == ZERO:
        raise DivisionByZero(format_decimal(a))
    return _checked(CONTEXT.divide, a, b, "/")


def power(base: Decimal, exponent: Decimal) -> Decimal:
    """
    Raise base to exponent.

    Unlike the other operations, a nonzero result too small for the
    fixed scale is an Overflow rather than being rounded to zero.

    Raises:
        Overflow: the result is not representable
        DivisionByZero: zero raised to a negative exponent
        UndefinedOperation: no real result (negative base, fractional exponent)
    """
    if exponent == ZERO:
        return ONE
    if base == ZERO:
        if exponent < ZERO:
            raise DivisionByZero("1")
        return ZERO
    if base < ZERO and not is_integral(exponent):
        raise UndefinedOperation(
            f"{format_decimal(base)} ^ {format_decimal(exponent)} has no real value")
    # an exponent this large cannot produce a representable value
    if abs(exponent) > 10 ** 6 and abs(base) != ONE:
        raise Overflow(f"{format_decimal(base)} ^ {format_decimal(exponent)}")
    try:
        result = CONTEXT.power(base, exponent)
    except _DecimalOverflow:
        raise Overflow(f"{format_decimal(base)} ^ {format_decimal(exponent)}") from None
    except InvalidOperation:
        raise UndefinedOperation(
            f"{format_decimal(base)} ^ {format_decimal(exponent)}") from None
    if result != ZERO and abs(result) < MIN_POSITIVE:
        raise Overflow(f"{format_decimal(base)} ^ {format_decimal(exponent)}")
    if result == ZERO:
        # the exact result is never zero here; rounding underflowed
        raise Overflow(f"{format_decimal(base)} ^ {format_decimal(exponent)}")
    return _fit(result)


def divides(divisor: Decimal, value: Decimal) -> bool:
    """True when value is an exact multiple of divisor."""
    if divisor == ZERO:
        return False
    try:
        return _WIDE.remainder(value, divisor) == ZERO
    except InvalidOperation:
        # quotient has more digits than the context can hold
        return False


def is_integral(value: Decimal) -> bool:
    return value == value.to_integral_value()


def fraction_digits(value: Decimal) -> int:
    """Digits after the decimal point, ignoring trailing zeros."""
    exponent = value.normalize(_WIDE).as_tuple().exponent
    return max(0, -exponent)


def shifted(value: Decimal, places: int) -> int:
    """value * 10**places as an exact int."""
    return int(value.scaleb(places, _WIDE))


def format_decimal(value: Decimal) -> str:
    """Render a Decimal without exponent notation or trailing zeros."""
    if value == ZERO:
        return "0"
    return format(value.normalize(_WIDE), "f")
