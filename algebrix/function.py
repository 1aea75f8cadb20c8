"""
Evaluation of simplified expressions.

Function evaluates exactly: every variable is replaced by a constant
and the tree is simplified again with fixed-scale decimal arithmetic,
so unrepresentable results raise instead of being rounded away.

    f = Function("x^x")
    f(3)      # => Decimal('27')
    f(-40)    # raises Overflow

FastFunction compiles the simplified tree once into a flat postfix
program and runs it with numpy float64, on scalars or whole arrays:

    g = FastFunction("x^2 + 1")
    g(2.0)                          # => 5.0
    g(np.array([0.0, 1.0, 2.0]))    # => array([1., 2., 5.])

Named constants (pi, e) are looked up in the injected ConstantTable
for any variable that has no explicit value.
"""

import logging
from decimal import Decimal
from enum import Enum
from typing import Dict, List

import numpy as np

from .bounds import VariableBounds
from .constants import DEFAULT_CONSTANTS, ConstantTable
from .errors import DivisionByZero, Overflow, UnboundVariable, UndefinedOperation
from .node import Node
from .number import to_decimal
from .parser import parse_node
from .simplify import simplify
from .tokens import Operator, Token

logger = logging.getLogger(__name__)


def as_node(expr) -> Node:
    """A private copy of expr as a Node (accepts text, Node, or Expression)."""
    if isinstance(expr, str):
        return parse_node(expr)
    if isinstance(expr, Node):
        return expr.copy()
    root = getattr(expr, 'root', None)
    if isinstance(root, Node):
        return root.copy()
    raise TypeError(f"Cannot build an expression from {type(expr).__name__}")


# ============================================================
# Exact evaluation
# ============================================================

class Function:
    """
    An expression simplified once and evaluated by substitution.

    Args:
        expr: Expression text, Node, or Expression
        constants: Values for named constants such as pi and e
    """

    def __init__(self, expr, constants: ConstantTable = DEFAULT_CONSTANTS):
        self.constants = constants
        self.bounds = VariableBounds()
        self.simplified: Node = simplify(as_node(expr), self.bounds)
        self.variables: List[str] = self.simplified.variables()

    @property
    def parameters(self) -> List[str]:
        """Variables that are not named constants."""
        return [name for name in self.variables if name not in self.constants]

    def _value_of(self, name: str, value, values: Dict) -> Decimal:
        if name in values:
            return to_decimal(values[name])
        if name in self.constants:
            return self.constants[name]
        if value is not None:
            return to_decimal(value)
        raise UnboundVariable(name)

    def _substitute(self, node: Node, value, values: Dict) -> Node:
        if node.is_variable:
            return Node.constant(self._value_of(node.name, value, values))
        if node.is_leaf:
            return Node(node.token)
        result = Node(node.token)
        for child in node.operands.inserted():
            result.add_operand(self._substitute(child, value, values))
        return result

    def evaluate(self, value=None, **values) -> Node:
        """
        Substitute and simplify.

        A positional value is used for every variable that is neither
        named in values nor a known constant.

        Raises:
            UnboundVariable, Overflow, DivisionByZero, UndefinedOperation
        """
        substituted = self._substitute(self.simplified, value, values)
        return simplify(substituted)

    def __call__(self, value=None, **values) -> Decimal:
        result = self.evaluate(value, **values)
        if not result.is_constant:
            raise UnboundVariable(", ".join(result.variables()))
        return result.value

    def __repr__(self) -> str:
        return f"Function({self.simplified})"


# ============================================================
# Compiled float evaluation
# ============================================================

class InstructionKind(Enum):
    CONST = 'const'
    LOAD = 'load'
    APPLY = 'apply'


class Instruction:
    """One postfix step: push a constant, load a slot, or apply an operator."""

    __slots__ = ('kind', 'arg')

    def __init__(self, kind: InstructionKind, arg):
        self.kind = kind
        self.arg = arg

    def __eq__(self, other) -> bool:
        if not isinstance(other, Instruction):
            return NotImplemented
        return self.kind is other.kind and self.arg == other.arg

    def __repr__(self) -> str:
        if self.kind is InstructionKind.APPLY:
            return f"{self.kind.value} {self.arg.symbol}"
        return f"{self.kind.value} {self.arg}"


def _root(a, b):
    return np.power(a, np.divide(1.0, b))


_APPLY = {
    Operator.ADD: np.add,
    Operator.SUBTRACT: np.subtract,
    Operator.MULTIPLY: np.multiply,
    Operator.DIVIDE: np.divide,
    Operator.POW: np.power,
    Operator.ROOT: _root,
}


def compile_postfix(tokens: List[Token], slots: Dict[str, int]) -> List[Instruction]:
    program: List[Instruction] = []
    for token in tokens:
        if token.is_constant:
            program.append(Instruction(InstructionKind.CONST, float(token.value)))
        elif token.is_variable:
            program.append(Instruction(InstructionKind.LOAD, slots[token.value]))
        else:
            program.append(Instruction(InstructionKind.APPLY, token.value))
    return program


class FastFunction:
    """
    A simplified expression compiled to a numpy postfix program.

    Positional arguments bind to parameters in slot order; keyword
    arguments bind by name. Arrays broadcast like numpy operands.

    Raises (on call):
        Overflow: float overflow
        DivisionByZero: float division by zero
        UndefinedOperation: invalid result, e.g. (-8)^0.5
        UnboundVariable: a variable has no value and is not a constant
    """

    def __init__(self, expr, constants: ConstantTable = DEFAULT_CONSTANTS):
        self.constants = constants
        self.simplified: Node = simplify(as_node(expr))
        tokens, self.slots = self.simplified.postfix()
        self.names: List[str] = sorted(self.slots, key=self.slots.get)
        self.instructions: List[Instruction] = compile_postfix(tokens, self.slots)
        logger.debug(f"compiled {self.simplified} to {len(self.instructions)} instructions")

    @property
    def parameters(self) -> List[str]:
        return [name for name in self.names if name not in self.constants]

    def _bind(self, args, kwargs) -> List:
        parameters = self.parameters
        if len(args) > len(parameters):
            raise TypeError(f"expected at most {len(parameters)} positional values, got {len(args)}")
        values: Dict[str, object] = dict(zip(parameters, args))
        values.update(kwargs)

        registers: List = []
        for name in self.names:
            if name in values:
                registers.append(np.asarray(values[name], dtype=np.float64))
            elif name in self.constants:
                registers.append(np.float64(float(self.constants[name])))
            else:
                raise UnboundVariable(name)
        return registers

    def __call__(self, *args, **kwargs):
        registers = self._bind(args, kwargs)
        stack: List = []
        with np.errstate(divide='raise', over='raise', invalid='raise', under='ignore'):
            try:
                for instruction in self.instructions:
                    if instruction.kind is InstructionKind.CONST:
                        stack.append(np.float64(instruction.arg))
                    elif instruction.kind is InstructionKind.LOAD:
                        stack.append(registers[instruction.arg])
                    else:
                        b = stack.pop()
                        a = stack.pop()
                        stack.append(_APPLY[instruction.arg](a, b))
            except FloatingPointError as exc:
                raise _float_error(exc) from None

        result = stack.pop()
        if np.ndim(result) == 0:
            return float(result)
        return result

    def __repr__(self) -> str:
        return f"FastFunction({self.simplified}, {len(self.instructions)} instructions)"


def _float_error(exc: FloatingPointError) -> Exception:
    message = str(exc)
    if 'divide' in message:
        return DivisionByZero()
    if 'overflow' in message:
        return Overflow(message)
    return UndefinedOperation(message)
