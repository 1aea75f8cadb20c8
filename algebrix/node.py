"""
Expression tree nodes.

A Node is a token plus an Operands container. Leaves (constants and
variables) have no operands. Nodes are plain Python objects shared by
reference: a node held by two parents is one node, and mutating it
through one parent is visible through the other.

Canonical merging happens on every insertion: adding a child that
carries the same orderless operator as its parent splices the child's
operands into the parent instead of nesting it.

    n = Node.operator(Operator.ADD, Node.variable("a"), Node.variable("b"))
    n = Node.operator(Operator.ADD, n, Node.constant(1))
    len(n.operands)   # => 3, not 2

Equality is structural (token plus operands, ignoring order for
orderless operators), so nodes are not hashable. Use structural_key()
when a hashable form is needed.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from .number import ONE, ZERO, format_decimal
from .operands import Operands
from .tokens import Operator, Token, TokenKind


class Node:
    """A constant, variable, or operator node with its operands."""

    __slots__ = ('token', 'operands')

    def __init__(self, token: Token, operands: Optional[Operands] = None):
        self.token = token
        self.operands = operands if operands is not None else Operands()

    # ============================================================
    # Construction
    # ============================================================

    @classmethod
    def constant(cls, value) -> 'Node':
        return cls(Token.constant(value))

    @classmethod
    def variable(cls, name: str) -> 'Node':
        return cls(Token.variable(name))

    @classmethod
    def operator(cls, op: Operator, *children: 'Node') -> 'Node':
        """Build an operator node, merging children that carry the same orderless operator."""
        node = cls(Token.operator(op))
        for child in children:
            node.add_operand(child)
        return node

    # ============================================================
    # Token queries
    # ============================================================

    @property
    def kind(self) -> TokenKind:
        return self.token.kind

    @property
    def is_constant(self) -> bool:
        return self.token.kind is TokenKind.CONSTANT

    @property
    def is_variable(self) -> bool:
        return self.token.kind is TokenKind.VARIABLE

    @property
    def is_operator(self) -> bool:
        return self.token.kind is TokenKind.OPERATOR

    @property
    def is_leaf(self) -> bool:
        return not self.is_operator

    @property
    def op(self) -> Optional[Operator]:
        return self.token.value if self.is_operator else None

    @property
    def value(self) -> Optional[Decimal]:
        return self.token.value if self.is_constant else None

    @property
    def name(self) -> Optional[str]:
        return self.token.value if self.is_variable else None

    @property
    def orderless(self) -> bool:
        return self.is_operator and self.token.value.orderless

    def is_op(self, op: Operator) -> bool:
        return self.is_operator and self.token.value is op

    def is_zero(self) -> bool:
        return self.is_constant and self.token.value == ZERO

    def is_one(self) -> bool:
        return self.is_constant and self.token.value == ONE

    # ============================================================
    # Operands
    # ============================================================

    def positions(self) -> List[int]:
        """Operand positions in canonical order."""
        return self.operands.positions(self.orderless)

    def children(self) -> List['Node']:
        """Operands in canonical order: buckets for orderless operators, insertion otherwise."""
        return [self.operands[p] for p in self.positions()]

    def items(self) -> List[Tuple[int, 'Node']]:
        return [(p, self.operands[p]) for p in self.positions()]

    def operand(self, pos: int) -> 'Node':
        return self.operands[pos]

    @property
    def left(self) -> 'Node':
        return self.operands.inserted()[0]

    @property
    def right(self) -> 'Node':
        return self.operands.inserted()[1]

    def _merges(self, child: 'Node') -> bool:
        return self.orderless and child.is_op(self.token.value)

    def add_operand(self, child: 'Node') -> None:
        """Add a child operand, splicing it if it has the same orderless operator."""
        if child is self:
            raise ValueError("a node cannot be its own operand")
        if self._merges(child):
            for grandchild in child.operands.inserted():
                self.operands.add(grandchild)
        else:
            self.operands.add(child)

    def replace_operand(self, pos: int, child: 'Node') -> None:
        """Replace the operand at pos, splicing child if it has the same orderless operator."""
        if child is self:
            raise ValueError("a node cannot be its own operand")
        if self._merges(child):
            self.operands.remove(pos)
            for grandchild in child.operands.inserted():
                self.operands.add(grandchild)
        else:
            self.operands.replace(pos, child)

    def remove_operand(self, pos: int) -> 'Node':
        return self.operands.remove(pos)

    def operands_result(self, first: int, second: int, result: 'Node') -> None:
        """Replace a consumed operand pair by the result of combining it."""
        self.operands.remove(second)
        self.replace_operand(first, result)

    def display_order(self) -> List['Node']:
        """
        Operands in the order used for rendering.

        Multiply shows constants, variables, then operators (2*x*(a+b));
        Add shows operators, variables, then constants (x*y + x + 1).
        Other operators keep insertion order.
        """
        ops = self.operands
        if self.is_op(Operator.MULTIPLY):
            return ops.constants() + ops.variables() + ops.operators()
        if self.is_op(Operator.ADD):
            return ops.operators() + ops.variables() + ops.constants()
        return ops.inserted()

    # ============================================================
    # Structure
    # ============================================================

    def structural_key(self) -> Tuple:
        """
        A hashable form that is equal exactly when two trees are structurally equal.

        Orderless operators sort their children's keys so operand order
        does not matter; other operators keep insertion order.
        """
        if self.is_constant:
            return (0, format_decimal(self.token.value))
        if self.is_variable:
            return (1, self.token.value)
        keys = [child.structural_key() for child in self.operands.inserted()]
        if self.orderless:
            keys.sort()
        return (2, self.token.value.value, tuple(keys))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        if self is other:
            return True
        if self.token != other.token:
            return False
        if len(self.operands) != len(other.operands):
            return False
        if self.is_leaf:
            return True
        return self.structural_key() == other.structural_key()

    __hash__ = None

    def copy(self) -> 'Node':
        """Deep copy; the copy shares no nodes with the original."""
        node = Node(self.token)
        for child in self.operands.inserted():
            node.operands.add(child.copy())
        return node

    def count(self) -> int:
        """Number of nodes in this tree."""
        return 1 + sum(child.count() for child in self.operands.inserted())

    def walk(self):
        """Yield every node of the tree, parents before children."""
        yield self
        for child in self.operands.inserted():
            yield from child.walk()

    def find(self, token: Token) -> List['Node']:
        """All nodes in the tree carrying token."""
        return [n for n in self.walk() if n.token == token]

    def variables(self) -> List[str]:
        """Sorted names of the variables in this tree."""
        return sorted({n.token.value for n in self.walk() if n.is_variable})

    def postfix(self) -> Tuple[List[Token], Dict[str, int]]:
        """
        Flatten the tree to postfix order.

        Returns the token list and a variable name -> slot index map.
        An orderless operator with k operands contributes k - 1 copies of
        its token so every entry stays binary.
        """
        tokens: List[Token] = []
        slots: Dict[str, int] = {}

        def visit(node: 'Node') -> None:
            if node.is_leaf:
                if node.is_variable and node.token.value not in slots:
                    slots[node.token.value] = len(slots)
                tokens.append(node.token)
                return
            children = node.children()
            visit(children[0])
            for child in children[1:]:
                visit(child)
                tokens.append(node.token)

        visit(self)
        return tokens, slots

    def __str__(self) -> str:
        from .render import to_text
        return to_text(self)

    def __repr__(self) -> str:
        if self.is_constant:
            return f"Node({format_decimal(self.token.value)})"
        if self.is_variable:
            return f"Node({self.token.value})"
        inner = ", ".join(repr(c) for c in self.operands.inserted())
        return f"Node({self.token.value.name}: {inner})"
