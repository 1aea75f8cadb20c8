"""
Variable bounds: domain restrictions learned while simplifying.

Dividing by a variable records that the variable is not zero:

    bounds = VariableBounds()
    simplify(parse_node("1/x"), bounds)
    str(bounds)   # => "x ≠ 0"

The simplifier only writes bounds; readers are downstream consumers
such as equation solving.
"""

from decimal import Decimal
from enum import Enum
from typing import Dict, Iterator, List

from .number import ZERO, format_decimal


class BoundKind(Enum):
    NOT_EQUAL = '≠'


class Bound:
    """A single restriction on a variable."""

    __slots__ = ('kind', 'value')

    def __init__(self, kind: BoundKind, value: Decimal):
        self.kind = kind
        self.value = value

    @classmethod
    def not_zero(cls) -> 'Bound':
        return cls(BoundKind.NOT_EQUAL, ZERO)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bound):
            return NotImplemented
        return self.kind is other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def __str__(self) -> str:
        return f"{self.kind.value} {format_decimal(self.value)}"

    def __repr__(self) -> str:
        return f"Bound({self.kind.name}, {format_decimal(self.value)})"


class VariableBounds:
    """Bounds per variable name, in the order they were learned."""

    __slots__ = ('_bounds',)

    def __init__(self):
        self._bounds: Dict[str, List[Bound]] = {}

    def add(self, name: str, bound: Bound) -> bool:
        """Record a bound. Returns False if it was already known."""
        known = self._bounds.setdefault(name, [])
        if bound in known:
            return False
        known.append(bound)
        return True

    def get(self, name: str) -> List[Bound]:
        return list(self._bounds.get(name, []))

    def __contains__(self, name: str) -> bool:
        return name in self._bounds

    def __iter__(self) -> Iterator[str]:
        return iter(self._bounds)

    def __len__(self) -> int:
        return len(self._bounds)

    def items(self):
        return self._bounds.items()

    def clear(self) -> None:
        self._bounds.clear()

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: [str(b) for b in bounds] for name, bounds in self._bounds.items()}

    def __str__(self) -> str:
        return ", ".join(f"{name} {bound}"
                         for name, bounds in self._bounds.items()
                         for bound in bounds)

    def __repr__(self) -> str:
        return f"VariableBounds({self.to_dict()})"
