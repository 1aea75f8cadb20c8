"""
Named numeric constants for evaluation.

A ConstantTable is a read-only mapping from name to Decimal. It is
consulted only when evaluating (Function, FastFunction); symbolic
simplification treats pi and e as ordinary variables.

    table = DEFAULT_CONSTANTS.extend({"tau": "6.2831853071795864769252867666"})
    table["pi"]     # => Decimal('3.1415926535897932384626433833')
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Dict, Iterator, Optional

from .number import NumberLike, to_decimal

PI = Decimal("3.1415926535897932384626433833")
E = Decimal("2.7182818284590452353602874714")


class ConstantTable(Mapping):
    """Immutable name -> Decimal mapping."""

    __slots__ = ('_values',)

    def __init__(self, values: Optional[Dict[str, NumberLike]] = None):
        self._values: Dict[str, Decimal] = {
            name: to_decimal(value) for name, value in (values or {}).items()
        }

    def __getitem__(self, name: str) -> Decimal:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def extend(self, values: Dict[str, NumberLike]) -> 'ConstantTable':
        """A new table with values added (or overridden)."""
        merged: Dict[str, NumberLike] = dict(self._values)
        merged.update(values)
        return ConstantTable(merged)

    def __repr__(self) -> str:
        return f"ConstantTable({sorted(self._values)})"


DEFAULT_CONSTANTS = ConstantTable({
    "pi": PI,
    "π": PI,
    "e": E,
})
