"""
Operand container: the children of one operator node.

Children are stored under stable integer positions and partitioned into
three buckets by the kind of their top-level token:

    constants  - insertion order
    variables  - sorted by name (ties keep insertion order)
    operators  - insertion order

The container also remembers the overall insertion order, which is the
only meaningful order for non-commutative operators such as Subtract.

    ops = Operands()
    p = ops.add(Node.variable("y"))
    ops.add(Node.constant(2))
    ops.add(Node.variable("x"))
    [str(n) for n in ops.canonical()]   # => ['2', 'x', 'y']
    [str(n) for n in ops.inserted()]    # => ['y', '2', 'x']

Positions survive replacement: replace(p, node) keeps p's insertion
slot and moves it to the bucket matching the new node.
"""

from typing import Dict, Iterator, List, Tuple, TYPE_CHECKING

from .tokens import TokenKind

if TYPE_CHECKING:
    from .node import Node


class Operands:
    """Children of a node, partitioned by token kind."""

    __slots__ = ('_nodes', '_rank', '_order', '_buckets', '_next_pos', '_next_rank')

    def __init__(self):
        self._nodes: Dict[int, 'Node'] = {}
        self._rank: Dict[int, int] = {}
        self._order: List[int] = []
        self._buckets: Dict[TokenKind, List[int]] = {
            TokenKind.CONSTANT: [],
            TokenKind.VARIABLE: [],
            TokenKind.OPERATOR: [],
        }
        self._next_pos = 0
        self._next_rank = 0

    # ============================================================
    # Bucket bookkeeping
    # ============================================================

    def _sort_key(self, pos: int):
        node = self._nodes[pos]
        if node.token.kind is TokenKind.VARIABLE:
            return (node.token.value, self._rank[pos])
        return ('', self._rank[pos])

    def _file(self, pos: int) -> None:
        bucket = self._buckets[self._nodes[pos].token.kind]
        key = self._sort_key(pos)
        index = len(bucket)
        while index > 0 and self._sort_key(bucket[index - 1]) > key:
            index -= 1
        bucket.insert(index, pos)

    def _unfile(self, pos: int) -> None:
        self._buckets[self._nodes[pos].token.kind].remove(pos)

    # ============================================================
    # Mutation
    # ============================================================

    def add(self, node: 'Node') -> int:
        """Append a child and return its position."""
        pos = self._next_pos
        self._next_pos += 1
        self._nodes[pos] = node
        self._rank[pos] = self._next_rank
        self._next_rank += 1
        self._order.append(pos)
        self._file(pos)
        return pos

    def remove(self, pos: int) -> 'Node':
        """Remove and return the child at pos."""
        node = self._nodes[pos]
        self._unfile(pos)
        self._order.remove(pos)
        del self._nodes[pos]
        del self._rank[pos]
        return node

    def replace(self, pos: int, node: 'Node') -> 'Node':
        """Put node at pos, keeping the insertion slot. Returns the old child."""
        old = self._nodes[pos]
        self._unfile(pos)
        self._nodes[pos] = node
        self._file(pos)
        return old

    # ============================================================
    # Access
    # ============================================================

    def __getitem__(self, pos: int) -> 'Node':
        return self._nodes[pos]

    def __contains__(self, pos: int) -> bool:
        return pos in self._nodes

    def __len__(self) -> int:
        return len(self._order)

    def __bool__(self) -> bool:
        return bool(self._order)

    def positions(self, canonical: bool = True) -> List[int]:
        """Positions in bucket order, or insertion order when canonical is False."""
        if not canonical:
            return list(self._order)
        return (self._buckets[TokenKind.CONSTANT]
                + self._buckets[TokenKind.VARIABLE]
                + self._buckets[TokenKind.OPERATOR])

    def canonical(self) -> List['Node']:
        return [self._nodes[p] for p in self.positions(True)]

    def inserted(self) -> List['Node']:
        return [self._nodes[p] for p in self._order]

    def items(self, canonical: bool = True) -> List[Tuple[int, 'Node']]:
        return [(p, self._nodes[p]) for p in self.positions(canonical)]

    def constants(self) -> List['Node']:
        return [self._nodes[p] for p in self._buckets[TokenKind.CONSTANT]]

    def variables(self) -> List['Node']:
        return [self._nodes[p] for p in self._buckets[TokenKind.VARIABLE]]

    def operators(self) -> List['Node']:
        return [self._nodes[p] for p in self._buckets[TokenKind.OPERATOR]]

    def __iter__(self) -> Iterator['Node']:
        return iter(self.canonical())

    def __repr__(self) -> str:
        return f"Operands({self.canonical()!r})"
