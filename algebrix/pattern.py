"""
Structural pattern matching of expression trees.

A template is an ordinary expression whose variables are placeholders.
Matching unifies a candidate tree against the template:

    - a template variable binds the candidate subtree on first use and
      must be structurally equal to that binding on every later use
    - a template constant requires an equal constant
    - a template operator requires the same operator with the same
      number of operands, each unifying with its counterpart

Operands of orderless operators are paired in insertion order first, so
"(x + 2)^2" against "(a + b)^2" binds a=x, b=2. When that fails, the
template's constants and operators are placed on compatible candidate
operands, and the placeholders left over are filled by grouping equal
candidates, so "3 + y^2" still matches "a^2 + b".

    if bindings := like(parse_node("2^3*2^4"), "x^m*x^n"):
        bindings["x"], bindings["m"], bindings["n"]   # => 2, 3, 4
"""

from collections import Counter
from collections.abc import Mapping
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .node import Node

Unified = Optional[Dict[str, Node]]


# ============================================================
# Match results
# ============================================================

class Bindings(Mapping):
    """
    Read-only mapping from placeholder name to the bound subtree.

    Always truthy, even when empty; a failed match returns NoMatch.

        bindings["x"]      # => Node(2)
        bindings.get("z")  # => None
    """

    __slots__ = ('_nodes',)

    def __init__(self, nodes: Optional[Dict[str, Node]] = None):
        self._nodes: Dict[str, Node] = dict(nodes or {})

    def __getitem__(self, name: str) -> Node:
        return self._nodes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={node}" for name, node in self._nodes.items())
        return f"Bindings({inner})"

    def to_text(self) -> Dict[str, str]:
        """Bindings rendered as text: {"x": "2", ...}."""
        return {name: str(node) for name, node in self._nodes.items()}


class _NoMatch:
    """The falsy result of a failed match. Lookups behave like an empty mapping."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NoMatch"

    def __getitem__(self, name: str):
        raise KeyError(f"NoMatch has no binding for '{name}'")

    def __contains__(self, name: str) -> bool:
        return False

    def get(self, name: str, default=None):
        return default


NoMatch = _NoMatch()


# ============================================================
# Unification
# ============================================================

def _unify(template: Node, candidate: Node, bindings: Dict[str, Node]) -> Unified:
    if template.is_variable:
        bound = bindings.get(template.name)
        if bound is None:
            extended = dict(bindings)
            extended[template.name] = candidate
            return extended
        return bindings if bound == candidate else None

    if template.is_constant:
        return bindings if template == candidate else None

    if not _compatible(template, candidate):
        return None

    template_children = template.operands.inserted()
    candidate_children = candidate.operands.inserted()
    result = _unify_pairs(template_children, candidate_children, bindings)
    if result is None and template.orderless:
        fixed = [child for child in template_children if not child.is_variable]
        names = [child.name for child in template_children if child.is_variable]
        result = _place(fixed, names, candidate_children, bindings)
    return result


def _compatible(template: Node, candidate: Node) -> bool:
    """Cheap check that template could unify with candidate."""
    if template.is_variable:
        return True
    if template.is_constant:
        return template == candidate
    return candidate.is_op(template.op) and len(candidate.operands) == len(template.operands)


def _unify_pairs(templates: List[Node], candidates: List[Node], bindings: Dict[str, Node]) -> Unified:
    result: Unified = bindings
    for pattern_child, child in zip(templates, candidates):
        result = _unify(pattern_child, child, result)
        if result is None:
            return None
    return result


def _place(fixed: List[Node], names: List[str], pool: List[Node], bindings: Dict[str, Node]) -> Unified:
    """Put each fixed template operand on a distinct compatible candidate, then fill placeholders."""
    if not fixed:
        return _fill_placeholders(names, pool, bindings)

    head, rest = fixed[0], fixed[1:]
    tried: List[Node] = []
    for i, child in enumerate(pool):
        # equal candidates lead to the same outcome
        if not _compatible(head, child) or any(child == seen for seen in tried):
            continue
        tried.append(child)
        extended = _unify(head, child, bindings)
        if extended is not None:
            result = _place(rest, names, pool[:i] + pool[i + 1:], extended)
            if result is not None:
                return result
    return None


def _fill_placeholders(names: List[str], pool: List[Node], bindings: Dict[str, Node]) -> Unified:
    # groups of structurally equal candidates: [node, remaining count]
    groups: List[List] = []
    for child in pool:
        for group in groups:
            if group[0] == child:
                group[1] += 1
                break
        else:
            groups.append([child, 1])

    free: List[Tuple[int, str]] = []
    for name, uses in Counter(names).items():
        bound = bindings.get(name)
        if bound is None:
            free.append((uses, name))
            continue
        group = next((g for g in groups if g[0] == bound), None)
        if group is None or group[1] < uses:
            return None
        group[1] -= uses

    if sum(uses for uses, _ in free) != sum(count for _, count in groups):
        return None
    # most repeated placeholder first
    free.sort(key=lambda item: -item[0])
    return _fill(free, groups, bindings)


def _fill(free: List[Tuple[int, str]], groups: List[List], bindings: Dict[str, Node]) -> Unified:
    if not free:
        return bindings
    (uses, name), rest = free[0], free[1:]
    for group in groups:
        if group[1] < uses:
            continue
        group[1] -= uses
        result = _fill(rest, groups, {**bindings, name: group[0]})
        group[1] += uses
        if result is not None:
            return result
    return None


def match(candidate: Node, template: Node) -> Union[Bindings, _NoMatch]:
    """
    Unify candidate against template.

    Returns:
        Bindings on success, NoMatch otherwise
    """
    result = _unify(template, candidate, {})
    if result is None:
        return NoMatch
    return Bindings(result)


def like(candidate: Node, template: str) -> Union[Bindings, _NoMatch]:
    """Match candidate against a template given as text."""
    from .parser import parse_node
    return match(candidate, parse_node(template))
