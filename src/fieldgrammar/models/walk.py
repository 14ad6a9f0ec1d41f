"""Tree walking and pointer resolution over node trees."""

from __future__ import annotations

from typing import Iterator, Sequence

from ..exceptions import UnresolvedPointerError
from .nodes import (
    ArrayNode,
    BoolNode,
    EnumArrayNode,
    EnumNode,
    FixedNode,
    IntNode,
    Node,
    ObjectNode,
    OptionalNode,
    PointerNode,
    UnionNode,
)


def children(node: Node) -> list[Node]:
    """Return the nodes nested directly inside ``node``, in declaration order.

    Union variant fields are listed in discriminator option order. The inline
    enum of an EnumArray and a Union's discriminator are attributes, not children.
    """
    if isinstance(node, (BoolNode, IntNode, FixedNode, EnumNode, EnumArrayNode, PointerNode)):
        return []
    if isinstance(node, OptionalNode):
        return [node.inner]
    if isinstance(node, ArrayNode):
        return [node.item]
    if isinstance(node, ObjectNode):
        return list(node.fields)
    if isinstance(node, UnionNode):
        return [
            field
            for option in node.discriminator.options
            for field in node.variants.get(option, [])
        ]
    raise TypeError(f"Unsupported node kind: {type(node).__name__}")


def is_container(node: Node) -> bool:
    return isinstance(node, (OptionalNode, ArrayNode, ObjectNode, UnionNode))


def iter_nodes(fields: Sequence[Node]) -> Iterator[Node]:
    """Walk every node depth-first, parents before their children."""
    stack = list(reversed(fields))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(children(node)))


def tree_depth(node: Node) -> int:
    """Return the nesting depth of ``node``.

    Leaves have depth 1. A container is one level deeper than its deepest
    child and never shallower than 2, even when it has no children.
    """
    if not is_container(node):
        return 1
    return 1 + max([tree_depth(child) for child in children(node)] + [1])


def pointer_targets(fields: Sequence[Node]) -> dict[str, Node]:
    """Map each name to the first non-pointer node carrying it (pre-order).

    Lookup covers the whole schema, so a pointer may name a field declared
    after it as well as one of its enclosing containers. When a name is
    declared more than once, the first declaration in pre-order wins.
    """
    targets: dict[str, Node] = {}
    for node in iter_nodes(fields):
        if not isinstance(node, PointerNode):
            targets.setdefault(node.name, node)
    return targets


def resolve_pointer(targets: dict[str, Node], pointer: PointerNode) -> Node:
    """Look up the node a pointer refers to.

    Raises:
        UnresolvedPointerError: If no non-pointer node carries the target name
    """
    target = targets.get(pointer.target_name)
    if target is None:
        raise UnresolvedPointerError(
            pointer.target_name,
            f"Pointer {pointer.name}: target '{pointer.target_name}' does not resolve in schema",
        )
    return target


def check_pointers(fields: Sequence[Node]) -> None:
    """Raise UnresolvedPointerError for the first pointer that cannot be resolved."""
    targets = pointer_targets(fields)
    for node in iter_nodes(fields):
        if isinstance(node, PointerNode):
            resolve_pointer(targets, node)
