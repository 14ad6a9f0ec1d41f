"""Default values for field grammar nodes.

default_value() gives the canonical initial value for a node: what an
empty form starts from, and what callers fall back to when a data token
fails to decode.
"""

from __future__ import annotations

from typing import Any, Sequence

from .models.nodes import (
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
from .models.schema import Schema


def default_value(node: Node) -> Any:
    """Derive the default value of a node.

    - Bool: False
    - Int, Fixed: min
    - Enum: first option
    - Optional, Pointer: None
    - Array, EnumArray: empty list
    - Object: every field's default under its name
    - Union: first discriminator option plus that variant's field defaults

    A Pointer's default is None because deriving one would mean re-entering
    its target. Callers that need a populated recursive value must unroll
    it themselves to a depth of their choosing.
    """
    if isinstance(node, BoolNode):
        return False
    if isinstance(node, (IntNode, FixedNode)):
        return node.min
    if isinstance(node, EnumNode):
        return node.options[0]
    if isinstance(node, (OptionalNode, PointerNode)):
        return None
    if isinstance(node, (ArrayNode, EnumArrayNode)):
        return []
    if isinstance(node, ObjectNode):
        return {field.name: default_value(field) for field in node.fields}
    if isinstance(node, UnionNode):
        first = node.discriminator.options[0]
        value: dict[str, Any] = {node.discriminator.name: first}
        for field in node.variants.get(first, []):
            value[field.name] = default_value(field)
        return value
    raise TypeError(f"Unsupported node kind: {type(node).__name__}")


def default_data(schema: Schema | Sequence[Node]) -> dict[str, Any]:
    """Derive default data for a whole schema, keyed by top-level field name."""
    fields = schema.fields if isinstance(schema, Schema) else schema
    return {field.name: default_value(field) for field in fields}
