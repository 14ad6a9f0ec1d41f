"""Dense encoder for data described by a field grammar schema.

This module provides the encode() function that packs a data mapping into
a compact base64url token. Fields are written in declaration order, each
using the minimum bits its bounds allow.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from ..exceptions import EncodeError
from ..models.nodes import (
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
from ..models.schema import Schema
from ..models.walk import check_pointers, pointer_targets
from . import base64url
from .bitpack import BitPacker
from .schema import (
    DEFAULT_POINTER_DEPTH,
    bits_for_count,
    bits_for_range,
    fixed_bits,
    quantize,
    schema_fields,
)
from .validate import validate

logger = logging.getLogger(__name__)

# Issues listed in an EncodeError message before the rest are summarized
_ISSUES_SHOWN = 10


def encode(
    schema: Schema | Sequence[Node],
    data: Any,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> str:
    """Encode data to a compact base64url token.

    Args:
        schema: Schema or list of top-level fields describing ``data``
        data: Mapping of top-level field names to values
        max_pointer_depth: How many times pointers may be re-entered

    Returns:
        Token drawn from ``A-Z a-z 0-9 - _``

    Raises:
        UnresolvedPointerError: If a pointer in the schema has no target
        EncodeError: If the data does not fit the schema

    Example:
        ```python
        from fieldgrammar import BoolField, IntField, Schema, decode, encode

        schema = Schema.create("Status", [IntField("id", 0, 255), BoolField("active")])
        token = encode(schema, {"id": 42, "active": True})
        assert decode(schema, token) == {"id": 42, "active": True}
        ```
    """
    return base64url.encode(encode_bytes(schema, data, max_pointer_depth=max_pointer_depth))


def encode_bytes(
    schema: Schema | Sequence[Node],
    data: Any,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> bytes:
    """Encode data to packed bytes (the token before base64url)."""
    packer = pack(schema, data, max_pointer_depth=max_pointer_depth)
    encoded = packer.to_bytes()
    logger.debug("Packed %d bits into %d bytes", packer.bit_length(), len(encoded))
    return encoded


def pack(
    schema: Schema | Sequence[Node],
    data: Any,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> BitPacker:
    """Validate data and write it into a new BitPacker."""
    fields = schema_fields(schema)
    check_pointers(fields)
    ensure_valid(fields, data, max_pointer_depth=max_pointer_depth)

    packer = BitPacker()
    targets = pointer_targets(fields)
    for field in fields:
        write_field(packer, field, data[field.name], targets)
    return packer


def ensure_valid(
    fields: Sequence[Node], data: Any, *, max_pointer_depth: int = DEFAULT_POINTER_DEPTH
) -> None:
    """Raise EncodeError listing the validation issues of ``data``, if any."""
    issues = validate(fields, data, max_pointer_depth=max_pointer_depth)
    if not issues:
        return
    shown = "; ".join(str(issue) for issue in issues[:_ISSUES_SHOWN])
    if len(issues) > _ISSUES_SHOWN:
        shown += f"; and {len(issues) - _ISSUES_SHOWN} more"
    raise EncodeError(f"Invalid data: {shown}")


def write_field(packer: BitPacker, node: Node, value: Any, targets: dict[str, Node]) -> None:
    """Write one already validated value.

    Args:
        packer: BitPacker to write to
        node: Node describing the value
        value: Value to write
        targets: Pointer targets of the enclosing schema
    """
    # Boolean
    if isinstance(node, BoolNode):
        packer.write_bool(value)
        return

    # Bounded integer: offset from min
    if isinstance(node, IntNode):
        packer.write_uint(value - node.min, bits_for_range(node.min, node.max))
        return

    # Fixed point: grid index
    if isinstance(node, FixedNode):
        packer.write_uint(quantize(node, value), fixed_bits(node))
        return

    # Enum: ordinal of the option
    if isinstance(node, EnumNode):
        packer.write_uint(node.options.index(value), bits_for_count(len(node.options)))
        return

    # Optional: presence bit, then the value
    if isinstance(node, OptionalNode):
        packer.write_bool(value is not None)
        if value is not None:
            write_field(packer, node.inner, value, targets)
        return

    # Arrays: length offset from minLength, then the items
    if isinstance(node, (ArrayNode, EnumArrayNode)):
        packer.write_uint(
            len(value) - node.min_length, bits_for_range(node.min_length, node.max_length)
        )
        item = node.item if isinstance(node, ArrayNode) else node.enum
        for element in value:
            write_field(packer, item, element, targets)
        return

    # Object: fields in declaration order
    if isinstance(node, ObjectNode):
        for field in node.fields:
            write_field(packer, field, value[field.name], targets)
        return

    # Union: discriminator ordinal, then the selected variant's fields
    if isinstance(node, UnionNode):
        discriminator = node.discriminator
        choice = value[discriminator.name]
        write_field(packer, discriminator, choice, targets)
        for field in node.variants[choice]:
            write_field(packer, field, value[field.name], targets)
        return

    # Pointer: the target's layout
    if isinstance(node, PointerNode):
        write_field(packer, targets[node.target_name], value, targets)
        return

    raise EncodeError(f"Field {node.name}: unsupported node kind {type(node).__name__}")
