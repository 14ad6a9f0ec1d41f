"""Dense decoder for data described by a field grammar schema.

This module provides the decode() function that turns a token produced by
encode() back into a data mapping.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from ..defaults import default_data
from ..exceptions import DecodeError
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
from .bitpack import BitUnpacker
from .schema import (
    DEFAULT_POINTER_DEPTH,
    bits_for_count,
    bits_for_range,
    dequantize,
    fixed_bits,
    fixed_steps,
    schema_fields,
)

logger = logging.getLogger(__name__)


def decode(
    schema: Schema | Sequence[Node],
    token: str,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> dict[str, Any]:
    """Decode a token back to data.

    Args:
        schema: Schema or list of top-level fields the token was encoded with
        token: Token produced by encode()
        max_pointer_depth: How many times pointers may be re-entered

    Returns:
        Mapping of top-level field names to values

    Raises:
        UnresolvedPointerError: If a pointer in the schema has no target
        DecodeError: If the token is malformed, truncated or doesn't match the schema
    """
    return decode_bytes(schema, base64url.decode(token), max_pointer_depth=max_pointer_depth)


def decode_bytes(
    schema: Schema | Sequence[Node],
    data: bytes,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> dict[str, Any]:
    """Decode packed bytes (a token after base64url decoding)."""
    fields = schema_fields(schema)
    check_pointers(fields)
    targets = pointer_targets(fields)
    unpacker = BitUnpacker(data)

    values: dict[str, Any] = {}
    for field in fields:
        try:
            values[field.name] = read_field(unpacker, field, targets, 0, max_pointer_depth)
        except IndexError as e:
            raise DecodeError(f"Truncated data while decoding field {field.name}: {e}") from e

    # Anything past the zero padding of the final byte is not ours
    if unpacker.bits_remaining() >= 8:
        raise DecodeError(f"{unpacker.bits_remaining()} unexpected trailing bits")

    return values


def decode_or_default(
    schema: Schema | Sequence[Node],
    token: str,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> dict[str, Any]:
    """Decode a token, falling back to the schema's default data if it is corrupt."""
    try:
        return decode(schema, token, max_pointer_depth=max_pointer_depth)
    except DecodeError as e:
        logger.warning("Could not decode data token, using defaults: %s", e)
        return default_data(schema_fields(schema))


def read_field(
    unpacker: BitUnpacker,
    node: Node,
    targets: dict[str, Node],
    depth: int,
    max_pointer_depth: int,
) -> Any:
    """Read one value.

    Raises:
        DecodeError: If the bits do not form a valid value
        IndexError: If data is truncated
    """
    # Boolean
    if isinstance(node, BoolNode):
        return unpacker.read_bool()

    # Bounded integer
    if isinstance(node, IntNode):
        value = node.min + unpacker.read_uint(bits_for_range(node.min, node.max))
        if value > node.max:
            raise DecodeError(f"Field {node.name}: decoded value {value} exceeds max {node.max}")
        return value

    # Fixed point
    if isinstance(node, FixedNode):
        steps = unpacker.read_uint(fixed_bits(node))
        if steps > fixed_steps(node):
            raise DecodeError(
                f"Field {node.name}: decoded value out of bounds [{node.min}, {node.max}]"
            )
        return dequantize(node, steps)

    # Enum
    if isinstance(node, EnumNode):
        ordinal = unpacker.read_uint(bits_for_count(len(node.options)))
        if ordinal >= len(node.options):
            raise DecodeError(
                f"Field {node.name}: invalid enum ordinal {ordinal} "
                f"(only {len(node.options)} values)"
            )
        return node.options[ordinal]

    # Optional
    if isinstance(node, OptionalNode):
        if not unpacker.read_bool():
            return None
        return read_field(unpacker, node.inner, targets, depth, max_pointer_depth)

    # Arrays
    if isinstance(node, (ArrayNode, EnumArrayNode)):
        length = node.min_length + unpacker.read_uint(
            bits_for_range(node.min_length, node.max_length)
        )
        if length > node.max_length:
            raise DecodeError(
                f"Field {node.name}: decoded length {length} exceeds max {node.max_length}"
            )
        item = node.item if isinstance(node, ArrayNode) else node.enum
        return [
            read_field(unpacker, item, targets, depth, max_pointer_depth) for _ in range(length)
        ]

    # Object
    if isinstance(node, ObjectNode):
        return {
            field.name: read_field(unpacker, field, targets, depth, max_pointer_depth)
            for field in node.fields
        }

    # Union
    if isinstance(node, UnionNode):
        discriminator = node.discriminator
        choice = read_field(unpacker, discriminator, targets, depth, max_pointer_depth)
        value: dict[str, Any] = {discriminator.name: choice}
        for field in node.variants[choice]:
            value[field.name] = read_field(unpacker, field, targets, depth, max_pointer_depth)
        return value

    # Pointer
    if isinstance(node, PointerNode):
        if depth + 1 > max_pointer_depth:
            raise DecodeError(
                f"Field {node.name}: pointer depth exceeds maximum of {max_pointer_depth}"
            )
        return read_field(
            unpacker, targets[node.target_name], targets, depth + 1, max_pointer_depth
        )

    raise DecodeError(f"Field {node.name}: unsupported node kind {type(node).__name__}")
