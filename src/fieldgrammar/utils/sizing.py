"""Encoded size calculation utilities.

Sizes depend on the data as well as the schema: optional presence,
array lengths and union variants all change how many bits are written.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from ..codec.bitpack import BitPacker
from ..codec.encoder import pack, write_field
from ..codec.schema import DEFAULT_POINTER_DEPTH, schema_fields
from ..models.nodes import Node
from ..models.schema import Schema
from ..models.walk import pointer_targets


def encoded_bits(
    schema: Schema | Sequence[Node],
    data: Any,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> int:
    """Calculate the encoded size of data in bits.

    Raises:
        EncodeError: If the data does not fit the schema

    Example:
        >>> schema = Schema.create("Status", [IntField("id", 0, 255), BoolField("active")])
        >>> encoded_bits(schema, {"id": 42, "active": True})
        9
    """
    return pack(schema, data, max_pointer_depth=max_pointer_depth).bit_length()


def encoded_size(
    schema: Schema | Sequence[Node],
    data: Any,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> int:
    """Calculate the encoded size of data in bytes (rounded up)."""
    return math.ceil(encoded_bits(schema, data, max_pointer_depth=max_pointer_depth) / 8)


def token_length(
    schema: Schema | Sequence[Node],
    data: Any,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> int:
    """Length in characters of the token encode() would produce."""
    return math.ceil(encoded_size(schema, data, max_pointer_depth=max_pointer_depth) * 8 / 6)


def field_sizes(
    schema: Schema | Sequence[Node],
    data: Any,
    *,
    max_pointer_depth: int = DEFAULT_POINTER_DEPTH,
) -> dict[str, int]:
    """Get the size in bits of each top-level field's value.

    Example:
        >>> field_sizes(schema, {"id": 42, "active": True})
        {'id': 8, 'active': 1}
    """
    # Validates the whole mapping once
    pack(schema, data, max_pointer_depth=max_pointer_depth)

    fields = schema_fields(schema)
    targets = pointer_targets(fields)
    sizes: dict[str, int] = {}
    for field in fields:
        packer = BitPacker()
        write_field(packer, field, data[field.name], targets)
        sizes[field.name] = packer.bit_length()
    return sizes
