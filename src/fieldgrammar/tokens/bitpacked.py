"""Bit-packed schema codec.

Encodes a node tree as data against the meta-schema, so the schema itself
is packed as tightly as any other dense data. Names and option labels are
replaced by indices into a string table that travels in the same token.

Tokens are only readable with the CodecConfig they were produced with.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Sequence

from ..codec import decode, encode
from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import (
    ConstructionError,
    CorruptTokenError,
    DecodeError,
    DepthExceededError,
    EncodeError,
)
from ..models.fields import (
    ArrayField,
    BoolField,
    EnumArrayField,
    EnumField,
    FixedField,
    IntField,
    ObjectField,
    OptionalField,
    PointerField,
    UnionField,
)
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
from ..models.walk import check_pointers, tree_depth
from .meta_schema import KIND_KEY, META_VERSION, build_meta_schema
from .strings import StringTable

logger = logging.getLogger(__name__)


def encode_schema(name: str, fields: Sequence[Node], config: CodecConfig = DEFAULT_CONFIG) -> str:
    """Encode a schema to a bit-packed token.

    The schema name takes string index 0; every other name is interned as
    the walk reaches it.

    Args:
        name: Schema name
        fields: Top-level fields
        config: Meta-schema bounds; decode with the same configuration

    Returns:
        Token drawn from ``A-Z a-z 0-9 - _``

    Raises:
        ConstructionError: If top-level field names are not unique
        DepthExceededError: If a field nests deeper than config.max_depth
        EncodeError: If a name contains the table separator or an attribute
            falls outside the meta-schema's bounds
    """
    schema = Schema.create(name, fields)
    for field in schema.fields:
        depth = tree_depth(field)
        if depth > config.max_depth:
            raise DepthExceededError(field.name, depth, config.max_depth)

    table = StringTable()
    table.intern(schema.name)
    payloads = [_to_payload(field, table) for field in schema.fields]

    if len(table) > config.max_strings:
        raise EncodeError(
            f"Schema {name}: {len(table)} distinct names exceed the limit of {config.max_strings}"
        )

    data = {
        "meta": {"version": META_VERSION},
        "fields": payloads,
        "strings": list(table.encode()),
    }
    try:
        token = encode(build_meta_schema(config), data)
    except EncodeError as err:
        raise EncodeError(f"Schema {name} does not fit the meta-schema: {err}") from err

    logger.debug(
        "Encoded schema %r: %d fields, %d strings, %d token chars",
        name,
        len(payloads),
        len(table),
        len(token),
    )
    return token


def decode_schema(token: str, config: CodecConfig = DEFAULT_CONFIG) -> Schema:
    """Decode a bit-packed token back to a schema.

    Raises:
        CorruptTokenError: If the token is malformed, was made with another
            meta-schema version, or references strings outside its table
        UnresolvedPointerError: If a decoded pointer has no target
    """
    try:
        data = decode(build_meta_schema(config), token)
    except DecodeError as err:
        raise CorruptTokenError(token, str(err)) from err

    version = data["meta"]["version"]
    if version != META_VERSION:
        raise CorruptTokenError(token, f"unsupported meta-schema version {version}")

    try:
        table = StringTable.decode(bytes(data["strings"]))
    except UnicodeDecodeError as err:
        raise CorruptTokenError(token, "string table is not valid UTF-8") from err

    try:
        schema = Schema.create(
            table.lookup(0), [_from_payload(payload, table) for payload in data["fields"]]
        )
    except IndexError as err:
        raise CorruptTokenError(token, str(err)) from err
    except (ConstructionError, ValueError) as err:
        raise CorruptTokenError(token, f"invalid node: {err}") from err

    check_pointers(schema.fields)
    logger.debug("Decoded schema %r with %d fields", schema.name, len(schema.fields))
    return schema


def _to_payload(node: Node, table: StringTable) -> dict[str, Any]:
    """Convert a node to its meta-schema payload, interning names on the way."""
    payload: dict[str, Any] = {KIND_KEY: node.type, "nameIndex": table.intern(node.name)}

    if isinstance(node, BoolNode):
        pass
    elif isinstance(node, IntNode):
        payload.update(min=node.min, max=node.max)
    elif isinstance(node, FixedNode):
        payload.update(
            min=_to_decimal(node.min),
            max=_to_decimal(node.max),
            precision=_to_decimal(node.precision),
        )
    elif isinstance(node, EnumNode):
        payload["options"] = [table.intern(option) for option in node.options]
    elif isinstance(node, OptionalNode):
        payload["inner"] = _to_payload(node.inner, table)
    elif isinstance(node, ArrayNode):
        payload.update(
            minLength=node.min_length,
            maxLength=node.max_length,
            item=_to_payload(node.item, table),
        )
    elif isinstance(node, EnumArrayNode):
        payload.update(
            minLength=node.min_length,
            maxLength=node.max_length,
            enumIndex=table.intern(node.enum.name),
            options=[table.intern(option) for option in node.enum.options],
        )
    elif isinstance(node, ObjectNode):
        payload["fields"] = [_to_payload(field, table) for field in node.fields]
    elif isinstance(node, UnionNode):
        discriminator = node.discriminator
        payload.update(
            discriminatorIndex=table.intern(discriminator.name),
            options=[table.intern(option) for option in discriminator.options],
            variants=[
                {"fields": [_to_payload(field, table) for field in node.variants[option]]}
                for option in discriminator.options
            ],
        )
    elif isinstance(node, PointerNode):
        payload["targetIndex"] = table.intern(node.target_name)
    else:
        raise EncodeError(f"Field {node.name}: unsupported node kind {type(node).__name__}")

    return payload


def _from_payload(payload: dict[str, Any], table: StringTable) -> Node:
    """Rebuild a node from its meta-schema payload.

    Raises:
        IndexError: If a string index is outside the table
        ConstructionError: If the rebuilt node is invalid
    """
    kind = payload[KIND_KEY]
    name = table.lookup(payload["nameIndex"])

    if kind == "bool":
        return BoolField(name)
    if kind == "int":
        return IntField(name, payload["min"], payload["max"])
    if kind == "fixed":
        return FixedField(
            name,
            _from_decimal(payload["min"]),
            _from_decimal(payload["max"]),
            _from_decimal(payload["precision"]),
        )
    if kind == "enum":
        return EnumField(name, [table.lookup(index) for index in payload["options"]])
    if kind == "optional":
        return OptionalField(name, _from_payload(payload["inner"], table))
    if kind == "array":
        return ArrayField(
            name,
            payload["minLength"],
            payload["maxLength"],
            _from_payload(payload["item"], table),
        )
    if kind == "enum_array":
        enum = EnumField(
            table.lookup(payload["enumIndex"]),
            [table.lookup(index) for index in payload["options"]],
        )
        return EnumArrayField(name, payload["minLength"], payload["maxLength"], enum)
    if kind == "object":
        return ObjectField(name, [_from_payload(field, table) for field in payload["fields"]])
    if kind == "union":
        options = [table.lookup(index) for index in payload["options"]]
        if len(payload["variants"]) != len(options):
            raise ValueError(
                f"Union {name}: {len(payload['variants'])} variants for {len(options)} options"
            )
        discriminator = EnumField(table.lookup(payload["discriminatorIndex"]), options)
        variants = {
            option: [_from_payload(field, table) for field in variant["fields"]]
            for option, variant in zip(options, payload["variants"])
        }
        return UnionField(name, discriminator, variants)
    if kind == "pointer":
        return PointerField(name, table.lookup(payload["targetIndex"]))

    raise ValueError(f"unknown node kind {kind!r}")


def _to_decimal(value: float) -> dict[str, int]:
    """Split a float into an exact ``{mantissa, scale}`` pair (value = mantissa / 10**scale)."""
    sign, digits, exponent = Decimal(repr(float(value))).as_tuple()
    if not isinstance(exponent, int):
        raise EncodeError(f"Cannot encode non-finite value {value}")

    mantissa = int("".join(str(digit) for digit in digits) or "0")
    if exponent > 0:
        mantissa *= 10**exponent
        exponent = 0
    scale = -exponent
    while scale > 0 and mantissa % 10 == 0:
        mantissa //= 10
        scale -= 1

    return {"mantissa": -mantissa if sign else mantissa, "scale": scale}


def _from_decimal(payload: dict[str, int]) -> float:
    return float(Decimal(payload["mantissa"]).scaleb(-payload["scale"]))
