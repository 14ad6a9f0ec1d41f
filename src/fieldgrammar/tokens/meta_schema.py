"""The meta-schema: a field grammar schema that describes schemas.

The bit-packed schema codec encodes node trees as ordinary data against
this schema. Nested nodes are a union of node kinds that recurses into a
copy of itself one level down, for a fixed number of levels; the
innermost level offers only leaf kinds. That fixed level count is the
maximum depth a bit-packed schema can have.

Node payload shapes (every kind also carries ``nameIndex``)::

    bool        -
    int         min, max
    fixed       min, max, precision     each {mantissa, scale}
    enum        options                 string indices
    optional    inner                   node payload
    array       minLength, maxLength, item
    enum_array  minLength, maxLength, enumIndex, options
    object      fields                  node payloads
    union       discriminatorIndex, options, variants  [{fields}] per option
    pointer     targetIndex
"""

from __future__ import annotations

from functools import lru_cache

from ..config import DEFAULT_CONFIG, CodecConfig
from ..models.fields import ArrayField, EnumField, IntField, ObjectField, UnionField
from ..models.nodes import LEAF_KINDS, NODE_KINDS, Node, UnionNode
from ..models.schema import Schema

META_VERSION = 1
META_SCHEMA_NAME = "meta-schema"

# Name of the discriminator inside every node payload
KIND_KEY = "type"


@lru_cache(maxsize=8)
def build_meta_schema(config: CodecConfig = DEFAULT_CONFIG) -> Schema:
    """Build the meta-schema for a codec configuration.

    Top-level fields: ``meta`` (``{version}``), ``fields`` (node payloads at
    the deepest level) and ``strings`` (UTF-8 bytes of the string table).
    """
    node: UnionNode | None = None
    for _ in range(config.max_depth):
        node = _node_union(config, node)
    assert node is not None

    return Schema.create(
        META_SCHEMA_NAME,
        [
            ObjectField("meta", [IntField("version", 0, 255)]),
            ArrayField("fields", 0, config.max_fields, node),
            ArrayField("strings", 0, config.max_table_bytes, IntField("byte", 0, 255)),
        ],
    )


def _node_union(config: CodecConfig, nested: UnionNode | None) -> UnionNode:
    """Union over node kinds whose nested nodes are ``nested`` (leaf kinds only if None)."""

    def index(name: str) -> Node:
        return IntField(name, 0, config.max_strings - 1)

    def lengths() -> list[Node]:
        return [
            IntField("minLength", 0, config.max_array_length),
            IntField("maxLength", 0, config.max_array_length),
        ]

    def options() -> Node:
        return ArrayField("options", 1, config.max_options, index("option"))

    name_index = index("nameIndex")
    variants: dict[str, list[Node]] = {
        "bool": [name_index],
        "int": [
            name_index,
            IntField("min", config.int_min, config.int_max),
            IntField("max", config.int_min, config.int_max),
        ],
        "fixed": [
            name_index,
            _decimal("min", config),
            _decimal("max", config),
            _decimal("precision", config),
        ],
        "enum": [name_index, options()],
        "enum_array": [name_index, *lengths(), index("enumIndex"), options()],
        "pointer": [name_index, index("targetIndex")],
    }

    if nested is not None:
        node_list = ArrayField("fields", 0, config.max_fields, nested)
        variants.update(
            {
                "optional": [name_index, nested.model_copy(update={"name": "inner"})],
                "array": [name_index, *lengths(), nested.model_copy(update={"name": "item"})],
                "object": [name_index, node_list],
                "union": [
                    name_index,
                    index("discriminatorIndex"),
                    options(),
                    ArrayField(
                        "variants", 1, config.max_options, ObjectField("variant", [node_list])
                    ),
                ],
            }
        )

    kinds = NODE_KINDS if nested is not None else LEAF_KINDS
    return UnionField("node", EnumField(KIND_KEY, kinds), variants)


def _decimal(name: str, config: CodecConfig) -> Node:
    # value == mantissa / 10**scale
    bound = 1 << (config.decimal_bits - 1)
    return ObjectField(
        name,
        [
            IntField("mantissa", -bound, bound - 1),
            IntField("scale", 0, config.max_decimal_scale),
        ],
    )
