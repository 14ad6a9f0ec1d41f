"""Editable builder configuration and its conversion to wire nodes.

The editing surface works on FieldConfig trees: every entry carries a stable
``id`` for list operations and may leave attributes unset. Before anything
goes on the wire the tree is converted with to_wire(), which fills missing
attributes from BuilderDefaults. to_config() goes the other way.

Both directions build new trees; no node is shared between a FieldConfig
tree and the wire tree derived from it.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .fields import (
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

NodeKind = Literal[
    "bool",
    "int",
    "fixed",
    "enum",
    "optional",
    "array",
    "enum_array",
    "object",
    "union",
    "pointer",
]


def new_id() -> str:
    return uuid.uuid4().hex


class FieldConfig(BaseModel):
    """One editable field of the schema builder.

    Mirrors the node shapes with every kind-specific attribute optional.
    Nested configs sit under the same attribute names the nodes use
    (``inner``, ``item``, ``enum``, ``fields``, ``discriminator``, ``variants``).
    """

    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
        validate_assignment=True,
    )

    id: str = Field(default_factory=new_id)
    name: str
    type: NodeKind
    # int, fixed
    min: Optional[int | float] = None
    max: Optional[int | float] = None
    precision: Optional[float] = None
    # enum
    options: Optional[list[str]] = None
    # optional
    inner: Optional[FieldConfig] = None
    # array, enum_array
    item: Optional[FieldConfig] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    enum: Optional[FieldConfig] = None
    # object
    fields: Optional[list[FieldConfig]] = None
    # union
    discriminator: Optional[FieldConfig] = None
    variants: Optional[dict[str, list[FieldConfig]]] = None
    # pointer
    target_name: Optional[str] = None


@dataclass(frozen=True)
class BuilderDefaults:
    """Fallbacks for attributes a FieldConfig leaves unset.

    This is the only place these values live; the converter and
    new_field_config() both read them from here.
    """

    min: int = 0
    max: int = 100
    precision: float = 0.1
    options: tuple[str, ...] = ("option1", "option2")
    min_length: int = 0
    max_length: int = 10
    target_name: str = ""

    def inner(self) -> FieldConfig:
        return FieldConfig(name="value", type="bool")

    def item(self) -> FieldConfig:
        return FieldConfig(name="item", type="int", min=self.min, max=self.max)

    def enum(self) -> FieldConfig:
        return FieldConfig(name="item", type="enum", options=list(self.options))

    def discriminator(self) -> FieldConfig:
        return FieldConfig(name="type", type="enum", options=list(self.options))


DEFAULTS = BuilderDefaults()


def with_defaults(config: FieldConfig, defaults: BuilderDefaults = DEFAULTS) -> FieldConfig:
    """Return a copy of ``config`` with its unset attributes filled in.

    Only the attributes that matter for ``config.type`` are filled. Nested
    configs are filled when they are missing, not recursed into; to_wire()
    resolves each level as it descends.
    """
    updates: dict[str, Any] = {}
    kind = config.type

    if kind in ("int", "fixed"):
        if config.min is None:
            updates["min"] = defaults.min
        if config.max is None:
            updates["max"] = defaults.max
    if kind == "fixed" and config.precision is None:
        updates["precision"] = defaults.precision
    if kind == "enum" and config.options is None:
        updates["options"] = list(defaults.options)
    if kind == "optional" and config.inner is None:
        updates["inner"] = defaults.inner()
    if kind in ("array", "enum_array"):
        if config.min_length is None:
            updates["min_length"] = defaults.min_length
        if config.max_length is None:
            updates["max_length"] = defaults.max_length
    if kind == "array" and config.item is None:
        updates["item"] = defaults.item()
    if kind == "enum_array" and config.enum is None:
        updates["enum"] = defaults.enum()
    if kind == "object" and config.fields is None:
        updates["fields"] = []
    if kind == "union":
        if config.discriminator is None:
            updates["discriminator"] = defaults.discriminator()
        if config.variants is None:
            updates["variants"] = {}
    if kind == "pointer" and config.target_name is None:
        updates["target_name"] = defaults.target_name

    return config.model_copy(update=updates)


def new_field_config(kind: NodeKind, name: str = "item") -> FieldConfig:
    """Create a fresh builder entry of ``kind`` with defaults applied."""
    return with_defaults(FieldConfig(name=name, type=kind))


def to_wire(config: FieldConfig) -> Node:
    """Convert a builder config tree into a wire node tree.

    Missing attributes are taken from BuilderDefaults, so every config
    converts. Invalid attribute values (min > max, duplicate options, ...)
    raise ConstructionError.
    """
    config = with_defaults(config)
    kind = config.type

    if kind == "bool":
        return BoolField(config.name)
    if kind == "int":
        return IntField(config.name, config.min, config.max)
    if kind == "fixed":
        return FixedField(config.name, config.min, config.max, config.precision)
    if kind == "enum":
        return EnumField(config.name, config.options)
    if kind == "optional":
        return OptionalField(config.name, to_wire(config.inner))
    if kind == "array":
        return ArrayField(config.name, config.min_length, config.max_length, to_wire(config.item))
    if kind == "enum_array":
        return EnumArrayField(
            config.name, config.min_length, config.max_length, _to_wire_enum(config.enum)
        )
    if kind == "object":
        return ObjectField(config.name, [to_wire(field) for field in config.fields])
    if kind == "union":
        return UnionField(
            config.name,
            _to_wire_enum(config.discriminator),
            {
                option: [to_wire(field) for field in fields]
                for option, fields in config.variants.items()
            },
        )
    if kind == "pointer":
        return PointerField(config.name, config.target_name)
    raise TypeError(f"Unsupported field kind: {kind}")


def _to_wire_enum(config: FieldConfig) -> EnumNode:
    # An enum slot only ever holds an enum, whatever type the editor left on it
    return EnumField(config.name, with_defaults(config.model_copy(update={"type": "enum"})).options)


def to_config(node: Node) -> FieldConfig:
    """Convert a wire node tree into a builder config tree with fresh ids."""
    if isinstance(node, BoolNode):
        return FieldConfig(name=node.name, type="bool")
    if isinstance(node, IntNode):
        return FieldConfig(name=node.name, type="int", min=node.min, max=node.max)
    if isinstance(node, FixedNode):
        return FieldConfig(
            name=node.name, type="fixed", min=node.min, max=node.max, precision=node.precision
        )
    if isinstance(node, EnumNode):
        return FieldConfig(name=node.name, type="enum", options=list(node.options))
    if isinstance(node, OptionalNode):
        return FieldConfig(name=node.name, type="optional", inner=to_config(node.inner))
    if isinstance(node, ArrayNode):
        return FieldConfig(
            name=node.name,
            type="array",
            min_length=node.min_length,
            max_length=node.max_length,
            item=to_config(node.item),
        )
    if isinstance(node, EnumArrayNode):
        return FieldConfig(
            name=node.name,
            type="enum_array",
            min_length=node.min_length,
            max_length=node.max_length,
            enum=to_config(node.enum),
        )
    if isinstance(node, ObjectNode):
        return FieldConfig(
            name=node.name, type="object", fields=[to_config(field) for field in node.fields]
        )
    if isinstance(node, UnionNode):
        return FieldConfig(
            name=node.name,
            type="union",
            discriminator=to_config(node.discriminator),
            variants={
                option: [to_config(field) for field in fields]
                for option, fields in node.variants.items()
            },
        )
    if isinstance(node, PointerNode):
        return FieldConfig(name=node.name, type="pointer", target_name=node.target_name)
    raise TypeError(f"Unsupported node kind: {type(node).__name__}")


def clone_node(node: Node) -> Node:
    """Deep-copy a node tree; the copy shares no lists or nodes with the original."""
    return node.model_copy(deep=True)


def clone_config(config: FieldConfig) -> FieldConfig:
    """Deep-copy a config tree, giving every entry in the copy a new id."""
    copy = config.model_copy(deep=True)
    _reassign_ids(copy)
    return copy


def _reassign_ids(config: FieldConfig) -> None:
    config.id = new_id()
    for nested in _nested_configs(config):
        _reassign_ids(nested)


def _nested_configs(config: FieldConfig) -> list[FieldConfig]:
    nested = [c for c in (config.inner, config.item, config.enum, config.discriminator) if c]
    nested.extend(config.fields or [])
    for fields in (config.variants or {}).values():
        nested.extend(fields)
    return nested


def strip_ids(config: FieldConfig) -> dict[str, Any]:
    """Dump a config tree without its ids, for shape comparisons."""
    data = config.model_dump(
        exclude={"id", "inner", "item", "enum", "fields", "discriminator", "variants"}
    )
    for key in ("inner", "item", "enum", "discriminator"):
        nested = getattr(config, key)
        data[key] = strip_ids(nested) if nested is not None else None
    data["fields"] = None if config.fields is None else [strip_ids(f) for f in config.fields]
    data["variants"] = (
        None
        if config.variants is None
        else {option: [strip_ids(f) for f in fields] for option, fields in config.variants.items()}
    )
    return data


def same_shape(a: FieldConfig, b: FieldConfig) -> bool:
    """Compare two config trees attribute for attribute, ignoring ids."""
    return strip_ids(a) == strip_ids(b)


FieldConfig.model_rebuild()
