"""Field grammar node models.

Each node kind is a frozen pydantic model tagged by a literal ``type``.
``Node`` is the discriminated union over all kinds, so any JSON object with
a ``type`` key validates straight into the matching model.

Attribute names are snake_case in Python and camelCase on the wire
(``min_length`` <-> ``minLength``, ``target_name`` <-> ``targetName``).
"""

from __future__ import annotations

from typing import Annotated, Any, Iterable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

NODE_KINDS: tuple[str, ...] = (
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
)

# Kinds that never nest another node
LEAF_KINDS: tuple[str, ...] = ("bool", "int", "fixed", "enum", "enum_array", "pointer")


def _check_unique(names: Iterable[str], where: str) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ValueError(f"{where}: duplicate field name '{name}'")
        seen.add(name)


class BaseNode(BaseModel):
    """Common configuration for every node kind."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    name: str


class BoolNode(BaseNode):
    """A single true/false value."""

    type: Literal["bool"] = "bool"


class IntNode(BaseNode):
    """An integer bounded by inclusive ``min`` and ``max``."""

    type: Literal["int"] = "int"
    min: int
    max: int

    @model_validator(mode="after")
    def _check_bounds(self) -> IntNode:
        if self.min > self.max:
            raise ValueError(f"Field {self.name}: invalid bounds min={self.min} > max={self.max}")
        return self


class FixedNode(BaseNode):
    """A fixed-point number on the grid ``min + k * precision``."""

    type: Literal["fixed"] = "fixed"
    min: float
    max: float
    precision: float

    @model_validator(mode="after")
    def _check_bounds(self) -> FixedNode:
        if self.min > self.max:
            raise ValueError(f"Field {self.name}: invalid bounds min={self.min} > max={self.max}")
        if self.precision <= 0:
            raise ValueError(f"Field {self.name}: precision must be > 0, got {self.precision}")
        return self


class EnumNode(BaseNode):
    """One of an ordered list of string options."""

    type: Literal["enum"] = "enum"
    options: list[str]

    @model_validator(mode="after")
    def _check_options(self) -> EnumNode:
        if not self.options:
            raise ValueError(f"Field {self.name}: enum requires at least one option")
        if len(set(self.options)) != len(self.options):
            raise ValueError(f"Field {self.name}: enum options must be unique")
        return self


class OptionalNode(BaseNode):
    """A value of ``inner``'s shape, or null."""

    type: Literal["optional"] = "optional"
    inner: Node


class ArrayNode(BaseNode):
    """Between ``min_length`` and ``max_length`` values of ``item``'s shape."""

    type: Literal["array"] = "array"
    min_length: int
    max_length: int
    item: Node

    @model_validator(mode="after")
    def _check_lengths(self) -> ArrayNode:
        if not 0 <= self.min_length <= self.max_length:
            raise ValueError(
                f"Field {self.name}: invalid lengths minLength={self.min_length}, "
                f"maxLength={self.max_length}"
            )
        return self


class EnumArrayNode(BaseNode):
    """A bounded list of options drawn from ``enum``."""

    type: Literal["enum_array"] = "enum_array"
    min_length: int
    max_length: int
    enum: EnumNode

    @model_validator(mode="after")
    def _check_lengths(self) -> EnumArrayNode:
        if not 0 <= self.min_length <= self.max_length:
            raise ValueError(
                f"Field {self.name}: invalid lengths minLength={self.min_length}, "
                f"maxLength={self.max_length}"
            )
        return self


class ObjectNode(BaseNode):
    """An ordered group of uniquely named fields."""

    type: Literal["object"] = "object"
    fields: list[Node]

    @model_validator(mode="after")
    def _check_names(self) -> ObjectNode:
        _check_unique((field.name for field in self.fields), f"Object {self.name}")
        return self


class UnionNode(BaseNode):
    """A discriminated union: the discriminator option selects a field list.

    Every discriminator option owns exactly one variant entry. Options left
    out of ``variants`` get an empty field list; keys that are not options
    are rejected.
    """

    type: Literal["union"] = "union"
    discriminator: EnumNode
    variants: dict[str, list[Node]]

    @model_validator(mode="before")
    @classmethod
    def _fill_variants(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        discriminator = data.get("discriminator")
        if isinstance(discriminator, EnumNode):
            options = list(discriminator.options)
        elif isinstance(discriminator, dict):
            options = list(discriminator.get("options") or [])
        else:
            return data

        given = dict(data.get("variants") or {})
        variants = {option: given.pop(option, []) for option in options}
        # Leftover keys are kept so the after-validator can reject them
        variants.update(given)
        return {**data, "variants": variants}

    @model_validator(mode="after")
    def _check_variants(self) -> UnionNode:
        unknown = [key for key in self.variants if key not in self.discriminator.options]
        if unknown:
            raise ValueError(f"Union {self.name}: variants for unknown options {unknown}")

        for option, fields in self.variants.items():
            names = [field.name for field in fields]
            _check_unique(names, f"Union {self.name} variant '{option}'")
            if self.discriminator.name in names:
                raise ValueError(
                    f"Union {self.name} variant '{option}': field name "
                    f"'{self.discriminator.name}' collides with the discriminator"
                )
        return self


class PointerNode(BaseNode):
    """A named back-reference that re-enters the shape of ``target_name``."""

    type: Literal["pointer"] = "pointer"
    target_name: str


Node = Annotated[
    Union[
        BoolNode,
        IntNode,
        FixedNode,
        EnumNode,
        OptionalNode,
        ArrayNode,
        EnumArrayNode,
        ObjectNode,
        UnionNode,
        PointerNode,
    ],
    Field(discriminator="type"),
]

for _model in (OptionalNode, ArrayNode, ObjectNode, UnionNode):
    _model.model_rebuild()
